from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Mapping
from loguru import logger
import json
import os
from pathlib import Path
import avstools.configuration.constants as global_constants
from avstools.configuration.constants import FailurePolicy

@dataclass(frozen=True)
class ProviderConfig:
    """Credentials and defaults for the OpenAI-compatible text generation provider"""
    api_key: str
    base_url: Optional[str] = None
    default_model: str = global_constants.DEFAULT_OPEN_AI_MODEL
    temperature: float = global_constants.DEFAULT_TEMPERATURE
    timeout: float = global_constants.DEFAULT_REQUEST_TIMEOUT

    @property
    def using_openrouter(self) -> bool:
        return self.base_url == global_constants.OPENROUTER_BASE_URL

@dataclass(frozen=True)
class NodeConfig:
    """Configuration for a performer or validator node"""
    node_name: str
    rpc_url: str
    performer_address: str
    similarity_threshold: float = global_constants.DEFAULT_SIMILARITY_THRESHOLD
    price_margin: Decimal = global_constants.DEFAULT_PRICE_MARGIN
    failure_policy: FailurePolicy = FailurePolicy.SKIP_SUBMISSION

    def __post_init__(self):
        """Validate configuration"""
        if not 0.0 <= self.similarity_threshold <= 1.0:
            raise ValueError(f"similarity_threshold must be within [0, 1], got: {self.similarity_threshold}")
        if self.price_margin < 0:
            raise ValueError(f"price_margin must be non-negative, got: {self.price_margin}")

class RuntimeConfig:
    """Runtime configuration settings"""
    DRY_RUN: bool = False  # Log proofs of task instead of sending them to the RPC

def get_node_config() -> NodeConfig:
    """Get the node configuration stored in the config directory"""
    config_file = global_constants.CONFIG_DIR / global_constants.NODE_CONFIG_FILENAME

    if not config_file.exists():
        raise FileNotFoundError(
            f"No configuration file found at {config_file}. "
            f"Create it or pass --config to the avstools CLI."
        )

    return load_node_config(config_file)

def load_node_config(config_path: str | Path) -> NodeConfig:
    """Load node configuration from JSON file"""
    with open(config_path, 'r') as file:
        config_data = json.load(file)
    logger.debug(f"load_node_config: Loaded node configuration from {config_path}")
    return NodeConfig(
        node_name=config_data['node_name'],
        rpc_url=config_data['rpc_url'],
        performer_address=config_data['performer_address'],
        similarity_threshold=float(
            config_data.get('similarity_threshold', global_constants.DEFAULT_SIMILARITY_THRESHOLD)
        ),
        price_margin=Decimal(str(config_data.get('price_margin', global_constants.DEFAULT_PRICE_MARGIN))),
        failure_policy=FailurePolicy(
            config_data.get('failure_policy', FailurePolicy.SKIP_SUBMISSION.value)
        ),
    )

def get_provider_config(env: Optional[Mapping[str, str]] = None) -> ProviderConfig:
    """
    Read provider credentials once at startup.

    OpenRouter credentials take precedence over OpenAI ones.

    Raises:
        ValueError: if neither OPENROUTER_API_KEY nor OPENAI_API_KEY is set
    """
    env = os.environ if env is None else env

    openrouter_key = env.get('OPENROUTER_API_KEY')
    if openrouter_key:
        return ProviderConfig(
            api_key=openrouter_key,
            base_url=global_constants.OPENROUTER_BASE_URL,
            default_model=env.get('AVS_DEFAULT_MODEL', global_constants.DEFAULT_OPEN_AI_MODEL),
        )

    openai_key = env.get('OPENAI_API_KEY')
    if not openai_key:
        raise ValueError("OPENAI_API_KEY is not set in environment variables")

    return ProviderConfig(
        api_key=openai_key,
        base_url=env.get('OPENAI_BASE_URL') or None,
        default_model=env.get('AVS_DEFAULT_MODEL', global_constants.DEFAULT_OPEN_AI_MODEL),
    )
