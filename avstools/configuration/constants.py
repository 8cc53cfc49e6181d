from decimal import Decimal
from enum import Enum
from pathlib import Path

CONFIG_DIR = Path.home().joinpath("avscreds")
NODE_CONFIG_FILENAME = "avs_node_config.json"

# AI MODELS
DEFAULT_OPEN_AI_MODEL = 'gpt-4o'
DEFAULT_TEMPERATURE = 0.0
DEFAULT_REQUEST_TIMEOUT = 60.0  # seconds, applies to provider and RPC calls

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"

# VALIDATION
DEFAULT_SIMILARITY_THRESHOLD = 0.8
DEFAULT_PRICE_MARGIN = Decimal('0.05')  # +/- 5% around the expected price

# AVS RPC
SEND_TASK_METHOD = 'sendTask'

class FailurePolicy(Enum):
    """What the executor does with a task whose strategy generation failed"""
    SKIP_SUBMISSION = 'skip_submission'
    SUBMIT_EMPTY_FOR_AUDIT = 'submit_empty_for_audit'
