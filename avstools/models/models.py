from dataclasses import dataclass, asdict, field, fields
from typing import Optional, Dict, Any
from enum import Enum
import json
from avstools.utilities.exceptions import SerializationError

class MessageRole(Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"

@dataclass(frozen=True)
class ConversationMessage:
    """
    A single turn in a conversation sent to a chat agent.
    Role is free text so unrecognized roles reach the agent, which treats them as user turns.
    """
    role: str
    content: str

    @classmethod
    def system(cls, content: str) -> 'ConversationMessage':
        return cls(role=MessageRole.SYSTEM.value, content=content)

    @classmethod
    def user(cls, content: str) -> 'ConversationMessage':
        return cls(role=MessageRole.USER.value, content=content)

    @classmethod
    def assistant(cls, content: str) -> 'ConversationMessage':
        return cls(role=MessageRole.ASSISTANT.value, content=content)

@dataclass(frozen=True)
class GenerationResult:
    """The rendered prompt that was sent and the text the model returned"""
    input_prompt: str
    response: str

@dataclass(frozen=True)
class MarketInputs:
    """Serialized market state. Opaque text; numeric parsing happens elsewhere."""
    price: str
    portfolio: str
    apr: str

@dataclass(frozen=True)
class TaskRecord:
    """
    The canonical unit submitted as proof of task and compared across nodes.
    Field order here is the key order of the serialized proof.
    """
    price: str
    portfolio: str
    model: str
    strategy: str
    apr: str

    @classmethod
    def from_generation(cls, inputs: MarketInputs, model: str, strategy: str) -> 'TaskRecord':
        return cls(
            price=inputs.price,
            portfolio=inputs.portfolio,
            model=model,
            strategy=strategy,
            apr=inputs.apr
        )

    @property
    def market_inputs(self) -> MarketInputs:
        return MarketInputs(price=self.price, portfolio=self.portfolio, apr=self.apr)

    def to_proof_of_task(self) -> str:
        """
        Serialize to compact JSON with a stable key order.

        Raises:
            SerializationError: if any field is not text
        """
        for record_field in fields(self):
            value = getattr(self, record_field.name)
            if not isinstance(value, str):
                raise SerializationError(
                    f"TaskRecord.{record_field.name} must be str, got: {type(value).__name__}"
                )
        try:
            return json.dumps(asdict(self), ensure_ascii=False, separators=(',', ':'))
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to encode task record: {e}") from e

    @classmethod
    def from_proof_of_task(cls, proof_of_task: str) -> 'TaskRecord':
        """
        Decode a proof of task. Missing or non-text fields degrade to empty text.

        Raises:
            SerializationError: if the proof is not a JSON object
        """
        try:
            data = json.loads(proof_of_task)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to decode proof of task: {e}") from e

        if not isinstance(data, dict):
            raise SerializationError(f"Proof of task must be a JSON object, got: {type(data).__name__}")

        return cls(**{
            record_field.name: _text_or_default(data, record_field.name)
            for record_field in fields(cls)
        })

@dataclass(frozen=True)
class AcceptanceDecision:
    accepted: bool
    score: float
    threshold: float

def _text_or_default(body: Dict[str, Any], key: str, default: str = "") -> str:
    """Absent or non-text request fields become empty text"""
    value = body.get(key)
    return value if isinstance(value, str) else default

def _int_or_default(body: Dict[str, Any], key: str, default: int = 0) -> int:
    """Absent or non-integer request fields become the default. Booleans are not integers here."""
    value = body.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    return value

@dataclass(frozen=True)
class ExecuteTaskRequest:
    """Fully typed execute request. Decoding never fails; malformed fields fall back to defaults."""
    task_definition_id: int = 0
    price: str = ""
    portfolio: str = ""
    model: str = ""
    apr: str = ""

    @classmethod
    def from_request_body(cls, body: Any) -> 'ExecuteTaskRequest':
        if not isinstance(body, dict):
            return cls()
        return cls(
            task_definition_id=_int_or_default(body, 'taskDefinitionId'),
            price=_text_or_default(body, 'price'),
            portfolio=_text_or_default(body, 'portfolio'),
            model=_text_or_default(body, 'model'),
            apr=_text_or_default(body, 'apr'),
        )

    @property
    def market_inputs(self) -> MarketInputs:
        return MarketInputs(price=self.price, portfolio=self.portfolio, apr=self.apr)

@dataclass(frozen=True)
class ValidateTaskRequest:
    """Validate request decoded with the same default rules as ExecuteTaskRequest"""
    proof_of_task: str = ""
    task_definition_id: int = 0
    reference_strategy: Optional[str] = None
    expected_price: Optional[str] = None
    review: bool = False

    @classmethod
    def from_request_body(cls, body: Any) -> 'ValidateTaskRequest':
        if not isinstance(body, dict):
            return cls()
        reference_strategy = body.get('referenceStrategy')
        expected_price = body.get('expectedPrice')
        return cls(
            proof_of_task=_text_or_default(body, 'proofOfTask'),
            task_definition_id=_int_or_default(body, 'taskDefinitionId'),
            reference_strategy=reference_strategy if isinstance(reference_strategy, str) else None,
            expected_price=expected_price if isinstance(expected_price, str) else None,
            review=body.get('review') is True,
        )

@dataclass
class CustomResponse:
    data: Dict[str, Any]
    message: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

@dataclass
class ErrorResponse:
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    error: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {'data': self.data, 'error': self.error, 'message': self.message}
