from typing import Protocol, Sequence
from avstools.models.models import ConversationMessage, GenerationResult

class ChatAgent(Protocol):
    """Protocol for anything that can hold a system prompt and answer a conversation"""

    @property
    def model(self) -> str:
        """Identifier of the model that answers, after any default has been applied"""
        ...

    def with_prompt(self, prompt: str) -> 'ChatAgent':
        """Return a new agent configured with the given system prompt. The receiver is left unchanged."""
        ...

    def prompt(self) -> str:
        """The configured system prompt"""
        ...

    def chat(self, messages: Sequence[ConversationMessage]) -> GenerationResult:
        """
        Send an ordered conversation to the model.

        Returns:
            GenerationResult: the rendered transcript that was sent and the model output

        Raises:
            ProviderError: if the remote call fails or returns no output
        """
        ...
