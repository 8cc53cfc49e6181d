from typing import Sequence, Optional, List, Dict
from openai import OpenAI, OpenAIError
from loguru import logger
from avstools.configuration.configuration import ProviderConfig
from avstools.models.models import ConversationMessage, GenerationResult, MessageRole
from avstools.utilities.exceptions import ProviderError

class OpenAIChatAgent:
    """
    ChatAgent backed by an OpenAI-compatible chat completions API (OpenAI or OpenRouter).

    Instances are immutable: with_prompt returns a new agent sharing the same client,
    so one configured agent can serve concurrent tasks.
    """

    def __init__(
            self,
            client: OpenAI,
            model: str,
            temperature: Optional[float] = None,
            prompt: str = ""
        ):
        self._client = client
        self._model = model
        self._temperature = temperature
        self._prompt = prompt

    @classmethod
    def from_config(cls, provider_config: ProviderConfig, model: str = "") -> 'OpenAIChatAgent':
        """
        Create an agent for the given model, falling back to the configured default model.

        Raises:
            ProviderError: if the client cannot be built
        """
        try:
            client = OpenAI(
                api_key=provider_config.api_key,
                base_url=provider_config.base_url,
                timeout=provider_config.timeout
            )
        except OpenAIError as e:
            raise ProviderError(f"Could not create OpenAI client: {e}") from e
        model = model or provider_config.default_model

        # OpenRouter expects vendor-prefixed model names
        if provider_config.using_openrouter and '/' not in model:
            model = f"openai/{model}"

        return cls(client=client, model=model, temperature=provider_config.temperature)

    @property
    def model(self) -> str:
        return self._model

    def with_prompt(self, prompt: str) -> 'OpenAIChatAgent':
        return self.__class__(
            client=self._client,
            model=self._model,
            temperature=self._temperature,
            prompt=prompt
        )

    def prompt(self) -> str:
        return self._prompt

    @staticmethod
    def render_transcript(messages: Sequence[ConversationMessage]) -> str:
        """Human-readable record of what was asked, independent of the provider message format"""
        return "\n\n".join(f"{message.role}:\n{message.content}" for message in messages)

    @staticmethod
    def _to_provider_role(role: str) -> str:
        """Map a conversation role to a provider role. Anything unrecognized is a user turn."""
        match role:
            case MessageRole.SYSTEM.value:
                return "system"
            case MessageRole.ASSISTANT.value:
                return "assistant"
            case _:
                return "user"

    def _prepare_messages(self, messages: Sequence[ConversationMessage]) -> List[Dict[str, str]]:
        return [
            {"role": self._to_provider_role(message.role), "content": message.content}
            for message in messages
        ]

    def chat(self, messages: Sequence[ConversationMessage]) -> GenerationResult:
        input_prompt = self.render_transcript(messages)
        request_messages = self._prepare_messages(messages)

        logger.debug(f"OpenAIChatAgent.chat: Sending {len(request_messages)} messages to {self._model}: {request_messages}")

        api_args = {"model": self._model, "messages": request_messages}
        if self._temperature is not None:
            api_args["temperature"] = self._temperature

        try:
            response = self._client.chat.completions.create(**api_args)
        except Exception as e:
            raise ProviderError(f"{type(e).__name__}: {e}") from e

        logger.debug(f"OpenAIChatAgent.chat: Response: {response}")

        if not response.choices:
            raise ProviderError("no completion choices returned")

        content = response.choices[0].message.content
        if content is None:
            raise ProviderError("completion choice has no message content")

        return GenerationResult(input_prompt=input_prompt, response=content)
