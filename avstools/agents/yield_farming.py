from typing import Sequence
from loguru import logger
from avstools.protocols.agent import ChatAgent
from avstools.models.models import ConversationMessage, GenerationResult
from avstools.prompts.yield_farming import (
    FARMING_ADVISOR_SYSTEM_PROMPT,
    STRATEGY_REVIEW_QUESTION,
    render_farming_strategy_prompt
)
from avstools.utilities.similarity import calculate_string_similarity
from avstools.utilities.exceptions import ValidationError

class StableYieldFarmingAgent:
    """
    Decorates any ChatAgent with the conservative yield farming advisor persona.

    The wrapped agent is re-prompted once at construction via with_prompt, so the
    caller's agent is never mutated. Every conversation is sent with the persona
    as its leading system message.
    """

    def __init__(self, agent: ChatAgent, system_prompt: str = FARMING_ADVISOR_SYSTEM_PROMPT):
        self.inner = agent.with_prompt(system_prompt)

    def with_prompt(self, prompt: str) -> 'StableYieldFarmingAgent':
        return self.__class__(self.inner, system_prompt=prompt)

    @property
    def model(self) -> str:
        return self.inner.model

    def prompt(self) -> str:
        return self.inner.prompt()

    def chat(self, messages: Sequence[ConversationMessage]) -> GenerationResult:
        all_messages = [ConversationMessage.system(self.inner.prompt()), *messages]
        return self.inner.chat(all_messages)

    def get_farming_strategy(self, price: str, portfolio: str, apr: str) -> GenerationResult:
        """
        Ask the model for a delta neutral farming strategy.

        The response is returned as opaque text. The JSON layout in the prompt is
        only a suggestion to the model and is not checked here.

        Raises:
            ProviderError: if the wrapped agent fails
        """
        user_prompt = render_farming_strategy_prompt(portfolio=portfolio, price=price, apr=apr)
        return self.chat([ConversationMessage.user(user_prompt)])

    def compare_strategies(self, strategy1: str, strategy2: str) -> float:
        return calculate_string_similarity(strategy1, strategy2)

    def review_strategy(self, input_prompt: str, response: str) -> bool:
        """
        Ask the model to judge another node's answer to the same prompt.

        Returns:
            bool: True for a 'yes' verdict, False for 'no'

        Raises:
            ProviderError: if the wrapped agent fails
            ValidationError: if the verdict is neither 'yes' nor 'no'
        """
        messages = [
            ConversationMessage.user(input_prompt),
            ConversationMessage.assistant(response),
            ConversationMessage.user(STRATEGY_REVIEW_QUESTION),
        ]
        verdict = self.chat(messages).response.strip().lower()
        logger.debug(f"StableYieldFarmingAgent.review_strategy: Verdict: {verdict}")

        if verdict == "yes":
            return True
        if verdict == "no":
            return False
        raise ValidationError(f"Unexpected review verdict: {verdict}")
