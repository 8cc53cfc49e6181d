import unittest
from avstools.agents.yield_farming import StableYieldFarmingAgent
from avstools.models.models import ConversationMessage, GenerationResult
from avstools.prompts.yield_farming import (
    FARMING_ADVISOR_SYSTEM_PROMPT,
    STRATEGY_REVIEW_QUESTION,
    render_farming_strategy_prompt
)
from avstools.utilities.exceptions import ProviderError, ValidationError
from avstools.utilities.similarity import calculate_string_similarity

class RecordingAgent:
    """ChatAgent fake. Copies made by with_prompt share the call log and replies."""
    model = "gpt-4o-mini"

    def __init__(self, replies=("strategy",), prompt="", calls=None, error=None):
        self.replies = list(replies)
        self._prompt = prompt
        self.calls = [] if calls is None else calls
        self.error = error

    def with_prompt(self, prompt):
        copy = RecordingAgent(prompt=prompt, calls=self.calls, error=self.error)
        copy.replies = self.replies
        return copy

    def prompt(self):
        return self._prompt

    def chat(self, messages):
        self.calls.append(list(messages))
        if self.error:
            raise self.error
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        return GenerationResult(input_prompt="rendered", response=reply)

class TestStableYieldFarmingAgent(unittest.TestCase):
    def setUp(self):
        self.inner = RecordingAgent()
        self.agent = StableYieldFarmingAgent(self.inner)

    def test_persona_is_set_without_mutating_wrapped_agent(self):
        self.assertEqual(self.agent.prompt(), FARMING_ADVISOR_SYSTEM_PROMPT)
        self.assertEqual(self.inner.prompt(), "")

    def test_get_farming_strategy_sends_persona_then_rendered_template(self):
        result = self.agent.get_farming_strategy(price="PRICE-3000", portfolio="PORTFOLIO-ETH", apr="APR-5")
        self.assertEqual(result.response, "strategy")

        messages = self.inner.calls[0]
        self.assertEqual(len(messages), 2)
        self.assertEqual(messages[0], ConversationMessage.system(FARMING_ADVISOR_SYSTEM_PROMPT))
        self.assertEqual(messages[1].role, "user")

        content = messages[1].content
        self.assertEqual(content, render_farming_strategy_prompt("PORTFOLIO-ETH", "PRICE-3000", "APR-5"))
        self.assertLess(content.index("PORTFOLIO-ETH"), content.index("PRICE-3000"))
        self.assertLess(content.index("PRICE-3000"), content.index("APR-5"))
        self.assertIn('"exchanges"', content)

    def test_model_is_the_wrapped_agent_model(self):
        self.assertEqual(self.agent.model, "gpt-4o-mini")
        self.assertEqual(self.agent.with_prompt("other").model, "gpt-4o-mini")

    def test_chat_prepends_system_message(self):
        self.agent.chat([ConversationMessage.user("hi")])
        self.assertEqual(
            self.inner.calls[0],
            [ConversationMessage.system(FARMING_ADVISOR_SYSTEM_PROMPT), ConversationMessage.user("hi")]
        )

    def test_with_prompt_returns_new_decorator(self):
        other = self.agent.with_prompt("aggressive persona")
        self.assertIsInstance(other, StableYieldFarmingAgent)
        self.assertEqual(other.prompt(), "aggressive persona")
        self.assertEqual(self.agent.prompt(), FARMING_ADVISOR_SYSTEM_PROMPT)

    def test_provider_errors_propagate(self):
        agent = StableYieldFarmingAgent(RecordingAgent(error=ProviderError("down")))
        with self.assertRaises(ProviderError):
            agent.get_farming_strategy("3000", "50% ETH", "5%")

    def test_compare_strategies_passes_through(self):
        self.assertEqual(
            self.agent.compare_strategies("kitten", "sitting"),
            calculate_string_similarity("kitten", "sitting")
        )

    def test_review_strategy_verdicts(self):
        cases = [("yes", True), (" YES \n", True), ("No", False)]
        for reply, expected in cases:
            with self.subTest(reply=reply):
                agent = StableYieldFarmingAgent(RecordingAgent(replies=[reply]))
                self.assertIs(agent.review_strategy("prompt", "answer"), expected)

    def test_review_strategy_conversation(self):
        self.inner.replies[:] = ["yes"]
        self.agent.review_strategy("the prompt", "the answer")
        self.assertEqual(self.inner.calls[0], [
            ConversationMessage.system(FARMING_ADVISOR_SYSTEM_PROMPT),
            ConversationMessage.user("the prompt"),
            ConversationMessage.assistant("the answer"),
            ConversationMessage.user(STRATEGY_REVIEW_QUESTION),
        ])

    def test_review_strategy_rejects_unclear_verdict(self):
        agent = StableYieldFarmingAgent(RecordingAgent(replies=["maybe, it depends"]))
        with self.assertRaises(ValidationError):
            agent.review_strategy("prompt", "answer")

class TestRenderFarmingStrategyPrompt(unittest.TestCase):
    def test_inputs_are_not_resubstituted(self):
        content = render_farming_strategy_prompt(portfolio="___PRICE_REPLACE___", price="3000", apr="5%")
        self.assertIn("___PRICE_REPLACE___", content)
        self.assertIn("3000", content)
        self.assertNotIn("___PORTFOLIO_REPLACE___", content)
        self.assertNotIn("___APR_REPLACE___", content)

if __name__ == '__main__':
    unittest.main()
