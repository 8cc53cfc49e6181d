"""
Validator side of a task.

A performer's strategy is accepted when it is similar enough to a reference
strategy, either supplied by the caller or re-derived from the same market
inputs. Exact equality is not usable because two LLM calls with identical
inputs legitimately differ in wording.
"""
from decimal import Decimal, InvalidOperation
from typing import Optional, Dict, Any, Tuple
from loguru import logger
import traceback
import avstools.configuration.constants as global_constants
from avstools.agents.yield_farming import StableYieldFarmingAgent
from avstools.prompts.yield_farming import render_farming_strategy_prompt
from avstools.models.models import (
    TaskRecord,
    AcceptanceDecision,
    ValidateTaskRequest,
    CustomResponse,
    ErrorResponse
)
from avstools.task_processing.execution import AgentFactory
from avstools.utilities.similarity import calculate_string_similarity
from avstools.utilities.exceptions import ProviderError, StrategyGenerationError, ValidationError

def _check_threshold(threshold: float) -> float:
    if not 0.0 <= threshold <= 1.0:
        raise ValueError(f"Similarity threshold must be within [0, 1], got: {threshold}")
    return threshold

class StrategyValidator:

    def __init__(
            self,
            threshold: float,
            agent_factory: Optional[AgentFactory] = None,
            price_margin: Decimal = global_constants.DEFAULT_PRICE_MARGIN
    ):
        """
        Args:
            threshold: minimum similarity score for acceptance, in [0, 1]
            agent_factory: builds a chat agent for a model identifier; needed only for re-derivation
            price_margin: relative tolerance for check_price
        """
        self.threshold = _check_threshold(threshold)
        self.agent_factory = agent_factory
        self.price_margin = price_margin

    def validate(
            self,
            claimed: TaskRecord,
            reference: TaskRecord,
            threshold: Optional[float] = None
    ) -> AcceptanceDecision:
        """Compare the claimed strategy against the reference strategy"""
        threshold = self.threshold if threshold is None else _check_threshold(threshold)
        score = calculate_string_similarity(claimed.strategy, reference.strategy)
        decision = AcceptanceDecision(accepted=score >= threshold, score=score, threshold=threshold)
        logger.info(
            f"StrategyValidator.validate: Vote: {'Approve' if decision.accepted else 'Not Approved'} "
            f"(similarity {score:.4f}, threshold {threshold:.4f})"
        )
        return decision

    def rederive_reference(self, claimed: TaskRecord) -> TaskRecord:
        """
        Independently generate a strategy from the claimed record's inputs and model.
        Nothing is submitted.

        Raises:
            ValueError: if the validator has no agent factory
            StrategyGenerationError: if the agent failed
        """
        if self.agent_factory is None:
            raise ValueError("StrategyValidator needs an agent_factory to re-derive strategies")

        inputs = claimed.market_inputs
        try:
            agent = StableYieldFarmingAgent(self.agent_factory(claimed.model))
            generation = agent.get_farming_strategy(price=inputs.price, portfolio=inputs.portfolio, apr=inputs.apr)
        except ProviderError as e:
            raise StrategyGenerationError(e) from e

        return TaskRecord.from_generation(inputs, claimed.model, strategy=generation.response)

    def validate_by_rederivation(self, claimed: TaskRecord, threshold: Optional[float] = None) -> AcceptanceDecision:
        return self.validate(claimed, self.rederive_reference(claimed), threshold=threshold)

    def review_claim(self, claimed: TaskRecord) -> bool:
        """
        Ask the claimed record's model to judge the claimed strategy as an answer to
        the prompt built from the same market inputs.

        Raises:
            ValueError: if the validator has no agent factory
            StrategyGenerationError: if the agent failed
            ValidationError: if the verdict is neither 'yes' nor 'no'
        """
        if self.agent_factory is None:
            raise ValueError("StrategyValidator needs an agent_factory to review strategies")

        inputs = claimed.market_inputs
        input_prompt = render_farming_strategy_prompt(portfolio=inputs.portfolio, price=inputs.price, apr=inputs.apr)
        try:
            agent = StableYieldFarmingAgent(self.agent_factory(claimed.model))
            approved = agent.review_strategy(input_prompt, claimed.strategy)
        except ProviderError as e:
            raise StrategyGenerationError(e) from e

        logger.info(f"StrategyValidator.review_claim: Review: {'Approve' if approved else 'Not Approved'}")
        return approved

    def check_price(self, claimed_price: str, expected_price: str, margin: Optional[Decimal] = None) -> bool:
        """
        Sibling numeric check: the claimed price must lie within +/- margin of the expected price.

        Raises:
            ValidationError: if either price is not a number
        """
        margin = self.price_margin if margin is None else margin
        try:
            claimed = Decimal(claimed_price.strip())
            expected = Decimal(expected_price.strip())
        except (InvalidOperation, AttributeError) as e:
            raise ValidationError(f"Invalid price value: claimed={claimed_price!r}, expected={expected_price!r}") from e

        if not claimed.is_finite() or not expected.is_finite():
            raise ValidationError(f"Invalid price value: claimed={claimed_price!r}, expected={expected_price!r}")

        bounds = sorted([expected * (1 - margin), expected * (1 + margin)])
        return bounds[0] <= claimed <= bounds[1]

def handle_validate_request(validator: StrategyValidator, body: Any) -> Tuple[int, Dict[str, Any]]:
    """
    Run an inbound validate request and build the (status code, JSON body) reply.
    The reference strategy comes from the request when present, otherwise it is re-derived.
    The price check and the model review run only when the request asks for them.
    """
    request = ValidateTaskRequest.from_request_body(body)
    logger.info(f"handle_validate_request: proofOfTask: {request.proof_of_task}")

    try:
        claimed = TaskRecord.from_proof_of_task(request.proof_of_task)
        if request.reference_strategy is not None:
            reference = TaskRecord(
                price=claimed.price,
                portfolio=claimed.portfolio,
                model=claimed.model,
                strategy=request.reference_strategy,
                apr=claimed.apr
            )
        else:
            reference = validator.rederive_reference(claimed)

        decision = validator.validate(claimed, reference)
        price_ok = True
        if request.expected_price is not None:
            price_ok = validator.check_price(claimed.price, request.expected_price)
        review_ok = validator.review_claim(claimed) if request.review else True
        result = decision.accepted and price_ok and review_ok

    except (StrategyGenerationError, ValueError) as e:  # SerializationError and ValidationError are ValueErrors
        logger.error(f"handle_validate_request: Validation error: {e}")
        logger.error(traceback.format_exc())
        return 500, ErrorResponse(message="Error during validation step").to_dict()

    response = CustomResponse(
        data={
            "result": result,
            "task_definition_id": request.task_definition_id,
            "similarity_score": decision.score,
            "threshold": decision.threshold,
            "meets_threshold": decision.accepted,
            "review_approved": review_ok if request.review else None
        },
        message="Task validated successfully"
    )
    return 200, response.to_dict()
