"""
Performer side of a task: generate a farming strategy, canonicalize it into a
TaskRecord, and hand the serialized proof of task to the submitter.
"""
from typing import Callable, Dict, Any, Tuple
from loguru import logger
import traceback
from avstools.agents.yield_farming import StableYieldFarmingAgent
from avstools.configuration.constants import FailurePolicy
from avstools.models.models import (
    MarketInputs,
    TaskRecord,
    ExecuteTaskRequest,
    CustomResponse,
    ErrorResponse
)
from avstools.protocols.agent import ChatAgent
from avstools.protocols.task_submission import TaskSubmitter
from avstools.utilities.exceptions import (
    ProviderError,
    StrategyGenerationError,
    SerializationError,
    SubmissionError
)

AgentFactory = Callable[[str], ChatAgent]

class TaskExecutor:

    def __init__(
            self,
            agent_factory: AgentFactory,
            submitter: TaskSubmitter,
            failure_policy: FailurePolicy = FailurePolicy.SKIP_SUBMISSION,
            auxiliary_data: str = ""
    ):
        """
        Args:
            agent_factory: builds a chat agent for a model identifier
            submitter: receives the proof of task
            failure_policy: whether a failed generation still submits an empty-strategy record
            auxiliary_data: opaque data string passed through to the submitter
        """
        self.agent_factory = agent_factory
        self.submitter = submitter
        self.failure_policy = failure_policy
        self.auxiliary_data = auxiliary_data

    def execute(self, task_definition_id: int, inputs: MarketInputs, model: str) -> TaskRecord:
        """
        Generate, canonicalize and submit one task.

        Raises:
            StrategyGenerationError: if the agent could not be built or failed. Nothing is
                serialized from the failed generation; an empty-strategy audit record is
                submitted only under FailurePolicy.SUBMIT_EMPTY_FOR_AUDIT.
            SerializationError: if the record could not be encoded. Nothing is submitted.
        """
        logger.info(f"TaskExecutor.execute: Executing task definition {task_definition_id} with model '{model}'")
        agent = None
        try:
            agent = StableYieldFarmingAgent(self.agent_factory(model))
            generation = agent.get_farming_strategy(
                price=inputs.price,
                portfolio=inputs.portfolio,
                apr=inputs.apr
            )
        except ProviderError as e:
            logger.error(f"TaskExecutor.execute: Error fetching strategy for task definition {task_definition_id}: {e}")
            if self.failure_policy == FailurePolicy.SUBMIT_EMPTY_FOR_AUDIT:
                audit_record = TaskRecord.from_generation(inputs, agent.model if agent else model, strategy="")
                self._submit_audit_record(audit_record, task_definition_id)
            raise StrategyGenerationError(e, task_definition_id) from e

        # record the model that answered, which may be a configured default
        task_record = TaskRecord.from_generation(inputs, agent.model, strategy=generation.response)
        self._submit(task_record, task_definition_id)
        return task_record

    def _submit(self, task_record: TaskRecord, task_definition_id: int) -> None:
        proof_of_task = task_record.to_proof_of_task()
        self.submitter.submit(proof_of_task, self.auxiliary_data, task_definition_id)
        logger.debug(f"TaskExecutor._submit: Submitted proof of task for task definition {task_definition_id}")

    def _submit_audit_record(self, task_record: TaskRecord, task_definition_id: int) -> None:
        """Best effort: the generation failure is what gets reported to the caller"""
        try:
            self._submit(task_record, task_definition_id)
        except (SerializationError, SubmissionError) as e:
            logger.error(f"TaskExecutor._submit_audit_record: Audit record for task definition {task_definition_id} not submitted: {e}")

def handle_execute_request(executor: TaskExecutor, body: Any) -> Tuple[int, Dict[str, Any]]:
    """
    Run an inbound execute request and build the (status code, JSON body) reply.
    Failure detail is logged only; callers see a generic message.
    """
    request = ExecuteTaskRequest.from_request_body(body)
    logger.info(f"handle_execute_request: taskDefinitionId: {request.task_definition_id}")

    try:
        task_record = executor.execute(request.task_definition_id, request.market_inputs, request.model)
    except StrategyGenerationError:
        logger.error(traceback.format_exc())
        return 500, ErrorResponse(message="Failed to fetch strategy").to_dict()
    except SerializationError as e:
        logger.error(f"handle_execute_request: Error serializing task data: {e}")
        return 500, ErrorResponse(message="Failed to process task data").to_dict()
    except SubmissionError as e:
        logger.error(f"handle_execute_request: Error submitting task: {e}")
        return 500, ErrorResponse(message="Failed to submit task").to_dict()

    response = CustomResponse(data={"strategy": task_record.strategy}, message="Task executed successfully")
    return 200, response.to_dict()
