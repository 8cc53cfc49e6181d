from typing import Optional, List, Any, Tuple
import requests
from loguru import logger
import avstools.configuration.constants as global_constants
from avstools.protocols.task_submission import TaskSigner
from avstools.utilities.exceptions import SubmissionError

class JsonRpcTaskSubmitter:
    """Sends proofs of task to the AVS aggregator through the JSON-RPC sendTask method"""

    def __init__(
            self,
            rpc_url: str,
            performer_address: str,
            signer: Optional[TaskSigner] = None,
            timeout: float = global_constants.DEFAULT_REQUEST_TIMEOUT,
            session: Optional[requests.Session] = None
        ):
        self.rpc_url = rpc_url
        self.performer_address = signer.address if signer else performer_address
        self.signer = signer
        self.timeout = timeout
        self.session = session or requests.Session()

    def _build_params(self, proof_of_task: str, auxiliary_data: str, task_definition_id: int) -> List[Any]:
        params = [proof_of_task, auxiliary_data, task_definition_id, self.performer_address]
        if self.signer:
            params.append(self.signer.sign_task(proof_of_task, auxiliary_data, task_definition_id))
        return params

    def submit(self, proof_of_task: str, auxiliary_data: str, task_definition_id: int) -> None:
        """
        Broadcast a proof of task. Not retried.

        Raises:
            SubmissionError: on transport failure, a non-JSON reply, or an RPC error object
        """
        body = {
            "jsonrpc": "2.0",
            "method": global_constants.SEND_TASK_METHOD,
            "params": self._build_params(proof_of_task, auxiliary_data, task_definition_id),
            "id": 1
        }
        logger.debug(f"JsonRpcTaskSubmitter.submit: Sending task with params: {body['params']}")

        try:
            response = self.session.post(self.rpc_url, json=body, timeout=self.timeout)
            response.raise_for_status()
            rpc_response = response.json()
        except requests.RequestException as e:
            raise SubmissionError(self.rpc_url, e) from e
        except ValueError as e:
            raise SubmissionError(self.rpc_url, f"invalid JSON-RPC response: {e}") from e

        if not isinstance(rpc_response, dict):
            raise SubmissionError(self.rpc_url, "Unknown RPC response")

        if rpc_response.get("error"):
            error = rpc_response["error"]
            raise SubmissionError(self.rpc_url, f"RPC Error {error.get('code')}: {error.get('message')}")

        if "result" not in rpc_response:
            raise SubmissionError(self.rpc_url, "Unknown RPC response")

        logger.info(f"JsonRpcTaskSubmitter.submit: Task {task_definition_id} sent with result {rpc_response['result']}")

class DryRunTaskSubmitter:
    """Logs proofs of task instead of sending them. Keeps the latest one for inspection."""

    def __init__(self):
        self.last_submission: Optional[Tuple[str, str, int]] = None

    def submit(self, proof_of_task: str, auxiliary_data: str, task_definition_id: int) -> None:
        logger.info(f"DryRunTaskSubmitter.submit: Task {task_definition_id} proof of task: {proof_of_task}")
        self.last_submission = (proof_of_task, auxiliary_data, task_definition_id)
