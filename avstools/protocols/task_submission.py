from typing import Protocol

class TaskSubmitter(Protocol):
    """Protocol for the collaborator that broadcasts a proof of task to the network"""
    def submit(self, proof_of_task: str, auxiliary_data: str, task_definition_id: int) -> None:
        ...

class TaskSigner(Protocol):
    """
    Protocol for a performer signer. Signing itself lives outside avstools;
    JsonRpcTaskSubmitter only forwards the signature it is given.
    """
    @property
    def address(self) -> str:
        ...

    def sign_task(self, proof_of_task: str, auxiliary_data: str, task_definition_id: int) -> str:
        """Return the serialized signature over the task payload"""
        ...
