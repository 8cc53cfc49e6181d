# PROVIDER EXCEPTIONS

class ProviderError(Exception):
    """ This exception is raised when the text generation provider fails or returns no output """
    def __init__(self, message):
        super().__init__(f"Text generation failed: {message}")

class StrategyGenerationError(Exception):
    """ This exception is raised when a farming strategy could not be obtained for a task """
    def __init__(self, reason, task_definition_id=None):
        self.task_definition_id = task_definition_id
        target = f" for task definition {task_definition_id}" if task_definition_id is not None else ""
        super().__init__(f"Strategy generation failed{target}: {reason}")

# TASK EXCEPTIONS

class SerializationError(ValueError):
    """ This exception is raised when a task record cannot be encoded or decoded """
    pass

class SubmissionError(Exception):
    """ This exception is raised when a proof of task could not be sent to the AVS RPC """
    def __init__(self, rpc_url, reason):
        super().__init__(f"sendTask to {rpc_url} failed: {reason}")

class ValidationError(ValueError):
    """ This exception is raised when a validation input cannot be interpreted """
    pass
