class ExtractionError(RuntimeError):
    """Base class for failures turning input into validated tasks."""


class ResponseParseError(ExtractionError):
    def __init__(self, message: str = "Couldn't parse JSON from model response."):
        super().__init__(message)


class NoValidTasksError(ExtractionError):
    def __init__(self, message: str = "No valid tasks found in response"):
        super().__init__(message)


class DocumentExtractionError(ExtractionError):
    """No text could be recovered from a document by any strategy."""
