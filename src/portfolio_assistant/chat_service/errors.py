# error taxonomy for the chat pipeline
# NOTE: each error maps to one JSON envelope {"error": message, "details": details} in the chat route

from typing import Optional

class ChatServiceError(Exception):
    """
    Base class for every expected failure in the chat pipeline.
    `message` is the short, user-facing error string; `details` carries diagnostics (store or upstream body).
    """
    status_code: int = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_envelope(self) -> dict[str, str]:
        envelope = {"error": self.message}
        if self.details is not None:
            envelope["details"] = self.details
        return envelope

class InvalidMessageError(ChatServiceError):
    """Client input error: missing, empty or non-string message, or a malformed body."""
    status_code = 400

class ConfigurationError(ChatServiceError):
    """Deployment defect: store credentials or completion api key are not set."""
    status_code = 500

class RetrievalError(ChatServiceError):
    """One of the two knowledge store reads failed."""
    status_code = 500

class CompletionRequestError(ChatServiceError):
    """The completion service returned a non-success status or could not be reached."""
    status_code = 500
