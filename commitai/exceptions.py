"""Custom exceptions for commitai."""


class CommitAIError(Exception):
    """Base exception for commitai errors."""


class GitError(CommitAIError):
    """Raised when a Git command fails."""


class PreconditionError(CommitAIError):
    """Raised when the repository is not in a usable state.

    Covers "not a git repository" and "no staged changes". These are
    reported to the user and never retried.
    """


class ConfigError(CommitAIError):
    """Raised for missing or unreadable configuration."""


class ValidationError(CommitAIError):
    """Raised when user supplied options are invalid."""


class LLMError(CommitAIError):
    """Base class for backend (language model) failures."""


class TransportError(LLMError):
    """The HTTP request could not be completed (network, timeout)."""


class ProtocolError(LLMError):
    """The backend replied with a body that is not a JSON envelope."""

    def __init__(self, message: str, body: str = "") -> None:
        super().__init__(f"{message}\nBody: {body}" if body else message)
        self.body = body


class BackendError(LLMError):
    """The backend envelope carried a structured ``error`` object."""

    def __init__(self, message: str) -> None:
        super().__init__(f"Gemini API error: {message}")
        self.message = message


class EmptyResponseError(LLMError):
    """The envelope had no candidates or no content parts."""
