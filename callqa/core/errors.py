"""Error taxonomy for the call evaluation pipeline."""

from __future__ import annotations

from typing import Optional


class CallQAError(Exception):
    """Base exception for every failure the pipeline reports to a caller.

    Args:
        message: Short, user-visible description.
        context: Optional extra details for logging (collaborator message, stage).
    """

    def __init__(self, message: str = "", context: Optional[dict] = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    @property
    def details(self) -> str:
        return str(self.context.get("details", ""))


class ValidationError(CallQAError):
    """Raised when the audio payload is missing or has a disallowed format."""


class ConfigurationError(CallQAError):
    """Raised when the provider credential or the config file is unusable."""


class TranscriptionError(CallQAError):
    """Raised when the speech-to-text collaborator fails."""


class ScoringError(CallQAError):
    """Raised when the language-model collaborator fails."""


class MalformedResponse(CallQAError):
    """Raised when the scoring reply cannot be parsed as a JSON object."""
