"""
Failure types raised by the streambench core.

Every failure is a subclass of :class:`StreamBenchError` so operation entry points
can report it as a status message and return to an idle state. Session failures
share the :class:`SessionError` base since the benchmark loop recovers from them
by skipping the affected round.
"""

from __future__ import annotations

__all__ = [
    "CapabilityUnavailableError",
    "EmptyPromptError",
    "GenerationFailedError",
    "SessionCreationFailedError",
    "SessionError",
    "StreamBenchError",
]


class StreamBenchError(Exception):
    """Base class for all streambench operation failures."""


class SessionError(StreamBenchError):
    """Raised when a generation session could not be made available."""


class CapabilityUnavailableError(SessionError):
    """
    Raised when the generation capability is absent, disabled, or reports an
    availability state other than ``available`` or ``downloadable``.
    """


class SessionCreationFailedError(SessionError):
    """Raised when the capability fails to download or initialize a session."""


class EmptyPromptError(StreamBenchError):
    """Raised when a generation is requested for an empty prompt."""

    def __init__(self, message: str = "Please enter a prompt."):
        super().__init__(message)


class GenerationFailedError(StreamBenchError):
    """
    Raised when a generation could not run to completion.

    The underlying capability error is chained as ``__cause__``; no partial
    metrics are produced for a failed generation.
    """
