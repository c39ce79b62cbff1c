"""
Generation session lifecycle management.

Owns the single live generation session of an operation. Creating a session always
releases the previous one first, and releasing is best effort: release errors are
logged and never block creating a replacement or mask another failure.
"""

from __future__ import annotations

from streambench.capabilities import (
    ACCEPTABLE_AVAILABILITY,
    Capability,
    CapabilitySession,
)
from streambench.errors import CapabilityUnavailableError, SessionCreationFailedError
from streambench.logger import logger

from .progress import ReportingSink

__all__ = ["SessionManager"]


class SessionManager:
    """
    Holds at most one live session created from a capability.

    Example:
    ::
        sessions = SessionManager(capability, capability_present=True, sink=sink)
        session = await sessions.ensure_session(" for round 1/5")
        ...
        await sessions.release()
    """

    def __init__(
        self,
        capability: Capability,
        capability_present: bool,
        sink: ReportingSink,
    ):
        """
        :param capability: Provider to create sessions from
        :param capability_present: Result of the one-time presence probe
        :param sink: Receiver for status and output text updates
        """
        self.capability = capability
        self.capability_present = capability_present
        self.sink = sink
        self._session: CapabilitySession | None = None

    @property
    def session(self) -> CapabilitySession | None:
        """
        :return: The live session, or None if no session is held
        """
        return self._session

    async def ensure_session(self, context_label: str = "") -> CapabilitySession:
        """
        Replace any held session with a newly created one.

        :param context_label: Suffix for status messages, e.g. " for round 2/5"
        :return: The new session, now the only one held
        :raises CapabilityUnavailableError: If the capability is absent or its
            availability does not allow creating sessions
        :raises SessionCreationFailedError: If the capability failed to create it
        """
        if not self.capability_present:
            message = "Generation capability is not available. Cannot create session."
            await self.sink.on_status(message, "error")
            raise CapabilityUnavailableError(message)

        await self.release()

        await self.sink.on_status(
            f"Creating session{context_label}... This may take a moment."
        )
        await self.sink.on_output_text(f"Creating Session{context_label}...")

        try:
            availability = await self.capability.availability()
        except Exception as err:
            await self._report_creation_error(context_label, err)
            raise SessionCreationFailedError(str(err)) from err

        if availability not in ACCEPTABLE_AVAILABILITY:
            error = CapabilityUnavailableError(
                f"Generation capability is not available (state: {availability})."
            )
            await self._report_creation_error(context_label, error)
            raise error

        async def _on_download_progress(percent: float):
            await self.sink.on_status(
                f"Downloading model{context_label}: {round(percent)}%"
            )

        try:
            self._session = await self.capability.create_session(
                progress_callback=_on_download_progress
            )
        except Exception as err:
            self._session = None
            await self._report_creation_error(context_label, err)
            raise SessionCreationFailedError(str(err)) from err

        await self.sink.on_status(f"Session created{context_label}.")

        return self._session

    async def release(self):
        """
        Release the held session, if any; release errors are logged and dropped.
        """
        session, self._session = self._session, None

        if session is None:
            return

        try:
            await session.release()
        except Exception as err:  # noqa: BLE001
            logger.warning(f"Error releasing generation session: {err}")

    async def _report_creation_error(self, context_label: str, err: Exception):
        logger.error(f"Failed to create session{context_label}: {err}")
        await self.sink.on_status(
            f"Error creating session{context_label}: {err}", "error"
        )
