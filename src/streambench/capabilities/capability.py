"""
Capability interfaces for streaming text-generation services.

A capability is the external provider that creates generation sessions; a session
measures token counts and streams generated text as chunks. Concrete providers
register themselves by name so they can be created from configuration or the
command line.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any, Literal

from streambench.utils import RegistryMixin

__all__ = [
    "ACCEPTABLE_AVAILABILITY",
    "AvailabilityState",
    "Capability",
    "CapabilitySession",
    "CapabilityType",
    "DownloadProgressCallback",
]


CapabilityType = Literal["mock", "openai_http"]

AvailabilityState = Literal["available", "downloadable", "downloading", "unavailable"]

ACCEPTABLE_AVAILABILITY: tuple[str, ...] = ("available", "downloadable")
"""Availability states for which a session may be requested."""

DownloadProgressCallback = Callable[[float], Awaitable[None]]
"""Awaited with the download percentage (0 to 100) while a session is created."""


class CapabilitySession(ABC):
    """
    An active generation context created by a :class:`Capability`.

    Sessions are single use: once :meth:`release` has been called every other
    operation raises ``RuntimeError``. Releasing is idempotent.
    """

    def __init__(self):
        self._released = False

    @property
    def released(self) -> bool:
        """
        :return: True once the session has been released
        """
        return self._released

    @abstractmethod
    async def measure_tokens(self, text: str) -> int:
        """
        Count the tokens of the given text as the underlying model sees them.

        :param text: Text to measure
        :return: Number of tokens
        :raises RuntimeError: If the session was released
        """
        ...

    @abstractmethod
    def stream_generate(self, prompt: str) -> AsyncIterator[str]:
        """
        Start a streamed generation for the prompt.

        The returned iterator is lazy, finite, and can be consumed only once.
        Errors raised by the service surface while iterating.

        :param prompt: Prompt to generate a response for
        :return: Async iterator of response text chunks in arrival order
        :raises RuntimeError: If the session was released
        """
        ...

    async def release(self):
        """
        Release the resources held by the session; further calls are no-ops.
        """
        if self._released:
            return

        self._released = True
        await self.close()

    @abstractmethod
    async def close(self):
        """Free the provider resources backing the session, called once."""
        ...

    def check_active(self):
        """
        :raises RuntimeError: If the session was released
        """
        if self._released:
            raise RuntimeError("Session has been released and cannot be reused.")


class Capability(RegistryMixin["type[Capability]"], ABC):
    """
    Base class for providers of streaming generation sessions.

    Example:
    ::
        capability = Capability.create("mock", ttft_ms=50)
        if await capability.probe():
            state = await capability.availability()
            session = await capability.create_session(on_progress)
    """

    @classmethod
    def create(cls, type_: CapabilityType | str, **kwargs) -> Capability:
        """
        Create a registered capability by name.

        :param type_: Name the capability was registered under
        :param kwargs: Arguments for the capability constructor
        :return: The constructed capability
        :raises ValueError: If no capability is registered under the name
        """
        capability_class = cls.get_registered_object(type_)

        if capability_class is None:
            raise ValueError(
                f"Capability type '{type_}' is not registered. "
                f"Available types: {', '.join(cls.registered_names())}"
            )

        return capability_class(**kwargs)

    def __init__(self, type_: CapabilityType | str):
        """
        :param type_: Name of the capability type
        """
        self.type_ = type_

    @property
    @abstractmethod
    def info(self) -> dict[str, Any]:
        """
        :return: Capability configuration details for reporting
        """
        ...

    @abstractmethod
    async def probe(self) -> bool:
        """
        Detect whether the capability is present at all.

        :return: True if sessions may ever be created
        """
        ...

    @abstractmethod
    async def availability(self) -> AvailabilityState | str:
        """
        :return: Current availability of the underlying model
        """
        ...

    @abstractmethod
    async def create_session(
        self, progress_callback: DownloadProgressCallback | None = None
    ) -> CapabilitySession:
        """
        Create a new generation session, downloading the model if needed.

        :param progress_callback: Awaited with download progress percentages
        :return: The new session
        :raises Exception: Any provider error while downloading or initializing
        """
        ...
