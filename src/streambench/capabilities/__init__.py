"""
Capability providers for streaming text generation.

Provides the abstract Capability and CapabilitySession interfaces consumed by the
benchmark core, along with an in-process mock capability for simulated runs and
an HTTP capability for OpenAI-compatible servers.
"""

from __future__ import annotations

from .capability import (
    ACCEPTABLE_AVAILABILITY,
    AvailabilityState,
    Capability,
    CapabilitySession,
    CapabilityType,
    DownloadProgressCallback,
)
from .mock import MockCapability, MockCapabilityConfig, MockCapabilitySession
from .openai import OpenAIHTTPCapability, OpenAIHTTPSession

__all__ = [
    "ACCEPTABLE_AVAILABILITY",
    "AvailabilityState",
    "Capability",
    "CapabilitySession",
    "CapabilityType",
    "DownloadProgressCallback",
    "MockCapability",
    "MockCapabilityConfig",
    "MockCapabilitySession",
    "OpenAIHTTPCapability",
    "OpenAIHTTPSession",
]
