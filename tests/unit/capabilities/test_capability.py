"""
Unit tests for the capability interfaces and registry.
"""

from __future__ import annotations

import pytest

from streambench.capabilities import (
    ACCEPTABLE_AVAILABILITY,
    Capability,
    CapabilitySession,
    MockCapability,
    OpenAIHTTPCapability,
)
from tests.unit.testing_utils import FakeSession, async_timeout


@pytest.mark.smoke
def test_acceptable_availability():
    """Test the availability states that allow session creation."""
    assert ACCEPTABLE_AVAILABILITY == ("available", "downloadable")


class TestCapabilitySession:
    """Test suite for the CapabilitySession base class."""

    @pytest.mark.smoke
    def test_is_abstract(self):
        """Test that CapabilitySession cannot be instantiated directly."""
        with pytest.raises(TypeError):
            CapabilitySession()  # type: ignore[abstract]

    @pytest.mark.smoke
    @pytest.mark.asyncio
    @async_timeout(5.0)
    async def test_release_is_idempotent(self):
        """Test that close runs once however often release is called."""
        session = FakeSession(["Hi"])

        assert not session.released
        await session.release()
        await session.release()

        assert session.released
        assert session.close_calls == 1

    @pytest.mark.sanity
    @pytest.mark.asyncio
    @async_timeout(5.0)
    async def test_released_session_not_reused(self):
        """Test that every operation on a released session raises."""
        session = FakeSession(["Hi"])
        await session.release()

        with pytest.raises(RuntimeError, match="released"):
            await session.measure_tokens("Hello")

        with pytest.raises(RuntimeError, match="released"):
            async for _ in session.stream_generate("Hello"):
                pass


class TestCapabilityRegistry:
    """Test suite for the capability registry."""

    @pytest.mark.smoke
    def test_registered_capabilities(self):
        """Test that the built-in capabilities are registered by name."""
        assert Capability.is_registered("mock")
        assert Capability.is_registered("openai_http")
        assert Capability.get_registered_object("mock") is MockCapability
        assert Capability.get_registered_object("openai_http") is OpenAIHTTPCapability

    @pytest.mark.smoke
    def test_create(self):
        """Test creating registered capabilities with constructor arguments."""
        mock = Capability.create("mock", ttft_ms=5)
        http = Capability.create("openai_http", target="http://localhost:8000")

        assert isinstance(mock, MockCapability)
        assert mock.type_ == "mock"
        assert isinstance(http, OpenAIHTTPCapability)
        assert http.type_ == "openai_http"

    @pytest.mark.sanity
    def test_create_unregistered(self):
        """Test that creating an unknown capability lists the known ones."""
        with pytest.raises(ValueError, match="mock"):
            Capability.create("unknown")
