"""
Unit tests for the single generation runner.
"""

from __future__ import annotations

import pytest

from streambench.benchmark import GenerationRunner
from streambench.errors import EmptyPromptError, GenerationFailedError
from streambench.schemas import NO_FIRST_CHUNK
from tests.unit.testing_utils import (
    FakeSession,
    RecordingSink,
    ScriptedClock,
    async_timeout,
)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


class TestGenerationRunner:
    """Test suite for GenerationRunner."""

    @pytest.mark.smoke
    @pytest.mark.asyncio
    @async_timeout(5.0)
    async def test_reference_scenario(self, sink):
        """Test metrics for two chunks at 0, 10, and 15 ms with known tokens."""
        session = FakeSession(
            ["Hi", " there"], token_counts={"Hello": 2, "HelloHi there": 6}
        )
        runner = GenerationRunner(sink, clock=ScriptedClock([0.0, 0.010, 0.015]))

        result = await runner.generate(session, "Hello")
        metrics = result.metrics

        assert result.response_text == "Hi there"
        assert result.is_warmup is False
        assert metrics.prompt_tokens == 2
        assert metrics.generated_tokens == 4
        assert metrics.generated_chunks == 2
        assert metrics.time_to_first_chunk == pytest.approx(10.0)
        assert metrics.decode_time == pytest.approx(5.0)
        assert metrics.e2e_time == pytest.approx(15.0)
        assert metrics.decode_cps == pytest.approx(200.0)
        assert metrics.decode_tps == pytest.approx(600.0)
        assert metrics.first_chunk_content == "Hi"

    @pytest.mark.sanity
    @pytest.mark.asyncio
    @async_timeout(5.0)
    async def test_prompt_measured_before_timer(self, sink):
        """Test the prompt is measured before, and the response after, the stream."""
        session = FakeSession(["a", "b"])
        clock = ScriptedClock([1.0, 1.1, 1.2])
        runner = GenerationRunner(sink, clock=clock)

        await runner.generate(session, "prompt")

        assert session.measured == ["prompt", "promptab"]
        assert clock.calls == 3

    @pytest.mark.sanity
    @pytest.mark.asyncio
    @async_timeout(5.0)
    @pytest.mark.parametrize(
        "chunks",
        [
            ["one"],
            ["one", " two", " three"],
            [str(ind) for ind in range(20)],
        ],
    )
    async def test_chunk_counts_and_timing_invariants(self, sink, chunks):
        """Test chunk counting and duration ordering with the real clock."""
        session = FakeSession(chunks)

        result = await GenerationRunner(sink).generate(session, "Tell me a story")

        assert result.metrics.generated_chunks == len(chunks)
        assert result.response_text == "".join(chunks)
        assert result.metrics.e2e_time >= result.metrics.time_to_first_chunk >= 0
        assert result.metrics.decode_time >= 0

    @pytest.mark.sanity
    @pytest.mark.asyncio
    @async_timeout(5.0)
    async def test_single_chunk_has_no_decode_rates(self, sink):
        """Test that one chunk gives zero decode rates whatever the decode time."""
        session = FakeSession(["many tokens in one chunk"])
        runner = GenerationRunner(sink, clock=ScriptedClock([0.0, 0.010, 0.500]))

        result = await runner.generate(session, "Hello")

        assert result.metrics.decode_time == pytest.approx(490.0)
        assert result.metrics.decode_cps == 0
        assert result.metrics.decode_tps == 0

    @pytest.mark.sanity
    @pytest.mark.asyncio
    @async_timeout(5.0)
    async def test_live_output_for_measured_generation(self, sink):
        """Test that the growing response is surfaced after every chunk."""
        session = FakeSession(["Hi", " there", "!"])

        await GenerationRunner(sink).generate(session, "Hello")

        assert sink.outputs == ["Hi", "Hi there", "Hi there!"]

    @pytest.mark.sanity
    @pytest.mark.asyncio
    @async_timeout(5.0)
    async def test_warmup_suppresses_output(self, sink):
        """Test that warm-up generations display nothing."""
        session = FakeSession(["Hi", " there"])

        result = await GenerationRunner(sink).generate(
            session, "Hello", is_warmup=True
        )

        assert sink.outputs == []
        assert result.is_warmup is True
        assert result.response_text == "Hi there"

    @pytest.mark.sanity
    @pytest.mark.asyncio
    @async_timeout(5.0)
    async def test_empty_stream(self, sink):
        """Test that an empty stream reports no first chunk."""
        session = FakeSession([])
        runner = GenerationRunner(sink, clock=ScriptedClock([0.0, 0.020]))

        result = await runner.generate(session, "Hello")

        assert result.response_text == ""
        assert result.metrics.generated_chunks == 0
        assert result.metrics.time_to_first_chunk == pytest.approx(20.0)
        assert result.metrics.decode_time == 0
        assert result.metrics.first_chunk_content == NO_FIRST_CHUNK

    @pytest.mark.smoke
    @pytest.mark.asyncio
    @async_timeout(5.0)
    async def test_empty_prompt(self, sink):
        """Test that an empty prompt fails before touching the session."""
        session = FakeSession(["Hi"])

        with pytest.raises(EmptyPromptError, match="Please enter a prompt."):
            await GenerationRunner(sink).generate(session, "")

        assert session.measured == []
        assert session.prompts == []

    @pytest.mark.sanity
    @pytest.mark.asyncio
    @async_timeout(5.0)
    async def test_stream_failure(self, sink):
        """Test that a mid-stream error fails the generation with its cause."""
        session = FakeSession(["Hi", " there", "!"], fail_after=2)

        with pytest.raises(GenerationFailedError) as exc_info:
            await GenerationRunner(sink).generate(session, "Hello")

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert "stream interrupted" in str(exc_info.value)
        assert sink.outputs == ["Hi", "Hi there"]
        assert session.measured == ["Hello"]

    @pytest.mark.sanity
    @pytest.mark.asyncio
    @async_timeout(5.0)
    async def test_measurement_failure(self, sink):
        """Test that a token measurement error fails the generation."""
        session = FakeSession(["Hi"])
        session.fail_measure = True

        with pytest.raises(GenerationFailedError) as exc_info:
            await GenerationRunner(sink).generate(session, "Hello")

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert session.prompts == []

    @pytest.mark.regression
    @pytest.mark.asyncio
    @async_timeout(5.0)
    async def test_released_session_fails(self, sink):
        """Test that generating with a released session fails."""
        session = FakeSession(["Hi"])
        await session.release()

        with pytest.raises(GenerationFailedError):
            await GenerationRunner(sink).generate(session, "Hello")

    @pytest.mark.regression
    @pytest.mark.asyncio
    @async_timeout(5.0)
    async def test_token_count_anomaly(self, sink):
        """Test that a shrinking token count is clamped instead of crashing."""
        session = FakeSession(
            ["Hi"], token_counts={"Hello": 5, "HelloHi": 3}
        )

        result = await GenerationRunner(sink).generate(session, "Hello")

        assert result.metrics.generated_tokens == 0
        assert result.metrics.token_count_anomaly is True
