"""
Unit tests for the generation metrics schemas.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from streambench.schemas import (
    NO_FIRST_CHUNK,
    UNAVAILABLE,
    AverageMetrics,
    GenerationMetrics,
    GenerationResult,
)


def compile_metrics(**overrides) -> GenerationMetrics:
    arguments = {
        "prompt_tokens": 2,
        "total_tokens": 6,
        "generated_chunks": 2,
        "start_time": 0.0,
        "first_chunk_time": 0.010,
        "end_time": 0.015,
        "first_chunk_content": "Hi",
    }
    arguments.update(overrides)
    return GenerationMetrics.compile(**arguments)


class TestGenerationMetrics:
    """Test suite for GenerationMetrics."""

    @pytest.mark.smoke
    def test_compile_reference_scenario(self):
        """Test the two-chunk scenario with known timings and token counts."""
        metrics = compile_metrics()

        assert metrics.prompt_tokens == 2
        assert metrics.total_tokens == 6
        assert metrics.generated_tokens == 4
        assert metrics.generated_chunks == 2
        assert metrics.time_to_first_chunk == pytest.approx(10.0)
        assert metrics.decode_time == pytest.approx(5.0)
        assert metrics.e2e_time == pytest.approx(15.0)
        assert metrics.decode_cps == pytest.approx(200.0)
        assert metrics.decode_tps == pytest.approx(600.0)
        assert metrics.chunks_per_second_e2e == pytest.approx(2 / 15 * 1000)
        assert metrics.tokens_per_seconds_e2e == pytest.approx(4 / 15 * 1000)
        assert metrics.prompt_tps == pytest.approx(200.0)
        assert metrics.first_chunk_content == "Hi"
        assert metrics.token_count_anomaly is False

    @pytest.mark.smoke
    def test_frozen(self):
        """Test that compiled metrics cannot be modified."""
        metrics = compile_metrics()
        with pytest.raises(ValidationError):
            metrics.prompt_tokens = 10  # type: ignore[misc]

    @pytest.mark.sanity
    def test_single_chunk_has_no_decode_rates(self):
        """Test that one chunk never produces decode rates."""
        metrics = compile_metrics(
            generated_chunks=1, total_tokens=10, end_time=0.050
        )

        assert metrics.decode_time > 0
        assert metrics.decode_cps == 0
        assert metrics.decode_tps == 0

    @pytest.mark.sanity
    @pytest.mark.parametrize("total_tokens", [2, 3])
    def test_few_generated_tokens_have_no_decode_tps(self, total_tokens):
        """Test that at most one generated token gives zero decode tps."""
        metrics = compile_metrics(total_tokens=total_tokens)

        assert metrics.generated_tokens <= 1
        assert metrics.decode_tps == 0

    @pytest.mark.sanity
    def test_zero_chunks(self):
        """Test that an empty stream attributes all time to the first chunk."""
        metrics = compile_metrics(
            generated_chunks=0,
            total_tokens=2,
            first_chunk_time=None,
            first_chunk_content=None,
            end_time=0.020,
        )

        assert metrics.time_to_first_chunk == pytest.approx(20.0)
        assert metrics.e2e_time == pytest.approx(20.0)
        assert metrics.decode_time == 0
        assert metrics.decode_cps == 0
        assert metrics.decode_tps == 0
        assert metrics.chunks_per_second_e2e == 0
        assert metrics.tokens_per_seconds_e2e == 0
        assert metrics.first_chunk_content == NO_FIRST_CHUNK

    @pytest.mark.sanity
    def test_zero_duration(self):
        """Test that zero durations produce zero rates instead of infinities."""
        metrics = compile_metrics(first_chunk_time=0.0, end_time=0.0)

        assert metrics.e2e_time == 0
        assert metrics.time_to_first_chunk == 0
        assert metrics.decode_time == 0
        assert metrics.chunks_per_second_e2e == 0
        assert metrics.tokens_per_seconds_e2e == 0
        assert metrics.prompt_tps == 0
        assert metrics.decode_cps == 0
        assert metrics.decode_tps == 0

    @pytest.mark.regression
    def test_token_count_anomaly(self):
        """Test that non-monotonic token counts are clamped and flagged."""
        metrics = compile_metrics(prompt_tokens=8, total_tokens=5)

        assert metrics.generated_tokens == 0
        assert metrics.token_count_anomaly is True
        assert metrics.tokens_per_seconds_e2e == 0
        assert metrics.decode_tps == 0

    @pytest.mark.regression
    def test_clock_regression_keeps_invariants(self):
        """Test that readings out of order never produce negative durations."""
        metrics = compile_metrics(first_chunk_time=0.030, end_time=0.020)

        assert metrics.e2e_time == pytest.approx(20.0)
        assert metrics.time_to_first_chunk == pytest.approx(20.0)
        assert metrics.decode_time == 0
        assert metrics.e2e_time >= metrics.time_to_first_chunk >= 0

    @pytest.mark.sanity
    def test_first_chunk_content_kept_verbatim(self):
        """Test that the first chunk content is stored unmodified."""
        metrics = compile_metrics(first_chunk_content=' "quoted" ')
        assert metrics.first_chunk_content == ' "quoted" '


class TestAverageMetrics:
    """Test suite for AverageMetrics."""

    @pytest.mark.smoke
    def test_defaults(self):
        """Test that a default average is empty."""
        average = AverageMetrics()

        assert average.rounds == 0
        assert average.is_empty
        assert average.decode_tps is None
        assert average.first_chunk_content == UNAVAILABLE

    @pytest.mark.sanity
    def test_first_chunk_content_is_sentinel(self):
        """Test that only the unavailable sentinel is accepted."""
        with pytest.raises(ValidationError):
            AverageMetrics(first_chunk_content="Hi")  # type: ignore[arg-type]


class TestGenerationResult:
    """Test suite for GenerationResult."""

    @pytest.mark.smoke
    def test_initialization(self):
        """Test GenerationResult pairs the response with its metrics."""
        metrics = compile_metrics()
        result = GenerationResult(response_text="Hi there", metrics=metrics)

        assert result.response_text == "Hi there"
        assert result.metrics == metrics
        assert result.is_warmup is False
