"""
Timing and throughput records for streamed generations.

Provides the immutable per-generation metrics record compiled from the raw clock
readings and token measurements of a single streamed response, the averaged
record produced by aggregating several of them, and the result pairing a
response text with its metrics. All durations are in milliseconds and all rates
are per second.
"""

from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict, Field

from streambench.schemas.base import StandardBaseModel
from streambench.utils import safe_rate

__all__ = [
    "NO_FIRST_CHUNK",
    "UNAVAILABLE",
    "AverageMetrics",
    "GenerationMetrics",
    "GenerationResult",
]

NO_FIRST_CHUNK = "N/A"
"""First chunk content reported when a stream produced no chunks."""

UNAVAILABLE = "unavailable"
"""Sentinel for non-numeric fields that are not aggregated."""


class GenerationMetrics(StandardBaseModel):
    """
    Immutable metrics for one completed streamed generation.

    Use :meth:`compile` to derive the record from clock readings so that the
    duration invariants and zero-guarded rates are always applied.

    Example:
    ::
        metrics = GenerationMetrics.compile(
            prompt_tokens=2,
            total_tokens=6,
            generated_chunks=2,
            start_time=0.0,
            first_chunk_time=0.010,
            end_time=0.015,
            first_chunk_content="Hi",
        )
        metrics.decode_tps  # 600.0
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    prompt_tokens: int = Field(
        ge=0, description="Tokens in the input prompt as measured by the capability"
    )
    generated_chunks: int = Field(ge=0, description="Number of stream chunks received")
    generated_tokens: int = Field(
        ge=0,
        description=(
            "Tokens of prompt plus response minus prompt tokens, clamped at zero "
            "when the capability measurement is not monotonic"
        ),
    )
    total_tokens: int = Field(
        description="Tokens of the prompt concatenated with the full response"
    )
    time_to_first_chunk: float = Field(
        ge=0, description="Milliseconds from stream start to the first chunk"
    )
    decode_time: float = Field(
        ge=0, description="Milliseconds from the first chunk to stream exhaustion"
    )
    e2e_time: float = Field(
        ge=0, description="Milliseconds from stream start to stream exhaustion"
    )
    chunks_per_second_e2e: float = Field(
        ge=0, description="Chunks per second over the end-to-end time"
    )
    tokens_per_seconds_e2e: float = Field(
        ge=0, description="Generated tokens per second over the end-to-end time"
    )
    prompt_tps: float = Field(
        ge=0, description="Prompt tokens per second over the time to first chunk"
    )
    decode_cps: float = Field(
        ge=0, description="Chunks after the first per second of decode time"
    )
    decode_tps: float = Field(
        ge=0, description="Tokens after the first per second of decode time"
    )
    first_chunk_content: str = Field(
        default=NO_FIRST_CHUNK,
        description="Verbatim content of the first chunk, or N/A without chunks",
    )
    token_count_anomaly: bool = Field(
        default=False,
        description=(
            "True when the measured total tokens were fewer than the prompt tokens"
        ),
    )

    @classmethod
    def compile(
        cls,
        *,
        prompt_tokens: int,
        total_tokens: int,
        generated_chunks: int,
        start_time: float,
        first_chunk_time: float | None,
        end_time: float,
        first_chunk_content: str | None = None,
    ) -> GenerationMetrics:
        """
        Derive a metrics record from raw clock readings and token counts.

        :param prompt_tokens: Tokens measured for the prompt before the stream
        :param total_tokens: Tokens measured for the prompt plus full response
        :param generated_chunks: Number of chunks received from the stream
        :param start_time: Clock reading in seconds when the stream was started
        :param first_chunk_time: Clock reading in seconds at the first chunk, or
            None if the stream produced no chunks
        :param end_time: Clock reading in seconds when the stream was exhausted
        :param first_chunk_content: Content of the first chunk, if any
        :return: The compiled metrics record
        """
        e2e_time = max(end_time - start_time, 0.0) * 1000.0
        time_to_first_chunk = (
            min(max(first_chunk_time - start_time, 0.0) * 1000.0, e2e_time)
            if first_chunk_time is not None
            else e2e_time
        )
        decode_time = e2e_time - time_to_first_chunk
        # A single chunk has no decode phase to measure
        has_decode_phase = generated_chunks > 1

        raw_generated_tokens = total_tokens - prompt_tokens
        generated_tokens = max(raw_generated_tokens, 0)

        return cls(
            prompt_tokens=prompt_tokens,
            generated_chunks=generated_chunks,
            generated_tokens=generated_tokens,
            total_tokens=total_tokens,
            time_to_first_chunk=time_to_first_chunk,
            decode_time=decode_time,
            e2e_time=e2e_time,
            chunks_per_second_e2e=safe_rate(generated_chunks, e2e_time),
            tokens_per_seconds_e2e=safe_rate(generated_tokens, e2e_time),
            prompt_tps=safe_rate(prompt_tokens, time_to_first_chunk),
            decode_cps=safe_rate(generated_chunks - 1, decode_time),
            decode_tps=(
                safe_rate(generated_tokens - 1, decode_time)
                if has_decode_phase
                else 0.0
            ),
            first_chunk_content=(
                first_chunk_content
                if generated_chunks > 0 and first_chunk_content is not None
                else NO_FIRST_CHUNK
            ),
            token_count_anomaly=raw_generated_tokens < 0,
        )


class AverageMetrics(StandardBaseModel):
    """
    Arithmetic mean of every numeric field across measured generations.

    Numeric fields are None when no generation was measured.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    rounds: int = Field(
        default=0, ge=0, description="Number of measured generations averaged"
    )
    prompt_tokens: float | None = None
    generated_chunks: float | None = None
    generated_tokens: float | None = None
    total_tokens: float | None = None
    time_to_first_chunk: float | None = None
    decode_time: float | None = None
    e2e_time: float | None = None
    chunks_per_second_e2e: float | None = None
    tokens_per_seconds_e2e: float | None = None
    prompt_tps: float | None = None
    decode_cps: float | None = None
    decode_tps: float | None = None
    first_chunk_content: Literal["unavailable"] = UNAVAILABLE

    @property
    def is_empty(self) -> bool:
        """
        :return: True if no generations contributed to the averages
        """
        return self.rounds == 0


class GenerationResult(StandardBaseModel):
    """Full response text and metrics for one completed generation."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    response_text: str = Field(description="Concatenation of all received chunks")
    metrics: GenerationMetrics = Field(description="Metrics for the generation")
    is_warmup: bool = Field(
        default=False, description="Whether the generation was a discarded warm-up"
    )
