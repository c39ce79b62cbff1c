"""
In-process mock capability simulating a streaming text-generation model.

Simulates model availability, model download progress, time to first chunk,
inter-chunk latency, and output length with configurable normal distributions,
so benchmarks can be exercised end to end without a model. Generated text is
reproducible fake text; token counts come from a regex tokenizer or, when a
processor is configured, from a HuggingFace tokenizer.
"""

from __future__ import annotations

import asyncio
import random
import re
from collections.abc import AsyncIterator
from typing import Any, Literal, Protocol

from faker import Faker
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from streambench.capabilities.capability import (
    AvailabilityState,
    Capability,
    CapabilitySession,
    DownloadProgressCallback,
)
from streambench.logger import logger

__all__ = [
    "MockCapability",
    "MockCapabilityConfig",
    "MockCapabilitySession",
    "RegexTokenizer",
    "sample_number",
]


class MockCapabilityConfig(BaseSettings):
    """
    Configuration for the simulated capability.

    Environment variables with the STREAMBENCH_MOCK_ prefix override the defaults.

    Example:
    ::
        config = MockCapabilityConfig(ttft_ms=80, itl_ms=5, output_tokens=64)
        # STREAMBENCH_MOCK_AVAILABILITY=downloadable streambench benchmark "Hi"
    """

    model_config = SettingsConfigDict(
        env_prefix="STREAMBENCH_MOCK_", case_sensitive=False, extra="ignore"
    )

    model: str = Field(
        default="mock-llm", description="Model name reported by the capability"
    )
    processor: str | None = Field(
        default=None,
        description=(
            "HuggingFace tokenizer used for token measurement. "
            "If None, a regex tokenizer is used."
        ),
    )
    present: bool = Field(
        default=True, description="Whether the capability is detected at all"
    )
    availability: Literal["available", "downloadable", "downloading", "unavailable"] = (
        Field(default="available", description="Reported model availability")
    )
    download_steps: int = Field(
        default=10, ge=1, description="Progress events emitted while downloading"
    )
    download_ms: float = Field(
        default=500.0, ge=0, description="Total simulated download time"
    )
    ttft_ms: float = Field(
        default=150.0, ge=0, description="Time to first chunk in milliseconds"
    )
    ttft_ms_std: float = Field(
        default=0.0, ge=0, description="Standard deviation of the time to first chunk"
    )
    itl_ms: float = Field(
        default=10.0, ge=0, description="Latency between chunks in milliseconds"
    )
    itl_ms_std: float = Field(
        default=0.0, ge=0, description="Standard deviation of the inter-chunk latency"
    )
    output_tokens: int = Field(
        default=128, ge=0, description="Number of tokens generated per response"
    )
    output_tokens_std: float = Field(
        default=0.0, ge=0, description="Standard deviation of the output tokens"
    )
    tokens_per_chunk: int = Field(
        default=1, ge=1, description="Tokens grouped into each streamed chunk"
    )
    fail_session_creates: list[int] = Field(
        default_factory=list,
        description="One-based session creation attempts that fail",
    )
    fail_after_chunks: int | None = Field(
        default=None,
        ge=0,
        description="Raise mid-stream after this many chunks, if set",
    )
    seed: int = Field(default=42, description="Seed for reproducible text and timing")


class TokenizerLike(Protocol):
    def tokenize(self, text: str) -> list[str]: ...


class RegexTokenizer:
    """Splits text into words, punctuation, and whitespace runs."""

    def tokenize(self, text: str) -> list[str]:
        return re.findall(r"\w+|[^\w\s]|\s+", text)


def sample_number(mean: float, standard_dev: float, rng: random.Random) -> float:
    """
    Sample a non-negative value from a normal distribution.

    :param mean: Mean of the distribution
    :param standard_dev: Standard deviation; 0 always returns the mean
    :param rng: Random generator to sample from
    :return: The sampled value, clamped at zero
    """
    if standard_dev <= 0:
        return max(mean, 0.0)

    return max(rng.gauss(mean, standard_dev), 0.0)


def _load_tokenizer(processor: str | None) -> TokenizerLike:
    if processor is None:
        return RegexTokenizer()

    from transformers import AutoTokenizer  # noqa: PLC0415

    return AutoTokenizer.from_pretrained(processor)


class MockCapabilitySession(CapabilitySession):
    """
    Session streaming reproducible fake text with simulated latencies.
    """

    def __init__(
        self,
        config: MockCapabilityConfig,
        tokenizer: TokenizerLike,
        seed: int,
    ):
        super().__init__()
        self.config = config
        self.tokenizer = tokenizer
        self.seed = seed
        self.generations = 0

    async def measure_tokens(self, text: str) -> int:
        self.check_active()

        return len(self.tokenizer.tokenize(text))

    async def stream_generate(self, prompt: str) -> AsyncIterator[str]:  # type: ignore[override]
        self.check_active()

        rng = random.Random(f"{self.seed}:{self.generations}:{prompt}")
        self.generations += 1
        num_tokens = round(
            sample_number(
                self.config.output_tokens, self.config.output_tokens_std, rng
            )
        )
        tokens = self._create_fake_tokens(num_tokens, rng.randint(0, 2**31))
        chunks = [
            "".join(tokens[ind : ind + self.config.tokens_per_chunk])
            for ind in range(0, len(tokens), self.config.tokens_per_chunk)
        ]

        await asyncio.sleep(
            sample_number(self.config.ttft_ms, self.config.ttft_ms_std, rng) / 1000.0
        )
        for index, chunk in enumerate(chunks):
            if (
                self.config.fail_after_chunks is not None
                and index >= self.config.fail_after_chunks
            ):
                raise RuntimeError(
                    f"Simulated stream failure after {index} chunks."
                )

            if index > 0:
                await asyncio.sleep(
                    sample_number(self.config.itl_ms, self.config.itl_ms_std, rng)
                    / 1000.0
                )
            yield chunk

    async def close(self):
        logger.debug(f"Mock session released after {self.generations} generations")

    def _create_fake_tokens(self, num_tokens: int, seed: int) -> list[str]:
        fake = Faker()
        fake.seed_instance(seed)
        tokens: list[str] = []

        while len(tokens) < num_tokens:
            text = fake.text(max_nb_chars=max((num_tokens - len(tokens)) * 10, 20))
            new_tokens = RegexTokenizer().tokenize(text)

            if tokens:
                new_tokens = [" ", *new_tokens]

            tokens += new_tokens[: num_tokens - len(tokens)]

        return tokens


@Capability.register("mock")
class MockCapability(Capability):
    """
    Simulated capability creating :class:`MockCapabilitySession` instances.

    Example:
    ::
        capability = MockCapability(ttft_ms=50, availability="downloadable")
        session = await capability.create_session(progress_callback)
        async for chunk in session.stream_generate("Hello"):
            print(chunk)
    """

    def __init__(self, config: MockCapabilityConfig | None = None, **kwargs):
        """
        :param config: Complete configuration; when omitted one is built from the
            environment and the keyword arguments
        :param kwargs: Overrides for :class:`MockCapabilityConfig` fields
        """
        super().__init__(type_="mock")
        self.config = config or MockCapabilityConfig(**kwargs)
        self.session_creates = 0
        self._downloaded = self.config.availability != "downloadable"
        self._tokenizer: TokenizerLike | None = None

    @property
    def info(self) -> dict[str, Any]:
        return {
            "type": self.type_,
            "model": self.config.model,
            "processor": self.config.processor,
            "ttft_ms": self.config.ttft_ms,
            "itl_ms": self.config.itl_ms,
            "output_tokens": self.config.output_tokens,
            "tokens_per_chunk": self.config.tokens_per_chunk,
        }

    async def probe(self) -> bool:
        return self.config.present

    async def availability(self) -> AvailabilityState:
        if not self.config.present:
            return "unavailable"

        if self.config.availability == "downloadable" and self._downloaded:
            return "available"

        return self.config.availability

    async def create_session(
        self, progress_callback: DownloadProgressCallback | None = None
    ) -> MockCapabilitySession:
        self.session_creates += 1

        if self.session_creates in self.config.fail_session_creates:
            raise RuntimeError(
                f"Simulated failure creating session {self.session_creates}."
            )

        if not self._downloaded:
            steps = self.config.download_steps
            for step in range(steps + 1):
                if step > 0:
                    await asyncio.sleep(self.config.download_ms / steps / 1000.0)
                if progress_callback is not None:
                    await progress_callback(100.0 * step / steps)
            self._downloaded = True

        if self._tokenizer is None:
            self._tokenizer = _load_tokenizer(self.config.processor)

        return MockCapabilitySession(
            config=self.config,
            tokenizer=self._tokenizer,
            seed=self.config.seed + self.session_creates,
        )
