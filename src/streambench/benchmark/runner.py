"""
Single streamed generation driver.

Consumes the chunk stream of one generation in arrival order and compiles the
timing and throughput metrics for it. The prompt is measured before the clock is
started so tokenization latency never counts toward the time to first chunk.
"""

from __future__ import annotations

import time
from collections.abc import Callable

from streambench.capabilities import CapabilitySession
from streambench.errors import EmptyPromptError, GenerationFailedError
from streambench.logger import logger
from streambench.schemas import GenerationMetrics, GenerationResult

from .progress import ReportingSink

__all__ = ["GenerationRunner"]


class GenerationRunner:
    """
    Runs warm-up and measured generations against an active session.

    Measured generations surface the growing response text to the sink after every
    chunk; warm-up generations display nothing.

    Example:
    ::
        runner = GenerationRunner(sink)
        result = await runner.generate(session, "Hello", is_warmup=False)
        print(result.metrics.time_to_first_chunk)
    """

    def __init__(
        self,
        sink: ReportingSink | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ):
        """
        :param sink: Receiver of the live output text, if any
        :param clock: Monotonic clock returning seconds
        """
        self.sink = sink
        self.clock = clock

    async def generate(
        self,
        session: CapabilitySession,
        prompt: str,
        is_warmup: bool = False,
    ) -> GenerationResult:
        """
        Stream one generation to completion and compile its metrics.

        :param session: Active session to generate with
        :param prompt: Non-empty prompt to generate a response for
        :param is_warmup: Suppress the live output text when True
        :return: The response text and its metrics
        :raises EmptyPromptError: If the prompt is empty
        :raises GenerationFailedError: If token measurement or the stream fails
        """
        if not prompt:
            raise EmptyPromptError()

        try:
            prompt_tokens = await session.measure_tokens(prompt)
        except Exception as err:
            logger.error(f"Failed to measure prompt tokens: {err}")
            raise GenerationFailedError(
                f"Failed to measure prompt tokens: {err}"
            ) from err

        generated_chunks = 0
        first_chunk_time: float | None = None
        first_chunk_content: str | None = None
        response_text = ""

        start_time = self.clock()
        try:
            async for chunk in session.stream_generate(prompt):
                generated_chunks += 1
                if first_chunk_time is None:
                    first_chunk_time = self.clock()
                    first_chunk_content = chunk
                response_text += chunk

                if not is_warmup and self.sink is not None:
                    await self.sink.on_output_text(response_text)
        except Exception as err:
            logger.error(
                f"Generation failed after {generated_chunks} chunks: {err}"
            )
            raise GenerationFailedError(f"Generation failed: {err}") from err
        end_time = self.clock()

        try:
            total_tokens = await session.measure_tokens(prompt + response_text)
        except Exception as err:
            logger.error(f"Failed to measure response tokens: {err}")
            raise GenerationFailedError(
                f"Failed to measure response tokens: {err}"
            ) from err

        metrics = GenerationMetrics.compile(
            prompt_tokens=prompt_tokens,
            total_tokens=total_tokens,
            generated_chunks=generated_chunks,
            start_time=start_time,
            first_chunk_time=first_chunk_time,
            end_time=end_time,
            first_chunk_content=first_chunk_content,
        )

        if metrics.token_count_anomaly:
            logger.warning(
                f"Measured {total_tokens} total tokens for prompt and response, "
                f"fewer than the {prompt_tokens} prompt tokens; "
                "generated tokens clamped to 0"
            )

        logger.debug(
            f"{'Warm-up' if is_warmup else 'Measured'} generation: "
            f"{metrics.generated_chunks} chunks, {metrics.generated_tokens} tokens, "
            f"ttfc {metrics.time_to_first_chunk:.2f} ms, "
            f"decode {metrics.decode_time:.2f} ms, e2e {metrics.e2e_time:.2f} ms"
        )

        return GenerationResult(
            response_text=response_text, metrics=metrics, is_warmup=is_warmup
        )
