"""
Repeated-rounds benchmark orchestration.

Runs a fixed number of strictly sequential rounds, each against a freshly created
session: a discarded warm-up generation absorbs one-time model load latency, then
a measured generation produces the round's metrics. Rounds whose session cannot
be created are skipped; any other failure aborts the run after releasing the
session.
"""

from __future__ import annotations

from streambench.errors import EmptyPromptError, SessionError
from streambench.logger import logger
from streambench.schemas import BenchmarkRun, GenerationMetrics
from streambench.settings import settings

from .aggregator import average_metrics
from .progress import ReportingSink
from .runner import GenerationRunner
from .session import SessionManager

__all__ = ["BenchmarkOrchestrator"]


class BenchmarkOrchestrator:
    """
    Sequences warm-up and measured generations over benchmark rounds.

    Example:
    ::
        orchestrator = BenchmarkOrchestrator(sessions, GenerationRunner(sink), sink)
        run = await orchestrator.run("Explain attention in one paragraph.")
        print(run.average.decode_tps)
    """

    def __init__(
        self,
        sessions: SessionManager,
        runner: GenerationRunner,
        sink: ReportingSink,
    ):
        self.sessions = sessions
        self.runner = runner
        self.sink = sink

    async def run(
        self,
        prompt: str,
        rounds: int | None = None,
        warmup_prompt: str | None = None,
    ) -> BenchmarkRun:
        """
        Run the benchmark and report the per-round and averaged metrics.

        :param prompt: Prompt for the measured generation of every round
        :param rounds: Number of rounds, settings.benchmark.rounds if None
        :param warmup_prompt: Prompt for the warm-up generations,
            settings.benchmark.warmup_prompt if None
        :return: The per-round metrics and their average
        :raises EmptyPromptError: If the prompt is empty
        :raises GenerationFailedError: If any generation fails, aborting the run
        """
        if not prompt:
            raise EmptyPromptError("Please enter a prompt for benchmarking.")

        rounds = rounds if rounds is not None else settings.benchmark.rounds
        warmup_prompt = (
            warmup_prompt
            if warmup_prompt is not None
            else settings.benchmark.warmup_prompt
        )
        if rounds < 1:
            raise ValueError(f"rounds must be at least 1, got {rounds}")

        metrics: list[GenerationMetrics] = []
        completed_rounds: list[int] = []
        skipped_rounds: list[int] = []

        await self.sink.on_status("Starting benchmark...")

        try:
            for index in range(1, rounds + 1):
                label = f"{index}/{rounds}"

                try:
                    session = await self.sessions.ensure_session(
                        f" for round {label}"
                    )
                except SessionError as err:
                    logger.warning(f"Skipping benchmark round {label}: {err}")
                    skipped_rounds.append(index)
                    continue

                await self.sink.on_status(f"Running warm-up for round {label}...")
                await self.sink.on_output_text(
                    f"Benchmarking... Warm-up for Round {label}"
                )
                await self.runner.generate(session, warmup_prompt, is_warmup=True)

                await self.sink.on_status(f"Running measured round {label}...")
                await self.sink.on_output_text(
                    f"Benchmarking... Measured Round {label}"
                )
                result = await self.runner.generate(session, prompt, is_warmup=False)
                metrics.append(result.metrics)
                completed_rounds.append(index)
                await self.sink.on_status(f"Measured round {label} completed.")
        finally:
            await self.sessions.release()

        average = average_metrics(metrics)
        logger.info(
            f"Benchmark averages over {average.rounds} of {rounds} rounds: "
            f"{average.model_dump(exclude={'first_chunk_content'})}"
        )

        await self.sink.on_output_text("Benchmark results are in the table below.")
        await self.sink.on_results_table(
            metrics, average, rounds, round_indices=completed_rounds
        )
        await self.sink.on_status(
            f"Benchmark complete after {rounds} rounds. Results displayed below.",
            "success",
        )

        return BenchmarkRun(
            prompt=prompt,
            warmup_prompt=warmup_prompt,
            configured_rounds=rounds,
            metrics=metrics,
            completed_rounds=completed_rounds,
            skipped_rounds=skipped_rounds,
            average=average,
        )
