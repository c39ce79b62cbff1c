"""
Primary interface for running single generations and repeated-rounds benchmarks.

Both entry points resolve the requested capability, run the operation with a
dedicated session manager, and convert any failure into a user-visible status
message. Whatever the outcome, the held session is released, the operation state
returns to idle, and the reporting sink is finalized, so every operation can be
invoked again right away.
"""

from __future__ import annotations

from typing import Any

from typing_extensions import TypeAliasType

from streambench.benchmark.orchestrator import BenchmarkOrchestrator
from streambench.benchmark.progress import ConsoleReportingSink, ReportingSink
from streambench.benchmark.runner import GenerationRunner
from streambench.benchmark.session import SessionManager
from streambench.benchmark.state import OperationState
from streambench.capabilities import Capability, CapabilityType
from streambench.errors import EmptyPromptError
from streambench.logger import logger
from streambench.schemas import BenchmarkRun, GenerationResult
from streambench.settings import settings
from streambench.utils import Console

__all__ = [
    "CapabilityInputT",
    "benchmark_generation",
    "generate_response",
    "resolve_capability",
]


CapabilityInputT = TypeAliasType(
    "CapabilityInputT", CapabilityType | str | Capability | None
)
"""Capability as a registered type name or a configured instance"""


async def resolve_capability(
    capability: CapabilityInputT = None,
    console: Console | None = None,
    **capability_kwargs: Any,
) -> tuple[Capability, bool]:
    """
    Create the capability if needed and probe its presence once.

    :param capability: Capability type name or a configured Capability instance;
        settings.preferred_capability if None
    :param console: Console instance for progress reporting, or None
    :param capability_kwargs: Additional arguments for the capability constructor
    :return: Tuple of the Capability instance and whether it is present
    """
    if capability is None:
        capability = settings.preferred_capability

    console_step = (
        console.print_update_step(title=f"Initializing capability {capability}")
        if console
        else None
    )
    capability_instance = (
        Capability.create(capability, **capability_kwargs)
        if not isinstance(capability, Capability)
        else capability
    )

    if console_step:
        console_step.update(
            f"{capability_instance.__class__.__name__} capability initialized, "
            "probing presence"
        )

    present = await capability_instance.probe()

    if console_step:
        console_step.finish(
            title=(
                f"{capability_instance.__class__.__name__} capability "
                f"{'detected' if present else 'not detected'}"
            ),
            details=capability_instance.info,
            status_level="success" if present else "warning",
        )

    if not present:
        logger.warning(
            f"Generation capability {capability_instance.type_} is not present"
        )

    return capability_instance, present


async def generate_response(
    prompt: str,
    capability: CapabilityInputT = None,
    sink: ReportingSink | None = None,
    state: OperationState | None = None,
    console: Console | None = None,
    **capability_kwargs: Any,
) -> GenerationResult | None:
    """
    Run a single measured generation and report its response and metrics.

    :param prompt: Prompt to generate a response for; surrounding whitespace
        is removed
    :param capability: Capability type name or a configured Capability instance
    :param sink: Receiver for status, output text, and results; a console sink
        is created if None
    :param state: Operation state to update, a new one is used if None
    :param console: Console for capability resolution progress, or None
    :param capability_kwargs: Additional arguments for the capability constructor
    :return: The generation result, or None if the operation failed
    """
    sink = sink or ConsoleReportingSink()
    state = state or OperationState()
    state.begin("single")
    sessions: SessionManager | None = None

    try:
        if not (prompt := prompt.strip()):
            raise EmptyPromptError()

        capability_instance, present = await resolve_capability(
            capability, console=console, **capability_kwargs
        )
        state.capability_present = present
        sessions = SessionManager(capability_instance, present, sink)
        session = await sessions.ensure_session()

        await sink.on_status("Generating response...")
        result = await GenerationRunner(sink).generate(session, prompt)

        await sink.on_output_text(result.response_text)
        await sink.on_status(
            "Response generated. Metrics displayed in the table below.", "success"
        )
        await sink.on_results_table([result.metrics], None, 1)

        return result
    except EmptyPromptError as err:
        await sink.on_status(str(err), "warning")
    except Exception as err:  # noqa: BLE001
        logger.error(f"Error generating response: {err}")
        await sink.on_status(f"Error: {err}", "error")
    finally:
        if sessions is not None:
            await sessions.release()
        state.end()
        await sink.on_finalize()

    return None


async def benchmark_generation(
    prompt: str,
    rounds: int | None = None,
    warmup_prompt: str | None = None,
    capability: CapabilityInputT = None,
    sink: ReportingSink | None = None,
    state: OperationState | None = None,
    console: Console | None = None,
    **capability_kwargs: Any,
) -> BenchmarkRun | None:
    """
    Run a repeated-rounds benchmark and report per-round and average metrics.

    :param prompt: Prompt for the measured generations; surrounding whitespace
        is removed
    :param rounds: Number of rounds, settings.benchmark.rounds if None
    :param warmup_prompt: Prompt for the warm-up generations,
        settings.benchmark.warmup_prompt if None
    :param capability: Capability type name or a configured Capability instance
    :param sink: Receiver for status, output text, and results; a console sink
        is created if None
    :param state: Operation state to update, a new one is used if None
    :param console: Console for capability resolution progress, or None
    :param capability_kwargs: Additional arguments for the capability constructor
    :return: The benchmark run, or None if the operation failed
    """
    sink = sink or ConsoleReportingSink()
    state = state or OperationState()
    state.begin("benchmark")
    sessions: SessionManager | None = None

    try:
        if not (prompt := prompt.strip()):
            raise EmptyPromptError("Please enter a prompt for benchmarking.")

        capability_instance, present = await resolve_capability(
            capability, console=console, **capability_kwargs
        )
        state.capability_present = present
        sessions = SessionManager(capability_instance, present, sink)
        orchestrator = BenchmarkOrchestrator(sessions, GenerationRunner(sink), sink)

        return await orchestrator.run(
            prompt, rounds=rounds, warmup_prompt=warmup_prompt
        )
    except EmptyPromptError as err:
        await sink.on_status(str(err), "warning")
    except Exception as err:  # noqa: BLE001
        logger.error(f"Error during benchmark: {err}")
        await sink.on_status(f"Benchmark Error: {err}", "error")
    finally:
        if sessions is not None:
            await sessions.release()
        state.end()
        await sink.on_finalize()

    return None
