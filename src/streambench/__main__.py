"""
Streambench command-line interface entry point.

Runs a single measured generation or a repeated-rounds benchmark against a
streaming text-generation capability and prints the live response, status
updates, and a metrics table. Capabilities are selected by name and configured
through CLI options and environment variables.

Example:
::
    # Single generation against the simulated capability
    streambench generate "Explain KV caching in two sentences."

    # Five-round benchmark against an OpenAI-compatible server
    streambench benchmark "Explain KV caching." --capability openai_http \\
        --target http://localhost:8000 --rounds 5
"""

from __future__ import annotations

import asyncio

import click

try:
    import uvloop
except ImportError:
    uvloop = None  # type: ignore[assignment] # Optional dependency

from streambench.benchmark import (
    ConsoleReportingSink,
    benchmark_generation,
    generate_response,
)
from streambench.capabilities import CapabilityType
from streambench.settings import print_config, settings
from streambench.utils import Console, get_literal_vals
from streambench.utils import cli as cli_tools

__all__ = ["benchmark", "cli", "config", "generate"]


CAPABILITY_CHOICES = get_literal_vals(CapabilityType)


def capability_options(func):
    """Attach the options shared by every capability-driven command."""
    options = [
        click.option(
            "--capability",
            type=click.Choice(CAPABILITY_CHOICES),
            default=None,
            help=(
                "Generation capability to use. "
                f"Defaults to {settings.preferred_capability}."
            ),
        ),
        click.option(
            "--capability-kwargs",
            callback=cli_tools.parse_json,
            default=None,
            help=(
                "JSON string or key=value pairs of arguments for the capability, "
                'e.g. \'{"ttft_ms": 50}\' or ttft_ms=50,itl_ms=5.'
            ),
        ),
        click.option(
            "--target",
            type=str,
            default=None,
            help="Target URL for the openai_http capability.",
        ),
        click.option(
            "--model",
            type=str,
            default=None,
            help="Model to generate with. Defaults to the capability's default.",
        ),
        click.option(
            "--disable-console-outputs",
            is_flag=True,
            help="Disable all console outputs.",
        ),
    ]
    for option in reversed(options):
        func = option(func)

    return func


def resolve_capability_kwargs(
    capability_kwargs: dict | None, target: str | None, model: str | None
) -> dict:
    if capability_kwargs is not None and not isinstance(capability_kwargs, dict):
        raise click.BadParameter(
            "Capability arguments must be a JSON object or key=value pairs.",
            ctx=click.get_current_context(),
            param_hint="--capability-kwargs",
        )

    kwargs = dict(capability_kwargs or {})
    if target is not None:
        kwargs["target"] = target
    if model is not None:
        kwargs["model"] = model

    return kwargs


def run_operation(operation):
    if uvloop is not None:
        asyncio.set_event_loop_policy(uvloop.EventLoopPolicy())
    result = asyncio.run(operation)

    if result is None:
        raise SystemExit(1)

    return result


@click.group()
@click.version_option(
    package_name="streambench", message="streambench version: %(version)s"
)
def cli():
    """Streambench CLI for measuring streaming text-generation latency."""


@cli.command(
    help=(
        "Run a single measured generation and display the response and its "
        "metrics.\n\nPROMPT: Prompt to generate a response for."
    ),
    context_settings={"auto_envvar_prefix": "STREAMBENCH"},
)
@click.argument("prompt", type=str)
@capability_options
def generate(
    prompt, capability, capability_kwargs, target, model, disable_console_outputs
):
    console = Console(quiet=disable_console_outputs)
    run_operation(
        generate_response(
            prompt,
            capability=capability,
            sink=ConsoleReportingSink(console),
            console=console,
            **resolve_capability_kwargs(capability_kwargs, target, model),
        )
    )


@cli.command(
    help=(
        "Run a repeated-rounds benchmark, each round a discarded warm-up "
        "followed by a measured generation against a fresh session.\n\n"
        "PROMPT: Prompt for the measured generations."
    ),
    context_settings={"auto_envvar_prefix": "STREAMBENCH"},
)
@click.argument("prompt", type=str)
@click.option(
    "--rounds",
    type=click.IntRange(min=1),
    default=settings.benchmark.rounds,
    show_default=True,
    help="Number of benchmark rounds.",
)
@click.option(
    "--warmup-prompt",
    type=str,
    default=settings.benchmark.warmup_prompt,
    show_default=True,
    help="Prompt for the discarded warm-up generation of each round.",
)
@capability_options
def benchmark(
    prompt,
    rounds,
    warmup_prompt,
    capability,
    capability_kwargs,
    target,
    model,
    disable_console_outputs,
):
    console = Console(quiet=disable_console_outputs)
    run_operation(
        benchmark_generation(
            prompt,
            rounds=rounds,
            warmup_prompt=warmup_prompt,
            capability=capability,
            sink=ConsoleReportingSink(console),
            console=console,
            **resolve_capability_kwargs(capability_kwargs, target, model),
        )
    )


@cli.command(
    short_help="Show configuration settings.",
    help="Display environment variables for configuring streambench behavior.",
)
def config():
    print_config()


if __name__ == "__main__":
    cli()
