"""
Reporting hooks for generation and benchmark progress.

Provides the reporting interface the core calls into while a single generation or
a benchmark is running, and a console implementation rendering status lines, the
live response text, and the final metrics table.

Classes:
    ReportingSink: Abstract receiver of status, output text, and results.
    ConsoleReportingSink: Rich console rendering of the reported events.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from rich.live import Live
from rich.panel import Panel
from rich.text import Text

from streambench.benchmark.outputs import MetricsTableConsole
from streambench.schemas import AverageMetrics, GenerationMetrics
from streambench.utils import Colors, Console, StatusLevel

__all__ = ["ConsoleReportingSink", "ReportingSink"]


class ReportingSink(ABC):
    """
    Abstract receiver for the events emitted by a generation or benchmark.

    Status messages describe the operation's progress, output text is the main
    display area (the growing response while streaming), and the results table is
    reported once per completed operation.
    """

    @abstractmethod
    async def on_status(self, message: str, level: StatusLevel = "info"):
        """
        Handle a status update.

        :param message: Human readable status message
        :param level: Severity of the status
        """

    @abstractmethod
    async def on_output_text(self, message: str):
        """
        Handle a replacement of the output text.

        :param message: Complete text to display
        """

    @abstractmethod
    async def on_results_table(
        self,
        per_round_metrics: Sequence[GenerationMetrics],
        average: AverageMetrics | None,
        round_count: int,
        round_indices: Sequence[int] | None = None,
    ):
        """
        Handle the final metrics of an operation.

        :param per_round_metrics: Metrics for each measured generation, in order
        :param average: Averages across rounds, None for single generations
        :param round_count: Number of rounds that were configured
        :param round_indices: One-based round number of each measured generation,
            positional numbering if None
        """

    async def on_finalize(self):
        """Release any display resources once an operation has ended."""


class ConsoleReportingSink(ReportingSink):
    """
    Console reporting with a live panel for the output text.

    Status messages are printed as persistent lines above a live panel showing the
    current output text. The panel is frozen when results are reported or the
    operation ends.
    """

    def __init__(self, console: Console | None = None):
        """
        :param console: Console to render to; a new one is created if omitted
        """
        self.console = console or Console()
        self.table = MetricsTableConsole(self.console)
        self.output_text: str = ""
        self._live: Live | None = None

    async def on_status(self, message: str, level: StatusLevel = "info"):
        self.console.print_update(message, status=level)

    async def on_output_text(self, message: str):
        self.output_text = message

        if self._live is None:
            self._live = Live(
                self._render_output(),
                console=self.console,
                refresh_per_second=8,
                auto_refresh=True,
            )
            self._live.start()
        else:
            self._live.update(self._render_output())

    async def on_results_table(
        self,
        per_round_metrics: Sequence[GenerationMetrics],
        average: AverageMetrics | None,
        round_count: int,
        round_indices: Sequence[int] | None = None,
    ):
        self._stop_live()
        self.table.print_results_table(
            per_round_metrics, average, round_count, round_indices
        )

    async def on_finalize(self):
        self._stop_live()

    def _render_output(self) -> Panel:
        return Panel(
            Text(self.output_text),
            title="Output",
            title_align="left",
            border_style=Colors.progress,
            expand=True,
        )

    def _stop_live(self):
        if self._live is not None:
            self._live.update(self._render_output(), refresh=True)
            self._live.stop()
            self._live = None
