"""
Console table output for generation metrics.

Renders per-round metrics as one column per measured round, with an Average column
for multi-round benchmarks or a single Result column for one-off generations. Time
metrics are displayed in seconds and every number with two decimals.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from streambench.schemas import AverageMetrics, GenerationMetrics
from streambench.utils import Console, safe_format_number

__all__ = ["METRIC_ROWS", "MetricRow", "MetricsTableConsole"]


@dataclass(frozen=True)
class MetricRow:
    """
    Display definition for one metric row.

    :cvar key: Field name on the metrics records
    :cvar name: Display name of the row
    :cvar is_time: Whether the value is milliseconds displayed as seconds
    """

    key: str
    name: str
    is_time: bool = False


METRIC_ROWS: tuple[MetricRow, ...] = (
    MetricRow("prompt_tokens", "Prompt Tokens"),
    MetricRow("generated_chunks", "Total Generated Chunks"),
    MetricRow("generated_tokens", "Total Generated Tokens (API measured)"),
    MetricRow("time_to_first_chunk", "Time to First Chunk [seconds]", is_time=True),
    MetricRow("decode_time", "Decode Time [seconds]", is_time=True),
    MetricRow("e2e_time", "End-to-End Time [seconds]", is_time=True),
    MetricRow("decode_cps", "Decode Chunks Per Second"),
    MetricRow("decode_tps", "Decode Tokens Per Second (API measured)"),
    MetricRow("chunks_per_second_e2e", "E2E Chunks Per Second"),
    MetricRow("tokens_per_seconds_e2e", "E2E Tokens Per Second (API measured)"),
)


class MetricsTableConsole:
    """
    Formats and prints the metrics table for single runs and benchmarks.

    Example:
    ::
        table = MetricsTableConsole(Console())
        table.print_results_table(run.metrics, run.average, run.configured_rounds)
    """

    def __init__(self, console: Console | None = None):
        """
        :param console: Console to print to; a new one is created if omitted
        """
        self.console = console or Console()

    def print_results_table(
        self,
        per_round_metrics: Sequence[GenerationMetrics],
        average: AverageMetrics | None,
        round_count: int,
        round_indices: Sequence[int] | None = None,
    ):
        """
        Print the metrics table.

        :param per_round_metrics: Metrics for each measured round, in order
        :param average: Averages across the measured rounds, if any
        :param round_count: Number of rounds that were configured
        :param round_indices: One-based round number of each measured round
        """
        headers, columns = self.build_table(
            per_round_metrics, average, round_count, round_indices
        )
        self.console.print_table(headers, columns, title="Generation Metrics")

    def build_table(
        self,
        per_round_metrics: Sequence[GenerationMetrics],
        average: AverageMetrics | None,
        round_count: int,
        round_indices: Sequence[int] | None = None,
    ) -> tuple[list[str], list[list[str]]]:
        """
        Build the headers and column-major cell values of the metrics table.

        :param per_round_metrics: Metrics for each measured round, in order
        :param average: Averages across the measured rounds, if any
        :param round_count: Number of rounds that were configured
        :param round_indices: One-based round number of each measured round,
            numbered by position if None
        :raises ValueError: If the round indices do not match the measured rounds
        :return: Tuple of (headers, columns)
        """
        if round_indices is None:
            round_indices = range(1, len(per_round_metrics) + 1)
        elif len(round_indices) != len(per_round_metrics):
            raise ValueError(
                f"Expected {len(per_round_metrics)} round indices, "
                f"got {len(round_indices)}"
            )

        headers = ["Metric"]
        columns = [[row.name for row in METRIC_ROWS]]

        if round_count > 1:
            headers += [f"Round {index}" for index in round_indices]
        else:
            headers += ["Result"] * len(per_round_metrics)

        for metrics in per_round_metrics:
            columns.append(
                [
                    self.format_value(getattr(metrics, row.key), row.is_time)
                    for row in METRIC_ROWS
                ]
            )

        if round_count > 1:
            headers.append("Average")
            columns.append(
                [
                    self.format_value(
                        getattr(average, row.key) if average is not None else None,
                        row.is_time,
                    )
                    for row in METRIC_ROWS
                ]
            )

        return headers, columns

    @staticmethod
    def format_value(value: float | int | None, is_time: bool = False) -> str:
        """
        :param value: Metric value, milliseconds for time metrics
        :param is_time: Whether to convert milliseconds to seconds
        :return: The value with two decimals, or N/A when undefined
        """
        if value is None:
            return "N/A"

        if is_time:
            return safe_format_number(value / 1000.0, precision=2)

        return safe_format_number(float(value), precision=2)
