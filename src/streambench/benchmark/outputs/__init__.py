from .console import METRIC_ROWS, MetricRow, MetricsTableConsole

__all__ = ["METRIC_ROWS", "MetricRow", "MetricsTableConsole"]
