from .aggregator import AVERAGED_FIELDS, average_metrics
from .entrypoints import benchmark_generation, generate_response, resolve_capability
from .orchestrator import BenchmarkOrchestrator
from .outputs import METRIC_ROWS, MetricRow, MetricsTableConsole
from .progress import ConsoleReportingSink, ReportingSink
from .runner import GenerationRunner
from .session import SessionManager
from .state import ControlStates, OperationMode, OperationState

__all__ = [
    "AVERAGED_FIELDS",
    "METRIC_ROWS",
    "BenchmarkOrchestrator",
    "ConsoleReportingSink",
    "ControlStates",
    "GenerationRunner",
    "MetricRow",
    "MetricsTableConsole",
    "OperationMode",
    "OperationState",
    "ReportingSink",
    "SessionManager",
    "average_metrics",
    "benchmark_generation",
    "generate_response",
    "resolve_capability",
]
