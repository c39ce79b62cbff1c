"""
Pydantic schema models for streambench.

Provides the metrics records produced for each streamed generation, the
averaged summary across benchmark rounds, and the benchmark run result.
"""

from __future__ import annotations

from .base import StandardBaseModel
from .metrics import (
    NO_FIRST_CHUNK,
    UNAVAILABLE,
    AverageMetrics,
    GenerationMetrics,
    GenerationResult,
)
from .run import BenchmarkRun

__all__ = [
    "NO_FIRST_CHUNK",
    "UNAVAILABLE",
    "AverageMetrics",
    "BenchmarkRun",
    "GenerationMetrics",
    "GenerationResult",
    "StandardBaseModel",
]
