"""
Result of a repeated-rounds benchmark invocation.
"""

from __future__ import annotations

from pydantic import Field, computed_field

from streambench.schemas.base import StandardBaseModel
from streambench.schemas.metrics import AverageMetrics, GenerationMetrics

__all__ = ["BenchmarkRun"]


class BenchmarkRun(StandardBaseModel):
    """
    Ordered per-round metrics of one benchmark invocation and their average.

    Rounds whose session could not be created are listed in ``skipped_rounds``
    and contribute nothing to ``metrics`` or ``average``.
    """

    prompt: str = Field(description="Prompt used for every measured generation")
    warmup_prompt: str = Field(description="Prompt used for the warm-up generations")
    configured_rounds: int = Field(ge=0, description="Number of rounds requested")
    metrics: list[GenerationMetrics] = Field(
        default_factory=list,
        description="Metrics for each measured round, in round order",
    )
    completed_rounds: list[int] = Field(
        default_factory=list,
        description="One-based indices of the rounds that produced metrics",
    )
    skipped_rounds: list[int] = Field(
        default_factory=list,
        description="One-based indices of the rounds skipped on session failure",
    )
    average: AverageMetrics = Field(
        default_factory=AverageMetrics,
        description="Average of the measured rounds",
    )

    @computed_field  # type: ignore[misc]
    @property
    def measured_rounds(self) -> int:
        """
        :return: Number of rounds that produced metrics
        """
        return len(self.metrics)
