"""
Averaging of per-round generation metrics.

The mean of each numeric field is taken over the rounds that actually produced
metrics, so rounds skipped on session failure do not skew the averages. An empty
input yields an empty average rather than NaN values.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from streambench.schemas import AverageMetrics, GenerationMetrics

__all__ = ["AVERAGED_FIELDS", "average_metrics"]


AVERAGED_FIELDS: tuple[str, ...] = (
    "prompt_tokens",
    "generated_chunks",
    "generated_tokens",
    "total_tokens",
    "time_to_first_chunk",
    "decode_time",
    "e2e_time",
    "chunks_per_second_e2e",
    "tokens_per_seconds_e2e",
    "prompt_tps",
    "decode_cps",
    "decode_tps",
)
"""Numeric fields of :class:`GenerationMetrics` that are averaged."""


def average_metrics(metrics: Sequence[GenerationMetrics]) -> AverageMetrics:
    """
    Compute the arithmetic mean of every numeric field across the metrics.

    Non-numeric fields are not averaged and are reported as ``unavailable``.

    :param metrics: Metrics for each measured round
    :return: The averaged metrics; every numeric field is None for an empty input
    """
    if not metrics:
        return AverageMetrics(rounds=0)

    values = np.array(
        [[float(getattr(item, name)) for name in AVERAGED_FIELDS] for item in metrics],
        dtype=np.float64,
    )
    means = values.mean(axis=0)

    return AverageMetrics(
        rounds=len(metrics),
        **{name: float(mean) for name, mean in zip(AVERAGED_FIELDS, means)},
    )
