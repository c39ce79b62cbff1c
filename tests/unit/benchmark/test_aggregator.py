"""
Unit tests for the metrics aggregator.
"""

from __future__ import annotations

import math

import pytest

from streambench.benchmark import AVERAGED_FIELDS, average_metrics
from streambench.schemas import UNAVAILABLE, AverageMetrics, GenerationMetrics


def make_metrics(scale: float = 1.0, chunks: int = 2) -> GenerationMetrics:
    return GenerationMetrics.compile(
        prompt_tokens=2,
        total_tokens=2 + 4 * chunks,
        generated_chunks=chunks,
        start_time=0.0,
        first_chunk_time=0.010 * scale,
        end_time=0.015 * scale,
        first_chunk_content="Hi",
    )


@pytest.mark.smoke
def test_averaged_fields_cover_numeric_metrics():
    """Test that every numeric metric field is averaged."""
    numeric = {
        name
        for name, value in make_metrics().model_dump().items()
        if isinstance(value, int | float) and not isinstance(value, bool)
    }
    assert set(AVERAGED_FIELDS) == numeric
    assert set(AVERAGED_FIELDS) <= set(AverageMetrics.model_fields)


@pytest.mark.smoke
@pytest.mark.parametrize("count", [1, 3, 5])
def test_identical_records_average_to_themselves(count):
    """Test that the mean of identical records equals the record."""
    metrics = make_metrics()
    average = average_metrics([metrics] * count)

    assert average.rounds == count
    for name in AVERAGED_FIELDS:
        assert getattr(average, name) == pytest.approx(getattr(metrics, name))
    assert average.first_chunk_content == UNAVAILABLE


@pytest.mark.smoke
def test_empty_input():
    """Test that an empty input yields an empty average without NaN."""
    average = average_metrics([])

    assert average.is_empty
    assert average.rounds == 0
    for name in AVERAGED_FIELDS:
        assert getattr(average, name) is None


@pytest.mark.sanity
def test_mean_divides_by_measured_rounds():
    """Test that the divisor is the number of measured records."""
    first = make_metrics(scale=1.0, chunks=2)
    second = make_metrics(scale=3.0, chunks=4)

    average = average_metrics([first, second])

    assert average.rounds == 2
    assert average.e2e_time == pytest.approx((15.0 + 45.0) / 2)
    assert average.generated_chunks == pytest.approx(3.0)
    assert average.generated_tokens == pytest.approx((8 + 16) / 2)
    assert average.decode_cps == pytest.approx(
        (first.decode_cps + second.decode_cps) / 2
    )


@pytest.mark.regression
def test_average_is_pure():
    """Test that averaging is deterministic and leaves its input untouched."""
    records = [make_metrics(scale=1.0), make_metrics(scale=2.0)]
    snapshot = [record.model_dump() for record in records]

    assert average_metrics(records) == average_metrics(records)
    assert [record.model_dump() for record in records] == snapshot
    assert all(
        math.isfinite(getattr(average_metrics(records), name))
        for name in AVERAGED_FIELDS
    )
