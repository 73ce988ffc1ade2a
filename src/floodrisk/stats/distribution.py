"""Distribution statistics for ranking and classing parcel values.

Both builders sort a private copy of the finite input values once; the
resulting objects are read-only and cheap to query.
"""

from __future__ import annotations

import math
import numbers
from bisect import bisect_left, bisect_right
from collections.abc import Iterable
from typing import Any

import numpy as np
from pydantic import BaseModel


def as_finite(value: Any) -> float | None:
    """``value`` as a float if it is a finite real number, else ``None``."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return None
    number = float(value)
    return number if math.isfinite(number) else None


def finite_values(values: Iterable[Any]) -> list[float]:
    """Keep the finite real numbers of ``values``, dropping everything else."""
    return [number for number in map(as_finite, values) if number is not None]


class PercentileRanker:
    """Percentile rank of a value within a fixed distribution, in [0, 1].

    Ties rank at the mean position of all equal entries; values between two
    stored entries are interpolated between their positions. A distribution
    with a single distinct value ranks every finite query at 0.5.
    """

    def __init__(self, values: Iterable[Any]) -> None:
        self._sorted: tuple[float, ...] = tuple(sorted(finite_values(values)))

    def __len__(self) -> int:
        return len(self._sorted)

    def __call__(self, value: Any) -> float | None:
        value = as_finite(value)
        if value is None:
            return None
        ordered = self._sorted
        if not ordered:
            return None
        if ordered[0] == ordered[-1]:
            return 0.5

        last = len(ordered) - 1
        if value <= ordered[0]:
            return 0.0
        if value >= ordered[last]:
            return 1.0

        first = bisect_left(ordered, value)
        if ordered[first] == value:
            last_equal = bisect_right(ordered, value) - 1
            return (first + last_equal) / 2 / last

        below = ordered[first - 1]
        above = ordered[first]
        position = first - 1 + (value - below) / (above - below)
        return position / last


def build_percentile_ranker(values: Iterable[Any]) -> PercentileRanker:
    return PercentileRanker(values)


class QuantileBreakSet(BaseModel):
    """Thresholds splitting a distribution into ``class_count`` ordered classes.

    ``thresholds`` has ``class_count - 1`` non-decreasing entries, or none when
    the distribution was empty.
    """

    model_config = {"frozen": True}

    class_count: int
    thresholds: tuple[float, ...] = ()

    def class_of(self, value: Any) -> int:
        """Index of the class ``value`` falls in (0 is the lowest).

        A value equal to a threshold belongs to the class below it. Unknown
        values, or an empty break set, land in the middle class.
        """
        value = as_finite(value)
        if value is None or not self.thresholds:
            return self.class_count // 2
        for index, threshold in enumerate(self.thresholds):
            if value <= threshold:
                return index
        return self.class_count - 1


def build_quantile_breaks(values: Iterable[Any], class_count: int = 5) -> QuantileBreakSet:
    """Quantile thresholds at fractions 1/N .. (N-1)/N of the sorted values.

    Each threshold is the stored value at ``floor(fraction * (n - 1))``,
    taken with exact integer index arithmetic. Outlier exclusion is the
    caller's job.
    """
    if class_count < 1:
        raise ValueError(f"class_count must be at least 1, got {class_count}")

    ordered = np.sort(np.asarray(finite_values(values), dtype=float))
    if ordered.size == 0:
        return QuantileBreakSet(class_count=class_count)

    span = ordered.size - 1
    indices = np.minimum(span, (np.arange(1, class_count) * span) // class_count)
    thresholds = tuple(float(value) for value in ordered[indices])
    return QuantileBreakSet(class_count=class_count, thresholds=thresholds)


class DistributionSummary(BaseModel):
    model_config = {"frozen": True}

    count: int
    minimum: float
    maximum: float


def summarize(values: Iterable[Any]) -> DistributionSummary | None:
    kept = finite_values(values)
    if not kept:
        return None
    return DistributionSummary(count=len(kept), minimum=min(kept), maximum=max(kept))
