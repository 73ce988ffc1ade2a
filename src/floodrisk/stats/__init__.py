"""Percentile ranking and quantile breaks."""

from floodrisk.stats.distribution import (
    DistributionSummary,
    PercentileRanker,
    QuantileBreakSet,
    build_percentile_ranker,
    build_quantile_breaks,
    summarize,
)

__all__ = [
    "DistributionSummary",
    "PercentileRanker",
    "QuantileBreakSet",
    "build_percentile_ranker",
    "build_quantile_breaks",
    "summarize",
]
