from __future__ import annotations

import math
from typing import List, Sequence

import numpy as np

from pfsim_core.domain.models import HistogramBucket

PERCENTILE_LEVELS = (10, 25, 50, 75, 90)
MONTHLY_SAMPLING_LIMIT = 60
YEARLY_STRIDE = 12
HISTOGRAM_BINS = 30


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """Linear-interpolated percentile of an ascending sequence; 0 when empty."""
    n = len(sorted_values)
    if n == 0:
        return 0.0
    idx = p / 100 * (n - 1)
    lo = math.floor(idx)
    hi = math.ceil(idx)
    if lo == hi:
        return float(sorted_values[lo])
    return float(sorted_values[lo] + (sorted_values[hi] - sorted_values[lo]) * (idx - lo))


def percentile_band(values: Sequence[float]) -> List[float]:
    """p10/p25/p50/p75/p90 of unsorted values."""
    ordered = np.sort(np.asarray(values, dtype=float))
    return [percentile(ordered, p) for p in PERCENTILE_LEVELS]


def sample_months(total_months: int) -> List[int]:
    """
    Month offsets reported as time steps: monthly up to five years, yearly
    beyond. Both the start and the final month are always included.
    """
    if total_months <= 0:
        return []
    stride = 1 if total_months <= MONTHLY_SAMPLING_LIMIT else YEARLY_STRIDE
    months = list(range(0, total_months + 1, stride))
    if months[-1] != total_months:
        months.append(total_months)
    return months


def survival_rate(final_values: Sequence[float]) -> float:
    """Share of paths (in %) that still hold money at the horizon."""
    values = np.asarray(final_values, dtype=float)
    if values.size == 0:
        return 0.0
    return round(float(np.mean(values > 0)) * 100, 1)


def histogram(sorted_values: Sequence[float], bins: int = HISTOGRAM_BINS) -> List[HistogramBucket]:
    if len(sorted_values) == 0 or bins <= 0:
        return []
    first = float(sorted_values[0])
    last = float(sorted_values[-1])
    if first == last:
        return [HistogramBucket(lo=first, hi=last, count=len(sorted_values))]

    width = (last - first) / bins
    counts = [0] * bins
    for value in sorted_values:
        idx = min(int((value - first) // width), bins - 1)
        counts[max(idx, 0)] += 1
    return [
        HistogramBucket(lo=first + i * width, hi=first + (i + 1) * width, count=count)
        for i, count in enumerate(counts)
    ]
