from __future__ import annotations

import math
from typing import List, Optional

import numpy as np

from pfsim_core.domain.models import SimulationResult, TimeStep
from pfsim_core.domain.months import year_label
from pfsim_core.services.percentiles import PERCENTILE_LEVELS, percentile, percentile_band, sample_months, survival_rate


def _whole_units(value: float) -> float:
    # half-up; path values are never negative
    return float(math.floor(value + 0.5))


def build_time_steps(paths: np.ndarray, start_abs: int) -> List[TimeStep]:
    """Percentile bands at each sampled month of a (num_paths, total_months + 1) matrix."""
    total_months = paths.shape[1] - 1
    steps: List[TimeStep] = []
    for m in sample_months(total_months):
        p10, p25, p50, p75, p90 = (_whole_units(v) for v in percentile_band(paths[:, m]))
        steps.append(
            TimeStep(
                label=year_label(start_abs + m),
                month_index=m,
                p10=p10,
                p25=p25,
                median=p50,
                p75=p75,
                p90=p90,
            )
        )
    return steps


def assemble_result(paths: np.ndarray, start_abs: int, include_paths: bool = False) -> SimulationResult:
    final_values = np.sort(paths[:, -1])
    finals = {p: _whole_units(percentile(final_values, p)) for p in PERCENTILE_LEVELS}
    return SimulationResult(
        time_steps=build_time_steps(paths, start_abs),
        final_median=finals[50],
        final_p10=finals[10],
        final_p90=finals[90],
        final_p25=finals[25],
        final_p75=finals[75],
        survival_rate=survival_rate(final_values),
        final_distribution=final_values.tolist(),
        paths=paths if include_paths else None,
        start_abs=start_abs,
    )


def empty_result(starting_balance: float, start_abs: Optional[int] = None) -> SimulationResult:
    """Result for a horizon of zero or negative length: nothing to plot."""
    return SimulationResult(
        time_steps=[],
        final_median=starting_balance,
        final_p10=starting_balance,
        final_p90=starting_balance,
        final_p25=starting_balance,
        final_p75=starting_balance,
        survival_rate=100.0 if starting_balance > 0 else 0.0,
        start_abs=start_abs,
    )
