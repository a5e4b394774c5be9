from __future__ import annotations

import dataclasses
import datetime as dt
from typing import Dict, Optional

import numpy as np

from pfsim_core.domain.models import ScenarioComparison, ScenarioDelta, SimulationInputs, SimulationResult, TimeStep
from pfsim_core.domain.months import abs_month_to_ym
from pfsim_core.services import scenario as scenario_service
from pfsim_core.services import simulator

_BANDS = ("p10", "p25", "median", "p75", "p90")


def _steps_by_month(result: SimulationResult) -> Dict[int, TimeStep]:
    start = result.start_abs or 0
    return {start + ts.month_index: ts for ts in result.time_steps}


def compare_scenario(
    base_inputs: SimulationInputs,
    delta: ScenarioDelta,
    today: Optional[dt.date] = None,
) -> ScenarioComparison:
    """
    Runs the baseline and the adjusted inputs on one shared seed and reports
    percentile differences for the calendar months both runs sampled.
    """
    seed = base_inputs.seed
    if seed is None:
        seed = int(np.random.SeedSequence().entropy % 2**63)
    base_inputs = dataclasses.replace(base_inputs, seed=seed)

    baseline_result = simulator.run_simulation(base_inputs, today=today)
    scenario_inputs = scenario_service.apply_scenario(base_inputs, delta)
    scenario_result = simulator.run_simulation(scenario_inputs, today=today)

    baseline_steps = _steps_by_month(baseline_result)
    scenario_steps = _steps_by_month(scenario_result)
    shared = sorted(baseline_steps.keys() & scenario_steps.keys())

    delta_bands = {}
    for key in _BANDS:
        delta_bands[key] = [
            getattr(scenario_steps[month], key) - getattr(baseline_steps[month], key)
            for month in shared
        ]

    final_delta = {
        "median": scenario_result.final_median - baseline_result.final_median,
        "p10": scenario_result.final_p10 - baseline_result.final_p10,
        "p90": scenario_result.final_p90 - baseline_result.final_p90,
        "survivalRate": scenario_result.survival_rate - baseline_result.survival_rate,
    }

    return ScenarioComparison(
        baseline=baseline_result,
        scenario=scenario_result,
        months=[abs_month_to_ym(month) for month in shared],
        delta=delta_bands,
        final_delta=final_delta,
    )
