from __future__ import annotations

import datetime as dt
import math
import time
from typing import Iterable, List, Optional

import numpy as np
from loguru import logger

from pfsim_core.domain.models import CashFlow, SimulationInputs, SimulationResult
from pfsim_core.services.assembler import assemble_result, empty_result
from pfsim_core.services.cashflow import (
    DEFAULT_ANNUAL_GROWTH,
    blended_monthly_return,
    monthly_schedule,
    net_cash_flow_at,
)
from pfsim_core.services.random_source import BoxMullerNormal
from pfsim_core.services.range_resolver import resolve_range

MAX_PATHS = 10_000


def monthly_volatility(annual_volatility: float) -> float:
    return annual_volatility / 100 / math.sqrt(12)


def simulate_path(
    starting_balance: float,
    start_abs: int,
    total_months: int,
    cash_flows: Iterable[CashFlow],
    monthly_vol: float,
    normal: Optional[BoxMullerNormal] = None,
) -> List[float]:
    """One trajectory of length total_months + 1, clamped at zero each month."""
    normal = normal or BoxMullerNormal()
    flows = list(cash_flows)
    path = [float(starting_balance)]
    for m in range(1, total_months + 1):
        abs_month = start_abs + m
        cash_flow = net_cash_flow_at(abs_month, flows)
        expected_return = blended_monthly_return(abs_month, flows, DEFAULT_ANNUAL_GROWTH)
        random_return = expected_return + monthly_vol * normal.draw()
        value = path[m - 1] * (1 + random_return) + cash_flow
        path.append(max(value, 0.0))
    return path


def simulate_paths(
    starting_balance: float,
    start_abs: int,
    total_months: int,
    cash_flows: Iterable[CashFlow],
    monthly_vol: float,
    num_paths: int,
    normal: Optional[BoxMullerNormal] = None,
) -> np.ndarray:
    """
    Vectorized Monte Carlo over monthly steps: every path advances together,
    each drawing its own shock. Returns a (num_paths, total_months + 1) matrix.
    """
    normal = normal or BoxMullerNormal()
    total_months = max(total_months, 0)
    nets, expected = monthly_schedule(start_abs, total_months, cash_flows)

    wealth = np.empty((num_paths, total_months + 1), dtype=float)
    wealth[:, 0] = starting_balance
    for m in range(1, total_months + 1):
        returns = expected[m] + monthly_vol * normal.standard_normal(num_paths)
        wealth[:, m] = np.maximum(wealth[:, m - 1] * (1 + returns) + nets[m], 0.0)
    return wealth


def _validate(inputs: SimulationInputs) -> None:
    if not 1 <= inputs.num_paths <= MAX_PATHS:
        raise ValueError(f"num_paths must be between 1 and {MAX_PATHS}")
    if inputs.volatility < 0:
        raise ValueError("volatility must be non-negative")
    if inputs.starting_balance < 0:
        raise ValueError("starting_balance must be non-negative")


def run_simulation(
    inputs: SimulationInputs,
    rng: Optional[np.random.Generator] = None,
    today: Optional[dt.date] = None,
) -> SimulationResult:
    """
    Project the portfolio forward and reduce all paths to percentile bands.
    Disabled cash flows are dropped before anything else.
    """
    _validate(inputs)
    cash_flows = inputs.enabled_cash_flows
    start_abs, end_abs = resolve_range(cash_flows, inputs.end_override, today=today)
    total_months = end_abs - start_abs

    if total_months <= 0:
        logger.info("Empty simulation horizon ({} months); returning starting balance", total_months)
        return empty_result(inputs.starting_balance, start_abs)

    normal = BoxMullerNormal(rng=rng, seed=inputs.seed)
    logger.debug(
        "Simulating {} paths over {} months with {} active cash flows",
        inputs.num_paths,
        total_months,
        len(cash_flows),
    )
    started = time.perf_counter()
    paths = simulate_paths(
        inputs.starting_balance,
        start_abs,
        total_months,
        cash_flows,
        monthly_volatility(inputs.volatility),
        inputs.num_paths,
        normal,
    )
    result = assemble_result(paths, start_abs, include_paths=inputs.include_paths)
    logger.info(
        "Simulation finished in {:.3f}s: median {:,.0f}, survival {}%",
        time.perf_counter() - started,
        result.final_median,
        result.survival_rate,
    )
    return result
