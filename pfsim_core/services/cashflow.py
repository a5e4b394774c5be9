from __future__ import annotations

from typing import Iterable, Tuple

import numpy as np

from pfsim_core.domain.models import MONTHLY, CashFlow

DEFAULT_ANNUAL_GROWTH = 6.0  # %, used when no flow is active in a month


def is_active(cash_flow: CashFlow, abs_month: int) -> bool:
    """One-offs are active on their exact month, recurring flows across their whole window."""
    start = cash_flow.start_abs
    if cash_flow.is_one_off:
        return abs_month == start
    end = cash_flow.end_abs
    return start <= abs_month and (end is None or abs_month <= end)


def net_cash_flow_at(abs_month: int, cash_flows: Iterable[CashFlow]) -> float:
    """Sum of deposits (+) and withdrawals (-) landing in the given month."""
    flow = 0.0
    for cf in cash_flows:
        if not is_active(cf, abs_month):
            continue
        if cf.is_one_off:
            flow += cf.amount
        elif cf.frequency == MONTHLY:
            flow += cf.sign * cf.amount
        elif abs_month % 12 == cf.start_abs % 12:
            # annual flows pay on the anniversary month
            flow += cf.sign * cf.amount
    return flow


def blended_monthly_return(
    abs_month: int,
    cash_flows: Iterable[CashFlow],
    default_annual_growth: float = DEFAULT_ANNUAL_GROWTH,
) -> float:
    """
    Expected monthly return for the portfolio: growth rates of the flows active
    this month, weighted by amount. Annual flows count every month of their
    window, not only on payment months.
    """
    total_weight = 0.0
    weighted_growth = 0.0
    for cf in cash_flows:
        if is_active(cf, abs_month):
            weight = abs(cf.amount)
            total_weight += weight
            weighted_growth += cf.growth_rate * weight

    annual_growth = weighted_growth / total_weight if total_weight > 0 else default_annual_growth
    return annual_growth / 100 / 12


def monthly_schedule(
    start_abs: int,
    total_months: int,
    cash_flows: Iterable[CashFlow],
    default_annual_growth: float = DEFAULT_ANNUAL_GROWTH,
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Per-month (net cash flow, expected monthly return) arrays of length
    total_months + 1; index m covers month start_abs + m, index 0 is unused.
    """
    flows = list(cash_flows)
    size = max(total_months, 0) + 1
    nets = np.zeros(size, dtype=float)
    expected = np.zeros(size, dtype=float)
    for m in range(1, size):
        abs_month = start_abs + m
        nets[m] = net_cash_flow_at(abs_month, flows)
        expected[m] = blended_monthly_return(abs_month, flows, default_annual_growth)
    return nets, expected
