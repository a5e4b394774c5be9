from pfsim_core.services.cashflow import blended_monthly_return, net_cash_flow_at  # noqa: F401
from pfsim_core.services.percentiles import histogram, percentile  # noqa: F401
from pfsim_core.services.pipeline import compare_scenario  # noqa: F401
from pfsim_core.services.range_resolver import resolve_range  # noqa: F401
from pfsim_core.services.scenario import apply_scenario  # noqa: F401
from pfsim_core.services.simulator import run_simulation, simulate_path  # noqa: F401

__all__ = [
    "apply_scenario",
    "blended_monthly_return",
    "compare_scenario",
    "histogram",
    "net_cash_flow_at",
    "percentile",
    "resolve_range",
    "run_simulation",
    "simulate_path",
]
