from pfsim_core.io.cashflows import load_cash_flows  # noqa: F401
from pfsim_core.io.config import (  # noqa: F401
    load_scenario_delta,
    load_simulation_inputs,
)

__all__ = ["load_cash_flows", "load_simulation_inputs", "load_scenario_delta"]
