from __future__ import annotations

import dataclasses
from typing import List

from pfsim_core.domain.models import CashFlow, ScenarioDelta, SimulationInputs


def apply_scenario(inputs: SimulationInputs, delta: ScenarioDelta) -> SimulationInputs:
    """
    Toggles cash flows by id, appends new ones and applies overrides.
    Returns new inputs; the baseline is left untouched.
    """
    disable = set(delta.disable_ids)
    enable = set(delta.enable_ids)

    adjusted: List[CashFlow] = []
    for cf in inputs.cash_flows:
        if cf.id in disable:
            cf = dataclasses.replace(cf, enabled=False)
        elif cf.id in enable:
            cf = dataclasses.replace(cf, enabled=True)
        adjusted.append(cf)
    adjusted.extend(delta.added_cash_flows)

    changes = {"cash_flows": adjusted}
    if delta.starting_balance_override is not None:
        changes["starting_balance"] = delta.starting_balance_override
    if delta.volatility_override is not None:
        changes["volatility"] = delta.volatility_override
    if delta.end_override is not None:
        changes["end_override"] = delta.end_override
    return dataclasses.replace(inputs, **changes)
