from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Optional

from pfsim_core.domain.models import CashFlow, ScenarioDelta, SimulationInputs, generate_id


def parse_enabled(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in {"false", "0", "no", "n", ""}
    return bool(value)


def cash_flow_from_dict(data: Dict[str, Any]) -> CashFlow:
    return CashFlow(
        id=str(data.get("id") or generate_id()),
        type=str(data["type"]),
        label=str(data.get("label", "") or ""),
        amount=float(data["amount"]),
        growth_rate=float(data.get("growthRate", 6.0)),
        start_date=str(data["startDate"]),
        end_date=data.get("endDate") or None,
        frequency=data.get("frequency") or None,
        enabled=parse_enabled(data.get("enabled", True)),
    )


def cash_flow_to_dict(cf: CashFlow) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "id": cf.id,
        "type": cf.type,
        "label": cf.label,
        "amount": cf.amount,
        "growthRate": cf.growth_rate,
        "startDate": cf.start_date,
        "enabled": cf.enabled,
    }
    if cf.end_date:
        payload["endDate"] = cf.end_date
    if cf.frequency:
        payload["frequency"] = cf.frequency
    return payload


def inputs_from_dict(data: Dict[str, Any]) -> SimulationInputs:
    seed: Optional[int] = data.get("seed")
    return SimulationInputs(
        starting_balance=float(data.get("startingBalance", 0.0)),
        cash_flows=[cash_flow_from_dict(item) for item in data.get("cashFlows", []) or []],
        volatility=float(data.get("volatility", 12.0)),
        num_paths=int(data.get("numPaths", 500)),
        end_override=data.get("endOverride") or data.get("simulationEnd") or None,
        seed=int(seed) if seed is not None else None,
        include_paths=bool(data.get("includePaths", False)),
    )


def load_simulation_inputs(path: str | Path) -> SimulationInputs:
    return inputs_from_dict(_read_json(path))


def load_scenario_delta(path: str | Path) -> ScenarioDelta:
    data = _read_json(path)
    return ScenarioDelta(
        disable_ids=list(data.get("disable", []) or []),
        enable_ids=list(data.get("enable", []) or []),
        added_cash_flows=[cash_flow_from_dict(item) for item in data.get("add", []) or []],
        starting_balance_override=data.get("startingBalance"),
        volatility_override=data.get("volatility"),
        end_override=data.get("endOverride"),
    )


def _read_json(path: str | Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)
