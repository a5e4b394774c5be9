from __future__ import annotations

import dataclasses
import uuid
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from pfsim_core.domain.months import abs_month_to_ym, parse_abs_month

ONE_OFF = "one-off"
RECURRING_DEPOSIT = "recurring-deposit"
RECURRING_WITHDRAWAL = "recurring-withdrawal"
CASH_FLOW_TYPES = (ONE_OFF, RECURRING_DEPOSIT, RECURRING_WITHDRAWAL)

MONTHLY = "monthly"
ANNUALLY = "annually"
FREQUENCIES = (MONTHLY, ANNUALLY)


def generate_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclasses.dataclass(frozen=True)
class CashFlow:
    type: str  # one of CASH_FLOW_TYPES
    amount: float
    start_date: str  # "YYYY-MM"
    growth_rate: float = 6.0  # annual %, blends the portfolio return while active
    end_date: Optional[str] = None  # inclusive, recurring only
    frequency: Optional[str] = None  # "monthly" | "annually", recurring only
    label: str = ""
    enabled: bool = True
    id: str = dataclasses.field(default_factory=generate_id)

    def __post_init__(self) -> None:
        if self.type not in CASH_FLOW_TYPES:
            raise ValueError(f"Unknown cash flow type: {self.type!r}")
        if self.amount < 0:
            raise ValueError("Cash flow amount must be non-negative; direction comes from the type")
        if self.type == ONE_OFF:
            if self.end_date is not None or self.frequency is not None:
                raise ValueError("One-off cash flows take no end date or frequency")
        elif self.frequency not in FREQUENCIES:
            raise ValueError(f"Recurring cash flows need a frequency in {FREQUENCIES}")

    @property
    def is_one_off(self) -> bool:
        return self.type == ONE_OFF

    @property
    def sign(self) -> int:
        return -1 if self.type == RECURRING_WITHDRAWAL else 1

    @property
    def start_abs(self) -> int:
        return parse_abs_month(self.start_date)

    @property
    def end_abs(self) -> Optional[int]:
        """Absolute last month, or None when the flow never ends."""
        return parse_abs_month(self.end_date) if self.end_date else None


@dataclasses.dataclass(frozen=True)
class SimulationInputs:
    starting_balance: float = 0.0
    cash_flows: List[CashFlow] = dataclasses.field(default_factory=list)
    volatility: float = 12.0  # annual %
    num_paths: int = 500
    end_override: Optional[str] = None  # "YYYY-MM"
    seed: Optional[int] = None
    include_paths: bool = False

    @property
    def enabled_cash_flows(self) -> List[CashFlow]:
        return [cf for cf in self.cash_flows if cf.enabled]


@dataclasses.dataclass(frozen=True)
class TimeStep:
    label: str
    month_index: int
    p10: float
    p25: float
    median: float
    p75: float
    p90: float


@dataclasses.dataclass(frozen=True)
class HistogramBucket:
    lo: float
    hi: float
    count: int


@dataclasses.dataclass
class SimulationResult:
    time_steps: List[TimeStep]
    final_median: float
    final_p10: float
    final_p90: float
    final_p25: float
    final_p75: float
    survival_rate: float  # % of paths ending above zero
    final_distribution: List[float] = dataclasses.field(default_factory=list)
    paths: Optional[np.ndarray] = None  # (num_paths, total_months + 1) when requested
    start_abs: Optional[int] = None  # absolute month of month_index 0

    @property
    def is_empty(self) -> bool:
        return not self.time_steps

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "timeSteps": [
                {
                    "label": ts.label,
                    "monthIndex": ts.month_index,
                    "p10": ts.p10,
                    "p25": ts.p25,
                    "median": ts.median,
                    "p75": ts.p75,
                    "p90": ts.p90,
                }
                for ts in self.time_steps
            ],
            "finalMedian": self.final_median,
            "finalP10": self.final_p10,
            "finalP25": self.final_p25,
            "finalP75": self.final_p75,
            "finalP90": self.final_p90,
            "survivalRate": self.survival_rate,
            "finalDistribution": self.final_distribution,
        }
        if self.start_abs is not None:
            payload["startMonth"] = abs_month_to_ym(self.start_abs)
        if self.paths is not None:
            payload["paths"] = self.paths.tolist()
        return payload

    def to_frame(self) -> pd.DataFrame:
        columns = ["label", "month_index", "p10", "p25", "median", "p75", "p90"]
        frame = pd.DataFrame([dataclasses.astuple(ts) for ts in self.time_steps], columns=columns)
        return frame.set_index("month_index")


@dataclasses.dataclass
class ScenarioDelta:
    disable_ids: List[str] = dataclasses.field(default_factory=list)
    enable_ids: List[str] = dataclasses.field(default_factory=list)
    added_cash_flows: List[CashFlow] = dataclasses.field(default_factory=list)
    starting_balance_override: Optional[float] = None
    volatility_override: Optional[float] = None
    end_override: Optional[str] = None


@dataclasses.dataclass
class ScenarioComparison:
    baseline: SimulationResult
    scenario: SimulationResult
    months: List[str]  # "YYYY-MM" sampled by both runs
    delta: Dict[str, List[float]]  # keys "p10","p25","median","p75","p90"
    final_delta: Dict[str, float]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "baseline": self.baseline.to_dict(),
            "scenario": self.scenario.to_dict(),
            "months": self.months,
            "delta": self.delta,
            "finalDelta": self.final_delta,
        }
