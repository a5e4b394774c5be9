from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from pfsim_core.domain.models import CashFlow
from pfsim_core.io.config import cash_flow_from_dict


REQUIRED_COLUMNS = {"type", "amount", "startDate"}
OPTIONAL_COLUMNS = ("id", "label", "growthRate", "endDate", "frequency", "enabled")


def load_cash_flows(csv_path: str | Path) -> List[CashFlow]:
    path = Path(csv_path)
    if not path.exists():
        raise FileNotFoundError(path)

    df = pd.read_csv(path, dtype={"startDate": str, "endDate": str, "id": str})
    missing = REQUIRED_COLUMNS - set(df.columns)
    if missing:
        raise ValueError(f"Missing columns in cash flow CSV: {missing}")

    flows: List[CashFlow] = []
    for _, row in df.iterrows():
        item: Dict[str, Any] = {col: row[col] for col in REQUIRED_COLUMNS}
        for col in OPTIONAL_COLUMNS:
            if col in df.columns and not pd.isna(row[col]):
                item[col] = row[col]
        flows.append(cash_flow_from_dict(item))
    return flows
