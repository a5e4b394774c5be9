from pfsim_core.domain.models import (  # noqa: F401
    CashFlow,
    HistogramBucket,
    ScenarioComparison,
    ScenarioDelta,
    SimulationInputs,
    SimulationResult,
    TimeStep,
)

__all__ = [
    "CashFlow",
    "HistogramBucket",
    "ScenarioComparison",
    "ScenarioDelta",
    "SimulationInputs",
    "SimulationResult",
    "TimeStep",
]
