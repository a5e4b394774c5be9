import numpy as np
import pytest

from pfsim_core.domain.models import CashFlow
from pfsim_core.domain.months import parse_abs_month
from pfsim_core.services.random_source import BoxMullerNormal
from pfsim_core.services.simulator import monthly_volatility, simulate_path, simulate_paths


class _ScriptedRng:
    """Stands in for a Generator, replaying fixed uniforms."""

    def __init__(self, values):
        self._values = list(values)

    def random(self, size=None):
        if size is None:
            return self._values.pop(0)
        return np.array([self._values.pop(0) for _ in range(size)], dtype=float)


def test_box_muller_redraws_zero_uniform():
    normal = BoxMullerNormal(rng=_ScriptedRng([0.0, 0.5, 0.0]))
    assert normal.draw() == pytest.approx(np.sqrt(2 * np.log(2)))


def test_box_muller_vector_redraws_zero_uniforms():
    normal = BoxMullerNormal(rng=_ScriptedRng([0.0, 0.5, 0.5, 0.0, 0.0]))
    z = normal.standard_normal(2)
    assert np.all(np.isfinite(z))
    assert z == pytest.approx([np.sqrt(2 * np.log(2))] * 2)


def test_box_muller_is_seedable_and_standard():
    a = BoxMullerNormal(seed=5).standard_normal(200_000)
    b = BoxMullerNormal(seed=5).standard_normal(200_000)
    assert np.array_equal(a, b)
    assert abs(a.mean()) < 0.02
    assert abs(a.std() - 1.0) < 0.02


def test_monthly_volatility_scales_by_root_twelve():
    assert monthly_volatility(12.0) == pytest.approx(0.12 / np.sqrt(12))


def test_zero_volatility_path_compounds_default_growth():
    start = parse_abs_month("2025-01")
    path = simulate_path(10_000.0, start, 24, [], 0.0, BoxMullerNormal(seed=1))
    assert len(path) == 25
    assert path[0] == 10_000.0
    for m, value in enumerate(path):
        assert value == pytest.approx(10_000.0 * (1 + 0.06 / 12) ** m)


def test_empty_horizon_path_is_just_the_balance():
    assert simulate_path(750.0, parse_abs_month("2025-01"), 0, [], 0.1) == [750.0]


def test_withdrawal_clamps_to_zero_and_stays_there():
    flow = CashFlow(
        type="recurring-withdrawal",
        amount=5000.0,
        growth_rate=0.0,
        start_date="2026-06",
        end_date="2026-06",
        frequency="monthly",
    )
    start = parse_abs_month("2026-05")
    path = simulate_path(5000.0, start, 12, [flow], 0.0, BoxMullerNormal(seed=2))
    assert path[1] == 0.0
    assert all(v == 0.0 for v in path[1:])


def test_deposit_revives_a_depleted_path():
    flows = [
        CashFlow(type="recurring-withdrawal", amount=9000.0, growth_rate=0.0,
                 start_date="2025-02", end_date="2025-02", frequency="monthly"),
        CashFlow(type="one-off", amount=300.0, growth_rate=0.0, start_date="2025-04"),
    ]
    path = simulate_path(1000.0, parse_abs_month("2025-01"), 4, flows, 0.0, BoxMullerNormal(seed=3))
    assert path[1] == 0.0
    assert path[2] == 0.0
    assert path[3] == pytest.approx(300.0)


def test_paths_never_go_negative_under_heavy_volatility():
    flows = [
        CashFlow(type="recurring-withdrawal", amount=400.0, growth_rate=3.0,
                 start_date="2025-01", frequency="monthly"),
    ]
    wealth = simulate_paths(20_000.0, parse_abs_month("2025-01"), 120, flows,
                            monthly_volatility(80.0), 300, BoxMullerNormal(seed=4))
    assert wealth.shape == (300, 121)
    assert (wealth >= 0).all()
    assert (wealth[:, -1] == 0).any()


def test_vectorized_paths_match_single_path_without_volatility():
    flows = [
        CashFlow(type="recurring-deposit", amount=250.0, growth_rate=8.0,
                 start_date="2025-03", end_date="2026-02", frequency="monthly"),
        CashFlow(type="one-off", amount=4000.0, growth_rate=2.0, start_date="2025-09"),
    ]
    start = parse_abs_month("2025-01")
    single = simulate_path(1000.0, start, 30, flows, 0.0, BoxMullerNormal(seed=9))
    wealth = simulate_paths(1000.0, start, 30, flows, 0.0, 4, BoxMullerNormal(seed=9))
    for row in wealth:
        assert row.tolist() == pytest.approx(single)


def test_paths_are_independent_draws():
    wealth = simulate_paths(1000.0, parse_abs_month("2025-01"), 12, [],
                            monthly_volatility(20.0), 50, BoxMullerNormal(seed=12))
    assert len(np.unique(wealth[:, -1])) == 50
