import datetime as dt

from pfsim_core.domain.models import CashFlow
from pfsim_core.domain.months import parse_abs_month
from pfsim_core.services.range_resolver import resolve_range

TODAY = dt.date(2024, 12, 15)
NOW = parse_abs_month("2024-12")


def test_defaults_to_thirty_years_from_now():
    assert resolve_range([], today=TODAY) == (NOW, NOW + 360)


def test_earlier_flow_pulls_start_back():
    flow = CashFlow(type="recurring-deposit", amount=100.0, start_date="2020-05", frequency="monthly")
    start, end = resolve_range([flow], today=TODAY)
    assert start == parse_abs_month("2020-05")
    assert end == NOW + 360


def test_future_flow_does_not_move_start():
    flow = CashFlow(type="recurring-deposit", amount=100.0, start_date="2030-05", frequency="monthly")
    start, _ = resolve_range([flow], today=TODAY)
    assert start == NOW


def test_latest_recurring_end_extends_horizon():
    flow = CashFlow(
        type="recurring-withdrawal",
        amount=100.0,
        start_date="2040-01",
        end_date="2070-06",
        frequency="monthly",
    )
    _, end = resolve_range([flow], today=TODAY)
    assert end == parse_abs_month("2070-06")


def test_one_off_gets_a_year_of_aftermath():
    flow = CashFlow(type="one-off", amount=100.0, start_date="2060-03")
    _, end = resolve_range([flow], today=TODAY)
    assert end == parse_abs_month("2061-03")


def test_override_wins_even_when_shorter():
    flows = [
        CashFlow(type="one-off", amount=100.0, start_date="2060-03"),
        CashFlow(type="recurring-deposit", amount=1.0, start_date="2025-01", end_date="2070-01", frequency="monthly"),
    ]
    start, end = resolve_range(flows, end_override="2026-01", today=TODAY)
    assert start == NOW
    assert end == parse_abs_month("2026-01")


def test_override_in_the_past_gives_empty_range():
    start, end = resolve_range([], end_override="2020-01", today=TODAY)
    assert end <= start
