from __future__ import annotations

import dataclasses
import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from pfsim_core.domain.models import SimulationInputs, SimulationResult
from pfsim_core.domain.months import abs_month_to_ym, format_month
from pfsim_core.io import cashflows as cashflows_io
from pfsim_core.io import config as config_io
from pfsim_core.log import configure_logging
from pfsim_core.services import cashflow as cashflow_service
from pfsim_core.services import pipeline
from pfsim_core.services import simulator
from pfsim_core.services.percentiles import histogram
from pfsim_core.services.range_resolver import resolve_range

app = typer.Typer(help="Monte Carlo portfolio simulator for deposits, withdrawals and one-off cash events.")

EMPTY_HORIZON_MESSAGE = "[yellow]Nothing to display: the simulation horizon is empty.[/yellow]"


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging")):
    configure_logging("DEBUG" if verbose else None)


def _save_json(path: Path, payload):
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2)


def _load_inputs(inputs: Optional[Path], cash_flows: Optional[Path]) -> SimulationInputs:
    if inputs:
        base = config_io.load_simulation_inputs(inputs)
        if cash_flows:
            base = dataclasses.replace(base, cash_flows=cashflows_io.load_cash_flows(cash_flows))
        return base
    if cash_flows:
        return SimulationInputs(cash_flows=cashflows_io.load_cash_flows(cash_flows))
    raise typer.BadParameter("Provide either --inputs or --cash-flows")


def _result_table(result: SimulationResult) -> Table:
    table = Table(title="Portfolio value percentiles")
    for column in ("Period", "Month", "10th", "25th", "Median", "75th", "90th"):
        table.add_column(column, justify="right")
    for ts in result.time_steps:
        table.add_row(
            ts.label,
            str(ts.month_index),
            f"{ts.p10:,.0f}",
            f"{ts.p25:,.0f}",
            f"{ts.median:,.0f}",
            f"{ts.p75:,.0f}",
            f"{ts.p90:,.0f}",
        )
    return table


def _spread_bar(result: SimulationResult, width: int = 30) -> str:
    """Tiny text histogram of the final distribution."""
    buckets = histogram(result.final_distribution, bins=width)
    if not buckets:
        return ""
    peak = max(b.count for b in buckets) or 1
    levels = " ▁▂▃▄▅▆▇█"
    return "".join(levels[round(b.count / peak * (len(levels) - 1))] for b in buckets)


@app.command()
def simulate(
    inputs: Optional[Path] = typer.Option(None, help="Simulation inputs JSON"),
    cash_flows: Optional[Path] = typer.Option(None, help="Cash flow CSV (replaces flows from --inputs)"),
    starting_balance: Optional[float] = typer.Option(None, help="Starting portfolio value"),
    volatility: Optional[float] = typer.Option(None, help="Annual volatility in percent"),
    paths: Optional[int] = typer.Option(None, help="Monte Carlo paths (1-10000)"),
    end: Optional[str] = typer.Option(None, help="Simulation end month YYYY-MM"),
    seed: Optional[int] = typer.Option(None, help="Random seed"),
    include_paths: bool = typer.Option(False, help="Include every simulated path in the output"),
    table: bool = typer.Option(False, help="Render the time steps as a table instead of JSON"),
    out: Optional[Path] = typer.Option(None, help="Output path for simulation JSON"),
):
    """Run the Monte Carlo simulation."""
    sim_inputs = _load_inputs(inputs, cash_flows)
    overrides = {
        "starting_balance": starting_balance,
        "volatility": volatility,
        "num_paths": paths,
        "end_override": end,
        "seed": seed,
    }
    changes = {k: v for k, v in overrides.items() if v is not None}
    if include_paths:
        changes["include_paths"] = True
    sim_inputs = dataclasses.replace(sim_inputs, **changes)

    try:
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            transient=True,
        ) as progress:
            task = progress.add_task("Running simulation...", total=None)
            result = simulator.run_simulation(sim_inputs)
            progress.update(task, advance=1)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    payload = result.to_dict()
    if out:
        _save_json(out, payload)
        typer.echo(f"Simulation written to {out}")
    if table:
        console = Console()
        if result.is_empty:
            console.print(EMPTY_HORIZON_MESSAGE)
            return
        console.print(_result_table(result))
        console.print(
            f"Final: P10=[yellow]{result.final_p10:,.0f}[/yellow], "
            f"Median=[green]{result.final_median:,.0f}[/green], P90=[cyan]{result.final_p90:,.0f}[/cyan] | "
            f"survival [bold]{result.survival_rate:.1f}%[/bold]"
        )
        console.print(f"Distribution: {_spread_bar(result)}")
    elif not out:
        typer.echo(json.dumps(payload, indent=2))


@app.command()
def schedule(
    inputs: Optional[Path] = typer.Option(None, help="Simulation inputs JSON"),
    cash_flows: Optional[Path] = typer.Option(None, help="Cash flow CSV"),
    months: int = typer.Option(24, help="Number of months to show"),
):
    """Show the per-month net cash flow and blended growth rate."""
    sim_inputs = _load_inputs(inputs, cash_flows)
    flows = sim_inputs.enabled_cash_flows
    start_abs, end_abs = resolve_range(flows, sim_inputs.end_override)
    total = min(end_abs - start_abs, months)
    if total <= 0:
        Console().print(EMPTY_HORIZON_MESSAGE)
        return
    nets, expected = cashflow_service.monthly_schedule(start_abs, total, flows)

    table = Table(title="Cash flow schedule")
    table.add_column("Month")
    table.add_column("Net cash flow", justify="right")
    table.add_column("Expected growth %/yr", justify="right")
    for m in range(1, total + 1):
        table.add_row(
            format_month(abs_month_to_ym(start_abs + m)),
            f"{nets[m]:,.2f}",
            f"{expected[m] * 12 * 100:.2f}",
        )
    Console().print(table)


@app.command()
def compare(
    baseline: Path = typer.Option(..., help="Baseline simulation inputs JSON"),
    delta: Path = typer.Option(..., help="Scenario delta JSON"),
    out: Optional[Path] = typer.Option(None, help="Output path for comparison JSON"),
):
    """Run a baseline and an adjusted scenario and report the difference."""
    base_inputs = config_io.load_simulation_inputs(baseline)
    delta_obj = config_io.load_scenario_delta(delta)
    try:
        comparison = pipeline.compare_scenario(base_inputs, delta_obj)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc
    payload = comparison.to_dict()
    if out:
        _save_json(out, payload)
        typer.echo(f"Scenario comparison written to {out}")
    else:
        typer.echo(json.dumps(payload, indent=2))


if __name__ == "__main__":
    app()
