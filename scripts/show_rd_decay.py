#!/usr/bin/env python3
"""Show how a competitor's RD grows while idle under fractional rating periods."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from domain.ratings.glicko2.fractional import MS_PER_DAY, FractionalPeriodCalculator
from domain.ratings.glicko2.player import Player

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Project rating deviation over idle time.",
)


@app.command()
def show_rd_decay(
    rd: Annotated[float, typer.Option("--rd", help="Current RD on the public scale.")] = 50.0,
    volatility: Annotated[
        float,
        typer.Option("--volatility", help="Current volatility."),
    ] = 0.06,
    rating_period_days: Annotated[
        float,
        typer.Option("--rating-period-days", help="Length of one full rating period in days."),
    ] = 4.6,
    days: Annotated[
        int,
        typer.Option("--days", help="Number of idle days to project."),
    ] = 30,
    step_days: Annotated[
        int,
        typer.Option("--step-days", help="Print one row every N days."),
    ] = 5,
) -> None:
    """Print projected RD for a player idle since day 0."""
    if rd <= 0.0:
        raise typer.BadParameter("--rd must be greater than 0")
    if volatility <= 0.0:
        raise typer.BadParameter("--volatility must be greater than 0")
    if rating_period_days <= 0.0:
        raise typer.BadParameter("--rating-period-days must be greater than 0")
    if days < 0:
        raise typer.BadParameter("--days must be >= 0")
    if step_days <= 0:
        raise typer.BadParameter("--step-days must be greater than 0")

    calculator = FractionalPeriodCalculator.from_days(rating_period_days)
    player = Player(
        1500.0,
        rd,
        volatility,
        0.5,
        fractional_calculator=calculator,
        last_update_time=0.0,
    )

    typer.echo("day  periods  rd")
    for day in range(0, days + 1, step_days):
        timestamp = day * MS_PER_DAY
        state = player.current_state_at(timestamp)
        periods = calculator.elapsed_periods(player.last_update_time, timestamp)
        typer.echo(f"{day:>3}  {periods:>7.3f}  {state.rd:.3f}")


if __name__ == "__main__":
    app()
