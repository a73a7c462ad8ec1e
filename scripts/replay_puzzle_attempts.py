#!/usr/bin/env python3
"""Replay recorded puzzle attempts through a Glicko-2 system config."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from domain.pipeline import load_puzzle_attempts, replay_puzzle_attempts
from domain.ratings.glicko2.config import load_glicko2_system_configs

DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "ratings" / "glicko2"
DEFAULT_CONFIG_NAME = "puzzle.toml"

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Puzzle rating replay jobs.",
)


@app.command()
def replay_puzzle_attempts_command(
    attempts_file: Annotated[
        Path,
        typer.Option("--attempts-file", help="TOML file with [[attempts]] entries."),
    ],
    config_dir: Annotated[
        Path,
        typer.Option(
            "--config-dir",
            help="Directory containing Glicko-2 system TOML config files.",
        ),
    ] = DEFAULT_CONFIG_DIR,
    config_name: Annotated[
        str,
        typer.Option(
            "--config-name",
            help="Config filename to replay with (for example: puzzle.toml).",
        ),
    ] = DEFAULT_CONFIG_NAME,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Print every rating update."),
    ] = False,
) -> None:
    """Rate every attempt in order and print each player's final state."""
    configs = load_glicko2_system_configs(config_dir)
    matching = [config for config in configs if config.file_path.name == config_name]
    if not matching:
        raise typer.BadParameter(
            f"No config named '{config_name}' found in {config_dir}",
            param_hint="--config-name",
        )
    system_config = matching[0]

    attempts = load_puzzle_attempts(attempts_file)
    typer.echo(
        f"loaded_attempts={len(attempts)} "
        f"config={system_config.file_path.name} "
        f"glicko2_system={system_config.name}"
    )

    summary = replay_puzzle_attempts(
        system_config=system_config,
        attempts=attempts,
        echo=typer.echo if verbose else None,
    )

    for player_id, state in sorted(summary.final_states.items()):
        typer.echo(
            f"player_id={player_id} "
            f"rating={state.rating:.1f} "
            f"rd={state.rd:.1f} "
            f"volatility={state.volatility:.5f} "
            f"last_update_time={state.last_update_time:.0f}"
        )
    typer.echo(
        "completed "
        f"processed_attempts={summary.processed_attempts} "
        f"tracked_players={summary.tracked_players}"
    )


if __name__ == "__main__":
    app()
