"""Replay pipeline for recorded puzzle attempts."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any
import tomllib

from domain.ratings.glicko2.config import Glicko2SystemConfig
from domain.ratings.glicko2.player import Player, RatingState
from domain.ratings.glicko2.puzzle import PuzzleAttempt, PuzzleRatingManager


@dataclass(frozen=True)
class PlayerPuzzleAttempt:
    """A puzzle attempt tagged with the player who made it."""

    player_id: int
    attempt: PuzzleAttempt


@dataclass(frozen=True)
class ReplaySummary:
    """Outcome of replaying one attempts file through one system config."""

    system_name: str
    config_file: str
    processed_attempts: int
    tracked_players: int
    final_states: dict[int, RatingState]


def load_puzzle_attempts(file_path: Path) -> list[PlayerPuzzleAttempt]:
    """Read ``[[attempts]]`` tables from a TOML file, keeping file order."""
    if not file_path.exists():
        raise FileNotFoundError(f"Attempts file not found: {file_path}")
    with file_path.open("rb") as file:
        raw = tomllib.load(file)

    attempts_raw = raw.get("attempts", [])
    if not attempts_raw:
        raise ValueError(f"{file_path}: no [[attempts]] entries found")

    return [_parse_attempt(entry, file_path, index) for index, entry in enumerate(attempts_raw)]


def _parse_attempt(entry: dict[str, Any], file_path: Path, index: int) -> PlayerPuzzleAttempt:
    for key in ("player_id", "difficulty", "solved"):
        if key not in entry:
            raise ValueError(f"{file_path}: attempts[{index}].{key} is required")

    time_spent = entry.get("time_spent_ms")
    hints_used = entry.get("hints_used")
    attempt_time = entry.get("attempt_time")
    if hints_used is not None and int(hints_used) < 0:
        raise ValueError(f"{file_path}: attempts[{index}].hints_used must be >= 0")

    return PlayerPuzzleAttempt(
        player_id=int(entry["player_id"]),
        attempt=PuzzleAttempt(
            difficulty=float(entry["difficulty"]),
            solved=bool(entry["solved"]),
            time_spent_ms=None if time_spent is None else float(time_spent),
            hints_used=None if hints_used is None else int(hints_used),
            attempt_time=None if attempt_time is None else float(attempt_time),
        ),
    )


def replay_puzzle_attempts(
    *,
    system_config: Glicko2SystemConfig,
    attempts: Sequence[PlayerPuzzleAttempt],
    echo: Callable[[str], None] | None = None,
) -> ReplaySummary:
    """Apply attempts in order, creating players on first sight."""
    manager = PuzzleRatingManager(system_config.parameters)
    players: dict[int, Player] = {}

    for index, item in enumerate(attempts, start=1):
        player = players.get(item.player_id)
        if player is None:
            player = manager.make_player(
                player_id=item.player_id,
                last_update_time=item.attempt.attempt_time,
            )
            players[item.player_id] = player

        pre_rating = player.rating
        state = manager.process_attempt_advanced(player, item.attempt)
        if echo is not None:
            echo(
                f"attempt={index} "
                f"player_id={item.player_id} "
                f"difficulty={item.attempt.difficulty:.0f} "
                f"solved={item.attempt.solved} "
                f"rating={pre_rating:.1f}->{state.rating:.1f} "
                f"rd={state.rd:.1f} "
                f"volatility={state.volatility:.5f}"
            )

    return ReplaySummary(
        system_name=system_config.name,
        config_file=system_config.file_path.name,
        processed_attempts=len(attempts),
        tracked_players=len(players),
        final_states={player_id: player.snapshot() for player_id, player in players.items()},
    )
