"""Tests for replaying puzzle attempts from TOML files."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

import replay_puzzle_attempts
import show_rd_decay
from domain.pipeline import load_puzzle_attempts, replay_puzzle_attempts as replay
from domain.ratings.glicko2.config import load_glicko2_system_configs

ATTEMPTS_TOML = """
[[attempts]]
player_id = 1
difficulty = 1500
solved = true
time_spent_ms = 25000
attempt_time = 1767225600000

[[attempts]]
player_id = 2
difficulty = 1500
solved = false
hints_used = 1
attempt_time = 1767225660000

[[attempts]]
player_id = 1
difficulty = 1550
solved = true
attempt_time = 1767312000000
""".strip()

CONFIG_TOML = """
[system]
name = "puzzle_test"

[glicko2]
tau = 0.75
rating_period_days = 1.0
enable_fractional_periods = true
""".strip()


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    directory = tmp_path / "configs"
    directory.mkdir()
    (directory / "puzzle.toml").write_text(CONFIG_TOML)
    return directory


@pytest.fixture
def attempts_file(tmp_path: Path) -> Path:
    path = tmp_path / "attempts.toml"
    path.write_text(ATTEMPTS_TOML)
    return path


def test_load_puzzle_attempts(attempts_file: Path) -> None:
    attempts = load_puzzle_attempts(attempts_file)

    assert [item.player_id for item in attempts] == [1, 2, 1]
    assert attempts[0].attempt.time_spent_ms == pytest.approx(25_000.0)
    assert attempts[1].attempt.hints_used == 1
    assert attempts[1].attempt.solved is False
    assert attempts[2].attempt.time_spent_ms is None
    assert attempts[2].attempt.attempt_time == pytest.approx(1_767_312_000_000.0)


def test_load_puzzle_attempts_requires_fields(tmp_path: Path) -> None:
    path = tmp_path / "broken.toml"
    path.write_text("[[attempts]]\nplayer_id = 1\nsolved = true\n")

    with pytest.raises(ValueError, match=r"attempts\[0\]\.difficulty is required"):
        load_puzzle_attempts(path)


def test_load_puzzle_attempts_rejects_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.toml"
    path.write_text("")

    with pytest.raises(ValueError, match="no \\[\\[attempts\\]\\] entries"):
        load_puzzle_attempts(path)


def test_replay_tracks_each_player(config_dir: Path, attempts_file: Path) -> None:
    (system_config,) = load_glicko2_system_configs(config_dir)
    lines: list[str] = []

    summary = replay(
        system_config=system_config,
        attempts=load_puzzle_attempts(attempts_file),
        echo=lines.append,
    )

    assert summary.system_name == "puzzle_test"
    assert summary.config_file == "puzzle.toml"
    assert summary.processed_attempts == 3
    assert summary.tracked_players == 2
    assert len(lines) == 3
    assert summary.final_states[1].rating > 1500.0
    assert summary.final_states[2].rating < 1500.0
    assert summary.final_states[1].last_update_time == pytest.approx(1_767_312_000_000.0)


def test_replay_cli(config_dir: Path, attempts_file: Path) -> None:
    result = CliRunner().invoke(
        replay_puzzle_attempts.app,
        [
            "--attempts-file",
            str(attempts_file),
            "--config-dir",
            str(config_dir),
            "--config-name",
            "puzzle.toml",
            "--verbose",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "loaded_attempts=3" in result.output
    assert "player_id=1 rating=" in result.output
    assert "completed processed_attempts=3 tracked_players=2" in result.output


def test_replay_cli_unknown_config_name(config_dir: Path, attempts_file: Path) -> None:
    result = CliRunner().invoke(
        replay_puzzle_attempts.app,
        [
            "--attempts-file",
            str(attempts_file),
            "--config-dir",
            str(config_dir),
            "--config-name",
            "missing.toml",
        ],
    )

    assert result.exit_code != 0


def test_show_rd_decay_cli() -> None:
    result = CliRunner().invoke(
        show_rd_decay.app,
        ["--rd", "50", "--volatility", "0.06", "--rating-period-days", "1", "--days", "10", "--step-days", "5"],
    )

    assert result.exit_code == 0, result.output
    lines = result.output.strip().splitlines()
    assert lines[0].split() == ["day", "periods", "rd"]
    assert len(lines) == 4
    assert lines[1].split()[2] == "50.000"
    assert float(lines[-1].split()[1]) == pytest.approx(10.0)
