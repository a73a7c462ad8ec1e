"""Load Glicko-2 system definitions from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any
import tomllib

from domain.ratings.glicko2.calculator import Glicko2Parameters, validate_parameters


@dataclass(frozen=True)
class Glicko2SystemConfig:
    """Configuration for one Glicko-2 rating system."""

    name: str
    description: str | None
    file_path: Path
    parameters: Glicko2Parameters

    def as_config_json(self) -> dict[str, Any]:
        return {
            "initial_rating": self.parameters.initial_rating,
            "initial_rd": self.parameters.initial_rd,
            "initial_volatility": self.parameters.initial_volatility,
            "tau": self.parameters.tau,
            "rating_period_days": self.parameters.rating_period_days,
            "enable_fractional_periods": self.parameters.enable_fractional_periods,
            "epsilon": self.parameters.epsilon,
            "max_iterations": self.parameters.max_iterations,
            "volatility_algorithm": self.parameters.volatility_algorithm,
        }


def load_glicko2_system_configs(config_dir: Path) -> list[Glicko2SystemConfig]:
    """Load and validate every ``*.toml`` file in ``config_dir``; names must be unique."""
    if not config_dir.exists():
        raise FileNotFoundError(f"Config directory not found: {config_dir}")
    if not config_dir.is_dir():
        raise NotADirectoryError(f"Config path is not a directory: {config_dir}")

    config_files = sorted(config_dir.glob("*.toml"))
    if not config_files:
        raise ValueError(f"No .toml config files found in: {config_dir}")

    systems: list[Glicko2SystemConfig] = []
    for file_path in config_files:
        with file_path.open("rb") as file:
            systems.append(_parse_config(tomllib.load(file), file_path))

    names = [system.name for system in systems]
    if len(names) != len(set(names)):
        raise ValueError(f"Duplicate glicko2 system names found in {config_dir}: {names}")
    return systems


def _parse_config(raw: dict[str, Any], file_path: Path) -> Glicko2SystemConfig:
    system_raw = raw.get("system", {})
    glicko2_raw = raw.get("glicko2", {})

    name = str(system_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [system].name is required")

    description_value = system_raw.get("description")
    description = None if description_value is None else str(description_value)

    parameters = Glicko2Parameters(
        initial_rating=float(glicko2_raw.get("initial_rating", 1500.0)),
        initial_rd=float(glicko2_raw.get("initial_rd", 350.0)),
        initial_volatility=float(glicko2_raw.get("initial_volatility", 0.06)),
        tau=float(glicko2_raw.get("tau", 0.5)),
        rating_period_days=float(glicko2_raw.get("rating_period_days", 4.6)),
        enable_fractional_periods=bool(glicko2_raw.get("enable_fractional_periods", False)),
        epsilon=float(glicko2_raw.get("epsilon", 1e-6)),
        max_iterations=int(glicko2_raw.get("max_iterations", 100)),
        volatility_algorithm=str(glicko2_raw.get("volatility_algorithm", "illinois")),
    )
    try:
        validate_parameters(parameters)
    except ValueError as exc:
        raise ValueError(f"{file_path}: [glicko2].{exc}") from exc

    return Glicko2SystemConfig(
        file_path=file_path,
        name=name,
        description=description,
        parameters=parameters,
    )
