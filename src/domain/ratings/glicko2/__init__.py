"""Glicko-2 rating modules."""

from domain.ratings.glicko2.calculator import (
    Glicko2Parameters,
    calculate_expected_score,
    update_glicko2_player,
    update_glicko2_state,
    validate_parameters,
)
from domain.ratings.glicko2.config import Glicko2SystemConfig, load_glicko2_system_configs
from domain.ratings.glicko2.fractional import FractionalPeriodCalculator, now_ms
from domain.ratings.glicko2.player import Player, RatingState
from domain.ratings.glicko2.puzzle import PuzzleAttempt, PuzzleRatingManager
from domain.ratings.glicko2.results import (
    Glicko2OpponentResult,
    ResultBuffer,
    ScaledOpponentResult,
)
from domain.ratings.glicko2.scale import DEFAULT_SCALE, ScaleConverter
from domain.ratings.glicko2.system import Glicko2
from domain.ratings.glicko2.volatility import (
    IllinoisVolatilitySolver,
    NewtonVolatilitySolver,
    VolatilityArgs,
    VolatilityConvergenceError,
    VolatilitySolver,
    make_volatility_solver,
)

__all__ = [
    "DEFAULT_SCALE",
    "FractionalPeriodCalculator",
    "Glicko2",
    "Glicko2OpponentResult",
    "Glicko2Parameters",
    "Glicko2SystemConfig",
    "IllinoisVolatilitySolver",
    "NewtonVolatilitySolver",
    "Player",
    "PuzzleAttempt",
    "PuzzleRatingManager",
    "RatingState",
    "ResultBuffer",
    "ScaleConverter",
    "ScaledOpponentResult",
    "VolatilityArgs",
    "VolatilityConvergenceError",
    "VolatilitySolver",
    "calculate_expected_score",
    "load_glicko2_system_configs",
    "make_volatility_solver",
    "now_ms",
    "update_glicko2_player",
    "update_glicko2_state",
    "validate_parameters",
]
