"""Puzzle-solving ratings on top of instant Glicko-2 updates."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace
from typing import Final

from domain.ratings.glicko2.calculator import Glicko2Parameters, calculate_expected_score
from domain.ratings.glicko2.player import Player, RatingState
from domain.ratings.glicko2.system import Glicko2

PUZZLE_RD: Final[float] = 50.0
HINT_RD_PENALTY: Final[float] = 10.0
HINT_OUTCOME_PENALTY: Final[float] = 0.1
FAST_SOLVE_MS: Final[float] = 30_000.0
FAST_SOLVE_BONUS: Final[float] = 0.1
SLOW_SOLVE_MS: Final[float] = 300_000.0
SLOW_SOLVE_PENALTY: Final[float] = 0.05
SUGGESTION_WINDOW: Final[float] = 500.0
SUGGESTION_STEPS: Final[int] = 20
SUGGESTION_TOLERANCE: Final[float] = 0.01

PUZZLE_PARAMETERS: Final[Glicko2Parameters] = Glicko2Parameters(
    initial_rating=1500.0,
    initial_rd=350.0,
    initial_volatility=0.06,
    tau=0.75,
    rating_period_days=1.0,
    enable_fractional_periods=True,
)


@dataclass(frozen=True)
class PuzzleAttempt:
    difficulty: float
    solved: bool
    time_spent_ms: float | None = None
    hints_used: int | None = None
    attempt_time: float | None = None


def attempt_outcome(attempt: PuzzleAttempt) -> float:
    """Soft score for an attempt, adjusted for solve time and hints, within [0, 1]."""
    outcome = 1.0 if attempt.solved else 0.0

    if attempt.time_spent_ms is not None and attempt.solved:
        if attempt.time_spent_ms < FAST_SOLVE_MS:
            outcome = min(1.0, outcome + FAST_SOLVE_BONUS)
        elif attempt.time_spent_ms > SLOW_SOLVE_MS:
            outcome = max(0.0, outcome - SLOW_SOLVE_PENALTY)

    if attempt.hints_used:
        outcome = max(0.0, outcome - (attempt.hints_used * HINT_OUTCOME_PENALTY))

    return min(1.0, max(0.0, outcome))


def attempt_puzzle_rd(attempt: PuzzleAttempt) -> float:
    """Puzzle RD; hints make the outcome a noisier signal."""
    if attempt.hints_used is None:
        return PUZZLE_RD
    return PUZZLE_RD + (attempt.hints_used * HINT_RD_PENALTY)


class PuzzleRatingManager(Glicko2):
    """Glicko-2 tuned for puzzles: higher tau, one-day periods, instant updates.

    Puzzle difficulties are treated as well-known opponents with a low RD.
    """

    def __init__(self, params: Glicko2Parameters | None = None, **kwargs) -> None:
        if params is None:
            params = PUZZLE_PARAMETERS
        super().__init__(params, **kwargs)

    @classmethod
    def with_overrides(cls, **overrides) -> PuzzleRatingManager:
        """Puzzle defaults with selected parameters replaced."""
        return cls(replace(PUZZLE_PARAMETERS, **overrides))

    def process_attempt(
        self,
        player: Player,
        puzzle_difficulty: float,
        solved: bool,
        attempt_time: float | None = None,
    ) -> RatingState:
        return self.update_rating_instant(
            player,
            puzzle_difficulty,
            PUZZLE_RD,
            1.0 if solved else 0.0,
            attempt_time,
        )

    def process_attempt_advanced(
        self,
        player: Player,
        attempt: PuzzleAttempt,
        attempt_time: float | None = None,
    ) -> RatingState:
        if attempt_time is None:
            attempt_time = attempt.attempt_time
        return self.update_rating_instant(
            player,
            attempt.difficulty,
            attempt_puzzle_rd(attempt),
            attempt_outcome(attempt),
            attempt_time,
        )

    def process_attempts(self, player: Player, attempts: Sequence[PuzzleAttempt]) -> RatingState:
        """Apply attempts in order and return the state after the last one."""
        if not attempts:
            raise ValueError("attempts must contain at least one puzzle attempt")
        final_state = player.snapshot()
        for attempt in attempts:
            final_state = self.process_attempt_advanced(player, attempt)
        return final_state

    def expected_score(
        self,
        player_rating: float,
        puzzle_difficulty: float,
        player_rd: float = PUZZLE_RD,
    ) -> float:
        """Probability of solving a puzzle, discounted by the player's RD."""
        return calculate_expected_score(
            rating=player_rating,
            rd=player_rd,
            opponent_rating=puzzle_difficulty,
            opponent_rd=player_rd,
            scale=self.scale,
        )

    def suggest_puzzle_difficulty(
        self,
        player: Player,
        target_success_rate: float = 0.7,
        timestamp: float | None = None,
    ) -> int:
        """Bisect for the difficulty the player is expected to solve at ``target_success_rate``."""
        if not 0.0 < target_success_rate < 1.0:
            raise ValueError("target_success_rate must be between 0 and 1 (exclusive)")

        state = player.current_state_at(timestamp)
        low = state.rating - SUGGESTION_WINDOW
        high = state.rating + SUGGESTION_WINDOW
        for _ in range(SUGGESTION_STEPS):
            mid = (low + high) / 2.0
            expected = self.expected_score(state.rating, mid, state.rd)
            if abs(expected - target_success_rate) < SUGGESTION_TOLERANCE:
                return round(mid)
            if expected > target_success_rate:
                low = mid
            else:
                high = mid
        return round((low + high) / 2.0)
