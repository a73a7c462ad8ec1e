"""A single competitor tracked with Glicko-2 and optional fractional periods."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from domain.ratings.glicko2.calculator import update_glicko2_state, validate_tau
from domain.ratings.glicko2.fractional import FractionalPeriodCalculator, now_ms
from domain.ratings.glicko2.results import ResultBuffer
from domain.ratings.glicko2.scale import DEFAULT_SCALE, ScaleConverter
from domain.ratings.glicko2.volatility import IllinoisVolatilitySolver, VolatilitySolver


@dataclass(frozen=True)
class RatingState:
    """Public-scale snapshot of a player at a point in time."""

    rating: float
    rd: float
    volatility: float
    last_update_time: float


def _require_positive(name: str, value: float) -> None:
    if value <= 0.0:
        raise ValueError(f"{name} must be > 0, got {value}")


class Player:
    """Rating, RD and volatility of one competitor plus its pending results.

    State is held on the internal Glicko-2 scale and exposed on the public
    scale. The fractional calculator, when attached, is a shared read-only
    handle; all decay state lives on the player.
    """

    def __init__(
        self,
        rating: float,
        rd: float,
        volatility: float,
        tau: float,
        *,
        player_id: int = 0,
        scale: ScaleConverter = DEFAULT_SCALE,
        solver: VolatilitySolver | None = None,
        clock: Callable[[], float] = now_ms,
        fractional_calculator: FractionalPeriodCalculator | None = None,
        last_update_time: float | None = None,
    ) -> None:
        _require_positive("rd", rd)
        _require_positive("volatility", volatility)
        validate_tau(tau)

        self.player_id = player_id
        self.tau = tau
        self.scale = scale
        self.solver: VolatilitySolver = solver if solver is not None else IllinoisVolatilitySolver()
        self.clock = clock
        self.results = ResultBuffer()
        self._fractional_calculator = fractional_calculator
        self._mu = scale.to_internal_rating(rating)
        self._phi = scale.to_internal_rd(rd)
        self._sigma = volatility
        self.last_update_time = clock() if last_update_time is None else last_update_time

    def __repr__(self) -> str:
        return (
            f"Player(player_id={self.player_id}, rating={self.rating:.2f}, "
            f"rd={self.rd:.2f}, volatility={self.volatility:.6f})"
        )

    @property
    def rating(self) -> float:
        return self.scale.to_public_rating(self._mu)

    @rating.setter
    def rating(self, rating: float) -> None:
        self._mu = self.scale.to_internal_rating(rating)

    @property
    def rd(self) -> float:
        return self.scale.to_public_rd(self._phi)

    @rd.setter
    def rd(self, rd: float) -> None:
        _require_positive("rd", rd)
        self._phi = self.scale.to_internal_rd(rd)

    @property
    def volatility(self) -> float:
        return self._sigma

    @volatility.setter
    def volatility(self, volatility: float) -> None:
        _require_positive("volatility", volatility)
        self._sigma = volatility

    @property
    def fractional_calculator(self) -> FractionalPeriodCalculator | None:
        return self._fractional_calculator

    def attach_fractional_calculator(self, calculator: FractionalPeriodCalculator) -> None:
        self._fractional_calculator = calculator

    def detach_fractional_calculator(self) -> None:
        self._fractional_calculator = None

    def has_played(self) -> bool:
        return not self.results.is_empty()

    def record_result(self, opponent_rating: float, opponent_rd: float, outcome: float) -> None:
        """Queue a result against an opponent given on the public scale.

        ``outcome`` is 1 for a win, 0 for a loss, 0.5 for a draw; fractional
        values are accepted and not range-checked.
        """
        self.results.record(
            self.scale.to_internal_rating(opponent_rating),
            self.scale.to_internal_rd(opponent_rd),
            outcome,
        )

    def add_result(self, opponent: Player, outcome: float) -> None:
        self.record_result(opponent.rating, opponent.rd, outcome)

    def run_period_update(self, timestamp: float | None = None) -> None:
        """Apply one Glicko-2 rating period using (and then clearing) the queued results."""
        self._mu, self._phi, self._sigma = update_glicko2_state(
            mu=self._mu,
            phi=self._phi,
            sigma=self._sigma,
            results=self.results,
            tau=self.tau,
            solver=self.solver,
        )
        self.results.clear()
        self.last_update_time = self.clock() if timestamp is None else timestamp

    def advance_for_elapsed_time(self, timestamp: float | None = None) -> None:
        """Grow stored RD for the time elapsed since the last update."""
        calculator = self._fractional_calculator
        if calculator is None:
            return
        if timestamp is None:
            timestamp = self.clock()

        elapsed_periods = calculator.elapsed_periods(self.last_update_time, timestamp)
        if elapsed_periods > 0.0:
            self._phi = calculator.decayed_rd(self._phi, self._sigma, elapsed_periods)
            self.last_update_time = timestamp

    def snapshot(self) -> RatingState:
        return RatingState(
            rating=self.rating,
            rd=self.rd,
            volatility=self.volatility,
            last_update_time=self.last_update_time,
        )

    def current_state_at(self, timestamp: float | None = None) -> RatingState:
        """Project the state to ``timestamp`` without mutating the player."""
        calculator = self._fractional_calculator
        if calculator is None:
            return self.snapshot()
        if timestamp is None:
            timestamp = self.clock()

        elapsed_periods = calculator.elapsed_periods(self.last_update_time, timestamp)
        phi = self._phi
        if elapsed_periods > 0.0:
            phi = calculator.decayed_rd(phi, self._sigma, elapsed_periods)
        return RatingState(
            rating=self.rating,
            rd=self.scale.to_public_rd(phi),
            volatility=self.volatility,
            last_update_time=timestamp,
        )

    def update_instant(
        self,
        opponent_rating: float,
        opponent_rd: float,
        outcome: float,
        timestamp: float | None = None,
    ) -> RatingState:
        """Decay to ``timestamp``, apply a single result and return the new state."""
        if timestamp is None:
            timestamp = self.clock()
        self.advance_for_elapsed_time(timestamp)
        self.record_result(opponent_rating, opponent_rd, outcome)
        self.run_period_update(timestamp)
        return self.snapshot()

    def duplicate(self) -> Player:
        """Deep copy of scalar state and results; calculator and solver are shared."""
        clone = Player(
            self.rating,
            self.rd,
            self.volatility,
            self.tau,
            player_id=self.player_id,
            scale=self.scale,
            solver=self.solver,
            clock=self.clock,
            fractional_calculator=self._fractional_calculator,
            last_update_time=self.last_update_time,
        )
        clone._mu = self._mu
        clone._phi = self._phi
        clone._sigma = self._sigma
        clone.results = self.results.copy()
        return clone
