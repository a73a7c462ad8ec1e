"""Batch coordinator that creates players and runs rating periods over matches."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from domain.ratings.glicko2.calculator import Glicko2Parameters, validate_parameters
from domain.ratings.glicko2.fractional import FractionalPeriodCalculator, now_ms
from domain.ratings.glicko2.player import Player, RatingState
from domain.ratings.glicko2.scale import DEFAULT_SCALE, ScaleConverter
from domain.ratings.glicko2.volatility import VolatilitySolver, make_volatility_solver

Match = tuple[Player, Player, float]


class Glicko2:
    """Glicko-2 rating system with optional fractional rating periods.

    The system hands out players configured with its tau, solver and period
    calculator, but never keeps track of them.
    """

    def __init__(
        self,
        params: Glicko2Parameters | None = None,
        *,
        scale: ScaleConverter = DEFAULT_SCALE,
        solver: VolatilitySolver | None = None,
        clock: Callable[[], float] = now_ms,
    ) -> None:
        self.params = params if params is not None else Glicko2Parameters()
        validate_parameters(self.params)
        self.scale = scale
        self.clock = clock
        self.solver = (
            solver
            if solver is not None
            else make_volatility_solver(
                self.params.volatility_algorithm,
                epsilon=self.params.epsilon,
                max_iterations=self.params.max_iterations,
            )
        )
        self._period_calculator: FractionalPeriodCalculator | None = None
        if self.params.enable_fractional_periods:
            self._period_calculator = FractionalPeriodCalculator.from_days(
                self.params.rating_period_days
            )

    @property
    def period_calculator(self) -> FractionalPeriodCalculator | None:
        return self._period_calculator

    def is_fractional_periods_enabled(self) -> bool:
        return self._period_calculator is not None

    def make_player(
        self,
        rating: float | None = None,
        rd: float | None = None,
        volatility: float | None = None,
        *,
        player_id: int = 0,
        last_update_time: float | None = None,
    ) -> Player:
        return Player(
            self.params.initial_rating if rating is None else rating,
            self.params.initial_rd if rd is None else rd,
            self.params.initial_volatility if volatility is None else volatility,
            self.params.tau,
            player_id=player_id,
            scale=self.scale,
            solver=self.solver,
            clock=self.clock,
            fractional_calculator=self._period_calculator,
            last_update_time=last_update_time,
        )

    def update_ratings(
        self,
        matches: Sequence[Match],
        *,
        idle_players: Iterable[Player] = (),
        timestamp: float | None = None,
    ) -> list[Player]:
        """Run one rating period over ``matches`` and return the updated players.

        Each match is ``(player1, player2, outcome_for_player1)``. Every result
        is recorded against pre-period opponent values before any player is
        updated. ``idle_players`` sit the period out and only gain RD.
        """
        if timestamp is None:
            timestamp = self.clock()

        players: list[Player] = []
        seen: set[int] = set()
        for player in [p for match in matches for p in match[:2]] + list(idle_players):
            if id(player) not in seen:
                seen.add(id(player))
                players.append(player)

        for player1, player2, _ in matches:
            if player1 is player2:
                raise ValueError(f"player_id={player1.player_id} cannot play against itself")

        if self.is_fractional_periods_enabled():
            for player in players:
                player.advance_for_elapsed_time(timestamp)

        for player1, player2, outcome in matches:
            player1.add_result(player2, outcome)
            player2.add_result(player1, 1.0 - outcome)

        for player in players:
            player.run_period_update(timestamp)
        return players

    def update_rating_instant(
        self,
        player: Player,
        opponent_rating: float,
        opponent_rd: float,
        outcome: float,
        timestamp: float | None = None,
    ) -> RatingState:
        return player.update_instant(opponent_rating, opponent_rd, outcome, timestamp)
