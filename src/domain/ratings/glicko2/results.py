"""Opponent results accumulated by a player during one rating period."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True)
class Glicko2OpponentResult:
    """One result with the opponent expressed on the public scale."""

    opponent_rating: float
    opponent_rd: float
    score: float


@dataclass(frozen=True)
class ScaledOpponentResult:
    """One result with the opponent expressed on the internal Glicko-2 scale."""

    opponent_mu: float
    opponent_phi: float
    score: float


class ResultBuffer:
    """Ordered results recorded since the player's last period update.

    Scores are stored as given; keeping them within [0, 1] is the caller's job.
    """

    def __init__(self, results: list[ScaledOpponentResult] | None = None) -> None:
        self._results: list[ScaledOpponentResult] = list(results or [])

    def record(self, opponent_mu: float, opponent_phi: float, score: float) -> None:
        self._results.append(
            ScaledOpponentResult(opponent_mu=opponent_mu, opponent_phi=opponent_phi, score=score)
        )

    def is_empty(self) -> bool:
        return not self._results

    def clear(self) -> None:
        self._results.clear()

    def copy(self) -> ResultBuffer:
        return ResultBuffer(self._results)

    def __len__(self) -> int:
        return len(self._results)

    def __iter__(self) -> Iterator[ScaledOpponentResult]:
        return iter(self._results)
