"""Fractional rating periods for instant, time-aware RD updates.

Follows the Lichess approach: instead of inflating RD once per closed rating
period, RD grows continuously with the fraction of a period that has elapsed
since the player's last update.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from math import sqrt
from typing import Final

MS_PER_DAY: Final[float] = 24 * 60 * 60 * 1000.0


def now_ms() -> float:
    """Wall-clock time in milliseconds since the Unix epoch."""
    return time.time() * 1000.0


@dataclass(frozen=True)
class FractionalPeriodCalculator:
    """Maps elapsed wall-clock time to a (fractional) count of rating periods."""

    rating_period_ms: float

    def __post_init__(self) -> None:
        if self.rating_period_ms <= 0.0:
            raise ValueError("rating period length must be > 0")

    @classmethod
    def from_days(cls, rating_period_days: float = 4.6) -> FractionalPeriodCalculator:
        if rating_period_days <= 0.0:
            raise ValueError("rating_period_days must be > 0")
        return cls(rating_period_ms=rating_period_days * MS_PER_DAY)

    @property
    def rating_period_days(self) -> float:
        return self.rating_period_ms / MS_PER_DAY

    def elapsed_periods(self, last_update_time: float, current_time: float | None = None) -> float:
        """Periods since ``last_update_time``; zero if the clock went backwards."""
        if current_time is None:
            current_time = now_ms()
        elapsed_ms = current_time - last_update_time
        return max(0.0, elapsed_ms / self.rating_period_ms)

    @staticmethod
    def decayed_rd(current_rd: float, volatility: float, elapsed_periods: float) -> float:
        """newRD = sqrt(oldRD^2 + elapsed_periods * volatility^2).

        Both operands must be on the same scale; ``Player`` passes internal phi and sigma.
        """
        return sqrt((current_rd**2) + (elapsed_periods * (volatility**2)))
