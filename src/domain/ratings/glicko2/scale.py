"""Conversion between the public rating scale and the internal Glicko-2 scale."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

GLICKO2_SCALE: Final[float] = 173.7178
DEFAULT_RATING: Final[float] = 1500.0


@dataclass(frozen=True)
class ScaleConverter:
    """Affine map between public ratings (~0-3000) and Glicko-2 mu/phi values."""

    scaling_factor: float = GLICKO2_SCALE
    default_rating: float = DEFAULT_RATING

    def to_internal_rating(self, rating: float) -> float:
        return (rating - self.default_rating) / self.scaling_factor

    def to_public_rating(self, mu: float) -> float:
        return (mu * self.scaling_factor) + self.default_rating

    def to_internal_rd(self, rd: float) -> float:
        return rd / self.scaling_factor

    def to_public_rd(self, phi: float) -> float:
        return phi * self.scaling_factor


DEFAULT_SCALE: Final[ScaleConverter] = ScaleConverter()
