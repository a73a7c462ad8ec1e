"""Rating-system domain modules."""

from domain.ratings.glicko2 import Glicko2, Player, RatingState

__all__ = ["Glicko2", "Player", "RatingState"]
