"""Glicko-2 period update for a single player."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from math import exp, pi, sqrt
from typing import Final

from domain.ratings.glicko2.results import Glicko2OpponentResult, ScaledOpponentResult
from domain.ratings.glicko2.scale import DEFAULT_SCALE, ScaleConverter
from domain.ratings.glicko2.volatility import (
    VOLATILITY_ALGORITHMS,
    IllinoisVolatilitySolver,
    VolatilityArgs,
    VolatilitySolver,
)

MAX_TAU: Final[float] = 2.0
LICHESS_RATING_PERIOD_DAYS: Final[float] = 4.6


@dataclass(frozen=True)
class Glicko2Parameters:
    initial_rating: float = 1500.0
    initial_rd: float = 350.0
    initial_volatility: float = 0.06
    tau: float = 0.5
    rating_period_days: float = LICHESS_RATING_PERIOD_DAYS
    enable_fractional_periods: bool = False
    epsilon: float = 1e-6
    max_iterations: int = 100
    volatility_algorithm: str = "illinois"


def validate_tau(tau: float) -> None:
    if tau <= 0.0 or tau > MAX_TAU:
        raise ValueError(f"tau must be in (0, {MAX_TAU}], got {tau}")


def validate_parameters(parameters: Glicko2Parameters) -> None:
    """Reject parameter sets that would make the update ill-defined."""
    if parameters.initial_rd <= 0.0:
        raise ValueError("initial_rd must be > 0")
    if parameters.initial_volatility <= 0.0:
        raise ValueError("initial_volatility must be > 0")
    validate_tau(parameters.tau)
    if parameters.rating_period_days <= 0.0:
        raise ValueError("rating_period_days must be > 0")
    if parameters.epsilon <= 0.0:
        raise ValueError("epsilon must be > 0")
    if parameters.max_iterations <= 0:
        raise ValueError("max_iterations must be > 0")
    if parameters.volatility_algorithm not in VOLATILITY_ALGORITHMS:
        raise ValueError(
            f"volatility_algorithm must be one of {sorted(VOLATILITY_ALGORITHMS)}, "
            f"got '{parameters.volatility_algorithm}'"
        )


def _g(phi: float) -> float:
    return 1.0 / sqrt(1.0 + ((3.0 * (phi**2)) / (pi**2)))


def _expected(mu: float, opp_mu: float, opp_phi: float) -> float:
    exponent = -_g(opp_phi) * (mu - opp_mu)
    if exponent >= 0.0:
        exp_term = exp(-exponent)
        return exp_term / (1.0 + exp_term)
    exp_term = exp(exponent)
    return 1.0 / (1.0 + exp_term)


def calculate_expected_score(
    *,
    rating: float,
    rd: float,
    opponent_rating: float,
    opponent_rd: float,
    scale: ScaleConverter = DEFAULT_SCALE,
) -> float:
    """Compute expected score for one side under Glicko-2.

    ``rd`` is accepted for call-site symmetry; only the opponent's RD discounts E.
    """
    return _expected(
        scale.to_internal_rating(rating),
        scale.to_internal_rating(opponent_rating),
        scale.to_internal_rd(opponent_rd),
    )


def inflate_idle_phi(phi: float, sigma: float) -> float:
    """RD growth for a player who sat out a whole period."""
    return sqrt((phi**2) + (sigma**2))


def update_glicko2_state(
    *,
    mu: float,
    phi: float,
    sigma: float,
    results: Iterable[ScaledOpponentResult],
    tau: float,
    solver: VolatilitySolver,
) -> tuple[float, float, float]:
    """Run one rating period on the internal scale and return (mu', phi', sigma').

    With no results only the idle-period inflation is applied.
    """
    results = list(results)
    if not results:
        return mu, inflate_idle_phi(phi, sigma), sigma

    g_terms: list[float] = []
    e_terms: list[float] = []
    score_minus_e_terms: list[float] = []
    for result in results:
        g_term = _g(result.opponent_phi)
        expected = _expected(mu, result.opponent_mu, result.opponent_phi)
        g_terms.append(g_term)
        e_terms.append(expected)
        score_minus_e_terms.append(result.score - expected)

    v_inverse = 0.0
    for g_term, expected in zip(g_terms, e_terms):
        v_inverse += (g_term**2) * expected * (1.0 - expected)
    if v_inverse <= 0.0:
        # E saturated at 0 or 1 for every opponent; only the idle inflation applies.
        return mu, inflate_idle_phi(phi, sigma), sigma

    v = 1.0 / v_inverse
    improvement_sum = sum(
        g_term * score_minus_e for g_term, score_minus_e in zip(g_terms, score_minus_e_terms)
    )
    delta = v * improvement_sum

    # sigma' must be known before phi* is formed, and phi* uses the pre-period phi.
    sigma_prime = solver.solve(
        v,
        delta,
        VolatilityArgs(volatility=sigma, tau=tau, rd=phi, rating=mu),
    )
    phi_star = sqrt((phi**2) + (sigma_prime**2))
    phi_prime = 1.0 / sqrt((1.0 / (phi_star**2)) + (1.0 / v))
    mu_prime = mu + (phi_prime**2) * improvement_sum

    return mu_prime, phi_prime, sigma_prime


def update_glicko2_player(
    *,
    rating: float,
    rd: float,
    volatility: float,
    results: Sequence[Glicko2OpponentResult],
    tau: float = 0.5,
    epsilon: float = 1e-6,
    solver: VolatilitySolver | None = None,
    scale: ScaleConverter = DEFAULT_SCALE,
) -> tuple[float, float, float]:
    """Update one player for one Glicko-2 rating period on the public scale."""
    if solver is None:
        solver = IllinoisVolatilitySolver(epsilon=epsilon)

    mu_prime, phi_prime, sigma_prime = update_glicko2_state(
        mu=scale.to_internal_rating(rating),
        phi=scale.to_internal_rd(rd),
        sigma=volatility,
        results=[
            ScaledOpponentResult(
                opponent_mu=scale.to_internal_rating(result.opponent_rating),
                opponent_phi=scale.to_internal_rd(result.opponent_rd),
                score=result.score,
            )
            for result in results
        ],
        tau=tau,
        solver=solver,
    )
    return scale.to_public_rating(mu_prime), scale.to_public_rd(phi_prime), sigma_prime
