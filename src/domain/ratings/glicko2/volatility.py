"""Volatility solvers for step 5 of the Glicko-2 update."""

from __future__ import annotations

from dataclasses import dataclass
from math import exp, log
from typing import Protocol, runtime_checkable


class VolatilityConvergenceError(RuntimeError):
    """Raised when a solver exhausts its iteration budget."""


@dataclass(frozen=True)
class VolatilityArgs:
    """Player state handed to a solver, all on the internal Glicko-2 scale."""

    volatility: float
    tau: float
    rd: float
    rating: float


@runtime_checkable
class VolatilitySolver(Protocol):
    """Contract for anything that can produce sigma' from v and delta."""

    def solve(self, v: float, delta: float, args: VolatilityArgs) -> float: ...


def _validate_budget(epsilon: float, max_iterations: int) -> None:
    if epsilon <= 0.0:
        raise ValueError("epsilon must be > 0")
    if max_iterations <= 0:
        raise ValueError("max_iterations must be > 0")


@dataclass(frozen=True)
class IllinoisVolatilitySolver:
    """Glickman's bracketing procedure (Illinois variant of regula falsi)."""

    epsilon: float = 1e-6
    max_iterations: int = 100
    max_bracket_steps: int = 1_000

    def __post_init__(self) -> None:
        _validate_budget(self.epsilon, self.max_iterations)
        if self.max_bracket_steps <= 0:
            raise ValueError("max_bracket_steps must be > 0")

    def solve(self, v: float, delta: float, args: VolatilityArgs) -> float:
        phi = args.rd
        tau = args.tau
        a = log(args.volatility**2)

        def f(x: float) -> float:
            ex = exp(x)
            numerator = ex * ((delta**2) - (phi**2) - v - ex)
            denominator = 2.0 * ((phi**2) + v + ex) ** 2
            return (numerator / denominator) - ((x - a) / (tau**2))

        a_value = a
        if (delta**2) > ((phi**2) + v):
            b_value = log((delta**2) - (phi**2) - v)
        else:
            k = 1
            b_value = a_value - (k * tau)
            while f(b_value) < 0.0:
                k += 1
                if k > self.max_bracket_steps:
                    raise VolatilityConvergenceError(
                        "Glicko-2 volatility solve failed to bracket root."
                    )
                b_value = a_value - (k * tau)

        f_a = f(a_value)
        f_b = f(b_value)
        iterations = 0
        while abs(b_value - a_value) > self.epsilon:
            iterations += 1
            if iterations > self.max_iterations:
                raise VolatilityConvergenceError(
                    f"Glicko-2 volatility solve did not converge within "
                    f"{self.max_iterations} iterations (epsilon={self.epsilon})."
                )
            if f_b == f_a:
                c_value = (a_value + b_value) / 2.0
            else:
                c_value = a_value + (((a_value - b_value) * f_a) / (f_b - f_a))
            f_c = f(c_value)
            if f_c * f_b < 0.0:
                a_value = b_value
                f_a = f_b
            else:
                f_a /= 2.0
            b_value = c_value
            f_b = f_c

        return exp(a_value / 2.0)


@dataclass(frozen=True)
class NewtonVolatilitySolver:
    """Newton-Raphson iteration on x = ln(sigma^2), as in the 2008 Glicko-2 paper.

    The objective is positive left of its single root and negative right of it,
    so every iterate tightens a bracket. A Newton step that leaves the bracket
    (large surprises make the curvature change sign) is replaced by bisection,
    or by a step of ``tau`` toward the root while one side is still open.
    """

    epsilon: float = 1e-6
    max_iterations: int = 100

    def __post_init__(self) -> None:
        _validate_budget(self.epsilon, self.max_iterations)

    def solve(self, v: float, delta: float, args: VolatilityArgs) -> float:
        phi_sq = args.rd**2
        tau_sq = args.tau**2
        a = log(args.volatility**2)

        lower: float | None = None
        upper: float | None = None
        x0 = a
        for _ in range(self.max_iterations):
            ex = exp(x0)
            d = phi_sq + v + ex
            h1 = -(x0 - a) / tau_sq - 0.5 * ex / d + 0.5 * ex * (delta / d) ** 2
            if h1 == 0.0:
                return exp(x0 / 2.0)
            h2 = (
                -1.0 / tau_sq
                - 0.5 * ex * (phi_sq + v) / (d**2)
                + 0.5 * (delta**2) * ex * (phi_sq + v - ex) / (d**3)
            )
            if h1 > 0.0:
                lower = x0
            else:
                upper = x0

            x1 = x0 - (h1 / h2) if h2 != 0.0 else x0
            inside = (lower is None or x1 > lower) and (upper is None or x1 < upper)
            if not inside:
                if lower is not None and upper is not None:
                    x1 = (lower + upper) / 2.0
                elif h1 > 0.0:
                    x1 = x0 + args.tau
                else:
                    x1 = x0 - args.tau
            if abs(x1 - x0) < self.epsilon:
                return exp(x1 / 2.0)
            x0 = x1

        raise VolatilityConvergenceError(
            f"Glicko-2 Newton volatility solve did not converge within "
            f"{self.max_iterations} iterations (epsilon={self.epsilon})."
        )


VOLATILITY_ALGORITHMS: dict[str, type[IllinoisVolatilitySolver] | type[NewtonVolatilitySolver]] = {
    "illinois": IllinoisVolatilitySolver,
    "newton": NewtonVolatilitySolver,
}


def make_volatility_solver(
    algorithm: str = "illinois",
    *,
    epsilon: float = 1e-6,
    max_iterations: int = 100,
) -> VolatilitySolver:
    """Build a solver by its config name."""
    solver_cls = VOLATILITY_ALGORITHMS.get(algorithm)
    if solver_cls is None:
        raise ValueError(
            f"Unknown volatility algorithm '{algorithm}'. "
            f"Expected one of: {sorted(VOLATILITY_ALGORITHMS)}"
        )
    return solver_cls(epsilon=epsilon, max_iterations=max_iterations)
