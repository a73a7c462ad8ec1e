"""Unit tests for the Glicko-2 player record and its time-aware operations."""

from __future__ import annotations

from math import sqrt

import pytest

from domain.ratings.glicko2.fractional import MS_PER_DAY, FractionalPeriodCalculator
from domain.ratings.glicko2.player import Player, RatingState
from domain.ratings.glicko2.scale import DEFAULT_SCALE

START_TIME = 1_767_225_600_000.0


def _player(**kwargs) -> Player:
    defaults = {
        "clock": lambda: START_TIME,
        "fractional_calculator": FractionalPeriodCalculator.from_days(1.0),
    }
    defaults.update(kwargs)
    return Player(1500.0, 100.0, 0.06, 0.5, **defaults)


def test_public_accessors_round_trip() -> None:
    player = _player()
    assert player.rating == pytest.approx(1500.0)
    assert player.rd == pytest.approx(100.0)
    assert player.volatility == pytest.approx(0.06)
    assert player.last_update_time == START_TIME

    player.rating = 1712.5
    player.rd = 42.0
    player.volatility = 0.07
    assert player.rating == pytest.approx(1712.5)
    assert player.rd == pytest.approx(42.0)
    assert player.volatility == pytest.approx(0.07)


@pytest.mark.parametrize(
    ("rd", "volatility", "tau", "message"),
    [
        (0.0, 0.06, 0.5, "rd must be > 0"),
        (100.0, 0.0, 0.5, "volatility must be > 0"),
        (100.0, 0.06, 0.0, "tau must be in"),
        (100.0, 0.06, 3.0, "tau must be in"),
    ],
)
def test_invalid_construction_is_rejected(rd: float, volatility: float, tau: float, message: str) -> None:
    with pytest.raises(ValueError, match=message):
        Player(1500.0, rd, volatility, tau)


def test_setters_keep_rd_and_volatility_positive() -> None:
    player = _player()
    with pytest.raises(ValueError):
        player.rd = -5.0
    with pytest.raises(ValueError):
        player.volatility = 0.0


def test_record_result_stores_internal_scale_values() -> None:
    player = _player()
    player.record_result(1600.0, 50.0, 1.0)

    (result,) = list(player.results)
    assert result.opponent_mu == pytest.approx(DEFAULT_SCALE.to_internal_rating(1600.0))
    assert result.opponent_phi == pytest.approx(DEFAULT_SCALE.to_internal_rd(50.0))
    assert result.score == 1.0
    assert player.has_played()


def test_out_of_range_outcomes_are_not_rejected() -> None:
    player = _player()
    player.record_result(1500.0, 50.0, 1.5)
    assert len(player.results) == 1


def test_win_against_stronger_opponent() -> None:
    player = _player()
    phi = DEFAULT_SCALE.to_internal_rd(100.0)
    player.record_result(1600.0, 50.0, 1.0)
    player.run_period_update()

    inflated_rd = DEFAULT_SCALE.to_public_rd(sqrt(phi**2 + player.volatility**2))
    assert player.rating > 1500.0
    assert player.rd < inflated_rd
    assert player.rd < 100.0


def test_loss_against_weaker_opponent() -> None:
    player = _player()
    player.record_result(1400.0, 50.0, 0.0)
    player.run_period_update()
    assert player.rating < 1500.0


def test_period_update_clears_results() -> None:
    player = _player()
    player.record_result(1600.0, 50.0, 1.0)
    player.run_period_update()
    rating_after_win = player.rating
    rd_after_win = player.rd

    assert not player.has_played()

    player.run_period_update()
    assert player.rating == pytest.approx(rating_after_win)
    assert player.rd > rd_after_win


def test_period_update_sets_last_update_time() -> None:
    player = _player()
    player.run_period_update(START_TIME + 5_000.0)
    assert player.last_update_time == START_TIME + 5_000.0


def test_add_result_uses_opponent_public_values() -> None:
    player = _player()
    opponent = Player(1650.0, 80.0, 0.06, 0.5, clock=lambda: START_TIME)
    player.add_result(opponent, 0.5)

    (result,) = list(player.results)
    assert DEFAULT_SCALE.to_public_rating(result.opponent_mu) == pytest.approx(1650.0)
    assert DEFAULT_SCALE.to_public_rd(result.opponent_phi) == pytest.approx(80.0)


def test_advance_matches_idle_period_after_one_full_period() -> None:
    decayed = _player()
    idle = _player()

    decayed.advance_for_elapsed_time(START_TIME + MS_PER_DAY)
    idle.run_period_update()

    assert decayed.rd == pytest.approx(idle.rd)
    assert decayed.rating == pytest.approx(1500.0)
    assert decayed.last_update_time == START_TIME + MS_PER_DAY


def test_advance_uses_fractional_periods() -> None:
    player = _player()
    player.advance_for_elapsed_time(START_TIME + MS_PER_DAY / 4)

    phi = DEFAULT_SCALE.to_internal_rd(100.0)
    expected = DEFAULT_SCALE.to_public_rd(sqrt(phi**2 + 0.25 * 0.06**2))
    assert player.rd == pytest.approx(expected)


def test_advance_ignores_timestamps_in_the_past() -> None:
    player = _player()
    player.advance_for_elapsed_time(START_TIME - MS_PER_DAY)

    assert player.rd == pytest.approx(100.0)
    assert player.last_update_time == START_TIME


def test_advance_without_calculator_is_noop() -> None:
    player = _player(fractional_calculator=None)
    player.advance_for_elapsed_time(START_TIME + 10 * MS_PER_DAY)

    assert player.rd == pytest.approx(100.0)
    assert player.last_update_time == START_TIME


def test_current_state_at_is_read_only_and_idempotent() -> None:
    player = _player()
    later = START_TIME + 12 * 60 * 60 * 1000

    first = player.current_state_at(later)
    second = player.current_state_at(later)

    assert first == second
    assert first.rd > 100.0
    assert first.last_update_time == later
    assert player.rd == pytest.approx(100.0)
    assert player.last_update_time == START_TIME


def test_current_state_at_defaults_to_clock() -> None:
    player = _player()
    assert player.current_state_at() == player.snapshot()


def test_current_state_without_calculator_is_snapshot() -> None:
    player = _player(fractional_calculator=None)
    state = player.current_state_at(START_TIME + 30 * MS_PER_DAY)
    assert state == RatingState(
        rating=pytest.approx(1500.0),
        rd=pytest.approx(100.0),
        volatility=pytest.approx(0.06),
        last_update_time=START_TIME,
    )


def test_attach_and_detach_calculator() -> None:
    player = _player(fractional_calculator=None)
    calculator = FractionalPeriodCalculator.from_days(1.0)

    player.attach_fractional_calculator(calculator)
    assert player.fractional_calculator is calculator
    assert player.current_state_at(START_TIME + MS_PER_DAY).rd > 100.0

    player.detach_fractional_calculator()
    assert player.fractional_calculator is None
    assert player.current_state_at(START_TIME + MS_PER_DAY).rd == pytest.approx(100.0)


def test_update_instant_decays_then_rates() -> None:
    player = _player()
    reference = _player()
    result_time = START_TIME + 2 * MS_PER_DAY

    state = player.update_instant(1600.0, 50.0, 1.0, result_time)

    reference.advance_for_elapsed_time(result_time)
    reference.record_result(1600.0, 50.0, 1.0)
    reference.run_period_update(result_time)

    assert state.rating > 1500.0
    assert state.last_update_time == result_time
    assert state == reference.snapshot()
    assert not player.has_played()


def test_update_instant_after_decay_moves_rating_more() -> None:
    fresh = _player()
    rusty = _player()

    fresh_state = fresh.update_instant(1600.0, 50.0, 1.0, START_TIME)
    rusty_state = rusty.update_instant(1600.0, 50.0, 1.0, START_TIME + 30 * MS_PER_DAY)

    assert rusty_state.rating > fresh_state.rating


def test_duplicate_is_independent_snapshot() -> None:
    player = _player(player_id=7)
    player.record_result(1600.0, 50.0, 1.0)

    clone = player.duplicate()
    assert clone.player_id == 7
    assert clone.snapshot() == player.snapshot()
    assert len(clone.results) == 1
    assert clone.fractional_calculator is player.fractional_calculator
    assert clone.solver is player.solver

    clone.run_period_update(START_TIME + MS_PER_DAY)
    assert player.rating == pytest.approx(1500.0)
    assert player.has_played()
    assert player.last_update_time == START_TIME
    assert clone.rating > player.rating


def test_current_state_at_reports_queried_time() -> None:
    player = Player(
        1500.0,
        100.0,
        0.06,
        0.5,
        clock=lambda: 0.0,
        fractional_calculator=FractionalPeriodCalculator.from_days(1.0),
    )

    state = player.current_state_at(MS_PER_DAY)

    assert state.last_update_time == MS_PER_DAY
    assert state.rd == pytest.approx(
        DEFAULT_SCALE.to_public_rd(sqrt(DEFAULT_SCALE.to_internal_rd(100.0) ** 2 + 0.06**2))
    )
    assert player.last_update_time == 0.0
