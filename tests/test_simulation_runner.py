"""
Tests for the autopilot and the headless simulation runner.
"""

import pytest

from entities.enemy import Enemy
from entities.player import Intent, NO_INTENTS
from ai.simulation_runner import SimulationRunner, autopilot_intents


def only_enemy(director, scripted_rng, x, y=450):
    enemy = Enemy(x, y, scripted_rng((0.5,)))
    enemy.set_target(director.player)
    director.enemies = [enemy]
    return enemy


def test_walks_off_once_arena_is_clear(director):
    director.enemies = []
    director.phases.transitioning = True
    assert autopilot_intents(director) == {Intent.MOVE_RIGHT}


def test_waits_when_nobody_is_around(director):
    director.enemies = []
    assert autopilot_intents(director) == NO_INTENTS


def test_dead_player_does_nothing(director):
    director.player.apply_damage(1000)
    assert autopilot_intents(director) == NO_INTENTS


def test_moves_toward_nearest_enemy(director, scripted_rng):
    only_enemy(director, scripted_rng, x=400, y=500)
    intents = autopilot_intents(director)
    assert Intent.MOVE_RIGHT in intents
    assert Intent.MOVE_DOWN in intents


def test_swings_when_in_reach(director, scripted_rng):
    only_enemy(director, scripted_rng, x=140)
    intents = autopilot_intents(director)
    assert intents & {Intent.JAB, Intent.STRAIGHT}


def test_turns_before_swinging(director, scripted_rng):
    only_enemy(director, scripted_rng, x=70)
    assert autopilot_intents(director) == {Intent.MOVE_LEFT}


def test_fires_special_at_close_range(director, scripted_rng):
    director.player.unlock_special()
    only_enemy(director, scripted_rng, x=200)
    assert autopilot_intents(director) == {Intent.SPECIAL}


def test_rejects_bad_tick_cap():
    with pytest.raises(ValueError):
        SimulationRunner(max_ticks=0)


def test_short_run_times_out(capsys):
    runner = SimulationRunner(n_sessions=2, max_ticks=300, seed=5)
    results = runner.run()
    assert [r.session_number for r in results] == [1, 2]
    for r in results:
        assert r.ticks <= 300
        assert r.result in ("timeout", "defeat", "victory")
    assert "Simulation Results" in capsys.readouterr().out
    assert runner.results == results
    assert runner.results is not runner._results


def test_runs_are_reproducible():
    first = SimulationRunner(n_sessions=1, max_ticks=400, seed=11).run_one(1)
    second = SimulationRunner(n_sessions=1, max_ticks=400, seed=11).run_one(1)
    assert first == second
