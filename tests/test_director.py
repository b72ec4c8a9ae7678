"""
Tests for the encounter director: tick order, scoring, progression,
bosses, pause/restart and the snapshot handed to the front end.
"""

import dataclasses

import pytest

from entities.actor import AnimState
from entities.enemy import Enemy
from entities.player import Intent, SpecialPhase
from systems.ability_system import AbilityPhase
from systems.director import EncounterDirector
from systems.events import EventKind, Theme
from ai.simulation_runner import autopilot_intents


def kinds(events):
    return [e.kind for e in events]


def kill(enemy):
    """Drop the enemy dead with its death animation already finished."""
    enemy.apply_damage(10 ** 6)
    enemy.state_timer = 0


def place_enemy(director, scripted_rng, x=140, y=450, rolls=(0.5,)):
    enemy = Enemy(x, y, scripted_rng(rolls))
    enemy.set_target(director.player)
    director.enemies = [enemy]
    return enemy


def boss_of(director):
    return next(e for e in director.enemies if e.is_boss)


# ── Session start ─────────────────────────────────────────

def test_initial_state(director):
    snap = director.snapshot()
    assert snap.phase == 1
    assert snap.chaos == 0
    assert snap.multiplier == 1
    assert snap.health == snap.max_health == 100
    assert snap.target_chaos == 100
    assert snap.tick == 0
    assert len(snap.enemies) == 3
    assert all(e.x in (-150, 950) for e in snap.enemies)
    assert all(250 <= e.y <= 580 for e in snap.enemies)
    assert not snap.special_unlocked


def test_same_seed_same_session():
    a, b = EncounterDirector(seed=7), EncounterDirector(seed=7)
    for _ in range(300):
        snap_a = a.tick(autopilot_intents(a))
        snap_b = b.tick(autopilot_intents(b))
    assert snap_a == snap_b
    assert kinds(a.drain_events()) == kinds(b.drain_events())


def test_first_tick_announces_theme(director):
    director.tick()
    events = director.drain_events()
    assert kinds(events) == [EventKind.THEME_CHANGED]
    assert events[0].theme is Theme.PHASE_1
    director.tick()
    assert director.drain_events() == []


# ── Hitstop & pause ───────────────────────────────────────

def test_hitstop_freezes_the_world(director):
    director.hitstop = 3
    before = [(e.x, e.y) for e in director.enemies]
    for _ in range(3):
        snap = director.tick(frozenset({Intent.MOVE_RIGHT}))
    assert snap.tick == 0
    assert snap.hitstop == 0
    assert director.player.x == 100
    assert [(e.x, e.y) for e in director.enemies] == before

    assert director.tick().tick == 1


def test_pause_freezes_and_switches_music(director):
    director.tick()
    director.drain_events()

    assert director.toggle_pause()
    snap = director.tick(frozenset({Intent.MOVE_RIGHT}))
    assert snap.paused
    assert snap.tick == 1
    events = director.drain_events()
    assert events[0].theme is Theme.MENU

    assert not director.set_paused(True)
    assert director.toggle_pause()
    assert director.tick().tick == 2
    assert director.drain_events()[0].theme is Theme.PHASE_1


# ── Combat bookkeeping ────────────────────────────────────

def test_landed_jab_builds_streak_and_hitstop(director, scripted_rng):
    enemy = place_enemy(director, scripted_rng)
    director.tick(frozenset({Intent.JAB}))
    for _ in range(4):
        director.tick()

    assert enemy.hp == 21
    assert director.streak == 1
    assert director.hitstop == 8
    assert EventKind.HIT_LANDED in kinds(director.drain_events())

    ticks = director.tick_count
    director.tick()
    assert director.tick_count == ticks
    assert director.hitstop == 7


def test_taking_a_hit_resets_streak(director, scripted_rng):
    enemy = place_enemy(director, scripted_rng)
    enemy.facing = -1
    enemy.set_animation_state(AnimState.ATTACK_JAB)
    enemy.current_frame = 1
    director.streak = 7

    snap = director.tick()
    assert snap.health == 94
    assert snap.streak == 0
    assert snap.multiplier == 1
    assert snap.hitstop == 8
    assert EventKind.PLAYER_HIT in kinds(director.drain_events())


def test_kill_awards_chaos_times_multiplier(director, scripted_rng):
    enemy = place_enemy(director, scripted_rng)
    kill(enemy)
    director.streak = 10
    director.multiplier = 3

    snap = director.tick()
    assert snap.chaos == 60
    assert snap.multiplier == 3
    assert enemy not in director.enemies


def test_dying_boss_blast_stops_hurting(director, scripted_rng):
    player = director.player
    boss = Enemy(player.x + 60, player.y, scripted_rng(()), is_boss=True,
                 max_hp=200, scale=2.0)
    boss.set_target(player)
    director.enemies = [boss]
    boss.blast.phase = AbilityPhase.ACTIVE
    boss.blast.active_remaining = 60
    boss.blast.radius = 300.0

    boss.apply_damage(10 ** 6)
    for _ in range(14):
        director.tick()
    assert boss in director.enemies
    assert boss.blast_phase is AbilityPhase.IDLE
    assert player.hp == player.max_hp
    assert EventKind.PLAYER_HIT not in kinds(director.drain_events())
    assert EventKind.ENEMY_DEFEATED in kinds(director.drain_events())


def test_corpse_lingers_for_death_animation(director, scripted_rng):
    enemy = place_enemy(director, scripted_rng)
    enemy.apply_damage(10 ** 6)
    for _ in range(14):
        director.tick()
    assert enemy in director.enemies
    director.tick()
    assert enemy not in director.enemies


def test_population_is_topped_up(director):
    director.enemies = []
    director.tick()
    assert len(director.living_enemies) == 3


# ── Arena bounds ──────────────────────────────────────────

@pytest.mark.parametrize("start, expected", [
    ((5, 450), (20, 450)),
    ((900, 450), (780, 450)),
    ((400, 100), (400, 250)),
    ((400, 700), (400, 580)),
])
def test_player_is_clamped(director, start, expected):
    director.player.x, director.player.y = start
    director.tick()
    assert (director.player.x, director.player.y) == expected


def test_transition_opens_right_edge(director):
    director.phases.transitioning = True
    director.player.x = 900
    director.tick()
    assert director.player.x == 850


# ── Progression ───────────────────────────────────────────

def test_phase_one_transition_and_advance(director):
    director.chaos = 100
    director.tick()
    assert director.phase_transitioning
    assert EventKind.TRANSITION_STARTED in kinds(director.drain_events())

    for enemy in director.enemies:
        kill(enemy)
    snap = director.tick()
    assert snap.enemies == ()
    assert snap.arena_cleared
    assert snap.chaos == 160

    director.player.x = 770
    director.player.hp = 40
    snap = director.tick()
    assert snap.phase == 2
    assert snap.player.x == 20
    assert snap.health == 90
    assert len(snap.enemies) == 4
    assert not snap.phase_transitioning
    events = director.drain_events()
    advanced = [e for e in events if e.kind is EventKind.PHASE_ADVANCED]
    assert advanced[0].phase == 2


def test_no_spawns_during_transition(director):
    director.chaos = 100
    director.tick()
    kill(director.enemies[0])
    director.tick()
    assert len(director.enemies) == 2


def test_boss_entrance(director):
    director.phases.phase = 3
    director.chaos = 3000
    snap = director.tick()

    assert snap.boss_active
    boss = boss_of(director)
    assert (boss.x, boss.y) == (920, 450)
    assert boss.max_hp == 200 and boss.scale == 2.0
    assert len(director.living_enemies) == 5
    events = director.drain_events()
    assert EventKind.BOSS_SPAWNED in kinds(events)
    assert Theme.BOSS_1 in [e.theme for e in events]


def test_first_boss_unlocks_special(director):
    director.phases.phase = 3
    director.chaos = 3000
    director.tick()
    director.drain_events()

    kill(boss_of(director))
    snap = director.tick()
    assert snap.special_unlocked
    assert snap.phase_transitioning
    assert not snap.boss_active
    assert snap.chaos == 3750
    assert kinds(director.drain_events())[:4] == [
        EventKind.ENEMY_DEFEATED, EventKind.BOSS_DEFEATED,
        EventKind.SPECIAL_UNLOCKED, EventKind.TRANSITION_STARTED,
    ]


def test_final_boss_wins_the_session(director):
    director.phases.phase = 5
    director.chaos = 10000
    director.tick()
    boss = boss_of(director)
    assert boss.max_hp == 500 and boss.volley is not None
    assert all(e.alt_palette for e in director.living_enemies if not e.is_boss)

    kill(boss)
    snap = director.tick()
    assert snap.victory
    assert director.game_over
    events = director.drain_events()
    assert EventKind.VICTORY in kinds(events)
    assert Theme.VICTORY in [e.theme for e in events]

    frozen = director.tick_count
    director.tick(frozenset({Intent.JAB}))
    assert director.tick_count == frozen
    assert not director.toggle_pause()


# ── Special ───────────────────────────────────────────────

def test_special_trigger_is_announced(director):
    director.player.unlock_special()
    snap = director.tick(frozenset({Intent.SPECIAL}))
    assert EventKind.SPECIAL_TRIGGERED in kinds(director.drain_events())
    assert snap.special_phase is SpecialPhase.CHARGING
    assert 0.0 < snap.special_cooldown <= 1.0
    assert snap.player.charging


def test_locked_special_is_silent(director):
    director.tick(frozenset({Intent.SPECIAL}))
    assert EventKind.SPECIAL_TRIGGERED not in kinds(director.drain_events())


# ── Defeat & restart ──────────────────────────────────────

def test_defeat_and_restart(director):
    director.tick()
    director.player.apply_damage(1000)
    snap = director.tick()
    assert snap.defeated
    events = director.drain_events()
    assert EventKind.DEFEAT in kinds(events)
    assert Theme.DEFEAT in [e.theme for e in events]

    frozen = director.tick_count
    director.tick(frozenset({Intent.MOVE_RIGHT}))
    assert director.tick_count == frozen

    director.restart()
    fresh = EncounterDirector(seed=1234)
    assert director.snapshot() == fresh.snapshot()
    assert director.drain_events() == []


def test_defeat_outranks_final_boss_kill_on_same_tick(director):
    director.phases.phase = 5
    director.chaos = 10000
    director.tick()
    director.drain_events()

    kill(boss_of(director))
    director.player.apply_damage(1000)
    snap = director.tick()
    assert snap.defeated
    assert not snap.victory
    assert snap.chaos == 10000
    events = director.drain_events()
    assert EventKind.DEFEAT in kinds(events)
    assert EventKind.VICTORY not in kinds(events)
    assert Theme.DEFEAT in [e.theme for e in events]
    assert Theme.VICTORY not in [e.theme for e in events]


def test_snapshot_is_immutable(director):
    snap = director.snapshot()
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.chaos = 5
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.player.health = 1


def test_snapshot_carries_live_hitboxes(director):
    player = director.player
    snap = director.snapshot()
    assert snap.player.attack_box is None
    assert snap.player.body_box == tuple(player.get_body_hitbox())

    player.set_animation_state(AnimState.ATTACK_JAB)
    player.current_frame = 1
    snap = director.snapshot()
    assert snap.player.attack_box == tuple(player.get_attack_hitbox())
    for view, enemy in zip(snap.enemies, director.enemies):
        assert view.body_box == tuple(enemy.get_body_hitbox())


# ── Whole-session invariants ──────────────────────────────

def test_autopilot_session_invariants():
    director = EncounterDirector(seed=99)
    last_chaos = 0
    for _ in range(3000):
        snap = director.tick(autopilot_intents(director))
        assert 0 <= snap.health <= snap.max_health
        assert 1 <= snap.multiplier <= 10
        assert snap.chaos >= last_chaos
        assert 1 <= snap.phase <= 5
        assert 0 <= snap.hitstop <= 8
        assert 20 <= snap.player.x <= 850
        assert 250 <= snap.player.y <= 580
        for view in snap.enemies:
            assert 0 <= view.health <= view.max_health
        last_chaos = snap.chaos
        if director.game_over:
            break
    director.drain_events()
    assert director.tick_count > 0
