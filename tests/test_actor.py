"""
Tests for the shared actor model: hitboxes, animation cursor and damage.
"""

import dataclasses

import pygame
import pytest

from entities.actor import ANIMATIONS, Actor, AnimState, AnimationDescriptor


@pytest.fixture
def actor():
    return Actor(100, 450, 30)


def test_rejects_bad_construction():
    with pytest.raises(ValueError):
        Actor(0, 0, 0)
    with pytest.raises(ValueError):
        Actor(0, 0, 10, scale=0)


def test_body_hitbox_sits_on_feet(actor):
    assert actor.get_body_hitbox() == pygame.Rect(80, 390, 40, 60)


def test_body_hitbox_scales():
    boss = Actor(100, 450, 200, scale=2.0)
    assert boss.get_body_hitbox() == pygame.Rect(60, 330, 80, 120)


# ── Attack windows ────────────────────────────────────────

@pytest.mark.parametrize("frame, live", [(0, False), (1, True), (2, True), (3, False)])
def test_jab_hitbox_only_on_active_frames(actor, frame, live):
    actor.set_animation_state(AnimState.ATTACK_JAB)
    actor.current_frame = frame
    assert (actor.get_attack_hitbox() is not None) is live


@pytest.mark.parametrize("frame, live", [(0, False), (1, False), (2, True), (3, True),
                                         (4, True), (5, False)])
def test_straight_hitbox_only_on_active_frames(actor, frame, live):
    actor.set_animation_state(AnimState.ATTACK_STRAIGHT)
    actor.current_frame = frame
    assert (actor.get_attack_hitbox() is not None) is live


@pytest.mark.parametrize("state", [AnimState.IDLE, AnimState.WALKING, AnimState.WIND_UP,
                                   AnimState.DODGING, AnimState.HIT, AnimState.DEAD])
def test_non_attack_states_have_no_hitbox(actor, state):
    actor.state = state
    for frame in range(ANIMATIONS[state].frames):
        actor.current_frame = frame
        assert actor.get_attack_hitbox() is None


def test_jab_window_opens_and_closes_with_ticks(actor):
    actor.set_animation_state(AnimState.ATTACK_JAB)
    live = []
    for _ in range(20):
        actor.tick()
        live.append(actor.get_attack_hitbox() is not None)
    # frames advance every 5 ticks; frames 1 and 2 cover ticks 5..14
    assert live == [False] * 4 + [True] * 10 + [False] * 6
    assert actor.state is AnimState.IDLE


def test_attack_hitbox_follows_facing(actor):
    actor.set_animation_state(AnimState.ATTACK_JAB)
    actor.current_frame = 1
    assert actor.get_attack_hitbox() == pygame.Rect(110, 402, 35, 30)

    actor.facing = -1
    assert actor.get_attack_hitbox() == pygame.Rect(55, 402, 35, 30)


def test_straight_reaches_further(actor):
    actor.set_animation_state(AnimState.ATTACK_STRAIGHT)
    actor.current_frame = 3
    assert actor.get_attack_hitbox().width == 55


# ── Animation state machine ───────────────────────────────

def test_reentering_looping_state_keeps_frame(actor):
    actor.set_animation_state(AnimState.WALKING)
    for _ in range(9):
        actor.tick()
    assert actor.current_frame == 1

    actor.set_animation_state(AnimState.WALKING)
    actor.set_animation_state(AnimState.WALKING)
    assert actor.current_frame == 1


def test_reentering_one_shot_rewinds(actor):
    actor.set_animation_state(AnimState.ATTACK_JAB)
    actor.current_frame = 2
    actor.set_animation_state(AnimState.ATTACK_JAB)
    assert actor.current_frame == 0


def test_looping_animation_wraps(actor):
    duration = ANIMATIONS[AnimState.IDLE].duration
    for _ in range(duration):
        actor.tick()
    assert actor.state is AnimState.IDLE
    assert actor.current_frame == 0


def test_animation_table_is_read_only():
    with pytest.raises(TypeError):
        ANIMATIONS[AnimState.IDLE] = AnimationDescriptor(1, 1, True)
    with pytest.raises(dataclasses.FrozenInstanceError):
        ANIMATIONS[AnimState.IDLE].frames = 9


# ── Damage ────────────────────────────────────────────────

def test_two_jabs_leave_twelve_health(actor):
    assert actor.apply_damage(9)
    assert actor.hp == 21
    assert actor.state is AnimState.HIT

    actor.invuln_timer = 0
    assert actor.apply_damage(9)
    assert actor.hp == 12
    assert actor.state is AnimState.HIT


def test_invulnerable_actor_ignores_damage(actor):
    actor.invuln_timer = 5
    assert not actor.apply_damage(9)
    assert actor.hp == 30
    assert actor.state is AnimState.IDLE


def test_hit_grants_iframes(actor):
    actor.apply_damage(1)
    assert actor.is_invulnerable
    assert not actor.apply_damage(9)
    assert actor.hp == 29


def test_lethal_damage_clamps_and_kills(actor):
    actor.apply_damage(100)
    assert actor.hp == 0
    assert actor.state is AnimState.DEAD
    assert not actor.alive

    actor.invuln_timer = 0
    assert not actor.apply_damage(5)
    assert actor.hp == 0


def test_knockback_scales_inversely(actor):
    actor.apply_damage(1, knockback_dir=1)
    assert actor.vx == pytest.approx(12.0)

    big = Actor(0, 0, 50, scale=2.0)
    big.apply_damage(1, knockback_dir=-1)
    assert big.vx == pytest.approx(-6.0)


def test_velocity_damps_each_tick(actor):
    actor.vx = 10.0
    actor.tick()
    assert actor.x == pytest.approx(110.0)
    assert actor.vx == pytest.approx(8.0)


def test_dead_actor_does_not_slide(actor):
    actor.apply_damage(100, knockback_dir=1)
    x = actor.x
    for _ in range(5):
        actor.tick()
    assert actor.x == x
    assert actor.state is AnimState.DEAD


def test_hit_stun_returns_to_idle(actor):
    actor.apply_damage(5)
    for _ in range(14):
        actor.tick()
    assert actor.state is AnimState.HIT
    actor.tick()
    assert actor.state is AnimState.IDLE


def test_heal_clamps_and_skips_the_dead(actor):
    actor.apply_damage(10)
    actor.heal(50)
    assert actor.hp == 30

    actor.invuln_timer = 0
    actor.apply_damage(100)
    actor.heal(50)
    assert actor.hp == 0


def test_health_invariant_under_repeated_hits(actor):
    for amount in (3, 9, 18, 1, 7, 25, 4):
        actor.invuln_timer = 0
        actor.apply_damage(amount)
        actor.tick()
        assert 0 <= actor.hp <= actor.max_hp
        assert (actor.hp == 0) == (actor.state is AnimState.DEAD)
