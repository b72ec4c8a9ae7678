"""
Tests for boss orbs: aiming, straight flight, homing and expiry.
"""

import math

import pytest

from systems.projectile_system import Projectile, ProjectileSystem


@pytest.fixture
def system():
    return ProjectileSystem()


def test_spawn_aims_at_target(system):
    orb = system.spawn_at(0, 0, 30, 40)
    assert orb.vx == pytest.approx(7.0 * 0.6)
    assert orb.vy == pytest.approx(7.0 * 0.8)
    assert len(system) == 1


def test_flies_straight_without_target():
    orb = Projectile(0, 0, 7.0, 0.0)
    for _ in range(100):
        orb.update()
    assert orb.x == pytest.approx(700.0)
    assert orb.y == 0
    assert orb.vx == 7.0


def test_expires_after_lifetime(system):
    system.spawn_at(0, 0, 100, 0)
    for _ in range(139):
        system.update()
    assert len(system) == 1
    system.update()
    assert len(system) == 0


def test_homing_starts_after_straight_window(system):
    orb = system.spawn_at(0, 0, 100, 0)
    target = (0.0, 500.0)
    for _ in range(60):
        system.update(target)
    assert orb.vx == pytest.approx(7.0)
    assert orb.vy == 0

    system.update(target)
    assert orb.vy > 0
    assert orb.vx < 7.0


def test_homing_bends_toward_target(system):
    orb = system.spawn_at(0, 0, 100, 0)
    target = (420.0, 400.0)
    for _ in range(90):
        system.update(target)
    assert orb.vy > 0
    heading = math.atan2(orb.vy, orb.vx)
    assert heading > 0.5


def test_collect_hits_uses_strict_radius(system):
    system.spawn_at(100, 100, 200, 100)
    system.spawn_at(125, 100, 200, 100)
    system.spawn_at(300, 300, 200, 100)

    hits = system.collect_hits(100, 100, 25)
    assert len(hits) == 1
    assert all(not orb.active for orb in hits)
    assert len(system) == 2


def test_consumed_orbs_do_not_hit_twice(system):
    system.spawn_at(100, 100, 200, 100)
    assert len(system.collect_hits(100, 100, 25)) == 1
    assert system.collect_hits(100, 100, 25) == []


def test_clear(system):
    system.spawn_at(0, 0, 1, 1)
    system.spawn_at(0, 0, 1, 1)
    system.clear()
    assert len(system) == 0
