"""
projectile_system.py – Boss "void orb" projectiles.

Handles:
- Projectile creation aimed at a target point
- Straight flight, then drag + homing toward the live target
- Ageing and expiry after a fixed lifetime
- Circular hit tests that consume the orb

Each casting boss owns one ProjectileSystem; the Director only asks
it for hits against the player.
"""

from __future__ import annotations

import logging
import math

from settings import (
    PROJECTILE_SPEED, PROJECTILE_LIFETIME, PROJECTILE_STRAIGHT_TICKS,
    PROJECTILE_DRAG, PROJECTILE_HOMING_PULL,
)

logger = logging.getLogger(__name__)


class Projectile:
    """A single orb.

    Attributes
    ----------
    x, y        : float  – centre position
    vx, vy      : float  – velocity in px/tick
    life        : int    – ticks left before self-destruct
    active      : bool   – False after a hit or once life runs out
    """

    __slots__ = ("x", "y", "vx", "vy", "life", "lifetime", "active")

    def __init__(self, x: float, y: float, vx: float, vy: float,
                 lifetime: int = PROJECTILE_LIFETIME):
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self.lifetime = lifetime
        self.life = lifetime
        self.active = True

    @property
    def age(self) -> int:
        return self.lifetime - self.life

    def update(self, target: tuple[float, float] | None = None):
        """Move and age the orb, steering toward *target* once past
        the straight-flight window."""
        if not self.active:
            return
        self.x += self.vx
        self.y += self.vy
        self.life -= 1

        if target is not None and self.age > PROJECTILE_STRAIGHT_TICKS:
            tx = target[0] - self.x
            ty = target[1] - self.y
            dist = math.hypot(tx, ty)
            if dist > 1e-6:
                self.vx = self.vx * PROJECTILE_DRAG + (tx / dist) * PROJECTILE_HOMING_PULL
                self.vy = self.vy * PROJECTILE_DRAG + (ty / dist) * PROJECTILE_HOMING_PULL

        if self.life <= 0:
            self.active = False

    def touches(self, x: float, y: float, radius: float) -> bool:
        return self.active and math.hypot(x - self.x, y - self.y) < radius


class ProjectileSystem:
    """Ordered collection of live orbs.

    Call ``update(target)`` once per tick; use ``spawn_at`` to fire.
    """

    def __init__(self):
        self._projectiles: list[Projectile] = []

    @property
    def projectiles(self) -> list[Projectile]:
        return self._projectiles

    def __len__(self) -> int:
        return len(self._projectiles)

    def __iter__(self):
        return iter(self._projectiles)

    # ── Spawners ──────────────────────────────────────────

    def spawn_at(self, x: float, y: float,
                 target_x: float, target_y: float,
                 speed: float = PROJECTILE_SPEED) -> Projectile:
        """Spawn an orb at (x, y) flying toward (target_x, target_y)."""
        angle = math.atan2(target_y - y, target_x - x)
        proj = Projectile(x, y, math.cos(angle) * speed, math.sin(angle) * speed)
        self._projectiles.append(proj)
        logger.debug("Projectile spawned at (%.0f,%.0f) → (%.0f,%.0f)",
                     x, y, target_x, target_y)
        return proj

    # ── Collision ─────────────────────────────────────────

    def collect_hits(self, x: float, y: float, radius: float) -> list[Projectile]:
        """Consume and return every orb within *radius* of (x, y)."""
        hits = [p for p in self._projectiles if p.touches(x, y, radius)]
        for p in hits:
            p.active = False
        if hits:
            self._projectiles = [p for p in self._projectiles if p.active]
        return hits

    # ── Per-tick ──────────────────────────────────────────

    def update(self, target: tuple[float, float] | None = None):
        """Update all orbs and drop expired ones."""
        for p in self._projectiles:
            p.update(target)
        self._projectiles = [p for p in self._projectiles if p.active]

    def clear(self):
        self._projectiles.clear()
