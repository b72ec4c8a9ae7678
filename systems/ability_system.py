"""
ability_system.py – Telegraphed, tick-based special abilities.

Every ability runs the same small lifecycle:

    IDLE ──trigger──▶ CHARGING ──charge ends──▶ ACTIVE ──active ends──▶ IDLE

with a cooldown that runs independently of the phase.  Abilities
differ in when the cooldown is armed (on trigger, on activation or on
expiry) and in what they do each active tick.

Architecture
────────────
Ability (base)
 ├── RadialBurst          – radius grows 0 → max while active
 │    ├── ChaosPulse      – player special (charge 45, active 60, cd 900)
 │    └── BossBlast       – boss ground blast (charge 60, active 60, cd 350)
 └── ProjectileVolley     – boss orb volley (cast 60, one orb per 20 ticks, cd 450)

The ability never decides *whether* to fire – the player's intents
or the enemy brain do that – and never applies damage; the Director
reads ``radius`` / the projectile system and resolves hits.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from settings import (
    SPECIAL_CHARGE_TICKS, SPECIAL_ACTIVE_TICKS, SPECIAL_COOLDOWN_TICKS,
    SPECIAL_MAX_RADIUS,
    BLAST_CHARGE_TICKS, BLAST_GROW_TICKS, BLAST_COOLDOWN_TICKS, BLAST_MAX_RADIUS,
    VOLLEY_CAST_TICKS, VOLLEY_EMIT_INTERVAL, VOLLEY_COOLDOWN_TICKS,
    PROJECTILE_SPAWN_RISE, PLAYER_AIM_RISE,
)

if TYPE_CHECKING:
    from entities.actor import Actor
    from systems.projectile_system import ProjectileSystem

logger = logging.getLogger(__name__)


class AbilityPhase(Enum):
    IDLE = "IDLE"
    CHARGING = "CHARGING"
    ACTIVE = "ACTIVE"


class CooldownStart(Enum):
    """Moment at which an ability's cooldown is armed."""
    TRIGGER = "TRIGGER"
    ACTIVATE = "ACTIVATE"
    EXPIRE = "EXPIRE"


# ══════════════════════════════════════════════════════════
#  Base
# ══════════════════════════════════════════════════════════

class Ability:
    """Base class for charge → active → idle abilities.

    Subclasses override ``_on_activate`` (and optionally ``_on_tick``
    / ``_on_expire``) to define behaviour.
    """

    name: str = "Ability"
    charge_ticks: int = 0          # 0 = goes active on trigger
    active_ticks: int = 1
    cooldown: int = 0
    cooldown_start: CooldownStart = CooldownStart.TRIGGER

    def __init__(self) -> None:
        self.phase = AbilityPhase.IDLE
        self.cooldown_remaining = 0
        self.charge_remaining = 0
        self.active_remaining = 0
        self.active_elapsed = 0

    # ── Queries ───────────────────────────────────────────

    @property
    def is_ready(self) -> bool:
        """True when idle and off cooldown."""
        return self.phase is AbilityPhase.IDLE and self.cooldown_remaining == 0

    @property
    def is_busy(self) -> bool:
        return self.phase is not AbilityPhase.IDLE

    @property
    def cooldown_fraction(self) -> float:
        """0.0 = ready, 1.0 = just used.  For HUD display."""
        if self.cooldown <= 0:
            return 0.0
        return max(0.0, min(1.0, self.cooldown_remaining / self.cooldown))

    # ── Public API ────────────────────────────────────────

    def trigger(self) -> bool:
        """Start the ability.  Rejected (returns False) while busy or
        cooling down."""
        if not self.is_ready:
            return False
        if self.cooldown_start is CooldownStart.TRIGGER:
            self.cooldown_remaining = self.cooldown
        if self.charge_ticks > 0:
            self.phase = AbilityPhase.CHARGING
            self.charge_remaining = self.charge_ticks
        else:
            self._activate()
        logger.debug("Ability '%s' triggered", self.name)
        return True

    def update(self, user: Actor | None = None, target: Actor | None = None):
        """Tick cooldown and phase timers.  Call every tick."""
        if self.cooldown_remaining > 0:
            self.cooldown_remaining -= 1

        if self.phase is AbilityPhase.CHARGING:
            self.charge_remaining -= 1
            if self.charge_remaining <= 0:
                self._activate()
        elif self.phase is AbilityPhase.ACTIVE:
            self._on_tick(user, target)
            self.active_elapsed += 1
            self.active_remaining -= 1
            if self.active_remaining <= 0:
                self._expire()

    def cancel(self):
        """Drop back to idle without touching the cooldown."""
        self.phase = AbilityPhase.IDLE
        self.charge_remaining = 0
        self.active_remaining = 0
        self._on_expire()

    # ── Internals ─────────────────────────────────────────

    def _activate(self):
        self.phase = AbilityPhase.ACTIVE
        self.charge_remaining = 0
        self.active_remaining = self.active_ticks
        self.active_elapsed = 0
        if self.cooldown_start is CooldownStart.ACTIVATE:
            self.cooldown_remaining = self.cooldown
        self._on_activate()
        logger.debug("Ability '%s' active", self.name)

    def _expire(self):
        self.phase = AbilityPhase.IDLE
        self.active_remaining = 0
        if self.cooldown_start is CooldownStart.EXPIRE:
            self.cooldown_remaining = self.cooldown
        self._on_expire()

    # ── Hooks (override in subclasses) ────────────────────

    def _on_activate(self) -> None:
        """Called once when charging ends."""

    def _on_tick(self, user, target) -> None:
        """Called every active tick, before the timer decrements."""

    def _on_expire(self) -> None:
        """Called once when the active window closes."""


# ══════════════════════════════════════════════════════════
#  Radial bursts
# ══════════════════════════════════════════════════════════

class RadialBurst(Ability):
    """Area effect whose radius grows linearly to ``max_radius`` over
    the active window, then snaps back to zero."""

    def __init__(self, max_radius: float) -> None:
        super().__init__()
        self.max_radius = max_radius
        self.radius = 0.0

    @property
    def growth_per_tick(self) -> float:
        return self.max_radius / self.active_ticks

    def _on_activate(self) -> None:
        self.radius = 0.0

    def _on_tick(self, user, target) -> None:
        self.radius = min(self.max_radius, self.radius + self.growth_per_tick)

    def _on_expire(self) -> None:
        self.radius = 0.0


class ChaosPulse(RadialBurst):
    """Player special: a purple shockwave that keeps hurting everything
    it reaches while it expands."""

    name = "Chaos Pulse"
    charge_ticks = SPECIAL_CHARGE_TICKS
    active_ticks = SPECIAL_ACTIVE_TICKS
    cooldown = SPECIAL_COOLDOWN_TICKS
    cooldown_start = CooldownStart.TRIGGER

    def __init__(self) -> None:
        super().__init__(SPECIAL_MAX_RADIUS)


class BossBlast(RadialBurst):
    """Boss ground slam, telegraphed by a red ring while charging."""

    name = "Boss Blast"
    charge_ticks = BLAST_CHARGE_TICKS
    active_ticks = BLAST_GROW_TICKS
    cooldown = BLAST_COOLDOWN_TICKS
    cooldown_start = CooldownStart.ACTIVATE

    def __init__(self, scale: float = 1.0) -> None:
        super().__init__(BLAST_MAX_RADIUS * scale)


# ══════════════════════════════════════════════════════════
#  Projectile volley
# ══════════════════════════════════════════════════════════

class ProjectileVolley(Ability):
    """Heavy-boss cast: one homing orb every 20 ticks while casting."""

    name = "Void Volley"
    charge_ticks = 0
    active_ticks = VOLLEY_CAST_TICKS
    cooldown = VOLLEY_COOLDOWN_TICKS
    cooldown_start = CooldownStart.EXPIRE

    def __init__(self, projectiles: ProjectileSystem) -> None:
        super().__init__()
        self.projectiles = projectiles

    @property
    def is_casting(self) -> bool:
        return self.phase is AbilityPhase.ACTIVE

    def _on_tick(self, user, target) -> None:
        if user is None or target is None:
            return
        if self.active_elapsed % VOLLEY_EMIT_INTERVAL != 0:
            return
        self.projectiles.spawn_at(
            user.x, user.y - PROJECTILE_SPAWN_RISE,
            target.x, target.y - PLAYER_AIM_RISE,
        )
