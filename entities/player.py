"""
player.py – Player-controlled brawler.

The player never sees key codes: each tick it receives an immutable
set of ``Intent``s (built by keybinds.py or by an autopilot) and
resolves them with a strict priority:

    SPECIAL  >  DODGE  >  JAB / STRAIGHT  >  movement
"""

from __future__ import annotations

import logging
import math
from enum import Enum

from settings import (
    PLAYER_MAX_HP, PLAYER_SPEED,
    PLAYER_START_X, PLAYER_START_Y,
    PLAYER_DODGE_IFRAMES, DODGE_SPEED_MULT,
)
from entities.actor import Actor, AnimState
from systems.ability_system import AbilityPhase, ChaosPulse

logger = logging.getLogger(__name__)


class Intent(Enum):
    """Abstract per-tick player commands."""

    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    MOVE_LEFT = "move_left"
    MOVE_RIGHT = "move_right"
    JAB = "jab"
    STRAIGHT = "straight"
    DODGE = "dodge"
    SPECIAL = "special"


NO_INTENTS: frozenset[Intent] = frozenset()

# The player's special lifecycle is the ability phase
SpecialPhase = AbilityPhase


class Player(Actor):
    """The brawler on the beach."""

    def __init__(self, x: float = PLAYER_START_X, y: float = PLAYER_START_Y):
        super().__init__(x, y, PLAYER_MAX_HP)
        self.speed = PLAYER_SPEED
        self.special_unlocked = False
        self.special = ChaosPulse()

    # ── Special ability views ─────────────────────────────

    @property
    def special_phase(self) -> SpecialPhase:
        return self.special.phase

    @property
    def special_cooldown_remaining(self) -> int:
        return self.special.cooldown_remaining

    @property
    def special_charge_remaining(self) -> int:
        return self.special.charge_remaining

    @property
    def special_active_remaining(self) -> int:
        return self.special.active_remaining

    @property
    def special_radius(self) -> float:
        return self.special.radius

    @property
    def special_active(self) -> bool:
        return self.special.phase is AbilityPhase.ACTIVE

    @property
    def is_channeling(self) -> bool:
        """True while charging or releasing the special."""
        return self.special.is_busy

    def unlock_special(self) -> bool:
        """Grant the special.  Returns False if it was already unlocked."""
        if self.special_unlocked:
            return False
        self.special_unlocked = True
        logger.info("Chaos Pulse unlocked")
        return True

    # ── Input ─────────────────────────────────────────────

    def handle_intents(self, intents: frozenset[Intent]) -> bool:
        """Resolve this tick's intents.

        Returns True exactly when the special was triggered so the
        caller can emit its notification once.
        """
        if self.state in (AnimState.HIT, AnimState.DEAD) or self.is_channeling:
            return False

        if (Intent.SPECIAL in intents and self.special_unlocked
                and self.special.trigger()):
            self.set_animation_state(AnimState.IDLE)
            logger.debug("Special triggered (cooldown %d)", self.special.cooldown_remaining)
            return True

        if Intent.DODGE in intents and self.state is not AnimState.DODGING:
            self.set_animation_state(AnimState.DODGING)
            self.invuln_timer = PLAYER_DODGE_IFRAMES
            return False

        if self.state is AnimState.DODGING:
            self.x += self.facing * self.speed * DODGE_SPEED_MULT
            return False

        attacking = self.is_attacking
        if not attacking:
            if Intent.JAB in intents:
                self.set_animation_state(AnimState.ATTACK_JAB)
                return False
            if Intent.STRAIGHT in intents:
                self.set_animation_state(AnimState.ATTACK_STRAIGHT)
                return False

        self._move(intents, attacking)
        return False

    def _move(self, intents: frozenset[Intent], attacking: bool):
        dx = (Intent.MOVE_RIGHT in intents) - (Intent.MOVE_LEFT in intents)
        dy = (Intent.MOVE_DOWN in intents) - (Intent.MOVE_UP in intents)

        if dx == 0 and dy == 0:
            if not attacking:
                self.set_animation_state(AnimState.IDLE)
            return

        # Attacks keep their facing; diagonals move at unit speed
        if dx != 0 and not attacking:
            self.facing = 1 if dx > 0 else -1
        length = math.hypot(dx, dy)
        self.x += (dx / length) * self.speed
        self.y += (dy / length) * self.speed
        if not attacking:
            self.set_animation_state(AnimState.WALKING)

    # ── Per-tick update ───────────────────────────────────

    def tick(self):
        self.special.update(self)
        super().tick()
