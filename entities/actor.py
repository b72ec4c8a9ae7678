"""
actor.py – Shared combatant model for the player and every enemy.

An Actor is a point on the sand (bottom-centre of its body) with
velocity, health, facing and a frame-driven animation state machine.
Which frames of an attack actually hurt is decided by the static
animation table below – nothing else may open an attack hitbox.

States: IDLE, WALKING, ATTACK_JAB, ATTACK_STRAIGHT, WIND_UP,
        DODGING, HIT, DEAD
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

import pygame
from settings import (
    ACTOR_WIDTH, ACTOR_HEIGHT, ACTOR_SPEED, VELOCITY_DAMPING,
    HIT_STUN_TICKS, HIT_INVULN_TICKS, KNOCKBACK_IMPULSE,
    JAB_REACH, STRAIGHT_REACH,
    ATTACK_HITBOX_HEIGHT, ATTACK_HITBOX_Y_FRAC,
)

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  Animation table
# ══════════════════════════════════════════════════════════

class AnimState(Enum):
    """Every animation state an actor can be in."""

    IDLE = "IDLE"
    WALKING = "WALKING"
    ATTACK_JAB = "ATTACK_JAB"
    ATTACK_STRAIGHT = "ATTACK_STRAIGHT"
    WIND_UP = "WIND_UP"
    DODGING = "DODGING"
    HIT = "HIT"
    DEAD = "DEAD"


ATTACK_STATES = frozenset({AnimState.ATTACK_JAB, AnimState.ATTACK_STRAIGHT})


@dataclass(frozen=True)
class AnimationDescriptor:
    """Static timing for one animation state.

    frames        : number of frames in the cycle
    speed         : ticks spent on each frame
    loop          : wrap around (True) or clamp and return to idle (False)
    active_frames : frames on which an attack hitbox is live
    """
    frames: int
    speed: int
    loop: bool
    active_frames: frozenset[int] = frozenset()

    @property
    def duration(self) -> int:
        return self.frames * self.speed


ANIMATIONS: MappingProxyType[AnimState, AnimationDescriptor] = MappingProxyType({
    AnimState.IDLE:            AnimationDescriptor(4, 12, True),
    AnimState.WALKING:         AnimationDescriptor(6, 8, True),
    AnimState.ATTACK_JAB:      AnimationDescriptor(4, 5, False, frozenset({1, 2})),
    AnimState.ATTACK_STRAIGHT: AnimationDescriptor(6, 6, False, frozenset({2, 3, 4})),
    AnimState.WIND_UP:         AnimationDescriptor(3, 10, True),
    AnimState.DODGING:         AnimationDescriptor(4, 5, False),
    AnimState.HIT:             AnimationDescriptor(2, 10, False),
    AnimState.DEAD:            AnimationDescriptor(5, 12, False),
})

_REACH = {
    AnimState.ATTACK_JAB: JAB_REACH,
    AnimState.ATTACK_STRAIGHT: STRAIGHT_REACH,
}


def make_rect(x: float, y: float, w: float, h: float) -> pygame.Rect:
    """Snap a float box onto pygame's integer grid."""
    return pygame.Rect(round(x), round(y), round(w), round(h))


# ══════════════════════════════════════════════════════════
#  Actor
# ══════════════════════════════════════════════════════════

class Actor:
    """Base combatant: physics, health, i-frames and animation cursor.

    Subclass for Player / Enemy specifics.
    """

    def __init__(self, x: float, y: float, max_hp: int, scale: float = 1.0):
        if max_hp <= 0:
            raise ValueError(f"max_hp must be positive, got {max_hp}")
        if scale <= 0:
            raise ValueError(f"scale must be positive, got {scale}")

        # Position is the bottom-centre of the body
        self.x = float(x)
        self.y = float(y)
        self.vx = 0.0
        self.vy = 0.0
        self.width = ACTOR_WIDTH
        self.height = ACTOR_HEIGHT
        self.scale = scale
        self.speed = ACTOR_SPEED
        self.facing = 1                # 1 = right, -1 = left

        # Health
        self.max_hp = max_hp
        self.hp = max_hp

        # Animation cursor
        self.state = AnimState.IDLE
        self.current_frame = 0
        self.frame_tick = 0

        # Timers (ticks)
        self.state_timer = 0
        self.invuln_timer = 0

    # ── Properties ────────────────────────────────────────

    @property
    def alive(self) -> bool:
        return self.state is not AnimState.DEAD

    @property
    def is_invulnerable(self) -> bool:
        return self.invuln_timer > 0

    @property
    def is_attacking(self) -> bool:
        return self.state in ATTACK_STATES

    @property
    def is_dodging(self) -> bool:
        return self.state is AnimState.DODGING

    @property
    def animation(self) -> AnimationDescriptor:
        return ANIMATIONS[self.state]

    # ── Geometry ──────────────────────────────────────────

    def get_body_hitbox(self) -> pygame.Rect:
        """Body rectangle whose bottom-centre sits on (x, y)."""
        w = self.width * self.scale
        h = self.height * self.scale
        return make_rect(self.x - w / 2, self.y - h, w, h)

    def get_attack_hitbox(self) -> pygame.Rect | None:
        """Strike rectangle, or None outside an attack's active frames."""
        if self.state not in ATTACK_STATES:
            return None
        if self.current_frame not in ANIMATIONS[self.state].active_frames:
            return None

        reach = _REACH[self.state] * self.scale
        w = self.width * self.scale
        h = self.height * self.scale
        if self.facing == 1:
            left = self.x + w / 4
        else:
            left = self.x - w / 4 - reach
        return make_rect(
            left, self.y - h * ATTACK_HITBOX_Y_FRAC,
            reach, ATTACK_HITBOX_HEIGHT * self.scale,
        )

    # ── State machine ─────────────────────────────────────

    def set_animation_state(self, new_state: AnimState):
        """Switch state and rewind the cursor.

        Re-entering the current state is a no-op when it loops, so
        callers may assert WALKING/IDLE every tick without stutter.
        """
        if new_state is self.state and ANIMATIONS[self.state].loop:
            return
        self.state = new_state
        self.current_frame = 0
        self.frame_tick = 0

    # ── Combat ────────────────────────────────────────────

    def apply_damage(self, amount: int, knockback_dir: int = 0) -> bool:
        """Take a hit.  Returns False (and changes nothing) while
        invulnerable or dead, True when the hit registered."""
        if self.invuln_timer > 0 or self.state is AnimState.DEAD:
            return False

        self.hp = max(0, self.hp - amount)
        self.state_timer = HIT_STUN_TICKS
        self.invuln_timer = HIT_INVULN_TICKS
        self.vx = knockback_dir * (KNOCKBACK_IMPULSE / self.scale)

        if self.hp == 0:
            self.set_animation_state(AnimState.DEAD)
        else:
            self.set_animation_state(AnimState.HIT)
        logger.debug("%s health reduced to %d (took %d)",
                     self.__class__.__name__, self.hp, amount)
        return True

    def heal(self, amount: int):
        if self.state is AnimState.DEAD:
            return
        self.hp = min(self.max_hp, self.hp + amount)

    def distance_to(self, x: float, y: float) -> float:
        return ((x - self.x) ** 2 + (y - self.y) ** 2) ** 0.5

    # ── Per-tick update ───────────────────────────────────

    def tick(self):
        """Advance timers, physics and the animation cursor by one tick."""
        if self.invuln_timer > 0:
            self.invuln_timer -= 1

        # Friction-based physics; the dead don't slide
        if self.state is AnimState.DEAD:
            self.vx = 0.0
            self.vy = 0.0
        else:
            self.x += self.vx
            self.y += self.vy
            self.vx *= VELOCITY_DAMPING
            self.vy *= VELOCITY_DAMPING

        self._advance_animation()

        if self.state_timer > 0:
            self.state_timer -= 1
            if self.state_timer == 0 and self.state is AnimState.HIT:
                self.set_animation_state(AnimState.IDLE)

    def _advance_animation(self):
        config = ANIMATIONS[self.state]
        self.frame_tick += 1
        if self.frame_tick < config.speed:
            return
        self.frame_tick = 0
        self.current_frame += 1
        if self.current_frame < config.frames:
            return
        if config.loop:
            self.current_frame = 0
        else:
            self.current_frame = config.frames - 1
            # One-shot finished: back to idle (the dead stay down)
            if self.state is not AnimState.DEAD:
                self.set_animation_state(AnimState.IDLE)
