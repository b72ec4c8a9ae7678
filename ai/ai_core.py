"""
ai_core.py – Enemy decision loop.

The brain runs once per tick for every enemy that is free to act
(not hurt, dead, dodging, mid-attack, winding up or busy with a boss
ability) and picks exactly one decision, highest priority first:

    volley    – heavy boss, orbs ready, target far  (2 % per tick)
    blast     – boss, blast ready, target close     (2 % per tick)
    approach  – target outside engage range: walk straight at it
    hold      – in range: stand, and every N ticks telegraph an attack

Decisions: idle | approach | hold | windup | blast | volley
The brain is the ONLY module that steers the enemy entity; all
randomness comes from the shared generator it was given.
"""

from __future__ import annotations

import logging
import math
import random
from typing import TYPE_CHECKING

from settings import (
    ENGAGE_DISTANCE, ATTACK_INTERVAL, BOSS_ATTACK_INTERVAL,
    STRAIGHT_CHANCE, WINDUP_TICKS,
    BOSS_ABILITY_CHANCE, BLAST_TRIGGER_DISTANCE, VOLLEY_TRIGGER_DISTANCE,
)
from entities.actor import AnimState

if TYPE_CHECKING:
    from entities.actor import Actor
    from entities.enemy import Enemy

logger = logging.getLogger(__name__)

_BLOCKING_STATES = frozenset({
    AnimState.HIT, AnimState.DEAD, AnimState.DODGING,
    AnimState.ATTACK_JAB, AnimState.ATTACK_STRAIGHT, AnimState.WIND_UP,
})


class AIBrain:
    """Distance-driven melee brain with optional boss abilities."""

    def __init__(self, rng: random.Random):
        self.rng = rng
        self.decision = "idle"

    def can_decide(self, enemy: Enemy) -> bool:
        return enemy.state not in _BLOCKING_STATES and not enemy.ability_busy

    def update(self, enemy: Enemy, target: Actor | None):
        """Run one tick of decision making for *enemy*."""
        if target is None or not self.can_decide(enemy):
            return

        enemy.ai_tick += 1
        dx = target.x - enemy.x
        dy = target.y - enemy.y
        dist = math.hypot(dx, dy)
        enemy.facing = 1 if dx > 0 else -1

        # ── Boss abilities ───────────────────────────────
        volley = enemy.volley
        if (volley is not None and volley.is_ready
                and dist > VOLLEY_TRIGGER_DISTANCE
                and self.rng.random() < BOSS_ABILITY_CHANCE):
            volley.trigger()
            enemy.set_animation_state(AnimState.IDLE)
            self.decision = "volley"
            logger.debug("Boss casting volley (dist=%.0f)", dist)
            return

        blast = enemy.blast
        if (blast is not None and blast.is_ready
                and dist < BLAST_TRIGGER_DISTANCE
                and self.rng.random() < BOSS_ABILITY_CHANCE):
            blast.trigger()
            enemy.set_animation_state(AnimState.IDLE)
            self.decision = "blast"
            logger.debug("Boss charging blast (dist=%.0f)", dist)
            return

        # ── Melee ────────────────────────────────────────
        if dist > ENGAGE_DISTANCE * enemy.scale:
            enemy.set_animation_state(AnimState.WALKING)
            enemy.x += (dx / dist) * enemy.speed
            enemy.y += (dy / dist) * enemy.speed
            self.decision = "approach"
            return

        enemy.set_animation_state(AnimState.IDLE)
        self.decision = "hold"
        interval = BOSS_ATTACK_INTERVAL if enemy.is_boss else ATTACK_INTERVAL
        if enemy.ai_tick % interval == 0:
            if self.rng.random() < STRAIGHT_CHANCE:
                enemy.next_attack = AnimState.ATTACK_STRAIGHT
            else:
                enemy.next_attack = AnimState.ATTACK_JAB
            enemy.set_animation_state(AnimState.WIND_UP)
            enemy.windup_timer = WINDUP_TICKS
            self.decision = "windup"
