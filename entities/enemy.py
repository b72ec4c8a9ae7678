"""
enemy.py – AI-controlled beach thug, or a boss.

Decision making lives in ai/ai_core.py (AIBrain); this module owns the
enemy's own timers: wind-up into the telegraphed attack, the dodge
roll, and – for bosses – the blast and projectile-volley abilities
plus the orbs already in flight.
"""

from __future__ import annotations

import logging
import random

from settings import (
    ENEMY_MAX_HP, ENEMY_SPEED_MIN, ENEMY_SPEED_RANGE, BOSS_SPEED_MULT,
    ENEMY_DODGE_CHANCE, BOSS_DODGE_CHANCE,
    ENEMY_DODGE_TICKS, ENEMY_DODGE_COOLDOWN,
    DODGE_SPEED_MULT, HEAVY_BOSS_MIN_HP, PLAYER_AIM_RISE,
)
from entities.actor import Actor, AnimState
from systems.ability_system import AbilityPhase, BossBlast, ProjectileVolley
from systems.projectile_system import ProjectileSystem
from ai.ai_core import AIBrain

logger = logging.getLogger(__name__)


class Enemy(Actor):
    """Melee enemy; bosses add a ground blast and, when heavy enough,
    a homing projectile volley."""

    def __init__(self, x: float, y: float, rng: random.Random,
                 is_boss: bool = False, max_hp: int = ENEMY_MAX_HP,
                 scale: float = 1.0, alt_palette: bool = False):
        super().__init__(x, y, max_hp, scale=scale)
        self.is_boss = is_boss
        self.alt_palette = alt_palette
        self.speed = (ENEMY_SPEED_MIN + rng.random() * ENEMY_SPEED_RANGE) * (
            BOSS_SPEED_MULT if is_boss else 1.0)
        self._rng = rng

        self.target: Actor | None = None
        self.brain = AIBrain(rng)

        # Telegraphed attack / defence
        self.ai_tick = 0
        self.next_attack = AnimState.ATTACK_JAB
        self.windup_timer = 0
        self.dodge_cooldown = 0

        # Boss kit
        self.projectiles = ProjectileSystem()
        self.blast: BossBlast | None = BossBlast(scale) if is_boss else None
        self.volley: ProjectileVolley | None = None
        if is_boss and max_hp >= HEAVY_BOSS_MIN_HP:
            self.volley = ProjectileVolley(self.projectiles)

    def set_target(self, actor: Actor):
        self.target = actor

    # ── Properties ────────────────────────────────────────

    @property
    def ability_busy(self) -> bool:
        return ((self.blast is not None and self.blast.is_busy)
                or (self.volley is not None and self.volley.is_busy))

    @property
    def blast_phase(self) -> AbilityPhase:
        return self.blast.phase if self.blast is not None else AbilityPhase.IDLE

    @property
    def blast_active(self) -> bool:
        return self.blast_phase is AbilityPhase.ACTIVE

    @property
    def blast_radius(self) -> float:
        return self.blast.radius if self.blast is not None else 0.0

    @property
    def is_casting(self) -> bool:
        return self.volley is not None and self.volley.is_casting

    # ── AI ────────────────────────────────────────────────

    def update_ai(self):
        self.brain.update(self, self.target)

    def try_dodge(self) -> bool:
        """Roll to sidestep an incoming strike.  Returns True when the
        enemy is now dodging (and invulnerable)."""
        if self.dodge_cooldown > 0 or self.state in (AnimState.DEAD, AnimState.DODGING):
            return False
        chance = BOSS_DODGE_CHANCE if self.is_boss else ENEMY_DODGE_CHANCE
        if self._rng.random() >= chance:
            return False
        self.set_animation_state(AnimState.DODGING)
        self.state_timer = ENEMY_DODGE_TICKS
        self.invuln_timer = ENEMY_DODGE_TICKS
        self.dodge_cooldown = ENEMY_DODGE_COOLDOWN
        logger.debug("%s dodged", "Boss" if self.is_boss else "Enemy")
        return True

    def apply_damage(self, amount: int, knockback_dir: int = 0) -> bool:
        landed = super().apply_damage(amount, knockback_dir)
        if landed and self.state is AnimState.DEAD:
            self._drop_abilities()
        return landed

    def _drop_abilities(self):
        """A dead enemy stops casting and its orbs in flight vanish."""
        for ability in (self.blast, self.volley):
            if ability is not None and ability.is_busy:
                ability.cancel()
        self.projectiles.clear()

    # ── Per-tick update ───────────────────────────────────

    def tick(self):
        """Timers, abilities and projectiles, then base physics."""
        if self.dodge_cooldown > 0:
            self.dodge_cooldown -= 1

        if self.state is AnimState.DODGING:
            self.x += self.facing * self.speed * DODGE_SPEED_MULT

        if self.state is AnimState.WIND_UP:
            self.windup_timer -= 1
            if self.windup_timer <= 0:
                self.set_animation_state(self.next_attack)

        if self.alive:
            if self.blast is not None:
                self.blast.update(self, self.target)
            if self.volley is not None:
                self.volley.update(self, self.target)

        aim = None
        if self.target is not None:
            aim = (self.target.x, self.target.y - PLAYER_AIM_RISE)
        self.projectiles.update(aim)

        super().tick()
