"""
combat_system.py – Hit resolution between actors.

Responsibilities:
- Player strikes vs enemy bodies (dodge roll first, then damage)
- Chaos Pulse vs enemies (radial, no dodge roll)
- Enemy strikes vs the player body
- Boss blast and orb hits vs the player
- Streak → score multiplier

Each resolver applies damage through ``Actor.apply_damage`` and reports
what happened in a ``CombatResult``; the Director turns results into
streak, hitstop and events.  Nothing here keeps per-session state.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable

import pygame
from settings import (
    JAB_DAMAGE, STRAIGHT_DAMAGE, SPECIAL_DAMAGE,
    ENEMY_MELEE_DAMAGE, BLAST_DAMAGE, PROJECTILE_DAMAGE,
    PROJECTILE_HIT_RADIUS, PLAYER_AIM_RISE,
    STREAK_PER_MULTIPLIER, MAX_MULTIPLIER,
)
from entities.actor import AnimState

if TYPE_CHECKING:
    from entities.enemy import Enemy
    from entities.player import Player

logger = logging.getLogger(__name__)


class CombatResult:
    """Outcome of one attacker-vs-target check."""

    __slots__ = ("hit", "damage", "dodged", "target", "source")

    def __init__(self, target=None, source: str = "melee"):
        self.hit = False
        self.damage = 0
        self.dodged = False
        self.target = target
        self.source = source      # melee | special | blast | projectile

    def __repr__(self) -> str:
        return (f"CombatResult(source={self.source!r}, hit={self.hit}, "
                f"damage={self.damage}, dodged={self.dodged})")


# ══════════════════════════════════════════════════════════
#  Pure helpers
# ══════════════════════════════════════════════════════════

def rects_overlap(a: pygame.Rect, b: pygame.Rect) -> bool:
    """Half-open overlap on both axes (touching edges don't count)."""
    return a.colliderect(b)


def multiplier_for_streak(streak: int) -> int:
    return min(MAX_MULTIPLIER, 1 + streak // STREAK_PER_MULTIPLIER)


def strike_damage(state: AnimState) -> int:
    return JAB_DAMAGE if state is AnimState.ATTACK_JAB else STRAIGHT_DAMAGE


def _away(from_x: float, to_x: float) -> int:
    return 1 if to_x > from_x else -1


# ══════════════════════════════════════════════════════════
#  Resolver
# ══════════════════════════════════════════════════════════

class CombatSystem:
    """Stateless hit resolver used by the Director every tick."""

    # ── Player → enemies ─────────────────────────────────

    def player_strikes(self, player: Player,
                       enemies: Iterable[Enemy]) -> list[CombatResult]:
        """Resolve the player's live attack hitbox against every enemy."""
        hitbox = player.get_attack_hitbox()
        if hitbox is None:
            return []
        damage = strike_damage(player.state)
        results: list[CombatResult] = []
        for enemy in enemies:
            if not enemy.alive:
                continue
            if not rects_overlap(hitbox, enemy.get_body_hitbox()):
                continue
            result = CombatResult(enemy, "melee")
            if enemy.try_dodge():
                result.dodged = True
            elif enemy.apply_damage(damage, player.facing):
                result.hit = True
                result.damage = damage
            results.append(result)
        return results

    def pulse_hits(self, player: Player,
                   enemies: Iterable[Enemy]) -> list[CombatResult]:
        """Everything inside the expanding Chaos Pulse takes damage."""
        if not player.special_active:
            return []
        radius = player.special_radius
        results: list[CombatResult] = []
        for enemy in enemies:
            if not enemy.alive:
                continue
            if enemy.distance_to(player.x, player.y) > radius:
                continue
            result = CombatResult(enemy, "special")
            if enemy.apply_damage(SPECIAL_DAMAGE, _away(player.x, enemy.x)):
                result.hit = True
                result.damage = SPECIAL_DAMAGE
            results.append(result)
        return results

    # ── Enemy → player ───────────────────────────────────

    def enemy_strike(self, enemy: Enemy, player: Player) -> CombatResult | None:
        hitbox = enemy.get_attack_hitbox()
        if hitbox is None or not rects_overlap(hitbox, player.get_body_hitbox()):
            return None
        result = CombatResult(player, "melee")
        if player.apply_damage(ENEMY_MELEE_DAMAGE, enemy.facing):
            result.hit = True
            result.damage = ENEMY_MELEE_DAMAGE
        return result

    def blast_hit(self, enemy: Enemy, player: Player) -> CombatResult | None:
        if not enemy.alive or not enemy.blast_active or player.is_dodging:
            return None
        if player.distance_to(enemy.x, enemy.y) >= enemy.blast_radius:
            return None
        result = CombatResult(player, "blast")
        if player.apply_damage(BLAST_DAMAGE, _away(enemy.x, player.x)):
            result.hit = True
            result.damage = BLAST_DAMAGE
        return result

    def projectile_hits(self, enemy: Enemy, player: Player) -> list[CombatResult]:
        """Orbs touching the player's torso are consumed; each may hurt."""
        if player.is_dodging or not len(enemy.projectiles):
            return []
        orbs = enemy.projectiles.collect_hits(
            player.x, player.y - PLAYER_AIM_RISE, PROJECTILE_HIT_RADIUS,
        )
        results: list[CombatResult] = []
        for orb in orbs:
            result = CombatResult(player, "projectile")
            if player.apply_damage(PROJECTILE_DAMAGE, 1 if orb.vx > 0 else -1):
                result.hit = True
                result.damage = PROJECTILE_DAMAGE
            results.append(result)
        return results
