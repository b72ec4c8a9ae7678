"""
director.py – The encounter director: one authoritative tick.

Owns the player, the enemy roster, the score and the phase machine,
and advances all of them in a fixed order once per tick:

    1. hitstop freeze (skip everything while > 0)
    2. player intents → player physics
    3. player strikes vs enemies (dodge roll, then damage)
    4. Chaos Pulse vs enemies
    5. per enemy, in roster order: AI → physics/abilities →
       melee vs player → blast vs player → orbs vs player
    6. defeat check (a dead player ends the tick before any reaping)
    7. reap finished corpses, award chaos, boss consequences, then
       phase progression and crowd top-up
    8. multiplier from streak

The front end talks to it through ``tick(intents)``, ``toggle_pause()``,
``restart()``, ``drain_events()`` and the immutable ``GameSnapshot``.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass

from settings import (
    ARENA_LEFT, ARENA_RIGHT, ARENA_RIGHT_TRANSITION, ARENA_TOP, ARENA_BOTTOM,
    HITSTOP_TICKS, ENEMY_CHAOS, BOSS_CHAOS,
    SPAWN_LEFT_X, SPAWN_RIGHT_X, SPAWN_Y_MIN, SPAWN_Y_RANGE,
    BOSS_SPAWN_X, BOSS_SPAWN_Y, BOSS_ENTOURAGE, ALT_PALETTE_PHASE,
)
from entities.actor import Actor, AnimState
from entities.enemy import Enemy
from entities.player import NO_INTENTS, Intent, Player, SpecialPhase
from ai.phase_system import PhaseAction, PhaseConfig, PhaseSystem
from systems.ability_system import AbilityPhase
from systems.combat_system import CombatSystem, multiplier_for_streak
from systems.events import EventKind, EventQueue, GameEvent, Theme, select_theme

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#  Read-only views
# ══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class ActorView:
    """Render-side copy of one actor."""
    x: float
    y: float
    state: AnimState
    frame: int
    facing: int
    scale: float
    health: int
    max_health: int
    invincible: bool
    is_boss: bool = False
    blast_radius: float = 0.0
    charging: bool = False
    alt_palette: bool = False
    body_box: tuple[int, int, int, int] = (0, 0, 0, 0)
    attack_box: tuple[int, int, int, int] | None = None

    @classmethod
    def from_actor(cls, actor: Actor) -> ActorView:
        charging = False
        if isinstance(actor, Enemy):
            charging = actor.blast_phase is AbilityPhase.CHARGING or actor.is_casting
        elif isinstance(actor, Player):
            charging = actor.special_phase is AbilityPhase.CHARGING
        attack = actor.get_attack_hitbox()
        return cls(
            x=actor.x, y=actor.y, state=actor.state, frame=actor.current_frame,
            facing=actor.facing, scale=actor.scale,
            health=actor.hp, max_health=actor.max_hp,
            invincible=actor.is_invulnerable,
            is_boss=getattr(actor, "is_boss", False),
            blast_radius=getattr(actor, "blast_radius", 0.0),
            charging=charging,
            alt_palette=getattr(actor, "alt_palette", False),
            body_box=tuple(actor.get_body_hitbox()),
            attack_box=tuple(attack) if attack is not None else None,
        )


@dataclass(frozen=True)
class GameSnapshot:
    """Everything the HUD and renderer may read between ticks."""
    health: int
    max_health: int
    chaos: int
    multiplier: int
    phase: int
    streak: int
    target_chaos: int
    special_cooldown: float        # 0.0 = ready, 1.0 = just used
    special_unlocked: bool
    boss_active: bool
    victory: bool
    paused: bool
    defeated: bool
    phase_transitioning: bool
    arena_cleared: bool
    hitstop: int
    tick: int
    player: ActorView
    enemies: tuple[ActorView, ...]
    projectiles: tuple[tuple[float, float], ...]
    special_phase: SpecialPhase
    special_radius: float


# ══════════════════════════════════════════════════════════
#  Director
# ══════════════════════════════════════════════════════════

class EncounterDirector:
    """One play session.  Create once, ``tick`` every frame."""

    def __init__(self, seed: int | None = None,
                 phase_config: PhaseConfig | None = None):
        self._seed = seed
        self._phase_config = phase_config
        self.combat = CombatSystem()
        self.events = EventQueue()
        self._setup()

    def _setup(self):
        self.rng = random.Random(self._seed)
        self.phases = PhaseSystem(self._phase_config)
        self.player = Player()
        self.enemies: list[Enemy] = []
        self.chaos = 0
        self.streak = 0
        self.multiplier = 1
        self.hitstop = 0
        self.paused = False
        self.defeated = False
        self.tick_count = 0
        self._theme: Theme | None = None
        self._spawn_wave(self.phases.opening_wave)

    def restart(self, seed: int | None = None):
        """Tear the session down and start again from phase 1."""
        if seed is not None:
            self._seed = seed
        self.events.drain()
        self._setup()
        logger.info("Session restarted (seed=%s)", self._seed)

    # ── Properties ────────────────────────────────────────

    @property
    def current_phase(self) -> int:
        return self.phases.phase

    @property
    def phase_transitioning(self) -> bool:
        return self.phases.transitioning

    @property
    def boss_active(self) -> bool:
        return self.phases.boss_active

    @property
    def victory(self) -> bool:
        return self.phases.victory

    @property
    def game_over(self) -> bool:
        return self.defeated or self.victory

    @property
    def living_enemies(self) -> list[Enemy]:
        return [e for e in self.enemies if e.alive]

    # ── Control signals ───────────────────────────────────

    def toggle_pause(self) -> bool:
        """Pause or resume.  Ignored once the session is over."""
        return self.set_paused(not self.paused)

    def set_paused(self, paused: bool) -> bool:
        if self.game_over or paused == self.paused:
            return False
        self.paused = paused
        logger.info("Session %s", "paused" if paused else "resumed")
        return True

    def drain_events(self) -> list[GameEvent]:
        return self.events.drain()

    # ── Tick ──────────────────────────────────────────────

    def tick(self, intents: frozenset[Intent] = NO_INTENTS) -> GameSnapshot:
        """Advance one simulation step and return the new snapshot."""
        if not (self.paused or self.game_over):
            self._step(intents)
        self._update_theme()
        return self.snapshot()

    def _step(self, intents: frozenset[Intent]):
        if self.hitstop > 0:
            self.hitstop -= 1
            return
        self.tick_count += 1

        # ── Player ───────────────────────────────────────
        player = self.player
        if player.handle_intents(intents):
            self.events.emit(EventKind.SPECIAL_TRIGGERED, x=player.x)
        player.tick()
        self._clamp_player()

        # ── Player offence ───────────────────────────────
        for result in self.combat.player_strikes(player, self.enemies):
            if result.dodged:
                self.events.emit(EventKind.ENEMY_DODGED, x=result.target.x)
            elif result.hit:
                self.streak += 1
                self.hitstop = HITSTOP_TICKS
                self.events.emit(EventKind.HIT_LANDED, x=result.target.x)

        for result in self.combat.pulse_hits(player, self.enemies):
            if result.hit:
                self.streak += 1
                self.events.emit(EventKind.HIT_LANDED, x=result.target.x)

        # ── Enemies ──────────────────────────────────────
        for enemy in self.enemies:
            enemy.update_ai()
            enemy.tick()

            result = self.combat.enemy_strike(enemy, player)
            if result is not None and result.hit:
                self.hitstop = HITSTOP_TICKS
                self._player_hurt()

            result = self.combat.blast_hit(enemy, player)
            if result is not None and result.hit:
                self._player_hurt()

            for result in self.combat.projectile_hits(enemy, player):
                if result.hit:
                    self._player_hurt()

        if not player.alive:
            self.defeated = True
            self.events.emit(EventKind.DEFEAT, phase=self.current_phase)
            logger.info("Player defeated in phase %d with %d chaos",
                        self.current_phase, self.chaos)
            return

        self._reap()
        if self.victory:
            return

        self._progress()
        self._maintain_population()
        self.multiplier = multiplier_for_streak(self.streak)

    def _player_hurt(self):
        self.streak = 0
        self.events.emit(EventKind.PLAYER_HIT, x=self.player.x)

    def _clamp_player(self):
        right = ARENA_RIGHT_TRANSITION if self.phase_transitioning else ARENA_RIGHT
        self.player.x = max(ARENA_LEFT, min(right, self.player.x))
        self.player.y = max(ARENA_TOP, min(ARENA_BOTTOM, self.player.y))

    # ── Cleanup & scoring ─────────────────────────────────

    def _reap(self):
        finished = [e for e in self.enemies
                    if e.state is AnimState.DEAD and e.state_timer == 0]
        if not finished:
            return
        self.enemies = [e for e in self.enemies if e not in finished]
        for enemy in finished:
            points = (BOSS_CHAOS if enemy.is_boss else ENEMY_CHAOS) * self.multiplier
            self.chaos += points
            self.events.emit(EventKind.ENEMY_DEFEATED, x=enemy.x)
            logger.debug("%s reaped for %d chaos (total %d)",
                         "Boss" if enemy.is_boss else "Enemy", points, self.chaos)
            if enemy.is_boss:
                self._on_boss_defeated()

    def _on_boss_defeated(self):
        phase = self.current_phase
        self.events.emit(EventKind.BOSS_DEFEATED, phase=phase)
        action = self.phases.boss_defeated()
        if action is PhaseAction.VICTORY:
            self.events.emit(EventKind.VICTORY, phase=phase)
            return
        if action is PhaseAction.UNLOCK_SPECIAL and self.player.unlock_special():
            self.events.emit(EventKind.SPECIAL_UNLOCKED, phase=phase)
        self.events.emit(EventKind.TRANSITION_STARTED, phase=phase)

    # ── Progression ───────────────────────────────────────

    def _progress(self):
        action = self.phases.evaluate(self.chaos)
        if action is PhaseAction.SPAWN_BOSS:
            self._spawn_boss()
        elif action is PhaseAction.START_TRANSITION:
            self.events.emit(EventKind.TRANSITION_STARTED, phase=self.current_phase)

        if self.phases.ready_to_advance(len(self.enemies), self.player.x):
            phase = self.phases.advance()
            self.player.x = ARENA_LEFT
            self.player.heal(self.phases.cfg.heal_on_advance)
            self.events.emit(EventKind.PHASE_ADVANCED, phase=phase)
            self._spawn_wave(self.phases.opening_wave)

    # ── Spawning ──────────────────────────────────────────

    def _maintain_population(self):
        if not self.phases.spawning_allowed:
            return
        missing = self.phases.population_target - len(self.living_enemies)
        if missing > 0:
            self._spawn_wave(missing)

    def _spawn_wave(self, count: int):
        for _ in range(count):
            self._spawn_replacement()

    def _spawn_replacement(self) -> Enemy:
        x = SPAWN_LEFT_X if self.rng.random() > 0.5 else SPAWN_RIGHT_X
        y = SPAWN_Y_MIN + self.rng.random() * SPAWN_Y_RANGE
        enemy = Enemy(x, y, self.rng,
                      alt_palette=self.current_phase >= ALT_PALETTE_PHASE)
        enemy.set_target(self.player)
        self.enemies.append(enemy)
        logger.debug("Enemy spawned at (%.0f,%.0f)", x, y)
        return enemy

    def _spawn_boss(self) -> Enemy:
        hp, scale = self.phases.boss_spec
        # Grand entrance: the living crowd leaves, corpses stay to be reaped
        self.enemies = [e for e in self.enemies if not e.alive]
        boss = Enemy(BOSS_SPAWN_X, BOSS_SPAWN_Y, self.rng,
                     is_boss=True, max_hp=hp, scale=scale)
        boss.set_target(self.player)
        self.enemies.append(boss)
        while len(self.living_enemies) < BOSS_ENTOURAGE:
            self._spawn_replacement()
        self.events.emit(EventKind.BOSS_SPAWNED, x=boss.x, phase=self.current_phase)
        logger.info("Boss spawned in phase %d (hp=%d, scale=%.1f)",
                    self.current_phase, hp, scale)
        return boss

    # ── Presentation ──────────────────────────────────────

    def _update_theme(self):
        theme = select_theme(self.current_phase, self.boss_active, self.victory,
                             self.defeated, self.paused)
        if theme is not self._theme:
            self._theme = theme
            self.events.emit(EventKind.THEME_CHANGED, theme=theme,
                             phase=self.current_phase)

    def snapshot(self) -> GameSnapshot:
        player = self.player
        return GameSnapshot(
            health=player.hp,
            max_health=player.max_hp,
            chaos=self.chaos,
            multiplier=self.multiplier,
            phase=self.current_phase,
            streak=self.streak,
            target_chaos=self.phases.target,
            special_cooldown=player.special.cooldown_fraction,
            special_unlocked=player.special_unlocked,
            boss_active=self.boss_active,
            victory=self.victory,
            paused=self.paused,
            defeated=self.defeated,
            phase_transitioning=self.phase_transitioning,
            arena_cleared=self.phase_transitioning and not self.enemies,
            hitstop=self.hitstop,
            tick=self.tick_count,
            player=ActorView.from_actor(player),
            enemies=tuple(ActorView.from_actor(e) for e in self.enemies),
            projectiles=tuple((p.x, p.y) for e in self.enemies for p in e.projectiles),
            special_phase=player.special_phase,
            special_radius=player.special_radius,
        )
