"""
phase_system.py – Encounter progression state machine.

Drives the arc of a session through five escalating phases:

  Phase 1 – warm-up brawl         → transition at 100 chaos
  Phase 2 – bigger crowds         → transition at 1000 chaos
  Phase 3 – crowd + first BOSS    → boss enters at 3000 chaos
  Phase 4 – night falls           → transition at 5000 chaos
  Phase 5 – crowd + final BOSS    → boss enters at 10000 chaos

A "transition" clears the arena: no new enemies spawn and, once the
last enemy is gone, the player walks off the right edge to reach the
next phase.  Killing the phase-3 boss unlocks the player's special and
opens a transition; killing the phase-5 boss wins the session.

The system only tracks progression; the Director performs the spawns,
heals and unlocks the returned ``PhaseAction`` asks for.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from settings import (
    PHASE_COUNT, PHASE_TARGETS, BOSS_PHASES, SPECIAL_UNLOCK_PHASE,
    PHASE_HEAL, POPULATION_NORMAL, POPULATION_LATE, LATE_PHASE,
    ARENA_EXIT_X,
)

logger = logging.getLogger(__name__)


class PhaseAction(Enum):
    """What the Director must do after a progression check."""

    NONE = "none"
    SPAWN_BOSS = "spawn_boss"
    START_TRANSITION = "start_transition"
    UNLOCK_SPECIAL = "unlock_special"      # also starts a transition
    VICTORY = "victory"


# ══════════════════════════════════════════════════════════
#  Configuration
# ══════════════════════════════════════════════════════════

@dataclass
class PhaseConfig:
    """Tunable knobs for progression and crowd size."""

    targets: tuple[int, ...] = PHASE_TARGETS
    boss_phases: dict[int, tuple[int, float]] = field(
        default_factory=lambda: dict(BOSS_PHASES))   # phase → (max hp, scale)
    special_unlock_phase: int = SPECIAL_UNLOCK_PHASE
    heal_on_advance: int = PHASE_HEAL
    population_normal: int = POPULATION_NORMAL
    population_late: int = POPULATION_LATE
    late_phase: int = LATE_PHASE
    exit_x: float = ARENA_EXIT_X

    def __post_init__(self):
        if len(self.targets) != PHASE_COUNT:
            raise ValueError(
                f"expected {PHASE_COUNT} phase targets, got {len(self.targets)}")


# ══════════════════════════════════════════════════════════
#  Phase System Controller
# ══════════════════════════════════════════════════════════

class PhaseSystem:
    """Tracks the current phase and its transition / boss windows.

    Usage:
        ps = PhaseSystem()
        action = ps.evaluate(chaos)
        if action is PhaseAction.SPAWN_BOSS:
            hp, scale = ps.boss_spec
    """

    def __init__(self, config: PhaseConfig | None = None):
        self.cfg = config or PhaseConfig()
        self.reset()

    def reset(self):
        """Back to phase 1 (new session)."""
        self.phase = 1
        self.transitioning = False
        self.boss_active = False
        self.boss_spawned_this_phase = False
        self.victory = False

    # ── Queries ───────────────────────────────────────────

    @property
    def target(self) -> int:
        return self.cfg.targets[self.phase - 1]

    @property
    def is_boss_phase(self) -> bool:
        return self.phase in self.cfg.boss_phases

    @property
    def boss_spec(self) -> tuple[int, float]:
        return self.cfg.boss_phases[self.phase]

    @property
    def is_final_phase(self) -> bool:
        return self.phase >= len(self.cfg.targets)

    @property
    def spawning_allowed(self) -> bool:
        return not (self.transitioning or self.victory or self.boss_active)

    @property
    def population_target(self) -> int:
        if self.phase >= self.cfg.late_phase:
            return self.cfg.population_late
        return self.cfg.population_normal

    @property
    def opening_wave(self) -> int:
        """Enemies spawned when a phase begins."""
        return min(self.cfg.population_late, 2 + self.phase)

    # ── Transitions ───────────────────────────────────────

    def evaluate(self, chaos: int) -> PhaseAction:
        """Check the chaos score against this phase's target."""
        if (self.victory or self.transitioning or self.boss_spawned_this_phase
                or chaos < self.target):
            return PhaseAction.NONE
        if self.is_boss_phase:
            self.boss_spawned_this_phase = True
            self.boss_active = True
            logger.info("Phase %d target %d reached – boss incoming", self.phase, self.target)
            return PhaseAction.SPAWN_BOSS
        self.transitioning = True
        logger.info("Phase %d target %d reached – clear the beach", self.phase, self.target)
        return PhaseAction.START_TRANSITION

    def boss_defeated(self) -> PhaseAction:
        self.boss_active = False
        if self.is_final_phase:
            self.victory = True
            logger.info("Final boss defeated – victory")
            return PhaseAction.VICTORY
        self.transitioning = True
        logger.info("Phase %d boss defeated", self.phase)
        if self.phase == self.cfg.special_unlock_phase:
            return PhaseAction.UNLOCK_SPECIAL
        return PhaseAction.START_TRANSITION

    def ready_to_advance(self, enemies_left: int, player_x: float) -> bool:
        return (self.transitioning and enemies_left == 0
                and player_x > self.cfg.exit_x and not self.is_final_phase)

    def advance(self) -> int:
        """Enter the next phase; returns the new phase number."""
        self.phase += 1
        self.transitioning = False
        self.boss_spawned_this_phase = False
        logger.info("Entering phase %d", self.phase)
        return self.phase
