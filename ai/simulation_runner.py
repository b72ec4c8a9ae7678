"""
simulation_runner.py – Automated headless sessions.

Runs N sessions where a simple autopilot produces the player's intents.
Nothing is rendered and no keyboard input is needed, so sessions run
as fast as the CPU allows.

Usage (from CLI):
    python main.py --simulate 20 --max-ticks 36000

Architecture:
    SimulationRunner owns one EncounterDirector and restarts it for
    every session, feeding it intents from ``autopilot_intents`` and
    draining its events into a SessionStats.  No gameplay logic is
    duplicated; the Director is driven exactly as the window loop
    drives it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from settings import JAB_REACH, ACTOR_WIDTH
from entities.actor import AnimState
from entities.player import Intent, NO_INTENTS
from systems.director import EncounterDirector
from ai.stats import SessionStats

logger = logging.getLogger(__name__)

# Reach used by the autopilot when deciding to swing
_STRIKE_DX = ACTOR_WIDTH / 4 + JAB_REACH
_STRIKE_DY = 20
_SPECIAL_RANGE = 150


# ══════════════════════════════════════════════════════════
#  Per-session result
# ══════════════════════════════════════════════════════════

@dataclass
class SessionResult:
    """Lightweight record for one simulated session."""
    session_number: int = 0
    result: str = ""               # "victory", "defeat" or "timeout"
    phase_reached: int = 1
    chaos: int = 0
    ticks: int = 0
    kills: int = 0
    bosses_defeated: int = 0
    highest_streak: int = 0


# ══════════════════════════════════════════════════════════
#  Autopilot
# ══════════════════════════════════════════════════════════

def autopilot_intents(director: EncounterDirector) -> frozenset[Intent]:
    """Pick this tick's player intents from the Director's state.

    Walks to the nearest living enemy and alternates jabs and straights
    once in reach; fires the special whenever it is ready and someone is
    close; walks off the right edge once a transition has cleared.
    """
    player = director.player
    if not player.alive:
        return NO_INTENTS

    living = director.living_enemies
    if not living:
        if director.phase_transitioning:
            return frozenset({Intent.MOVE_RIGHT})
        return NO_INTENTS

    target = min(living, key=lambda e: e.distance_to(player.x, player.y))
    dx = target.x - player.x
    dy = target.y - player.y

    if (player.special_unlocked and player.special.is_ready
            and math.hypot(dx, dy) < _SPECIAL_RANGE):
        return frozenset({Intent.SPECIAL})

    intents: set[Intent] = set()
    facing_target = (dx >= 0) == (player.facing > 0)
    if abs(dx) <= _STRIKE_DX and abs(dy) <= _STRIKE_DY and facing_target:
        if player.state not in (AnimState.ATTACK_JAB, AnimState.ATTACK_STRAIGHT):
            intents.add(Intent.JAB if director.tick_count % 2 else Intent.STRAIGHT)
        return frozenset(intents)

    if abs(dx) > _STRIKE_DX / 2 or not facing_target:
        intents.add(Intent.MOVE_RIGHT if dx > 0 else Intent.MOVE_LEFT)
    if abs(dy) > _STRIKE_DY / 2:
        intents.add(Intent.MOVE_DOWN if dy > 0 else Intent.MOVE_UP)
    return frozenset(intents)


# ══════════════════════════════════════════════════════════
#  Simulation Runner
# ══════════════════════════════════════════════════════════

class SimulationRunner:
    """Run *n_sessions* headless autopilot sessions.

    Parameters
    ----------
    n_sessions : int
        How many sessions to run.
    max_ticks : int
        Safety cap per session; reaching it records a "timeout".
    seed : int | None
        Base seed.  Session *i* uses ``seed + i`` so every session
        differs yet the whole batch is reproducible.
    """

    def __init__(self, n_sessions: int = 10, max_ticks: int = 60 * 60 * 10,
                 seed: int | None = None) -> None:
        if max_ticks <= 0:
            raise ValueError("max_ticks must be positive")
        self._n_sessions = max(1, n_sessions)
        self._max_ticks = max_ticks
        self._seed = seed
        self._director = EncounterDirector(seed=self._session_seed(1))
        self._results: list[SessionResult] = []

    @property
    def results(self) -> list[SessionResult]:
        return list(self._results)

    def _session_seed(self, number: int) -> int | None:
        return None if self._seed is None else self._seed + number - 1

    # ── Public entry point ────────────────────────────────

    def run(self) -> list[SessionResult]:
        """Execute all N sessions, then print and return results."""
        for i in range(1, self._n_sessions + 1):
            logger.info("=== Simulation session %d / %d ===", i, self._n_sessions)
            result = self.run_one(i)
            self._results.append(result)
            logger.info(
                "Session %d: result=%s  phase=%d  chaos=%d  ticks=%d",
                i, result.result, result.phase_reached, result.chaos, result.ticks,
            )
        self._print_summary()
        return self._results

    # ── Single session ────────────────────────────────────

    def run_one(self, session_number: int) -> SessionResult:
        director = self._director
        director.restart(seed=self._session_seed(session_number))
        stats = SessionStats()

        while director.tick_count < self._max_ticks and not director.game_over:
            snap = director.tick(autopilot_intents(director))
            stats.record_all(director.drain_events())
            stats.tick(snap.tick, snap.chaos, snap.streak)

        if director.victory:
            outcome = "victory"
        elif director.defeated:
            outcome = "defeat"
        else:
            outcome = "timeout"
            logger.warning("Session %d timed out after %d ticks",
                           session_number, self._max_ticks)
        stats.end_session(outcome)

        return SessionResult(
            session_number=session_number,
            result=outcome,
            phase_reached=director.current_phase,
            chaos=director.chaos,
            ticks=director.tick_count,
            kills=stats.kills,
            bosses_defeated=stats.bosses_defeated,
            highest_streak=stats.highest_streak,
        )

    # ── Summary printout ──────────────────────────────────

    def _print_summary(self) -> None:
        n = len(self._results)
        if n == 0:
            print("\nNo sessions completed.")
            return

        print(f"\n{'=' * 58}")
        print(f"  Simulation Results  ({n} sessions)")
        print(f"{'=' * 58}")

        victories = sum(1 for r in self._results if r.result == "victory")
        defeats = sum(1 for r in self._results if r.result == "defeat")
        other = n - victories - defeats

        print(f"\n  Victories : {victories:>4d}  ({100 * victories / n:.1f}%)")
        print(f"  Defeats   : {defeats:>4d}  ({100 * defeats / n:.1f}%)")
        if other:
            print(f"  Timeouts  : {other:>4d}")

        avg_ticks = sum(r.ticks for r in self._results) / n
        avg_chaos = sum(r.chaos for r in self._results) / n
        avg_phase = sum(r.phase_reached for r in self._results) / n
        print(f"\n  Avg session length : {avg_ticks:.0f} ticks")
        print(f"  Avg chaos          : {avg_chaos:.0f}")
        print(f"  Avg phase reached  : {avg_phase:.2f}")

        # ── Phase distribution ───────────────────────────
        print("\n  Phase Reached Distribution:")
        counts: dict[int, int] = {}
        for r in self._results:
            counts[r.phase_reached] = counts.get(r.phase_reached, 0) + 1
        for phase in sorted(counts):
            print(f"    Phase {phase} : {counts[phase]:>4d}")
        print(f"{'=' * 58}\n")
