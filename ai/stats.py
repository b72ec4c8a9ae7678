"""
stats.py  –  Per-session statistics tracking.

SessionStats consumes the events the Director emits and samples the
chaos score every 60 ticks.  At session end it logs a formatted
summary and, when asked, saves a chaos-trend line graph via
matplotlib.

Nothing recorded here is fed back into a session.
"""

from __future__ import annotations

import logging
from typing import Iterable

import matplotlib
matplotlib.use("Agg")  # non-interactive backend so the plot doesn't block pygame
import matplotlib.pyplot as plt

from settings import STATS_SAMPLE_INTERVAL, FPS
from systems.events import EventKind, GameEvent

logger = logging.getLogger(__name__)


class SessionStats:
    """Tracks events for one session and produces end-of-session reports.

    Attributes tracked:
        kills            – int  (enemies reaped, bosses included)
        bosses_defeated  – int
        hits_landed      – int  (player → enemy, melee and special)
        hits_taken       – int  (enemy → player, any source)
        dodges_seen      – int  (enemy dodge rolls that succeeded)
        specials_used    – int
        highest_streak   – int
        phase_reached    – int
        ticks            – int  (simulation ticks observed)
        chaos_history    – list[int]
    """

    def __init__(self, sample_interval: int = STATS_SAMPLE_INTERVAL):
        if sample_interval <= 0:
            raise ValueError("sample_interval must be positive")
        self.sample_interval = sample_interval

        # Cumulative counters
        self.kills: int = 0
        self.bosses_defeated: int = 0
        self.hits_landed: int = 0
        self.hits_taken: int = 0
        self.dodges_seen: int = 0
        self.specials_used: int = 0
        self.highest_streak: int = 0
        self.phase_reached: int = 1
        self.ticks: int = 0

        self.chaos: int = 0
        self.result: str = ""
        self.chaos_history: list[int] = []

    # ===========================================================
    #  Per-tick / per-event recorders
    # ===========================================================

    def record(self, event: GameEvent):
        """Fold one drained event into the counters."""
        kind = event.kind
        if kind is EventKind.HIT_LANDED:
            self.hits_landed += 1
        elif kind is EventKind.PLAYER_HIT:
            self.hits_taken += 1
        elif kind is EventKind.ENEMY_DODGED:
            self.dodges_seen += 1
        elif kind is EventKind.SPECIAL_TRIGGERED:
            self.specials_used += 1
        elif kind is EventKind.ENEMY_DEFEATED:
            self.kills += 1
        elif kind is EventKind.BOSS_DEFEATED:
            self.bosses_defeated += 1
        elif kind is EventKind.PHASE_ADVANCED and event.phase is not None:
            self.phase_reached = max(self.phase_reached, event.phase)

    def record_all(self, events: Iterable[GameEvent]):
        for event in events:
            self.record(event)

    def tick(self, tick: int, chaos: int, streak: int):
        """Call once per frame with the snapshot's counters."""
        self.chaos = chaos
        self.highest_streak = max(self.highest_streak, streak)
        if tick != self.ticks:
            self.ticks = tick
            if tick % self.sample_interval == 0:
                self.chaos_history.append(chaos)

    # ===========================================================
    #  End-of-session
    # ===========================================================

    def end_session(self, result: str, plot_path: str | None = None):
        """Finalise stats, log summary, and optionally save the graph.

        Parameters
        ----------
        result    : "victory", "defeat" or "timeout"
        plot_path : where to save the chaos-trend PNG (None = no plot)
        """
        self.result = result
        # Final sample so the graph is never empty
        self.chaos_history.append(self.chaos)

        self._log_summary()
        if plot_path:
            self._plot_chaos(plot_path)

    # ===========================================================
    #  Reports
    # ===========================================================

    def _log_summary(self):
        logger.info("=" * 44)
        logger.info("  SESSION SUMMARY")
        logger.info("=" * 44)
        logger.info("  Result          : %s", self.result or "unfinished")
        logger.info("  Phase Reached   : %d", self.phase_reached)
        logger.info("  Chaos           : %d", self.chaos)
        logger.info("  Duration        : %.1fs (%d ticks)", self.ticks / FPS, self.ticks)
        logger.info("-" * 44)
        logger.info("  Kills           : %d", self.kills)
        logger.info("  Bosses Defeated : %d", self.bosses_defeated)
        logger.info("  Hits Landed     : %d", self.hits_landed)
        logger.info("  Hits Taken      : %d", self.hits_taken)
        logger.info("  Enemy Dodges    : %d", self.dodges_seen)
        logger.info("  Specials Used   : %d", self.specials_used)
        logger.info("  Highest Streak  : %d", self.highest_streak)
        logger.info("=" * 44)

    def _plot_chaos(self, path: str):
        """Save a simple line graph of chaos_history to disk."""
        x = [i * self.sample_interval / FPS for i in range(len(self.chaos_history))]
        y = self.chaos_history

        fig, ax = plt.subplots()
        ax.plot(x, y, marker="o")
        ax.set_xlabel("Time (seconds)")
        ax.set_ylabel("Chaos Score")
        ax.set_title(f"Chaos Trend  -  {self.result or 'session'} in phase {self.phase_reached}")
        ax.grid(True)

        try:
            fig.savefig(path, dpi=100, bbox_inches="tight")
        except OSError as exc:
            logger.warning("Could not save chaos graph to %s: %s", path, exc)
        else:
            logger.info("Chaos graph saved to %s", path)
        finally:
            plt.close(fig)

    # ===========================================================
    #  Data accessors
    # ===========================================================

    def as_dict(self) -> dict:
        """Return a plain dict snapshot (useful for JSON serialisation)."""
        return {
            "result":          self.result,
            "phase_reached":   self.phase_reached,
            "chaos":           self.chaos,
            "ticks":           self.ticks,
            "kills":           self.kills,
            "bosses_defeated": self.bosses_defeated,
            "hits_landed":     self.hits_landed,
            "hits_taken":      self.hits_taken,
            "dodges_seen":     self.dodges_seen,
            "specials_used":   self.specials_used,
            "highest_streak":  self.highest_streak,
            "chaos_history":   list(self.chaos_history),
        }
