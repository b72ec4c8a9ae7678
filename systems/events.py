"""
events.py – Discrete simulation events for the presentation layer.

The simulation never calls into audio or UI code.  Instead it pushes
small immutable ``GameEvent`` records onto an ``EventQueue`` which the
front end drains once per tick (after the tick has completed).

Also home to the music ``Theme`` selection, which is a pure function
of the session's high-level state.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum


class EventKind(Enum):
    HIT_LANDED = "hit_landed"            # an enemy took damage from the player
    PLAYER_HIT = "player_hit"            # the player took damage
    SPECIAL_TRIGGERED = "special_triggered"
    ENEMY_DODGED = "enemy_dodged"
    ENEMY_DEFEATED = "enemy_defeated"
    BOSS_SPAWNED = "boss_spawned"
    BOSS_DEFEATED = "boss_defeated"
    SPECIAL_UNLOCKED = "special_unlocked"
    TRANSITION_STARTED = "transition_started"
    PHASE_ADVANCED = "phase_advanced"
    VICTORY = "victory"
    DEFEAT = "defeat"
    THEME_CHANGED = "theme_changed"


class Theme(Enum):
    MENU = "menu"
    PHASE_1 = "phase_1"
    PHASE_2 = "phase_2"
    PHASE_3 = "phase_3"
    PHASE_4 = "phase_4"
    PHASE_5 = "phase_5"
    BOSS_1 = "boss_1"
    BOSS_2 = "boss_2"
    DEFEAT = "defeat"
    VICTORY = "victory"


@dataclass(frozen=True)
class GameEvent:
    """One thing that happened during a tick.

    x      : arena x of the event (for stereo panning), if meaningful
    theme  : set on THEME_CHANGED
    phase  : phase number the event refers to, if any
    """
    kind: EventKind
    x: float | None = None
    theme: Theme | None = None
    phase: int | None = None


class EventQueue:
    """FIFO of events produced since the last drain."""

    def __init__(self):
        self._events: deque[GameEvent] = deque()

    def push(self, event: GameEvent):
        self._events.append(event)

    def emit(self, kind: EventKind, **fields) -> GameEvent:
        event = GameEvent(kind, **fields)
        self._events.append(event)
        return event

    def drain(self) -> list[GameEvent]:
        """Return every pending event, oldest first, and clear the queue."""
        events = list(self._events)
        self._events.clear()
        return events

    def __len__(self) -> int:
        return len(self._events)


def select_theme(phase: int, boss_active: bool, victory: bool,
                 defeated: bool, paused: bool) -> Theme:
    """Pick the music theme for the current session state."""
    if paused:
        return Theme.MENU
    if defeated:
        return Theme.DEFEAT
    if victory:
        return Theme.VICTORY
    if boss_active:
        return Theme.BOSS_1 if phase == 3 else Theme.BOSS_2
    try:
        return Theme[f"PHASE_{phase}"]
    except KeyError:
        return Theme.PHASE_1
