"""
Tests for the event queue and music theme selection.
"""

import dataclasses

import pytest

from systems.events import EventKind, EventQueue, GameEvent, Theme, select_theme


def test_queue_is_fifo_and_drains():
    queue = EventQueue()
    queue.emit(EventKind.HIT_LANDED, x=10.0)
    queue.push(GameEvent(EventKind.PLAYER_HIT))
    assert len(queue) == 2

    events = queue.drain()
    assert [e.kind for e in events] == [EventKind.HIT_LANDED, EventKind.PLAYER_HIT]
    assert events[0].x == 10.0
    assert len(queue) == 0
    assert queue.drain() == []


def test_events_are_frozen():
    event = GameEvent(EventKind.PHASE_ADVANCED, phase=2)
    with pytest.raises(dataclasses.FrozenInstanceError):
        event.phase = 3


@pytest.mark.parametrize("kwargs, theme", [
    (dict(phase=1), Theme.PHASE_1),
    (dict(phase=4), Theme.PHASE_4),
    (dict(phase=3, boss_active=True), Theme.BOSS_1),
    (dict(phase=5, boss_active=True), Theme.BOSS_2),
    (dict(phase=5, victory=True), Theme.VICTORY),
    (dict(phase=2, defeated=True), Theme.DEFEAT),
    (dict(phase=3, boss_active=True, paused=True), Theme.MENU),
    (dict(phase=9), Theme.PHASE_1),
])
def test_select_theme(kwargs, theme):
    state = dict(boss_active=False, victory=False, defeated=False, paused=False)
    state.update(kwargs)
    assert select_theme(**state) is theme
