"""
Tests for per-session statistics and the chaos-trend plot.
"""

import pytest

from ai.stats import SessionStats
from systems.events import EventKind, GameEvent


def test_rejects_bad_interval():
    with pytest.raises(ValueError):
        SessionStats(sample_interval=0)


def test_counts_events():
    stats = SessionStats()
    stats.record_all([
        GameEvent(EventKind.HIT_LANDED),
        GameEvent(EventKind.HIT_LANDED),
        GameEvent(EventKind.PLAYER_HIT),
        GameEvent(EventKind.ENEMY_DODGED),
        GameEvent(EventKind.SPECIAL_TRIGGERED),
        GameEvent(EventKind.ENEMY_DEFEATED),
        GameEvent(EventKind.ENEMY_DEFEATED),
        GameEvent(EventKind.BOSS_DEFEATED, phase=3),
        GameEvent(EventKind.PHASE_ADVANCED, phase=4),
        GameEvent(EventKind.THEME_CHANGED),
    ])
    assert stats.hits_landed == 2
    assert stats.hits_taken == 1
    assert stats.dodges_seen == 1
    assert stats.specials_used == 1
    assert stats.kills == 2
    assert stats.bosses_defeated == 1
    assert stats.phase_reached == 4


def test_samples_on_interval_only_once_per_tick():
    stats = SessionStats(sample_interval=10)
    for tick in range(1, 31):
        stats.tick(tick, tick * 2, streak=tick % 7)
    stats.tick(30, 999, streak=0)
    assert stats.chaos_history == [20, 40, 60]
    assert stats.highest_streak == 6
    assert stats.ticks == 30


def test_end_session_adds_final_sample():
    stats = SessionStats(sample_interval=10)
    stats.tick(5, 40, 0)
    stats.end_session("defeat")
    assert stats.result == "defeat"
    assert stats.chaos_history == [40]


def test_plot_is_written(tmp_path):
    stats = SessionStats(sample_interval=10)
    for tick in range(1, 41):
        stats.tick(tick, tick, 0)
    path = tmp_path / "chaos.png"
    stats.end_session("victory", plot_path=str(path))
    assert path.exists()
    assert path.stat().st_size > 0


def test_unwritable_plot_is_logged(tmp_path, caplog):
    stats = SessionStats()
    missing = tmp_path / "nope" / "chaos.png"
    stats.end_session("timeout", plot_path=str(missing))
    assert not missing.exists()
    assert "Could not save chaos graph" in caplog.text


def test_as_dict_is_a_copy():
    stats = SessionStats(sample_interval=1)
    stats.tick(1, 20, 1)
    data = stats.as_dict()
    assert data["chaos"] == 20
    assert data["chaos_history"] == [20]
    data["chaos_history"].append(5)
    assert stats.chaos_history == [20]
