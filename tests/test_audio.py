"""
Tests for effect synthesis and stereo panning (no mixer needed).
"""

import numpy as np
import pytest

from audio_manager import (
    EVENT_SOUNDS, RECIPES, THEME_FILES, Recipe, Voice, pan_gains, render_voice,
)
from systems.events import EventKind, Theme


def test_every_theme_has_a_track():
    assert set(THEME_FILES) == set(Theme)


def test_event_sounds_exist():
    assert set(EVENT_SOUNDS.values()) <= set(RECIPES)
    assert EventKind.THEME_CHANGED not in EVENT_SOUNDS


@pytest.mark.parametrize("name", sorted(RECIPES))
def test_recipes_render_in_range(name):
    samples = RECIPES[name].render()
    assert samples.size > 0
    assert np.all(np.abs(samples) <= 1.0)


def test_special_is_half_a_second():
    assert RECIPES["special"].render().size == 22050


def test_chained_layers_play_back_to_back():
    recipe = Recipe((Voice("sine", 440, 0.1), Voice("sine", 880, 0.2)), chain=True)
    assert recipe.render().size == 4410 + 8820


def test_unknown_shape_is_rejected():
    with pytest.raises(ValueError):
        render_voice(Voice("triangle", 100, 0.1))


def test_sweep_decays_to_silence():
    wave = render_voice(Voice("sine", 300, 0.5, 1.0, end=100, decay=30))
    assert np.abs(wave[:500]).max() > np.abs(wave[-500:]).max()


@pytest.mark.parametrize("x, louder", [(0, "left"), (800, "right")])
def test_pan_follows_arena_x(x, louder):
    left, right = pan_gains(x)
    assert min(left, right) == pytest.approx(0.3)
    assert (left > right) == (louder == "left")


def test_centre_and_offscreen_pan():
    assert pan_gains(400) == pytest.approx((0.65, 0.65))
    assert pan_gains(-150) == pan_gains(0)
    assert pan_gains(950) == pan_gains(800)
