"""
audio_manager.py  –  Event-driven sound for the brawler.

Sound effects are synthesised with numpy at startup from a small
recipe table (oscillator shape, frequency sweep, decay, envelope) and
panned by the arena x of the event that triggered them.  Theme music
streams through ``pygame.mixer.music`` from ``assets/music/`` and is
skipped when the file is absent.

The simulation never calls in here: the window loop drains the
Director's events once per frame and hands them to ``handle_events``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Iterable, Optional

import numpy as np
import pygame

from settings import SCREEN_WIDTH
from systems.events import EventKind, GameEvent, Theme

logger = logging.getLogger(__name__)

# ─── Mixer settings ──────────────────────────────────────
_SAMPLE_RATE = 44100
_MIXER_CHANNELS = 16
_MASTER_VOLUME = 0.4
_MUSIC_FADE_MS = 500
_PAN_FLOOR = 0.3               # quietest side of a hard-panned effect
_MUSIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "assets", "music")

THEME_FILES: dict[Theme, str] = {
    Theme.MENU:    "mainTheme.ogg",
    Theme.PHASE_1: "phaseOneTheme.ogg",
    Theme.PHASE_2: "phaseTwoTheme.ogg",
    Theme.PHASE_3: "phaseThreeTheme.ogg",
    Theme.PHASE_4: "phaseFourTheme.ogg",
    Theme.PHASE_5: "phaseFiveTheme.ogg",
    Theme.BOSS_1:  "bossOneTheme.ogg",
    Theme.BOSS_2:  "bossTwoTheme.ogg",
    Theme.DEFEAT:  "defeatTheme.ogg",
    Theme.VICTORY: "victoryTheme.ogg",
}


# ══════════════════════════════════════════════════════════
#  Synthesis
# ══════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Voice:
    """One synthesised layer of an effect.

    shape  : "sine" | "square" | "saw" | "noise"
    start  : frequency (Hz) at the beginning of the layer
    end    : frequency at the end (None = no sweep)
    decay  : exponential decay rate in 1/s (0 = sustained)
    """
    shape: str
    start: float
    duration: float
    gain: float = 0.5
    end: Optional[float] = None
    decay: float = 0.0


def _phase(voice: Voice) -> tuple[np.ndarray, np.ndarray]:
    n = int(_SAMPLE_RATE * voice.duration)
    t = np.arange(n) / _SAMPLE_RATE
    if voice.end is None:
        freq = np.full(n, voice.start)
    else:
        freq = np.linspace(voice.start, voice.end, n, endpoint=False)
    # Integrate the instantaneous frequency so sweeps stay continuous
    return t, np.cumsum(freq) / _SAMPLE_RATE


def render_voice(voice: Voice) -> np.ndarray:
    t, cycles = _phase(voice)
    if voice.shape == "sine":
        wave = np.sin(2 * np.pi * cycles)
    elif voice.shape == "square":
        wave = np.sign(np.sin(2 * np.pi * cycles))
    elif voice.shape == "saw":
        wave = 2.0 * (cycles - np.floor(cycles + 0.5))
    elif voice.shape == "noise":
        wave = np.random.default_rng().uniform(-1.0, 1.0, len(t))
    else:
        raise ValueError(f"unknown oscillator shape {voice.shape!r}")
    if voice.decay:
        wave = wave * np.exp(-t * voice.decay)
    return wave * voice.gain


def _envelope(samples: np.ndarray, attack: float, release: float) -> np.ndarray:
    """Linear fade in/out so clips start and stop without clicks."""
    n = len(samples)
    env = np.ones(n)
    a = min(int(attack * _SAMPLE_RATE), n // 2)
    r = min(int(release * _SAMPLE_RATE), n // 2)
    if a:
        env[:a] = np.linspace(0.0, 1.0, a)
    if r:
        env[n - r:] = np.linspace(1.0, 0.0, r)
    return samples * env


@dataclass(frozen=True)
class Recipe:
    """Layers mixed together (``mix``) or played back to back (``chain``)."""
    layers: tuple[Voice, ...]
    volume: float = 0.4
    attack: float = 0.005
    release: float = 0.05
    chain: bool = False

    def render(self) -> np.ndarray:
        parts = [render_voice(v) for v in self.layers]
        if self.chain:
            samples = np.concatenate(parts)
        else:
            samples = np.zeros(max(len(p) for p in parts))
            for p in parts:
                samples[:len(p)] += p
        samples = _envelope(samples, self.attack, self.release)
        return np.clip(samples * self.volume, -1.0, 1.0)


def to_sound(samples: np.ndarray) -> pygame.mixer.Sound:
    """Mono float samples in [-1, 1] → 16-bit stereo pygame Sound."""
    pcm = (samples * 32767).astype(np.int16)
    return pygame.mixer.Sound(buffer=np.repeat(pcm, 2).tobytes())


RECIPES: dict[str, Recipe] = {
    # punch landing: noise click over a short sine body
    "hit": Recipe((Voice("noise", 0, 0.10, 0.7, decay=40),
                   Voice("sine", 220, 0.10, 0.4)),
                  release=0.03),
    "player_hit": Recipe((Voice("noise", 0, 0.02, 0.5),
                          Voice("square", 110, 0.12, 0.5, decay=25)),
                         release=0.04, chain=True),
    # Chaos Pulse release
    "special": Recipe((Voice("saw", 200, 0.5, 0.5, decay=5),),
                      volume=0.35, attack=0.01, release=0.10),
    "dodge": Recipe((Voice("noise", 0, 0.15, 0.4, decay=20),), volume=0.25),
    "enemy_down": Recipe((Voice("sine", 300, 0.30, 0.5, end=100),),
                         volume=0.3, attack=0.01, release=0.10),
    "boss_spawn": Recipe((Voice("sine", 120, 0.70, 0.6, end=20),
                          Voice("sine", 25, 0.70, 0.4)),
                         volume=0.5, attack=0.02, release=0.20),
    "fanfare": Recipe(tuple(Voice("sine", f, 0.10, 0.4) for f in (523, 659, 784, 1047)),
                      release=0.08, chain=True),
    "defeat": Recipe((Voice("sine", 200, 0.60, 0.5, end=30),
                      Voice("sine", 30, 0.60, 0.4)),
                     volume=0.5, attack=0.01, release=0.20),
}

# Which effect answers which event
EVENT_SOUNDS: dict[EventKind, str] = {
    EventKind.HIT_LANDED:        "hit",
    EventKind.PLAYER_HIT:        "player_hit",
    EventKind.SPECIAL_TRIGGERED: "special",
    EventKind.ENEMY_DODGED:      "dodge",
    EventKind.ENEMY_DEFEATED:    "enemy_down",
    EventKind.BOSS_SPAWNED:      "boss_spawn",
    EventKind.SPECIAL_UNLOCKED:  "fanfare",
    EventKind.PHASE_ADVANCED:    "fanfare",
    EventKind.VICTORY:           "fanfare",
    EventKind.DEFEAT:            "defeat",
}


def pan_gains(x: float) -> tuple[float, float]:
    """(left, right) channel gains for an event at arena x."""
    pan = max(0.0, min(1.0, x / SCREEN_WIDTH))
    span = 1.0 - _PAN_FLOOR
    return _PAN_FLOOR + span * (1.0 - pan), _PAN_FLOOR + span * pan


# ══════════════════════════════════════════════════════════
#  AudioManager
# ══════════════════════════════════════════════════════════

class AudioManager:
    """Plays effects and theme music for drained simulation events.

    Disabled (every call a no-op) when the mixer cannot start.
    """

    def __init__(self, music_dir: str = _MUSIC_DIR):
        self.enabled = True
        self.music_dir = music_dir
        self.volume = _MASTER_VOLUME
        self.current_theme: Optional[Theme] = None
        self._sounds: dict[str, pygame.mixer.Sound] = {}
        self._missing: set[str] = set()

        try:
            if not pygame.mixer.get_init():
                pygame.mixer.pre_init(frequency=_SAMPLE_RATE, size=-16,
                                      channels=2, buffer=512)
                pygame.mixer.init()
            pygame.mixer.set_num_channels(_MIXER_CHANNELS)
        except pygame.error as exc:
            logger.warning("Audio disabled: mixer could not start (%s)", exc)
            self.enabled = False
            return

        self._sounds = {name: to_sound(r.render()) for name, r in RECIPES.items()}
        logger.debug("Synthesised %d sound effects", len(self._sounds))

    def handle_events(self, events: Iterable[GameEvent]):
        if not self.enabled:
            return
        for event in events:
            if event.kind is EventKind.THEME_CHANGED:
                if event.theme is not None:
                    self.play_theme(event.theme)
            elif event.kind in EVENT_SOUNDS:
                self.play_sfx(EVENT_SOUNDS[event.kind], event.x)

    def play_sfx(self, name: str, x: Optional[float] = None):
        """Fire-and-forget effect, panned by arena *x* (None = centre)."""
        sound = self._sounds.get(name)
        channel = pygame.mixer.find_channel() if sound is not None else None
        if channel is None:
            return
        left, right = (1.0, 1.0) if x is None else pan_gains(x)
        channel.set_volume(left * self.volume, right * self.volume)
        channel.play(sound)

    def play_theme(self, theme: Theme):
        """Fade to *theme*'s track; a missing file is reported once."""
        if not self.enabled or theme is self.current_theme:
            return
        self.current_theme = theme
        pygame.mixer.music.fadeout(_MUSIC_FADE_MS)

        path = os.path.join(self.music_dir, THEME_FILES[theme])
        if not os.path.isfile(path):
            if path not in self._missing:
                self._missing.add(path)
                logger.info("No music for %s (%s not found)", theme.name, path)
            return
        try:
            pygame.mixer.music.load(path)
            pygame.mixer.music.set_volume(self.volume)
            pygame.mixer.music.play(loops=-1, fade_ms=_MUSIC_FADE_MS)
        except pygame.error as exc:
            logger.warning("Could not play %s: %s", path, exc)

    def reset(self):
        """Silence everything; the next THEME_CHANGED starts music again."""
        if not self.enabled:
            return
        pygame.mixer.stop()
        pygame.mixer.music.stop()
        self.current_theme = None
