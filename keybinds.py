"""
keybinds.py – Rebindable key → Intent mapping with JSON persistence.

The Director never sees key codes.  Each frame the window loop turns
``pygame.key.get_pressed()`` into a frozenset of ``Intent``s through
``intents_from_keys``; bindings map every Intent to one pygame key.

Usage:
    from keybinds import intents_from_keys
    intents = intents_from_keys(pygame.key.get_pressed())

Persistence:
    save_keybinds()   – write current bindings to controls.json
    load_keybinds()   – load from controls.json (called on import),
                        warning about keys bound to two actions
    reset_keybinds()  – restore factory defaults (main.py --reset-controls)
"""

from __future__ import annotations

import json
import logging
import os
from typing import Mapping, Sequence

import pygame

from entities.player import Intent

logger = logging.getLogger(__name__)

# ══════════════════════════════════════════════════════════
#  Path to persistence file
# ══════════════════════════════════════════════════════════

_CONTROLS_PATH = os.path.join(
    os.path.dirname(os.path.abspath(__file__)),
    "controls.json",
)

# Human-friendly labels for the help overlay
INTENT_LABELS: dict[Intent, str] = {
    Intent.MOVE_UP:    "Move Up",
    Intent.MOVE_DOWN:  "Move Down",
    Intent.MOVE_LEFT:  "Move Left",
    Intent.MOVE_RIGHT: "Move Right",
    Intent.JAB:        "Jab",
    Intent.STRAIGHT:   "Straight",
    Intent.DODGE:      "Dodge",
    Intent.SPECIAL:    "Chaos Pulse",
}

# ══════════════════════════════════════════════════════════
#  Default bindings (factory settings)
# ══════════════════════════════════════════════════════════

_DEFAULT_KEYS: dict[Intent, int] = {
    Intent.MOVE_UP:    pygame.K_w,
    Intent.MOVE_DOWN:  pygame.K_s,
    Intent.MOVE_LEFT:  pygame.K_a,
    Intent.MOVE_RIGHT: pygame.K_d,
    Intent.JAB:        pygame.K_j,
    Intent.STRAIGHT:   pygame.K_k,
    Intent.DODGE:      pygame.K_l,
    Intent.SPECIAL:    pygame.K_e,
}

# Session controls handled by the window loop, not the Director
PAUSE_KEYS = (pygame.K_p, pygame.K_ESCAPE)
RESTART_KEY = pygame.K_r
QUIT_KEY = pygame.K_q

# ══════════════════════════════════════════════════════════
#  Live binding dictionary (mutated at runtime)
# ══════════════════════════════════════════════════════════

KEYS: dict[Intent, int] = dict(_DEFAULT_KEYS)


def intents_from_keys(pressed: Sequence[bool] | Mapping[int, bool],
                      bindings: Mapping[Intent, int] | None = None) -> frozenset[Intent]:
    """Build this frame's intent set from a pressed-key lookup."""
    bindings = KEYS if bindings is None else bindings
    return frozenset(intent for intent, key in bindings.items() if pressed[key])


# ══════════════════════════════════════════════════════════
#  Persistence helpers
# ══════════════════════════════════════════════════════════

def save_keybinds(path: str = _CONTROLS_PATH) -> None:
    """Persist current bindings to controls.json."""
    payload = {intent.value: key for intent, key in KEYS.items()}
    try:
        with open(path, "w", encoding="utf-8") as fp:
            json.dump(payload, fp, indent=2)
        logger.info("Keybinds saved to %s", path)
    except OSError as exc:
        logger.error("Failed to save keybinds: %s", exc)


def load_keybinds(path: str = _CONTROLS_PATH) -> None:
    """Load bindings from controls.json into the live dictionary.

    Missing intents are filled from defaults.  Unknown intent names and
    non-integer keys are skipped with a warning so a hand-edited JSON
    won't crash the game.
    """
    KEYS.update(_DEFAULT_KEYS)
    if not os.path.exists(path):
        logger.info("No controls.json found – using defaults.")
        return

    try:
        with open(path, "r", encoding="utf-8") as fp:
            data = json.load(fp)
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Could not read controls.json (%s) – using defaults.", exc)
        return
    if not isinstance(data, dict):
        logger.warning("controls.json is not an object – using defaults.")
        return

    for name, key in data.items():
        try:
            intent = Intent(name)
        except ValueError:
            logger.warning("Unknown action %r in controls.json – skipped", name)
            continue
        if not isinstance(key, int) or isinstance(key, bool):
            logger.warning("Key for %r is not an integer – skipped", name)
            continue
        KEYS[intent] = key
    logger.info("Keybinds loaded from %s", path)
    for a, b, key in find_conflicts(KEYS):
        logger.warning("%s and %s share key %d – one press triggers both",
                       a.value, b.value, key)


def reset_keybinds(path: str = _CONTROLS_PATH) -> None:
    """Restore factory defaults and save."""
    KEYS.update(_DEFAULT_KEYS)
    save_keybinds(path)
    logger.info("Keybinds reset to defaults.")


# ══════════════════════════════════════════════════════════
#  Conflict detection
# ══════════════════════════════════════════════════════════

def find_conflicts(bindings: Mapping[Intent, int]) -> list[tuple[Intent, Intent, int]]:
    """Return a list of (intent_a, intent_b, key) tuples for duplicate keys."""
    seen: dict[int, Intent] = {}
    conflicts: list[tuple[Intent, Intent, int]] = []
    for intent, key in bindings.items():
        if key in seen:
            conflicts.append((seen[key], intent, key))
        else:
            seen[key] = intent
    return conflicts


# ══════════════════════════════════════════════════════════
#  Key name helper (for display)
# ══════════════════════════════════════════════════════════

def key_name(key_code: int) -> str:
    """Return a human-readable name for a pygame key constant."""
    return pygame.key.name(key_code).upper()


def controls_hint() -> str:
    """One-line summary of the live bindings for the HUD."""
    return "   ".join(f"{INTENT_LABELS[i]}: {key_name(k)}" for i, k in KEYS.items()
                      if i not in (Intent.MOVE_UP, Intent.MOVE_DOWN,
                                   Intent.MOVE_LEFT, Intent.MOVE_RIGHT))


# ══════════════════════════════════════════════════════════
#  Auto-load on import
# ══════════════════════════════════════════════════════════

load_keybinds()
