"""
main.py - Entry point for Chaos Brawler.

Wires the window front end to the simulation:
- Encounter director, the one authoritative tick (systems/director.py)
- Key → intent mapping (keybinds.py)
- Event-driven SFX and theme music (audio_manager.py)
- Session statistics and chaos-trend plot (ai/stats.py)
- Headless autopilot batches (ai/simulation_runner.py)

Everything on screen is drawn from the Director's GameSnapshot.

Run:  python main.py [--seed N] [--verbose] [--simulate N] [--max-ticks T]
"""
VERSION = "1.0.0"

import argparse
import logging
import sys

import pygame

logger = logging.getLogger(__name__)

# ── Project imports ───────────────────────────────────────
from settings import (
    SCREEN_WIDTH, SCREEN_HEIGHT, FPS, TITLE, WHITE, BLACK, GREEN, RED, YELLOW,
    HORIZON_Y,
    PLAYER_COLOR, ENEMY_COLOR, ENEMY_ALT_COLOR, BOSS_COLOR,
    SKY_COLOR, SKY_NIGHT_COLOR, SAND_COLOR, SAND_NIGHT_COLOR,
    PULSE_COLOR, BLAST_COLOR, ORB_COLOR, ALT_PALETTE_PHASE,
    PROJECTILE_HIT_RADIUS, SMALL_FONT_SIZE,
)
from entities.actor import AnimState
from systems.director import EncounterDirector, GameSnapshot, ActorView
from systems.ability_system import AbilityPhase
from ai.stats import SessionStats
from ai.simulation_runner import SimulationRunner
from audio_manager import AudioManager
from keybinds import (
    intents_from_keys, controls_hint, reset_keybinds,
    PAUSE_KEYS, RESTART_KEY, QUIT_KEY,
)
from utils import draw_text, draw_bar, draw_end_screen

_PLOT_PATH = "chaos_trend.png"


# ══════════════════════════════════════════════════════════
#  ACTOR DRAWING
# ══════════════════════════════════════════════════════════

def _actor_color(view: ActorView, is_player: bool):
    if is_player:
        return PLAYER_COLOR
    if view.is_boss:
        return BOSS_COLOR
    return ENEMY_ALT_COLOR if view.alt_palette else ENEMY_COLOR


def draw_actor(surface: pygame.Surface, view: ActorView, is_player: bool = False):
    """Body box, tells and any live attack box for one actor."""
    body = pygame.Rect(view.body_box)

    # Shadow
    pygame.draw.ellipse(surface, (40, 40, 40),
                        (body.x, round(view.y - 6), body.w, 12))

    color = _actor_color(view, is_player)
    if view.state is AnimState.DEAD:
        color = tuple(c // 3 for c in color)
    elif view.state is AnimState.HIT or (view.invincible and view.frame % 2):
        color = WHITE
    pygame.draw.rect(surface, color, body, border_radius=6)

    # Wind-up / charging tell
    if view.state is AnimState.WIND_UP or view.charging:
        pygame.draw.rect(surface, YELLOW, body.inflate(6, 6), 2, border_radius=8)

    # Live strike box
    if view.attack_box is not None:
        pygame.draw.rect(surface, YELLOW, view.attack_box, 2)

    # Boss health over the head
    if view.is_boss and view.state is not AnimState.DEAD:
        draw_bar(surface, body.x, body.y - 12, body.w, 6,
                 view.health / view.max_health, RED)


# ══════════════════════════════════════════════════════════
#  GAME
# ══════════════════════════════════════════════════════════

class Game:
    """Top-level window controller.  Owns the loop, events, and rendering."""

    def __init__(self, seed: int | None = None):
        pygame.init()
        self.screen = pygame.display.set_mode((SCREEN_WIDTH, SCREEN_HEIGHT))
        pygame.display.set_caption(TITLE)
        self.clock = pygame.time.Clock()

        self.director = EncounterDirector(seed=seed)
        self.audio = AudioManager()
        self.stats = SessionStats()
        self._stats_closed = False

        self.running = True
        self._hint = controls_hint()

    # ── Main loop ─────────────────────────────────────────

    def run(self):
        """Start the game loop."""
        while self.running:
            self.clock.tick(FPS)
            self._handle_events()
            if not self.running:
                break
            snap = self._update()
            self._draw(snap)

        self._close_stats("quit")
        pygame.quit()
        sys.exit()

    def _handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                if event.key in PAUSE_KEYS:
                    self.director.toggle_pause()
                elif event.key == RESTART_KEY:
                    self._reset()
                elif event.key == QUIT_KEY:
                    self.running = False

    def _update(self) -> GameSnapshot:
        intents = intents_from_keys(pygame.key.get_pressed())
        snap = self.director.tick(intents)

        events = self.director.drain_events()
        self.audio.handle_events(events)
        self.stats.record_all(events)
        self.stats.tick(snap.tick, snap.chaos, snap.streak)

        if snap.victory:
            self._close_stats("victory")
        elif snap.defeated:
            self._close_stats("defeat")
        return snap

    def _close_stats(self, result: str):
        if self._stats_closed:
            return
        self._stats_closed = True
        self.stats.end_session(result, plot_path=_PLOT_PATH if result != "quit" else None)

    def _reset(self):
        """Restart the session without closing the window."""
        self._close_stats("quit")
        self.director.restart()
        self.audio.reset()
        self.stats = SessionStats()
        self._stats_closed = False

    # ── Draw ──────────────────────────────────────────────

    def _draw(self, snap: GameSnapshot):
        """Render everything to the screen from the snapshot."""
        surface = self.screen
        night = snap.phase >= ALT_PALETTE_PHASE
        surface.fill(SKY_NIGHT_COLOR if night else SKY_COLOR)
        pygame.draw.rect(surface, SAND_NIGHT_COLOR if night else SAND_COLOR,
                         (0, HORIZON_Y, SCREEN_WIDTH, SCREEN_HEIGHT - HORIZON_Y))

        self._draw_world(surface, snap)
        self._draw_hud(surface, snap)

        if snap.victory:
            draw_end_screen(surface, "BEACH CLEARED!")
        elif snap.defeated:
            draw_end_screen(surface, "KNOCKED OUT")
        elif snap.paused:
            draw_end_screen(surface, "PAUSED", "Press P to Resume  |  R to Restart")

        pygame.display.flip()

    def _draw_world(self, surface, snap: GameSnapshot):
        # Area effects under the actors
        for view in snap.enemies:
            if view.blast_radius > 0:
                pygame.draw.circle(surface, BLAST_COLOR,
                                   (round(view.x), round(view.y)),
                                   round(view.blast_radius), 3)
        if snap.special_phase is AbilityPhase.ACTIVE and snap.special_radius > 0:
            pygame.draw.circle(surface, PULSE_COLOR,
                               (round(snap.player.x), round(snap.player.y)),
                               round(snap.special_radius), 4)

        # Painter's order: further up the beach is drawn first
        views = [(v, False) for v in snap.enemies] + [(snap.player, True)]
        for view, is_player in sorted(views, key=lambda item: item[0].y):
            draw_actor(surface, view, is_player)

        for x, y in snap.projectiles:
            pygame.draw.circle(surface, ORB_COLOR, (round(x), round(y)),
                               PROJECTILE_HIT_RADIUS // 2)

    def _draw_hud(self, surface, snap: GameSnapshot):
        draw_bar(surface, 20, 20, 200, 16, snap.health / snap.max_health, GREEN, RED)
        draw_text(surface, f"HP {snap.health}/{snap.max_health}", 24, 40,
                  WHITE, SMALL_FONT_SIZE)

        draw_text(surface, f"CHAOS {snap.chaos} / {snap.target_chaos}",
                  SCREEN_WIDTH - 240, 20)
        draw_text(surface, f"x{snap.multiplier}  streak {snap.streak}",
                  SCREEN_WIDTH - 240, 44, YELLOW)
        draw_text(surface, f"PHASE {snap.phase}", SCREEN_WIDTH // 2, 24,
                  WHITE, 30, center=True)

        if snap.special_unlocked:
            ready = snap.special_cooldown == 0
            draw_bar(surface, 20, 64, 200, 10, 1.0 - snap.special_cooldown,
                     PULSE_COLOR if ready else (90, 70, 120))
            draw_text(surface, "PULSE READY" if ready else "PULSE", 24, 78,
                      WHITE, SMALL_FONT_SIZE)

        if snap.boss_active:
            draw_text(surface, "BOSS!", SCREEN_WIDTH // 2, 56, RED, 36, center=True)
        if snap.arena_cleared:
            draw_text(surface, "GO! >>", SCREEN_WIDTH - 90, SCREEN_HEIGHT // 2,
                      YELLOW, 48, center=True)

        draw_text(surface, self._hint, SCREEN_WIDTH // 2, SCREEN_HEIGHT - 14,
                  BLACK, 16, center=True)


# ══════════════════════════════════════════════════════════
#  CLI
# ══════════════════════════════════════════════════════════

def _parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Chaos Brawler – beach rumble")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for every simulation roll")
    parser.add_argument("--verbose", action="store_true",
                        help="log at DEBUG level")
    parser.add_argument("--simulate", type=int, metavar="N", default=0,
                        help="run N headless autopilot sessions instead of the window")
    parser.add_argument("--max-ticks", type=int, metavar="T", default=60 * 60 * 10,
                        help="tick cap per simulated session")
    parser.add_argument("--reset-controls", action="store_true",
                        help="write the default key bindings to controls.json and exit")
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser.parse_args(argv)


def main(argv=None):
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    if args.reset_controls:
        reset_keybinds()
        return
    if args.simulate > 0:
        SimulationRunner(args.simulate, args.max_ticks, args.seed).run()
        return
    Game(seed=args.seed).run()


# ── Run ───────────────────────────────────────────────────
if __name__ == "__main__":
    main()
