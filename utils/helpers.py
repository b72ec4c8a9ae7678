"""helpers.py - Reusable drawing functions for the window front end."""

import pygame
from settings import WHITE, GRAY, SCREEN_WIDTH, SCREEN_HEIGHT, FONT_SIZE

_font_cache: dict[int, pygame.font.Font] = {}


def _font(size):
    font = _font_cache.get(size)
    if font is None:
        font = _font_cache[size] = pygame.font.SysFont(None, size)
    return font


def draw_text(surface, text, x, y, color=WHITE, size=FONT_SIZE, center=False):
    """Render a single line of text at (x, y), or centred on it."""
    rendered = _font(size).render(text, True, color)
    if center:
        surface.blit(rendered, rendered.get_rect(center=(x, y)))
    else:
        surface.blit(rendered, (x, y))


def draw_bar(surface, x, y, w, h, fraction, fill_color, back_color=GRAY):
    """Horizontal meter; *fraction* is clamped to [0, 1]."""
    fraction = max(0.0, min(1.0, fraction))
    pygame.draw.rect(surface, back_color, (x, y, w, h), border_radius=3)
    if fraction > 0:
        pygame.draw.rect(surface, fill_color, (x, y, int(w * fraction), h),
                         border_radius=3)
    pygame.draw.rect(surface, WHITE, (x, y, w, h), 1, border_radius=3)


def draw_end_screen(surface, message, hint="Press R to Restart  |  Q to Quit"):
    """Fill the screen with a dark overlay and show a large
    message plus a hint line."""
    overlay = pygame.Surface((SCREEN_WIDTH, SCREEN_HEIGHT))
    overlay.set_alpha(180)
    overlay.fill((0, 0, 0))
    surface.blit(overlay, (0, 0))

    draw_text(surface, message, SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2 - 30,
              WHITE, 72, center=True)
    draw_text(surface, hint, SCREEN_WIDTH // 2, SCREEN_HEIGHT // 2 + 40,
              WHITE, 30, center=True)
