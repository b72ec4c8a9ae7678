"""utils package – Reusable drawing helpers."""

from .helpers import draw_text, draw_bar, draw_end_screen
