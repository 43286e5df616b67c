"""Telegram integration helpers."""

from .keyboards import draw_result_keyboard, reveal_keyboard, trade_up_keyboard, welcome_keyboard
from .router import build_router, play_reveal

__all__ = [
    "build_router",
    "play_reveal",
    "draw_result_keyboard",
    "reveal_keyboard",
    "trade_up_keyboard",
    "welcome_keyboard",
]
