"""Keyboard helpers for LootForge bots."""

from __future__ import annotations

from typing import Iterable

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from ..domain.crafting import TradeUpProgress

DRAW_CALLBACK = "lootforge:draw"
SKIP_CALLBACK = "lootforge:skip"
LOCKER_CALLBACK = "lootforge:locker"
TRADE_UP_CALLBACK = "lootforge:tradeup"
CRAFT_CALLBACK_PREFIX = "lootforge:craft:"


def reveal_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[[InlineKeyboardButton(text="⏭️ Skip", callback_data=SKIP_CALLBACK)]]
    )


def draw_result_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text="🎰 Draw again", callback_data=DRAW_CALLBACK)],
            [InlineKeyboardButton(text="🗄️ Locker", callback_data=LOCKER_CALLBACK)],
            [InlineKeyboardButton(text="⚒️ Trade-up", callback_data=TRADE_UP_CALLBACK)],
        ]
    )


def trade_up_keyboard(progress: Iterable[TradeUpProgress]) -> InlineKeyboardMarkup | None:
    buttons = [
        [
            InlineKeyboardButton(
                text=f"⚒️ Craft {entry.target_tier.label}",
                callback_data=f"{CRAFT_CALLBACK_PREFIX}{int(entry.target_tier)}",
            )
        ]
        for entry in progress
        if entry.ready
    ]
    if not buttons:
        return None
    return InlineKeyboardMarkup(inline_keyboard=buttons)


def welcome_keyboard() -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(
        inline_keyboard=[
            [InlineKeyboardButton(text="🎰 Draw", callback_data=DRAW_CALLBACK)],
            [InlineKeyboardButton(text="🗄️ Locker", callback_data=LOCKER_CALLBACK)],
            [InlineKeyboardButton(text="⚒️ Trade-up", callback_data=TRADE_UP_CALLBACK)],
        ]
    )
