"""Factory helpers to wire LootForge services into aiogram."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Iterable, Sequence

from aiogram import Router
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message

from ..app import LootApp
from ..domain import PlayerProfile
from ..domain.crafting import CraftOutcome, TradeUpProgress
from ..domain.exceptions import (
    EconomyError,
    InsufficientBalance,
    InsufficientSourceItems,
    NoPoolForTargetTier,
    NoRewardsConfigured,
    RevealInProgress,
)
from ..domain.lottery import DrawOutcome
from ..domain.reveal import RevealPlan
from ..domain.rewards import InventoryItem, ItemView, Tier
from ..engine import LootEngine
from ..storage.base import GachaHistoryRecord
from .api_utils import safe_answer, safe_callback_answer, safe_edit
from .keyboards import (
    CRAFT_CALLBACK_PREFIX,
    DRAW_CALLBACK,
    LOCKER_CALLBACK,
    SKIP_CALLBACK,
    TRADE_UP_CALLBACK,
    draw_result_keyboard,
    reveal_keyboard,
    trade_up_keyboard,
    welcome_keyboard,
)

Sleep = Callable[[float], Awaitable[None]]

WINDOW_RADIUS = 2
LOCKER_PAGE = 20
TIER_BADGES = {
    Tier.LEGENDARY: "🟨",
    Tier.RARE: "🟪",
    Tier.UNCOMMON: "🟦",
    Tier.COMMON: "⬜",
}


def build_router(app: LootApp) -> Router:
    router = Router()
    players = app.player_service

    async def run_draw(target: Message, user_id: int, username: str | None) -> None:
        await app.refresh_catalog()
        engine = app.engine_for(user_id, username=username)
        result = await engine.draw()
        if not result.ok:
            await safe_answer(target, describe_error(result.error))
            return
        outcome = result.value
        plan = outcome.reveal
        reel = await safe_answer(
            target,
            format_strip_frame(plan.strip, 0),
            reply_markup=reveal_keyboard(),
        )
        await play_reveal(
            reel,
            engine,
            plan,
            frames=app.config.reveal.frames,
            duration=app.config.reveal.duration_seconds,
        )
        await safe_edit(reel, format_draw_result(outcome), reply_markup=draw_result_keyboard())

    async def run_craft(target: Message, user_id: int, username: str | None, tier: Tier) -> None:
        await app.refresh_catalog()
        engine = app.engine_for(user_id, username=username)
        result = await engine.craft(tier)
        if not result.ok:
            await safe_answer(target, describe_error(result.error))
            return
        await safe_answer(target, format_craft_result(result.value))

    async def show_trade_up(target: Message, user_id: int, username: str | None) -> None:
        progress = await app.engine_for(user_id, username=username).trade_up_progress()
        await safe_answer(
            target, format_progress(progress), reply_markup=trade_up_keyboard(progress)
        )

    async def show_locker(target: Message, user_id: int) -> None:
        items = await players.locker(user_id)
        await safe_answer(target, format_locker_message(items))

    @router.message(Command("start"))
    async def handle_start(message: Message) -> None:
        user = message.from_user
        if user:
            await players.fetch(user.id, username=user.username)
        await safe_answer(
            message,
            render_help_message(app.config.gacha.draw_cost),
            reply_markup=welcome_keyboard(),
        )

    @router.message(Command("help"))
    async def handle_help(message: Message) -> None:
        await safe_answer(
            message,
            render_help_message(app.config.gacha.draw_cost),
            reply_markup=welcome_keyboard(),
        )

    @router.message(Command("balance"))
    async def handle_balance(message: Message) -> None:
        user = message.from_user
        if not user:
            return
        profile = await players.fetch(user.id, username=user.username)
        await safe_answer(message, format_balance_message(profile, app.config.gacha.draw_cost))

    @router.message(Command("draw"))
    async def handle_draw(message: Message) -> None:
        user = message.from_user
        if not user:
            return
        await run_draw(message, user.id, user.username)

    @router.callback_query(lambda c: c.data == DRAW_CALLBACK)
    async def handle_draw_again(callback: CallbackQuery) -> None:
        user = callback.from_user
        if not user or not callback.message:
            return
        await safe_callback_answer(callback)
        await run_draw(callback.message, user.id, user.username)

    @router.callback_query(lambda c: c.data == SKIP_CALLBACK)
    async def handle_skip(callback: CallbackQuery) -> None:
        user = callback.from_user
        if not user:
            return
        skipped = app.engine_for(user.id).skip_reveal()
        await safe_callback_answer(callback, None if skipped else "Nothing to skip.")

    @router.message(Command("craft"))
    async def handle_craft(message: Message) -> None:
        user = message.from_user
        if not user:
            return
        tier = parse_tier_argument(message.text)
        if tier is None:
            await safe_answer(message, "Usage: /craft <tier>, where tier is 1, 2 or 3.")
            return
        await run_craft(message, user.id, user.username, tier)

    @router.callback_query(lambda c: bool(c.data) and c.data.startswith(CRAFT_CALLBACK_PREFIX))
    async def handle_craft_callback(callback: CallbackQuery) -> None:
        user = callback.from_user
        if not user or not callback.message or not callback.data:
            return
        tier = parse_tier_argument(callback.data.removeprefix(CRAFT_CALLBACK_PREFIX))
        if tier is None:
            await safe_callback_answer(callback, "Unknown tier.", show_alert=True)
            return
        await safe_callback_answer(callback)
        await run_craft(callback.message, user.id, user.username, tier)

    @router.message(Command("tradeup"))
    async def handle_trade_up(message: Message) -> None:
        user = message.from_user
        if not user:
            return
        await show_trade_up(message, user.id, user.username)

    @router.callback_query(lambda c: c.data == TRADE_UP_CALLBACK)
    async def handle_trade_up_callback(callback: CallbackQuery) -> None:
        user = callback.from_user
        if not user or not callback.message:
            return
        await safe_callback_answer(callback)
        await show_trade_up(callback.message, user.id, user.username)

    @router.message(Command("locker"))
    async def handle_locker(message: Message) -> None:
        user = message.from_user
        if not user:
            return
        await show_locker(message, user.id)

    @router.callback_query(lambda c: c.data == LOCKER_CALLBACK)
    async def handle_locker_callback(callback: CallbackQuery) -> None:
        user = callback.from_user
        if not user or not callback.message:
            return
        await safe_callback_answer(callback)
        await show_locker(callback.message, user.id)

    @router.message(Command("history"))
    async def handle_history(message: Message) -> None:
        user = message.from_user
        if not user:
            return
        records = await app.history_store.recent_for_user(user.id, limit=10)
        await safe_answer(message, format_history_message(records))

    return router


async def play_reveal(
    message: Message | None,
    engine: LootEngine,
    plan: RevealPlan,
    *,
    frames: int,
    duration: float,
    sleep: Sleep = asyncio.sleep,
) -> int:
    """Edit ``message`` frame by frame until the reel stops on the winner.

    Stops early once the engine has left the reveal, for example after a skip.
    Returns the number of frames shown.
    """
    delay = duration / frames if frames > 0 else 0.0
    shown = 0
    for position in reveal_positions(plan.target_index, frames):
        if engine.current_reveal is not plan:
            break
        await safe_edit(
            message, format_strip_frame(plan.strip, position), reply_markup=reveal_keyboard()
        )
        shown += 1
        await sleep(delay)
    return shown


def reveal_positions(target_index: int, frames: int) -> list[int]:
    """Reel positions for each frame, decelerating and ending on ``target_index``."""
    if frames <= 1:
        return [target_index]
    positions = []
    for step in range(1, frames + 1):
        eased = 1 - (1 - step / frames) ** 3
        positions.append(round(target_index * eased))
    return positions


def format_strip_frame(
    strip: Sequence[ItemView], position: int, *, radius: int = WINDOW_RADIUS
) -> str:
    if not strip:
        return "🎰 …"
    position = max(0, min(position, len(strip) - 1))
    cells = []
    for index in range(position - radius, position + radius + 1):
        if not 0 <= index < len(strip):
            cells.append("▫️")
        elif index == position:
            cells.append(f"[{strip[index].image}]")
        else:
            cells.append(strip[index].image)
    return "🎰 " + " ".join(cells) + f"\n▶ {strip[position].name}"


def format_item(item: InventoryItem | ItemView) -> str:
    badge = TIER_BADGES.get(item.tier, "")
    aura = " ✨" if item.aura_colors else ""
    return f"{badge} {item.image} {item.name} [{item.tier.label}]{aura}"


def format_draw_result(outcome: DrawOutcome) -> str:
    lines = [
        "🎉 You got:",
        format_item(outcome.item),
        "",
        f"💸 Cost: {outcome.debited_cost:g}",
        f"💰 Balance: {outcome.balance:g}",
    ]
    return "\n".join(lines)


def format_craft_result(outcome: CraftOutcome) -> str:
    return "\n".join(
        [
            f"⚒️ Traded {len(outcome.consumed)} {outcome.source_tier.label} items for:",
            format_item(outcome.produced),
        ]
    )


def format_balance_message(profile: PlayerProfile, draw_cost: float) -> str:
    lines = [
        f"👤 {profile.username or profile.user_id}",
        f"💰 Balance: {profile.balance:g}",
        f"🎰 Draw cost: {draw_cost:g}",
        "",
        f"🗄️ Items: {profile.item_count}",
    ]
    for tier in sorted(Tier):
        amount = profile.tier_counts.get(tier, 0)
        if amount:
            lines.append(f"  {TIER_BADGES[tier]} {tier.label}: {amount}")
    return "\n".join(lines)


def format_locker_message(items: Sequence[InventoryItem], *, limit: int = LOCKER_PAGE) -> str:
    if not items:
        return "Your locker is empty. Use /draw to win something."
    lines = ["🗄️ Locker:"]
    lines.extend(f"• {format_item(item)}" for item in items[:limit])
    if len(items) > limit:
        lines.append(f"…and {len(items) - limit} more")
    return "\n".join(lines)


def format_progress(progress: Iterable[TradeUpProgress]) -> str:
    lines = ["⚒️ Trade-up progress:"]
    for entry in progress:
        mark = "✅" if entry.ready else "⏳"
        lines.append(
            f"{mark} {entry.source_tier.label} → {entry.target_tier.label}: "
            f"{min(entry.available, entry.required)}/{entry.required}"
        )
    return "\n".join(lines)


def format_history_message(records: Sequence[GachaHistoryRecord]) -> str:
    if not records:
        return "No draws yet."
    lines = ["📜 Recent activity:"]
    for record in records:
        when = record.timestamp.strftime("%Y-%m-%d %H:%M")
        if record.action == "draw":
            lines.append(f"{when} 🎰 {record.reward_name} [{Tier(record.tier).label}] −{record.cost:g}")
        else:
            lines.append(
                f"{when} ⚒️ {record.reward_name} [{Tier(record.tier).label}] "
                f"from {len(record.consumed_ids)} items"
            )
    return "\n".join(lines)


def describe_error(error: EconomyError) -> str:
    if isinstance(error, InsufficientBalance):
        return f"Not enough points: you have {error.balance:g}, a draw costs {error.cost:g}."
    if isinstance(error, NoRewardsConfigured):
        return "There are no rewards to draw today."
    if isinstance(error, NoPoolForTargetTier):
        return f"Nothing can be crafted into {Tier(error.tier).label} right now."
    if isinstance(error, InsufficientSourceItems):
        return (
            f"You need {error.required} {Tier(error.source_tier).label} items "
            f"and have {error.available}."
        )
    if isinstance(error, RevealInProgress):
        return "Wait for the current reveal to finish."
    return str(error)


def parse_tier_argument(text: str | None) -> Tier | None:
    """Read a craftable tier from ``/craft 2`` or a bare ``2``."""
    if not text:
        return None
    parts = text.strip().split()
    raw = parts[-1] if parts else ""
    if not raw.isdigit():
        return None
    try:
        tier = Tier(int(raw))
    except ValueError:
        return None
    return None if tier == Tier.COMMON else tier


def render_help_message(draw_cost: float) -> str:
    lines = [
        "Welcome to LootForge!",
        "",
        "Commands:",
        f"• /draw — spend {draw_cost:g} points on a draw",
        "• /balance — show your points and items",
        "• /locker — list your items, newest first",
        "• /tradeup — see which trade-ups are ready",
        "• /craft <tier> — trade items up into tier 3, 2 or 1",
        "• /history — recent draws and crafts",
        "• /help — show this message",
    ]
    return "\n".join(lines)
