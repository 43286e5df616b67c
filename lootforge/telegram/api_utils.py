"""Wrappers around Bot API calls made while animating reveals."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from aiogram.exceptions import (
    TelegramAPIError,
    TelegramBadRequest,
    TelegramForbiddenError,
    TelegramRetryAfter,
)
from aiogram.types import CallbackQuery, Message

P = ParamSpec("P")
T = TypeVar("T")

logger = logging.getLogger(__name__)

UNCHANGED_MARKER = "message is not modified"


async def safe_api_call(
    label: str,
    func: Callable[P, Awaitable[T]],
    *args: P.args,
    retries: int = 3,
    **kwargs: P.kwargs,
) -> T | None:
    """Run a Bot API call and return ``None`` when Telegram refuses it.

    Rate limits are retried up to ``retries`` times. Other Telegram errors are
    logged and swallowed so a failed frame never interrupts a draw, whose
    economic effect is already committed.
    """
    for attempt in range(1, retries + 1):
        try:
            return await func(*args, **kwargs)
        except TelegramRetryAfter as exc:
            if attempt >= retries:
                logger.warning(
                    "Bot API call '%s' gave up after %s rate-limited attempts", label, attempt
                )
                return None
            delay = float(exc.retry_after or 1)
            logger.info(
                "Bot API call '%s' rate limited; retrying in %.1f s (%s/%s)",
                label,
                delay,
                attempt,
                retries,
            )
            await asyncio.sleep(delay)
        except TelegramForbiddenError:
            logger.info("Bot API call '%s' forbidden; the user probably blocked the bot", label)
            return None
        except TelegramBadRequest as exc:
            if UNCHANGED_MARKER in str(exc).lower():
                logger.debug("Bot API call '%s' skipped: frame unchanged", label)
            else:
                logger.warning("Bot API call '%s' rejected: %s", label, exc)
            return None
        except TelegramAPIError as exc:
            logger.error("Bot API call '%s' failed: %s", label, exc, exc_info=True)
            return None
    return None


async def safe_answer(message: Message | None, text: str, **kwargs) -> Message | None:
    """Reply to ``message`` and return the sent message, if any."""
    if not message:
        return None
    return await safe_api_call("message.answer", message.answer, text, **kwargs)


async def safe_edit(message: Message | None, text: str, **kwargs) -> bool:
    if not message:
        return False
    result = await safe_api_call("message.edit_text", message.edit_text, text, **kwargs)
    return result is not None


async def safe_callback_answer(
    callback: CallbackQuery | None,
    text: str | None = None,
    **kwargs,
) -> bool:
    if not callback:
        return False
    params = dict(kwargs)
    if text is not None:
        params["text"] = text
    return (await safe_api_call("callback.answer", callback.answer, **params)) is not None
