from unittest.mock import AsyncMock

import pytest
from aiogram.exceptions import TelegramBadRequest, TelegramForbiddenError, TelegramRetryAfter

from lootforge.telegram.api_utils import safe_api_call, safe_edit


class DummyForbidden(TelegramForbiddenError):
    def __init__(self) -> None:
        Exception.__init__(self, "forbidden")


class DummyBadRequest(TelegramBadRequest):
    def __init__(self, message: str) -> None:
        Exception.__init__(self, message)
        self.message = message


class DummyRetryAfter(TelegramRetryAfter):
    def __init__(self, retry_after: float) -> None:
        Exception.__init__(self, f"retry after {retry_after}")
        self.retry_after = retry_after


@pytest.mark.asyncio()
async def test_safe_api_call_returns_result():
    async def ok() -> int:
        return 42

    assert await safe_api_call("test", ok) == 42


@pytest.mark.asyncio()
async def test_safe_api_call_handles_forbidden():
    async def forbidden() -> None:
        raise DummyForbidden()

    assert await safe_api_call("forbidden", forbidden) is None


@pytest.mark.asyncio()
async def test_safe_api_call_retries_on_retry_after(monkeypatch):
    mock_call = AsyncMock(side_effect=[DummyRetryAfter(0.0), 7])
    delays = []

    async def fake_sleep(delay: float) -> None:
        delays.append(delay)

    monkeypatch.setattr("lootforge.telegram.api_utils.asyncio.sleep", fake_sleep)

    assert await safe_api_call("retry", mock_call, retries=2) == 7
    assert mock_call.await_count == 2
    assert delays == [1.0]


@pytest.mark.asyncio()
async def test_safe_api_call_gives_up_after_retries(monkeypatch):
    mock_call = AsyncMock(side_effect=DummyRetryAfter(2.0))

    async def fake_sleep(delay: float) -> None:
        assert delay == 2.0

    monkeypatch.setattr("lootforge.telegram.api_utils.asyncio.sleep", fake_sleep)

    assert await safe_api_call("retry", mock_call, retries=3) is None
    assert mock_call.await_count == 3


@pytest.mark.asyncio()
async def test_safe_edit_ignores_unchanged_frames():
    message = AsyncMock()
    message.edit_text.side_effect = DummyBadRequest("Bad Request: message is not modified")

    assert await safe_edit(message, "frame") is False
    message.edit_text.assert_awaited_once_with("frame")


@pytest.mark.asyncio()
async def test_safe_edit_without_message():
    assert await safe_edit(None, "frame") is False
