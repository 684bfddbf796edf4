"""Handler tests with mocked aiogram objects."""
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiogram import types
from aiogram.exceptions import TelegramBadRequest

import main
from conftest import search_payload
from fetch_cache import FetchError


def make_message(text: str) -> MagicMock:
    message = MagicMock(spec=types.Message)
    message.text = text
    message.message_id = 10
    message.from_user = MagicMock(id=42)
    message.answer = AsyncMock()
    message.answer_photo = AsyncMock()
    message.delete = AsyncMock()
    return message


def make_callback(data: str) -> MagicMock:
    callback = MagicMock(spec=types.CallbackQuery)
    callback.data = data
    callback.answer = AsyncMock()
    callback.message = make_message("🔍 Results for dark")
    callback.message.answer.return_value = make_message(main.SKELETON_TEXT)
    return callback


@pytest.mark.asyncio
async def test_start_shows_examples() -> None:
    message = make_message("/start")

    await main.cmd_start(message)

    text = message.answer.await_args.args[0]
    assert "rrr movie" in text
    assert "dark tv" in text


@pytest.mark.asyncio
async def test_search_handler_sends_results(fake_cache: MagicMock) -> None:
    fake_cache.fetch.return_value = search_payload({"id": 603, "title": "The Matrix", "release_date": "1999-03-30"})
    message = make_message("matrix movie")

    await main.handle_search(message, fake_cache, "k")

    kwargs = message.answer.await_args.kwargs
    assert message.answer.await_args.args[0] == "🔍 Results for <b>matrix</b>"
    assert kwargs["parse_mode"] == "HTML"
    assert kwargs["reply_markup"].inline_keyboard[0][0].callback_data == "select_movie_603"


@pytest.mark.asyncio
async def test_select_sends_photo_card_and_removes_skeleton(fake_cache: MagicMock) -> None:
    fake_cache.fetch.return_value = {"title": "The Matrix", "poster_path": "/m.jpg", "vote_average": 8.2}
    callback = make_callback("select_movie_603")
    skeleton = callback.message.answer.return_value

    await main.handle_select(callback, fake_cache, "k")

    callback.answer.assert_awaited_once_with("Loading...")
    skeleton.delete.assert_awaited_once()
    photo, = callback.message.answer_photo.await_args.args
    assert photo == "https://image.tmdb.org/t/p/w500/m.jpg"
    assert callback.message.answer_photo.await_args.kwargs["caption"].startswith("🎬 <b>The Matrix</b>")


@pytest.mark.asyncio
async def test_select_failure_reports_error_even_if_skeleton_delete_fails(fake_cache: MagicMock) -> None:
    fake_cache.fetch.side_effect = FetchError("https://api.themoviedb.org/3/tv/1")
    callback = make_callback("select_tv_1")
    skeleton = callback.message.answer.return_value
    skeleton.delete.side_effect = TelegramBadRequest(method=MagicMock(), message="message to delete not found")

    await main.handle_select(callback, fake_cache, "k")

    assert callback.message.answer.await_args.args == ("⚠️ Failed to load details",)
    callback.message.answer_photo.assert_not_awaited()


@pytest.mark.asyncio
async def test_select_without_poster_sends_text_card(fake_cache: MagicMock) -> None:
    fake_cache.fetch.return_value = {"name": "Dark"}
    callback = make_callback("select_tv_70523")

    await main.handle_select(callback, fake_cache, "k")

    text = callback.message.answer.await_args.args[0]
    assert text.startswith("🎬 <b>Dark</b>")
    callback.message.answer_photo.assert_not_awaited()


@pytest.mark.asyncio
async def test_unknown_selection_is_only_acknowledged(fake_cache: MagicMock) -> None:
    callback = make_callback("select_person_1")

    await main.handle_select(callback, fake_cache, "k")

    callback.answer.assert_awaited_once_with("Unknown selection")
    fake_cache.fetch.assert_not_awaited()
    callback.message.answer.assert_not_awaited()


@pytest.mark.asyncio
async def test_main_requires_token(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(main.config, "TELEGRAM_BOT_TOKEN", "")

    with pytest.raises(RuntimeError):
        await main.main()
