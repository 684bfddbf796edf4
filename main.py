import asyncio
import logging

import aiohttp
from aiogram import Bot, Dispatcher, F, types
from aiogram.exceptions import TelegramAPIError
from aiogram.filters import Command

import config
from fetch_cache import FetchCache
from replies import Reply, detail_reply, search_reply
from tmdb import parse_token

logger = logging.getLogger(__name__)

dp = Dispatcher()

SKELETON_TEXT = (
    "🎬 <b>Loading...</b>\n\n"
    "▓▓▓▓▓▓▓▓▓▓▓▓▓▓▓▓\n"
    "▓▓▓▓▓▓▓▓▓▓▓▓▓▓\n"
    "▓▓▓▓▓▓▓▓▓▓▓▓"
)


@dp.message(Command(commands=["start"]))
async def cmd_start(message: types.Message) -> None:
    await message.answer(
        "🎬 <b>CINEFLOW BOT</b>\n\n"
        "Type movie or TV name directly:\n"
        "• rrr\n"
        "• dark\n"
        "• squid\n\n"
        "Use keywords if needed:\n"
        "• rrr movie\n"
        "• dark tv",
        parse_mode="HTML",
    )


@dp.message(Command(commands=["help"]))
async def cmd_help(message: types.Message) -> None:
    await message.answer(
        "/start — start the bot\n"
        "/help — this help\n\n"
        "Send a title to search. Add \"movie\"/\"film\" or \"tv\"/\"series\"/\"show\" "
        "to narrow the search, then pick a result from the list."
    )


@dp.message(F.text, ~F.text.startswith("/"))
async def handle_search(message: types.Message, fetch_cache: FetchCache, tmdb_api_key: str) -> None:
    user_id = message.from_user.id if message.from_user else None
    logger.info(f"User {user_id} searched for: {message.text}")

    reply = await search_reply(message.text or "", fetch_cache, tmdb_api_key)
    await message.answer(reply.text, parse_mode="HTML", reply_markup=reply.markup)


async def delete_quietly(message: types.Message) -> None:
    try:
        await message.delete()
    except TelegramAPIError as e:
        logger.warning(f"Could not delete message {message.message_id}: {e}")


@dp.callback_query(F.data.startswith("select_"))
async def handle_select(callback: types.CallbackQuery, fetch_cache: FetchCache, tmdb_api_key: str) -> None:
    selection = parse_token(callback.data)
    if selection is None or not isinstance(callback.message, types.Message):
        logger.warning(f"Ignoring selection {callback.data!r}")
        await callback.answer("Unknown selection")
        return

    await callback.answer("Loading...")
    chat = callback.message
    skeleton = await chat.answer(SKELETON_TEXT, parse_mode="HTML")
    try:
        card = await detail_reply(selection, fetch_cache, tmdb_api_key)
    finally:
        await delete_quietly(skeleton)

    if isinstance(card, Reply):
        await chat.answer(card.text)
    elif card.photo:
        await chat.answer_photo(card.photo, caption=card.caption, parse_mode="HTML", reply_markup=card.markup)
    else:
        await chat.answer(card.caption, parse_mode="HTML", reply_markup=card.markup)


async def main() -> None:
    logging.basicConfig(level=config.LOG_LEVEL,
                        format="%(asctime)s [%(levelname)s] %(message)s")

    if not config.TELEGRAM_BOT_TOKEN:
        raise RuntimeError("TELEGRAM_BOT_TOKEN is not set")
    if not config.PROXY_API_URL:
        logger.warning("PROXY_API_URL is not set, failed requests will not be retried")

    bot = Bot(token=config.TELEGRAM_BOT_TOKEN)
    async with aiohttp.ClientSession() as session:
        fetch_cache = FetchCache(
            session,
            proxy_base=config.PROXY_API_URL,
            ttl=config.CACHE_TTL_SECONDS,
            primary_timeout=config.PRIMARY_TIMEOUT,
            fallback_timeout=config.FALLBACK_TIMEOUT,
        )
        logger.info("Bot started")
        try:
            await dp.start_polling(bot, fetch_cache=fetch_cache, tmdb_api_key=config.TMDB_API_KEY)
        finally:
            await bot.session.close()


if __name__ == "__main__":
    asyncio.run(main())
