"""Search and detail flows, returned as plain reply objects.

Nothing in here talks to Telegram: the handlers in main.py decide how a reply
is delivered. The only upstream failure handled here is FetchError, which
always becomes a user-visible message.
"""
import logging
import typing as tp
from dataclasses import dataclass
from html import escape

from aiogram.types import InlineKeyboardMarkup

from fetch_cache import FetchCache, FetchError
from keyboards import google_keyboard, links_keyboard, results_keyboard
from query_classifier import classify
from tmdb import (
    MediaDetails,
    Selection,
    detail_url,
    parse_results,
    poster_url,
    search_url,
)

logger = logging.getLogger(__name__)

CAPTION_LIMIT = 1024

EMPTY_QUERY_TEXT = "❌ Please enter a movie or TV name"
SEARCH_BUSY_TEXT = "⚠️ TMDB busy, try again"
NO_RESULTS_TEXT = "❌ <b>No results found</b>\n\nTry Google 👇"
DETAILS_FAILED_TEXT = "⚠️ Failed to load details"
NO_OVERVIEW_TEXT = "No description available."


@dataclass
class Reply:
    text: str
    markup: tp.Optional[InlineKeyboardMarkup] = None


@dataclass
class DetailCard:
    caption: str
    markup: InlineKeyboardMarkup
    photo: tp.Optional[str] = None


async def search_reply(raw_text: str, cache: FetchCache, api_key: str) -> Reply:
    raw_text = raw_text.strip()
    classified = classify(raw_text)
    if not classified.query:
        return Reply(EMPTY_QUERY_TEXT)

    logger.info(f"[search_reply] '{classified.query}' via /search/{classified.endpoint.value}")
    try:
        payload = await cache.fetch(search_url(classified.endpoint, classified.query, api_key))
    except FetchError as e:
        logger.error(f"[search_reply] search failed: {e}")
        return Reply(SEARCH_BUSY_TEXT)

    results = parse_results(payload, classified.endpoint)
    if not results:
        return Reply(NO_RESULTS_TEXT, google_keyboard(raw_text))

    return Reply(
        f"🔍 Results for <b>{escape(classified.query)}</b>",
        results_keyboard(results),
    )


def format_caption(details: MediaDetails) -> str:
    rating = f"{details.rating:.1f}" if details.rating is not None else "N/A"
    header_title = escape(details.title)
    header = f"🎬 <b>{header_title}</b> ({details.year or 'N/A'})\n⭐ {rating}\n\n"
    # the limit applies to the rendered text, tags excluded
    visible_header = len(header) - len("<b></b>") - (len(header_title) - len(details.title))
    overview = details.overview or NO_OVERVIEW_TEXT
    room = CAPTION_LIMIT - visible_header
    if len(overview) > room:
        overview = overview[:max(room - 1, 0)].rstrip() + "…"
    return header + escape(overview)


async def detail_reply(
    selection: Selection, cache: FetchCache, api_key: str
) -> tp.Union[DetailCard, Reply]:
    logger.info(f"[detail_reply] loading {selection.kind.value} {selection.id}")
    try:
        payload = await cache.fetch(detail_url(selection.kind, selection.id, api_key))
    except FetchError as e:
        logger.error(f"[detail_reply] details failed: {e}")
        return Reply(DETAILS_FAILED_TEXT)

    details = MediaDetails.from_payload(payload)
    return DetailCard(
        caption=format_caption(details),
        markup=links_keyboard(selection),
        photo=poster_url(details.poster_path) if details.poster_path else None,
    )
