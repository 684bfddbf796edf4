import typing as tp

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from tmdb import SearchResult, Selection, google_search_url, watch_links


def results_keyboard(results: tp.Sequence[SearchResult]) -> InlineKeyboardMarkup:
    rows = [
        [InlineKeyboardButton(text=result.label, callback_data=result.token)]
        for result in results
    ]
    return InlineKeyboardMarkup(inline_keyboard=rows)


def google_keyboard(raw_text: str) -> InlineKeyboardMarkup:
    return InlineKeyboardMarkup(inline_keyboard=[[
        InlineKeyboardButton(text="🔍 Search on Google", url=google_search_url(raw_text)),
    ]])


def links_keyboard(selection: Selection) -> InlineKeyboardMarkup:
    watch_1, watch_2, download = watch_links(selection.kind, selection.id)
    return InlineKeyboardMarkup(inline_keyboard=[[
        InlineKeyboardButton(text="▶️ Watch 1", url=watch_1),
        InlineKeyboardButton(text="▶️ Watch 2", url=watch_2),
        InlineKeyboardButton(text="📩 Download", url=download),
    ]])
