"""TMDB request URLs, typed views over the payload fields the bot reads,
selection tokens and outbound links."""
import logging
import typing as tp
from dataclasses import dataclass

from config import (
    DOWNLOAD_BASE_URL,
    GOOGLE_SEARCH_URL,
    POSTER_BASE_URL,
    TMDB_BASE_URL,
    WATCH_MIRRORS,
)
from fetch_cache import quote_component
from query_classifier import Endpoint, MediaKind

logger = logging.getLogger(__name__)

MAX_RESULTS = 10
TOKEN_PREFIX = "select_"
KIND_GLYPHS = {MediaKind.MOVIE: "🎬", MediaKind.TV: "📺"}


def search_url(endpoint: Endpoint, query: str, api_key: str) -> str:
    return (
        f"{TMDB_BASE_URL}/search/{endpoint.value}"
        f"?query={quote_component(query)}&api_key={api_key}"
    )


def detail_url(kind: MediaKind, media_id: int, api_key: str) -> str:
    return f"{TMDB_BASE_URL}/{kind.value}/{media_id}?api_key={api_key}"


def google_search_url(raw_text: str) -> str:
    return f"{GOOGLE_SEARCH_URL}{quote_component(raw_text)}"


def poster_url(poster_path: str) -> str:
    return f"{POSTER_BASE_URL}{poster_path}"


def watch_links(kind: MediaKind, media_id: int) -> tp.List[str]:
    """Two watch mirrors followed by the download page."""
    links = [f"{mirror}/{kind.value}/{media_id}" for mirror in WATCH_MIRRORS]
    links.append(f"{DOWNLOAD_BASE_URL}/{kind.value}/{media_id}")
    return links


def _year(value: tp.Any) -> tp.Optional[str]:
    if isinstance(value, str) and len(value) >= 4 and value[:4].isdigit():
        return value[:4]
    return None


def _kind(value: tp.Any) -> tp.Optional[MediaKind]:
    try:
        return MediaKind(value)
    except ValueError:
        return None


@dataclass(frozen=True)
class SearchResult:
    id: int
    title: str
    kind: MediaKind
    year: tp.Optional[str] = None

    @classmethod
    def from_payload(cls, raw: tp.Any, default_kind: Endpoint) -> tp.Optional["SearchResult"]:
        if not isinstance(raw, dict):
            return None
        kind = _kind(raw.get("media_type") or default_kind.value)
        media_id = raw.get("id")
        # persons, collections and broken rows are not selectable
        if kind is None or not isinstance(media_id, int) or isinstance(media_id, bool):
            return None
        date = raw.get("release_date") if kind is MediaKind.MOVIE else raw.get("first_air_date")
        return cls(
            id=media_id,
            title=raw.get("title") or raw.get("name") or "Untitled",
            kind=kind,
            year=_year(date),
        )

    @property
    def label(self) -> str:
        return f"{KIND_GLYPHS[self.kind]} {self.title} ({self.year or 'N/A'})"

    @property
    def token(self) -> str:
        return make_token(self.kind, self.id)


def parse_results(payload: tp.Any, endpoint: Endpoint) -> tp.List[SearchResult]:
    raw_results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(raw_results, list):
        logger.warning("[parse_results] payload has no results list")
        return []
    results: tp.List[SearchResult] = []
    for raw in raw_results:
        result = SearchResult.from_payload(raw, endpoint)
        if result is None:
            continue
        results.append(result)
        if len(results) == MAX_RESULTS:
            break
    return results


@dataclass(frozen=True)
class MediaDetails:
    title: str
    year: tp.Optional[str] = None
    rating: tp.Optional[float] = None
    overview: tp.Optional[str] = None
    poster_path: tp.Optional[str] = None

    @classmethod
    def from_payload(cls, raw: tp.Any) -> "MediaDetails":
        if not isinstance(raw, dict):
            raw = {}
        rating = raw.get("vote_average")
        if isinstance(rating, bool) or not isinstance(rating, (int, float)):
            rating = None
        overview = raw.get("overview")
        poster_path = raw.get("poster_path")
        return cls(
            title=raw.get("title") or raw.get("name") or "Untitled",
            year=_year(raw.get("release_date") or raw.get("first_air_date")),
            rating=float(rating) if rating is not None else None,
            overview=overview if isinstance(overview, str) and overview else None,
            poster_path=poster_path if isinstance(poster_path, str) and poster_path else None,
        )


class Selection(tp.NamedTuple):
    kind: MediaKind
    id: int


def make_token(kind: MediaKind, media_id: int) -> str:
    return f"{TOKEN_PREFIX}{kind.value}_{media_id}"


def parse_token(data: tp.Optional[str]) -> tp.Optional[Selection]:
    if not data or not data.startswith(TOKEN_PREFIX):
        return None
    parts = data[len(TOKEN_PREFIX):].split("_")
    if len(parts) != 2 or not parts[1].isdigit():
        return None
    kind = _kind(parts[0])
    if kind is None:
        return None
    return Selection(kind=kind, id=int(parts[1]))
