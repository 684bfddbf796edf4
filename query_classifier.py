import re
import typing as tp
from enum import Enum


class MediaKind(str, Enum):
    MOVIE = "movie"
    TV = "tv"


class Endpoint(str, Enum):
    MOVIE = "movie"
    TV = "tv"
    MULTI = "multi"


MOVIE_PATTERN = re.compile(r"movie|film", re.IGNORECASE)
TV_PATTERN = re.compile(r"tv|series|show", re.IGNORECASE)
NOISE_PATTERN = re.compile(r"movie|film|tv|series|show|link|watch|download", re.IGNORECASE)


class ClassifiedQuery(tp.NamedTuple):
    query: str
    endpoint: Endpoint


def has_movie_keyword(text: str) -> bool:
    return MOVIE_PATTERN.search(text) is not None


def has_tv_keyword(text: str) -> bool:
    return TV_PATTERN.search(text) is not None


def pick_endpoint(text: str) -> Endpoint:
    movie = has_movie_keyword(text)
    tv = has_tv_keyword(text)
    if movie and not tv:
        return Endpoint.MOVIE
    if tv and not movie:
        return Endpoint.TV
    return Endpoint.MULTI


def clean_query(text: str) -> str:
    # keywords are stripped anywhere, even inside other words
    return " ".join(NOISE_PATTERN.sub("", text).split())


def classify(text: str) -> ClassifiedQuery:
    return ClassifiedQuery(query=clean_query(text), endpoint=pick_endpoint(text))
