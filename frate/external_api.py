from __future__ import annotations

import logging
import re
from typing import Any

import requests

from .config import DEFAULT_USER_AGENT
from .models import MovieDetails, SearchResult

logger = logging.getLogger(__name__)

OMDB_URL = "https://www.omdbapi.com/"
NOT_FOUND_MESSAGE = "Movie not found"
DEFAULT_TIMEOUT = 10.0


class OmdbError(Exception):
    """Base class for every failure talking to OMDb."""


class SearchError(OmdbError):
    """Transport failure, non-2xx status or a body that is not OMDb JSON."""


class MovieNotFound(OmdbError):
    def __init__(self, message: str = NOT_FOUND_MESSAGE) -> None:
        super().__init__(message)


def normalize_na(value: Any) -> str | None:
    if value is None:
        return None
    value = str(value).strip()
    if not value or value.upper() == "N/A":
        return None
    return value


def parse_runtime(value: Any) -> int:
    """Turn OMDb's ``"142 min"`` into ``142``; unknown runtimes become 0."""
    text = normalize_na(value)
    if not text:
        return 0
    match = re.search(r"\d+", text)
    return int(match.group(0)) if match else 0


def parse_rating(value: Any) -> float:
    text = normalize_na(value)
    if not text:
        return 0.0
    try:
        return float(text.split("/")[0])
    except ValueError:
        return 0.0


def _omdb_get(
    params: dict[str, str],
    api_key: str,
    base_url: str,
    user_agent: str,
    timeout: float,
) -> dict[str, Any]:
    try:
        response = requests.get(
            base_url,
            params={**params, "apikey": api_key},
            headers={"User-Agent": user_agent},
            timeout=timeout,
        )
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as exc:
        raise SearchError(str(exc)) from exc
    if not isinstance(payload, dict):
        raise SearchError("Malformed response from OMDb")
    if payload.get("Response") == "False":
        raise MovieNotFound()
    return payload


def parse_search_item(item: dict[str, Any]) -> SearchResult | None:
    imdb_id = item.get("imdbID")
    if not imdb_id:
        return None
    return SearchResult(
        imdb_id=imdb_id,
        title=item.get("Title") or "Untitled",
        year=normalize_na(item.get("Year")),
        poster=normalize_na(item.get("Poster")),
    )


def parse_details(payload: dict[str, Any]) -> MovieDetails:
    return MovieDetails(
        imdb_id=payload.get("imdbID") or "",
        title=payload.get("Title") or "Untitled",
        year=normalize_na(payload.get("Year")),
        poster=normalize_na(payload.get("Poster")),
        runtime=parse_runtime(payload.get("Runtime")),
        imdb_rating=parse_rating(payload.get("imdbRating")),
        plot=normalize_na(payload.get("Plot")),
        released=normalize_na(payload.get("Released")),
        actors=normalize_na(payload.get("Actors")),
        director=normalize_na(payload.get("Director")),
        genre=normalize_na(payload.get("Genre")),
    )


def search_movies(
    query: str,
    api_key: str,
    base_url: str = OMDB_URL,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: float = DEFAULT_TIMEOUT,
) -> list[SearchResult]:
    payload = _omdb_get({"s": query}, api_key, base_url, user_agent, timeout)
    items = payload.get("Search") or []
    if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
        raise SearchError("Malformed response from OMDb")
    results: list[SearchResult] = []
    for item in items:
        parsed = parse_search_item(item)
        if parsed:
            results.append(parsed)
        else:
            logger.debug("Skipping search item without imdbID: %r", item)
    return results


def fetch_movie_details(
    imdb_id: str,
    api_key: str,
    base_url: str = OMDB_URL,
    user_agent: str = DEFAULT_USER_AGENT,
    timeout: float = DEFAULT_TIMEOUT,
) -> MovieDetails:
    payload = _omdb_get({"i": imdb_id}, api_key, base_url, user_agent, timeout)
    details = parse_details(payload)
    if not details.imdb_id:
        raise SearchError("OMDb response is missing imdbID")
    return details
