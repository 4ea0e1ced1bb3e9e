from __future__ import annotations

import hashlib
import os
import re
from dataclasses import asdict
from typing import Any

from .models import MovieDetails, SearchResult, WatchedMovie, WatchedSummary
from .session import Session

MIN_USER_RATING = 1
MAX_USER_RATING = 10


def sanitize_room(value: str | None) -> str:
    if not value:
        return ""
    value = value.strip().lower()
    return re.sub(r"[^a-z0-9-]", "", value)


def default_room() -> str:
    entropy = os.urandom(10)
    return hashlib.sha256(entropy).hexdigest()[:10]


def parse_user_rating(value: Any) -> float | None:
    """Return the rating as a float, or None when it is not a number in 1..10."""
    if isinstance(value, bool) or value is None:
        return None
    try:
        rating = float(value)
    except (TypeError, ValueError):
        return None
    if rating != rating or not MIN_USER_RATING <= rating <= MAX_USER_RATING:
        return None
    return rating


def serialize_result(result: SearchResult) -> dict[str, Any]:
    return {
        "imdb_id": result.imdb_id,
        "title": result.title,
        "year": result.year,
        "poster": result.poster,
    }


def serialize_details(details: MovieDetails | None) -> dict[str, Any] | None:
    if details is None:
        return None
    return asdict(details)


def serialize_watched(movie: WatchedMovie) -> dict[str, Any]:
    return {
        "imdb_id": movie.imdb_id,
        "title": movie.title,
        "poster": movie.poster,
        "imdb_rating": movie.imdb_rating,
        "user_rating": movie.user_rating,
        "runtime": movie.runtime,
    }


def serialize_summary(summary: WatchedSummary) -> dict[str, Any]:
    return asdict(summary)


def serialize_search(session: Session) -> dict[str, Any]:
    state = session.search
    return {
        "query": state.query,
        "panel": state.panel,
        "is_loading": state.is_loading,
        "error": state.error,
        "results": [serialize_result(result) for result in state.results],
    }


def serialize_watchlist(session: Session) -> dict[str, Any]:
    return {
        "items": [serialize_watched(movie) for movie in session.watchlist],
        "summary": serialize_summary(session.watchlist.summary()),
    }


def serialize_session(session: Session) -> dict[str, Any]:
    return {
        "search": serialize_search(session),
        "selected_id": session.selected_id,
        "details": serialize_details(session.details),
        "details_error": session.details_error,
        "watched": serialize_watchlist(session),
    }
