"""Per-room session holding the search panel, selection and watchlist."""
from __future__ import annotations

import logging
import threading
from typing import Any

from . import external_api
from .external_api import OmdbError
from .models import MovieDetails, WatchedMovie
from .state import (
    QueryChanged,
    SearchFailed,
    SearchState,
    SearchSucceeded,
    close,
    is_stale,
    needs_fetch,
    reduce_search,
    select,
)
from .watchlist import Watchlist

logger = logging.getLogger(__name__)


class NothingSelected(Exception):
    pass


class Session:
    def __init__(self, omdb_options: dict[str, Any] | None = None) -> None:
        self.omdb_options: dict[str, Any] = dict(omdb_options or {})
        self.search = SearchState()
        self.selected_id: str | None = None
        self.details: MovieDetails | None = None
        self.details_error = ""
        self.watchlist = Watchlist()
        # Never held across an OMDb call.
        self._lock = threading.Lock()

    def set_query(self, query: str) -> SearchState:
        with self._lock:
            self.search = reduce_search(self.search, QueryChanged(query))
            state = self.search
        if not needs_fetch(state):
            return state

        seq = state.request_seq
        logger.info("Searching OMDb for %r (request %d)", query, seq)
        try:
            results = external_api.search_movies(query, **self.omdb_options)
        except OmdbError as exc:
            logger.error("Search for %r failed: %s", query, exc)
            event: SearchSucceeded | SearchFailed = SearchFailed(seq, str(exc))
        except Exception as exc:
            # Settle the request before propagating so the panel leaves "loading".
            logger.exception("Search for %r crashed", query)
            with self._lock:
                self.search = reduce_search(self.search, SearchFailed(seq, str(exc)))
            raise
        else:
            logger.info("Search for %r returned %d results", query, len(results))
            event = SearchSucceeded(seq, tuple(results))

        with self._lock:
            if is_stale(self.search, seq):
                logger.debug("Dropping stale response for %r (request %d)", query, seq)
            self.search = reduce_search(self.search, event)
            return self.search

    def select_movie(self, imdb_id: str) -> str | None:
        with self._lock:
            self.selected_id = select(self.selected_id, imdb_id)
            self.details = None
            self.details_error = ""
            selected = self.selected_id
        if selected is not None:
            self._load_details(selected)
        return selected

    def close_movie(self) -> None:
        with self._lock:
            self.selected_id = close(self.selected_id)
            self.details = None
            self.details_error = ""

    def _load_details(self, imdb_id: str) -> None:
        try:
            details = external_api.fetch_movie_details(imdb_id, **self.omdb_options)
        except OmdbError as exc:
            logger.error("Loading details for %s failed: %s", imdb_id, exc)
            with self._lock:
                if self.selected_id == imdb_id:
                    self.details_error = str(exc)
            return
        with self._lock:
            # The user may have moved on while OMDb was answering.
            if self.selected_id == imdb_id:
                self.details = details

    def add_selected(self, user_rating: float) -> WatchedMovie:
        """Add the open movie to the watchlist and close its detail pane.

        Raises NothingSelected when no movie is open and OmdbError when its
        details cannot be loaded.
        """
        selected = self.selected_id
        if selected is None:
            raise NothingSelected()
        details = self.details
        if details is None or details.imdb_id != selected:
            details = external_api.fetch_movie_details(selected, **self.omdb_options)
        movie = WatchedMovie(
            imdb_id=details.imdb_id,
            title=details.title,
            poster=details.poster,
            imdb_rating=details.imdb_rating,
            user_rating=user_rating,
            runtime=details.runtime,
        )
        with self._lock:
            self.watchlist.add(movie)
            if self.selected_id == selected:
                self.selected_id = close(self.selected_id)
                self.details = None
                self.details_error = ""
        logger.info("Added %s to the watchlist with rating %s", movie.imdb_id, user_rating)
        return movie

    def add_watched(self, movie: WatchedMovie) -> None:
        with self._lock:
            self.watchlist.add(movie)

    def remove_watched(self, imdb_id: str) -> int:
        with self._lock:
            return self.watchlist.remove(imdb_id)


class SessionRegistry:
    """In-memory rooms; nothing survives a restart."""

    def __init__(self, omdb_options: dict[str, Any] | None = None) -> None:
        self.omdb_options = dict(omdb_options or {})
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def get(self, room: str) -> Session:
        with self._lock:
            session = self._sessions.get(room)
            if session is None:
                session = Session(self.omdb_options)
                self._sessions[room] = session
            return session

    def peek(self, room: str) -> Session | None:
        """Look a room up without creating it."""
        with self._lock:
            return self._sessions.get(room)

    def __contains__(self, room: str) -> bool:
        return room in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
