"""Search and selection state machine.

Everything here is a pure function of the current state and an event so the
page can be driven (and tested) without Flask or the network.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Union

from .config import MIN_QUERY_LENGTH
from .models import SearchResult

PANEL_LOADING = "loading"
PANEL_ERROR = "error"
PANEL_RESULTS = "results"


@dataclass(frozen=True)
class SearchState:
    query: str = ""
    results: tuple[SearchResult, ...] = field(default_factory=tuple)
    is_loading: bool = False
    error: str = ""
    request_seq: int = 0

    @property
    def panel(self) -> str:
        if self.is_loading:
            return PANEL_LOADING
        if self.error:
            return PANEL_ERROR
        return PANEL_RESULTS


@dataclass(frozen=True)
class QueryChanged:
    query: str


@dataclass(frozen=True)
class SearchSucceeded:
    seq: int
    results: tuple[SearchResult, ...]


@dataclass(frozen=True)
class SearchFailed:
    seq: int
    message: str


SearchEvent = Union[QueryChanged, SearchSucceeded, SearchFailed]


def query_is_searchable(query: str) -> bool:
    return len(query) >= MIN_QUERY_LENGTH


def needs_fetch(state: SearchState) -> bool:
    return state.is_loading and query_is_searchable(state.query)


def is_stale(state: SearchState, seq: int) -> bool:
    return seq != state.request_seq


def reduce_search(state: SearchState, event: SearchEvent) -> SearchState:
    if isinstance(event, QueryChanged):
        seq = state.request_seq + 1
        if not query_is_searchable(event.query):
            # Bumping the sequence also discards any search still in flight.
            return replace(
                state,
                query=event.query,
                results=(),
                error="",
                is_loading=False,
                request_seq=seq,
            )
        return replace(
            state,
            query=event.query,
            error="",
            is_loading=True,
            request_seq=seq,
        )
    if isinstance(event, SearchSucceeded):
        if is_stale(state, event.seq):
            return state
        return replace(state, results=tuple(event.results), is_loading=False)
    if isinstance(event, SearchFailed):
        if is_stale(state, event.seq):
            return state
        return replace(state, error=event.message, is_loading=False)
    raise TypeError(f"Unknown search event: {event!r}")


def select(current: str | None, movie_id: str) -> str | None:
    return None if movie_id == current else movie_id


def close(current: str | None) -> None:
    return None
