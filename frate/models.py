from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SearchResult:
    imdb_id: str
    title: str
    year: str | None
    poster: str | None


@dataclass(frozen=True)
class MovieDetails:
    imdb_id: str
    title: str
    year: str | None
    poster: str | None
    runtime: int
    imdb_rating: float
    plot: str | None = None
    released: str | None = None
    actors: str | None = None
    director: str | None = None
    genre: str | None = None


@dataclass
class WatchedMovie:
    imdb_id: str
    title: str
    poster: str | None
    imdb_rating: float
    user_rating: float
    runtime: int


@dataclass(frozen=True)
class WatchedSummary:
    count: int
    avg_imdb_rating: float
    avg_user_rating: float
    avg_runtime: float
