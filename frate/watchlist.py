from __future__ import annotations

from typing import Iterable, Iterator

from .models import WatchedMovie, WatchedSummary


def average(values: Iterable[float]) -> float:
    items = list(values)
    if not items:
        return 0.0
    return sum(items) / len(items)


class Watchlist:
    """Movies the user has rated, in the order they were added.

    Adding the same movie twice keeps both entries.
    """

    def __init__(self, movies: Iterable[WatchedMovie] = ()) -> None:
        self._movies: list[WatchedMovie] = list(movies)

    def __iter__(self) -> Iterator[WatchedMovie]:
        return iter(list(self._movies))

    def __len__(self) -> int:
        return len(self._movies)

    def add(self, movie: WatchedMovie) -> None:
        self._movies.append(movie)

    def remove(self, imdb_id: str) -> int:
        kept = [movie for movie in self._movies if movie.imdb_id != imdb_id]
        removed = len(self._movies) - len(kept)
        self._movies = kept
        return removed

    def contains(self, imdb_id: str) -> bool:
        return any(movie.imdb_id == imdb_id for movie in self._movies)

    def get(self, imdb_id: str) -> WatchedMovie | None:
        for movie in self._movies:
            if movie.imdb_id == imdb_id:
                return movie
        return None

    def summary(self) -> WatchedSummary:
        return WatchedSummary(
            count=len(self._movies),
            avg_imdb_rating=average(movie.imdb_rating for movie in self._movies),
            avg_user_rating=average(movie.user_rating for movie in self._movies),
            avg_runtime=average(movie.runtime for movie in self._movies),
        )
