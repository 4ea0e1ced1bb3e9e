"""Pytest configuration and fixtures."""
from __future__ import annotations

from typing import Any

import pytest

from frate import external_api
from frate.external_api import MovieNotFound
from frate.models import MovieDetails, SearchResult


class FakeOmdb:
    """Stands in for the OMDb lookups made through frate.external_api."""

    def __init__(self) -> None:
        self.results: dict[str, list[SearchResult]] = {}
        self.details: dict[str, MovieDetails] = {}
        self.errors: dict[str, Exception] = {}
        self.search_calls: list[str] = []
        self.detail_calls: list[str] = []
        self.options: list[dict[str, Any]] = []

    def search_movies(self, query: str, **options: Any) -> list[SearchResult]:
        self.search_calls.append(query)
        self.options.append(options)
        if query in self.errors:
            raise self.errors[query]
        if query not in self.results:
            raise MovieNotFound()
        return list(self.results[query])

    def fetch_movie_details(self, imdb_id: str, **options: Any) -> MovieDetails:
        self.detail_calls.append(imdb_id)
        if imdb_id in self.errors:
            raise self.errors[imdb_id]
        if imdb_id not in self.details:
            raise MovieNotFound()
        return self.details[imdb_id]


def make_result(imdb_id: str, title: str, year: str = "2010") -> SearchResult:
    return SearchResult(imdb_id=imdb_id, title=title, year=year, poster=f"https://img.example/{imdb_id}.jpg")


def make_details(imdb_id: str, title: str, imdb_rating: float = 8.0, runtime: int = 120) -> MovieDetails:
    return MovieDetails(
        imdb_id=imdb_id,
        title=title,
        year="2010",
        poster=f"https://img.example/{imdb_id}.jpg",
        runtime=runtime,
        imdb_rating=imdb_rating,
        plot="A plot.",
    )


@pytest.fixture
def fake_omdb(monkeypatch):
    """Replace OMDb calls with canned data."""
    fake = FakeOmdb()
    fake.results["inception"] = [
        make_result("tt1375666", "Inception"),
        make_result("tt5295894", "Inception: The Cobol Job"),
    ]
    fake.details["tt1375666"] = make_details("tt1375666", "Inception", 8.8, 148)
    fake.details["tt0133093"] = make_details("tt0133093", "The Matrix", 8.7, 136)
    monkeypatch.setattr(external_api, "search_movies", fake.search_movies)
    monkeypatch.setattr(external_api, "fetch_movie_details", fake.fetch_movie_details)
    return fake


@pytest.fixture
def app(fake_omdb):
    """Create application for testing."""
    from frate import create_app

    app = create_app(
        {
            "TESTING": True,
            "OMDB_API_KEY": "test-key",
        }
    )
    yield app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()
