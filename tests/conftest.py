"""Shared pytest configuration for the aryflix tests."""

import os

import pytest

# Set before the app modules read their environment.
os.environ.setdefault("TMDB_API_KEY", "test_tmdb_key")
os.environ.setdefault("OMDB_API_KEY", "test_omdb_key")
os.environ.setdefault("YOUTUBE_API_KEY", "test_youtube_key")


@pytest.fixture
def api_keys(monkeypatch):
    monkeypatch.setenv("TMDB_API_KEY", "test_tmdb_key")
    monkeypatch.setenv("OMDB_API_KEY", "test_omdb_key")
    monkeypatch.setenv("YOUTUBE_API_KEY", "test_youtube_key")
