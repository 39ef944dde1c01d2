"""Tests for the home page browse feeds."""

import random
from collections import Counter
from datetime import date

import pytest

from aryflix import discovery
from aryflix.errors import InvalidInput
from fakes import FakeFeeds, movie, show

TALK = {"id": 10767, "name": "Talk"}


def anime(id, popularity=0.0, language="ja", countries=("JP",), genres=(16,)):
    return {
        "id": id,
        "name": f"Anime {id}",
        "popularity": popularity,
        "original_language": language,
        "origin_country": list(countries),
        "genre_ids": list(genres),
    }


@pytest.mark.asyncio
class TestSimpleFeeds:
    async def test_trending_uses_daily_window(self):
        feeds = FakeFeeds(trending={("movie", "day"): [movie(1, "Heat")], ("tv", "day"): [show(2, "Severance")]})

        assert [m["id"] for m in await discovery.trending_movies(feeds)] == [1]
        assert [s["id"] for s in await discovery.trending_tv(feeds)] == [2]

    async def test_upcoming_movies_capped(self):
        feeds = FakeFeeds(upcoming=[movie(i, f"M{i}") for i in range(30)])

        assert len(await discovery.upcoming_movies(feeds)) == 20

    async def test_upcoming_tv_window_follows_current_year(self):
        feeds = FakeFeeds(series_pages={"default": [show(i, f"S{i}") for i in range(25)]})

        shows = await discovery.upcoming_tv(feeds, today=date(2026, 5, 1))

        assert len(shows) == 20
        _, params, _ = feeds.calls[0]
        assert params["first_air_date.gte"] == "2025-01-01"
        assert params["first_air_date.lte"] == "2027-12-31"
        assert params["with_original_language"] == "en"


@pytest.mark.asyncio
class TestPopularTV:
    async def test_trending_first_then_new_popular_shows(self):
        feeds = FakeFeeds(
            trending={("tv", "week"): [show(1, "Talkies"), show(2, "Severance"), show(3, "Andor")]},
            popular=[show(2, "Severance"), show(4, "Slow Horses")],
            summaries={1: {"genres": [TALK]}, 3: {"genres": [{"id": 18}], "number_of_seasons": 2}},
        )

        shows = await discovery.popular_tv(feeds)

        assert [s["id"] for s in shows] == [2, 3, 4]
        assert shows[1]["number_of_seasons"] == 2

    async def test_only_ten_trending_shows(self):
        feeds = FakeFeeds(
            trending={("tv", "week"): [show(i, f"S{i}") for i in range(1, 13)]},
            popular=[show(13, "S13")],
        )

        shows = await discovery.popular_tv(feeds)

        assert [s["id"] for s in shows] == list(range(1, 11)) + [13]


@pytest.mark.asyncio
class TestTrendingAnime:
    async def test_trending_anime_before_padding(self):
        trending = [
            anime(1, popularity=50),
            anime(2, popularity=80, language="en"),
            anime(3, language="en", countries=("US",)),
            anime(4, genres=(18,)),
        ]
        feeds = FakeFeeds(
            trending={("tv", "week"): trending},
            series_pages={"with_genres": [anime(1, popularity=50), anime(9, popularity=500)]},
        )

        shows = await discovery.trending_anime(feeds)

        assert [s["id"] for s in shows] == [2, 1, 9]

    async def test_enough_trending_anime_skips_padding(self):
        feeds = FakeFeeds(trending={("tv", "week"): [anime(i, popularity=i) for i in range(10)]})

        shows = await discovery.trending_anime(feeds)

        assert [s["id"] for s in shows] == list(range(9, -1, -1))
        assert all(call[0] == "trending" for call in feeds.calls)


@pytest.mark.asyncio
class TestPlatformContent:
    async def test_filters_and_orders_by_popularity(self):
        feeds = FakeFeeds(
            movie_pages=[
                movie(1, "Heat", 10),
                movie(2, "Kids Party", 99),
                {"id": 3, "title": "Fun Together", "popularity": 50, "genre_ids": [10751]},
            ],
            series_pages={"default": [show(4, "Severance", 30)]},
        )

        items = await discovery.platform_content("netflix", feeds, today=date(2026, 5, 1))

        assert [(i["id"], i["media_type"]) for i in items] == [(4, "tv"), (1, "movie")]
        _, params, _ = feeds.calls[0]
        assert params["with_watch_providers"] == 8
        assert params["watch_region"] == "US"
        assert params["primary_release_date.lte"] == "2026-05-01"

    async def test_unknown_platform_rejected(self):
        feeds = FakeFeeds()

        with pytest.raises(InvalidInput):
            await discovery.platform_content("hulu", feeds)
        assert feeds.calls == []


@pytest.mark.asyncio
async def test_streaming_logos_for_supported_platforms():
    feeds = FakeFeeds(
        providers=[
            {"provider_id": 8, "provider_name": "Netflix", "logo_path": "/n.png"},
            {"provider_id": 9, "provider_name": "Amazon Prime Video", "logo_path": None},
            {"provider_id": 2, "provider_name": "Apple TV", "logo_path": "/a.png"},
        ]
    )

    logos = await discovery.streaming_logos(feeds)

    assert logos == {
        "netflix": {
            "name": "Netflix",
            "logo_path": "/n.png",
            "logo_url": "https://image.tmdb.org/t/p/original/n.png",
        }
    }
    assert feeds.calls == [("providers", "US")]


@pytest.mark.asyncio
async def test_watch_at_home_mix():
    shows = [show(i, f"S{i}") for i in range(100, 120)]
    feeds = FakeFeeds(
        movie_pages=[movie(i, f"M{i}") for i in range(1, 21)],
        series_pages={
            "with_genres": [anime(i) for i in range(1, 13)] + [anime(50, language="ko")],
            "default": shows,
        },
        summaries={100: {"genres": [TALK]}},
    )

    items = await discovery.watch_at_home(feeds, rng=random.Random(7))

    assert len(items) == 40
    assert Counter(i["media_type"] for i in items) == {"movie": 15, "tv": 15, "anime": 10}
    assert len({(i["media_type"], i["id"]) for i in items}) == 40
    assert ("tv", 100) not in {(i["media_type"], i["id"]) for i in items}
    assert ("anime", 50) not in {(i["media_type"], i["id"]) for i in items}
    pages = [call[2] for call in feeds.calls if call[0].startswith("discover")]
    assert 1 <= pages[0] <= 3 and 1 <= pages[1] <= 3 and 1 <= pages[2] <= 5
