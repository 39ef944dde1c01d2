"""Tests for trailer selection and the YouTube fallback search."""

import pytest

from aryflix.config import TrailerWeights
from aryflix.errors import UpstreamUnavailable
from aryflix.models import MediaKind, TrailerSource, VideoCandidate
from aryflix.trailers import (
    build_search_queries,
    pick_best_video,
    resolve_trailer,
    select_catalog_trailer,
    trailer_score,
)
from fakes import FakeVideoSearch, yt


def video(key, name, kind="Trailer", site="YouTube"):
    return VideoCandidate(key=key, name=name, site=site, kind=kind)


class TestCatalogSelection:
    def test_official_trailer_beats_teaser(self):
        videos = [video("t1", "Teaser", "Teaser"), video("tr", "Official Trailer", "Trailer")]
        assert select_catalog_trailer(videos).key == "tr"

    def test_priority_order(self):
        videos = [
            video("teaser", "Teaser", "Teaser"),
            video("official-teaser", "Official Teaser", "Teaser"),
            video("plain", "Trailer 2", "Trailer"),
            video("main", "Main Trailer", "Trailer"),
        ]
        assert select_catalog_trailer(videos).key == "main"
        assert select_catalog_trailer(videos[:3]).key == "plain"
        assert select_catalog_trailer(videos[:2]).key == "official-teaser"
        assert select_catalog_trailer(videos[:1]).key == "teaser"

    def test_official_match_is_case_insensitive(self):
        videos = [video("a", "Trailer"), video("b", "OFFICIAL TRAILER")]
        assert select_catalog_trailer(videos).key == "b"

    def test_falls_back_to_first_youtube_video(self):
        videos = [
            video("vimeo", "Official Trailer", "Trailer", site="Vimeo"),
            video("clip1", "Clip: The Chase", "Clip"),
            video("feat", "Featurette", "Featurette"),
        ]
        assert select_catalog_trailer(videos).key == "clip1"

    def test_non_youtube_only(self):
        assert select_catalog_trailer([video("v", "Official Trailer", site="Vimeo")]) is None
        assert select_catalog_trailer([]) is None


class TestQueries:
    def test_with_year(self):
        assert build_search_queries("Dune", 2021) == [
            "Dune 2021 official trailer",
            "Dune 2021 trailer",
            "Dune official trailer",
            "Dune trailer",
        ]

    def test_without_year(self):
        assert build_search_queries("Dune", None) == ["Dune official trailer", "Dune trailer"]


class TestTrailerScore:
    def test_official_studio_upload(self):
        result = yt("a", "Dune: Part Two | Official Trailer", "Warner Bros. Pictures", "In theaters 2024")
        # title 10 + year 5 + official 8 + trailer 6 + channel 10
        assert trailer_score(result, "Dune: Part Two", 2024) == 39

    def test_negative_keywords(self):
        assert trailer_score(yt("a", "Dune: Part Two Trailer Reaction"), "Dune: Part Two", None) == 10 + 6 - 10
        assert trailer_score(yt("b", "Dune trailer review"), "Dune", None) == 10 + 6 - 10
        assert trailer_score(yt("c", "Dune fan made trailer"), "Dune", None) == 10 + 6 - 15

    def test_year_only_counts_when_known(self):
        result = yt("a", "Heat 1995", description="")
        assert trailer_score(result, "Heat", 1995) == 15
        assert trailer_score(result, "Heat", None) == 10

    def test_best_pick_first_wins_ties(self):
        results = [yt("first", "Heat trailer"), yt("second", "Heat trailer"), yt("low", "Heat")]
        assert pick_best_video(results, "Heat", None).external_id == "first"

    def test_negative_scores_are_rejected(self):
        results = [yt("r", "fan made reaction"), yt("s", "my review")]
        assert pick_best_video(results, "Heat", None) is None

    def test_zero_score_is_accepted(self):
        results = [yt("z", "something else entirely")]
        assert pick_best_video(results, "Heat", None).external_id == "z"
        assert pick_best_video(results, "Heat", None, TrailerWeights(min_score=1)) is None


@pytest.mark.asyncio
class TestResolveTrailer:
    async def test_catalog_hit_never_searches(self):
        search = FakeVideoSearch()
        videos = [video("official", "Official Trailer", "Trailer"), video("teaser", "Teaser", "Teaser")]

        trailer = await resolve_trailer("Dune", 2021, MediaKind.MOVIE, videos, search)

        assert trailer.source is TrailerSource.PRIMARY_CATALOG
        assert trailer.key == "official"
        assert trailer.url == "https://www.youtube.com/watch?v=official"
        assert search.queries == []

    async def test_nothing_anywhere_tries_four_queries(self):
        search = FakeVideoSearch()

        trailer = await resolve_trailer("Dune", 2021, MediaKind.MOVIE, [], search)

        assert trailer is None
        assert [q for q, _ in search.queries] == build_search_queries("Dune", 2021)
        assert all(limit == 10 for _, limit in search.queries)

    async def test_fallback_stops_at_first_success(self):
        search = FakeVideoSearch(
            results={
                "Dune 2021 trailer": [yt("yt1", "Dune Trailer 2021"), yt("yt2", "Dune | Official Trailer 2021")],
                "Dune official trailer": [yt("late", "Dune official trailer")],
            }
        )

        trailer = await resolve_trailer("Dune", 2021, MediaKind.MOVIE, [], search)

        assert trailer.source is TrailerSource.FALLBACK_SEARCH
        assert trailer.key == "yt2"
        assert trailer.name == "Dune | Official Trailer 2021"
        assert [q for q, _ in search.queries] == ["Dune 2021 official trailer", "Dune 2021 trailer"]

    async def test_only_rejected_results_moves_to_next_query(self):
        search = FakeVideoSearch(
            results={
                "Heat official trailer": [yt("bad", "fan made reaction review")],
                "Heat trailer": [yt("good", "Heat trailer")],
            }
        )

        trailer = await resolve_trailer("Heat", None, MediaKind.MOVIE, [], search)

        assert trailer.key == "good"
        assert len(search.queries) == 2

    async def test_non_youtube_catalog_videos_go_to_search(self):
        search = FakeVideoSearch(results={"Severance trailer": [yt("sev", "Severance Trailer")]})
        videos = [video("v", "Official Trailer", site="Vimeo")]

        trailer = await resolve_trailer("Severance", None, MediaKind.SERIES, videos, search)

        assert trailer.key == "sev"

    async def test_unconfigured_search_is_skipped(self):
        search = FakeVideoSearch(configured=False)

        assert await resolve_trailer("Dune", 2021, MediaKind.MOVIE, [], search) is None
        assert search.queries == []

    async def test_search_failure_propagates(self):
        search = FakeVideoSearch(fail=True)

        with pytest.raises(UpstreamUnavailable):
            await resolve_trailer("Dune", 2021, MediaKind.MOVIE, [], search)
        assert len(search.queries) == 1

    async def test_default_video_search_comes_from_dependencies(self, monkeypatch):
        search = FakeVideoSearch(results={"Dune trailer": [yt("d", "Dune Trailer")]})
        monkeypatch.setattr("aryflix.trailers.get_video_search", lambda: search)

        trailer = await resolve_trailer("Dune", None, MediaKind.MOVIE, [])

        assert trailer.key == "d"
