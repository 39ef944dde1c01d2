"""Pick the trailer to embed on a detail page.

Stage A looks at the videos TMDB already attached to the title. Only when none
of them is hosted on YouTube does stage B search YouTube, trying the most
specific query first and stopping at the first query that yields an
acceptable video.
"""

import logging
from collections.abc import Callable, Sequence

from .config import DEFAULT_TRAILER_SETTINGS, DEFAULT_TRAILER_WEIGHTS, TrailerSettings, TrailerWeights
from .deps import get_video_search
from .fallback import first_result
from .models import ExternalVideoResult, MediaKind, TrailerResult, TrailerSource, VideoCandidate
from .providers import VideoSearchProvider
from .text import normalize_text

YOUTUBE_SITE = "YouTube"

logger = logging.getLogger(__name__)

CATALOG_PRIORITIES: tuple[Callable[[VideoCandidate], bool], ...] = (
    lambda v: v.kind == "Trailer" and v.is_official_hint,
    lambda v: v.kind == "Trailer" and "main" in v.name.lower(),
    lambda v: v.kind == "Trailer",
    lambda v: v.kind == "Teaser" and v.is_official_hint,
    lambda v: v.kind == "Teaser",
)


def select_catalog_trailer(videos: Sequence[VideoCandidate]) -> VideoCandidate | None:
    youtube_videos = [v for v in videos if v.site == YOUTUBE_SITE and v.key]
    if not youtube_videos:
        return None
    for matches in CATALOG_PRIORITIES:
        for video in youtube_videos:
            if matches(video):
                return video
    return youtube_videos[0]


def build_search_queries(title: str, year: int | None) -> list[str]:
    title = " ".join(title.split())
    if year:
        return [
            f"{title} {year} official trailer",
            f"{title} {year} trailer",
            f"{title} official trailer",
            f"{title} trailer",
        ]
    return [f"{title} official trailer", f"{title} trailer"]


def trailer_score(
    video: ExternalVideoResult,
    media_title: str,
    year: int | None,
    weights: TrailerWeights = DEFAULT_TRAILER_WEIGHTS,
) -> int:
    title = normalize_text(video.title)
    description = normalize_text(video.description)
    channel = normalize_text(video.channel_name)
    wanted = normalize_text(media_title)

    score = 0
    if wanted and wanted in title:
        score += weights.title_match
    if year and (str(year) in title or str(year) in description):
        score += weights.year_match
    if "official" in title:
        score += weights.official
    if "trailer" in title:
        score += weights.trailer
    if any(name in channel for name in weights.official_channels):
        score += weights.official_channel

    if "reaction" in title:
        score += weights.reaction
    if "review" in title:
        score += weights.review
    if "fan made" in title:
        score += weights.fan_made
    return score


def pick_best_video(
    videos: Sequence[ExternalVideoResult],
    media_title: str,
    year: int | None,
    weights: TrailerWeights = DEFAULT_TRAILER_WEIGHTS,
) -> ExternalVideoResult | None:
    """Highest scoring video at or above ``weights.min_score``; the earliest wins ties."""
    best: ExternalVideoResult | None = None
    best_score = None
    for video in videos:
        score = trailer_score(video, media_title, year, weights)
        if score < weights.min_score:
            continue
        if best_score is None or score > best_score:
            best, best_score = video, score
    return best


async def resolve_trailer(
    media_title: str,
    year: int | None,
    media_kind: MediaKind,
    videos: Sequence[VideoCandidate],
    video_search: VideoSearchProvider | None = None,
    settings: TrailerSettings = DEFAULT_TRAILER_SETTINGS,
) -> TrailerResult | None:
    """Best trailer for a title, or ``None`` once both stages came up empty.

    ``UpstreamUnavailable`` from the video search propagates, so a failed
    lookup is never reported as "no trailer".
    """
    video_search = video_search or get_video_search()

    async def from_catalog() -> TrailerResult | None:
        video = select_catalog_trailer(videos)
        if video is None:
            return None
        logger.info("Catalog trailer for %s %r: %s", media_kind.value, media_title, video.name)
        return TrailerResult(
            source=TrailerSource.PRIMARY_CATALOG,
            key=video.key,
            name=video.name,
            site=video.site,
        )

    async def from_search() -> TrailerResult | None:
        if not media_title.strip():
            return None
        if not video_search.is_configured():
            logger.warning("YouTube API key not set, skipping trailer search for %r", media_title)
            return None
        for query in build_search_queries(media_title, year):
            logger.info("Searching YouTube for %r", query)
            results = await video_search.search(query, settings.max_results)
            best = pick_best_video(results[: settings.max_results], media_title, year, settings.weights)
            if best is not None:
                return TrailerResult(
                    source=TrailerSource.FALLBACK_SEARCH,
                    key=best.external_id,
                    name=best.title,
                    site=YOUTUBE_SITE,
                )
        return None

    trailer = await first_result(from_catalog, from_search)
    if trailer is None:
        logger.info("No trailer found for %s %r", media_kind.value, media_title)
    return trailer
