import asyncio
import logging
from typing import Literal

from fastapi import APIRouter, Depends, Request

from .deps import get_catalog, get_ratings_provider, get_video_search
from .errors import UpstreamUnavailable
from .limits import PUBLIC_RATE_LIMIT, limiter
from .models import MediaKind, RatingPair, TrailerResult, VideoCandidate
from .providers import CatalogDetailProvider, RatingsProvider, VideoSearchProvider
from .ratings import get_ratings
from .text import extract_year
from .trailers import resolve_trailer

router = APIRouter(prefix="/api", tags=["media"])
logger = logging.getLogger(__name__)

Status = Literal["found", "none", "unavailable"]


def _title_and_year(details: dict, media_kind: MediaKind) -> tuple[str, int | None]:
    if media_kind is MediaKind.SERIES:
        title = details.get("name") or details.get("title") or ""
        date_text = details.get("first_air_date")
    else:
        title = details.get("title") or details.get("name") or ""
        date_text = details.get("release_date")
    return str(title), extract_year(date_text)


def _attached_videos(details: dict) -> list[VideoCandidate]:
    raw = (details.get("videos") or {}).get("results") or []
    return [VideoCandidate.from_tmdb(v) for v in raw if v.get("key")]


async def _trailer_section(
    details: dict,
    media_kind: MediaKind,
    video_search: VideoSearchProvider,
) -> tuple[TrailerResult | None, Status]:
    title, year = _title_and_year(details, media_kind)
    try:
        trailer = await resolve_trailer(title, year, media_kind, _attached_videos(details), video_search)
    except UpstreamUnavailable as exc:
        logger.warning("Trailer lookup failed for %s %s: %s", media_kind.value, details.get("id"), exc)
        return None, "unavailable"
    return trailer, "found" if trailer is not None else "none"


async def _ratings_section(
    details: dict,
    media_kind: MediaKind,
    ratings_provider: RatingsProvider,
) -> tuple[RatingPair | None, Status]:
    title, year = _title_and_year(details, media_kind)
    imdb_id = details.get("imdb_id")
    if not imdb_id and not (title and year):
        return RatingPair(), "none"
    try:
        pair = await get_ratings(title, year, imdb_id, ratings_provider)
    except UpstreamUnavailable as exc:
        logger.warning("Ratings lookup failed for %s %s: %s", media_kind.value, details.get("id"), exc)
        return None, "unavailable"
    return pair, "found" if pair.has_any else "none"


async def _detail_payload(
    details: dict,
    media_kind: MediaKind,
    video_search: VideoSearchProvider,
    ratings_provider: RatingsProvider,
) -> dict:
    (trailer, trailer_status), (pair, ratings_status) = await asyncio.gather(
        _trailer_section(details, media_kind, video_search),
        _ratings_section(details, media_kind, ratings_provider),
    )
    payload = dict(details)
    payload["media_type"] = media_kind.value
    payload["trailer"] = trailer.model_dump(mode="json") if trailer is not None else None
    payload["trailer_status"] = trailer_status
    payload["omdb_ratings"] = pair.model_dump(mode="json", by_alias=True) if pair is not None else None
    payload["ratings_status"] = ratings_status
    return payload


async def _trailer_payload(details: dict, media_kind: MediaKind, video_search: VideoSearchProvider) -> dict:
    trailer, status = await _trailer_section(details, media_kind, video_search)
    return {
        "id": details.get("id"),
        "media_type": media_kind.value,
        "trailer": trailer.model_dump(mode="json") if trailer is not None else None,
        "trailer_status": status,
    }


@router.get("/movies/{movie_id}")
@limiter.limit(PUBLIC_RATE_LIMIT)
async def movie_detail(
    request: Request,
    movie_id: int,
    catalog: CatalogDetailProvider = Depends(get_catalog),
    video_search: VideoSearchProvider = Depends(get_video_search),
    ratings_provider: RatingsProvider = Depends(get_ratings_provider),
):
    details = await catalog.movie_details(movie_id)
    return await _detail_payload(details, MediaKind.MOVIE, video_search, ratings_provider)


@router.get("/tv/{tv_id}")
@limiter.limit(PUBLIC_RATE_LIMIT)
async def tv_detail(
    request: Request,
    tv_id: int,
    catalog: CatalogDetailProvider = Depends(get_catalog),
    video_search: VideoSearchProvider = Depends(get_video_search),
    ratings_provider: RatingsProvider = Depends(get_ratings_provider),
):
    details = await catalog.tv_details(tv_id)
    return await _detail_payload(details, MediaKind.SERIES, video_search, ratings_provider)


@router.get("/movies/{movie_id}/trailer")
@limiter.limit(PUBLIC_RATE_LIMIT)
async def movie_trailer(
    request: Request,
    movie_id: int,
    catalog: CatalogDetailProvider = Depends(get_catalog),
    video_search: VideoSearchProvider = Depends(get_video_search),
):
    details = await catalog.movie_details(movie_id)
    return await _trailer_payload(details, MediaKind.MOVIE, video_search)


@router.get("/tv/{tv_id}/trailer")
@limiter.limit(PUBLIC_RATE_LIMIT)
async def tv_trailer(
    request: Request,
    tv_id: int,
    catalog: CatalogDetailProvider = Depends(get_catalog),
    video_search: VideoSearchProvider = Depends(get_video_search),
):
    details = await catalog.tv_details(tv_id)
    return await _trailer_payload(details, MediaKind.SERIES, video_search)
