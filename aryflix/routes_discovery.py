from fastapi import APIRouter, Depends, Request

from . import discovery
from .deps import get_catalog
from .limits import PUBLIC_RATE_LIMIT, limiter
from .providers import CatalogFeedProvider

router = APIRouter(prefix="/api", tags=["discovery"])


@router.get("/movies/trending")
@limiter.limit(PUBLIC_RATE_LIMIT)
async def trending_movies(request: Request, feeds: CatalogFeedProvider = Depends(get_catalog)):
    return {"results": await discovery.trending_movies(feeds)}


@router.get("/tv/trending")
@limiter.limit(PUBLIC_RATE_LIMIT)
async def trending_tv(request: Request, feeds: CatalogFeedProvider = Depends(get_catalog)):
    return {"results": await discovery.trending_tv(feeds)}


@router.get("/movies/now-playing")
@limiter.limit(PUBLIC_RATE_LIMIT)
async def now_playing(request: Request, feeds: CatalogFeedProvider = Depends(get_catalog)):
    return {"results": await discovery.now_playing(feeds)}


@router.get("/movies/upcoming")
@limiter.limit(PUBLIC_RATE_LIMIT)
async def upcoming_movies(request: Request, feeds: CatalogFeedProvider = Depends(get_catalog)):
    return {"results": await discovery.upcoming_movies(feeds)}


@router.get("/tv/popular")
@limiter.limit(PUBLIC_RATE_LIMIT)
async def popular_tv(request: Request, feeds: CatalogFeedProvider = Depends(get_catalog)):
    return {"results": await discovery.popular_tv(feeds)}


@router.get("/tv/upcoming")
@limiter.limit(PUBLIC_RATE_LIMIT)
async def upcoming_tv(request: Request, feeds: CatalogFeedProvider = Depends(get_catalog)):
    return {"results": await discovery.upcoming_tv(feeds)}


@router.get("/anime/trending")
@limiter.limit(PUBLIC_RATE_LIMIT)
async def trending_anime(request: Request, feeds: CatalogFeedProvider = Depends(get_catalog)):
    return {"results": await discovery.trending_anime(feeds)}


@router.get("/streaming/logos")
@limiter.limit(PUBLIC_RATE_LIMIT)
async def streaming_logos(request: Request, feeds: CatalogFeedProvider = Depends(get_catalog)):
    return {"platforms": await discovery.streaming_logos(feeds)}


@router.get("/streaming/{platform}")
@limiter.limit(PUBLIC_RATE_LIMIT)
async def platform_content(request: Request, platform: str, feeds: CatalogFeedProvider = Depends(get_catalog)):
    return {"platform": platform, "results": await discovery.platform_content(platform, feeds)}


@router.get("/watch-at-home")
@limiter.limit(PUBLIC_RATE_LIMIT)
async def watch_at_home(request: Request, feeds: CatalogFeedProvider = Depends(get_catalog)):
    return {"results": await discovery.watch_at_home(feeds)}
