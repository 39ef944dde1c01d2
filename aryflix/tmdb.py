import asyncio
import logging
import math

import httpx

from .config import env_str, tmdb_timeout
from .errors import AryflixError, MediaNotFound, UpstreamUnavailable

BASE_URL = "https://api.themoviedb.org/3"
PROVIDER = "tmdb"
DETAIL_APPENDS = "credits,videos,watch/providers,external_ids"

logger = logging.getLogger(__name__)
_client: httpx.AsyncClient | None = None


def _get_api_key() -> str:
    key = env_str("TMDB_API_KEY")
    if not key:
        raise UpstreamUnavailable(PROVIDER, "TMDB_API_KEY environment variable not set.")
    return key


async def _get_client() -> httpx.AsyncClient:
    global _client
    if _client is None:
        _client = httpx.AsyncClient(timeout=tmdb_timeout())
    return _client


async def close_client() -> None:
    global _client
    if _client:
        await _client.aclose()
        _client = None


async def _get(path: str, params: dict | None = None) -> dict:
    params = params or {}
    params["api_key"] = _get_api_key()
    client = await _get_client()
    try:
        resp = await client.get(f"{BASE_URL}{path}", params=params)
        if resp.status_code == 404:
            raise MediaNotFound(PROVIDER, f"No TMDB resource at {path}")
        resp.raise_for_status()
        return resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("TMDB request failed (path=%s): %s", path, exc)
        raise UpstreamUnavailable(PROVIDER, f"{path}: {exc}") from exc


async def search_movie(query: str, page: int = 1) -> dict:
    return await _get(
        "/search/movie",
        {"query": query, "page": page, "include_adult": "false", "language": "en-US"},
    )


async def search_tv(query: str, page: int = 1) -> dict:
    return await _get(
        "/search/tv",
        {"query": query, "page": page, "include_adult": "false", "language": "en-US"},
    )


async def get_movie_details(movie_id: int) -> dict:
    data = await _get(f"/movie/{movie_id}", {"append_to_response": DETAIL_APPENDS})
    if not data.get("imdb_id"):
        imdb_id = (data.get("external_ids") or {}).get("imdb_id")
        if imdb_id:
            data["imdb_id"] = imdb_id
    return data


async def get_tv_details(tv_id: int) -> dict:
    data = await _get(f"/tv/{tv_id}", {"append_to_response": DETAIL_APPENDS})
    external_ids = data.get("external_ids") or {}
    imdb_id = external_ids.get("imdb_id")
    if imdb_id:
        data["imdb_id"] = imdb_id
    runtime = await _average_runtime_for(tv_id, data.get("seasons") or [])
    if runtime is not None:
        data["episode_run_time"] = [runtime]
    return data


async def get_tv_summary(tv_id: int) -> dict:
    return await _get(f"/tv/{tv_id}")


async def get_tv_season(tv_id: int, season_number: int) -> dict:
    return await _get(f"/tv/{tv_id}/season/{season_number}")


def average_episode_runtime(seasons: list[dict]) -> int | None:
    """Mean runtime in minutes over every episode with a positive runtime."""
    runtimes = [
        ep["runtime"]
        for season in seasons
        for ep in season.get("episodes") or []
        if isinstance(ep.get("runtime"), (int, float)) and ep["runtime"] > 0
    ]
    if not runtimes:
        return None
    return math.floor(sum(runtimes) / len(runtimes) + 0.5)


async def _average_runtime_for(tv_id: int, seasons: list[dict]) -> int | None:
    # Season 0 holds specials.
    numbers = [s["season_number"] for s in seasons if s.get("season_number")]
    if not numbers:
        return None
    fetched = await asyncio.gather(*(get_tv_season(tv_id, n) for n in numbers), return_exceptions=True)
    found = []
    for number, season in zip(numbers, fetched):
        if isinstance(season, AryflixError):
            logger.warning("Skipping season %s of tv %s for runtime: %s", number, tv_id, season)
            continue
        if isinstance(season, BaseException):
            raise season
        found.append(season)
    return average_episode_runtime(found)


async def get_trending(media_type: str = "movie", time_window: str = "day", page: int = 1) -> dict:
    return await _get(f"/trending/{media_type}/{time_window}", {"page": page})


async def get_now_playing(page: int = 1) -> dict:
    return await _get("/movie/now_playing", {"page": page})


async def get_upcoming(page: int = 1) -> dict:
    return await _get("/movie/upcoming", {"page": page})


async def get_popular_tv(page: int = 1) -> dict:
    return await _get("/tv/popular", {"page": page})


async def discover(params: dict, page: int = 1) -> dict:
    base = {"sort_by": "popularity.desc", "include_adult": "false", "page": page}
    base.update(params or {})
    return await _get("/discover/movie", base)


async def discover_tv(params: dict, page: int = 1) -> dict:
    base = {"sort_by": "popularity.desc", "include_adult": "false", "page": page}
    base.update(params or {})
    return await _get("/discover/tv", base)


async def get_provider_list(country: str | None = None) -> list:
    params = {}
    if country:
        params["watch_region"] = country
    data = await _get("/watch/providers/movie", params)
    return data.get("results", [])


class TMDBCatalog:
    """TMDB as catalog: first-page text search, detail lookups and discovery feeds."""

    async def search_movies(self, text: str) -> list[dict]:
        data = await search_movie(text)
        return data.get("results") or []

    async def search_series(self, text: str) -> list[dict]:
        data = await search_tv(text)
        return data.get("results") or []

    async def movie_details(self, movie_id: int) -> dict:
        return await get_movie_details(movie_id)

    async def tv_details(self, tv_id: int) -> dict:
        return await get_tv_details(tv_id)

    async def tv_summary(self, tv_id: int) -> dict:
        return await get_tv_summary(tv_id)

    async def trending(self, media_type: str, time_window: str) -> list[dict]:
        data = await get_trending(media_type, time_window)
        return data.get("results") or []

    async def now_playing(self) -> list[dict]:
        data = await get_now_playing()
        return data.get("results") or []

    async def upcoming_movies(self) -> list[dict]:
        data = await get_upcoming()
        return data.get("results") or []

    async def popular_tv(self) -> list[dict]:
        data = await get_popular_tv()
        return data.get("results") or []

    async def discover_movies(self, params: dict, page: int = 1) -> list[dict]:
        data = await discover(params, page)
        return data.get("results") or []

    async def discover_series(self, params: dict, page: int = 1) -> list[dict]:
        data = await discover_tv(params, page)
        return data.get("results") or []

    async def watch_providers(self, region: str) -> list[dict]:
        return await get_provider_list(region)
