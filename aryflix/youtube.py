import logging

import httpx

from .config import env_str, youtube_timeout
from .errors import UpstreamUnavailable
from .models import ExternalVideoResult

BASE_URL = "https://www.googleapis.com/youtube/v3"
PROVIDER = "youtube"

logger = logging.getLogger(__name__)
_client: httpx.AsyncClient | None = None


def is_configured() -> bool:
    return bool(env_str("YOUTUBE_API_KEY"))


async def _get_client() -> httpx.AsyncClient:
    global _client
    if _client is None:
        _client = httpx.AsyncClient(timeout=youtube_timeout())
    return _client


async def close_client() -> None:
    global _client
    if _client:
        await _client.aclose()
        _client = None


async def search_videos(query: str, max_results: int = 10) -> list[ExternalVideoResult]:
    params = {
        "key": env_str("YOUTUBE_API_KEY"),
        "part": "snippet",
        "q": query,
        "type": "video",
        "maxResults": max_results,
        "videoDefinition": "high",
    }
    client = await _get_client()
    try:
        resp = await client.get(f"{BASE_URL}/search", params=params)
        resp.raise_for_status()
        data = resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("YouTube search failed (query=%r): %s", query, exc)
        raise UpstreamUnavailable(PROVIDER, str(exc)) from exc

    results = []
    for item in data.get("items") or []:
        video = ExternalVideoResult.from_youtube(item)
        if video is not None:
            results.append(video)
    return results[:max_results]


class YouTubeVideoSearch:
    """Video search backed by the YouTube Data API."""

    def is_configured(self) -> bool:
        return is_configured()

    async def search(self, query: str, max_results: int) -> list[ExternalVideoResult]:
        return await search_videos(query, max_results)
