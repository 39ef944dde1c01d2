import logging

import httpx

from .config import env_str, omdb_timeout
from .errors import UpstreamUnavailable

OMDB_URL = "https://www.omdbapi.com/"
PROVIDER = "omdb"

logger = logging.getLogger(__name__)
_client: httpx.AsyncClient | None = None


def _get_api_key() -> str:
    key = env_str("OMDB_API_KEY")
    if not key:
        raise UpstreamUnavailable(PROVIDER, "OMDB_API_KEY environment variable not set.")
    return key


async def _get_client() -> httpx.AsyncClient:
    global _client
    if _client is None:
        _client = httpx.AsyncClient(timeout=omdb_timeout())
    return _client


async def close_client() -> None:
    global _client
    if _client:
        await _client.aclose()
        _client = None


async def _fetch(params: dict[str, str]) -> dict | None:
    """Query OMDb; ``None`` means OMDb answered but had no matching title."""
    params = {"r": "json", **params, "apikey": _get_api_key()}
    client = await _get_client()
    try:
        resp = await client.get(OMDB_URL, params=params)
        resp.raise_for_status()
        data = resp.json()
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("OMDb request failed: %s", exc)
        raise UpstreamUnavailable(PROVIDER, str(exc)) from exc
    if str(data.get("Response", "")).lower() != "true":
        logger.debug("OMDb has no match: %s", data.get("Error"))
        return None
    return data


async def fetch_by_id(imdb_id: str) -> dict | None:
    return await _fetch({"i": imdb_id.strip()})


async def fetch_by_title_year(title: str, year: int) -> dict | None:
    return await _fetch({"t": title.strip(), "y": str(year)})


class OMDbRatings:
    """Named rating entries (``{"Source": ..., "Value": ...}``) from OMDb."""

    async def lookup_by_id(self, imdb_id: str) -> list[dict]:
        data = await fetch_by_id(imdb_id)
        return list((data or {}).get("Ratings") or [])

    async def lookup_by_title_year(self, title: str, year: int) -> list[dict]:
        data = await fetch_by_title_year(title, year)
        return list((data or {}).get("Ratings") or [])
