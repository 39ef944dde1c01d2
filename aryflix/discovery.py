"""Browse feeds for the home page: trending rows, theatre listings, streaming
platform rows and the shuffled "watch at home" mix.

Each feed is a small composition over catalog calls. Feeds that combine
several calls fetch them concurrently and fail as a whole when any of them
fails, except for per-show detail enrichment, which falls back to the
listing entry.
"""

import asyncio
import logging
import random
from datetime import date

from .deps import get_catalog
from .errors import AryflixError, InvalidInput
from .providers import CatalogFeedProvider

logger = logging.getLogger(__name__)

ANIMATION_GENRE = 16
# Talk, news and reality.
EXCLUDED_GENRE_IDS = frozenset({10767, 10763, 10764})
# Platform rows also drop kids and family titles.
PLATFORM_EXCLUDED_GENRE_IDS = EXCLUDED_GENRE_IDS | {10762, 10751}
KIDS_KEYWORDS = ("kids", "children", "baby", "toddler", "sesame", "barney", "dora")

STREAMING_PLATFORMS: dict[str, tuple[int, str]] = {
    "netflix": (8, "Netflix"),
    "prime": (9, "Prime Video"),
    "disney": (337, "Disney+"),
    "max": (1899, "Max"),
    "appletv": (350, "Apple TV+"),
}
WATCH_REGION = "US"
LOGO_BASE_URL = "https://image.tmdb.org/t/p/original"

FEED_SIZE = 20
PLATFORM_FEED_SIZE = 25
WATCH_AT_HOME_SIZE = 40
MIN_TRENDING_ANIME = 10
DETAIL_CONCURRENCY = 8


def _genre_ids(item: dict) -> set[int]:
    ids = {g.get("id") for g in item.get("genres") or []}
    ids.update(item.get("genre_ids") or [])
    return ids


def _has_genre(item: dict, genres) -> bool:
    return bool(_genre_ids(item) & set(genres))


def _tagged(items: list[dict], media_type: str) -> list[dict]:
    return [{**item, "media_type": media_type} for item in items]


def _is_anime(show: dict) -> bool:
    if ANIMATION_GENRE not in _genre_ids(show):
        return False
    return show.get("original_language") == "ja" or "JP" in (show.get("origin_country") or [])


async def _with_details(feeds: CatalogFeedProvider, shows: list[dict]) -> list[dict]:
    semaphore = asyncio.Semaphore(DETAIL_CONCURRENCY)

    async def enrich(show: dict) -> dict:
        async with semaphore:
            try:
                details = await feeds.tv_summary(show["id"])
            except AryflixError as exc:
                logger.debug("Keeping listing entry for tv %s: %s", show.get("id"), exc)
                return show
        return {**show, **details}

    return list(await asyncio.gather(*(enrich(s) for s in shows)))


async def trending_movies(feeds: CatalogFeedProvider | None = None) -> list[dict]:
    feeds = feeds or get_catalog()
    return await feeds.trending("movie", "day")


async def trending_tv(feeds: CatalogFeedProvider | None = None) -> list[dict]:
    feeds = feeds or get_catalog()
    return await feeds.trending("tv", "day")


async def now_playing(feeds: CatalogFeedProvider | None = None) -> list[dict]:
    feeds = feeds or get_catalog()
    return await feeds.now_playing()


async def upcoming_movies(feeds: CatalogFeedProvider | None = None) -> list[dict]:
    feeds = feeds or get_catalog()
    return (await feeds.upcoming_movies())[:FEED_SIZE]


async def popular_tv(feeds: CatalogFeedProvider | None = None) -> list[dict]:
    """Ten trending shows of the week topped up with ten popular ones.

    Talk, news and reality shows are removed after loading each show's
    genres.
    """
    feeds = feeds or get_catalog()
    trending, popular = await asyncio.gather(feeds.trending("tv", "week"), feeds.popular_tv())
    trending = trending[:10]
    trending_ids = {s.get("id") for s in trending}
    popular = [s for s in popular if s.get("id") not in trending_ids][:10]
    shows = await _with_details(feeds, trending + popular)
    return [s for s in shows if not _has_genre(s, EXCLUDED_GENRE_IDS)][:FEED_SIZE]


async def upcoming_tv(feeds: CatalogFeedProvider | None = None, today: date | None = None) -> list[dict]:
    feeds = feeds or get_catalog()
    year = (today or date.today()).year
    params = {
        "first_air_date.gte": f"{year - 1}-01-01",
        "first_air_date.lte": f"{year + 1}-12-31",
        "sort_by": "popularity.desc",
        "vote_count.gte": 20,
        "with_original_language": "en",
    }
    return (await feeds.discover_series(params))[:FEED_SIZE]


async def trending_anime(feeds: CatalogFeedProvider | None = None) -> list[dict]:
    """Anime from this week's trending shows, padded with popular recent anime.

    Shows that were trending stay ahead of the padding; within each group the
    more popular show comes first.
    """
    feeds = feeds or get_catalog()
    trending = await feeds.trending("tv", "week")
    trending_ids = {s.get("id") for s in trending}
    anime = [s for s in trending if _is_anime(s)]
    if len(anime) < MIN_TRENDING_ANIME:
        logger.info("Only %d trending anime, adding popular recent titles", len(anime))
        extra = await feeds.discover_series(
            {
                "with_genres": str(ANIMATION_GENRE),
                "with_origin_country": "JP",
                "sort_by": "popularity.desc",
                "first_air_date.gte": "2020-01-01",
                "vote_count.gte": 100,
                "with_original_language": "ja",
            }
        )
        seen = {s.get("id") for s in anime}
        anime += [s for s in extra if s.get("id") not in seen]
    anime.sort(key=lambda s: (s.get("id") not in trending_ids, -(s.get("popularity") or 0)))
    return anime[:FEED_SIZE]


def _platform_friendly(item: dict) -> bool:
    if _has_genre(item, PLATFORM_EXCLUDED_GENRE_IDS):
        return False
    title = (item.get("title") or item.get("name") or "").lower()
    return not any(word in title for word in KIDS_KEYWORDS)


async def platform_content(
    platform: str,
    feeds: CatalogFeedProvider | None = None,
    today: date | None = None,
) -> list[dict]:
    """Most popular released movies and shows on one streaming platform."""
    if platform not in STREAMING_PLATFORMS:
        raise InvalidInput(f"Invalid platform: {platform}. Valid options: {', '.join(STREAMING_PLATFORMS)}")
    feeds = feeds or get_catalog()
    provider_id, name = STREAMING_PLATFORMS[platform]
    day = (today or date.today()).isoformat()
    common = {
        "with_watch_providers": provider_id,
        "watch_region": WATCH_REGION,
        "sort_by": "popularity.desc",
        "vote_count.gte": 10,
        "without_genres": ",".join(str(g) for g in sorted(PLATFORM_EXCLUDED_GENRE_IDS)),
    }
    movies, shows = await asyncio.gather(
        feeds.discover_movies({**common, "primary_release_date.lte": day}),
        feeds.discover_series({**common, "first_air_date.lte": day}),
    )
    items = [i for i in _tagged(movies, "movie") + _tagged(shows, "tv") if _platform_friendly(i)]
    items.sort(key=lambda i: i.get("popularity") or 0, reverse=True)
    logger.info("%s: %d titles after filtering", name, len(items))
    return items[:PLATFORM_FEED_SIZE]


async def streaming_logos(feeds: CatalogFeedProvider | None = None) -> dict[str, dict]:
    feeds = feeds or get_catalog()
    providers = {p.get("provider_id"): p for p in await feeds.watch_providers(WATCH_REGION)}
    logos = {}
    for key, (provider_id, _) in STREAMING_PLATFORMS.items():
        provider = providers.get(provider_id)
        if provider and provider.get("logo_path"):
            logos[key] = {
                "name": provider.get("provider_name"),
                "logo_path": provider["logo_path"],
                "logo_url": f"{LOGO_BASE_URL}{provider['logo_path']}",
            }
    return logos


async def watch_at_home(
    feeds: CatalogFeedProvider | None = None,
    rng: random.Random | None = None,
) -> list[dict]:
    """A shuffled mix of well-known movies, shows and anime.

    Each call draws from a random early results page so the mix changes
    between visits. Items are unique per (media_type, id).
    """
    feeds = feeds or get_catalog()
    rng = rng or random.Random()
    movies, shows, anime = await asyncio.gather(
        feeds.discover_movies({"sort_by": "vote_count.desc", "vote_count.gte": 1000}, rng.randint(1, 3)),
        feeds.discover_series({"sort_by": "vote_count.desc", "vote_count.gte": 1000}, rng.randint(1, 3)),
        feeds.discover_series(
            {
                "sort_by": "vote_count.desc",
                "vote_count.gte": 100,
                "with_genres": ANIMATION_GENRE,
                "with_original_language": "ja",
            },
            rng.randint(1, 5),
        ),
    )

    movies = _tagged(movies, "movie")
    rng.shuffle(movies)

    shows = await _with_details(feeds, _tagged(shows, "tv"))
    shows = [s for s in shows if not _has_genre(s, EXCLUDED_GENRE_IDS)]
    rng.shuffle(shows)

    anime = [a for a in _tagged(anime, "anime") if a.get("original_language") == "ja"]
    rng.shuffle(anime)

    mixed = movies[:15] + shows[:15] + anime[:10]
    rng.shuffle(mixed)
    seen = set()
    unique = []
    for item in mixed:
        key = (item["media_type"], item.get("id"))
        if key not in seen:
            seen.add(key)
            unique.append(item)
    return unique[:WATCH_AT_HOME_SIZE]
