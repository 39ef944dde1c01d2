from typing import Protocol

from .models import ExternalVideoResult


class CatalogSearchProvider(Protocol):
    async def search_movies(self, text: str) -> list[dict]: ...

    async def search_series(self, text: str) -> list[dict]: ...


class CatalogDetailProvider(Protocol):
    async def movie_details(self, movie_id: int) -> dict: ...

    async def tv_details(self, tv_id: int) -> dict: ...


class VideoSearchProvider(Protocol):
    def is_configured(self) -> bool: ...

    async def search(self, query: str, max_results: int) -> list[ExternalVideoResult]: ...


class RatingsProvider(Protocol):
    async def lookup_by_id(self, imdb_id: str) -> list[dict]: ...

    async def lookup_by_title_year(self, title: str, year: int) -> list[dict]: ...


class CatalogFeedProvider(Protocol):
    async def trending(self, media_type: str, time_window: str) -> list[dict]: ...

    async def now_playing(self) -> list[dict]: ...

    async def upcoming_movies(self) -> list[dict]: ...

    async def popular_tv(self) -> list[dict]: ...

    async def discover_movies(self, params: dict, page: int = 1) -> list[dict]: ...

    async def discover_series(self, params: dict, page: int = 1) -> list[dict]: ...

    async def tv_summary(self, tv_id: int) -> dict: ...

    async def watch_providers(self, region: str) -> list[dict]: ...
