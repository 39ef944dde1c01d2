from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, computed_field

from .text import extract_year, parse_float

POSTER_BASE_URL = "https://image.tmdb.org/t/p/w500"
YOUTUBE_WATCH_URL = "https://www.youtube.com/watch?v="


class MediaKind(str, Enum):
    MOVIE = "movie"
    SERIES = "tv"


class TrailerSource(str, Enum):
    PRIMARY_CATALOG = "primary-catalog"
    FALLBACK_SEARCH = "fallback-search"


class SearchCandidate(BaseModel):
    id: int
    title: str = ""
    media_kind: MediaKind
    popularity: float = Field(default=0.0, ge=0)
    vote_average: float | None = None
    vote_count: int = Field(default=0, ge=0)
    release_date: str | None = None
    release_year: int | None = None
    poster_url: str | None = None
    overview: str | None = None
    score: float = 0.0

    @classmethod
    def from_tmdb(cls, raw: dict, media_kind: MediaKind) -> "SearchCandidate":
        """Map a raw TMDB movie or TV search hit into the shared shape.

        TV results use ``name``/``first_air_date`` where movies use
        ``title``/``release_date``.
        """
        if media_kind is MediaKind.SERIES:
            title = raw.get("name") or raw.get("title") or ""
            date_text = raw.get("first_air_date") or None
        else:
            title = raw.get("title") or raw.get("name") or ""
            date_text = raw.get("release_date") or None
        poster_path = raw.get("poster_path")
        popularity = parse_float(raw.get("popularity")) or 0.0
        vote_count = raw.get("vote_count") or 0
        return cls(
            id=raw["id"],
            title=str(title),
            media_kind=media_kind,
            popularity=max(popularity, 0.0),
            vote_average=parse_float(raw.get("vote_average")),
            vote_count=max(int(vote_count), 0),
            release_date=date_text,
            release_year=extract_year(date_text),
            poster_url=f"{POSTER_BASE_URL}{poster_path}" if poster_path else None,
            overview=raw.get("overview") or None,
        )


class VideoCandidate(BaseModel):
    key: str
    name: str = ""
    site: str = ""
    kind: str = ""
    published_at: datetime | None = None

    @property
    def is_official_hint(self) -> bool:
        return "official" in self.name.lower()

    @classmethod
    def from_tmdb(cls, raw: dict) -> "VideoCandidate":
        return cls(
            key=str(raw.get("key") or ""),
            name=str(raw.get("name") or ""),
            site=str(raw.get("site") or ""),
            kind=str(raw.get("type") or ""),
            published_at=raw.get("published_at") or None,
        )


class ExternalVideoResult(BaseModel):
    external_id: str
    title: str = ""
    channel_name: str = ""
    description: str = ""

    @classmethod
    def from_youtube(cls, item: dict) -> "ExternalVideoResult | None":
        video_id = (item.get("id") or {}).get("videoId")
        if not video_id:
            return None
        snippet = item.get("snippet") or {}
        return cls(
            external_id=video_id,
            title=snippet.get("title") or "",
            channel_name=snippet.get("channelTitle") or "",
            description=snippet.get("description") or "",
        )


class TrailerResult(BaseModel):
    source: TrailerSource
    key: str
    name: str = ""
    site: str = "YouTube"

    @computed_field
    @property
    def url(self) -> str:
        return f"{YOUTUBE_WATCH_URL}{self.key}"


class RatingPair(BaseModel):
    imdb: float | None = Field(default=None, ge=0, le=10)
    rotten_tomatoes: int | None = Field(default=None, ge=0, le=100, serialization_alias="rottenTomatoes")

    @property
    def has_any(self) -> bool:
        return self.imdb is not None or self.rotten_tomatoes is not None
