import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
load_dotenv()

from fastapi import FastAPI, Query, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from . import omdb, tmdb, youtube
from .config import cors_origins, log_level
from .deps import get_catalog, get_ratings_provider
from .errors import InvalidInput, MediaNotFound, UpstreamUnavailable
from .limits import PUBLIC_RATE_LIMIT, limiter
from .providers import CatalogSearchProvider, RatingsProvider
from .ratings import get_ratings
from .routes_discovery import router as discovery_router
from .routes_media import router as media_router
from .search import search as search_content

logging.basicConfig(level=log_level(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await tmdb.close_client()
    await youtube.close_client()
    await omdb.close_client()


app = FastAPI(lifespan=lifespan)
app.state.limiter = limiter


# Rate limit error handler
@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return JSONResponse(status_code=429, content={"detail": "Too many requests. Please try again later."})


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request: Request, exc: InvalidInput):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(MediaNotFound)
async def not_found_handler(request: Request, exc: MediaNotFound):
    return JSONResponse(status_code=404, content={"detail": "Title not found.", "provider": exc.provider})


@app.exception_handler(UpstreamUnavailable)
async def upstream_handler(request: Request, exc: UpstreamUnavailable):
    logger.warning("Upstream failure on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=502,
        content={"detail": "Upstream service unavailable. Please try again later.", "provider": exc.provider},
    )


# Security headers middleware
@app.middleware("http")
async def security_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers["X-Content-Type-Options"] = "nosniff"
    response.headers["X-Frame-Options"] = "DENY"
    response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    return response


# CORS
ALLOWED_ORIGINS = cors_origins()
if ALLOWED_ORIGINS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["Content-Type"],
    )


# Fixed feed paths such as /api/movies/trending must match before /api/movies/{movie_id}.
app.include_router(discovery_router)
app.include_router(media_router)


@app.get("/api")
async def index():
    return {"message": "AryFlix API is working!"}


@app.get("/api/search")
@limiter.limit(PUBLIC_RATE_LIMIT)
async def search(
    request: Request,
    q: str = Query(..., min_length=1),
    catalog: CatalogSearchProvider = Depends(get_catalog),
):
    results = await search_content(q, catalog)
    return {"results": [r.model_dump(mode="json") for r in results]}


@app.get("/api/ratings")
@limiter.limit(PUBLIC_RATE_LIMIT)
async def ratings(
    request: Request,
    title: str | None = None,
    year: int | None = None,
    imdb_id: str | None = None,
    ratings_provider: RatingsProvider = Depends(get_ratings_provider),
):
    pair = await get_ratings(title, year, imdb_id, ratings_provider)
    return pair.model_dump(mode="json", by_alias=True)
