import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi import Request as FastAPIRequest
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded

from poster_search.api import api_router
from poster_search.core.config import get_settings
from poster_search.core.rate_limit import limiter, rate_limit_exceeded_handler

settings = get_settings()

# Python's default WARNING level would hide the search strategy INFO lines
logging.getLogger("poster_search").setLevel(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "Poster search starting (env=%s, similarity_threshold=%.2f, rate_limit=%s)",
        settings.env,
        settings.search_similarity_threshold,
        "on" if settings.is_rate_limit_enabled else "off",
    )
    yield


app = FastAPI(
    title="Poster Search API",
    description="Fuzzy search over a concert poster catalog",
    version="0.1.0",
    lifespan=lifespan,
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    openapi_url=None if settings.is_production else "/openapi.json",
)

app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def global_exception_handler(request: FastAPIRequest, exc: Exception) -> JSONResponse:
    """Log anything the routes did not handle and answer with a generic 500."""
    logger.exception("Unhandled exception on %s %s", request.method, request.url.path)
    content = {"detail": "Internal server error"}
    if not settings.is_production:
        content["debug"] = str(exc)
    return JSONResponse(status_code=500, content=content)


def _allowed_origins() -> list[str]:
    return [origin.strip() for origin in settings.cors_origins.split(",") if origin.strip()]


# Search is read-only and unauthenticated: no credentials, GET only
app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins(),
    allow_credentials=False,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type"],
)

app.include_router(api_router, prefix="/api")


@app.get("/health")
def health_check():
    return {"status": "ok"}
