import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from poster_search.api.deps import get_db
from poster_search.core.config import get_settings
from poster_search.core.rate_limit import limiter, search_rate_limit
from poster_search.schemas.search import PosterSearchResponse
from poster_search.services.search import fuzzy_poster_search

router = APIRouter()
settings = get_settings()
logger = logging.getLogger(__name__)


@router.get("/search", response_model=PosterSearchResponse)
@limiter.limit(search_rate_limit)
def search_posters(
    request: Request,
    q: str = Query("", max_length=settings.search_max_query_length),
    db: Session = Depends(get_db),
) -> PosterSearchResponse:
    """Fuzzy poster search. Unsearchable input returns an empty result, not an error."""
    try:
        poster_ids = fuzzy_poster_search(db, q, settings.search_similarity_threshold)
    except SQLAlchemyError:
        logger.exception("Poster search failed for %r", q)
        raise HTTPException(
            status_code=503, detail="Poster search is temporarily unavailable"
        ) from None
    return PosterSearchResponse(query=q, poster_ids=poster_ids, count=len(poster_ids))
