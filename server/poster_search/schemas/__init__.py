from poster_search.schemas.search import PosterSearchResponse

__all__ = ["PosterSearchResponse"]
