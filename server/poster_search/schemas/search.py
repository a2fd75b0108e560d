from pydantic import BaseModel


class PosterSearchResponse(BaseModel):
    query: str
    poster_ids: list[int]  # best match first
    count: int
