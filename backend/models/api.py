"""API request and response schemas."""
from typing import Any, List
from pydantic import BaseModel, Field


class PostAnalysis(BaseModel):
    """Analysis metrics for one post."""
    id: Any
    title: str
    word_count: int = Field(ge=0)
    keyword_density: float = Field(ge=0, le=100)
    url: str


class AnalyzeResponse(BaseModel):
    """Successful response of GET /analyze."""
    posts: List[PostAnalysis]
    total: int = Field(ge=0)
    pages: int = Field(ge=0)


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""
    error: bool = True
    message: str
