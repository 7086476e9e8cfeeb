"""Analysis result data models."""
from dataclasses import dataclass, field
from typing import Any, List


@dataclass
class AnalysisResult:
    """Word count and keyword density for a single document."""
    id: Any
    title: str
    word_count: int
    keyword_density: float  # 0.0 to 100.0, two decimals
    url: str


@dataclass
class PageResult:
    """A page of analysis results with corpus-wide paging totals."""
    posts: List[AnalysisResult] = field(default_factory=list)
    total: int = 0
    pages: int = 0


@dataclass
class SortState:
    """Active sort column and direction of the results table."""
    column: str = "title"  # "title", "word_count" or "density"
    direction: str = "asc"  # "asc" or "desc"
