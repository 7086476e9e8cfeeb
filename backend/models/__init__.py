"""Data models for Content Analyzer."""
from .document import Document, CorpusPage
from .analysis import AnalysisResult, PageResult, SortState
from .api import PostAnalysis, AnalyzeResponse, ErrorResponse

__all__ = [
    "Document",
    "CorpusPage",
    "AnalysisResult",
    "PageResult",
    "SortState",
    "PostAnalysis",
    "AnalyzeResponse",
    "ErrorResponse",
]
