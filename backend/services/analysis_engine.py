"""Analysis engine computing word counts and keyword density per page of posts."""
import logging
import time
from typing import Optional

from models.analysis import AnalysisResult, PageResult
from models.document import Document
from services.corpus import Corpus
from services.errors import AnalyzerError, CorpusUnavailable, InvalidKeyword, InvalidPage, InvalidRequest
from services.text_metrics import (
    MATCH_MODES,
    SUBSTRING,
    count_keyword,
    count_words,
    keyword_density,
    page_count,
    sanitize_keyword,
    strip_markup,
)
from config import MAX_PER_PAGE

logger = logging.getLogger(__name__)


class AnalysisEngine:
    """
    Stateless keyword-density analysis over a corpus.

    The engine keeps no per-request state, so one instance can serve
    concurrent requests; the corpus is only ever read.
    """

    def __init__(self, corpus: Corpus, match_mode: str = SUBSTRING, max_per_page: int = MAX_PER_PAGE):
        """
        Initialize the analysis engine.

        Args:
            corpus: Source of published documents
            match_mode: Default keyword matching, "substring" or "word"
            max_per_page: Largest accepted page size
        """
        if match_mode not in MATCH_MODES:
            raise ValueError(f"match_mode must be one of {MATCH_MODES}, got {match_mode!r}")

        self.corpus = corpus
        self.match_mode = match_mode
        self.max_per_page = max_per_page
        logger.info(f"Initialized AnalysisEngine (match_mode={match_mode})")

    def analyze(
        self,
        keyword: Optional[str],
        page: int = 1,
        per_page: int = 10,
        match_mode: Optional[str] = None
    ) -> PageResult:
        """
        Analyze one page window of the corpus for a keyword.

        Steps per document:
        1. Strip markup from the body
        2. Count whitespace-delimited words
        3. Count case-insensitive keyword occurrences
        4. Compute density, rounded to 2 decimals

        Args:
            keyword: Keyword to measure (sanitized before use)
            page: 1-based page number
            per_page: Page size
            match_mode: Overrides the engine's default matching for this call

        Returns:
            PageResult with the page's posts in corpus order and the
            publish-status totals, which do not depend on the keyword

        Raises:
            InvalidKeyword: If the keyword is empty after sanitization
            InvalidPage: If page or per_page is out of range
            CorpusUnavailable: If the corpus cannot be queried
        """
        clean_keyword = sanitize_keyword(keyword or "")
        if not clean_keyword:
            raise InvalidKeyword("Keyword is required and cannot be empty")

        if page < 1:
            raise InvalidPage("page must be at least 1")
        if per_page < 1 or per_page > self.max_per_page:
            raise InvalidPage(f"per_page must be between 1 and {self.max_per_page}")

        mode = match_mode or self.match_mode
        if mode not in MATCH_MODES:
            raise InvalidRequest(f"match must be one of: {', '.join(MATCH_MODES)}")

        start_time = time.time()

        try:
            corpus_page = self.corpus.fetch_page(page, per_page)
        except AnalyzerError:
            raise
        except Exception as e:
            logger.error(f"Corpus query failed: {e}", exc_info=True)
            raise CorpusUnavailable("Unable to load posts") from e

        posts = [
            self._analyze_document(document, clean_keyword, mode)
            for document in corpus_page.documents
        ]

        result = PageResult(
            posts=posts,
            total=corpus_page.total,
            pages=page_count(corpus_page.total, per_page)
        )

        latency_ms = int((time.time() - start_time) * 1000)
        logger.info(
            f"Analyzed {len(posts)} posts for keyword in {latency_ms}ms",
            extra={"extra": {
                "keyword": clean_keyword,
                "page": page,
                "per_page": per_page,
                "match_mode": mode,
                "total": result.total,
                "pages": result.pages,
                "latency_ms": latency_ms
            }}
        )
        return result

    def _analyze_document(self, document: Document, keyword: str, mode: str) -> AnalysisResult:
        text = strip_markup(document.body)
        word_count = count_words(text)
        occurrences = count_keyword(text, keyword, mode)

        return AnalysisResult(
            id=document.id,
            title=document.title,
            word_count=word_count,
            keyword_density=keyword_density(occurrences, word_count),
            url=document.permalink
        )
