"""Error taxonomy for content analysis and its HTTP client."""
from typing import Optional


class AnalyzerError(Exception):
    """Base exception carrying a machine-readable code and an HTTP status."""

    code = "analyzer_error"
    status_code = 500

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidRequest(AnalyzerError):
    """Client-correctable problem with the request parameters."""

    code = "invalid_request"
    status_code = 400


class InvalidKeyword(InvalidRequest):
    """Keyword missing, empty or whitespace-only after sanitization."""

    code = "invalid_keyword"


class InvalidPage(InvalidRequest):
    """Page number or page size outside the accepted range."""

    code = "invalid_page"


class CorpusUnavailable(AnalyzerError):
    """The document store could not be queried."""

    code = "corpus_unavailable"
    status_code = 500


class TransportFailure(AnalyzerError):
    """Client-observed failure: network error, timeout, error status or unparseable body."""

    code = "transport_failure"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
