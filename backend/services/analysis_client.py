"""Async HTTP client for the /analyze endpoint."""
import logging
from typing import Any, Dict, Optional
import httpx

from models.analysis import AnalysisResult, PageResult
from services.errors import TransportFailure
from config import API_BASE_URL, REQUEST_TIMEOUT, NONCE_HEADER

logger = logging.getLogger(__name__)

GENERIC_ERROR = "Error loading data"
INVALID_RESPONSE = "Invalid response from server"
TIMEOUT_ERROR = "Request timed out"


class AnalysisClient:
    """Fetches analysis pages from the API and maps every failure to TransportFailure."""

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
        nonce: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize the client.

        Args:
            base_url: API root, e.g. http://localhost:8000
            timeout: Per-request timeout in seconds
            nonce: Optional request-authenticity token sent with every call
            transport: Optional httpx transport (used to stub the network)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.nonce = nonce
        self.transport = transport

    async def analyze(self, keyword: str, page: int = 1, per_page: int = 10) -> PageResult:
        """
        Request one page of analysis results.

        Args:
            keyword: Keyword to analyze
            page: 1-based page number
            per_page: Page size

        Returns:
            PageResult parsed from the response body

        Raises:
            TransportFailure: On network errors, timeouts, error statuses,
                bodies flagged with "error" or bodies that cannot be parsed
        """
        headers = {"Accept": "application/json"}
        if self.nonce:
            headers[NONCE_HEADER] = self.nonce

        params = {"keyword": keyword, "page": page, "per_page": per_page}

        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self.transport
            ) as client:
                response = await client.get("/analyze", params=params, headers=headers)
        except httpx.TimeoutException as e:
            logger.error(f"Analysis request timed out after {self.timeout}s: {e}")
            raise TransportFailure(TIMEOUT_ERROR) from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error(f"Analysis request failed: {e}")
            raise TransportFailure(GENERIC_ERROR) from e

        if response.is_error:
            logger.error(f"Analysis request returned {response.status_code}: {response.text[:200]}")
            raise TransportFailure(self._error_message(response), status_code=response.status_code)

        try:
            data = response.json()
        except ValueError as e:
            raise TransportFailure(INVALID_RESPONSE, status_code=response.status_code) from e

        if not isinstance(data, dict):
            raise TransportFailure(INVALID_RESPONSE, status_code=response.status_code)

        if data.get("error"):
            raise TransportFailure(str(data.get("message") or GENERIC_ERROR), status_code=response.status_code)

        try:
            return self._parse_page(data)
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Malformed analysis response: {e}")
            raise TransportFailure(INVALID_RESPONSE, status_code=response.status_code) from e

    @staticmethod
    def _error_message(response: httpx.Response) -> str:
        """Best-effort extraction of the server's message from an error response."""
        try:
            body = response.json()
        except ValueError:
            return INVALID_RESPONSE

        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
        return GENERIC_ERROR

    @staticmethod
    def _parse_page(data: Dict[str, Any]) -> PageResult:
        posts = [
            AnalysisResult(
                id=post["id"],
                title=str(post["title"]),
                word_count=int(post["word_count"]),
                keyword_density=float(post["keyword_density"]),
                url=str(post["url"])
            )
            for post in data.get("posts") or []
        ]
        return PageResult(posts=posts, total=int(data["total"]), pages=int(data["pages"]))
