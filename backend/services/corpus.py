"""Corpus backends that hand page windows of published posts to the analysis engine."""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Protocol, Union
from supabase import create_client, Client

from models.document import Document, CorpusPage
from services.errors import CorpusUnavailable
from config import SUPABASE_URL, SUPABASE_KEY, POSTS_TABLE, SITE_URL

logger = logging.getLogger(__name__)

PUBLISH_STATUS = "publish"


class Corpus(Protocol):
    """Read-only source of published documents."""

    def fetch_page(self, page: int, per_page: int) -> CorpusPage:
        ...


def default_permalink(post_id: Any, site_url: str = SITE_URL) -> str:
    """Query-string permalink used when the store has none for a post."""
    return f"{site_url.rstrip('/')}/?p={post_id}"


def document_from_record(record: Dict[str, Any], site_url: str = SITE_URL) -> Document:
    """Build a Document from a posts row or JSON object."""
    post_id = record["id"]
    return Document(
        id=post_id,
        title=record.get("title") or "",
        body=record.get("content") or "",
        permalink=record.get("permalink") or default_permalink(post_id, site_url)
    )


class InMemoryCorpus:
    """List-backed corpus keeping only published posts, in the order given."""

    def __init__(self, records: Iterable[Dict[str, Any]] = (), site_url: str = SITE_URL):
        """
        Initialize the corpus.

        Args:
            records: Post objects with id, title, content and optionally
                status and permalink. A missing status counts as published.
            site_url: Base URL for generated permalinks
        """
        self.documents: List[Document] = [
            document_from_record(record, site_url)
            for record in records
            if record.get("status", PUBLISH_STATUS) == PUBLISH_STATUS
        ]
        logger.info(f"Initialized InMemoryCorpus with {len(self.documents)} published posts")

    @classmethod
    def from_json_file(cls, path: Union[str, Path], site_url: str = SITE_URL) -> "InMemoryCorpus":
        """
        Load posts from a JSON file holding a list of post objects.

        Raises:
            CorpusUnavailable: If the file is missing or not valid JSON
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                records = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load corpus file {path}: {e}")
            raise CorpusUnavailable(f"Corpus file could not be loaded: {path}") from e

        if not isinstance(records, list):
            raise CorpusUnavailable(f"Corpus file must contain a list of posts: {path}")

        return cls(records, site_url=site_url)

    def fetch_page(self, page: int, per_page: int) -> CorpusPage:
        start = (page - 1) * per_page
        return CorpusPage(
            documents=self.documents[start:start + per_page],
            total=len(self.documents)
        )


class SupabaseCorpus:
    """Published posts read from a Supabase (PostgreSQL) table."""

    def __init__(
        self,
        supabase_url: Optional[str] = SUPABASE_URL,
        supabase_key: Optional[str] = SUPABASE_KEY,
        table_name: str = POSTS_TABLE,
        site_url: str = SITE_URL
    ):
        """
        Initialize the corpus with a Supabase client.

        Args:
            supabase_url: Supabase project URL
            supabase_key: Supabase API key
            table_name: Table holding the posts
            site_url: Base URL for generated permalinks

        Raises:
            ValueError: If Supabase credentials are missing
        """
        if not supabase_url or not supabase_key:
            raise ValueError("SUPABASE_URL and SUPABASE_KEY environment variables are required")

        self.table_name = table_name
        self.site_url = site_url
        self.client: Client = create_client(supabase_url, supabase_key)

        logger.info(f"Initialized SupabaseCorpus with table: {table_name}")

    def fetch_page(self, page: int, per_page: int) -> CorpusPage:
        """
        Fetch one page window of published posts, newest first.

        Args:
            page: 1-based page number
            per_page: Page size

        Returns:
            CorpusPage with the window's documents and the total published count

        Raises:
            CorpusUnavailable: If the query fails
        """
        start = (page - 1) * per_page
        end = start + per_page - 1  # range() is inclusive

        try:
            response = (
                self.client.table(self.table_name)
                .select("id,title,content,permalink", count="exact")
                .eq("status", PUBLISH_STATUS)
                .order("published_at", desc=True)
                .range(start, end)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to query {self.table_name} (page={page}, per_page={per_page}): {e}")
            raise CorpusUnavailable("Unable to load posts") from e

        rows = response.data or []
        documents = [document_from_record(row, self.site_url) for row in rows]
        total = response.count if response.count is not None else len(documents)

        logger.debug(f"Fetched {len(documents)} posts from {self.table_name} (total: {total})")
        return CorpusPage(documents=documents, total=total)
