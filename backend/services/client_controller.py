"""
Client controller for the content analysis table.

Owns keyword input, the page cursor and the sort state, debounces keyword
edits, issues analysis requests and renders the results into a TableView.
The controller runs on a single asyncio event loop; the hosting
application constructs it, calls start() and eventually close().
"""
import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Protocol, Set

from models.analysis import AnalysisResult, PageResult, SortState
from services.errors import TransportFailure
from config import DEBOUNCE_SECONDS, DEFAULT_PER_PAGE, RESET_PAGE_ON_KEYWORD_CHANGE

logger = logging.getLogger(__name__)

SORT_COLUMNS = ("title", "word_count", "density")
ASC = "asc"
DESC = "desc"

PROMPT_MESSAGE = "Please enter a keyword"
LOADING_MESSAGE = "Loading..."
EMPTY_MESSAGE = "No posts found"
GENERIC_ERROR = "Error loading data"


class AnalysisTransport(Protocol):
    async def analyze(self, keyword: str, page: int = 1, per_page: int = 10) -> PageResult:
        ...


class ControllerState(str, Enum):
    """Lifecycle of the table between requests."""
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    ERROR = "error"


@dataclass
class TableRow:
    """One rendered result row."""
    title: str
    url: str
    word_count: int
    density: str  # Pre-formatted for display (e.g., "33.33%")


@dataclass
class PaginationView:
    """Pagination controls; nothing is rendered when visible is False."""
    visible: bool = False
    show_previous: bool = False
    show_next: bool = False
    label: str = ""


@dataclass
class TableView:
    """Everything needed to draw the table: rows or a single message row."""
    rows: List[TableRow] = field(default_factory=list)
    message: Optional[str] = None
    pagination: PaginationView = field(default_factory=PaginationView)
    sort_indicators: Dict[str, str] = field(default_factory=dict)


SORT_KEYS = {
    "title": lambda post: post.title.casefold(),
    "word_count": lambda post: post.word_count,
    "density": lambda post: post.keyword_density,
}


def sort_posts(posts: List[AnalysisResult], sort: SortState) -> List[AnalysisResult]:
    """
    Stable sort of a page of results.

    Titles compare case-insensitively, word counts and densities numerically.
    Descending order reverses the comparison; equal items keep their order.
    """
    key = SORT_KEYS.get(sort.column)
    if key is None:
        return list(posts)

    return sorted(posts, key=key, reverse=sort.direction == DESC)


class ClientController:
    """State machine over IDLE, LOADING, LOADED and ERROR driving the results table."""

    def __init__(
        self,
        client: AnalysisTransport,
        per_page: int = DEFAULT_PER_PAGE,
        debounce_seconds: float = DEBOUNCE_SECONDS,
        reset_page_on_keyword_change: bool = RESET_PAGE_ON_KEYWORD_CHANGE,
        sort: Optional[SortState] = None,
        page: int = 1
    ):
        """
        Initialize the controller.

        Args:
            client: Transport with an async analyze(keyword, page, per_page)
            per_page: Page size requested from the server
            debounce_seconds: Quiet period after the last keystroke
            reset_page_on_keyword_change: Go back to page 1 when the keyword
                is edited; False keeps the current page
            sort: Initial sort state (title ascending by default)
            page: Initial page cursor
        """
        self.client = client
        self.per_page = per_page
        self.debounce_seconds = debounce_seconds
        self.reset_page_on_keyword_change = reset_page_on_keyword_change

        self.state = ControllerState.IDLE
        self.keyword = ""
        self.current_page = max(page, 1)
        self.total_pages = 0
        self.sort = sort or SortState()
        self.view = TableView()

        self._sequence = 0
        self._debounce_task: Optional[asyncio.Task] = None
        self._load_tasks: Set[asyncio.Task] = set()

    async def start(self, initial_keyword: str = "") -> None:
        """Initial render: load right away when a keyword is present, else prompt."""
        self.keyword = initial_keyword or ""
        self._apply_sort_indicators()
        await self.load()

    def on_keyword_input(self, value: str) -> None:
        """
        Record a keystroke and (re)start the debounce timer.

        Only the last keystroke of a burst fires a request, once the quiet
        period has elapsed. Must be called from the running event loop.
        """
        if value != self.keyword and self.reset_page_on_keyword_change:
            self.current_page = 1
        self.keyword = value

        if self._debounce_task and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = asyncio.ensure_future(self._debounced_load())

    async def on_sort_click(self, column: str) -> None:
        """Toggle direction on the active column, else select column ascending; then reload."""
        if column not in SORT_COLUMNS:
            raise ValueError(f"Unknown sort column: {column}")

        if self.sort.column == column:
            self.sort.direction = DESC if self.sort.direction == ASC else ASC
        else:
            self.sort = SortState(column=column, direction=ASC)

        self._apply_sort_indicators()
        await self.load()

    async def on_previous_page(self) -> None:
        if not self.view.pagination.show_previous:
            return
        self.current_page -= 1
        await self.load()

    async def on_next_page(self) -> None:
        if not self.view.pagination.show_next:
            return
        self.current_page += 1
        await self.load()

    async def load(self) -> None:
        """
        Request the current keyword/page and render the outcome.

        Every request takes a new sequence number; a response that arrives
        after a newer request was issued is discarded unrendered.
        """
        self._sequence += 1
        sequence = self._sequence

        keyword = self.keyword.strip()
        if not keyword:
            self.state = ControllerState.IDLE
            self._render_message(PROMPT_MESSAGE)
            return

        self.state = ControllerState.LOADING
        self._render_message(LOADING_MESSAGE)

        try:
            result = await self.client.analyze(keyword, page=self.current_page, per_page=self.per_page)
        except TransportFailure as e:
            if sequence != self._sequence:
                logger.debug(f"Discarding stale failure for request {sequence}")
                return
            logger.error(f"Analysis request failed: {e.message}")
            self.state = ControllerState.ERROR
            self._render_message(f"Error: {e.message}")
            return
        except Exception as e:
            if sequence != self._sequence:
                logger.debug(f"Discarding stale failure for request {sequence}")
                return
            logger.error(f"Analysis request failed unexpectedly: {e}", exc_info=True)
            self.state = ControllerState.ERROR
            self._render_message(f"Error: {GENERIC_ERROR}")
            return

        if sequence != self._sequence:
            logger.debug(f"Discarding stale response for request {sequence} (latest: {self._sequence})")
            return

        self.state = ControllerState.LOADED
        self._render_result(result)

    async def drain(self) -> None:
        """Wait until the debounce timer has fired and all loads have finished."""
        while True:
            pending = [task for task in self._load_tasks if not task.done()]
            if self._debounce_task and not self._debounce_task.done():
                pending.append(self._debounce_task)
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    async def close(self) -> None:
        """Cancel the pending debounce timer and any in-flight loads."""
        tasks = list(self._load_tasks)
        if self._debounce_task:
            tasks.append(self._debounce_task)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._load_tasks.clear()
        self._debounce_task = None

    async def _debounced_load(self) -> None:
        await asyncio.sleep(self.debounce_seconds)
        # Separate task so a later keystroke cancels only the timer, never a request in flight
        task = asyncio.ensure_future(self.load())
        self._load_tasks.add(task)
        task.add_done_callback(self._load_tasks.discard)

    def _render_message(self, message: str) -> None:
        self.view = TableView(message=message)
        self._apply_sort_indicators()

    def _render_result(self, result: PageResult) -> None:
        self.total_pages = result.pages

        if result.posts:
            rows = [
                TableRow(
                    title=post.title,
                    url=post.url,
                    word_count=post.word_count,
                    density=f"{post.keyword_density:.2f}%"
                )
                for post in sort_posts(result.posts, self.sort)
            ]
            self.view = TableView(rows=rows)
        else:
            self.view = TableView(message=EMPTY_MESSAGE)

        self.view.pagination = self._pagination()
        self._apply_sort_indicators()

    def _pagination(self) -> PaginationView:
        if self.total_pages <= 1:
            return PaginationView()
        return PaginationView(
            visible=True,
            show_previous=self.current_page > 1,
            show_next=self.current_page < self.total_pages,
            label=f"Page {self.current_page} of {self.total_pages}"
        )

    def _apply_sort_indicators(self) -> None:
        self.view.sort_indicators = {
            column: f"sort-{self.sort.direction}" if column == self.sort.column else ""
            for column in SORT_COLUMNS
        }
