"""
Keyword Density Report for Content Analyzer.

This script:
1. Queries the running API for one page of posts
2. Sorts the page client-side
3. Prints the rendered table and pagination state

Usage:
    python analyze_posts.py --keyword seo --sort density --direction desc
"""
import sys
import argparse
import asyncio
import logging
from pathlib import Path

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent))

from models.analysis import SortState
from services.analysis_client import AnalysisClient
from services.client_controller import ClientController, ControllerState, SORT_COLUMNS, TableView
from config import API_BASE_URL, DEFAULT_PER_PAGE, REQUEST_TIMEOUT

# Configure logging
logging.basicConfig(
    level=logging.WARNING,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def format_table(view: TableView) -> str:
    """
    Render a table view as plain text.

    Args:
        view: View produced by the controller

    Returns:
        Multi-line string
    """
    headers = {"title": "Post Title", "word_count": "Word Count", "density": "Keyword Density"}
    markers = {"sort-asc": " ^", "sort-desc": " v"}
    header_cells = [
        headers[column] + markers.get(view.sort_indicators.get(column, ""), "")
        for column in SORT_COLUMNS
    ]

    if view.message is not None:
        body = [[view.message, "", ""]]
    else:
        body = [[row.title, str(row.word_count), row.density] for row in view.rows]

    widths = [
        max([len(header_cells[i])] + [len(line[i]) for line in body])
        for i in range(len(SORT_COLUMNS))
    ]

    lines = [" | ".join(cell.ljust(widths[i]) for i, cell in enumerate(header_cells))]
    lines.append("-+-".join("-" * width for width in widths))
    for line in body:
        lines.append(" | ".join(cell.ljust(widths[i]) for i, cell in enumerate(line)))

    if view.pagination.visible:
        controls = []
        if view.pagination.show_previous:
            controls.append("[Previous]")
        controls.append(view.pagination.label)
        if view.pagination.show_next:
            controls.append("[Next]")
        lines.append("")
        lines.append(" ".join(controls))

    return "\n".join(lines)


async def run(args: argparse.Namespace) -> int:
    """Drive one controller load and print the result; returns the exit code."""
    client = AnalysisClient(base_url=args.api_url, timeout=args.timeout)
    controller = ClientController(
        client,
        per_page=args.per_page,
        sort=SortState(column=args.sort, direction=args.direction),
        page=args.page
    )

    try:
        await controller.start(args.keyword)
    finally:
        await controller.close()

    print(format_table(controller.view))

    if controller.state == ControllerState.ERROR:
        return 1
    if controller.state == ControllerState.IDLE:
        return 2
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Word count and keyword density per published post")
    parser.add_argument("--keyword", default="", help="Keyword to measure")
    parser.add_argument("--page", type=int, default=1, help="Page number (default: 1)")
    parser.add_argument("--per-page", type=int, default=DEFAULT_PER_PAGE, help="Posts per page")
    parser.add_argument("--sort", choices=SORT_COLUMNS, default="title", help="Sort column")
    parser.add_argument("--direction", choices=("asc", "desc"), default="asc", help="Sort direction")
    parser.add_argument("--api-url", default=API_BASE_URL, help="Content Analyzer API root")
    parser.add_argument("--timeout", type=float, default=REQUEST_TIMEOUT, help="Request timeout in seconds")
    args = parser.parse_args()

    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
