"""Text metrics for keyword density analysis."""
import math
import re
from bs4 import BeautifulSoup

SUBSTRING = "substring"
WORD = "word"
MATCH_MODES = (SUBSTRING, WORD)

# Control characters, including tabs and line breaks
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")
_PERCENT_OCTETS = re.compile(r"%[a-fA-F0-9]{2}")
_WHITESPACE = re.compile(r"\s+")

# Elements that start a new line when rendered; inline tags join their text
BLOCK_TAGS = [
    "address", "article", "aside", "blockquote", "br", "dd", "div", "dl", "dt",
    "figcaption", "figure", "footer", "h1", "h2", "h3", "h4", "h5", "h6",
    "header", "hr", "li", "main", "nav", "ol", "p", "pre", "section", "table",
    "tbody", "td", "tfoot", "th", "thead", "tr", "ul",
]


def strip_markup(html: str) -> str:
    """
    Reduce HTML to plain text.

    Script and style contents are dropped entirely. Inline tags are removed
    without a separator ("te<b>st</b>" reads "test"); block-level tags and
    <br> are bounded by line breaks so adjacent paragraphs do not merge words.

    Args:
        html: Raw post body

    Returns:
        Plain text
    """
    if not html:
        return ""

    soup = BeautifulSoup(html, "html.parser")
    for element in soup(["script", "style"]):
        element.decompose()

    for element in soup.find_all(BLOCK_TAGS):
        element.insert_before("\n")
        element.insert_after("\n")

    return soup.get_text()


def count_words(text: str) -> int:
    """Count whitespace-delimited tokens."""
    return len(text.split())


def count_keyword(text: str, keyword: str, mode: str = SUBSTRING) -> int:
    """
    Count case-insensitive keyword occurrences in text.

    In substring mode occurrences are non-overlapping and may sit inside a
    larger word ("cat" matches "category"). Word mode only counts whole words.

    Args:
        text: Plain text to search
        keyword: Keyword to count
        mode: "substring" or "word"

    Returns:
        Number of occurrences
    """
    if not keyword:
        return 0

    if mode == WORD:
        pattern = r"(?<!\w)" + re.escape(keyword) + r"(?!\w)"
        return len(re.findall(pattern, text, flags=re.IGNORECASE))

    return text.lower().count(keyword.lower())


def keyword_density(keyword_count: int, word_count: int) -> float:
    """
    Keyword occurrences as a percentage of words.

    Clamped to 100 since substring matches can outnumber words. Rounded to
    two decimals with round(), i.e. half-even on the binary value.
    """
    if word_count <= 0:
        return 0.0

    density = min(keyword_count / word_count * 100, 100.0)
    return round(density, 2)


def page_count(total: int, per_page: int) -> int:
    """Number of pages needed to show total items, per_page at a time."""
    if total <= 0:
        return 0
    return math.ceil(total / per_page)


def sanitize_keyword(raw: str) -> str:
    """
    Clean a keyword received from a query string.

    Strips markup, percent-encoded octets and control characters, collapses
    runs of whitespace and trims the ends.
    """
    if not raw:
        return ""

    text = BeautifulSoup(raw, "html.parser").get_text()
    text = _PERCENT_OCTETS.sub("", text)
    text = _CONTROL_CHARS.sub(" ", text)
    return _WHITESPACE.sub(" ", text).strip()
