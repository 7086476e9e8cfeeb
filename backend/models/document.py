"""Document data models."""
from dataclasses import dataclass
from typing import Any, List


@dataclass
class Document:
    """A published post as handed over by the corpus."""
    id: Any
    title: str
    body: str  # May still contain markup
    permalink: str


@dataclass
class CorpusPage:
    """One page window of the corpus plus the total published count."""
    documents: List[Document]
    total: int
