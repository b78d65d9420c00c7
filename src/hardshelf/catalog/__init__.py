# ABOUTME: Catalog package for Hardcover lookups, matching, and shelf records.
# ABOUTME: Exports the core record types and the ShelfProvider protocol.

from hardshelf.catalog.candidate import ScoredCandidate
from hardshelf.catalog.provider import ShelfProvider
from hardshelf.catalog.types import (
    BookDetails,
    ReadBook,
    SearchCandidate,
    ShelfEntry,
    ShelfResult,
    ShelfStatus,
)

__all__ = [
    "BookDetails",
    "ReadBook",
    "ScoredCandidate",
    "SearchCandidate",
    "ShelfEntry",
    "ShelfProvider",
    "ShelfResult",
    "ShelfStatus",
]
