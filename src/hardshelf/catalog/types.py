# ABOUTME: Core data structures for Hardcover catalog records and shelf state.
# ABOUTME: SearchCandidate is the interchange format between parsing, scoring, and shelving.

from dataclasses import dataclass, field
from enum import IntEnum


class ShelfStatus(IntEnum):
    """Hardcover's reading-state codes for a user book."""

    WANT_TO_READ = 1
    CURRENTLY_READING = 2
    READ = 3


@dataclass
class SearchCandidate:
    """A single book from a Hardcover search hit, before ranking.

    Contributor names keep the order Hardcover returns them in; the first
    is treated as the primary author for display.
    """

    catalog_id: int
    title: str
    contributor_names: list[str] = field(default_factory=list)
    popularity_count: int | None = None

    @property
    def author(self) -> str:
        """Convenience property: joined contributor string for display."""
        return ", ".join(self.contributor_names)


@dataclass
class BookDetails(SearchCandidate):
    """A search candidate enriched with the descriptive fields of a detail lookup."""

    slug: str | None = None
    description: str | None = None
    release_date: str | None = None
    pages: int | None = None
    image_urls: list[str] = field(default_factory=list)
    rating: float | None = None


@dataclass
class ShelfEntry:
    """A book on one of the user's shelves."""

    catalog_id: int
    title: str
    author: str | None = None


@dataclass
class ReadBook:
    """A finished book from the user's Hardcover reading history.

    Rating is on the 10-point scale (Hardcover's 5-star value doubled).
    """

    catalog_id: int
    title: str
    author: str
    description: str | None = None
    release_date: str | None = None
    cover_url: str | None = None
    rating: float | None = None


@dataclass
class ShelfResult:
    """Outcome of shelving a book identified by title and author."""

    success: bool
    message: str | None = None
    catalog_id: int | None = None
