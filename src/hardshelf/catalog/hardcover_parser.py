# ABOUTME: Parsing functions for Hardcover GraphQL responses.
# ABOUTME: Converts search hits and user_books rows into typed catalog records.

import logging
from typing import Any

from hardshelf.catalog.types import BookDetails, ReadBook, SearchCandidate, ShelfEntry

logger = logging.getLogger(__name__)


def extract_hits(data: dict[str, Any]) -> list[dict[str, Any]]:
    """Pull the hit list out of a `search` response, tolerating missing levels."""
    search = data.get("search") or {}
    results = search.get("results") or {}
    if not isinstance(results, dict):
        return []
    return results.get("hits") or []


def _parse_id(value: Any) -> int | None:
    """Hardcover returns ids as strings in search documents and ints elsewhere."""
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def parse_contributor_names(contributions: list[dict[str, Any]] | None) -> list[str]:
    """Extract author names from a `contributions` list, skipping nameless entries."""
    names: list[str] = []
    for contribution in contributions or []:
        author = contribution.get("author") or {}
        name = author.get("name")
        if name:
            names.append(name)
    return names


def _parse_image_urls(document: dict[str, Any]) -> list[str]:
    """Collect cover URLs from either a single `image` or an `images` list.

    Entries may be plain URL strings or objects with a `url` key.
    """
    image = document.get("image")
    raw = [image] if image else (document.get("images") or [])
    urls: list[str] = []
    for entry in raw:
        if isinstance(entry, str):
            urls.append(entry)
        elif isinstance(entry, dict) and entry.get("url"):
            urls.append(entry["url"])
    return urls


def parse_search_hits(hits: list[dict[str, Any]]) -> list[SearchCandidate]:
    """Parse search hits into candidates, dropping hits without a numeric id."""
    candidates: list[SearchCandidate] = []
    for hit in hits:
        document = hit.get("document") or {}
        catalog_id = _parse_id(document.get("id"))
        if catalog_id is None:
            logger.debug("Skipping search hit without numeric id: %r", document.get("id"))
            continue
        candidates.append(
            SearchCandidate(
                catalog_id=catalog_id,
                title=document.get("title") or "",
                contributor_names=parse_contributor_names(document.get("contributions")),
                popularity_count=document.get("users_count"),
            )
        )
    return candidates


def parse_detail_hits(hits: list[dict[str, Any]]) -> list[BookDetails]:
    """Parse search hits into detailed records for a detail lookup."""
    details: list[BookDetails] = []
    for hit in hits:
        document = hit.get("document") or {}
        catalog_id = _parse_id(document.get("id"))
        if catalog_id is None:
            continue
        details.append(
            BookDetails(
                catalog_id=catalog_id,
                title=document.get("title") or "",
                contributor_names=parse_contributor_names(document.get("contributions")),
                popularity_count=document.get("users_count"),
                slug=document.get("slug"),
                description=document.get("description"),
                release_date=document.get("release_date"),
                pages=document.get("pages"),
                image_urls=_parse_image_urls(document),
                rating=document.get("rating"),
            )
        )
    return details


def parse_shelf_entries(data: dict[str, Any]) -> list[ShelfEntry]:
    """Parse a `user_books` response into shelf entries.

    Prefers the nested book id and falls back to the row's book_id.
    """
    entries: list[ShelfEntry] = []
    for item in data.get("user_books") or []:
        book = item.get("book") or {}
        catalog_id = _parse_id(book.get("id"))
        if catalog_id is None:
            catalog_id = _parse_id(item.get("book_id"))
        if catalog_id is None:
            continue
        authors = parse_contributor_names(book.get("contributions"))
        entries.append(
            ShelfEntry(
                catalog_id=catalog_id,
                title=book.get("title") or "Unknown Title",
                author=authors[0] if authors else None,
            )
        )
    return entries


def parse_reading_history(data: dict[str, Any]) -> list[ReadBook]:
    """Parse finished `user_books` rows, converting 5-star ratings to the 10-point scale."""
    readings: list[ReadBook] = []
    for item in data.get("user_books") or []:
        book = item.get("book")
        if not book:
            continue
        catalog_id = _parse_id(book.get("id"))
        if catalog_id is None:
            continue
        authors = parse_contributor_names(book.get("contributions"))
        image = book.get("image") or {}
        rating = item.get("rating")
        readings.append(
            ReadBook(
                catalog_id=catalog_id,
                title=book.get("title") or "Unknown Title",
                author=authors[0] if authors else "Unknown Author",
                description=book.get("description"),
                release_date=book.get("release_date"),
                cover_url=image.get("url") if isinstance(image, dict) else None,
                rating=float(rating) * 2 if rating else None,
            )
        )
    return readings
