# ABOUTME: Hardcover catalog client: fuzzy book resolution, shelf reads and writes, and bulk sync.
# ABOUTME: Composes the GraphQL transport, response cache, match scorer, identity, and capability probe.

import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from hardshelf.catalog.cache import ResponseCache, cache_key
from hardshelf.catalog.capability import CapabilityCell, OptionalFieldProbe
from hardshelf.catalog.hardcover_parser import (
    extract_hits,
    parse_detail_hits,
    parse_reading_history,
    parse_search_hits,
    parse_shelf_entries,
)
from hardshelf.catalog.http import GraphQLClient, GraphQLError, HardcoverError, NetworkError
from hardshelf.catalog.identity import IdentityExtractor, is_uuid
from hardshelf.catalog.scoring import select_best_match
from hardshelf.catalog.types import (
    BookDetails,
    ReadBook,
    SearchCandidate,
    ShelfEntry,
    ShelfResult,
    ShelfStatus,
)
from hardshelf.core.sync import (
    DEFAULT_PACING_INTERVAL,
    BulkSynchronizer,
    ReadingItem,
    SyncOutcome,
)

logger = logging.getLogger(__name__)

_SEARCH_PER_PAGE = 15
_MAX_SHELF_LIMIT = 200

SEARCH_QUERY = """
query SearchBooks($searchQuery: String!, $perPage: Int!) {
  search(query: $searchQuery, query_type: "Book", per_page: $perPage) {
    results
  }
}
"""

SHELF_QUERY = """
query ShelfByStatus($userId: uuid!, $statusId: Int!, $limit: Int!) {
  user_books(
    where: { status_id: { _eq: $statusId }, user_id: { _eq: $userId } }
    order_by: { created_at: desc }
    limit: $limit
  ) {
    book_id
    book {
      id
      title
      contributions {
        author {
          name
        }
      }
    }
  }
}
"""

REMOVE_MUTATION = """
mutation RemoveFromShelf($bookId: Int!, $userId: uuid!, $statusId: Int!) {
  delete_user_book(
    where: {
      book_id: { _eq: $bookId }
      user_id: { _eq: $userId }
      status_id: { _eq: $statusId }
    }
  ) {
    affected_rows
  }
}
"""

READING_HISTORY_QUERY = """
query UserReadBooks($userId: Int!, $limit: Int!) {
  user_books(
    where: { user_id: { _eq: $userId }, status_id: { _eq: 3 } }
    order_by: { updated_at: desc }
    limit: $limit
  ) {
    status_id
    rating
    book {
      id
      title
      description
      release_date
      pages
      image {
        url
      }
      contributions {
        author {
          name
        }
      }
    }
  }
}
"""


def build_add_book_mutation(include_finished_at: bool) -> str:
    """Build the insert_user_book mutation, with or without the finished_at field."""
    finished_at_variable = ", $finishedAt: timestamptz" if include_finished_at else ""
    finished_at_field = "      finished_at: $finishedAt\n" if include_finished_at else ""
    return (
        "mutation AddBook($bookId: Int!, $statusId: Int!, $rating: numeric"
        f"{finished_at_variable}) {{\n"
        "  insert_user_book(\n"
        "    object: {\n"
        "      book_id: $bookId\n"
        "      status_id: $statusId\n"
        "      rating: $rating\n"
        f"{finished_at_field}"
        "    }\n"
        "  ) {\n"
        "    id\n"
        "  }\n"
        "}\n"
    )


class HardcoverClient:
    """Client for a single Hardcover account.

    Lookups are cached per client for an hour and resolved through the
    match scorer. Whether `finished_at` is sent on shelf inserts is decided
    by a capability cell shared with every other client from the same
    factory. Uses dependency-injected GraphQLClient for testability.
    """

    def __init__(
        self,
        http_client: GraphQLClient,
        *,
        identity: IdentityExtractor,
        finished_at_capability: CapabilityCell,
        cache: ResponseCache | None = None,
        pacing_interval: float = DEFAULT_PACING_INTERVAL,
    ) -> None:
        self._http = http_client
        self._identity = identity
        self._finished_at = OptionalFieldProbe(finished_at_capability)
        self._cache = cache if cache is not None else ResponseCache()
        self._pacing_interval = pacing_interval

    @property
    def name(self) -> str:
        return "hardcover"

    def search_book(self, title: str, author: str) -> SearchCandidate | None:
        """Resolve a title and author to the best-matching Hardcover book.

        Searches 'title author' first and falls back to the title alone when
        that finds nothing. GraphQL and network failures are logged and
        reported as None; credential and rate-limit failures propagate.
        """
        return self._resolve("search", title, author, parse_search_hits)

    def get_book_details(self, title: str, author: str) -> BookDetails | None:
        """Like search_book, but returns description, release date, pages, and covers."""
        return self._resolve("details", title, author, parse_detail_hits)

    def add_to_shelf(
        self,
        catalog_id: int,
        status: ShelfStatus,
        rating: float | None = None,
        finished_at: str | None = None,
    ) -> bool:
        """Insert a book onto one of the user's shelves.

        finished_at is only sent while the account is not known to reject
        it; a rejection downgrades the shared capability and the insert is
        retried once without it.

        Returns:
            True on success. Failures are logged and reported as False so
            callers can carry on with other books.
        """
        logger.debug(
            "Adding book %d with status %d, rating %s, finished_at %s",
            catalog_id,
            status,
            rating,
            finished_at,
        )

        def attempt(include_finished_at: bool) -> dict[str, Any]:
            variables: dict[str, Any] = {
                "bookId": catalog_id,
                "statusId": int(status),
                "rating": rating,
            }
            if include_finished_at:
                variables["finishedAt"] = finished_at
            return self._http.execute(build_add_book_mutation(include_finished_at), variables)

        try:
            result = self._finished_at.run(attempt, wants_field=bool(finished_at))
        except HardcoverError as exc:
            logger.warning("Error adding book %d to shelf: %s", catalog_id, exc)
            return False

        logger.info("Added book %d to shelf %s: %s", catalog_id, ShelfStatus(status).name, result)
        return True

    def add_to_want_to_read(self, title: str, author: str) -> ShelfResult:
        """Resolve a book by title and author and put it on the Want to Read shelf."""
        if not title:
            return ShelfResult(success=False, message="Title is required to sync with Hardcover")

        match = self.search_book(title, author)
        if match is None:
            return ShelfResult(success=False, message="Book not found on Hardcover")

        if self.add_to_shelf(match.catalog_id, ShelfStatus.WANT_TO_READ):
            return ShelfResult(success=True, catalog_id=match.catalog_id)
        return ShelfResult(success=False, message="Failed to add book to Hardcover shelf")

    def get_user_identity(self) -> str | None:
        """Return the account id carried in the API token, or None."""
        return self._identity.get_user_id()

    def list_shelf_by_status(
        self, status: ShelfStatus, limit: int = _MAX_SHELF_LIMIT
    ) -> list[ShelfEntry]:
        """Fetch the user's books with a given status, newest first.

        Returns an empty list without querying when the token carries no
        UUID-shaped user id, since filtering on anything else could return
        other users' books.
        """
        user_id = self._usable_user_id()
        if user_id is None:
            return []

        capped = min(max(limit, 1), _MAX_SHELF_LIMIT)
        data = self._http.execute(
            SHELF_QUERY, {"userId": user_id, "statusId": int(status), "limit": capped}
        )
        return parse_shelf_entries(data)

    def remove_from_shelf(
        self, catalog_id: int, status: ShelfStatus = ShelfStatus.WANT_TO_READ
    ) -> bool:
        """Delete a book from one of the user's shelves.

        Returns True only when at least one row was removed.
        """
        user_id = self._usable_user_id()
        if user_id is None:
            logger.info("Cannot remove book %d: user id is unavailable", catalog_id)
            return False

        try:
            data = self._http.execute(
                REMOVE_MUTATION,
                {"bookId": catalog_id, "userId": user_id, "statusId": int(status)},
            )
        except HardcoverError as exc:
            logger.warning("Error removing book %d from shelf: %s", catalog_id, exc)
            return False

        rows = (data.get("delete_user_book") or {}).get("affected_rows") or 0
        if rows == 0:
            logger.info("No shelf entries removed for book %d", catalog_id)
        else:
            logger.info("Removed %d shelf entries for book %d", rows, catalog_id)
        return rows > 0

    def get_reading_history(self, limit: int = 100) -> list[ReadBook]:
        """Fetch the user's finished books, with ratings on the 10-point scale.

        This query filters on the numeric user id, so it returns an empty
        list when the token's id is not numeric or the request fails.
        """
        user_id = self._identity.get_user_id()
        if user_id is None:
            logger.info("Cannot fetch reading history: no user id in token")
            return []
        if not user_id.isdigit():
            logger.info("Cannot fetch reading history: user id is not numeric")
            return []

        try:
            data = self._http.execute(
                READING_HISTORY_QUERY, {"userId": int(user_id), "limit": max(limit, 1)}
            )
        except HardcoverError as exc:
            logger.warning("Error fetching reading history: %s", exc)
            return []

        readings = parse_reading_history(data)
        logger.info("Fetched %d read books from Hardcover", len(readings))
        return readings

    def sync_reading_list(self, items: Iterable[ReadingItem]) -> SyncOutcome:
        """Push read books onto the Read shelf, paced to respect the rate limit."""
        synchronizer = BulkSynchronizer(self.for_sync(), pacing_interval=self._pacing_interval)
        return synchronizer.sync(items)

    def for_sync(self) -> "SyncShelfProvider":
        """A ShelfProvider view of this client for bulk sync.

        Its lookups raise GraphQL and network failures instead of reporting
        them as no match, so a failed item is not counted as not found.
        """
        return SyncShelfProvider(self)

    def close(self) -> None:
        close = getattr(self._http, "close", None)
        if callable(close):
            close()

    def __enter__(self) -> "HardcoverClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _usable_user_id(self) -> str | None:
        user_id = self._identity.get_user_id()
        if user_id is None:
            logger.info("Unable to extract user id from Hardcover token")
            return None
        if not is_uuid(user_id):
            logger.info("Token user id is not a UUID; skipping user-scoped query")
            return None
        return user_id

    def _search_hits(self, title: str, author: str) -> list[dict[str, Any]]:
        """Run the title+author search, falling back to title only on no hits."""
        search_text = f"{title} {author}" if author else title
        hits = extract_hits(
            self._http.execute(
                SEARCH_QUERY, {"searchQuery": search_text, "perPage": _SEARCH_PER_PAGE}
            )
        )
        if not hits and author:
            logger.debug("No results for %r, trying title only", search_text)
            hits = extract_hits(
                self._http.execute(SEARCH_QUERY, {"searchQuery": title, "perPage": _SEARCH_PER_PAGE})
            )
        return hits

    def _resolve(
        self,
        operation: str,
        title: str,
        author: str,
        parse: Callable[[list[dict[str, Any]]], Sequence[Any]],
        *,
        raise_errors: bool = False,
    ) -> Any:
        key = cache_key(operation, title, author)
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key)
            return cached

        try:
            hits = self._search_hits(title, author)
        except (GraphQLError, NetworkError) as exc:
            logger.warning("Lookup failed for title=%s author=%s: %s", title, author, exc)
            if raise_errors:
                raise
            return None

        best = select_best_match(parse(hits), title, author)
        if best is None:
            logger.info("No books found for %r by %r", title, author)
            return None

        logger.debug("Best match for %r: %r", title, best.title)
        self._cache.put(key, best)
        return best


class SyncShelfProvider:
    """ShelfProvider over a HardcoverClient whose lookups raise on failure.

    Shares the client's cache, transport, and capability state; only the
    lookup error policy differs.
    """

    def __init__(self, client: HardcoverClient) -> None:
        self._client = client

    def search_book(self, title: str, author: str) -> SearchCandidate | None:
        """Like HardcoverClient.search_book, but GraphQL and network failures propagate."""
        return self._client._resolve("search", title, author, parse_search_hits, raise_errors=True)

    def add_to_shelf(
        self,
        catalog_id: int,
        status: ShelfStatus,
        rating: float | None = None,
        finished_at: str | None = None,
    ) -> bool:
        return self._client.add_to_shelf(catalog_id, status, rating=rating, finished_at=finished_at)
