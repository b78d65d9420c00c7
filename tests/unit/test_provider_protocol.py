# ABOUTME: Unit tests for the ShelfProvider protocol.
# ABOUTME: Verifies runtime structural checks against conforming and non-conforming classes.

from hardshelf.catalog.provider import ShelfProvider
from hardshelf.catalog.types import SearchCandidate, ShelfStatus


class CompleteProvider:
    """Implements both protocol methods."""

    def search_book(self, title: str, author: str) -> SearchCandidate | None:
        return None

    def add_to_shelf(
        self,
        catalog_id: int,
        status: ShelfStatus,
        rating: float | None = None,
        finished_at: str | None = None,
    ) -> bool:
        return True


class SearchOnlyProvider:
    """Implements only search_book."""

    def search_book(self, title: str, author: str) -> SearchCandidate | None:
        return None


class TestShelfProviderProtocol:
    """Tests for ShelfProvider structural typing."""

    def test_complete_provider_conforms(self) -> None:
        """A class with both methods satisfies the protocol."""
        assert isinstance(CompleteProvider(), ShelfProvider)

    def test_missing_method_does_not_conform(self) -> None:
        """A class missing add_to_shelf does not satisfy the protocol."""
        assert not isinstance(SearchOnlyProvider(), ShelfProvider)
