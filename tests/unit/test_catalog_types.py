# ABOUTME: Unit tests for catalog record types.
# ABOUTME: Tests ShelfStatus codes, SearchCandidate author display, and BookDetails defaults.

from hardshelf.catalog.candidate import ScoredCandidate
from hardshelf.catalog.types import BookDetails, SearchCandidate, ShelfStatus


class TestShelfStatus:
    """Tests for Hardcover status codes."""

    def test_codes(self) -> None:
        """Status values match Hardcover's status_id codes."""
        assert int(ShelfStatus.WANT_TO_READ) == 1
        assert int(ShelfStatus.CURRENTLY_READING) == 2
        assert int(ShelfStatus.READ) == 3


class TestSearchCandidate:
    """Tests for SearchCandidate."""

    def test_author_joins_contributors(self) -> None:
        """The author property joins contributor names."""
        candidate = SearchCandidate(catalog_id=1, title="T", contributor_names=["A", "B"])
        assert candidate.author == "A, B"

    def test_defaults(self) -> None:
        """Contributors default to empty and popularity to unknown."""
        candidate = SearchCandidate(catalog_id=1, title="T")
        assert candidate.contributor_names == []
        assert candidate.popularity_count is None
        assert candidate.author == ""

    def test_book_details_is_a_candidate(self) -> None:
        """Detailed records can be ranked like plain candidates."""
        details = BookDetails(catalog_id=1, title="T")
        assert isinstance(details, SearchCandidate)
        assert details.image_urls == []


class TestScoredCandidate:
    """Tests for ScoredCandidate."""

    def test_holds_candidate_and_score(self) -> None:
        """A scored candidate pairs a candidate with its score."""
        candidate = SearchCandidate(catalog_id=1, title="T")
        scored = ScoredCandidate(candidate=candidate, score=12.5)
        assert scored.candidate is candidate
        assert scored.score == 12.5
