# ABOUTME: Unit tests for the bulk synchronizer and its rating and date conversions.
# ABOUTME: Tests per-item isolation, outcome counts, input ordering, and fixed pacing.

from typing import Any

import pytest

from hardshelf.catalog.types import SearchCandidate, ShelfStatus
from hardshelf.core.sync import (
    ADD_FAILED_REASON,
    NO_TITLE_REASON,
    NOT_FOUND_REASON,
    BulkSynchronizer,
    ReadingItem,
    SyncItemResult,
    convert_rating,
    normalize_date,
)


class FakeShelfProvider:
    """Fake ShelfProvider with per-title behavior."""

    def __init__(
        self,
        *,
        missing: set[str] | None = None,
        explode: set[str] | None = None,
        reject: set[str] | None = None,
    ) -> None:
        self._missing = missing or set()
        self._explode = explode or set()
        self._reject = reject or set()
        self._ids: dict[str, int] = {}
        self.searches: list[tuple[str, str]] = []
        self.added: list[dict[str, Any]] = []

    def search_book(self, title: str, author: str) -> SearchCandidate | None:
        self.searches.append((title, author))
        if title in self._explode:
            raise RuntimeError(f"boom: {title}")
        if title in self._missing:
            return None
        catalog_id = self._ids.setdefault(title, len(self._ids) + 1)
        return SearchCandidate(catalog_id=catalog_id, title=title, contributor_names=[author])

    def add_to_shelf(
        self,
        catalog_id: int,
        status: ShelfStatus,
        rating: float | None = None,
        finished_at: str | None = None,
    ) -> bool:
        self.added.append(
            {"catalog_id": catalog_id, "status": status, "rating": rating, "finished_at": finished_at}
        )
        return not any(self._ids.get(title) == catalog_id for title in self._reject)


class TestConvertRating:
    """Tests for 10-point to 5-point rating conversion."""

    @pytest.mark.parametrize(
        ("rating", "expected"),
        [
            (10.0, 5.0),
            (8.0, 4.0),
            (7.0, 3.5),
            (9.0, 4.5),
            (6.2, 3.0),
            (5.0, 5.0),
            (4.5, 4.5),
            (0.1, 0.5),
        ],
    )
    def test_converts(self, rating: float, expected: float) -> None:
        """Ratings are halved above 5, rounded to half steps, and clamped."""
        assert convert_rating(rating) == expected

    def test_none_and_non_positive(self) -> None:
        """Missing, zero, and negative ratings mean no rating."""
        assert convert_rating(None) is None
        assert convert_rating(0) is None
        assert convert_rating(-3) is None

    def test_out_of_range_clamped(self) -> None:
        """Ratings above 10 are clamped to five stars."""
        assert convert_rating(14.0) == 5.0


class TestNormalizeDate:
    """Tests for date normalization to ISO-8601 UTC."""

    @pytest.mark.parametrize(
        "value",
        ["2023-01-05", "2023/01/05", "01/05/2023", "2023-01-05T00:00:00", "2023-01-05T00:00:00Z"],
    )
    def test_formats(self, value: str) -> None:
        """Each supported format normalizes to the same UTC timestamp."""
        assert normalize_date(value) == "2023-01-05T00:00:00+00:00"

    def test_offset_converted_to_utc(self) -> None:
        """Datetimes with an offset are converted to UTC."""
        assert normalize_date("2023-01-05T02:00:00+02:00") == "2023-01-05T00:00:00+00:00"

    def test_surrounding_whitespace(self) -> None:
        """Whitespace around the value is ignored."""
        assert normalize_date("  2023-01-05 ") == "2023-01-05T00:00:00+00:00"

    @pytest.mark.parametrize(
        "value",
        [None, "", "   ", "yesterday", "2023-13-45", "0001-01-01T00:00:00+05:00"],
    )
    def test_unusable_values(self, value: str | None) -> None:
        """Empty and unparseable inputs yield None."""
        assert normalize_date(value) is None


class TestBulkSynchronizer:
    """Tests for the paced, failure-isolated sync loop."""

    def test_all_successful(self, recorded_sleeps: list[float]) -> None:
        """Every resolved and shelved item counts as successful."""
        provider = FakeShelfProvider()
        items = [ReadingItem("A", "X"), ReadingItem("B", "Y")]

        outcome = BulkSynchronizer(provider, pacing_interval=3.0).sync(items)

        assert outcome.successful == 2
        assert outcome.failed == 0
        assert outcome.not_found == 0
        assert all(detail.success for detail in outcome.details)

    def test_exception_for_one_item_does_not_abort(self, recorded_sleeps: list[float]) -> None:
        """An exception on item k is recorded and the remaining items still run."""
        provider = FakeShelfProvider(explode={"B"}, missing={"C"})
        items = [
            ReadingItem("A", "X"),
            ReadingItem("B", "Y"),
            ReadingItem("C", "Z"),
            ReadingItem("D", "W"),
        ]

        outcome = BulkSynchronizer(provider).sync(items)

        assert outcome.successful == 2
        assert outcome.failed == 1
        assert outcome.not_found == 1
        assert outcome.total == len(items)
        assert [d.title for d in outcome.details] == ["A", "B", "C", "D"]
        assert outcome.details[1].reason == "boom: B"
        assert outcome.details[2].reason == NOT_FOUND_REASON
        assert [title for title, _ in provider.searches] == ["A", "B", "C", "D"]

    def test_add_failure_counts_as_failed(self, recorded_sleeps: list[float]) -> None:
        """A provider that declines the insert records a failure."""
        provider = FakeShelfProvider(reject={"A"})

        outcome = BulkSynchronizer(provider).sync([ReadingItem("A", "X")])

        assert outcome.failed == 1
        assert outcome.details[0].reason == ADD_FAILED_REASON

    def test_empty_title_fails_without_search(self, recorded_sleeps: list[float]) -> None:
        """A blank title is a failure and is never searched."""
        provider = FakeShelfProvider()

        outcome = BulkSynchronizer(provider).sync([ReadingItem("  ", "X")])

        assert outcome.failed == 1
        assert outcome.details[0].reason == NO_TITLE_REASON
        assert provider.searches == []

    def test_pacing_after_every_item(self, recorded_sleeps: list[float]) -> None:
        """The pacing pause follows every item, whatever its outcome."""
        provider = FakeShelfProvider(explode={"B"}, missing={"C"})
        items = [ReadingItem(t, "X") for t in ("A", "B", "C")]

        BulkSynchronizer(provider, pacing_interval=3.0).sync(items)

        assert recorded_sleeps == [3.0, 3.0, 3.0]

    def test_default_pacing_interval(self, recorded_sleeps: list[float]) -> None:
        """The default pause is three seconds."""
        BulkSynchronizer(FakeShelfProvider()).sync([ReadingItem("A", "X")])
        assert recorded_sleeps == [3.0]

    def test_rating_and_date_are_converted(self, recorded_sleeps: list[float]) -> None:
        """Ratings are rescaled and dates normalized before shelving."""
        provider = FakeShelfProvider()

        BulkSynchronizer(provider).sync([ReadingItem("A", "X", rating=7.0, date_read="2023/01/05")])

        added = provider.added[0]
        assert added["status"] is ShelfStatus.READ
        assert added["rating"] == 3.5
        assert added["finished_at"] == "2023-01-05T00:00:00+00:00"

    def test_custom_status(self, recorded_sleeps: list[float]) -> None:
        """The target shelf is configurable."""
        provider = FakeShelfProvider()

        BulkSynchronizer(provider, status=ShelfStatus.WANT_TO_READ).sync([ReadingItem("A", "X")])

        assert provider.added[0]["status"] is ShelfStatus.WANT_TO_READ

    def test_progress_callback(self, recorded_sleeps: list[float]) -> None:
        """The progress callback sees each index, the total, and the item result."""
        calls: list[tuple[int, int, SyncItemResult]] = []
        provider = FakeShelfProvider(missing={"B"})

        BulkSynchronizer(provider).sync(
            [ReadingItem("A", "X"), ReadingItem("B", "Y")],
            on_progress=lambda i, n, r: calls.append((i, n, r)),
        )

        assert [(i, n, r.success) for i, n, r in calls] == [(1, 2, True), (2, 2, False)]

    def test_out_of_range_date_is_dropped(self, recorded_sleeps: list[float]) -> None:
        """A date that cannot be expressed in UTC is omitted and the item still syncs."""
        provider = FakeShelfProvider()

        outcome = BulkSynchronizer(provider).sync(
            [ReadingItem("A", "X", date_read="0001-01-01T00:00:00+05:00")]
        )

        assert outcome.successful == 1
        assert provider.added[0]["finished_at"] is None

    def test_failing_progress_callback_does_not_abort(
        self, recorded_sleeps: list[float]
    ) -> None:
        """A callback that raises is logged and the remaining items still run."""
        provider = FakeShelfProvider()

        def broken_progress(index: int, total: int, result: SyncItemResult) -> None:
            raise ValueError("display gone")

        outcome = BulkSynchronizer(provider).sync(
            [ReadingItem("A", "X"), ReadingItem("B", "Y")], on_progress=broken_progress
        )

        assert outcome.successful == 2
        assert [d.title for d in outcome.details] == ["A", "B"]
        assert recorded_sleeps == [3.0, 3.0]

    def test_empty_input(self, recorded_sleeps: list[float]) -> None:
        """No items means an empty outcome and no pauses."""
        outcome = BulkSynchronizer(FakeShelfProvider()).sync([])

        assert outcome.total == 0
        assert outcome.details == []
        assert recorded_sleeps == []
