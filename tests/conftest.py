# ABOUTME: Shared pytest fixtures for hardshelf tests.
# ABOUTME: Provides tokens, fresh capability cells, and a sleep recorder.

from collections.abc import Iterator
from unittest.mock import patch

import pytest

from hardshelf.catalog.capability import CapabilityCell
from tests.fixtures.hardcover_responses import USER_UUID, make_token


@pytest.fixture
def uuid_token() -> str:
    """A token whose `sub` claim is a UUID-shaped user id."""
    return make_token({"sub": USER_UUID, "exp": 1893456000})


@pytest.fixture
def numeric_token() -> str:
    """A token whose only id claim is numeric-looking text."""
    return make_token({"user_id": "4242"})


@pytest.fixture
def finished_at_cell() -> CapabilityCell:
    """A fresh finished_at capability cell, so tests never share probe state."""
    return CapabilityCell("finished_at")


@pytest.fixture
def recorded_sleeps() -> Iterator[list[float]]:
    """Patch time.sleep everywhere and record the requested durations."""
    sleeps: list[float] = []
    with patch("time.sleep", side_effect=sleeps.append):
        yield sleeps
