# ABOUTME: Sticky, process-wide detection of whether the API accepts an optional mutation field.
# ABOUTME: On a field rejection the state flips to unsupported and the mutation is re-issued once without it.

import logging
import re
import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar

from hardshelf.catalog.http import GraphQLError, HardcoverError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Matches finished_at, finishedAt, finished_reading_at, ...
FINISHED_AT_PATTERN = re.compile(r"finished[_A-Za-z]*at", re.IGNORECASE)


class CapabilityState(Enum):
    UNKNOWN = "unknown"
    SUPPORTED = "supported"
    UNSUPPORTED = "unsupported"


class CapabilityCell:
    """Lock-guarded tri-state shared by every client of one composition root.

    Moves out of UNKNOWN at most once; a resolved state never reverts.
    """

    def __init__(self, field_name: str) -> None:
        self.field_name = field_name
        self._state = CapabilityState.UNKNOWN
        self._lock = threading.Lock()

    @property
    def state(self) -> CapabilityState:
        with self._lock:
            return self._state

    def resolve(self, state: CapabilityState) -> CapabilityState:
        """Record a probe result if still UNKNOWN. Returns the effective state."""
        with self._lock:
            if self._state is CapabilityState.UNKNOWN and state is not CapabilityState.UNKNOWN:
                self._state = state
                logger.info("Field %s is %s by this account", self.field_name, state.value)
            return self._state


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class FieldRejected:
    error: HardcoverError


@dataclass(frozen=True)
class Fatal:
    error: HardcoverError


ProbeOutcome = Ok[Any] | FieldRejected | Fatal


def error_mentions_field(error: HardcoverError, pattern: re.Pattern[str]) -> bool:
    """Whether an API error names the optional field in its text or error paths."""
    if pattern.search(str(error)):
        return True
    if isinstance(error, GraphQLError):
        for item in error.errors:
            if not isinstance(item, dict):
                continue
            message = item.get("message")
            if isinstance(message, str) and pattern.search(message):
                return True
            path = (item.get("extensions") or {}).get("path")
            if isinstance(path, str) and pattern.search(path):
                return True
    return False


class OptionalFieldProbe:
    """Runs a mutation with or without an optional field, per the shared cell.

    The attempt callable receives include_field and performs one request.
    A rejection that names the field marks it unsupported and triggers a
    single re-issue without it; the second attempt never includes the
    field, so the call cannot loop.
    """

    def __init__(
        self, cell: CapabilityCell, pattern: re.Pattern[str] = FINISHED_AT_PATTERN
    ) -> None:
        self._cell = cell
        self._pattern = pattern

    @property
    def state(self) -> CapabilityState:
        return self._cell.state

    def run(self, attempt: Callable[[bool], T], *, wants_field: bool) -> T:
        """Execute attempt, downgrading once if the field is rejected.

        Raises:
            HardcoverError: Any failure that is not a field rejection, or the
                failure of the re-issued attempt.
        """
        include = wants_field and self._cell.state is not CapabilityState.UNSUPPORTED
        outcome = self._classify(attempt, include)

        if isinstance(outcome, Ok):
            if include:
                self._cell.resolve(CapabilityState.SUPPORTED)
            return outcome.value

        if isinstance(outcome, FieldRejected):
            self._cell.resolve(CapabilityState.UNSUPPORTED)
            logger.info(
                "%s rejected by API, retrying without it", self._cell.field_name
            )
            retry = self._classify(attempt, False)
            if isinstance(retry, Ok):
                return retry.value
            raise retry.error

        raise outcome.error

    def _classify(self, attempt: Callable[[bool], T], include: bool) -> ProbeOutcome:
        try:
            return Ok(attempt(include))
        except HardcoverError as exc:
            if include and error_mentions_field(exc, self._pattern):
                return FieldRejected(exc)
            return Fatal(exc)
