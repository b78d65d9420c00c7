# ABOUTME: GraphQL transport for the Hardcover API with bounded retry and error classification.
# ABOUTME: Backs off exponentially on 429, retries transport faults, and maps GraphQL errors to exceptions.

import json
import logging
import re
import time
from typing import Any, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.hardcover.app/v1/graphql"

_BEARER_PREFIX_RE = re.compile(r"^Bearer\s+", re.IGNORECASE)

_AUTH_REMEDIATION = (
    "Hardcover API authorization failed. Please check that:\n"
    "1. Your API token is valid and not expired (tokens expire after 1 year)\n"
    "2. Get a fresh token from https://hardcover.app/account/api\n"
    "3. Re-enter it in your settings"
)


class HardcoverError(Exception):
    """Base class for failures talking to the Hardcover API."""


class NetworkError(HardcoverError):
    """Raised on connection failures, non-2xx responses, or unreadable bodies."""

    def __init__(
        self, message: str, *, status_code: int | None = None, body: str | None = None
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RateLimitedError(HardcoverError):
    """Raised when HTTP 429 persists after every backoff attempt."""


class UnauthorizedError(HardcoverError):
    """Raised when the API rejects the bearer credential. Never retried."""

    def __init__(self, message: str = _AUTH_REMEDIATION) -> None:
        super().__init__(message)


class GraphQLError(HardcoverError):
    """Raised when a 2xx response carries a top-level `errors` array.

    The raw error objects are kept on `errors` so callers can inspect
    messages, extension codes, and paths.
    """

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        super().__init__("GraphQL errors: " + json.dumps(errors))
        self.errors = errors


@runtime_checkable
class GraphQLClient(Protocol):
    """Protocol for executing a single GraphQL operation."""

    def execute(
        self, query: str, variables: dict[str, Any] | None = None
    ) -> dict[str, Any]: ...


def clean_token(token: str) -> str:
    """Strip whitespace and any leading 'Bearer ' prefix from an API token."""
    return _BEARER_PREFIX_RE.sub("", token.strip())


def _is_authorization_error(error: dict[str, Any]) -> bool:
    message = error.get("message")
    if isinstance(message, str) and "Authorization" in message:
        return True
    extensions = error.get("extensions") or {}
    return isinstance(extensions, dict) and extensions.get("code") == "invalid-headers"


class HardcoverHttpClient:
    """GraphQL client for the Hardcover API.

    Wraps httpx.Client and retries up to max_retries times. Rate limiting
    (429) backs off exponentially from rate_limit_delay; connection failures
    and other non-2xx responses wait a flat retry_delay. GraphQL-level errors
    are never retried here; the caller decides what to do with them.
    """

    def __init__(
        self,
        token: str,
        *,
        api_url: str = DEFAULT_API_URL,
        max_retries: int = 3,
        rate_limit_delay: float = 2.0,
        retry_delay: float = 1.0,
        timeout: float = 30.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        cleaned = clean_token(token)
        client_kwargs: dict[str, Any] = {
            "headers": {
                "User-Agent": "hardshelf/0.1.0",
                "Content-Type": "application/json",
                "authorization": f"Bearer {cleaned}",
            },
            "timeout": timeout,
        }
        if transport is not None:
            client_kwargs["transport"] = transport
        self._client = httpx.Client(**client_kwargs)
        self._api_url = api_url
        self._max_retries = max_retries
        self._rate_limit_delay = rate_limit_delay
        self._retry_delay = retry_delay
        logger.debug("Hardcover client configured (token length %d)", len(cleaned))

    def execute(
        self, query: str, variables: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        """POST a GraphQL operation and return its `data` member.

        Args:
            query: The GraphQL query or mutation document.
            variables: Optional variables for the operation.

        Returns:
            The `data` object of the response (empty dict when absent).

        Raises:
            RateLimitedError: When 429 persists through every retry.
            UnauthorizedError: When the API rejects the credential.
            GraphQLError: When the response carries any other GraphQL errors.
            NetworkError: On connection failures or non-2xx responses after retries.
        """
        attempts = 1 + self._max_retries
        payload = {"query": query, "variables": variables or {}}

        for attempt in range(attempts):
            final = attempt == attempts - 1
            try:
                response = self._client.post(self._api_url, json=payload)
            except httpx.HTTPError as exc:
                if final:
                    raise NetworkError(f"Request to {self._api_url} failed: {exc}") from exc
                self._wait_after_failure(exc, attempt)
                continue

            if response.status_code == 429:
                if final:
                    raise RateLimitedError(
                        f"Rate limit exceeded after {self._max_retries} retries"
                    )
                delay = self._rate_limit_delay * (2**attempt)
                logger.warning(
                    "Rate limited, retrying in %.1fs (attempt %d/%d)",
                    delay,
                    attempt + 1,
                    self._max_retries,
                )
                time.sleep(delay)
                continue

            try:
                return self._parse_response(response)
            except NetworkError as exc:
                if final:
                    raise
                self._wait_after_failure(exc, attempt)

        raise NetworkError(f"Request to {self._api_url} failed after {attempts} attempts")

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._client.close()

    def __enter__(self) -> "HardcoverHttpClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _wait_after_failure(self, exc: Exception, attempt: int) -> None:
        logger.warning(
            "Hardcover request failed (%s), retrying in %.1fs (attempt %d/%d)",
            exc,
            self._retry_delay,
            attempt + 1,
            self._max_retries,
        )
        time.sleep(self._retry_delay)

    def _parse_response(self, response: httpx.Response) -> dict[str, Any]:
        """Classify a non-429 response into data or a typed exception."""
        if not response.is_success:
            body = response.text
            logger.debug("Hardcover API error body: %s", body)
            raise NetworkError(
                f"Hardcover API error: {response.status_code} - {body}",
                status_code=response.status_code,
                body=body,
            )

        try:
            result = response.json()
        except ValueError as exc:
            raise NetworkError(
                f"Unreadable response body from {self._api_url}",
                status_code=response.status_code,
                body=response.text,
            ) from exc

        errors = result.get("errors") if isinstance(result, dict) else None
        if errors:
            logger.debug("GraphQL errors: %s", errors)
            if any(_is_authorization_error(e) for e in errors if isinstance(e, dict)):
                raise UnauthorizedError()
            raise GraphQLError(errors)

        data = result.get("data") if isinstance(result, dict) else None
        return data or {}
