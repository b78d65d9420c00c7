# ABOUTME: Recovers the Hardcover account id from the payload segment of the API token (a JWT).
# ABOUTME: Decoding is unverified: a convenience lookup, not an authentication check.

import base64
import binascii
import json
import logging
import re
from typing import Any

from hardshelf.catalog.http import clean_token

logger = logging.getLogger(__name__)

# Claims checked in order; the first truthy one wins.
USER_ID_CLAIMS = ("sub", "user_id", "userId", "userUUID", "userUuid", "id")

_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)

_UNSET = object()


def is_uuid(value: str) -> bool:
    """Whether a value has the 8-4-4-4-12 hex shape of a UUID.

    Callers use this before user-scoped filtering: a numeric or otherwise
    non-UUID id must not be sent as a uuid filter.
    """
    return bool(_UUID_RE.match(value))


def decode_token_claims(token: str) -> dict[str, Any] | None:
    """Decode the middle segment of a dot-delimited token as a JSON object.

    The signature is NOT verified. The token's authenticity is established
    by the issuing service; this module holds no key and only reads claims.

    Returns None when the token has fewer than two segments, the segment is
    not valid base64url, or the payload is not a JSON object.
    """
    parts = clean_token(token).split(".")
    if len(parts) < 2:
        return None

    segment = parts[1]
    padded = segment + "=" * (-len(segment) % 4)
    try:
        decoded = base64.urlsafe_b64decode(padded).decode("utf-8")
        claims = json.loads(decoded)
    except (binascii.Error, UnicodeDecodeError, ValueError):
        return None

    return claims if isinstance(claims, dict) else None


def extract_user_id(token: str) -> str | None:
    """Read the first populated user-id claim from a token, or None."""
    claims = decode_token_claims(token)
    if claims is None:
        logger.info("Failed to decode Hardcover token for user id")
        return None

    value = next((claims[key] for key in USER_ID_CLAIMS if claims.get(key)), None)
    if not isinstance(value, str):
        logger.info("Token payload missing recognizable user identifier")
        return None
    return value


class IdentityExtractor:
    """Lazily derives and memoizes the account id for one client.

    Absence is a terminal, cached result: an undecodable token is not
    re-decoded on later calls.
    """

    def __init__(self, token: str) -> None:
        self._token = token
        self._user_id: Any = _UNSET

    def get_user_id(self) -> str | None:
        if self._user_id is _UNSET:
            self._user_id = extract_user_id(self._token)
        return self._user_id
