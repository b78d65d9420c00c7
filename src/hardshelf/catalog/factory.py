# ABOUTME: Composition root that builds HardcoverClients sharing one finished_at capability cell.
# ABOUTME: Create one factory per process; every client it builds remembers the same probe result.

import httpx

from hardshelf.catalog.cache import CACHE_TTL_SECONDS, ResponseCache
from hardshelf.catalog.capability import CapabilityCell
from hardshelf.catalog.hardcover import HardcoverClient
from hardshelf.catalog.http import DEFAULT_API_URL, HardcoverHttpClient
from hardshelf.catalog.identity import IdentityExtractor
from hardshelf.core.sync import DEFAULT_PACING_INTERVAL


class HardcoverClientFactory:
    """Builds per-account clients that share process-wide capability state.

    Whether the account plan accepts `finished_at` is a property of the
    remote service, not of any one request, so the probe result is held
    here and handed to every client rather than kept per client.
    """

    def __init__(
        self,
        *,
        api_url: str = DEFAULT_API_URL,
        max_retries: int = 3,
        rate_limit_delay: float = 2.0,
        retry_delay: float = 1.0,
        cache_ttl: float = CACHE_TTL_SECONDS,
        pacing_interval: float = DEFAULT_PACING_INTERVAL,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.finished_at_capability = CapabilityCell("finished_at")
        self._api_url = api_url
        self._max_retries = max_retries
        self._rate_limit_delay = rate_limit_delay
        self._retry_delay = retry_delay
        self._cache_ttl = cache_ttl
        self._pacing_interval = pacing_interval
        self._transport = transport

    def create(self, token: str) -> HardcoverClient:
        """Build a client for the account the token belongs to."""
        http_client = HardcoverHttpClient(
            token,
            api_url=self._api_url,
            max_retries=self._max_retries,
            rate_limit_delay=self._rate_limit_delay,
            retry_delay=self._retry_delay,
            transport=self._transport,
        )
        return HardcoverClient(
            http_client,
            identity=IdentityExtractor(token),
            finished_at_capability=self.finished_at_capability,
            cache=ResponseCache(ttl=self._cache_ttl),
            pacing_interval=self._pacing_interval,
        )
