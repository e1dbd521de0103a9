"""Async client for the remote item collection the cache mirrors.

Two operations back the read-through mirror: fetching the whole collection
(to fully populate the cache) and fetching a single item on a cache miss.
Throttled responses are retried a bounded number of times via RateLimiter.
"""

from __future__ import annotations

import logging
from typing import Any, Hashable, List, Mapping, Optional
from urllib.parse import quote

import httpx

from core.errors import ExternalServiceError
from core.interfaces import Item
from core.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)


class ItemsClient:
    """Async REST client implementing the ItemSource protocol.

    Purpose:
      - fetch_all() -> List[Item]       GET {items_path}
      - fetch_one(key) -> Item | None   GET {items_path}/{key}

    The collection endpoint may answer with a JSON array or with an object
    wrapping the array under "items".
    """

    JSON_ACCEPT = "application/json"

    _MAX_RATE_LIMIT_RETRIES = 2  # total attempts = 1 + retries

    def __init__(
        self,
        *,
        base_url: str,
        items_path: str = "/items",
        timeout: float = 20.0,
        verify: bool = True,
        token: str = "",
        rate_limiter: Optional[RateLimiter] = None,
    ) -> None:
        self._base_url = (base_url or "").rstrip("/")
        self._items_path = "/" + (items_path or "/items").strip("/")
        self._timeout = float(timeout)
        self._verify = bool(verify)
        self._headers = self._build_headers(token)
        self._rate_limiter = rate_limiter or RateLimiter()

    async def fetch_all(self) -> List[Item]:
        async with self._create_client() as client:
            resp = await self._request(client, self._items_path)
            self._raise_for_status(resp, context="fetch_all")
            payload = self._json(resp, context="fetch_all")

        if isinstance(payload, Mapping):
            payload = payload.get("items")
        if not isinstance(payload, list) or not all(isinstance(i, Mapping) for i in payload):
            raise ExternalServiceError("Item service returned an unexpected collection payload")

        logger.debug("Fetched %d items from %s", len(payload), self._items_path)
        return [dict(i) for i in payload]

    async def fetch_one(self, key: Hashable) -> Optional[Item]:
        url = f"{self._items_path}/{quote(str(key), safe='')}"
        async with self._create_client() as client:
            resp = await self._request(client, url)
            if resp.status_code == 404:
                return None
            self._raise_for_status(resp, context="fetch_one")
            payload = self._json(resp, context="fetch_one")

        if not isinstance(payload, Mapping):
            raise ExternalServiceError("Item service returned an unexpected item payload")
        return dict(payload)

    # --- HTTP helpers ---

    def _build_headers(self, token: str) -> dict[str, str]:
        headers = {
            "Accept": self.JSON_ACCEPT,
            "User-Agent": "item-mirror-mcp",
        }
        token = (token or "").strip()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    def _create_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers,
            timeout=self._timeout,
            verify=self._verify,
        )

    def _raise_for_status(self, resp: httpx.Response, *, context: str) -> None:
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise ExternalServiceError(f"Item service request failed ({context}): {e}") from e

    def _json(self, resp: httpx.Response, *, context: str) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise ExternalServiceError(f"Item service returned invalid JSON ({context})") from e

    async def _request(self, client: httpx.AsyncClient, url: str) -> httpx.Response:
        """GET with bounded retries for explicit throttling signals."""
        attempts = self._MAX_RATE_LIMIT_RETRIES + 1

        for attempt in range(attempts):
            try:
                resp = await client.get(url)
            except httpx.HTTPError as e:
                raise ExternalServiceError(f"Item service request failed (GET {url}): {e}") from e

            if attempt < attempts - 1:
                should_retry = await self._rate_limiter.maybe_sleep_and_retry(resp)
                if should_retry:
                    logger.info("Item service throttled GET %s; retrying", url)
                    continue

            return resp

        raise RuntimeError("Unreachable: _request did not return a response")
