"""Interpret throttling responses from the item service and back off.

- 429 Too Many Requests and 503 Service Unavailable may carry Retry-After
  (delay in seconds); when present the caller sleeps and retries.
- Without Retry-After the response is returned to the caller unchanged.
- Sleeps are capped so a hostile header cannot stall a tool call.
"""

from __future__ import annotations

import asyncio
from typing import Optional

import httpx

_THROTTLE_STATUSES = frozenset({429, 503})


class RateLimiter:
    def __init__(self, *, max_sleep_seconds: float = 30.0) -> None:
        self._max_sleep_seconds = max(0.0, float(max_sleep_seconds))

    def retry_delay(self, response: httpx.Response) -> Optional[float]:
        if response.status_code not in _THROTTLE_STATUSES:
            return None

        raw = (response.headers.get("Retry-After") or "").strip()
        if not raw:
            return None
        try:
            seconds = float(raw)
        except ValueError:
            # HTTP-date form is not honoured
            return None
        if seconds < 0:
            return None
        return min(seconds, self._max_sleep_seconds)

    async def maybe_sleep_and_retry(self, response: httpx.Response) -> bool:
        # Returns True if caller should retry after sleeping.
        delay = self.retry_delay(response)
        if delay is None:
            return False
        await asyncio.sleep(delay)
        return True
