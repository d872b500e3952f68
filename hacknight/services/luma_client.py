"""
hacknight.services.luma_client — Luma Guest Check-in Updates
=============================================================

After a local check-in is recorded, the guest can optionally be marked as
checked in on the Luma event page too.  This is best-effort: a non-2xx
response or a transport error is logged and reported as ``False``, never
raised, because the local check-in has already succeeded.
"""

from __future__ import annotations

import logging
import os

import httpx

from hacknight.config import DEFAULT_LUMA_BASE_URL

logger = logging.getLogger(__name__)

UPDATE_GUEST_STATUS_PATH = "/v1/event/update-guest-status"


class LumaClient:
    """Thin synchronous client for the Luma public API."""

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_LUMA_BASE_URL,
        timeout: float = 10,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    @classmethod
    def from_env(cls, *, base_url: str = DEFAULT_LUMA_BASE_URL) -> LumaClient | None:
        """Build a client from ``LUMA_API_KEY``; ``None`` when it isn't set."""
        api_key = os.getenv("LUMA_API_KEY", "").strip()
        if not api_key:
            logger.warning("LUMA_API_KEY not configured, skipping Luma API updates")
            return None
        return cls(api_key, base_url=base_url)

    def _client(self) -> httpx.Client:
        transport = self._transport or httpx.HTTPTransport(retries=1)
        return httpx.Client(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=transport,
            headers={
                "x-luma-api-key": self.api_key,
                "accept": "application/json",
            },
        )

    def update_guest_check_in(self, event_api_id: str, guest_api_id: str) -> bool:
        """Mark *guest_api_id* as checked in to *event_api_id* on Luma."""
        try:
            with self._client() as client:
                resp = client.post(
                    UPDATE_GUEST_STATUS_PATH,
                    json={
                        "event_api_id": event_api_id,
                        "guest_api_id": guest_api_id,
                        "check_in_status": "checked_in",
                    },
                )
        except httpx.HTTPError as exc:
            logger.error("Error updating Luma guest check-in: %s", exc)
            return False

        if resp.is_success:
            return True

        logger.error("Luma API check-in failed: %d %s", resp.status_code, resp.text)
        return False
