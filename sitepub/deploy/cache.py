"""CDN cache purge after a deploy."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional
from urllib.error import HTTPError, URLError
from urllib.request import Request, urlopen

from ..logging import get_logger

CLOUDFLARE_API = "https://api.cloudflare.com/client/v4"


@dataclass
class PurgeResult:
    attempted: bool
    success: bool
    detail: str = ""


class CachePurger:
    """Purges the whole Cloudflare zone so freshly uploaded files are served."""

    def __init__(
        self,
        zone_id: Optional[str],
        api_token: Optional[str],
        *,
        api_base: str = CLOUDFLARE_API,
        timeout: float = 30.0,
    ) -> None:
        self.zone_id = zone_id
        self.api_token = api_token
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.logger = get_logger("deploy.cache")

    @property
    def enabled(self) -> bool:
        return bool(self.zone_id and self.api_token)

    def purge(self) -> PurgeResult:
        """Request a full purge; failures are reported, never raised."""
        if not self.enabled:
            self.logger.warning("Cache purge skipped (set CF_ZONE_ID and CF_API_TOKEN)")
            return PurgeResult(attempted=False, success=False, detail="not configured")

        request = Request(
            f"{self.api_base}/zones/{self.zone_id}/purge_cache",
            data=json.dumps({"purge_everything": True}).encode("utf-8"),
            headers={
                "Authorization": f"Bearer {self.api_token}",
                "Content-Type": "application/json",
            },
            method="POST",
        )
        try:
            with urlopen(request, timeout=self.timeout) as response:
                body = response.read().decode("utf-8")
        except HTTPError as exc:
            body = exc.read().decode("utf-8", "replace") if exc.fp else ""
            return self._failed(f"HTTP {exc.code}: {body.strip() or exc.reason}")
        except URLError as exc:
            return self._failed(f"request failed: {exc.reason}")

        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            return self._failed(f"unexpected response: {body[:200]}")
        if isinstance(payload, dict) and payload.get("success") is True:
            self.logger.info("Cache purged")
            return PurgeResult(attempted=True, success=True)
        return self._failed(f"response: {body[:200]}")

    def _failed(self, detail: str) -> PurgeResult:
        self.logger.warning("Cache purge failed (%s)", detail)
        return PurgeResult(attempted=True, success=False, detail=detail)


__all__ = ["CLOUDFLARE_API", "CachePurger", "PurgeResult"]
