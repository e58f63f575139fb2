# spmanager/services/cms_client.py
"""
Passthrough client for the headless CMS that serves course material.

The browser cannot call the CMS directly (API key, same-origin policy), so the
API forwards read-only GET requests. No content modeling happens here.
"""
import logging
from functools import lru_cache
from typing import Any

import httpx

from spmanager.config import settings
from spmanager.core.errors import NotFoundError, UpstreamError, ValidationError

logger = logging.getLogger(__name__)


class CMSClient:

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        api_key_header: str = "X-API-KEY",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.api_key_header = api_key_header
        self.timeout = timeout
        self._transport = transport  # Tests inject httpx.MockTransport

    @property
    def enabled(self) -> bool:
        return bool(self.base_url)

    async def get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        """
        GET {base_url}/{path} and return the decoded JSON body.

        Raises:
            NotFoundError: CMS not configured
            ValidationError: Path tries to leave the API root
            UpstreamError: Transport failure, non-2xx status or non-JSON body
        """
        if not self.enabled:
            raise NotFoundError("CMS_DISABLED", "Content service is not configured")
        path = path.strip("/")
        if not path or ".." in path.split("/"):
            raise ValidationError("BAD_REQUEST", "Invalid content path")

        headers = {"Accept": "application/json"}
        if self.api_key:
            headers[self.api_key_header] = self.api_key

        url = f"{self.base_url}/{path}"
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(url, params=params, headers=headers)
                resp.raise_for_status()
                return resp.json()
        except httpx.HTTPStatusError as e:
            logger.warning("[cms] %s answered %s", url, e.response.status_code)
            raise UpstreamError()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("[cms] request to %s failed: %s", url, e)
            raise UpstreamError()


@lru_cache(maxsize=1)
def get_cms_client() -> CMSClient:
    """FastAPI dependency: CMS client configured from settings."""
    return CMSClient(
        settings.cms_api_url,
        api_key=settings.cms_api_key,
        api_key_header=settings.cms_api_key_header,
        timeout=settings.cms_timeout_seconds,
    )
