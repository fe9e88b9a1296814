# app/compare/client.py
from __future__ import annotations
from typing import Any, Dict, Optional
from urllib.parse import quote

import httpx

from app.config.settings import LAPTOP_API_BASE_URL, LAPTOP_ENDPOINT, LAPTOP_FETCH_TIMEOUT_SEC
from app.utils.logger import logger


class LaptopServiceClient:
    """
    Async client for the laptop record service.

    ``fetch_laptop`` returns the decoded JSON body whatever the status code
    (the service answers 404/500 with ``{"success": false, ...}``) and lets
    transport and decode errors propagate; the record cache decides what a
    failure means.
    """

    def __init__(
        self,
        base_url: str = LAPTOP_API_BASE_URL,
        timeout: Optional[float] = LAPTOP_FETCH_TIMEOUT_SEC,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
            follow_redirects=True,
        )

    async def fetch_laptop(self, laptop_id: str) -> Dict[str, Any]:
        path = LAPTOP_ENDPOINT.format(laptop_id=quote(laptop_id, safe=""))
        logger.debug(f"GET {self.base_url}{path}")
        resp = await self._client.get(path)
        return resp.json()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "LaptopServiceClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
