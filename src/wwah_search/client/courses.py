"""
Courses API Client

Reads course listings from the internal ``/api/getCourses`` endpoint.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..config import settings


class CoursesClient:

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url or str(settings.courses_api_base_url)
        self.timeout = timeout or settings.http_timeout
        self._transport = transport

    async def get_courses(self, search: str, limit: int = 4) -> Dict[str, Any]:
        """
        Return the raw response body, expected as ``{"courses": [...]}``.

        The shape is not validated here; callers decide how to handle it.
        """
        params = {"search": search, "limit": limit}

        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self._transport,
        ) as client:
            resp = await client.get("/api/getCourses", params=params)
        resp.raise_for_status()
        return resp.json()
