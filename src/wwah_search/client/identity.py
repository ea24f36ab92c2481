"""
Identity Service Client

Looks up the profile behind an authentication token.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from ..config import settings
from ..core.errors import IdentityLookupError


class IdentityClient:

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url or str(settings.identity_api_url)
        self.timeout = timeout or settings.http_timeout
        self._transport = transport

    async def get_user_data(self, token: str) -> Dict[str, Any]:
        """
        Return the identity payload, ``{"personalInfo": {...}}``.

        Raises
        ------
        IdentityLookupError
            If the token is rejected, the service is unreachable, or the
            payload lacks ``personalInfo``.
        """
        headers = {"Authorization": f"Bearer {token}"}

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.get(self.base_url, headers=headers)
            resp.raise_for_status()
            data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise IdentityLookupError(
                f"Identity lookup failed: {type(exc).__name__}"
            ) from exc

        if not isinstance(data, dict) or not isinstance(data.get("personalInfo"), dict):
            raise IdentityLookupError("Identity response missing 'personalInfo'.")

        return data
