"""
Postal code lookup via the public India Post pincode API.

GET {base_url}/pincode/{pincode} returns a one-element list:
[{"Status": "Success", "PostOffice": [{"District": ..., "State": ...}, ...]}]
"""

import re
from typing import Any

import httpx

from orderdesk.config import get_logger, get_settings
from orderdesk.core.entities.location import Location
from orderdesk.core.exceptions import LocationLookupError
from orderdesk.core.interfaces.collaborators import ILocationLookup

logger = get_logger(__name__)

_PINCODE_RE = re.compile(r"^[1-9]\d{5}$")


class PostalPincodeClient(ILocationLookup):
    """Resolves Indian PIN codes to district/state."""

    def __init__(
        self,
        base_url: str = "https://api.postalpincode.in",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def lookup(self, pincode: str) -> Location | None:
        code = (pincode or "").strip()
        if not _PINCODE_RE.match(code):
            return None

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(f"{self.base_url}/pincode/{code}")
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("pincode_lookup_http_error", pincode=code, status=e.response.status_code)
            raise LocationLookupError(code, f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            logger.warning("pincode_lookup_network_error", pincode=code, error=str(e))
            raise LocationLookupError(code, str(e)) from e
        except ValueError as e:
            raise LocationLookupError(code, "invalid JSON response") from e

        location = self._parse(code, data)
        logger.info("pincode_lookup_success", pincode=code, found=location is not None)
        return location

    @staticmethod
    def _parse(pincode: str, data: Any) -> Location | None:
        if isinstance(data, list):
            data = data[0] if data else {}
        if not isinstance(data, dict) or str(data.get("Status", "")).lower() != "success":
            return None

        offices = data.get("PostOffice") or []
        if not offices:
            return None

        office = offices[0]
        district = str(office.get("District") or "").strip()
        return Location(
            pincode=pincode,
            city=district or str(office.get("Block") or office.get("Name") or "").strip(),
            district=district,
            state=str(office.get("State") or "").strip(),
        )


_client: PostalPincodeClient | None = None


def get_location_lookup() -> PostalPincodeClient:
    """Get singleton lookup client configured from settings."""
    global _client
    if _client is None:
        settings = get_settings()
        _client = PostalPincodeClient(
            base_url=settings.lookup.base_url,
            timeout=settings.lookup.timeout,
        )
    return _client
