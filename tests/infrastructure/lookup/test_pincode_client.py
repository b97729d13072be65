"""Tests for the postal pincode lookup client."""

import httpx
import pytest

from orderdesk.core.exceptions import LocationLookupError
from orderdesk.infrastructure.lookup import PostalPincodeClient

PUNE_RESPONSE = [
    {
        "Message": "Number of pincode(s) found:2",
        "Status": "Success",
        "PostOffice": [
            {"Name": "Pune City", "Block": "Pune City", "District": "Pune", "State": "Maharashtra"},
            {"Name": "Shivajinagar", "Block": "Haveli", "District": "Pune", "State": "Maharashtra"},
        ],
    }
]


def client_for(handler) -> PostalPincodeClient:
    return PostalPincodeClient(base_url="https://pin.test/", transport=httpx.MockTransport(handler))


class TestPostalPincodeClient:
    async def test_resolves_district_and_state(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(str(request.url))
            return httpx.Response(200, json=PUNE_RESPONSE)

        location = await client_for(handler).lookup(" 411001 ")

        assert seen == ["https://pin.test/pincode/411001"]
        assert location.pincode == "411001"
        assert location.city == "Pune"
        assert location.state == "Maharashtra"

    @pytest.mark.parametrize("pincode", ["", "12345", "011001", "41100A", None])
    async def test_malformed_pincode_skips_request(self, pincode):
        def handler(request):
            raise AssertionError("no request expected")

        assert await client_for(handler).lookup(pincode) is None

    async def test_unknown_pincode(self):
        def handler(request):
            return httpx.Response(200, json=[{"Status": "Error", "PostOffice": None}])

        assert await client_for(handler).lookup("999999") is None

    async def test_falls_back_to_block_for_city(self):
        def handler(request):
            body = [{"Status": "Success", "PostOffice": [{"Block": "Haveli", "State": "Maharashtra"}]}]
            return httpx.Response(200, json=body)

        location = await client_for(handler).lookup("412201")

        assert location.city == "Haveli"
        assert location.district == ""

    async def test_http_error_raises(self):
        def handler(request):
            return httpx.Response(503)

        with pytest.raises(LocationLookupError, match="HTTP 503") as exc_info:
            await client_for(handler).lookup("411001")

        assert exc_info.value.code == "LOCATION_LOOKUP_FAILED"

    async def test_network_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(LocationLookupError):
            await client_for(handler).lookup("411001")

    async def test_invalid_json_raises(self):
        def handler(request):
            return httpx.Response(200, content=b"<html>maintenance</html>")

        with pytest.raises(LocationLookupError, match="invalid JSON"):
            await client_for(handler).lookup("411001")
