"""External lookup collaborators."""

from orderdesk.infrastructure.lookup.pincode_client import (
    PostalPincodeClient,
    get_location_lookup,
)

__all__ = ["PostalPincodeClient", "get_location_lookup"]
