"""Location resolved from a postal code."""

from pydantic import BaseModel


class Location(BaseModel):
    pincode: str
    city: str = ""
    district: str = ""
    state: str = ""
