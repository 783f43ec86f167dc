"""Request models for the Acme Air Flight Service API."""

from datetime import date
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class OneWayTrip(BaseModel):
    """Flight query for a single outbound leg."""

    model_config = ConfigDict(frozen=True)

    trip_type: Literal["one_way"] = "one_way"
    from_airport: str
    to_airport: str
    from_date: Optional[date] = None


class RoundTrip(BaseModel):
    """Flight query for an outbound leg and the matching return leg."""

    model_config = ConfigDict(frozen=True)

    trip_type: Literal["round_trip"] = "round_trip"
    from_airport: str
    to_airport: str
    from_date: Optional[date] = None
    return_date: Optional[date] = None


TripQuery = Annotated[Union[OneWayTrip, RoundTrip], Field(discriminator="trip_type")]


def parse_one_way(value: Optional[str]) -> bool:
    """Read the oneWay form flag. Only a case-insensitive "true" counts as set."""
    return value is not None and value.lower() == "true"


def build_trip_query(
    from_airport: str,
    to_airport: str,
    from_date: Optional[date],
    return_date: Optional[date],
    one_way: bool
) -> Union[OneWayTrip, RoundTrip]:
    """
    Build the trip variant for a flight query.

    A return date passed along with ``one_way=True`` is discarded.
    """
    if one_way:
        return OneWayTrip(from_airport=from_airport, to_airport=to_airport, from_date=from_date)
    return RoundTrip(
        from_airport=from_airport,
        to_airport=to_airport,
        from_date=from_date,
        return_date=return_date
    )


class SignedRequest(BaseModel):
    """The parts of an inbound request that take part in signature verification."""

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "method": "POST",
                "path": "/getrewardmiles",
                "timestamp": "Wed, 15 Jan 2025 10:30:00 GMT",
                "body_hash": "3q2+7w==",
                "signature": "c2lnbmF0dXJl",
                "client_id": "uid0@email.com",
                "raw_body": "flightSegment=AA0001"
            }
        }
    )

    method: str
    path: str
    timestamp: Optional[str] = None
    body_hash: Optional[str] = None
    signature: Optional[str] = None
    client_id: Optional[str] = None
    raw_body: str = ""
