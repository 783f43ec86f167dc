# Pydantic models for request/response validation

from .requests import OneWayTrip, RoundTrip, TripQuery, SignedRequest, build_trip_query, parse_one_way
from .responses import TripOptionsPage, TripOptionsResponse, MilesResponse, ErrorResponse

__all__ = [
    "OneWayTrip",
    "RoundTrip",
    "TripQuery",
    "SignedRequest",
    "build_trip_query",
    "parse_one_way",
    "TripOptionsPage",
    "TripOptionsResponse",
    "MilesResponse",
    "ErrorResponse"
]
