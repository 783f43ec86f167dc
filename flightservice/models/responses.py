"""Response models for the Acme Air Flight Service API."""

from datetime import datetime, timezone
from pydantic import BaseModel, Field, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Any, List


class TripOptionsPage(BaseModel):
    """
    One page of flight options for a single trip leg.

    The service only ever returns a single page, so the paging fields are
    fixed values rather than computed ones.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "numPages": 1,
                "flightsOptions": ["AA0001", "AA0002"],
                "currentPage": 0,
                "hasMoreOptions": False,
                "pageSize": 10
            }
        }
    )

    num_pages: int = Field(default=1, description="Total number of pages")
    flights_options: List[Any] = Field(default_factory=list, description="Flight options for this leg")
    current_page: int = Field(default=0, description="Zero-based index of this page")
    has_more_options: bool = Field(default=False, description="Whether further pages exist")
    page_size: int = Field(default=10, description="Maximum number of options per page")


class TripOptionsResponse(BaseModel):
    """Response model for the flight query endpoint."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "tripFlights": [
                    {
                        "numPages": 1,
                        "flightsOptions": ["AA0001", "AA0002"],
                        "currentPage": 0,
                        "hasMoreOptions": False,
                        "pageSize": 10
                    }
                ],
                "tripLegs": 1
            }
        }
    )

    trip_flights: List[TripOptionsPage] = Field(..., description="One page per trip leg, outbound first")
    trip_legs: int = Field(..., description="Number of trip legs (1 or 2)", ge=1, le=2)


class MilesResponse(BaseModel):
    """Response model for the reward miles endpoint."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "miles": 1200
            }
        }
    )

    miles: int = Field(..., description="Reward miles for the flight segment", ge=-(2 ** 63), lt=2 ** 63)


class ErrorResponse(BaseModel):
    """Error response model for consistent error handling."""

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "SIGNATURE_MISMATCH",
                "message": "Request signature does not match",
                "timestamp": "2025-01-15T10:30:00Z"
            }
        }
    )

    error: str = Field(..., description="Error code or type")
    message: str = Field(..., description="Human-readable error message")
    timestamp: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Error timestamp"
    )
