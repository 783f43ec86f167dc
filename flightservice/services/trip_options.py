"""
Trip options assembly for the flight query endpoint.

Flight legs come back from the flight options service as opaque strings and
are shaped into the single-page ``TripOptionsResponse`` envelope expected by
the Acme Air web UI.
"""

import json
import logging
from typing import Any, List, Optional, Sequence, Union

from flightservice.models.requests import OneWayTrip, RoundTrip
from flightservice.models.responses import TripOptionsPage, TripOptionsResponse
from flightservice.services.flight_options import FlightOptionsService

logger = logging.getLogger(__name__)


class TripOptionsAssembler:
    """Builds TripOptionsResponse envelopes from outbound and return flight legs."""

    # Paging is not implemented; every leg is returned as one full page.
    NUM_PAGES = 1
    CURRENT_PAGE = 0
    HAS_MORE_OPTIONS = False
    PAGE_SIZE = 10

    def assemble(
        self,
        outbound_legs: Optional[Sequence[str]],
        return_legs: Optional[Sequence[str]],
        one_way: bool
    ) -> TripOptionsResponse:
        """
        Assemble the response envelope for a flight query.

        Args:
            outbound_legs: Flight legs from origin to destination; None means no flights
            return_legs: Flight legs back to the origin; ignored for one-way trips
            one_way: Whether only the outbound leg is returned

        Returns:
            TripOptionsResponse with one page per trip leg, outbound first
        """
        pages = [self._build_page(outbound_legs)]
        if not one_way:
            pages.append(self._build_page(return_legs))

        return TripOptionsResponse(trip_flights=pages, trip_legs=len(pages))

    def assemble_trip(
        self,
        query: Union[OneWayTrip, RoundTrip],
        outbound_legs: Optional[Sequence[str]],
        return_legs: Optional[Sequence[str]] = None
    ) -> TripOptionsResponse:
        """Assemble the response envelope using the trip variant instead of a flag."""
        return self.assemble(outbound_legs, return_legs, one_way=isinstance(query, OneWayTrip))

    def _build_page(self, legs: Optional[Sequence[str]]) -> TripOptionsPage:
        return TripOptionsPage(
            num_pages=self.NUM_PAGES,
            flights_options=to_json_array(legs),
            current_page=self.CURRENT_PAGE,
            has_more_options=self.HAS_MORE_OPTIONS,
            page_size=self.PAGE_SIZE
        )


def to_json_array(legs: Optional[Sequence[str]]) -> List[Any]:
    """
    Convert flight legs to JSON array items.

    Legs holding a serialized JSON object or array are embedded as that
    document; every other leg is kept as a plain string.
    """
    if legs is None:
        return []

    items = []
    for leg in legs:
        if isinstance(leg, str) and leg.lstrip().startswith(("{", "[")):
            try:
                items.append(json.loads(leg))
                continue
            except json.JSONDecodeError:
                logger.debug(f"Flight leg is not a JSON document, keeping it as text: {leg[:40]}")
        items.append(leg)
    return items


async def find_trip_options(
    service: FlightOptionsService,
    query: Union[OneWayTrip, RoundTrip],
    assembler: Optional[TripOptionsAssembler] = None
) -> TripOptionsResponse:
    """
    Look up the flight legs for a trip query and assemble the response.

    A leg whose date is missing is not looked up and yields no flights.

    Args:
        service: Flight options service used for the lookups
        query: One-way or round trip query
        assembler: Optional assembler instance

    Returns:
        TripOptionsResponse for the query
    """
    assembler = assembler or TripOptionsAssembler()

    outbound_legs = await _lookup_legs(service, query.from_airport, query.to_airport, query.from_date)

    return_legs = None
    if isinstance(query, RoundTrip):
        return_legs = await _lookup_legs(service, query.to_airport, query.from_airport, query.return_date)

    return assembler.assemble_trip(query, outbound_legs, return_legs)


async def _lookup_legs(service: FlightOptionsService, from_airport: str, to_airport: str, flight_date) -> Optional[List[str]]:
    if flight_date is None:
        logger.info(f"No date for {from_airport} -> {to_airport}, skipping flight lookup")
        return None

    legs = await service.flights_by_airports_and_date(from_airport, to_airport, flight_date)
    logger.debug(f"Found {len(legs) if legs else 0} flights for {from_airport} -> {to_airport} on {flight_date}")
    return legs
