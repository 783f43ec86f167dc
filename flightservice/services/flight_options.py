"""
Flight options data access.

The flight service depends on a data source that resolves airport/date pairs
to flight legs and reports reward miles per flight segment. The in-memory
implementation serves read-only data loaded at startup.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Dict, Iterable, List, Mapping, Optional, Protocol, Tuple, Union

from flightservice.core.exceptions import FlightSegmentNotFound

logger = logging.getLogger(__name__)

FlightKey = Tuple[str, str, date]


class FlightOptionsService(Protocol):
    """Interface for flight option data sources."""

    async def is_populated(self) -> bool:
        """Return whether the flight data has been loaded."""
        ...

    async def flights_by_airports_and_date(
        self,
        from_airport: str,
        to_airport: str,
        departure_date: date
    ) -> Optional[List[str]]:
        """
        Find the flight legs departing on a date for an airport pair.

        Args:
            from_airport: Origin airport code
            to_airport: Destination airport code
            departure_date: Departure date

        Returns:
            Flight legs, or None when the data source has none for the route
        """
        ...

    async def reward_miles(self, segment_id: str) -> int:
        """
        Get the reward miles for a flight segment.

        Raises:
            FlightSegmentNotFound: If the segment is unknown
        """
        ...


class InMemoryFlightOptionsService:
    """Flight options service backed by dictionaries loaded once at startup."""

    def __init__(
        self,
        flights: Optional[Mapping[FlightKey, Iterable[str]]] = None,
        reward_miles: Optional[Mapping[str, int]] = None
    ):
        """
        Initialize the in-memory service.

        Args:
            flights: Flight legs keyed by (from_airport, to_airport, date)
            reward_miles: Reward miles keyed by flight segment id
        """
        self._flights: Dict[FlightKey, List[str]] = {
            (from_airport.upper(), to_airport.upper(), flight_date): list(legs)
            for (from_airport, to_airport, flight_date), legs in (flights or {}).items()
        }
        self._reward_miles: Dict[str, int] = dict(reward_miles or {})

        logger.info(
            f"InMemoryFlightOptionsService initialized: {len(self._flights)} routes, "
            f"{len(self._reward_miles)} segments"
        )

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "InMemoryFlightOptionsService":
        """
        Load flight data from a JSON file.

        The file holds ``{"flights": [{"fromAirport", "toAirport", "date", "legs"}],
        "rewardMiles": {segment: miles}}`` with ISO dates. Legs may be strings or
        JSON objects; objects are stored serialized.
        """
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)

        flights: Dict[FlightKey, List[str]] = {}
        for entry in data.get("flights", []):
            key = (entry["fromAirport"], entry["toAirport"], date.fromisoformat(entry["date"]))
            flights[key] = [
                leg if isinstance(leg, str) else json.dumps(leg, separators=(",", ":"))
                for leg in entry.get("legs", [])
            ]

        reward_miles = {segment: int(miles) for segment, miles in data.get("rewardMiles", {}).items()}

        logger.info(f"Loaded flight data from {path}")
        return cls(flights=flights, reward_miles=reward_miles)

    async def is_populated(self) -> bool:
        return bool(self._flights) or bool(self._reward_miles)

    async def flights_by_airports_and_date(
        self,
        from_airport: str,
        to_airport: str,
        departure_date: date
    ) -> Optional[List[str]]:
        legs = self._flights.get((from_airport.upper(), to_airport.upper(), departure_date))
        return list(legs) if legs is not None else None

    async def reward_miles(self, segment_id: str) -> int:
        if segment_id not in self._reward_miles:
            raise FlightSegmentNotFound(f"Flight segment '{segment_id}' not found")
        return self._reward_miles[segment_id]
