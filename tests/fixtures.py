"""
Test fixtures with sample flight data and signed request helpers.
"""

from datetime import date, datetime, timedelta, timezone
from typing import Dict, Optional

from flightservice.services.flight_options import InMemoryFlightOptionsService
from flightservice.services.request_signing import (
    BODY_HASH_HEADER,
    CLIENT_ID_HEADER,
    DATE_HEADER,
    SIGNATURE_HEADER,
    RequestSignatureVerifier,
    SignaturePolicy,
    build_body_hash,
    build_signature,
    reward_miles_body,
)


class FlightDataFixtures:
    """Sample flight legs and reward miles."""

    YEAR = 2025

    OUTBOUND_LEGS = ["F1", "F2"]
    RETURN_LEGS = ["F3"]

    JSON_LEGS = [
        '{"_id":"AA0001","flightSegmentId":"AA0","scheduledDepartureTime":"2025-01-06T08:00:00Z"}',
        '{"_id":"AA0002","flightSegmentId":"AA0","scheduledDepartureTime":"2025-01-06T14:00:00Z"}'
    ]

    REWARD_MILES = {"AA0": 2475, "AA1": 1000}

    @classmethod
    def fixed_clock(cls):
        return lambda: date(cls.YEAR, 6, 1)

    @classmethod
    def service(cls) -> InMemoryFlightOptionsService:
        return InMemoryFlightOptionsService(
            flights={
                ("BOS", "LAX", date(cls.YEAR, 1, 6)): cls.OUTBOUND_LEGS,
                ("LAX", "BOS", date(cls.YEAR, 1, 13)): cls.RETURN_LEGS,
                ("JFK", "CDG", date(cls.YEAR, 3, 10)): cls.JSON_LEGS,
            },
            reward_miles=cls.REWARD_MILES
        )


class SigningFixtures:
    """Shared secret, clock and header builders for signed requests."""

    SECRET = b"acmeair-test-secret"
    DIGEST = "sha256"
    MAX_SKEW = timedelta(minutes=5)
    NOW = datetime(2025, 1, 15, 10, 30, 0, tzinfo=timezone.utc)
    HTTP_DATE = "Wed, 15 Jan 2025 10:30:00 GMT"
    CLIENT_ID = "uid0@email.com"

    @classmethod
    def verifier(cls, enabled: bool = True) -> RequestSignatureVerifier:
        return RequestSignatureVerifier(
            policy=SignaturePolicy(enabled=enabled),
            digest=cls.DIGEST,
            max_skew=cls.MAX_SKEW,
            secret=cls.SECRET,
            clock=lambda: cls.NOW
        )

    @classmethod
    def reward_miles_headers(
        cls,
        segment_id: str,
        path: str = "/getrewardmiles",
        timestamp: Optional[str] = None,
        secret: Optional[bytes] = None
    ) -> Dict[str, str]:
        timestamp = timestamp or cls.HTTP_DATE
        body_hash = build_body_hash(reward_miles_body(segment_id), cls.DIGEST)
        signature = build_signature(
            secret or cls.SECRET,
            cls.DIGEST,
            "POST",
            path,
            cls.CLIENT_ID,
            timestamp,
            body_hash
        )
        return {
            CLIENT_ID_HEADER: cls.CLIENT_ID,
            DATE_HEADER: timestamp,
            BODY_HASH_HEADER: body_hash,
            SIGNATURE_HEADER: signature,
        }
