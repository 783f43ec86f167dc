"""
Signed request verification for service-to-service calls.

Callers sign a request with four headers:

- ``acmeair-id``: the client id
- ``acmeair-date``: the time of signing (HTTP-date or ISO 8601)
- ``acmeair-sig-body``: base64 digest of the canonical request body
- ``acmeair-signature``: base64 HMAC over method, path, client id, date and body hash

Verification checks the body hash first, then the timestamp, then the HMAC.
All comparisons of received values against expected ones are constant time.
"""

import base64
import hashlib
import hmac
import logging
from datetime import datetime, timedelta, timezone
from email.utils import parsedate_to_datetime
from typing import Callable, Optional

from flightservice.core.exceptions import BodyHashMismatch, ExpiredOrInvalidTimestamp, SignatureMismatch
from flightservice.models.requests import SignedRequest

logger = logging.getLogger(__name__)

CLIENT_ID_HEADER = "acmeair-id"
DATE_HEADER = "acmeair-date"
BODY_HASH_HEADER = "acmeair-sig-body"
SIGNATURE_HEADER = "acmeair-signature"


def reward_miles_body(segment_id: str) -> str:
    """Canonical body signed for a reward miles request."""
    return f"flightSegment={segment_id}"


def build_body_hash(body: str, digest: str) -> str:
    """Return the base64 encoded digest of a request body."""
    return base64.b64encode(hashlib.new(digest, body.encode("utf-8")).digest()).decode("ascii")


def build_signing_string(method: str, path: str, client_id: str, timestamp: str, body_hash: str) -> str:
    return "".join([method, path, client_id, timestamp, body_hash])


def build_signature(
    secret: bytes,
    digest: str,
    method: str,
    path: str,
    client_id: str,
    timestamp: str,
    body_hash: str
) -> str:
    """Return the base64 encoded HMAC signature for a request."""
    signing_string = build_signing_string(method, path, client_id, timestamp, body_hash)
    mac = hmac.new(secret, signing_string.encode("utf-8"), digest)
    return base64.b64encode(mac.digest()).decode("ascii")


def parse_timestamp(value: str) -> datetime:
    """
    Parse a signing timestamp given as an HTTP-date or in ISO 8601 format.

    Naive timestamps are treated as UTC.

    Raises:
        ValueError: If the value is in neither format or is out of range
    """
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except OverflowError as e:
        raise ValueError(f"Timestamp out of range: {value}") from e

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _matches(received: Optional[str], expected: str) -> bool:
    if received is None:
        return False
    return hmac.compare_digest(received.encode("utf-8"), expected.encode("utf-8"))


class SignaturePolicy:
    """Operator switch deciding whether signed requests are verified at all."""

    def __init__(self, enabled: bool = True):
        self._enabled = enabled

    def enabled(self) -> bool:
        return self._enabled


class RequestSignatureVerifier:
    """
    Verifies acmeair-* signed requests.

    The verifier keeps no per-request state, so one instance can be shared by
    concurrent requests.
    """

    def __init__(
        self,
        policy: SignaturePolicy,
        digest: str,
        max_skew: timedelta,
        secret: Optional[bytes] = None,
        clock: Callable[[], datetime] = _utc_now
    ):
        """
        Initialize the RequestSignatureVerifier.

        Args:
            policy: Signature policy; verification is skipped when it is disabled
            digest: hashlib algorithm name for both the body hash and the HMAC
            max_skew: Maximum allowed distance between the signing time and now
            secret: Default shared secret used when verify() is not given one
            clock: Callable returning the current time as an aware datetime
        """
        hashlib.new(digest)
        self.policy = policy
        self.digest = digest
        self.max_skew = max_skew
        self._secret = secret
        self.clock = clock

    def verify(self, request: SignedRequest, secret: Optional[bytes] = None) -> None:
        """
        Verify a signed request.

        Args:
            request: The signed parts of the inbound request
            secret: Shared secret; defaults to the verifier's secret

        Raises:
            BodyHashMismatch: If the body hash header does not match the body
            ExpiredOrInvalidTimestamp: If the date header is unparsable or outside the allowed skew
            SignatureMismatch: If the signature header does not match
        """
        if not self.policy.enabled():
            return

        secret = secret if secret is not None else self._secret
        if not secret:
            logger.error("Signature verification is enabled but no secret is configured")
            raise SignatureMismatch("No signing secret configured")

        self._verify_body_hash(request)
        self._verify_timestamp(request)
        self._verify_full_signature(request, secret)

    def _verify_body_hash(self, request: SignedRequest) -> None:
        expected = build_body_hash(request.raw_body, self.digest)
        if not _matches(request.body_hash, expected):
            logger.warning(
                f"Body hash mismatch for {request.method} {request.path} from client {request.client_id}"
            )
            raise BodyHashMismatch("Request body hash does not match")

    def _verify_timestamp(self, request: SignedRequest) -> None:
        if not request.timestamp:
            raise ExpiredOrInvalidTimestamp(f"Missing {DATE_HEADER} header")

        try:
            signed_at = parse_timestamp(request.timestamp)
            skew = abs(self.clock() - signed_at)
        except (ValueError, OverflowError) as e:
            logger.warning(f"Invalid signing timestamp from client {request.client_id}: {request.timestamp}")
            raise ExpiredOrInvalidTimestamp(f"Invalid {DATE_HEADER} header") from e

        if skew > self.max_skew:
            logger.warning(
                f"Expired signing timestamp from client {request.client_id}: "
                f"{request.timestamp} is {int(skew.total_seconds())}s from server time"
            )
            raise ExpiredOrInvalidTimestamp(f"{DATE_HEADER} header is outside the allowed clock skew")

    def _verify_full_signature(self, request: SignedRequest, secret: bytes) -> None:
        if request.client_id is None or request.body_hash is None:
            raise SignatureMismatch("Missing signature headers")

        expected = build_signature(
            secret,
            self.digest,
            request.method,
            request.path,
            request.client_id,
            request.timestamp,
            request.body_hash
        )
        if not _matches(request.signature, expected):
            logger.warning(
                f"Signature mismatch for {request.method} {request.path} from client {request.client_id}"
            )
            raise SignatureMismatch("Request signature does not match")
