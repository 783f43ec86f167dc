"""
Date normalizer for the loosely formatted dates sent by the Acme Air web UI.

The UI sends dates such as ``"Wed Jan 15 2025 00:00:00 GMT+0000"``. Only the
first ten characters (weekday, month and day) are used; the year always comes
from the normalizer's clock.
"""

import logging
import re
from datetime import date, datetime
from typing import Callable, Optional

from flightservice.core.exceptions import InvalidDateFormat

logger = logging.getLogger(__name__)

DATE_TOKEN_LENGTH = 10
DATE_TOKEN_PATTERN = re.compile(r"^[A-Za-z]{3} [A-Za-z]{3} \d{2}$")
DATE_FORMAT = "%a %b %d %Y"


class DateNormalizer:
    """
    Parses 'Www Mmm dd' date tokens into dates of the current year.

    Dates are never moved into the following year: a January date parsed in
    December resolves to January of the current year.
    """

    def __init__(self, clock: Callable[[], date] = date.today):
        """
        Initialize the DateNormalizer.

        Args:
            clock: Callable returning today's date; only its year is used
        """
        self.clock = clock

    def parse(self, token: Optional[str]) -> date:
        """
        Parse a date token.

        Args:
            token: Text starting with 'Www Mmm dd'; anything after the
                first ten characters is ignored

        Returns:
            The date in the clock's current year

        Raises:
            InvalidDateFormat: If the token is missing or malformed
        """
        if token is None:
            raise InvalidDateFormat("Date is required")

        date_only = token[:DATE_TOKEN_LENGTH]
        if not DATE_TOKEN_PATTERN.match(date_only):
            raise InvalidDateFormat(f"Date '{token}' is not of the form 'Www Mmm dd'")

        year = self.clock().year
        try:
            return datetime.strptime(f"{date_only} {year}", DATE_FORMAT).date()
        except ValueError as e:
            raise InvalidDateFormat(f"Date '{token}' is not a valid date in {year}: {e}") from e

    def parse_lenient(self, token: Optional[str]) -> Optional[date]:
        """Parse a date token, returning None instead of raising on bad input."""
        try:
            return self.parse(token)
        except InvalidDateFormat as e:
            logger.warning(f"Ignoring unparsable date: {e}")
            return None
