"""Unit tests for the DateNormalizer."""

from datetime import date

import pytest

from flightservice.core.exceptions import InvalidDateFormat
from flightservice.services.date_normalizer import DateNormalizer


@pytest.fixture
def normalizer():
    """DateNormalizer whose clock is fixed in 2025."""
    return DateNormalizer(clock=lambda: date(2025, 12, 20))


class TestDateNormalizerParse:
    """Test cases for strict parsing."""

    @pytest.mark.parametrize("token,expected", [
        ("Wed Jan 15", date(2025, 1, 15)),
        ("Mon Jan 06", date(2025, 1, 6)),
        ("Fri Feb 28", date(2025, 2, 28)),
        ("Sun Dec 31", date(2025, 12, 31)),
        ("sat jul 04", date(2025, 7, 4)),
    ])
    def test_parses_month_and_day_in_clock_year(self, normalizer, token, expected):
        """Test well-formed tokens resolve to the clock's year."""
        assert normalizer.parse(token) == expected

    @pytest.mark.parametrize("token", [
        "Mon Jan 06 2025",
        "Mon Jan 06 2025 00:00:00 GMT-0500 (Eastern Standard Time)",
        "Mon Jan 06 garbage",
        "Mon Jan 06",
    ])
    def test_trailing_characters_are_ignored(self, normalizer, token):
        """Test anything after the first ten characters is ignored."""
        assert normalizer.parse(token) == date(2025, 1, 6)

    def test_year_in_token_does_not_override_clock(self):
        """Test a year in the token is ignored in favour of the clock's year."""
        normalizer = DateNormalizer(clock=lambda: date(2031, 1, 1))
        assert normalizer.parse("Mon Jan 06 2025") == date(2031, 1, 6)

    def test_weekday_is_not_cross_checked(self, normalizer):
        """Test the weekday name does not have to match the resulting date."""
        # Jan 15 2025 is a Wednesday
        assert normalizer.parse("Fri Jan 15") == date(2025, 1, 15)

    def test_past_dates_stay_in_current_year(self, normalizer):
        """Test a January date parsed in December is not moved to next year."""
        parsed = normalizer.parse("Thu Jan 02")
        assert parsed == date(2025, 1, 2)
        assert parsed < normalizer.clock()

    def test_year_read_on_every_parse(self):
        """Test the clock is consulted per call, not cached."""
        years = iter([2025, 2026])
        normalizer = DateNormalizer(clock=lambda: date(next(years), 1, 1))

        assert normalizer.parse("Mon Mar 02").year == 2025
        assert normalizer.parse("Mon Mar 02").year == 2026

    def test_leap_day_depends_on_clock_year(self):
        """Test Feb 29 is only valid in leap years."""
        assert DateNormalizer(clock=lambda: date(2028, 1, 1)).parse("Tue Feb 29") == date(2028, 2, 29)

        with pytest.raises(InvalidDateFormat):
            DateNormalizer(clock=lambda: date(2025, 1, 1)).parse("Sat Feb 29")

    @pytest.mark.parametrize("token", [
        None,
        "",
        "Wed Jan 1",
        "2025-01-15",
        "Wednesday January 15",
        "Wed Jan 1x",
        "Wed Foo 15",
        "Xyz Jan 15",
        "Wed Jan 32",
        "Wed Jan 00",
        "Wed-Jan-15",
    ])
    def test_malformed_tokens_raise(self, normalizer, token):
        """Test malformed tokens raise InvalidDateFormat."""
        with pytest.raises(InvalidDateFormat):
            normalizer.parse(token)

    def test_default_clock_uses_today(self):
        """Test the default clock yields the current year."""
        assert DateNormalizer().parse("Mon Mar 02").year == date.today().year


class TestDateNormalizerParseLenient:
    """Test cases for lenient parsing."""

    def test_valid_token_parses(self, normalizer):
        assert normalizer.parse_lenient("Wed Jan 15 2025") == date(2025, 1, 15)

    @pytest.mark.parametrize("token", [None, "", "not a date", "Wed Jan 32"])
    def test_invalid_token_returns_none(self, normalizer, token):
        """Test lenient parsing returns None where strict parsing raises."""
        assert normalizer.parse_lenient(token) is None
