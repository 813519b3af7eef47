"""
Tests for recurrence.calculate_next_due_date().

Month-based steps must clamp to the end of shorter months instead of
overflowing into the following month.
"""

from datetime import date

import pytest

from facilitydesk.exceptions import UnsupportedFrequencyError
from facilitydesk.models.enums import FrequencyType
from facilitydesk.services.recurrence import calculate_next_due_date


class TestCalculateNextDueDate:
    """Tests for each supported frequency."""

    @pytest.mark.parametrize(
        "frequency, value, start, expected",
        [
            (FrequencyType.DAILY, 1, date(2024, 3, 15), date(2024, 3, 16)),
            (FrequencyType.DAILY, 10, date(2024, 3, 25), date(2024, 4, 4)),
            (FrequencyType.WEEKLY, 2, date(2024, 3, 15), date(2024, 3, 29)),
            (FrequencyType.MONTHLY, 1, date(2024, 3, 15), date(2024, 4, 15)),
            (FrequencyType.QUARTERLY, 1, date(2024, 1, 15), date(2024, 4, 15)),
            (FrequencyType.SEMI_ANNUAL, 1, date(2024, 1, 15), date(2024, 7, 15)),
            (FrequencyType.ANNUAL, 1, date(2024, 3, 15), date(2025, 3, 15)),
        ],
    )
    def test_steps(self, frequency, value, start, expected):
        """Each frequency advances by its period times the value."""
        assert calculate_next_due_date(frequency, value, start) == expected

    def test_month_end_clamps_in_leap_year(self):
        """Jan 31 plus one month is Feb 29 in a leap year."""
        result = calculate_next_due_date(FrequencyType.MONTHLY, 1, date(2024, 1, 31))
        assert result == date(2024, 2, 29)

    def test_month_end_clamps_in_common_year(self):
        """Jan 31 plus one month is Feb 28 outside a leap year."""
        result = calculate_next_due_date(FrequencyType.MONTHLY, 1, date(2023, 1, 31))
        assert result == date(2023, 2, 28)

    def test_multiplied_months_do_not_drift(self):
        """Three months from Jan 31 lands on Apr 30, not Apr 28."""
        result = calculate_next_due_date(FrequencyType.MONTHLY, 3, date(2024, 1, 31))
        assert result == date(2024, 4, 30)

    def test_leap_day_annual(self):
        """Feb 29 plus one year clamps to Feb 28."""
        result = calculate_next_due_date(FrequencyType.ANNUAL, 1, date(2024, 2, 29))
        assert result == date(2025, 2, 28)

    def test_accepts_wire_string(self):
        """The frequency may be given as its string value."""
        assert calculate_next_due_date("weekly", 1, date(2024, 3, 15)) == date(
            2024, 3, 22
        )


class TestUnsupportedInput:
    """Tests for the error cases."""

    def test_custom_has_no_recurrence(self):
        """Custom schedules are set by hand, never calculated."""
        with pytest.raises(UnsupportedFrequencyError):
            calculate_next_due_date(FrequencyType.CUSTOM, 1, date(2024, 3, 15))

    def test_unknown_frequency(self):
        """An unrecognised frequency string is rejected."""
        with pytest.raises(UnsupportedFrequencyError):
            calculate_next_due_date("fortnightly", 1, date(2024, 3, 15))

    @pytest.mark.parametrize("value", [0, -1])
    def test_non_positive_value(self, value):
        """frequency_value must be at least 1."""
        with pytest.raises(ValueError):
            calculate_next_due_date(FrequencyType.DAILY, value, date(2024, 3, 15))
