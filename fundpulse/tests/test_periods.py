"""Tests for display period resolution."""

from datetime import date

import pytest

from fundpulse.exceptions import InvalidPeriod
from fundpulse.periods import SIP_INSTALLMENTS, VALID_PERIODS, resolve_period, years_ago

TODAY = date(2024, 3, 15)


class TestResolvePeriod:
    """Tests for resolve_period()."""

    @pytest.mark.parametrize("period", VALID_PERIODS)
    def test_window_is_ordered(self, period):
        """Every valid period yields from_date < to_date ending today."""
        window = resolve_period(period, TODAY)
        assert window.from_date < window.to_date
        assert window.to_date == TODAY
        assert window.period == period

    @pytest.mark.parametrize("period,expected_from,frequency", [
        ('6M', date(2023, 9, 15), 'day'),
        ('1Y', date(2023, 3, 15), 'day'),
        ('3Y', date(2021, 3, 15), 'month'),
        ('5Y', date(2019, 3, 15), 'month'),
        ('MAX', date(2014, 3, 15), 'month'),
    ])
    def test_lookback_and_frequency(self, period, expected_from, frequency):
        window = resolve_period(period, TODAY)
        assert window.from_date == expected_from
        assert window.frequency == frequency

    def test_month_end_clamps(self):
        """Six months before Aug 31 is Feb 29 in a leap year, not an overflow."""
        window = resolve_period('6M', date(2024, 8, 31))
        assert window.from_date == date(2024, 2, 29)

    def test_defaults_to_today(self):
        window = resolve_period('1Y')
        assert window.to_date == date.today()

    @pytest.mark.parametrize("period", ['2Y', '1y', '', 'ALL', None, 12])
    def test_invalid_period(self, period):
        with pytest.raises(InvalidPeriod) as exc_info:
            resolve_period(period, TODAY)
        assert exc_info.value.status_code == 400
        assert '6M, 1Y, 3Y, 5Y, MAX' in exc_info.value.message


class TestHelpers:

    def test_sip_installments(self):
        assert SIP_INSTALLMENTS == {'6M': 6, '1Y': 12, '3Y': 36, '5Y': 60}

    def test_years_ago_leap_day(self):
        assert years_ago(date(2024, 2, 29), 1) == date(2023, 2, 28)
