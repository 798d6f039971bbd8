"""Display period resolution: symbolic period -> date window and sampling frequency."""

from datetime import date
from typing import Optional

from dateutil.relativedelta import relativedelta

from fundpulse.exceptions import InvalidPeriod
from fundpulse.models import PeriodRange

VALID_PERIODS = ('6M', '1Y', '3Y', '5Y', 'MAX')

# Periods offered by the returns calculator (MAX has no fixed installment count)
CALCULATOR_PERIODS = ('6M', '1Y', '3Y', '5Y')

# Expected number of monthly SIP installments per calculator period
SIP_INSTALLMENTS = {
    '6M': 6,
    '1Y': 12,
    '3Y': 36,
    '5Y': 60,
}

# Lookback and sampling frequency per period. Short windows sample daily;
# longer ones sample monthly to bound response size and provider load.
# MAX is a fixed 10-year window: the provider has no inception-to-date query.
_PERIOD_RULES = {
    '6M': (relativedelta(months=6), 'day'),
    '1Y': (relativedelta(years=1), 'day'),
    '3Y': (relativedelta(years=3), 'month'),
    '5Y': (relativedelta(years=5), 'month'),
    'MAX': (relativedelta(years=10), 'month'),
}


def resolve_period(period: str, today: Optional[date] = None) -> PeriodRange:
    """
    Map a display period to a concrete (from_date, to_date, frequency).

    Args:
        period: One of VALID_PERIODS.
        today: Reference date (defaults to date.today()).

    Raises:
        InvalidPeriod: For any other value.
    """
    rule = _PERIOD_RULES.get(period) if isinstance(period, str) else None
    if rule is None:
        raise InvalidPeriod(period)

    if today is None:
        today = date.today()

    lookback, frequency = rule
    return PeriodRange(
        period=period,
        from_date=today - lookback,
        to_date=today,
        frequency=frequency,
    )


def years_ago(today: date, years: int) -> date:
    """Same calendar day N years earlier (Feb 29 clamps to Feb 28)."""
    return today - relativedelta(years=years)
