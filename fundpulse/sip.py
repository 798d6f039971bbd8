"""
Systematic investment plan (SIP) and lumpsum calculations.

A SIP buys a fixed amount every month; the NAV used for a month is the first
sample observed in that calendar month.

The calculator-data endpoint runs project_investments() over its cached
periods when the caller passes an amount.
"""

from datetime import date
from typing import Any, Dict, List, Optional

from fundpulse.exceptions import EmptySeries
from fundpulse.models import CalculatorPeriod, InvestmentResult, NavHistory, NavPoint
from fundpulse.periods import SIP_INSTALLMENTS


def extract_monthly_navs(points: List[NavPoint], expected: Optional[int] = None) -> List[NavPoint]:
    """
    First NAV of each calendar month, in chronological order.

    When more months are found than `expected`, keep the earliest `expected`
    and drop the most recent partial period.
    """
    monthly = []
    last_key = None
    for point in sorted(points, key=lambda p: p.date):
        key = (point.date.year, point.date.month)
        if key != last_key:
            monthly.append(point)
            last_key = key

    if expected is not None and len(monthly) > expected:
        monthly = monthly[:expected]
    return monthly


def calculate_sip(monthly_navs: List[NavPoint], monthly_amount: float,
                  current_nav: float) -> InvestmentResult:
    """
    Value today of investing `monthly_amount` at each monthly NAV.

    Raises:
        EmptySeries: If there are no installments to aggregate.
    """
    if not monthly_navs:
        raise EmptySeries("No SIP installments for period")

    total_units = sum(monthly_amount / point.nav for point in monthly_navs)
    total_invested = monthly_amount * len(monthly_navs)
    current_value = total_units * current_nav
    gains = current_value - total_invested

    return InvestmentResult(
        invested=total_invested,
        current_value=current_value,
        gains=gains,
        returns_percent=gains / total_invested * 100,
        months=len(monthly_navs),
    )


def calculate_lumpsum(amount: float, start_nav: float, current_nav: float) -> InvestmentResult:
    """Value today of a single investment made at `start_nav`."""
    units = amount / start_nav
    current_value = units * current_nav
    gains = current_value - amount
    return InvestmentResult(
        invested=amount,
        current_value=current_value,
        gains=gains,
        returns_percent=gains / amount * 100,
    )


def build_calculator_period(history: NavHistory) -> CalculatorPeriod:
    """Calculator inputs for one period from its NAV history."""
    summary = history.summary
    expected = SIP_INSTALLMENTS.get(history.period)
    return CalculatorPeriod(
        start_date=summary.start_date,
        start_nav=summary.start_nav,
        end_nav=summary.end_nav,
        monthly_navs=extract_monthly_navs(history.data_points, expected),
    )


def project_investments(calculator_data: Dict[str, Any], amount: float) -> Dict[str, Optional[dict]]:
    """
    Lumpsum and monthly SIP outcomes of `amount` for every calculator period.

    Works on the serialized calculator data so cached responses can be
    projected without another provider call. Periods without data stay None.
    """
    current_nav = calculator_data['current_nav']
    projections = {}
    for period, entry in calculator_data['periods'].items():
        if not entry or not entry['monthly_navs']:
            projections[period] = None
            continue
        monthly = [
            NavPoint(date=date.fromisoformat(p['date']), nav=p['nav'])
            for p in entry['monthly_navs']
        ]
        projections[period] = {
            'lumpsum': calculate_lumpsum(amount, entry['start_nav'], current_nav).to_dict(),
            'sip': calculate_sip(monthly, amount, current_nav).to_dict(),
        }
    return projections
