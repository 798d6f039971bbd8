"""
Return calculations over NAV series.

Pure functions, no I/O: safe to call concurrently from request handlers.
Returns are expressed in percent (12.5 means 12.5%).
"""

from datetime import date, datetime, timedelta
from typing import Dict, List, Mapping, Optional

from fundpulse.exceptions import EmptySeries, NoDataAvailable
from fundpulse.models import FundReturns, NavPoint, NavSummary
from fundpulse.periods import years_ago

DAYS_PER_YEAR = 365.25

# A historical sample is only used for a point return if it lies within
# this many days of the target date.
POINT_RETURN_TOLERANCE_DAYS = 60


def parse_date(val) -> Optional[date]:
    """Parse a date from string or date object."""
    if isinstance(val, datetime):
        return val.date()
    if isinstance(val, date):
        return val
    if isinstance(val, str):
        val = val.strip().split('T')[0]
        for fmt in ('%Y-%m-%d', '%d-%m-%Y', '%d/%m/%Y', '%d-%b-%Y'):
            try:
                return datetime.strptime(val, fmt).date()
            except ValueError:
                continue
    return None


def parse_nav_history(raw: Optional[Mapping]) -> List[NavPoint]:
    """
    Convert the provider's {date: nav} mapping into sorted NavPoints.

    Entries whose date or NAV cannot be parsed are skipped.

    Raises:
        NoDataAvailable: If the provider sent no history at all.
        EmptySeries: If history was sent but nothing survived parsing.
    """
    if not raw:
        raise NoDataAvailable("No NAV history data returned")

    points = []
    for raw_date, raw_nav in raw.items():
        nav_date = parse_date(raw_date)
        try:
            nav = float(raw_nav)
        except (TypeError, ValueError):
            continue
        if nav_date is None:
            continue
        points.append(NavPoint(date=nav_date, nav=nav))

    if not points:
        raise EmptySeries("Empty NAV history")

    points.sort(key=lambda p: p.date)
    return points


def absolute_return(start_nav: float, end_nav: float) -> float:
    """Total return between two NAVs."""
    return (end_nav - start_nav) / start_nav * 100


def annualized_return(start_nav: float, end_nav: float, years: float) -> float:
    """
    CAGR between two NAVs over `years`.

    Falls back to the absolute return when years <= 0 (same-day or inverted
    series) instead of dividing by zero.
    """
    if years <= 0:
        return absolute_return(start_nav, end_nav)
    return ((end_nav / start_nav) ** (1 / years) - 1) * 100


def summarize(points: List[NavPoint]) -> NavSummary:
    """
    Summary statistics for a NAV series.

    The input is sorted defensively; callers usually pass it sorted already.

    Raises:
        EmptySeries: If points is empty.
    """
    if not points:
        raise EmptySeries("Empty NAV history")

    ordered = sorted(points, key=lambda p: p.date)
    first, last = ordered[0], ordered[-1]
    years = (last.date - first.date).days / DAYS_PER_YEAR
    navs = [p.nav for p in ordered]

    return NavSummary(
        start_date=first.date,
        end_date=last.date,
        start_nav=first.nav,
        end_nav=last.nav,
        absolute_return=absolute_return(first.nav, last.nav),
        annualized_return=annualized_return(first.nav, last.nav, years),
        min_nav=min(navs),
        max_nav=max(navs),
        total_points=len(ordered),
    )


def nav_near(history: Dict[date, float], target: date,
             tolerance_days: int = POINT_RETURN_TOLERANCE_DAYS) -> Optional[float]:
    """
    NAV of the sample closest to `target`, or None if the closest sample is
    `tolerance_days` or more away.
    """
    closest = None
    closest_diff = None
    for nav_date in sorted(history):
        diff = abs(nav_date - target)
        if closest_diff is None or diff < closest_diff:
            closest, closest_diff = nav_date, diff

    if closest is not None and closest_diff < timedelta(days=tolerance_days):
        return history[closest]
    return None


def calculate_point_returns(nav_history: Mapping, current_nav: Optional[float],
                            today: Optional[date] = None) -> FundReturns:
    """
    Trailing 1Y/3Y/5Y returns from a raw {date: nav} mapping.

    1Y is an absolute return. 3Y and 5Y are CAGR computed with the nominal
    horizon as the exponent, even if the matched sample is up to 60 days off.
    """
    if today is None:
        today = date.today()

    history = {}
    for raw_date, raw_nav in (nav_history or {}).items():
        nav_date = parse_date(raw_date)
        try:
            nav = float(raw_nav)
        except (TypeError, ValueError):
            continue
        if nav_date is not None:
            history[nav_date] = nav

    def old_nav(years):
        return nav_near(history, years_ago(today, years)) if history else None

    def simple(old):
        if not old or not current_nav:
            return None
        return (current_nav / old - 1) * 100

    def cagr(old, years):
        if not old or not current_nav:
            return None
        return ((current_nav / old) ** (1 / years) - 1) * 100

    return FundReturns(
        return_1y=simple(old_nav(1)),
        return_3y=cagr(old_nav(3), 3),
        return_5y=cagr(old_nav(5), 5),
    )
