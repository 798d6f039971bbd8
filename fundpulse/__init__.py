"""
fundpulse: mutual fund catalog mirrored from PulseDB.

Keeps a local SQLite copy of regular-growth schemes from selected AMCs and
serves fund listings, NAV history and returns-calculator data over REST.
"""

from fundpulse.models import (
    Fund,
    FundReturns,
    NavPoint,
    NavHistory,
    NavSummary,
    PeriodRange,
    SyncResult,
)
from fundpulse.periods import resolve_period
from fundpulse.returns import calculate_point_returns, summarize

__version__ = "1.0.0"
__all__ = [
    "Fund",
    "FundReturns",
    "NavPoint",
    "NavHistory",
    "NavSummary",
    "PeriodRange",
    "SyncResult",
    "resolve_period",
    "calculate_point_returns",
    "summarize",
]
