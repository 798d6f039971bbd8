"""
Data models for fundpulse.

This module defines the core data structures using dataclasses for:
- Fund master records and their trailing returns
- NAV time series points and summaries
- Period ranges and calculator results
- Sync run results
"""

from dataclasses import asdict, dataclass, field, fields
from datetime import date
from typing import Any, Dict, List, Optional


@dataclass
class Fund:
    """
    A mutual fund share class mirrored from PulseDB.

    Only scheme_code and scheme_name are required; every other attribute is
    independently nullable because the provider's metadata is patchy.

    Attributes:
        scheme_code: Provider-assigned unique identifier (upsert key)
        scheme_name: Display name
        scheme_name_unique: Normalized unique name from metadata
        amc: Asset management company name
        amc_code: Asset management company code
        category: Asset category (e.g. Equity)
        sub_category: Asset sub-category (e.g. Large Cap)
        plan_name: Regular / Direct
        option_name: Growth / Dividend
        current_nav: Latest NAV
        nav_date: Date of the latest NAV (YYYY-MM-DD)
    """
    scheme_code: str
    scheme_name: str = ""
    scheme_name_unique: Optional[str] = None
    amc: Optional[str] = None
    amc_code: Optional[str] = None
    category: Optional[str] = None
    sub_category: Optional[str] = None
    plan_name: Optional[str] = None
    option_name: Optional[str] = None

    # NAV
    current_nav: Optional[float] = None
    nav_date: Optional[str] = None

    # Fund details
    aum: Optional[float] = None
    expense_ratio: Optional[float] = None
    fund_manager: Optional[str] = None
    benchmark: Optional[str] = None
    date_of_inception: Optional[str] = None

    # Risk
    risk_profile: Optional[str] = None
    risk_rating: Optional[float] = None
    riskometer: Optional[str] = None
    vr_rating: Optional[str] = None

    # Investment
    min_investment: Optional[float] = None
    min_sip_investment: Optional[float] = None
    exit_load_period: Optional[int] = None
    exit_load_rate: Optional[float] = None
    exit_load_remark: Optional[str] = None

    # Other
    isin: Optional[str] = None
    objective: Optional[str] = None
    scheme_doc_url: Optional[str] = None

    def __post_init__(self):
        """Normalize fund identifiers."""
        self.scheme_code = str(self.scheme_code).strip()
        self.scheme_name = " ".join(self.scheme_name.split()) if self.scheme_name else ""
        if self.nav_date and "T" in self.nav_date:
            self.nav_date = self.nav_date.split("T")[0]

    @classmethod
    def column_names(cls) -> List[str]:
        """Column order used by the funds table."""
        return [f.name for f in fields(cls)]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class FundReturns:
    """Trailing point returns for a fund, in percent."""
    return_1y: Optional[float] = None
    return_3y: Optional[float] = None
    return_5y: Optional[float] = None

    def has_any(self) -> bool:
        """True when at least one horizon produced a value."""
        return any(r is not None for r in (self.return_1y, self.return_3y, self.return_5y))


@dataclass(frozen=True)
class NavPoint:
    """A single (date, NAV) sample."""
    date: date
    nav: float

    def to_dict(self) -> Dict[str, Any]:
        return {'date': self.date.isoformat(), 'nav': self.nav}


@dataclass(frozen=True)
class PeriodRange:
    """Concrete window and sampling frequency for a display period."""
    period: str
    from_date: date
    to_date: date
    frequency: str


@dataclass
class NavSummary:
    """Summary statistics over a NAV series."""
    start_date: date
    end_date: date
    start_nav: float
    end_nav: float
    absolute_return: float
    annualized_return: float
    min_nav: float
    max_nav: float
    total_points: int

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data['start_date'] = self.start_date.isoformat()
        data['end_date'] = self.end_date.isoformat()
        return data


@dataclass
class NavHistory:
    """NAV history for one fund over one display period."""
    scheme_code: str
    period: str
    frequency: str
    data_points: List[NavPoint] = field(default_factory=list)
    summary: Optional[NavSummary] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'scheme_code': self.scheme_code,
            'period': self.period,
            'frequency': self.frequency,
            'data_points': [p.to_dict() for p in self.data_points],
            'summary': self.summary.to_dict() if self.summary else None,
        }


@dataclass
class CalculatorPeriod:
    """Returns-calculator inputs for one period."""
    start_date: date
    start_nav: float
    end_nav: float
    monthly_navs: List[NavPoint] = field(default_factory=list)

    @property
    def months(self) -> int:
        return len(self.monthly_navs)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'start_date': self.start_date.isoformat(),
            'start_nav': self.start_nav,
            'end_nav': self.end_nav,
            'months': self.months,
            'monthly_navs': [p.to_dict() for p in self.monthly_navs],
        }


@dataclass
class InvestmentResult:
    """Outcome of a hypothetical lumpsum or SIP investment."""
    invested: float
    current_value: float
    gains: float
    returns_percent: float
    months: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        if self.months is None:
            del data['months']
        return data


@dataclass
class SyncResult:
    """Summary of a sync run."""
    synced_count: int = 0
    error_count: int = 0
    duration: float = 0.0
    failed_codes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'syncedCount': self.synced_count,
            'errorCount': self.error_count,
            'duration': self.duration,
        }
