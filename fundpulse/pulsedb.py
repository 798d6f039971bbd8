"""
PulseDB partner API client.

All PulseDB endpoints are POSTs carrying a session token obtained from
partner_login. The token is memoized for 23 hours and re-acquired
transparently, so callers never handle it.
"""

import logging
import time
from datetime import date
from typing import Any, Callable, Dict, Optional

import requests

from fundpulse.exceptions import (
    DataUnavailable,
    NoDataAvailable,
    UpstreamAuthFailure,
    UpstreamRequestFailure,
)
from fundpulse.models import NavHistory
from fundpulse.periods import CALCULATOR_PERIODS, resolve_period
from fundpulse.returns import parse_nav_history, summarize
from fundpulse.sip import build_calculator_period

logger = logging.getLogger(__name__)

TOKEN_LIFETIME = 23 * 60 * 60  # seconds

LOGIN_ENDPOINT = '/rest/api/v1/partner_login'
SEARCH_ENDPOINT = '/rest/api/v1/mf/search'
CATEGORIES_ENDPOINT = '/rest/api/v1/mf/asset_categories'
METADATA_ENDPOINT = '/rest/api/v1/mf/metadata'
NAV_HISTORY_ENDPOINT = '/rest/api/v1/mf/nav-history'


class PulseDBClient:
    """
    Session-token based client for the PulseDB mutual fund API.
    """

    def __init__(self, base_url: str, api_key: Optional[str], api_secret: Optional[str],
                 timeout: int = 30, session: Optional[requests.Session] = None,
                 clock: Callable[[], float] = time.time):
        self.base_url = (base_url or '').rstrip('/')
        self.api_key = api_key
        self.api_secret = api_secret
        self.timeout = timeout
        self.session = session or requests.Session()
        self._clock = clock
        self._token: Optional[str] = None
        self._token_expiry: Optional[float] = None

    @classmethod
    def from_settings(cls, settings) -> 'PulseDBClient':
        return cls(
            base_url=settings.pulsedb_base_url,
            api_key=settings.pulsedb_api_key,
            api_secret=settings.pulsedb_api_secret,
            timeout=settings.request_timeout,
        )

    # ==================== Transport ====================

    def _post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{endpoint}"
        try:
            response = self.session.post(url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            logger.error(f"PulseDB request failed for {endpoint}: {e}")
            raise UpstreamRequestFailure(endpoint, str(e)) from e

    def authenticate(self) -> None:
        """Log in as partner and memoize the session token."""
        try:
            body = self._post(LOGIN_ENDPOINT, {
                'partner': self.api_key,
                'key': self.api_secret,
            })
        except UpstreamRequestFailure as e:
            logger.error(f"PulseDB authentication failed: {e}")
            raise UpstreamAuthFailure(f"PulseDB authentication failed: {e.message}") from e

        token = ((body or {}).get('data') or {}).get('auth')
        if not token:
            logger.error("PulseDB authentication failed: no token in response")
            raise UpstreamAuthFailure(f"No token in response: {body}")

        self._token = token
        self._token_expiry = self._clock() + TOKEN_LIFETIME
        logger.info("PulseDB authentication successful")

    def ensure_authenticated(self) -> None:
        if not self._token or not self._token_expiry or self._clock() >= self._token_expiry:
            self.authenticate()

    def request(self, endpoint: str, **params) -> Dict[str, Any]:
        """POST to an authenticated endpoint and return the decoded body."""
        self.ensure_authenticated()
        return self._post(endpoint, {'auth': self._token, **params})

    # ==================== Endpoints ====================

    def search_funds(self, query: str) -> Dict[str, Any]:
        return self.request(SEARCH_ENDPOINT, search_text=query)

    def get_categories(self) -> Dict[str, Any]:
        return self.request(CATEGORIES_ENDPOINT)

    def get_fund_metadata(self, scheme_code: str) -> Dict[str, Any]:
        return self.request(METADATA_ENDPOINT, scheme_code=scheme_code)

    def get_nav_history(self, scheme_code: str, from_date: date, to_date: date,
                        frequency: str = 'month') -> Dict[str, Any]:
        return self.request(
            NAV_HISTORY_ENDPOINT,
            scheme_code=scheme_code,
            frequency=frequency,
            **{'from': from_date.isoformat(), 'to': to_date.isoformat()},
        )

    # ==================== Derived data ====================

    def get_nav_history_for_period(self, scheme_code: str, period: str,
                                   today: Optional[date] = None) -> NavHistory:
        """
        NAV series and summary for a display period.

        Raises:
            InvalidPeriod: Unrecognized period.
            NoDataAvailable: Provider returned no history.
            EmptySeries: History contained no usable points.
        """
        window = resolve_period(period, today)
        body = self.get_nav_history(scheme_code, window.from_date, window.to_date,
                                    window.frequency)
        raw = ((body or {}).get('data') or {}).get('nav_history')
        points = parse_nav_history(raw)

        return NavHistory(
            scheme_code=scheme_code,
            period=period,
            frequency=window.frequency,
            data_points=points,
            summary=summarize(points),
        )

    def get_calculator_data(self, scheme_code: str, today: Optional[date] = None) -> Dict[str, Any]:
        """
        Returns-calculator inputs for every calculator period.

        A period whose history cannot be fetched is reported as None rather
        than failing the whole response.

        Raises:
            NoDataAvailable: If no period produced any data.
        """
        periods = {}
        for period in CALCULATOR_PERIODS:
            try:
                history = self.get_nav_history_for_period(scheme_code, period, today)
                calc_period = build_calculator_period(history)
                periods[period] = calc_period if calc_period.months else None
            except (DataUnavailable, UpstreamRequestFailure) as e:
                logger.warning(f"Failed to get data for period {period} of {scheme_code}: {e}")
                periods[period] = None

        current_nav = None
        current_date = None
        for calc_period in periods.values():
            if calc_period is not None:
                current_nav = calc_period.end_nav
                current_date = calc_period.monthly_navs[-1].date.isoformat()
                break

        if current_nav is None:
            raise NoDataAvailable(f"No NAV history available for {scheme_code}")

        return {
            'scheme_code': scheme_code,
            'current_nav': current_nav,
            'current_date': current_date,
            'periods': {p: (cp.to_dict() if cp else None) for p, cp in periods.items()},
        }
