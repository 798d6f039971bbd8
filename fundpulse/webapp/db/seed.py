"""Bundled sample catalog used when PulseDB credentials are unavailable."""

import logging
import sqlite3
from datetime import date

from fundpulse.models import Fund, FundReturns
from fundpulse.webapp.db.funds import insert_category, upsert_fund, upsert_fund_returns

logger = logging.getLogger(__name__)

__all__ = ["SAMPLE_CATEGORIES", "SAMPLE_FUNDS", "seed_sample_data"]

SAMPLE_CATEGORIES = {
    'Equity': ['Large Cap', 'Mid Cap', 'Small Cap', 'Multi Cap', 'ELSS'],
    'Debt': ['Liquid', 'Short Duration', 'Corporate Bond', 'Gilt'],
    'Hybrid': ['Balanced Advantage', 'Aggressive Hybrid', 'Conservative Hybrid'],
}

# (scheme_code, scheme_name, amc, category, sub_category, nav, 1Y, 3Y, 5Y)
SAMPLE_FUNDS = [
    ('INF846K01DP8', 'Axis Bluechip Fund - Growth', 'Axis Mutual Fund', 'Equity', 'Large Cap', 52.34, 12.5, 8.2, 14.1),
    ('INF179K01EK7', 'HDFC Mid-Cap Opportunities Fund - Growth', 'HDFC Mutual Fund', 'Equity', 'Mid Cap', 145.67, 25.3, 18.7, 16.9),
    ('INF090I01EN6', 'SBI Small Cap Fund - Growth', 'SBI Mutual Fund', 'Equity', 'Small Cap', 128.45, 35.2, 22.1, 19.8),
    ('INF194K01Y82', 'Mirae Asset Large Cap Fund - Growth', 'Mirae Asset Mutual Fund', 'Equity', 'Large Cap', 89.23, 15.4, 11.2, 15.6),
    ('INF200K01RO0', 'Parag Parikh Flexi Cap Fund - Growth', 'PPFAS Mutual Fund', 'Equity', 'Multi Cap', 67.89, 22.8, 19.4, 18.2),
    ('INF109K01YZ0', 'ICICI Prudential Liquid Fund - Growth', 'ICICI Prudential Mutual Fund', 'Debt', 'Liquid', 342.56, 7.2, 6.8, 6.5),
    ('INF209K01UN5', 'Kotak Balanced Advantage Fund - Growth', 'Kotak Mutual Fund', 'Hybrid', 'Balanced Advantage', 15.67, 11.2, 9.8, 12.1),
    ('INF179K01SY1', 'HDFC Tax Saver Fund - Growth', 'HDFC Mutual Fund', 'Equity', 'ELSS', 978.34, 18.9, 14.2, 13.8),
    ('INF846K01EW2', 'Axis Long Term Equity Fund - Growth', 'Axis Mutual Fund', 'Equity', 'ELSS', 78.45, 14.3, 10.5, 12.9),
    ('INF090I01DD3', 'SBI Equity Hybrid Fund - Growth', 'SBI Mutual Fund', 'Hybrid', 'Aggressive Hybrid', 234.67, 13.8, 11.4, 13.2),
    ('INF174K01LS2', 'Nippon India Small Cap Fund - Growth', 'Nippon India Mutual Fund', 'Equity', 'Small Cap', 145.23, 38.5, 25.3, 21.4),
    ('INF789F01PN3', 'UTI Flexi Cap Fund - Growth', 'UTI Mutual Fund', 'Equity', 'Multi Cap', 289.45, 16.7, 12.3, 14.5),
    ('INF846K01131', 'Axis Midcap Fund - Growth', 'Axis Mutual Fund', 'Equity', 'Mid Cap', 89.12, 28.4, 21.6, 18.9),
    ('INF179K01EC4', 'HDFC Flexi Cap Fund - Growth', 'HDFC Mutual Fund', 'Equity', 'Multi Cap', 1567.89, 14.2, 10.8, 12.6),
    ('INF090I01EL5', 'SBI Corporate Bond Fund - Growth', 'SBI Mutual Fund', 'Debt', 'Corporate Bond', 45.67, 8.1, 7.5, 7.8),
]


def seed_sample_data(conn: sqlite3.Connection) -> int:
    """Load the sample catalog. Returns the number of funds written."""
    for category, subs in SAMPLE_CATEGORIES.items():
        for sub in subs:
            insert_category(conn, category, sub)

    today = date.today().isoformat()
    for code, name, amc, category, sub, nav, r1, r3, r5 in SAMPLE_FUNDS:
        upsert_fund(conn, Fund(
            scheme_code=code,
            scheme_name=name,
            amc=amc,
            category=category,
            sub_category=sub,
            current_nav=nav,
            nav_date=today,
        ))
        upsert_fund_returns(conn, code, FundReturns(r1, r3, r5))

    logger.info(f"Seeded {len(SAMPLE_FUNDS)} sample funds")
    return len(SAMPLE_FUNDS)
