"""
Database access layer for the fundpulse webapp.

Re-exports all public functions from the sub-modules:

    from fundpulse.webapp.db import list_funds
    from fundpulse.webapp.db.funds import list_funds  # same thing
"""

__all__ = [
    # connection
    "get_connection", "get_db", "init_db",
    # funds
    "upsert_fund", "upsert_fund_returns", "insert_category", "list_funds",
    "get_fund_detail", "get_categories", "get_fund_count",
    # seed
    "SAMPLE_CATEGORIES", "SAMPLE_FUNDS", "seed_sample_data",
]

from fundpulse.webapp.db.connection import *  # noqa: F401,F403
from fundpulse.webapp.db.funds import *  # noqa: F401,F403
from fundpulse.webapp.db.seed import *  # noqa: F401,F403
