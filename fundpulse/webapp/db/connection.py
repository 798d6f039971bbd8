"""Database connection, schema initialization, and context manager."""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)

__all__ = ['get_connection', 'get_db', 'init_db']

PathLike = Union[str, Path]


def get_connection(db_path: PathLike) -> sqlite3.Connection:
    """Get a database connection with row factory."""
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_db(db_path: PathLike):
    """Context manager for database connections."""
    conn = get_connection(db_path)
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def init_db(db_path: PathLike):
    """Initialize the database schema."""
    path = Path(db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    is_new = not path.exists()

    with get_db(path) as conn:
        cursor = conn.cursor()

        # Fund master - one row per scheme code, overwritten by every sync
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS funds (
                scheme_code TEXT PRIMARY KEY,
                scheme_name TEXT NOT NULL,
                scheme_name_unique TEXT,
                amc TEXT,
                amc_code TEXT,
                category TEXT,
                sub_category TEXT,
                plan_name TEXT,
                option_name TEXT,

                current_nav REAL,
                nav_date TEXT,

                aum REAL,
                expense_ratio REAL,
                fund_manager TEXT,
                benchmark TEXT,
                date_of_inception TEXT,

                risk_profile TEXT,
                risk_rating REAL,
                riskometer TEXT,
                vr_rating TEXT,

                min_investment REAL,
                min_sip_investment REAL,
                exit_load_period INTEGER,
                exit_load_rate REAL,
                exit_load_remark TEXT,

                isin TEXT,
                objective TEXT,
                scheme_doc_url TEXT,

                created_at TEXT DEFAULT CURRENT_TIMESTAMP,
                updated_at TEXT DEFAULT CURRENT_TIMESTAMP
            )
        """)

        # Trailing returns, recomputed wholesale on each sync
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS fund_returns (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                scheme_code TEXT UNIQUE,
                return_1y REAL,
                return_3y REAL,
                return_5y REAL,
                updated_at TEXT DEFAULT CURRENT_TIMESTAMP
            )
        """)

        # Distinct (category, sub-category) pairs seen across funds
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS categories (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                category_name TEXT NOT NULL,
                sub_category_name TEXT,
                UNIQUE(category_name, sub_category_name)
            )
        """)

        cursor.execute("CREATE INDEX IF NOT EXISTS idx_funds_scheme_name ON funds(scheme_name)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_funds_category ON funds(category, sub_category)")
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_funds_amc ON funds(amc)")

    if is_new:
        logger.info(f"New SQLite database created at {path}")
    else:
        logger.info(f"SQLite database loaded from {path}")
