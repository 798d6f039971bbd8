"""Fund, returns and category table operations."""

import logging
import math
import sqlite3
from typing import List, Optional

from fundpulse.models import Fund, FundReturns

logger = logging.getLogger(__name__)

__all__ = [
    "upsert_fund",
    "upsert_fund_returns",
    "insert_category",
    "list_funds",
    "get_fund_detail",
    "get_categories",
    "get_fund_count",
]

LIST_COLUMNS = [
    'scheme_code', 'scheme_name', 'amc', 'category', 'sub_category',
    'current_nav', 'nav_date', 'aum', 'expense_ratio', 'riskometer', 'vr_rating',
]


# ==================== Writes ====================

def upsert_fund(conn: sqlite3.Connection, fund: Fund) -> None:
    """Insert or replace a fund keyed by scheme code."""
    columns = Fund.column_names()
    values = [getattr(fund, col) for col in columns]
    placeholders = ", ".join("?" for _ in columns)

    conn.execute(f"""
        INSERT OR REPLACE INTO funds ({", ".join(columns)}, updated_at)
        VALUES ({placeholders}, datetime('now'))
    """, values)


def upsert_fund_returns(conn: sqlite3.Connection, scheme_code: str, returns: FundReturns) -> None:
    """Insert or replace the trailing returns row for a fund."""
    conn.execute("""
        INSERT OR REPLACE INTO fund_returns (scheme_code, return_1y, return_3y, return_5y, updated_at)
        VALUES (?, ?, ?, ?, datetime('now'))
    """, (scheme_code, returns.return_1y, returns.return_3y, returns.return_5y))


def insert_category(conn: sqlite3.Connection, category: str, sub_category: Optional[str] = None) -> bool:
    """
    Record a (category, sub-category) pair if not already present.

    Returns True if a new row was inserted.
    """
    sub_category = sub_category or None
    # UNIQUE does not dedupe NULLs in SQLite, so check bare categories explicitly
    if sub_category is None:
        row = conn.execute("""
            SELECT 1 FROM categories
            WHERE category_name = ? AND sub_category_name IS NULL
        """, (category,)).fetchone()
        if row:
            return False

    cursor = conn.execute("""
        INSERT OR IGNORE INTO categories (category_name, sub_category_name)
        VALUES (?, ?)
    """, (category, sub_category))
    return cursor.rowcount > 0


# ==================== Reads ====================

def list_funds(conn: sqlite3.Connection, search: Optional[str] = None,
               category: Optional[str] = None, page: int = 1, limit: int = 20) -> dict:
    """
    Paginated fund list.

    search is a case-insensitive substring match on scheme name,
    category an exact match.
    """
    page = max(page, 1)
    limit = max(limit, 1)
    offset = (page - 1) * limit

    where = "WHERE 1=1"
    params = []
    if search:
        where += " AND LOWER(scheme_name) LIKE LOWER(?)"
        params.append(f"%{search}%")
    if category:
        where += " AND category = ?"
        params.append(category)

    row = conn.execute(f"SELECT COUNT(*) AS count FROM funds {where}", params).fetchone()
    total = row['count'] if row else 0

    rows = conn.execute(f"""
        SELECT {", ".join(LIST_COLUMNS)}
        FROM funds
        {where}
        ORDER BY scheme_name
        LIMIT ? OFFSET ?
    """, params + [limit, offset]).fetchall()

    return {
        'funds': [dict(r) for r in rows],
        'total': total,
        'page': page,
        'totalPages': math.ceil(total / limit),
    }


def get_fund_detail(conn: sqlite3.Connection, scheme_code: str) -> Optional[dict]:
    """Full fund record with nested exit_load and returns, or None."""
    fund = conn.execute("""
        SELECT f.*, fr.return_1y, fr.return_3y, fr.return_5y
        FROM funds f
        LEFT JOIN fund_returns fr ON f.scheme_code = fr.scheme_code
        WHERE f.scheme_code = ?
    """, (scheme_code,)).fetchone()

    if not fund:
        return None

    detail = {
        col: fund[col] for col in Fund.column_names()
        if not col.startswith('exit_load_')
    }
    detail['exit_load'] = {
        'period': fund['exit_load_period'],
        'rate': fund['exit_load_rate'],
        'remark': fund['exit_load_remark'],
    }
    detail['returns'] = {
        '1Y': fund['return_1y'],
        '3Y': fund['return_3y'],
        '5Y': fund['return_5y'],
    }
    return detail


def get_categories(conn: sqlite3.Connection) -> List[dict]:
    """Categories with their sub-categories, ordered by name."""
    rows = conn.execute("""
        SELECT DISTINCT category_name, sub_category_name
        FROM categories
        WHERE category_name IS NOT NULL
        ORDER BY category_name, sub_category_name
    """).fetchall()

    category_map = {}
    for row in rows:
        subs = category_map.setdefault(row['category_name'], [])
        if row['sub_category_name']:
            subs.append(row['sub_category_name'])

    return [{'name': name, 'subCategories': subs} for name, subs in category_map.items()]


def get_fund_count(conn: sqlite3.Connection) -> int:
    row = conn.execute("SELECT COUNT(*) AS count FROM funds").fetchone()
    return row['count'] if row else 0
