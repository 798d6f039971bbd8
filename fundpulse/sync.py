"""
Catalog sync from PulseDB into the local store.

Only regular-plan growth-option schemes from the target AMCs are mirrored.
For each accepted fund the pipeline:
1. Merges search fields with detailed metadata (metadata wins)
2. Upserts the fund row
3. Computes trailing 1Y/3Y/5Y returns from 5 years of NAV history
4. Records the fund's (category, sub-category) pair
"""

import dataclasses
import logging
import math
import sqlite3
import time
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from fundpulse.exceptions import FundPulseError, UpstreamAuthFailure, UpstreamRequestFailure
from fundpulse.models import Fund, SyncResult
from fundpulse.periods import years_ago
from fundpulse.returns import calculate_point_returns
from fundpulse.webapp.db import get_connection, insert_category, upsert_fund, upsert_fund_returns

logger = logging.getLogger(__name__)

# Commit after this many synced funds so a crash mid-run loses little work
COMMIT_EVERY = 10


def _to_float(value) -> Optional[float]:
    if value is None or value == '':
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_int(value) -> Optional[int]:
    num = _to_float(value)
    return int(num) if num is not None else None


def fund_from_search(raw: Dict[str, Any]) -> Fund:
    """Basic fund record from a search result."""
    return Fund(
        scheme_code=raw['scheme_code'],
        scheme_name=raw.get('scheme_name') or '',
        amc=raw.get('amc_name') or '',
        category=raw.get('asset_category') or '',
        sub_category=raw.get('asset_sub_category') or '',
        plan_name=raw.get('plan_name') or '',
        option_name=raw.get('option_name') or '',
        isin=raw.get('isin_dividend_payout_or_growth') or '',
    )


def merge_metadata(fund: Fund, meta: Dict[str, Any]) -> Fund:
    """Overlay PulseDB metadata onto a basic fund record. Metadata wins."""
    exit_load = meta.get('exit_load') or {}
    txn_info = meta.get('txn_info') or {}
    nav_date = meta.get('nav_date')

    fund.scheme_name_unique = meta.get('scheme_name_unique') or ''
    fund.amc_code = meta.get('amc_code') or ''

    fund.current_nav = _to_float(meta.get('nav')) or None
    fund.nav_date = nav_date.split('T')[0] if nav_date else None

    fund.aum = _to_float(meta.get('fund_size'))
    fund.expense_ratio = _to_float(meta.get('expense_ratio(s)_&_(d)'))
    fund.fund_manager = meta.get('fund_manager') or ''
    fund.benchmark = meta.get('benchmark') or ''
    fund.date_of_inception = meta.get('date_of_inception') or ''

    fund.risk_profile = meta.get('risk_profile') or ''
    fund.risk_rating = _to_float(meta.get('risk_rating'))
    fund.riskometer = meta.get('riskometer') or ''
    fund.vr_rating = meta.get('vr_rating') or ''

    fund.min_investment = _to_float(txn_info.get('min_invest'))
    fund.min_sip_investment = _to_float(txn_info.get('min_invest_sip'))
    fund.exit_load_period = _to_int(exit_load.get('exit_load_period'))
    fund.exit_load_rate = _to_float(exit_load.get('exit_load_rate'))
    fund.exit_load_remark = exit_load.get('exit_load_period_remark') or ''

    fund.objective = meta.get('objective') or ''
    fund.scheme_doc_url = meta.get('scheme_doc_url') or ''
    fund.isin = meta.get('isin_dividend_payout_or_growth') or fund.isin
    return fund


class SyncService:
    """
    Mirrors the PulseDB catalog for a set of target AMCs into SQLite.
    """

    def __init__(self, client, db_path: Union[str, Path], target_amcs: List[str]):
        """
        Args:
            client: PulseDBClient (or anything with the same endpoint methods).
            db_path: SQLite file to write into.
            target_amcs: AMC names to mirror; matched as substrings.
        """
        self.client = client
        self.db_path = db_path
        self.target_amcs = list(target_amcs)

    # ==================== Filters ====================

    def is_target_amc(self, amc_name: Optional[str]) -> bool:
        """True if the AMC name contains any target name (case-insensitive)."""
        if not amc_name:
            return False
        upper = amc_name.upper()
        return any(target.upper() in upper for target in self.target_amcs)

    @staticmethod
    def is_regular_growth(fund: Dict[str, Any]) -> bool:
        """Regular plan (anything but Direct) with the Growth option."""
        plan = (fund.get('plan_name') or '').lower()
        option = (fund.get('option_name') or '').lower()
        return bool(plan) and plan != 'direct' and option == 'growth'

    def select_funds(self, limit: int) -> List[Dict[str, Any]]:
        """
        Search each target AMC and pick unique regular-growth schemes.

        At most ceil(limit / number of AMCs) funds are taken per AMC.
        """
        if not self.target_amcs:
            return []

        per_amc = math.ceil(limit / len(self.target_amcs))
        logger.info(f"Target: ~{per_amc} funds per AMC")

        selected = []
        seen_codes = set()

        for amc in self.target_amcs:
            logger.info(f"Fetching funds for {amc}...")
            try:
                response = self.client.search_funds(amc)
            except UpstreamAuthFailure:
                raise
            except UpstreamRequestFailure as e:
                logger.error(f"Search failed for {amc}: {e}")
                continue

            results = ((response or {}).get('data') or {}).get('mutual_funds') or []

            amc_count = 0
            for fund in results:
                if amc_count >= per_amc:
                    break
                code = fund.get('scheme_code')
                if (
                    code
                    and code not in seen_codes
                    and self.is_target_amc(fund.get('amc_name'))
                    and self.is_regular_growth(fund)
                ):
                    seen_codes.add(code)
                    selected.append(fund)
                    amc_count += 1

            logger.info(f"  Found {amc_count} Regular Growth funds for {amc}")

        logger.info(f"Total: {len(selected)} Regular Growth funds from target AMCs")
        return selected

    # ==================== Per-fund sync ====================

    def sync_single_fund(self, conn: sqlite3.Connection, raw: Dict[str, Any],
                         today: Optional[date] = None) -> str:
        """Upsert one fund, its returns and its category. Returns the scheme code."""
        if today is None:
            today = date.today()

        fund = fund_from_search(raw)
        code = fund.scheme_code

        # Merge into a copy so a payload that breaks mid-merge leaves the basic record intact
        try:
            body = self.client.get_fund_metadata(code)
            meta = ((body or {}).get('data') or {}).get(code)
            if meta:
                fund = merge_metadata(dataclasses.replace(fund), meta)
        except Exception as e:
            logger.warning(f"Metadata fetch failed for {code}, keeping basic info: {e}")

        upsert_fund(conn, fund)

        try:
            body = self.client.get_nav_history(code, years_ago(today, 5), today)
            nav_history = ((body or {}).get('data') or {}).get('nav_history')
            if nav_history and fund.current_nav:
                returns = calculate_point_returns(nav_history, fund.current_nav, today)
                if returns.has_any():
                    upsert_fund_returns(conn, code, returns)
        except Exception as e:
            logger.warning(f"NAV history fetch failed for {code}, skipping returns: {e}")

        if fund.category:
            insert_category(conn, fund.category, fund.sub_category)

        return code

    def sync_funds(self, limit: int = 100, today: Optional[date] = None) -> SyncResult:
        """
        Refresh the fund catalog.

        Individual fund failures are logged and counted; they never abort
        the run and are not retried.
        """
        logger.info(f"Starting fund sync (limit: {limit})...")
        logger.info(f"Target AMCs: {', '.join(self.target_amcs)}")
        start = time.monotonic()

        funds = self.select_funds(limit)
        result = SyncResult()

        conn = get_connection(self.db_path)
        try:
            for raw in funds:
                try:
                    self.sync_single_fund(conn, raw, today)
                    result.synced_count += 1
                    if result.synced_count % COMMIT_EVERY == 0:
                        logger.info(f"Progress: {result.synced_count}/{len(funds)} funds synced")
                        conn.commit()
                except Exception as e:
                    result.error_count += 1
                    result.failed_codes.append(str(raw.get('scheme_code')))
                    logger.error(f"Error syncing {raw.get('scheme_code')}: {e}")
            conn.commit()
        finally:
            conn.close()

        result.duration = round(time.monotonic() - start, 3)
        logger.info(
            f"Sync completed: {result.synced_count} funds synced, "
            f"{result.error_count} errors, {result.duration}s"
        )
        return result

    def sync_categories(self) -> int:
        """Record the provider's asset categories. Returns how many were new."""
        logger.info("Syncing categories...")
        try:
            body = self.client.get_categories()
        except FundPulseError as e:
            logger.error(f"Category sync failed: {e}")
            return 0

        names = ((body or {}).get('data') or {}).get('asset_categories') or []
        added = 0
        conn = get_connection(self.db_path)
        try:
            for name in names:
                if name and insert_category(conn, name):
                    added += 1
            conn.commit()
        finally:
            conn.close()

        logger.info(f"Categories synced: {len(names)} categories")
        return added
