import logging
import math

from flask import Blueprint, jsonify, request

from fundpulse.exceptions import FundNotFound, InvalidPeriod, InvalidRequest
from fundpulse.periods import VALID_PERIODS
from fundpulse.sip import project_investments
from fundpulse.webapp import db
from fundpulse.webapp.services import get_services

logger = logging.getLogger(__name__)

funds_bp = Blueprint('funds', __name__)


@funds_bp.route('/api/funds', methods=['GET'])
def api_list_funds():
    """List funds with search, category filter and pagination."""
    search = request.args.get('search', '').strip()
    category = request.args.get('category', '').strip()
    page = request.args.get('page', 1, type=int)
    limit = request.args.get('limit', 20, type=int)

    with db.get_db(get_services().db_path) as conn:
        result = db.list_funds(conn, search or None, category or None, page, limit)
    return jsonify(result)


@funds_bp.route('/api/funds/<scheme_code>', methods=['GET'])
def api_get_fund(scheme_code):
    """Get fund details with exit load and returns."""
    with db.get_db(get_services().db_path) as conn:
        fund = db.get_fund_detail(conn, scheme_code)
    if not fund:
        raise FundNotFound(scheme_code)
    return jsonify(fund)


@funds_bp.route('/api/categories', methods=['GET'])
def api_get_categories():
    """List categories with their sub-categories."""
    with db.get_db(get_services().db_path) as conn:
        categories = db.get_categories(conn)
    return jsonify({'categories': categories})


@funds_bp.route('/api/funds/<scheme_code>/nav-history', methods=['GET'])
def api_get_nav_history(scheme_code):
    """NAV history for charting (cached for 5 minutes)."""
    period = request.args.get('period', '1Y')
    if period not in VALID_PERIODS:
        raise InvalidPeriod(period)

    services = get_services()
    cache_key = f"nav-history:{scheme_code}:{period}"
    cached = services.cache.get(cache_key)
    if cached is not None:
        return jsonify(cached)

    data = services.client.get_nav_history_for_period(scheme_code, period).to_dict()
    services.cache.set(cache_key, data)
    return jsonify(data)


@funds_bp.route('/api/funds/<scheme_code>/calculator-data', methods=['GET'])
def api_get_calculator_data(scheme_code):
    """
    Returns calculator inputs for 6M/1Y/3Y/5Y (cached for 5 minutes).

    With ?amount=N the response also carries lumpsum and monthly SIP
    projections of N per period.
    """
    amount = request.args.get('amount')
    if amount is not None:
        try:
            amount = float(amount)
        except ValueError:
            raise InvalidRequest("amount must be a number")
        if not math.isfinite(amount) or amount <= 0:
            raise InvalidRequest("amount must be a positive number")

    services = get_services()
    cache_key = f"calculator-data:{scheme_code}"
    data = services.cache.get(cache_key)
    if data is None:
        data = services.client.get_calculator_data(scheme_code)
        services.cache.set(cache_key, data)

    if amount is None:
        return jsonify(data)
    return jsonify({**data, 'projections': project_investments(data, amount)})
