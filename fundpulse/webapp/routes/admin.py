import logging
from datetime import datetime, timezone

from flask import Blueprint, jsonify, request

from fundpulse.exceptions import InvalidRequest
from fundpulse.webapp.services import get_services

logger = logging.getLogger(__name__)

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/health', methods=['GET'])
def health():
    """Liveness check."""
    return jsonify({
        'status': 'ok',
        'timestamp': datetime.now(timezone.utc).isoformat(),
    })


@admin_bp.route('/api/sync', methods=['POST'])
def api_sync():
    """Trigger a manual catalog sync (blocks until finished)."""
    data = request.get_json(silent=True) or {}
    services = get_services()
    limit = data.get('limit') or services.settings.sync_limit
    try:
        limit = int(limit)
    except (TypeError, ValueError):
        raise InvalidRequest("limit must be an integer")

    logger.info("Manual sync triggered")
    services.sync.sync_categories()
    result = services.sync.sync_funds(limit)

    return jsonify({'message': 'Sync completed', **result.to_dict()})
