# machinery_site/api/activity.py
# Activity log browsing and export for administrators.

import csv
import io
import logging
from datetime import datetime, timezone
from flask import Response, abort, jsonify, request
from machinery_site import db
from machinery_site.activity import (
    activity_query,
    distinct_values,
    get_activities,
    log_activity,
    parse_date,
)
from machinery_site.api import bp
from machinery_site.decorators import permission_required
from machinery_site.models import UserActivity

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ('json', 'csv')
EXPORT_COLUMNS = ('id', 'timestamp', 'userId', 'username', 'action', 'details', 'ipAddress', 'userAgent')
MAX_PAGE_SIZE = 100


def _filters(source):
    """Reads userId/action/ipAddress/startDate/endDate from a mapping."""
    filters = {
        'user_id': source.get('userId') or None,
        'action': source.get('action') or None,
        'ip_address': source.get('ipAddress') or None,
    }
    if filters['user_id'] is not None:
        try:
            filters['user_id'] = int(filters['user_id'])
        except (TypeError, ValueError):
            abort(400, description='userId must be a number')
    for key, name in (('start_date', 'startDate'), ('end_date', 'endDate')):
        value = source.get(name)
        try:
            filters[key] = parse_date(value) if value else None
        except (TypeError, ValueError):
            abort(400, description=f'{name} must be a YYYY-MM-DD date')
    return filters


@bp.route('/admin/activity', methods=['GET'])
@permission_required('activity.view')
def admin_list_activity():
    page = max(request.args.get('page', 1, type=int), 1)
    limit = min(max(request.args.get('limit', 20, type=int), 1), MAX_PAGE_SIZE)
    result = get_activities(_filters(request.args), page=page, limit=limit)
    response = {
        'activities': [activity.to_dict() for activity in result['activities']],
        'pagination': result['pagination'],
        'filters': {
            'actions': distinct_values(UserActivity.action),
            'ipAddresses': distinct_values(UserActivity.ip_address),
        },
    }
    log_activity('view_activity_logs', 'Viewed activity logs')
    return jsonify(response)


@bp.route('/admin/activity/export', methods=['POST'])
@permission_required('activity.export')
def admin_export_activity():
    body = request.get_json(silent=True) or {}
    if not isinstance(body, dict):
        abort(400, description='Request body must be a JSON object')
    export_format = body.get('format', 'json')
    if export_format not in EXPORT_FORMATS:
        abort(400, description='Invalid export format')

    activities = db.session.scalars(activity_query(**_filters(body))).all()
    rows = [activity.to_dict() for activity in activities]
    log_activity('export_data', f"Exported {len(rows)} activity logs as {export_format}")
    logger.info(f"Exported {len(rows)} activity log rows as {export_format}")

    if export_format == 'csv':
        buffer = io.StringIO()
        writer = csv.DictWriter(buffer, fieldnames=EXPORT_COLUMNS)
        writer.writeheader()
        writer.writerows(rows)
        return Response(
            buffer.getvalue(),
            mimetype='text/csv',
            headers={'Content-Disposition': 'attachment; filename=activity-logs.csv'},
        )
    return jsonify({
        'data': rows,
        'format': export_format,
        'count': len(rows),
        'exportedAt': datetime.now(timezone.utc).isoformat(),
    })
