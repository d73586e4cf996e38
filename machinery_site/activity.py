# machinery_site/activity.py
# Audit trail of what signed-in users did through the site.

import logging
import math
from datetime import datetime, timedelta
from flask import has_request_context, request
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError
from machinery_site import db
from machinery_site.models import UserActivity

logger = logging.getLogger(__name__)

ACTIONS = (
    'login', 'logout', 'failed_login',
    'create_user', 'update_user', 'delete_user',
    'create_content', 'update_content', 'delete_content',
    'publish_content', 'unpublish_content',
    'view_activity_logs', 'export_data',
)

DATE_FORMAT = '%Y-%m-%d'


def _request_origin():
    if not has_request_context():
        return 'unknown', 'unknown'
    forwarded = request.headers.get('X-Forwarded-For', '')
    ip_address = (
        forwarded.split(',')[0].strip()
        or request.headers.get('X-Real-IP')
        or request.remote_addr
        or 'unknown'
    )
    return ip_address, request.headers.get('User-Agent') or 'unknown'


def log_activity(action, details=None, user=None):
    """
    Records one activity row for the given user, or the current user when
    none is passed. Returns the row, or None when nothing was recorded.

    The caller's own write has already been committed by the time this runs,
    so a failure here is logged and rolled back without undoing it.
    """
    if action not in ACTIONS:
        raise ValueError(f"Unknown activity action: {action}")
    if user is None and current_user and current_user.is_authenticated:
        user = current_user
    if user is None:
        logger.warning(f"Activity '{action}' not logged: no user")
        return None

    ip_address, user_agent = _request_origin()
    activity = UserActivity(
        user_id=user.id,
        action=action,
        details=details,
        ip_address=ip_address,
        user_agent=user_agent[:255],
    )
    try:
        db.session.add(activity)
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Failed to log activity '{action}' for user {user.id}: {e}", exc_info=True)
        return None
    logger.debug(f"Activity logged: {action} by user {user.id}")
    return activity


def parse_date(value):
    """Parses YYYY-MM-DD; raises ValueError for anything else."""
    return datetime.strptime(value, DATE_FORMAT)


def activity_query(user_id=None, action=None, ip_address=None, start_date=None, end_date=None):
    """Builds the filtered select, newest first. end_date includes the whole day."""
    query = db.select(UserActivity)
    if user_id:
        query = query.filter(UserActivity.user_id == user_id)
    if action:
        query = query.filter(UserActivity.action == action)
    if ip_address:
        query = query.filter(UserActivity.ip_address == ip_address)
    if start_date:
        query = query.filter(UserActivity.created_at >= start_date)
    if end_date:
        query = query.filter(UserActivity.created_at < end_date + timedelta(days=1))
    return query.order_by(UserActivity.created_at.desc(), UserActivity.id.desc())


def get_activities(filters, page=1, limit=20):
    query = activity_query(**filters)
    total = db.session.scalar(db.select(db.func.count()).select_from(query.order_by(None).subquery()))
    activities = db.session.scalars(query.offset((page - 1) * limit).limit(limit)).all()
    return {
        'activities': activities,
        'pagination': {
            'page': page,
            'limit': limit,
            'totalCount': total,
            'totalPages': math.ceil(total / limit) if limit else 0,
            'hasNext': page * limit < total,
            'hasPrev': page > 1,
        },
    }


def distinct_values(column):
    return sorted(v for v in db.session.scalars(db.select(column).distinct()).all() if v)
