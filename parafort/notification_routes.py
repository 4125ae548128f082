from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from .api_errors import api_errors
from .application.serializers import parse_flag, parse_int
from .container import get_notification_service

notification_bp = Blueprint('notifications', __name__, url_prefix='/api/notifications')

MAX_LIMIT = 200


@notification_bp.route('', methods=['GET'])
@login_required
@api_errors("Failed to fetch notifications")
def list_notifications():
    limit = max(1, min(parse_int(request.args.get('limit', 50), 'limit'), MAX_LIMIT))
    notifications = get_notification_service().list_for_user(
        current_user.id,
        limit=limit,
        include_read=parse_flag(request.args.get('includeRead'), 'includeRead', default=True),
        category=request.args.get('category') or None,
        priority=request.args.get('priority') or None,
    )
    return jsonify(notifications)


@notification_bp.route('/unread-count', methods=['GET'])
@login_required
@api_errors("Failed to fetch unread count")
def unread_count():
    return jsonify({'count': get_notification_service().unread_count(current_user.id)})


@notification_bp.route('/<int:notification_id>/read', methods=['PATCH'])
@login_required
@api_errors("Failed to mark notification as read")
def mark_read(notification_id):
    return jsonify(get_notification_service().mark_read(current_user.id, notification_id))


@notification_bp.route('/read-all', methods=['PATCH'])
@login_required
@api_errors("Failed to mark notifications as read")
def mark_all_read():
    updated = get_notification_service().mark_all_read(current_user.id)
    return jsonify({'success': True, 'updated': updated})
