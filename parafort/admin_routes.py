from flask import Blueprint, jsonify, request
from flask_login import login_required

from .api_errors import api_errors
from .auth import admin_required
from .container import get_business_entity_service, get_order_service, get_notification_service

admin_bp = Blueprint('admin', __name__, url_prefix='/api/admin')


@admin_bp.route('/business-entities', methods=['GET'])
@login_required
@admin_required
@api_errors("Failed to fetch business entities")
def list_business_entities():
    return jsonify(get_business_entity_service().admin_list(status=request.args.get('status') or None))


@admin_bp.route('/business-entities/<int:business_id>/status', methods=['PATCH'])
@login_required
@admin_required
@api_errors("Failed to update business status")
def update_business_status(business_id):
    data = request.get_json(silent=True) or {}
    return jsonify(get_business_entity_service().admin_update_status(business_id, data.get('status')))


@admin_bp.route('/service-orders', methods=['GET'])
@login_required
@admin_required
@api_errors("Failed to fetch service orders")
def list_service_orders():
    return jsonify(get_order_service().admin_list(status=request.args.get('status') or None))


@admin_bp.route('/service-orders/<order_id>/status', methods=['PATCH'])
@login_required
@admin_required
@api_errors("Failed to update order status")
def update_order_status(order_id):
    data = request.get_json(silent=True) or {}
    order = get_order_service().admin_update_status(order_id, data.get('status'), notes=data.get('notes'))
    return jsonify(order)


@admin_bp.route('/notifications/broadcast', methods=['POST'])
@login_required
@admin_required
@api_errors("Failed to broadcast notification")
def broadcast_notification():
    data = request.get_json(silent=True) or {}
    sent = get_notification_service().broadcast(
        title=data.get('title'),
        message=data.get('message'),
        priority=data.get('priority') or 'normal',
        action_url=data.get('actionUrl'),
        expires_in_days=data.get('expiresInDays'),
    )
    return jsonify({'success': True, 'recipients': sent}), 201
