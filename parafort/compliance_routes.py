from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from .api_errors import api_errors
from .container import get_compliance_event_service

compliance_bp = Blueprint('compliance', __name__, url_prefix='/api/compliance')


@compliance_bp.route('/businesses/<int:business_id>/events', methods=['GET'])
@login_required
@api_errors("Failed to fetch compliance events")
def list_business_events(business_id):
    events = get_compliance_event_service().list_business_events(
        current_user.id, business_id, status=request.args.get('status') or None
    )
    return jsonify(events)


@compliance_bp.route('/events', methods=['POST'])
@login_required
@api_errors("Failed to create compliance event")
def create_event():
    event = get_compliance_event_service().create_event(current_user.id, request.get_json(silent=True))
    return jsonify(event), 201


@compliance_bp.route('/events/<int:event_id>', methods=['PATCH'])
@login_required
@api_errors("Failed to update compliance event")
def update_event(event_id):
    event = get_compliance_event_service().update_event(current_user.id, event_id, request.get_json(silent=True))
    return jsonify(event)


@compliance_bp.route('/events/<int:event_id>/status', methods=['PATCH'])
@login_required
@api_errors("Failed to update compliance event status")
def update_event_status(event_id):
    data = request.get_json(silent=True) or {}
    event = get_compliance_event_service().update_status(current_user.id, event_id, data.get('status'))
    return jsonify(event)


@compliance_bp.route('/events/<int:event_id>', methods=['DELETE'])
@login_required
@api_errors("Failed to delete compliance event")
def delete_event(event_id):
    get_compliance_event_service().delete_event(current_user.id, event_id)
    return jsonify({'success': True})


@compliance_bp.route('/upcoming', methods=['GET'])
@login_required
@api_errors("Failed to fetch upcoming compliance events")
def upcoming():
    events = get_compliance_event_service().upcoming(
        current_user.id,
        business_id=request.args.get('businessId'),
        days=request.args.get('days', 90),
    )
    return jsonify(events)


@compliance_bp.route('/dashboard-notifications', methods=['GET'])
@login_required
@api_errors("Failed to fetch dashboard notifications")
def dashboard_notifications():
    items = get_compliance_event_service().dashboard_notifications(
        current_user.id, business_id=request.args.get('businessId')
    )
    return jsonify(items)


@compliance_bp.route('/businesses/<int:business_id>/generate-events', methods=['POST'])
@login_required
@api_errors("Failed to generate compliance events")
def generate_events(business_id):
    events = get_compliance_event_service().generate_for_owned_business(current_user.id, business_id)
    return jsonify({'generated': len(events), 'events': events}), 201
