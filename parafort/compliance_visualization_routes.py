from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from .api_errors import api_errors
from .container import get_compliance_metrics_service

compliance_viz_bp = Blueprint('compliance_visualization', __name__, url_prefix='/api/compliance-visualization')


@compliance_viz_bp.route('/metrics', methods=['GET'])
@login_required
@api_errors("Failed to fetch compliance metrics")
def metrics():
    data = get_compliance_metrics_service().get_metrics(
        current_user.id,
        business_id=request.args.get('businessId'),
        time_range=request.args.get('timeRange'),
    )
    return jsonify(data)


@compliance_viz_bp.route('/trends', methods=['GET'])
@login_required
@api_errors("Failed to fetch compliance trends")
def trends():
    data = get_compliance_metrics_service().get_trends(
        current_user.id,
        business_id=request.args.get('businessId'),
        time_range=request.args.get('timeRange'),
    )
    return jsonify(data)


@compliance_viz_bp.route('/categories', methods=['GET'])
@login_required
@api_errors("Failed to fetch category progress")
def categories():
    data = get_compliance_metrics_service().get_categories(
        current_user.id,
        business_id=request.args.get('businessId'),
    )
    return jsonify(data)


@compliance_viz_bp.route('/urgent-events', methods=['GET'])
@login_required
@api_errors("Failed to fetch urgent compliance events")
def urgent_events():
    return jsonify(get_compliance_metrics_service().get_urgent_events(current_user))
