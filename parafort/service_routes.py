from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from .api_errors import api_errors
from .auth import admin_required
from .container import get_service_catalog_service, get_order_service
from .infrastructure.security.rate_limiter import api_limit

service_bp = Blueprint('services', __name__)


# --- Catalog (public) ---

@service_bp.route('/api/services', methods=['GET'])
@api_errors("Failed to fetch services")
def list_services():
    return jsonify(get_service_catalog_service().list_services())


@service_bp.route('/api/services/<int:service_id>', methods=['GET'])
@api_errors("Failed to fetch service")
def get_service(service_id):
    return jsonify(get_service_catalog_service().get_service(service_id))


@service_bp.route('/api/services/<int:service_id>/custom-fields', methods=['GET'])
@api_errors("Failed to fetch custom fields")
def list_custom_fields(service_id):
    return jsonify(get_service_catalog_service().list_custom_fields(service_id))


# --- Custom field administration ---

@service_bp.route('/api/services/<int:service_id>/custom-fields', methods=['POST'])
@login_required
@admin_required
@api_errors("Failed to create custom field")
def create_custom_field(service_id):
    field = get_service_catalog_service().create_custom_field(service_id, request.get_json(silent=True))
    return jsonify(field), 201


@service_bp.route('/api/services/custom-fields/<int:field_id>', methods=['PUT'])
@login_required
@admin_required
@api_errors("Failed to update custom field")
def update_custom_field(field_id):
    return jsonify(get_service_catalog_service().update_custom_field(field_id, request.get_json(silent=True)))


@service_bp.route('/api/services/custom-fields/<int:field_id>', methods=['DELETE'])
@login_required
@admin_required
@api_errors("Failed to delete custom field")
def delete_custom_field(field_id):
    get_service_catalog_service().delete_custom_field(field_id)
    return jsonify({'success': True})


# --- Orders ---

@service_bp.route('/api/service-orders', methods=['POST'])
@api_limit()
@api_errors("Failed to create service order")
def create_order():
    # Guest checkout is allowed; signed-in users get the order linked to their account
    user = current_user if current_user.is_authenticated else None
    order = get_order_service().create_order(user, request.get_json(silent=True))
    return jsonify(order), 201


@service_bp.route('/api/service-orders', methods=['GET'])
@login_required
@api_errors("Failed to fetch service orders")
def list_orders():
    return jsonify(get_order_service().list_for_user(current_user.id))


@service_bp.route('/api/service-orders/<order_id>', methods=['GET'])
@login_required
@api_errors("Failed to fetch service order")
def get_order(order_id):
    return jsonify(get_order_service().get_for_user(current_user, order_id))
