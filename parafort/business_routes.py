from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from .api_errors import api_errors
from .container import get_business_entity_service
from .infrastructure.security.rate_limiter import api_limit

business_bp = Blueprint('business', __name__, url_prefix='/api/business-entities')


@business_bp.route('', methods=['POST'])
@login_required
@api_limit()
@api_errors("Failed to submit formation order")
def create_business():
    entity = get_business_entity_service().create(current_user.id, request.get_json(silent=True))
    return jsonify(entity), 201


@business_bp.route('', methods=['GET'])
@login_required
@api_errors("Failed to fetch business entities")
def list_businesses():
    return jsonify(get_business_entity_service().list_for_user(current_user.id))


@business_bp.route('/<int:business_id>', methods=['GET'])
@login_required
@api_errors("Failed to fetch business entity")
def get_business(business_id):
    return jsonify(get_business_entity_service().get_for_user(current_user.id, business_id))
