from flask import Blueprint, jsonify, request
from flask_login import login_required, current_user

from .api_errors import api_errors
from .container import get_folder_service

folder_bp = Blueprint('folders', __name__, url_prefix='/api/folders')


@folder_bp.route('', methods=['POST'])
@login_required
@api_errors("Failed to create folder")
def create_folder():
    folder = get_folder_service().create(current_user.id, request.get_json(silent=True))
    return jsonify(folder), 201


@folder_bp.route('', methods=['GET'])
@login_required
@api_errors("Failed to fetch folders")
def list_folders():
    return jsonify(get_folder_service().list_for_user(current_user.id, request.args.get('businessId') or None))


@folder_bp.route('/<int:folder_id>', methods=['DELETE'])
@login_required
@api_errors("Failed to delete folder")
def delete_folder(folder_id):
    get_folder_service().delete(current_user.id, folder_id)
    return jsonify({'success': True})
