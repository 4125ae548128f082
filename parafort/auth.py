import logging
import uuid
from functools import wraps

from flask import Blueprint, jsonify, request
from flask_login import LoginManager, login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf

from .api_errors import api_errors, error_response
from .container import get_uow, get_account_service
from .application.serializers import user_to_dict
from .infrastructure.security.rate_limiter import login_limit

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')
login_manager = LoginManager()

logger = logging.getLogger("parafort")


@login_manager.user_loader
def load_user(user_id):
    try:
        return get_uow().users.get_by_id(uuid.UUID(user_id))
    except ValueError:
        logger.warning(f"⚠️ [load_user] Invalid user id in session: {user_id!r}")
        return None


@login_manager.unauthorized_handler
def unauthorized():
    return error_response("Authentication required", 401, "UNAUTHENTICATED")


def admin_required(f):
    """Must be stacked under @login_required. Accepts admin and super_admin."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated or not current_user.is_admin:
            return error_response("Admin access required", 403, "UNAUTHORIZED")
        return f(*args, **kwargs)
    return decorated_function


@auth_bp.route('/csrf-token', methods=['GET'])
def csrf_token():
    return jsonify({'csrfToken': generate_csrf()})


@auth_bp.route('/register', methods=['POST'])
@login_limit()
@api_errors("Failed to register")
def register():
    data = request.get_json(silent=True) or {}
    user = get_account_service().register(
        email=data.get('email'),
        password=data.get('password'),
        first_name=data.get('firstName'),
        last_name=data.get('lastName'),
        phone=data.get('phone'),
    )
    login_user(user)
    return jsonify(user_to_dict(user)), 201


@auth_bp.route('/login', methods=['POST'])
@login_limit()
@api_errors("Failed to log in")
def login():
    data = request.get_json(silent=True) or {}
    email = (data.get('email') or '').strip().lower()
    user = get_account_service().authenticate(email, data.get('password'))
    if not user:
        logger.warning("⚠️ Failed login attempt", extra={'props': {'email_domain': email.split('@')[-1]}})
        return error_response("Invalid email or password", 401, "INVALID_CREDENTIALS")

    login_user(user, remember=bool(data.get('remember')))
    logger.info(f"✅ Login: {user.id}")
    return jsonify(user_to_dict(user))


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({'success': True})


@auth_bp.route('/user', methods=['GET'])
@login_required
def get_user():
    return jsonify(user_to_dict(current_user))
