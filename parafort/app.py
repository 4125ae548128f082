import json
import logging

from flask import Flask, jsonify
from dotenv import load_dotenv

# Load environment variables before reading config
load_dotenv()
from parafort.config import config


# Structured JSON logs
class JsonFormatter(logging.Formatter):
    def format(self, record):
        json_log = {
            "severity": record.levelname,
            "message": record.getMessage(),
            "timestamp": self.formatTime(record, self.datefmt),
            "logger": record.name,
            "module": record.module,
        }
        if hasattr(record, "props"):
            json_log.update(record.props)

        if record.exc_info:
            json_log["exception"] = self.formatException(record.exc_info)

        return json.dumps(json_log, default=str)


handler = logging.StreamHandler()
handler.setFormatter(JsonFormatter())
logging.basicConfig(level=config.LOG_LEVEL, handlers=[handler])
logger = logging.getLogger("parafort")
logger.setLevel(config.LOG_LEVEL)

app = Flask(__name__)

from flask_wtf.csrf import CSRFProtect
from werkzeug.middleware.proxy_fix import ProxyFix

from parafort import database
from parafort.database import init_db
from parafort.auth import login_manager
from parafort.container import teardown_uow
from parafort.infrastructure.security.rate_limiter import init_limiter

app.config['SECRET_KEY'] = config.SECRET_KEY
app.config['RATELIMIT_ENABLED'] = config.RATELIMIT_ENABLED
csrf = CSRFProtect(app)

# Load balancer fix (HTTPS / client IP)
app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1, x_prefix=1)

login_manager.init_app(app)
init_limiter(app)

# Blueprints - late import to avoid circular dependencies
logger.info("🔧 Loading blueprints...")
try:
    from parafort.auth import auth_bp
    from parafort.business_routes import business_bp
    from parafort.compliance_routes import compliance_bp
    from parafort.compliance_visualization_routes import compliance_viz_bp
    from parafort.service_routes import service_bp
    from parafort.notification_routes import notification_bp
    from parafort.folder_routes import folder_bp
    from parafort.admin_routes import admin_bp
    from parafort.cron_routes import cron_bp

    for bp in (auth_bp, business_bp, compliance_bp, compliance_viz_bp, service_bp,
               notification_bp, folder_bp, admin_bp, cron_bp):
        app.register_blueprint(bp)

    # Scheduler calls are server-to-server and authenticate with a header
    csrf.exempt(cron_bp)
    logger.info(f"✅ Blueprints registered: {', '.join(app.blueprints)}")
except Exception as bp_error:
    logger.error(f"❌ Failed to register blueprints: {bp_error}")
    raise

# Database
try:
    init_db()
    logger.info("✅ Database initialized")
except Exception as e:
    logger.error(f"❌ Database initialization failed: {e}")
    raise

# Schema bootstrap
try:
    from parafort.migration import run_migrations
    logger.info("🔄 Running migrations...")
    run_migrations(database.engine)
except Exception as e:
    logger.error(f"❌ Migration failure: {e}")


@app.errorhandler(404)
def handle_404(e):
    return jsonify({'message': 'Not found'}), 404


@app.errorhandler(500)
def handle_500(e):
    logger.error(f"💥 Unhandled 500: {e}", exc_info=True)
    return jsonify({'message': 'Internal server error', 'code': 'ERR_9001'}), 500


@app.teardown_appcontext
def shutdown_session(exception=None):
    if database.db_session:
        database.db_session.remove()


# Runs before shutdown_session (teardowns run in reverse registration order)
app.teardown_appcontext(teardown_uow)


@app.route('/health')
def health():
    return jsonify({'status': 'ok'})
