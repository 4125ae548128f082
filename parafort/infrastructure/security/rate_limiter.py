"""
Rate limiting configuration for the application.

Provides centralized rate limiting that can be imported across blueprints
without circular import issues. Set RATELIMIT_ENABLED=false to turn it off.
"""

from flask import request
from flask_limiter import Limiter


def _get_real_ip():
    """Get the real client IP behind the load balancer."""
    return (
        request.headers.get('X-Forwarded-For', '').split(',')[0].strip()
        or request.remote_addr
        or '127.0.0.1'
    )


# Created unbound, attached to the app in init_limiter()
limiter = Limiter(
    key_func=_get_real_ip,
    default_limits=["2000 per day", "300 per hour"],
    storage_uri="memory://",
    strategy="fixed-window"
)


def init_limiter(app):
    """Initialize the limiter with the Flask app (reads RATELIMIT_ENABLED from app.config)."""
    limiter.init_app(app)


def login_limit():
    """Rate limit for login and registration: 20 per minute per IP."""
    return limiter.limit("20 per minute", error_message="Too many login attempts. Wait a minute and try again.")


def api_limit():
    """Rate limit for write-heavy API calls: 60 per minute per IP."""
    return limiter.limit("60 per minute", error_message="Request limit exceeded.")
