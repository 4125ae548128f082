import hmac
import logging

from flask import Blueprint, jsonify, request

from .api_errors import api_errors
from .config import config
from .container import get_compliance_event_service, get_notification_service

cron_bp = Blueprint('cron', __name__, url_prefix='/api/cron')

logger = logging.getLogger("parafort")


def _check_cron_auth():
    """Cloud Scheduler sends X-Appengine-Cron; anything else must present the shared secret."""
    is_cron = request.headers.get('X-Appengine-Cron') == 'true'
    secret = request.headers.get('X-Cron-Secret') or request.args.get('secret')
    if is_cron:
        return True
    if not secret or not config.CRON_SECRET:
        return False
    return hmac.compare_digest(secret.encode(), config.CRON_SECRET.encode())


def _run(job_name, job):
    if not _check_cron_auth():
        return jsonify({'error': 'Unauthorized'}), 401
    logger.info(f"⏱️ Cron job started: {job_name}")
    result = job()
    return jsonify({'status': 'ok', 'job': job_name, 'result': result})


@cron_bp.route('/reminders', methods=['GET', 'POST'])
@api_errors("Reminder job failed")
def cron_reminders():
    return _run('reminders', lambda: get_compliance_event_service().send_reminders())


@cron_bp.route('/overdue-sweep', methods=['GET', 'POST'])
@api_errors("Overdue sweep failed")
def cron_overdue_sweep():
    return _run('overdue-sweep', lambda: {'updated': get_compliance_event_service().sweep_overdue()})


@cron_bp.route('/generate-events', methods=['GET', 'POST'])
@api_errors("Compliance event generation failed")
def cron_generate_events():
    return _run('generate-events', lambda: get_compliance_event_service().generate_for_new_businesses())


@cron_bp.route('/cleanup-notifications', methods=['GET', 'POST'])
@api_errors("Notification cleanup failed")
def cron_cleanup_notifications():
    return _run('cleanup-notifications', lambda: get_notification_service().cleanup())
