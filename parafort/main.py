"""
Command line entry point for scheduled jobs and the state data verification.

    python -m parafort.main verify-states [--state=Texas ...] [--entity-type=LLC ...] [--output-dir=DIR]
    python -m parafort.main reminders | overdue-sweep | generate-events | cleanup-notifications
"""
import sys
import logging

import structlog
from dotenv import load_dotenv

load_dotenv()

from parafort.config import config  # noqa: E402

logging.basicConfig(level=getattr(logging, config.LOG_LEVEL, logging.INFO))
logger = structlog.get_logger()

JOBS = ('reminders', 'overdue-sweep', 'generate-events', 'cleanup-notifications')


def _option_values(args, name):
    prefix = f"--{name}="
    return [arg[len(prefix):] for arg in args if arg.startswith(prefix)]


def run_verification(args) -> int:
    from parafort.verification import StateDataVerifier
    from parafort.verification.llm_clients import GeminiStateClient, OpenAIStateClient
    from parafort.verification.report import write_report, write_verified_fees

    output_dir = (_option_values(args, 'output-dir') or [config.VERIFICATION_OUTPUT_DIR])[-1]
    verifier = StateDataVerifier(
        OpenAIStateClient(),
        GeminiStateClient(),
        states=_option_values(args, 'state') or None,
        entity_types=_option_values(args, 'entity-type') or None,
    )
    report = verifier.run()
    write_report(report, output_dir)
    write_verified_fees(report, verifier.states, verifier.entity_types, output_dir)

    summary = report['summary']
    logger.info(f"Validated {summary['validated']}/{summary['total']}, "
                f"{summary['discrepancies']} discrepancies, {summary['errors']} errors")
    return 0


def run_job(job: str) -> dict:
    from parafort import database
    from parafort.application.compliance_event_service import ComplianceEventService
    from parafort.application.notification_service import NotificationService
    from parafort.migration import run_migrations
    from parafort.repositories.unit_of_work import UnitOfWork

    database.init_db()
    if database.db_session is None:
        raise RuntimeError("Database is not configured (DATABASE_URL missing)")
    run_migrations(database.engine)

    with UnitOfWork(database.db_session()) as uow:
        notifications = NotificationService(uow)
        events = ComplianceEventService(uow, notification_service=notifications)
        if job == 'reminders':
            return events.send_reminders()
        if job == 'overdue-sweep':
            return {'updated': events.sweep_overdue()}
        if job == 'generate-events':
            return events.generate_for_new_businesses()
        return notifications.cleanup()


def main(argv=None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args or args[0] not in JOBS + ('verify-states',):
        print(__doc__)
        return 2

    command, rest = args[0], args[1:]
    logger.info(f"📢 Running {command}")
    if command == 'verify-states':
        return run_verification(rest)

    result = run_job(command)
    logger.info(f"Finished {command}", **result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
