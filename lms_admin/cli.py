"""
``lms-admin`` console entry point.

    lms-admin affiliate:release-commissions [--date YYYY-MM-DD]
    lms-admin roles:seed
    lms-admin schedule:work
"""
import argparse
import asyncio
import logging
import sys
from datetime import date
from typing import Optional, Sequence

from lms_admin.commands import (
    RELEASE_COMMISSIONS,
    SCHEDULE_WORK,
    SEED_ROLES,
    release_commissions,
    seed_roles,
)
from lms_admin.db.session import close_db
from lms_admin.scheduler import run_scheduler
from lms_admin.utils.log import setup_logging

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lms-admin", description="LMS admin console commands")
    subparsers = parser.add_subparsers(dest="command", required=True)

    release = subparsers.add_parser(
        RELEASE_COMMISSIONS,
        help="Make pending affiliate commissions available once their date is reached",
    )
    release.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Reference date (YYYY-MM-DD), defaults to today",
    )

    subparsers.add_parser(SEED_ROLES, help="Create the system roles and staff permissions")
    subparsers.add_parser(SCHEDULE_WORK, help="Run the scheduler in the foreground")
    return parser


async def _run(args: argparse.Namespace) -> int:
    try:
        if args.command == RELEASE_COMMISSIONS:
            released = await release_commissions(args.date)
            print(f"Released {released} commission(s).")
        elif args.command == SEED_ROLES:
            for role, permissions in (await seed_roles()).items():
                print(f"{role}: {', '.join(permissions) or '-'}")
        elif args.command == SCHEDULE_WORK:
            await run_scheduler()
    finally:
        await close_db()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    setup_logging()
    args = build_parser().parse_args(argv)
    try:
        return asyncio.run(_run(args))
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
