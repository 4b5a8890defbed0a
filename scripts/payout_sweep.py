"""
Weekly payout sweep.

Schedules every PENDING split of a paid order into its producer's next
batch and removes read notifications older than the retention window.
Meant to run from cron shortly before the payout day.

Usage:
    python -m scripts.payout_sweep [--retention-days 30] [--due]
"""
import argparse
import asyncio
import logging

import api.dependencies  # noqa: F401  (loads .env)

from core.application.services import NotificationApplicationService, PayoutApplicationService
from core.infrastructure.database.config import close_database, get_session_factory, init_database
from core.infrastructure.logging import configure_logging
from core.settings import get_app_settings


logger = logging.getLogger(__name__)


async def run_sweep(retention_days: int, show_due: bool) -> None:
    settings = get_app_settings()
    configure_logging(settings.server.log_level)

    logger.info("=" * 60)
    logger.info("PAYOUT SWEEP")
    logger.info("=" * 60)

    try:
        await init_database()
        session_factory = get_session_factory(settings.database)

        payouts = PayoutApplicationService(session_factory, settings.marketplace)
        result = await payouts.schedule_pending_payouts()
        logger.info(
            f"1. Scheduled {result.scheduled_count} split(s) into {len(result.payout_ids)} batch(es)"
        )

        removed = await NotificationApplicationService(session_factory).cleanup_old_notifications(
            days=retention_days
        )
        logger.info(f"2. Removed {removed} old notification(s)")

        if show_due:
            due = await payouts.get_due_payouts()
            logger.info(f"3. {len(due.payouts)} batch(es) due for payment")
            for payout in due.payouts:
                logger.info(
                    f"   {payout.id} {payout.producer_name or payout.producer_id}: "
                    f"{payout.net_amount} {payout.currency} ({payout.scheduled_for:%Y-%m-%d})"
                )
    finally:
        await close_database()


def main() -> None:
    parser = argparse.ArgumentParser(description="Schedule pending producer payouts")
    parser.add_argument("--retention-days", type=int, default=30, help="Keep read notifications this long")
    parser.add_argument("--due", action="store_true", help="List batches due for payment")
    args = parser.parse_args()
    asyncio.run(run_sweep(args.retention_days, args.due))


if __name__ == "__main__":
    main()
