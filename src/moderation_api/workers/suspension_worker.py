"""Suspension expiry worker."""

import logging

from datetime import UTC
from datetime import datetime

from arq import cron

from moderation_api.database.repositories.user import UserRepository
from moderation_api.workers.base import BaseWorker
from moderation_api.workers.base import create_worker_class

logger = logging.getLogger(__name__)


class SuspensionExpiryWorker(BaseWorker):
    """Worker that lifts suspensions once their end date has passed."""

    def __init__(self, user_repo: UserRepository | None = None):
        super().__init__()
        self.user_repo = user_repo or UserRepository()

    async def lift_expired_suspensions(self, ctx: dict) -> int:
        """Clear every suspension whose end date is in the past."""
        now = datetime.now(UTC)
        released = await self.user_repo.lift_expired_suspensions(now)

        if released:
            logger.info(f"Lifted {released} expired suspensions")
        else:
            logger.debug("No expired suspensions to lift")

        return released


# Define worker functions
async def lift_expired_suspensions(ctx: dict) -> int:
    """Worker function for lifting expired suspensions."""
    try:
        worker = SuspensionExpiryWorker()
        return await worker.lift_expired_suspensions(ctx)
    except Exception:
        logger.exception("Error in suspension expiry worker")
        return 0


# Create the worker class
SuspensionWorker = create_worker_class(
    functions=[lift_expired_suspensions],
    cron_jobs=[
        cron(lift_expired_suspensions, minute={0, 15, 30, 45}, run_at_startup=True)
    ],
    max_jobs=1,  # Single job at a time to avoid conflicts
    job_timeout=120,
)
