#!/usr/bin/env python3
"""
Worker startup script for the moderation API.

This script starts the Arq worker that lifts expired user suspensions.
"""

import asyncio
import logging
import signal
import sys

from arq import create_pool
from arq.worker import Worker

from moderation_api.database.connection import close_database
from moderation_api.database.connection import init_database
from moderation_api.workers.base import get_arq_redis_settings
from moderation_api.workers.suspension_worker import SuspensionWorker

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


class WorkerManager:
    """Manages the moderation Arq workers."""

    def __init__(self):
        self.workers: list[Worker] = []
        self.tasks: list[asyncio.Task] = []
        self.redis_pool = None
        self.shutdown_event = asyncio.Event()

    async def start(self):
        """Start all workers."""
        try:
            await init_database()

            self.redis_pool = await create_pool(get_arq_redis_settings())
            logger.info("Connected to Redis")

            worker_configs = [
                {
                    "name": "suspension_expiry_worker",
                    "worker_class": SuspensionWorker,
                    "queue_name": "suspension_expiry",
                },
            ]

            for config in worker_configs:
                worker_class = config["worker_class"]
                worker = Worker(
                    functions=list(worker_class.functions.values()),
                    cron_jobs=worker_class.cron_jobs,
                    redis_pool=self.redis_pool,
                    queue_name=config["queue_name"],
                    max_jobs=worker_class.max_jobs,
                    job_timeout=worker_class.job_timeout,
                    keep_result=3600,  # Keep results for 1 hour
                )

                # Start worker in background
                task = asyncio.create_task(self._run_worker(worker, config["name"]))
                self.workers.append(worker)
                self.tasks.append(task)
                logger.info(f"Started {config['name']} worker")

            logger.info(f"All {len(self.workers)} workers started successfully")

            # Wait for shutdown signal
            await self.shutdown_event.wait()

        except Exception as e:
            logger.exception(f"Failed to start workers: {e}")
            raise
        finally:
            await self.cleanup()

    async def _run_worker(self, worker: Worker, name: str):
        """Run a single worker with error handling."""
        try:
            await worker.async_run()
        except Exception as e:
            logger.exception(f"Worker {name} failed: {e}")
            # Signal shutdown if any worker fails
            self.shutdown_event.set()

    async def cleanup(self):
        """Clean up resources."""
        logger.info("Shutting down workers...")

        for worker in self.workers:
            try:
                await worker.close()
            except Exception as e:
                logger.error(f"Error closing worker: {e}")

        if self.redis_pool:
            try:
                await self.redis_pool.aclose()
            except Exception as e:
                logger.error(f"Error closing Redis pool: {e}")

        try:
            await close_database()
        except Exception as e:
            logger.error(f"Error closing database: {e}")

        logger.info("Cleanup complete")

    def handle_shutdown(self, signum, frame):
        """Handle shutdown signals."""
        logger.info(f"Received signal {signum}, initiating shutdown...")
        self.shutdown_event.set()


async def main():
    """Main entry point."""
    manager = WorkerManager()

    # Set up signal handlers
    signal.signal(signal.SIGINT, manager.handle_shutdown)
    signal.signal(signal.SIGTERM, manager.handle_shutdown)

    try:
        await manager.start()
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt")
    except Exception as e:
        logger.exception(f"Worker manager failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
