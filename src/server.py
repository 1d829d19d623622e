"""Protean Engine runner for the storefront.

In production the ordering domain processes events asynchronously, so the
order summary projection and the change notifiers run in this worker:
- OutboxProcessor: polls the outbox table and publishes committed events
- StreamSubscriptions: reads the event streams, invokes projectors and event handlers

Usage:
    PROTEAN_ENV=production python src/server.py
    PROTEAN_ENV=production python src/server.py --test-mode   # drain and exit
"""

import argparse
import asyncio

import structlog
from protean.server.engine import Engine

from ordering.domain import ordering

logger = structlog.get_logger(__name__)


async def run(test_mode=False):
    ordering.init()
    engine = Engine(ordering, test_mode=test_mode)
    logger.info("Starting engine", domain=ordering.name, test_mode=test_mode)
    await engine.run()


def main():
    parser = argparse.ArgumentParser(description="Storefront engine runner")
    parser.add_argument(
        "--test-mode",
        action="store_true",
        help="Process pending messages once and exit",
    )
    args = parser.parse_args()

    asyncio.run(run(test_mode=args.test_mode))


if __name__ == "__main__":
    main()
