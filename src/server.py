"""Protean Engine runner for the storefront.

Starts the Engine that processes events asynchronously in production
(`PROTEAN_ENV=production`, see the `[production]` overlay in domain.toml):
- OutboxProcessor: polls the outbox table, publishes events to Redis Streams
- StreamSubscriptions: reads Redis Streams and invokes event handlers
  (push delivery of recorded notifications)

Usage:
    python src/server.py
"""

import asyncio

from protean.server.engine import Engine

from storefront.channel import build_push_adapter
from storefront.config import get_settings
from storefront.domain import storefront
from storefront.notification.sink import NotificationSink, install_sink
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


async def run():
    storefront.init()

    settings = get_settings()
    install_sink(NotificationSink.from_settings(settings, build_push_adapter(settings)))
    logger.info("engine_starting", domain=storefront.name, push_enabled=settings.push_enabled)

    await Engine(storefront).run()


def main():
    asyncio.run(run())


if __name__ == "__main__":
    main()
