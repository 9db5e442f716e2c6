"""
Redis Pub/Sub listener for real-time pushes.
Relays messages published by ``RedisPublisher`` to WebSocket clients.
"""

import asyncio
import json
import logging
from typing import Optional

import redis.asyncio as aioredis
from redis.asyncio.client import PubSub

from app.core.config import settings
from app.services.realtime import REALTIME_REDIS_CHANNEL
from app.services.websocket_manager import ConnectionManager, manager

logger = logging.getLogger(__name__)


class RedisPubSubService:
    """Subscribes to the real-time channel and forwards to websockets."""

    def __init__(self, connections: ConnectionManager):
        self.connections = connections
        self.redis: Optional[aioredis.Redis] = None
        self.pubsub: Optional[PubSub] = None
        self._listener_task: Optional[asyncio.Task] = None

    async def connect(self, url: str):
        try:
            self.redis = aioredis.from_url(
                url,
                encoding="utf-8",
                decode_responses=True
            )
            self.pubsub = self.redis.pubsub()
            await self.pubsub.subscribe(REALTIME_REDIS_CHANNEL)

            logger.info(f"Redis Pub/Sub connected and subscribed to '{REALTIME_REDIS_CHANNEL}' channel")

            self._listener_task = asyncio.create_task(self._listen())

        except Exception as e:
            logger.error(f"Failed to connect to Redis Pub/Sub: {e}")
            raise

    async def disconnect(self):
        if self._listener_task:
            self._listener_task.cancel()
            try:
                await self._listener_task
            except asyncio.CancelledError:
                pass

        if self.pubsub:
            await self.pubsub.unsubscribe(REALTIME_REDIS_CHANNEL)
            await self.pubsub.aclose()

        if self.redis:
            await self.redis.aclose()

        logger.info("Redis Pub/Sub disconnected")

    async def relay(self, raw: str):
        """Forward one published message to its channel's sockets."""
        data = json.loads(raw)
        await self.connections.send_to_channel(
            data["channel"],
            {"type": data["event"], "data": data.get("payload", {})},
        )

    async def _listen(self):
        logger.info("Starting Redis Pub/Sub listener...")

        try:
            async for message in self.pubsub.listen():
                if message["type"] == "message":
                    try:
                        await self.relay(message["data"])
                    except Exception as e:
                        logger.error(f"Error processing Redis message: {e}", exc_info=True)

        except asyncio.CancelledError:
            logger.info("Redis Pub/Sub listener cancelled")
        except Exception as e:
            logger.error(f"Redis Pub/Sub listener error: {e}", exc_info=True)


async def start_listener() -> RedisPubSubService:
    service = RedisPubSubService(manager)
    await service.connect(settings.REDIS_URL)
    return service
