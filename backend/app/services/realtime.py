"""
Real-time publishing.

Services push through a ``Publisher`` handed to them; they never talk to
sockets directly. ``RedisPublisher`` puts the message on the Redis channel
that every API process listens to (see ``redis_pubsub``), which then relays
it to the websocket connections subscribed to ``channel``.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from typing import Any, Protocol
from uuid import UUID

import redis
from redis.exceptions import RedisError

from app.core.config import settings

logger = logging.getLogger(__name__)

REALTIME_REDIS_CHANNEL = "realtime"


class Publisher(Protocol):
    def publish(self, channel: str, event: str, payload: dict[str, Any]) -> None:
        ...


def user_channel(user_id: UUID) -> str:
    return f"user:{user_id}"


class RedisPublisher:
    """Publishes real-time messages on a Redis pub/sub channel."""

    def __init__(self, url: str):
        self._client = redis.Redis.from_url(
            url,
            decode_responses=True,
            socket_timeout=5,
            socket_connect_timeout=5,
        )

    def publish(self, channel: str, event: str, payload: dict[str, Any]) -> None:
        message = {"channel": channel, "event": event, "payload": payload}
        try:
            self._client.publish(REALTIME_REDIS_CHANNEL, json.dumps(message, default=str))
            logger.debug(f"Published {event} to {channel}")
        except RedisError as e:
            logger.error(f"Error publishing {event} to {channel}: {e}")


class LoggingPublisher:
    """Used when real-time delivery is disabled."""

    def publish(self, channel: str, event: str, payload: dict[str, Any]) -> None:
        logger.debug(f"Real-time disabled, dropping {event} for {channel}")


@lru_cache
def get_publisher() -> Publisher:
    if settings.REALTIME_ENABLED:
        return RedisPublisher(settings.REDIS_URL)
    return LoggingPublisher()
