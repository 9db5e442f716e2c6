"""
WebSocket connection manager for real-time pushes.
Tracks sockets per channel and fans messages out to them.
"""

import asyncio
import logging
from typing import Dict, Set

from fastapi import WebSocket

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Manages WebSocket connections grouped by channel."""

    def __init__(self):
        # {channel: {websocket1, websocket2, ...}}
        self.active_connections: Dict[str, Set[WebSocket]] = {}
        self._lock = asyncio.Lock()

    async def connect(self, websocket: WebSocket, channel: str):
        """Accept WebSocket connection and subscribe it to a channel."""
        await websocket.accept()

        async with self._lock:
            if channel not in self.active_connections:
                self.active_connections[channel] = set()
            self.active_connections[channel].add(websocket)

        logger.info(f"WebSocket connected: channel={channel}, total_connections={len(self.active_connections[channel])}")

    async def disconnect(self, websocket: WebSocket, channel: str):
        async with self._lock:
            if channel in self.active_connections:
                self.active_connections[channel].discard(websocket)
                if not self.active_connections[channel]:
                    del self.active_connections[channel]

        logger.info(f"WebSocket disconnected: channel={channel}")

    async def send_to_channel(self, channel: str, message: dict):
        """Send message to every socket subscribed to a channel."""
        if channel not in self.active_connections:
            logger.debug(f"No active connections for channel {channel}")
            return

        disconnected = []
        connections = list(self.active_connections[channel])

        for websocket in connections:
            try:
                await websocket.send_json(message)
                logger.debug(f"Message sent to {channel}: {message.get('type')}")
            except Exception as e:
                logger.error(f"Error sending message to {channel}: {e}")
                disconnected.append(websocket)

        # Clean up disconnected sockets
        if disconnected:
            async with self._lock:
                # The channel may have been emptied while we were sending
                remaining = self.active_connections.get(channel)
                if remaining is None:
                    return
                for ws in disconnected:
                    remaining.discard(ws)
                if not remaining:
                    del self.active_connections[channel]

    def get_connection_count(self, channel: str) -> int:
        return len(self.active_connections.get(channel, set()))


# Global instance
manager = ConnectionManager()
