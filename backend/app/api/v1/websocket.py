"""WebSocket endpoint for real-time notifications and chat pushes."""

import logging
from uuid import UUID

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status

from app.core.security import verify_token
from app.services.realtime import user_channel
from app.services.websocket_manager import manager

logger = logging.getLogger(__name__)

router = APIRouter()


def authenticate_ws(token: str) -> UUID | None:
    """
    Verify JWT token for a WebSocket connection.
    Token is passed as query parameter since browsers cannot set headers.
    """
    try:
        payload = verify_token(token, token_type="access")
        return UUID(payload.get("sub"))
    except (ValueError, TypeError) as e:
        logger.warning(f"WebSocket auth error: {e}")
        return None


@router.websocket("/notifications")
async def websocket_notifications(
    websocket: WebSocket,
    token: str = Query(...),
):
    """
    Client connects with: /api/ws/notifications?token=JWT_TOKEN

    Messages format:
    {
        "type": "notification" | "receiveMessage",
        "data": {...}
    }
    """
    user_id = authenticate_ws(token)
    if user_id is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    channel = user_channel(user_id)
    await manager.connect(websocket, channel)

    try:
        await websocket.send_json({
            "type": "connected",
            "message": "WebSocket connected successfully",
            "user_id": str(user_id),
        })

        # Keep connection alive; clients may send "ping"
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_json({"type": "pong"})

    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected gracefully for user {user_id}")
    except Exception as e:
        logger.error(f"WebSocket error for user {user_id}: {e}", exc_info=True)

    finally:
        await manager.disconnect(websocket, channel)
