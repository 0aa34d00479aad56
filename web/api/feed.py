###########EXTERNAL IMPORTS############

from fastapi import APIRouter, WebSocket, Depends

#######################################

#############LOCAL IMPORTS#############

from web.feed import LiveFeedBroadcaster
from web.dependencies import services
import util.functions.web as web_util
import web.exceptions as api_exception

#######################################


async def live_feed(
    websocket: WebSocket,
    broadcaster: LiveFeedBroadcaster = Depends(services.get_broadcaster),
) -> None:
    """
    Live-feed WebSocket endpoint.

    No handshake payload is expected: once accepted, the client receives a
    snapshot event every feed interval until it disconnects. Inbound messages
    are ignored.
    """

    await websocket.accept()
    try:
        name = web_util.get_ip_address(websocket)
    except api_exception.InvalidRequest:
        name = "unknown"

    async with broadcaster.subscribe(websocket, name=name):
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break


def create_router(path: str) -> APIRouter:
    """
    Creates the live-feed router with the WebSocket route mounted on the given path.
    """

    router = APIRouter(tags=["feed"])
    router.add_api_websocket_route(path, live_feed)
    return router
