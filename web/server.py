###########EXTERNAL IMPORTS############

import asyncio
import logging
from typing import Optional
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from uvicorn import Config, Server

#######################################

#############LOCAL IMPORTS#############

from analytics.snapshot import SnapshotBuilder
from web.config import ServerOptions
from web.dependencies import services
from web.feed import LiveFeedBroadcaster
import web.api.system as system
import web.api.feed as feed
from util.debug import LoggerManager

#######################################


class HTTPServer:
    """
    Asynchronous HTTP server built with FastAPI exposing the host telemetry.

    The server offers two views of the same data, both computed fresh by the
    snapshot builder on demand:
        - Pull: `GET /api/sistema` returns one snapshot as JSON.
        - Push: the live-feed WebSocket route sends one snapshot event to each
          connected client every feed interval.

    Components:
        - snapshot_builder (SnapshotBuilder): Builds snapshots from the telemetry provider
        - broadcaster (LiveFeedBroadcaster): Owns the per-client live-feed timers
        - server (FastAPI): Web application with the system and feed routers

    Configuration:
        - Bind address, CORS origins, feed interval, event name and route come from ServerOptions
        - Uvicorn server run as a background asyncio task
        - Logging via LoggerManager
    """

    def __init__(self, options: ServerOptions, snapshot_builder: SnapshotBuilder):
        self.options = options
        self.host = options.host
        self.port = options.port
        self.snapshot_builder = snapshot_builder
        self.broadcaster = LiveFeedBroadcaster(snapshot_builder, interval=options.feed_interval, event_name=options.feed_event_name)
        services.set_dependencies(self.snapshot_builder, self.broadcaster)  # Set dependencies for routers endpoints
        self.server = HTTPServer.create_app(options)
        self.run_task: Optional[asyncio.Task] = None

    @staticmethod
    def create_app(options: ServerOptions) -> FastAPI:
        """
        Creates the FastAPI application with its routers and CORS policy.
        """

        app = FastAPI()
        app.include_router(system.router)  # System router (health check and snapshot endpoint)
        app.include_router(feed.create_router(options.feed_path))  # Live feed router (websocket endpoint)
        allow_any_origin = "*" in options.allowed_origins
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"] if allow_any_origin else options.allowed_origins,
            allow_credentials=not allow_any_origin,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )
        return app

    async def start(self) -> None:
        """
        Starts the HTTP server asynchronously using the current event loop.

        This method creates a background task that runs the FastAPI server using `asyncio.create_task`.
        It should be called once during initialization or startup of the HTTP server component.
        """

        logger = LoggerManager.get_logger(__name__)

        try:
            if self.run_task is not None:
                raise RuntimeError("Run task is already instantiated")

            loop = asyncio.get_event_loop()
            self.run_task = loop.create_task(self.run_server())
            logger.info(f"Monitoring server running on http://{self.host}:{self.port}")
        except Exception as e:
            logger.exception(f"Failed to start HTTP Server: {str(e)}")

    async def stop(self) -> None:
        """
        Stops the HTTP Server by disconnecting the live-feed clients and cancelling the run task.
        """

        logger = LoggerManager.get_logger(__name__)

        try:
            await self.broadcaster.close()
            if self.run_task:
                self.run_task.cancel()
                await self.run_task
                self.run_task = None

        except asyncio.CancelledError:
            pass
        except Exception as e:
            logger.exception(f"Failed to stop HTTP Server: {str(e)}")

    async def run_server(self):
        """
        Asynchronously starts the FastAPI HTTP server using Uvicorn.

        This method builds a Uvicorn `Server` with the provided configuration:
            - Binds the server to the specified host and port.
            - Disables live reload.
            - Suppresses default logging output.

        It runs the server within the asyncio event loop.
        """

        config = Config(app=self.server, host=self.host, port=self.port, reload=False, log_level=logging.CRITICAL + 1)
        server = Server(config)
        await server.serve()
