###########EXTERNAL IMPORTS############

import asyncio

#######################################

#############LOCAL IMPORTS#############

from analytics.provider import PsutilTelemetryProvider
from analytics.snapshot import SnapshotBuilder
from web.config import load_server_options
from web.server import HTTPServer
from util.debug import LoggerManager

#######################################


async def async_main():
    """
    Main asynchronous entry point for the application.

    Responsibilities:
        - Initializes logging and loads the server options.
        - Creates the telemetry provider, the snapshot builder and the HTTP server.
        - Keeps the event loop alive to support background tasks (HTTP server, live-feed timers).
    """

    # Initialize global logger
    LoggerManager.init()

    # Create core infrastructure
    options = load_server_options(config_file="web/server_options.env")
    provider = PsutilTelemetryProvider()
    snapshot_builder = SnapshotBuilder(provider, timeout=options.provider_timeout)
    http_server = HTTPServer(options=options, snapshot_builder=snapshot_builder)

    await http_server.start()

    try:
        # Keep main loop alive to support background tasks
        while True:
            await asyncio.sleep(2)
    finally:
        await http_server.stop()


if __name__ == "__main__":
    asyncio.run(async_main())
