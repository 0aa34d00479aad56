###########EXTERNAL IMPORTS############

import asyncio
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, AsyncIterator, Dict, Optional, Set
from fastapi import WebSocket

#######################################

#############LOCAL IMPORTS#############

from analytics.exceptions import TelemetryUnavailable
from analytics.snapshot import SnapshotBuilder
from util.debug import LoggerManager

#######################################


class SubscriberState(Enum):
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"  # Terminal


class Subscriber:
    """
    One live-feed connection and the periodic timer that feeds it.

    While connected, every `interval` seconds the timer dispatches a tick that
    builds a fresh snapshot and pushes it to the channel as
    `{"event": event_name, "data": snapshot}`. A failed build only skips that
    tick. Disconnecting cancels the timer at once; a tick already dispatched
    is left to finish, but its snapshot is discarded instead of being pushed.

    Attributes:
        channel: Transport channel (a FastAPI WebSocket or any object with an async `send_json`).
        builder: Snapshot builder invoked on every tick.
        interval: Seconds between two ticks.
        event_name: Name of the pushed event.
        name: Label used in log messages (usually the client address).
        state: Current lifecycle state.
        pushes: Number of snapshots successfully pushed.
    """

    def __init__(self, channel: WebSocket, builder: SnapshotBuilder, interval: float, event_name: str, name: str = "client"):
        self.channel = channel
        self.builder = builder
        self.interval = interval
        self.event_name = event_name
        self.name = name
        self.state = SubscriberState.CONNECTED
        self.pushes = 0
        self.timer_task: Optional[asyncio.Task] = None
        self.tick_tasks: Set[asyncio.Task] = set()

    @property
    def connected(self) -> bool:
        return self.state is SubscriberState.CONNECTED

    def start(self) -> None:
        """
        Arms the periodic timer.

        Raises:
            RuntimeError: If the timer is already armed or the subscriber is disconnected.
        """

        if self.timer_task is not None:
            raise RuntimeError("Timer task is already instantiated")
        if not self.connected:
            raise RuntimeError("Cannot arm the timer of a disconnected subscriber")

        loop = asyncio.get_event_loop()
        self.timer_task = loop.create_task(self.run_timer())

    async def disconnect(self) -> None:
        """
        Moves the subscriber to the terminal disconnected state and cancels its timer.

        Calling this method more than once has no effect.
        """

        if not self.connected:
            return

        self.state = SubscriberState.DISCONNECTED
        try:
            if self.timer_task:
                self.timer_task.cancel()
                await self.timer_task
        except asyncio.CancelledError:
            pass
        finally:
            self.timer_task = None

    async def run_timer(self) -> None:
        """Dispatches one tick every `interval` seconds until cancelled."""

        loop = asyncio.get_event_loop()
        while self.connected:
            await asyncio.sleep(self.interval)
            task = loop.create_task(self.tick())
            self.tick_tasks.add(task)
            task.add_done_callback(self.tick_tasks.discard)

    async def tick(self) -> bool:
        """
        Builds a snapshot and pushes it to the channel.

        Returns:
            bool: True if a snapshot was pushed, False if the tick was skipped.
        """

        logger = LoggerManager.get_logger(__name__)

        try:
            snapshot = await self.builder.build_snapshot()
        except TelemetryUnavailable as e:
            logger.warning(f"Skipped live feed push to {self.name}: {e}")
            return False
        except Exception as e:
            logger.exception(f"Unexpected error building snapshot for {self.name}: {e}")
            return False

        if not self.connected:
            return False  # Disconnected while the snapshot was being built

        payload: Dict[str, Any] = {"event": self.event_name, "data": snapshot.get_data()}
        try:
            await self.channel.send_json(payload)
        except Exception as e:
            logger.warning(f"Failed to push live feed data to {self.name}: {e}")
            return False

        self.pushes += 1
        return True


class LiveFeedBroadcaster:
    """
    Creates and tracks the live-feed subscribers.

    Each subscriber owns its own timer and triggers its own snapshot builds;
    the broadcaster holds no snapshot cache. It only keeps the set of active
    subscribers so that they can be closed together on shutdown.
    """

    def __init__(self, builder: SnapshotBuilder, interval: float, event_name: str):
        self.builder = builder
        self.interval = interval
        self.event_name = event_name
        self.subscribers: Set[Subscriber] = set()

    @asynccontextmanager
    async def subscribe(self, channel: WebSocket, name: str = "client") -> AsyncIterator[Subscriber]:
        """
        Connects a subscriber for the lifetime of the `async with` block.

        The subscriber's timer is armed on entry and cancelled on exit, whatever
        the reason for leaving the block.
        """

        logger = LoggerManager.get_logger(__name__)

        subscriber = Subscriber(channel, self.builder, self.interval, self.event_name, name=name)
        self.subscribers.add(subscriber)
        subscriber.start()
        logger.info(f"Live feed client {name} connected")
        try:
            yield subscriber
        finally:
            await subscriber.disconnect()
            self.subscribers.discard(subscriber)
            logger.info(f"Live feed client {name} disconnected")

    async def close(self) -> None:
        """Disconnects every active subscriber."""

        for subscriber in list(self.subscribers):
            await subscriber.disconnect()
        self.subscribers.clear()
