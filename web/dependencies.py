###########EXTERNAL IMPORTS############

from typing import Optional

#######################################

#############LOCAL IMPORTS#############

from analytics.snapshot import SnapshotBuilder
from web.feed import LiveFeedBroadcaster

#######################################


class HTTPDependencies:
    """
    Dependency injection container for HTTP server service components.

    Dependencies are set once during server startup and then accessed by the
    route handlers through FastAPI `Depends` on the getter methods.

    Attributes:
        snapshot_builder (SnapshotBuilder | None): Builds the telemetry snapshots served by the API
        broadcaster (LiveFeedBroadcaster | None): Manages the live-feed subscribers
    """

    def __init__(
        self,
        snapshot_builder: Optional[SnapshotBuilder] = None,
        broadcaster: Optional[LiveFeedBroadcaster] = None,
    ):

        self.snapshot_builder = snapshot_builder
        self.broadcaster = broadcaster

    def set_dependencies(self, snapshot_builder: SnapshotBuilder, broadcaster: LiveFeedBroadcaster) -> None:
        """
        Set all dependency instances at once during application startup.

        Args:
            snapshot_builder: SnapshotBuilder instance used by the snapshot endpoint
            broadcaster: LiveFeedBroadcaster instance used by the live-feed endpoint
        """
        self.snapshot_builder = snapshot_builder
        self.broadcaster = broadcaster

    def get_snapshot_builder(self) -> SnapshotBuilder:
        """
        Get the SnapshotBuilder service instance.

        Raises:
            ValueError: If SnapshotBuilder has not been initialized
        """
        if self.snapshot_builder is not None:
            return self.snapshot_builder
        raise ValueError("Snapshot Builder is not yet initialized in HTTP Dependencies")

    def get_broadcaster(self) -> LiveFeedBroadcaster:
        """
        Get the LiveFeedBroadcaster service instance.

        Raises:
            ValueError: If LiveFeedBroadcaster has not been initialized
        """
        if self.broadcaster is not None:
            return self.broadcaster
        raise ValueError("Live Feed Broadcaster is not yet initialized in HTTP Dependencies")


services = HTTPDependencies()  # Global HTTPDependencies instance for application-wide dependency access.
