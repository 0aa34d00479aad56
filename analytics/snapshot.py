###########EXTERNAL IMPORTS############

import asyncio
import socket
from typing import Any, Awaitable, List, Optional, TypeVar

#######################################

#############LOCAL IMPORTS#############

from analytics.exceptions import ProviderError, TelemetryUnavailable
from analytics.provider import TelemetryProvider
from model.analytics.telemetry import RawTelemetry, FilesystemInfo, MemoryInfo, NetworkInterfaceInfo
from model.analytics.snapshot import (
    UNKNOWN,
    NOT_AVAILABLE,
    ZERO_MB,
    SOFTWARE_NAMES,
    Snapshot,
    OsSnapshot,
    DeviceIdentitySnapshot,
    BiosSnapshot,
    CpuSnapshot,
    MemorySnapshot,
    PartitionSnapshot,
    PartitionsSnapshot,
    NetworkSnapshot,
)
from util.debug import LoggerManager
import util.functions.date as date
import util.functions.units as units

#######################################

T = TypeVar("T")


def or_default(value: Any, default: str) -> Any:
    """
    Returns the value, or the default when the value is missing or falsy.

    Zero readings are treated as missing, matching the dashboard contract.
    """

    return value if value else default


class SnapshotBuilder:
    """
    Builds fully formatted telemetry snapshots from a telemetry provider.

    Each call to `build_snapshot()` queries the provider afresh: there is no
    cache and no state shared between builds, so builds triggered by the HTTP
    endpoint and by several live-feed subscribers can overlap freely.

    Attributes:
        provider: Source of raw host metrics.
        timeout: Deadline in seconds for each individual provider query, or None for no deadline.
    """

    ROOT_MOUNT = "/"
    SWAP_DEVICE = "/dev/sda5"
    SWAP_MOUNT = "[SWAP]"
    SWAP_FALLBACK_BYTES = 975 * 1024 * 1024  # Size reported when the host has no swap configured
    SWAP_EMPTY_USAGE = "0%"

    def __init__(self, provider: TelemetryProvider, timeout: Optional[float] = None):
        self.provider = provider
        self.timeout = timeout

    async def _query(self, query: Awaitable[T]) -> T:
        """
        Awaits a single provider query under the configured deadline.

        Raises:
            ProviderError: If the query fails or does not complete in time.
        """

        try:
            if self.timeout is None:
                return await query
            return await asyncio.wait_for(query, timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise ProviderError(f"Telemetry query exceeded {self.timeout}s deadline") from e
        except ProviderError:
            raise
        except Exception as e:
            raise ProviderError(f"Telemetry query failed: {e}") from e

    async def collect(self) -> RawTelemetry:
        """
        Issues every independent provider query concurrently and waits for all of them.

        Raises:
            ProviderError: As soon as any query of the batch fails.
        """

        provider = self.provider
        (
            uptime,
            memory,
            cpu,
            load,
            temperature,
            filesystems,
            os_info,
            system,
            bios,
            baseboard,
            versions,
            interfaces,
        ) = await asyncio.gather(
            self._query(provider.get_uptime()),
            self._query(provider.get_memory()),
            self._query(provider.get_cpu_identity()),
            self._query(provider.get_cpu_load()),
            self._query(provider.get_cpu_temperature()),
            self._query(provider.list_filesystems()),
            self._query(provider.get_os_info()),
            self._query(provider.get_system_identity()),
            self._query(provider.get_bios_info()),
            self._query(provider.get_baseboard_info()),
            self._query(provider.get_software_versions()),
            self._query(provider.list_network_interfaces()),
        )
        return RawTelemetry(
            uptime=uptime,
            memory=memory,
            cpu=cpu,
            load=load,
            temperature=temperature,
            filesystems=filesystems,
            os_info=os_info,
            system=system,
            bios=bios,
            baseboard=baseboard,
            versions=versions,
            interfaces=interfaces,
        )

    async def build_snapshot(self) -> Snapshot:
        """
        Builds a new snapshot from live provider queries.

        Returns:
            Snapshot: Complete snapshot where every missing field holds its unknown-marker.

        Raises:
            TelemetryUnavailable: If any provider query of the batch fails.
        """

        logger = LoggerManager.get_logger(__name__)

        try:
            raw = await self.collect()
            network = await self.build_network(raw.interfaces)
        except ProviderError as e:
            logger.error(f"Failed to obtain system data: {e}")
            raise TelemetryUnavailable("System telemetry is unavailable") from e

        return self.merge(raw, network)

    async def build_network(self, interfaces: List[NetworkInterfaceInfo]) -> List[NetworkSnapshot]:
        """
        Queries the transfer counters of every interface concurrently.

        Interfaces without counters report zero received and sent megabytes.
        """

        async def build_interface(interface: NetworkInterfaceInfo) -> NetworkSnapshot:
            stats = await self._query(self.provider.get_interface_stats(interface.name))
            rx_bytes = stats.rx_bytes if stats is not None else None
            tx_bytes = stats.tx_bytes if stats is not None else None
            return NetworkSnapshot(
                interface=interface.name,
                ip4=or_default(interface.ip4, NOT_AVAILABLE),
                mac=or_default(interface.mac, NOT_AVAILABLE),
                received_mb=units.format_megabytes(rx_bytes) if rx_bytes else ZERO_MB,
                sent_mb=units.format_megabytes(tx_bytes) if tx_bytes else ZERO_MB,
            )

        return list(await asyncio.gather(*(build_interface(interface) for interface in interfaces)))

    @classmethod
    def find_root_filesystem(cls, filesystems: List[FilesystemInfo]) -> Optional[FilesystemInfo]:
        """Returns the first filesystem mounted on "/", or None."""

        return next((filesystem for filesystem in filesystems if filesystem.mount == cls.ROOT_MOUNT), None)

    @classmethod
    def build_root_partition(cls, filesystem: Optional[FilesystemInfo]) -> Optional[PartitionSnapshot]:
        if filesystem is None:
            return None
        return PartitionSnapshot(
            filesystem=or_default(filesystem.fs, UNKNOWN),
            size=units.format_bytes_as_gb(filesystem.size),
            used=units.format_bytes_as_gb(filesystem.used),
            free=units.format_bytes_as_gb(filesystem.size - filesystem.used),
            use_percent=units.format_percent(filesystem.use or 0),
            mount=filesystem.mount,
        )

    @classmethod
    def build_swap_partition(cls, memory: MemoryInfo) -> PartitionSnapshot:
        """
        Derives the synthetic swap partition from the memory swap counters.

        When the host reports no swap, a fixed fallback size with zero usage is used.
        """

        swap_used = memory.swap_used or 0
        if memory.swap_total > 0:
            size = memory.swap_total
            use_percent = units.format_percent(swap_used / memory.swap_total * 100)
        else:
            size = cls.SWAP_FALLBACK_BYTES
            use_percent = cls.SWAP_EMPTY_USAGE

        return PartitionSnapshot(
            filesystem=cls.SWAP_DEVICE,
            size=units.format_bytes_as_gb(size),
            used=units.format_bytes_as_gb(swap_used),
            free=units.format_bytes_as_gb(size - swap_used),
            use_percent=use_percent,
            mount=cls.SWAP_MOUNT,
            is_swap=True,
        )

    def merge(self, raw: RawTelemetry, network: List[NetworkSnapshot]) -> Snapshot:
        """Merges raw telemetry and network entries into a formatted snapshot."""

        load = raw.load.current_load
        temperature = raw.temperature.main
        memory = raw.memory

        return Snapshot(
            timestamp=date.to_iso(date.get_current_utc_datetime()),
            uptime=units.format_hours(raw.uptime.uptime) if raw.uptime.uptime else NOT_AVAILABLE,
            os=OsSnapshot(
                platform=or_default(raw.os_info.platform, UNKNOWN),
                distro=or_default(raw.os_info.distro, UNKNOWN),
                version=or_default(raw.os_info.release, UNKNOWN),
                kernel=or_default(raw.os_info.kernel, UNKNOWN),
                arch=or_default(raw.os_info.arch, UNKNOWN),
                hostname=raw.os_info.hostname or or_default(socket.gethostname(), UNKNOWN),
            ),
            hardware=DeviceIdentitySnapshot(
                manufacturer=or_default(raw.system.manufacturer, UNKNOWN),
                model=or_default(raw.system.model, UNKNOWN),
            ),
            baseboard=DeviceIdentitySnapshot(
                manufacturer=or_default(raw.baseboard.manufacturer, UNKNOWN),
                model=or_default(raw.baseboard.model, UNKNOWN),
            ),
            bios=BiosSnapshot(
                vendor=or_default(raw.bios.vendor, UNKNOWN),
                version=or_default(raw.bios.version, UNKNOWN),
                release_date=or_default(raw.bios.release_date, UNKNOWN),
            ),
            cpu=CpuSnapshot(
                manufacturer=or_default(raw.cpu.manufacturer, UNKNOWN),
                brand=or_default(raw.cpu.brand, UNKNOWN),
                cores=raw.cpu.cores,
                load=units.format_percent(load) if load else NOT_AVAILABLE,
                temperature=units.format_temperature(temperature) if temperature else NOT_AVAILABLE,
            ),
            memory=MemorySnapshot(
                total=units.format_bytes_as_gb(memory.total),
                free=units.format_bytes_as_gb(memory.available),
                used=units.format_bytes_as_gb(memory.total - memory.available),
            ),
            partitions=PartitionsSnapshot(
                root=self.build_root_partition(self.find_root_filesystem(raw.filesystems)),
                swap=self.build_swap_partition(memory),
            ),
            versions=tuple((name, or_default(raw.versions.get(name), NOT_AVAILABLE)) for name in SOFTWARE_NAMES),
            network=tuple(network),
        )
