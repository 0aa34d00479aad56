###########EXTERNAL IMPORTS############

from dataclasses import dataclass, field
from typing import Optional, List, Dict

#######################################

#############LOCAL IMPORTS#############

#######################################


@dataclass
class UptimeInfo:
    """Time elapsed since boot, in seconds."""

    uptime: Optional[float] = None


@dataclass
class MemoryInfo:
    """
    Physical and swap memory counters, in bytes.

    Attributes:
        total: Total physical memory.
        available: Memory available to new processes without swapping.
        swap_total: Total swap space (0 when no swap is configured).
        swap_used: Swap space currently in use.
    """

    total: int = 0
    available: int = 0
    swap_total: int = 0
    swap_used: int = 0


@dataclass
class CpuIdentity:
    manufacturer: Optional[str] = None
    brand: Optional[str] = None
    cores: Optional[int] = None


@dataclass
class CpuLoad:
    """Current overall CPU load percentage (0–100)."""

    current_load: Optional[float] = None


@dataclass
class CpuTemperature:
    """Main CPU temperature in degrees Celsius."""

    main: Optional[float] = None


@dataclass
class FilesystemInfo:
    """
    Usage of one mounted filesystem.

    Attributes:
        fs: Device or filesystem name (e.g. "/dev/sda1").
        type: Filesystem type (e.g. "ext4").
        mount: Mount point.
        size: Total size in bytes.
        used: Used space in bytes.
        use: Usage percentage (0–100).
    """

    fs: str
    mount: str
    size: int
    used: int
    use: float
    type: Optional[str] = None


@dataclass
class OsInfo:
    platform: Optional[str] = None
    distro: Optional[str] = None
    release: Optional[str] = None
    kernel: Optional[str] = None
    arch: Optional[str] = None
    hostname: Optional[str] = None


@dataclass
class SystemIdentity:
    manufacturer: Optional[str] = None
    model: Optional[str] = None


@dataclass
class BiosInfo:
    vendor: Optional[str] = None
    version: Optional[str] = None
    release_date: Optional[str] = None


@dataclass
class BaseboardInfo:
    manufacturer: Optional[str] = None
    model: Optional[str] = None


@dataclass
class SoftwareVersions:
    """Installed versions of well-known tools, keyed by tool name."""

    versions: Dict[str, Optional[str]] = field(default_factory=dict)

    def get(self, name: str) -> Optional[str]:
        return self.versions.get(name)


@dataclass
class NetworkInterfaceInfo:
    name: str
    ip4: Optional[str] = None
    mac: Optional[str] = None


@dataclass
class InterfaceStats:
    """Cumulative transfer counters of one network interface, in bytes."""

    name: str
    rx_bytes: Optional[int] = None
    tx_bytes: Optional[int] = None


@dataclass
class RawTelemetry:
    """
    Result of one batch of provider queries.

    Built by the snapshot builder right after the concurrent queries resolve
    and discarded once merged into a Snapshot.
    """

    uptime: UptimeInfo
    memory: MemoryInfo
    cpu: CpuIdentity
    load: CpuLoad
    temperature: CpuTemperature
    filesystems: List[FilesystemInfo]
    os_info: OsInfo
    system: SystemIdentity
    bios: BiosInfo
    baseboard: BaseboardInfo
    versions: SoftwareVersions
    interfaces: List[NetworkInterfaceInfo]
