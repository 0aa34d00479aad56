###########EXTERNAL IMPORTS############

from dataclasses import dataclass
from typing import Dict, Any, Optional, Tuple

#######################################

#############LOCAL IMPORTS#############

#######################################

UNKNOWN = "Desconocido"  # Unknown-marker for identity strings
NOT_AVAILABLE = "N/D"  # Unknown-marker for measured values and versions
ZERO_MB = "0.00"  # Unknown-marker for network counters

SOFTWARE_NAMES: Tuple[str, ...] = ("bash", "apache", "php", "nginx", "node", "npm", "docker", "mysql")


@dataclass(frozen=True)
class OsSnapshot:
    platform: str
    distro: str
    version: str
    kernel: str
    arch: str
    hostname: str

    def get_data(self) -> Dict[str, Any]:
        return {
            "plataforma": self.platform,
            "distro": self.distro,
            "version": self.version,
            "kernel": self.kernel,
            "arquitectura": self.arch,
            "hostname": self.hostname,
        }


@dataclass(frozen=True)
class DeviceIdentitySnapshot:
    """Manufacturer and model of the system or of the baseboard."""

    manufacturer: str
    model: str

    def get_data(self) -> Dict[str, Any]:
        return {"fabricante": self.manufacturer, "modelo": self.model}


@dataclass(frozen=True)
class BiosSnapshot:
    vendor: str
    version: str
    release_date: str

    def get_data(self) -> Dict[str, Any]:
        return {"fabricante": self.vendor, "version": self.version, "fecha": self.release_date}


@dataclass(frozen=True)
class CpuSnapshot:
    """
    CPU identity and load.

    `cores` is the raw core count reported by the provider and is not
    defaulted. `load` and `temperature` hold the unknown-marker whenever the
    source reading is missing or zero.
    """

    manufacturer: str
    brand: str
    cores: Optional[int]
    load: str
    temperature: str

    def get_data(self) -> Dict[str, Any]:
        return {
            "fabricante": self.manufacturer,
            "modelo": self.brand,
            "nucleos": self.cores,
            "usoTotal": self.load,
            "temperatura": self.temperature,
        }


@dataclass(frozen=True)
class MemorySnapshot:
    total: str
    free: str
    used: str

    def get_data(self) -> Dict[str, Any]:
        return {"total": self.total, "libre": self.free, "usado": self.used}


@dataclass(frozen=True)
class PartitionSnapshot:
    """One formatted partition entry (root filesystem or synthetic swap)."""

    filesystem: str
    size: str
    used: str
    free: str
    use_percent: str
    mount: str
    is_swap: bool = False

    def get_data(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "filesystem": self.filesystem,
            "tamaño": self.size,
            "usado": self.used,
            "libre": self.free,
            "usoPorcentaje": self.use_percent,
            "puntoMontaje": self.mount,
        }
        if self.is_swap:
            data["esSwap"] = True
        return data


@dataclass(frozen=True)
class PartitionsSnapshot:
    root: Optional[PartitionSnapshot]
    swap: PartitionSnapshot

    def get_data(self) -> Dict[str, Any]:
        return {
            "sda1": self.root.get_data() if self.root is not None else None,
            "sda5": self.swap.get_data(),
        }


@dataclass(frozen=True)
class NetworkSnapshot:
    interface: str
    ip4: str
    mac: str
    received_mb: str
    sent_mb: str

    def get_data(self) -> Dict[str, Any]:
        return {
            "interfaz": self.interface,
            "ip4": self.ip4,
            "mac": self.mac,
            "recibidoMB": self.received_mb,
            "enviadoMB": self.sent_mb,
        }


@dataclass(frozen=True)
class Snapshot:
    """
    Immutable, fully formatted telemetry record.

    A snapshot is built atomically by the snapshot builder, consumed once by
    the HTTP endpoint or by a live-feed subscriber and then discarded. Every
    leaf holds either a formatted value or an explicit unknown-marker; the
    only nullable entry is the root partition, which is None when no
    filesystem is mounted on "/".

    Attributes:
        timestamp: Capture instant in ISO 8601 format.
        uptime: Formatted uptime ("12.34 horas") or "N/D".
        os: Operating system identity.
        hardware: System manufacturer and model.
        baseboard: Baseboard manufacturer and model.
        bios: BIOS vendor, version and release date.
        cpu: CPU identity, core count, load and temperature.
        memory: Total, free and used memory.
        partitions: Root filesystem and synthetic swap partition.
        versions: Installed versions of well-known tools, in `SOFTWARE_NAMES` order.
        network: One entry per network interface.
    """

    timestamp: str
    uptime: str
    os: OsSnapshot
    hardware: DeviceIdentitySnapshot
    baseboard: DeviceIdentitySnapshot
    bios: BiosSnapshot
    cpu: CpuSnapshot
    memory: MemorySnapshot
    partitions: PartitionsSnapshot
    versions: Tuple[Tuple[str, str], ...]
    network: Tuple[NetworkSnapshot, ...]

    def get_data(self) -> Dict[str, Any]:
        """
        Returns the snapshot as a JSON-serializable dictionary.

        The keys follow the wire format consumed by the monitoring dashboard.
        """

        return {
            "timestamp": self.timestamp,
            "tiempoActivo": {"total": self.uptime},
            "sistemaOperativo": self.os.get_data(),
            "hardware": self.hardware.get_data(),
            "placaBase": self.baseboard.get_data(),
            "bios": self.bios.get_data(),
            "cpu": self.cpu.get_data(),
            "memoria": self.memory.get_data(),
            "particiones": self.partitions.get_data(),
            "versiones": dict(self.versions),
            "red": [interface.get_data() for interface in self.network],
        }
