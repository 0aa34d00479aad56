###########EXTERNAL IMPORTS############

import asyncio
import platform
import re
import shutil
import socket
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, TypeVar
import psutil

#######################################

#############LOCAL IMPORTS#############

from analytics.exceptions import ProviderError
from model.analytics.telemetry import (
    UptimeInfo,
    MemoryInfo,
    CpuIdentity,
    CpuLoad,
    CpuTemperature,
    FilesystemInfo,
    OsInfo,
    SystemIdentity,
    BiosInfo,
    BaseboardInfo,
    SoftwareVersions,
    NetworkInterfaceInfo,
    InterfaceStats,
)
from util.debug import LoggerManager

#######################################

T = TypeVar("T")


class TelemetryProvider(ABC):
    """
    Asynchronous source of raw host metrics.

    Implementations must be safe under concurrent invocation: the snapshot
    builder issues all queries of a batch at once and several builds may
    overlap. Every method raises `ProviderError` when the underlying query fails.
    """

    @abstractmethod
    async def get_uptime(self) -> UptimeInfo: ...

    @abstractmethod
    async def get_memory(self) -> MemoryInfo: ...

    @abstractmethod
    async def get_cpu_identity(self) -> CpuIdentity: ...

    @abstractmethod
    async def get_cpu_load(self) -> CpuLoad: ...

    @abstractmethod
    async def get_cpu_temperature(self) -> CpuTemperature: ...

    @abstractmethod
    async def list_filesystems(self) -> List[FilesystemInfo]: ...

    @abstractmethod
    async def get_os_info(self) -> OsInfo: ...

    @abstractmethod
    async def get_system_identity(self) -> SystemIdentity: ...

    @abstractmethod
    async def get_bios_info(self) -> BiosInfo: ...

    @abstractmethod
    async def get_baseboard_info(self) -> BaseboardInfo: ...

    @abstractmethod
    async def get_software_versions(self) -> SoftwareVersions: ...

    @abstractmethod
    async def list_network_interfaces(self) -> List[NetworkInterfaceInfo]: ...

    @abstractmethod
    async def get_interface_stats(self, name: str) -> Optional[InterfaceStats]:
        """Returns the transfer counters of one interface, or None if the interface reports none."""
        ...


class PsutilTelemetryProvider(TelemetryProvider):
    """
    Telemetry provider backed by psutil, sysfs and the `platform` module.

    Blocking calls run in worker threads through `asyncio.to_thread` and
    software versions are read from `<tool> --version` subprocesses, so the
    event loop is never blocked. Any failure of a query is re-raised as
    `ProviderError`.
    """

    DMI_PATH = Path("/sys/class/dmi/id")
    CPUINFO_PATH = Path("/proc/cpuinfo")
    THERMAL_ZONE_PATH = Path("/sys/class/thermal/thermal_zone0/temp")
    TEMPERATURE_SENSORS = ("coretemp", "k10temp", "cpu_thermal", "soc_thermal", "acpitz")
    CPU_VENDORS = {"GenuineIntel": "Intel", "AuthenticAMD": "AMD"}
    VERSION_PATTERN = re.compile(r"(\d+\.\d+(?:\.\d+)?)")
    VERSION_COMMAND_TIMEOUT_SECONDS = 5.0
    CPU_SAMPLE_INTERVAL_SECONDS = 0.1

    # Candidate commands per tool, tried in order until one is installed
    SOFTWARE_COMMANDS: Dict[str, Tuple[Tuple[str, ...], ...]] = {
        "bash": (("bash", "--version"),),
        "apache": (("apache2", "-v"), ("httpd", "-v")),
        "php": (("php", "--version"),),
        "nginx": (("nginx", "-v"),),
        "node": (("node", "--version"),),
        "npm": (("npm", "--version"),),
        "docker": (("docker", "--version"),),
        "mysql": (("mysql", "--version"),),
    }

    async def _run(self, func: Callable[..., T], *args: Any) -> T:
        """
        Runs a blocking query in a worker thread.

        Raises:
            ProviderError: If the query raises any exception.
        """

        try:
            return await asyncio.to_thread(func, *args)
        except Exception as e:
            raise ProviderError(f"Telemetry query {getattr(func, '__name__', func)} failed: {e}") from e

    async def get_uptime(self) -> UptimeInfo:
        boot_time = await self._run(psutil.boot_time)
        return UptimeInfo(uptime=max(time.time() - boot_time, 0.0))

    async def get_memory(self) -> MemoryInfo:
        virtual_memory = await self._run(psutil.virtual_memory)
        swap_memory = await self._run(psutil.swap_memory)
        return MemoryInfo(
            total=virtual_memory.total,
            available=virtual_memory.available,
            swap_total=swap_memory.total,
            swap_used=swap_memory.used,
        )

    async def get_cpu_identity(self) -> CpuIdentity:
        return await self._run(self._read_cpu_identity)

    async def get_cpu_load(self) -> CpuLoad:
        load = await self._run(psutil.cpu_percent, self.CPU_SAMPLE_INTERVAL_SECONDS)
        return CpuLoad(current_load=float(load))

    async def get_cpu_temperature(self) -> CpuTemperature:
        return CpuTemperature(main=await self._run(self._read_cpu_temperature))

    async def list_filesystems(self) -> List[FilesystemInfo]:
        return await self._run(self._read_filesystems)

    async def get_os_info(self) -> OsInfo:
        return await self._run(self._read_os_info)

    async def get_system_identity(self) -> SystemIdentity:
        values = await self._run(self._read_dmi, ("sys_vendor", "product_name"))
        return SystemIdentity(manufacturer=values["sys_vendor"], model=values["product_name"])

    async def get_bios_info(self) -> BiosInfo:
        values = await self._run(self._read_dmi, ("bios_vendor", "bios_version", "bios_date"))
        return BiosInfo(vendor=values["bios_vendor"], version=values["bios_version"], release_date=values["bios_date"])

    async def get_baseboard_info(self) -> BaseboardInfo:
        values = await self._run(self._read_dmi, ("board_vendor", "board_name"))
        return BaseboardInfo(manufacturer=values["board_vendor"], model=values["board_name"])

    async def get_software_versions(self) -> SoftwareVersions:
        names = list(self.SOFTWARE_COMMANDS)
        results = await asyncio.gather(*(self._read_software_version(self.SOFTWARE_COMMANDS[name]) for name in names))
        return SoftwareVersions(versions=dict(zip(names, results)))

    async def list_network_interfaces(self) -> List[NetworkInterfaceInfo]:
        return await self._run(self._read_network_interfaces)

    async def get_interface_stats(self, name: str) -> Optional[InterfaceStats]:
        counters = await self._run(psutil.net_io_counters, True)
        stats = counters.get(name)
        if stats is None:
            return None
        return InterfaceStats(name=name, rx_bytes=stats.bytes_recv, tx_bytes=stats.bytes_sent)

    @staticmethod
    def _read_text(path: Path) -> Optional[str]:
        """Reads a small sysfs/procfs file, returning None if it is missing or unreadable."""

        try:
            return path.read_text().strip() or None
        except OSError:
            return None

    @classmethod
    def _read_dmi(cls, keys: Sequence[str]) -> Dict[str, Optional[str]]:
        return {key: cls._read_text(cls.DMI_PATH / key) for key in keys}

    @classmethod
    def _read_cpu_identity(cls) -> CpuIdentity:
        vendor_id: Optional[str] = None
        brand: Optional[str] = None
        cpuinfo = cls._read_text(cls.CPUINFO_PATH)
        if cpuinfo:
            for line in cpuinfo.splitlines():
                key, _, value = line.partition(":")
                key = key.strip()
                if key == "vendor_id" and vendor_id is None:
                    vendor_id = value.strip()
                elif key in ("model name", "Model") and brand is None:
                    brand = value.strip()

        manufacturer = cls.CPU_VENDORS.get(vendor_id, vendor_id) if vendor_id else None
        brand = brand or platform.processor() or None
        cores = psutil.cpu_count(logical=False) or psutil.cpu_count(logical=True)
        return CpuIdentity(manufacturer=manufacturer, brand=brand, cores=cores)

    @classmethod
    def _read_cpu_temperature(cls) -> Optional[float]:
        sensors = getattr(psutil, "sensors_temperatures", None)
        temperatures = sensors() if sensors is not None else {}
        if temperatures:
            for key in cls.TEMPERATURE_SENSORS:
                entries = temperatures.get(key)
                if entries and entries[0].current is not None:
                    return float(entries[0].current)

        # Single-board computers (e.g. Raspberry Pi) only expose a thermal zone
        raw = cls._read_text(cls.THERMAL_ZONE_PATH)
        if raw is None:
            return None
        try:
            return int(raw) / 1000.0
        except ValueError:
            return None

    @staticmethod
    def _read_filesystems() -> List[FilesystemInfo]:
        filesystems: List[FilesystemInfo] = []
        for partition in psutil.disk_partitions(all=False):
            try:
                usage = psutil.disk_usage(partition.mountpoint)
            except OSError:
                continue  # Unreadable mount (e.g. missing permissions or removed media)
            filesystems.append(
                FilesystemInfo(
                    fs=partition.device,
                    type=partition.fstype or None,
                    mount=partition.mountpoint,
                    size=usage.total,
                    used=usage.used,
                    use=usage.percent,
                )
            )
        return filesystems

    @staticmethod
    def _read_os_info() -> OsInfo:
        distro: Optional[str] = None
        release: Optional[str] = None
        try:
            os_release = platform.freedesktop_os_release()
            distro = os_release.get("NAME")
            release = os_release.get("VERSION_ID") or os_release.get("VERSION")
        except OSError:
            pass  # Not a freedesktop system (e.g. Windows or macOS)

        return OsInfo(
            platform=platform.system().lower() or None,
            distro=distro,
            release=release or platform.version() or None,
            kernel=platform.release() or None,
            arch=platform.machine() or None,
            hostname=socket.gethostname() or None,
        )

    @staticmethod
    def _read_network_interfaces() -> List[NetworkInterfaceInfo]:
        interfaces: List[NetworkInterfaceInfo] = []
        for name, addresses in psutil.net_if_addrs().items():
            ip4: Optional[str] = None
            mac: Optional[str] = None
            for address in addresses:
                if address.family == socket.AF_INET and ip4 is None:
                    ip4 = address.address
                elif address.family == psutil.AF_LINK and mac is None:
                    mac = address.address
            interfaces.append(NetworkInterfaceInfo(name=name, ip4=ip4, mac=mac))
        return interfaces

    async def _read_software_version(self, commands: Tuple[Tuple[str, ...], ...]) -> Optional[str]:
        """
        Returns the version reported by the first installed command of the list.

        A tool that is not installed, hangs or prints no version yields None;
        this is a missing field, never a provider failure.
        """

        logger = LoggerManager.get_logger(__name__)

        for command in commands:
            executable = shutil.which(command[0])
            if executable is None:
                continue
            try:
                process = await asyncio.create_subprocess_exec(
                    executable,
                    *command[1:],
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.STDOUT,
                )
            except OSError as e:
                logger.debug(f"Could not run {command[0]}: {e}")
                continue
            try:
                output, _ = await asyncio.wait_for(process.communicate(), timeout=self.VERSION_COMMAND_TIMEOUT_SECONDS)
            except asyncio.TimeoutError:
                logger.debug(f"Timed out reading version of {command[0]}")
                continue
            finally:
                # Also reached when the caller cancels the query
                if process.returncode is None:
                    try:
                        process.kill()
                    except ProcessLookupError:
                        pass
                    await process.wait()
            match = self.VERSION_PATTERN.search(output.decode(errors="replace"))
            if match:
                return match.group(1)
        return None
