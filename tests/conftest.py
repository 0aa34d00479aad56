###########EXTERNAL IMPORTS############

import asyncio
import pytest
from typing import Dict, List, Optional

#######################################

#############LOCAL IMPORTS#############

from analytics.provider import TelemetryProvider
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

#######################################

GB = 1024**3
MB = 1024**2


class FakeTelemetryProvider(TelemetryProvider):
    """
    In-memory provider whose answers, failures and delays can be changed per test.

    `failures` maps a method name to the exception it raises, `delays` maps a
    method name to the seconds it waits before answering.
    """

    def __init__(self):
        self.uptime = UptimeInfo(uptime=7200)
        self.memory = MemoryInfo(total=8 * GB, available=2 * GB, swap_total=2147483648, swap_used=1073741824)
        self.cpu = CpuIdentity(manufacturer="Intel", brand="Core i5-8250U", cores=4)
        self.load = CpuLoad(current_load=12.346)
        self.temperature = CpuTemperature(main=45.5)
        self.filesystems: List[FilesystemInfo] = [
            FilesystemInfo(fs="/dev/sda2", mount="/boot", size=1 * GB, used=0, use=0.0, type="ext4"),
            FilesystemInfo(fs="/dev/sda1", mount="/", size=100 * GB, used=25 * GB, use=25.0, type="ext4"),
        ]
        self.os_info = OsInfo(platform="linux", distro="Ubuntu", release="22.04", kernel="5.15.0", arch="x86_64", hostname="monitor-host")
        self.system = SystemIdentity(manufacturer="LENOVO", model="ThinkPad T480")
        self.bios = BiosInfo(vendor="LENOVO", version="N24ET56W", release_date="2019-06-04")
        self.baseboard = BaseboardInfo(manufacturer="LENOVO", model="20L5CTO1WW")
        self.versions = SoftwareVersions(versions={"bash": "5.1.16", "node": "18.19.0", "docker": None})
        self.interfaces: List[NetworkInterfaceInfo] = [
            NetworkInterfaceInfo(name="eth0", ip4="192.168.1.10", mac="aa:bb:cc:dd:ee:ff"),
            NetworkInterfaceInfo(name="lo", ip4="127.0.0.1", mac="00:00:00:00:00:00"),
        ]
        self.interface_stats: Dict[str, InterfaceStats] = {
            "eth0": InterfaceStats(name="eth0", rx_bytes=150 * MB, tx_bytes=75 * MB),
        }
        self.failures: Dict[str, Exception] = {}
        self.delays: Dict[str, float] = {}
        self.calls: List[str] = []

    async def answer(self, name: str, value):
        self.calls.append(name)
        if name in self.delays:
            await asyncio.sleep(self.delays[name])
        if name in self.failures:
            raise self.failures[name]
        return value

    async def get_uptime(self) -> UptimeInfo:
        return await self.answer("get_uptime", self.uptime)

    async def get_memory(self) -> MemoryInfo:
        return await self.answer("get_memory", self.memory)

    async def get_cpu_identity(self) -> CpuIdentity:
        return await self.answer("get_cpu_identity", self.cpu)

    async def get_cpu_load(self) -> CpuLoad:
        return await self.answer("get_cpu_load", self.load)

    async def get_cpu_temperature(self) -> CpuTemperature:
        return await self.answer("get_cpu_temperature", self.temperature)

    async def list_filesystems(self) -> List[FilesystemInfo]:
        return await self.answer("list_filesystems", self.filesystems)

    async def get_os_info(self) -> OsInfo:
        return await self.answer("get_os_info", self.os_info)

    async def get_system_identity(self) -> SystemIdentity:
        return await self.answer("get_system_identity", self.system)

    async def get_bios_info(self) -> BiosInfo:
        return await self.answer("get_bios_info", self.bios)

    async def get_baseboard_info(self) -> BaseboardInfo:
        return await self.answer("get_baseboard_info", self.baseboard)

    async def get_software_versions(self) -> SoftwareVersions:
        return await self.answer("get_software_versions", self.versions)

    async def list_network_interfaces(self) -> List[NetworkInterfaceInfo]:
        return await self.answer("list_network_interfaces", self.interfaces)

    async def get_interface_stats(self, name: str) -> Optional[InterfaceStats]:
        return await self.answer("get_interface_stats", self.interface_stats.get(name))


@pytest.fixture
def provider() -> FakeTelemetryProvider:
    return FakeTelemetryProvider()
