###########EXTERNAL IMPORTS############

import socket
import pytest
from datetime import datetime
from typing import Any, List

#######################################

#############LOCAL IMPORTS#############

from analytics.exceptions import ProviderError, TelemetryUnavailable
from analytics.snapshot import SnapshotBuilder, or_default
from model.analytics.snapshot import SOFTWARE_NAMES
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


def find_null_paths(data: Any, path: str = "") -> List[str]:
    """Returns the paths of every None leaf in a nested structure."""

    if data is None:
        return [path]
    if isinstance(data, dict):
        return [p for key, value in data.items() for p in find_null_paths(value, f"{path}.{key}")]
    if isinstance(data, list):
        return [p for index, value in enumerate(data) for p in find_null_paths(value, f"{path}[{index}]")]
    return []


@pytest.mark.asyncio
async def test_build_snapshot_formats_every_block(provider):
    snapshot = await SnapshotBuilder(provider).build_snapshot()
    data = snapshot.get_data()

    assert datetime.fromisoformat(data["timestamp"]).tzinfo is not None
    assert data["tiempoActivo"] == {"total": "2.00 horas"}
    assert data["sistemaOperativo"] == {
        "plataforma": "linux",
        "distro": "Ubuntu",
        "version": "22.04",
        "kernel": "5.15.0",
        "arquitectura": "x86_64",
        "hostname": "monitor-host",
    }
    assert data["hardware"] == {"fabricante": "LENOVO", "modelo": "ThinkPad T480"}
    assert data["placaBase"] == {"fabricante": "LENOVO", "modelo": "20L5CTO1WW"}
    assert data["bios"] == {"fabricante": "LENOVO", "version": "N24ET56W", "fecha": "2019-06-04"}
    assert data["cpu"] == {
        "fabricante": "Intel",
        "modelo": "Core i5-8250U",
        "nucleos": 4,
        "usoTotal": "12.35%",
        "temperatura": "45.5 °C",
    }
    assert data["memoria"] == {"total": "8.00 GB", "libre": "2.00 GB", "usado": "6.00 GB"}
    assert data["particiones"]["sda1"] == {
        "filesystem": "/dev/sda1",
        "tamaño": "100.00 GB",
        "usado": "25.00 GB",
        "libre": "75.00 GB",
        "usoPorcentaje": "25.00%",
        "puntoMontaje": "/",
    }
    assert data["versiones"]["bash"] == "5.1.16"
    assert data["versiones"]["docker"] == "N/D"
    assert list(data["versiones"]) == list(SOFTWARE_NAMES)


@pytest.mark.asyncio
async def test_every_field_is_populated(provider):
    data = (await SnapshotBuilder(provider).build_snapshot()).get_data()
    assert find_null_paths(data) == []


@pytest.mark.asyncio
async def test_missing_fields_fall_back_to_unknown_markers(provider, monkeypatch):
    provider.uptime = UptimeInfo()
    provider.cpu = CpuIdentity(cores=2)
    provider.load = CpuLoad()
    provider.temperature = CpuTemperature()
    provider.os_info = OsInfo()
    provider.system = SystemIdentity()
    provider.bios = BiosInfo()
    provider.baseboard = BaseboardInfo()
    provider.versions = SoftwareVersions()
    provider.interfaces = [NetworkInterfaceInfo(name="wlan0")]
    provider.interface_stats = {}
    monkeypatch.setattr(socket, "gethostname", lambda: "")

    data = (await SnapshotBuilder(provider).build_snapshot()).get_data()

    assert data["tiempoActivo"]["total"] == "N/D"
    assert set(data["sistemaOperativo"].values()) == {"Desconocido"}
    assert set(data["hardware"].values()) == {"Desconocido"}
    assert set(data["placaBase"].values()) == {"Desconocido"}
    assert set(data["bios"].values()) == {"Desconocido"}
    assert data["cpu"]["fabricante"] == "Desconocido"
    assert data["cpu"]["modelo"] == "Desconocido"
    assert data["cpu"]["usoTotal"] == "N/D"
    assert data["cpu"]["temperatura"] == "N/D"
    assert set(data["versiones"].values()) == {"N/D"}
    assert data["red"] == [{"interfaz": "wlan0", "ip4": "N/D", "mac": "N/D", "recibidoMB": "0.00", "enviadoMB": "0.00"}]
    assert find_null_paths(data) == []


@pytest.mark.asyncio
async def test_hostname_falls_back_to_local_host_name(provider, monkeypatch):
    provider.os_info = OsInfo(platform="linux")
    monkeypatch.setattr(socket, "gethostname", lambda: "fallback-host")

    data = (await SnapshotBuilder(provider).build_snapshot()).get_data()
    assert data["sistemaOperativo"]["hostname"] == "fallback-host"


@pytest.mark.asyncio
async def test_zero_cpu_load_and_temperature_are_reported_as_unknown(provider):
    # Zero readings are treated as missing: the dashboard shows "N/D" rather than "0.00%" or "0 °C"
    provider.load = CpuLoad(current_load=0)
    provider.temperature = CpuTemperature(main=0)

    data = (await SnapshotBuilder(provider).build_snapshot()).get_data()
    assert data["cpu"]["usoTotal"] == "N/D"
    assert data["cpu"]["temperatura"] == "N/D"


@pytest.mark.asyncio
async def test_core_count_is_passed_through(provider):
    provider.cpu = CpuIdentity(manufacturer="AMD", brand="Ryzen 7", cores=16)
    data = (await SnapshotBuilder(provider).build_snapshot()).get_data()
    assert data["cpu"]["nucleos"] == 16


@pytest.mark.asyncio
async def test_missing_root_filesystem_yields_null_partition(provider):
    provider.filesystems = [provider.filesystems[0]]

    data = (await SnapshotBuilder(provider).build_snapshot()).get_data()
    assert data["particiones"]["sda1"] is None
    assert data["particiones"]["sda5"]["puntoMontaje"] == "[SWAP]"
    assert data["particiones"]["sda5"]["esSwap"] is True


@pytest.mark.asyncio
async def test_first_root_filesystem_is_used(provider):
    provider.filesystems = provider.filesystems + [FilesystemInfo(fs="/dev/sdb1", mount="/", size=10 * 1024**3, used=0, use=0.0)]

    data = (await SnapshotBuilder(provider).build_snapshot()).get_data()
    assert data["particiones"]["sda1"]["filesystem"] == "/dev/sda1"


@pytest.mark.asyncio
async def test_swap_partition_uses_reported_swap(provider):
    data = (await SnapshotBuilder(provider).build_snapshot()).get_data()
    swap = data["particiones"]["sda5"]

    assert swap == {
        "filesystem": "/dev/sda5",
        "tamaño": "2.00 GB",
        "usado": "1.00 GB",
        "libre": "1.00 GB",
        "usoPorcentaje": "50.00%",
        "puntoMontaje": "[SWAP]",
        "esSwap": True,
    }


@pytest.mark.asyncio
async def test_swap_partition_falls_back_when_host_has_no_swap(provider):
    provider.memory = MemoryInfo(total=4 * 1024**3, available=1024**3, swap_total=0, swap_used=0)

    data = (await SnapshotBuilder(provider).build_snapshot()).get_data()
    swap = data["particiones"]["sda5"]

    assert SnapshotBuilder.SWAP_FALLBACK_BYTES == 975 * 1024 * 1024
    assert swap["tamaño"] == "0.95 GB"
    assert swap["usado"] == "0.00 GB"
    assert swap["libre"] == "0.95 GB"
    assert swap["usoPorcentaje"] == "0%"


@pytest.mark.asyncio
async def test_network_entries_are_built_per_interface(provider):
    data = (await SnapshotBuilder(provider).build_snapshot()).get_data()

    assert data["red"] == [
        {"interfaz": "eth0", "ip4": "192.168.1.10", "mac": "aa:bb:cc:dd:ee:ff", "recibidoMB": "150.00", "enviadoMB": "75.00"},
        {"interfaz": "lo", "ip4": "127.0.0.1", "mac": "00:00:00:00:00:00", "recibidoMB": "0.00", "enviadoMB": "0.00"},
    ]
    assert provider.calls.count("get_interface_stats") == 2


@pytest.mark.asyncio
async def test_interface_without_counters_reports_zero(provider):
    provider.interface_stats = {"eth0": InterfaceStats(name="eth0", rx_bytes=None, tx_bytes=0)}

    data = (await SnapshotBuilder(provider).build_snapshot()).get_data()
    assert data["red"][0]["recibidoMB"] == "0.00"
    assert data["red"][0]["enviadoMB"] == "0.00"


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["get_memory", "list_filesystems", "get_software_versions", "list_network_interfaces"])
async def test_batch_failure_raises_telemetry_unavailable(provider, method):
    provider.failures[method] = ProviderError("query failed")

    with pytest.raises(TelemetryUnavailable) as exc_info:
        await SnapshotBuilder(provider).build_snapshot()
    assert isinstance(exc_info.value.__cause__, ProviderError)


@pytest.mark.asyncio
async def test_interface_stats_failure_aborts_build(provider):
    provider.failures["get_interface_stats"] = ProviderError("counters unavailable")

    with pytest.raises(TelemetryUnavailable):
        await SnapshotBuilder(provider).build_snapshot()


@pytest.mark.asyncio
async def test_slow_query_exceeding_deadline_raises_telemetry_unavailable(provider):
    provider.delays["get_cpu_temperature"] = 1.0

    with pytest.raises(TelemetryUnavailable) as exc_info:
        await SnapshotBuilder(provider, timeout=0.05).build_snapshot()
    assert isinstance(exc_info.value.__cause__, ProviderError)


@pytest.mark.asyncio
async def test_snapshots_are_built_fresh_on_every_call(provider):
    builder = SnapshotBuilder(provider)
    first = await builder.build_snapshot()
    provider.load = CpuLoad(current_load=99.0)
    second = await builder.build_snapshot()

    assert first.cpu.load == "12.35%"
    assert second.cpu.load == "99.00%"
    assert provider.calls.count("get_cpu_load") == 2


def test_or_default_treats_falsy_values_as_missing():
    assert or_default("x", "N/D") == "x"
    assert or_default("", "N/D") == "N/D"
    assert or_default(None, "N/D") == "N/D"
    assert or_default(0, "N/D") == "N/D"


@pytest.mark.asyncio
async def test_unexpected_provider_exception_raises_telemetry_unavailable(provider):
    provider.failures["get_os_info"] = RuntimeError("driver crashed")

    with pytest.raises(TelemetryUnavailable) as exc_info:
        await SnapshotBuilder(provider).build_snapshot()
    assert isinstance(exc_info.value.__cause__, ProviderError)
    assert isinstance(exc_info.value.__cause__.__cause__, RuntimeError)
