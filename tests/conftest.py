"""
Pytest configuration and shared fixtures for topology simulator tests.
"""

import pytest
import tempfile
import shutil
from pathlib import Path
from typing import Generator

# Add parent directory to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from PyQt6.QtCore import QCoreApplication

from models.network import (
    NetworkModel, Device, DeviceType, Position, EndpointAttrs, SwitchAttrs, RouterAttrs, PortInfo
)
from services.packet_simulator import PacketSimulator
from services.settings_manager import SimulationDefaults
from services.topology_session import TopologySession


# ============== Qt Fixtures ==============

@pytest.fixture(scope="session", autouse=True)
def qt_app() -> QCoreApplication:
    """Single core application shared by all QObject-based tests."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    return app


# ============== Temporary Directory Fixtures ==============

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    tmp = tempfile.mkdtemp(prefix="topo_sim_test_")
    yield Path(tmp)
    shutil.rmtree(tmp, ignore_errors=True)


# ============== Model Fixtures ==============

def make_pc(device_id: str, label: str, ip: str = "", mac: str = "") -> Device:
    return Device(
        id=device_id,
        device_type=DeviceType.PC,
        label=label,
        attrs=EndpointAttrs(ip=ip, mac=mac),
    )


def make_server(device_id: str, label: str, ip: str = "", mac: str = "") -> Device:
    return Device(
        id=device_id,
        device_type=DeviceType.SERVER,
        label=label,
        attrs=EndpointAttrs(ip=ip, mac=mac),
    )


def make_switch(device_id: str, label: str) -> Device:
    return Device(
        id=device_id,
        device_type=DeviceType.SWITCH,
        label=label,
        attrs=SwitchAttrs(ports=[PortInfo(id="port0", name="Port 0")]),
    )


def make_router(device_id: str, label: str, ip: str = "10.0.0.1") -> Device:
    return Device(
        id=device_id,
        device_type=DeviceType.ROUTER,
        label=label,
        attrs=RouterAttrs(ip=ip),
    )


def put(network: NetworkModel, *devices: Device) -> NetworkModel:
    for device in devices:
        network.devices[device.id] = device
    return network


@pytest.fixture
def empty_network() -> NetworkModel:
    """Create an empty network model."""
    return NetworkModel()


@pytest.fixture
def line_network() -> NetworkModel:
    """A(pc) - B(switch) - C(server)."""
    network = put(
        NetworkModel(),
        make_pc("a1", "A", ip="192.168.1.100", mac="00:11:22:33:44:55"),
        make_switch("b2", "B"),
        make_server("c3", "C", ip="192.168.1.200", mac="66:77:88:99:AA:BB"),
    )
    network.add_link("a1", "b2")
    network.add_link("b2", "c3")
    return network


@pytest.fixture
def disconnected_network() -> NetworkModel:
    """Two devices with no link between them."""
    return put(
        NetworkModel(),
        make_pc("x1", "X", ip="10.0.0.1"),
        make_pc("y2", "Y", ip="10.0.0.2"),
    )


@pytest.fixture
def diamond_network() -> NetworkModel:
    """S connects to T through either M1 or M2."""
    network = put(
        NetworkModel(),
        make_pc("s0", "S", ip="10.0.0.10"),
        make_router("m2", "M2", ip="10.0.0.2"),
        make_router("m1", "M1", ip="10.0.0.1"),
        make_server("t9", "T", ip="10.0.0.99"),
    )
    network.add_link("s0", "m2")
    network.add_link("s0", "m1")
    network.add_link("m1", "t9")
    network.add_link("m2", "t9")
    return network


@pytest.fixture
def simulator(line_network: NetworkModel) -> PacketSimulator:
    """Simulator bound to the A-B-C line network."""
    return PacketSimulator(line_network)


@pytest.fixture
def session() -> TopologySession:
    """Empty topology session with default settings."""
    return TopologySession(SimulationDefaults())


@pytest.fixture
def line_session(session: TopologySession) -> TopologySession:
    """Session holding PC - switch - server built through the public API."""
    pc = session.add_device(DeviceType.PC, Position(0, 0))
    switch = session.add_device(DeviceType.SWITCH, Position(100, 0))
    server = session.add_device(DeviceType.SERVER, Position(200, 0))
    session.add_link(pc.id, switch.id)
    session.add_link(switch.id, server.id)
    return session
