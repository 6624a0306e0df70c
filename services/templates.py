"""
Preset topology templates.

Each template lists devices with their canvas position and attribute
overrides, and connections as pairs of indexes into the device list.
"""

from dataclasses import dataclass, field
from typing import Optional

from models.network import DeviceType, Position


@dataclass
class TemplateDevice:
    """A device slot in a template."""
    device_type: DeviceType
    position: Position
    overrides: dict = field(default_factory=dict)


@dataclass
class TopologyTemplate:
    """A ready-made example network."""
    id: str
    name: str
    description: str
    devices: list[TemplateDevice] = field(default_factory=list)
    connections: list[tuple[int, int]] = field(default_factory=list)


def _dev(device_type: DeviceType, x: float, y: float, label: str, ip: str = "") -> TemplateDevice:
    overrides = {"label": label}
    if ip:
        overrides["ip"] = ip
    return TemplateDevice(device_type, Position(x, y), overrides)


R, S, P, V = DeviceType.ROUTER, DeviceType.SWITCH, DeviceType.PC, DeviceType.SERVER

TEMPLATES: dict[str, TopologyTemplate] = {
    t.id: t for t in [
        TopologyTemplate(
            id="simple-lan",
            name="Simple LAN",
            description="One switch connecting several PCs",
            devices=[
                _dev(S, 400, 150, "Switch"),
                _dev(P, 200, 300, "PC-1", "192.168.1.10"),
                _dev(P, 400, 300, "PC-2", "192.168.1.11"),
                _dev(P, 600, 300, "PC-3", "192.168.1.12"),
            ],
            connections=[(0, 1), (0, 2), (0, 3)],
        ),
        TopologyTemplate(
            id="home-network",
            name="Home Network",
            description="A router serving several devices",
            devices=[
                _dev(R, 400, 100, "Home Router", "192.168.1.1"),
                _dev(S, 400, 250, "Switch"),
                _dev(P, 200, 400, "Desktop", "192.168.1.100"),
                _dev(P, 400, 400, "Laptop", "192.168.1.101"),
                _dev(V, 600, 400, "NAS Server", "192.168.1.200"),
            ],
            connections=[(0, 1), (1, 2), (1, 3), (1, 4)],
        ),
        TopologyTemplate(
            id="enterprise",
            name="Enterprise Network",
            description="Multi-tier enterprise network",
            devices=[
                _dev(R, 400, 50, "Core Router", "10.0.0.1"),
                _dev(S, 250, 180, "Dept-A Switch"),
                _dev(S, 550, 180, "Dept-B Switch"),
                _dev(P, 150, 320, "A-PC1", "10.0.1.10"),
                _dev(P, 350, 320, "A-PC2", "10.0.1.11"),
                _dev(P, 450, 320, "B-PC1", "10.0.2.10"),
                _dev(P, 650, 320, "B-PC2", "10.0.2.11"),
                _dev(V, 400, 450, "File Server", "10.0.0.100"),
            ],
            connections=[(0, 1), (0, 2), (1, 3), (1, 4), (2, 5), (2, 6), (0, 7)],
        ),
        TopologyTemplate(
            id="star-topology",
            name="Star Topology",
            description="Classic star network",
            devices=[
                _dev(S, 400, 200, "Central Switch"),
                _dev(P, 400, 50, "PC-1", "192.168.1.10"),
                _dev(P, 550, 120, "PC-2", "192.168.1.11"),
                _dev(P, 550, 280, "PC-3", "192.168.1.12"),
                _dev(P, 400, 350, "PC-4", "192.168.1.13"),
                _dev(P, 250, 280, "PC-5", "192.168.1.14"),
                _dev(P, 250, 120, "PC-6", "192.168.1.15"),
            ],
            connections=[(0, 1), (0, 2), (0, 3), (0, 4), (0, 5), (0, 6)],
        ),
        TopologyTemplate(
            id="client-server",
            name="Client-Server",
            description="Typical client/server architecture",
            devices=[
                _dev(V, 400, 80, "Web Server", "192.168.1.100"),
                _dev(S, 400, 220, "Switch"),
                _dev(P, 200, 350, "Client 1", "192.168.1.10"),
                _dev(P, 400, 350, "Client 2", "192.168.1.11"),
                _dev(P, 600, 350, "Client 3", "192.168.1.12"),
            ],
            connections=[(0, 1), (1, 2), (1, 3), (1, 4)],
        ),
    ]
}


def get_template(template_id: str) -> Optional[TopologyTemplate]:
    """Get a template by ID."""
    return TEMPLATES.get(template_id)


def list_templates() -> list[TopologyTemplate]:
    return list(TEMPLATES.values())
