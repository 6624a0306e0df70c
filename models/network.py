"""
Network topology data models.

These models hold the devices and links the user places on the canvas.
The graph store keeps referential integrity: links always point at
existing devices.
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Optional, Union
import logging
import random
import uuid

logger = logging.getLogger(__name__)


def new_id() -> str:
    """Generate a short opaque identifier."""
    return uuid.uuid4().hex[:8]


class DeviceType(Enum):
    """
    Types of simulated devices.

    The type decides which attribute payload a device carries and is
    fixed for the lifetime of the device.
    """
    ROUTER = "router"   # Forwards packets between networks
    SWITCH = "switch"   # Layer 2 device, no IP
    PC = "pc"           # End device
    SERVER = "server"   # End device providing services


@dataclass
class Position:
    """2D position on the canvas."""
    x: float = 0.0
    y: float = 0.0

    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass
class PortInfo:
    """A named port or interface on a router or switch."""
    id: str = ""
    name: str = ""
    status: str = "up"  # up, down
    speed: str = "1Gbps"
    connected_to: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status,
            "speed": self.speed,
            "connected_to": self.connected_to,
        }


@dataclass
class RouterAttrs:
    """Router payload: one IP plus named interfaces."""
    ip: str = "192.168.1.1"
    subnet: str = "255.255.255.0"
    interfaces: list[PortInfo] = field(default_factory=list)


@dataclass
class SwitchAttrs:
    """Switch payload: ports only, switches carry no IP or MAC."""
    ports: list[PortInfo] = field(default_factory=list)


@dataclass
class EndpointAttrs:
    """PC and server payload."""
    ip: str = ""
    mac: str = ""
    subnet: str = "255.255.255.0"
    gateway: str = "192.168.1.1"


DeviceAttrs = Union[RouterAttrs, SwitchAttrs, EndpointAttrs]

# Payload class each device type must carry
ATTRS_CLASSES = {
    DeviceType.ROUTER: RouterAttrs,
    DeviceType.SWITCH: SwitchAttrs,
    DeviceType.PC: EndpointAttrs,
    DeviceType.SERVER: EndpointAttrs,
}

# Fields on the device itself, valid for every type
HEADER_FIELDS = ("label", "description", "position")

DEFAULT_LABELS = {
    DeviceType.ROUTER: "Router",
    DeviceType.SWITCH: "Switch",
    DeviceType.PC: "PC",
    DeviceType.SERVER: "Server",
}

DEFAULT_DESCRIPTIONS = {
    DeviceType.ROUTER: "Layer 3 device forwarding packets between networks",
    DeviceType.SWITCH: "Layer 2 device forwarding frames inside one network",
    DeviceType.PC: "End device that sends and receives data",
    DeviceType.SERVER: "End device providing network services",
}

# Host part of the first address handed out per endpoint type
ENDPOINT_IP_BASE = {
    DeviceType.PC: 100,
    DeviceType.SERVER: 200,
}

DEFAULT_SUBNET_PREFIX = "192.168.1"
SWITCH_PORT_COUNT = 8


def generate_mac() -> str:
    """Generate a random MAC address, e.g. ``0A:1B:2C:3D:4E:5F``."""
    return ":".join(f"{random.randint(0, 255):02X}" for _ in range(6))


def default_attrs(device_type: DeviceType, existing_count: int = 0) -> DeviceAttrs:
    """
    Build the default attribute payload for a new device.

    Args:
        device_type: Type of the new device
        existing_count: Number of devices of the same type already in the
            graph, used to hand out incrementing endpoint IPs
    """
    if device_type == DeviceType.ROUTER:
        return RouterAttrs(interfaces=[
            PortInfo(id=f"eth{i}", name=f"Ethernet{i}") for i in range(2)
        ])
    if device_type == DeviceType.SWITCH:
        return SwitchAttrs(ports=[
            PortInfo(id=f"port{i}", name=f"Port {i}") for i in range(SWITCH_PORT_COUNT)
        ])
    host = ENDPOINT_IP_BASE[device_type] + existing_count
    return EndpointAttrs(
        ip=f"{DEFAULT_SUBNET_PREFIX}.{host}",
        mac=generate_mac(),
    )


@dataclass
class Device:
    """
    A simulated network device.

    Attributes:
        id: Unique identifier
        device_type: Type of device, fixed at creation
        label: Display name
        position: Canvas position
        description: Free text shown in the property panel
        attrs: Type-specific payload (RouterAttrs, SwitchAttrs, EndpointAttrs)
    """
    id: str = field(default_factory=new_id)
    device_type: DeviceType = DeviceType.PC
    label: str = ""
    position: Position = field(default_factory=Position)
    description: str = ""
    attrs: Optional[DeviceAttrs] = None

    def __post_init__(self):
        if not self.label:
            self.label = DEFAULT_LABELS[self.device_type]
        if not self.description:
            self.description = DEFAULT_DESCRIPTIONS[self.device_type]
        if self.attrs is None:
            self.attrs = default_attrs(self.device_type)
        expected = ATTRS_CLASSES[self.device_type]
        if not isinstance(self.attrs, expected):
            raise TypeError(
                f"{self.device_type.value} device needs {expected.__name__}, "
                f"got {type(self.attrs).__name__}"
            )

    @property
    def ip(self) -> Optional[str]:
        return getattr(self.attrs, "ip", None) or None

    @property
    def mac(self) -> Optional[str]:
        return getattr(self.attrs, "mac", None) or None

    @property
    def subnet(self) -> Optional[str]:
        return getattr(self.attrs, "subnet", None) or None

    @property
    def gateway(self) -> Optional[str]:
        return getattr(self.attrs, "gateway", None) or None

    @property
    def ports(self) -> list[PortInfo]:
        """Switch ports or router interfaces, empty for endpoints."""
        if isinstance(self.attrs, SwitchAttrs):
            return self.attrs.ports
        if isinstance(self.attrs, RouterAttrs):
            return self.attrs.interfaces
        return []

    def attr_fields(self) -> tuple[str, ...]:
        """Names of the fields the payload of this device accepts."""
        return tuple(f.name for f in fields(self.attrs))

    def to_dict(self) -> dict:
        data = {
            "id": self.id,
            "type": self.device_type.value,
            "label": self.label,
            "description": self.description,
            "position": {"x": self.position.x, "y": self.position.y},
        }
        for name in ("ip", "mac", "subnet", "gateway"):
            value = getattr(self, name)
            if value:
                data[name] = value
        if self.ports:
            data["ports"] = [p.to_dict() for p in self.ports]
        return data


@dataclass
class Link:
    """
    An undirected connection between two devices.

    Source and target keep the orientation the user drew the link in,
    path search treats them symmetrically.
    """
    id: str = field(default_factory=new_id)
    source_id: str = ""
    target_id: str = ""

    def other_end(self, device_id: str) -> Optional[str]:
        """Get the device on the opposite end, or None if not incident."""
        if device_id == self.source_id:
            return self.target_id
        if device_id == self.target_id:
            return self.source_id
        return None

    def touches(self, device_id: str) -> bool:
        return device_id in (self.source_id, self.target_id)

    def to_dict(self) -> dict:
        return {"id": self.id, "source": self.source_id, "target": self.target_id}


@dataclass
class NetworkModel:
    """
    Root model holding the topology graph.

    Devices and links are kept in insertion order, which is also the
    order path search enumerates links in.
    """
    devices: dict[str, Device] = field(default_factory=dict)
    links: dict[str, Link] = field(default_factory=dict)

    def add_device(self, device_type: DeviceType, position: Position) -> Device:
        """Create and add a new device with type-appropriate defaults."""
        same_type = sum(1 for d in self.devices.values() if d.device_type == device_type)
        device = Device(
            device_type=device_type,
            position=position,
            attrs=default_attrs(device_type, same_type),
        )
        self.devices[device.id] = device
        return device

    def update_device(self, device_id: str, **changes) -> Optional[Device]:
        """
        Merge attribute changes into an existing device.

        Header fields (label, description, position) are accepted for any
        device; payload fields only where the device type carries them.
        Everything else, including id and device_type, is ignored.

        Returns:
            The updated device, or None if the id is unknown
        """
        device = self.devices.get(device_id)
        if device is None:
            return None

        accepted = device.attr_fields()
        for name, value in changes.items():
            if name in HEADER_FIELDS:
                setattr(device, name, value)
            elif name in accepted:
                setattr(device.attrs, name, value)
            else:
                logger.warning(
                    f"Ignoring field '{name}' for {device.device_type.value} {device_id}"
                )
        return device

    def remove_device(self, device_id: str) -> Optional[Device]:
        """Remove a device and all its connected links."""
        if device_id not in self.devices:
            return None

        for link in self.links_for_device(device_id):
            self.remove_link(link.id)

        return self.devices.pop(device_id)

    def add_link(self, source_id: str, target_id: str) -> Optional[Link]:
        """Create a link between two existing devices."""
        if source_id not in self.devices or target_id not in self.devices:
            return None

        link = Link(source_id=source_id, target_id=target_id)
        self.links[link.id] = link
        return link

    def remove_link(self, link_id: str) -> Optional[Link]:
        """Remove a link by ID."""
        return self.links.pop(link_id, None)

    def get_device(self, device_id: str) -> Optional[Device]:
        """Get a device by ID."""
        return self.devices.get(device_id)

    def get_link(self, link_id: str) -> Optional[Link]:
        """Get a link by ID."""
        return self.links.get(link_id)

    def links_for_device(self, device_id: str) -> list[Link]:
        """Get all links incident to a device."""
        return [link for link in self.links.values() if link.touches(device_id)]

    def find_by_label(self, label: str) -> Optional[Device]:
        """Get the first device with the given label."""
        for device in self.devices.values():
            if device.label == label:
                return device
        return None

    def clear(self):
        """Remove all devices and links."""
        self.devices.clear()
        self.links.clear()

    def to_dict(self) -> dict:
        """Serialize the graph for observers."""
        return {
            "nodes": [d.to_dict() for d in self.devices.values()],
            "edges": [l.to_dict() for l in self.links.values()],
        }
