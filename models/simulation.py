"""
Simulation state models.

Tracks in-flight packets, the per-hop layer rendering and the bounded
event log the simulation console reads.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Iterable, Iterator, Optional

from .network import new_id


DEFAULT_LOG_CAPACITY = 100
MIN_SPEED = 1
MAX_SPEED = 10
DEFAULT_SPEED = 5


class Protocol(Enum):
    """Protocol a simulated packet carries."""
    ICMP = "ICMP"
    TCP = "TCP"
    UDP = "UDP"
    ARP = "ARP"

    @classmethod
    def parse(cls, value) -> "Protocol":
        """Accept a Protocol or a case-insensitive name."""
        if isinstance(value, cls):
            return value
        return cls(str(value).upper())


class PacketStatus(Enum):
    """
    Lifecycle of a live packet.

    A packet that cannot be routed is never created, so there is no
    failed state for live packets.
    """
    TRAVELING = "traveling"
    ARRIVED = "arrived"


class LogType(Enum):
    """Severity of a simulation log entry."""
    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class LayerContent:
    """Illustrative contents of each OSI layer at one hop."""
    application: Optional[str] = None
    transport: Optional[str] = None
    network: Optional[str] = None
    data_link: Optional[str] = None
    physical: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "application": self.application,
            "transport": self.transport,
            "network": self.network,
            "dataLink": self.data_link,
            "physical": self.physical,
        }
        return {k: v for k, v in data.items() if v is not None}


@dataclass
class Packet:
    """
    A simulated packet moving along a fixed path.

    Attributes:
        source_id: Device the packet starts at
        target_id: Device the packet is addressed to
        protocol: Protocol carried, fixed at creation
        path: Device ids from source to target, snapshotted at creation
        hop_index: Cursor into path
        status: TRAVELING until the final hop is reached
        layers: Layer rendering at the current hop
        last_layers: Layer rendering at the previous hop
        payload: Optional user data shown in the application layer
    """
    source_id: str
    target_id: str
    protocol: Protocol
    path: tuple[str, ...]
    layers: LayerContent
    payload: Optional[str] = None
    id: str = field(default_factory=new_id)
    hop_index: int = 0
    status: PacketStatus = PacketStatus.TRAVELING
    last_layers: Optional[LayerContent] = None

    @property
    def current_node_id(self) -> str:
        return self.path[self.hop_index]

    @property
    def last_index(self) -> int:
        return len(self.path) - 1

    @property
    def is_traveling(self) -> bool:
        return self.status == PacketStatus.TRAVELING

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sourceId": self.source_id,
            "targetId": self.target_id,
            "protocol": self.protocol.value,
            "payload": self.payload,
            "path": list(self.path),
            "hopIndex": self.hop_index,
            "currentNodeId": self.current_node_id,
            "status": self.status.value,
            "layers": self.layers.to_dict(),
            "lastLayers": self.last_layers.to_dict() if self.last_layers else None,
        }


@dataclass(frozen=True)
class SimulationLogEntry:
    """A single, immutable simulation console line."""
    log_type: LogType
    message: str
    node_id: Optional[str] = None
    id: str = field(default_factory=new_id)
    timestamp: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp.isoformat(),
            "type": self.log_type.value,
            "message": self.message,
            "nodeId": self.node_id,
        }


class SimulationLog:
    """
    Bounded newest-first event list.

    Appending beyond capacity drops the oldest entries.
    """

    def __init__(self, capacity: int = DEFAULT_LOG_CAPACITY):
        if capacity < 1:
            raise ValueError("log capacity must be at least 1")
        self._capacity = capacity
        self._entries: list[SimulationLogEntry] = []

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def entries(self) -> list[SimulationLogEntry]:
        """Copy of the entries, newest first."""
        return list(self._entries)

    def append(self, entry: SimulationLogEntry):
        """Prepend an entry and truncate to capacity."""
        self._entries = [entry, *self._entries][:self._capacity]

    def extend(self, entries: Iterable[SimulationLogEntry]):
        """Prepend a batch given in emission order."""
        batch = list(entries)
        batch.reverse()
        self._entries = (batch + self._entries)[:self._capacity]

    def clear(self):
        self._entries = []

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[SimulationLogEntry]:
        return iter(list(self._entries))

    def __getitem__(self, index: int) -> SimulationLogEntry:
        return self._entries[index]


def clamp_speed(speed: int, minimum: int = MIN_SPEED, maximum: int = MAX_SPEED) -> int:
    """Clamp a speed value to the allowed range."""
    return max(minimum, min(maximum, int(speed)))


@dataclass
class SimulationState:
    """
    Observable simulation state.

    Arrived packets stay in ``packets`` until the simulation is stopped
    or the session is reset.
    """
    is_running: bool = False
    speed: int = DEFAULT_SPEED
    packets: list[Packet] = field(default_factory=list)
    logs: SimulationLog = field(default_factory=SimulationLog)

    @property
    def traveling(self) -> list[Packet]:
        return [p for p in self.packets if p.is_traveling]

    def get_packet(self, packet_id: str) -> Optional[Packet]:
        """Get a packet by ID."""
        for packet in self.packets:
            if packet.id == packet_id:
                return packet
        return None

    def to_dict(self) -> dict:
        return {
            "isRunning": self.is_running,
            "speed": self.speed,
            "packets": [p.to_dict() for p in self.packets],
            "logs": [e.to_dict() for e in self.logs],
        }
