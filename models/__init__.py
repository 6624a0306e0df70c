"""
Models package.

This package contains the data models of the topology simulator:
- Network topology (Device, Link, NetworkModel)
- Simulation state (Packet, LayerContent, SimulationLog, SimulationState)
"""

from .network import (
    DeviceType,
    Position,
    PortInfo,
    RouterAttrs,
    SwitchAttrs,
    EndpointAttrs,
    Device,
    Link,
    NetworkModel,
    new_id,
    generate_mac,
    default_attrs,
)
from .simulation import (
    Protocol,
    PacketStatus,
    LogType,
    LayerContent,
    Packet,
    SimulationLogEntry,
    SimulationLog,
    SimulationState,
    clamp_speed,
    DEFAULT_LOG_CAPACITY,
    DEFAULT_SPEED,
    MIN_SPEED,
    MAX_SPEED,
)


__all__ = [
    # Network
    "DeviceType",
    "Position",
    "PortInfo",
    "RouterAttrs",
    "SwitchAttrs",
    "EndpointAttrs",
    "Device",
    "Link",
    "NetworkModel",
    "new_id",
    "generate_mac",
    "default_attrs",
    # Simulation
    "Protocol",
    "PacketStatus",
    "LogType",
    "LayerContent",
    "Packet",
    "SimulationLogEntry",
    "SimulationLog",
    "SimulationState",
    "clamp_speed",
    "DEFAULT_LOG_CAPACITY",
    "DEFAULT_SPEED",
    "MIN_SPEED",
    "MAX_SPEED",
]
