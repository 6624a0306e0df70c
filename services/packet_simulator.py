"""
Packet simulation state machine.

Moves every traveling packet one hop per tick along the path computed
when the packet was created. Expected failures (unknown devices, no
path) never raise; they end up as error entries in the simulation log.
"""

import logging
from typing import Optional

from models.network import NetworkModel
from models.simulation import (
    LogType,
    Packet,
    PacketStatus,
    Protocol,
    SimulationLog,
    SimulationLogEntry,
    SimulationState,
    clamp_speed,
)
from .layer_synthesizer import synthesize_layers
from .path_finder import find_path
from .settings_manager import SimulationDefaults

logger = logging.getLogger(__name__)


class PacketSimulator:
    """
    Owns the in-flight packets of one topology session.

    Ticks are driven externally: a timer calls ``advance_step`` every
    ``tick_interval_ms()`` milliseconds until ``state.is_running`` is false.
    """

    def __init__(
        self,
        network: NetworkModel,
        state: Optional[SimulationState] = None,
        defaults: Optional[SimulationDefaults] = None,
    ):
        self.network = network
        self.defaults = defaults or SimulationDefaults()
        # Configured bounds may narrow the speed range, never widen it
        self.min_speed = clamp_speed(self.defaults.min_speed)
        self.max_speed = max(self.min_speed, clamp_speed(self.defaults.max_speed))
        if state is None:
            state = SimulationState(
                speed=self.defaults.speed,
                logs=SimulationLog(self.defaults.log_capacity),
            )
        self.state = state
        self.state.speed = self._clamp(self.state.speed)

    def _clamp(self, speed: int) -> int:
        return clamp_speed(speed, self.min_speed, self.max_speed)

    # ------------------------------------------------------------------ logs

    def add_log(
        self,
        log_type: LogType,
        message: str,
        node_id: Optional[str] = None,
    ) -> SimulationLogEntry:
        """Append a single log entry."""
        entry = SimulationLogEntry(log_type=log_type, message=message, node_id=node_id)
        self.state.logs.append(entry)
        return entry

    def clear_logs(self):
        self.state.logs.clear()

    # ------------------------------------------------------------ simulation

    def start_simulation(
        self,
        source_id: str,
        target_id: str,
        protocol,
        payload: Optional[str] = None,
    ) -> Optional[Packet]:
        """
        Create a packet from source to target and start the simulation.

        Args:
            source_id: Sending device
            target_id: Receiving device
            protocol: Protocol or protocol name (ICMP, TCP, UDP, ARP)
            payload: Optional data rendered in the application layer

        Returns:
            The new packet, or None if it could not be created (the reason
            is logged as an error)
        """
        protocol = Protocol.parse(protocol)
        devices = self.network.devices
        source = devices.get(source_id)
        target = devices.get(target_id)

        if source is None or target is None:
            self.add_log(LogType.ERROR, "Invalid source or target device")
            return None

        if source_id == target_id:
            self.add_log(
                LogType.ERROR,
                f"Source and target are the same device ({source.label})",
                node_id=source_id,
            )
            return None

        path = find_path(
            source_id, target_id, devices, self.network.links.values(),
            sort_neighbors=self.defaults.sort_neighbors,
        )
        if not path:
            self.add_log(
                LogType.ERROR,
                f"No path from {source.label} to {target.label}",
            )
            return None

        packet = Packet(
            source_id=source_id,
            target_id=target_id,
            protocol=protocol,
            payload=payload or None,
            path=tuple(path),
            layers=synthesize_layers(
                protocol, 0, path, devices, source_id, target_id, payload
            ),
        )
        self.state.packets.append(packet)
        self.state.is_running = True

        logger.debug(f"Packet {packet.id} created on path {path}")
        self.add_log(
            LogType.INFO,
            f"Started {protocol.value} simulation: {source.label} → {target.label}",
            node_id=source_id,
        )
        return packet

    def advance_step(self) -> list[SimulationLogEntry]:
        """
        Move every traveling packet one hop forward.

        Returns:
            Log entries emitted by this tick, in emission order
        """
        state = self.state
        if not state.is_running:
            return []

        traveling = state.traveling
        if not traveling:
            state.is_running = False
            return []

        emitted: list[SimulationLogEntry] = []
        for packet in traveling:
            entry = self._advance_packet(packet)
            if entry is not None:
                emitted.append(entry)

        state.is_running = any(p.is_traveling for p in state.packets)
        state.logs.extend(emitted)
        logger.debug(
            f"Tick: {len(traveling)} packet(s) advanced, running={state.is_running}"
        )
        return emitted

    def _advance_packet(self, packet: Packet) -> Optional[SimulationLogEntry]:
        next_index = packet.hop_index + 1
        if next_index > packet.last_index:
            logger.warning(f"Packet {packet.id} has no hop left, leaving it in place")
            return None

        devices = self.network.devices
        packet.last_layers = packet.layers
        packet.hop_index = next_index
        packet.layers = synthesize_layers(
            packet.protocol, next_index, packet.path, devices,
            packet.source_id, packet.target_id, packet.payload,
        )

        node_id = packet.current_node_id
        device = devices.get(node_id)
        label = device.label if device else node_id

        if next_index == packet.last_index:
            packet.status = PacketStatus.ARRIVED
            return SimulationLogEntry(
                log_type=LogType.SUCCESS,
                message=f"{packet.protocol.value} packet arrived at {label}",
                node_id=node_id,
            )

        return SimulationLogEntry(
            log_type=LogType.INFO,
            message=(
                f"{packet.protocol.value} packet passed through {label} "
                f"({next_index + 1}/{len(packet.path)})"
            ),
            node_id=node_id,
        )

    def stop_simulation(self):
        """Drop all packets and stop. Resuming needs a new simulation."""
        self.state.packets = []
        self.state.is_running = False
        self.add_log(LogType.INFO, "Simulation stopped")

    def set_speed(self, speed: int) -> int:
        """Set the tick speed, clamped to the configured range."""
        self.state.speed = self._clamp(speed)
        return self.state.speed

    def tick_interval_ms(self, speed: Optional[int] = None) -> int:
        """Timer period for a speed, inversely proportional to it."""
        speed = self._clamp(self.state.speed if speed is None else speed)
        return max(1, self.defaults.base_tick_ms // speed)
