"""
Topology session.

One editing session: the device graph, the packet simulation and the
current selection, behind a single object the UI talks to. Nothing is
global, so several sessions can live side by side.
"""

import logging
from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal

from models.network import Device, DeviceType, Link, NetworkModel, Position
from models.simulation import LogType, Packet, SimulationLogEntry, SimulationState
from .packet_simulator import PacketSimulator
from .settings_manager import SimulationDefaults
from .templates import get_template

logger = logging.getLogger(__name__)


class TopologySession(QObject):
    """
    Observable topology and simulation state.

    Emits signals after every mutation so views can re-render.
    """

    # Signals
    topologyChanged = pyqtSignal()
    selectionChanged = pyqtSignal()
    simulationChanged = pyqtSignal()
    logAdded = pyqtSignal(object)        # SimulationLogEntry
    packetArrived = pyqtSignal(object)   # Packet
    simulationFinished = pyqtSignal()

    def __init__(
        self,
        defaults: Optional[SimulationDefaults] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._defaults = defaults or SimulationDefaults()
        self._network = NetworkModel()
        self._simulator = PacketSimulator(self._network, defaults=self._defaults)
        self._selected_device_id: Optional[str] = None
        self._selected_link_id: Optional[str] = None

    @property
    def network(self) -> NetworkModel:
        return self._network

    @property
    def simulation(self) -> SimulationState:
        return self._simulator.state

    @property
    def simulator(self) -> PacketSimulator:
        return self._simulator

    @property
    def defaults(self) -> SimulationDefaults:
        return self._defaults

    @property
    def is_running(self) -> bool:
        return self._simulator.state.is_running

    @property
    def logs(self) -> list[SimulationLogEntry]:
        """Log entries, newest first."""
        return self._simulator.state.logs.entries

    @property
    def selected_device_id(self) -> Optional[str]:
        return self._selected_device_id

    @property
    def selected_link_id(self) -> Optional[str]:
        return self._selected_link_id

    def _log(self, log_type: LogType, message: str, node_id: Optional[str] = None):
        entry = self._simulator.add_log(log_type, message, node_id)
        self.logAdded.emit(entry)

    # ------------------------------------------------------------- devices

    def add_device(
        self,
        device_type: DeviceType,
        position: Optional[Position] = None,
        **overrides,
    ) -> Device:
        """Add a device with type defaults, apply overrides, then log it."""
        device = self._network.add_device(device_type, position or Position())
        if overrides:
            self._network.update_device(device.id, **overrides)
        self._log(LogType.INFO, f"Added {device.label} ({device.id})", node_id=device.id)
        self.topologyChanged.emit()
        return device

    def update_device(self, device_id: str, **changes) -> Optional[Device]:
        """Merge attribute changes into a device; unknown ids are ignored."""
        device = self._network.update_device(device_id, **changes)
        if device is not None:
            self.topologyChanged.emit()
        return device

    def remove_device(self, device_id: str) -> Optional[Device]:
        """Remove a device, its links and any selection pointing at them."""
        cascaded = {link.id for link in self._network.links_for_device(device_id)}
        device = self._network.remove_device(device_id)
        if device is None:
            return None

        selection_changed = False
        if self._selected_device_id == device_id:
            self._selected_device_id = None
            selection_changed = True
        if self._selected_link_id in cascaded:
            self._selected_link_id = None
            selection_changed = True

        self._log(LogType.WARNING, f"Removed {device.label} ({device_id})")
        self.topologyChanged.emit()
        if selection_changed:
            self.selectionChanged.emit()
        return device

    # --------------------------------------------------------------- links

    def _link_labels(self, link: Link) -> tuple[str, str]:
        source = self._network.get_device(link.source_id)
        target = self._network.get_device(link.target_id)
        return (
            source.label if source else link.source_id,
            target.label if target else link.target_id,
        )

    def add_link(self, source_id: str, target_id: str) -> Optional[Link]:
        """Connect two devices; does nothing if either is missing."""
        link = self._network.add_link(source_id, target_id)
        if link is None:
            return None

        source_label, target_label = self._link_labels(link)
        self._log(LogType.SUCCESS, f"Connected {source_label} ↔ {target_label}")
        self.topologyChanged.emit()
        return link

    def remove_link(self, link_id: str) -> Optional[Link]:
        """Remove a link; unknown ids are ignored."""
        link = self._network.remove_link(link_id)
        if link is None:
            return None

        source_label, target_label = self._link_labels(link)
        self._log(LogType.INFO, f"Disconnected {source_label} ↔ {target_label}")
        self.topologyChanged.emit()
        if self._selected_link_id == link_id:
            self._selected_link_id = None
            self.selectionChanged.emit()
        return link

    # ----------------------------------------------------------- selection

    def select_device(self, device_id: Optional[str]):
        """Select a device (or clear with None); clears the link selection."""
        if device_id is not None and device_id not in self._network.devices:
            return
        self._selected_device_id = device_id
        self._selected_link_id = None
        self.selectionChanged.emit()

    def select_link(self, link_id: Optional[str]):
        """Select a link (or clear with None); clears the device selection."""
        if link_id is not None and link_id not in self._network.links:
            return
        self._selected_link_id = link_id
        self._selected_device_id = None
        self.selectionChanged.emit()

    # ---------------------------------------------------------- simulation

    def start_simulation(
        self,
        source_id: str,
        target_id: str,
        protocol,
        payload: Optional[str] = None,
    ) -> Optional[Packet]:
        """Start a packet from source to target; failures are logged."""
        packet = self._simulator.start_simulation(source_id, target_id, protocol, payload)
        # Exactly one entry is written, whether the start succeeded or not
        self.logAdded.emit(self._simulator.state.logs[0])
        if packet is not None:
            self.simulationChanged.emit()
        return packet

    def advance_step(self) -> list[SimulationLogEntry]:
        """Advance all traveling packets by one hop."""
        state = self._simulator.state
        was_running = state.is_running
        traveling = state.traveling
        emitted = self._simulator.advance_step()

        for entry in emitted:
            self.logAdded.emit(entry)
        for packet in traveling:
            if not packet.is_traveling:
                self.packetArrived.emit(packet)

        if was_running:
            self.simulationChanged.emit()
            if not self._simulator.state.is_running:
                self.simulationFinished.emit()
        return emitted

    def stop_simulation(self):
        """Drop all in-flight packets."""
        self._simulator.stop_simulation()
        self.logAdded.emit(self._simulator.state.logs[0])
        self.simulationChanged.emit()

    def set_speed(self, speed: int) -> int:
        speed = self._simulator.set_speed(speed)
        self.simulationChanged.emit()
        return speed

    def tick_interval_ms(self) -> int:
        return self._simulator.tick_interval_ms()

    def clear_logs(self):
        self._simulator.clear_logs()
        self.simulationChanged.emit()

    # ------------------------------------------------------------- session

    def reset(self):
        """Return to an empty session with default simulation state."""
        self._network.clear()
        self._simulator = PacketSimulator(self._network, defaults=self._defaults)
        self._selected_device_id = None
        self._selected_link_id = None
        self.topologyChanged.emit()
        self.selectionChanged.emit()
        self.simulationChanged.emit()

    def load_template(self, template_id: str) -> Optional[list[Device]]:
        """
        Replace the session contents with a preset topology.

        Returns:
            The created devices in template order, or None if the
            template id is unknown
        """
        template = get_template(template_id)
        if template is None:
            self._log(LogType.ERROR, f"Unknown template '{template_id}'")
            return None

        self.reset()
        devices = []
        for slot in template.devices:
            device = self.add_device(
                slot.device_type,
                Position(slot.position.x, slot.position.y),
                **slot.overrides,
            )
            devices.append(device)

        for source_idx, target_idx in template.connections:
            self.add_link(devices[source_idx].id, devices[target_idx].id)

        self._log(LogType.INFO, f'Loaded "{template.name}" template')
        logger.info(f"Loaded template '{template_id}' with {len(devices)} devices")
        return devices

    def snapshot(self) -> dict:
        """Plain-dict view of the whole observable state."""
        data = self._network.to_dict()
        data["selectedNodeId"] = self._selected_device_id
        data["selectedEdgeId"] = self._selected_link_id
        data["simulation"] = self._simulator.state.to_dict()
        return data
