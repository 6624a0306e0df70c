"""Services package."""

from .path_finder import build_adjacency, find_path
from .layer_synthesizer import (
    synthesize_layers,
    ttl_for_hop,
    derive_mac,
    resolve_ip,
    resolve_mac,
    BROADCAST_MAC,
    PHYSICAL_MEDIUM,
)
from .packet_simulator import PacketSimulator
from .topology_session import TopologySession
from .simulation_driver import SimulationDriver
from .templates import (
    TemplateDevice,
    TopologyTemplate,
    TEMPLATES,
    get_template,
    list_templates,
)
from .settings_manager import (
    SettingsManager,
    AppSettings,
    SimulationDefaults,
    get_settings,
    reset_settings_manager,
)

__all__ = [
    "build_adjacency",
    "find_path",
    "synthesize_layers",
    "ttl_for_hop",
    "derive_mac",
    "resolve_ip",
    "resolve_mac",
    "BROADCAST_MAC",
    "PHYSICAL_MEDIUM",
    "PacketSimulator",
    "TopologySession",
    "SimulationDriver",
    "TemplateDevice",
    "TopologyTemplate",
    "TEMPLATES",
    "get_template",
    "list_templates",
    "SettingsManager",
    "AppSettings",
    "SimulationDefaults",
    "get_settings",
    "reset_settings_manager",
]
