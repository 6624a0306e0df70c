"""
Unit tests for the packet simulation state machine.

Tests:
- Starting a simulation (success and each rejection)
- Hop-by-hop advancement and arrival
- Log ordering within a tick
- Stop, speed and tick interval
"""

import pytest
from models.network import DeviceType, Position
from models.simulation import LogType, PacketStatus, Protocol
from services.layer_synthesizer import derive_mac
from services.packet_simulator import PacketSimulator
from services.settings_manager import SimulationDefaults


class TestStartSimulation:

    def test_creates_packet_at_source(self, simulator):
        packet = simulator.start_simulation("a1", "c3", "ICMP")

        assert packet is not None
        assert packet.path == ("a1", "b2", "c3")
        assert packet.hop_index == 0
        assert packet.current_node_id == "a1"
        assert packet.status == PacketStatus.TRAVELING
        assert packet.layers.network.endswith("TTL=64")
        assert simulator.state.is_running
        assert simulator.state.packets == [packet]

        entry = simulator.state.logs[0]
        assert entry.log_type == LogType.INFO
        assert entry.message == "Started ICMP simulation: A → C"
        assert entry.node_id == "a1"

    def test_unknown_device(self, simulator):
        assert simulator.start_simulation("a1", "ghost", Protocol.TCP) is None

        assert simulator.state.packets == []
        assert not simulator.state.is_running
        assert len(simulator.state.logs) == 1
        assert simulator.state.logs[0].log_type == LogType.ERROR

    def test_no_path(self, disconnected_network):
        """Disconnected devices give one error entry and no packet."""
        simulator = PacketSimulator(disconnected_network)

        assert simulator.start_simulation("x1", "y2", "TCP") is None

        assert simulator.state.packets == []
        assert not simulator.state.is_running
        assert len(simulator.state.logs) == 1
        assert simulator.state.logs[0].log_type == LogType.ERROR
        assert simulator.state.logs[0].message == "No path from X to Y"

    def test_same_source_and_target(self, simulator):
        assert simulator.start_simulation("a1", "a1", "UDP") is None
        assert simulator.state.packets == []
        assert simulator.state.logs[0].log_type == LogType.ERROR

    def test_unknown_protocol_raises(self, simulator):
        with pytest.raises(ValueError):
            simulator.start_simulation("a1", "c3", "QUIC")

    def test_empty_payload_is_none(self, simulator):
        packet = simulator.start_simulation("a1", "c3", "TCP", payload="")
        assert packet.payload is None
        assert packet.layers.application is None

    def test_arp_first_hop(self, line_network):
        line_network.update_device("a1", ip="10.0.0.5")
        simulator = PacketSimulator(line_network)

        packet = simulator.start_simulation("a1", "c3", "ARP")

        assert packet.layers.data_link == (
            "ARP: who-has 192.168.1.200? tell 10.0.0.5 | ETH 00:11:22:33:44:55 → FF:FF:FF:FF:FF:FF"
        )
        assert packet.layers.application is None
        assert packet.layers.transport is None
        assert packet.layers.network is None


class TestAdvanceStep:

    def test_walks_line_to_arrival(self, simulator):
        packet = simulator.start_simulation("a1", "c3", "ICMP")
        first_layers = packet.layers

        emitted = simulator.advance_step()
        assert packet.current_node_id == "b2"
        assert packet.status == PacketStatus.TRAVELING
        assert packet.last_layers == first_layers
        assert packet.layers.network.endswith("TTL=63")
        assert [e.message for e in emitted] == ["ICMP packet passed through B (2/3)"]
        assert emitted[0].log_type == LogType.INFO
        assert emitted[0].node_id == "b2"
        assert simulator.state.is_running

        emitted = simulator.advance_step()
        assert packet.current_node_id == "c3"
        assert packet.status == PacketStatus.ARRIVED
        assert emitted[0].log_type == LogType.SUCCESS
        assert emitted[0].message == "ICMP packet arrived at C"
        assert emitted[0].node_id == "c3"
        assert not simulator.state.is_running

    def test_noop_when_not_running(self, simulator):
        assert simulator.advance_step() == []
        assert len(simulator.state.logs) == 0

    def test_idle_convergence(self, simulator):
        """Running with nothing traveling flips to stopped."""
        simulator.state.is_running = True
        assert simulator.advance_step() == []
        assert not simulator.state.is_running

    def test_out_of_range_packet_left_alone(self, simulator):
        packet = simulator.start_simulation("a1", "c3", "UDP")
        packet.hop_index = packet.last_index

        simulator.advance_step()

        assert packet.hop_index == packet.last_index
        assert packet.status == PacketStatus.TRAVELING

    def test_arrived_packets_stay_listed(self, simulator):
        packet = simulator.start_simulation("a1", "c3", "UDP")
        simulator.advance_step()
        simulator.advance_step()
        simulator.advance_step()

        assert simulator.state.packets == [packet]
        assert packet.hop_index == 2

    def test_concurrent_packets_log_in_list_order(self, line_network):
        simulator = PacketSimulator(line_network)
        simulator.start_simulation("a1", "c3", "TCP")
        simulator.start_simulation("c3", "a1", "UDP")

        emitted = simulator.advance_step()

        assert [e.message for e in emitted] == [
            "TCP packet passed through B (2/3)",
            "UDP packet passed through B (2/3)",
        ]
        # Newest first in the stored log
        assert simulator.state.logs[0].message.startswith("UDP")
        assert simulator.state.logs[1].message.startswith("TCP")

    def test_terminal_convergence(self, diamond_network):
        """All packets arrive within max(path length) - 1 ticks."""
        diamond_network.add_device(DeviceType.PC, Position())
        simulator = PacketSimulator(diamond_network)
        packets = [
            simulator.start_simulation("s0", "t9", "ICMP"),
            simulator.start_simulation("s0", "m1", "TCP"),
            simulator.start_simulation("m2", "m1", "UDP"),
        ]
        longest = max(len(p.path) for p in packets)

        last_hops = {p.id: p.hop_index for p in packets}
        for _ in range(longest - 1):
            simulator.advance_step()
            for p in packets:
                assert last_hops[p.id] <= p.hop_index <= p.last_index
                last_hops[p.id] = p.hop_index

        assert not simulator.state.is_running
        assert all(p.status == PacketStatus.ARRIVED for p in packets)

    def test_path_snapshot_survives_topology_change(self, simulator):
        packet = simulator.start_simulation("a1", "c3", "ICMP")
        simulator.network.remove_device("b2")

        simulator.advance_step()
        simulator.advance_step()

        assert packet.path == ("a1", "b2", "c3")
        assert packet.status == PacketStatus.ARRIVED
        assert packet.last_layers.data_link == f"Ethernet: {derive_mac('b2')} → 66:77:88:99:AA:BB"

    def test_log_bound_holds(self, simulator):
        for _ in range(60):
            simulator.start_simulation("a1", "c3", "ICMP")
        simulator.advance_step()
        simulator.advance_step()

        assert len(simulator.state.logs) == 100
        assert simulator.state.logs[0].log_type == LogType.SUCCESS


class TestStopAndSpeed:

    def test_stop_drops_packets(self, simulator):
        simulator.start_simulation("a1", "c3", "ICMP")
        simulator.stop_simulation()

        assert simulator.state.packets == []
        assert not simulator.state.is_running
        assert simulator.state.logs[0].message == "Simulation stopped"
        assert simulator.advance_step() == []

    @pytest.mark.parametrize("requested,expected", [(-3, 1), (1, 1), (7, 7), (10, 10), (99, 10)])
    def test_set_speed_clamps(self, simulator, requested, expected):
        assert simulator.set_speed(requested) == expected
        assert simulator.state.speed == expected

    def test_configured_bounds_cannot_widen_range(self, line_network):
        defaults = SimulationDefaults(min_speed=-5, max_speed=50)
        simulator = PacketSimulator(line_network, defaults=defaults)

        assert simulator.set_speed(40) == 10
        assert simulator.set_speed(0) == 1
        assert simulator.tick_interval_ms(40) == 100

    def test_configured_bounds_can_narrow_range(self, line_network):
        defaults = SimulationDefaults(speed=9, min_speed=2, max_speed=6)
        simulator = PacketSimulator(line_network, defaults=defaults)

        assert simulator.state.speed == 6
        assert simulator.set_speed(1) == 2

    def test_tick_interval_inverse_to_speed(self, simulator):
        simulator.set_speed(1)
        assert simulator.tick_interval_ms() == 1000
        simulator.set_speed(4)
        assert simulator.tick_interval_ms() == 250
        assert simulator.tick_interval_ms(10) == 100

    def test_defaults_apply(self, line_network):
        defaults = SimulationDefaults(speed=8, base_tick_ms=400, log_capacity=3)
        simulator = PacketSimulator(line_network, defaults=defaults)

        assert simulator.state.speed == 8
        assert simulator.tick_interval_ms() == 50
        for _ in range(5):
            simulator.add_log(LogType.INFO, "x")
        assert len(simulator.state.logs) == 3

    def test_clear_logs(self, simulator):
        simulator.add_log(LogType.WARNING, "careful")
        simulator.clear_logs()
        assert len(simulator.state.logs) == 0
