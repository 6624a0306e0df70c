"""
Unit tests for per-hop layer content synthesis.
"""

import pytest
from models.simulation import Protocol
from services.layer_synthesizer import (
    BROADCAST_MAC, PHYSICAL_MEDIUM, derive_mac, resolve_mac, synthesize_layers, ttl_for_hop
)

PATH = ["a1", "b2", "c3"]


def layers_at(network, protocol, hop, payload=None):
    return synthesize_layers(protocol, hop, PATH, network.devices, "a1", "c3", payload)


class TestTtl:

    def test_decrements_per_hop(self):
        assert ttl_for_hop(0) == 64
        assert ttl_for_hop(1) == 63

    @pytest.mark.parametrize("hop", [63, 64, 65, 100, 1000])
    def test_floor_at_one(self, hop):
        assert ttl_for_hop(hop) == 1


class TestDeriveMac:

    def test_pads_short_hex_ids(self):
        assert derive_mac("a1b2c3d4") == "A1:B2:C3:D4:00:00"

    def test_truncates_long_ids(self):
        assert derive_mac("0123456789abcdef") == "01:23:45:67:89:AB"

    def test_ignores_non_hex_characters(self):
        assert derive_mac("x-1y2z") == "12:00:00:00:00:00"

    def test_deterministic(self):
        assert derive_mac("b2") == derive_mac("b2")

    def test_explicit_mac_wins(self, line_network):
        assert resolve_mac("a1", line_network.devices) == "00:11:22:33:44:55"
        assert resolve_mac("b2", line_network.devices) == derive_mac("b2")
        assert resolve_mac("gone", line_network.devices) == derive_mac("gone")


class TestSynthesizeLayers:

    def test_icmp_first_hop(self, line_network):
        layers = layers_at(line_network, Protocol.ICMP, 0)

        assert layers.application == "ICMP Echo Request"
        assert layers.transport is None
        assert layers.network == "IPv4: 192.168.1.100 → 192.168.1.200 | TTL=64"
        assert layers.data_link == f"Ethernet: 00:11:22:33:44:55 → {derive_mac('b2')}"
        assert layers.physical == PHYSICAL_MEDIUM

    def test_icmp_payload(self, line_network):
        layers = layers_at(line_network, Protocol.ICMP, 0, payload="hello")
        assert layers.application == 'ICMP Echo Request | Data: "hello"'

    def test_tcp_and_udp_transport(self, line_network):
        tcp = layers_at(line_network, Protocol.TCP, 1)
        udp = layers_at(line_network, Protocol.UDP, 1)

        assert tcp.transport == "TCP Segment"
        assert udp.transport == "UDP Datagram"
        assert tcp.application is None
        assert tcp.network.endswith("TTL=63")

    def test_tcp_payload_becomes_application(self, line_network):
        layers = layers_at(line_network, Protocol.TCP, 0, payload="GET /")
        assert layers.application == 'Data: "GET /"'

    def test_final_hop_next_collapses_to_current(self, line_network):
        layers = layers_at(line_network, Protocol.UDP, 2)
        assert layers.data_link == "Ethernet: 66:77:88:99:AA:BB → 66:77:88:99:AA:BB"

    def test_arp_only_link_and_physical(self, line_network):
        layers = layers_at(line_network, Protocol.ARP, 0)

        assert layers.application is None
        assert layers.transport is None
        assert layers.network is None
        assert layers.data_link == (
            "ARP: who-has 192.168.1.200? tell 192.168.1.100 | "
            f"ETH 00:11:22:33:44:55 → {BROADCAST_MAC}"
        )
        assert layers.physical == PHYSICAL_MEDIUM

    def test_missing_ip_renders_unknown(self, line_network):
        layers = synthesize_layers(
            Protocol.ICMP, 0, ["b2", "c3"], line_network.devices, "b2", "c3"
        )
        assert layers.network == "IPv4: unknown → 192.168.1.200 | TTL=64"

    def test_pure(self, line_network):
        first = layers_at(line_network, Protocol.TCP, 1, payload="x")
        second = layers_at(line_network, Protocol.TCP, 1, payload="x")
        assert first == second

    def test_to_dict_drops_absent_layers(self, line_network):
        data = layers_at(line_network, Protocol.ARP, 0).to_dict()
        assert set(data) == {"dataLink", "physical"}
