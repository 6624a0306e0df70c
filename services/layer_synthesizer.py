"""
Per-hop layer content synthesis.

Produces the human-readable strings the packet details panel shows for
each OSI layer. Nothing here carries real bytes; the output depends only
on the arguments, so identical inputs always render identically.
"""

import string
from typing import Mapping, Optional, Sequence

from models.network import Device
from models.simulation import LayerContent, Protocol


INITIAL_TTL = 64
BROADCAST_MAC = "FF:FF:FF:FF:FF:FF"
PHYSICAL_MEDIUM = "electrical/optical signal"
UNKNOWN_IP = "unknown"

_HEX_DIGITS = set(string.hexdigits)


def ttl_for_hop(hop_index: int) -> int:
    """TTL shown at a hop, floored at 1."""
    return max(1, INITIAL_TTL - hop_index)


def derive_mac(device_id: str) -> str:
    """
    Derive a stable pseudo-MAC from a device id.

    The hex characters of the id are upper-cased, right-padded with zeros
    or truncated to 12 digits and grouped into six octets.
    """
    digits = "".join(c for c in device_id if c in _HEX_DIGITS).upper()
    digits = digits.ljust(12, "0")[:12]
    return ":".join(digits[i:i + 2] for i in range(0, 12, 2))


def resolve_ip(device_id: str, devices: Mapping[str, Device]) -> str:
    device = devices.get(device_id)
    if device is None or not device.ip:
        return UNKNOWN_IP
    return device.ip


def resolve_mac(device_id: str, devices: Mapping[str, Device]) -> str:
    """Explicit MAC of the device, or the one derived from its id."""
    device = devices.get(device_id)
    if device is not None and device.mac:
        return device.mac
    return derive_mac(device_id)


def _application_layer(protocol: Protocol, payload: Optional[str]) -> Optional[str]:
    data = f'Data: "{payload}"' if payload else None
    if protocol == Protocol.ICMP:
        return f"ICMP Echo Request | {data}" if data else "ICMP Echo Request"
    return data


def _transport_layer(protocol: Protocol) -> Optional[str]:
    if protocol == Protocol.TCP:
        return "TCP Segment"
    if protocol == Protocol.UDP:
        return "UDP Datagram"
    return None


def synthesize_layers(
    protocol: Protocol,
    hop_index: int,
    path: Sequence[str],
    devices: Mapping[str, Device],
    source_id: str,
    target_id: str,
    payload: Optional[str] = None,
) -> LayerContent:
    """
    Render the layer contents of a packet at one hop.

    Args:
        protocol: Protocol the packet carries
        hop_index: Index into path of the device currently holding the packet
        path: Device ids the packet travels along
        devices: Device lookup by id; missing devices render as unknown
        source_id: Device that originated the packet
        target_id: Device the packet is addressed to
        payload: Optional user data

    Returns:
        LayerContent with absent layers left as None
    """
    last = len(path) - 1
    current_id = path[hop_index]
    next_id = path[min(hop_index + 1, last)]

    source_ip = resolve_ip(source_id, devices)
    target_ip = resolve_ip(target_id, devices)
    current_mac = resolve_mac(current_id, devices)

    if protocol == Protocol.ARP:
        return LayerContent(
            data_link=(
                f"ARP: who-has {target_ip}? tell {source_ip} | "
                f"ETH {current_mac} → {BROADCAST_MAC}"
            ),
            physical=PHYSICAL_MEDIUM,
        )

    next_mac = resolve_mac(next_id, devices)
    return LayerContent(
        application=_application_layer(protocol, payload),
        transport=_transport_layer(protocol),
        network=f"IPv4: {source_ip} → {target_ip} | TTL={ttl_for_hop(hop_index)}",
        data_link=f"Ethernet: {current_mac} → {next_mac}",
        physical=PHYSICAL_MEDIUM,
    )
