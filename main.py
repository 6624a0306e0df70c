#!/usr/bin/env python3
"""
Network Topology Simulator - Main Entry Point

Loads a preset topology, sends one packet between two devices and prints
the simulation log as the packet moves hop by hop.

Usage:
    python main.py
    python main.py --template enterprise --source A-PC1 --target B-PC2
    python main.py --protocol ARP --speed 10
    python main.py --list-templates
    python main.py --debug    # Enable debug logging
"""

import sys
import logging
import argparse
from PyQt6.QtCore import QCoreApplication

from models.simulation import Protocol
from services import SimulationDriver, TopologySession, get_settings, list_templates


def setup_logging(debug: bool = False):
    """Configure logging for the application."""
    level = logging.DEBUG if debug else logging.INFO

    # Create formatter
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )

    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.addHandler(console_handler)

    # Log startup message
    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized at {'DEBUG' if debug else 'INFO'} level")


def print_entry(entry):
    """Print one log entry the way the simulation console shows it."""
    stamp = entry.timestamp.strftime('%H:%M:%S')
    print(f"[{stamp}] {entry.log_type.value.upper():<7} {entry.message}")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description='Network topology packet simulator')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging')
    parser.add_argument('--config', help='Path to a settings.json to use')
    parser.add_argument('--template', default='home-network', help='Topology template to load')
    parser.add_argument('--source', default='Desktop', help='Label of the sending device')
    parser.add_argument('--target', default='NAS Server', help='Label of the receiving device')
    parser.add_argument(
        '--protocol', default='ICMP',
        choices=[p.value for p in Protocol],
        type=str.upper,
        help='Protocol of the simulated packet'
    )
    parser.add_argument('--payload', default=None, help='Optional application data')
    parser.add_argument('--speed', type=int, default=None, help='Simulation speed 1-10')
    parser.add_argument('--list-templates', action='store_true', help='List templates and exit')
    return parser.parse_args(argv)


def main(argv=None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Setup logging
    setup_logging(debug=args.debug)

    if args.list_templates:
        for template in list_templates():
            print(f"{template.id:<15} {template.name} - {template.description}")
        return 0

    app = QCoreApplication.instance() or QCoreApplication(sys.argv if argv is None else ["main.py"])

    settings = get_settings(args.config)
    session = TopologySession(settings.simulation)
    session.logAdded.connect(print_entry)

    if session.load_template(args.template) is None:
        return 1
    # Only persist into an explicitly chosen settings file
    if args.config:
        settings.last_template = args.template

    if args.speed is not None:
        session.set_speed(args.speed)

    source = session.network.find_by_label(args.source)
    target = session.network.find_by_label(args.target)
    packet = session.start_simulation(
        source.id if source else args.source,
        target.id if target else args.target,
        args.protocol,
        args.payload,
    )
    if packet is None:
        return 1

    driver = SimulationDriver(session)
    driver.finished.connect(app.quit)
    driver.start()

    # Run event loop
    app.exec()

    for hop, node_id in enumerate(packet.path):
        device = session.network.get_device(node_id)
        print(f"  hop {hop}: {device.label if device else node_id}")
    for layer, content in packet.layers.to_dict().items():
        print(f"  {layer:<12} {content}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
