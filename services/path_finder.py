"""
Path finding over the link graph.

Links are undirected, so both directions of every link go into the
adjacency map. The result is the first path breadth-first search
discovers, which is a shortest path by hop count. When several shortest
paths exist the choice follows link enumeration order unless neighbours
are sorted.
"""

import logging
from collections import deque
from typing import Iterable, Mapping

from models.network import Link

logger = logging.getLogger(__name__)


def build_adjacency(
    nodes: Iterable[str],
    links: Iterable[Link],
    sort_neighbors: bool = False,
) -> dict[str, list[str]]:
    """
    Build an undirected adjacency map.

    Links with an endpoint outside ``nodes`` are skipped.
    """
    adjacency: dict[str, list[str]] = {nid: [] for nid in nodes}

    for link in links:
        if link.source_id not in adjacency or link.target_id not in adjacency:
            continue
        adjacency[link.source_id].append(link.target_id)
        adjacency[link.target_id].append(link.source_id)

    if sort_neighbors:
        for neighbors in adjacency.values():
            neighbors.sort()

    return adjacency


def find_path(
    source_id: str,
    target_id: str,
    nodes: Mapping[str, object],
    links: Iterable[Link],
    sort_neighbors: bool = False,
) -> list[str]:
    """
    Find a path from source to target using BFS.

    Args:
        source_id: Device to start from
        target_id: Device to reach
        nodes: Devices keyed by id (only the keys are used)
        links: Links of the graph
        sort_neighbors: Sort neighbours by id for an insertion-order
            independent tie-break

    Returns:
        Device ids from source to target inclusive, ``[source_id]`` when
        source equals target, or an empty list if no path exists.
    """
    if source_id not in nodes or target_id not in nodes:
        return []

    if source_id == target_id:
        return [source_id]

    adjacency = build_adjacency(nodes, links, sort_neighbors)
    logger.debug(f"Adjacency list: {adjacency}")

    queue = deque([[source_id]])
    visited = {source_id}

    while queue:
        path = queue.popleft()
        current = path[-1]

        if current == target_id:
            logger.debug(f"Found path: {path}")
            return path

        for neighbor in adjacency.get(current, []):
            if neighbor not in visited:
                visited.add(neighbor)
                queue.append(path + [neighbor])

    logger.debug(f"No path from {source_id} to {target_id}")
    return []
