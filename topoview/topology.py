"""Connectivity queries over a topology using NetworkX."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import networkx as nx

from .models import BusBusLink, NodeBusLink

if TYPE_CHECKING:
    from .store import EntityStore

logger = logging.getLogger(__name__)

# Graph vertices are (kind, id) so node and bus ids never collide
EntityKey = tuple[str, str]


def node_key(node_id: str) -> EntityKey:
    return ("node", node_id)


def bus_key(bus_id: str) -> EntityKey:
    return ("bus", bus_id)


def build_graph(store: EntityStore) -> nx.Graph:
    """Build an undirected graph of nodes and buses.

    Every link counts, including logical connections that are never drawn.
    Links whose endpoints are missing from the store are left out.
    """
    graph: nx.Graph = nx.Graph()

    for node in store.list_nodes():
        graph.add_node(node_key(node.id), name=node.name, kind=node.kind)
    for bus in store.list_buses():
        graph.add_node(bus_key(bus.id), name=bus.name, kind="bus")

    for conn in store.list_connections():
        source, target = node_key(conn.source_id), node_key(conn.target_id)
        if source in graph and target in graph:
            graph.add_edge(source, target, interface=conn.interface_name, visual=conn.show_visual)
        else:
            logger.debug(f"Skipping connection {conn.source_id} -> {conn.target_id}: missing node")

    for link in store.list_bus_connections():
        if isinstance(link, NodeBusLink):
            source, target = node_key(link.node_id), bus_key(link.bus_id)
        elif isinstance(link, BusBusLink):
            source, target = bus_key(link.source_bus_id), bus_key(link.target_bus_id)
        else:
            continue
        if source in graph and target in graph:
            graph.add_edge(source, target, interface=link.interface_name, visual=True)
        else:
            logger.debug(f"Skipping bus connection {source} -> {target}: missing endpoint")

    return graph


def route(store: EntityStore, source_id: str, target_id: str) -> list[EntityKey] | None:
    """Shortest chain of entities linking two nodes, or None if unreachable."""
    graph = build_graph(store)
    start, end = node_key(source_id), node_key(target_id)
    if start not in graph or end not in graph:
        return None

    try:
        return nx.shortest_path(graph, start, end)
    except nx.NetworkXNoPath:
        return None


def are_linked(store: EntityStore, source_id: str, target_id: str) -> bool:
    """Whether two nodes reach each other through connections or buses."""
    return route(store, source_id, target_id) is not None


def neighbors(store: EntityStore, node_id: str) -> list[str]:
    """Ids of nodes one hop away, directly or through a shared bus."""
    graph = build_graph(store)
    key = node_key(node_id)
    if key not in graph:
        return []

    found: list[str] = []
    for kind, other_id in graph.neighbors(key):
        if kind == "node":
            found.append(other_id)
        else:
            for peer_kind, peer_id in graph.neighbors((kind, other_id)):
                if peer_kind == "node" and peer_id != node_id:
                    found.append(peer_id)
    return list(dict.fromkeys(found))
