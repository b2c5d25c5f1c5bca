# src/spicelib_core/resolver/graph.py
import itertools
import logging
from typing import Iterable, Sequence

import networkx as nx

from ..parser.definitions import ComponentDefinition

logger = logging.getLogger(__name__)


def build_connectivity_graph(pins: Sequence[str], components: Iterable[ComponentDefinition]) -> nx.MultiGraph:
    """
    Builds the net connectivity of a subcircuit body.

    Nets are graph nodes. Each component adds one edge per pair of distinct
    nets it touches, keyed by the component name, so parallel components stay
    distinguishable. Pins are always present, even when nothing connects them.
    """
    graph = nx.MultiGraph()
    for pin in pins:
        graph.add_node(pin, is_pin=True)

    for component in components:
        nets = list(dict.fromkeys(component.nodes))
        for net in nets:
            if net not in graph:
                graph.add_node(net, is_pin=False)
        for net_a, net_b in itertools.combinations(nets, 2):
            graph.add_edge(net_a, net_b, key=component.name, component_type=component.component_type)

    logger.debug("Connectivity graph: %d net(s), %d edge(s).", graph.number_of_nodes(), graph.number_of_edges())
    return graph


def unconnected_pins(graph: nx.MultiGraph, pins: Sequence[str]) -> list:
    """Pins that no body component touches."""
    return [pin for pin in pins if pin in graph and graph.degree(pin) == 0]
