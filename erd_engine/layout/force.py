"""Force-directed layout.

A fixed-length physical simulation rather than an optimisation: every pair
of nodes repels with ``strength / distance**2`` and every edge acts as a
spring around ``rest_length``. Results depend only on the input positions,
the options and the order of nodes and edges.
"""

import dataclasses
import math
from typing import Sequence

from erd_engine.layout.options import LayoutOptions
from erd_engine.models import PositionedTable, RelationshipEdge


def layout_force_directed(
    nodes: Sequence[PositionedTable],
    edges: Sequence[RelationshipEdge],
    options: LayoutOptions | None = None,
) -> list[PositionedTable]:
    """Run the simulation starting from the nodes' current positions."""
    opts = options or LayoutOptions()
    if not nodes:
        return []

    xs = [float(node.x) for node in nodes]
    ys = [float(node.y) for node in nodes]
    vxs = [0.0] * len(nodes)
    vys = [0.0] * len(nodes)

    index = {node.id: i for i, node in enumerate(nodes)}
    springs = [
        (index[edge.source], index[edge.target])
        for edge in edges
        if edge.source in index and edge.target in index
    ]

    for _ in range(opts.iterations):
        # Repulsion between every pair
        for a in range(len(nodes)):
            for b in range(a + 1, len(nodes)):
                dx = xs[b] - xs[a]
                dy = ys[b] - ys[a]
                distance = max(math.sqrt(dx * dx + dy * dy), 1.0)
                force = opts.repulsion_strength / (distance * distance)
                fx = dx / distance * force
                fy = dy / distance * force
                vxs[a] -= fx
                vys[a] -= fy
                vxs[b] += fx
                vys[b] += fy

        # Attraction along edges
        for source, target in springs:
            dx = xs[target] - xs[source]
            dy = ys[target] - ys[source]
            distance = max(math.sqrt(dx * dx + dy * dy), 1.0)
            force = (distance - opts.rest_length) * opts.edge_strength
            fx = dx / distance * force
            fy = dy / distance * force
            vxs[source] += fx
            vys[source] += fy
            vxs[target] -= fx
            vys[target] -= fy

        for i in range(len(nodes)):
            xs[i] += vxs[i] * opts.step
            ys[i] += vys[i] * opts.step
            vxs[i] *= opts.damping
            vys[i] *= opts.damping

    return [
        dataclasses.replace(node, x=xs[i], y=ys[i])
        for i, node in enumerate(nodes)
    ]
