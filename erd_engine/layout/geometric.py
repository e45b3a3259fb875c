"""Topology-free layouts: grid and circle."""

import dataclasses
import math
from typing import Sequence

from erd_engine.layout.options import LayoutOptions, resolve
from erd_engine.models import PositionedTable


def layout_grid(
    nodes: Sequence[PositionedTable],
    options: LayoutOptions | None = None,
) -> list[PositionedTable]:
    """Arrange nodes row by row in a ``ceil(sqrt(n))``-column grid."""
    opts = options or LayoutOptions()
    if not nodes:
        return []

    spacing = resolve(opts.spacing, 300.0)
    padding = resolve(opts.padding, 50.0)
    cols = math.ceil(math.sqrt(len(nodes)))

    return [
        dataclasses.replace(
            node,
            x=padding + (idx % cols) * spacing,
            y=padding + (idx // cols) * spacing,
        )
        for idx, node in enumerate(nodes)
    ]


def layout_radial(
    nodes: Sequence[PositionedTable],
    options: LayoutOptions | None = None,
) -> list[PositionedTable]:
    """Place nodes evenly around a circle whose radius grows with the node count."""
    opts = options or LayoutOptions()
    count = len(nodes)
    if count == 0:
        return []

    radius = max(opts.min_radius, count * opts.radius_per_node)

    result = []
    for idx, node in enumerate(nodes):
        angle = 2 * math.pi * idx / count
        result.append(
            dataclasses.replace(
                node,
                x=opts.center_x + radius * math.cos(angle),
                y=opts.center_y + radius * math.sin(angle),
            )
        )
    return result
