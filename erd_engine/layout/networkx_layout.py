"""Layout engine using NetworkX for graph-based table positioning."""

import dataclasses
import logging
from typing import Sequence

import networkx as nx

from erd_engine.layout.force import layout_force_directed
from erd_engine.layout.geometric import layout_grid, layout_radial
from erd_engine.layout.options import LayoutOptions, resolve
from erd_engine.models import (
    PositionedSchema,
    PositionedTable,
    RelationshipEdge,
    Schema,
    Table,
)

logger = logging.getLogger(__name__)


def layout_tree(
    nodes: Sequence[PositionedTable],
    edges: Sequence[RelationshipEdge],
    options: LayoutOptions | None = None,
) -> list[PositionedTable]:
    """Place nodes on levels given by breadth-first distance from root tables.

    Roots are nodes without incoming edges; when every node has one, the first
    node is used. Nodes the traversal never reaches start a new traversal on
    the next unused level, offset by ``group_padding``.
    """
    opts = options or LayoutOptions()
    if not nodes:
        return []

    spacing = resolve(opts.spacing, 200.0)
    padding = resolve(opts.padding, 100.0)
    direction = opts.direction
    if direction not in ("TB", "LR", "RL", "BT"):
        logger.warning("Unknown layout direction %r, using TB", direction)
        direction = "TB"

    g = nx.DiGraph()
    g.add_nodes_from(node.id for node in nodes)
    for edge in edges:
        if edge.source in g and edge.target in g:
            g.add_edge(edge.source, edge.target)

    levels = _bfs_levels(g, [node.id for node in nodes])

    main_coords = [
        padding + index * spacing + group * opts.group_padding
        for index, (_, group) in enumerate(levels)
    ]
    if direction in ("BT", "RL"):
        main_coords = [main_coords[-1] + padding - coord for coord in main_coords]

    positions: dict[str, tuple[float, float]] = {}
    horizontal = direction in ("LR", "RL")
    for (level_nodes, _), main in zip(levels, main_coords):
        for index, node_id in enumerate(level_nodes):
            cross = padding + index * spacing
            positions[node_id] = (main, cross) if horizontal else (cross, main)

    return [
        dataclasses.replace(node, x=positions[node.id][0], y=positions[node.id][1])
        if node.id in positions else node
        for node in nodes
    ]


def _bfs_levels(g: nx.DiGraph, order: list[str]) -> list[tuple[list[str], int]]:
    """Levels of node ids with the traversal group each level belongs to."""
    roots = [n for n in order if g.in_degree(n) == 0] or order[:1]
    levels: list[tuple[list[str], int]] = []
    placed: set[str] = set()
    group = 0
    sources = roots

    while True:
        for layer in nx.bfs_layers(g, sources):
            fresh = [n for n in layer if n not in placed]
            if fresh:
                levels.append((fresh, group))
                placed.update(fresh)

        remaining = [n for n in order if n not in placed]
        if not remaining:
            return levels
        logger.debug("%d tables unreachable from roots, starting new group", len(remaining))
        sources = remaining[:1]
        group += 1


ALGORITHMS = {
    "grid": lambda nodes, edges, options=None: layout_grid(nodes, options),
    "radial": lambda nodes, edges, options=None: layout_radial(nodes, options),
    "tree": layout_tree,
    "force": layout_force_directed,
}


def to_positioned_tables(
    tables: Sequence[Table],
    options: LayoutOptions | None = None,
) -> list[PositionedTable]:
    """Wrap tables as layout nodes at the origin with their box sizes."""
    opts = options or LayoutOptions()
    positioned = []
    for table in tables:
        width, height = _calculate_table_dimensions(table, opts)
        positioned.append(PositionedTable.from_table(table, width=width, height=height))
    return positioned


def layout_schema(
    schema: Schema,
    algorithm: str = "tree",
    options: LayoutOptions | None = None,
) -> PositionedSchema:
    """Calculate positions for all tables in a schema."""
    opts = options or LayoutOptions()
    try:
        layout = ALGORITHMS[algorithm]
    except KeyError:
        raise ValueError(
            f"Unknown layout algorithm '{algorithm}'. Expected one of: {', '.join(ALGORITHMS)}"
        ) from None

    nodes = to_positioned_tables(schema.tables, opts)
    if algorithm == "force":
        # Coincident nodes never separate, so start from a grid
        nodes = layout_grid(nodes, opts)
    positioned = layout(nodes, schema.edges, opts)

    return PositionedSchema(tables=positioned, edges=list(schema.edges), dialect=schema.dialect)


def _calculate_table_dimensions(
    table: Table,
    opts: LayoutOptions,
) -> tuple[float, float]:
    """Calculate width and height for a table."""
    # Calculate width based on longest line
    header_length = len(table.name)

    column_lengths = []
    for col in table.columns:
        line = f"{col.name}: {getattr(col.type, 'value', col.type)}"
        if col.primary_key:
            line += " PK"
        if col.is_foreign_key:
            line += " FK"
        if not col.nullable and not col.primary_key:
            line += " NN"
        column_lengths.append(len(line))

    max_length = max([header_length] + column_lengths)
    width = max(opts.min_table_width, max_length * opts.char_width + opts.table_padding * 2)

    # Height: header + columns
    header_height = opts.row_height + 4
    columns_height = len(table.columns) * opts.row_height
    height = header_height + columns_height + opts.table_padding

    return (width, height)
