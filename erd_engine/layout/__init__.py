"""Table layout algorithms."""

from erd_engine.layout.force import layout_force_directed
from erd_engine.layout.geometric import layout_grid, layout_radial
from erd_engine.layout.networkx_layout import (
    ALGORITHMS,
    layout_schema,
    layout_tree,
    to_positioned_tables,
)
from erd_engine.layout.options import LayoutOptions

__all__ = [
    "ALGORITHMS",
    "LayoutOptions",
    "layout_force_directed",
    "layout_grid",
    "layout_radial",
    "layout_schema",
    "layout_tree",
    "to_positioned_tables",
]
