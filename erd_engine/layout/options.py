"""Layout configuration."""

from dataclasses import dataclass
from typing import Literal

Direction = Literal["TB", "LR", "RL", "BT"]


@dataclass
class LayoutOptions:
    """Options for layout calculation.

    ``spacing`` and ``padding`` default per algorithm when left as None.
    """
    spacing: float | None = None
    direction: Direction = "TB"
    padding: float | None = None
    group_padding: float = 50.0
    # Radial
    center_x: float = 500.0
    center_y: float = 400.0
    min_radius: float = 300.0
    radius_per_node: float = 50.0
    # Force-directed
    iterations: int = 50
    repulsion_strength: float = 1000.0
    edge_strength: float = 0.7
    rest_length: float = 200.0
    damping: float = 0.9
    step: float = 0.1
    # Table box sizing
    char_width: int = 8
    row_height: int = 26
    table_padding: int = 20
    min_table_width: int = 150


def resolve(value: float | None, default: float) -> float:
    return default if value is None else value
