"""Draw.io XML generator."""

import itertools
from dataclasses import dataclass
from datetime import datetime, timezone
from html import escape
from typing import Iterator

from erd_engine.models import (
    Column,
    PositionedSchema,
    PositionedTable,
    RelationshipEdge,
    RelationshipType,
)


@dataclass
class DrawioOptions:
    """Options for Draw.io generation."""
    row_height: int = 26
    header_color: str = "#1a365d"
    column_color: str = "#ffffff"
    pk_color: str = "#fef3c7"
    fk_color: str = "#dbeafe"


# (startArrow, endArrow) per relationship, drawn from the referenced table
_ARROWS = {
    RelationshipType.ONE_TO_ONE: ("ERmandOne", "ERone"),
    RelationshipType.ONE_TO_MANY: ("ERmandOne", "ERmany"),
    RelationshipType.MANY_TO_MANY: ("ERmany", "ERmany"),
}


def generate_drawio(
    schema: PositionedSchema,
    options: DrawioOptions | None = None,
) -> str:
    """Generate Draw.io XML from a positioned schema."""
    opts = options or DrawioOptions()
    ids = (f"cell-{n}" for n in itertools.count(1))

    cells: list[str] = []
    edges: list[str] = []
    column_id_map: dict[str, dict[str, str]] = {}

    # Generate table cells
    for table in schema.tables:
        table_cells, column_ids = _generate_table_cells(table, opts, ids)
        cells.extend(table_cells)
        column_id_map[table.id] = column_ids

    # Generate relationship edges
    for edge in schema.edges:
        source_cols = column_id_map.get(edge.source)
        target_cols = column_id_map.get(edge.target)
        if not source_cols or not target_cols:
            continue

        source_id = source_cols.get(edge.source_column or "") or source_cols["__table__"]
        target_id = target_cols.get(edge.target_column or "") or target_cols["__table__"]
        edges.append(_generate_edge(next(ids), source_id, target_id, edge))

    content = "\n".join(cells + edges)
    return _wrap_in_drawio_xml(content)


def _generate_table_cells(
    table: PositionedTable,
    opts: DrawioOptions,
    ids: Iterator[str],
) -> tuple[list[str], dict[str, str]]:
    """Generate cells for a table."""
    cells: list[str] = []
    column_ids: dict[str, str] = {}

    table_id = next(ids)
    column_ids["__table__"] = table_id

    header_height = opts.row_height + 4

    # Table container (swimlane style)
    cells.append(f'''
    <mxCell id="{table_id}" value="{escape(table.name)}" style="swimlane;fontStyle=1;childLayout=stackLayout;horizontal=1;startSize={header_height};horizontalStack=0;resizeParent=1;resizeParentMax=0;resizeLast=0;collapsible=0;marginBottom=0;fillColor={opts.header_color};fontColor=#ffffff;strokeColor=#1e3a5f;rounded=1;arcSize=8;" vertex="1" parent="1">
      <mxGeometry x="{table.x:.2f}" y="{table.y:.2f}" width="{table.width}" height="{table.height}" as="geometry"/>
    </mxCell>
  ''')

    # Column rows
    for i, col in enumerate(table.columns):
        col_id = next(ids)
        column_ids[col.name] = col_id

        label = format_column_label(col)
        bg_color = _get_column_color(col, opts)

        cells.append(f'''
    <mxCell id="{col_id}" value="{escape(label)}" style="text;strokeColor=none;fillColor={bg_color};align=left;verticalAlign=middle;spacingLeft=8;spacingRight=4;overflow=hidden;rotatable=0;points=[[0,0.5],[1,0.5]];portConstraint=eastwest;fontFamily=monospace;fontSize=11;" vertex="1" parent="{table_id}">
      <mxGeometry y="{header_height + i * opts.row_height}" width="{table.width}" height="{opts.row_height}" as="geometry"/>
    </mxCell>
    ''')

    return cells, column_ids


def format_column_label(col: Column) -> str:
    """Format column label with type and constraints."""
    type_name = getattr(col.type, "value", col.type)
    if col.length is not None:
        type_name += f"({col.length}{f',{col.scale}' if col.scale is not None else ''})"
    label = f"{col.name}: {type_name}"
    tags: list[str] = []

    if col.primary_key:
        tags.append("PK")
    if col.is_foreign_key:
        tags.append("FK")
    if not col.nullable and not col.primary_key:
        tags.append("NN")
    if col.unique:
        tags.append("UQ")

    if tags:
        label += f" [{', '.join(tags)}]"

    return label


def _get_column_color(col: Column, opts: DrawioOptions) -> str:
    """Get background color for a column."""
    if col.primary_key:
        return opts.pk_color
    if col.is_foreign_key:
        return opts.fk_color
    return opts.column_color


def _generate_edge(edge_id: str, source_id: str, target_id: str, edge: RelationshipEdge) -> str:
    """Generate an edge (relationship line)."""
    start_arrow, end_arrow = _ARROWS.get(
        edge.relationship_type, _ARROWS[RelationshipType.ONE_TO_MANY]
    )
    label = escape(edge.target_column or "")

    return f'''
    <mxCell id="{edge_id}" value="{label}" style="edgeStyle=orthogonalEdgeStyle;rounded=1;orthogonalLoop=1;jettySize=auto;html=1;endArrow={end_arrow};endFill=0;startArrow={start_arrow};startFill=0;strokeWidth=1;strokeColor=#64748b;" edge="1" parent="1" source="{source_id}" target="{target_id}">
      <mxGeometry relative="1" as="geometry"/>
    </mxCell>
  '''


def _wrap_in_drawio_xml(content: str) -> str:
    """Wrap content in Draw.io XML structure."""
    timestamp = datetime.now(timezone.utc).isoformat()

    return f'''<?xml version="1.0" encoding="UTF-8"?>
<mxfile host="app.diagrams.net" modified="{timestamp}" agent="erd-engine" version="1.0">
  <diagram name="Database Schema" id="db-schema">
    <mxGraphModel dx="1000" dy="600" grid="1" gridSize="10" guides="1" tooltips="1" connect="1" arrows="1" fold="1" page="1" pageScale="1" pageWidth="1600" pageHeight="1200" math="0" shadow="0">
      <root>
        <mxCell id="0"/>
        <mxCell id="1" parent="0"/>
{content}
      </root>
    </mxGraphModel>
  </diagram>
</mxfile>'''
