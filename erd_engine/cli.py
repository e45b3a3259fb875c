"""Command-line interface for erd-engine."""

import logging
from pathlib import Path
from typing import Literal

import click

from erd_engine.analysis import Priority, analyze_schema
from erd_engine.diff import compare_schemas
from erd_engine.dialects import DIALECT_FEATURES
from erd_engine.generators import (
    ORM_TARGETS,
    format_sql_for_display,
    generate_drawio,
    generate_orm,
    generate_sql,
)
from erd_engine.inference import infer_advanced, infer_basic
from erd_engine.layout import ALGORITHMS, LayoutOptions, layout_schema
from erd_engine.models import Schema
from erd_engine.parsers import parse_sql
from erd_engine.serialization import schema_from_json, schema_to_json
from erd_engine.validation import COMMON_VALIDATION_RULES, ValidationRule, validate_schema

DIALECTS = list(DIALECT_FEATURES)


def dialect_option(*param_decls: str, **kwargs):
    return click.option(
        *(param_decls or ("-d", "--dialect")),
        type=click.Choice(DIALECTS),
        default="mysql",
        envvar="ERD_ENGINE_DIALECT",
        show_default=True,
        **kwargs,
    )


def _load_schema(path: Path, dialect: str) -> Schema:
    """Read a JSON model, or parse SQL; an empty result is an import failure."""
    text = path.read_text()
    if path.suffix.lower() == ".json":
        schema = schema_from_json(text)
    else:
        schema = parse_sql(text, dialect)

    if not schema.tables:
        raise click.ClickException(f"No tables found in {path}")
    return schema


def _run(action):
    """Run ``action`` turning unexpected errors into click errors."""
    try:
        return action()
    except click.ClickException:
        raise
    except Exception as e:
        raise click.ClickException(str(e))


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.version_option(version="0.1.0")
def main(verbose: bool) -> None:
    """Parse, generate, analyse and lay out relational schemas.

    \b
    Examples:
      erd-engine parse schema.sql -o schema.json
      erd-engine generate schema.sql --target postgresql
      erd-engine suggest schema.sql
      erd-engine layout schema.sql -a force -o diagram.drawio
      erd-engine validate schema.sql --common
      erd-engine orm schema.sql --target sqlalchemy -o models.py
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@main.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Write JSON here.")
@dialect_option()
def parse(input_file: Path, output: Path | None, dialect: str) -> None:
    """Parse INPUT_FILE and print the schema model as JSON."""
    def action() -> None:
        schema = _load_schema(input_file, dialect)
        click.echo(f"Found {len(schema.tables)} tables", err=True)
        document = schema_to_json(schema)
        if output:
            output.write_text(document)
            click.echo(f"Model saved to: {output}", err=True)
        else:
            click.echo(document)

    _run(action)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@dialect_option(help="Dialect INPUT_FILE is written in.")
@click.option(
    "-t", "--target",
    type=click.Choice(DIALECTS),
    help="Dialect to generate (default: same as --dialect).",
)
@click.option("--html", is_flag=True, help="Emit syntax-annotated HTML instead of SQL.")
def generate(input_file: Path, dialect: str, target: str | None, html: bool) -> None:
    """Regenerate CREATE TABLE statements for INPUT_FILE."""
    def action() -> None:
        schema = _load_schema(input_file, dialect)
        target_dialect = target or dialect
        sql = generate_sql(schema, target_dialect)
        click.echo(format_sql_for_display(sql, target_dialect) if html else sql)

    _run(action)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@dialect_option()
@click.option(
    "--min-confidence",
    type=click.FloatRange(0.0, 1.0),
    default=0.0,
    help="Hide suggestions below this confidence.",
)
def suggest(input_file: Path, dialect: str, min_confidence: float) -> None:
    """Suggest relationships that INPUT_FILE does not declare."""
    def action() -> None:
        schema = _load_schema(input_file, dialect)
        suggestions = infer_basic(schema.tables) + infer_advanced(schema)
        suggestions = [s for s in suggestions if s.confidence >= min_confidence]

        if not suggestions:
            click.echo("No suggestions")
            return

        for suggestion in sorted(suggestions, key=lambda s: -s.confidence):
            columns = ""
            if suggestion.source_column and suggestion.target_column:
                columns = f" ({suggestion.source_column} -> {suggestion.target_column})"
            click.echo(
                f"[{suggestion.confidence:.0%}] {suggestion.source_table} -> "
                f"{suggestion.target_table} {suggestion.relationship_type.value}{columns}"
            )
            click.echo(f"    {suggestion.reason}")

    _run(action)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "-o", "--output",
    type=click.Path(path_type=Path),
    help="Output file path (default: <input>.drawio)",
)
@dialect_option()
@click.option(
    "-a", "--algorithm",
    type=click.Choice(list(ALGORITHMS)),
    default="tree",
    show_default=True,
    help="Layout algorithm",
)
@click.option(
    "--direction",
    type=click.Choice(["TB", "LR", "RL", "BT"]),
    default="TB",
    help="Tree layout direction: TB, LR, RL or BT",
)
@click.option("--spacing", type=float, help="Distance between neighbouring tables.")
def layout(
    input_file: Path,
    output: Path | None,
    dialect: str,
    algorithm: str,
    direction: Literal["TB", "LR", "RL", "BT"],
    spacing: float | None,
) -> None:
    """Lay out INPUT_FILE and save it as a Draw.io diagram."""
    def action() -> None:
        schema = _load_schema(input_file, dialect)

        click.echo("Calculating layout...")
        positioned = layout_schema(
            schema, algorithm, LayoutOptions(direction=direction, spacing=spacing)
        )

        output_path = output or input_file.with_suffix(".drawio")
        output_path.write_text(generate_drawio(positioned))
        click.echo(f"Diagram saved to: {output_path}")

        click.echo("\nSummary:")
        for table in schema.tables:
            fk_count = len(table.foreign_key_columns)
            parts = [f"{len(table.columns)} columns"]
            if fk_count > 0:
                parts.append(f"{fk_count} FK")
            click.echo(f"  - {table.name}: {', '.join(parts)}")

    _run(action)


@main.command()
@click.argument("old_file", type=click.Path(exists=True, path_type=Path))
@click.argument("new_file", type=click.Path(exists=True, path_type=Path))
@dialect_option()
def diff(old_file: Path, new_file: Path, dialect: str) -> None:
    """Show tables and columns that changed from OLD_FILE to NEW_FILE."""
    def action() -> None:
        result = compare_schemas(
            _load_schema(old_file, dialect), _load_schema(new_file, dialect)
        )

        for table in result.tables_added:
            click.echo(f"+ {table.table_name}")
        for table in result.tables_removed:
            click.echo(f"- {table.table_name}")
        for table in result.tables_modified:
            click.echo(f"~ {table.table_name}")
            for column in table.columns_added:
                click.echo(f"    + {column.column_name} {column.new_type}")
            for column in table.columns_removed:
                click.echo(f"    - {column.column_name}")
            for column in table.columns_modified:
                changed = ", ".join(
                    f"{c.property}: {c.old_value} -> {c.new_value}" for c in column.changes
                )
                click.echo(f"    ~ {column.column_name} ({changed})")

        click.echo(f"{result.summary.total_changes} changes")

    _run(action)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@dialect_option()
@click.option(
    "-r", "--rule", "rules",
    multiple=True,
    help="Rule expression to check on every table, e.g. \"has_column('id')\".",
)
@click.option("--common", is_flag=True, help="Also apply the common rule set.")
def validate(input_file: Path, dialect: str, rules: tuple[str, ...], common: bool) -> None:
    """Check INPUT_FILE for structural problems and rule violations."""
    def action() -> None:
        schema = _load_schema(input_file, dialect)
        selected = list(COMMON_VALIDATION_RULES) if common else []
        selected.extend(ValidationRule(name=rule, rule=rule) for rule in rules)

        result = validate_schema(schema, selected)
        for error in result.errors:
            click.echo(f"  - {error}")
        if not result.is_valid:
            raise click.ClickException(f"{len(result.errors)} problems found")
        click.echo(f"Schema is valid ({len(schema.tables)} tables)")

    _run(action)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@dialect_option()
@click.option(
    "-p", "--priority",
    type=click.Choice([p.value for p in Priority]),
    help="Only show suggestions of this priority.",
)
def analyze(input_file: Path, dialect: str, priority: str | None) -> None:
    """Review the design of INPUT_FILE and print suggestions."""
    def action() -> None:
        suggestions = analyze_schema(_load_schema(input_file, dialect))
        if priority:
            suggestions = [s for s in suggestions if s.priority.value == priority]

        if not suggestions:
            click.echo("No suggestions")
            return

        for suggestion in suggestions:
            location = suggestion.table_name
            if suggestion.column_name:
                location += f".{suggestion.column_name}"
            click.echo(f"[{suggestion.priority.value}] {location}: {suggestion.description}")
            if suggestion.action:
                click.echo(f"    {suggestion.action}")

    _run(action)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, path_type=Path))
@dialect_option()
@click.option(
    "-t", "--target",
    type=click.Choice(ORM_TARGETS),
    required=True,
    help="ORM to generate models for.",
)
@click.option("-o", "--output", type=click.Path(path_type=Path), help="Write the models here.")
def orm(input_file: Path, dialect: str, target: str, output: Path | None) -> None:
    """Generate ORM models for INPUT_FILE."""
    def action() -> None:
        code = generate_orm(_load_schema(input_file, dialect), target)
        if output:
            output.write_text(code)
            click.echo(f"Models saved to: {output}", err=True)
        else:
            click.echo(code, nl=False)

    _run(action)


if __name__ == "__main__":
    main()
