"""ORM model generators.

Each target renders the whole schema as one source file: SQLAlchemy
declarative classes, a Prisma schema, a Sequelize model factory, TypeORM
entities or Mongoose schemas. Foreign keys whose table is part of the
schema become relationship attributes on both ends.
"""

import json
import keyword
import logging
import re
from dataclasses import dataclass
from typing import Any, Callable

from erd_engine.generators.sql import DEFAULT_VARCHAR_LENGTH, enum_type_name
from erd_engine.models import Column, ColumnType, Schema, Table, singularize

logger = logging.getLogger(__name__)

ORM_TARGETS = ("sqlalchemy", "prisma", "sequelize", "typeorm", "mongoose")

_NOW_DEFAULTS = {
    "CURRENT_TIMESTAMP", "CURRENT_TIMESTAMP()", "CURRENT_DATE", "NOW()",
    "GETDATE()", "SYSDATETIME()", "SYSDATE", "SYSTIMESTAMP", "LOCALTIMESTAMP",
}
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
_JS_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][\w$]*$")
_PRISMA_IDENTIFIER_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*$")

_PRISMA_PROVIDERS = {
    "mysql": "mysql",
    "postgresql": "postgresql",
    "sqlserver": "sqlserver",
    "sqlite": "sqlite",
}


class UnknownORMTargetError(ValueError):
    """Raised for an ORM target with no generator."""

    def __init__(self, target: str):
        super().__init__(
            f"Unknown ORM target '{target}'. Expected one of: {', '.join(ORM_TARGETS)}"
        )
        self.target = target


@dataclass
class Relation:
    """A foreign key seen from both of its tables.

    ``name`` is the attribute on ``child`` that points at ``parent``;
    ``reverse_name`` is the attribute on ``parent`` that collects the children.
    """
    child: Table
    column: Column
    parent: Table
    parent_column: str
    name: str
    reverse_name: str

    @property
    def one_to_one(self) -> bool:
        return self.column.unique or (
            self.column.primary_key and len(self.child.primary_key_columns) == 1
        )


def generate_orm(schema: Schema, target: str) -> str:
    """Render ``schema`` as model code for an ORM ``target``."""
    try:
        generator = _GENERATORS[target.lower()]
    except KeyError:
        raise UnknownORMTargetError(target) from None

    relations = find_relations(schema)
    logger.debug(
        "Generating %s models for %d tables and %d relations",
        target, len(schema.tables), len(relations),
    )
    return generator(schema, relations)


def find_relations(schema: Schema) -> list[Relation]:
    """Foreign keys of ``schema`` whose referenced table exists, with attribute names."""
    taken = {id(t): {c.name.lower() for c in t.columns} for t in schema.tables}
    relations: list[Relation] = []

    for child in schema.tables:
        for column in child.foreign_key_columns:
            parent = schema.get_table(column.references.table)
            if parent is None:
                logger.debug(
                    "No table %s for %s.%s", column.references.table, child.name, column.name
                )
                continue

            stem = re.sub(r"(?:_id|_ID|Id|ID)$", "", column.name)
            if not stem or stem == column.name:
                stem = f"{column.name}_ref"
            name = _claim(stem, taken[id(child)])

            relation = Relation(child, column, parent, column.references.column, name, "")
            reverse = singularize(child.name) if relation.one_to_one else child.name
            relation.reverse_name = _claim(reverse, taken[id(parent)])
            relations.append(relation)

    return relations


def _claim(candidate: str, taken: set[str]) -> str:
    """First of ``candidate``, ``candidate_2``, … not yet in ``taken``."""
    name, n = candidate, 2
    while name.lower() in taken:
        name, n = f"{candidate}_{n}", n + 1
    taken.add(name.lower())
    return name


def pascal_case(name: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in re.split(r"[\W_]+", name) if part)


def camel_case(name: str) -> str:
    pascal = pascal_case(name)
    return pascal[:1].lower() + pascal[1:]


def model_name(table: Table) -> str:
    """Class or model name of a table: the PascalCase singular."""
    name = pascal_case(singularize(table.name)) or "Model"
    return f"_{name}" if name[0].isdigit() else name


def _classify_default(column: Column) -> tuple[str, Any] | None:
    """Split a SQL default into (kind, value).

    Kinds are ``string``, ``number``, ``boolean``, ``now`` and ``expression``.
    """
    if column.default is None:
        return None

    text = column.default.strip()
    if len(text) >= 2 and text[0] == text[-1] == "'":
        return "string", text[1:-1].replace("''", "'")
    if text.upper() in ("TRUE", "FALSE"):
        return "boolean", text.upper() == "TRUE"
    if column.type == ColumnType.BOOLEAN and text in ("0", "1"):
        return "boolean", text == "1"
    if _NUMBER_RE.fullmatch(text):
        return "number", text
    if text.upper() in _NOW_DEFAULTS:
        return "now", text
    return "expression", text


def _element_column(column: Column) -> Column:
    element_type = column.element_type or ColumnType.TEXT
    if element_type == ColumnType.ARRAY:
        element_type = ColumnType.TEXT
    return Column(name=column.name, type=element_type)


def _has_enum_values(column: Column) -> bool:
    return column.type == ColumnType.ENUM and bool(column.values)


def _decimal_arguments(column: Column) -> str:
    if column.scale is not None:
        return f"{column.length}, {column.scale}"
    return str(column.length)


def _js_key(name: str) -> str:
    return name if _JS_IDENTIFIER_RE.match(name) else json.dumps(name)


# SQLAlchemy

_SQLALCHEMY_TYPES = {
    ColumnType.INT: "Integer",
    ColumnType.VARCHAR: "String",
    ColumnType.TEXT: "Text",
    ColumnType.BOOLEAN: "Boolean",
    ColumnType.DATE: "Date",
    ColumnType.TIMESTAMP: "DateTime",
    ColumnType.FLOAT: "Float",
    ColumnType.DOUBLE: "Double",
    ColumnType.DECIMAL: "Numeric",
    ColumnType.JSON: "JSON",
    ColumnType.UUID: "Uuid",
    ColumnType.ENUM: "Enum",
    ColumnType.ARRAY: "ARRAY",
}


def _python_name(name: str) -> str:
    attribute = re.sub(r"\W", "_", name)
    if not attribute or attribute[0].isdigit():
        attribute = f"_{attribute}"
    if keyword.iskeyword(attribute):
        attribute = f"{attribute}_"
    return attribute


def _sqlalchemy_type(column: Column, table: Table, imports: set[str]) -> str:
    if column.type == ColumnType.ENUM and not column.values:
        column = Column(name=column.name, type=ColumnType.VARCHAR)

    type_name = _SQLALCHEMY_TYPES.get(column.type, "String")
    imports.add(type_name)

    if type_name == "String":
        return f"String({column.length or DEFAULT_VARCHAR_LENGTH})"
    if column.type == ColumnType.DECIMAL and column.length:
        return f"Numeric({_decimal_arguments(column)})"
    if column.type == ColumnType.ENUM:
        values = ", ".join(repr(v) for v in column.values)
        return f"Enum({values}, name={enum_type_name(table, column)!r})"
    if column.type == ColumnType.ARRAY:
        return f"ARRAY({_sqlalchemy_type(_element_column(column), table, imports)})"
    return type_name


def _sqlalchemy_column(column: Column, table: Table, imports: set[str]) -> str:
    args = []
    attribute = _python_name(column.name)
    if attribute != column.name:
        args.append(repr(column.name))
    args.append(_sqlalchemy_type(column, table, imports))

    if column.references:
        imports.add("ForeignKey")
        args.append(f"ForeignKey({column.references.table + '.' + column.references.column!r})")
    if column.primary_key:
        args.append("primary_key=True")
    elif not column.nullable:
        args.append("nullable=False")
    if column.unique:
        args.append("unique=True")
    if column.default is not None:
        imports.add("text")
        args.append(f"server_default=text({column.default!r})")

    return f"    {attribute} = Column({', '.join(args)})"


def _sqlalchemy_models(schema: Schema, relations: list[Relation]) -> str:
    imports = {"Column"}
    classes: list[str] = []

    for table in schema.tables:
        lines = [f"class {model_name(table)}(Base):", f"    __tablename__ = {table.name!r}", ""]
        lines.extend(_sqlalchemy_column(c, table, imports) for c in table.columns)

        relationship_lines = []
        for rel in relations:
            column_attribute = _python_name(rel.column.name)
            if rel.child is table:
                options = [repr(model_name(rel.parent)), f"foreign_keys=[{column_attribute}]"]
                if rel.parent is rel.child:
                    options.append(f"remote_side=[{_python_name(rel.parent_column)}]")
                options.append(f"back_populates={rel.reverse_name!r}")
                relationship_lines.append(
                    f"    {_python_name(rel.name)} = relationship({', '.join(options)})"
                )
            if rel.parent is table:
                options = [
                    repr(model_name(rel.child)),
                    f"foreign_keys={model_name(rel.child) + '.' + column_attribute!r}",
                    f"back_populates={rel.name!r}",
                ]
                if rel.one_to_one:
                    options.append("uselist=False")
                relationship_lines.append(
                    f"    {_python_name(rel.reverse_name)} = relationship({', '.join(options)})"
                )

        if relationship_lines:
            lines.append("")
            lines.extend(relationship_lines)
        classes.append("\n".join(lines))

    header = [f"from sqlalchemy import {', '.join(sorted(imports))}"]
    orm_imports = "declarative_base, relationship" if relations else "declarative_base"
    header.append(f"from sqlalchemy.orm import {orm_imports}")
    header.extend(["", "Base = declarative_base()"])

    return "\n\n\n".join(["\n".join(header)] + classes) + "\n"


# Prisma

_PRISMA_TYPES = {
    ColumnType.INT: "Int",
    ColumnType.VARCHAR: "String",
    ColumnType.TEXT: "String",
    ColumnType.BOOLEAN: "Boolean",
    ColumnType.DATE: "DateTime",
    ColumnType.TIMESTAMP: "DateTime",
    ColumnType.FLOAT: "Float",
    ColumnType.DOUBLE: "Float",
    ColumnType.DECIMAL: "Decimal",
    ColumnType.JSON: "Json",
    ColumnType.UUID: "String",
    ColumnType.ENUM: "String",
}


def _prisma_enum(table: Table, column: Column) -> str | None:
    """Prisma enum name for ``column``, if its values are valid enum members."""
    if not _has_enum_values(column):
        return None
    if not all(_PRISMA_IDENTIFIER_RE.match(v) for v in column.values):
        return None
    return f"{model_name(table)}{pascal_case(column.name)}"


def _prisma_default(column: Column, enum_name: str | None) -> str | None:
    default = _classify_default(column)
    if default is None:
        return None
    kind, value = default
    if kind == "string":
        return value if enum_name and value in column.values else json.dumps(value)
    if kind == "boolean":
        return "true" if value else "false"
    if kind == "number":
        return value
    if kind == "now":
        return "now()"
    return f"dbgenerated({json.dumps(value)})"


def _prisma_field(column: Column, table: Table) -> tuple[str, str, list[str]]:
    enum_name = _prisma_enum(table, column)
    if column.type == ColumnType.ARRAY:
        field_type = f"{_PRISMA_TYPES.get(_element_column(column).type, 'String')}[]"
    else:
        field_type = enum_name or _PRISMA_TYPES.get(column.type, "String")
        if column.nullable and not column.primary_key:
            field_type += "?"

    attributes = []
    if column.primary_key and len(table.primary_key_columns) == 1:
        attributes.append("@id")
    if column.unique:
        attributes.append("@unique")
    default = _prisma_default(column, enum_name)
    if default is not None:
        attributes.append(f"@default({default})")

    name = column.name
    if not _PRISMA_IDENTIFIER_RE.match(name):
        name = _python_name(name).lstrip("_") or "field"
        attributes.append(f"@map({json.dumps(column.name)})")
    return name, field_type, attributes


def _prisma_relation_names(relations: list[Relation]) -> dict[int, str]:
    """Relation names for models joined by more than one relation, or to themselves."""
    pairs: dict[tuple[int, int], int] = {}
    for rel in relations:
        pair = (id(rel.child), id(rel.parent))
        pairs[pair] = pairs.get(pair, 0) + 1
    return {
        id(rel): f"{model_name(rel.child)}_{rel.name}"
        for rel in relations
        if rel.child is rel.parent or pairs[(id(rel.child), id(rel.parent))] > 1
    }


def _prisma_schema(schema: Schema, relations: list[Relation]) -> str:
    provider = _PRISMA_PROVIDERS.get(schema.dialect, "postgresql")
    blocks = [
        'generator client {\n  provider = "prisma-client-js"\n}',
        f'datasource db {{\n  provider = "{provider}"\n  url      = env("DATABASE_URL")\n}}',
    ]
    relation_names = _prisma_relation_names(relations)
    enums: list[str] = []

    for table in schema.tables:
        rows = [_prisma_field(column, table) for column in table.columns]

        for rel in relations:
            relation_name = relation_names.get(id(rel))
            prefix = f"{json.dumps(relation_name)}, " if relation_name else ""
            if rel.child is table:
                optional = "?" if rel.column.nullable else ""
                rows.append((
                    rel.name,
                    f"{model_name(rel.parent)}{optional}",
                    [f"@relation({prefix}fields: [{rel.column.name}], "
                     f"references: [{rel.parent_column}])"],
                ))
            if rel.parent is table:
                child_type = f"{model_name(rel.child)}{'?' if rel.one_to_one else '[]'}"
                attributes = [f"@relation({json.dumps(relation_name)})"] if relation_name else []
                rows.append((rel.reverse_name, child_type, attributes))

        for column in table.columns:
            enum_name = _prisma_enum(table, column)
            if enum_name:
                members = "\n".join(f"  {v}" for v in column.values)
                enums.append(f"enum {enum_name} {{\n{members}\n}}")

        name_width = max((len(r[0]) for r in rows), default=0)
        type_width = max((len(r[1]) for r in rows), default=0)
        lines = [f"model {model_name(table)} {{"]
        for name, field_type, attributes in rows:
            line = f"  {name.ljust(name_width)} {field_type.ljust(type_width)}"
            lines.append(f"{line} {' '.join(attributes)}".rstrip())

        primary_key = table.primary_key_columns
        block_attributes = []
        if len(primary_key) > 1:
            block_attributes.append(f"@@id([{', '.join(c.name for c in primary_key)}])")
        if model_name(table) != table.name:
            block_attributes.append(f"@@map({json.dumps(table.name)})")
        if block_attributes:
            lines.append("")
            lines.extend(f"  {a}" for a in block_attributes)
        lines.append("}")
        blocks.append("\n".join(lines))

    return "\n\n".join(blocks + enums) + "\n"


# Sequelize

_SEQUELIZE_TYPES = {
    ColumnType.INT: "INTEGER",
    ColumnType.VARCHAR: "STRING",
    ColumnType.TEXT: "TEXT",
    ColumnType.BOOLEAN: "BOOLEAN",
    ColumnType.DATE: "DATEONLY",
    ColumnType.TIMESTAMP: "DATE",
    ColumnType.FLOAT: "FLOAT",
    ColumnType.DOUBLE: "DOUBLE",
    ColumnType.DECIMAL: "DECIMAL",
    ColumnType.JSON: "JSON",
    ColumnType.UUID: "UUID",
    ColumnType.ENUM: "ENUM",
    ColumnType.ARRAY: "ARRAY",
}


def _sequelize_type(column: Column) -> str:
    type_name = _SEQUELIZE_TYPES.get(column.type, "STRING")
    if type_name == "STRING":
        return f"DataTypes.STRING({column.length or DEFAULT_VARCHAR_LENGTH})"
    if column.type == ColumnType.DECIMAL and column.length:
        return f"DataTypes.DECIMAL({_decimal_arguments(column)})"
    if column.type == ColumnType.ENUM:
        if not column.values:
            return f"DataTypes.STRING({DEFAULT_VARCHAR_LENGTH})"
        return f"DataTypes.ENUM({', '.join(json.dumps(v) for v in column.values)})"
    if column.type == ColumnType.ARRAY:
        return f"DataTypes.ARRAY({_sequelize_type(_element_column(column))})"
    return f"DataTypes.{type_name}"


def _js_default(
    column: Column, now: str, expression: Callable[[str], str | None]
) -> str | None:
    default = _classify_default(column)
    if default is None:
        return None
    kind, value = default
    if kind == "string":
        return json.dumps(value)
    if kind == "boolean":
        return "true" if value else "false"
    if kind == "number":
        return value
    if kind == "now":
        return now
    return expression(value)


def _sequelize_models(schema: Schema, relations: list[Relation]) -> str:
    lines = ['const { DataTypes } = require("sequelize");', "", "module.exports = (sequelize) => {"]

    for table in schema.tables:
        name = model_name(table)
        lines.append(f"  const {name} = sequelize.define({json.dumps(name)}, {{")
        for column in table.columns:
            lines.append(f"    {_js_key(column.name)}: {{")
            lines.append(f"      type: {_sequelize_type(column)},")
            if column.primary_key:
                lines.append("      primaryKey: true,")
            if not column.nullable:
                lines.append("      allowNull: false,")
            if column.unique:
                lines.append("      unique: true,")
            default = _js_default(
                column, "DataTypes.NOW", lambda v: f"sequelize.literal({json.dumps(v)})"
            )
            if default is not None:
                lines.append(f"      defaultValue: {default},")
            lines.append("    },")
        lines.append("  }, {")
        lines.append(f"    tableName: {json.dumps(table.name)},")
        lines.append("    timestamps: false,")
        lines.append("  });")
        lines.append("")

    for rel in relations:
        child, parent = model_name(rel.child), model_name(rel.parent)
        foreign_key = json.dumps(rel.column.name)
        lines.append(
            f"  {child}.belongsTo({parent}, {{ foreignKey: {foreign_key}, "
            f"as: {json.dumps(rel.name)} }});"
        )
        association = "hasOne" if rel.one_to_one else "hasMany"
        lines.append(
            f"  {parent}.{association}({child}, {{ foreignKey: {foreign_key}, "
            f"as: {json.dumps(rel.reverse_name)} }});"
        )
    if relations:
        lines.append("")

    lines.extend(["  return sequelize.models;", "};"])
    return "\n".join(lines) + "\n"


# TypeORM

_TYPEORM_TYPES = {
    ColumnType.INT: ("int", "number"),
    ColumnType.VARCHAR: ("varchar", "string"),
    ColumnType.TEXT: ("text", "string"),
    ColumnType.BOOLEAN: ("boolean", "boolean"),
    ColumnType.DATE: ("date", "string"),
    ColumnType.TIMESTAMP: ("timestamp", "Date"),
    ColumnType.FLOAT: ("float", "number"),
    ColumnType.DOUBLE: ("double precision", "number"),
    ColumnType.DECIMAL: ("decimal", "string"),
    ColumnType.JSON: ("json", "unknown"),
    ColumnType.UUID: ("uuid", "string"),
    ColumnType.ENUM: ("enum", "string"),
}


def _typeorm_column(column: Column, decorators: set[str]) -> list[str]:
    is_array = column.type == ColumnType.ARRAY
    source = _element_column(column) if is_array else column
    if source.type == ColumnType.ENUM and not column.values:
        source = Column(name=column.name, type=ColumnType.VARCHAR)
    column_type, ts_type = _TYPEORM_TYPES.get(source.type, ("varchar", "string"))

    options = [f"type: {json.dumps(column_type)}"]
    if source.type == ColumnType.VARCHAR:
        options.append(f"length: {column.length or DEFAULT_VARCHAR_LENGTH}")
    if column.type == ColumnType.DECIMAL and column.length:
        options.append(f"precision: {column.length}")
        if column.scale is not None:
            options.append(f"scale: {column.scale}")
    if _has_enum_values(column):
        options.append(f"enum: [{', '.join(json.dumps(v) for v in column.values)}]")
    if is_array:
        options.append("array: true")
        ts_type += "[]"
    if column.nullable and not column.primary_key:
        options.append("nullable: true")
        ts_type += " | null"
    if column.unique:
        options.append("unique: true")
    default = _js_default(
        column, '() => "CURRENT_TIMESTAMP"', lambda v: f"() => {json.dumps(v)}"
    )
    if default is not None:
        options.append(f"default: {default}")

    decorator = "PrimaryColumn" if column.primary_key else "Column"
    decorators.add(decorator)
    return [
        f"  @{decorator}({{ {', '.join(options)} }})",
        f"  {_js_key(column.name)}: {ts_type};",
    ]


def _typeorm_entities(schema: Schema, relations: list[Relation]) -> str:
    decorators = {"Entity"}
    entities: list[str] = []

    for table in schema.tables:
        members = [_typeorm_column(column, decorators) for column in table.columns]

        for rel in relations:
            child, parent = model_name(rel.child), model_name(rel.parent)
            if rel.child is table:
                decorator = "OneToOne" if rel.one_to_one else "ManyToOne"
                decorators.update((decorator, "JoinColumn"))
                nullable = "" if rel.column.nullable else ", { nullable: false }"
                owner = camel_case(parent)
                members.append([
                    f"  @{decorator}(() => {parent}, "
                    f"({owner}) => {owner}.{rel.reverse_name}{nullable})",
                    f"  @JoinColumn({{ name: {json.dumps(rel.column.name)}, "
                    f"referencedColumnName: {json.dumps(rel.parent_column)} }})",
                    f"  {rel.name}: {parent};",
                ])
            if rel.parent is table:
                decorator = "OneToOne" if rel.one_to_one else "OneToMany"
                decorators.add(decorator)
                ts_type = child if rel.one_to_one else f"{child}[]"
                item = camel_case(child)
                members.append([
                    f"  @{decorator}(() => {child}, ({item}) => {item}.{rel.name})",
                    f"  {rel.reverse_name}: {ts_type};",
                ])

        body = "\n\n".join("\n".join(member) for member in members)
        entities.append(
            f"@Entity({{ name: {json.dumps(table.name)} }})\n"
            f"export class {model_name(table)} {{\n{body}\n}}"
        )

    header = f'import {{ {", ".join(sorted(decorators))} }} from "typeorm";'
    return "\n\n".join([header] + entities) + "\n"


# Mongoose

_MONGOOSE_TYPES = {
    ColumnType.INT: "Number",
    ColumnType.VARCHAR: "String",
    ColumnType.TEXT: "String",
    ColumnType.BOOLEAN: "Boolean",
    ColumnType.DATE: "Date",
    ColumnType.TIMESTAMP: "Date",
    ColumnType.FLOAT: "Number",
    ColumnType.DOUBLE: "Number",
    ColumnType.DECIMAL: "Schema.Types.Decimal128",
    ColumnType.JSON: "Schema.Types.Mixed",
    ColumnType.UUID: "String",
    ColumnType.ENUM: "String",
}


def _mongoose_field(column: Column, relation: Relation | None) -> str:
    if relation is not None:
        options = ["type: Schema.Types.ObjectId", f"ref: {json.dumps(model_name(relation.parent))}"]
    elif column.type == ColumnType.ARRAY:
        options = [f"type: [{_MONGOOSE_TYPES.get(_element_column(column).type, 'String')}]"]
    else:
        options = [f"type: {_MONGOOSE_TYPES.get(column.type, 'String')}"]
        if column.type == ColumnType.VARCHAR and column.length:
            options.append(f"maxLength: {column.length}")
        if _has_enum_values(column):
            options.append(f"enum: [{', '.join(json.dumps(v) for v in column.values)}]")

    if not column.nullable:
        options.append("required: true")
    if column.unique:
        options.append("unique: true")
    default = _js_default(column, "Date.now", lambda v: None)
    if default is not None:
        options.append(f"default: {default}")
    elif column.default is not None:
        logger.debug("Dropping SQL default %s of %s", column.default, column.name)

    return f"  {_js_key(column.name)}: {{ {', '.join(options)} }},"


def _mongoose_schemas(schema: Schema, relations: list[Relation]) -> str:
    by_column = {id(rel.column): rel for rel in relations}
    blocks = ['const mongoose = require("mongoose");\nconst { Schema } = mongoose;']

    for table in schema.tables:
        name = model_name(table)
        variable = f"{camel_case(name)}Schema"
        fields = "\n".join(_mongoose_field(c, by_column.get(id(c))) for c in table.columns)
        blocks.append(
            f"const {variable} = new Schema({{\n{fields}\n}}, "
            f"{{ collection: {json.dumps(table.name)} }});\n\n"
            f"const {name} = mongoose.model({json.dumps(name)}, {variable});"
        )

    exports = ", ".join(model_name(t) for t in schema.tables)
    blocks.append(f"module.exports = {{ {exports} }};")
    return "\n\n".join(blocks) + "\n"


_GENERATORS: dict[str, Callable[[Schema, list[Relation]], str]] = {
    "sqlalchemy": _sqlalchemy_models,
    "prisma": _prisma_schema,
    "sequelize": _sequelize_models,
    "typeorm": _typeorm_entities,
    "mongoose": _mongoose_schemas,
}
