"""Tests for the ORM model generators."""

import re

import pytest
from erd_engine.generators import ORM_TARGETS, UnknownORMTargetError, generate_orm
from erd_engine.generators.orm import find_relations, model_name
from erd_engine.models import (
    Column,
    ColumnType,
    Constraint,
    ConstraintKind,
    ForeignKeyReference,
    Schema,
    Table,
)


def _default(value: str) -> list[Constraint]:
    return [Constraint(kind=ConstraintKind.DEFAULT, value=value)]


def _fk(name: str, table: str, **kwargs) -> Column:
    return Column(
        name=name,
        type=ColumnType.INT,
        references=ForeignKeyReference(table=table, column="id"),
        **kwargs,
    )


def _pk() -> Column:
    return Column(name="id", type=ColumnType.INT, primary_key=True, nullable=False)


def _lines(code: str) -> set[str]:
    """Output lines with runs of whitespace collapsed."""
    return {re.sub(r"\s+", " ", line).rstrip() for line in code.splitlines()}


@pytest.fixture
def schema():
    users = Table(
        name="users",
        columns=[
            _pk(),
            Column(name="email", type=ColumnType.VARCHAR, length=255, nullable=False, unique=True),
            Column(
                name="status",
                type=ColumnType.ENUM,
                values=["active", "banned"],
                constraints=_default("'active'"),
            ),
            Column(name="created_at", type=ColumnType.TIMESTAMP, constraints=_default("CURRENT_TIMESTAMP")),
        ],
    )
    posts = Table(
        name="posts",
        columns=[
            _pk(),
            _fk("user_id", "users", nullable=False),
            Column(name="title", type=ColumnType.VARCHAR, length=200),
            Column(name="price", type=ColumnType.DECIMAL, length=10, scale=2),
        ],
    )
    return Schema(tables=[users, posts], dialect="postgresql")


class TestGenerateOrm:
    """Tests for target selection."""

    def test_every_target_renders(self, schema):
        for target in ORM_TARGETS:
            assert generate_orm(schema, target).endswith("\n")

    def test_target_is_case_insensitive(self, schema):
        assert generate_orm(schema, "SQLAlchemy") == generate_orm(schema, "sqlalchemy")

    def test_unknown_target(self, schema):
        with pytest.raises(UnknownORMTargetError) as excinfo:
            generate_orm(schema, "hibernate")
        assert isinstance(excinfo.value, ValueError)
        assert "sqlalchemy" in str(excinfo.value)


class TestRelations:
    """Tests for relationship discovery and naming."""

    def test_names_come_from_column_and_table(self, schema):
        [relation] = find_relations(schema)
        assert (relation.child.name, relation.parent.name) == ("posts", "users")
        assert (relation.name, relation.reverse_name) == ("user", "posts")
        assert relation.one_to_one is False

    def test_two_keys_to_one_table_get_distinct_names(self):
        schema = Schema(
            tables=[
                Table(name="users", columns=[_pk()]),
                Table(name="messages", columns=[_pk(), _fk("sender_id", "users"), _fk("recipient_id", "users")]),
            ]
        )
        relations = find_relations(schema)
        assert [(r.name, r.reverse_name) for r in relations] == [
            ("sender", "messages"),
            ("recipient", "messages_2"),
        ]

    def test_unique_key_is_one_to_one(self):
        schema = Schema(
            tables=[
                Table(name="users", columns=[_pk()]),
                Table(name="profiles", columns=[_pk(), _fk("user_id", "users", unique=True)]),
            ]
        )
        [relation] = find_relations(schema)
        assert relation.one_to_one is True
        assert relation.reverse_name == "profile"

    def test_name_without_id_suffix(self):
        schema = Schema(
            tables=[
                Table(name="users", columns=[_pk()]),
                Table(name="posts", columns=[_pk(), _fk("author", "users")]),
            ]
        )
        assert find_relations(schema)[0].name == "author_ref"

    def test_unknown_table_is_skipped(self):
        schema = Schema(tables=[Table(name="posts", columns=[_pk(), _fk("user_id", "users")])])
        assert find_relations(schema) == []

    def test_model_names(self):
        assert model_name(Table(name="order_items")) == "OrderItem"
        assert model_name(Table(name="categories")) == "Category"
        assert model_name(Table(name="2fa_codes")) == "_2faCode"


class TestSqlAlchemy:
    """Tests for SQLAlchemy declarative models."""

    def test_is_valid_python(self, schema):
        compile(generate_orm(schema, "sqlalchemy"), "models.py", "exec")

    def test_imports(self, schema):
        code = generate_orm(schema, "sqlalchemy")
        assert code.startswith(
            "from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, Numeric, String, text\n"
            "from sqlalchemy.orm import declarative_base, relationship\n"
        )

    def test_columns(self, schema):
        lines = _lines(generate_orm(schema, "sqlalchemy"))
        assert " __tablename__ = 'users'" in lines
        assert " id = Column(Integer, primary_key=True)" in lines
        assert " email = Column(String(255), nullable=False, unique=True)" in lines
        assert (
            " status = Column(Enum('active', 'banned', name='users_status_enum'), "
            "server_default=text(\"'active'\"))"
        ) in lines
        assert " created_at = Column(DateTime, server_default=text('CURRENT_TIMESTAMP'))" in lines
        assert " user_id = Column(Integer, ForeignKey('users.id'), nullable=False)" in lines
        assert " price = Column(Numeric(10, 2))" in lines

    def test_relationships(self, schema):
        lines = _lines(generate_orm(schema, "sqlalchemy"))
        assert " posts = relationship('Post', foreign_keys='Post.user_id', back_populates='user')" in lines
        assert " user = relationship('User', foreign_keys=[user_id], back_populates='posts')" in lines

    def test_self_reference_sets_remote_side(self):
        schema = Schema(tables=[Table(name="categories", columns=[_pk(), _fk("parent_id", "categories")])])
        code = generate_orm(schema, "sqlalchemy")
        compile(code, "models.py", "exec")
        assert "remote_side=[id]" in code
        assert "categories = relationship('Category'" in code

    def test_one_to_one_uses_scalar(self):
        schema = Schema(
            tables=[
                Table(name="users", columns=[_pk()]),
                Table(name="profiles", columns=[_pk(), _fk("user_id", "users", unique=True)]),
            ]
        )
        assert "uselist=False" in generate_orm(schema, "sqlalchemy")

    def test_keyword_column_gets_mapped_name(self):
        schema = Schema(tables=[Table(name="courses", columns=[_pk(), Column(name="class")])])
        code = generate_orm(schema, "sqlalchemy")
        compile(code, "models.py", "exec")
        assert "    class_ = Column('class', String(255))" in code

    def test_no_relations_imports_only_declarative_base(self):
        schema = Schema(tables=[Table(name="tags", columns=[_pk()])])
        assert "from sqlalchemy.orm import declarative_base\n" in generate_orm(schema, "sqlalchemy")


class TestPrisma:
    """Tests for the Prisma schema."""

    def test_datasource_follows_dialect(self, schema):
        assert 'provider = "postgresql"' in generate_orm(schema, "prisma")
        schema.dialect = "sqlite"
        assert 'provider = "sqlite"' in generate_orm(schema, "prisma")

    def test_fields(self, schema):
        lines = _lines(generate_orm(schema, "prisma"))
        assert "model User {" in lines
        assert " id Int @id" in lines
        assert " email String @unique" in lines
        assert " status UserStatus? @default(active)" in lines
        assert " created_at DateTime? @default(now())" in lines
        assert " price Decimal?" in lines
        assert ' @@map("users")' in lines

    def test_relation_fields(self, schema):
        lines = _lines(generate_orm(schema, "prisma"))
        assert " user User @relation(fields: [user_id], references: [id])" in lines
        assert " posts Post[]" in lines

    def test_enum_block(self, schema):
        assert "enum UserStatus {\n  active\n  banned\n}" in generate_orm(schema, "prisma")

    def test_ambiguous_relations_are_named(self):
        schema = Schema(
            tables=[
                Table(name="users", columns=[_pk()]),
                Table(name="messages", columns=[_pk(), _fk("sender_id", "users"), _fk("recipient_id", "users")]),
            ]
        )
        lines = _lines(generate_orm(schema, "prisma"))
        assert ' sender User? @relation("Message_sender", fields: [sender_id], references: [id])' in lines
        assert ' messages_2 Message[] @relation("Message_recipient")' in lines

    def test_composite_primary_key(self):
        schema = Schema(
            tables=[
                Table(
                    name="post_tags",
                    columns=[
                        Column(name="post_id", type=ColumnType.INT, primary_key=True, nullable=False),
                        Column(name="tag_id", type=ColumnType.INT, primary_key=True, nullable=False),
                    ],
                )
            ]
        )
        code = generate_orm(schema, "prisma")
        assert "@@id([post_id, tag_id])" in code
        assert "@id\n" not in code


class TestSequelize:
    """Tests for the Sequelize model factory."""

    def test_models(self, schema):
        lines = _lines(generate_orm(schema, "sequelize"))
        assert ' const User = sequelize.define("User", {' in lines
        assert " type: DataTypes.STRING(255)," in lines
        assert ' type: DataTypes.ENUM("active", "banned"),' in lines
        assert ' defaultValue: "active",' in lines
        assert " defaultValue: DataTypes.NOW," in lines
        assert " type: DataTypes.DECIMAL(10, 2)," in lines
        assert ' tableName: "posts",' in lines

    def test_associations(self, schema):
        lines = _lines(generate_orm(schema, "sequelize"))
        assert ' Post.belongsTo(User, { foreignKey: "user_id", as: "user" });' in lines
        assert ' User.hasMany(Post, { foreignKey: "user_id", as: "posts" });' in lines

    def test_expression_default_is_literal(self):
        column = Column(name="token", type=ColumnType.UUID, constraints=_default("gen_random_uuid()"))
        code = generate_orm(Schema(tables=[Table(name="keys", columns=[_pk(), column])]), "sequelize")
        assert 'defaultValue: sequelize.literal("gen_random_uuid()"),' in code


class TestTypeOrm:
    """Tests for TypeORM entities."""

    def test_imports(self, schema):
        assert generate_orm(schema, "typeorm").startswith(
            'import { Column, Entity, JoinColumn, ManyToOne, OneToMany, PrimaryColumn } from "typeorm";'
        )

    def test_columns(self, schema):
        lines = _lines(generate_orm(schema, "typeorm"))
        assert '@Entity({ name: "users" })' in lines
        assert "export class User {" in lines
        assert ' @PrimaryColumn({ type: "int" })' in lines
        assert ' @Column({ type: "varchar", length: 255, unique: true })' in lines
        assert (
            ' @Column({ type: "enum", enum: ["active", "banned"], nullable: true, default: "active" })'
        ) in lines
        assert " status: string | null;" in lines
        assert ' @Column({ type: "decimal", precision: 10, scale: 2, nullable: true })' in lines

    def test_relations(self, schema):
        lines = _lines(generate_orm(schema, "typeorm"))
        assert " @ManyToOne(() => User, (user) => user.posts, { nullable: false })" in lines
        assert ' @JoinColumn({ name: "user_id", referencedColumnName: "id" })' in lines
        assert " user: User;" in lines
        assert " @OneToMany(() => Post, (post) => post.user)" in lines
        assert " posts: Post[];" in lines


class TestMongoose:
    """Tests for Mongoose schemas."""

    def test_fields(self, schema):
        lines = _lines(generate_orm(schema, "mongoose"))
        assert " email: { type: String, maxLength: 255, required: true, unique: true }," in lines
        assert ' status: { type: String, enum: ["active", "banned"], default: "active" },' in lines
        assert " created_at: { type: Date, default: Date.now }," in lines
        assert ' user_id: { type: Schema.Types.ObjectId, ref: "User", required: true },' in lines

    def test_models_and_exports(self, schema):
        code = generate_orm(schema, "mongoose")
        assert '}, { collection: "users" });' in code
        assert 'const User = mongoose.model("User", userSchema);' in code
        assert code.endswith("module.exports = { User, Post };\n")
