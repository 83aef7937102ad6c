import pytest

from pg2rs.codegen.dialects import (
    RENDERERS,
    Dialect,
    RustPostgresRenderer,
    SqlxRenderer,
    renderer_for,
    rust_string,
)
from pg2rs.codegen.main import (
    EnumVariant,
    GeneratorContext,
    ResolvedEntity,
    ResolvedEnum,
    ResolvedField,
)
from pg2rs.shared.errors import DialectError


@pytest.fixture
def entity():
    return ResolvedEntity(
        type_name="User",
        table_name="users",
        fields=(
            ResolvedField("id", "id", "i32"),
            ResolvedField("type", "r#type", "String"),
            ResolvedField("createdAt", "created_at", "SystemTime"),
        ),
        primary_key=("id",),
        dialect=Dialect.POSTGRES,
    )


@pytest.fixture
def status_enum():
    return ResolvedEnum(
        type_name="UserStatus",
        db_name="user_status",
        variants=(EnumVariant("active", "Active"),),
    )


class TestDialect:
    @pytest.mark.parametrize("value", ["postgres", "tokio_postgres", "sqlx"])
    def test_parse(self, value):
        assert Dialect.parse(value).value == value

    def test_parse_member(self):
        assert Dialect.parse(Dialect.SQLX) is Dialect.SQLX

    def test_parse_unknown(self):
        with pytest.raises(DialectError) as exc_info:
            Dialect.parse("diesel")
        assert exc_info.value.dialect == "diesel"
        assert "postgres, tokio_postgres, sqlx" in str(exc_info.value)

    def test_every_dialect_has_renderer(self):
        assert set(RENDERERS) == set(Dialect)
        for dialect in Dialect:
            assert renderer_for(dialect).dialect is dialect


class TestRustPostgresRenderer:
    def test_imports(self):
        renderer = RustPostgresRenderer(Dialect.TOKIO_POSTGRES)
        assert renderer.imports(has_enums=True, has_tables=True) == [
            "use tokio_postgres::Row;",
            "use tokio_postgres::types::{FromSql, ToSql};",
        ]
        assert renderer.imports(has_enums=False, has_tables=True) == [
            "use tokio_postgres::Row;",
        ]

    def test_reserved_names_cover_imports(self):
        assert renderer_for("postgres").reserved_names() == ["Row", "FromSql", "ToSql"]

    def test_enum_attributes(self, status_enum):
        renderer = renderer_for("postgres")
        assert "ToSql" in renderer.enum_derives()
        assert "FromSql" in renderer.enum_derives()
        assert renderer.enum_attributes(status_enum) == ['#[postgres(name = "user_status")]']
        assert renderer.variant_attributes("in progress") == [
            '#[postgres(name = "in progress")]'
        ]

    def test_struct_has_no_field_attributes(self, entity):
        renderer = renderer_for("postgres")
        assert renderer.struct_derives() == ["Debug", "Clone", "PartialEq"]
        assert all(renderer.field_attributes(f) == [] for f in entity.fields)

    def test_render_conversion(self, entity):
        conversion = renderer_for("postgres").render_conversion(
            GeneratorContext().template_env, entity
        )
        assert "impl From<&Row> for User {" in conversion
        assert "impl From<Row> for User {" in conversion
        assert '            id: row.get("id"),\n' in conversion
        assert '            r#type: row.get("type"),\n' in conversion
        assert '            created_at: row.get("createdAt"),\n' in conversion


class TestSqlxRenderer:
    def test_imports(self):
        assert SqlxRenderer().imports(has_enums=True, has_tables=True) == []
        assert SqlxRenderer().reserved_names() == []

    def test_enum_attributes(self, status_enum):
        renderer = renderer_for(Dialect.SQLX)
        assert "sqlx::Type" in renderer.enum_derives()
        assert renderer.enum_attributes(status_enum) == ['#[sqlx(type_name = "user_status")]']
        assert renderer.variant_attributes("active") == ['#[sqlx(rename = "active")]']

    def test_foreign_enum_keeps_schema(self):
        enum = ResolvedEnum(
            type_name="PublicStatus",
            db_name="status",
            variants=(),
            db_schema="public",
        )
        assert renderer_for(Dialect.SQLX).enum_attributes(enum) == [
            '#[sqlx(type_name = "public.status")]'
        ]
        assert renderer_for(Dialect.POSTGRES).enum_attributes(enum) == [
            '#[postgres(name = "status")]'
        ]

    def test_field_rename_only_when_needed(self, entity):
        renderer = renderer_for(Dialect.SQLX)
        id_field, type_field, created_field = entity.fields
        assert renderer.field_attributes(id_field) == []
        assert renderer.field_attributes(type_field) == ['#[sqlx(rename = "type")]']
        assert renderer.field_attributes(created_field) == ['#[sqlx(rename = "createdAt")]']

    def test_derives_from_row(self, entity):
        renderer = renderer_for(Dialect.SQLX)
        assert "sqlx::FromRow" in renderer.struct_derives()
        assert renderer.render_conversion(GeneratorContext().template_env, entity) == ""


class TestRustString:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("hello", '"hello"'),
            ("", '""'),
            ('he said "hi"', '"he said \\"hi\\""'),
            ("back\\slash", '"back\\\\slash"'),
            ("line1\nline2", '"line1\\nline2"'),
            ("tab\there", '"tab\\there"'),
            ("bell\x07", '"bell\\u{7}"'),
            ("café", '"café"'),
        ],
    )
    def test_rust_string(self, value, expected):
        assert rust_string(value) == expected
