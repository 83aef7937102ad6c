import pytest

from pg2rs.shared.catalog import Column, EnumType, Schema, Table
from pg2rs.shared.config import Settings, get_settings


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep developer environment variables out of the settings under test."""
    for field in Settings.model_fields.values():
        if field.alias:
            monkeypatch.delenv(field.alias, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def user_status_enum():
    return EnumType(name="user_status", labels=("active", "suspended"))


@pytest.fixture
def users_table():
    return Table(
        name="users",
        columns=(
            Column(name="id", type_name="int4", is_nullable=False),
            Column(
                name="status",
                type_name="user_status",
                is_nullable=False,
                enum_name="user_status",
            ),
            Column(name="bio", type_name="text", is_nullable=True),
        ),
        primary_key=("id",),
    )


@pytest.fixture
def users_schema(users_table, user_status_enum):
    return Schema(name="public", tables=(users_table,), enums=(user_status_enum,))
