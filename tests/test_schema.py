import pytest

from pg_export.core.roles import resolve_roles
from pg_export.core.schema import build_create_table, quote_ident
from pg_export.errors import InvalidIdentifier, UnsupportedFieldType
from pg_export.models import FieldDescriptor, Role
from pg_export.type_map import field_type_of, make_field_type_lookup


class TestBuildCreateTable:
    def test_geometry_only(self):
        resolved = resolve_roles(
            [FieldDescriptor("lat", "float"), FieldDescriptor("lon", "float")],
            {Role.LATITUDE: "lat", Role.LONGITUDE: "lon"},
        )
        assert build_create_table("public", "test", resolved) == (
            'create table "public"."test"( geom geometry(point, 4326) );'
        )

    def test_plain_columns(self):
        resolved = resolve_roles(
            [FieldDescriptor("label", "char"), FieldDescriptor("value", "float")], {}
        )
        assert build_create_table("s", "t", resolved) == (
            'create table "s"."t"( label text, value numeric );'
        )

    def test_srid(self):
        resolved = resolve_roles(
            [FieldDescriptor("a", "float"), FieldDescriptor("b", "float")],
            {Role.LATITUDE: "a", Role.LONGITUDE: "b"},
        )
        assert "geometry(point, 2154)" in build_create_table("s", "t", resolved, srid=2154)

    def test_unsupported_type(self):
        resolved = resolve_roles([FieldDescriptor("x", "blob")], {})
        with pytest.raises(UnsupportedFieldType) as exc_info:
            build_create_table("s", "t", resolved)
        assert exc_info.value.field_type == "blob"


class TestIdentifiers:
    def test_quote(self):
        assert quote_ident("my table") == '"my table"'

    @pytest.mark.parametrize("name", ['bad"name', "", 'x"; drop table y; --'])
    def test_reject(self, name):
        with pytest.raises(InvalidIdentifier):
            quote_ident(name)

    def test_bad_table_rejected_at_construction(self, executor):
        from pg_export import Exporter

        with pytest.raises(InvalidIdentifier):
            Exporter(executor, 'evil"table')


class TestTypeMap:
    def test_defaults(self):
        assert field_type_of("char") == "text"
        assert field_type_of("float") == "numeric"

    def test_override(self):
        lookup = make_field_type_lookup({"float": "double precision", "bool": "boolean"})
        assert lookup("float") == "double precision"
        assert lookup("bool") == "boolean"
        assert lookup("char") == "text"
