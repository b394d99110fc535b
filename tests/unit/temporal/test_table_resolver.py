"""Tests for TableNameResolver and identifier quoting."""

from unittest.mock import Mock

import pytest

from temporal_mcp.errors import UnmappedEntityError
from temporal_mcp.mapping import MappingRegistry
from temporal_mcp.mapping import TableMapping
from temporal_mcp.mapping import direct_lookup
from temporal_mcp.temporal import TableNameResolver
from temporal_mcp.temporal import quote_identifier


class TestQuoteIdentifier:
    def test_plain(self):
        assert quote_identifier("Employee") == "[Employee]"

    def test_spaces_kept(self):
        assert quote_identifier("Order Lines") == "[Order Lines]"

    def test_closing_bracket_doubled(self):
        assert quote_identifier("odd]name") == "[odd]]name]"

    def test_injection_stays_inside_brackets(self):
        assert quote_identifier("x]; DROP TABLE t; --") == "[x]]; DROP TABLE t; --]"


class TestTableNameResolver:
    def test_resolve_registered(self):
        registry = MappingRegistry()
        registry.register("employee", "Employee", "dbo")
        resolver = TableNameResolver(registry.lookup)
        assert resolver.resolve("employee") == "[dbo].[Employee]"

    def test_resolve_is_deterministic(self):
        registry = MappingRegistry()
        registry.register("employee", "Employee", "hr")
        resolver = TableNameResolver(registry.lookup)
        assert resolver.resolve("employee") == resolver.resolve("employee") == "[hr].[Employee]"

    def test_escapes_schema_and_table(self):
        resolver = TableNameResolver(direct_lookup)
        assert resolver.resolve(("we]ird", "ta]ble")) == "[we]]ird].[ta]]ble]"

    def test_unmapped(self):
        resolver = TableNameResolver(MappingRegistry().lookup)
        with pytest.raises(UnmappedEntityError) as exc_info:
            resolver.resolve("nobody")
        assert exc_info.value.descriptor == "nobody"

    def test_lookup_error_from_custom_lookup(self):
        lookup = Mock(side_effect=KeyError("employee"))
        resolver = TableNameResolver(lookup)
        with pytest.raises(UnmappedEntityError):
            resolver.resolve("employee")

    def test_custom_lookup_called_with_descriptor(self):
        lookup = Mock(return_value=TableMapping(schema="sales", table="Orders"))
        resolver = TableNameResolver(lookup)
        assert resolver.resolve("orders") == "[sales].[Orders]"
        lookup.assert_called_once_with("orders")
