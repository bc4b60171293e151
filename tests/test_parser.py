"""Tests for schema loading."""

import json

import pytest
from graphql import TypeKind

from gql_scaffold.core.errors import SchemaShapeError, UnsupportedSchemaError
from gql_scaffold.core.ir import ChainKind
from gql_scaffold.core.parser import SchemaParser
from schema_builders import (
    arg,
    field,
    list_of,
    named,
    non_null,
    obj,
    parse,
    scalar_ref,
    schema_doc,
    widget_schema,
)


class TestParseDocument:
    """Tests for introspection document conversion."""

    def test_envelope(self):
        ir = parse(widget_schema())
        assert ir.query_type == "QueryRoot"
        assert ir.mutation_type == "Mutation"
        assert ir.subscription_type is None
        assert ir.get_type("Widget").kind is TypeKind.OBJECT

    def test_bare_schema(self):
        document = widget_schema()["data"]["__schema"]
        ir = parse(document)
        assert ir.get_type("Widget") is not None

    def test_schema_key_only(self):
        document = {"__schema": widget_schema()["data"]["__schema"]}
        ir = parse(document)
        assert ir.query_type == "QueryRoot"

    def test_unknown_schema_key(self):
        document = widget_schema()
        document["data"]["__schema"]["extensions"] = {}
        with pytest.raises(UnsupportedSchemaError, match="extensions"):
            parse(document)

    def test_unknown_kind(self):
        document = schema_doc([{"kind": "WIDGET", "name": "Odd"}])
        with pytest.raises(UnsupportedSchemaError, match="Odd"):
            parse(document)

    def test_wrapper_kind_at_top_level(self):
        document = schema_doc([{"kind": "LIST", "name": "Odd"}])
        with pytest.raises(UnsupportedSchemaError):
            parse(document)

    def test_fields_and_input_fields(self):
        bad = obj("Both", [field("a", scalar_ref("String"))])
        bad["inputFields"] = [field("b", scalar_ref("String"))]
        with pytest.raises(SchemaShapeError, match="Both"):
            parse(schema_doc([bad]))

    def test_unterminated_chain(self):
        bad = obj("Broken", [field("a", non_null(None))])
        with pytest.raises(SchemaShapeError, match="a"):
            parse(schema_doc([bad]))

    def test_type_chain_is_outermost_first(self):
        document = schema_doc([
            obj("Tagged", [field("tags", non_null(list_of(non_null(named("Tag")))))]),
        ])
        tags = parse(document).get_type("Tagged").fields[0]
        kinds = [node.kind for node in tags.type_chain]
        assert kinds == [ChainKind.NON_NULL, ChainKind.LIST, ChainKind.NON_NULL, ChainKind.NAMED]
        assert tags.named_type == "Tag"

    def test_arguments_and_defaults(self):
        document = schema_doc([
            obj("QueryRoot", [
                field("items", named("Item"), args=[arg("first", scalar_ref("Int"), default="10")]),
            ]),
        ])
        items = parse(document).get_type("QueryRoot").fields[0]
        assert items.arguments[0].name == "first"
        assert items.arguments[0].default_value == "10"

    def test_directives(self):
        document = widget_schema(directives=[
            {"name": "skip", "locations": ["FIELD"], "isDeprecated": False},
        ])
        ir = parse(document)
        assert [d.name for d in ir.directives] == ["skip"]


class TestParseAll:
    """Tests for reading schema files."""

    def test_json_file(self, tmp_path):
        path = tmp_path / "schema.json"
        path.write_text(json.dumps(widget_schema()))
        ir = SchemaParser(str(path)).parse_all()
        assert ir.get_type("Widget") is not None

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "schema.json"
        path.write_text("{not json")
        with pytest.raises(SchemaShapeError, match="schema.json"):
            SchemaParser(str(path)).parse_all()

    def test_sdl_file(self, tmp_path):
        path = tmp_path / "schema.graphql"
        path.write_text(
            "schema { query: QueryRoot mutation: Mutation }\n"
            "type QueryRoot { widget: Widget }\n"
            "type Mutation { noop: Boolean }\n"
            "type Widget { id: ID! name: String }\n"
        )
        ir = SchemaParser(str(path)).parse_all()
        assert ir.query_type == "QueryRoot"
        widget = ir.get_type("Widget")
        assert [f.name for f in widget.fields] == ["id", "name"]
        assert widget.fields[0].type_chain[0].kind is ChainKind.NON_NULL

    def test_invalid_sdl(self, tmp_path):
        path = tmp_path / "schema.graphql"
        path.write_text("type {")
        with pytest.raises(SchemaShapeError):
            SchemaParser(str(path)).parse_all()

    def test_missing_path(self):
        with pytest.raises(ValueError):
            SchemaParser().parse_all()
