"""Tests for reference library discovery."""

import pytest

from gql_scaffold.core.config import GeneratorConfig
from gql_scaffold.core.errors import GeneratorError, ReferenceLibraryError
from gql_scaffold.core.generator import CodeGenerator
from gql_scaffold.core.references import ReferenceLibrary
from schema_builders import make_reference, parse, widget_schema


class TestBuiltinTypeNames:
    """Tests for finding the built-in types of a checkout."""

    def test_finds_declared_classes(self, reference):
        names = reference.builtin_type_names()
        assert "ID" in names
        assert "String" in names
        # relay.rb only opens modules
        assert "Relay" not in names

    def test_missing_types_dir(self, tmp_path):
        library = ReferenceLibrary(tmp_path)
        with pytest.raises(ReferenceLibraryError) as exc_info:
            library.builtin_type_names()
        assert exc_info.value.types_dir == tmp_path / ReferenceLibrary.TYPES_DIR

    def test_plain_file(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("not a checkout\n")
        with pytest.raises(ReferenceLibraryError, match="No built-in type classes"):
            ReferenceLibrary(path).builtin_type_names()

    def test_no_class_declarations(self, tmp_path):
        root = make_reference(tmp_path / "graphql-ruby", types=())
        with pytest.raises(ReferenceLibraryError):
            ReferenceLibrary(root).builtin_type_names()

    def test_is_generator_error(self):
        assert issubclass(ReferenceLibraryError, GeneratorError)


class TestSupportsDirective:
    """Tests for directive lookup."""

    def test_known(self, reference):
        assert reference.supports_directive("skip")

    def test_unknown(self, reference):
        assert not reference.supports_directive("cacheControl")


def test_generation_stops_without_builtins(tmp_path):
    generator = CodeGenerator(parse(widget_schema()), ReferenceLibrary(tmp_path), GeneratorConfig())
    with pytest.raises(ReferenceLibraryError):
        generator.build()
    assert generator.registry is None
