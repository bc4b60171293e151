"""Tests for section-ordered documents."""

import pytest

from gql_scaffold.core.assembler import ArtifactAssembler, ArtifactKind, Document, Section
from gql_scaffold.core.errors import AssemblyError


class TestDocument:
    """Tests for Document."""

    def test_renders_in_section_order(self):
        doc = Document("Types::Shop", ArtifactKind.SCHEMA)
        doc.add(Section.FIELDS, "  field :name")
        doc.add(Section.HEADER, "class Shop")
        doc.add(Section.PREAMBLE, "class Other; end\n")
        doc.close("end\n")
        assert doc.render() == "class Other; end\n\nclass Shop\n  field :name\nend\n"

    def test_empty_fragments_are_squashed(self):
        doc = Document("Types::Shop", ArtifactKind.SCHEMA)
        doc.add(Section.HEADER, "class Shop")
        doc.add(Section.INCLUDES, "")
        doc.close("end\n")
        assert doc.render() == "class Shop\nend\n"

    def test_add_once(self):
        doc = Document("Types::Shop", ArtifactKind.SCHEMA)
        assert doc.add_once(Section.PREAMBLE, "decl") is True
        assert doc.add_once(Section.PREAMBLE, "decl") is False
        assert doc.fragments(Section.PREAMBLE) == ["decl"]

    def test_closed_document_rejects_content(self):
        doc = Document("Types::Shop", ArtifactKind.SCHEMA)
        doc.close("end\n")
        with pytest.raises(AssemblyError, match="Types::Shop"):
            doc.add(Section.FIELDS, "  field :late")
        with pytest.raises(AssemblyError):
            doc.add_once(Section.PREAMBLE, "decl")


class TestArtifactAssembler:
    """Tests for ArtifactAssembler."""

    @pytest.mark.parametrize(
        "target,has_implementation",
        [
            ("Types::Shop", True),
            ("Interfaces::Node", True),
            ("Inputs::CheckoutCreate", False),
            ("Payloads::CheckoutCreate", False),
        ],
    )
    def test_artifact_kinds(self, target, has_implementation):
        artifacts = ArtifactAssembler().artifacts_for(target)
        assert artifacts.schema is not None
        assert (artifacts.implementation is not None) is has_implementation
        assert (artifacts.spec is not None) is has_implementation

    def test_first_seen_order(self):
        assembler = ArtifactAssembler()
        assembler.artifacts_for("Types::B")
        assembler.artifacts_for("Types::A")
        assembler.artifacts_for("Types::B")
        assert [a.target_name for a in assembler] == ["Types::B", "Types::A"]
        assert len(assembler) == 2

    def test_static_documents(self):
        assembler = ArtifactAssembler()
        assembler.add_static("schema/schema", "class Schema\nend\n")
        assert assembler.static_documents == {"schema/schema": "class Schema\nend\n"}
