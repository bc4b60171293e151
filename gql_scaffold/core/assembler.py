"""Artifact assembly.

Each generated type produces up to three documents: a schema definition,
an implementation stub, and a spec. Fragments are collected per section
and rendered in section order, so passes can contribute to a document in
any order:

    doc = Document("Types::Widget", ArtifactKind.SCHEMA)
    doc.add(Section.FIELDS, "  field :name, ...")
    doc.add(Section.HEADER, "class ... < ...")
    doc.close("end\\n")
    doc.render()  # header, then fields, then "end"
"""

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum, IntEnum

from .errors import AssemblyError


class Section(IntEnum):
    """Ordered slots within a document."""
    PREAMBLE = 5
    HEADER = 10
    INTERFACES = 12
    POSSIBLE_TYPES = 15
    INCLUDES = 20
    DEF_METHODS = 25
    FIELDS = 30
    POSTAMBLE = 50


class ArtifactKind(Enum):
    SCHEMA = "schema"
    IMPLEMENTATION = "implementation"
    SPEC = "spec"


@dataclass
class Document:
    """Section-ordered fragments of one generated file."""
    owner: str
    kind: ArtifactKind
    sections: dict[Section, list[str]] = field(default_factory=lambda: defaultdict(list))
    closed: bool = False

    def _check_open(self):
        if self.closed:
            raise AssemblyError(f"{self.kind.value} document for {self.owner} is already closed")

    def add(self, section: Section, fragment: str):
        self._check_open()
        self.sections[section].append(fragment)

    def add_once(self, section: Section, fragment: str) -> bool:
        """Add a fragment unless an identical one is already in the section."""
        self._check_open()
        if fragment in self.sections[section]:
            return False
        self.sections[section].append(fragment)
        return True

    def close(self, postamble: str):
        """Append the closing fragment; no content may follow it."""
        self.add(Section.POSTAMBLE, postamble)
        self.closed = True

    def fragments(self, section: Section) -> list[str]:
        return list(self.sections.get(section, []))

    def render(self) -> str:
        parts = []
        for section in sorted(self.sections):
            parts.extend(f for f in self.sections[section] if f)
        return "\n".join(parts)


@dataclass
class Artifacts:
    """The documents produced for one type."""
    target_name: str
    schema: Document
    implementation: Document | None = None
    spec: Document | None = None


class ArtifactAssembler:
    """Creates and holds documents per target type, in first-seen order."""

    def __init__(self):
        self._artifacts: dict[str, Artifacts] = {}
        self._static: dict[str, str] = {}

    @staticmethod
    def kinds_for(target_name: str) -> tuple[ArtifactKind, ...]:
        """Types and interfaces get implementation stubs and specs."""
        if target_name.startswith(("Types::", "Interfaces::")):
            return (ArtifactKind.SCHEMA, ArtifactKind.IMPLEMENTATION, ArtifactKind.SPEC)
        return (ArtifactKind.SCHEMA,)

    def artifacts_for(self, target_name: str) -> Artifacts:
        """Return the documents for a type, creating them on first use."""
        if target_name not in self._artifacts:
            kinds = self.kinds_for(target_name)
            self._artifacts[target_name] = Artifacts(
                target_name=target_name,
                schema=Document(target_name, ArtifactKind.SCHEMA),
                implementation=(
                    Document(target_name, ArtifactKind.IMPLEMENTATION)
                    if ArtifactKind.IMPLEMENTATION in kinds else None
                ),
                spec=Document(target_name, ArtifactKind.SPEC) if ArtifactKind.SPEC in kinds else None,
            )
        return self._artifacts[target_name]

    def add_static(self, path: str, content: str):
        """Register a document with fixed content, keyed by relative path."""
        self._static[path] = content

    @property
    def static_documents(self) -> dict[str, str]:
        return dict(self._static)

    def __iter__(self):
        return iter(self._artifacts.values())

    def __len__(self) -> int:
        return len(self._artifacts)
