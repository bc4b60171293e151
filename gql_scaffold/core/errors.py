"""Errors raised by the schema compiler.

Every ``GeneratorError`` is fatal: the run stops and the caller decides
how to exit. Problems that should not stop generation are collected in
``Problems`` instead.
"""

from dataclasses import dataclass, field
from pathlib import Path


class GeneratorError(Exception):
    """Base class for fatal generation errors."""


class DuplicateTypeNameError(GeneratorError):
    """Two distinct schema types classify to the same target name."""

    def __init__(self, target_name: str, first: str, second: str):
        self.target_name = target_name
        self.first = first
        self.second = second
        super().__init__(
            f"Types '{first}' and '{second}' both map to '{target_name}'. "
            "Rename one of them or add an explicit mapping."
        )


class UnknownTypeError(GeneratorError):
    """A type name was looked up before (or without) being classified."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"No name mapping for type '{name}'")


class UnsupportedSchemaError(GeneratorError):
    """The schema uses a construct the generator does not handle."""


class SchemaShapeError(GeneratorError):
    """The schema document is structurally malformed."""


class MissingEntryPointError(GeneratorError):
    """A required query or mutation entry point is absent."""

    def __init__(self, entry_point: str):
        self.entry_point = entry_point
        super().__init__(f"Did not find name of {entry_point} entry in schema")


class AssemblyError(GeneratorError):
    """Content was added to a document that is already closed."""


class ReferenceLibraryError(GeneratorError):
    """The reference checkout does not declare any built-in types."""

    def __init__(self, types_dir: Path):
        self.types_dir = types_dir
        super().__init__(
            f"No built-in type classes found under {types_dir}. "
            "Expected a graphql-ruby checkout."
        )


@dataclass
class Problems:
    """Non-fatal findings recorded during generation.

    Nothing here affects the generated output; it is kept for inspection
    through the generation report.
    """
    directives: dict[str, str] = field(default_factory=dict)

    def record_directive(self, name: str, reason: str):
        self.directives[name] = reason

    def __bool__(self) -> bool:
        return bool(self.directives)

    def to_dict(self) -> dict[str, dict[str, str]]:
        return {"directives": dict(self.directives)}
