"""Intermediate Representation (IR) for GraphQL introspection schemas.

This module defines dataclasses that mirror the parts of an introspection
document the generator consumes, in a form independent of the input
format (introspection JSON or SDL).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from graphql import TypeKind


class ChainKind(Enum):
    """Wrapper node kinds in a field's type chain."""
    NON_NULL = "NON_NULL"
    LIST = "LIST"
    NAMED = "NAMED"


@dataclass(frozen=True)
class TypeChainNode:
    """One wrapper in a type chain.

    ``name`` and ``type_kind`` are only set on the terminal NAMED node.
    """
    kind: ChainKind
    name: str | None = None
    type_kind: TypeKind | None = None

    @classmethod
    def named(cls, name: str, type_kind: TypeKind | None = None) -> "TypeChainNode":
        return cls(ChainKind.NAMED, name, type_kind)


NON_NULL = TypeChainNode(ChainKind.NON_NULL)
LIST = TypeChainNode(ChainKind.LIST)


@dataclass
class IRField:
    """Represents a field, argument, or input field.

    ``type_chain`` is ordered outermost wrapper first and ends with
    exactly one NAMED node.
    """
    name: str
    type_chain: list[TypeChainNode]
    arguments: list["IRField"] = field(default_factory=list)
    description: str | None = None
    is_deprecated: bool = False
    default_value: str | None = None  # Arguments only, as a GraphQL literal
    # Runtime-populated by the resolver
    is_array: bool = False
    is_connection: bool = False

    @property
    def named_type(self) -> str:
        """Return the name of the terminal NAMED node."""
        return self.type_chain[-1].name


@dataclass(frozen=True)
class IRReference:
    """A reference to another type from ``interfaces`` or ``possibleTypes``."""
    name: str
    kind: str
    has_of_type: bool = False


@dataclass
class IREnumValue:
    """Represents a single value in a GraphQL enum."""
    name: str
    description: str | None = None
    is_deprecated: bool = False


@dataclass
class IRType:
    """Represents any named type in the schema."""
    name: str
    kind: TypeKind
    fields: list[IRField] | None = None
    input_fields: list[IRField] | None = None
    interfaces: list[IRReference] = field(default_factory=list)
    possible_types: list[IRReference] = field(default_factory=list)
    enum_values: list[IREnumValue] = field(default_factory=list)
    description: str | None = None
    is_deprecated: bool = False

    @property
    def members(self) -> list[IRField]:
        """Return ``fields`` or ``input_fields``, whichever is populated."""
        return self.fields or self.input_fields or []

    def implements(self, interface_name: str) -> bool:
        return any(i.name == interface_name for i in self.interfaces)


@dataclass
class IRDirective:
    """Represents a directive declared by the schema."""
    name: str
    description: str | None = None
    locations: list[str] = field(default_factory=list)
    is_deprecated: bool = False


@dataclass
class IRSchema:
    """Complete intermediate representation of an introspection schema."""
    query_type: str | None = None
    mutation_type: str | None = None
    subscription_type: str | None = None
    directives: list[IRDirective] = field(default_factory=list)
    types: list[IRType] = field(default_factory=list)

    # Anything extra the loader wants to keep around
    metadata: dict[str, Any] = field(default_factory=dict)

    def get_type(self, name: str) -> IRType | None:
        """Look up a type by its original schema name."""
        for ir_type in self.types:
            if ir_type.name == name:
                return ir_type
        return None

    @property
    def types_by_name(self) -> dict[str, IRType]:
        return {t.name: t for t in self.types}

    def root_for(self, type_name: str) -> str:
        """Return the operation keyword used to reach ``type_name``."""
        return "mutation" if type_name == self.mutation_type else "query"
