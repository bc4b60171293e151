"""Example value expansion.

Expands a schema type into a tree describing an example selection and
response, which the query builder renders into spec queries and
expected results. Recursive types are cut with a sentinel
(``"Product..."``) and deep trees are truncated at a depth limit.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field

from graphql import TypeKind

from .errors import UnknownTypeError
from .ir import IRField, IRSchema, IRType
from .registry import ClassifiedRegistry, strip_connection
from .resolver import TypeChainResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExampleLiteral:
    """A leaf value, rendered verbatim (e.g. ``"String"``, ``Int``, ``true``)."""
    text: str


@dataclass(frozen=True)
class ExampleSentinel:
    """Marks a type that is already being expanded higher up."""
    type_name: str

    @property
    def text(self) -> str:
        return f'"{self.type_name}..."'


@dataclass(frozen=True)
class ExampleTruncated:
    """Marks an object past the depth limit."""


@dataclass
class ExampleField:
    name: str
    value: "ExampleValue"
    arguments: list["ExampleField"] | None = None


@dataclass
class ExampleObject:
    fields: list[ExampleField] = field(default_factory=list)


@dataclass
class ExampleList:
    item: "ExampleValue"


@dataclass
class ExampleConnection:
    """A relay connection around ``node``."""
    node: "ExampleValue"

    def as_object(self) -> ExampleObject:
        """Spell out the edges and page info a connection responds with."""
        page_info = ExampleObject([
            ExampleField("hasNextPage", ExampleLiteral("true")),
            ExampleField("hasPreviousPage", ExampleLiteral("false")),
        ])
        return ExampleObject([
            ExampleField("edges", ExampleList(ExampleObject([ExampleField("node", self.node)]))),
            ExampleField("pageInfo", page_info),
        ])


ExampleValue = (
    ExampleLiteral | ExampleSentinel | ExampleTruncated | ExampleObject | ExampleList | ExampleConnection
)

LEAF_VALUES = (ExampleLiteral, ExampleSentinel)


class RecursionGuard:
    """Tracks the type names on the current expansion path."""

    def __init__(self):
        self._active: set[str] = set()

    def is_active(self, name: str) -> bool:
        return name in self._active

    @contextmanager
    def hold(self, name: str) -> Iterator[None]:
        self._active.add(name)
        try:
            yield
        finally:
            self._active.discard(name)


class ExampleExpander:
    """Builds example trees for types and field arguments.

    Example:
        expander = ExampleExpander(schema, registry, resolver, max_depth=5)
        tree = expander.expand("Widget")
    """

    def __init__(
        self,
        schema: IRSchema,
        registry: ClassifiedRegistry,
        resolver: TypeChainResolver,
        max_depth: int = 5,
    ):
        self.types_by_name = schema.types_by_name
        self.registry = registry
        self.resolver = resolver
        self.max_depth = max_depth

    def _get_type(self, name: str) -> IRType | None:
        ir_type = self.types_by_name.get(name)
        if ir_type is None and not self.registry.is_builtin(name):
            raise UnknownTypeError(name)
        return ir_type

    def expand(self, type_name: str, guard: RecursionGuard | None = None, depth: int = 0) -> ExampleValue:
        """Expand a named type into an example tree."""
        guard = guard or RecursionGuard()
        ir_type = self._get_type(type_name)
        if ir_type is None:
            return ExampleLiteral(f'"{type_name}"')
        if guard.is_active(ir_type.name):
            return ExampleSentinel(ir_type.name)

        if ir_type.kind is TypeKind.SCALAR:
            return ExampleLiteral(f'"{ir_type.name}"')
        if ir_type.kind is TypeKind.ENUM:
            return ExampleLiteral('"' + " | ".join(v.name for v in ir_type.enum_values) + '"')
        if ir_type.kind is TypeKind.UNION:
            return ExampleLiteral(" | ".join(t.name for t in ir_type.possible_types))

        if depth >= self.max_depth:
            return ExampleTruncated()

        with guard.hold(ir_type.name):
            return ExampleObject([
                ExampleField(
                    name=member.name,
                    value=self.expand_field(member, guard, depth + 1),
                    arguments=self.expand_arguments(member, guard, depth + 1),
                )
                for member in ir_type.members
            ])

    def expand_field(self, member: IRField, guard: RecursionGuard | None = None, depth: int = 0) -> ExampleValue:
        """Expand a field's type, wrapping it in a connection or list."""
        rt = self.resolver.resolve(member)
        value = self.expand(rt.name, guard, depth)
        if rt.is_connection:
            value = ExampleConnection(value)
        if rt.is_array:
            value = ExampleList(value)
        return value

    def expand_arguments(
        self, member: IRField, guard: RecursionGuard | None = None, depth: int = 0
    ) -> list[ExampleField] | None:
        """Build example values for a field's arguments, or None without any."""
        if not member.arguments:
            return None
        guard = guard or RecursionGuard()
        arguments = []
        for arg in member.arguments:
            base, _ = strip_connection(arg.named_type)
            rt = self.resolver.resolve(arg)
            if base in ("Int", "Float"):
                value = ExampleLiteral(base)
            elif base == "Boolean":
                value = ExampleLiteral(arg.default_value or "Boolean")
            elif base == "String":
                value = ExampleLiteral('""')
            else:
                value = self.expand(base, guard, depth)
            if rt.is_array:
                value = ExampleList(value)
            arguments.append(ExampleField(arg.name, value))
        return arguments
