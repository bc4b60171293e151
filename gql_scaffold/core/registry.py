"""Type registry: maps schema type names to generated constant names.

Classification happens in a first pass over all types so that field
resolution in the second pass never meets an unknown name:

    registry = TypeRegistry()
    for name in library.builtin_type_names():
        registry.register_builtin(name)
    classified = classify_types(schema, registry)
    classified.lookup("Widget").target_name  # "Types::Widget"
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from graphql import TypeKind

from .errors import DuplicateTypeNameError, UnknownTypeError
from .ir import IRSchema, IRType

logger = logging.getLogger(__name__)

CONNECTION_SUFFIX = "Connection"
SKIPPED_SUFFIXES = ("Connection", "Edge")
INTROSPECTION_PREFIX = "__"
NODE_INTERFACE = "Node"

_INPUT_SUFFIX = re.compile(r"Input(V\d+)?$")
_PAYLOAD_SUFFIX = re.compile(r"Payload(V\d+)?$")


class Category(str, Enum):
    """Namespace a generated type is placed in."""
    INTERFACES = "Interfaces"
    INPUTS = "Inputs"
    PAYLOADS = "Payloads"
    TYPES = "Types"
    BUILTIN = "BuiltIn"


# Framework base class per kind, for the categories that do not fix it
BASE_TYPES = {
    TypeKind.ENUM: "Types::BaseEnum",
    TypeKind.SCALAR: "Types::BaseScalar",
    TypeKind.INPUT_OBJECT: "Inputs::BaseInput",
    TypeKind.INTERFACE: "Interfaces::BaseInterface",
    TypeKind.UNION: "Types::BaseUnion",
}
BASE_OBJECT = "Types::BaseObject"
BASE_OBJECT_NODE = "Types::BaseObjectNode"
BASE_PAYLOAD = "Payloads::BasePayload"
BASE_INTERFACE = BASE_TYPES[TypeKind.INTERFACE]


@dataclass(frozen=True)
class NameMapping:
    """Where a schema type lands in the generated code."""
    original_name: str
    target_name: str
    category: Category
    base_type: str | None = None

    @property
    def is_builtin(self) -> bool:
        return self.category is Category.BUILTIN

    @property
    def is_interface(self) -> bool:
        return self.category is Category.INTERFACES

    @property
    def has_implementation(self) -> bool:
        """Whether users get an implementation stub and spec for this type."""
        return self.category in (Category.TYPES, Category.INTERFACES)


def strip_connection(name: str) -> tuple[str, bool]:
    """Remove a trailing ``Connection``; report whether one was present."""
    if name.endswith(CONNECTION_SUFFIX):
        return name[: -len(CONNECTION_SUFFIX)], True
    return name, False


class TypeRegistry:
    """Mutable registry used during the classification pass.

    Call ``finalize()`` once every type is classified to get the
    read-only ``ClassifiedRegistry`` that the resolution pass requires.
    """

    def __init__(
        self,
        builtin_namespace: str = "::GraphQL::Types",
        base_type_overrides: Mapping[str, str] | None = None,
    ):
        self.builtin_namespace = builtin_namespace
        self.base_type_overrides = dict(base_type_overrides or {})
        self._mappings: dict[str, NameMapping] = {}
        self._targets: dict[str, str] = {}

    def register_builtin(self, name: str) -> NameMapping:
        """Register a type the reference library already provides."""
        mapping = NameMapping(
            original_name=name,
            target_name=f"{self.builtin_namespace}::{name}",
            category=Category.BUILTIN,
        )
        self._mappings[name] = mapping
        return mapping

    def get(self, name: str) -> NameMapping | None:
        return self._mappings.get(name)

    def is_builtin(self, name: str) -> bool:
        mapping = self._mappings.get(name)
        return mapping is not None and mapping.is_builtin

    def should_skip(self, ir_type: IRType) -> bool:
        """Check whether a top-level type is left out of generation."""
        name = ir_type.name
        return (
            name.endswith(SKIPPED_SUFFIXES)
            or name.startswith(INTROSPECTION_PREFIX)
            or self.is_builtin(name)
            or ir_type.is_deprecated
        )

    def classify(self, ir_type: IRType) -> NameMapping:
        """Map a schema type to its target name and category.

        Classifying the same name twice returns the first mapping, and
        built-ins are never replaced.
        """
        existing = self._mappings.get(ir_type.name)
        if existing:
            return existing

        category, short_name = self._categorize(ir_type)
        target_name = f"{category.value}::{short_name}"

        previous = self._targets.get(target_name)
        if previous is not None and previous != ir_type.name:
            raise DuplicateTypeNameError(target_name, previous, ir_type.name)

        mapping = NameMapping(
            original_name=ir_type.name,
            target_name=target_name,
            category=category,
            base_type=self._base_type(ir_type, category, target_name),
        )
        self._mappings[ir_type.name] = mapping
        self._targets[target_name] = ir_type.name
        return mapping

    @staticmethod
    def _categorize(ir_type: IRType) -> tuple[Category, str]:
        name = ir_type.name
        if ir_type.kind is TypeKind.INTERFACE:
            return Category.INTERFACES, re.sub(r"Interface$", "", name)
        if ir_type.kind is TypeKind.INPUT_OBJECT or _INPUT_SUFFIX.search(name):
            return Category.INPUTS, _INPUT_SUFFIX.sub(r"\1", name)
        if _PAYLOAD_SUFFIX.search(name):
            return Category.PAYLOADS, _PAYLOAD_SUFFIX.sub(r"\1", name)
        return Category.TYPES, strip_connection(name)[0]

    def _base_type(self, ir_type: IRType, category: Category, target_name: str) -> str:
        if target_name in self.base_type_overrides:
            return self.base_type_overrides[target_name]
        if category is Category.PAYLOADS:
            return BASE_PAYLOAD
        if ir_type.kind in BASE_TYPES:
            return BASE_TYPES[ir_type.kind]
        if ir_type.implements(NODE_INTERFACE):
            return BASE_OBJECT_NODE
        return BASE_OBJECT

    def finalize(self) -> "ClassifiedRegistry":
        """Freeze the registry for the resolution pass."""
        return ClassifiedRegistry(dict(self._mappings))


class ClassifiedRegistry:
    """Read-only registry, only obtainable once classification is complete."""

    def __init__(self, mappings: dict[str, NameMapping]):
        self._mappings = MappingProxyType(mappings)
        self._by_target = MappingProxyType(
            {m.target_name: m for m in mappings.values()}
        )

    def lookup(self, name: str) -> NameMapping:
        """Return the mapping for an original type name.

        Raises:
            UnknownTypeError: If the name was never classified
        """
        try:
            return self._mappings[name]
        except KeyError:
            raise UnknownTypeError(name) from None

    def get(self, name: str) -> NameMapping | None:
        return self._mappings.get(name)

    def by_target(self, target_name: str) -> NameMapping | None:
        return self._by_target.get(target_name)

    def is_builtin(self, name: str) -> bool:
        mapping = self._mappings.get(name)
        return mapping is not None and mapping.is_builtin

    @property
    def mappings(self) -> Mapping[str, NameMapping]:
        return self._mappings

    def __len__(self) -> int:
        return len(self._mappings)


def classify_types(schema: IRSchema, registry: TypeRegistry) -> ClassifiedRegistry:
    """Run the classification pass over every type in the schema."""
    for ir_type in schema.types:
        if registry.should_skip(ir_type):
            continue
        mapping = registry.classify(ir_type)
        logger.debug("Mapped %s to %s.", ir_type.name, mapping.target_name)
    return registry.finalize()
