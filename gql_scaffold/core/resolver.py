"""Resolution of field type chains into target type declarations.

A field's type is a chain of NON_NULL / LIST wrappers around a named
type. The resolver walks it from the named type outwards and renders
the three notations the generated code needs:

    resolver = TypeChainResolver(classified, schema_namespace="Spree::GraphQL::Schema")
    rt = resolver.resolve(field)          # [Widget!]!
    resolver.field_declaration(rt)        # "[::Spree::GraphQL::Schema::Types::Widget], null: false"
    resolver.short_notation(rt)           # "[Types::Widget!]!"
"""

from dataclasses import dataclass

from .errors import UnsupportedSchemaError
from .ir import ChainKind, IRField
from .registry import ClassifiedRegistry, strip_connection

CONNECTION_METHOD = ".connection_type"


@dataclass
class ResolvedType:
    """A field type after resolution.

    ``name`` is the schema name with any ``Connection`` suffix removed.
    ``item_nullable`` only has meaning when ``is_array`` is true.
    """
    name: str
    target_name: str
    nullable: bool = True
    is_array: bool = False
    item_nullable: bool = True
    is_connection: bool = False

    @property
    def required(self) -> bool:
        return not self.nullable


class TypeChainResolver:
    """Turns type chains into declarations using a classified registry."""

    def __init__(self, registry: ClassifiedRegistry, schema_namespace: str = "Spree::GraphQL::Schema"):
        self.registry = registry
        self.schema_namespace = schema_namespace

    def resolve(self, field: IRField) -> ResolvedType:
        """Resolve a field's chain and mark it as array and/or connection.

        Raises:
            UnknownTypeError: If the named type was never classified
            UnsupportedSchemaError: For lists nested in lists or lists of
                connections
        """
        resolved: ResolvedType | None = None
        for node in reversed(field.type_chain):
            if node.kind is ChainKind.NAMED:
                name, is_connection = strip_connection(node.name)
                mapping = self.registry.lookup(name)
                resolved = ResolvedType(
                    name=name,
                    target_name=mapping.target_name,
                    is_connection=is_connection,
                )
            elif node.kind is ChainKind.NON_NULL:
                resolved.nullable = False
            elif resolved.is_array:
                raise UnsupportedSchemaError(
                    f"Field '{field.name}' has a list of lists, which cannot be generated"
                )
            else:
                resolved.is_array = True
                resolved.item_nullable = resolved.nullable
                resolved.nullable = True

        if resolved.is_connection and resolved.is_array:
            raise UnsupportedSchemaError(
                f"Field '{field.name}' is a list of connections, which cannot be generated"
            )
        field.is_array = resolved.is_array
        field.is_connection = resolved.is_connection
        return resolved

    def qualify(self, target_name: str) -> str:
        """Make a target name absolute unless it already is."""
        if target_name.startswith("::"):
            return target_name
        return f"::{self.schema_namespace}::{target_name}"

    def _type_reference(self, rt: ResolvedType) -> str:
        reference = self.qualify(rt.target_name)
        if rt.is_connection:
            reference += CONNECTION_METHOD
        return reference

    def field_declaration(self, rt: ResolvedType) -> str:
        """Render the type part of a ``field`` definition.

        Example:
            "[::S::Types::Tag, null: true], null: false"
        """
        reference = self._type_reference(rt)
        null = "true" if rt.nullable else "false"
        if not rt.is_array:
            return f"{reference}, null: {null}"
        if rt.item_nullable:
            return f"[{reference}, null: true], null: {null}"
        return f"[{reference}], null: {null}"

    def argument_declaration(self, rt: ResolvedType) -> str:
        """Render the type part of an ``argument`` definition.

        Argument lists cannot express item nullability, so only the outer
        level is marked.
        """
        if rt.is_connection:
            raise UnsupportedSchemaError(
                f"Connection type '{rt.name}Connection' used as an argument"
            )
        reference = self.qualify(rt.target_name)
        required = "true" if rt.required else "false"
        if rt.is_array:
            return f"[{reference}], required: {required}"
        return f"{reference}, required: {required}"

    def short_notation(self, rt: ResolvedType) -> str:
        """Render a GraphQL-style short form such as ``[Types::Tag!]!``."""
        reference = self._type_reference(rt)
        for prefix in (f"::{self.schema_namespace}::", "::GraphQL::"):
            if reference.startswith(prefix):
                reference = reference[len(prefix):]
                break
        if rt.is_array:
            reference = f"[{reference}{'' if rt.item_nullable else '!'}]"
        return reference + ("" if rt.nullable else "!")
