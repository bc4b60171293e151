"""GraphQL schema loader.

Reads an introspection document (JSON, with or without the
``{"data": {"__schema": ...}}`` envelope) or an SDL file and produces an
IRSchema. SDL is converted to introspection form with graphql-core so both
inputs go through the same conversion.
"""

import json
import logging
import os
from typing import Any

from graphql import GraphQLError, TypeKind, build_schema, introspection_from_schema

from .errors import SchemaShapeError, UnsupportedSchemaError
from .ir import (
    LIST,
    NON_NULL,
    IRDirective,
    IREnumValue,
    IRField,
    IRReference,
    IRSchema,
    IRType,
    TypeChainNode,
)

logger = logging.getLogger(__name__)

SDL_SUFFIXES = (".graphql", ".graphqls", ".gql")

# Keys allowed at the top of ``__schema``. Anything else means the
# introspection format has grown and the loader needs updating.
SCHEMA_KEYS = {
    "queryType",
    "mutationType",
    "subscriptionType",
    "directives",
    "types",
    "description",
}


class SchemaParser:
    """Parses a schema document into IR."""

    def __init__(self, schema_path: str | None = None):
        """Initialize a parser with a path to an introspection or SDL file."""
        self.schema_path = schema_path

    def parse_all(self) -> IRSchema:
        """Parse the schema file and return the complete IR."""
        if not self.schema_path:
            raise ValueError("No schema path given")
        with open(self.schema_path, encoding="utf-8") as f:
            content = f.read()

        if self.schema_path.endswith(SDL_SUFFIXES):
            document = self._introspect_sdl(content)
        else:
            try:
                document = json.loads(content)
            except json.JSONDecodeError as e:
                raise SchemaShapeError(
                    f"{os.path.basename(self.schema_path)} is not valid JSON: {e}"
                ) from e
        return self.parse_document(document)

    @staticmethod
    def _introspect_sdl(content: str) -> dict[str, Any]:
        try:
            schema = build_schema(content)
        except GraphQLError as e:
            raise SchemaShapeError(f"Could not build schema from SDL: {e}") from e
        return dict(introspection_from_schema(schema))

    def parse_document(self, document: dict[str, Any]) -> IRSchema:
        """Convert a decoded introspection document into IR."""
        schema = self._unwrap(document)

        unknown = set(schema) - SCHEMA_KEYS
        if unknown:
            raise UnsupportedSchemaError(
                f"Unrecognized schema element(s) {sorted(unknown)}; "
                "the loader needs to be updated to support them"
            )

        ir = IRSchema(
            query_type=self._entry_name(schema.get("queryType")),
            mutation_type=self._entry_name(schema.get("mutationType")),
            subscription_type=self._entry_name(schema.get("subscriptionType")),
        )
        if schema.get("description"):
            ir.metadata["description"] = schema["description"]

        for directive in schema.get("directives") or []:
            ir.directives.append(self._process_directive(directive))

        types = schema.get("types") or []
        logger.info("Found %s types and %s directives.", len(types), len(ir.directives))
        for type_data in types:
            ir.types.append(self._process_type(type_data))
        return ir

    @staticmethod
    def _unwrap(document: dict[str, Any]) -> dict[str, Any]:
        """Strip the ``data`` / ``__schema`` envelope if present."""
        if not isinstance(document, dict):
            raise SchemaShapeError("Schema document must be a JSON object")
        if "data" in document:
            document = document["data"] or {}
        if "__schema" in document:
            document = document["__schema"] or {}
        if not isinstance(document, dict):
            raise SchemaShapeError("Schema document has no '__schema' object")
        return document

    @staticmethod
    def _entry_name(entry: dict[str, Any] | None) -> str | None:
        if not entry:
            return None
        return entry.get("name")

    @staticmethod
    def _process_directive(data: dict[str, Any]) -> IRDirective:
        return IRDirective(
            name=data["name"],
            description=data.get("description"),
            locations=list(data.get("locations") or []),
            is_deprecated=bool(data.get("isDeprecated")),
        )

    def _process_type(self, data: dict[str, Any]) -> IRType:
        name = data.get("name")
        if not name:
            raise SchemaShapeError(f"Found a type without a name: {data!r}")
        kind = self._type_kind(data.get("kind"), name)

        fields = data.get("fields")
        input_fields = data.get("inputFields")
        if fields and input_fields:
            raise SchemaShapeError(
                f"Type {name} has both 'fields' and 'inputFields'"
            )

        return IRType(
            name=name,
            kind=kind,
            fields=self._process_fields(fields) if fields is not None else None,
            input_fields=(
                self._process_fields(input_fields) if input_fields is not None else None
            ),
            interfaces=[self._process_reference(r) for r in data.get("interfaces") or []],
            possible_types=[
                self._process_reference(r) for r in data.get("possibleTypes") or []
            ],
            enum_values=[
                IREnumValue(
                    name=v["name"],
                    description=v.get("description"),
                    is_deprecated=bool(v.get("isDeprecated")),
                )
                for v in data.get("enumValues") or []
            ],
            description=data.get("description"),
            is_deprecated=bool(data.get("isDeprecated")),
        )

    @staticmethod
    def _type_kind(value: str | None, type_name: str) -> TypeKind:
        try:
            kind = TypeKind[value]
        except (KeyError, TypeError):
            raise UnsupportedSchemaError(
                f"Type {type_name} has unexpected kind {value!r}"
            ) from None
        if kind in (TypeKind.LIST, TypeKind.NON_NULL):
            raise UnsupportedSchemaError(
                f"Type {type_name} has wrapper kind {value} at top level"
            )
        return kind

    def _process_fields(self, field_list: list[dict[str, Any]]) -> list[IRField]:
        """Process field, argument, or input field entries into IRField list."""
        fields = []
        for data in field_list:
            fields.append(
                IRField(
                    name=data["name"],
                    type_chain=self._type_chain(data.get("type"), data["name"]),
                    arguments=self._process_fields(data.get("args") or []),
                    description=data.get("description"),
                    is_deprecated=bool(data.get("isDeprecated")),
                    default_value=data.get("defaultValue"),
                )
            )
        return fields

    @staticmethod
    def _process_reference(data: dict[str, Any]) -> IRReference:
        return IRReference(
            name=data.get("name"),
            kind=data.get("kind"),
            has_of_type=bool(data.get("ofType")),
        )

    @staticmethod
    def _type_chain(type_ref: dict[str, Any] | None, owner: str) -> list[TypeChainNode]:
        """Flatten a nested ``ofType`` reference into an outermost-first chain."""
        chain: list[TypeChainNode] = []
        node = type_ref
        while node:
            kind = node.get("kind")
            if kind == "NON_NULL" and not node.get("name"):
                chain.append(NON_NULL)
            elif kind == "LIST" and not node.get("name"):
                chain.append(LIST)
            else:
                try:
                    type_kind = TypeKind[kind] if kind else None
                except KeyError:
                    raise UnsupportedSchemaError(
                        f"Field {owner} references a type of unexpected kind {kind!r}"
                    ) from None
                chain.append(TypeChainNode.named(node.get("name"), type_kind))
                break
            node = node.get("ofType")

        if not chain or chain[-1].name is None:
            raise SchemaShapeError(
                f"Type reference of {owner} does not end in a named type"
            )
        return chain
