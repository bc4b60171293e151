"""Ruby code generator for GraphQL schemas.

Turns an IRSchema into graphql-ruby schema definitions, implementation
stubs, and specs, rendering the fragments with Jinja2 templates.

Supports custom templates via the template_dir setting:
    config = GeneratorConfig(template_dir="./my_templates")
    generator = CodeGenerator(ir, ReferenceLibrary("./graphql-ruby"), config)
    result = generator.generate("./out")

Template lookup order:
1. User's template directory (if provided)
2. Package default templates
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from graphql import TypeKind
from jinja2 import ChoiceLoader, Environment, FileSystemLoader, PackageLoader, select_autoescape

from .assembler import ArtifactAssembler, Artifacts, Section
from .config import GeneratorConfig
from .dependencies import CycleBreaker, DependencyGraph
from .errors import MissingEntryPointError, Problems, SchemaShapeError, UnsupportedSchemaError
from .expander import ExampleExpander, ExampleField
from .hooks import HookRunner
from .ir import IRField, IRSchema, IRType
from .naming import camel_lower, indent, oneline, ruby_literal, ruby_string, snake_case, underscore
from .query_builder import QueryBuilder
from .references import ReferenceLibrary
from .registry import BASE_OBJECT_NODE, NODE_INTERFACE, ClassifiedRegistry, NameMapping, TypeRegistry, classify_types
from .resolver import TypeChainResolver

logger = logging.getLogger(__name__)

# Arguments graphql-ruby adds to connection fields by itself
PAGINATION_ARGUMENTS = {"first", "last", "before", "after", "pageInfo"}

# Framework base documents: target name -> (superclass, body lines, user module)
BASE_DOCUMENTS = {
    "Types::BaseObject": ("GraphQL::Schema::Object", [], "Types::BaseObject"),
    "Types::BaseObjectNode": (
        "GraphQL::Schema::Object",
        ["global_id_field :id", "implements ::GraphQL::Relay::Node.interface"],
        "Types::BaseObject",
    ),
    "Types::BaseEnum": ("GraphQL::Schema::Enum", [], "Types::BaseEnum"),
    "Types::BaseScalar": ("GraphQL::Schema::Scalar", [], "Types::BaseScalar"),
    "Interfaces::BaseInterface": (None, ["include ::GraphQL::Schema::Interface"], None),
    "Types::BaseUnion": ("GraphQL::Schema::Union", [], "Types::BaseUnion"),
    "Inputs::BaseInput": ("GraphQL::Schema::InputObject", [], None),
    "Payloads::BasePayload": ("GraphQL::Schema::Object", [], None),
}
USER_MODULES = [
    "Types::BaseObject",
    "Types::BaseEnum",
    "Types::BaseScalar",
    "Interfaces::BaseInterface",
    "Types::BaseUnion",
]


@dataclass
class GeneratedFile:
    """A rendered output file, relative to the output directory."""
    path: str
    content: str
    # Implementation stubs and specs are user-editable
    user_editable: bool = False


@dataclass
class GenerationResult:
    """Everything produced by a generation run."""
    files: list[GeneratedFile] = field(default_factory=list)
    problems: Problems = field(default_factory=Problems)
    dependencies: DependencyGraph = field(default_factory=DependencyGraph)
    field_list: dict[str, str | None] = field(default_factory=dict)
    total: int = 0
    written: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    def get(self, path: str) -> GeneratedFile | None:
        for generated in self.files:
            if generated.path == path:
                return generated
        return None

    def report(self) -> dict[str, Any]:
        """Summarize problems and dependencies for inspection."""
        return {
            "total": self.total,
            "problems": self.problems.to_dict(),
            "dependencies": self.dependencies.to_dict(),
            "mutual_dependencies": [list(p) for p in self.dependencies.mutual_pairs()],
            "written": list(self.written),
            "skipped": list(self.skipped),
        }


@dataclass
class _Param:
    name: str
    short: str
    description: str = ""
    default: str | None = None


class CodeGenerator:
    """Generates graphql-ruby code from GraphQL IR.

    Supports custom templates via ``GeneratorConfig.template_dir``.
    Templates in template_dir take precedence over built-in templates.

    Available templates to override:
        - schema.rb.j2: Root schema class
        - base_type.rb.j2: Framework base classes
        - user_module.rb.j2: User modules mixed into base classes
        - schema_header.rb.j2: Schema definition class/module opening
        - implementation_header.rb.j2: Implementation module opening
        - spec_header.rb.j2: Spec file opening
        - field_method.rb.j2: Implementation stub per field
        - field_spec.rb.j2: Spec example per field
        - file_list.rb.j2: Manifest of generated files
        - field_list.md.j2: Checklist of fields

    Example:
        generator = CodeGenerator(
            ir=schema,
            reference=ReferenceLibrary("./graphql-ruby"),
            config=GeneratorConfig(namespace="Shop::GraphQL"),
        )
    """

    def __init__(
        self,
        ir: IRSchema,
        reference: ReferenceLibrary,
        config: GeneratorConfig | None = None,
        hooks: HookRunner | None = None,
    ):
        """Initialize the code generator.

        Args:
            ir: The intermediate representation of the GraphQL schema
            reference: Checkout of graphql-ruby providing built-ins
            config: Naming, layout, and expansion settings
            hooks: Optional pre- and post-generation hooks
        """
        self.ir = ir
        self.reference = reference
        self.config = config or GeneratorConfig()
        self.hooks = hooks or HookRunner()

        # Build template loader - custom templates take precedence
        loaders = []
        if self.config.template_dir:
            template_path = Path(self.config.template_dir)
            if template_path.is_dir():
                loaders.append(FileSystemLoader(str(template_path)))
            else:
                logger.warning("Template directory %s not found, using defaults", template_path)
        loaders.append(PackageLoader("gql_scaffold", "templates"))

        self.env = Environment(
            loader=ChoiceLoader(loaders),
            autoescape=select_autoescape(default_for_string=False),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        # Register custom filters
        self.env.filters["snake_case"] = snake_case
        self.env.filters["underscore"] = underscore
        self.env.filters["camel_lower"] = camel_lower
        self.env.filters["oneline"] = oneline
        self.env.filters["ruby_string"] = ruby_string
        self.env.filters["indent_by"] = indent

        self.namespace = self.config.namespace
        self.schema_namespace = self.config.schema_namespace
        self.registry: ClassifiedRegistry | None = None
        self.resolver: TypeChainResolver | None = None
        self.cycles: CycleBreaker | None = None
        self.expander: ExampleExpander | None = None
        self.queries: QueryBuilder | None = None

    def _render(self, template_name: str, **context: Any) -> str:
        template = self.env.get_template(template_name)
        return template.render(
            namespace=self.namespace,
            schema_namespace=self.schema_namespace,
            **context,
        )

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def classify(self) -> ClassifiedRegistry:
        """Run pass 1: register built-ins and map every type to a target name."""
        registry = TypeRegistry(
            builtin_namespace=self.config.builtin_namespace,
            base_type_overrides=self.config.base_type_overrides,
        )
        for name in self.reference.builtin_type_names():
            registry.register_builtin(name)
        self.registry = classify_types(self.ir, registry)
        return self.registry

    def build(self) -> GenerationResult:
        """Generate every document in memory."""
        self.ir = self.hooks.run_pre_hooks(self.ir)
        self._check_entry_points()

        result = GenerationResult()
        self._check_directives(result.problems)

        registry = self.classify()
        self.resolver = TypeChainResolver(registry, self.schema_namespace)
        self.cycles = CycleBreaker(registry, self.namespace, result.dependencies)
        self.expander = ExampleExpander(self.ir, registry, self.resolver, self.config.max_depth)
        self.queries = QueryBuilder(self.config.max_depth)

        assembler = ArtifactAssembler()
        logger.info("Found total %s types.", len(self.ir.types))
        for ir_type in self.ir.types:
            if registry.get(ir_type.name) is None or registry.is_builtin(ir_type.name):
                continue
            self._generate_type(ir_type, registry.lookup(ir_type.name), assembler, result)

        self._add_static_documents(assembler)
        self._collect_files(assembler, result)
        logger.info("Done. Methods: %s.", result.total)
        return result

    def generate(self, output_dir: str) -> GenerationResult:
        """Generate all code files and write them under ``output_dir``."""
        result = self.build()
        write_files(result, output_dir, overwrite=self.config.overwrite)
        return result

    def _check_entry_points(self):
        if not self.ir.query_type:
            raise MissingEntryPointError("query")
        if not self.ir.mutation_type:
            raise MissingEntryPointError("mutation")
        if self.ir.subscription_type:
            raise UnsupportedSchemaError(
                f"Found a subscription entry point ({self.ir.subscription_type}); "
                "subscriptions cannot be generated yet"
            )

    def _check_directives(self, problems: Problems):
        logger.info("Found %s directives.", len(self.ir.directives))
        for directive in self.ir.directives:
            if directive.is_deprecated:
                continue
            if self.reference.supports_directive(directive.name):
                logger.debug(
                    "Skipping directive '%s' which is a built-in supported by graphql-ruby.",
                    directive.name,
                )
                continue
            logger.debug("Directive '%s' is not supported by graphql-ruby.", directive.name)
            problems.record_directive(directive.name, "not supported by graphql-ruby")

    def _generate_type(
        self,
        ir_type: IRType,
        mapping: NameMapping,
        assembler: ArtifactAssembler,
        result: GenerationResult,
    ):
        """Run pass 2 for one type."""
        artifacts = assembler.artifacts_for(mapping.target_name)
        self._add_interfaces(ir_type, artifacts)
        self._add_headers(ir_type, mapping, artifacts)
        self._add_fields(ir_type, mapping, artifacts, result)
        self._add_possible_types(ir_type, artifacts)
        self._add_enum_values(ir_type, artifacts)
        if ir_type.input_fields:
            self._add_arguments(ir_type.input_fields, mapping.target_name, artifacts, level=1)

        artifacts.schema.close("end\n")
        if artifacts.implementation:
            artifacts.implementation.close("end\n")
        if artifacts.spec:
            artifacts.spec.close("  end\nend\n")

    # ------------------------------------------------------------------
    # Fragments
    # ------------------------------------------------------------------

    def _add_interfaces(self, ir_type: IRType, artifacts: Artifacts):
        for ref in ir_type.interfaces:
            if ref.has_of_type or ref.kind != TypeKind.INTERFACE.name:
                raise SchemaShapeError(
                    f"Type {ir_type.name} implements interface {ref.name}, but that "
                    "reference has an unexpected kind or ofType"
                )
            if ref.name == NODE_INTERFACE:
                # Provided by the BaseObjectNode base class
                continue
            target = self.registry.lookup(ref.name).target_name
            artifacts.schema.add(
                Section.INTERFACES, indent(1, f"implements ::{self.schema_namespace}::{target}")
            )
            if artifacts.implementation:
                artifacts.implementation.add(
                    Section.INTERFACES, indent(1, f"include ::{self.namespace}::{target}")
                )

    def _add_headers(self, ir_type: IRType, mapping: NameMapping, artifacts: Artifacts):
        artifacts.schema.add(
            Section.HEADER,
            self._render("schema_header.rb.j2", mapping=mapping, description=ir_type.description),
        )
        if mapping.has_implementation:
            artifacts.schema.add(
                Section.INCLUDES, indent(1, f"include ::{self.namespace}::{mapping.target_name}")
            )
        if mapping.is_interface:
            artifacts.schema.add(Section.DEF_METHODS, indent(1, "definition_methods do\nend\n"))

        if artifacts.implementation:
            artifacts.implementation.add(
                Section.HEADER, self._render("implementation_header.rb.j2", mapping=mapping)
            )
        if artifacts.spec:
            artifacts.spec.add(
                Section.HEADER,
                self._render(
                    "spec_header.rb.j2",
                    target_name=mapping.target_name,
                    factory_line=self.factory_line(ir_type.name),
                ),
            )

    def _add_fields(
        self,
        ir_type: IRType,
        mapping: NameMapping,
        artifacts: Artifacts,
        result: GenerationResult,
    ):
        if not ir_type.fields:
            return

        for ir_field in ir_type.fields:
            if ir_field.is_deprecated:
                continue
            if ir_field.name == "id" and mapping.base_type == BASE_OBJECT_NODE:
                continue

            rt = self.resolver.resolve(ir_field)
            self.cycles.reference(artifacts.schema, mapping.target_name, rt.target_name)
            returns = self.resolver.short_notation(rt)

            artifacts.schema.add(
                Section.FIELDS,
                indent(
                    1,
                    f"field :{snake_case(ir_field.name)}, "
                    f"{self.resolver.field_declaration(rt)} do\n  description ",
                )
                + ruby_string(ir_field.description),
            )
            params = self._add_arguments(
                ir_field.arguments,
                mapping.target_name,
                artifacts,
                level=2,
                skip=PAGINATION_ARGUMENTS if rt.is_connection else (),
            )
            artifacts.schema.add(Section.FIELDS, indent(1, "end\n"))

            if artifacts.implementation:
                artifacts.implementation.add(
                    Section.FIELDS, indent(1, self._field_method(ir_field, params, returns))
                )
            if artifacts.spec:
                artifacts.spec.add(
                    Section.FIELDS, indent(2, self._field_spec(ir_type, ir_field, params, returns))
                )

            result.total += 1
            key = f"{ir_type.name}.{ir_field.name}"
            if ir_field.arguments:
                result.field_list[key] = "(" + ", ".join(a.name for a in ir_field.arguments) + ")"
            else:
                result.field_list[key] = None

    def _add_arguments(
        self,
        arguments: list[IRField],
        owner: str,
        artifacts: Artifacts,
        level: int,
        skip=(),
    ) -> list[_Param]:
        """Emit ``argument`` lines for field arguments or input fields."""
        params = []
        for arg in arguments:
            if arg.is_deprecated or arg.name in skip:
                continue
            rt = self.resolver.resolve(arg)
            self.cycles.reference(artifacts.schema, owner, rt.target_name)

            default = None
            if arg.default_value is not None or not rt.required:
                default = ruby_literal(arg.default_value)
            default_part = f" default_value: {default}," if default else ""

            name = snake_case(arg.name)
            artifacts.schema.add(
                Section.FIELDS,
                indent(
                    level,
                    f"argument :{name}, {self.resolver.argument_declaration(rt)},"
                    f"{default_part} description: ",
                )
                + ruby_string(arg.description),
            )
            params.append(
                _Param(
                    name=name,
                    short=self.resolver.short_notation(rt),
                    description=oneline(arg.description),
                    default=default,
                )
            )
        return params

    def _field_method(self, ir_field: IRField, params: list[_Param], returns: str) -> str:
        return self._render(
            "field_method.rb.j2",
            field=ir_field,
            description=oneline(ir_field.description),
            params=params,
            returns=returns,
            method_name=snake_case(ir_field.name),
            signature="(" + ", ".join(f"{p.name}:" for p in params) + ")",
        )

    def _field_spec(self, ir_type: IRType, ir_field: IRField, params: list[_Param], returns: str) -> str:
        entry = ExampleField(
            name=ir_field.name,
            value=self.expander.expand_field(ir_field),
            arguments=self.expander.expand_arguments(ir_field),
        )
        root = camel_lower(ir_type.name)
        if ir_type.name == self.ir.mutation_type:
            query = f"      {root} {{" + indent(4, self.queries.build_selection([entry])) + "\n      }"
            result = indent(4, self.queries.build_result([entry]))
        else:
            query = (
                f"      {self.ir.root_for(ir_type.name)} {{\n"
                f"        {root} {{" + indent(5, self.queries.build_selection([entry])) + "\n"
                "        }\n"
                "      }"
            )
            result = (
                f"        {root}: {{\n"
                + indent(5, self.queries.build_result([entry]))
                + "\n        }"
            )

        return self._render(
            "field_spec.rb.j2",
            field=ir_field,
            description=oneline(ir_field.description),
            params=params,
            returns=returns,
            query=query,
            result=result.replace('"', "'"),
        )

    def _add_possible_types(self, ir_type: IRType, artifacts: Artifacts):
        if ir_type.kind is not TypeKind.UNION or not ir_type.possible_types:
            return

        targets = []
        for ref in ir_type.possible_types:
            if ref.has_of_type or ref.kind != TypeKind.OBJECT.name:
                raise SchemaShapeError(
                    f"Type {ir_type.name} has possible type {ref.name}, but that "
                    "reference has an unexpected kind or ofType"
                )
            targets.append(self.registry.lookup(ref.name).target_name)

        for target in targets:
            self.cycles.declare(artifacts.schema, target)
        artifacts.schema.add(
            Section.POSSIBLE_TYPES,
            indent(
                1,
                "possible_types \\\n"
                + ",\n".join(f"  ::{self.schema_namespace}::{t}" for t in targets),
            ),
        )

    def _add_enum_values(self, ir_type: IRType, artifacts: Artifacts):
        for value in ir_type.enum_values:
            if value.is_deprecated:
                continue
            artifacts.schema.add(
                Section.FIELDS,
                indent(1, f"value '{value.name}', ") + ruby_string(value.description),
            )

    def factory_name(self, type_name: str) -> str | None:
        """Return the spec factory for a type; None when it has none."""
        name = snake_case(type_name)
        if name in self.config.factories:
            return self.config.factories[name]
        return name

    def factory_line(self, type_name: str) -> str:
        name = snake_case(type_name)
        factory = self.factory_name(type_name)
        prefix = "" if factory else "#"
        return f"{prefix}let!(:{name}) {{ create(:{factory or name}) }}"

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def _add_static_documents(self, assembler: ArtifactAssembler):
        query = self.registry.lookup(self.ir.query_type).target_name
        mutation = self.registry.lookup(self.ir.mutation_type).target_name
        assembler.add_static(
            "schema/schema",
            self._render("schema.rb.j2", query_type=query, mutation_type=mutation) + "\n",
        )
        for name, (superclass, body, user_module) in BASE_DOCUMENTS.items():
            assembler.add_static(
                f"schema/{underscore(name)}",
                self._render(
                    "base_type.rb.j2",
                    name=name,
                    superclass=superclass,
                    body=body,
                    user_module=user_module,
                )
                + "\n",
            )
        for name in USER_MODULES:
            assembler.add_static(
                underscore(name), self._render("user_module.rb.j2", name=name) + "\n"
            )

    def _collect_files(self, assembler: ArtifactAssembler, result: GenerationResult):
        lib_dir = self.config.lib_dir
        spec_dir = self.config.spec_dir
        files = []
        schema_paths = []
        implementation_paths = []

        for artifacts in assembler:
            path = underscore(artifacts.target_name)
            schema_paths.append(path)
            files.append(GeneratedFile(f"{lib_dir}/schema/{path}.rb", artifacts.schema.render()))
            if artifacts.implementation:
                implementation_paths.append(path)
                files.append(
                    GeneratedFile(
                        f"{lib_dir}/{path}.rb", artifacts.implementation.render(), user_editable=True
                    )
                )
            if artifacts.spec:
                files.append(
                    GeneratedFile(
                        f"{spec_dir}/{path}_spec.rb", artifacts.spec.render(), user_editable=True
                    )
                )

        for path, content in assembler.static_documents.items():
            if path.startswith("schema/"):
                schema_paths.append(path[len("schema/"):])
                files.append(GeneratedFile(f"{lib_dir}/{path}.rb", content))
            else:
                implementation_paths.append(path)
                files.append(GeneratedFile(f"{lib_dir}/{path}.rb", content, user_editable=True))

        files.append(
            GeneratedFile(
                f"{lib_dir}/file_list.rb",
                self._render(
                    "file_list.rb.j2",
                    implementation_paths=implementation_paths,
                    schema_paths=schema_paths,
                )
            )
        )
        files.append(
            GeneratedFile(
                f"{lib_dir}/field_list.md",
                self._render("field_list.md.j2", fields=result.field_list),
            )
        )

        for generated in files:
            generated.content = self.hooks.run_post_hooks(generated.path, generated.content)
        result.files = files


def write_files(result: GenerationResult, output_dir: str, overwrite: bool = True):
    """Write generated files, keeping existing user-editable ones unless ``overwrite``."""
    for generated in result.files:
        full_path = os.path.join(output_dir, generated.path)
        if generated.user_editable and not overwrite and os.path.exists(full_path):
            logger.debug("Not overwriting %s", full_path)
            result.skipped.append(generated.path)
            continue
        os.makedirs(os.path.dirname(full_path), exist_ok=True)
        with open(full_path, "w", encoding="utf-8") as f:
            f.write(generated.content)
        result.written.append(generated.path)
    logger.info("Wrote %s files to %s", len(result.written), output_dir)
