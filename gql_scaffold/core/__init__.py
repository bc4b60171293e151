"""Core modules for graphql-ruby code generation."""

from .assembler import ArtifactAssembler, ArtifactKind, Document, Section
from .config import GeneratorConfig
from .dependencies import CycleBreaker, DependencyGraph
from .errors import (
    AssemblyError,
    DuplicateTypeNameError,
    GeneratorError,
    MissingEntryPointError,
    Problems,
    ReferenceLibraryError,
    SchemaShapeError,
    UnknownTypeError,
    UnsupportedSchemaError,
)
from .expander import ExampleExpander, RecursionGuard
from .generator import CodeGenerator, GeneratedFile, GenerationResult, write_files
from .hooks import (
    AddHeaderHook,
    FilterTypesHook,
    HookRunner,
    PostGenerateHook,
    PreGenerateHook,
)
from .ir import (
    IRDirective,
    IREnumValue,
    IRField,
    IRReference,
    IRSchema,
    IRType,
    TypeChainNode,
)
from .parser import SchemaParser
from .query_builder import QueryBuilder
from .references import ReferenceLibrary
from .registry import Category, ClassifiedRegistry, NameMapping, TypeRegistry, classify_types
from .resolver import ResolvedType, TypeChainResolver

__all__ = [
    # Errors
    "GeneratorError",
    "DuplicateTypeNameError",
    "UnknownTypeError",
    "UnsupportedSchemaError",
    "SchemaShapeError",
    "MissingEntryPointError",
    "AssemblyError",
    "ReferenceLibraryError",
    "Problems",
    # Hooks
    "PreGenerateHook",
    "PostGenerateHook",
    "AddHeaderHook",
    "FilterTypesHook",
    "HookRunner",
    # IR types
    "IRDirective",
    "IREnumValue",
    "IRField",
    "IRReference",
    "IRSchema",
    "IRType",
    "TypeChainNode",
    # Parser
    "SchemaParser",
    "ReferenceLibrary",
    # Registry and resolution
    "Category",
    "NameMapping",
    "TypeRegistry",
    "ClassifiedRegistry",
    "classify_types",
    "ResolvedType",
    "TypeChainResolver",
    "DependencyGraph",
    "CycleBreaker",
    # Examples
    "ExampleExpander",
    "RecursionGuard",
    "QueryBuilder",
    # Assembly and generation
    "ArtifactAssembler",
    "ArtifactKind",
    "Document",
    "Section",
    "GeneratorConfig",
    "CodeGenerator",
    "GeneratedFile",
    "GenerationResult",
    "write_files",
]
