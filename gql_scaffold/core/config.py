"""Generator configuration.

Settings can come from a JSON file and be overridden by CLI options:
    config = GeneratorConfig.from_file("scaffold.json")
    config = config.model_copy(update={"max_depth": 3})
"""

import re
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

_CONSTANT_PATH = re.compile(r"^(?:::)?[A-Z]\w*(?:::[A-Z]\w*)*$")


class GeneratorConfig(BaseModel):
    """Options controlling naming, layout, and example expansion."""

    # Ruby module that owns the generated code, e.g. Spree::GraphQL
    namespace: str = "Spree::GraphQL"
    # Module holding the reference library's built-in scalar classes
    builtin_namespace: str = "::GraphQL::Types"
    # Nesting limit for example expansion and rendering
    max_depth: int = Field(default=5, ge=1)
    # Overwrite implementation stubs and specs that already exist
    overwrite: bool = True
    lib_dir: str = "lib/solidus_graphql_api/graphql"
    spec_dir: str = "spec/graphql"
    # Spec factory name per underscored type name; None comments the factory out
    factories: dict[str, str | None] = Field(
        default_factory=lambda: {"shop": "store", "mutation": None}
    )
    # Explicit base class per target name, e.g. {"Types::Domain": "Types::BaseObject"}
    base_type_overrides: dict[str, str] = Field(default_factory=dict)
    template_dir: str | None = None

    @field_validator("namespace", "builtin_namespace")
    @classmethod
    def _check_constant_path(cls, value: str) -> str:
        if not _CONSTANT_PATH.match(value):
            raise ValueError(f"'{value}' is not a Ruby constant path")
        return value

    @field_validator("lib_dir", "spec_dir")
    @classmethod
    def _check_relative(cls, value: str) -> str:
        if Path(value).is_absolute():
            raise ValueError("output sub-directories must be relative")
        return value.strip("/")

    @property
    def schema_namespace(self) -> str:
        """Module holding the generated schema-definition classes."""
        return f"{self.namespace}::Schema"

    @classmethod
    def from_file(cls, path: str | Path) -> "GeneratorConfig":
        """Load a config from a JSON file."""
        return cls.model_validate_json(Path(path).read_text(encoding="utf-8"))
