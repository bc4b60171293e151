"""Command-line interface for gql-scaffold."""

import json
import logging
import shutil
import tarfile
import tempfile
import zipfile
from pathlib import Path

import click
from pydantic import ValidationError

from .core.config import GeneratorConfig
from .core.errors import GeneratorError
from .core.generator import CodeGenerator
from .core.hooks import AddHeaderHook, FilterTypesHook, HookRunner
from .core.parser import SchemaParser
from .core.references import ReferenceLibrary
from .core.registry import TypeRegistry, classify_types

ARCHIVE_SUFFIXES = (".zip", ".tar.gz", ".tgz")


def extract_archive(archive_path: Path) -> str:
    """Extract archive to temp directory. Returns path to extracted content."""
    temp_dir = tempfile.mkdtemp()
    name = archive_path.name.lower()
    try:
        if name.endswith(".zip"):
            with zipfile.ZipFile(archive_path, "r") as zip_ref:
                zip_ref.extractall(temp_dir)
        elif name.endswith((".tar.gz", ".tgz")):
            with tarfile.open(archive_path, "r:gz") as tar_ref:
                # Members may not escape temp_dir or carry special files
                tar_ref.extractall(temp_dir, filter="data")
        else:
            raise ValueError(f"Unsupported archive format: {archive_path.suffix}")
    except (ValueError, tarfile.TarError, zipfile.BadZipFile):
        shutil.rmtree(temp_dir)
        raise
    return temp_dir


def reference_root(extracted: Path) -> Path:
    """Find the graphql-ruby checkout inside an extracted archive.

    Archives of a checkout usually hold a single top-level directory.
    """
    if (extracted / ReferenceLibrary.TYPES_DIR).is_dir():
        return extracted
    for child in sorted(extracted.iterdir()):
        if (child / ReferenceLibrary.TYPES_DIR).is_dir():
            return child
    return extracted


def configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )


def load_config(config_path: str | None, **overrides) -> GeneratorConfig:
    """Load a config file (if any) and apply CLI overrides that were given."""
    try:
        config = GeneratorConfig.from_file(config_path) if config_path else GeneratorConfig()
        updates = {k: v for k, v in overrides.items() if v is not None}
        return GeneratorConfig.model_validate({**config.model_dump(), **updates})
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint="--config") from e


@click.group()
@click.version_option(package_name="gql-scaffold")
def main():
    """Scaffold graphql-ruby code from a GraphQL schema.

    Generates schema classes, implementation stubs, and specs.
    """
    pass


@main.command()
@click.option(
    "--schema",
    "-s",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to introspection JSON or SDL (.graphql, .graphqls, .gql) schema.",
)
@click.option(
    "--reference",
    "-r",
    required=True,
    type=click.Path(exists=True),
    help="Path to a graphql-ruby checkout or archive (.zip, .tar.gz, .tgz).",
)
@click.option(
    "--output",
    "-o",
    default=".",
    show_default=True,
    type=click.Path(file_okay=False),
    help="Output directory for generated code.",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON file with generator settings.",
)
@click.option("--namespace", help="Ruby namespace for generated code (e.g. Spree::GraphQL).")
@click.option("--max-depth", type=click.IntRange(min=1), help="Nesting limit for spec examples.")
@click.option(
    "--no-overwrite",
    is_flag=True,
    help="Keep existing implementation stubs and specs.",
)
@click.option(
    "--template-dir",
    type=click.Path(exists=True, file_okay=False),
    help="Directory with templates overriding the built-in ones.",
)
@click.option("--header", help="Comment header to add to every generated Ruby file.")
@click.option("--exclude-prefix", help="Skip schema types whose name starts with this prefix.")
@click.option(
    "--report",
    "report_path",
    type=click.Path(dir_okay=False),
    help="Write a JSON report of problems and type dependencies.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output.",
)
def generate(
    schema: str,
    reference: str,
    output: str,
    config_path: str | None,
    namespace: str | None,
    max_depth: int | None,
    no_overwrite: bool,
    template_dir: str | None,
    header: str | None,
    exclude_prefix: str | None,
    report_path: str | None,
    verbose: bool,
):
    """Generate graphql-ruby code from a GraphQL schema.

    Examples:

        gql-scaffold generate -s ./schema.json -r ./graphql-ruby

        gql-scaffold generate -s ./schema.graphql -r ./graphql-ruby.tgz -o ./api

        gql-scaffold generate -s ./schema.json -r ./graphql-ruby --no-overwrite
    """
    configure_logging(verbose)
    config = load_config(
        config_path,
        namespace=namespace,
        max_depth=max_depth,
        overwrite=False if no_overwrite else None,
        template_dir=template_dir,
    )

    reference_path = Path(reference).resolve()
    if reference_path.is_file() and not reference_path.name.lower().endswith(ARCHIVE_SUFFIXES):
        raise click.BadParameter(
            f"{reference_path.name} is neither a directory nor a .zip, .tar.gz or .tgz archive",
            param_hint="--reference",
        )
    output_path = Path(output).resolve()
    temp_dir = None

    try:
        # Handle archives
        if reference_path.is_file():
            click.echo(f"Extracting archive {reference_path.name}...")
            try:
                temp_dir = extract_archive(reference_path)
            except (tarfile.TarError, zipfile.BadZipFile) as e:
                raise click.ClickException(f"Cannot extract {reference_path.name}: {e}") from e
            reference_path = reference_root(Path(temp_dir))
            if verbose:
                click.echo(f"  Extracted to: {temp_dir}")

        if verbose:
            click.echo(f"Schema: {schema}")
            click.echo(f"Reference: {reference_path}")
            click.echo(f"Output: {output_path}")

        hooks = HookRunner()
        if exclude_prefix:
            hooks.add_pre_hook(FilterTypesHook(exclude_prefix=exclude_prefix))
        if header:
            hooks.add_post_hook(AddHeaderHook(header))

        click.echo("Parsing schema...")
        ir = SchemaParser(schema).parse_all()

        click.echo("Generating code...")
        generator = CodeGenerator(ir, ReferenceLibrary(reference_path), config, hooks)
        result = generator.generate(str(output_path))
    except GeneratorError as e:
        raise click.ClickException(str(e)) from e
    finally:
        # Clean up temp directory
        if temp_dir:
            shutil.rmtree(temp_dir)

    if verbose and result.skipped:
        click.echo(f"  Kept existing files: {len(result.skipped)}")
    if result.problems:
        click.echo(f"  Unsupported directives: {', '.join(sorted(result.problems.directives))}")

    if report_path:
        Path(report_path).write_text(json.dumps(result.report(), indent=2) + "\n", encoding="utf-8")
        click.echo(f"Report written to {report_path}")

    click.echo(f"Done. Methods: {result.total}. Generated code in {output_path}")


@main.command()
@click.option(
    "--schema",
    "-s",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Path to introspection JSON or SDL schema.",
)
@click.option(
    "--reference",
    "-r",
    required=True,
    type=click.Path(exists=True, file_okay=False),
    help="Path to a graphql-ruby checkout.",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON file with generator settings.",
)
def types(schema: str, reference: str, config_path: str | None):
    """Print how each schema type maps to a generated class.

    Examples:

        gql-scaffold types -s ./schema.json -r ./graphql-ruby
    """
    configure_logging(False)
    config = load_config(config_path)
    try:
        ir = SchemaParser(schema).parse_all()
        registry = TypeRegistry(
            builtin_namespace=config.builtin_namespace,
            base_type_overrides=config.base_type_overrides,
        )
        for name in ReferenceLibrary(reference).builtin_type_names():
            registry.register_builtin(name)
        classified = classify_types(ir, registry)
    except GeneratorError as e:
        raise click.ClickException(str(e)) from e

    for name, mapping in sorted(classified.mappings.items()):
        if mapping.is_builtin:
            continue
        click.echo(f"{name} -> {mapping.target_name} < {mapping.base_type}")


if __name__ == "__main__":
    main()
