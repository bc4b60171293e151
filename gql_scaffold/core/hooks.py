"""Extension points around a generation run.

A pre-generation hook gets the parsed IRSchema before any type is
classified and returns the schema to generate from. A post-generation
hook gets each rendered file (path relative to the output directory and
its text) before it is written, and returns the text to write.

    from gql_scaffold.core.hooks import HookRunner, AddHeaderHook, FilterTypesHook

    hooks = HookRunner()
    hooks.add_pre_hook(FilterTypesHook(exclude_prefix="Legacy"))
    hooks.add_post_hook(AddHeaderHook("# Generated by gql-scaffold"))
    CodeGenerator(ir, reference, hooks=hooks).generate("./api")
"""

from typing import Callable, Protocol, runtime_checkable

from .ir import IRSchema, IRType


@runtime_checkable
class PreGenerateHook(Protocol):
    """Transforms the schema before classification.

    Types removed here are neither classified nor generated, so nothing
    that is kept may still reference them.
    """

    def pre_generate(self, ir: IRSchema) -> IRSchema:
        ...


@runtime_checkable
class PostGenerateHook(Protocol):
    """Transforms one rendered file before it is written.

    Example:
        class StripTrailingSpaces:
            def post_generate(self, filename: str, content: str) -> str:
                return "\\n".join(line.rstrip() for line in content.split("\\n"))
    """

    def post_generate(self, filename: str, content: str) -> str:
        """Return the content to write for ``filename``.

        Args:
            filename: Output-relative path, e.g. "spec/graphql/types/shop_spec.rb"
            content: The rendered file
        """
        ...


class AddHeaderHook:
    """Prepends a comment block to generated Ruby files.

    A leading ``# frozen_string_literal: true`` stays the first line, as
    Ruby only honours the magic comment there.
    """

    MAGIC_COMMENT = "# frozen_string_literal: true\n"

    def __init__(self, header: str, suffixes: tuple[str, ...] = (".rb",)):
        self.header = header.rstrip("\n") + "\n\n"
        self.suffixes = suffixes

    def post_generate(self, filename: str, content: str) -> str:
        if not filename.endswith(self.suffixes):
            return content
        magic = self.MAGIC_COMMENT if content.startswith(self.MAGIC_COMMENT) else ""
        return magic + self.header + content[len(magic):]


class FilterTypesHook:
    """Drops schema types by name before generation.

    Exclusions win over inclusions. The query and mutation roots are never
    dropped, since generation cannot run without them.

    Example:
        # Only generate the checkout types
        hook = FilterTypesHook(include_prefix="Checkout")
    """

    def __init__(
        self,
        exclude_prefix: str | None = None,
        exclude_suffix: str | None = None,
        include_prefix: str | None = None,
        include_suffix: str | None = None,
    ):
        self.rules: list[Callable[[str], bool]] = []
        if exclude_prefix:
            self.rules.append(lambda name: not name.startswith(exclude_prefix))
        if exclude_suffix:
            self.rules.append(lambda name: not name.endswith(exclude_suffix))
        if include_prefix:
            self.rules.append(lambda name: name.startswith(include_prefix))
        if include_suffix:
            self.rules.append(lambda name: name.endswith(include_suffix))

    def keeps(self, ir: IRSchema, ir_type: IRType) -> bool:
        if ir_type.name in (ir.query_type, ir.mutation_type):
            return True
        return all(rule(ir_type.name) for rule in self.rules)

    def pre_generate(self, ir: IRSchema) -> IRSchema:
        ir.types = [t for t in ir.types if self.keeps(ir, t)]
        return ir


class HookRunner:
    """Holds pre- and post-generation hooks and applies them in order."""

    def __init__(self):
        self.pre_hooks: list[PreGenerateHook] = []
        self.post_hooks: list[PostGenerateHook] = []

    def add_pre_hook(self, hook: PreGenerateHook):
        self.pre_hooks.append(hook)

    def add_post_hook(self, hook: PostGenerateHook):
        self.post_hooks.append(hook)

    def run_pre_hooks(self, ir: IRSchema) -> IRSchema:
        for hook in self.pre_hooks:
            ir = hook.pre_generate(ir)
        return ir

    def run_post_hooks(self, filename: str, content: str) -> str:
        for hook in self.post_hooks:
            content = hook.post_generate(filename, content)
        return content
