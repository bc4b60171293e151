"""Name and text helpers shared by the generator modules."""

import re


def snake_case(name: str) -> str:
    """Convert PascalCase or camelCase to snake_case."""
    s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
    return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()


def underscore(name: str) -> str:
    """Convert a ``Category::Name`` constant path into ``category/name``."""
    return "/".join(snake_case(part) for part in name.split("::"))


def camel_lower(name: str) -> str:
    """Lowercase the first character, e.g. ``QueryRoot`` -> ``queryRoot``."""
    return name[:1].lower() + name[1:]


def indent(level: int, text: str) -> str:
    """Indent every non-blank line of ``text`` by two spaces per level.

    Blank lines are emptied and a trailing newline is not kept, so the
    result can be joined with other fragments using ``"\\n"``.
    """
    lines = []
    for line in text.splitlines():
        if not line.strip():
            lines.append("")
        else:
            lines.append("  " * level + line)
    return "\n".join(lines)


def oneline(text: str | None) -> str:
    """Collapse a description into a single line."""
    if not text:
        return ""
    text = text.strip("\n")
    return text.replace("\n", " ").rstrip()


def ruby_string(text: str | None) -> str:
    """Render a description as a Ruby ``%q{}`` literal, or ``nil``."""
    if text is None:
        return "nil"
    escaped = text.replace("\\", "\\\\").replace("{", "\\{").replace("}", "\\}")
    return "%q{" + escaped + "}"


def ruby_literal(value: str | None) -> str:
    """Render a GraphQL default value literal as a Ruby value."""
    if value is None:
        return "nil"
    if re.fullmatch(r"\d+(?:\.\d+)?|false|true", value):
        return value
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"
