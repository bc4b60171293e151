"""Query builder for generated specs.

Renders example trees from the expander into a GraphQL selection text
and into the Ruby hash literal a spec expects as the response.
"""

from .expander import (
    LEAF_VALUES,
    ExampleConnection,
    ExampleField,
    ExampleList,
    ExampleObject,
    ExampleTruncated,
    ExampleValue,
)
from .naming import indent

ELLIPSIS = "# ..."


def _unwrap(value: ExampleValue) -> ExampleValue:
    """Strip lists and spell out connections; queries select through both."""
    if isinstance(value, ExampleList):
        value = value.item
    if isinstance(value, ExampleConnection):
        value = value.as_object()
    return value


def _is_multiline(text: str) -> bool:
    return len(text.splitlines()) > 1


class QueryBuilder:
    """Builds spec query and result strings from example trees.

    Nesting deeper than ``max_depth`` levels is replaced with ``# ...``.

    Example:
        builder = QueryBuilder(max_depth=5)
        builder.build_selection([ExampleField("widget", tree)])
        # "\\nwidget {\\n  id\\n  name\\n}"
    """

    def __init__(self, max_depth: int = 5):
        self.max_depth = max_depth

    def build_selection(self, entries: list[ExampleField], level: int = 1) -> str:
        """Render a selection set, one field per line, each preceded by a newline."""
        text = ""
        for entry in entries:
            key = entry.name + self._argument_suffix(entry.arguments)
            value = _unwrap(entry.value)
            if isinstance(value, LEAF_VALUES):
                text += f"\n{key}"
                continue
            if isinstance(value, ExampleObject) and level < self.max_depth:
                inner = self.build_selection(value.fields, level + 1)
            else:
                inner = f"\n{ELLIPSIS}"
            text += f"\n{key} {{" + indent(1, inner) + "\n}"
        return text

    def _argument_suffix(self, arguments: list[ExampleField] | None) -> str:
        if not arguments:
            return ""
        text = self.build_arguments(arguments)
        if _is_multiline(text):
            return "(\n" + indent(1, text) + "\n)"
        return f"({text})"

    def build_arguments(self, entries: list[ExampleField]) -> str:
        """Render ``name: value`` argument pairs.

        A single pair stays on one line; several are put one per line.
        """
        pairs = []
        for entry in entries:
            key = entry.name
            if entry.arguments:
                key += f"({self.build_arguments(entry.arguments)})"
            pairs.append(f"{key}: {self._argument_value(entry.value)}")
        if len(pairs) < 2:
            return ", ".join(pairs)
        return ",\n".join(pairs)

    def _argument_value(self, value: ExampleValue) -> str:
        if isinstance(value, ExampleList):
            return "[" + self._argument_value(value.item) + "]"
        if isinstance(value, ExampleConnection):
            value = value.as_object()
        if isinstance(value, ExampleObject):
            inner = self.build_arguments(value.fields)
            if _is_multiline(inner):
                return "{\n" + indent(1, inner) + "\n}"
            return "{" + inner + "}"
        if isinstance(value, ExampleTruncated):
            return "{...}"
        return value.text

    def build_result(self, entries: list[ExampleField], level: int = 1) -> str:
        """Render the expected response as Ruby hash entries.

        Every entry ends with ``,`` and a newline, so the text can be
        embedded in a surrounding hash literal as-is.
        """
        text = ""
        for entry in entries:
            name = entry.name
            value = entry.value
            if isinstance(value, ExampleConnection):
                value = value.as_object()

            if isinstance(value, LEAF_VALUES):
                text += f"{name}: {value.text},\n"
            elif isinstance(value, ExampleList):
                item = _unwrap(value.item)
                if isinstance(item, LEAF_VALUES):
                    text += f"{name}: [{item.text}],\n"
                else:
                    inner = self._nested_result(item, level)
                    text += f"{name}: [{{\n" + indent(1, inner) + "\n}],\n"
            else:
                inner = self._nested_result(value, level)
                text += f"{name}: {{\n" + indent(1, inner) + "\n},\n"
        return text

    def _nested_result(self, value: ExampleValue, level: int) -> str:
        if isinstance(value, ExampleObject) and level < self.max_depth:
            return self.build_result(value.fields, level + 1)
        return ELLIPSIS
