"""Type dependency tracking and cycle breaking.

Ruby class bodies are evaluated top to bottom, so when two generated
types refer to each other one of them must be declared before the other
is loaded. Each time a reference closes a two-type cycle, the referring
type's schema file gets a forward declaration of the referenced type.
"""

import logging
from collections import defaultdict

from .assembler import Document, Section
from .registry import ClassifiedRegistry

logger = logging.getLogger(__name__)


class DependencyGraph:
    """Directed "type A references type B" edges between target names."""

    def __init__(self):
        self._edges: dict[str, set[str]] = defaultdict(set)

    def record(self, from_type: str, to_type: str) -> bool:
        """Add an edge and report whether it closes a two-type cycle."""
        self._edges[from_type].add(to_type)
        return from_type != to_type and from_type in self._edges.get(to_type, ())

    def depends_on(self, from_type: str, to_type: str) -> bool:
        return to_type in self._edges.get(from_type, ())

    def mutual_pairs(self) -> list[tuple[str, str]]:
        """Return each pair of mutually dependent types once, sorted."""
        pairs = set()
        for a, targets in self._edges.items():
            for b in targets:
                if a != b and self.depends_on(b, a):
                    pairs.add(tuple(sorted((a, b))))
        return sorted(pairs)

    def to_dict(self) -> dict[str, list[str]]:
        return {k: sorted(v) for k, v in sorted(self._edges.items())}


class CycleBreaker:
    """Records references between types and emits forward declarations."""

    def __init__(self, registry: ClassifiedRegistry, namespace: str, graph: DependencyGraph | None = None):
        self.registry = registry
        self.schema_namespace = f"{namespace}::Schema"
        self.graph = graph or DependencyGraph()

    def forward_declaration(self, target_name: str) -> str:
        """Render an empty declaration that makes ``target_name`` loadable."""
        mapping = self.registry.by_target(target_name)
        if mapping is not None and mapping.is_interface:
            return f"module {self.schema_namespace}::{target_name}; end\n"
        base = mapping.base_type if mapping is not None else None
        return (
            f"class {self.schema_namespace}::{target_name} < "
            f"{self.schema_namespace}::{base}; end\n"
        )

    def declare(self, document: Document, target_name: str):
        """Add a forward declaration of ``target_name`` to a schema document."""
        document.add_once(Section.PREAMBLE, self.forward_declaration(target_name))

    def reference(self, document: Document, from_type: str, to_type: str):
        """Record that ``from_type`` refers to ``to_type``.

        Built-in types are ignored since the reference library defines them.
        """
        mapping = self.registry.by_target(to_type)
        if mapping is None or mapping.is_builtin:
            return
        if self.graph.record(from_type, to_type):
            logger.info(
                "Class %s depends on %s and vice-versa. Will handle accordingly.",
                from_type,
                to_type,
            )
            self.declare(document, to_type)
