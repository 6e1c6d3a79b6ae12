"""
Symbol graph for export analysis.

Every binding the analyzer infers is a `SymbolNode`. Nodes point back at the
esprima dict node they were built from and hold named properties that lead to
further nodes. The graph is allowed to contain cycles: the global root aliases
itself as `window`, and user code may assign an object into one of its own
properties.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class SymbolKind(str, Enum):
    UNKNOWN = "unknown"
    LITERAL = "literal"
    OBJECT = "object"


@dataclass(eq=False)
class SymbolNode:
    """A node in the inferred binding graph.

    Equality is identity: two nodes are the same binding only when they are the
    same object, which is what aliasing relies on.
    """

    kind: SymbolKind = SymbolKind.UNKNOWN
    value: Optional[Dict[str, Any]] = None
    props: Dict[str, "SymbolNode"] = field(default_factory=dict)
    exported: bool = False

    @property
    def is_object(self) -> bool:
        return self.kind is SymbolKind.OBJECT

    @property
    def is_literal(self) -> bool:
        return self.kind is SymbolKind.LITERAL

    def literal_key(self) -> Optional[str]:
        """Property key carried by a literal node, or None when it has none."""
        if not self.is_literal or not isinstance(self.value, dict):
            return None
        raw = self.value.get("value")
        if isinstance(raw, bool) or raw is None:
            return None
        if isinstance(raw, float) and raw.is_integer():
            return str(int(raw))
        if isinstance(raw, (str, int, float)):
            key = str(raw)
            return key or None
        return None

    def __repr__(self) -> str:
        node_type = self.value.get("type") if isinstance(self.value, dict) else None
        flag = " exported" if self.exported else ""
        return (
            f"<SymbolNode {self.kind.value} {node_type or '-'} "
            f"props={sorted(self.props)}{flag}>"
        )


def placeholder() -> SymbolNode:
    return SymbolNode()


def object_symbol(node: Optional[Dict[str, Any]] = None) -> SymbolNode:
    return SymbolNode(kind=SymbolKind.OBJECT, value=node)


def literal_symbol(node: Dict[str, Any]) -> SymbolNode:
    return SymbolNode(kind=SymbolKind.LITERAL, value=node)


def create_global_root(*, module_exports: bool = True, window: bool = True) -> SymbolNode:
    """
    Build the root of a fresh symbol graph.

    Args:
        module_exports: Seed `module.exports` and alias it as `exports`.
        window: Alias the root to itself as `window`.
    """
    root = placeholder()
    if module_exports:
        module = object_symbol()
        module.props["exports"] = object_symbol()
        root.props["module"] = module
        root.props["exports"] = module.props["exports"]
    if window:
        root.props["window"] = root
    return root


__all__ = [
    "SymbolKind",
    "SymbolNode",
    "create_global_root",
    "literal_symbol",
    "object_symbol",
    "placeholder",
]
