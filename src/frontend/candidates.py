"""
Enumerate the nodes a documentation rule would ask about.

A candidate is any function or class declaration, any class method, and any
function or arrow expression assigned to a name. The walk covers the whole
tree, including nested bodies, since the export analysis decides reachability
separately.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional


@dataclass(frozen=True)
class Candidate:
    name: str
    kind: str
    node: Dict[str, Any]
    line: Optional[int]
    column: Optional[int]


_FUNCTION_EXPRESSIONS = {"FunctionExpression", "ArrowFunctionExpression"}


def _position(node: Dict[str, Any]):
    start = (node.get("loc") or {}).get("start") or {}
    return start.get("line"), start.get("column")


def _target_name(node: Any) -> Optional[str]:
    """Dotted name for identifiers and non-computed member chains."""
    if not isinstance(node, dict):
        return None
    if node.get("type") == "Identifier":
        return node.get("name")
    if node.get("type") == "MemberExpression" and not node.get("computed"):
        obj = _target_name(node.get("object"))
        prop = _target_name(node.get("property"))
        if obj and prop:
            return f"{obj}.{prop}"
    return None


def _key_name(node: Any) -> Optional[str]:
    if not isinstance(node, dict):
        return None
    if node.get("type") == "Identifier":
        return node.get("name")
    if node.get("type") == "Literal" and node.get("value") is not None:
        return str(node.get("value"))
    return None


class _CandidateCollector:
    def __init__(self) -> None:
        self.candidates: List[Candidate] = []

    def _add(self, name: Optional[str], kind: str, node: Dict[str, Any]) -> None:
        line, column = _position(node)
        self.candidates.append(
            Candidate(name=name or "<anonymous>", kind=kind, node=node, line=line, column=column)
        )

    def _named_value(self, name: Optional[str], value: Any) -> None:
        if isinstance(value, dict) and value.get("type") in _FUNCTION_EXPRESSIONS:
            self._add(name, "function", value)
            self._visit_children(value)
        else:
            self.visit(value)

    def visit(self, node: Any) -> None:
        if isinstance(node, list):
            for element in node:
                self.visit(element)
            return
        if not isinstance(node, dict):
            return
        handler = getattr(self, f"_visit_{node.get('type')}", None)
        if handler:
            handler(node)
        else:
            self._visit_children(node)

    def _visit_children(self, node: Dict[str, Any]) -> None:
        for key, value in node.items():
            if key in {"loc", "range"}:
                continue
            self.visit(value)

    def _visit_FunctionDeclaration(self, node: Dict[str, Any]) -> None:
        self._add(_target_name(node.get("id")), "function", node)
        self._visit_children(node)

    def _visit_ClassDeclaration(self, node: Dict[str, Any]) -> None:
        self._add(_target_name(node.get("id")), "class", node)
        self._visit_children(node)

    def _visit_MethodDefinition(self, node: Dict[str, Any]) -> None:
        value = node.get("value")
        if isinstance(value, dict):
            self._add(_key_name(node.get("key")), "method", value)
            self._visit_children(value)

    def _visit_AssignmentExpression(self, node: Dict[str, Any]) -> None:
        self.visit(node.get("left"))
        self._named_value(_target_name(node.get("left")), node.get("right"))

    def _visit_VariableDeclarator(self, node: Dict[str, Any]) -> None:
        self._named_value(_target_name(node.get("id")), node.get("init"))

    def _visit_Property(self, node: Dict[str, Any]) -> None:
        self._named_value(_key_name(node.get("key")), node.get("value"))


def collect_candidates(ast: Dict[str, Any]) -> Iterator[Candidate]:
    """Yield documentable nodes of `ast` in source order."""
    collector = _CandidateCollector()
    collector.visit(ast)
    yield from collector.candidates


__all__ = ["Candidate", "collect_candidates"]
