"""
The two walks over a module's top-level statements that populate the graph.

`DeclarationPass` hoists every variable declarator as an empty placeholder so
that top-level declarations referencing each other resolve the same way
regardless of source order. `AssignmentPass` then binds values, declarations,
and export flags. Neither pass descends into function or class bodies, blocks,
or control flow.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import structlog

from .resolver import SymbolResolver
from .symbol_graph import SymbolNode

log = structlog.get_logger("analyzer.binding_passes")


def _identifier_name(node: Any) -> Optional[str]:
    if isinstance(node, dict) and node.get("type") == "Identifier":
        return node.get("name")
    return None


class _TopLevelPass:
    def __init__(self, resolver: SymbolResolver, *, logger: Any = None) -> None:
        self.resolver = resolver
        self.globals = resolver.globals
        self._log = logger if logger is not None else log

    def run(self, program: Dict[str, Any]) -> None:
        self._visit(program)

    def _visit(self, node: Any) -> None:
        if not isinstance(node, dict):
            return
        handler = getattr(self, f"_visit_{node.get('type')}", None)
        if handler is None:
            self._log.debug("passes.statement_skipped", node_type=node.get("type"))
            return
        handler(node)

    def _visit_all(self, nodes: Iterable[Any]) -> None:
        for node in nodes or []:
            self._visit(node)

    def _visit_Program(self, node: Dict[str, Any]) -> None:
        self._visit_all(node.get("body"))

    def _visit_ExpressionStatement(self, node: Dict[str, Any]) -> None:
        self._visit(node.get("expression"))


class DeclarationPass(_TopLevelPass):
    """Registers a global placeholder for every top-level declarator."""

    def _visit_VariableDeclaration(self, node: Dict[str, Any]) -> None:
        window = self.globals.props.get("window")
        for declarator in node.get("declarations") or []:
            identifier = declarator.get("id")
            symbol = self.resolver.bind(identifier, None, self.globals)
            if symbol is None:
                continue
            # `var` declarations also live on the global object.
            if node.get("kind") == "var" and window is not None:
                window.props[identifier["name"]] = symbol

    def _visit_AssignmentExpression(self, node: Dict[str, Any]) -> None:
        return None


class AssignmentPass(_TopLevelPass):
    """Binds values and export flags for top-level statements."""

    def _visit_AssignmentExpression(self, node: Dict[str, Any]) -> None:
        self.resolver.bind(node.get("left"), node.get("right"))

    def _visit_VariableDeclaration(self, node: Dict[str, Any]) -> None:
        self._bind_declarators(node)

    def _visit_FunctionDeclaration(self, node: Dict[str, Any]) -> None:
        identifier = node.get("id")
        if _identifier_name(identifier) is not None:
            self.resolver.bind(identifier, node, self.globals)

    def _visit_ClassDeclaration(self, node: Dict[str, Any]) -> None:
        # The bound value is the class body, so methods stay reachable while
        # the ClassDeclaration node itself does not.
        identifier = node.get("id")
        if _identifier_name(identifier) is not None:
            self.resolver.bind(identifier, node.get("body"), self.globals)

    def _visit_ExportDefaultDeclaration(self, node: Dict[str, Any]) -> None:
        declaration = node.get("declaration")
        self._mark_exported(self.resolver.bind(declaration, declaration))

    def _visit_ExportNamedDeclaration(self, node: Dict[str, Any]) -> None:
        declaration = node.get("declaration")
        if isinstance(declaration, dict):
            if declaration.get("type") == "VariableDeclaration":
                for symbol in self._bind_declarators(declaration):
                    self._mark_exported(symbol)
            else:
                self._mark_exported(self.resolver.bind(declaration, declaration))
        self._visit_all(node.get("specifiers"))

    def _visit_ExportSpecifier(self, node: Dict[str, Any]) -> None:
        self._mark_exported(self.resolver.resolve(node.get("local"), self.globals))

    def _bind_declarators(self, node: Dict[str, Any]) -> List[SymbolNode]:
        symbols = []
        for declarator in node.get("declarations") or []:
            symbol = self.resolver.bind(declarator.get("id"), declarator.get("init"))
            if symbol is not None:
                symbols.append(symbol)
        return symbols

    def _mark_exported(self, symbol: Optional[SymbolNode]) -> None:
        if symbol is None:
            self._log.debug("passes.export_unresolved")
            return
        symbol.exported = True


def run_binding_passes(
    program: Dict[str, Any], resolver: SymbolResolver, *, logger: Any = None
) -> None:
    """Hoist declarations, then bind assignments, over one Program node."""
    DeclarationPass(resolver, logger=logger).run(program)
    AssignmentPass(resolver, logger=logger).run(program)


__all__ = ["AssignmentPass", "DeclarationPass", "run_binding_passes"]
