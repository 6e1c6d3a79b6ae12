"""
Resolution of esprima expression nodes against the symbol graph.

`SymbolResolver.resolve` is the read side: it turns an expression into the
`SymbolNode` it denotes, or None when the expression cannot be followed.
`SymbolResolver.bind` is the write side: it stores the resolved value of an
expression at an assignment target. Both dispatch on the node's `type` and treat
unknown node kinds as unresolved rather than as errors.

Only one scope layer is modelled. Identifiers are looked up in the supplied
scope, then in the global root; there is no chain of enclosing scopes.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import structlog

from .symbol_graph import (
    SymbolNode,
    literal_symbol,
    object_symbol,
    placeholder,
)

log = structlog.get_logger("analyzer.resolver")

FUNCTION_LIKE = frozenset(
    {
        "ClassDeclaration",
        "FunctionDeclaration",
        "FunctionExpression",
        "ArrowFunctionExpression",
    }
)


def _node_type(node: Any) -> Optional[str]:
    if isinstance(node, dict):
        return node.get("type")
    return None


def _property_label(node: Dict[str, Any]) -> Optional[str]:
    prop = node.get("property")
    if isinstance(prop, dict):
        return prop.get("name") or prop.get("raw")
    return None


class SymbolResolver:
    """Reads and writes bindings in one symbol graph."""

    def __init__(self, globals_: SymbolNode, *, logger: Any = None) -> None:
        self.globals = globals_
        self._log = logger if logger is not None else log

    # ------------------------------------------------------------------ read side

    def resolve(
        self,
        node: Any,
        scope: Optional[SymbolNode] = None,
        *,
        simple_identifier: bool = False,
        create_missing_props: bool = False,
    ) -> Optional[SymbolNode]:
        node_type = _node_type(node)
        if node_type in FUNCTION_LIKE:
            return self._function_like(node)
        handler = getattr(self, f"_resolve_{node_type}", None)
        if handler is None:
            return None
        return handler(
            node,
            scope,
            simple_identifier=simple_identifier,
            create_missing_props=create_missing_props,
        )

    def _resolve_Identifier(
        self, node: Dict[str, Any], scope: Optional[SymbolNode], **opts: bool
    ) -> Optional[SymbolNode]:
        name = node.get("name")
        if opts.get("simple_identifier"):
            # Non-computed property names become literal keys.
            return literal_symbol({"type": "Literal", "value": name})
        if scope is not None and name in scope.props:
            return scope.props[name]
        return self.globals.props.get(name)

    def _resolve_MemberExpression(
        self, node: Dict[str, Any], scope: Optional[SymbolNode], **opts: bool
    ) -> Optional[SymbolNode]:
        obj = self.resolve(
            node.get("object"),
            scope,
            create_missing_props=opts.get("create_missing_props", False),
        )
        key = self.property_key(node, scope)

        if obj is not None and key is not None:
            if key in obj.props:
                return obj.props[key]
            if opts.get("create_missing_props"):
                obj.props[key] = object_symbol()
                return obj.props[key]
        self._log.debug(
            "resolver.member_missing_property", property=_property_label(node)
        )
        return None

    def _resolve_AssignmentExpression(
        self, node: Dict[str, Any], scope: Optional[SymbolNode], **opts: bool
    ) -> Optional[SymbolNode]:
        return self.bind(node.get("left"), node.get("right"), scope)

    def _resolve_ClassBody(
        self, node: Dict[str, Any], scope: Optional[SymbolNode], **opts: bool
    ) -> Optional[SymbolNode]:
        body = object_symbol(node)
        for method in node.get("body") or []:
            if not isinstance(method, dict) or method.get("computed"):
                continue
            key = method.get("key")
            if _node_type(key) != "Identifier":
                continue
            body.props[key["name"]] = object_symbol(method.get("value"))
        return body

    def _resolve_ObjectExpression(
        self, node: Dict[str, Any], scope: Optional[SymbolNode], **opts: bool
    ) -> Optional[SymbolNode]:
        obj = object_symbol(node)
        for prop in node.get("properties") or []:
            if not isinstance(prop, dict) or prop.get("computed"):
                continue
            key = prop.get("key")
            if _node_type(key) == "Identifier":
                name = key.get("name")
            elif _node_type(key) == "Literal":
                name = literal_symbol(key).literal_key()
            else:
                continue
            if name is None:
                continue
            value = self.resolve(
                prop.get("value"),
                scope,
                create_missing_props=opts.get("create_missing_props", False),
            )
            if value is not None:
                obj.props[name] = value
        return obj

    def _resolve_Literal(
        self, node: Dict[str, Any], scope: Optional[SymbolNode], **opts: bool
    ) -> Optional[SymbolNode]:
        return literal_symbol(node)

    def _function_like(self, node: Dict[str, Any]) -> SymbolNode:
        symbol = object_symbol(node)
        symbol.props["prototype"] = object_symbol()
        return symbol

    def property_key(
        self, node: Dict[str, Any], scope: Optional[SymbolNode]
    ) -> Optional[str]:
        """Key named by a member expression's property, if it is a literal."""
        symbol = self.resolve(
            node.get("property"),
            scope,
            simple_identifier=not node.get("computed", False),
        )
        if symbol is None:
            return None
        return symbol.literal_key()

    # ----------------------------------------------------------------- write side

    def bind(
        self,
        target: Any,
        value: Any,
        scope: Optional[SymbolNode] = None,
    ) -> Optional[SymbolNode]:
        """
        Store the symbol for `value` at `target`.

        Args:
            target: Identifier, member expression, or a named class/function
                declaration (which always binds its name globally).
            value: Expression whose symbol is stored; None declares a placeholder.
            scope: Scope receiving identifier bindings; defaults to globals.

        Returns:
            The stored symbol, or None when nothing was bound. A value that does
            not resolve leaves any existing binding at the target untouched.
        """
        handler = getattr(self, f"_bind_{_node_type(target)}", None)
        if handler is None:
            return None
        return handler(target, value, scope if scope is not None else self.globals)

    def _bind_declaration(self, target: Dict[str, Any]) -> Optional[SymbolNode]:
        identifier = target.get("id")
        if _node_type(identifier) != "Identifier":
            return None
        return self.bind(identifier, target, self.globals)

    def _bind_ClassDeclaration(
        self, target: Dict[str, Any], value: Any, block: SymbolNode
    ) -> Optional[SymbolNode]:
        return self._bind_declaration(target)

    def _bind_FunctionDeclaration(
        self, target: Dict[str, Any], value: Any, block: SymbolNode
    ) -> Optional[SymbolNode]:
        return self._bind_declaration(target)

    def _bind_Identifier(
        self, target: Dict[str, Any], value: Any, block: SymbolNode
    ) -> Optional[SymbolNode]:
        name = target.get("name")
        if value is None:
            block.props[name] = placeholder()
            return block.props[name]

        symbol = self.resolve(value, block)
        if symbol is None:
            self._log.debug("resolver.identifier_unresolved_value", name=name)
            return None
        block.props[name] = symbol
        return symbol

    def _bind_MemberExpression(
        self, target: Dict[str, Any], value: Any, block: SymbolNode
    ) -> Optional[SymbolNode]:
        obj = self.resolve(target.get("object"), block)
        key = self.property_key(target, block)
        if obj is None or key is None:
            self._log.debug(
                "resolver.member_missing_target", property=_property_label(target)
            )
            return None

        symbol = self.resolve(value, block)
        if symbol is None:
            self._log.debug("resolver.member_unresolved_value", property=key)
            return None
        obj.props[key] = symbol
        return symbol


__all__ = ["FUNCTION_LIKE", "SymbolResolver"]
