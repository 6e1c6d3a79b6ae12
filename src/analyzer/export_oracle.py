"""
Reachability queries answering whether a syntax node is exported.

Two channels are checked independently: values reachable from
`module.exports`, and values reachable from symbols flagged by `export`
declarations. Both searches follow `props` edges and tolerate cycles.
"""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Set, Tuple

import structlog

from .symbol_graph import SymbolNode

log = structlog.get_logger("analyzer.export_oracle")


def find_node(target: Dict[str, Any], root: SymbolNode) -> bool:
    """
    Depth-first search for a symbol whose syntax node is `target`.

    Each stack entry carries the ids on its own path, so a node shared by
    sibling branches is still explored through each of them while a cycle
    along one path is cut.
    """
    stack: List[Tuple[SymbolNode, FrozenSet[int]]] = [(root, frozenset())]
    while stack:
        symbol, path = stack.pop()
        if id(symbol) in path:
            continue
        if symbol.value is not None and symbol.value is target:
            return True
        path = path | {id(symbol)}
        for child in reversed(list(symbol.props.values())):
            if child is not None:
                stack.append((child, path))
    return False


def find_exported_node(target: Dict[str, Any], root: SymbolNode) -> bool:
    """Search every export-flagged symbol under `root` for `target`.

    Unlike `find_node`, one visited set is shared across the whole walk.
    """
    seen: Set[int] = {id(root)}
    stack: List[SymbolNode] = [root]
    while stack:
        namespace = stack.pop()
        for child in namespace.props.values():
            if child is None:
                continue
            if child.exported and find_node(target, child):
                return True
            if id(child) in seen:
                continue
            seen.add(id(child))
            stack.append(child)
    return False


def is_node_exported(
    node: Dict[str, Any],
    globals_: SymbolNode,
    *,
    check_esm_exports: bool = True,
    check_commonjs_exports: bool = True,
    logger: Any = None,
) -> bool:
    _log = logger if logger is not None else log
    if not isinstance(node, dict):
        return False

    if check_commonjs_exports:
        module = globals_.props.get("module")
        module_exports = module.props.get("exports") if module is not None else None
        if module_exports is not None and find_node(node, module_exports):
            _log.debug("oracle.exported", channel="commonjs", node_type=node.get("type"))
            return True

    if check_esm_exports and find_exported_node(node, globals_):
        _log.debug("oracle.exported", channel="esm", node_type=node.get("type"))
        return True

    return False


__all__ = ["find_exported_node", "find_node", "is_node_exported"]
