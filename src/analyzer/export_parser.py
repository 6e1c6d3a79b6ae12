"""
Entry point for export analysis of one parsed module.

`parse` builds the symbol graph for an esprima `Program` and returns an
`ExportAnalysis` handle; `is_exported` asks whether a node from the same AST is
part of the module's export surface. The handle is never modified by queries,
so one analysis can serve any number of `is_exported` calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .binding_passes import run_binding_passes
from .export_oracle import is_node_exported
from .resolver import SymbolResolver
from .symbol_graph import SymbolNode, create_global_root


class ExportAnalysisError(RuntimeError):
    """Raised when the tree handed to `parse` is not a Program node."""

    def __init__(self, message: str, node: Optional[Dict[str, Any]] = None):
        loc = ""
        if node and isinstance(node, dict):
            start = (node.get("loc") or {}).get("start") or {}
            line = start.get("line")
            column = start.get("column")
            if line is not None and column is not None:
                loc = f" (line {line}, column {column})"
        super().__init__(f"{message}{loc}")
        self.node = node


@dataclass(frozen=True)
class ExportOptions:
    check_esm_exports: bool = True
    check_commonjs_exports: bool = True
    init_window: bool = True


@dataclass(frozen=True)
class ExportAnalysis:
    """Opaque result of `parse`."""

    globals: SymbolNode
    options: ExportOptions


def parse(
    ast: Dict[str, Any],
    options: Optional[ExportOptions] = None,
    *,
    logger: Any = None,
) -> ExportAnalysis:
    """
    Build the symbol graph for a module.

    Args:
        ast: esprima-compatible `Program` dict (result of `parse_js`).
        options: Which export channels to seed; defaults to all enabled.
        logger: structlog-compatible logger receiving trace events.

    Returns:
        ExportAnalysis wrapping the populated global root.

    Raises:
        ExportAnalysisError: If `ast` is not a Program node.
    """
    options = options or ExportOptions()
    if not isinstance(ast, dict) or ast.get("type") != "Program":
        raise ExportAnalysisError(
            "Expected Program node at the root.", ast if isinstance(ast, dict) else None
        )

    globals_ = create_global_root(
        module_exports=options.check_commonjs_exports,
        window=options.init_window,
    )
    resolver = SymbolResolver(globals_, logger=logger)
    run_binding_passes(ast, resolver, logger=logger)
    return ExportAnalysis(globals=globals_, options=options)


def is_exported(
    node: Dict[str, Any],
    analysis: ExportAnalysis,
    options: Optional[ExportOptions] = None,
    *,
    logger: Any = None,
) -> bool:
    """Return True when `node` is reachable from the module's exports."""
    options = options or analysis.options
    return is_node_exported(
        node,
        analysis.globals,
        check_esm_exports=options.check_esm_exports,
        check_commonjs_exports=options.check_commonjs_exports,
        logger=logger,
    )


__all__ = [
    "ExportAnalysis",
    "ExportAnalysisError",
    "ExportOptions",
    "is_exported",
    "parse",
]
