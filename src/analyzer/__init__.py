"""Export-surface analysis for JavaScript modules."""

from .export_oracle import find_exported_node, find_node, is_node_exported
from .export_parser import (
    ExportAnalysis,
    ExportAnalysisError,
    ExportOptions,
    is_exported,
    parse,
)
from .resolver import SymbolResolver
from .symbol_graph import SymbolKind, SymbolNode, create_global_root

__all__ = [
    "ExportAnalysis",
    "ExportAnalysisError",
    "ExportOptions",
    "SymbolKind",
    "SymbolNode",
    "SymbolResolver",
    "create_global_root",
    "find_exported_node",
    "find_node",
    "is_exported",
    "is_node_exported",
    "parse",
]
