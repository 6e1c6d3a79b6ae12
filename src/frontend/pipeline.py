"""
Front-end integration stitching together parsing and export analysis.

`run_frontend` accepts raw JavaScript source, parses it into an esprima AST,
optionally builds the export analysis, and persists the parse output when a
cache directory is given. Callers then query `FrontEndResult.is_exported` once
per candidate node.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from analyzer import ExportAnalysis, ExportOptions, is_exported, parse
from parser import ParseError, ParseResult, parse_js


@dataclass(frozen=True)
class FrontEndResult:
    """Combined output from parsing and export analysis."""

    parse: ParseResult
    analysis: Optional[ExportAnalysis]

    @property
    def has_ast(self) -> bool:
        return self.parse.ast is not None

    @property
    def diagnostics(self) -> List[ParseError]:
        """Parse errors recovered or reported while reading the source."""
        return list(self.parse.errors)

    def is_exported(
        self, node: Dict[str, Any], options: Optional[ExportOptions] = None
    ) -> bool:
        if self.analysis is None:
            return False
        return is_exported(node, self.analysis, options)


def run_frontend(
    source: str,
    *,
    source_name: str = "<input>",
    tolerant: bool = True,
    analyze: bool = True,
    source_type: str = "module",
    options: Optional[ExportOptions] = None,
    cache_dir: Optional[Union[str, Path]] = None,
) -> FrontEndResult:
    """
    Parse JavaScript input and build its export analysis.

    Args:
        source: Raw JavaScript source text.
        source_name: Identifier used in diagnostics, e.g. file path.
        tolerant: Forwarded to the parser; when True esprima attempts recovery.
        analyze: Set to False to skip building the symbol graph.
        source_type: `"module"` or `"script"`.
        options: Export channels to seed; defaults to all enabled.
        cache_dir: Optional directory to write parse artefacts (`None` disables).
    """
    parse_result = parse_js(
        source,
        source_name=source_name,
        tolerant=tolerant,
        source_type=source_type,
    )

    analysis: Optional[ExportAnalysis] = None
    if analyze and parse_result.ast is not None:
        analysis = parse(parse_result.ast, options)

    if cache_dir is not None:
        _persist_parse(cache_dir, parse_result)

    return FrontEndResult(parse=parse_result, analysis=analysis)


def _persist_parse(cache_dir: Union[str, Path], parse_result: ParseResult) -> None:
    """Store the raw parse output to disk, keyed by the source hash."""
    path = Path(cache_dir)
    path.mkdir(parents=True, exist_ok=True)
    cache_file = path / f"{parse_result.source_hash}.json"
    cache_file.write_text(parse_result.to_json(), encoding="utf-8")


__all__ = ["FrontEndResult", "run_frontend"]
