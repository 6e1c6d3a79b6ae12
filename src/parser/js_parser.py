"""
JavaScript parsing on top of the Python `esprima` port.

`parse_js` returns the dict AST consumed by the export analyzer together with
any recoverable errors. Modules are the default source type because `export`
declarations only parse in module mode; CommonJS files parse either way.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Any, List, Optional

import esprima


@dataclass(frozen=True)
class ParseError:
    """A parse problem reported by esprima."""

    description: str
    line: Optional[int]
    column: Optional[int]


@dataclass(frozen=True)
class ParseResult:
    ast: Any
    errors: List[ParseError]
    source_hash: str
    source_name: str

    def to_json(self) -> str:
        payload = {
            "ast": self.ast,
            "errors": [error.__dict__ for error in self.errors],
            "source_hash": self.source_hash,
            "source_name": self.source_name,
        }
        return json.dumps(payload, ensure_ascii=False, indent=2, default=str)


def _hash_source(source: str) -> str:
    return hashlib.sha256(source.encode("utf-8")).hexdigest()


def _to_parse_error(error: Any) -> ParseError:
    # Recovered errors arrive as dicts or as esprima.Error instances.
    if isinstance(error, dict):
        return ParseError(
            description=error.get("description") or str(error),
            line=error.get("lineNumber"),
            column=error.get("column"),
        )
    return ParseError(
        description=getattr(error, "description", None) or str(error),
        line=getattr(error, "lineNumber", None),
        column=getattr(error, "column", None),
    )


def parse_js(
    source: str,
    *,
    source_name: str = "<input>",
    tolerant: bool = True,
    source_type: str = "module",
) -> ParseResult:
    """
    Parse JavaScript source text into an esprima dict AST.

    Args:
        source: Raw JavaScript source code.
        source_name: Label used for diagnostics (defaults to `<input>`).
        tolerant: When True, esprima recovers from errors instead of raising.
        source_type: `"module"` or `"script"`.

    Returns:
        ParseResult with the AST (None when parsing failed) and errors.

    Raises:
        esprima.Error: If parsing fails and `tolerant` is False.
    """
    options = dict(loc=True, range=True, tolerant=tolerant)
    parser = esprima.parseScript if source_type == "script" else esprima.parseModule
    try:
        ast = parser(source, **options)
    except esprima.Error as exc:
        if not tolerant:
            raise
        return ParseResult(
            ast=None,
            errors=[_to_parse_error(exc)],
            source_hash=_hash_source(source),
            source_name=source_name,
        )

    raw_ast = ast.toDict() if hasattr(ast, "toDict") else ast
    errors: List[ParseError] = []
    if tolerant and isinstance(raw_ast, dict):
        for error in raw_ast.get("errors") or []:
            errors.append(_to_parse_error(error))

    return ParseResult(
        ast=raw_ast,
        errors=errors,
        source_hash=_hash_source(source),
        source_name=source_name,
    )


__all__ = ["ParseError", "ParseResult", "parse_js"]
