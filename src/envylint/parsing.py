"""
Turns Python source files into class and method contexts.

envylint/src/envylint/parsing.py
"""

import ast
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple

from .models import ClassContext, MethodContext
from .tokens import extract_class_context, extract_method_context

__all__ = ["ParsedClass", "SourceUnit", "parse_source", "parse_file", "merge_units"]

logger = logging.getLogger(__name__)


@dataclass
class ParsedClass:
    """One class definition with the methods declared directly in its body."""

    context: ClassContext
    methods: List[MethodContext] = field(default_factory=list)


@dataclass
class SourceUnit:
    """Everything extracted from one source file."""

    file_path: Optional[Path] = None
    classes: List[ParsedClass] = field(default_factory=list)
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _parse_class(node: ast.ClassDef, file_path: Optional[Path]) -> ParsedClass:
    context = ClassContext(
        name=node.name,
        tokens=extract_class_context(node),
        file_path=file_path,
        line=node.lineno,
    )
    # A later def with the same name replaces the earlier one, as at runtime.
    methods: Dict[str, MethodContext] = {}
    for stmt in node.body:
        if isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
            methods[stmt.name] = MethodContext(
                class_name=node.name,
                name=stmt.name,
                tokens=extract_method_context(stmt),
                file_path=file_path,
                line=stmt.lineno,
            )
    return ParsedClass(context=context, methods=list(methods.values()))


def parse_source(content: str, file_path: Optional[Path] = None) -> SourceUnit:
    """Parse source text. Raises SyntaxError for invalid Python."""
    tree = ast.parse(content, filename=str(file_path) if file_path else "<unknown>")
    unit = SourceUnit(file_path=file_path)
    for node in ast.walk(tree):
        if isinstance(node, ast.ClassDef):
            unit.classes.append(_parse_class(node, file_path))
    return unit


def parse_file(file_path: Path) -> SourceUnit:
    """Read and parse one file; unreadable or invalid files give an empty unit."""
    try:
        content = file_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"Could not read {file_path}: {e}")
        return SourceUnit(file_path=file_path, error=f"Error reading file: {e}")

    try:
        unit = parse_source(content, file_path)
    except SyntaxError as e:
        line = f"line {e.lineno}" if e.lineno else "unknown line"
        logger.warning(f"Skipping {file_path}: SyntaxError {e.msg} ({line})")
        return SourceUnit(file_path=file_path, error=f"SyntaxError: {e.msg} ({line})")
    except ValueError as e:
        # ast.parse rejects source containing null bytes with ValueError
        logger.warning(f"Skipping {file_path}: {e}")
        return SourceUnit(file_path=file_path, error=str(e))
    except (RecursionError, MemoryError) as e:
        # Deeply nested expressions exhaust the parser or the token visitor
        logger.warning(f"Skipping {file_path}: too deeply nested to analyse ({type(e).__name__})")
        return SourceUnit(
            file_path=file_path, error=f"{type(e).__name__}: too deeply nested to analyse"
        )

    logger.debug(f"Parsed {file_path}: {len(unit.classes)} classes")
    return unit


def merge_units(units: Iterable[SourceUnit]) -> Tuple[List[ClassContext], List[MethodContext]]:
    """Combine per-file units into corpus-wide class and method contexts.

    Class names key the corpus; the first definition of a name wins and any
    later definition is skipped together with its methods.
    """
    classes: Dict[str, ClassContext] = {}
    methods: List[MethodContext] = []
    for unit in units:
        for parsed in unit.classes:
            name = parsed.context.name
            if name in classes:
                first = classes[name]
                logger.warning(
                    f"Duplicate class '{name}' at {parsed.context.file_path}:{parsed.context.line} "
                    f"(first defined at {first.file_path}:{first.line}); skipping it and its "
                    f"{len(parsed.methods)} methods"
                )
                continue
            classes[name] = parsed.context
            methods.extend(parsed.methods)
    return list(classes.values()), methods
