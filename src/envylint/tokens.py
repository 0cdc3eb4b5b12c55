"""
Token extraction from Python syntax trees.

A method body becomes the set of names it *uses*: every call contributes a
``CALL_<name>`` token and every attribute access or bare-name reference a
``FIELD_<name>`` token. A class becomes the set of field names it declares.

Bare names and attribute accesses share the ``FIELD`` kind, so a local
variable called ``balance`` and ``customer.balance`` produce the same token.

envylint/src/envylint/tokens.py
"""

import ast
from enum import Enum
from typing import Iterator, List, Optional, Set, Union

from .models import Context

__all__ = [
    "TokenKind",
    "TokenExtractor",
    "make_token",
    "method_receiver",
    "extract_method_context",
    "extract_class_context",
]

FunctionNode = Union[ast.FunctionDef, ast.AsyncFunctionDef]


class TokenKind(Enum):
    """Kind tag prefixed to every token."""

    CALL = "CALL"
    FIELD = "FIELD"


def make_token(kind: TokenKind, name: str) -> str:
    """Build the token string for a (kind, name) pair."""
    return f"{kind.value}_{name}"


class TokenExtractor(ast.NodeVisitor):
    """Collects CALL/FIELD tokens from every expression below the visited nodes.

    The receiver name (``self``/``cls``) never produces a token of its own;
    attributes and calls reached through it still do.
    """

    def __init__(self, receiver: Optional[str] = None) -> None:
        self.receiver = receiver
        self.tokens: Set[str] = set()

    def _add(self, kind: TokenKind, name: str) -> None:
        self.tokens.add(make_token(kind, name))

    def visit_Call(self, node: ast.Call) -> None:
        func = node.func
        if isinstance(func, ast.Name):
            self._add(TokenKind.CALL, func.id)
        elif isinstance(func, ast.Attribute):
            # The called name is a CALL only; its receiver is still traversed.
            self._add(TokenKind.CALL, func.attr)
            self.visit(func.value)
        else:
            self.visit(func)
        for arg in node.args:
            self.visit(arg)
        for keyword in node.keywords:
            self.visit(keyword.value)

    def visit_Attribute(self, node: ast.Attribute) -> None:
        self._add(TokenKind.FIELD, node.attr)
        self.visit(node.value)

    def visit_Name(self, node: ast.Name) -> None:
        if isinstance(node.ctx, ast.Store) or node.id == self.receiver:
            return
        self._add(TokenKind.FIELD, node.id)

    def visit_AugAssign(self, node: ast.AugAssign) -> None:
        # ``total += x`` reads ``total`` before rebinding it.
        target = node.target
        if isinstance(target, ast.Name):
            if target.id != self.receiver:
                self._add(TokenKind.FIELD, target.id)
        else:
            self.visit(target)
        self.visit(node.value)

    def visit_AnnAssign(self, node: ast.AnnAssign) -> None:
        self.visit(node.target)
        if node.value is not None:
            self.visit(node.value)

    def visit_arguments(self, node: ast.arguments) -> None:
        # Parameter names and annotations are declarations; defaults are uses.
        for default in node.defaults:
            self.visit(default)
        for default in node.kw_defaults:
            if default is not None:
                self.visit(default)

    def _visit_nested_function(self, node: FunctionNode) -> None:
        for decorator in node.decorator_list:
            self.visit(decorator)
        self.visit(node.args)
        for stmt in node.body:
            self.visit(stmt)

    def visit_FunctionDef(self, node: ast.FunctionDef) -> None:
        self._visit_nested_function(node)

    def visit_AsyncFunctionDef(self, node: ast.AsyncFunctionDef) -> None:
        self._visit_nested_function(node)

    def visit_Lambda(self, node: ast.Lambda) -> None:
        self.visit(node.args)
        self.visit(node.body)

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        for decorator in node.decorator_list:
            self.visit(decorator)
        for base in node.bases:
            self.visit(base)
        for keyword in node.keywords:
            self.visit(keyword.value)
        for stmt in node.body:
            self.visit(stmt)


def _is_staticmethod(node: FunctionNode) -> bool:
    for decorator in node.decorator_list:
        if isinstance(decorator, ast.Name) and decorator.id == "staticmethod":
            return True
        if isinstance(decorator, ast.Attribute) and decorator.attr == "staticmethod":
            return True
    return False


def method_receiver(node: FunctionNode) -> Optional[str]:
    """Return the name of the implicit receiver parameter, if the method has one."""
    if _is_staticmethod(node):
        return None
    params = list(node.args.posonlyargs) + list(node.args.args)
    return params[0].arg if params else None


def extract_method_context(node: FunctionNode, is_method: bool = True) -> Context:
    """Extract the token set used by a function or method body."""
    extractor = TokenExtractor(receiver=method_receiver(node) if is_method else None)
    for stmt in node.body:
        extractor.visit(stmt)
    return frozenset(extractor.tokens)


def _bound_names(target: ast.AST) -> List[str]:
    if isinstance(target, ast.Name):
        return [target.id]
    if isinstance(target, (ast.Tuple, ast.List)):
        names: List[str] = []
        for element in target.elts:
            names.extend(_bound_names(element))
        return names
    if isinstance(target, ast.Starred):
        return _bound_names(target.value)
    return []


def _walk_own_scope(node: ast.AST) -> Iterator[ast.AST]:
    """Like ast.walk, but does not descend into nested class definitions."""
    for child in ast.iter_child_nodes(node):
        if isinstance(child, ast.ClassDef):
            continue
        yield child
        yield from _walk_own_scope(child)


def _receiver_attributes(node: FunctionNode) -> List[str]:
    receiver = method_receiver(node)
    if receiver is None:
        return []
    return [
        child.attr
        for child in _walk_own_scope(node)
        if isinstance(child, ast.Attribute)
        and isinstance(child.ctx, ast.Store)
        and isinstance(child.value, ast.Name)
        and child.value.id == receiver
    ]


def extract_class_context(node: ast.ClassDef) -> Context:
    """Extract one FIELD token per field the class declares.

    Fields are class-body assignments and instance attributes assigned
    through the receiver inside the class's own methods.
    """
    fields: Set[str] = set()
    for stmt in node.body:
        if isinstance(stmt, ast.Assign):
            for target in stmt.targets:
                fields.update(_bound_names(target))
        elif isinstance(stmt, (ast.AnnAssign, ast.AugAssign)):
            fields.update(_bound_names(stmt.target))
        elif isinstance(stmt, (ast.FunctionDef, ast.AsyncFunctionDef)):
            fields.update(_receiver_attributes(stmt))
    return frozenset(make_token(TokenKind.FIELD, name) for name in fields)
