"""Detect read-after-write issues within function scopes.

Scopes form a tree: the module is the root and every function-like construct
opens a child scope under its nearest enclosing one. Each call expression is
assigned to its innermost scope, so by default an operation is paired exactly
once. ``include_nested=True`` folds nested scopes into their enclosing ones,
which makes inner operations count again for every outer function; scopes are
then visited grouped by construct kind (declarations, arrow functions,
function expressions, methods) and in document order within a kind.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from tree_sitter import Node

from prisma_raw_analyzer.analyzer.operation_classifier import CALL_EXPRESSION, classify_operation
from prisma_raw_analyzer.core.ast import ParsedFile
from prisma_raw_analyzer.models import Issue, Operation, OperationKind

logger = logging.getLogger(__name__)

FUNCTION_NODE_TYPES = frozenset(
    {
        "function_declaration",
        "generator_function_declaration",
        "arrow_function",
        "function_expression",
        "generator_function",
        "method_definition",
    }
)

MODULE_SCOPE = 0

# Visiting order of scope kinds when nested scopes are folded in.
_KIND_RANK = {
    "function_declaration": 0,
    "generator_function_declaration": 0,
    "arrow_function": 1,
    "function_expression": 2,
    "generator_function": 2,
    "method_definition": 3,
}

_ISSUE_MESSAGE = (
    "Read operation on {read.entity}.{read.method.value}() may use replica immediately after write operation "
    "on {write.entity}.{write.method.value}(), potentially reading stale data. "
    "Consider using $primary() for the read operation."
)


@dataclass
class Scope:
    index: int
    parent: int | None
    node: Node
    name: str


@dataclass
class ScopeTree:
    """Arena of scopes plus every call expression tagged with its innermost scope."""

    scopes: list[Scope] = field(default_factory=list)
    calls: list[tuple[Node, int]] = field(default_factory=list)

    def lineage(self, index: int) -> Iterator[int]:
        """Yield ``index`` and the indices of all its enclosing scopes."""
        current: int | None = index
        while current is not None:
            yield current
            current = self.scopes[current].parent

    def function_scopes(self) -> list[Scope]:
        return self.scopes[MODULE_SCOPE + 1 :]


def _scope_name(node: Node, parsed: ParsedFile) -> str:
    name = node.child_by_field_name("name")
    if name is None and node.parent is not None and node.parent.type == "variable_declarator":
        name = node.parent.child_by_field_name("name")
    return parsed.text(name) if name is not None else "<anonymous>"


def _opens_scope(node: Node, parsed: ParsedFile) -> bool:
    """True for function-like nodes; constructors and get/set accessors do not count as methods."""
    if not node.is_named or node.type not in FUNCTION_NODE_TYPES:
        return False
    if node.type != "method_definition":
        return True
    name = node.child_by_field_name("name")
    if name is not None and parsed.text(name) == "constructor":
        return False
    return not any(not child.is_named and child.type in ("get", "set") for child in node.children)


def build_scope_tree(parsed: ParsedFile) -> ScopeTree:
    root = parsed.root
    tree = ScopeTree(scopes=[Scope(index=MODULE_SCOPE, parent=None, node=root, name="<module>")])

    stack: list[tuple[Node, int]] = [(child, MODULE_SCOPE) for child in reversed(root.children)]
    while stack:
        node, scope_index = stack.pop()
        if _opens_scope(node, parsed):
            scope = Scope(index=len(tree.scopes), parent=scope_index, node=node, name=_scope_name(node, parsed))
            tree.scopes.append(scope)
            scope_index = scope.index
        elif node.is_named and node.type == CALL_EXPRESSION:
            tree.calls.append((node, scope_index))
        stack.extend((child, scope_index) for child in reversed(node.children))
    return tree


def detect_issues(parsed: ParsedFile, include_nested: bool = False) -> list[Issue]:
    """Pair every unguarded write with every later unguarded read in the same function scope."""
    tree = build_scope_tree(parsed)

    classified: list[tuple[int, Operation]] = []
    for call, scope_index in tree.calls:
        operation = classify_operation(call, parsed)
        if operation is not None:
            classified.append((scope_index, operation))

    scopes = tree.function_scopes()
    if include_nested:
        scopes.sort(key=lambda scope: _KIND_RANK[scope.node.type])

    issues: list[Issue] = []
    for scope in scopes:
        if include_nested:
            sequence = [op for idx, op in classified if scope.index in tree.lineage(idx)]
        else:
            sequence = [op for idx, op in classified if idx == scope.index]
        scope_issues = pair_operations(sequence)
        if scope_issues:
            logger.debug("%d issue(s) in %s (%s)", len(scope_issues), scope.name, parsed.path)
        issues.extend(scope_issues)
    return issues


def pair_operations(operations: list[Operation]) -> list[Issue]:
    issues: list[Issue] = []
    for i, write in enumerate(operations):
        if write.kind is not OperationKind.WRITE or write.in_transaction:
            continue
        for read in operations[i + 1 :]:
            if read.kind is not OperationKind.READ:
                continue
            if read.in_transaction or read.uses_primary_routing:
                continue
            issues.append(_make_issue(write, read))
    return issues


def _make_issue(write: Operation, read: Operation) -> Issue:
    return Issue(
        write_operation=write,
        read_operation=read,
        call_chain=[
            f"{write.location.file}:{write.location.line}",
            f"{read.location.file}:{read.location.line}",
        ],
        message=_ISSUE_MESSAGE.format(write=write, read=read),
    )
