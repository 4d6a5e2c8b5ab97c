"""Classify Prisma client calls as read or write operations.

A call qualifies when it has the shape ``<client>.<entity>.<method>(...)`` and
``method`` is one of the recognized store-API methods. Routing and transaction
context are inferred from the surrounding expression chain.
"""

from tree_sitter import Node

from prisma_raw_analyzer.core.ast import ParsedFile
from prisma_raw_analyzer.models import Operation, OperationKind, SourceLocation, StoreMethod

WRITE_METHODS: frozenset[StoreMethod] = frozenset(
    {
        StoreMethod.CREATE,
        StoreMethod.CREATE_MANY,
        StoreMethod.UPDATE,
        StoreMethod.UPDATE_MANY,
        StoreMethod.UPSERT,
        StoreMethod.DELETE,
        StoreMethod.DELETE_MANY,
    }
)

READ_METHODS: frozenset[StoreMethod] = frozenset(
    {
        StoreMethod.FIND_MANY,
        StoreMethod.FIND_UNIQUE,
        StoreMethod.FIND_FIRST,
        StoreMethod.FIND_FIRST_OR_THROW,
        StoreMethod.FIND_UNIQUE_OR_THROW,
        StoreMethod.COUNT,
        StoreMethod.AGGREGATE,
        StoreMethod.GROUP_BY,
    }
)

METHOD_KINDS: dict[StoreMethod, OperationKind] = {
    **{method: OperationKind.WRITE for method in WRITE_METHODS},
    **{method: OperationKind.READ for method in READ_METHODS},
}

_METHODS_BY_NAME: dict[str, StoreMethod] = {method.value: method for method in StoreMethod}

PRIMARY_MARKER = "$primary()"
REPLICA_MARKER = "$replica()"
_ROUTING_SEGMENTS = frozenset({"$primary", "$replica"})
TRANSACTION_METHOD = "$transaction"

CALL_EXPRESSION = "call_expression"
MEMBER_EXPRESSION = "member_expression"


def is_write_method(name: str) -> bool:
    method = _METHODS_BY_NAME.get(name)
    return method is not None and METHOD_KINDS[method] is OperationKind.WRITE


def is_read_method(name: str) -> bool:
    method = _METHODS_BY_NAME.get(name)
    return method is not None and METHOD_KINDS[method] is OperationKind.READ


def _property_name(member: Node, parsed: ParsedFile) -> str | None:
    prop = member.child_by_field_name("property")
    if prop is None:
        return None
    return parsed.text(prop)


def classify_operation(call: Node, parsed: ParsedFile) -> Operation | None:
    """Return the store operation performed by ``call``, or ``None`` if it is not one."""
    callee = call.child_by_field_name("function")
    if callee is None or callee.type != MEMBER_EXPRESSION:
        return None

    method_name = _property_name(callee, parsed)
    method = _METHODS_BY_NAME.get(method_name) if method_name else None
    if method is None:
        return None

    entity_access = callee.child_by_field_name("object")
    if entity_access is None or entity_access.type != MEMBER_EXPRESSION:
        return None
    entity = _property_name(entity_access, parsed)
    if not entity or entity in _ROUTING_SEGMENTS:
        return None

    line, column = parsed.line_and_column(call)
    uses_primary, uses_replica = _routing_flags(entity_access, parsed)

    return Operation(
        kind=METHOD_KINDS[method],
        method=method,
        entity=entity,
        location=SourceLocation(file=parsed.path, line=line, column=column),
        uses_primary_routing=uses_primary,
        uses_replica_routing=uses_replica,
        in_transaction=is_in_transaction(call, parsed),
    )


def _routing_flags(entity_access: Node, parsed: ParsedFile) -> tuple[bool, bool]:
    """Walk inward along the client chain looking for ``$primary()`` / ``$replica()``.

    Matching is done on each node's source text; the first marker found wins.
    """
    current: Node | None = entity_access
    while current is not None:
        text = parsed.text(current)
        if PRIMARY_MARKER in text:
            return True, False
        if REPLICA_MARKER in text:
            return False, True

        if current.type == MEMBER_EXPRESSION:
            current = current.child_by_field_name("object")
        elif current.type == CALL_EXPRESSION:
            current = current.child_by_field_name("function")
        else:
            break
    return False, False


def is_in_transaction(call: Node, parsed: ParsedFile) -> bool:
    """True if any ancestor of ``call`` is a ``<x>.$transaction(...)`` call."""
    parent = call.parent
    while parent is not None:
        if parent.type == CALL_EXPRESSION:
            callee = parent.child_by_field_name("function")
            if callee is not None and callee.type == MEMBER_EXPRESSION:
                if _property_name(callee, parsed) == TRANSACTION_METHOD:
                    return True
        parent = parent.parent
    return False
