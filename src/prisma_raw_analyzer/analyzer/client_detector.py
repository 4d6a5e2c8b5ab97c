import logging
from collections.abc import Iterable

from tree_sitter import Node

from prisma_raw_analyzer.core.ast import ParsedFile
from prisma_raw_analyzer.models import ClientInstance

logger = logging.getLogger(__name__)

CLIENT_TYPE_NAME = "PrismaClient"
EXTENSION_MARKER = ".$extends"
REPLICA_EXTENSION_MARKERS = ("readReplicas", "read-replicas")

_VARIABLE_DECLARATOR = frozenset({"variable_declarator"})


def detect_clients(files: Iterable[ParsedFile]) -> list[ClientInstance]:
    """Find variables initialized with a Prisma client, directly or through ``$extends``.

    The match is textual: any initializer mentioning the client type or an
    extension call counts. Results are advisory and never filter issues.
    """
    instances: list[ClientInstance] = []
    for parsed in files:
        for declarator in parsed.descendants(parsed.root, _VARIABLE_DECLARATOR):
            initializer = declarator.child_by_field_name("value")
            name_node = declarator.child_by_field_name("name")
            if initializer is None or name_node is None:
                continue
            if not _is_client_initializer(initializer, parsed):
                continue

            line, _ = parsed.line_and_column(declarator)
            instance = ClientInstance(
                name=parsed.text(name_node),
                file=parsed.path,
                line=line,
                has_replica_extension=_has_replica_extension(initializer, parsed),
            )
            logger.debug("Client %s declared at %s:%d", instance.name, instance.file, instance.line)
            instances.append(instance)
    return instances


def has_replica_client(clients: Iterable[ClientInstance]) -> bool:
    return any(client.has_replica_extension for client in clients)


def _is_client_initializer(initializer: Node, parsed: ParsedFile) -> bool:
    if initializer.type == "new_expression":
        constructor = initializer.child_by_field_name("constructor")
        return constructor is not None and parsed.text(constructor) == CLIENT_TYPE_NAME

    text = parsed.text(initializer)
    return CLIENT_TYPE_NAME in text or EXTENSION_MARKER in text


def _has_replica_extension(initializer: Node, parsed: ParsedFile) -> bool:
    text = parsed.text(initializer)
    return any(marker in text for marker in REPLICA_EXTENSION_MARKERS)
