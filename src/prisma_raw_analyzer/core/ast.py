from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import cast

from tree_sitter import Node, Tree
from tree_sitter_language_pack import SupportedLanguage, get_parser

from prisma_raw_analyzer.core.languages import detect_language_from_path, normalize_language


@dataclass(frozen=True)
class ParsedFile:
    """A source file together with its tree-sitter syntax tree.

    Node text and positions are always resolved against ``source`` so callers
    never depend on the tree keeping a copy of the bytes.
    """

    path: str
    language: str
    source: bytes
    tree: Tree

    @property
    def root(self) -> Node:
        return self.tree.root_node

    def text(self, node: Node) -> str:
        return self.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def line_and_column(self, node: Node) -> tuple[int, int]:
        """Return the 1-based (line, column) of the node start, counting columns in characters."""
        row, byte_column = node.start_point
        line_start = node.start_byte - byte_column
        prefix = self.source[line_start : node.start_byte].decode("utf-8", errors="replace")
        return row + 1, len(prefix) + 1

    def descendants(self, node: Node, node_types: frozenset[str]) -> Iterator[Node]:
        """Yield named descendants of ``node`` whose type is in ``node_types``, in pre-order."""
        stack = list(reversed(node.children))
        while stack:
            current = stack.pop()
            if current.is_named and current.type in node_types:
                yield current
            stack.extend(reversed(current.children))


def parse_source(source_bytes: bytes, path: str, language: str) -> ParsedFile:
    parser = get_parser(cast(SupportedLanguage, language))
    tree = parser.parse(source_bytes)
    return ParsedFile(path=path, language=language, source=source_bytes, tree=tree)


def parse_file(path: str | Path, language: str | None = None) -> ParsedFile:
    file_path = Path(path)
    resolved_language = normalize_language(language) if language else detect_language_from_path(file_path)

    try:
        source_bytes = file_path.read_bytes()
    except FileNotFoundError:
        raise FileNotFoundError(f"File not found: {path}") from None

    return parse_source(source_bytes, str(file_path), resolved_language)
