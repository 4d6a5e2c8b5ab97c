"""Shared fixtures and helpers for tests."""

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from tree_sitter import Node, Parser
from tree_sitter_language_pack import get_parser

from prisma_raw_analyzer.core.ast import ParsedFile, parse_source

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: every test in this tree is a unit test
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        item.add_marker(pytest.mark.unit)


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Undo handlers installed by the CLI so caplog keeps working across tests."""
    yield
    logger = logging.getLogger("prisma_raw_analyzer")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def sample_project() -> Path:
    """Return the path to the bundled TypeScript sample project."""
    return _REPO_ROOT / "tests" / "fixtures" / "sample-project"


@pytest.fixture
def typescript_parser() -> Parser:
    """Return a tree-sitter parser for TypeScript."""
    return get_parser("typescript")


@pytest.fixture
def parse_ts() -> Callable[[str], ParsedFile]:
    """Parse a TypeScript snippet into a ParsedFile named ``snippet.ts``."""

    def _parse(source: str) -> ParsedFile:
        return parse_source(source.encode("utf-8"), "snippet.ts", "typescript")

    return _parse


def call_nodes(parsed: ParsedFile) -> list[Node]:
    """All call expressions of a parsed file in pre-order."""
    return list(parsed.descendants(parsed.root, frozenset({"call_expression"})))


def find_call(parsed: ParsedFile, method: str) -> Node:
    """Return the first call whose callee text ends with ``.<method>``."""
    for call in call_nodes(parsed):
        callee = call.child_by_field_name("function")
        if callee is not None and parsed.text(callee).endswith(f".{method}"):
            return call
    raise AssertionError(f"No call to {method} found")
