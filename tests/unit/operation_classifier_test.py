"""Unit tests for the operation classifier."""

from collections.abc import Callable

import pytest
from conftest import call_nodes, find_call

from prisma_raw_analyzer.analyzer.operation_classifier import (
    METHOD_KINDS,
    READ_METHODS,
    WRITE_METHODS,
    classify_operation,
    is_in_transaction,
    is_read_method,
    is_write_method,
)
from prisma_raw_analyzer.core.ast import ParsedFile
from prisma_raw_analyzer.models import OperationKind, StoreMethod

Parse = Callable[[str], ParsedFile]


def _classify_single(parse_ts: Parse, source: str):
    parsed = parse_ts(source)
    calls = call_nodes(parsed)
    assert calls, "snippet contains no call expression"
    return classify_operation(calls[0], parsed)


class TestMethodTables:
    def test_every_method_has_exactly_one_kind(self) -> None:
        assert set(METHOD_KINDS) == set(StoreMethod)
        assert WRITE_METHODS.isdisjoint(READ_METHODS)

    @pytest.mark.parametrize(
        "name", ["create", "createMany", "update", "updateMany", "upsert", "delete", "deleteMany"]
    )
    def test_write_methods(self, name: str) -> None:
        assert is_write_method(name)
        assert not is_read_method(name)

    @pytest.mark.parametrize(
        "name",
        [
            "findMany",
            "findUnique",
            "findFirst",
            "findFirstOrThrow",
            "findUniqueOrThrow",
            "count",
            "aggregate",
            "groupBy",
        ],
    )
    def test_read_methods(self, name: str) -> None:
        assert is_read_method(name)
        assert not is_write_method(name)

    @pytest.mark.parametrize("name", ["save", "find", "$transaction", "createManyAndReturn", ""])
    def test_unknown_methods(self, name: str) -> None:
        assert not is_read_method(name)
        assert not is_write_method(name)


class TestClassifyOperation:
    def test_write_on_entity(self, parse_ts: Parse) -> None:
        op = _classify_single(parse_ts, "client.user.create({ data: { name: 'a' } });")

        assert op is not None
        assert op.kind is OperationKind.WRITE
        assert op.method is StoreMethod.CREATE
        assert op.entity == "user"
        assert not op.uses_primary_routing
        assert not op.uses_replica_routing
        assert not op.in_transaction

    def test_read_on_entity(self, parse_ts: Parse) -> None:
        op = _classify_single(parse_ts, "client.post.groupBy({ by: ['authorId'] });")

        assert op is not None
        assert op.kind is OperationKind.READ
        assert op.method is StoreMethod.GROUP_BY
        assert op.entity == "post"

    @pytest.mark.parametrize(
        "source",
        [
            "client.user.save();",
            "client.user.toString();",
            "findMany();",
            "client.findMany();",
            "client.user['findMany']();",
            "client.$primary().findMany();",
            "client.$primary.findMany();",
            "client.$replica.count();",
        ],
    )
    def test_unclassifiable_calls(self, parse_ts: Parse, source: str) -> None:
        assert _classify_single(parse_ts, source) is None

    def test_location_is_one_based(self, parse_ts: Parse) -> None:
        parsed = parse_ts("async function f() {\n  await client.user.create({ data: {} });\n}\n")
        op = classify_operation(find_call(parsed, "create"), parsed)

        assert op is not None
        assert op.location.file == "snippet.ts"
        assert op.location.line == 2
        assert op.location.column == 9

    def test_column_counts_characters(self, parse_ts: Parse) -> None:
        parsed = parse_ts('const s = "é"; client.user.count();\n')
        op = classify_operation(find_call(parsed, "count"), parsed)

        assert op is not None
        assert op.location.column == 16

    def test_primary_routing(self, parse_ts: Parse) -> None:
        parsed = parse_ts("client.$primary().user.findMany();")
        op = classify_operation(find_call(parsed, "findMany"), parsed)

        assert op is not None
        assert op.entity == "user"
        assert op.uses_primary_routing
        assert not op.uses_replica_routing

    def test_replica_routing(self, parse_ts: Parse) -> None:
        parsed = parse_ts("client.$replica().user.findUnique({ where: { id: 1 } });")
        op = classify_operation(find_call(parsed, "findUnique"), parsed)

        assert op is not None
        assert op.uses_replica_routing
        assert not op.uses_primary_routing

    def test_routing_marker_requires_exact_call_text(self, parse_ts: Parse) -> None:
        parsed = parse_ts("client.$primary( ).user.findMany();")
        op = classify_operation(find_call(parsed, "findMany"), parsed)

        assert op is not None
        assert not op.uses_primary_routing
        assert not op.uses_replica_routing

    def test_routing_arguments_are_not_inspected(self, parse_ts: Parse) -> None:
        parsed = parse_ts("client.user.findMany({ note: '$primary()' });")
        op = classify_operation(find_call(parsed, "findMany"), parsed)

        assert op is not None
        assert not op.uses_primary_routing

    def test_routing_call_inner_to_wrapping_call(self, parse_ts: Parse) -> None:
        parsed = parse_ts("getClient().$primary().user.count();")
        op = classify_operation(find_call(parsed, "count"), parsed)

        assert op is not None
        assert op.uses_primary_routing

    def test_optional_chaining_is_classified(self, parse_ts: Parse) -> None:
        parsed = parse_ts("client?.user.deleteMany();")
        op = classify_operation(find_call(parsed, "deleteMany"), parsed)

        assert op is not None
        assert op.method is StoreMethod.DELETE_MANY
        assert op.entity == "user"


class TestTransactionDetection:
    def test_inside_transaction_callback(self, parse_ts: Parse) -> None:
        parsed = parse_ts(
            "async function f() {\n"
            "  await client.$transaction(async (tx) => {\n"
            "    await tx.user.create({ data: {} });\n"
            "  });\n"
            "}\n"
        )
        op = classify_operation(find_call(parsed, "create"), parsed)

        assert op is not None
        assert op.in_transaction

    def test_deeply_nested_in_transaction(self, parse_ts: Parse) -> None:
        parsed = parse_ts(
            "async function f() {\n"
            "  await client.$transaction(async (tx) => {\n"
            "    const run = async () => {\n"
            "      if (ready) {\n"
            "        for (const id of ids) {\n"
            "          await tx.user.findMany({ where: { id } });\n"
            "        }\n"
            "      }\n"
            "    };\n"
            "    await run();\n"
            "  });\n"
            "}\n"
        )
        call = find_call(parsed, "findMany")

        assert is_in_transaction(call, parsed)
        op = classify_operation(call, parsed)
        assert op is not None
        assert op.in_transaction

    def test_batch_transaction_array(self, parse_ts: Parse) -> None:
        parsed = parse_ts("client.$transaction([client.user.create({ data: {} }), client.user.findMany()]);")

        create = classify_operation(find_call(parsed, "create"), parsed)
        read = classify_operation(find_call(parsed, "findMany"), parsed)

        assert create is not None and create.in_transaction
        assert read is not None and read.in_transaction

    def test_outside_transaction(self, parse_ts: Parse) -> None:
        parsed = parse_ts(
            "async function f() {\n"
            "  await client.user.create({ data: {} });\n"
            "  await client.$transaction([]);\n"
            "}\n"
        )
        op = classify_operation(find_call(parsed, "create"), parsed)

        assert op is not None
        assert not op.in_transaction

    def test_transaction_call_itself_is_not_an_operation(self, parse_ts: Parse) -> None:
        parsed = parse_ts("client.$transaction(async (tx) => tx.user.count());")

        assert classify_operation(find_call(parsed, "$transaction"), parsed) is None
