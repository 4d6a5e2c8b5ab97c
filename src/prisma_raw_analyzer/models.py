from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class OperationKind(str, Enum):
    READ = "read"
    WRITE = "write"


class StoreMethod(str, Enum):
    CREATE = "create"
    CREATE_MANY = "createMany"
    UPDATE = "update"
    UPDATE_MANY = "updateMany"
    UPSERT = "upsert"
    DELETE = "delete"
    DELETE_MANY = "deleteMany"
    FIND_MANY = "findMany"
    FIND_UNIQUE = "findUnique"
    FIND_FIRST = "findFirst"
    FIND_FIRST_OR_THROW = "findFirstOrThrow"
    FIND_UNIQUE_OR_THROW = "findUniqueOrThrow"
    COUNT = "count"
    AGGREGATE = "aggregate"
    GROUP_BY = "groupBy"


class SourceLocation(_Record):
    file: str
    line: int
    column: int


class Operation(_Record):
    kind: OperationKind
    method: StoreMethod
    entity: str
    location: SourceLocation
    uses_primary_routing: bool = False
    uses_replica_routing: bool = False
    in_transaction: bool = False


class Issue(_Record):
    type: Literal["read-after-write"] = "read-after-write"
    severity: Literal["error"] = "error"
    write_operation: Operation
    read_operation: Operation
    call_chain: list[str]
    message: str


class ClientInstance(_Record):
    name: str
    file: str
    line: int
    has_replica_extension: bool = False


class AnalysisSummary(_Record):
    total_issues: int
    files_analyzed: int
    execution_time: str = "0s"


class AnalysisResult(_Record):
    summary: AnalysisSummary
    issues: list[Issue]
