from prisma_raw_analyzer.analyzer.client_detector import detect_clients, has_replica_client
from prisma_raw_analyzer.analyzer.issue_detector import build_scope_tree, detect_issues, pair_operations
from prisma_raw_analyzer.analyzer.operation_classifier import (
    classify_operation,
    is_in_transaction,
    is_read_method,
    is_write_method,
)

__all__ = [
    "build_scope_tree",
    "classify_operation",
    "detect_clients",
    "detect_issues",
    "has_replica_client",
    "is_in_transaction",
    "is_read_method",
    "is_write_method",
    "pair_operations",
]
