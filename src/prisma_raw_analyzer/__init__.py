from prisma_raw_analyzer.config import AnalyzerOptions
from prisma_raw_analyzer.core.analyze import find_clients, run_analysis
from prisma_raw_analyzer.models import (
    AnalysisResult,
    AnalysisSummary,
    ClientInstance,
    Issue,
    Operation,
    OperationKind,
    SourceLocation,
    StoreMethod,
)

__all__ = [
    "AnalysisResult",
    "AnalysisSummary",
    "AnalyzerOptions",
    "ClientInstance",
    "Issue",
    "Operation",
    "OperationKind",
    "SourceLocation",
    "StoreMethod",
    "find_clients",
    "run_analysis",
]
