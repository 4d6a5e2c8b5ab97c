import logging
import time

from prisma_raw_analyzer.analyzer.client_detector import detect_clients, has_replica_client
from prisma_raw_analyzer.analyzer.issue_detector import detect_issues
from prisma_raw_analyzer.config import AnalyzerOptions
from prisma_raw_analyzer.core.ast import ParsedFile, parse_file
from prisma_raw_analyzer.core.files import discover_source_files, validate_project_path
from prisma_raw_analyzer.models import AnalysisResult, AnalysisSummary, ClientInstance, Issue

logger = logging.getLogger(__name__)


def load_project(options: AnalyzerOptions) -> list[ParsedFile]:
    project_path = validate_project_path(options.project_path)
    logger.info("Analyzing project at %s", project_path)

    paths = discover_source_files(project_path, options.include_patterns, options.exclude_patterns)
    logger.info("Found %d source files", len(paths))
    return [parse_file(path) for path in paths]


def _report_clients(files: list[ParsedFile]) -> list[ClientInstance]:
    clients = detect_clients(files)
    logger.info("Found %d PrismaClient instance(s)", len(clients))
    if not clients:
        logger.warning("No PrismaClient instances found; reporting issues for all matching calls.")
    elif not has_replica_client(clients):
        logger.warning("No read replica extension detected. Analysis may not be applicable.")
    return clients


def find_clients(options: AnalyzerOptions) -> list[ClientInstance]:
    return _report_clients(load_project(options))


def run_analysis(options: AnalyzerOptions) -> AnalysisResult:
    """Analyze a project for read-after-write issues.

    Client detection only produces warnings; every parsed file is checked regardless.
    """
    started = time.perf_counter()
    files = load_project(options)
    _report_clients(files)

    issues: list[Issue] = []
    for parsed in files:
        file_issues = detect_issues(parsed, include_nested=options.include_nested_scopes)
        logger.debug("%s: %d issue(s)", parsed.path, len(file_issues))
        issues.extend(file_issues)

    logger.info("Analysis complete. Found %d issue(s)", len(issues))
    elapsed = time.perf_counter() - started
    return AnalysisResult(
        summary=AnalysisSummary(
            total_issues=len(issues),
            files_analyzed=len(files),
            execution_time=f"{elapsed:.2f}s",
        ),
        issues=issues,
    )
