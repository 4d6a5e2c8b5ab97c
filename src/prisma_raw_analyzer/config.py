import logging
import os
from pathlib import Path

from pydantic import BaseModel, Field
from rich.console import Console
from rich.logging import RichHandler

DEFAULT_INCLUDE_PATTERNS = ("src/**/*.ts", "src/**/*.tsx")
DEFAULT_EXCLUDE_PATTERNS = ("node_modules/**", "dist/**", "build/**")

_PACKAGE_LOGGER = "prisma_raw_analyzer"


def split_patterns(raw: str) -> list[str]:
    return [part.strip() for part in raw.split(",") if part.strip()]


def default_include_patterns() -> list[str]:
    raw = os.getenv("PRISMA_RAW_INCLUDE")
    return split_patterns(raw) if raw else list(DEFAULT_INCLUDE_PATTERNS)


def default_exclude_patterns() -> list[str]:
    raw = os.getenv("PRISMA_RAW_EXCLUDE")
    return split_patterns(raw) if raw is not None else list(DEFAULT_EXCLUDE_PATTERNS)


class AnalyzerOptions(BaseModel):
    project_path: Path
    include_patterns: list[str] = Field(default_factory=default_include_patterns)
    exclude_patterns: list[str] = Field(default_factory=default_exclude_patterns)
    include_nested_scopes: bool = False


def configure_logging(verbose: bool = False) -> None:
    """Route package logs to stderr through rich, keeping stdout free for reports."""
    requested = os.getenv("PRISMA_RAW_LOG_LEVEL", "INFO").strip().upper()
    env_level = logging.getLevelName(requested)
    logger = logging.getLogger(_PACKAGE_LOGGER)
    logger.handlers.clear()
    logger.addHandler(RichHandler(console=Console(stderr=True), show_path=False, show_time=False))
    logger.propagate = False
    if verbose:
        logger.setLevel(logging.DEBUG)
    elif isinstance(env_level, int):
        logger.setLevel(env_level)
    else:
        logger.setLevel(logging.INFO)
        logger.warning("Unknown PRISMA_RAW_LOG_LEVEL %r, using INFO", requested)
