from collections.abc import Iterable
from fnmatch import fnmatch
from pathlib import Path

from prisma_raw_analyzer.core.languages import is_supported_file


def validate_project_path(path: str | Path) -> Path:
    project_path = Path(path).resolve()
    if not project_path.exists():
        raise FileNotFoundError(f"Project path does not exist: {path}")
    if not project_path.is_dir():
        raise NotADirectoryError(f"Project path is not a directory: {path}")
    return project_path


def is_excluded(relative_path: str, exclude_patterns: Iterable[str]) -> bool:
    return any(fnmatch(relative_path, pattern) for pattern in exclude_patterns)


def discover_source_files(
    root: Path,
    include_patterns: Iterable[str],
    exclude_patterns: Iterable[str] = (),
) -> list[Path]:
    """Expand include globs under ``root`` and drop excluded or unsupported files.

    Exclude patterns are matched against the root-relative POSIX path.
    """
    excludes = list(exclude_patterns)
    found: set[Path] = set()
    for pattern in include_patterns:
        for candidate in root.glob(pattern):
            if not candidate.is_file() or not is_supported_file(candidate):
                continue
            if is_excluded(candidate.relative_to(root).as_posix(), excludes):
                continue
            found.add(candidate)
    return sorted(found)
