"""
Source discovery: find the C files to lint under a directory.

Typical usage:
    from pathlib import Path
    from condlint.traversal import find_source_files

    sources = find_source_files(Path("./src"), include_headers=True)
"""

import logging
from pathlib import Path
from typing import Callable, Optional, Set

logger = logging.getLogger(__name__)

# Directory names never descended into
DEFAULT_IGNORE_DIRS: Set[str] = {
    # Build output
    "build",
    "builds",
    "dist",
    "out",
    "bin",
    "obj",
    "CMakeFiles",
    # Vendored dependencies
    "node_modules",
    "vendor",
    "third_party",
    "external",
    "deps",
    # Version control and tooling
    ".git",
    ".svn",
    ".hg",
    ".vscode",
    ".idea",
    ".venv",
    "venv",
    "__pycache__",
    ".cache",
    ".pytest_cache",
}

C_SUFFIX = ".c"
HEADER_SUFFIX = ".h"


def is_c_file(path: Path) -> bool:
    """True for ``.c`` files (case-insensitive)."""
    return path.suffix.lower() == C_SUFFIX


def is_header_file(path: Path) -> bool:
    """True for ``.h`` files (case-insensitive)."""
    return path.suffix.lower() == HEADER_SUFFIX


def is_source_file(path: Path, include_headers: bool = False) -> bool:
    return is_c_file(path) or (include_headers and is_header_file(path))


def should_ignore_directory(dir_path: Path, ignore_dirs: Set[str]) -> bool:
    """Match on the directory name only (case-sensitive)."""
    return dir_path.name in ignore_dirs


def find_source_files(
    root: Path,
    include_headers: bool = False,
    ignore_dirs: Optional[Set[str]] = None,
    follow_symlinks: bool = False,
    filter_fn: Optional[Callable[[Path], bool]] = None,
) -> list[Path]:
    """
    Recursively collect C source files under ``root``.

    Args:
        root: Directory to start from.
        include_headers: Also collect ``.h`` files.
        ignore_dirs: Directory names to skip; defaults to DEFAULT_IGNORE_DIRS.
        follow_symlinks: Follow symbolic links (off by default).
        filter_fn: Extra predicate a file must satisfy to be collected.

    Returns:
        Sorted list of matching files.

    Raises:
        FileNotFoundError: root does not exist.
        NotADirectoryError: root is not a directory.

    Permission errors below the root are logged and the directory is skipped.
    """
    if ignore_dirs is None:
        ignore_dirs = DEFAULT_IGNORE_DIRS

    root = root.resolve()
    if not root.exists():
        logger.error("Root directory does not exist: %s", root)
        raise FileNotFoundError(f"Root directory does not exist: {root}")
    if not root.is_dir():
        logger.error("Root path is not a directory: %s", root)
        raise NotADirectoryError(f"Root path is not a directory: {root}")

    logger.info("Starting traversal from: %s", root)
    logger.debug(
        "Traversal config: include_headers=%s, follow_symlinks=%s, ignore_dirs=%s",
        include_headers,
        follow_symlinks,
        sorted(ignore_dirs),
    )

    collected: list[Path] = []
    pending = [root]
    while pending:
        current = pending.pop()
        try:
            entries = list(current.iterdir())
        except OSError as e:
            logger.warning("Error accessing directory %s: %s", current, e)
            continue

        for entry in entries:
            if entry.is_symlink() and not follow_symlinks:
                logger.debug("Skipping symlink: %s", entry)
                continue
            if entry.is_dir():
                if should_ignore_directory(entry, ignore_dirs):
                    logger.debug("Ignoring directory: %s", entry)
                else:
                    pending.append(entry)
            elif entry.is_file() and is_source_file(entry, include_headers=include_headers):
                if filter_fn is not None and not filter_fn(entry):
                    logger.debug("Filtered out by custom filter: %s", entry)
                    continue
                collected.append(entry)

    collected.sort()
    logger.info("Traversal complete: found %d source file(s) in %s", len(collected), root)
    return collected

