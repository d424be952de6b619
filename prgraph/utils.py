"""
Utility functions for the dependency graph builder.

Provides shared utilities for:
- File handling
- Directory walking
- Repository path handling
- Timing
"""

import os
import time
import posixpath
from pathlib import Path
from typing import Optional, Any, Union, Iterator, Iterable

from prgraph.exceptions import FileSystemError, FileReadError, EncodingError
from prgraph.logging_config import get_logger

logger = get_logger("utils")


# ============================================================================
# File Utilities
# ============================================================================

def read_file(
    path: Union[str, Path],
    encoding: str = "utf-8",
    fallback_encodings: Optional[list[str]] = None,
    max_size_mb: Optional[int] = None,
) -> str:
    """
    Read file contents with encoding fallback.

    Args:
        path: Path to the file
        encoding: Primary encoding to try
        fallback_encodings: List of fallback encodings
        max_size_mb: Refuse files larger than this

    Returns:
        File contents as string

    Raises:
        FileReadError: If file cannot be read
        EncodingError: If file cannot be decoded
    """
    path = Path(path)
    fallback_encodings = fallback_encodings if fallback_encodings is not None else ["latin-1"]

    try:
        if not path.is_file():
            raise FileReadError(f"Not a file: {path}")
        if max_size_mb is not None and path.stat().st_size > max_size_mb * 1024 * 1024:
            raise FileReadError(f"File too large: {path}")
        data = path.read_bytes()
    except PermissionError as e:
        raise FileReadError(f"Permission denied: {path}") from e
    except OSError as e:
        raise FileReadError(f"Error reading file {path}: {e}") from e

    encodings_to_try = [encoding] + list(fallback_encodings)

    for enc in encodings_to_try:
        try:
            return data.decode(enc)
        except (UnicodeDecodeError, LookupError):
            continue

    raise EncodingError(f"Could not decode file with any of {encodings_to_try}: {path}")


def find_source_files(
    directory: Union[str, Path],
    extensions: Iterable[str],
    ignored_dirs: Iterable[str] = (),
    follow_symlinks: bool = False,
) -> Iterator[Path]:
    """
    Recursively yield files under ``directory`` whose suffix is in ``extensions``.

    Entries are visited in sorted order so repeated walks over the same tree
    yield the same sequence. Directories named in ``ignored_dirs`` are not
    descended into. Unlistable directories are logged and skipped.
    """
    directory = Path(directory)
    extensions = {ext.lower() for ext in extensions}
    ignored = set(ignored_dirs)
    seen_dirs: set[str] = set()

    def walk_dir(dir_path: Path) -> Iterator[Path]:
        # Symlinked directories can form loops
        real = os.path.realpath(dir_path)
        if real in seen_dirs:
            return
        seen_dirs.add(real)

        try:
            entries = sorted(os.scandir(dir_path), key=lambda e: e.name)
        except OSError as e:
            logger.warning(f"Cannot list directory {dir_path}: {e}")
            return

        for entry in entries:
            try:
                if entry.is_symlink() and not follow_symlinks:
                    continue
                if entry.is_dir():
                    if entry.name not in ignored:
                        yield from walk_dir(Path(entry.path))
                elif entry.is_file():
                    if os.path.splitext(entry.name)[1].lower() in extensions:
                        yield Path(entry.path)
            except OSError as e:
                logger.debug(f"Skipping {entry.path}: {e}")

    if not directory.is_dir():
        return
    yield from walk_dir(directory)


# ============================================================================
# Path Utilities
# ============================================================================

def normalize_repo_path(path: str) -> str:
    """
    Normalize a repository path to relative POSIX form.

    Code-review services report paths like ``/src/app.js``; those and
    Windows separators both map to ``src/app.js``.
    """
    path = path.replace("\\", "/").lstrip("/")
    if not path:
        return ""
    return posixpath.normpath(path)


def to_repo_path(path: Union[str, Path], repo_root: Union[str, Path]) -> Optional[str]:
    """Get ``path`` relative to ``repo_root`` in POSIX form, or None if outside."""
    try:
        return Path(path).relative_to(repo_root).as_posix()
    except ValueError:
        return None


def validate_path(path: Union[str, Path], must_exist: bool = True) -> Path:
    """
    Validate and normalize a path.

    Raises:
        FileSystemError: If validation fails
    """
    path = Path(path).resolve()

    if must_exist and not path.exists():
        raise FileSystemError(f"Path does not exist: {path}")

    return path


# ============================================================================
# Timing Utilities
# ============================================================================

class Timer:
    """Context manager for timing code blocks."""

    def __init__(self, name: str = "operation"):
        self.name = name
        self.start_time: float = 0
        self.elapsed: float = 0

    def __enter__(self) -> "Timer":
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, *args: Any) -> None:
        self.elapsed = time.perf_counter() - self.start_time
        logger.debug(f"{self.name} completed in {self.elapsed:.3f}s")
