"""
Path resolver.

Maps an import specifier to a repository-relative file path using only
filesystem existence checks.
"""

import posixpath
from pathlib import Path
from typing import Optional, Union

from prgraph.config import DependencyConfig, get_config
from prgraph.logging_config import get_logger

logger = get_logger("dependencies.resolver")


class PathResolver:
    """
    Resolves import specifiers relative to the repository root.

    - ``./x`` and ``../x`` resolve against the importing file's directory
    - ``/x`` resolves against the repository root
    - anything else is a package reference and does not resolve
    """

    def __init__(
        self,
        repo_root: Union[str, Path],
        config: Optional[DependencyConfig] = None
    ):
        self.repo_root = Path(repo_root)
        self.config = config or get_config().dependencies

    @staticmethod
    def is_local_specifier(specifier: str) -> bool:
        """True for relative or root-absolute specifiers."""
        return specifier.startswith(".") or specifier.startswith("/")

    def candidate_path(self, specifier: str, referencing_file: str) -> Optional[str]:
        """Normalized repo-relative candidate for ``specifier``, before probing."""
        if not specifier or not self.is_local_specifier(specifier):
            return None

        if specifier.startswith("."):
            from_dir = posixpath.dirname(referencing_file.replace("\\", "/"))
            joined = posixpath.join(from_dir, specifier)
        else:
            joined = specifier.lstrip("/")

        if not joined:
            return None
        candidate = posixpath.normpath(joined)

        # Escapes the repository
        if candidate == ".." or candidate.startswith("../") or candidate == ".":
            return None
        return candidate

    def resolve(self, specifier: str, referencing_file: str) -> Optional[str]:
        """
        Resolve an import specifier to an existing repo-relative file.

        Args:
            specifier: Raw specifier as written in the import
            referencing_file: Repo-relative path of the importing file

        Returns:
            Repo-relative POSIX path, or None if external or missing
        """
        candidate = self.candidate_path(specifier, referencing_file)
        if candidate is None:
            return None

        if posixpath.splitext(candidate)[1]:
            return candidate if self._is_file(candidate) else None

        for ext in self.config.resolve_extensions:
            with_ext = candidate + ext
            if self._is_file(with_ext):
                return with_ext

        for ext in self.config.resolve_extensions:
            with_index = posixpath.join(candidate, self.config.index_basename + ext)
            if self._is_file(with_index):
                return with_index

        logger.debug(f"Unresolved import {specifier!r} from {referencing_file}")
        return None

    def _is_file(self, repo_path: str) -> bool:
        try:
            return (self.repo_root / repo_path).is_file()
        except OSError:
            return False


def resolve_import_path(
    specifier: str,
    referencing_file: str,
    repo_root: Union[str, Path],
    config: Optional[DependencyConfig] = None
) -> Optional[str]:
    """
    Resolve an import specifier to a repository-relative path.

    Args:
        specifier: Raw import specifier
        referencing_file: Repo-relative path of the importing file
        repo_root: Repository root directory
        config: Optional dependency configuration

    Returns:
        Resolved repo-relative path or None
    """
    return PathResolver(repo_root, config).resolve(specifier, referencing_file)
