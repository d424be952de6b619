"""
Forward linker.

Finds imports between files that are all part of the same change set.
"""

from pathlib import Path
from typing import Optional, Union, Iterable

from prgraph.config import AnalyzerConfig, get_config
from prgraph.dependencies.extractor import ImportExtractor
from prgraph.dependencies.resolver import PathResolver
from prgraph.exceptions import FileSystemError
from prgraph.models.changes import ChangedFile
from prgraph.models.graphs import DependencyEdge
from prgraph.utils import read_file
from prgraph.logging_config import get_logger

logger = get_logger("dependencies.forward")


class ForwardLinker:
    """
    Links changed files to the other changed files they import.

    Imports that leave the change set are ignored here; their impact is
    found by the reverse crawler instead.
    """

    def __init__(
        self,
        repo_root: Union[str, Path],
        config: Optional[AnalyzerConfig] = None
    ):
        self.repo_root = Path(repo_root)
        self.config = config or get_config()
        self.extractor = ImportExtractor(self.config.dependencies)
        self.resolver = PathResolver(self.repo_root, self.config.dependencies)

    def link(self, files: Iterable[ChangedFile]) -> list[DependencyEdge]:
        """
        Build edges between changed files.

        Args:
            files: Changed files of the pull request

        Returns:
            Edges whose ``target`` is always a changed file
        """
        files = list(files)
        changed_paths = {f.path for f in files}
        edges: list[DependencyEdge] = []

        for changed in files:
            for target in self._resolved_imports(changed.path):
                if target in changed_paths and target != changed.path:
                    edges.append(DependencyEdge(source=changed.path, target=target))

        logger.debug(f"Linked {len(edges)} forward edges among {len(files)} changed files")
        return edges

    def _resolved_imports(self, repo_path: str) -> list[str]:
        if self.extractor.categorize(repo_path) is None:
            return []

        try:
            content = read_file(
                self.repo_root / repo_path,
                encoding=self.config.parser.encoding,
                fallback_encodings=self.config.parser.fallback_encodings,
                max_size_mb=self.config.parser.max_file_size_mb,
            )
        except FileSystemError as e:
            logger.debug(f"Skipping unreadable changed file {repo_path}: {e}")
            return []

        resolved = []
        for specifier in self.extractor.extract(content, repo_path):
            target = self.resolver.resolve(specifier, repo_path)
            if target is not None:
                resolved.append(target)
        return resolved


def link_changed_files(
    files: Iterable[ChangedFile],
    repo_root: Union[str, Path],
    config: Optional[AnalyzerConfig] = None
) -> list[DependencyEdge]:
    """
    Find import edges between changed files.

    Args:
        files: Changed files
        repo_root: Repository root directory
        config: Optional configuration

    Returns:
        List of forward DependencyEdges
    """
    return ForwardLinker(repo_root, config).link(files)
