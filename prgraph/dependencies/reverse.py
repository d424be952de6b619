"""
Reverse crawler.

Finds unchanged files that depend, directly or transitively, on the changed
files. The source roots are walked once per crawl and every visited file is
read once to build a reverse-import index (target -> importers); the
breadth-first search then runs entirely against that index.
"""

from collections import deque
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union, Iterable

from prgraph.config import AnalyzerConfig, get_config
from prgraph.dependencies.extractor import ImportExtractor
from prgraph.dependencies.resolver import PathResolver
from prgraph.exceptions import FileSystemError
from prgraph.models.graphs import DependencyEdge
from prgraph.utils import read_file, find_source_files, to_repo_path, normalize_repo_path
from prgraph.logging_config import get_logger

logger = get_logger("dependencies.reverse")


class ReverseImportIndex:
    """Maps each resolved import target to the files importing it."""

    def __init__(self):
        self._importers: dict[str, list[str]] = {}
        self.files_scanned = 0

    def add(self, importer: str, target: str) -> None:
        importers = self._importers.setdefault(target, [])
        if importer not in importers:
            importers.append(importer)

    def importers_of(self, target: str) -> list[str]:
        """Importers of ``target`` in walk order."""
        return list(self._importers.get(target, ()))

    def __contains__(self, target: str) -> bool:
        return target in self._importers

    def __len__(self) -> int:
        return len(self._importers)


@dataclass
class ReverseCrawlResult:
    """Outcome of one reverse crawl."""
    affected_files: list[str] = field(default_factory=list)
    edges: list[DependencyEdge] = field(default_factory=list)
    files_scanned: int = 0
    depths: dict[str, int] = field(default_factory=dict)


class ReverseCrawler:
    """
    Breadth-first search over reverse import relations.

    Every changed path is seeded at depth 0. A dequeued path at depth ``d``
    with ``d < max_depth`` links each unchanged importer to it and enqueues
    that importer once, at depth ``d + 1``.
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

    def search_roots(self) -> list[Path]:
        """
        Directories to walk.

        The conventional source roots that exist, else the repository root
        itself, else nothing.
        """
        roots = [
            self.repo_root / name
            for name in self.config.dependencies.source_roots
            if (self.repo_root / name).is_dir()
        ]
        if roots:
            return roots
        if self.repo_root.is_dir():
            return [self.repo_root]
        logger.warning(f"Repository root does not exist: {self.repo_root}")
        return []

    def iter_source_files(self) -> Iterable[Path]:
        deps = self.config.dependencies
        for root in self.search_roots():
            yield from find_source_files(
                root,
                extensions=deps.scan_extensions,
                ignored_dirs=deps.ignored_dirs,
                follow_symlinks=deps.follow_symlinks,
            )

    def build_index(self) -> ReverseImportIndex:
        """Walk the source roots once and index every resolved import."""
        index = ReverseImportIndex()
        visited: set[Path] = set()

        for file_path in self.iter_source_files():
            if file_path in visited:
                continue
            visited.add(file_path)

            repo_path = to_repo_path(file_path, self.repo_root)
            if repo_path is None:
                continue

            index.files_scanned += 1
            for target in self._resolved_imports(file_path, repo_path):
                index.add(repo_path, target)

        logger.debug(f"Indexed {len(index)} import targets from {index.files_scanned} files")
        return index

    def _resolved_imports(self, file_path: Path, repo_path: str) -> list[str]:
        parser = self.config.parser
        try:
            content = read_file(
                file_path,
                encoding=parser.encoding,
                fallback_encodings=parser.fallback_encodings,
                max_size_mb=parser.max_file_size_mb,
            )
        except FileSystemError as e:
            logger.debug(f"Skipping unreadable file {repo_path}: {e}")
            return []

        resolved = []
        for specifier in self.extractor.extract(content, repo_path):
            target = self.resolver.resolve(specifier, repo_path)
            if target is not None and target != repo_path:
                resolved.append(target)
        return resolved

    def crawl(self, changed_paths: Iterable[str], max_depth: int) -> ReverseCrawlResult:
        """
        Find files affected by the changed paths.

        Args:
            changed_paths: Paths of changed files, relative to the repository
                root (a leading slash or backslashes are accepted). Order is
                kept for deterministic output; sets are sorted.
            max_depth: Maximum number of reverse hops from a changed file

        Returns:
            ReverseCrawlResult with affected files in discovery order
        """
        if isinstance(changed_paths, (set, frozenset)):
            changed_paths = sorted(changed_paths)
        seeds = [p for p in dict.fromkeys(normalize_repo_path(p) for p in changed_paths) if p]
        changed = set(seeds)
        result = ReverseCrawlResult()

        if not seeds or max_depth <= 0:
            return result

        index = self.build_index()
        result.files_scanned = index.files_scanned

        queue = deque((path, 0) for path in seeds)

        while queue:
            path, depth = queue.popleft()
            if depth >= max_depth:
                continue

            for importer in index.importers_of(path):
                if importer in changed:
                    continue

                result.edges.append(DependencyEdge(source=importer, target=path))

                if importer not in result.depths:
                    result.depths[importer] = depth + 1
                    result.affected_files.append(importer)
                    queue.append((importer, depth + 1))

        logger.info(
            f"Reverse crawl found {len(result.affected_files)} affected files "
            f"({len(result.edges)} edges, depth <= {max_depth})"
        )
        return result


def find_affected(
    changed_paths: Iterable[str],
    repo_root: Union[str, Path],
    max_depth: int = 2,
    config: Optional[AnalyzerConfig] = None
) -> ReverseCrawlResult:
    """
    Find files that transitively import the changed files.

    Args:
        changed_paths: Repo-relative changed paths
        repo_root: Repository root directory
        max_depth: Maximum reverse-dependency depth
        config: Optional configuration

    Returns:
        ReverseCrawlResult with affected files and reverse edges
    """
    return ReverseCrawler(repo_root, config).crawl(changed_paths, max_depth)
