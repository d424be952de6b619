"""
Main analyzer engine.

Runs the forward linker and reverse crawler over a change set and merges
their output into a single AnalysisResult.
"""

from pathlib import Path
from typing import Any, Optional, Union, Iterable

from prgraph.config import AnalyzerConfig, AnalysisOptions, get_config
from prgraph.dependencies import ForwardLinker, ReverseCrawler, ReverseCrawlResult, GraphAssembler
from prgraph.models.changes import ChangedFile
from prgraph.models.graphs import AnalysisResult, DependencyEdge
from prgraph.logging_config import get_logger, configure_logging
from prgraph.utils import Timer, validate_path

logger = get_logger("engine")

ChangedFileLike = Union[ChangedFile, dict, str]


def coerce_changed_files(files: Iterable[ChangedFileLike]) -> list[ChangedFile]:
    """Normalize ChangedFile records, dicts and bare paths; drop duplicates and empty paths."""
    result: dict[str, ChangedFile] = {}
    for item in files or ():
        if isinstance(item, ChangedFile):
            changed = ChangedFile.create(item.path, item.change_type, item.url)
        elif isinstance(item, dict):
            changed = ChangedFile.from_dict(item)
        else:
            changed = ChangedFile.create(str(item))
        if changed.path and changed.path not in result:
            result[changed.path] = changed
    return list(result.values())


def coerce_options(
    options: Union[AnalysisOptions, dict, None],
    config: AnalyzerConfig
) -> AnalysisOptions:
    """Build AnalysisOptions from an options record, falling back to config."""
    if isinstance(options, AnalysisOptions):
        return options
    defaults = AnalysisOptions.from_config(config)
    if not options:
        return defaults
    return AnalysisOptions(
        include_reverse_deps=options.get(
            "includeReverseDeps", options.get("include_reverse_deps", defaults.include_reverse_deps)
        ),
        max_depth=options.get("maxDepth", options.get("max_depth", defaults.max_depth)),
    )


class DependencyAnalyzer:
    """
    Source dependency graph builder.

    ``analyze`` never raises: a failing stage is logged, its message is
    recorded in ``AnalysisResult.errors`` and the remaining stages still run.
    Without an explicit config the process-wide one is loaded on the first
    analysis; if it cannot be loaded the defaults are used instead.
    """

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        self.config = config
        self._logging_configured = False

    def _prepare(self, errors: list[str]) -> AnalyzerConfig:
        if self.config is None:
            try:
                self.config = get_config()
            except Exception as e:
                logger.error(f"Could not load configuration, using defaults: {e}")
                errors.append(f"config: {e}")
                self.config = AnalyzerConfig()

        if not self._logging_configured:
            log = self.config.logging
            try:
                configure_logging(
                    level=log.level,
                    log_file=log.file,
                    format_string=log.format,
                    max_file_size_mb=log.max_file_size_mb,
                    backup_count=log.backup_count,
                )
            except Exception as e:
                logger.error(f"Could not configure logging: {e}")
                errors.append(f"logging: {e}")
            self._logging_configured = True

        return self.config

    def analyze(
        self,
        files: Iterable[ChangedFileLike],
        repo_root: Union[str, Path],
        options: Union[AnalysisOptions, dict, None] = None,
    ) -> AnalysisResult:
        """
        Analyze the dependency neighbourhood of a change set.

        Args:
            files: Changed files (ChangedFile, dict records or paths)
            repo_root: Repository root directory
            options: AnalysisOptions or ``{includeReverseDeps, maxDepth}``

        Returns:
            AnalysisResult with edges and affected files
        """
        errors: list[str] = []
        config = self._prepare(errors)

        try:
            changed = coerce_changed_files(files)
            opts = coerce_options(options, config)
            root = validate_path(repo_root, must_exist=False)
        except Exception as e:
            logger.error(f"Invalid analysis input: {e}")
            return AnalysisResult(errors=errors + [str(e)])

        logger.info(f"Analyzing {len(changed)} changed files in {root}")

        with Timer("dependency analysis") as timer:
            forward = self._run_forward(changed, root, errors)

            reverse: Optional[ReverseCrawlResult] = None
            if opts.include_reverse_deps:
                reverse = self._run_reverse(changed, root, opts.max_depth, errors)

            assembler = GraphAssembler(deduplicate=self.config.graph.deduplicate_edges)
            result = assembler.assemble(forward, reverse, [c.path for c in changed])

        result.errors = errors
        result.stats["changed_files"] = len(changed)
        result.stats["max_depth"] = opts.max_depth
        result.stats["elapsed_seconds"] = round(timer.elapsed, 4)

        logger.info(
            f"Analysis complete: {len(result.edges)} edges, "
            f"{len(result.affected_files)} affected files"
        )
        return result

    def _run_forward(
        self,
        changed: list[ChangedFile],
        root: Path,
        errors: list[str]
    ) -> list[DependencyEdge]:
        try:
            return ForwardLinker(root, self.config).link(changed)
        except Exception as e:
            logger.error(f"Forward linking failed: {e}")
            errors.append(f"forward: {e}")
            return []

    def _run_reverse(
        self,
        changed: list[ChangedFile],
        root: Path,
        max_depth: int,
        errors: list[str]
    ) -> Optional[ReverseCrawlResult]:
        try:
            return ReverseCrawler(root, self.config).crawl([c.path for c in changed], max_depth)
        except Exception as e:
            logger.error(f"Reverse crawl failed: {e}")
            errors.append(f"reverse: {e}")
            return None

    def summarize(self, result: AnalysisResult) -> dict[str, Any]:
        """Headline counts for display."""
        return {
            "changed_files": result.stats.get("changed_files", 0),
            "affected_files": len(result.affected_files),
            "dependencies": len(result.edges),
            "files_scanned": result.stats.get("files_scanned", 0),
            "errors": len(result.errors),
        }
