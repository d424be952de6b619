"""
Public API for the dependency graph builder.

Provides simple functions for common analysis tasks.
"""

from pathlib import Path
from typing import Union, Optional, Iterable

from prgraph.config import AnalyzerConfig, AnalysisOptions
from prgraph.engine import DependencyAnalyzer, ChangedFileLike
from prgraph.impact import ImpactGraphBuilder
from prgraph.models.changes import PullRequestInfo
from prgraph.models.graphs import AnalysisResult, ImpactGraph


def analyze_dependencies(
    files: Iterable[ChangedFileLike],
    repo_root: Union[str, Path],
    options: Union[AnalysisOptions, dict, None] = None,
    config: Optional[AnalyzerConfig] = None
) -> AnalysisResult:
    """
    Find dependency edges and affected files for a change set.

    Args:
        files: Changed files (ChangedFile, ``{"path", "changeType"}`` dicts or paths)
        repo_root: Repository root directory
        options: ``{"includeReverseDeps": bool, "maxDepth": int}`` or AnalysisOptions
        config: Optional configuration

    Returns:
        AnalysisResult with edges and affected files

    Example:
        >>> result = analyze_dependencies(["src/a.js"], "/path/to/repo", {"maxDepth": 1})
        >>> print(result.affected_files)
    """
    analyzer = DependencyAnalyzer(config)
    return analyzer.analyze(files, repo_root, options)


def analyze_pull_request(
    pull_request: Union[PullRequestInfo, dict],
    repo_root: Union[str, Path],
    options: Union[AnalysisOptions, dict, None] = None,
    diffs: Optional[dict[str, str]] = None,
    config: Optional[AnalyzerConfig] = None
) -> ImpactGraph:
    """
    Build the impact graph document for a pull request.

    Args:
        pull_request: Pull-request metadata including its changed files
        repo_root: Repository root directory
        options: Analysis options
        diffs: Optional diff text per changed path
        config: Optional configuration

    Returns:
        ImpactGraph ready for rendering or ``save()``

    Example:
        >>> graph = analyze_pull_request({"id": 42, "changedFiles": [{"path": "/src/a.js"}]}, ".")
        >>> graph.save(".prgraph/pr-42.json")
    """
    if isinstance(pull_request, dict):
        pull_request = PullRequestInfo.from_dict(pull_request)

    analyzer = DependencyAnalyzer(config)
    result = analyzer.analyze(pull_request.changed_files, repo_root, options)
    return ImpactGraphBuilder(analyzer.config).build(
        result,
        pull_request=pull_request,
        diffs=diffs,
    )
