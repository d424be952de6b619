"""
Impact graph builder.

Turns an AnalysisResult plus pull-request metadata into the graph document
consumed by renderers: a ``meta`` block, file ``nodes`` and ``edges``.
"""

import posixpath
from datetime import datetime, timezone
from typing import Optional, Iterable

from prgraph import __version__
from prgraph.config import AnalyzerConfig, get_config
from prgraph.engine import coerce_changed_files, ChangedFileLike
from prgraph.models.changes import ChangedFile, ChangeType, PullRequestInfo
from prgraph.models.graphs import AnalysisResult, GraphNode, ImpactGraph, NodeStatus
from prgraph.logging_config import get_logger

logger = get_logger("impact")

GRAPH_TYPE = "pr-impact"


class ImpactGraphBuilder:
    """Builds ImpactGraph documents."""

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        self.config = config or get_config()

    def build(
        self,
        result: AnalysisResult,
        changed_files: Optional[Iterable[ChangedFileLike]] = None,
        pull_request: Optional[PullRequestInfo] = None,
        diffs: Optional[dict[str, str]] = None,
        generated_at: Optional[datetime] = None,
    ) -> ImpactGraph:
        """
        Build the presentation graph.

        Args:
            result: Output of DependencyAnalyzer.analyze
            changed_files: Changed files; defaults to the pull request's
            pull_request: Optional pull-request metadata
            diffs: Optional diff text per changed path, fetched elsewhere
            generated_at: Timestamp override

        Returns:
            ImpactGraph with changed nodes first, then affected nodes
        """
        pull_request = pull_request or PullRequestInfo()
        if changed_files is None:
            changed_files = pull_request.changed_files
        changed = coerce_changed_files(changed_files)
        diffs = diffs or {}

        modified_nodes = [self._modified_node(c, diffs.get(c.path)) for c in changed]
        changed_paths = {c.path for c in changed}
        affected_nodes = [
            self._affected_node(path)
            for path in result.affected_files
            if path not in changed_paths
        ]
        nodes = modified_nodes + affected_nodes

        generated_at = generated_at or datetime.now(timezone.utc)
        meta = {
            "tool": self.config.graph.tool_name,
            "version": __version__,
            "type": GRAPH_TYPE,
            "base": pull_request.target_ref,
            "head": pull_request.source_ref,
            "prId": pull_request.id,
            "prTitle": pull_request.title,
            "prUrl": pull_request.url,
            "generatedAt": generated_at.isoformat(),
            "stats": {
                "modifiedFiles": len(modified_nodes),
                "affectedFiles": len(affected_nodes),
                "totalFiles": len(nodes),
                "dependencies": len(result.edges),
            },
        }

        logger.debug(f"Built impact graph with {len(nodes)} nodes and {len(result.edges)} edges")
        return ImpactGraph(meta=meta, nodes=nodes, edges=list(result.edges))

    @staticmethod
    def _modified_node(changed: ChangedFile, diff: Optional[str]) -> GraphNode:
        # Only edited files carry a meaningful diff
        if changed.change_type is not ChangeType.EDIT:
            diff = None
        return GraphNode(
            id=changed.path,
            label=posixpath.basename(changed.path),
            status=changed.change_type.value,
            modified=True,
            url=changed.url,
            diff=diff,
        )

    @staticmethod
    def _affected_node(path: str) -> GraphNode:
        return GraphNode(
            id=path,
            label=posixpath.basename(path),
            status=NodeStatus.AFFECTED.value,
            modified=False,
        )


def build_impact_graph(
    result: AnalysisResult,
    changed_files: Optional[Iterable[ChangedFileLike]] = None,
    pull_request: Optional[PullRequestInfo] = None,
    diffs: Optional[dict[str, str]] = None,
    config: Optional[AnalyzerConfig] = None,
) -> ImpactGraph:
    """Build an ImpactGraph from an analysis result."""
    return ImpactGraphBuilder(config).build(result, changed_files, pull_request, diffs)
