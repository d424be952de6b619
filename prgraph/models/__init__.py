"""Data models initialization."""

from prgraph.models.changes import (
    ChangeType,
    ChangedFile,
    PullRequestInfo,
)
from prgraph.models.graphs import (
    EdgeType,
    NodeStatus,
    DependencyEdge,
    AnalysisResult,
    GraphNode,
    ImpactGraph,
)

__all__ = [
    # Changes
    "ChangeType",
    "ChangedFile",
    "PullRequestInfo",
    # Graphs
    "EdgeType",
    "NodeStatus",
    "DependencyEdge",
    "AnalysisResult",
    "GraphNode",
    "ImpactGraph",
]
