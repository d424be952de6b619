import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Any, Union
from enum import Enum


class EdgeType(Enum):
    """Types of edges in the dependency graph."""
    IMPORTS = "imports"


class NodeStatus(Enum):
    """Presentation status of a node that is not itself changed."""
    AFFECTED = "affected"


@dataclass(frozen=True)
class DependencyEdge:
    """Directed edge: ``source`` contains an import that resolves to ``target``."""
    source: str
    target: str
    relation: EdgeType = EdgeType.IMPORTS

    def to_dict(self) -> dict[str, Any]:
        return {
            "from": self.source,
            "to": self.target,
            "relation": self.relation.value,
        }


@dataclass
class AnalysisResult:
    """Edges and transitively affected files found for one set of changes."""
    edges: list[DependencyEdge] = field(default_factory=list)
    affected_files: list[str] = field(default_factory=list)
    stats: dict[str, Any] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)

    def dependents_of(self, path: str) -> list[str]:
        """Files with an edge pointing at ``path``."""
        return [e.source for e in self.edges if e.target == path]

    def dependencies_of(self, path: str) -> list[str]:
        """Files ``path`` has an edge to."""
        return [e.target for e in self.edges if e.source == path]

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    def to_dict(self) -> dict[str, Any]:
        return {
            "edges": [e.to_dict() for e in self.edges],
            "affectedFiles": list(self.affected_files),
            "stats": self.stats,
            "errors": self.errors,
        }


@dataclass
class GraphNode:
    """File node in the presentation graph."""
    id: str
    label: str
    status: str
    modified: bool
    kind: str = "file"
    url: Optional[str] = None
    diff: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "label": self.label,
            "kind": self.kind,
            "status": self.status,
            "modified": self.modified,
        }
        if self.modified:
            data["url"] = self.url
            data["diff"] = self.diff
        return data


@dataclass
class ImpactGraph:
    """Presentation-ready graph document handed to renderers."""
    meta: dict[str, Any] = field(default_factory=dict)
    nodes: list[GraphNode] = field(default_factory=list)
    edges: list[DependencyEdge] = field(default_factory=list)

    @property
    def modified_nodes(self) -> list[GraphNode]:
        return [n for n in self.nodes if n.modified]

    @property
    def affected_nodes(self) -> list[GraphNode]:
        return [n for n in self.nodes if not n.modified]

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        return next((n for n in self.nodes if n.id == node_id), None)

    def to_dict(self) -> dict[str, Any]:
        return {
            "meta": self.meta,
            "nodes": [n.to_dict() for n in self.nodes],
            "edges": [e.to_dict() for e in self.edges],
        }

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent, default=str)

    def save(self, path: Union[str, Path]) -> Path:
        """Write the document as JSON, creating parent directories."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.to_json(), encoding="utf-8")
        return path
