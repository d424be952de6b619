from typing import Optional, Iterable

from prgraph.dependencies.reverse import ReverseCrawlResult
from prgraph.models.graphs import AnalysisResult, DependencyEdge
from prgraph.logging_config import get_logger

logger = get_logger("dependencies.assembler")


class GraphAssembler:
    """Merges forward and reverse results into one AnalysisResult."""

    def __init__(self, deduplicate: bool = True):
        self.deduplicate = deduplicate

    def assemble(
        self,
        forward_edges: Iterable[DependencyEdge],
        reverse_result: Optional[ReverseCrawlResult] = None,
        changed_paths: Iterable[str] = (),
    ) -> AnalysisResult:
        forward_edges = list(forward_edges)
        reverse_result = reverse_result or ReverseCrawlResult()
        changed = set(changed_paths)

        edges = forward_edges + reverse_result.edges
        if self.deduplicate:
            edges = list(dict.fromkeys(edges))

        affected = [
            path for path in dict.fromkeys(reverse_result.affected_files)
            if path not in changed
        ]

        stats = {
            "forward_edges": len(forward_edges),
            "reverse_edges": len(reverse_result.edges),
            "total_edges": len(edges),
            "affected_files": len(affected),
            "files_scanned": reverse_result.files_scanned,
        }

        logger.debug(f"Assembled {len(edges)} edges, {len(affected)} affected files")
        return AnalysisResult(edges=edges, affected_files=affected, stats=stats)


def assemble(
    forward_edges: Iterable[DependencyEdge],
    reverse_result: Optional[ReverseCrawlResult] = None,
    changed_paths: Iterable[str] = (),
    deduplicate: bool = True,
) -> AnalysisResult:
    """Combine forward edges and a reverse crawl into an AnalysisResult."""
    return GraphAssembler(deduplicate).assemble(forward_edges, reverse_result, changed_paths)
