# PR Impact Graph - source dependency graph builder for pull requests

__version__ = "1.0.0"
__author__ = "PR Impact Graph Team"

from prgraph.engine import DependencyAnalyzer
from prgraph.models import AnalysisResult, ChangedFile, ChangeType, DependencyEdge, ImpactGraph, PullRequestInfo
from prgraph.api import analyze_dependencies, analyze_pull_request
from prgraph.dependencies import extract_imports, resolve_import_path

__all__ = [
    "DependencyAnalyzer",
    "AnalysisResult",
    "ChangedFile",
    "ChangeType",
    "DependencyEdge",
    "ImpactGraph",
    "PullRequestInfo",
    "analyze_dependencies",
    "analyze_pull_request",
    "extract_imports",
    "resolve_import_path",
    "__version__",
]
