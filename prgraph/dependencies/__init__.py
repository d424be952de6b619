"""Dependencies module initialization."""

from prgraph.dependencies.extractor import ImportExtractor, ImportRule, FileCategory, extract_imports
from prgraph.dependencies.resolver import PathResolver, resolve_import_path
from prgraph.dependencies.forward import ForwardLinker, link_changed_files
from prgraph.dependencies.reverse import ReverseCrawler, ReverseCrawlResult, ReverseImportIndex, find_affected
from prgraph.dependencies.assembler import GraphAssembler, assemble

__all__ = [
    "ImportExtractor",
    "ImportRule",
    "FileCategory",
    "extract_imports",
    "PathResolver",
    "resolve_import_path",
    "ForwardLinker",
    "link_changed_files",
    "ReverseCrawler",
    "ReverseCrawlResult",
    "ReverseImportIndex",
    "find_affected",
    "GraphAssembler",
    "assemble",
]
