"""
Import extractor.

Lexically extracts import specifiers from source text. Each file category
has its own table of recognized surface forms; every form captures a single
quoted string literal. Concatenated, interpolated or computed specifiers are
not recognized.

Static `import` and `export ... from` forms must begin a statement (start of
a line, or after `;`, `{`, `}` or `>`), so the text of a statement quoted
inside a string literal is not taken for an import. `require()` and
`import()` calls are expressions and are matched wherever they appear,
including inside strings and comments.
"""

import re
import posixpath
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from prgraph.config import DependencyConfig, get_config
from prgraph.logging_config import get_logger

logger = get_logger("dependencies.extractor")


class FileCategory(Enum):
    """Source categories with their own import syntax."""
    SCRIPT = "script"
    STYLE = "style"


@dataclass(frozen=True)
class ImportRule:
    """One recognized surface form. Group 1 of ``pattern`` is the specifier."""
    name: str
    pattern: re.Pattern

    def find(self, content: str) -> list[str]:
        return [m.group(1) for m in self.pattern.finditer(content)]


SCRIPT_RULES = (
    # import x from './a'  /  import { a, b } from './a'  /  import './a'
    ImportRule("import", re.compile(
        r"""(?m)(?:^|[;{}>])[ \t]*import\s+(?:[\w$*{},\s]+\s+from\s+)?['"]([^'"\n]+)['"]"""
    )),
    # export * from './a'  /  export { a } from './a'
    ImportRule("export_from", re.compile(
        r"""(?m)(?:^|[;{}>])[ \t]*export\s+(?:type\s+)?(?:\*(?:\s+as\s+[\w$]+)?|\{[^{}]*\})\s*from\s+['"]([^'"\n]+)['"]"""
    )),
    # require('./a')
    ImportRule("require", re.compile(
        r"""\brequire\s*\(\s*['"]([^'"\n]+)['"]\s*\)"""
    )),
    # import('./a')
    ImportRule("dynamic_import", re.compile(
        r"""\bimport\s*\(\s*['"]([^'"\n]+)['"]\s*\)"""
    )),
)

STYLE_RULES = (
    # @import './theme';
    ImportRule("import", re.compile(
        r"""@import\s+['"]([^'"\n]+)['"]"""
    )),
    # @import url('./theme.css');
    ImportRule("import_url", re.compile(
        r"""@import\s+url\(\s*['"]?([^'")\s]+)['"]?\s*\)"""
    )),
    # @use './theme';  /  @forward './theme';
    ImportRule("use", re.compile(
        r"""@(?:use|forward)\s+['"]([^'"\n]+)['"]"""
    )),
)


class ImportExtractor:
    """
    Extracts raw import specifiers from file content.

    The category of a file is inferred from its extension. Files of an
    unrecognized category produce no specifiers.
    """

    def __init__(self, config: Optional[DependencyConfig] = None):
        self.config = config or get_config().dependencies
        self._extensions: dict[str, FileCategory] = {}
        for ext in self.config.script_extensions:
            self._extensions[ext.lower()] = FileCategory.SCRIPT
        for ext in self.config.style_extensions:
            self._extensions[ext.lower()] = FileCategory.STYLE
        self._rules: dict[FileCategory, list[ImportRule]] = {
            FileCategory.SCRIPT: list(SCRIPT_RULES),
            FileCategory.STYLE: list(STYLE_RULES),
        }

    def register_rule(self, category: FileCategory, rule: ImportRule) -> None:
        """Recognize an additional surface form for ``category``."""
        self._rules[category].append(rule)
        logger.debug(f"Registered {category.value} rule: {rule.name}")

    def categorize(self, file_path: str) -> Optional[FileCategory]:
        """Category of ``file_path`` by extension, or None."""
        ext = posixpath.splitext(str(file_path).replace("\\", "/"))[1].lower()
        return self._extensions.get(ext)

    def extract(self, content: Optional[str], file_path: str) -> list[str]:
        """
        Extract import specifiers from ``content``.

        Args:
            content: Text of the file
            file_path: Path of the file, used only to pick the rule table

        Returns:
            Specifiers in rule order, then order of appearance
        """
        category = self.categorize(file_path)
        if category is None or not content:
            return []

        specifiers: list[str] = []
        for rule in self._rules[category]:
            specifiers.extend(rule.find(content))
        return specifiers


def extract_imports(
    content: Optional[str],
    file_path: str,
    config: Optional[DependencyConfig] = None
) -> list[str]:
    """
    Extract import specifiers from file content.

    Args:
        content: Text of the file
        file_path: Path of the file
        config: Optional dependency configuration

    Returns:
        List of raw specifier strings
    """
    return ImportExtractor(config).extract(content, file_path)
