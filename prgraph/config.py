# Configuration management

import os
import json
from pathlib import Path
from dataclasses import dataclass, field, asdict
from typing import Optional

import yaml

from prgraph.exceptions import InvalidConfigError


@dataclass
class ParserConfig:
    encoding: str = "utf-8"
    fallback_encodings: list = field(default_factory=lambda: ["latin-1"])
    max_file_size_mb: int = 5


@dataclass
class DependencyConfig:
    include_reverse_deps: bool = True
    max_depth: int = 2
    source_roots: list = field(default_factory=lambda: ["src", "frontend", "backend", "app", "lib"])
    ignored_dirs: list = field(default_factory=lambda: ["node_modules", ".git", "dist", "build", ".next", "coverage"])
    script_extensions: list = field(default_factory=lambda: [".js", ".ts", ".jsx", ".tsx", ".svelte", ".mjs", ".cjs", ".vue"])
    style_extensions: list = field(default_factory=lambda: [".css", ".scss", ".sass", ".less"])
    resolve_extensions: list = field(default_factory=lambda: [".js", ".ts", ".jsx", ".tsx", ".svelte", ".json", ".css", ".scss"])
    index_basename: str = "index"
    follow_symlinks: bool = False

    @property
    def scan_extensions(self) -> set[str]:
        """Extensions of files the reverse crawler reads."""
        return set(self.script_extensions) | set(self.style_extensions)


@dataclass
class GraphConfig:
    tool_name: str = "prgraph"
    deduplicate_edges: bool = True


@dataclass
class LoggingConfig:
    level: str = "WARNING"
    format: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    file: Optional[str] = None
    max_file_size_mb: int = 10
    backup_count: int = 3


@dataclass
class AnalyzerConfig:
    parser: ParserConfig = field(default_factory=ParserConfig)
    dependencies: DependencyConfig = field(default_factory=DependencyConfig)
    graph: GraphConfig = field(default_factory=GraphConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


@dataclass
class AnalysisOptions:
    """Per-call overrides for a single analysis."""
    include_reverse_deps: bool = True
    max_depth: int = 2

    def __post_init__(self):
        if not isinstance(self.max_depth, int) or isinstance(self.max_depth, bool):
            raise InvalidConfigError(f"max_depth must be an integer, got {self.max_depth!r}")
        if self.max_depth < 0:
            raise InvalidConfigError(f"max_depth must be >= 0, got {self.max_depth}")

    @classmethod
    def from_config(cls, config: AnalyzerConfig) -> "AnalysisOptions":
        return cls(
            include_reverse_deps=config.dependencies.include_reverse_deps,
            max_depth=config.dependencies.max_depth,
        )


SECTIONS = ["parser", "dependencies", "graph", "logging"]


class ConfigManager:
    ENV_PREFIX = "PRGRAPH_"
    CONFIG_NAMES = [".prgraph.yaml", ".prgraph.yml", ".prgraph.json"]

    def __init__(self, config: Optional[AnalyzerConfig] = None):
        self.config = config or AnalyzerConfig()

    def load_from_file(self, path: str) -> "ConfigManager":
        path = Path(path)
        if not path.exists():
            return self

        content = path.read_text(encoding="utf-8")

        try:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(content)
            else:
                data = json.loads(content)
        except (yaml.YAMLError, json.JSONDecodeError) as e:
            raise InvalidConfigError(f"Could not parse config file {path}: {e}") from e

        if data is not None and not isinstance(data, dict):
            raise InvalidConfigError(f"Config file {path} must contain a mapping")

        self._apply_config(data)
        return self

    def _apply_config(self, data: Optional[dict]) -> None:
        if not data:
            return

        for section, values in data.items():
            if section in SECTIONS and isinstance(values, dict):
                section_config = getattr(self.config, section)
                for key, value in values.items():
                    if hasattr(section_config, key):
                        setattr(section_config, key, value)

    def load_from_env(self) -> "ConfigManager":
        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX):
                continue
            config_key = key[len(self.ENV_PREFIX):].lower()
            if config_key == "log_level":
                self.config.logging.level = value
            elif config_key == "max_depth":
                try:
                    self.config.dependencies.max_depth = int(value)
                except ValueError as e:
                    raise InvalidConfigError(f"{key} must be an integer, got {value!r}") from e
            elif config_key == "include_reverse_deps":
                self.config.dependencies.include_reverse_deps = value.lower() in ("1", "true", "yes")
        return self

    def save(self, path: str, format: str = "yaml") -> None:
        data = self._to_dict()
        path = Path(path)

        if format == "yaml":
            content = yaml.safe_dump(data, default_flow_style=False, sort_keys=False)
        else:
            content = json.dumps(data, indent=2)

        path.write_text(content, encoding="utf-8")

    def _to_dict(self) -> dict:
        return {name: asdict(getattr(self.config, name)) for name in SECTIONS}

    @classmethod
    def auto_discover(cls, start_path: Optional[Path] = None) -> "ConfigManager":
        manager = cls()
        search_paths = []

        if start_path:
            search_paths.append(Path(start_path))
        search_paths.extend([Path.cwd(), Path.home()])

        for search_path in search_paths:
            found = next(
                (search_path / name for name in cls.CONFIG_NAMES if (search_path / name).is_file()),
                None,
            )
            if found is not None:
                manager.load_from_file(str(found))
                break

        manager.load_from_env()
        return manager


_config: Optional[AnalyzerConfig] = None

def get_config() -> AnalyzerConfig:
    global _config
    if _config is None:
        _config = ConfigManager.auto_discover().config
    return _config

def set_config(config: Optional[AnalyzerConfig]) -> None:
    global _config
    _config = config
