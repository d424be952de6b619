"""Pytest configuration and fixtures."""

import pytest
from pathlib import Path
from textwrap import dedent

from prgraph.config import AnalyzerConfig, set_config


@pytest.fixture(autouse=True)
def default_config():
    """Isolate tests from config files and environment variables."""
    config = AnalyzerConfig()
    set_config(config)
    yield config
    set_config(None)


@pytest.fixture
def make_repo(tmp_path):
    """Factory writing ``{relative_path: content}`` into a fresh repository."""
    def _make(files: dict) -> Path:
        for rel_path, content in files.items():
            path = tmp_path / rel_path
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(dedent(content).lstrip(), encoding="utf-8")
        return tmp_path
    return _make


@pytest.fixture
def web_repo(make_repo):
    """A small front-end project under src/."""
    return make_repo({
        "src/main.js": """
            import App from './App';
            import './styles/main.css';
        """,
        "src/App.js": """
            import { formatDate } from './utils/date';
            const api = require('./services/api');
            import React from 'react';
        """,
        "src/utils/date.js": """
            export function formatDate(d) { return d.toISOString(); }
        """,
        "src/utils/index.js": """
            export * from './date';
        """,
        "src/services/api.ts": """
            import config from '../config.json';
            export const get = () => import('./client');
        """,
        "src/services/client.ts": """
            export default {};
        """,
        "src/config.json": "{}",
        "src/styles/main.css": """
            @import "./theme";
            body { margin: 0; }
        """,
        "src/styles/theme.css": """
            :root { --accent: red; }
        """,
        "node_modules/lib/index.js": """
            import x from '../../src/App';
        """,
        "README.md": "# project",
    })
