"""Tests for the reverse crawler."""

import os

import pytest
from prgraph.config import AnalyzerConfig
from prgraph.dependencies import ReverseCrawler, ReverseImportIndex, find_affected
from prgraph.models import DependencyEdge


def chain_depth(edges, changed, path):
    """Shortest number of reverse hops from ``path`` back to a changed file."""
    frontier, seen, hops = {path}, {path}, 0
    while frontier:
        if frontier & set(changed):
            return hops
        frontier = {e.target for e in edges if e.source in frontier} - seen
        seen |= frontier
        hops += 1
    return None


class TestReverseCrawler:
    """Tests for ReverseCrawler."""

    def test_direct_dependent(self, make_repo):
        """c.js importing a changed a.js is affected."""
        repo = make_repo({"a.js": "", "c.js": "import x from './a';"})
        result = find_affected(["a.js"], repo, max_depth=1)

        assert result.affected_files == ["c.js"]
        assert result.edges == [DependencyEdge("c.js", "a.js")]

    def test_depth_limit(self, make_repo):
        """With max_depth=1, d.js -> c.js -> a.js only reaches c.js."""
        repo = make_repo({
            "a.js": "",
            "c.js": "import './a';",
            "d.js": "import './c';",
        })
        result = find_affected(["a.js"], repo, max_depth=1)

        assert result.affected_files == ["c.js"]
        assert "d.js" not in result.affected_files

    def test_transitive_within_depth(self, make_repo):
        repo = make_repo({
            "a.js": "",
            "c.js": "import './a';",
            "d.js": "import './c';",
            "e.js": "import './d';",
        })
        result = find_affected(["a.js"], repo, max_depth=2)

        assert result.affected_files == ["c.js", "d.js"]
        assert result.edges == [DependencyEdge("c.js", "a.js"), DependencyEdge("d.js", "c.js")]
        assert result.depths == {"c.js": 1, "d.js": 2}

    def test_zero_depth(self, make_repo):
        repo = make_repo({"a.js": "", "c.js": "import './a';"})
        result = find_affected(["a.js"], repo, max_depth=0)
        assert result.affected_files == []
        assert result.edges == []

    def test_changed_importers_excluded(self, make_repo):
        repo = make_repo({"a.js": "", "b.js": "import './a';", "c.js": "import './a';"})
        result = find_affected(["a.js", "b.js"], repo, max_depth=2)

        assert result.affected_files == ["c.js"]
        assert all(e.source not in {"a.js", "b.js"} for e in result.edges)

    @pytest.mark.parametrize("changed", [["a.js"], ["a.js", "b.js"]])
    def test_cycle_terminates(self, make_repo, changed):
        repo = make_repo({"a.js": "import './b';", "b.js": "import './a';"})
        result = find_affected(changed, repo, max_depth=10)

        if changed == ["a.js"]:
            assert result.affected_files == ["b.js"]
            assert result.edges == [DependencyEdge("b.js", "a.js")]
        else:
            assert result.affected_files == []
            assert result.edges == []

    def test_unchanged_cycle(self, make_repo):
        """An import cycle among affected files is walked once."""
        repo = make_repo({
            "a.js": "",
            "c.js": "import './a';\nimport './d';",
            "d.js": "import './c';",
        })
        result = find_affected(["a.js"], repo, max_depth=5)

        assert result.affected_files == ["c.js", "d.js"]
        assert DependencyEdge("d.js", "c.js") in result.edges
        assert DependencyEdge("c.js", "d.js") in result.edges

    def test_diamond(self, make_repo):
        repo = make_repo({
            "a.js": "",
            "b.js": "import './a';",
            "c.js": "import './a';",
            "d.js": "import './b';\nimport './c';",
        })
        result = find_affected(["a.js"], repo, max_depth=3)

        assert result.affected_files == ["b.js", "c.js", "d.js"]
        assert result.depths["d.js"] == 2
        assert DependencyEdge("d.js", "b.js") in result.edges
        assert DependencyEdge("d.js", "c.js") in result.edges

    def test_bounded_depth_property(self, make_repo):
        files = {"f0.js": ""}
        for i in range(1, 7):
            files[f"f{i}.js"] = f"import './f{i - 1}';"
        repo = make_repo(files)

        for depth in range(0, 5):
            result = find_affected(["f0.js"], repo, max_depth=depth)
            assert len(result.affected_files) == depth
            for path in result.affected_files:
                assert chain_depth(result.edges, ["f0.js"], path) <= depth

    def test_source_roots_preferred(self, make_repo):
        """Only conventional source roots are scanned when present."""
        repo = make_repo({
            "src/a.js": "",
            "src/b.js": "import './a';",
            "scripts/tool.js": "import '../src/a';",
        })
        result = find_affected(["src/a.js"], repo, max_depth=1)
        assert result.affected_files == ["src/b.js"]

    def test_falls_back_to_repo_root(self, make_repo):
        repo = make_repo({
            "scripts/a.js": "",
            "scripts/tool.js": "import './a';",
        })
        result = find_affected(["scripts/a.js"], repo, max_depth=1)
        assert result.affected_files == ["scripts/tool.js"]

    def test_ignored_directories(self, web_repo):
        result = find_affected(["src/App.js"], web_repo, max_depth=1)
        assert result.affected_files == ["src/main.js"]
        assert not any(p.startswith("node_modules") for p in result.affected_files)

    def test_nested_ignored_directories(self, make_repo):
        repo = make_repo({
            "a.js": "",
            "dist/bundle.js": "import '../a';",
            "pkg/build/out.js": "import '../../a';",
            "pkg/user.js": "import '../a';",
        })
        result = find_affected(["a.js"], repo, max_depth=1)
        assert result.affected_files == ["pkg/user.js"]

    def test_stylesheet_dependents(self, web_repo):
        result = find_affected(["src/styles/theme.css"], web_repo, max_depth=2)
        assert result.affected_files == ["src/styles/main.css", "src/main.js"]

    def test_missing_repository_root(self, tmp_path):
        result = find_affected(["a.js"], tmp_path / "missing", max_depth=2)
        assert result.affected_files == []
        assert result.edges == []

    def test_importer_with_multiple_references(self, make_repo):
        """Importing the same file twice yields one edge."""
        repo = make_repo({
            "a.js": "",
            "c.js": "import x from './a';\nconst y = require('./a.js');",
        })
        result = find_affected(["a.js"], repo, max_depth=1)
        assert result.edges == [DependencyEdge("c.js", "a.js")]

    def test_idempotent(self, web_repo):
        first = find_affected(["src/utils/date.js"], web_repo, max_depth=3)
        second = find_affected(["src/utils/date.js"], web_repo, max_depth=3)
        assert first.affected_files == second.affected_files
        assert first.edges == second.edges

    def test_set_input_is_deterministic(self, make_repo):
        repo = make_repo({"a.js": "", "b.js": "", "c.js": "import './b';\nimport './a';"})
        result = find_affected({"b.js", "a.js"}, repo, max_depth=1)
        assert result.edges == [DependencyEdge("c.js", "a.js"), DependencyEdge("c.js", "b.js")]

    def test_custom_source_roots(self, make_repo):
        repo = make_repo({
            "packages/core/a.js": "",
            "packages/ui/b.js": "import '../core/a';",
            "src/other.js": "import '../packages/core/a';",
        })
        config = AnalyzerConfig()
        config.dependencies.source_roots = ["packages"]
        result = ReverseCrawler(repo, config).crawl(["packages/core/a.js"], 1)
        assert result.affected_files == ["packages/ui/b.js"]

    def test_oversized_importer_is_skipped(self, make_repo):
        """A file over the size limit is treated as having no imports."""
        repo = make_repo({"a.js": "", "c.js": "import './a';"})
        config = AnalyzerConfig()
        config.parser.max_file_size_mb = 0

        result = ReverseCrawler(repo, config).crawl(["a.js"], 2)

        assert result.affected_files == []
        assert result.edges == []
        assert result.files_scanned == 2

    def test_undecodable_importer_is_skipped(self, make_repo):
        repo = make_repo({"a.js": "", "b.js": "import './a';", "c.js": "import './a';"})
        (repo / "b.js").write_bytes(b"import './a';\n\xff\xfe")
        config = AnalyzerConfig()
        config.parser.fallback_encodings = []

        result = ReverseCrawler(repo, config).crawl(["a.js"], 1)

        assert result.affected_files == ["c.js"]
        assert result.edges == [DependencyEdge("c.js", "a.js")]

    def test_unlistable_directory_is_skipped(self, make_repo, monkeypatch):
        repo = make_repo({
            "a.js": "",
            "locked/b.js": "import '../a';",
            "open/c.js": "import '../a';",
        })
        real_scandir = os.scandir

        def scandir(path):
            if os.path.basename(os.fspath(path)) == "locked":
                raise PermissionError(13, "Permission denied", os.fspath(path))
            return real_scandir(path)

        monkeypatch.setattr(os, "scandir", scandir)
        result = find_affected(["a.js"], repo, max_depth=1)

        assert result.affected_files == ["open/c.js"]
        assert result.files_scanned == 2

    @pytest.mark.parametrize("seed", ["/src/a.js", "./src/a.js", "src\\a.js"])
    def test_seed_paths_are_normalized(self, make_repo, seed):
        repo = make_repo({"src/a.js": "", "src/b.js": "import './a';"})
        result = find_affected([seed], repo, max_depth=1)

        assert result.affected_files == ["src/b.js"]
        assert result.edges == [DependencyEdge("src/b.js", "src/a.js")]


class TestReverseImportIndex:
    """Tests for the reverse-import index."""

    def test_add_deduplicates(self):
        index = ReverseImportIndex()
        index.add("c.js", "a.js")
        index.add("c.js", "a.js")
        index.add("d.js", "a.js")

        assert index.importers_of("a.js") == ["c.js", "d.js"]
        assert index.importers_of("x.js") == []
        assert "a.js" in index
        assert len(index) == 1

    def test_build_index_reads_each_file_once(self, web_repo):
        crawler = ReverseCrawler(web_repo)
        index = crawler.build_index()

        assert index.files_scanned == 8
        assert index.importers_of("src/utils/date.js") == ["src/App.js", "src/utils/index.js"]
        assert index.importers_of("src/config.json") == ["src/services/api.ts"]
