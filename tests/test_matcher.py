"""Tests for matching imports against file and directory targets."""

import tempfile
from pathlib import Path

import pytest

from importscan.aliases import AliasConfig, AliasMap
from importscan.errors import InvalidTargetError, NotFoundError, TargetNotFoundError
from importscan.matcher import (
    find_directory_importers,
    find_importers,
    find_target_importers,
    normalize_file_target,
)
from importscan.reporter import CollectingReporter
from report.model import DirectoryImporterResult, ImporterResult


FIXTURES = Path(__file__).parent / "fixtures"

FIXTURE_SOURCES = [
    "button.tsx",
    "component.tsx",
    "component1.tsx",
    "component10.tsx",
    "component11.tsx",
    "component14.tsx",
    "component15.js",
    "component6.js",
    "nested/component8.tsx",
]


def _fixture(name: str) -> str:
    return str(FIXTURES / name)


def _write(root: Path, rel: str, content: str) -> str:
    path = root / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return str(path)


@pytest.fixture
def tree():
    """A project with a lib/ directory and a few files importing from it."""
    with tempfile.TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        files = {
            "lib/a.ts": "export const a = 1;\n",
            "lib/b.ts": "import { a } from './a';\nexport const b = a;\n",
            "lib/nested/c.ts": "export const c = 3;\n",
            "app.ts": "import { a } from './lib/a';\nimport { c } from './lib/nested/c';\n",
            "main.ts": "import { b } from './lib/b';\nimport { a } from './lib/a';\n",
            "other.ts": "import lib from './lib';\nimport x from 'react';\n",
            "library/d.ts": "export const d = 4;\n",
            "uses_library.ts": "import { d } from './library/d';\n",
        }
        paths = {rel: _write(root, rel, content) for rel, content in files.items()}
        yield root, paths


class TestFindImporters:
    """Tests for file targets."""

    def test_single_importer(self):
        """Only the file that imports the button is reported."""
        files = [_fixture("component1.tsx"), _fixture("button.tsx")]

        matches = find_importers(_fixture("button.tsx"), files, str(FIXTURES))

        assert len(matches) == 1
        assert matches[0].source_file == _fixture("component1.tsx")
        assert matches[0].import_path == "./button.tsx"
        assert matches[0].line == 1

    def test_target_never_imports_itself(self):
        """The target file is skipped even if it is in the candidate list."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            target = _write(root, "self.ts", "import me from './self';\n")

            assert find_importers(target, [target], tmpdir) == []

    def test_all_fixture_importers(self):
        """Relative, parent, CommonJS and aliased imports are all found."""
        files = [_fixture(name) for name in FIXTURE_SOURCES]

        matches = find_importers(_fixture("button.tsx"), files, str(FIXTURES))

        assert [Path(m.source_file).name for m in matches] == [
            "component1.tsx",
            "component10.tsx",
            "component11.tsx",
            "component14.tsx",
            "component15.js",
            "component6.js",
            "component8.tsx",
        ]

    def test_aliases_need_config(self):
        """Without the import map, the bare 'button' import does not match."""
        files = [_fixture("component10.tsx")]

        matches = find_importers(
            _fixture("button.tsx"), files, str(FIXTURES), alias_config=AliasConfig()
        )

        assert matches == []

    def test_supplied_alias_config(self):
        """A preloaded config is used instead of the files under root."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            target = _write(root, "src/button.ts", "export {};\n")
            importer = _write(root, "src/app.ts", "import b from '#button';\n")
            config = AliasConfig(import_map=AliasMap(imports={"#button": "./button.ts"}))

            matches = find_importers(target, [importer], tmpdir, alias_config=config)

            assert [m.import_path for m in matches] == ["#button"]

    def test_root_relative_candidates(self):
        """Candidate paths relative to the root are located under it."""
        matches = find_importers(
            _fixture("button.tsx"), ["component1.tsx", "nested/component8.tsx"], str(FIXTURES)
        )

        assert [m.source_file for m in matches] == ["component1.tsx", "nested/component8.tsx"]

    def test_root_candidate_preferred_over_cwd(self, monkeypatch):
        """A same-named file in the working directory does not shadow the root."""
        with tempfile.TemporaryDirectory() as tmpdir:
            base = Path(tmpdir)
            _write(base, "a.ts", "const x = 1;\n")
            _write(base, "proj/a.ts", "import b from './b';\n")
            target = _write(base, "proj/b.ts", "export {};\n")
            monkeypatch.chdir(base)

            matches = find_importers(target, ["a.ts"], "proj")

            assert [m.source_file for m in matches] == ["a.ts"]

    def test_cwd_relative_candidates(self, monkeypatch):
        """Paths from scanning a relative root are found from the working directory."""
        with tempfile.TemporaryDirectory() as tmpdir:
            base = Path(tmpdir)
            _write(base, "proj/a.ts", "import b from './b';\n")
            target = _write(base, "proj/b.ts", "export {};\n")
            monkeypatch.chdir(base)

            matches = find_importers(target, [str(Path("proj") / "a.ts")], "proj")

            assert len(matches) == 1

    def test_non_utf8_config_does_not_abort(self):
        """A broken import map becomes a warning and matching goes on."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            (root / "import_map.json").write_bytes(b'{"imports": {"x": "\xff\xfe"}}')
            importer = _write(root, "a.ts", "import b from './b';\n")
            target = _write(root, "b.ts", "export {};\n")
            reporter = CollectingReporter()

            matches = find_importers(target, [importer], tmpdir, reporter=reporter)

            assert len(matches) == 1
            assert len(reporter) == 1

    def test_extensionless_target(self):
        """The target extension may be omitted."""
        files = [_fixture("component1.tsx")]

        matches = find_importers(str(FIXTURES / "button"), files, str(FIXTURES))

        assert len(matches) == 1

    def test_dynamic_imports_ignored(self):
        """import() calls never count as importers."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            target = _write(root, "lazy.ts", "export {};\n")
            importer = _write(root, "app.ts", "const m = await import('./lazy');\n")

            assert find_importers(target, [importer], tmpdir) == []

    def test_multiple_imports_from_one_file(self):
        """Each matching import is reported, in line order."""
        with tempfile.TemporaryDirectory() as tmpdir:
            root = Path(tmpdir)
            target = _write(root, "util.ts", "export {};\n")
            importer = _write(
                root, "app.ts", "import a from './util';\nconst b = require('./util.ts');\n"
            )

            matches = find_importers(target, [importer], tmpdir)

            assert [(m.import_path, m.line) for m in matches] == [("./util", 1), ("./util.ts", 2)]

    def test_idempotent(self):
        """Repeated searches give identical results."""
        files = [_fixture(name) for name in FIXTURE_SOURCES]

        first = find_importers(_fixture("button.tsx"), files, str(FIXTURES))
        second = find_importers(_fixture("button.tsx"), files, str(FIXTURES))

        assert first == second

    def test_concurrency_preserves_order(self):
        """Parallel processing returns the same matches in the same order."""
        files = [_fixture(name) for name in FIXTURE_SOURCES]

        sequential = find_importers(_fixture("button.tsx"), files, str(FIXTURES))
        parallel = find_importers(_fixture("button.tsx"), files, str(FIXTURES), concurrency=4)

        assert parallel == sequential

    def test_missing_target(self):
        """A target that does not exist raises TargetNotFoundError."""
        with pytest.raises(TargetNotFoundError):
            find_importers(_fixture("nonexistent.ts"), [], str(FIXTURES))

    def test_missing_target_is_not_found(self):
        """TargetNotFoundError is a NotFoundError."""
        with pytest.raises(NotFoundError):
            normalize_file_target(_fixture("nonexistent"))

    def test_directory_target_rejected(self):
        """find_importers only accepts files."""
        with pytest.raises(InvalidTargetError):
            find_importers(str(FIXTURES), [], str(FIXTURES))

    def test_vanished_file_is_warning(self):
        """Unreadable candidates are reported and skipped."""
        reporter = CollectingReporter()
        missing = _fixture("vanished.ts")
        files = [missing, _fixture("component1.tsx")]

        matches = find_importers(_fixture("button.tsx"), files, str(FIXTURES), reporter=reporter)

        assert len(matches) == 1
        assert len(reporter) == 1
        assert reporter.warnings[0].path == missing
        assert "Skipping file" in reporter.warnings[0].message


class TestFindDirectoryImporters:
    """Tests for directory targets."""

    def test_groups_sorted(self, tree):
        """Groups are keyed by relative path and sorted."""
        root, paths = tree
        files = list(paths.values())

        result = find_directory_importers(str(root / "lib"), files, str(root))

        assert [g.imported_file for g in result.groups] == ["a.ts", "b.ts", "nested/c.ts"]
        assert [imp.source_file for imp in result.groups[0].importers] == [
            paths["app.ts"],
            paths["main.ts"],
        ]
        assert result.count == 4

    def test_files_inside_target_skipped(self, tree):
        """lib/b.ts importing lib/a.ts is not reported."""
        root, paths = tree

        result = find_directory_importers(str(root / "lib"), list(paths.values()), str(root))

        sources = {imp.source_file for g in result.groups for imp in g.importers}
        assert paths["lib/b.ts"] not in sources

    def test_directory_itself_not_matched(self, tree):
        """An import of the directory path itself is not inside it."""
        root, paths = tree

        result = find_directory_importers(str(root / "lib"), [paths["other.ts"]], str(root))

        assert result.groups == []
        assert result.count == 0

    def test_sibling_prefix_not_matched(self, tree):
        """library/ is not inside lib/."""
        root, paths = tree

        result = find_directory_importers(
            str(root / "lib"), [paths["uses_library.ts"]], str(root)
        )

        assert result.groups == []

    def test_order_independent(self, tree):
        """Candidate order does not change the result."""
        root, paths = tree
        files = list(paths.values())

        forward = find_directory_importers(str(root / "lib"), files, str(root))
        backward = find_directory_importers(str(root / "lib"), files[::-1], str(root))

        assert forward == backward

    def test_import_details_kept(self, tree):
        """Each importer records the specifier and its line."""
        root, paths = tree

        result = find_directory_importers(str(root / "lib"), [paths["main.ts"]], str(root))

        by_file = {g.imported_file: g.importers for g in result.groups}
        assert by_file["a.ts"][0].import_path == "./lib/a"
        assert by_file["a.ts"][0].line == 2
        assert by_file["b.ts"][0].line == 1

    def test_target_and_root_as_given(self, tree):
        """The result echoes the target and root strings."""
        root, paths = tree
        target = str(root / "lib")

        result = find_directory_importers(target, [], str(root))

        assert result.target == target
        assert result.root == str(root)

    def test_missing_directory(self):
        """A missing directory raises TargetNotFoundError."""
        with pytest.raises(TargetNotFoundError):
            find_directory_importers(_fixture("no_such_dir"), [], str(FIXTURES))

    def test_file_is_not_directory(self):
        """A file target raises InvalidTargetError."""
        with pytest.raises(InvalidTargetError):
            find_directory_importers(_fixture("button.tsx"), [], str(FIXTURES))


class TestFindTargetImporters:
    """Tests for dispatching on the target kind."""

    def test_file_target(self):
        """A file target yields an ImporterResult."""
        files = [_fixture("component1.tsx"), _fixture("component6.js")]

        result = find_target_importers(_fixture("button.tsx"), files, str(FIXTURES))

        assert isinstance(result, ImporterResult)
        assert result.count == 2
        assert result.importers == files

    def test_directory_target(self, tree):
        """A directory target yields a DirectoryImporterResult."""
        root, paths = tree

        result = find_target_importers(str(root / "lib"), list(paths.values()), str(root))

        assert isinstance(result, DirectoryImporterResult)
        assert result.count == 4

    def test_missing_target(self):
        """Missing targets propagate as TargetNotFoundError."""
        with pytest.raises(TargetNotFoundError):
            find_target_importers(_fixture("missing.tsx"), [], str(FIXTURES))
