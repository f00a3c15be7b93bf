"""Tests for dead export detection."""

from pathlib import Path

import pytest

from routeshift.analysis.dead_code import (
    DeadCodeDetector,
    detect_dead_exports,
    is_framework_file,
    is_index_file,
    resolve_module_specifier,
    strip_extension,
)
from routeshift.core.models import DeclarationKind
from routeshift.parsing.source import parse_directory


class TestHelpers:
    """Tests for path helpers."""

    def test_strip_extension(self) -> None:
        """Test only source extensions are stripped."""
        assert strip_extension("/src/lib/a.tsx") == "/src/lib/a"
        assert strip_extension("/src/styles.css") == "/src/styles.css"

    def test_bare_specifier_is_not_resolved(self) -> None:
        """Test package specifiers are ignored."""
        assert resolve_module_specifier("/src/a.ts", "react") is None

    def test_resolves_existing_file(self, temp_dir: Path) -> None:
        """Test resolution to an existing file with an extension."""
        (temp_dir / "util.tsx").write_text("export const a = 1;\n")
        importer = str(temp_dir / "page.ts")

        assert resolve_module_specifier(importer, "./util") == str(temp_dir / "util.tsx")

    def test_resolves_index_file(self, temp_dir: Path) -> None:
        """Test resolution of a directory import to its index file."""
        (temp_dir / "lib").mkdir()
        (temp_dir / "lib" / "index.ts").write_text("export const a = 1;\n")
        importer = str(temp_dir / "page.ts")

        assert resolve_module_specifier(importer, "./lib") == str(temp_dir / "lib" / "index.ts")

    def test_unresolved_falls_back_to_stripped_path(self, temp_dir: Path) -> None:
        """Test a specifier pointing nowhere."""
        importer = str(temp_dir / "src" / "page.ts")
        assert resolve_module_specifier(importer, "../missing.js") == str(temp_dir / "missing")

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/app/page.tsx", True),
            ("/app/blog/layout.tsx", True),
            ("/app/not-found.tsx", True),
            ("/middleware.ts", True),
            ("/lib/pageUtils.ts", False),
        ],
    )
    def test_is_framework_file(self, path: str, expected: bool) -> None:
        """Test framework entry file names."""
        assert is_framework_file(path) == expected

    def test_is_index_file(self) -> None:
        """Test index detection."""
        assert is_index_file("/lib/index.ts")
        assert not is_index_file("/lib/indexer.ts")


class TestDeadCodeDetector:
    """Tests for the detector over the sample project."""

    def test_sample_lib(self, input_dir: Path) -> None:
        """Test unused exports in the sample lib directory."""
        result = detect_dead_exports(input_dir / "lib")
        dead = [(Path(d.file_path).name, d.export_name, d.type, d.line) for d in result.dead_exports]

        assert dead == [
            ("format.ts", "formatTitle", DeclarationKind.FUNCTION, 3),
            ("helpers.ts", "unusedHelper", DeclarationKind.FUNCTION, 5),
            ("helpers.ts", "UNUSED_CONSTANT", DeclarationKind.VARIABLE, 10),
        ]
        assert result.summary.total_exports == 5
        assert result.summary.dead_exports == 3
        assert result.summary.files_with_dead_code == 2

    def test_aliased_import_counts_original_name(self, input_dir: Path) -> None:
        """Test that `usedHelper as helper` keeps usedHelper alive."""
        detector = DeadCodeDetector(parse_directory(input_dir / "lib"))
        imported = detector.collect_imported_symbols()
        helpers = str(input_dir / "lib" / "helpers")

        assert f"{helpers}::usedHelper" in imported
        assert f"{helpers}::USED_CONSTANT" in imported
        assert f"{helpers}::helper" not in imported

    def test_framework_and_index_files_are_skipped(self, temp_dir: Path) -> None:
        """Test that framework files and index files are never reported."""
        app = temp_dir / "app"
        app.mkdir()
        (app / "page.tsx").write_text(
            "export const revalidate = 60;\n"
            "export default function Page() {\n  return <div />;\n}\n"
        )
        (app / "layout.tsx").write_text("export const metadata = { title: 'x' };\n")
        (temp_dir / "index.ts").write_text("export const entry = 1;\n")
        (temp_dir / "util.ts").write_text("export const orphan = 1;\n")

        result = detect_dead_exports(temp_dir)

        assert [d.export_name for d in result.dead_exports] == ["orphan"]
        assert result.summary.total_exports == 4

    def test_imports_from_sibling_directories(self, temp_dir: Path) -> None:
        """Test imports that resolve through parent directories."""
        (temp_dir / "lib").mkdir()
        (temp_dir / "components").mkdir()
        (temp_dir / "lib" / "api.ts").write_text(
            "export async function fetchPosts() { return []; }\n"
            "export type Post = { id: string };\n"
        )
        (temp_dir / "components" / "List.tsx").write_text(
            "import { fetchPosts } from '../lib/api';\n"
            "import type { Post } from '../lib/api';\n"
            "export default async function List() {\n"
            "  const posts: Post[] = await fetchPosts();\n"
            "  return <ul>{posts.length}</ul>;\n"
            "}\n"
        )

        result = detect_dead_exports(temp_dir)

        assert result.dead_exports == []
        assert result.summary.total_exports == 2

    def test_empty_directory(self, temp_dir: Path) -> None:
        """Test a directory with no source files."""
        result = detect_dead_exports(temp_dir)

        assert result.dead_exports == []
        assert result.summary.total_exports == 0
