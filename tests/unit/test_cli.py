"""Tests for CLI module."""

import json
import shutil
from pathlib import Path

import pytest
from typer.testing import CliRunner

from routeshift import __version__
from routeshift.cli import app

runner = CliRunner()


@pytest.fixture
def project(input_dir: Path, temp_dir: Path) -> Path:
    """Copy the sample project into a temporary directory."""
    target = temp_dir / "project"
    shutil.copytree(input_dir, target)
    return target


class TestCLI:
    """Tests for top-level options."""

    def test_version_flag(self) -> None:
        """Test --version flag."""
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.stdout

    def test_help_flag(self) -> None:
        """Test --help flag."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "routeshift" in result.stdout.lower()

    def test_no_args_shows_help(self) -> None:
        """Test that no arguments shows help (no_args_is_help=True)."""
        result = runner.invoke(app, [])
        assert result.exit_code in (0, 2)
        assert "Usage" in result.stdout or "usage" in result.stdout.lower()

    def test_config_option_uses_indent(self, input_dir: Path, temp_dir: Path) -> None:
        """Test --config settings apply to JSON output."""
        config_path = temp_dir / ".routeshift.yml"
        config_path.write_text("output:\n  indent: 4\n")

        result = runner.invoke(
            app, ["-c", str(config_path), "analyze", "config", str(input_dir / "next.config.js")]
        )

        assert result.exit_code == 0
        assert '\n    "issues": [' in result.stdout


class TestAnalyzeCommands:
    """Tests for the analyze sub-commands."""

    def test_routes(self, input_dir: Path) -> None:
        """Test analyze routes prints camelCase JSON."""
        result = runner.invoke(app, ["analyze", "routes", str(input_dir / "pages")])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [r["routePath"] for r in data["routes"]] == ["/", "/api/posts", "/blog/:slug"]
        assert data["summary"]["total"] == 3

    def test_routes_missing_directory(self, temp_dir: Path) -> None:
        """Test a missing directory exits with code 1."""
        result = runner.invoke(app, ["analyze", "routes", str(temp_dir / "pages")])

        assert result.exit_code == 1
        assert "Path not found" in result.output

    def test_components(self, input_dir: Path) -> None:
        """Test analyze components."""
        result = runner.invoke(app, ["analyze", "components", str(input_dir)])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["summary"] == {"total": 6, "client": 3, "server": 3, "withClientDirective": 1}

    def test_dependencies(self, input_dir: Path) -> None:
        """Test analyze dependencies."""
        result = runner.invoke(app, ["analyze", "dependencies", str(input_dir / "package.json")])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["summary"]["replaceable"] == 3

    def test_dead_code(self, input_dir: Path) -> None:
        """Test analyze dead-code."""
        result = runner.invoke(app, ["analyze", "dead-code", str(input_dir / "lib")])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [d["exportName"] for d in data["deadExports"]] == [
            "formatTitle",
            "unusedHelper",
            "UNUSED_CONSTANT",
        ]

    def test_props(self, input_dir: Path) -> None:
        """Test analyze props."""
        result = runner.invoke(app, ["analyze", "props", str(input_dir / "components" / "Footer.tsx")])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["components"][0]["propsTypeName"] == "FooterProps"

    def test_props_missing_file(self, temp_dir: Path) -> None:
        """Test a missing file exits with code 1."""
        result = runner.invoke(app, ["analyze", "props", str(temp_dir / "Nope.tsx")])
        assert result.exit_code == 1

    def test_config(self, input_dir: Path) -> None:
        """Test analyze config."""
        result = runner.invoke(app, ["analyze", "config", str(input_dir / "next.config.js")])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["issues"][0]["property"] == "i18n"
        assert data["summary"]["errors"] == 1


class TestTransformCommands:
    """Tests for the transform sub-commands."""

    def test_imports_json(self, input_dir: Path) -> None:
        """Test transform imports prints the rewritten code."""
        result = runner.invoke(app, ["transform", "imports", str(input_dir / "pages" / "index.tsx")])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["changes"][0]["action"] == "remove"
        assert "next/head" not in data["code"]

    def test_imports_write(self, project: Path) -> None:
        """Test --write rewrites the file in place."""
        target = project / "components" / "Header.tsx"

        result = runner.invoke(app, ["-q", "transform", "imports", "--write", str(target)])

        assert result.exit_code == 0
        assert "from 'next/navigation'" in target.read_text()
        assert "next/router" not in target.read_text()

    def test_imports_dry_run_does_not_write(self, project: Path) -> None:
        """Test --dry-run wins over --write."""
        target = project / "components" / "Header.tsx"
        before = target.read_text()

        result = runner.invoke(app, ["transform", "imports", "--dry-run", "--write", str(target)])

        assert result.exit_code == 0
        assert target.read_text() == before
        assert json.loads(result.stdout)["summary"]["rewritten"] == 1

    def test_imports_diff(self, input_dir: Path) -> None:
        """Test the diff output format."""
        result = runner.invoke(
            app,
            ["transform", "imports", "--format", "diff", str(input_dir / "app" / "blog" / "page.tsx")],
        )

        assert result.exit_code == 0
        assert "--- a/page.tsx" in result.stdout
        assert "-import { useRouter } from 'next/router';" in result.stdout
        assert "+import { useRouter } from 'next/navigation';" in result.stdout

    def test_imports_unknown_format(self, input_dir: Path) -> None:
        """Test an unsupported format exits with code 1."""
        result = runner.invoke(
            app, ["transform", "imports", "-f", "yaml", str(input_dir / "pages" / "index.tsx")]
        )
        assert result.exit_code == 1

    def test_data_fetching(self, input_dir: Path) -> None:
        """Test transform data-fetching."""
        result = runner.invoke(
            app, ["transform", "data-fetching", str(input_dir / "pages" / "blog" / "[slug].tsx")]
        )

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert [p["name"] for p in data["patterns"]] == ["getStaticPaths", "getStaticProps"]

    def test_router(self, input_dir: Path) -> None:
        """Test transform router."""
        result = runner.invoke(app, ["transform", "router", str(input_dir / "components" / "Header.tsx")])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["hasRouterImport"] is True
        assert data["summary"]["compatible"] == 1

    def test_image(self, temp_dir: Path) -> None:
        """Test transform image."""
        target = temp_dir / "gallery.tsx"
        target.write_text("import Image from 'next/legacy/image';\n")

        result = runner.invoke(app, ["transform", "image", str(target)])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["summary"]["legacy"] == 1

    def test_parse_error(self, temp_dir: Path) -> None:
        """Test unparseable input exits with code 1."""
        target = temp_dir / "broken.ts"
        target.write_text("const = ;\n")

        result = runner.invoke(app, ["transform", "router", str(target)])

        assert result.exit_code == 1
        assert "Failed to parse" in result.output


class TestValidateCommand:
    """Tests for the validate command."""

    def test_failing_app(self, input_dir: Path) -> None:
        """Test errors exit with code 1 after printing the result."""
        result = runner.invoke(app, ["validate", str(input_dir / "app")])

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert data["summary"]["passed"] is False
        assert data["filesChecked"] == 1

    def test_passing_app(self, temp_dir: Path) -> None:
        """Test a clean app directory exits with code 0."""
        (temp_dir / "page.tsx").write_text("export default function Page() {\n  return <main />;\n}\n")

        result = runner.invoke(app, ["validate", str(temp_dir)])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["summary"]["passed"] is True


class TestStateCommands:
    """Tests for the state sub-commands."""

    def test_show_before_init(self, temp_dir: Path) -> None:
        """Test show prints null for an uninitialized project."""
        result = runner.invoke(app, ["state", "show", "--root", str(temp_dir)])

        assert result.exit_code == 0
        assert json.loads(result.stdout) is None

    def test_init_update_resume(self, temp_dir: Path) -> None:
        """Test the phase workflow."""
        result = runner.invoke(app, ["state", "init", "-r", str(temp_dir)])
        assert result.exit_code == 0
        assert json.loads(result.stdout)["phases"][0]["status"] == "pending"

        result = runner.invoke(app, ["state", "update", "assessment", "completed", "-r", str(temp_dir)])
        assert result.exit_code == 0

        result = runner.invoke(app, ["state", "resume", "-r", str(temp_dir)])
        assert json.loads(result.stdout) == {"resumePoint": "planning"}

    def test_update_invalid_status(self, temp_dir: Path) -> None:
        """Test an unknown status exits with code 1."""
        runner.invoke(app, ["state", "init", "-r", str(temp_dir)])

        result = runner.invoke(app, ["state", "update", "assessment", "done", "-r", str(temp_dir)])
        assert result.exit_code == 1

    def test_update_before_init(self, temp_dir: Path) -> None:
        """Test updating before init exits with a hint."""
        result = runner.invoke(app, ["state", "update", "routes", "completed", "-r", str(temp_dir)])

        assert result.exit_code == 1
        assert "not initialized" in result.output

    def test_error_log_workflow(self, temp_dir: Path) -> None:
        """Test log-error, errors and resolve."""
        result = runner.invoke(
            app,
            ["state", "log-error", "routes", "Route clash", "-s", "warning", "--file", "a.tsx", "-r", str(temp_dir)],
        )
        assert result.exit_code == 0
        entry = json.loads(result.stdout)
        assert entry["severity"] == "warning"
        assert entry["file"] == "a.tsx"

        result = runner.invoke(app, ["state", "resolve", entry["id"], "-r", str(temp_dir)])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"id": entry["id"], "resolved": True}

        result = runner.invoke(app, ["state", "errors", "--unresolved", "-r", str(temp_dir)])
        assert json.loads(result.stdout) == {"errors": []}

        result = runner.invoke(app, ["state", "errors", "-r", str(temp_dir)])
        assert len(json.loads(result.stdout)["errors"]) == 1

    def test_log_error_invalid_severity(self, temp_dir: Path) -> None:
        """Test an unknown severity exits with code 1."""
        result = runner.invoke(app, ["state", "log-error", "routes", "x", "-s", "fatal", "-r", str(temp_dir)])
        assert result.exit_code == 1


class TestScaffoldCommands:
    """Tests for the scaffold sub-commands."""

    def test_page_to_stdout(self) -> None:
        """Test scaffold page prints the template."""
        result = runner.invoke(app, ["scaffold", "page", "Home", "--client"])

        assert result.exit_code == 0
        assert result.stdout.startswith('"use client";')
        assert "export default function HomePage()" in result.stdout

    def test_page_with_fetch(self) -> None:
        """Test --fetch makes the page async."""
        result = runner.invoke(app, ["scaffold", "page", "Posts", "--fetch", "https://api.example.com/posts"])

        assert result.exit_code == 0
        assert "export default async function PostsPage()" in result.stdout

    def test_route_methods(self) -> None:
        """Test repeated --method options."""
        result = runner.invoke(app, ["scaffold", "route", "-m", "get", "-m", "delete"])

        assert result.exit_code == 0
        assert "export async function GET(" in result.stdout
        assert "export async function DELETE(" in result.stdout

    def test_route_default_method(self) -> None:
        """Test GET is the default method."""
        result = runner.invoke(app, ["scaffold", "route"])

        assert result.exit_code == 0
        assert "export async function GET(" in result.stdout
        assert "POST" not in result.stdout

    def test_layout_to_file(self, temp_dir: Path) -> None:
        """Test --output writes the file and creates parents."""
        target = temp_dir / "app" / "layout.tsx"

        result = runner.invoke(app, ["scaffold", "layout", "Root", "--root", "--title", "Site", "-o", str(target)])

        assert result.exit_code == 0
        content = target.read_text()
        assert "RootLayout" in content
        assert 'title: "Site",' in content

    def test_loading_and_error(self) -> None:
        """Test the loading and error templates."""
        loading = runner.invoke(app, ["scaffold", "loading", "Blog"])
        error = runner.invoke(app, ["scaffold", "error", "Blog"])

        assert loading.exit_code == 0
        assert "BlogLoading" in loading.stdout
        assert error.exit_code == 0
        assert "BlogError" in error.stdout


class TestConfigCommands:
    """Tests for the config sub-commands."""

    def test_config_init(self, temp_dir: Path) -> None:
        """Test creating a configuration file."""
        result = runner.invoke(app, ["config", "init", str(temp_dir)])

        assert result.exit_code == 0
        assert (temp_dir / ".routeshift.yml").exists()

    def test_config_init_existing(self, temp_dir: Path) -> None:
        """Test an existing file is kept without --force."""
        (temp_dir / ".routeshift.yml").write_text("version: 1\n")

        result = runner.invoke(app, ["config", "init", str(temp_dir)])
        assert result.exit_code == 1

        result = runner.invoke(app, ["config", "init", str(temp_dir), "--force"])
        assert result.exit_code == 0
        assert "scanner:" in (temp_dir / ".routeshift.yml").read_text()

    def test_config_show(self) -> None:
        """Test the settings table."""
        result = runner.invoke(app, ["config", "show"])

        assert result.exit_code == 0
        assert "log_level" in result.stdout
        assert "output.indent" in result.stdout
