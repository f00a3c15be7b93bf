"""Integration tests for a complete pages-to-app migration pass."""

import shutil
from pathlib import Path

import pytest

from routeshift.analysis import (
    analyze_dependencies,
    detect_dead_exports,
    extract_routes,
    inventory_components,
    validate_migration,
)
from routeshift.core.models import ComponentClassification
from routeshift.parsing import find_source_files
from routeshift.state.error_log import ErrorLog
from routeshift.state.progress import ProgressTracker
from routeshift.templates import render_layout, render_page, render_route
from routeshift.transforms import analyze_config, analyze_data_fetching, transform_imports


@pytest.fixture
def project(input_dir: Path, temp_dir: Path) -> Path:
    """Copy the sample project into a temporary directory."""
    target = temp_dir / "project"
    shutil.copytree(input_dir, target)
    return target


class TestMigrationWorkflow:
    """Drive every phase against the sample project."""

    def test_assessment(self, project: Path) -> None:
        """Test the assessment reports agree with each other."""
        routes = extract_routes(project / "pages")
        components = inventory_components(project)
        dependencies = analyze_dependencies(project / "package.json")
        config = analyze_config(project / "next.config.js")

        route_files = {r.file_path for r in routes.routes}
        component_files = {c.file_path for c in components.components}

        # Every page with a default export is also a component
        assert {r.file_path for r in routes.routes if r.has_default_export} <= component_files
        assert route_files <= {str(p) for p in find_source_files(project)}
        assert dependencies.summary.total == len(dependencies.dependencies)
        assert config.summary.errors == 1

    def test_migrate_and_validate(self, project: Path) -> None:
        """Test rewriting imports, scaffolding app files and validating them."""
        tracker = ProgressTracker(project)
        errors = ErrorLog(project)
        tracker.init()

        tracker.update_phase("routes", "in-progress")
        app_dir = project / "app"
        (app_dir / "blog").mkdir(parents=True, exist_ok=True)

        (app_dir / "layout.tsx").write_text(
            render_layout("Root", is_root=True, metadata={"title": "Fixture", "description": "App"})
        )
        (app_dir / "api" / "posts").mkdir(parents=True)
        (app_dir / "api" / "posts" / "route.ts").write_text(render_route(["GET", "POST"]))

        index_source = (project / "pages" / "index.tsx").read_text()
        fetching = analyze_data_fetching(index_source, "index.tsx")
        assert [p.name for p in fetching.patterns] == ["getStaticProps"]
        note = errors.log("routes", "getStaticProps moved into the page body", "info", file="pages/index.tsx")
        (app_dir / "page.tsx").write_text(
            render_page("Home", fetch_data=True, fetch_url="https://example.com/home")
        )

        blog_page = app_dir / "blog" / "page.tsx"
        rewritten = transform_imports(blog_page.read_text(), str(blog_page))
        assert rewritten.summary.rewritten == 1
        blog_page.write_text("'use client';\n" + rewritten.code)
        tracker.update_phase("routes", "completed")

        result = validate_migration(app_dir)

        assert result.summary.passed, result.issues
        assert result.summary.total == 0
        assert result.files_checked == 4

        assert errors.resolve(note.id)
        assert all(e.resolved for e in errors.read())
        assert tracker.resume_point() == "assessment"

    def test_client_components_need_directives(self, project: Path) -> None:
        """Test validation flags client components left without the directive."""
        components = inventory_components(project / "components")
        client = [
            c for c in components.components if c.classification == ComponentClassification.CLIENT
        ]
        assert [Path(c.file_path).name for c in client] == ["Header.tsx"]

        footer = project / "components" / "Footer.tsx"
        footer.write_text(
            footer.read_text().replace("<footer>", "<footer onClick={() => null}>")
        )

        result = validate_migration(project / "components")

        assert [(Path(i.file_path).name, i.rule) for i in result.issues] == [
            ("Footer.tsx", "missing-client-directive"),
            ("Header.tsx", "no-next-router"),
        ]
        assert not result.summary.passed

    def test_dead_code_in_lib(self, project: Path) -> None:
        """Test dead export detection after removing the only consumer."""
        (project / "lib" / "format.ts").unlink()

        result = detect_dead_exports(project / "lib")

        assert sorted(d.export_name for d in result.dead_exports) == [
            "UNUSED_CONSTANT",
            "USED_CONSTANT",
            "unusedHelper",
            "usedHelper",
        ]
