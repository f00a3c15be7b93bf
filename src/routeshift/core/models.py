"""Core data models for routeshift.

Attributes are snake_case in Python; JSON output uses the camelCase aliases
(``routePath``, ``clientIndicators``, ...) expected by downstream tooling.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ResultModel(BaseModel):
    """Base for every analyzer result: camelCase aliases, populate by name."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        """Dump the model with camelCase keys and JSON-compatible values."""
        return self.model_dump(by_alias=True, mode="json")


class RouteType(str, Enum):
    """Shape of a page route derived from its file path."""

    STATIC = "static"
    DYNAMIC = "dynamic"
    CATCH_ALL = "catch-all"
    API = "api"


class ComponentClassification(str, Enum):
    """Rendering environment a component needs."""

    CLIENT = "client"
    SERVER = "server"


class DependencySection(str, Enum):
    """package.json section a dependency is declared in."""

    DEPENDENCIES = "dependencies"
    DEV_DEPENDENCIES = "devDependencies"


class DependencyClassification(str, Enum):
    """Migration bucket of a declared dependency."""

    CORE = "core"
    REPLACEABLE = "replaceable"
    DEV_TOOL = "devTool"
    UNKNOWN = "unknown"


class DeclarationKind(str, Enum):
    """Kind of an exported declaration."""

    FUNCTION = "function"
    VARIABLE = "variable"
    CLASS = "class"
    INTERFACE = "interface"
    TYPE = "type"
    UNKNOWN = "unknown"


class Severity(str, Enum):
    """Severity of a config or validation finding."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ImportAction(str, Enum):
    """What the import rewriter did (or would do) to one import."""

    REWRITE = "rewrite"
    REMOVE = "remove"
    UNCHANGED = "unchanged"


class DataFetchingType(str, Enum):
    """Legacy pages-router data-fetching functions."""

    GET_STATIC_PROPS = "getStaticProps"
    GET_SERVER_SIDE_PROPS = "getServerSideProps"
    GET_STATIC_PATHS = "getStaticPaths"
    GET_INITIAL_PROPS = "getInitialProps"


class Complexity(str, Enum):
    """Estimated effort to migrate a data-fetching function."""

    SIMPLE = "simple"
    MODERATE = "moderate"
    COMPLEX = "complex"


# Routes


class RouteInfo(ResultModel):
    """A page or API route derived from a file under the pages directory."""

    file_path: str
    route_path: str
    type: RouteType
    data_fetching: list[str] = Field(default_factory=list)
    has_default_export: bool = False
    api_methods: list[str] | None = None


class RouteSummary(ResultModel):
    total: int = 0
    static: int = 0
    dynamic: int = 0
    api: int = 0
    catch_all: int = 0
    with_get_static_props: int = 0
    with_get_server_side_props: int = 0
    with_get_static_paths: int = 0


class RouteAnalysis(ResultModel):
    routes: list[RouteInfo] = Field(default_factory=list)
    summary: RouteSummary = Field(default_factory=RouteSummary)


# Components


class ComponentInfo(ResultModel):
    """Client/server classification of a default-exported component file."""

    file_path: str
    name: str
    classification: ComponentClassification
    client_indicators: list[str] = Field(default_factory=list)
    has_client_directive: bool = False


class ComponentSummary(ResultModel):
    total: int = 0
    client: int = 0
    server: int = 0
    with_client_directive: int = 0


class ComponentInventory(ResultModel):
    components: list[ComponentInfo] = Field(default_factory=list)
    summary: ComponentSummary = Field(default_factory=ComponentSummary)


# Dependencies


class DependencyInfo(ResultModel):
    """A dependency declared in package.json and its migration bucket."""

    name: str
    version: str
    source: DependencySection
    classification: DependencyClassification
    replacement: str | None = None
    note: str | None = None


class DependencySummary(ResultModel):
    total: int = 0
    core: int = 0
    replaceable: int = 0
    dev_tool: int = 0
    unknown: int = 0


class DependencyAnalysis(ResultModel):
    dependencies: list[DependencyInfo] = Field(default_factory=list)
    summary: DependencySummary = Field(default_factory=DependencySummary)


# Dead code


class DeadExport(ResultModel):
    """A named export no analyzed file imports."""

    file_path: str
    export_name: str
    type: DeclarationKind
    line: int = Field(..., ge=0)


class DeadCodeSummary(ResultModel):
    total_exports: int = 0
    dead_exports: int = 0
    files_with_dead_code: int = 0


class DeadCodeAnalysis(ResultModel):
    dead_exports: list[DeadExport] = Field(default_factory=list)
    summary: DeadCodeSummary = Field(default_factory=DeadCodeSummary)


# Props


class PropInfo(ResultModel):
    name: str
    type: str
    optional: bool = False


class ComponentProps(ResultModel):
    component_name: str
    props_type_name: str | None = None
    props: list[PropInfo] = Field(default_factory=list)


class PropSummary(ResultModel):
    total_components: int = 0
    total_props: int = 0


class PropAnalysis(ResultModel):
    components: list[ComponentProps] = Field(default_factory=list)
    summary: PropSummary = Field(default_factory=PropSummary)


# next.config


class ConfigIssue(ResultModel):
    """A next.config setting that needs attention for the app router."""

    property: str
    line: int = Field(..., ge=1)
    severity: Severity
    message: str
    suggested_action: str


class ConfigSummary(ResultModel):
    total: int = 0
    errors: int = 0
    warnings: int = 0
    info: int = 0


class ConfigAnalysis(ResultModel):
    issues: list[ConfigIssue] = Field(default_factory=list)
    summary: ConfigSummary = Field(default_factory=ConfigSummary)


# Imports


class ImportChange(ResultModel):
    """One import declaration and what the rewriter did to it."""

    original: str
    replacement: str | None
    line: int = Field(..., ge=1)
    action: ImportAction


class ImportSummary(ResultModel):
    total: int = 0
    rewritten: int = 0
    removed: int = 0
    unchanged: int = 0


class ImportTransformResult(ResultModel):
    code: str
    changes: list[ImportChange] = Field(default_factory=list)
    summary: ImportSummary = Field(default_factory=ImportSummary)


# Router


class RouterUsage(ResultModel):
    """A legacy router API access found in source text."""

    pattern: str
    line: int = Field(..., ge=1)
    column: int = Field(..., ge=1)
    replacement: str
    breaking: bool
    note: str
    suggests_import: str | None = None


class RouterSummary(ResultModel):
    total: int = 0
    breaking: int = 0
    compatible: int = 0


class RouterAnalysis(ResultModel):
    usages: list[RouterUsage] = Field(default_factory=list)
    has_router_import: bool = False
    suggested_imports: list[str] = Field(default_factory=list)
    summary: RouterSummary = Field(default_factory=RouterSummary)


# Data fetching


class DataFetchingPattern(ResultModel):
    """A legacy data-fetching export and its suggested replacement."""

    name: str
    line: int = Field(..., ge=1)
    type: DataFetchingType
    has_revalidate: bool = False
    revalidate_value: int | None = None
    suggested_replacement: str
    complexity: Complexity


class DataFetchingSummary(ResultModel):
    total: int = 0
    get_static_props: int = 0
    get_server_side_props: int = 0
    get_static_paths: int = 0
    get_initial_props: int = 0


class DataFetchingAnalysis(ResultModel):
    patterns: list[DataFetchingPattern] = Field(default_factory=list)
    summary: DataFetchingSummary = Field(default_factory=DataFetchingSummary)


# Images


class ImageUsage(ResultModel):
    line: int = Field(..., ge=1)
    import_source: str
    is_legacy: bool
    suggested_action: str


class ImageSummary(ResultModel):
    total: int = 0
    legacy: int = 0
    current: int = 0


class ImageAnalysis(ResultModel):
    usages: list[ImageUsage] = Field(default_factory=list)
    summary: ImageSummary = Field(default_factory=ImageSummary)


# Validation


class ValidationIssue(ResultModel):
    """A rule violation in a migrated app-router file."""

    file_path: str
    line: int = Field(..., ge=1)
    rule: str
    severity: Severity
    message: str


class ValidationSummary(ResultModel):
    total: int = 0
    errors: int = 0
    warnings: int = 0
    passed: bool = True


class ValidationResult(ResultModel):
    issues: list[ValidationIssue] = Field(default_factory=list)
    files_checked: int = 0
    summary: ValidationSummary = Field(default_factory=ValidationSummary)
