"""Line-based checks of next.config for App Router compatibility."""

import re
from dataclasses import dataclass
from pathlib import Path

from routeshift.core.models import ConfigAnalysis, ConfigIssue, ConfigSummary, Severity
from routeshift.errors import SourceNotFoundError


@dataclass(frozen=True)
class ConfigRule:
    """A setting to look for and what to say about it."""

    pattern: re.Pattern[str]
    property: str
    severity: Severity
    message: str
    suggested_action: str


CONFIG_RULES: list[ConfigRule] = [
    ConfigRule(
        pattern=re.compile(r"\bi18n\s*[:{]"),
        property="i18n",
        severity=Severity.ERROR,
        message="Built-in i18n routing is not supported in App Router",
        suggested_action=(
            "Use middleware-based i18n (next-intl) or implement i18n via route groups [locale]/"
        ),
    ),
    ConfigRule(
        pattern=re.compile(r"\brewrites\s*[:(]"),
        property="rewrites",
        severity=Severity.WARNING,
        message="Rewrites still work but consider using route groups and middleware",
        suggested_action=(
            "Review rewrites; many can be replaced with route structure or middleware"
        ),
    ),
    ConfigRule(
        pattern=re.compile(r"\bredirects\s*[:(]"),
        property="redirects",
        severity=Severity.INFO,
        message="Redirects are still supported in next.config.js",
        suggested_action=(
            "No change required. Can also use redirect() in middleware or route handlers."
        ),
    ),
    ConfigRule(
        pattern=re.compile(r"\bwebpack\s*[:(]"),
        property="webpack",
        severity=Severity.WARNING,
        message="Custom webpack config still works but Turbopack does not support it",
        suggested_action="Review webpack customizations for Turbopack compatibility",
    ),
    ConfigRule(
        pattern=re.compile(r"\bpageExtensions\s*[:{]"),
        property="pageExtensions",
        severity=Severity.WARNING,
        message="pageExtensions affects both pages/ and app/ directories",
        suggested_action="Verify pageExtensions are compatible with App Router file conventions",
    ),
    ConfigRule(
        pattern=re.compile(r"\bexperimental\s*[:{]"),
        property="experimental",
        severity=Severity.INFO,
        message="Experimental features detected; some may now be stable in App Router",
        suggested_action="Review experimental flags; appDir, serverActions are now stable",
    ),
    ConfigRule(
        pattern=re.compile(r"\bimages\s*[:{]"),
        property="images",
        severity=Severity.INFO,
        message="Image configuration is still supported",
        suggested_action="No change required. Verify remotePatterns config is up to date.",
    ),
    ConfigRule(
        pattern=re.compile(r"\bheaders\s*[:(]"),
        property="headers",
        severity=Severity.INFO,
        message="Custom headers are still supported in next.config.js",
        suggested_action=(
            "No change required. Can also set headers in middleware or route handlers."
        ),
    ),
]


def analyze_config_text(content: str, rules: list[ConfigRule] | None = None) -> ConfigAnalysis:
    """Check config text against each rule.

    A rule reports only the first line it matches.
    """
    lines = content.split("\n")
    issues: list[ConfigIssue] = []

    for rule in rules if rules is not None else CONFIG_RULES:
        for index, line in enumerate(lines):
            if rule.pattern.search(line):
                issues.append(
                    ConfigIssue(
                        property=rule.property,
                        line=index + 1,
                        severity=rule.severity,
                        message=rule.message,
                        suggested_action=rule.suggested_action,
                    )
                )
                break

    return ConfigAnalysis(
        issues=issues,
        summary=ConfigSummary(
            total=len(issues),
            errors=sum(1 for i in issues if i.severity == Severity.ERROR),
            warnings=sum(1 for i in issues if i.severity == Severity.WARNING),
            info=sum(1 for i in issues if i.severity == Severity.INFO),
        ),
    )


def analyze_config(config_path: str | Path) -> ConfigAnalysis:
    """Read a next.config file and check it.

    Raises:
        SourceNotFoundError: If the file does not exist.
    """
    path = Path(config_path)
    if not path.is_file():
        raise SourceNotFoundError(str(path))
    return analyze_config_text(path.read_text(encoding="utf-8"))
