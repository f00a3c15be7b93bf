"""Rewriting of module import specifiers from a rules table."""

from dataclasses import dataclass
from typing import Mapping, Optional

from routeshift.core.models import ImportAction, ImportChange, ImportSummary, ImportTransformResult
from routeshift.data import ImportRule, load_transform_rules
from routeshift.parsing.source import SourceUnit, parse_code
from routeshift.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class _Edit:
    """Replace source bytes [start, end) with text."""

    start: int
    end: int
    text: str


def _removal_end(source: bytes, end: int) -> int:
    """Extend a statement's end past a trailing line comment and its line break."""
    rest = len(source) - len(source[end:].lstrip(b" \t"))
    if source[rest:rest + 2] == b"//":
        newline = source.find(b"\n", rest)
        end = len(source) if newline == -1 else newline
        if source[end - 1:end] == b"\r":
            end -= 1
    elif rest == len(source) or source[rest:rest + 1] in (b"\r", b"\n"):
        end = rest

    if source[end:end + 2] == b"\r\n":
        return end + 2
    if source[end:end + 1] == b"\n":
        return end + 1
    return end


def _apply_edits(source: bytes, edits: list[_Edit]) -> str:
    """Apply non-overlapping edits back to front so earlier offsets stay valid."""
    result = source
    for edit in sorted(edits, key=lambda e: e.start, reverse=True):
        result = result[:edit.start] + edit.text.encode("utf-8") + result[edit.end:]
    return result.decode("utf-8")


class ImportRewriter:
    """Applies import rules to one parsed file."""

    def __init__(self, rules: Optional[Mapping[str, ImportRule]] = None):
        """Initialize the rewriter.

        Args:
            rules: Specifier to rule mapping (defaults to the packaged rules).
        """
        self.rules = rules if rules is not None else load_transform_rules()

    def rewrite(self, unit: SourceUnit, dry_run: bool = False) -> ImportTransformResult:
        """Rewrite the imports of a parsed file.

        Args:
            unit: Parsed source file.
            dry_run: Report changes without modifying the text.

        Returns:
            The resulting code, one change per import, and summary counts.
        """
        source = unit.source_bytes
        changes: list[ImportChange] = []
        edits: list[_Edit] = []

        for decl in unit.imports:
            specifier = decl.specifier
            rule = self.rules.get(specifier)

            if rule is None:
                changes.append(
                    ImportChange(
                        original=specifier,
                        replacement=specifier,
                        line=decl.line,
                        action=ImportAction.UNCHANGED,
                    )
                )
                continue

            if rule.action == "remove":
                changes.append(
                    ImportChange(
                        original=specifier,
                        replacement=None,
                        line=decl.line,
                        action=ImportAction.REMOVE,
                    )
                )
                if not dry_run:
                    end = _removal_end(source, decl.node.end_byte)
                    edits.append(_Edit(decl.node.start_byte, end, ""))
                continue

            replacement = rule.replacement or specifier

            if rule.named_exports and not dry_run:
                for named in decl.named:
                    mapped = rule.named_exports.get(named.name)
                    if mapped and mapped != named.name:
                        edits.append(
                            _Edit(named.name_node.start_byte, named.name_node.end_byte, mapped)
                        )

            if replacement != specifier:
                changes.append(
                    ImportChange(
                        original=specifier,
                        replacement=replacement,
                        line=decl.line,
                        action=ImportAction.REWRITE,
                    )
                )
                if not dry_run:
                    # Keep the original quote characters
                    edits.append(
                        _Edit(
                            decl.source_node.start_byte + 1,
                            decl.source_node.end_byte - 1,
                            replacement,
                        )
                    )
            else:
                changes.append(
                    ImportChange(
                        original=specifier,
                        replacement=replacement,
                        line=decl.line,
                        action=ImportAction.UNCHANGED,
                    )
                )

        code = unit.text if dry_run or not edits else _apply_edits(source, edits)
        logger.debug("Rewrote imports of %s: %d edits", unit.path, len(edits))

        return ImportTransformResult(
            code=code,
            changes=changes,
            summary=ImportSummary(
                total=len(changes),
                rewritten=sum(1 for c in changes if c.action == ImportAction.REWRITE),
                removed=sum(1 for c in changes if c.action == ImportAction.REMOVE),
                unchanged=sum(1 for c in changes if c.action == ImportAction.UNCHANGED),
            ),
        )


def transform_imports(
    code: str,
    filename: str,
    dry_run: bool = False,
    rules: Optional[Mapping[str, ImportRule]] = None,
) -> ImportTransformResult:
    """Rewrite or remove imports according to the rules table.

    In dry-run mode the returned code is exactly the input.

    Args:
        code: Source text.
        filename: File name used to pick the grammar.
        dry_run: Report changes without modifying the text.
        rules: Specifier to rule mapping (defaults to the packaged rules).

    Returns:
        Import transform result.
    """
    return ImportRewriter(rules).rewrite(parse_code(code, filename), dry_run=dry_run)
