"""Detection of next/image and next/legacy/image imports."""

from routeshift.core.models import ImageAnalysis, ImageSummary, ImageUsage
from routeshift.parsing.source import parse_code

LEGACY_IMAGE_MODULE = "next/legacy/image"
IMAGE_MODULE = "next/image"

LEGACY_ACTION = (
    "Replace import with 'next/image' and update props "
    "(layout -> fill/sizes, objectFit -> style)"
)
CURRENT_ACTION = "No import change needed. Verify width/height or fill prop is set."


def analyze_image_usage(code: str, filename: str) -> ImageAnalysis:
    """Report every image component import in a file."""
    unit = parse_code(code, filename)
    usages: list[ImageUsage] = []

    for decl in unit.imports:
        if decl.specifier == LEGACY_IMAGE_MODULE:
            usages.append(
                ImageUsage(
                    line=decl.line,
                    import_source=decl.specifier,
                    is_legacy=True,
                    suggested_action=LEGACY_ACTION,
                )
            )
        elif decl.specifier == IMAGE_MODULE:
            usages.append(
                ImageUsage(
                    line=decl.line,
                    import_source=decl.specifier,
                    is_legacy=False,
                    suggested_action=CURRENT_ACTION,
                )
            )

    legacy = sum(1 for u in usages if u.is_legacy)
    return ImageAnalysis(
        usages=usages,
        summary=ImageSummary(total=len(usages), legacy=legacy, current=len(usages) - legacy),
    )
