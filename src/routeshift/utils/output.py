"""Result formatting for the command line."""

import json
import sys
from typing import Any, TextIO

from pydantic import BaseModel


def format_json(data: Any, indent: int = 2) -> str:
    """Serialize a result as JSON.

    Pydantic models are dumped with their camelCase aliases; absent optional
    values stay in the output as ``null``.
    """
    if isinstance(data, BaseModel):
        data = data.model_dump(by_alias=True, mode="json")
    return json.dumps(data, indent=indent, ensure_ascii=False)


def format_diff(old_content: str, new_content: str, filename: str) -> str:
    """Produce a line diff between two versions of a file.

    Lines are walked in lockstep: equal lines are kept, otherwise the old
    line is removed and the new one added. Identical inputs give ``""``.
    """
    if old_content == new_content:
        return ""

    old_lines = old_content.split("\n")
    new_lines = new_content.split("\n")

    lines = [f"--- a/{filename}", f"+++ b/{filename}"]

    i = j = 0
    while i < len(old_lines) or j < len(new_lines):
        if i < len(old_lines) and j < len(new_lines) and old_lines[i] == new_lines[j]:
            lines.append(f" {old_lines[i]}")
            i += 1
            j += 1
            continue
        if i < len(old_lines):
            lines.append(f"-{old_lines[i]}")
            i += 1
        if j < len(new_lines):
            lines.append(f"+{new_lines[j]}")
            j += 1

    return "\n".join(lines)


def print_output(data: Any, fmt: str = "json", indent: int = 2, stream: TextIO | None = None) -> None:
    """Write one result document to stdout."""
    stream = stream or sys.stdout
    if fmt == "json":
        stream.write(format_json(data, indent) + "\n")
    else:
        stream.write(str(data) + "\n")
