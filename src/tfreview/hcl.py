"""Locate resource declarations in terraform source by surface syntax.

Only ``resource``, ``data`` and ``module`` block headers are recognised. This
is enough to build ``-target=`` addresses; nothing here understands HCL.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Literal, TypeAlias

from tfreview.constants import TERRAFORM_FILE_SUFFIXES

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

DeclarationKind: TypeAlias = Literal["resource", "data", "module"]

_TYPED_DECLARATION = re.compile(r'^\s*(resource|data)\s+"([^"]+)"\s+"([^"]+)"')
_MODULE_DECLARATION = re.compile(r'^\s*module\s+"([^"]+)"')


@dataclass(frozen=True, slots=True)
class ResourceRef:
    """A declaration found in a terraform file."""

    kind: DeclarationKind
    name: str
    address: str
    resource_type: str | None = None
    line: int | None = None


def parse_declaration(line: str) -> ResourceRef | None:
    """Parse a single line as a declaration header."""
    if match := _TYPED_DECLARATION.match(line):
        kind, resource_type, name = match.groups()
        # Resources are targeted as "type.name"; data sources keep their prefix.
        address = f"{resource_type}.{name}"
        if kind == "data":
            address = f"data.{address}"
        return ResourceRef(kind=kind, name=name, address=address, resource_type=resource_type)
    if match := _MODULE_DECLARATION.match(line):
        name = match.group(1)
        return ResourceRef(kind="module", name=name, address=f"module.{name}")
    return None


def declarations_in(lines: Sequence[str]) -> list[ResourceRef]:
    """All declarations in a file, with 1-based line numbers."""
    found: list[ResourceRef] = []
    for number, line in enumerate(lines, start=1):
        ref = parse_declaration(line)
        if ref is not None:
            found.append(replace(ref, line=number))
    return found


def declaration_at(lines: Sequence[str], line_number: int) -> ResourceRef | None:
    """Find the declaration whose block encloses ``line_number`` (1-based).

    Searches backwards for a header, then counts braces from the header down
    to the cursor line to make sure the block has not closed before it.
    """
    if not 1 <= line_number <= len(lines):
        return None

    for start in range(line_number, 0, -1):
        ref = parse_declaration(lines[start - 1])
        if ref is None:
            continue
        if _encloses(lines, start, line_number):
            return replace(ref, line=start)
    return None


def _encloses(lines: Sequence[str], start: int, cursor: int) -> bool:
    depth = 0
    for number in range(start, cursor + 1):
        for char in lines[number - 1]:
            if char == "{":
                depth += 1
            elif char == "}":
                depth -= 1
                if depth == 0 and number < cursor:
                    return False
    return depth > 0


def is_terraform_file(path: Path) -> bool:
    return path.suffix in TERRAFORM_FILE_SUFFIXES
