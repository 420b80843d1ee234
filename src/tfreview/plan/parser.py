"""Classify terraform plan output into typed blocks.

The parser is a single forward pass over the captured lines. Every line lands
in exactly one block, so concatenating ``block.lines`` in order reproduces the
input. Unrecognised lines extend whatever block is open, or start an
``OTHER`` block when nothing is open yet.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from tfreview.constants import APPROVAL_PROMPT_MARKERS, SECTION_HEADER_PREFIXES
from tfreview.debug_log import log

from .models import Block, BlockKind, PlanSummary, ResourceAction

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

# "  # aws_instance.example will be created"
_RESOURCE_HEADER = re.compile(r"^\s*#\s+(\S(?:.*?\S)?)\s+will\s+be\s+(.+)$")
# "Plan: 1 to add, 2 to change, 3 to destroy."; longer counts are not a summary.
_SUMMARY = re.compile(
    r"Plan:\s*(\d{1,18})\s+to\s+add,\s*(\d{1,18})\s+to\s+change,"
    r"\s*(\d{1,18})\s+to\s+destroy"
)

# Checked in order, first hit wins.
_ACTION_KEYWORDS: tuple[tuple[ResourceAction, tuple[str, ...]], ...] = (
    (ResourceAction.CREATE, ("created",)),
    (ResourceAction.DESTROY, ("destroyed", "deleted")),
    (ResourceAction.REPLACE, ("replaced",)),
    (ResourceAction.UPDATE, ("updated", "modified", "changed")),
    (ResourceAction.READ, ("read",)),
)

_CHANGE_MARKERS = frozenset("+-~#}{")
_DECLARATION_KEYWORDS = ("resource ", "resource\t", "data ", "data\t")


@dataclass(slots=True)
class _OpenBlock:
    """Block still accepting lines."""

    kind: BlockKind
    start_index: int
    lines: list[str] = field(default_factory=list)
    action: ResourceAction | None = None
    resource_address: str | None = None
    resource_type: str | None = None
    resource_name: str | None = None

    def close(self) -> Block:
        return Block(
            kind=self.kind,
            lines=tuple(self.lines),
            start_index=self.start_index,
            end_index=self.start_index + len(self.lines) - 1,
            action=self.action,
            resource_address=self.resource_address,
            resource_type=self.resource_type,
            resource_name=self.resource_name,
        )


def parse_action(action_text: str) -> ResourceAction:
    """Map the verb phrase after ``will be`` to a :class:`ResourceAction`."""
    lowered = action_text.lower()
    for action, keywords in _ACTION_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return action
    return ResourceAction.UNKNOWN


def split_address(address: str) -> tuple[str | None, str | None]:
    """Split ``type.name`` at the first dot; ``(None, None)`` when there is none."""
    resource_type, dot, resource_name = address.partition(".")
    if not dot or not resource_type or not resource_name:
        return None, None
    return resource_type, resource_name


def _classify_marker(line: str) -> BlockKind | None:
    if _SUMMARY.search(line):
        return BlockKind.SUMMARY
    if any(marker in line for marker in APPROVAL_PROMPT_MARKERS):
        return BlockKind.APPROVAL_PROMPT
    if line.startswith(SECTION_HEADER_PREFIXES):
        return BlockKind.HEADER
    return None


def parse_plan(output_lines: Sequence[str]) -> tuple[list[Block], PlanSummary]:
    """Parse terraform plan output into blocks and the aggregate summary.

    Args:
        output_lines: Newline-stripped output lines, in the order emitted.

    Returns:
        Tuple of (blocks, summary). Never raises.
    """
    blocks: list[Block] = []
    summary = PlanSummary()
    current: _OpenBlock | None = None

    def _start(kind: BlockKind, index: int, line: str) -> _OpenBlock:
        if current is not None:
            blocks.append(current.close())
        return _OpenBlock(kind=kind, start_index=index, lines=[line])

    for index, line in enumerate(output_lines, start=1):
        if match := _RESOURCE_HEADER.match(line):
            address, verb_phrase = match.group(1), match.group(2)
            resource_type, resource_name = split_address(address)
            current = _start(BlockKind.RESOURCE_CHANGE, index, line)
            current.action = parse_action(verb_phrase)
            current.resource_address = address
            current.resource_type = resource_type
            current.resource_name = resource_name
            continue

        kind = _classify_marker(line)
        if kind is not None:
            if kind == BlockKind.SUMMARY:
                counts = _SUMMARY.search(line)
                assert counts is not None
                summary = PlanSummary(
                    to_add=int(counts.group(1)),
                    to_change=int(counts.group(2)),
                    to_destroy=int(counts.group(3)),
                )
            current = _start(kind, index, line)
            continue

        if current is None:
            current = _OpenBlock(kind=BlockKind.OTHER, start_index=index, lines=[line])
        else:
            current.lines.append(line)

    if current is not None:
        blocks.append(current.close())

    log.debug(
        "[PlanParse] Parsed plan output",
        lines=len(output_lines),
        blocks=len(blocks),
        resources=sum(1 for block in blocks if block.is_resource),
        summary=summary.describe(),
    )
    return blocks, summary


def resource_blocks(blocks: Iterable[Block]) -> list[Block]:
    """Return only the resource change blocks, in order."""
    return [block for block in blocks if block.is_resource]


def filter_changed_lines(lines: Sequence[str], show_unchanged: bool = False) -> list[str]:
    """Drop attribute lines that terraform renders without a change marker.

    Non-indented lines are kept as structure. Indented lines are kept when
    their content starts with a change marker, a brace, a comment, or a
    ``resource``/``data`` declaration.
    """
    if show_unchanged:
        return list(lines)

    kept: list[str] = []
    for line in lines:
        content = line.lstrip()
        if content == line:
            kept.append(line)
            continue
        if content[:1] in _CHANGE_MARKERS or content.startswith(_DECLARATION_KEYWORDS):
            kept.append(line)
    return kept
