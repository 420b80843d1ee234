"""Plan output domain types."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class BlockKind(StrEnum):
    """Classification of a contiguous run of plan output lines."""

    HEADER = "header"
    RESOURCE_CHANGE = "resource"
    SUMMARY = "summary"
    APPROVAL_PROMPT = "prompt"
    OTHER = "other"


class ResourceAction(StrEnum):
    """What terraform intends to do with a resource."""

    CREATE = "create"
    UPDATE = "update"
    REPLACE = "replace"
    DESTROY = "destroy"
    READ = "read"
    UNKNOWN = "unknown"

    @property
    def symbol(self) -> str:
        """Short glyph used when listing resources."""
        return _ACTION_SYMBOLS[self]


_ACTION_SYMBOLS: dict[ResourceAction, str] = {
    ResourceAction.CREATE: "+",
    ResourceAction.DESTROY: "-",
    ResourceAction.UPDATE: "~",
    ResourceAction.REPLACE: "±",
    ResourceAction.READ: "⊙",
    ResourceAction.UNKNOWN: "?",
}


@dataclass(frozen=True, slots=True)
class Block:
    """A classified span of plan output.

    ``start_index`` and ``end_index`` are 1-based and inclusive. Resource
    fields are only set when ``kind`` is ``RESOURCE_CHANGE``.
    """

    kind: BlockKind
    lines: tuple[str, ...]
    start_index: int
    end_index: int
    action: ResourceAction | None = None
    resource_address: str | None = None
    resource_type: str | None = None
    resource_name: str | None = None

    @property
    def is_resource(self) -> bool:
        return self.kind == BlockKind.RESOURCE_CHANGE

    @property
    def header(self) -> str:
        return self.lines[0] if self.lines else ""


@dataclass(frozen=True, slots=True)
class PlanSummary:
    """Counts from the ``Plan: N to add, M to change, K to destroy`` line."""

    to_add: int = 0
    to_change: int = 0
    to_destroy: int = 0

    def describe(self) -> str:
        return (
            f"Plan: {self.to_add} to add, {self.to_change} to change, "
            f"{self.to_destroy} to destroy"
        )
