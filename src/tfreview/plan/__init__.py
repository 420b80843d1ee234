"""Terraform plan output parsing."""

from tfreview.plan.models import Block, BlockKind, PlanSummary, ResourceAction
from tfreview.plan.parser import (
    filter_changed_lines,
    parse_action,
    parse_plan,
    resource_blocks,
    split_address,
)

__all__ = [
    "Block",
    "BlockKind",
    "PlanSummary",
    "ResourceAction",
    "filter_changed_lines",
    "parse_action",
    "parse_plan",
    "resource_blocks",
    "split_address",
]
