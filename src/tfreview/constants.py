"""Literal markers and tokens shared by the parser, process runner and UI."""

from __future__ import annotations

from typing import Final

# Lines that mean terraform is waiting for a yes/no answer.
APPROVAL_PROMPT_MARKERS: Final[tuple[str, ...]] = (
    "Do you want to perform these actions?",
    "Do you really want to destroy",
    "Enter a value:",
)

SECTION_HEADER_PREFIXES: Final[tuple[str, ...]] = (
    "Terraform will perform",
    "Terraform used the selected",
    "An execution plan has been generated",
)

APPROVE_TOKEN: Final = "yes"
REJECT_TOKEN: Final = "no"

TERRAFORM_FILE_SUFFIXES: Final[tuple[str, ...]] = (".tf", ".tfvars")
