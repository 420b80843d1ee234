"""Configuration loader for tfreview."""

from __future__ import annotations

import os
import shutil
import tempfile
import tomllib
from pathlib import Path

import tomlkit
from pydantic import BaseModel, Field, ValidationError, field_validator

from tfreview.paths import get_config_path
from tfreview.review.session import ReviewOptions


class ConfigError(Exception):
    """Configuration file could not be read or failed validation."""


class TerraformConfig(BaseModel):
    """How the terraform child process is started."""

    bin: str = Field(default="terraform", description="Terraform binary name or path")
    cwd: str | None = Field(
        default=None, description="Working directory (None = current directory)"
    )
    apply_args: list[str] = Field(
        default_factory=list, description="Extra arguments appended to `terraform apply`"
    )
    env: dict[str, str] | None = Field(
        default=None,
        description="Extra environment variables, e.g. {TF_VAR_region = 'us-west-2'}",
    )

    @field_validator("bin")
    @classmethod
    def validate_bin(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("terraform.bin must not be empty")
        return value.strip()


class InteractiveConfig(BaseModel):
    """Interactive review behaviour."""

    enabled: bool = Field(default=True, description="Open the review UI at the approval prompt")
    require_review_all: bool = Field(
        default=True, description="Require every resource to be reviewed before approving"
    )
    auto_collapse_reviewed: bool = Field(
        default=True, description="Collapse a resource once it is marked reviewed"
    )
    show_unchanged: bool = Field(
        default=False, description="Show attribute lines without a change marker"
    )
    auto_expand_all: bool = Field(
        default=False, description="Start with every resource expanded"
    )
    dim_reviewed: bool = Field(default=True, description="Dim the body of reviewed resources")


class UIConfig(BaseModel):
    """Output window preferences."""

    auto_close: bool = Field(default=False, description="Exit after a successful apply")
    auto_close_delay_ms: int = Field(default=2000, ge=0)
    show_hints: bool = Field(default=True, description="Show keybinding hints")


class TfReviewConfig(BaseModel):
    """Root configuration model."""

    terraform: TerraformConfig = Field(default_factory=TerraformConfig)
    interactive: InteractiveConfig = Field(default_factory=InteractiveConfig)
    ui: UIConfig = Field(default_factory=UIConfig)

    @classmethod
    def load(cls, config_path: Path | None = None) -> TfReviewConfig:
        """Load configuration from TOML file or use defaults.

        Raises:
            ConfigError: the file is not valid TOML or fails validation.
        """
        if config_path is None:
            config_path = get_config_path()

        if not config_path.exists():
            return cls()

        try:
            with open(config_path, "rb") as f:
                data = tomllib.load(f)
            return cls.model_validate(data)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"{config_path}: invalid TOML: {exc}") from exc
        except ValidationError as exc:
            raise ConfigError(f"{config_path}: {exc}") from exc

    def review_options(self) -> ReviewOptions:
        return ReviewOptions(
            auto_collapse_on_review=self.interactive.auto_collapse_reviewed,
            require_review_all=self.interactive.require_review_all,
            default_collapsed=not self.interactive.auto_expand_all,
        )

    def check_environment(self) -> str | None:
        """Return an error message when terraform cannot be run, else None."""
        if shutil.which(self.terraform.bin) is None:
            return f"Terraform binary not found: {self.terraform.bin}"
        if self.terraform.cwd is not None and not Path(self.terraform.cwd).is_dir():
            return f"Working directory does not exist: {self.terraform.cwd}"
        return None

    def save(self, path: Path) -> None:
        """Serialize current config to a TOML file."""
        doc = tomlkit.document()
        for section_name, section in (
            ("terraform", self.terraform),
            ("interactive", self.interactive),
            ("ui", self.ui),
        ):
            table = tomlkit.table()
            for key, value in section.model_dump().items():
                if value is not None:
                    table[key] = value
            doc[section_name] = table

        _atomic_write(path, tomlkit.dumps(doc))


def _atomic_write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, prefix=".tmp_")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(content)
        Path(tmp_path).replace(path)
    except Exception:
        Path(tmp_path).unlink(missing_ok=True)
        raise
