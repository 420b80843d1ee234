"""Tests for configuration loading and saving."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

import pytest

from tests.helpers import write_test_config
from tfreview.config import ConfigError, TfReviewConfig
from tfreview.paths import get_config_path, get_debug_log_path

if TYPE_CHECKING:
    from pathlib import Path

pytestmark = pytest.mark.unit


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    config = TfReviewConfig.load(tmp_path / "absent.toml")

    assert config.terraform.bin == "terraform"
    assert config.terraform.apply_args == []
    assert config.interactive.enabled
    assert config.interactive.require_review_all
    assert config.interactive.auto_collapse_reviewed
    assert not config.interactive.show_unchanged
    assert not config.interactive.auto_expand_all
    assert config.interactive.dim_reviewed
    assert not config.ui.auto_close
    assert config.ui.auto_close_delay_ms == 2000


def test_default_path_uses_config_dir_override() -> None:
    assert get_config_path().name == "config.toml"
    assert "tfreview-tests-" in str(get_config_path())
    assert "tfreview-tests-" in str(get_debug_log_path())


def test_loads_sections(tmp_path: Path) -> None:
    path = write_test_config(
        tmp_path / "config.toml",
        terraform_bin="/opt/terraform",
        require_review_all=False,
        auto_expand_all=True,
        apply_args=["-parallelism=2"],
    )

    config = TfReviewConfig.load(path)

    assert config.terraform.bin == "/opt/terraform"
    assert config.terraform.apply_args == ["-parallelism=2"]
    assert not config.interactive.require_review_all
    assert config.interactive.auto_expand_all


def test_review_options_mapping(tmp_path: Path) -> None:
    path = write_test_config(tmp_path / "config.toml", require_review_all=False, auto_expand_all=True)

    options = TfReviewConfig.load(path).review_options()

    assert not options.require_review_all
    assert options.auto_collapse_on_review
    assert not options.default_collapsed


def test_invalid_toml_raises_config_error(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("[terraform\nbin = ", encoding="utf-8")

    with pytest.raises(ConfigError, match="invalid TOML"):
        TfReviewConfig.load(path)


def test_validation_failure_raises_config_error(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text("[ui]\nauto_close_delay_ms = -5\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        TfReviewConfig.load(path)


def test_empty_binary_rejected(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text('[terraform]\nbin = "  "\n', encoding="utf-8")

    with pytest.raises(ConfigError):
        TfReviewConfig.load(path)


def test_save_round_trip(tmp_path: Path) -> None:
    config = TfReviewConfig()
    config.terraform.env = {"TF_VAR_region": "us-west-2"}
    config.interactive.show_unchanged = True
    config.ui.auto_close = True
    path = tmp_path / "nested" / "config.toml"

    config.save(path)
    loaded = TfReviewConfig.load(path)

    assert loaded == config
    assert not list(path.parent.glob(".tmp_*"))


def test_check_environment_missing_binary() -> None:
    config = TfReviewConfig.model_validate({"terraform": {"bin": "definitely-not-terraform-xyz"}})
    problem = config.check_environment()
    assert problem is not None
    assert "definitely-not-terraform-xyz" in problem


def test_check_environment_missing_cwd(tmp_path: Path) -> None:
    config = TfReviewConfig.model_validate(
        {"terraform": {"bin": sys.executable, "cwd": str(tmp_path / "gone")}}
    )
    problem = config.check_environment()
    assert problem is not None
    assert "Working directory" in problem


def test_check_environment_ok(tmp_path: Path) -> None:
    config = TfReviewConfig.model_validate(
        {"terraform": {"bin": sys.executable, "cwd": str(tmp_path)}}
    )
    assert config.check_environment() is None
