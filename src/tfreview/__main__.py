"""CLI entry point for tfreview."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TYPE_CHECKING

import click

from tfreview import __version__
from tfreview.config import ConfigError, TfReviewConfig
from tfreview.hcl import declaration_at, declarations_in, is_terraform_file
from tfreview.paths import get_config_path

if TYPE_CHECKING:
    from collections.abc import Sequence


def _load_config(config_path: str | None, *, check: bool = True) -> TfReviewConfig:
    try:
        config = TfReviewConfig.load(Path(config_path) if config_path else None)
    except ConfigError as exc:
        click.secho(f"Invalid configuration: {exc}", fg="red")
        sys.exit(1)

    if check and (problem := config.check_environment()):
        click.secho(problem, fg="red")
        sys.exit(1)
    return config


def _run_app(
    command: Sequence[str], config: TfReviewConfig, cwd: str | Path | None = None
) -> None:
    from tfreview.app import TfReviewApp

    click.echo(f"Running: {' '.join(command)}")
    app = TfReviewApp(command, config, cwd=cwd)
    return_code = app.run()
    sys.exit(return_code if return_code is not None else 0)


def _read_terraform_file(path: Path) -> list[str]:
    if not is_terraform_file(path):
        click.secho(f"Not a Terraform file: {path}", fg="yellow")
        sys.exit(1)
    return path.read_text(encoding="utf-8").splitlines()


config_option = click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to config.toml (defaults to the user config directory)",
)


@click.group()
@click.version_option(__version__, prog_name="tfreview")
def cli() -> None:
    """Review terraform plans resource by resource before applying them."""


@cli.command()
@click.option("--target", "-t", "targets", multiple=True, help="Resource address to target")
@click.option(
    "--cwd",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Directory to run terraform in",
)
@click.option("--no-review", is_flag=True, help="Plain yes/no prompt instead of review")
@config_option
def apply(
    targets: tuple[str, ...], cwd: str | None, no_review: bool, config_path: str | None
) -> None:
    """Run terraform apply and review the plan before confirming."""
    from tfreview.process import build_apply_command

    config = _load_config(config_path)
    if no_review:
        config.interactive.enabled = False
    _run_app(build_apply_command(config, targets), config, cwd=cwd)


@cli.command("apply-file")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@config_option
def apply_file(path: Path, config_path: str | None) -> None:
    """Apply every resource declared in PATH."""
    from tfreview.process import build_apply_command

    config = _load_config(config_path)
    refs = declarations_in(_read_terraform_file(path))
    if not refs:
        click.secho(f"No Terraform resources found in {path}", fg="yellow")
        sys.exit(1)

    click.echo(f"Targeting {len(refs)} resource(s) from {path.name}")
    targets = [ref.address for ref in refs]
    _run_app(build_apply_command(config, targets), config, cwd=path.resolve().parent)


@cli.command("apply-at")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("line", type=click.IntRange(min=1))
@config_option
def apply_at(path: Path, line: int, config_path: str | None) -> None:
    """Apply the resource whose block encloses LINE of PATH."""
    from tfreview.process import build_apply_command

    config = _load_config(config_path)
    ref = declaration_at(_read_terraform_file(path), line)
    if ref is None:
        click.secho(f"No Terraform resource found at {path}:{line}", fg="yellow")
        sys.exit(1)

    click.echo(f"Targeting: {ref.address}")
    _run_app(build_apply_command(config, [ref.address]), config, cwd=path.resolve().parent)


@cli.command()
@click.option(
    "--cwd",
    type=click.Path(exists=True, file_okay=False),
    default=None,
    help="Directory to run terraform in",
)
@config_option
def init(cwd: str | None, config_path: str | None) -> None:
    """Run terraform init in the output viewer."""
    from tfreview.process import build_init_command

    config = _load_config(config_path)
    _run_app(build_init_command(config), config, cwd=cwd)


@cli.command("config")
@click.option("--init", "write_defaults", is_flag=True, help="Write config.toml with the defaults")
@click.option("--force", is_flag=True, help="Overwrite an existing file when used with --init")
@config_option
def config_command(write_defaults: bool, force: bool, config_path: str | None) -> None:
    """Show where the config file lives, or create it."""
    path = Path(config_path) if config_path else get_config_path()
    if not write_defaults:
        state = "exists" if path.exists() else "not created, defaults in use"
        click.echo(f"{path} ({state})")
        return

    if path.exists() and not force:
        click.secho(f"Config already exists: {path} (pass --force to overwrite)", fg="yellow")
        sys.exit(1)
    TfReviewConfig().save(path)
    click.secho(f"Wrote default config to {path}", fg="green")


@cli.command()
@click.argument("source", type=click.File("r", encoding="utf-8"), default="-")
@click.option("--all", "show_all", is_flag=True, help="Include non-resource blocks")
def blocks(source, show_all: bool) -> None:
    """Print how captured plan output is split into blocks."""
    from tfreview.ansi import strip_ansi
    from tfreview.plan import parse_plan

    lines = [strip_ansi(line.rstrip("\r\n")) for line in source]
    parsed, summary = parse_plan(lines)
    for block in parsed:
        if not show_all and not block.is_resource:
            continue
        span = f"{block.start_index}-{block.end_index}"
        if block.is_resource:
            assert block.action is not None
            click.echo(f"{span:>9}  {block.action.symbol} {block.resource_address} ({block.action})")
        else:
            click.echo(f"{span:>9}  [{block.kind}] {block.header.strip()}")
    click.echo(summary.describe())


if __name__ == "__main__":
    cli()
