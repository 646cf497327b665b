# selectorkit/cli.py
from __future__ import annotations

"""Command-line interface
------------------------
Commands to list/validate/build selector recipes, compose a one-off selector
from fragments, and view effective config.
"""

import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

import click

from selectorkit.core.recipe_loader import build_recipe, find_recipe_files, load_recipes_file, RecipeLoader
from selectorkit.selectors.builder import Selector, SelectorBuildError
from selectorkit.selectors.fragments import parse_kind
from selectorkit.utils.config import get_settings
from selectorkit.utils.logger import configure_logging, get_logger, bind, unbind, set_log_level


# -------- helpers --------


def _echo_json(obj) -> None:
    click.echo(json.dumps(obj, indent=2, ensure_ascii=False))


def _collect_paths(targets: List[str], recipes_dir: Optional[str], recursive: bool) -> list[Path]:
    paths: list[Path] = []
    if targets:
        for p in (Path(t).resolve() for t in targets):
            if p.is_dir():
                paths.extend(find_recipe_files(p, recursive=True))
            else:
                paths.append(p)
    elif recipes_dir:
        paths.extend(find_recipe_files(Path(recipes_dir), recursive=recursive))
    return paths


# -------- CLI root --------


@click.group(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False),
    default=None,
    help="Override LOG_LEVEL from settings",
)
@click.version_option(package_name="selector-kit")
def cli(log_level: Optional[str]):
    configure_logging(get_settings())
    if log_level:
        set_log_level(log_level.upper())


# -------- commands --------


@cli.command("config")
def cmd_config():
    """Print effective configuration (after .env & env vars)."""
    s = get_settings()
    _echo_json(s.model_dump(mode="json"))


@cli.command("list")
@click.option(
    "--dir", "recipes_dir",
    type=click.Path(file_okay=False, dir_okay=True, exists=True),
    default=lambda: str(get_settings().RECIPES_DIR),
    show_default=True,
    help="Directory containing recipe YAML files",
)
@click.option("--recursive/--no-recursive", default=True, show_default=True)
def cmd_list(recipes_dir: str, recursive: bool):
    """List recipes available in a directory."""
    rows = RecipeLoader().load_directory(Path(recipes_dir), recursive=recursive)
    if not rows:
        click.echo("No recipes found.")
        return

    click.echo(f"Found {len(rows)} recipe(s):\n")
    for fp, recipe in rows:
        click.echo(f" - {recipe.name}  ({len(recipe.selectors)} selectors)  <- {fp}")


@cli.command("validate")
@click.argument("targets", nargs=-1, required=False)
@click.option("--dir", "recipes_dir", type=click.Path(file_okay=False, dir_okay=True, exists=True),
              help="Validate all recipes under this directory")
@click.option("--recursive/--no-recursive", default=True, show_default=True)
def cmd_validate(targets: List[str], recipes_dir: Optional[str], recursive: bool):
    """Validate recipes from files or a directory by loading and building them."""
    paths = _collect_paths(targets, recipes_dir, recursive)
    if not paths:
        click.echo("Provide file(s) or --dir to validate.")
        sys.exit(2)

    ok = True
    for fp in paths:
        try:
            for recipe in load_recipes_file(fp):
                build_recipe(recipe)
                click.echo(f"OK  {fp}  ->  {recipe.name} ({len(recipe.selectors)} selectors)")
        except (ValueError, FileNotFoundError) as e:
            ok = False
            click.echo(f"ERR {fp}  ->  {e}")

    sys.exit(0 if ok else 1)


@cli.command("build")
@click.argument("targets", nargs=-1, required=True)
@click.option("--json-out", type=click.Path(dir_okay=False), default=None, help="Write a JSON summary to this file")
def cmd_build(targets: List[str], json_out: Optional[str]):
    """
    Render every selector in the given recipes.

    Examples:
      selectorkit build recipes/gallery.yaml
      selectorkit build recipes --json-out out/selectors.json
    """
    log = get_logger(__name__)
    bind(run_id=datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%SZ"))

    rendered: dict[str, dict[str, str]] = {}
    failed = 0
    for fp in _collect_paths(targets, None, True):
        try:
            for recipe in load_recipes_file(fp):
                selectors = build_recipe(recipe)
                rendered[recipe.name] = selectors
                click.echo(f"# {recipe.name}")
                for name, text in selectors.items():
                    click.echo(f"{name}: {text}")
        except (ValueError, FileNotFoundError) as e:
            failed += 1
            log.error(f"Build failed for {fp}")
            click.echo(f"ERR {fp}  ->  {e}")

    if json_out:
        outp = Path(json_out).resolve()
        outp.parent.mkdir(parents=True, exist_ok=True)
        outp.write_text(json.dumps({"recipes": rendered}, indent=2), encoding="utf-8")
        click.echo(f"Wrote summary: {outp}")

    unbind("run_id")
    sys.exit(0 if failed == 0 else 1)


@cli.command("compose")
@click.argument("fragments", nargs=-1, required=True)
def cmd_compose(fragments: List[str]):
    """
    Build one compound selector from KIND=VALUE fragments, in order.

    Example:
      selectorkit compose element=a 'attr=href$=".png"' pseudo-class=focus
    """
    selector = Selector()
    try:
        for raw in fragments:
            kind, sep, value = raw.partition("=")
            if not sep:
                raise click.BadParameter(f"expected KIND=VALUE, got {raw!r}", param_hint="FRAGMENTS")
            selector = selector.append(parse_kind(kind), value)
    except SelectorBuildError as e:
        click.echo(f"ERR {e}")
        sys.exit(1)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="FRAGMENTS") from e
    click.echo(selector.stringify())


def main() -> None:
    cli(prog_name="selectorkit")


if __name__ == "__main__":
    main()
