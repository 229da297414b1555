"""Typer CLI for recipe-manager (fetch, extract, translate)."""

from __future__ import annotations

import json
import mimetypes
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from dotenv import load_dotenv
# load .env immediately so subsequent imports (which read settings at import time)
# pick up values from the .env file
load_dotenv()

# Configure top-level logging early so other modules pick it up.
import logging
from recipe_manager.settings import settings

log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
handlers = [logging.StreamHandler()]
if settings.LOG_FILE:
    handlers.append(logging.FileHandler(settings.LOG_FILE))
logging.basicConfig(
    level=log_level,
    format="%(asctime)s %(levelname)-8s [%(name)s] %(message)s",
    handlers=handlers,
)

# Quiet noisy third-party loggers while keeping our app logs
logging.getLogger("urllib3").setLevel(logging.WARNING)

from recipe_manager.ingest.fetch import fetch_url
from recipe_manager.models.recipe import Recipe
from recipe_manager.orchestrate import run as orchestrator
from recipe_manager.result import Result
from recipe_manager.settings import get_api_key, validate_required

app = typer.Typer()
console = Console()


def _require_api_key() -> str:
    try:
        validate_required()
    except RuntimeError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    return get_api_key()


def _report(result: Result[Recipe], out: Optional[Path]) -> None:
    if not result.ok:
        console.print(f"[red]Error:[/red] {result.error}")
        raise typer.Exit(code=1)
    recipe_json = result.value.to_json(indent=2)
    if out is not None:
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(recipe_json, encoding="utf-8")
        console.print(f"Wrote recipe -> {out}")
    console.print_json(recipe_json)


@app.command()
def fetch(url: str):
    """Fetch a page the way extract-url does and show a short preview."""
    result = fetch_url(url)
    if not result.ok:
        console.print(f"[red]Error:[/red] {result.error}")
        raise typer.Exit(code=1)
    console.print(f"Fetched {len(result.value)} characters")
    console.print(result.value[:500], markup=False)


@app.command("extract-text")
def extract_text(path: Path, out: Optional[Path] = typer.Option(None, help="Write recipe JSON here")):
    """Extract a recipe from a plain-text file."""
    api_key = _require_api_key()
    text = path.read_text(encoding="utf-8")
    _report(orchestrator.extract_from_text(text, api_key), out)


@app.command("extract-url")
def extract_url(url: str, out: Optional[Path] = typer.Option(None, help="Write recipe JSON here")):
    """Fetch a recipe page and extract a recipe from it."""
    api_key = _require_api_key()
    _report(orchestrator.url_to_recipe(url, api_key), out)


@app.command("extract-image")
def extract_image(
    path: Path,
    mime_type: Optional[str] = typer.Option(None, help="Defaults to a guess from the file name"),
    out: Optional[Path] = typer.Option(None, help="Write recipe JSON here"),
):
    """Extract a recipe from a photo."""
    api_key = _require_api_key()
    mime_type = mime_type or mimetypes.guess_type(path.name)[0] or "image/jpeg"
    try:
        image_bytes = path.read_bytes()
    except OSError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(code=1)
    _report(orchestrator.extract_from_image(image_bytes, mime_type, api_key), out)


@app.command()
def translate(path: Path, out: Optional[Path] = typer.Option(None, help="Write recipe JSON here")):
    """Re-translate the Swedish and Romanian content of a saved recipe JSON."""
    api_key = _require_api_key()
    try:
        recipe = Recipe.model_validate(json.loads(path.read_text(encoding="utf-8")))
    except Exception as e:
        console.print(f"[red]Error:[/red] could not load recipe: {e}")
        raise typer.Exit(code=1)
    _report(orchestrator.translate_recipe(recipe, api_key), out)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
