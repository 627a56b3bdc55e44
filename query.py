#!/usr/bin/env python3
"""Ad hoc query runner for the recipe search engine.

Rank a local JSON file of recipes against a query without a web frontend.

Usage:
    python query.py "chicken curry"
    python query.py --file data/recipes.json "tiramisou"
    python query.py --debug "momo"             # Show full JSON response
    python query.py --page 2 --limit 5 "rice"  # Paginate

The recipes file holds a JSON array of records in the normalized recipe
shape (id, title, description, ingredients, tags, cuisine, difficultyLevel,
source), or an object with a "recipes" array.

Features:
- Ranked table with score, match type and matched keywords
- "Did you mean" suggestions when nothing matches
- Debug mode to display the full SearchResponse as JSON
"""

import json
import sys
from pathlib import Path
from typing import Any, List, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from recipe_finder.models.models import SearchResponse
from recipe_finder.search.service import search_recipes
from recipe_finder.utils.logger import logger

console = Console()

DEFAULT_RECIPES_FILE = "recipes.json"


def load_recipes(path: str) -> List[Any]:
    """Load recipe records from a JSON file.

    Args:
        path: Path to a JSON array, or an object with a "recipes" array.

    Returns:
        List of raw recipe records.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file does not hold a recipe list.
    """
    recipes_file = Path(path)
    if not recipes_file.exists():
        raise FileNotFoundError(f"Recipes file not found: {path}")

    with open(recipes_file, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, dict):
        data = data.get("recipes")
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array of recipes in {path}")
    return data


def render_response(response: SearchResponse) -> None:
    """Print one page of results as a table, or suggestions when empty."""
    if not response.recipes:
        console.print("[yellow]No recipes found[/yellow]")
        if response.suggestions:
            console.print(f"Did you mean: [bold]{', '.join(response.suggestions)}[/bold]?")
        return

    table = Table(title=f"Page {response.page} ({response.total} results)")
    table.add_column("#", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Type")
    table.add_column("Title", style="bold")
    table.add_column("Source")
    table.add_column("Matched keywords", style="dim")

    offset = (response.page - 1) * response.limit
    for rank, recipe in enumerate(response.recipes, start=offset + 1):
        table.add_row(
            str(rank),
            str(recipe.match_score),
            recipe.match_type,
            recipe.title,
            recipe.source,
            ", ".join(recipe.matched_keywords),
        )
    console.print(table)

    if response.search_info:
        console.print(
            f"[dim]Average score {response.search_info.avg_match_score}, "
            f"exact match: {'yes' if response.search_info.has_exact_match else 'no'}[/dim]"
        )
    if response.has_more:
        console.print(f"[dim]More results on page {response.page + 1}[/dim]")


def run_query(query: str, recipes_path: str, debug: bool = False, page: int = 1, limit: Optional[int] = None) -> None:
    """Execute a single ad hoc search and print the results.

    Args:
        query: The search query.
        recipes_path: JSON file with candidate recipes.
        debug: If True, display full JSON response with all fields.
        page: 1-based page number.
        limit: Page size, defaults to PAGE_SIZE.
    """
    try:
        logger.info(f"Loading recipes from {recipes_path}...")
        recipes = load_recipes(recipes_path)

        response = search_recipes(recipes, query, page=page, limit=limit)
        console.print()

        if debug:
            console.print("[bold cyan]Debug Mode: Full Response[/bold cyan]")
            console.print("[dim]" + "=" * 60 + "[/dim]")
            console.print_json(response.model_dump_json(by_alias=True))
            console.print("[dim]" + "=" * 60 + "[/dim]")
            console.print()

        render_response(response)

    except KeyboardInterrupt:
        logger.info("\nQuery interrupted by user.")
        sys.exit(0)
    except (FileNotFoundError, ValidationError, ValueError, TypeError) as e:
        console.print(f"[red]✗ Error: {e}[/red]")
        logger.error(f"Query execution failed: {e}", exc_info=True)
        sys.exit(1)


def _usage() -> None:
    print('Usage: python query.py [--debug] [--file PATH] [--page N] [--limit N] "<your query>"')


if __name__ == "__main__":
    if len(sys.argv) < 2:
        _usage()
        print("")
        print("Examples:")
        print('  python query.py "chicken curry"')
        print('  python query.py --file data/recipes.json "tiramisou"')
        print('  python query.py --debug --page 2 "rice"')
        sys.exit(1)

    debug_mode = False
    recipes_path = DEFAULT_RECIPES_FILE
    page = 1
    limit = None
    argv_start = 1

    value_flags = ("--file", "--page", "--limit")
    while argv_start < len(sys.argv) and sys.argv[argv_start].startswith("--"):
        flag = sys.argv[argv_start]
        if flag == "--debug":
            debug_mode = True
            argv_start += 1
        elif flag in value_flags:
            argv_start += 1
            if argv_start >= len(sys.argv):
                print(f"Error: {flag} flag requires a value")
                sys.exit(1)
            value = sys.argv[argv_start]
            if flag == "--file":
                recipes_path = value
            elif not value.isdigit():
                print(f"Error: {flag} expects a positive integer, got {value!r}")
                sys.exit(1)
            elif flag == "--page":
                page = int(value)
            else:
                limit = int(value)
            argv_start += 1
        else:
            print(f"Unknown flag: {flag}")
            sys.exit(1)

    # Everything after the flags is the query; an empty query browses all recipes
    query = " ".join(sys.argv[argv_start:])

    run_query(query, recipes_path, debug=debug_mode, page=page, limit=limit)
