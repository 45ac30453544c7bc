#!/usr/bin/env python3
"""Terminal front end for Gourmand.

Run the suggestion workflow directly without starting the API server.

Usage:
    python query.py "chicken, basil, garlic"
    python query.py "chicken, basil" --cuisine ថៃ
    python query.py "chicken, basil" --select 1              # Show one recipe card and its image
    python query.py "chicken, basil" --select 1 --audio out.wav
    python query.py "chicken, basil" --select 1 --favorite   # Toggle favorite
    python query.py "chicken, basil" --select 1 --substitute basil
    python query.py --favorites                              # List saved favorites
    python query.py --debug "chicken, basil"                 # Show full JSON response

Features:
- Same server actions as the web API, with the same error envelope
- Recipe cards rendered with rich (ingredients and numbered steps)
- Spoken instructions saved as a WAV file
- Favorites shared with the web API through FAVORITES_FILE
"""

import argparse
import asyncio
import sys
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from gourmand.actions.actions import get_ingredient_substitution_action
from gourmand.models.models import Recipe
from gourmand.services.catalog import KHMER_CUISINE
from gourmand.services.recipe_browser import RecipeBrowser
from gourmand.storage.favorites import FavoritesStore
from gourmand.storage.local_storage import LocalStorage
from gourmand.utils.audio import from_data_uri
from gourmand.utils.config import config
from gourmand.utils.logger import logger

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Suggest recipes from the ingredients you have.")
    parser.add_argument("ingredients", nargs="*", help="Comma-separated ingredients")
    parser.add_argument("--cuisine", default=KHMER_CUISINE, help=f"Cuisine (default: {KHMER_CUISINE})")
    parser.add_argument("--select", type=int, metavar="N", help="Show recipe N (1-based) with its image")
    parser.add_argument("--audio", metavar="PATH", help="Save spoken instructions of the selected recipe")
    parser.add_argument("--favorite", action="store_true", help="Toggle the selected recipe in favorites")
    parser.add_argument("--favorites", action="store_true", help="List saved favorites and exit")
    parser.add_argument("--substitute", metavar="INGREDIENT", help="Suggest substitutes for an ingredient")
    parser.add_argument("--debug", action="store_true", help="Print full JSON responses")
    return parser


def render_recipe(recipe: Recipe, is_favorite: bool = False) -> None:
    """Print a recipe card: description, ingredients, numbered instructions."""
    title = f"{'★ ' if is_favorite else ''}{recipe.recipe_name}"
    body = []
    if recipe.description:
        body.append(f"[italic]{recipe.description}[/italic]\n")
    body.append(f"[bold]⏱ {recipe.estimated_cooking_time}[/bold]\n")
    body.append("[bold cyan]Ingredients[/bold cyan]")
    body.extend(f"  • {item}" for item in recipe.ingredient_list())
    body.append("\n[bold cyan]Instructions[/bold cyan]")
    body.extend(f"  {i}. {step}" for i, step in enumerate(recipe.instruction_list(), start=1))
    if recipe.nutritional_information:
        body.append(f"\n[dim]{recipe.nutritional_information}[/dim]")
    if recipe.image_url:
        body.append(f"\n[green]✓ Image generated ({len(recipe.image_url) / 1024:.1f} KB data URI)[/green]")
    console.print(Panel("\n".join(body), title=title, expand=False))


def render_recipe_list(recipes: List[Recipe]) -> None:
    table = Table(title="Suggested recipes")
    table.add_column("#", justify="right")
    table.add_column("Recipe", style="bold")
    table.add_column("Time")
    table.add_column("Description", overflow="fold")
    for i, recipe in enumerate(recipes, start=1):
        table.add_row(str(i), recipe.recipe_name, recipe.estimated_cooking_time, recipe.description)
    console.print(table)


def print_debug(label: str, model) -> None:
    console.print(f"[bold cyan]Debug Mode: {label}[/bold cyan]")
    console.print("[dim]" + "=" * 60 + "[/dim]")
    console.print_json(data=model.model_dump(mode="json"))
    console.print("[dim]" + "=" * 60 + "[/dim]")


def save_audio(audio_url: str, path: str) -> None:
    _, audio_bytes = from_data_uri(audio_url)
    Path(path).write_bytes(audio_bytes)
    console.print(f"[green]✓ Saved spoken instructions to {path} ({len(audio_bytes) / 1024:.1f} KB)[/green]")


def list_favorites(favorites: FavoritesStore, debug: bool) -> int:
    saved = favorites.all()
    if not saved:
        console.print("[yellow]No favorites saved yet.[/yellow]")
        return 0
    for recipe in saved:
        if debug:
            print_debug(recipe.recipe_name, recipe)
        render_recipe(recipe, is_favorite=True)
    return 0


async def run(args: argparse.Namespace, favorites: FavoritesStore) -> int:
    """Execute one CLI invocation and return the process exit code."""
    browser = RecipeBrowser()
    ingredients = " ".join(args.ingredients)

    logger.info(f"Suggesting {args.cuisine} recipes for: {ingredients}")
    result = await browser.submit(ingredients, args.cuisine)
    if args.debug:
        print_debug("Suggestion", result)
    if not result.success:
        console.print(f"[red]✗ {result.error}[/red]")
        return 1

    recipes = browser.suggested_recipes or []
    render_recipe_list(recipes)
    if args.select is None:
        if args.favorite or args.audio or args.substitute:
            console.print("[yellow]--favorite, --audio and --substitute need --select N[/yellow]")
        return 0

    if not (1 <= args.select <= len(recipes)):
        console.print(f"[red]✗ --select must be between 1 and {len(recipes)}[/red]")
        return 1

    selected = await browser.select(recipes[args.select - 1].recipe_name)
    if not selected.success:
        console.print(f"[yellow]Image unavailable: {selected.error}[/yellow]")
    recipe = browser.selected_recipe

    if args.favorite:
        is_favorite = favorites.toggle(recipe)
        console.print(f"[green]✓ {'Added to' if is_favorite else 'Removed from'} favorites[/green]")
    render_recipe(recipe, is_favorite=favorites.is_favorite(recipe.recipe_name))

    exit_code = 0
    if args.audio:
        audio = await browser.read_aloud()
        if audio.success:
            save_audio(audio.data, args.audio)
        else:
            console.print(f"[red]✗ {audio.error}[/red]")
            exit_code = 1

    if args.substitute:
        substitution = await get_ingredient_substitution_action(
            {
                "recipe_name": recipe.recipe_name,
                "ingredient": args.substitute,
                "recipe_ingredients": recipe.ingredients,
            }
        )
        if args.debug:
            print_debug("Substitution", substitution)
        if substitution.success:
            table = Table(title=f"Substitutes for {args.substitute}")
            table.add_column("Substitute", style="bold")
            table.add_column("Amount")
            table.add_column("Notes", overflow="fold")
            for sub in substitution.data.substitutes:
                table.add_row(sub.name, sub.amount, sub.notes)
            console.print(table)
        else:
            console.print(f"[red]✗ {substitution.error}[/red]")
            exit_code = 1

    return exit_code


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    favorites = FavoritesStore(LocalStorage(config.FAVORITES_FILE))

    if args.favorites:
        return list_favorites(favorites, args.debug)
    if not args.ingredients:
        console.print("[red]✗ Error: No ingredients provided[/red]")
        console.print('Usage: python query.py "chicken, basil" [--cuisine ថៃ] [--select N]')
        return 1

    try:
        return asyncio.run(run(args, favorites))
    except KeyboardInterrupt:
        logger.info("\nQuery interrupted by user.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
