"""Suggestion browsing state: suggested list, selected recipe, and media caching.

RecipeBrowser mirrors what the suggestion screen keeps between interactions:
- submit() replaces the suggested list
- select() shows a recipe immediately and fills in its image once
- read_aloud() replays cached audio or generates it once
- prefetch_images() fills images sequentially (upstream rate limits)
- load_media() fetches missing image and audio in parallel and waits for both

Media failures never discard recipe text.
"""

import asyncio
from typing import List, Optional

from gourmand.actions.actions import (
    get_audio_for_recipe_action,
    get_recipe_details_action,
    get_recipe_suggestion,
)
from gourmand.models.models import (
    ActionResult,
    Recipe,
    SuggestRecipesOutput,
)
from gourmand.services.catalog import KHMER_CUISINE, recommended_dishes
from gourmand.utils.config import config
from gourmand.utils.logger import logger


class RecipeBrowser:
    """Holds suggested recipes and the currently selected one."""

    def __init__(self, prefetch_delay: Optional[float] = None) -> None:
        self.suggested_recipes: Optional[List[Recipe]] = None
        self.selected_recipe: Optional[Recipe] = None
        self.is_loading = False
        self.is_fetching_details = False
        self.prefetch_delay = config.IMAGE_PREFETCH_DELAY if prefetch_delay is None else prefetch_delay

    def find(self, recipe_name: str) -> Optional[Recipe]:
        for recipe in self.suggested_recipes or []:
            if recipe.recipe_name == recipe_name:
                return recipe
        return None

    def _replace(self, updated: Recipe) -> None:
        if self.suggested_recipes is not None:
            self.suggested_recipes = [
                updated if r.recipe_name == updated.recipe_name else r for r in self.suggested_recipes
            ]
        if self.selected_recipe and self.selected_recipe.recipe_name == updated.recipe_name:
            self.selected_recipe = updated

    async def submit(self, ingredients: str, cuisine: str) -> ActionResult[SuggestRecipesOutput]:
        """Request suggestions, clearing the previous list and selection first."""
        self.is_loading = True
        self.suggested_recipes = None
        self.selected_recipe = None
        try:
            result = await get_recipe_suggestion({"ingredients": ingredients, "cuisine": cuisine})
        finally:
            self.is_loading = False

        if result.success and result.data:
            self.suggested_recipes = list(result.data.recipes)
        return result

    async def suggest_recommended(self, dish: str) -> ActionResult[SuggestRecipesOutput]:
        return await self.submit(dish, KHMER_CUISINE)

    async def select(self, recipe_name: str) -> ActionResult[Recipe]:
        """Select a recipe, fetching its image if it does not have one yet.

        The recipe text is selected before the image request, so a failed
        fetch still leaves the recipe visible.
        """
        recipe = self.find(recipe_name)
        if recipe is None:
            return ActionResult.fail(f"Recipe not found: {recipe_name}")

        self.selected_recipe = recipe
        if recipe.image_url:
            return ActionResult.ok(recipe)

        self.is_fetching_details = True
        try:
            result = await get_recipe_details_action({"recipe_name": recipe_name})
        finally:
            self.is_fetching_details = False

        if result.success and result.data:
            full_recipe = recipe.model_copy(update={"image_url": result.data.image_url})
            self._replace(full_recipe)
            return ActionResult.ok(full_recipe)

        logger.warning(f"Showing recipe without image: {result.error}", extra={"recipe_name": recipe_name})
        return ActionResult(success=False, data=recipe, error=result.error)

    def recommended_dishes(self, k: int = 5) -> List[str]:
        return recommended_dishes(k)

    def deselect(self) -> None:
        self.selected_recipe = None

    def update_audio(self, audio_url: str) -> Optional[Recipe]:
        if self.selected_recipe is None:
            return None
        updated = self.selected_recipe.model_copy(update={"audio_url": audio_url})
        self._replace(updated)
        self.selected_recipe = updated
        return updated

    async def read_aloud(self) -> ActionResult[str]:
        """Return audio for the selected recipe, generating it only once."""
        recipe = self.selected_recipe
        if recipe is None:
            return ActionResult.fail("No recipe selected")
        if recipe.audio_url:
            return ActionResult.ok(recipe.audio_url)

        result = await get_audio_for_recipe_action({"instructions": recipe.instructions})
        if result.success and result.data:
            self.update_audio(result.data.audio_url)
            return ActionResult.ok(result.data.audio_url)
        return ActionResult.fail(result.error or "Failed to get audio.")

    async def prefetch_images(self) -> List[Recipe]:
        """Generate missing images one recipe at a time.

        Calls are sequential with a pause between them to stay under the
        image model's rate limit. Failures leave the recipe without an image.
        """
        first = True
        for recipe in list(self.suggested_recipes or []):
            if recipe.image_url:
                continue
            if not first and self.prefetch_delay:
                await asyncio.sleep(self.prefetch_delay)
            first = False

            result = await get_recipe_details_action({"recipe_name": recipe.recipe_name})
            if result.success and result.data:
                self._replace(recipe.model_copy(update={"image_url": result.data.image_url}))
        return list(self.suggested_recipes or [])

    async def load_media(self, recipe_name: str) -> Optional[Recipe]:
        """Fetch image and audio for one recipe in parallel.

        Media the recipe already has is kept and not requested again.
        """
        recipe = self.find(recipe_name)
        if recipe is None:
            return None

        async def _cached(result):
            return result

        image_call = (
            _cached(None)
            if recipe.image_url
            else get_recipe_details_action({"recipe_name": recipe_name})
        )
        audio_call = (
            _cached(None)
            if recipe.audio_url
            else get_audio_for_recipe_action({"instructions": recipe.instructions})
        )
        image_result, audio_result = await asyncio.gather(image_call, audio_call)

        update = {}
        if image_result and image_result.success and image_result.data:
            update["image_url"] = image_result.data.image_url
        if audio_result and audio_result.success and audio_result.data:
            update["audio_url"] = audio_result.data.audio_url
        if not update:
            return recipe

        # Re-read: the entry may have changed while the calls were in flight
        current = self.find(recipe_name) or recipe
        updated = current.model_copy(update=update)
        self._replace(updated)
        return updated
