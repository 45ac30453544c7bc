"""Favorite recipes, stored as a JSON array under one local-storage key.

Uniqueness is by recipe_name. add() and remove() are idempotent; toggle()
flips membership and reports the new state. Writes are serialized so concurrent
requests served from a thread pool do not lose updates.
"""

import json
import threading
from typing import List

from pydantic import ValidationError

from gourmand.models.models import Recipe
from gourmand.storage.local_storage import LocalStorage, safe_json_parse
from gourmand.utils.logger import logger

FAVORITES_KEY = "gourmand-favorites"


class FavoritesStore:
    """Read, parse, and write the favorites list."""

    def __init__(self, storage: LocalStorage, key: str = FAVORITES_KEY) -> None:
        self.storage = storage
        self.key = key
        self._lock = threading.RLock()

    def all(self) -> List[Recipe]:
        """Return stored favorites in insertion order.

        Malformed entries are skipped rather than failing the whole list.
        """
        raw = safe_json_parse(self.storage.get_item(self.key), [])
        if not isinstance(raw, list):
            return []
        favorites: List[Recipe] = []
        for entry in raw:
            try:
                favorites.append(Recipe.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Skipping malformed favorite: {e.error_count()} error(s)")
        return favorites

    def _save(self, favorites: List[Recipe]) -> None:
        payload = [recipe.model_dump(mode="json") for recipe in favorites]
        self.storage.set_item(self.key, json.dumps(payload, ensure_ascii=False))

    def is_favorite(self, recipe_name: str) -> bool:
        return any(fav.recipe_name == recipe_name for fav in self.all())

    def add(self, recipe: Recipe) -> List[Recipe]:
        with self._lock:
            favorites = self.all()
            if any(fav.recipe_name == recipe.recipe_name for fav in favorites):
                return favorites
            favorites.append(recipe)
            self._save(favorites)
        logger.info(f"Added favorite: {recipe.recipe_name}")
        return favorites

    def remove(self, recipe_name: str) -> List[Recipe]:
        with self._lock:
            favorites = self.all()
            remaining = [fav for fav in favorites if fav.recipe_name != recipe_name]
            if len(remaining) != len(favorites):
                self._save(remaining)
                logger.info(f"Removed favorite: {recipe_name}")
        return remaining

    def toggle(self, recipe: Recipe) -> bool:
        """Add the recipe if absent, remove it if present.

        Returns:
            True if the recipe is a favorite after the call.
        """
        with self._lock:
            if self.is_favorite(recipe.recipe_name):
                self.remove(recipe.recipe_name)
                return False
            self.add(recipe)
            return True
