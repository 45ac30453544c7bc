"""FastAPI application exposing Gourmand's server actions and favorites.

Action endpoints always answer HTTP 200 with the {success, data, error}
envelope; failures are reported inside the body. Favorites endpoints use
ordinary status codes (422 for an invalid body).
"""

from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, Query
from fastapi.middleware.cors import CORSMiddleware

from gourmand.actions.actions import (
    get_audio_for_recipe_action,
    get_ingredient_substitution_action,
    get_recipe_details_action,
    get_recipe_suggestion,
    transcribe_ingredients_action,
)
from gourmand.models.models import ActionResult, Recipe
from gourmand.services.catalog import CUISINE_OPTIONS, recommended_dishes
from gourmand.storage.favorites import FavoritesStore
from gourmand.storage.local_storage import LocalStorage
from gourmand.utils.config import config
from gourmand.utils.logger import logger

SERVICE_NAME = "Gourmand API"
VERSION = "1.0.0"


def create_app(favorites: Optional[FavoritesStore] = None) -> FastAPI:
    """Build the application.

    Args:
        favorites: Favorites store to serve. Defaults to one backed by
            FAVORITES_FILE.
    """
    store = favorites or FavoritesStore(LocalStorage(config.FAVORITES_FILE))

    app = FastAPI(
        title=SERVICE_NAME,
        description="AI recipe suggestions with images, spoken instructions, and favorites",
        version=VERSION,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.favorites = store

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "service": SERVICE_NAME, "version": VERSION}

    @app.get("/api/cuisines")
    async def list_cuisines() -> List[str]:
        return CUISINE_OPTIONS

    @app.get("/api/recommended-dishes")
    async def list_recommended_dishes(count: int = Query(5, ge=1, le=20)) -> List[str]:
        return recommended_dishes(count)

    # Server actions: the body is passed through unvalidated so that
    # validation errors come back inside the envelope.
    @app.post("/api/actions/suggest-recipes")
    async def suggest_recipes_endpoint(payload: Dict[str, Any] = Body(...)) -> ActionResult:
        return await get_recipe_suggestion(payload)

    @app.post("/api/actions/recipe-details")
    async def recipe_details_endpoint(payload: Dict[str, Any] = Body(...)) -> ActionResult:
        return await get_recipe_details_action(payload)

    @app.post("/api/actions/recipe-audio")
    async def recipe_audio_endpoint(payload: Dict[str, Any] = Body(...)) -> ActionResult:
        return await get_audio_for_recipe_action(payload)

    @app.post("/api/actions/substitute-ingredient")
    async def substitute_ingredient_endpoint(payload: Dict[str, Any] = Body(...)) -> ActionResult:
        return await get_ingredient_substitution_action(payload)

    @app.post("/api/actions/transcribe-ingredients")
    async def transcribe_ingredients_endpoint(payload: Dict[str, Any] = Body(...)) -> ActionResult:
        return await transcribe_ingredients_action(payload)

    @app.get("/api/favorites")
    def list_favorites() -> List[Recipe]:
        return store.all()

    @app.post("/api/favorites/toggle")
    def toggle_favorite(recipe: Recipe):
        is_favorite = store.toggle(recipe)
        return {"recipe_name": recipe.recipe_name, "is_favorite": is_favorite, "favorites": store.all()}

    @app.put("/api/favorites")
    def add_favorite(recipe: Recipe) -> List[Recipe]:
        return store.add(recipe)

    @app.delete("/api/favorites/{recipe_name}")
    def remove_favorite(recipe_name: str) -> List[Recipe]:
        return store.remove(recipe_name)

    logger.info(f"✓ {SERVICE_NAME} ready (favorites: {store.storage.path})")
    return app
