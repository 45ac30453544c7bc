"""Data models and schemas for the Gourmand recipe service.

Defines Pydantic models for action inputs/outputs, the Recipe domain object,
the structured-output schemas handed to the model, and the action envelope.
All models use Pydantic v2 for strict validation and OpenAPI schema generation.
"""

from typing import Generic, List, Optional, TypeVar, Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


def parse_list(text: Optional[str]) -> List[str]:
    """Split newline-separated recipe text into clean items.

    Each line is trimmed, a single leading '-' bullet is dropped, and blank
    lines are skipped.
    """
    if not text:
        return []
    items = []
    for line in text.split("\n"):
        item = line.strip()
        if item.startswith("-"):
            item = item[1:]
        item = item.strip()
        if item:
            items.append(item)
    return items


class SuggestRecipesInput(BaseModel):
    """Input schema for recipe suggestions (the suggestion form).

    Ingredients are free text, typically comma-separated. At least one
    non-empty ingredient is required.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    ingredients: Annotated[
        str,
        Field(
            min_length=3,
            max_length=2000,
            description="Available ingredients, comma-separated (3-2000 chars)",
        ),
    ]
    cuisine: Annotated[
        str,
        Field(min_length=2, max_length=100, description="Desired cuisine (e.g. Khmer, Italian)"),
    ]

    @field_validator("ingredients")
    @classmethod
    def validate_ingredients_not_empty(cls, ingredients: str) -> str:
        """Reject inputs like ',,,' that contain no actual ingredient."""
        items = [item.strip() for item in ingredients.replace("\n", ",").split(",")]
        if not any(items):
            raise ValueError("Please enter at least one ingredient")
        return ingredients

    def ingredient_items(self) -> List[str]:
        return [item.strip() for item in self.ingredients.replace("\n", ",").split(",") if item.strip()]


class RecipeDraft(BaseModel):
    """Structured-output schema for one generated recipe (no media fields)."""

    model_config = ConfigDict(str_strip_whitespace=True)

    recipe_name: Annotated[str, Field(min_length=1, max_length=200, description="Name of the suggested recipe")]
    description: Annotated[
        str, Field("", description="A short, enticing description of the dish (1-2 sentences)")
    ]
    ingredients: Annotated[
        str,
        Field(description="Ingredients needed for the recipe, one item per line separated by newline (\\n)"),
    ]
    instructions: Annotated[
        str,
        Field(description="Step-by-step preparation instructions, one step per line separated by newline (\\n)"),
    ]
    estimated_cooking_time: Annotated[
        str, Field(description="Estimated cooking time (e.g. 30 minutes)")
    ]
    nutritional_information: Annotated[
        Optional[str],
        Field(None, description="Short nutrition summary per serving (calories, protein, fat, carbohydrates)"),
    ]


class Recipe(RecipeDraft):
    """Domain model for a recipe shown on a card and stored in favorites.

    Identity is the recipe_name: favorites and the suggestion list are keyed by it.
    image_url and audio_url are data URIs filled in after generation.
    """

    image_url: Annotated[Optional[str], Field(None, description="Data URI of the generated dish image")]
    audio_url: Annotated[Optional[str], Field(None, description="Data URI of the spoken instructions (WAV)")]

    def ingredient_list(self) -> List[str]:
        return parse_list(self.ingredients)

    def instruction_list(self) -> List[str]:
        return parse_list(self.instructions)


class SuggestedRecipes(BaseModel):
    """Structured-output schema handed to the model for recipe suggestions."""

    recipes: Annotated[List[RecipeDraft], Field(default_factory=list, description="Distinct suggested recipes")]


class SuggestRecipesOutput(BaseModel):
    """Output of the recipe suggestion flow."""

    recipes: Annotated[List[Recipe], Field(default_factory=list, description="Suggested recipes")]


class GenerateRecipeImageInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    recipe_name: Annotated[
        str, Field(min_length=1, max_length=200, description="The name of the recipe to generate an image for")
    ]


class GenerateRecipeImageOutput(BaseModel):
    image_url: Annotated[
        str,
        Field(
            description="A data URI of the generated image. Format: 'data:<mimetype>;base64,<encoded_data>'. "
            "Empty string when generation failed."
        ),
    ]


class RecipeDetailsInput(GenerateRecipeImageInput):
    """Input for the recipe details action (fetches the dish image)."""


class RecipeDetailsOutput(BaseModel):
    image_url: Annotated[str, Field(description="Data URI of the generated dish image")]


class TextToSpeechInput(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    instructions: Annotated[
        str, Field(min_length=1, max_length=10000, description="Recipe instructions to read aloud")
    ]


class TextToSpeechOutput(BaseModel):
    audio_url: Annotated[str, Field(description="Data URI of the WAV audio: 'data:audio/wav;base64,...'")]


class IngredientSubstitutionInput(BaseModel):
    """Input schema for ingredient substitution suggestions."""

    model_config = ConfigDict(str_strip_whitespace=True)

    recipe_name: Annotated[str, Field(min_length=1, max_length=200, description="Recipe being cooked")]
    ingredient: Annotated[str, Field(min_length=1, max_length=200, description="Ingredient to replace")]
    recipe_ingredients: Annotated[
        Optional[str], Field(None, max_length=5000, description="Full ingredient list of the recipe (optional)")
    ]
    dietary_restrictions: Annotated[
        Optional[str], Field(None, max_length=500, description="Dietary restrictions or allergies (optional)")
    ]


class Substitute(BaseModel):
    name: Annotated[str, Field(min_length=1, description="Substitute ingredient")]
    amount: Annotated[str, Field("", description="How much to use relative to the original ingredient")]
    notes: Annotated[str, Field("", description="Effect on flavour or texture, and preparation tips")]


class IngredientSubstitutionOutput(BaseModel):
    substitutes: Annotated[
        List[Substitute], Field(min_length=1, max_length=5, description="Suggested substitutes (1-5)")
    ]


class TranscribeIngredientsInput(BaseModel):
    """Spoken ingredient list, plus whatever ingredients were already typed."""

    model_config = ConfigDict(str_strip_whitespace=True)

    audio: Annotated[
        str, Field(min_length=1, description="Audio as http(s) URL, data URI, or plain base64")
    ]
    current_ingredients: Annotated[
        Optional[str], Field(None, max_length=2000, description="Ingredients already entered (optional)")
    ]


class TranscribeIngredientsOutput(BaseModel):
    transcript: Annotated[str, Field(description="Ingredients heard in the audio")]
    ingredients: Annotated[str, Field(description="Current ingredients merged with the transcript")]


class ActionResult(BaseModel, Generic[T]):
    """Envelope returned by every server action: {success, data, error}."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, data: T) -> "ActionResult[T]":
        return cls(success=True, data=data, error=None)

    @classmethod
    def fail(cls, error: str) -> "ActionResult[T]":
        return cls(success=False, data=None, error=error)
