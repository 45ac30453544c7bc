"""Server actions invoked by the UI.

Each action validates its input, calls one flow, and normalizes every outcome
into ActionResult {success, data, error}. Exceptions never cross this
boundary: they are logged and surfaced as a user-visible message.
"""

from typing import Any, Awaitable, Callable, Type, TypeVar

from pydantic import BaseModel, ValidationError

from gourmand.flows.generate_recipe_image import get_recipe_details
from gourmand.flows.substitute_ingredient import substitute_ingredient
from gourmand.flows.suggest_recipe import suggest_recipes
from gourmand.flows.text_to_speech import get_audio_for_recipe
from gourmand.flows.transcribe_ingredients import transcribe_ingredients
from gourmand.models.models import (
    ActionResult,
    IngredientSubstitutionInput,
    IngredientSubstitutionOutput,
    RecipeDetailsInput,
    RecipeDetailsOutput,
    SuggestRecipesInput,
    SuggestRecipesOutput,
    TextToSpeechInput,
    TextToSpeechOutput,
    TranscribeIngredientsInput,
    TranscribeIngredientsOutput,
)
from gourmand.utils.errors import describe_error
from gourmand.utils.logger import logger

InputT = TypeVar("InputT", bound=BaseModel)
OutputT = TypeVar("OutputT", bound=BaseModel)


def _validation_message(error: ValidationError) -> str:
    messages = []
    for err in error.errors():
        field = ".".join(str(loc) for loc in err.get("loc", ()))
        msg = err.get("msg", "invalid value")
        messages.append(f"{field}: {msg}" if field else msg)
    return "; ".join(messages)


async def _run_action(
    action_name: str,
    failure_prefix: str,
    input_model: Type[InputT],
    data: Any,
    flow: Callable[[InputT], Awaitable[OutputT]],
) -> ActionResult[OutputT]:
    try:
        validated = data if isinstance(data, input_model) else input_model.model_validate(data)
    except ValidationError as e:
        logger.warning(f"{action_name}: invalid input: {e.error_count()} error(s)", extra={"action": action_name})
        return ActionResult.fail(f"{failure_prefix} {_validation_message(e)}")

    log_context = {"action": action_name, "recipe_name": getattr(validated, "recipe_name", None)}
    try:
        result = await flow(validated)
        return ActionResult.ok(result)
    except Exception as e:
        logger.error(f"{action_name} failed: {e}", exc_info=True, extra=log_context)
        return ActionResult.fail(f"{failure_prefix} {describe_error(e)}")


async def get_recipe_suggestion(data: SuggestRecipesInput | dict) -> ActionResult[SuggestRecipesOutput]:
    return await _run_action(
        "get_recipe_suggestion",
        "Failed to get recipe suggestion.",
        SuggestRecipesInput,
        data,
        suggest_recipes,
    )


async def get_recipe_details_action(data: RecipeDetailsInput | dict) -> ActionResult[RecipeDetailsOutput]:
    return await _run_action(
        "get_recipe_details_action",
        "Failed to get recipe details.",
        RecipeDetailsInput,
        data,
        get_recipe_details,
    )


async def get_audio_for_recipe_action(data: TextToSpeechInput | dict) -> ActionResult[TextToSpeechOutput]:
    return await _run_action(
        "get_audio_for_recipe_action",
        "Failed to get audio.",
        TextToSpeechInput,
        data,
        get_audio_for_recipe,
    )


async def get_ingredient_substitution_action(
    data: IngredientSubstitutionInput | dict,
) -> ActionResult[IngredientSubstitutionOutput]:
    return await _run_action(
        "get_ingredient_substitution_action",
        "Failed to get ingredient substitution.",
        IngredientSubstitutionInput,
        data,
        substitute_ingredient,
    )


async def transcribe_ingredients_action(
    data: TranscribeIngredientsInput | dict,
) -> ActionResult[TranscribeIngredientsOutput]:
    return await _run_action(
        "transcribe_ingredients_action",
        "Failed to transcribe ingredients.",
        TranscribeIngredientsInput,
        data,
        transcribe_ingredients,
    )
