"""Recipe suggestion flow.

- suggest_recipes - Suggests distinct recipes for the given ingredients and cuisine.
- create_recipe_agent - Factory for the Agno Agent that produces SuggestedRecipes.

The agent uses Gemini native structured outputs, so content normally arrives
as a SuggestedRecipes instance; dict and JSON string content is validated
into the same schema.
"""

import json
from functools import lru_cache
from typing import Any, Type, TypeVar

from agno.agent import Agent
from agno.models.google import Gemini
from pydantic import BaseModel

from gourmand.models.models import (
    Recipe,
    SuggestedRecipes,
    SuggestRecipesInput,
    SuggestRecipesOutput,
)
from gourmand.prompts.prompts import get_recipe_instructions, get_recipe_prompt
from gourmand.utils.config import config
from gourmand.utils.logger import logger

M = TypeVar("M", bound=BaseModel)


def build_gemini_model() -> Gemini:
    return Gemini(
        id=config.GEMINI_MODEL,
        api_key=config.GEMINI_API_KEY,
        temperature=config.TEMPERATURE,
        max_output_tokens=config.MAX_OUTPUT_TOKENS,
    )


def create_recipe_agent() -> Agent:
    """Create the Agno Agent that suggests recipes.

    Returns:
        Configured Agent instance with SuggestedRecipes as output schema.
    """
    logger.info(f"Configuring recipe agent (model={config.GEMINI_MODEL}, language={config.RESPONSE_LANGUAGE})")
    return Agent(
        model=build_gemini_model(),
        instructions=get_recipe_instructions(config.RESPONSE_LANGUAGE),
        output_schema=SuggestedRecipes,
        # Transient API failures are retried by the agent itself
        retries=config.MAX_ATTEMPTS - 1,
        exponential_backoff=True,
        delay_between_retries=max(1, int(config.DELAY_BETWEEN_RETRIES)),
        name="Recipe Suggestion Agent",
        description="Suggests recipes from available ingredients and a cuisine preference",
    )


@lru_cache(maxsize=1)
def get_recipe_agent() -> Agent:
    return create_recipe_agent()


def coerce_output(content: Any, schema: Type[M]) -> M:
    """Validate agent content into the expected schema.

    Handles Pydantic model, dict, and JSON string content.

    Raises:
        ValueError: If content is empty or cannot be validated.
    """
    if content is None or content == "":
        raise ValueError("The model returned an empty response")
    if isinstance(content, schema):
        return content
    if isinstance(content, BaseModel):
        return schema.model_validate(content.model_dump())
    if isinstance(content, dict):
        return schema.model_validate(content)
    if isinstance(content, str):
        try:
            return schema.model_validate_json(content)
        except ValueError:
            # Tolerate prose around the JSON object
            start, end = content.find("{"), content.rfind("}")
            if start == -1 or end <= start:
                raise ValueError("The model response did not contain JSON") from None
            return schema.model_validate(json.loads(content[start : end + 1]))
    raise ValueError(f"Unexpected model response type: {type(content).__name__}")


def _dedupe_by_name(drafts) -> list[Recipe]:
    recipes: list[Recipe] = []
    seen: set[str] = set()
    for draft in drafts:
        if draft.recipe_name in seen:
            logger.debug(f"Dropping duplicate recipe suggestion: {draft.recipe_name}")
            continue
        seen.add(draft.recipe_name)
        recipes.append(Recipe(**draft.model_dump()))
    return recipes


async def suggest_recipes(suggest_input: SuggestRecipesInput) -> SuggestRecipesOutput:
    """Suggest recipes based on ingredients and cuisine.

    Args:
        suggest_input: Validated ingredients and cuisine.

    Returns:
        SuggestRecipesOutput with distinct recipes (no media yet).

    Raises:
        ValueError: If the model returns no usable recipes.
    """
    prompt = get_recipe_prompt(
        ingredients=suggest_input.ingredients,
        cuisine=suggest_input.cuisine,
        num_recipes=config.NUM_RECIPES,
    )
    logger.info(f"Suggesting recipes (cuisine={suggest_input.cuisine}, ingredients={suggest_input.ingredient_items()})")

    run_output = await get_recipe_agent().arun(input=prompt)
    suggested = coerce_output(getattr(run_output, "content", None), SuggestedRecipes)

    recipes = _dedupe_by_name(suggested.recipes)
    if not recipes:
        raise ValueError("No recipes could be suggested for these ingredients")

    logger.info(f"✓ Suggested {len(recipes)} recipe(s): {[r.recipe_name for r in recipes]}")
    return SuggestRecipesOutput(recipes=recipes)
