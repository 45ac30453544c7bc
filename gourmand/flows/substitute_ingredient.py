"""Ingredient substitution flow.

Suggests replacements for a missing ingredient in a given recipe, using an
Agno Agent with IngredientSubstitutionOutput as structured output.
"""

from functools import lru_cache

from agno.agent import Agent

from gourmand.flows.suggest_recipe import build_gemini_model, coerce_output
from gourmand.models.models import IngredientSubstitutionInput, IngredientSubstitutionOutput
from gourmand.prompts.prompts import get_substitution_instructions, get_substitution_prompt
from gourmand.utils.config import config
from gourmand.utils.logger import logger


def create_substitution_agent() -> Agent:
    return Agent(
        model=build_gemini_model(),
        instructions=get_substitution_instructions(config.RESPONSE_LANGUAGE),
        output_schema=IngredientSubstitutionOutput,
        retries=config.MAX_ATTEMPTS - 1,
        exponential_backoff=True,
        delay_between_retries=max(1, int(config.DELAY_BETWEEN_RETRIES)),
        name="Ingredient Substitution Agent",
        description="Suggests substitutes for a missing recipe ingredient",
    )


@lru_cache(maxsize=1)
def get_substitution_agent() -> Agent:
    return create_substitution_agent()


async def substitute_ingredient(
    substitution_input: IngredientSubstitutionInput,
) -> IngredientSubstitutionOutput:
    """Suggest substitutes for one ingredient of a recipe.

    Raises:
        ValueError: If the model returns no usable substitutes.
    """
    prompt = get_substitution_prompt(
        recipe_name=substitution_input.recipe_name,
        ingredient=substitution_input.ingredient,
        recipe_ingredients=substitution_input.recipe_ingredients,
        dietary_restrictions=substitution_input.dietary_restrictions,
    )
    logger.info(
        f"Finding substitutes for '{substitution_input.ingredient}' in '{substitution_input.recipe_name}'"
    )
    run_output = await get_substitution_agent().arun(input=prompt)
    result = coerce_output(getattr(run_output, "content", None), IngredientSubstitutionOutput)
    logger.info(f"✓ Found {len(result.substitutes)} substitute(s): {[s.name for s in result.substitutes]}")
    return result
