"""Prompts and instructions for the Gourmand generative flows.

Provides factory functions that fill prompt templates for each feature:
recipe suggestion, dish image generation, text-to-speech, ingredient
substitution, and spoken-ingredient transcription.
"""

from typing import Optional


def get_recipe_instructions(language: str) -> str:
    """Generate system instructions for the recipe suggestion agent.

    Args:
        language: Language every field of the response must be written in.

    Returns:
        str: System instructions for the chef persona.
    """
    return f"""You are a world-class chef specializing in creating delicious recipes based on available ingredients and cuisine preferences.

Please provide the entire response in {language}.

## Output Rules

- Every recipe must be distinct: no two recipes may share a name or be trivial variations of each other.
- Prefer recipes that use the provided ingredients. Common pantry staples (salt, oil, water, sugar) may be added.
- `recipe_name`: the dish name only, no numbering.
- `description`: a short, enticing description of the dish (1-2 sentences).
- `ingredients`: one ingredient per line with quantities, separated by a newline (\\n).
- `instructions`: one step per line, separated by a newline (\\n). Do not number the steps.
- `estimated_cooking_time`: total time, e.g. "30 minutes".
- `nutritional_information`: a one-line estimate per serving (calories, protein, fat, carbohydrates).

Ensure your response is a parsable JSON object that adheres to the provided schema."""


def get_recipe_prompt(ingredients: str, cuisine: str, num_recipes: int = 5) -> str:
    """Fill the recipe suggestion template.

    Args:
        ingredients: Comma-separated available ingredients.
        cuisine: Desired cuisine.
        num_recipes: Number of distinct recipes to suggest.

    Returns:
        str: User prompt for the suggestion agent.
    """
    return f"""Based on the provided ingredients and cuisine, suggest {num_recipes} distinct, excellent, detailed recipes. For each recipe, include a short, enticing description.

Ingredients: {ingredients}
Cuisine: {cuisine}"""


def get_image_prompt(recipe_name: str, style: str = "traditional Khmer") -> str:
    return (
        f"A photorealistic, beautifully lit, appetizing photo of a finished plate of {recipe_name}, "
        f"{style} style."
    )


def get_speech_prompt(instructions: str) -> str:
    """Build the text handed to the TTS model.

    Numbers each step so the listener can follow along.
    """
    steps = [line.strip().lstrip("-").strip() for line in instructions.split("\n")]
    steps = [step for step in steps if step]
    if not steps:
        return instructions.strip()
    return "\n".join(f"{idx}. {step}" for idx, step in enumerate(steps, start=1))


def get_substitution_instructions(language: str) -> str:
    return f"""You are a professional chef helping a home cook who is missing an ingredient.

Please provide the entire response in {language}.

Suggest between 1 and 5 practical substitutes, best first. For each substitute give:
- `name`: the substitute ingredient
- `amount`: how much to use relative to the original ingredient (e.g. "1:1", "half the amount")
- `notes`: how it changes flavour or texture, and any preparation tip

Never suggest a substitute that conflicts with the stated dietary restrictions."""


def get_substitution_prompt(
    recipe_name: str,
    ingredient: str,
    recipe_ingredients: Optional[str] = None,
    dietary_restrictions: Optional[str] = None,
) -> str:
    """Fill the ingredient substitution template."""
    lines = [
        f"Recipe: {recipe_name}",
        f"Ingredient to replace: {ingredient}",
    ]
    if recipe_ingredients:
        lines.append(f"Full ingredient list:\n{recipe_ingredients}")
    if dietary_restrictions:
        lines.append(f"Dietary restrictions: {dietary_restrictions}")
    return "\n".join(lines)


def get_transcription_prompt(language: str) -> str:
    return (
        f"The audio is a person listing cooking ingredients in {language}. "
        "Transcribe only the ingredients they mention, in the language spoken, "
        "as a single comma-separated line. Return only that line, with no other text."
    )
