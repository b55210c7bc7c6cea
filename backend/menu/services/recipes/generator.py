"""Vegan recipe generation via LLM."""
import json
import logging

from pydantic import ValidationError

from menu.schemas.recipe import GeneratedRecipe
from menu.services.llm.client import LLMClient

logger = logging.getLogger(__name__)

RECIPE_PROMPT = """You are a professional vegan chef assistant. Generate 5 creative, delicious, and nutritionally balanced vegan recipes using the provided ingredients.

Available ingredients: {ingredients}

Requirements:
- All recipes must be 100% vegan (no animal products)
- Use as many of the available ingredients as possible
- Each recipe should be unique and interesting
- Include realistic prep and cook times
- Specify servings for each recipe
- Keep instructions clear and concise
- Ensure recipes are practical for home cooking

Format your response as valid JSON with this exact structure:
{{
  "recipes": [
    {{
      "title": "Recipe Name",
      "description": "Brief appetizing description",
      "ingredients": [
        {{"name": "ingredient name", "quantity": "amount", "unit": "measurement unit"}},
        ...
      ],
      "instructions": ["Step 1", "Step 2", ...],
      "prepTime": minutes_as_number,
      "cookTime": minutes_as_number,
      "servings": number_of_servings
    }},
    ...
  ]
}}

Only return the JSON, no additional text.
"""


class RecipeGenerationError(Exception):
    """Recipe generation failed. The cause is logged, not exposed."""

    def __init__(self, message: str = "Failed to generate recipes. Please try again."):
        super().__init__(message)
        self.message = message


def parse_recipes(content: str) -> list[GeneratedRecipe]:
    """Parse an LLM reply into recipes; raises ValueError on any malformed payload."""
    # Extract JSON if wrapped in markdown code blocks
    if "```json" in content:
        content = content.split("```json")[1].split("```")[0]
    elif "```" in content:
        content = content.split("```")[1].split("```")[0]

    data = json.loads(content.strip())
    if not isinstance(data, dict) or not isinstance(data.get("recipes"), list):
        raise ValueError("Invalid recipe format in response")

    try:
        return [GeneratedRecipe.model_validate(item) for item in data["recipes"]]
    except ValidationError as e:
        raise ValueError(f"Invalid recipe in response: {e}") from e


class RecipeGenerator:
    """Generation client: turns an ingredient list into a batch of vegan recipes."""

    def __init__(self, llm_client: LLMClient | None = None):
        self.llm = llm_client or LLMClient()

    async def generate(self, ingredients: list[str]) -> list[GeneratedRecipe]:
        """
        Generate recipes for the given ingredient names.

        Raises:
            RecipeGenerationError: on provider failure or a malformed reply
        """
        prompt = RECIPE_PROMPT.format(ingredients=", ".join(ingredients))

        try:
            response = await self.llm.complete(
                prompt=prompt,
                system="You are a vegan recipe assistant. Respond only with valid JSON.",
                max_tokens=4000,
                temperature=0.7,
            )
            recipes = parse_recipes(response["content"])
        except Exception as e:
            logger.exception(f"Error generating recipes: {e}")
            raise RecipeGenerationError() from e

        logger.info(
            f"Generated {len(recipes)} recipes for {len(ingredients)} ingredients "
            f"via {response['provider']}"
        )
        return recipes
