"""AI meal suggestions"""

import json
import logging
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy.orm import Session

from adapters.openai_adapter import AIProviderError, OpenAIClient
from domain.schemas.ai_schemas import AIResponse
from repositories import MealPlanRepository, RecipeRepository
from services.ai.base import BaseAIService
from services.ai.config import MEAL_PLANNING, AIConfig

logger = logging.getLogger("homehub.ai.meal_planning")

RECENT_MEALS_LIMIT = 10
RECIPE_NAMES_LIMIT = 20

SYSTEM_PROMPT = (
    "You are an AI meal planning assistant that provides intelligent meal "
    "recommendations based on household preferences, dietary restrictions, and "
    "cooking context.\n\nYou must respond with valid JSON only."
)


def mock_meal_suggestions(context: Dict[str, Any]) -> List[Dict[str, Any]]:
    servings = context.get("servings") or 4
    return [
        {
            "id": "mock_meal_1",
            "name": "Quick Pasta Primavera",
            "description": "A fresh and colorful pasta dish with seasonal vegetables",
            "prep_time": 10,
            "cook_time": 15,
            "total_time": 25,
            "servings": servings,
            "difficulty": "easy",
            "cuisine": "Italian",
            "meal_type": context.get("meal_type") or "dinner",
            "dietary_tags": ["vegetarian", "quick"],
            "ingredients": [
                {"name": "Pasta", "amount": "12", "unit": "oz", "category": "Grains"},
                {"name": "Mixed vegetables", "amount": "2", "unit": "cups", "category": "Vegetables"},
                {"name": "Olive oil", "amount": "3", "unit": "tbsp", "category": "Fats"},
                {"name": "Parmesan", "amount": "1/2", "unit": "cup", "category": "Dairy"},
            ],
            "instructions": [
                "Bring a large pot of salted water to boil",
                "Cook pasta according to package directions",
                "Saute vegetables in olive oil for 5-7 minutes",
                "Drain pasta, toss with vegetables and cheese",
            ],
            "confidence": 80,
            "reasoning": "Quick and easy meal perfect for busy weeknights",
        }
    ]


class MealPlanningAIService(BaseAIService):
    feature = MEAL_PLANNING

    @staticmethod
    def load_history(db: Session, household_id: UUID) -> Tuple[List[Dict[str, str]], List[str]]:
        """Recent meal slots (by recipe title) and recipe names of a household."""
        recipes = RecipeRepository(db).get_by_household(household_id, limit=50)
        titles = {str(r.recipe_id): r.title for r in recipes}

        recent_meals = []
        for plan in MealPlanRepository(db).get_recent(household_id, limit=20):
            for day, slots in (plan.meals or {}).items():
                for slot, recipe_id in (slots or {}).items():
                    if not recipe_id:
                        continue
                    recent_meals.append(
                        {
                            "week": plan.week_start_date.isoformat(),
                            "day": day,
                            "slot": slot,
                            "recipe": titles.get(str(recipe_id), f"Recipe {recipe_id}"),
                        }
                    )
        return recent_meals[:RECENT_MEALS_LIMIT], [r.title for r in recipes][:RECIPE_NAMES_LIMIT]

    @staticmethod
    def create_meal_prompt(
        context: Dict[str, Any], recent_meals: List[Dict[str, str]], recipe_names: List[str]
    ) -> str:
        def joined(key: str, empty: str) -> str:
            return ", ".join(context.get(key) or []) or empty

        budget = context.get("budget")
        return (
            "Generate meal suggestions for a household based on the following context:\n\n"
            "Meal Planning Context:\n"
            f"- Meal Type: {context.get('meal_type', 'dinner')}\n"
            f"- Dietary Restrictions: {joined('dietary_restrictions', 'None')}\n"
            f"- Max Prep Time: {context.get('max_prep_time', 30)} minutes\n"
            f"- Servings: {context.get('servings', 4)}\n"
            f"- Cuisine Preference: {context.get('cuisine') or 'Any'}\n"
            f"- Budget: {f'${budget}' if budget else 'Not specified'}\n"
            f"- Skill Level: {context.get('skill_level') or 'intermediate'}\n"
            f"- Available Ingredients: {joined('available_ingredients', 'Not specified')}\n"
            f"- Avoid Ingredients: {joined('avoid_ingredients', 'None')}\n"
            f"- Special Occasions: {joined('special_occasions', 'None')}\n\n"
            "Household Context:\n"
            f"- Recent Meals: {json.dumps(recent_meals)}\n"
            f"- Available Recipes: {json.dumps(recipe_names)}\n\n"
            'Respond with {"suggestions": [...]} holding 3-5 meals, each with id, name, '
            "description, prep_time, cook_time, total_time, servings, difficulty, cuisine, "
            "meal_type, dietary_tags, ingredients [{name, amount, unit, category}], "
            "instructions, confidence and reasoning."
        )

    async def generate_meal_suggestions(
        self,
        context: Dict[str, Any],
        recent_meals: Optional[List[Dict[str, str]]] = None,
        recipe_names: Optional[List[str]] = None,
    ) -> AIResponse:
        async def ai_call(client: OpenAIClient, config: AIConfig) -> List[Dict[str, Any]]:
            content = await client.chat_completion(
                self.create_openai_prompt(
                    SYSTEM_PROMPT,
                    self.create_meal_prompt(context, recent_meals or [], recipe_names or []),
                ),
                model=config.model,
                temperature=0.3,
                max_tokens=1200,
                response_format={"type": "json_object"},
                timeout=config.timeout / 1000,
            )
            parsed = self.parse_ai_response(content, [])
            suggestions = parsed.get("suggestions") if isinstance(parsed, dict) else parsed
            if not isinstance(suggestions, list) or not suggestions:
                raise AIProviderError("OpenAI returned no meal suggestions")
            return suggestions

        response = await self.execute_with_fallback(
            ai_call, lambda: mock_meal_suggestions(context)
        )
        logger.info(
            f"Meal suggestions for {context.get('household_id')}: "
            f"success={response.success} provider={response.provider}"
        )
        return response
