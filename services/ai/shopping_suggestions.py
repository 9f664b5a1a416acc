"""AI shopping suggestions"""

import json
import logging
from datetime import date
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from adapters.openai_adapter import AIProviderError, OpenAIClient
from domain.schemas.ai_schemas import AIResponse
from repositories import ShoppingItemRepository
from services.ai.base import BaseAIService
from services.ai.config import SHOPPING_SUGGESTIONS, AIConfig

logger = logging.getLogger("homehub.ai.shopping")

HISTORY_LIMIT = 50
PROMPT_HISTORY_ITEMS = 20

SYSTEM_PROMPT = (
    "You are an AI shopping assistant that provides intelligent shopping "
    "recommendations based on household patterns, preferences, and context.\n\n"
    "You must respond with valid JSON only. Be practical and helpful in your suggestions."
)


def _item(name: str, category: str, confidence: int, quantity: str, price: float, reasoning: str) -> Dict[str, Any]:
    return {
        "name": name,
        "category": category,
        "confidence": confidence,
        "quantity": quantity,
        "estimated_price": price,
        "reasoning": reasoning,
    }


def seasonal_items(today: date) -> List[Dict[str, Any]]:
    """Season-specific items for the month of today (northern hemisphere)."""
    month = today.month
    if 3 <= month <= 5:
        return [
            _item("Spring cleaning supplies", "Household", 75, "1 set", 25.0, "Spring cleaning season"),
            _item("Garden supplies", "Outdoor", 70, "As needed", 30.0, "Gardening season begins"),
        ]
    if 6 <= month <= 8:
        return [
            _item("BBQ supplies", "Outdoor", 80, "1 set", 40.0, "Summer grilling season"),
            _item("Summer drinks", "Beverages", 75, "Variety", 15.0, "Hot weather refreshments"),
        ]
    if 9 <= month <= 11:
        return [
            _item("Fall decorations", "Home", 75, "1 set", 20.0, "Fall decorating season"),
            _item("Warm clothing", "Clothing", 70, "As needed", 50.0, "Cooler weather approaching"),
        ]
    return [
        _item("Winter clothing", "Clothing", 80, "As needed", 60.0, "Cold weather essentials"),
        _item("Holiday decorations", "Home", 75, "1 set", 30.0, "Holiday season"),
    ]


def mock_suggestions(today: Optional[date] = None) -> List[Dict[str, Any]]:
    """Deterministic suggestion groups used when the provider is unavailable."""
    today = today or date.today()
    return [
        {
            "type": "frequently_bought",
            "title": "Frequently Bought Items",
            "description": "Items you buy regularly based on your shopping history",
            "items": [
                _item("Milk", "Dairy", 85, "1 gallon", 3.5, "Purchased weekly based on history"),
                _item("Bread", "Bakery", 80, "1 loaf", 2.5, "Regular household staple"),
                _item("Eggs", "Dairy", 75, "1 dozen", 4.0, "High protein breakfast option"),
            ],
            "confidence": 80,
            "priority": "high",
            "reasoning": "Based on shopping history analysis",
        },
        {
            "type": "ai_recommended",
            "title": "AI Smart Recommendations",
            "description": "Intelligent suggestions based on patterns and context",
            "items": [
                _item("Fresh Vegetables", "Produce", 80, "Variety pack", 12.0, "Healthy addition to weekly meals"),
                _item("Protein Source", "Meat", 75, "2 lbs", 15.0, "Balanced nutrition for the week"),
            ],
            "confidence": 75,
            "priority": "medium",
            "reasoning": "Based on dietary preferences and seasonal availability",
        },
        {
            "type": "seasonal",
            "title": "Seasonal Suggestions",
            "description": "Items that might be useful for the current season",
            "items": seasonal_items(today),
            "confidence": 70,
            "priority": "medium",
            "reasoning": "Based on current season and weather patterns",
        },
    ]


class ShoppingSuggestionsAIService(BaseAIService):
    feature = SHOPPING_SUGGESTIONS

    @staticmethod
    def load_history(db: Session, household_id: UUID) -> List[Dict[str, Any]]:
        """Latest shopping items of the household, newest first."""
        items = ShoppingItemRepository(db).get_recent_for_household(household_id, HISTORY_LIMIT)
        return [
            {
                "name": item.name,
                "category": item.category or "General",
                "date": item.created_at.isoformat() if item.created_at else None,
            }
            for item in items
        ]

    @staticmethod
    def create_shopping_prompt(context: Dict[str, Any], history: List[Dict[str, Any]]) -> str:
        recent = history[:PROMPT_HISTORY_ITEMS] or [
            {"name": name, "category": "General"} for name in context.get("recent_purchases") or []
        ]
        budget = context.get("budget")
        return (
            "Generate shopping suggestions for a household based on the following context:\n\n"
            "Household Context:\n"
            f"- Recent Purchases: {json.dumps(recent)}\n"
            f"- Dietary Restrictions: {', '.join(context.get('dietary_restrictions') or []) or 'None'}\n"
            f"- Budget: {f'${budget}' if budget else 'Not specified'}\n"
            f"- Season: {context.get('season') or 'Current season'}\n"
            f"- Special Occasions: {', '.join(context.get('special_occasions') or []) or 'None'}\n\n"
            "Provide 3-5 suggestion groups as a JSON object "
            '{"suggestions": [{"type", "title", "description", "items": '
            '[{"name", "category", "confidence", "quantity", "estimated_price", "reasoning"}], '
            '"confidence", "priority", "reasoning"}]}. '
            "Valid types: frequently_bought, category_based, seasonal, smart_templates, ai_recommended.\n\n"
            "Focus on practical, useful suggestions that would genuinely help with household shopping."
        )

    async def generate_suggestions(
        self,
        context: Dict[str, Any],
        history: Optional[List[Dict[str, Any]]] = None,
        today: Optional[date] = None,
    ) -> AIResponse:
        history = history or []

        async def ai_call(client: OpenAIClient, config: AIConfig) -> List[Dict[str, Any]]:
            content = await client.chat_completion(
                self.create_openai_prompt(
                    SYSTEM_PROMPT, self.create_shopping_prompt(context, history)
                ),
                model=config.model,
                temperature=0.3,
                max_tokens=2000,
                response_format={"type": "json_object"},
                timeout=config.timeout / 1000,
            )
            parsed = self.parse_ai_response(content, {})
            suggestions = parsed.get("suggestions") if isinstance(parsed, dict) else parsed
            if not isinstance(suggestions, list) or not suggestions:
                raise AIProviderError("OpenAI returned no suggestions")
            return suggestions

        response = await self.execute_with_fallback(ai_call, lambda: mock_suggestions(today))
        logger.info(
            f"Shopping suggestions for {context.get('household_id')}: "
            f"success={response.success} provider={response.provider}"
        )
        return response


def suggested_items(suggestions: Any) -> List[Dict[str, Any]]:
    """Flatten suggestion groups into shopping entries ({name, quantity, category})."""
    entries = []
    for group in suggestions or []:
        if not isinstance(group, dict):
            continue
        for item in group.get("items") or []:
            if isinstance(item, dict) and item.get("name"):
                entries.append(
                    {
                        "name": item["name"],
                        "quantity": item.get("quantity"),
                        "category": item.get("category"),
                    }
                )
    return entries
