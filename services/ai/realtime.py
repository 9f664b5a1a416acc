"""
Real-time AI processing.

Requests are answered inline while progress events are pushed to the
requesting user's subscribers (WebSocket connections) through EventBroadcaster.
The in-flight map only reflects requests currently being processed.
"""

import asyncio
import logging
import random
import string
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Set, Tuple
from uuid import UUID

from domain.schemas.ai_schemas import AIResponse, RealtimeResponse
from services.ai.config import (
    MEAL_PLANNING,
    SHOPPING_SUGGESTIONS,
    AIConfigManager,
    ai_config_manager,
)
from services.ai.meal_planning import MealPlanningAIService, mock_meal_suggestions
from services.ai.shopping_suggestions import ShoppingSuggestionsAIService

logger = logging.getLogger("homehub.ai.realtime")

MOCK_CHORE_MINUTES = 30
EVENT_QUEUE_SIZE = 100


def generate_request_id(prefix: str = "realtime") -> str:
    """<prefix>_<epoch ms>_<9 random chars>"""
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _unwrap(response: AIResponse) -> Tuple[Any, str, bool]:
    if not response.success:
        raise RuntimeError(response.error or "AI request failed")
    return response.data, response.provider, response.fallback_used


@dataclass
class AIRequest:
    type: str
    context: Dict[str, Any]
    request_id: str
    user_id: UUID
    household_id: UUID
    priority: str = "medium"
    received_at: str = field(default_factory=_now_iso)

    def summary(self) -> Dict[str, Any]:
        return {
            "request_id": self.request_id,
            "type": self.type,
            "priority": self.priority,
            "user_id": str(self.user_id),
            "household_id": str(self.household_id),
            "received_at": self.received_at,
        }


class EventBroadcaster:
    """In-process fan-out of events to each user's subscribers."""

    def __init__(self, queue_size: int = EVENT_QUEUE_SIZE):
        self.queue_size = queue_size
        self._subscribers: Dict[str, Set[asyncio.Queue]] = {}

    def subscribe(self, user_id) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.queue_size)
        self._subscribers.setdefault(str(user_id), set()).add(queue)
        logger.debug(f"Subscriber added for user {user_id}")
        return queue

    def unsubscribe(self, user_id, queue: asyncio.Queue) -> None:
        queues = self._subscribers.get(str(user_id))
        if not queues:
            return
        queues.discard(queue)
        if not queues:
            del self._subscribers[str(user_id)]

    def emit_to_user(self, user_id, message: Dict[str, Any]) -> int:
        """Queue message for every subscriber of user_id; returns how many got it."""
        delivered = 0
        for queue in list(self._subscribers.get(str(user_id), ())):
            try:
                queue.put_nowait(message)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning(f"Dropping {message.get('type')} event for slow subscriber of {user_id}")
        return delivered

    def connected_users_count(self) -> int:
        return len(self._subscribers)


class RealTimeAIProcessor:
    """Dispatch real-time AI requests by type and report progress as events."""

    def __init__(
        self,
        broadcaster: Optional[EventBroadcaster] = None,
        config_manager: Optional[AIConfigManager] = None,
        shopping_ai: Optional[ShoppingSuggestionsAIService] = None,
        meal_planning_ai: Optional[MealPlanningAIService] = None,
    ):
        self.broadcaster = broadcaster or EventBroadcaster()
        self.config_manager = config_manager or ai_config_manager
        self.shopping_ai = shopping_ai or ShoppingSuggestionsAIService(self.config_manager)
        self.meal_planning_ai = meal_planning_ai or MealPlanningAIService(self.config_manager)
        self._processing: Dict[str, AIRequest] = {}

    async def process_request(self, request: AIRequest) -> RealtimeResponse:
        """
        Answer one request.

        Events emitted to the user: ai_processing_start, then either
        ai_processing_complete or ai_processing_error. The request is in the
        processing queue for the duration of the call.
        """
        self._processing[request.request_id] = request
        self._emit(
            request,
            "ai_processing_start",
            {
                "request_id": request.request_id,
                "type": request.type,
                "context": request.context,
                "priority": request.priority,
            },
        )

        start = time.perf_counter()
        try:
            data, provider, fallback_used = await self.dispatch(
                request.type, request.context, request.household_id
            )
            processing_time = round((time.perf_counter() - start) * 1000, 2)

            self._emit(
                request,
                "ai_processing_complete",
                {
                    "request_id": request.request_id,
                    "results": data,
                    "processing_time": processing_time,
                    "provider": provider,
                    "fallback_used": fallback_used,
                },
            )
            return RealtimeResponse(
                success=True,
                data=data,
                provider=provider,
                processing_time=processing_time,
                fallback_used=fallback_used,
                request_id=request.request_id,
            )
        except Exception as e:
            logger.error(
                f"Real-time AI processing error for {request.request_id} ({request.type}): {e}"
            )
            self._emit(
                request,
                "ai_processing_error",
                {"request_id": request.request_id, "error": str(e)},
            )
            return RealtimeResponse(
                success=False,
                error=str(e),
                provider="error",
                processing_time=0,
                request_id=request.request_id,
            )
        finally:
            self._processing.pop(request.request_id, None)

    async def dispatch(
        self, request_type: str, context: Optional[Dict[str, Any]], household_id: UUID
    ) -> Tuple[Any, str, bool]:
        """Run one request type; returns (data, provider, fallback_used)."""
        context = dict(context or {})
        context["household_id"] = str(household_id)

        if request_type == "shopping_suggestions":
            if self.config_manager.is_enabled(SHOPPING_SUGGESTIONS):
                return _unwrap(await self.shopping_ai.generate_suggestions(context))
            return self.mock_shopping_suggestions(), "mock", True

        if request_type == "meal_planning":
            meal_context = self.meal_context(context)
            if self.config_manager.is_enabled(MEAL_PLANNING):
                return _unwrap(
                    await self.meal_planning_ai.generate_meal_suggestions(meal_context)
                )
            return mock_meal_suggestions(meal_context), "mock", True

        if request_type == "chore_assignment":
            return self.mock_chore_assignment(context), "mock", True

        if request_type == "email_processing":
            return self.mock_email_processing(context), "mock", True

        raise ValueError(f"Unknown AI processing type: {request_type}")

    @staticmethod
    def meal_context(context: Dict[str, Any]) -> Dict[str, Any]:
        """Fill meal planning defaults for keys the caller left out."""
        skill = context.get("skill_level")
        return {
            **context,
            "meal_type": context.get("meal_type") or "dinner",
            "dietary_restrictions": context.get("dietary_restrictions") or [],
            "max_prep_time": context.get("max_prep_time") or 30,
            "servings": context.get("servings") or 4,
            "cuisine": context.get("cuisine") or "any",
            "skill_level": skill if skill in ("beginner", "intermediate", "advanced") else "intermediate",
        }

    @staticmethod
    def mock_shopping_suggestions() -> Dict[str, Any]:
        return {
            "suggestions": [
                {
                    "type": "frequently_bought",
                    "title": "Your Essentials",
                    "description": "Items you often buy",
                    "items": [
                        {"name": "Milk", "category": "Dairy", "confidence": 90},
                        {"name": "Bread", "category": "Bakery", "confidence": 85},
                        {"name": "Eggs", "category": "Dairy", "confidence": 80},
                    ],
                    "confidence": 88,
                    "priority": "high",
                }
            ]
        }

    @staticmethod
    def mock_chore_assignment(context: Dict[str, Any]) -> Dict[str, Any]:
        chores = [str(c) for c in context.get("chores") or []]
        due = _now_iso()
        return {
            "assignments": [
                {
                    "chore_id": chore_id,
                    "assigned_to": context.get("household_id"),
                    "due_date": due,
                    "priority": "medium",
                    "estimated_time": MOCK_CHORE_MINUTES,
                    "reasoning": "Based on workload and preferences",
                }
                for chore_id in chores
            ],
            "total_chores": len(chores),
            "estimated_total_time": len(chores) * MOCK_CHORE_MINUTES,
            "available_users": [str(u) for u in context.get("available_users") or []],
            "chore_types": [str(t) for t in context.get("chore_types") or []],
        }

    @staticmethod
    def mock_email_processing(context: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "processed_emails": 1,
            "extracted_data": {"bills": 0, "receipts": 1, "events": 0, "deliveries": 0},
            "confidence": 85,
            "household_id": context.get("household_id"),
            "processing_type": context.get("processing_type") or "standard",
        }

    def _emit(self, request: AIRequest, event_type: str, data: Dict[str, Any]) -> None:
        message = {
            "type": event_type,
            "data": data,
            "timestamp": _now_iso(),
            "request_id": request.request_id,
            "user_id": str(request.user_id),
            "household_id": str(request.household_id),
        }
        try:
            self.broadcaster.emit_to_user(request.user_id, message)
        except Exception as e:
            logger.warning(f"Failed to emit {event_type} for user {request.user_id}: {e}")

    def get_processing_queue(self) -> List[AIRequest]:
        return list(self._processing.values())

    def get_queue_size(self) -> int:
        return len(self._processing)

    def clear_queue(self) -> None:
        self._processing.clear()


event_broadcaster = EventBroadcaster()
realtime_processor = RealTimeAIProcessor(event_broadcaster)
