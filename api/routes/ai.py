"""
AI routes: suggestions, chore assignment, real-time and batch processing,
corrections and learning insights.

Async endpoints run their database work in a worker thread so the event loop
is never blocked on SQLAlchemy while provider calls are in flight.
"""

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status
from fastapi.encoders import jsonable_encoder
from sqlalchemy.orm import Session
import anyio
import logging
from dataclasses import asdict
from uuid import UUID
from typing import List, Optional

from api.dependencies import get_db, get_current_user_id
from api.responses import HOUSEHOLD_ERRORS
from app.exceptions import ForbiddenError, ServiceValidationError
from domain.schemas.ai_schemas import (
    BatchActionRequest,
    ChoreAssignmentRequest,
    CorrectionRequest,
    CorrectionResponse,
    CorrectionResult,
    MealSuggestionRequest,
    RealtimeRequest,
    RealtimeResponse,
    ShoppingSuggestionRequest,
    SuggestionProcessRequest,
    SuggestionProcessResult,
    SuggestionResponse,
)
from services.ai.batch import BatchRequest, batch_processor
from services.ai.config import (
    CHORE_ASSIGNMENT,
    EMAIL_PROCESSING,
    MEAL_PLANNING,
    SHOPPING_SUGGESTIONS,
    ai_config_manager,
)
from services.ai.learning import AILearningService
from services.ai.meal_planning import MealPlanningAIService
from services.ai.realtime import (
    AIRequest,
    event_broadcaster,
    generate_request_id,
    realtime_processor,
)
from services.ai.shopping_suggestions import ShoppingSuggestionsAIService
from services.ai.suggestion_processor import SuggestionProcessor
from services.ai.suggestion_service import AISuggestionService
from services.household_service import HouseholdService

router = APIRouter(prefix="/ai", tags=["AI"], responses=HOUSEHOLD_ERRORS)
logger = logging.getLogger("homehub.api.ai")

shopping_ai = ShoppingSuggestionsAIService()
meal_planning_ai = MealPlanningAIService()

# request type -> AI feature gating it
REQUEST_FEATURES = {
    "shopping_suggestions": SHOPPING_SUGGESTIONS,
    "meal_planning": MEAL_PLANNING,
    "chore_assignment": CHORE_ASSIGNMENT,
    "email_processing": EMAIL_PROCESSING,
}


# =============================================================================
# Suggestions
# =============================================================================


@router.post("/shopping-suggestions", response_model=SuggestionResponse)
async def shopping_suggestions(
    payload: ShoppingSuggestionRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """
    Suggest items to buy from the household's recent shopping history.

    A successful answer is stored as a shopping_list_update suggestion so it
    can later be applied or corrected.
    """
    history = await anyio.to_thread.run_sync(
        AISuggestionService.shopping_history, db, payload.household_id, user_id
    )
    response = await shopping_ai.generate_suggestions(payload.model_dump(mode="json"), history)

    suggestion_id = None
    if response.success:
        suggestion = await anyio.to_thread.run_sync(
            AISuggestionService.store_shopping_suggestions,
            db,
            payload.household_id,
            user_id,
            response.data,
        )
        suggestion_id = suggestion.suggestion_id
    return SuggestionResponse(**response.model_dump(), suggestion_id=suggestion_id)


@router.post("/meal-suggestions", response_model=SuggestionResponse)
async def meal_suggestions(
    payload: MealSuggestionRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Suggest meals, avoiding recently planned recipes"""
    recent_meals, recipe_names = await anyio.to_thread.run_sync(
        AISuggestionService.meal_history, db, payload.household_id, user_id
    )
    response = await meal_planning_ai.generate_meal_suggestions(
        payload.model_dump(mode="json"), recent_meals, recipe_names
    )

    suggestion_id = None
    if response.success:
        suggestion = await anyio.to_thread.run_sync(
            AISuggestionService.store_meal_suggestions,
            db,
            payload.household_id,
            user_id,
            response.data,
        )
        suggestion_id = suggestion.suggestion_id
    return SuggestionResponse(**response.model_dump(), suggestion_id=suggestion_id)


@router.post("/chore-assignment")
def chore_assignment(
    payload: ChoreAssignmentRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Recommend an assignee; with recommendations=true every strategy is returned"""
    return AISuggestionService.chore_assignment(db, payload, user_id)


@router.post("/suggestions/process")
def process_suggestions(
    payload: SuggestionProcessRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Turn accepted suggestions into calendar events, list items and chores"""
    results: List[SuggestionProcessResult] = SuggestionProcessor.process_suggestions(
        db, payload.household_id, user_id, payload.suggestions
    )
    return {
        "results": results,
        "successful": sum(1 for r in results if r.success),
        "failed": sum(1 for r in results if not r.success),
    }


# =============================================================================
# Real-time processing
# =============================================================================


@router.post("/realtime", response_model=RealtimeResponse)
async def realtime_request(
    payload: RealtimeRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Process one AI request now; progress is pushed to /ai/events subscribers"""
    await anyio.to_thread.run_sync(
        HouseholdService.require_access, db, user_id, payload.household_id
    )
    if not ai_config_manager.is_enabled(REQUEST_FEATURES[payload.type]):
        raise ForbiddenError(f"{payload.type} AI is disabled")

    request = AIRequest(
        type=payload.type,
        context=payload.context,
        request_id=generate_request_id(),
        user_id=user_id,
        household_id=payload.household_id,
        priority=payload.priority,
    )
    return await realtime_processor.process_request(request)


@router.get("/realtime")
def realtime_status(user_id: UUID = Depends(get_current_user_id)):
    return {
        "queue_size": realtime_processor.get_queue_size(),
        "processing": [r.summary() for r in realtime_processor.get_processing_queue()],
        "connected_users": event_broadcaster.connected_users_count(),
    }


@router.websocket("/events")
async def ai_events(websocket: WebSocket, user_id: UUID = Query(...)):
    """Stream a user's AI processing events until the client disconnects"""
    await websocket.accept()
    queue = event_broadcaster.subscribe(user_id)
    logger.info(f"Event stream opened for user {user_id}")

    async def forward_events():
        while True:
            message = await queue.get()
            await websocket.send_json(jsonable_encoder(message))

    try:
        await websocket.send_json({"type": "connected", "user_id": str(user_id)})
        async with anyio.create_task_group() as tg:
            tg.start_soon(forward_events)
            try:
                while True:
                    await websocket.receive_text()
            except WebSocketDisconnect:
                pass
            tg.cancel_scope.cancel()
    finally:
        event_broadcaster.unsubscribe(user_id, queue)
        logger.info(f"Event stream closed for user {user_id}")


# =============================================================================
# Batch processing
# =============================================================================


def _owned_job(job_id: Optional[str], user_id: UUID):
    if not job_id:
        raise ServiceValidationError("job_id is required")
    job = batch_processor.get_batch_job(job_id)
    if not job.owned_by(user_id):
        raise ForbiddenError(f"Batch job {job_id} belongs to another user")
    return job


@router.post("/batch")
async def batch_action(
    payload: BatchActionRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """
    Manage batch jobs.

    Actions:
        create_job: queue `requests` as a new job (name required)
        process_job: run a pending job and return its results
        cancel_job: cancel a pending or processing job
        update_config: change batch settings (`config`)
    """
    if payload.action == "create_job":
        for household_id in {r.household_id for r in payload.requests}:
            await anyio.to_thread.run_sync(
                HouseholdService.require_access, db, user_id, household_id
            )
        job = batch_processor.create_batch_job(
            payload.name or "",
            payload.description or "",
            [
                BatchRequest(
                    type=r.type,
                    context=r.context,
                    user_id=user_id,
                    household_id=r.household_id,
                    priority=r.priority,
                )
                for r in payload.requests
            ],
        )
        return job.to_dict()

    if payload.action == "process_job":
        job = _owned_job(payload.job_id, user_id)
        return (await batch_processor.process_batch_job(job.id)).to_dict()

    if payload.action == "cancel_job":
        job = _owned_job(payload.job_id, user_id)
        return {"job_id": job.id, "cancelled": batch_processor.cancel_batch_job(job.id)}

    return asdict(batch_processor.update_config(**payload.config.model_dump(exclude_none=True)))


@router.get("/batch")
def batch_status(
    job_id: Optional[str] = Query(None),
    user_id: UUID = Depends(get_current_user_id),
):
    """One job by id, or the caller's jobs with queue and config status"""
    if job_id:
        return _owned_job(job_id, user_id).to_dict()
    return {
        "jobs": [j.to_dict() for j in batch_processor.get_all_batch_jobs() if j.owned_by(user_id)],
        "queue_size": batch_processor.get_queue_size(),
        "config": asdict(batch_processor.get_config()),
    }


# =============================================================================
# Corrections and learning
# =============================================================================


@router.post(
    "/corrections", response_model=CorrectionResult, status_code=status.HTTP_201_CREATED
)
def create_correction(
    payload: CorrectionRequest,
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    """Record a correction of a suggestion and learn from it"""
    correction, feedback, _, analysis = AILearningService.record_correction(db, payload, user_id)
    return CorrectionResult(
        correction=CorrectionResponse.model_validate(correction),
        user_feedback=feedback,
        pattern_type=analysis.pattern_type,
        issue_category=analysis.issue_category,
        priority=analysis.learning_priority,
        confidence_impact=analysis.confidence_impact,
        improvements=analysis.suggested_improvements,
    )


@router.get("/corrections", response_model=List[CorrectionResponse])
def list_corrections(
    household_id: UUID = Query(...),
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    corrections = AILearningService.list_corrections(db, household_id, user_id)
    return [CorrectionResponse.model_validate(c) for c in corrections]


@router.get("/learning-insights")
def learning_insights(
    household_id: UUID = Query(...),
    db: Session = Depends(get_db),
    user_id: UUID = Depends(get_current_user_id),
):
    return AILearningService.get_household_learning_insights(db, household_id, user_id)
