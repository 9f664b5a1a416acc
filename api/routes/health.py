"""Health check route"""

from fastapi import APIRouter

from api.responses import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health-check", response_model=HealthResponse)
def health_check():
    """Basic health check endpoint"""
    return {"status": "ok", "service": "HomeHub"}
