from fastapi import APIRouter

from leadcleaner.config import settings

router = APIRouter()


@router.get("/health")
def health_check() -> dict:
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "llm_provider": settings.llm_provider,
        "llm_configured": bool(settings.api_key_for_provider()),
    }
