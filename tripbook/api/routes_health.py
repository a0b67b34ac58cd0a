from fastapi import APIRouter

from tripbook.core.config import settings

router = APIRouter()


@router.get("/health")
def healthcheck() -> dict:
    return {"status": "ok", "app": settings.app_name, "environment": settings.environment}
