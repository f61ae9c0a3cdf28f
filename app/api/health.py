from fastapi import APIRouter

from app.core.config import settings

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    # No local state to ping; the upstream API is checked per request
    return {"status": "ok", "env": settings.APP_ENV}
