from fastapi import APIRouter

from app.core.config import settings

router = APIRouter()

@router.get("/")
def root():
    return {
        "name": "Performance Management",
        "status": "ok",
        "docs": "/docs",
        "health": "/health",
        "home": "/performance",
        "upstream": settings.API_BASE_URL,
    }
