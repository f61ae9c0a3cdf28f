import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.core.app_logger import setup_logging
from app.core.config import settings
from app.api.health import router as health_router
from app.api.root import router as root_router
from app.api.dashboard import router as dashboard_router
from app.api.cycles import router as cycles_router
from app.api.templates import router as templates_router
from app.api.assignments import router as assignments_router
from app.api.evaluations import router as evaluations_router
from app.api.publish import router as publish_router
from app.api.my_appraisals import router as my_appraisals_router
from app.api.disputes import router as disputes_router

logger = setup_logging()

app = FastAPI(title="Performance Management")

# CORS middleware for frontend access
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(root_router)
app.include_router(health_router)
app.include_router(dashboard_router)
app.include_router(cycles_router)
app.include_router(templates_router)
app.include_router(assignments_router)
app.include_router(evaluations_router)
app.include_router(publish_router)
app.include_router(my_appraisals_router)
app.include_router(disputes_router)

logger.info("Performance views ready (upstream %s)", settings.API_BASE_URL)


def run():
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
