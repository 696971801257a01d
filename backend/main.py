"""
Study Scheduler - Main Application Entry Point

Schedule suggestions, recurring task generation and focus summaries for students.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studyplan.core.config import get_settings
from studyplan.core.logger import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup
    settings = get_settings()
    logger.info(f"Starting Study Scheduler in {settings.ENVIRONMENT} mode...")

    # Initialize database if needed
    if settings.is_local:
        from studyplan.infrastructure.local.database import init_db

        await init_db()

    # Start background scheduler for periodic jobs
    from studyplan.api.deps import get_recurring_task_repository
    from studyplan.services.background_scheduler import BackgroundScheduler
    from studyplan.services.recurring_task_service import RecurringTaskService

    scheduler = BackgroundScheduler(
        RecurringTaskService(
            recurring_repo=get_recurring_task_repository(),
            template_limit=settings.RECURRENCE_TEMPLATE_LIMIT,
        ),
        settings=settings,
    )
    app.state.background_scheduler = scheduler
    await scheduler.start()

    yield

    # Shutdown
    logger.info("Shutting down Study Scheduler...")
    await scheduler.stop()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Study Scheduler",
        description="Task scheduling core for students",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.DEBUG else None,
        redoc_url="/redoc" if settings.DEBUG else None,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routers
    from studyplan.api import focus, recurring_tasks, schedule

    app.include_router(schedule.router, prefix="/api/schedule", tags=["schedule"])
    app.include_router(focus.router, prefix="/api/focus", tags=["focus"])
    app.include_router(recurring_tasks.router, prefix="/api/recurring-tasks", tags=["recurring_tasks"])

    @app.get("/health")
    async def health_check():
        """Health check endpoint."""
        return {
            "status": "healthy",
            "environment": settings.ENVIRONMENT,
            "version": "0.1.0"
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
