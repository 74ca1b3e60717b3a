"""
Madrasah Admin: students, staff, fees, salaries, attendance, expenses,
exams, timetable, notices and documents over a Supabase project.
FastAPI entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from postgrest.exceptions import APIError
from starlette.exceptions import HTTPException as StarletteHTTPException

from madrasah.core.config import Settings, settings as default_settings
from madrasah.core.context import AppContext, build_context
from madrasah.core.errors import (
    database_error_handler,
    http_error_handler,
    unexpected_error_handler,
    validation_error_handler,
)
from madrasah.core.logging import configure_logging
from madrasah.routers import (
    accounting,
    attendance,
    auth,
    dashboard,
    documents,
    events,
    exams,
    expenses,
    fees,
    homework,
    hostel,
    notices,
    parent_portal,
    reports,
    salaries,
    settings as settings_router,
    staff,
    students,
    timetable,
)

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


def create_app(context: Optional[AppContext] = None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application. A ready context (tests) is used as is; otherwise
    one is built from settings at startup and closed at shutdown.
    """
    settings = context.settings if context else (settings or default_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(settings.LOG_LEVEL)
        if getattr(app.state, "context", None) is None:
            app.state.context = build_context(settings)
        logger.info("%s %s started", settings.APP_NAME, VERSION)
        yield
        app.state.context.close()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Administration backend for a madrasah: records, fees, payroll and reports",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.context = context

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(APIError, database_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)

    # Include routers
    app.include_router(auth.router)
    app.include_router(dashboard.router)
    app.include_router(students.router)
    app.include_router(staff.router)
    app.include_router(salaries.router)
    app.include_router(attendance.router)
    app.include_router(fees.router)
    app.include_router(expenses.router)
    app.include_router(accounting.router)
    app.include_router(reports.router)
    app.include_router(notices.router)
    app.include_router(documents.router)
    app.include_router(exams.router)
    app.include_router(timetable.router)
    app.include_router(events.router)
    app.include_router(homework.router)
    app.include_router(hostel.router)
    app.include_router(parent_portal.router)
    app.include_router(settings_router.router)

    @app.get("/")
    async def root():
        return {
            "name": settings.APP_NAME,
            "version": VERSION,
            "status": "running",
            "auth_mode": settings.AUTH_MODE,
        }

    @app.get("/api/health")
    async def health():
        return {"status": "healthy", "auth_mode": settings.AUTH_MODE}

    return app


app = create_app()
