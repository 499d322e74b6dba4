# hostel_api/main.py

import sys

from fastapi import FastAPI, Request, Response
from loguru import logger

from hostel_api.core.config import CORS_HEADERS, settings
from hostel_api.api.deps import get_roster
from hostel_api.core.database import engine, init_db, test_connection
from hostel_api.core.errors import register_exception_handlers

# Routers
from hostel_api.api.endpoints import (
    auth_student as auth_student_router,
    students as students_router,
)

# ------------------------------------------------------------
# LOGURU CONFIGURATION
# ------------------------------------------------------------
logger.remove()
logger.add(
    sys.stdout,
    level=settings.LOG_LEVEL,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
           "<level>{level}</level> | "
           "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
           "<level>{message}</level>",
    colorize=True,
    backtrace=True,
    diagnose=settings.ENV != "prod",
)

# ------------------------------------------------------------
# FASTAPI APP INIT
# ------------------------------------------------------------
app = FastAPI(
    title="Hostel Student Accounts API",
    version="1.0.0",
    description="Signup, login and profile management for hostel students.",
    docs_url="/docs" if settings.ENABLE_DOCS else None,
    redoc_url=None,
    openapi_url="/openapi.json" if settings.ENABLE_DOCS else None,
)

# ------------------------------------------------------------
# CORS
# Every response is open to any origin. Preflight requests are answered
# here and never reach a route.
# ------------------------------------------------------------
@app.middleware("http")
async def cors_middleware(request: Request, call_next):
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)

    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    return response


# ------------------------------------------------------------
# ERROR RESPONSES
# ------------------------------------------------------------
register_exception_handlers(app)

# ------------------------------------------------------------
# REGISTER ROUTERS
# ------------------------------------------------------------
app.include_router(auth_student_router.router)
app.include_router(students_router.router)

# ------------------------------------------------------------
# APPLICATION STARTUP EVENTS
# ------------------------------------------------------------
@app.on_event("startup")
async def on_startup():
    logger.info("Starting Hostel Student Accounts API...")
    logger.info(f"Signup mode: {settings.SIGNUP_MODE}, update mode: {settings.PROFILE_UPDATE_MODE}")

    try:
        await test_connection()
        logger.success("Database connection established.")
    except Exception:
        logger.exception("Database connection failed.")
        return

    if settings.INIT_DB_ON_STARTUP:
        try:
            await init_db()
            logger.success("Database tables ready.")
        except Exception as e:
            logger.warning(f"Table initialization encountered an issue: {e}")

    if settings.SIGNUP_MODE == "roster" and not settings.REDIS_URL:
        logger.warning("SIGNUP_MODE is 'roster' but REDIS_URL is not set; signups will fail.")


@app.on_event("shutdown")
async def on_shutdown():
    roster = await get_roster()
    if roster is not None:
        await roster.close()
    await engine.dispose()
    logger.info("Shutdown complete.")
