import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from learnify.admin.router import router as admin_router
from learnify.ai.gemini_client import GeminiClient
from learnify.ai.router import router as ai_router
from learnify.auth.router import router as auth_router
from learnify.config import Settings
from learnify.database import Database, connect, create_indexes
from learnify.faculty.router import router as faculty_router
from learnify.research.router import router as research_router
from learnify.seed import ensure_sample_data
from learnify.students.router import router as students_router

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@asynccontextmanager
async def _lifespan(app: FastAPI):
    db = app.state.db
    try:
        await create_indexes(db)
        if app.state.settings.seed_sample_data:
            await ensure_sample_data(db)
        yield
    except Exception as e:
        logger.error("Failed to initialize application: %s", str(e), exc_info=True)
        raise
    finally:
        db.close()


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None,
               gemini: Optional[GeminiClient] = None) -> FastAPI:
    """
    Build the API application

    Anything not passed in is built from the environment, which raises
    ConfigError when MONGODB_URI or JWT_SECRET is missing.
    """
    if settings is None:
        settings = Settings.from_env()

    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT)

    app = FastAPI(title="Learnify API", lifespan=_lifespan)
    app.state.settings = settings
    app.state.db = database if database is not None else connect(settings)
    app.state.gemini = gemini if gemini is not None else GeminiClient(settings.gemini_model)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        logger.debug("Rejected payload for %s: %s", request.url.path, exc.errors())
        return JSONResponse(status_code=400, content={"error": "invalid payload"})

    # ==================== ROUTER REGISTRATION ====================
    app.include_router(auth_router, prefix="/api")
    app.include_router(students_router, prefix="/api")
    app.include_router(faculty_router, prefix="/api")
    app.include_router(research_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")
    app.include_router(ai_router, prefix="/api")
    # ============================================================

    @app.get("/api/health")
    async def health():
        return {"status": "ok"}

    return app


if __name__ == "__main__":
    env = Settings.from_env()
    uvicorn.run("learnify.main:create_app", factory=True, host="0.0.0.0", port=env.port)
