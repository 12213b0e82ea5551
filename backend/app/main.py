# backend/app/main.py
from __future__ import annotations

import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.db import healthcheck
from app.errors import AppError
from app.routers.action_types import router as action_types_router
from app.routers.mission_categories import router as mission_categories_router
from app.routers.mission_folders import router as mission_folders_router
from app.routers.missions import router as missions_router
from app.routers.my_missions import router as my_missions_router
from app.routers.review import router as review_router
from app.routers.sub_missions import router as sub_missions_router
from app.routers.user_missions import router as user_missions_router

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _register_error_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error(request: Request, exc: AppError):
        if exc.status_code >= 500:
            logger.error(f"[api] {request.method} {request.url.path}: {exc.message}")
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "field": exc.field},
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        errors = []
        for err in exc.errors():
            loc = [str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path", "header")]
            errors.append({"field": ".".join(loc) or None, "message": err.get("msg", "Invalid value")})
        return JSONResponse(status_code=400, content={"detail": errors})

    @app.exception_handler(SQLAlchemyError)
    async def database_error(request: Request, exc: SQLAlchemyError):
        logger.exception(f"[api] database error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"detail": "Internal server error", "field": None})


def build_app() -> FastAPI:
    _configure_logging()
    app = FastAPI(title="Mission Admin API")

    # CORS: the admin frontend plus any local dev server
    frontend_origin = os.getenv("FRONTEND_ORIGIN", "http://localhost:5173")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[frontend_origin],
        allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1|0\.0\.0\.0)(:\d+)?$",
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    _register_error_handlers(app)

    # Health
    @app.get("/health")
    def health():
        return {"ok": True, **healthcheck()}

    # Admin content
    app.include_router(missions_router)
    app.include_router(mission_folders_router)
    app.include_router(mission_categories_router)
    app.include_router(sub_missions_router)
    app.include_router(action_types_router)

    # Review
    app.include_router(review_router)

    # Members
    app.include_router(user_missions_router)
    app.include_router(my_missions_router)

    return app


app = build_app()
