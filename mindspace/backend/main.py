# mindspace/backend/main.py
import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import text
from starlette.exceptions import HTTPException as StarletteHTTPException

from mindspace.backend.core.config import settings
from mindspace.backend.core.errors import AppError, Internal, field_error
from mindspace.backend.core.logging_config import setup_logging
from mindspace.db.session import create_all_tables, engine

# 라우터
from mindspace.backend.routers import auth, user, chat, mood
from mindspace.backend.routers import health_llm

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # 스키마 생성은 멱등(create-if-absent). 컬럼 변경은 alembic으로.
    create_all_tables()
    logger.info("tables ready")
    yield


app = FastAPI(
    title="MindSpace Backend",
    version=os.getenv("APP_VERSION", "0.1.0"),
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ──────────────────────────────────────────────────────────────────────────────
# 에러 응답은 항상 {"error": "..."} (+ validation은 details)
# ──────────────────────────────────────────────────────────────────────────────
@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    details = [
        field_error(".".join(str(p) for p in err.get("loc", ())[1:]) or "body", err.get("msg", ""))
        for err in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"error": "Validation failed", "details": details})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError):
    # 내부 에러 내용은 서버 로그에만
    logger.exception("storage failure on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=Internal().to_body())


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content=Internal().to_body())


# 라우터 등록
app.include_router(health_llm.router)
app.include_router(auth.auth_router)
app.include_router(user.user_router)
app.include_router(chat.router)
app.include_router(mood.router)


@app.get("/health")
def health_app():
    return {"ok": True}


@app.get("/health/db")
def health_db():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return {"ok": True}
    except Exception:
        raise HTTPException(status_code=500, detail="Database connection failed")
