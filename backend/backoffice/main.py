from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlmodel import Session

from backoffice.api.accounts import router as accounts_router
from backoffice.api.developer import router as developer_router
from backoffice.api.inquiries import router as inquiries_router
from backoffice.api.notifications import router as notifications_router
from backoffice.api.projects import router as projects_router
from backoffice.api.relationships import router as relationships_router
from backoffice.api.tasks import router as tasks_router
from backoffice.core.config import settings
from backoffice.core.errors import DomainError, ReferentialIntegrityError
from backoffice.core.logging import configure_logging, get_logger
from backoffice.db.session import engine, init_db
from backoffice.db.store import Store
from backoffice.services.accounts import ensure_super_admin

configure_logging(settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    if settings.db_auto_migrate:
        init_db()
    if settings.bootstrap_admin_email:
        with Session(engine) as session:
            admin = ensure_super_admin(
                Store(session),
                full_name=settings.bootstrap_admin_name,
                email=settings.bootstrap_admin_email,
            )
            logger.info("bootstrap.super_admin account_id=%s", admin.id)
    yield


app = FastAPI(title="Back Office API", version="0.1.0", lifespan=lifespan)

if settings.cors_origin_list:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


@app.exception_handler(ReferentialIntegrityError)
async def integrity_error_handler(request: Request, exc: ReferentialIntegrityError) -> JSONResponse:
    logger.error("storage.integrity path=%s reason=%s detail=%s", request.url.path, exc.reason, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": "Stored data is inconsistent", "reason": exc.reason},
    )


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    logger.info("request.rejected path=%s status=%s reason=%s", request.url.path, exc.status_code, exc.reason)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message, "reason": exc.reason})


@app.get("/health")
def health() -> dict[str, bool]:
    return {"ok": True}


app.include_router(accounts_router)
app.include_router(relationships_router)
app.include_router(projects_router)
app.include_router(tasks_router)
app.include_router(developer_router)
app.include_router(notifications_router)
app.include_router(inquiries_router)
