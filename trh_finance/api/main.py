"""
FastAPI Main Application

Entry point for the TRH Finance API.
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError as PayloadValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .. import __version__
from ..config import FinanceConfig
from ..exceptions import (
    BackendConfigurationError,
    BackendError,
    InvalidTransitionError,
    RequestNotFoundError,
    RequestValidationError,
    SignatureError,
)
from .routes import (
    audit_router,
    dashboard_router,
    disbursements_router,
    ledger_router,
    requests_router,
    session_router,
)
from .services import get_finance_config, get_store

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting TRH Finance API...")
    yield
    logger.info("Shutting down TRH Finance API...")
    if get_store.cache_info().currsize:
        get_store().close()


app = FastAPI(
    title="TRH Finance API",
    description="Fund requests, disbursements, ledger and audit trail",
    version=__version__,
    lifespan=lifespan,
)

# CORS configuration
cors_origins = os.getenv("CORS_ORIGINS", "http://localhost:3000").split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": {"errors": exc.errors}})


@app.exception_handler(PayloadValidationError)
async def payload_error_handler(request: Request, exc: PayloadValidationError) -> JSONResponse:
    errors = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error["loc"] if part != "body")
        errors.append(f"{field}: {error['msg']}" if field else error["msg"])
    return JSONResponse(status_code=400, content={"detail": {"errors": errors}})


@app.exception_handler(SignatureError)
async def signature_error_handler(request: Request, exc: SignatureError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": {"errors": [str(exc)]}})


@app.exception_handler(RequestNotFoundError)
async def not_found_handler(request: Request, exc: RequestNotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": f"{exc.kind} not found"})


@app.exception_handler(InvalidTransitionError)
async def transition_error_handler(request: Request, exc: InvalidTransitionError) -> JSONResponse:
    return JSONResponse(
        status_code=409,
        content={"detail": str(exc), "status": exc.current},
    )


@app.exception_handler(BackendConfigurationError)
async def backend_config_handler(request: Request, exc: BackendConfigurationError) -> JSONResponse:
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(BackendError)
async def backend_error_handler(request: Request, exc: BackendError) -> JSONResponse:
    return JSONResponse(status_code=502, content={"detail": str(exc)})


# Include routers
app.include_router(session_router, prefix="/api")
app.include_router(requests_router, prefix="/api")
app.include_router(disbursements_router, prefix="/api")
app.include_router(ledger_router, prefix="/api")
app.include_router(audit_router, prefix="/api")
app.include_router(dashboard_router, prefix="/api")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "TRH Finance API",
        "version": __version__,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/api/reference")
async def reference_data(config: FinanceConfig = Depends(get_finance_config)):
    """Form options: departments, ledger categories, payment methods, currency."""
    return {
        "app_name": config.app_name,
        "currency": {"code": config.currency_code, "symbol": config.currency_symbol},
        "departments": config.departments,
        "income_categories": config.income_categories,
        "expense_categories": config.expense_categories,
        "payment_methods": ["BANK_TRANSFER", "POS", "CASH"],
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "trh_finance.api.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("ENVIRONMENT", "development") == "development",
    )
