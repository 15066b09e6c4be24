import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api import catalog, dashboard, imports, orders
from .config import configure_logging, get_settings
from .db import Base, engine
from .errors import BackendError, ConfirmationRequired, InvalidInput, NotFound, StagingNotPending
from . import metrics

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Uniform Ops", version="1.0")

# CORS
origins = ["*"] if settings.cors_origins == "*" else [o.strip() for o in settings.cors_origins.split(",")]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(imports.router)
app.include_router(orders.router)
app.include_router(catalog.router)
app.include_router(dashboard.router)
app.include_router(metrics.router)

# DB init (dev convenience); deployments run alembic
Base.metadata.create_all(bind=engine)

@app.exception_handler(NotFound)
def not_found(request: Request, exc: NotFound):
    return JSONResponse({"detail": str(exc)}, status_code=404)

@app.exception_handler(StagingNotPending)
def not_pending(request: Request, exc: StagingNotPending):
    return JSONResponse({"detail": str(exc), "status": exc.status}, status_code=409)

@app.exception_handler(InvalidInput)
def invalid_input(request: Request, exc: InvalidInput):
    code = 400 if isinstance(exc, ConfirmationRequired) else 422
    return JSONResponse({"detail": str(exc)}, status_code=code)

@app.exception_handler(BackendError)
def backend_failed(request: Request, exc: BackendError):
    logger.error("Request %s %s aborted: %s", request.method, request.url.path, exc)
    return JSONResponse({"detail": str(exc), "operation": exc.operation, "table": exc.table}, status_code=502)

@app.get("/health")
def health():
    return {"ok": True}
