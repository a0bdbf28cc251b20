import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.onu import router as onu_router
from app.config import settings
from app.errors import register_error_handlers
from app.logging import configure_logging
from app.observability import ObservabilityMiddleware

app = FastAPI(title="OLT ONU Monitor API")
logger = logging.getLogger(__name__)
configure_logging()

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)
app.add_middleware(ObservabilityMiddleware)
register_error_handlers(app)

app.include_router(onu_router, prefix="/api/v1")


@app.get("/")
def index():
    return {"code": 200, "status": "OK", "data": "OLT ONU Monitor API"}


@app.get("/health")
def health_check():
    return {"status": "ok"}
