# hotel_reservations/main.py

from contextlib import asynccontextmanager
from typing import AsyncIterator

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hotel_reservations.config import ALLOWED_ORIGINS
from hotel_reservations.errors import ReservationError
from hotel_reservations.logging_config import setup_logging
from hotel_reservations.middleware import RequestIDMiddleware
from hotel_reservations.routes.analytics import router as analytics_router
from hotel_reservations.routes.auth import router as auth_router
from hotel_reservations.routes.billing import router as billing_router
from hotel_reservations.routes.change_requests import router as change_requests_router
from hotel_reservations.routes.health import router as health_router
from hotel_reservations.routes.metrics import router as metrics_router
from hotel_reservations.routes.preferences import router as preferences_router
from hotel_reservations.routes.reservations import router as reservations_router
from hotel_reservations.routes.rooms import router as rooms_router

API_PREFIX = "/api/v1"

# Initialize structured logging
setup_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("application_starting")
    yield
    logger.info("application_stopping")


app = FastAPI(
    title="Hotel Reservations API",
    description="Room availability, pricing, bookings and change requests",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if "*" not in ALLOWED_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)


@app.exception_handler(ReservationError)
async def reservation_error_handler(request: Request, exc: ReservationError) -> JSONResponse:
    """Render expected domain failures as {"message", "error"} with their status."""
    logger.info(
        "request_rejected",
        error=exc.code,
        status_code=exc.status_code,
        message=exc.message,
    )
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message, "error": exc.code},
    )


# Register routers
app.include_router(health_router, tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])
app.include_router(rooms_router, prefix=API_PREFIX, tags=["Rooms"])
app.include_router(reservations_router, prefix=API_PREFIX, tags=["Reservations"])
app.include_router(change_requests_router, prefix=API_PREFIX, tags=["Change Requests"])
app.include_router(billing_router, prefix=API_PREFIX, tags=["Billing"])
app.include_router(auth_router, prefix=API_PREFIX, tags=["Auth"])
app.include_router(preferences_router, prefix=API_PREFIX, tags=["Preferences"])
app.include_router(analytics_router, prefix=API_PREFIX, tags=["Analytics"])
