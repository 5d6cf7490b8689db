# barbershop/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import FRONTEND_URL, LOG_LEVEL
from .data import SERVICES, STATUSES, TIME_SLOTS
from .db import create_db_and_tables
from .errors import BookingError
from .notifications import ResendNotifier
from .routers import (
    admin_routes,
    appointments_routes,
    auth_routes,
    chat_routes,
    reviews_routes,
    users_routes,
)

logging.basicConfig(
    level=LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_db_and_tables()
    logger.info("Database ready")
    yield


app = FastAPI(title="Barbershop Booking API", lifespan=lifespan)
app.state.notifier = ResendNotifier()

app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


app.include_router(auth_routes.router)
app.include_router(users_routes.router)
app.include_router(appointments_routes.router)
app.include_router(admin_routes.router)
app.include_router(reviews_routes.router)
app.include_router(chat_routes.router)


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/catalog")
def catalog():
    # options for the booking form
    return {"services": SERVICES, "time_slots": TIME_SLOTS, "statuses": list(STATUSES)}
