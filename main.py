# -*- coding: utf-8 -*-
"""
Main FastAPI application for the troop event scheduling and attendance service.
"""

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from troop_events.config import Config
from troop_events.database import engine, Base
from troop_events.exceptions import EventCoreError
from troop_events import models  # registers every table on Base.metadata
from troop_events.routes import (
    attendance_fastapi, dashboard_fastapi, events_fastapi, helpers_fastapi,
    registrations_fastapi, reminders_fastapi,
)

logging.basicConfig(
    level=Config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    filename=Config.LOG_FILE,
)

# The default SQLite file lives in ./database
if engine.dialect.name == "sqlite" and engine.url.database and engine.url.database != ":memory:":
    Path(engine.url.database).parent.mkdir(parents=True, exist_ok=True)

try:
    Base.metadata.create_all(bind=engine)
    logging.info("Tables created")
except Exception as e:
    logging.error(f"Error creating tables: {e}")
    raise

docs_enabled = Config.ENVIRONMENT != "production"

app = FastAPI(
    title="Troop Events API",
    description="Event scheduling, capacity, helper availability, attendance and reminders",
    version="1.0.0",
    docs_url="/docs" if docs_enabled else None,
    redoc_url="/redoc" if docs_enabled else None,
    openapi_url="/openapi.json" if docs_enabled else None,
)

origins = [
    Config.FRONTEND_URL,
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(EventCoreError)
async def event_core_error_handler(request: Request, exc: EventCoreError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# Routers with fixed paths go first so they are not captured by /{event_id}
app.include_router(dashboard_fastapi.router, prefix="/api/v1/events")
app.include_router(reminders_fastapi.router, prefix="/api/v1/events")
app.include_router(helpers_fastapi.router, prefix="/api/v1/events")
app.include_router(registrations_fastapi.router, prefix="/api/v1/events")
app.include_router(attendance_fastapi.router, prefix="/api/v1/events")
app.include_router(events_fastapi.router, prefix="/api/v1/events")


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "Troop Events API",
        "documentation": "/docs",
        "endpoints": [
            {"events": "/api/v1/events"},
            {"statistics": "/api/v1/events/statistics"},
            {"pending_reminders": "/api/v1/events/reminders/pending"},
        ],
    }
