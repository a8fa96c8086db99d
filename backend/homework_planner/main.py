"""FastAPI application entry point."""
from __future__ import annotations
import os

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from homework_planner.core import config
from homework_planner.core.logging_config import configure_logging
from homework_planner.persistence.db import init_db
from homework_planner.api import assignments, auth, reports, templates
from homework_planner.api.errors import ApiError, api_error_handler, request_validation_handler

configure_logging()

# ------------------------------------------------------------------
# App creation
# ------------------------------------------------------------------
app = FastAPI(
    title="Homework Planner API",
    description="Homework assignments for teachers and students",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_exception_handler(ApiError, api_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_handler)


# ------------------------------------------------------------------
# Startup: initialise DB schema
# ------------------------------------------------------------------
@app.on_event("startup")
def on_startup():
    init_db()
    os.makedirs(config.UPLOADS_DIR, exist_ok=True)


# ------------------------------------------------------------------
# Routers
# ------------------------------------------------------------------
app.include_router(auth.router)
app.include_router(assignments.router)
app.include_router(templates.router)
app.include_router(reports.router)

# ------------------------------------------------------------------
# Serve uploaded attachments
# ------------------------------------------------------------------
os.makedirs(config.UPLOADS_DIR, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=config.UPLOADS_DIR), name="uploads")
