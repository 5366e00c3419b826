"""
FastAPI app entry point aggregating per-domain routers under crm_backend/routes.
Keep as `uvicorn crm_backend.api:app`.
"""
from __future__ import annotations


from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .db import ensure_schema
from .logs import ensure_log_schema, LogContext
from .routes.base import APP_NAME, APP_VERSION
from .services.config_svc import ensure_default_config, get_config
from .services.seed_svc import load_sample_data


app = FastAPI(title=APP_NAME, version=APP_VERSION)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5173",
        "http://127.0.0.1:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def on_startup():
    ensure_schema()
    ensure_log_schema()
    ensure_default_config()
    if not get_config()["seed_sample_data"]:
        return
    log = LogContext("STARTUP_SEED", user="system")
    try:
        load_sample_data(log=log)
        log.write("OK")
    except Exception as e:
        log.write("ERROR", f"load_sample_data_failed: {e}")


# Include routers (split by business domain)
from .routes import base as base_routes
from .routes import customers as customers_routes
from .routes import addresses as addresses_routes
from .routes import settings as settings_routes
from .routes import logs as logs_routes

app.include_router(base_routes.router)
app.include_router(customers_routes.router)
app.include_router(addresses_routes.router)
app.include_router(settings_routes.router)
app.include_router(logs_routes.router)
