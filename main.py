# FILE: main.py
"""
Fixit Backend - FastAPI Application
Version: 0.1.0

Turns natural-language store maintenance requests ("clear the cache",
"activate wordfence") into calls against connected WordPress and Shopify
stores.

Features:
- Safety gate in front of every request
- Intent parsing and capability generation via the OpenAI API
- Capability registry with usage statistics
- Append-only audit log of every dispatch attempt
- Store connection management with connectivity tests
"""
import logging
import os

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load .env FIRST before any other imports that might need env vars
load_dotenv()

from fixit import __version__
from fixit.audit.router import router as audit_router
from fixit.config import load_settings
from fixit.connections.router import router as connections_router
from fixit.db import Database
from fixit.dispatch.dispatcher import build_dispatcher
from fixit.dispatch.router import router as actions_router
from fixit.llm.generation import is_generation_available

settings = load_settings()

logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Fixit",
    version=__version__,
    description="Natural-language maintenance actions for WordPress and Shopify stores",
)

# ====== CORS ======

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:8000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:8000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ====== LIFECYCLE ======

@app.on_event("startup")
def on_startup():
    current = load_settings()

    database = Database(current.database_url).open()
    app.state.database = database
    app.state.dispatcher = build_dispatcher(database, current)
    app.state.audit_log = app.state.dispatcher.audit_log
    print(f"[startup] Database: [OK] {current.database_url}")

    print("[startup] Checking environment variables...")
    if is_generation_available(current):
        print(f"[startup] OPENAI_API_KEY: [OK] set (model {current.generation_model})")
    else:
        print("[startup] OPENAI_API_KEY: [X] NOT SET - intent parsing and capability generation will fail")

    if os.path.exists(current.safety_policy_path):
        print(f"[startup] Safety policy: [OK] {current.safety_policy_path}")
    else:
        print(f"[startup] Safety policy: [X] {current.safety_policy_path} missing - using built-in defaults")


@app.on_event("shutdown")
def on_shutdown():
    database = getattr(app.state, "database", None)
    if database is not None:
        database.close()


# ====== ROUTERS ======

app.include_router(connections_router)
app.include_router(actions_router)
app.include_router(audit_router)


@app.get("/health")
def health():
    """Health check."""
    database = getattr(app.state, "database", None)
    return {
        "status": "ok",
        "version": __version__,
        "database": bool(database and database.is_open),
        "generation_available": is_generation_available(),
    }
