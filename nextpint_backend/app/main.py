# main.py: backend entrypoint
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nextpint_backend.app.config.manifest import APP_VERSION
from nextpint_backend.app.routers import analytics, backup, beers, profile, prompts, sessions, settings
from nextpint_backend.app.services.data_stores import app_settings
from nextpint_backend.app.utils.logs import get_logger

log = get_logger("main")


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # one launch per process start
    s = app_settings.initialize_settings()
    log.info("NextPint API v%s started (launch #%s)", APP_VERSION, s.get("launch_count"))
    yield


app = FastAPI(title="NextPint API", version=APP_VERSION, lifespan=lifespan)

# --- CORS for Vite dev -------------------------------------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Routers under /api ------------------------------------------------------
for _module in (beers, sessions, profile, settings, prompts, analytics, backup):
    app.include_router(_module.router, prefix="/api")

# --- health ------------------------------------------------------------------
@app.get("/health")
async def health():
    return {"ok": True}

@app.get("/")
async def root():
    return {"ok": True, "version": APP_VERSION}
