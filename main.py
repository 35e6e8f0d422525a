# FILE: main.py
"""
Site Forge Backend - FastAPI Application
Version: 1.0.0

Features:
- Two-stage website generation (prompt -> requirement doc -> HTML)
- Streaming generation progress over Server-Sent Events
- Switchable LLM providers (Qwen / Qwen3 Coder via DashScope, Doubao, Zhipu)
- Deploy, edit and delete generated sites; deployed sites served at /websites
"""
import logging

from dotenv import load_dotenv

# Load .env FIRST before any other imports that might need env vars
load_dotenv()

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from config.settings import get_settings
from config.providers import PROVIDER_CATALOG, has_credential
from app.dependencies import get_registry
from app.errors import register_error_handlers
from app.generation.router import router as generation_router
from app.providers.router import router as models_router
from app.sites.router import router as sites_router

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Site Forge",
    version="1.0.0",
    description="AI website generator with multi-provider LLM orchestration",
)

# ====== CORS ======

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials="*" not in settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)


# ====== STARTUP ======

@app.on_event("startup")
def on_startup():
    print("[startup] Checking provider credentials...")
    for provider_id, config in PROVIDER_CATALOG.items():
        if has_credential(provider_id):
            print(f"[startup] {config.env_key_name}: [OK] set ({config.display_name})")
        else:
            print(f"[startup] {config.env_key_name}: [X] NOT SET - {config.display_name} unavailable")

    registry = get_registry()
    print(f"[startup] Current provider: {registry.current_id or 'none'}")
    print(f"[startup] Websites directory: {settings.websites_dir}")


# ====== ROUTERS ======

# Model routes first: /api/websites/models/* must win over /api/websites/{path}
app.include_router(models_router)
app.include_router(generation_router)
app.include_router(sites_router)


@app.get("/api/health")
def health():
    return {"status": "OK", "message": "Site Forge backend is running"}


# ====== STATIC SITES ======

settings.websites_dir.mkdir(parents=True, exist_ok=True)
app.mount("/websites", StaticFiles(directory=str(settings.websites_dir), html=True), name="websites")


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=settings.port, reload=False)
