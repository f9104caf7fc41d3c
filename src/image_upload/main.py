"""Image upload service – FastAPI application entry-point."""

import logging

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from starlette.middleware.cors import CORSMiddleware

from src.image_upload.config import UPLOAD_DIR, settings
from src.image_upload.router import health, upload

# Configure logging from settings
logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Static serving needs the directory to exist
UPLOAD_DIR.mkdir(parents=True, exist_ok=True)

# ──────────────────────────────────────────────
# Application factory
# ──────────────────────────────────────────────
app = FastAPI(
    title="Image Upload API",
    description="Store uploaded images and hand back their public URL.",
    version="1.0.0",
)

# ── CORS middleware (configured from environment variables) ──
app.add_middleware(
    middleware_class=CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_methods_list,
    allow_headers=settings.cors_headers_list,
)

logger.info("CORS configured with origins: %s", settings.cors_origins_list)

# ── register routers ──
app.get('/')(lambda: {"message": "Welcome to the Image Upload API! Visit /docs for API documentation."})
app.include_router(health.router)
app.include_router(upload.router)

# ── serve uploaded images statically ──
app.mount(settings.uploads_url_path, StaticFiles(directory=str(UPLOAD_DIR)), name="uploads")
logger.info("Serving uploads from %s at %s", UPLOAD_DIR, settings.uploads_url_path)
