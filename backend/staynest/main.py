import logging
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from staynest.core.config import get_settings
from staynest.core.errors import register_error_handlers
from staynest.db.base import Base
from staynest.db.session import engine
from staynest.api.routers import (
    admin as admin_router,
    auth as auth_router,
    bookings as bookings_router,
    images as images_router,
    listings as listings_router,
    reviews as reviews_router,
    session as session_router,
    users as users_router,
)

settings = get_settings()

logging.getLogger("uvicorn.error").setLevel(settings.LOG_LEVEL)

app = FastAPI(title=settings.PROJECT_NAME)

# ---------------------------
# CORS
# ---------------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.BACKEND_CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# ---------------------------
# Static files
# ---------------------------
for static_dir in (settings.STATIC_DIR, settings.STATIC_UPLOAD_DIR):
    Path(static_dir).mkdir(parents=True, exist_ok=True)
app.mount("/static", StaticFiles(directory=settings.STATIC_DIR), name="static")

# ---------------------------
# Startup
# ---------------------------
@app.on_event("startup")
async def on_startup():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

# ---------------------------
# Routers
# ---------------------------
app.include_router(auth_router.router, prefix="/api/auth", tags=["auth"])
app.include_router(session_router.router, prefix="/api", tags=["auth"])
app.include_router(users_router.router, prefix="/api/users", tags=["users"])
app.include_router(listings_router.router, prefix="/api/listings", tags=["listings"])
app.include_router(bookings_router.router, prefix="/api/bookings", tags=["bookings"])
app.include_router(reviews_router.router, prefix="/api/reviews", tags=["reviews"])
app.include_router(images_router.router, prefix="/api/images", tags=["images"])
app.include_router(admin_router.router, prefix="/api/admin", tags=["admin"])

# ---------------------------
# Health check
# ---------------------------
@app.get("/ping")
async def ping():
    return {"status": "ok"}

# ---------------------------
# Run
# ---------------------------
if __name__ == "__main__":
    uvicorn.run("staynest.main:app", host="0.0.0.0", port=8000, reload=True)
