import logging
import os

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from .config import settings
from .database import create_tables
from .errors import register_exception_handlers
from .logging_config import setup_logging
from .auth.router import router as auth_router
from .users.router import router as users_router
from .groups.router import router as groups_router
from .posts.router import router as posts_router
from .comments.router import router as comments_router

setup_logging()
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    debug=settings.DEBUG,
    description="Groups, posts and comments with per-group admins, mods and bans"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# /users/current and friends must match before /users/{user_id}
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(groups_router)
app.include_router(posts_router)
app.include_router(comments_router)

# Uploaded post images and avatars
app.mount(settings.MEDIA_URL, StaticFiles(directory=settings.MEDIA_ROOT, check_dir=False), name="media")

@app.get("/")
async def welcome():
    return {
        "message": f"Welcome to {settings.APP_NAME}!",
        "status": "running",
        "quick_links": {
            "api_docs": "/docs",
            "groups": "/groups",
        },
    }

@app.get("/health")
async def health_check():
    return {"message": "healthy", "app": settings.APP_NAME}

@app.on_event("startup")
async def startup_event():
    """Create tables and the media directory on startup"""
    create_tables()
    os.makedirs(settings.MEDIA_ROOT, exist_ok=True)
    logger.info("%s is ready (docs at /docs)", settings.APP_NAME)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "forum.main:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.DEBUG
    )
