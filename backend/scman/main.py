from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager, suppress
import asyncio
import logging
import uvicorn
from sqlalchemy import text

# Import routers
from scman.api.routes import health, auth, invite, admin, events, signatures, notifications
from scman.core.config import settings
from scman.core.logging import setup_logging
from scman.db.bootstrap import ensure_admin
from scman.db.session import SessionLocal, init_db
from scman.services.notifications import notification_center

# Setup logging
setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for startup and shutdown"""
    # Startup
    logger.info("🚀 Starting SCMan...")

    init_db()

    db = SessionLocal()
    try:
        db.execute(text("SELECT 1"))
        ensure_admin(db)
        logger.info("✅ Database connection successful")
    except Exception as e:
        logger.error(f"❌ Database connection failed: {e}")
        raise
    finally:
        db.close()

    purger = asyncio.create_task(notification_center.run_purger())

    yield

    # Shutdown
    purger.cancel()
    with suppress(asyncio.CancelledError):
        await purger
    logger.info("👋 Shutting down...")

# Create FastAPI app
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Club event sign-up and attendance manager",
    version=settings.VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, prefix=settings.API_PREFIX, tags=["Health"])
app.include_router(auth.router, prefix=settings.API_PREFIX, tags=["Auth"])
app.include_router(invite.router, prefix=settings.API_PREFIX, tags=["Invitation"])
app.include_router(admin.router, prefix=settings.API_PREFIX, tags=["Admin"])
app.include_router(events.router, prefix=settings.API_PREFIX, tags=["Events"])
app.include_router(signatures.router, prefix=settings.API_PREFIX, tags=["Signatures"])
app.include_router(notifications.router, prefix=settings.API_PREFIX, tags=["Notifications"])

@app.get("/")
async def root():
    """Root endpoint with API information"""
    return {
        "service": settings.PROJECT_NAME,
        "version": settings.VERSION,
        "status": "operational",
        "docs": "/docs",
        "endpoints": {
            "health": "/api/health",
            "login": "/api/login",
            "events": "/api/all_events",
            "sign": "/api/sign_evt",
            "attendance": "/api/attendance"
        }
    }

def run():
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, reload=False)

if __name__ == "__main__":
    run()
