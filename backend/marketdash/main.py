import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from marketdash.config import settings
from marketdash.routers import dashboard_router
from marketdash.scheduler import refresh_scheduler

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifespan events."""
    # Startup: first refresh runs immediately, then every interval
    refresh_scheduler.interval_seconds = settings.refresh_interval_seconds
    if settings.refresh_on_startup:
        refresh_scheduler.start()
    yield
    # Shutdown: stop refreshing; a tick still in flight is discarded
    await refresh_scheduler.stop()


app = FastAPI(
    title="Marketing Dashboard Data API",
    description="Periodically refreshed dashboard data from public market APIs with static fallbacks",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(dashboard_router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "status": "ok",
        "message": "Marketing Dashboard Data API",
        "version": "0.1.0"
    }


@app.get("/health")
async def health():
    """Health check endpoint for monitoring."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "marketdash.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True
    )
