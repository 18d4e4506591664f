import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hostdash.api import containers, health, stats
from hostdash.config import get_settings
from hostdash.logging_config import setup_logging

app = FastAPI(title="Host Dashboard")

app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])

app.include_router(health.router, prefix="/health", tags=["health"])
app.include_router(stats.router, prefix="/api", tags=["stats"])
app.include_router(containers.router, prefix="/api", tags=["containers"])


def run() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level)


if __name__ == "__main__":
    run()
