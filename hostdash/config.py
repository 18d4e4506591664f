from typing import List, Optional
from pydantic import BaseModel, Field
import os
from functools import lru_cache

DEFAULT_HEALTH_CHECK_URLS = [
    "http://coolify:8000/api/health",
    "http://localhost:8000/api/health",
]


def _split_list(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


class Settings(BaseModel):
    # Server
    host: str = Field(default="0.0.0.0", description="Bind address of the API server")
    port: int = Field(default=3000, ge=1, le=65535, description="Listening port")
    log_level: str = Field(default="info", description="Root log level, e.g. info or debug")

    # Restart command
    restart_token: Optional[str] = Field(
        default=None,
        description="Shared secret required by the container restart endpoint",
    )

    # Dependent service health probe, tried in order
    health_check_urls: List[str] = Field(
        default_factory=lambda: list(DEFAULT_HEALTH_CHECK_URLS),
        description="Health endpoints of the dependent service, primary first",
    )
    health_check_timeout: float = Field(
        default=1.0,
        gt=0,
        description="Overall time limit in seconds for probing all health addresses",
    )

    # Samplers
    cpu_sample_seconds: float = Field(
        default=1.0,
        ge=0,
        description="Length of the CPU counter sampling window in seconds",
    )
    disk_path: str = Field(default="/", description="Mount point reported by the disk sampler")
    docker_host: str = Field(
        default="unix:///var/run/docker.sock",
        description="Docker engine endpoint",
    )

    @classmethod
    def from_env(cls) -> "Settings":
        # HEALTH_CHECK_URL (single) is accepted as a fallback for HEALTH_CHECK_URLS
        raw_health = os.getenv("HEALTH_CHECK_URLS") or os.getenv("HEALTH_CHECK_URL", "")
        health_check_urls = _split_list(raw_health) or list(DEFAULT_HEALTH_CHECK_URLS)

        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=int(os.getenv("PORT", "3000")),
            log_level=os.getenv("LOG_LEVEL", "info").lower(),
            restart_token=os.getenv("RESTART_TOKEN") or None,
            health_check_urls=health_check_urls,
            health_check_timeout=float(os.getenv("HEALTH_CHECK_TIMEOUT", "1.0")),
            cpu_sample_seconds=float(os.getenv("CPU_SAMPLE_SECONDS", "1.0")),
            disk_path=os.getenv("DISK_PATH", "/"),
            docker_host=os.getenv("DOCKER_HOST", "unix:///var/run/docker.sock"),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
