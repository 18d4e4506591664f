import logging
import threading
from functools import lru_cache
from typing import Any, Dict, List, Optional

import docker

from hostdash.config import get_settings

logger = logging.getLogger(__name__)


class DockerRuntime:
    """
    Thin blocking wrapper around the Docker SDK.

    The client is created on first use, so a missing or stopped engine only
    surfaces as a docker.errors.DockerException from the calls below. Callers
    on the event loop run these methods in a worker thread.
    """

    def __init__(self, base_url: str, timeout: int = 10) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self._client: Optional[docker.DockerClient] = None
        self._lock = threading.Lock()

    def client(self) -> docker.DockerClient:
        with self._lock:
            if self._client is None:
                self._client = docker.DockerClient(base_url=self.base_url, timeout=self.timeout)
            return self._client

    def list_containers(self) -> List[Dict[str, Any]]:
        """Raw container listing as returned by GET /containers/json?all=1."""
        return self.client().api.containers(all=True)

    def restart(self, name: str) -> None:
        logger.info("Restarting container %s", name)
        self.client().containers.get(name).restart()


@lru_cache(maxsize=1)
def get_runtime() -> DockerRuntime:
    return DockerRuntime(get_settings().docker_host)
