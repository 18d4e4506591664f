import asyncio
import hmac
import logging
from typing import Any, Optional

from docker.errors import DockerException

from hostdash.config import get_settings
from hostdash.models.container import RestartResponse
from hostdash.services.docker_runtime import DockerRuntime
from hostdash.services.errors import ContainerRuntimeError, UnauthorizedError

logger = logging.getLogger(__name__)


def _runtime_message(exc: Exception) -> str:
    # APIError carries the engine's own message in 'explanation'
    explanation = getattr(exc, "explanation", None)
    return str(explanation or exc) or type(exc).__name__


def is_authorized(token: Any, secret: Optional[str]) -> bool:
    """Constant-time token check; an unset secret or a missing or non-string token never matches."""
    if not secret or not isinstance(token, str) or not token:
        return False
    return hmac.compare_digest(token.encode("utf-8"), secret.encode("utf-8"))


async def restart_container(
    name: str,
    token: Any,
    runtime: DockerRuntime,
) -> RestartResponse:
    """
    Restart a container after checking the shared restart token.

    Raises UnauthorizedError without touching the runtime when the token does
    not match, and ContainerRuntimeError with the engine's message when the
    restart fails. Once issued, the restart is shielded from cancellation of
    the calling request.
    """
    if not is_authorized(token, get_settings().restart_token):
        logger.warning("Rejected restart of container %s: bad token", name)
        raise UnauthorizedError("Unauthorized")

    try:
        await asyncio.shield(asyncio.to_thread(runtime.restart, name))
    except (DockerException, OSError) as exc:
        message = _runtime_message(exc)
        logger.error("Restart of container %s failed: %s", name, message)
        raise ContainerRuntimeError(message) from exc

    return RestartResponse(success=True, message=f"Container {name} restarted")
