from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from hostdash.models.container import ErrorResponse, RestartRequest, RestartResponse
from hostdash.services import container_control
from hostdash.services.docker_runtime import DockerRuntime, get_runtime
from hostdash.services.errors import ContainerRuntimeError, UnauthorizedError

router = APIRouter()


async def _read_token(request: Request) -> Any:
    """Token from the JSON body; a missing or unparsable body yields None."""
    try:
        payload = RestartRequest.model_validate_json(await request.body())
    except ValidationError:
        return None
    return payload.token


@router.post(
    "/container/{name}/restart",
    response_model=RestartResponse,
    responses={401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    openapi_extra={
        "requestBody": {
            "content": {"application/json": {"schema": RestartRequest.model_json_schema()}},
        }
    },
    summary="Restart a container",
)
async def restart_container(
    name: str,
    request: Request,
    runtime: DockerRuntime = Depends(get_runtime),
):
    """
    Restart the named container if the request carries the RESTART_TOKEN.

    A wrong, missing or malformed token answers 401 {"error": "Unauthorized"};
    a failure reported by the Docker engine answers 500 with the engine's
    message.
    """
    token = await _read_token(request)
    try:
        return await container_control.restart_container(name, token, runtime)
    except UnauthorizedError:
        return JSONResponse(status_code=401, content={"error": "Unauthorized"})
    except ContainerRuntimeError as exc:
        return JSONResponse(status_code=500, content={"error": str(exc)})
