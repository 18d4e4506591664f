from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ContainerInfo(BaseModel):
    """A running container as shown on the dashboard."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(
        ...,
        description="Container name without the leading '/' the engine reports",
    )
    status: str = Field(
        ...,
        description="Raw status string from the engine, e.g. 'Up 3 hours (healthy)'",
    )
    ports: str = Field(
        "no ports",
        description="Up to two 'published:private' pairs, '...' if there are more",
    )

    @property
    def state(self) -> str:
        """First word of the status string, e.g. 'Up'."""
        parts = self.status.split()
        return parts[0] if parts else ""


class ContainerSummary(BaseModel):
    """Running containers and their count."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    count: int = Field(0, ge=0, description="Number of running containers")
    items: List[ContainerInfo] = Field(
        default_factory=list,
        alias="list",
        description="Running containers in engine order",
    )


class RestartRequest(BaseModel):
    # Any JSON value is accepted; only a string equal to the secret authorizes
    token: Optional[Any] = Field(
        None,
        description="Shared secret configured via RESTART_TOKEN",
    )


class RestartResponse(BaseModel):
    success: bool = Field(True, description="Always true for a completed restart")
    message: str = Field(..., description="Human readable acknowledgement")


class ErrorResponse(BaseModel):
    error: str = Field(..., description="Error message")
