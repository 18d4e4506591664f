from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from hostdash.models.container import ContainerSummary


class ServiceHealth(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"
    UNREACHABLE = "unreachable"
    UNKNOWN = "unknown"


class CpuStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    usage: int = Field(
        ...,
        ge=0,
        le=100,
        description="CPU utilisation in percent",
    )
    cores: int = Field(..., ge=1, description="Number of logical CPUs")


class MemoryStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    used: int = Field(..., ge=0, description="Used physical memory in bytes")
    total: int = Field(..., ge=0, description="Total physical memory in bytes")
    available: int = Field(..., ge=0, description="Available physical memory in bytes")
    percent: float = Field(
        ...,
        ge=0,
        le=100,
        description="Used memory in percent, one decimal place",
    )


class DiskStats(BaseModel):
    """Root filesystem usage as display strings, e.g. used='12G', percent='41'."""

    model_config = ConfigDict(frozen=True)

    used: str = Field("0G", description="Used space as a display string")
    total: str = Field("0G", description="Filesystem size as a display string")
    percent: str = Field("0", description="Usage in percent without the '%' suffix")


class Snapshot(BaseModel):
    """
    One sampling pass over all metric sources.

    Every metric field is optional: a sampler that fails leaves its field unset
    and the key is dropped from the JSON payload.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: datetime = Field(..., description="Time the snapshot was assembled (UTC)")
    cpu: Optional[CpuStats] = None
    memory: Optional[MemoryStats] = None
    disk: Optional[DiskStats] = None
    containers: Optional[ContainerSummary] = None
    uptime: Optional[str] = Field(None, description="Uptime phrased like 'up 3 days, 2 hours'")
    load_average: Optional[str] = Field(
        None,
        alias="loadAverage",
        description="1-minute load average with two decimals",
    )
    service_health: ServiceHealth = Field(
        ServiceHealth.UNKNOWN,
        alias="serviceHealth",
        description="Result of the dependent service health probe",
    )
    hostname: Optional[str] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ErrorSnapshot(BaseModel):
    """Returned in place of a Snapshot when assembling it failed as a whole."""

    model_config = ConfigDict(frozen=True)

    error: str
    timestamp: datetime

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")
