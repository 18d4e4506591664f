import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, Union

from hostdash.config import Settings, get_settings
from hostdash.models.snapshot import ErrorSnapshot, Snapshot
from hostdash.services.base import Sampler
from hostdash.services.container_monitor import ContainerSampler
from hostdash.services.cpu_monitor import CpuSampler
from hostdash.services.disk_monitor import DiskSampler
from hostdash.services.docker_runtime import get_runtime
from hostdash.services.health_monitor import ServiceHealthSampler
from hostdash.services.host_monitor import HostnameSampler, LoadAverageSampler, UptimeSampler
from hostdash.services.memory_monitor import MemorySampler

logger = logging.getLogger(__name__)


def build_samplers(settings: Settings) -> List[Sampler]:
    """Instantiate one sampler per snapshot field from the current settings."""
    return [
        CpuSampler(window_seconds=settings.cpu_sample_seconds),
        MemorySampler(),
        DiskSampler(path=settings.disk_path),
        ContainerSampler(runtime=get_runtime()),
        UptimeSampler(),
        LoadAverageSampler(),
        ServiceHealthSampler(
            urls=settings.health_check_urls,
            timeout=settings.health_check_timeout,
        ),
        HostnameSampler(),
    ]


async def assemble_snapshot(samplers: Sequence[Sampler]) -> Snapshot:
    """
    Run all samplers concurrently and merge their results.

    A failed sampler leaves its field unset; it never affects the others.
    """
    results = await asyncio.gather(*(sampler.sample() for sampler in samplers))

    fields: Dict[str, Any] = {}
    for result in results:
        if result.ok:
            fields[result.field] = result.value

    return Snapshot(timestamp=datetime.now(timezone.utc), **fields)


async def collect_snapshot(
    samplers: Optional[Sequence[Sampler]] = None,
) -> Union[Snapshot, ErrorSnapshot]:
    """
    Collect a fresh snapshot of all host metrics.

    Never raises: anything that escapes the samplers' own error handling is
    reported as an ErrorSnapshot carrying the message and the current time.
    """
    try:
        if samplers is None:
            samplers = build_samplers(get_settings())
        return await assemble_snapshot(samplers)
    except Exception as exc:
        logger.exception("Stats error")
        return ErrorSnapshot(
            error=str(exc) or type(exc).__name__,
            timestamp=datetime.now(timezone.utc),
        )
