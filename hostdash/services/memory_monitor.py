import psutil

from hostdash.models.snapshot import MemoryStats
from hostdash.services.base import Sampler


class MemorySampler(Sampler[MemoryStats]):
    field = "memory"

    async def collect(self) -> MemoryStats:
        memory = psutil.virtual_memory()
        used = memory.total - memory.available

        return MemoryStats(
            used=used,
            total=memory.total,
            available=memory.available,
            percent=round(used / memory.total * 100, 1),
        )
