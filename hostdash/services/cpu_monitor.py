import asyncio
import logging
from typing import Tuple

import psutil

from hostdash.models.snapshot import CpuStats
from hostdash.services.base import Sampler

logger = logging.getLogger(__name__)


def _clamp_percent(value: float) -> int:
    return int(max(0, min(100, value)))


def _core_count() -> int:
    return psutil.cpu_count() or 1


def _read_cpu_counters() -> Tuple[float, float]:
    """Return (idle, total) seconds summed over all cores."""
    idle = 0.0
    total = 0.0
    for times in psutil.cpu_times(percpu=True):
        idle += times.idle
        # guest time is already counted in user / nice on Linux
        total += sum(times) - getattr(times, "guest", 0.0) - getattr(times, "guest_nice", 0.0)
    return idle, total


class CpuSampler(Sampler[CpuStats]):
    """
    CPU utilisation from two counter reads one sampling window apart.

    If the counters cannot be read, or did not move during the window, the
    1-minute load average relative to the core count is used instead.
    """

    field = "cpu"

    def __init__(self, window_seconds: float = 1.0) -> None:
        self.window_seconds = window_seconds

    async def windowed_usage(self) -> int:
        idle_start, total_start = _read_cpu_counters()
        await asyncio.sleep(self.window_seconds)
        idle_end, total_end = _read_cpu_counters()

        total_diff = total_end - total_start
        if total_diff <= 0:
            raise RuntimeError("CPU counters did not advance during the sampling window")

        idle_diff = idle_end - idle_start
        return _clamp_percent(100 - round(100 * idle_diff / total_diff))

    def load_based_usage(self) -> int:
        load_1m = psutil.getloadavg()[0]
        return _clamp_percent(round(load_1m / _core_count() * 100))

    async def collect(self) -> CpuStats:
        try:
            usage = await self.windowed_usage()
        except Exception as exc:
            logger.info("Windowed CPU sampling failed (%s), using load average", exc)
            usage = self.load_based_usage()

        return CpuStats(usage=usage, cores=_core_count())
