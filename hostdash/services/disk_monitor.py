import asyncio
import logging

import psutil

from hostdash.models.snapshot import DiskStats
from hostdash.services.base import Sampler, first_successful
from hostdash.services.formatting import format_bytes
from hostdash.services.shell import run_command

logger = logging.getLogger(__name__)


def _strip_percent(value: str) -> str:
    return value.strip().rstrip("%")


def parse_df_output(output: str) -> DiskStats:
    """
    Parse `df -h <path>` output.

    Example last line:
      overlay  58G  24G  32G  43% /
    Columns are Filesystem, Size, Used, Avail, Use%, Mounted on.
    """
    lines = [line for line in output.splitlines() if line.strip()]
    if len(lines) < 2:
        raise RuntimeError("Could not parse df output: no data line")

    parts = lines[-1].split()
    if len(parts) < 5:
        raise RuntimeError(f"Could not parse df output line: {lines[-1]!r}")

    # Long device names wrap onto their own line with some df versions
    total, used, percent = parts[-5], parts[-4], parts[-2]
    if not percent.endswith("%"):
        raise RuntimeError(f"Unexpected Use% column in df output: {percent!r}")

    return DiskStats(used=used, total=total, percent=_strip_percent(percent))


class DiskSampler(Sampler[DiskStats]):
    """
    Filesystem usage for one mount point.

    Never reports a failure: if neither psutil nor df can tell, zero-valued
    placeholders are returned.
    """

    field = "disk"

    def __init__(self, path: str = "/") -> None:
        self.path = path

    async def from_psutil(self) -> DiskStats:
        usage = await asyncio.to_thread(psutil.disk_usage, self.path)
        return DiskStats(
            used=format_bytes(usage.used),
            total=format_bytes(usage.total),
            percent=f"{usage.percent:g}",
        )

    async def from_df(self) -> DiskStats:
        output = await run_command(["df", "-h", self.path])
        return parse_df_output(output)

    async def collect(self) -> DiskStats:
        try:
            return await first_successful([self.from_psutil, self.from_df], "disk")
        except Exception as exc:
            logger.warning("Disk check failed for %s: %s", self.path, exc)
            return DiskStats(used="0G", total="0G", percent="0")
