import socket
import time

import psutil

from hostdash.services.base import Sampler, first_successful
from hostdash.services.formatting import format_uptime
from hostdash.services.shell import run_command


class HostnameSampler(Sampler[str]):
    field = "hostname"

    async def collect(self) -> str:
        return socket.gethostname()


class UptimeSampler(Sampler[str]):
    """
    Uptime phrased like `uptime -p`.

    Computed from the boot time reported by psutil; the `uptime -p` binary is
    only asked when that is not available.
    """

    field = "uptime"

    async def from_boot_time(self) -> str:
        return format_uptime(time.time() - psutil.boot_time())

    async def from_uptime_command(self) -> str:
        output = (await run_command(["uptime", "-p"])).strip()
        if not output:
            raise RuntimeError("uptime -p returned no output")
        return output

    async def collect(self) -> str:
        return await first_successful([self.from_boot_time, self.from_uptime_command], "uptime")


class LoadAverageSampler(Sampler[str]):
    field = "load_average"

    async def collect(self) -> str:
        load_1m = psutil.getloadavg()[0]
        return f"{load_1m:.2f}"
