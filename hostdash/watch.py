"""
Terminal poller for /api/stats.

Polls the stats endpoint on a fixed interval and prints one status line per
poll. After a number of consecutive failed polls auto-refresh stops and the
user is asked to restart the watcher.
"""

import argparse
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

import httpx

from hostdash.logging_config import setup_logging
from hostdash.services.formatting import format_bytes

logger = logging.getLogger(__name__)

DEFAULT_URL = "http://localhost:3000/api/stats"
DEFAULT_INTERVAL_SECONDS = 2.0
DEFAULT_MAX_RETRIES = 3


class RefreshPhase(str, Enum):
    IDLE = "idle"
    POLLING = "polling"
    PAUSED = "paused"
    FAILED = "failed"


@dataclass
class RefreshState:
    """
    Auto-refresh lifecycle of the poller.

    idle -> polling on start(), polling <-> paused on pause()/resume(),
    polling -> failed once max_retries consecutive polls failed. A failed
    poller only leaves that state through reset().
    """

    interval: float = DEFAULT_INTERVAL_SECONDS
    max_retries: int = DEFAULT_MAX_RETRIES
    phase: RefreshPhase = RefreshPhase.IDLE
    retries: int = 0

    @property
    def auto_refresh(self) -> bool:
        return self.phase is RefreshPhase.POLLING

    def start(self) -> None:
        if self.phase in (RefreshPhase.IDLE, RefreshPhase.PAUSED):
            self.phase = RefreshPhase.POLLING

    def pause(self) -> None:
        if self.phase is RefreshPhase.POLLING:
            self.phase = RefreshPhase.PAUSED

    def resume(self) -> bool:
        """Resume polling; True means the caller should refresh right away."""
        if self.phase is RefreshPhase.PAUSED:
            self.phase = RefreshPhase.POLLING
            return True
        return False

    def record_success(self) -> None:
        self.retries = 0

    def record_failure(self) -> None:
        self.retries += 1
        if self.retries >= self.max_retries:
            self.phase = RefreshPhase.FAILED

    def reset(self) -> None:
        self.phase = RefreshPhase.IDLE
        self.retries = 0


def render_stats(data: Dict[str, Any]) -> str:
    """Format a stats payload as a status line followed by one line per container."""
    if "error" in data:
        return f"Error: {data['error']}"

    parts = []
    if data.get("hostname"):
        parts.append(str(data["hostname"]))
    cpu = data.get("cpu")
    if cpu:
        parts.append(f"cpu {float(cpu['usage']):.1f}% ({cpu['cores']} cores)")
    memory = data.get("memory")
    if memory:
        parts.append(
            f"mem {memory['percent']}% "
            f"({format_bytes(memory['used'])} / {format_bytes(memory['total'])})"
        )
    disk = data.get("disk")
    if disk:
        parts.append(f"disk {disk['percent']}% ({disk['used']} / {disk['total']})")
    containers = data.get("containers")
    if containers is not None:
        parts.append(f"{containers['count']} running")
    if data.get("serviceHealth"):
        parts.append(f"service {data['serviceHealth']}")
    if data.get("loadAverage"):
        parts.append(f"load {data['loadAverage']}")
    if data.get("uptime"):
        parts.append(str(data["uptime"]))

    lines = [" | ".join(parts)]
    for container in (containers or {}).get("list", []):
        lines.append(
            f"  {container['name']}  {container['status']}  {container.get('ports') or 'no ports'}"
        )
    return "\n".join(lines)


def fetch_stats(client: httpx.Client, url: str) -> Dict[str, Any]:
    response = client.get(url, headers={"Accept": "application/json"})
    response.raise_for_status()
    return response.json()


def poll_once(
    client: httpx.Client,
    url: str,
    state: RefreshState,
    output: Callable[[str], None] = print,
) -> Optional[Dict[str, Any]]:
    """Fetch and render one snapshot, updating the retry bookkeeping."""
    try:
        data = fetch_stats(client, url)
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Fetch error: %s", exc)
        state.record_failure()
        if state.phase is RefreshPhase.FAILED:
            output("Max retries reached. Restart the watcher.")
        else:
            output("Connection failed")
        return None

    state.record_success()
    output(render_stats(data))
    return data


def watch(
    url: str,
    state: RefreshState,
    client: httpx.Client,
    sleep: Callable[[float], None] = time.sleep,
    max_polls: Optional[int] = None,
    output: Callable[[str], None] = print,
) -> RefreshState:
    """Poll until the state leaves 'polling' or max_polls is reached."""
    state.start()
    polls = 0
    while state.auto_refresh:
        poll_once(client, url, state, output)
        polls += 1
        if max_polls is not None and polls >= max_polls:
            break
        if state.auto_refresh:
            sleep(state.interval)
    return state


def main() -> None:
    parser = argparse.ArgumentParser(description="Poll a host dashboard and print its stats.")
    parser.add_argument("--url", default=DEFAULT_URL, help="Stats endpoint to poll")
    parser.add_argument(
        "--interval",
        type=float,
        default=DEFAULT_INTERVAL_SECONDS,
        help="Seconds between polls (default: %(default)s)",
    )
    parser.add_argument(
        "--max-retries",
        type=int,
        default=DEFAULT_MAX_RETRIES,
        help="Consecutive failures before auto-refresh stops (default: %(default)s)",
    )
    parser.add_argument("--log-level", default="warning")
    args = parser.parse_args()

    setup_logging(args.log_level)
    state = RefreshState(interval=args.interval, max_retries=args.max_retries)
    with httpx.Client(timeout=10) as client:
        try:
            watch(args.url, state, client)
        except KeyboardInterrupt:
            state.pause()


if __name__ == "__main__":
    main()
