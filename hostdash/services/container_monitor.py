import asyncio
import json
import logging
import re
from typing import Any, Dict, List

from hostdash.models.container import ContainerInfo, ContainerSummary
from hostdash.services.base import Sampler, first_successful
from hostdash.services.docker_runtime import DockerRuntime
from hostdash.services.shell import run_command

logger = logging.getLogger(__name__)

NO_PORTS = "no ports"
MAX_LISTED_PORTS = 2

# "0.0.0.0:8080->80/tcp", "[::]:8080->80/tcp", ":::8080->80/tcp" or "443/tcp"
_PORT_PATTERN = re.compile(
    r"^(?:(?P<ip>.*):(?P<public>\d+)(?:-\d+)?->)?(?P<private>\d+)(?:-\d+)?/(?P<type>\w+)$"
)


def summarize_ports(ports: List[Dict[str, Any]]) -> str:
    """
    Render the first two port mappings as 'published:private'.

    A mapping without a published port shows the private port on both sides.
    More than two mappings get a trailing '...'.
    """
    if not ports:
        return NO_PORTS

    pairs = []
    for port in ports[:MAX_LISTED_PORTS]:
        private = port.get("PrivatePort")
        published = port.get("PublicPort") or private
        pairs.append(f"{published}:{private}")

    summary = ", ".join(pairs)
    if len(ports) > MAX_LISTED_PORTS:
        summary += "..."
    return summary


def strip_name(name: str) -> str:
    return name[1:] if name.startswith("/") else name


def to_container_info(raw: Dict[str, Any]) -> ContainerInfo:
    names = raw.get("Names") or []
    name = names[0] if names else str(raw.get("Id", ""))[:12]

    return ContainerInfo(
        name=strip_name(name),
        status=str(raw.get("Status") or ""),
        ports=summarize_ports(raw.get("Ports") or []),
    )


def parse_port_string(ports: str) -> List[Dict[str, Any]]:
    """Turn the `docker ps` Ports column into API-style port dicts."""
    results: List[Dict[str, Any]] = []
    for entry in [e.strip() for e in ports.split(",") if e.strip()]:
        match = _PORT_PATTERN.match(entry)
        if not match:
            logger.debug("Skipping unparsable port entry %r", entry)
            continue

        port: Dict[str, Any] = {
            "PrivatePort": int(match.group("private")),
            "Type": match.group("type"),
        }
        if match.group("public"):
            port["PublicPort"] = int(match.group("public"))
            port["IP"] = match.group("ip").strip("[]")
        results.append(port)
    return results


def parse_docker_ps_output(output: str) -> List[Dict[str, Any]]:
    """
    Parse `docker ps -a --format '{{json .}}'` output, one JSON object per line,
    into the same shape the engine API returns for a container listing.
    """
    containers: List[Dict[str, Any]] = []
    for line in output.splitlines():
        if not line.strip():
            continue
        try:
            row = json.loads(line)
        except ValueError as exc:
            raise RuntimeError(f"Could not parse docker ps output line: {line!r}") from exc

        names = [n.strip() for n in str(row.get("Names", "")).split(",") if n.strip()]
        containers.append(
            {
                "Id": row.get("ID", ""),
                "Names": names,
                "State": row.get("State", ""),
                "Status": row.get("Status", ""),
                "Ports": parse_port_string(str(row.get("Ports", ""))),
            }
        )
    return containers


class ContainerSampler(Sampler[ContainerSummary]):
    """
    Running containers, via the engine API with `docker ps` as fallback.

    An unreachable engine yields an empty summary rather than a failure.
    """

    field = "containers"

    def __init__(self, runtime: DockerRuntime) -> None:
        self.runtime = runtime

    async def from_api(self) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(self.runtime.list_containers)

    async def from_cli(self) -> List[Dict[str, Any]]:
        output = await run_command(["docker", "ps", "-a", "--format", "{{json .}}"])
        return parse_docker_ps_output(output)

    async def collect(self) -> ContainerSummary:
        try:
            listing = await first_successful([self.from_api, self.from_cli], "containers")
        except Exception as exc:
            logger.warning("Docker API error: %s", exc)
            return ContainerSummary(count=0, items=[])

        running = [c for c in listing if c.get("State") == "running"]
        return ContainerSummary(
            count=len(running),
            items=[to_container_info(c) for c in running],
        )
