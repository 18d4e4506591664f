import asyncio
import logging
from typing import List, Optional

import httpx

from hostdash.models.snapshot import ServiceHealth
from hostdash.services.base import Sampler

logger = logging.getLogger(__name__)

HEALTHY_MARKER = "OK"


class ServiceHealthSampler(Sampler[ServiceHealth]):
    """
    Probe the dependent service's health endpoint.

    Addresses are tried in order; the first one that answers decides between
    healthy (body 'OK') and unhealthy. Only when none answers within the
    timeout is the service unreachable.
    """

    field = "service_health"

    def __init__(
        self,
        urls: List[str],
        timeout: float = 1.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.urls = urls
        self.timeout = timeout
        self.transport = transport

    async def collect(self) -> ServiceHealth:
        if not self.urls:
            return ServiceHealth.UNKNOWN

        # One deadline covers every address and every connect/read phase
        try:
            return await asyncio.wait_for(self._probe(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Health endpoint did not answer within %.1fs on %s",
                self.timeout,
                ", ".join(self.urls),
            )
            return ServiceHealth.UNREACHABLE

    async def _probe(self) -> ServiceHealth:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            for url in self.urls:
                try:
                    response = await client.get(url)
                except httpx.TransportError as exc:
                    logger.debug("Health probe %s failed: %s", url, exc)
                    continue

                if response.text.strip() == HEALTHY_MARKER:
                    return ServiceHealth.HEALTHY
                logger.info(
                    "Health probe %s answered %s with unexpected body",
                    url,
                    response.status_code,
                )
                return ServiceHealth.UNHEALTHY

        logger.warning("Health endpoint unreachable on %s", ", ".join(self.urls))
        return ServiceHealth.UNREACHABLE
