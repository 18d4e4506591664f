import abc
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class SampleResult(Generic[T]):
    """Outcome of one sampler run: either a value or an error message."""

    field: str
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None


class Sampler(abc.ABC, Generic[T]):
    """
    One metric source feeding one snapshot field.

    Subclasses implement collect(); sample() wraps it so that a failing source
    turns into a tagged SampleResult instead of an exception. The aggregator
    only ever calls sample().
    """

    #: Snapshot field the value is assigned to
    field: str = ""

    @abc.abstractmethod
    async def collect(self) -> T:
        """Query the source and return the normalised value."""

    async def sample(self) -> SampleResult[T]:
        try:
            value = await self.collect()
        except Exception as exc:
            logger.warning("Sampler %s failed: %s", self.field, exc)
            return SampleResult(field=self.field, error=str(exc) or type(exc).__name__)
        return SampleResult(field=self.field, value=value)


Strategy = Callable[[], Awaitable[Any]]


async def first_successful(strategies: Sequence[Strategy], label: str) -> Any:
    """
    Run strategies in order and return the first result.

    Each failure is logged at DEBUG; if all of them fail the last error is
    re-raised so the calling sampler can decide what to do with it.
    """
    errors: List[Exception] = []
    for strategy in strategies:
        try:
            return await strategy()
        except Exception as exc:
            logger.debug("%s strategy %s failed: %s", label, getattr(strategy, "__name__", strategy), exc)
            errors.append(exc)

    if errors:
        raise errors[-1]
    raise RuntimeError(f"no strategies configured for {label}")
