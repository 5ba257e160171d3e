"""Fan a command out to every resolved light.

Each light runs in its own worker thread; one light's failure never stops
the others. Results are reported in target order. If lights that came from
the cache are unreachable, the cache is cleared (once) so the next
invocation re-discovers.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable

from core.errors import LightError, UnreachableError
from models.light import LightIdentity

if TYPE_CHECKING:
    from core.cache import CacheStore
    from core.client import LightClient
    from core.resolver import ResolvedTargets

logger = logging.getLogger(__name__)

MAX_WORKERS = 16

LightCommand = Callable[['LightClient', LightIdentity], Any]


@dataclass(frozen=True)
class LightResult:
    """Outcome of running a command against one light."""
    light: LightIdentity
    value: Any = None
    error: LightError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def unreachable(self) -> bool:
        return isinstance(self.error, UnreachableError)


@dataclass
class DispatchReport:
    results: list[LightResult] = field(default_factory=list)
    cache_invalidated: bool = False

    @property
    def succeeded(self) -> list[LightResult]:
        return [r for r in self.results if r.ok]

    @property
    def failed(self) -> list[LightResult]:
        return [r for r in self.results if not r.ok]

    @property
    def ok(self) -> bool:
        """True if at least one light succeeded."""
        return bool(self.succeeded)

    @property
    def all_unreachable(self) -> bool:
        return bool(self.results) and all(r.unreachable for r in self.results)


class Dispatcher:
    """Runs a command against each target light concurrently."""

    def __init__(self, client: 'LightClient', cache: 'CacheStore'):
        self.client = client
        self.cache = cache

    def _run_one(self, command: LightCommand, light: LightIdentity) -> LightResult:
        try:
            return LightResult(light, value=command(self.client, light))
        except LightError as e:
            logger.debug("%s failed: %s", light.label, e)
            return LightResult(light, error=e)

    def dispatch(self, targets: 'ResolvedTargets', command: LightCommand) -> DispatchReport:
        """Run command(client, light) for every target and collect results."""
        lights = list(targets)
        if not lights:
            return DispatchReport()

        workers = min(len(lights), MAX_WORKERS)
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [pool.submit(self._run_one, command, light) for light in lights]
            results = [future.result() for future in futures]

        report = DispatchReport(results=results)
        if targets.from_cache and any(r.unreachable for r in results):
            self.cache.clear()
            report.cache_invalidated = True
            logger.debug("Cleared cache after unreachable cached light(s)")
        return report
