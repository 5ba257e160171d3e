"""Address resolution: decide which lights a command targets.

Sources are tried in precedence order and the first non-empty one wins:

1. Explicit addresses (--ip-address / -i)
2. The ELGATO_LIGHT_IP environment variable
3. The discovery cache
4. A fresh mDNS discovery, saved to the cache

A --light name filter is then applied to named (cached or discovered)
lights. Explicit and environment addresses have no names and are used as-is.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, Iterator

from core.config import DEFAULT_DISCOVERY_TIMEOUT
from core.errors import NoLightFoundError, NoLightMatchedError
from models.light import DiscoveryResult, LightIdentity
from models.utils import filter_by_name, find_similar_strings, parse_address_list

if TYPE_CHECKING:
    from core.cache import CacheStore
    from core.discovery import SupportsDiscovery

logger = logging.getLogger(__name__)


class TargetSource(str, Enum):
    EXPLICIT = 'explicit'
    ENVIRONMENT = 'environment'
    CACHE = 'cache'
    DISCOVERY = 'discovery'


@dataclass(frozen=True)
class ResolvedTargets:
    """The lights one invocation acts on, and where they came from."""
    lights: tuple[LightIdentity, ...]
    source: TargetSource

    @property
    def from_cache(self) -> bool:
        return self.source is TargetSource.CACHE

    def __iter__(self) -> Iterator[LightIdentity]:
        return iter(self.lights)

    def __len__(self) -> int:
        return len(self.lights)


class AddressResolver:
    """Merges explicit addresses, the cache and live discovery."""

    def __init__(self, cache: 'CacheStore', discovery: 'SupportsDiscovery',
                 timeout: float = DEFAULT_DISCOVERY_TIMEOUT):
        self.cache = cache
        self.discovery = discovery
        self.timeout = timeout
        self.cache_error: OSError | None = None

    def resolve(self,
                explicit: str | Iterable[str] | None = None,
                env: str | Iterable[str] | None = None,
                name_filter: str | None = None,
                timeout: float | None = None) -> ResolvedTargets:
        """Resolve the target lights for one invocation.

        Args:
            explicit: Addresses from --ip-address (each may be comma-separated)
            env: Value of ELGATO_LIGHT_IP (comma-separated)
            name_filter: Case-insensitive substring of a light name
            timeout: Discovery timeout in seconds (defaults to self.timeout)

        Raises:
            NoLightFoundError: If no source produced any light
            NoLightMatchedError: If name_filter matched none of the named lights
            DiscoveryError: If discovery was needed and failed
        """
        timeout = self.timeout if timeout is None else timeout

        lights = parse_address_list(explicit)
        if lights:
            return self._unnamed(lights, TargetSource.EXPLICIT, name_filter)

        lights = parse_address_list(env)
        if lights:
            return self._unnamed(lights, TargetSource.ENVIRONMENT, name_filter)

        source = TargetSource.CACHE
        result = self.cache.load()
        if result:
            logger.debug("Using %d cached light(s)", len(result))
        else:
            source = TargetSource.DISCOVERY
            result = self.rediscover(timeout)

        if not result:
            raise NoLightFoundError()

        if name_filter:
            matched = filter_by_name(result, name_filter)
            if not matched:
                suggestions = find_similar_strings(name_filter, result.names(), limit=3)
                raise NoLightMatchedError(name_filter, suggestions)
            return ResolvedTargets(tuple(matched), source)

        return ResolvedTargets(tuple(result), source)

    def rediscover(self, timeout: float | None = None, replace: bool = False) -> DiscoveryResult:
        """Run discovery now and cache a non-empty result.

        An OSError while writing the cache is logged and stored in
        cache_error; the discovered lights are still returned.

        Args:
            timeout: Discovery timeout in seconds (defaults to self.timeout)
            replace: Clear the cache when nothing is found (discover command)
        """
        timeout = self.timeout if timeout is None else timeout
        self.cache_error = None
        result = self.discovery.discover(timeout)
        try:
            if result:
                self.cache.save(result)
            elif replace:
                if self.cache.clear():
                    logger.debug("Discovery found no lights; cleared stale cache")
            else:
                logger.debug("Discovery found no lights; cache left unchanged")
        except OSError as e:
            self.cache_error = e
            logger.warning("Could not update light cache %s: %s", self.cache.path, e)
        return result

    def _unnamed(self, lights: list[LightIdentity], source: TargetSource,
                 name_filter: str | None) -> ResolvedTargets:
        if name_filter:
            logger.debug("Ignoring --light %r for %s addresses", name_filter, source.value)
        return ResolvedTargets(tuple(lights), source)
