"""mDNS discovery of Elgato lights.

Lights advertise themselves as '_elg._tcp.local.' services. Discovery is
exposed through the SupportsDiscovery interface with two variants, selected
once at startup by select_discovery():

- ZeroconfDiscovery: browses the local network with python-zeroconf
- ExplicitOnlyDiscovery: auto-discovery is unavailable; callers must
  supply addresses explicitly

Discovery never touches the cache; persisting results is the resolver's job.
"""

import logging
import threading
import time
from typing import Protocol

from zeroconf import IPVersion, ServiceBrowser, ServiceListener, Zeroconf

from core.config import SERVICE_TYPE
from core.errors import DiscoveryError, DiscoveryUnavailableError
from models.light import LIGHT_PORT, DiscoveryResult, LightIdentity

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = (
    "auto-discovery unavailable; provide an address with --ip-address "
    "or the ELGATO_LIGHT_IP environment variable"
)

# Milliseconds to wait for a service's address records once it is seen
SERVICE_INFO_TIMEOUT_MS = 2000


class SupportsDiscovery(Protocol):
    def discover(self, timeout: float) -> DiscoveryResult:
        ...


class LightListener(ServiceListener):
    """Collects Elgato lights as their advertisements are resolved.

    Callbacks arrive on zeroconf's threads, so the result is guarded by a
    lock. Once close() is called, late replies are ignored.
    """

    def __init__(self, service_type: str = SERVICE_TYPE):
        self.service_type = service_type
        self.result = DiscoveryResult()
        self._lock = threading.Lock()
        self._closed = False

    def close(self) -> DiscoveryResult:
        """Stop accepting replies and return what was collected."""
        with self._lock:
            self._closed = True
            return DiscoveryResult(self.result)

    def add_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        with self._lock:
            if self._closed:
                return

        info = zc.get_service_info(type_, name, timeout=SERVICE_INFO_TIMEOUT_MS)
        if info is None:
            logger.debug("No service info for %s", name)
            return

        addresses = info.parsed_addresses(IPVersion.V4Only) or info.parsed_addresses()
        if not addresses:
            logger.debug("No addresses advertised for %s", name)
            return

        light = LightIdentity(
            address=addresses[0],
            port=info.port or LIGHT_PORT,
            name=self.instance_name(name, type_),
        )
        with self._lock:
            if self._closed:
                logger.debug("Ignoring late reply from %s", light.label)
                return
            if self.result.add(light):
                logger.debug("Found %s", light.label)

    def update_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        self.add_service(zc, type_, name)

    def remove_service(self, zc: Zeroconf, type_: str, name: str) -> None:
        pass

    @staticmethod
    def instance_name(name: str, type_: str) -> str:
        """Strip the service type from an mDNS instance name.

        'Elgato Key Light 1A2B._elg._tcp.local.' -> 'Elgato Key Light 1A2B'
        """
        return name.removesuffix(type_).rstrip('.') or name


class ZeroconfDiscovery:
    """Browses the local network for Elgato lights using zeroconf."""

    def __init__(self, service_type: str = SERVICE_TYPE):
        self.service_type = service_type

    def discover(self, timeout: float) -> DiscoveryResult:
        """Collect every light that answers within timeout seconds.

        Returns an empty result if nothing answers (or timeout <= 0).

        Raises:
            DiscoveryUnavailableError: If the mDNS socket cannot be opened
            DiscoveryError: If browsing fails
        """
        if timeout <= 0:
            return DiscoveryResult()

        try:
            zc = Zeroconf()
        except OSError as e:
            raise DiscoveryUnavailableError(f"{UNAVAILABLE_MESSAGE} ({e})") from e

        listener = LightListener(self.service_type)
        try:
            logger.debug("Browsing for %s for %.1fs", self.service_type, timeout)
            browser = ServiceBrowser(zc, self.service_type, listener)
            try:
                time.sleep(timeout)
            finally:
                browser.cancel()
            result = listener.close()
        except OSError as e:
            raise DiscoveryError(f"mDNS discovery failed: {e}") from e
        finally:
            zc.close()

        logger.debug("Discovery finished with %d light(s)", len(result))
        return result


class ExplicitOnlyDiscovery:
    """Discovery variant for environments where mDNS is not available."""

    def discover(self, timeout: float) -> DiscoveryResult:
        raise DiscoveryUnavailableError(UNAVAILABLE_MESSAGE)


def select_discovery(enabled: bool = True) -> SupportsDiscovery:
    """Pick the discovery variant for this process."""
    if enabled:
        return ZeroconfDiscovery()
    logger.debug("Auto-discovery disabled")
    return ExplicitOnlyDiscovery()
