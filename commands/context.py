"""Shared CLI state and helpers for running commands against lights.

AppContext is stored on the Click context object. It carries the global
options and wires up the cache, discovery, client, resolver and dispatcher.
Tests pass an AppContext with substitute components via CliRunner's obj=.
"""

import os
from typing import Callable

import click

from core.cache import CacheStore
from core.client import LightClient
from core.config import DEFAULT_DISCOVERY_TIMEOUT, ENV_IP_ADDRESS
from core.discovery import SupportsDiscovery, select_discovery
from core.dispatcher import Dispatcher, DispatchReport, LightCommand, LightResult
from core.errors import DiscoveryError, NoLightFoundError, ResolutionError
from core.resolver import AddressResolver, ResolvedTargets


class AppContext:
    """Global options plus lazily-created components for one invocation."""

    def __init__(self, cache: CacheStore | None = None,
                 discovery: SupportsDiscovery | None = None,
                 client: LightClient | None = None):
        self._cache = cache
        self._discovery = discovery
        self._client = client

        self.ip_addresses: tuple[str, ...] = ()
        self.light: str | None = None
        self.timeout: float = DEFAULT_DISCOVERY_TIMEOUT
        self.discovery_enabled = True

    @property
    def cache(self) -> CacheStore:
        if self._cache is None:
            self._cache = CacheStore()
        return self._cache

    @property
    def discovery(self) -> SupportsDiscovery:
        if self._discovery is None:
            self._discovery = select_discovery(self.discovery_enabled)
        return self._discovery

    @property
    def client(self) -> LightClient:
        if self._client is None:
            self._client = LightClient()
        return self._client

    @property
    def resolver(self) -> AddressResolver:
        return AddressResolver(self.cache, self.discovery, self.timeout)

    @property
    def dispatcher(self) -> Dispatcher:
        return Dispatcher(self.client, self.cache)

    def resolve(self) -> ResolvedTargets:
        return self.resolver.resolve(
            explicit=self.ip_addresses,
            env=os.environ.get(ENV_IP_ADDRESS),
            name_filter=self.light,
            timeout=self.timeout,
        )


pass_app = click.make_pass_decorator(AppContext, ensure=True)


def fail(message: str) -> None:
    """Print an error in red and exit with status 1."""
    click.secho(f"Error: {message[:1].upper()}{message[1:]}", fg='red', err=True)
    click.get_current_context().exit(1)


def resolve_targets(app: AppContext) -> ResolvedTargets:
    """Resolve target lights, turning resolution failures into CLI errors."""
    try:
        return app.resolve()
    except NoLightFoundError:
        fail("No lights found. Make sure your lights are powered on and on this "
             f"network, or pass --ip-address / set {ENV_IP_ADDRESS}.")
    except (ResolutionError, DiscoveryError) as e:
        fail(str(e))
    except ValueError as e:
        fail(f"Invalid address in {ENV_IP_ADDRESS}: {e}")


def run_on_lights(app: AppContext, command: LightCommand,
                  describe: Callable[[LightResult], str]) -> DispatchReport:
    """Resolve targets, run command on each, and print per-light results.

    Exits with status 1 unless at least one light succeeded.
    """
    targets = resolve_targets(app)
    report = app.dispatcher.dispatch(targets, command)

    for result in report.results:
        if result.ok:
            click.echo(f"✓ {describe(result)}")
        else:
            click.secho(f"✗ {result.light.label}: {result.error}", fg='red', err=True)

    if report.cache_invalidated:
        click.secho("Cached lights were unreachable, so the cache was cleared. "
                    "The next run will search the network again.", fg='yellow', err=True)

    if not report.ok:
        if report.all_unreachable:
            fail("All lights unreachable.")
        else:
            fail("All lights failed.")
    return report
