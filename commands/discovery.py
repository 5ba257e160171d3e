"""Discovery command: search the network and refresh the cache."""

import click

from core.errors import DiscoveryError
from commands.context import AppContext, fail, pass_app


@click.command(name='discover')
@pass_app
def discover_command(app: AppContext):
    """Search the network for lights and cache the result.

    Ignores the current cache. Lights found are saved so later commands
    can skip the search.

    \b
    Examples:
      elgato-light discover
      elgato-light --timeout 3 discover
    """
    click.echo(f"Searching for Elgato lights ({app.timeout:g}s)...")

    resolver = app.resolver
    try:
        result = resolver.rediscover(app.timeout, replace=True)
    except DiscoveryError as e:
        fail(str(e))
        return

    if not result:
        fail("No lights found. The light cache is now empty.")
        return

    click.secho(f"\nFound {len(result)} light{'s' if len(result) != 1 else ''}:", fg='cyan', bold=True)
    for light in result:
        name = light.name or 'Unknown'
        click.echo(f"  {click.style(name, fg='green')}  {light.address}:{light.port}")
    if resolver.cache_error:
        click.secho(f"\nCould not save cache to {app.cache.path}: {resolver.cache_error}",
                    fg='yellow', err=True)
    else:
        click.echo(f"\nCache saved to {app.cache.path}")
