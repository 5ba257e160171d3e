"""Cache management CLI commands.

This module provides CLI commands for clearing and inspecting the
persistent cache of discovered lights.
"""

from datetime import datetime

import click

from commands.context import AppContext, pass_app


@click.command(name='clear-cache')
@pass_app
def clear_cache_command(app: AppContext):
    """Delete the cached list of discovered lights.

    The next command without --ip-address will search the network again.
    """
    if app.cache.clear():
        click.secho(f"✓ Cache cleared ({app.cache.path})", fg='green')
    else:
        click.echo("No cache to clear.")


@click.command(name='cache-info')
@pass_app
def cache_info_command(app: AppContext):
    """Show cache status and cached lights."""
    info = app.cache.info()

    click.echo()
    click.secho("=== Cache Information ===", fg='cyan', bold=True)
    click.echo()

    if not info['exists']:
        click.secho("No cache found", fg='red')
        click.echo(f"Cache file: {info['path']}")
        click.echo()
        click.echo("Run 'discover' to create the cache:")
        click.echo("  elgato-light discover")
        click.echo()
        return

    last_updated = info['last_updated']
    if isinstance(last_updated, datetime):
        formatted = last_updated.strftime('%d %b %Y at %H:%M:%S')
        click.echo(f"Last updated: {click.style(formatted, fg='green')}")
    else:
        click.echo(f"Last updated: {click.style('Unknown', fg='yellow')}")

    click.secho(f"\nCached Lights ({info['count']}):", fg='cyan')
    lights = info['lights']
    if lights:
        max_name_len = max(len(light.name or 'Unknown') for light in lights)
        for light in lights:
            name = light.name or 'Unknown'
            click.echo(f"  {name:<{max_name_len}}  {light.address}:{light.port}")

    click.echo(f"\n{click.style('Cache file:', fg='cyan')} {info['path']}\n")
