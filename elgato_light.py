#!/usr/bin/env python3
"""
Elgato Light Control CLI
Control Elgato Key Light, Key Light Air and Ring Light over the local network.
"""

import logging

import click

from core.config import (
    DEFAULT_DISCOVERY_TIMEOUT,
    ENV_DISCOVERY,
    ENV_IP_ADDRESS,
    ENV_TIMEOUT,
    discovery_enabled
)
from models.utils import parse_address_list

from commands.group import ColouredGroup
from commands.context import AppContext
from commands.control import (
    on_command,
    off_command,
    brightness_command,
    temperature_command,
    status_command
)
from commands.discovery import discover_command
from commands.cache import clear_cache_command, cache_info_command

__version__ = '0.1.0'


def validate_addresses(ctx, param, value):
    """Reject malformed --ip-address values before any light is contacted."""
    try:
        parse_address_list(value)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e
    return value


@click.group(
    cls=ColouredGroup,
    context_settings={
        'help_option_names': ['-h', '--help'],
        'max_content_width': 120
    }
)
@click.option('--ip-address', '-i', 'ip_addresses', multiple=True, metavar='ADDRESS',
              callback=validate_addresses,
              help=f'Light address (repeatable or comma-separated). Overrides {ENV_IP_ADDRESS}.')
@click.option('--light', '-l', metavar='NAME',
              help='Only control lights whose name contains NAME (case-insensitive)')
@click.option('--timeout', type=click.FloatRange(min=0), default=DEFAULT_DISCOVERY_TIMEOUT,
              envvar=ENV_TIMEOUT, show_default=True, help='Discovery timeout in seconds')
@click.option('--no-discovery', is_flag=True,
              help=f'Never search the network (also set by {ENV_DISCOVERY}=0)')
@click.option('--verbose', '-v', is_flag=True, help='Log debug output to stderr')
@click.version_option(version=__version__, prog_name='elgato-light')
@click.pass_context
def cli(ctx, ip_addresses, light, timeout, no_discovery, verbose):
    """Elgato Light Control CLI - Switch and adjust Elgato lights.

Lights are found automatically on the local network (mDNS) and cached for
fast repeat use. Pass --ip-address or set ELGATO_LIGHT_IP to skip discovery.

Use 'COMMAND -h' or 'COMMAND --help' for detailed help on a specific command."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format='%(name)s: %(message)s')

    app = ctx.ensure_object(AppContext)
    app.ip_addresses = ip_addresses
    app.light = light
    app.timeout = timeout
    app.discovery_enabled = not no_discovery and discovery_enabled()


# Register control commands
cli.add_command(on_command)
cli.add_command(off_command)
cli.add_command(brightness_command)
cli.add_command(temperature_command)
cli.add_command(status_command)

# Register discovery and cache commands
cli.add_command(discover_command)
cli.add_command(clear_cache_command)
cli.add_command(cache_info_command)


if __name__ == '__main__':
    cli()
