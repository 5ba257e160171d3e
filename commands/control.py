"""
Control commands for Elgato lights.

Includes on, off, relative brightness, colour temperature and status.
Every command acts on all resolved lights (see core.resolver).
"""

import click

from models.utils import MAX_KELVIN, MIN_KELVIN
from commands.context import AppContext, pass_app, run_on_lights


@click.command(name='on')
@click.option('--brightness', '-b', type=click.IntRange(0, 100), help='Brightness level (0-100)')
@click.option('--temperature', '-t', type=click.IntRange(MIN_KELVIN, MAX_KELVIN),
              help=f'Colour temperature in kelvin ({MIN_KELVIN}-{MAX_KELVIN})')
@pass_app
def on_command(app: AppContext, brightness: int | None, temperature: int | None):
    """Turn lights on, optionally setting brightness and temperature.

    Without options the lights keep their previous brightness and temperature.

    \b
    Examples:
      elgato-light on
      elgato-light on -b 40 -t 4500
      elgato-light -i 192.168.0.25 on
    """
    if brightness is None and temperature is None:
        command = lambda client, light: client.set_power(light, True)
    else:
        command = lambda client, light: client.turn_on(light, brightness, temperature)

    settings = []
    if brightness is not None:
        settings.append(f"brightness: {brightness}%")
    if temperature is not None:
        settings.append(f"temperature: {temperature}K")
    suffix = f" ({', '.join(settings)})" if settings else ""

    run_on_lights(app, command, lambda r: f"{r.light.label} on{suffix}")


@click.command(name='off')
@pass_app
def off_command(app: AppContext):
    """Turn lights off."""
    run_on_lights(
        app,
        lambda client, light: client.set_power(light, False),
        lambda r: f"{r.light.label} off",
    )


@click.command(name='brightness', context_settings={'ignore_unknown_options': True})
@click.argument('delta', type=click.IntRange(-100, 100))
@pass_app
def brightness_command(app: AppContext, delta: int):
    """Change brightness by DELTA (-100 to 100).

    Lights that are off are switched on.

    \b
    Examples:
      elgato-light brightness 10
      elgato-light brightness -20
      elgato-light brightness -- -20
    """
    run_on_lights(
        app,
        lambda client, light: client.adjust_brightness(light, delta),
        lambda r: f"{r.light.label} brightness: {r.value}%",
    )


@click.command(name='temperature')
@click.argument('kelvin', type=click.IntRange(MIN_KELVIN, MAX_KELVIN))
@pass_app
def temperature_command(app: AppContext, kelvin: int):
    """Set colour temperature in kelvin (2900-7000).

    Lights that are off are switched on.
    """
    run_on_lights(
        app,
        lambda client, light: client.set_temperature(light, kelvin),
        lambda r: f"{r.light.label} temperature: {kelvin}K",
    )


def format_status(result) -> str:
    status = result.value
    label = f"{status.name} ({result.light.address})" if status.name else result.light.label
    power = click.style('On', fg='green') if status.power else click.style('Off', fg='red')
    return (
        f"{label}\n"
        f"    Power:       {power}\n"
        f"    Brightness:  {status.brightness}%\n"
        f"    Temperature: {status.temperature}K"
    )


@click.command(name='status')
@pass_app
def status_command(app: AppContext):
    """Show power, brightness and temperature of each light."""
    run_on_lights(
        app,
        lambda client, light: client.get_status(light),
        format_status,
    )
