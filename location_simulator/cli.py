"""
Location Simulator - Command Line

Author: Colin Bitterfield
Email: colin@bitterfield.com
Date Created: 2026-10-18
Date Updated: 2026-10-18
Version: 0.1.0

Set, reset or replay the simulated location of a device.
Negative coordinates must follow `--`, e.g. `set -- 40.690008 -74.045843`.
"""

import logging
import os
from pathlib import Path

import typer

from location_simulator.config import SimulatorConfig
from location_simulator.errors import SimLocationError
from location_simulator.gpx import GPXWaypointSource
from location_simulator.playback import playback
from location_simulator.session import reset_location, set_location

cli = typer.Typer(
    name="location-simulator",
    help="Simulate device GPS location (set, reset, or replay GPX tracks).",
    no_args_is_help=True,
)


def build_device():
    return SimulatorConfig().build_device()


def _fail(e: Exception):
    typer.echo(f"Error: {e}", err=True)
    raise typer.Exit(code=1)


@cli.callback()
def configure(debug: bool = typer.Option(False, '--debug', help="Enable debug logging")) -> None:
    debug = debug or os.environ.get('DEBUG', 'false').lower() == 'true'
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format='%(levelname)s:%(name)s:%(message)s'
    )


@cli.command("set")
def simulate_location_set(latitude: str, longitude: str) -> None:
    """
    Set a fixed simulated location (latitude, longitude).
    Example: `set -- 40.690008 -74.045843` (Liberty Island).
    """
    try:
        point = set_location(build_device(), latitude, longitude)
    except SimLocationError as e:
        _fail(e)
    typer.echo(f"Location set: {point.latitude}, {point.longitude}")


@cli.command("reset")
def simulate_location_reset() -> None:
    """Stop location simulation and resume real GPS."""
    try:
        reset_location(build_device())
    except SimLocationError as e:
        _fail(e)
    typer.echo("Location reset")


@cli.command("play")
def simulate_location_play(
    filename: Path = typer.Argument(..., exists=True, file_okay=True, dir_okay=False),
) -> None:
    """Replay a GPX track in real time."""
    try:
        source = GPXWaypointSource.from_file(filename)
        sent = playback(build_device(), source)
    except (SimLocationError, OSError) as e:
        _fail(e)
    typer.echo(f"Playback complete: {sent} points")


@cli.command("serve")
def serve() -> None:
    """Run the web control interface."""
    from location_simulator import main as web

    web.main()


def main():
    cli()


if __name__ == '__main__':
    main()
