#!/usr/bin/env python3
"""SkyTrack command-line interface.

Usage::

    skytrack visible --lat 51.5 --lon -0.13
    skytrack visible --lat 51.5 --lon -0.13 --file catalog.tle --time 2024-02-14T12:00:00
    skytrack sky --lat 40.7 --lon -74.0 --radius 100 --offline
"""
from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .core.observer import InvalidLocationError, ObserverLocation
from .core.projection import compass_point, plottable, project
from .core.registry import Registry, TrackedObject
from .core.signal import SignalQuality, classify
from .core.tle import parse_tle
from .data.celestrak import CelestrakClient, fallback_catalog, populate
from .utils.constants import DEFAULT_GROUPS

console = Console()

_QUALITY_COLORS = {
    SignalQuality.EXCELLENT: "green",
    SignalQuality.GOOD: "green",
    SignalQuality.FAIR: "yellow",
    SignalQuality.WEAK: "yellow",
    SignalQuality.NONE: "red",
}


def _observer_options(func):
    func = click.option("--time", "-t", "when", type=click.DateTime(), default=None,
                        help="UTC time to evaluate (default: now)")(func)
    func = click.option("--offline", is_flag=True, help="Use the built-in catalog only")(func)
    func = click.option("--group", "-g", "groups", multiple=True,
                        help=f"Celestrak group (repeatable, default: {', '.join(DEFAULT_GROUPS)})")(func)
    func = click.option("--file", "-f", "filepath", type=click.Path(exists=True), help="TLE file path")(func)
    func = click.option("--alt", default=0.0, show_default=True, help="Altitude in metres")(func)
    func = click.option("--lon", required=True, type=float, help="Longitude in degrees")(func)
    func = click.option("--lat", required=True, type=float, help="Latitude in degrees")(func)
    return func


@click.group()
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """SkyTrack: see which satellites are overhead and how strong they would be."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(name)s: %(message)s")


@main.command()
@_observer_options
def visible(lat, lon, alt, filepath, groups, offline, when):
    """List visible objects, strongest first."""
    registry, observer, when = _run_tick(lat, lon, alt, filepath, groups, offline, when)
    _display_summary(registry, observer, when)

    objects = registry.get_visible_sorted()
    if not objects:
        console.print("[yellow]No satellites above the horizon.[/yellow]")
        return

    table = Table(title="Visible Satellites", box=box.SIMPLE_HEAVY)
    table.add_column("Name", style="cyan")
    table.add_column("Az (°)", justify="right")
    table.add_column("El (°)", justify="right")
    table.add_column("Range (km)", justify="right")
    table.add_column("Signal", justify="right")
    table.add_column("Bars")

    for obj in objects:
        topo = obj.topocentric
        color = _QUALITY_COLORS[classify(obj.signal_strength)]
        name = f"[bold]{obj.identity} *[/bold]" if obj.is_active_selection else obj.identity
        table.add_row(
            name,
            f"{topo.azimuth_deg:.1f} {compass_point(topo.bearing_deg)}",
            f"{topo.elevation_deg:.1f}",
            f"{topo.range_km:.0f}",
            f"[{color}]{obj.signal_strength:.0f}%[/{color}]",
            "▮" * obj.bars_active + "▯" * (5 - obj.bars_active),
        )

    console.print(table)


@main.command()
@_observer_options
@click.option("--radius", "-r", default=100.0, show_default=True, help="Sky view radius")
def sky(lat, lon, alt, filepath, groups, offline, when, radius):
    """Print sky-view coordinates for every visible object."""
    registry, observer, when = _run_tick(lat, lon, alt, filepath, groups, offline, when)
    _display_summary(registry, observer, when)

    table = Table(title=f"Sky View (R = {radius:g})", box=box.SIMPLE_HEAVY)
    table.add_column("Name", style="cyan")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("Direction")

    for obj in plottable(registry.get_visible_sorted()):
        x, y = project(obj.topocentric.azimuth_deg, obj.topocentric.elevation_deg, radius)
        table.add_row(obj.identity, f"{x:+.1f}", f"{y:+.1f}", compass_point(obj.topocentric.bearing_deg))

    console.print(table)


def _run_tick(lat, lon, alt, filepath, groups, offline, when):
    try:
        observer = ObserverLocation(lat, lon, alt)
    except InvalidLocationError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        sys.exit(1)

    if filepath:
        tles = parse_tle(Path(filepath).read_text())
        console.print(f"Loaded {len(tles)} TLEs from {filepath}")
    elif offline:
        tles = fallback_catalog()
    else:
        tles = CelestrakClient().load_catalog(groups or DEFAULT_GROUPS)

    if not tles:
        console.print("[red]Error: no element sets loaded[/red]")
        sys.exit(1)

    registry = Registry()
    populate(registry, tles)

    if when is None:
        when = datetime.now(timezone.utc)
    elif when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)

    registry.update_all(observer, when)
    return registry, observer, when


def _display_summary(registry: Registry, observer: ObserverLocation, when: datetime):
    best: TrackedObject | None = registry.best()
    if best is None:
        best_line = "Best: [red]none[/red]"
    else:
        quality = classify(best.signal_strength)
        color = _QUALITY_COLORS[quality]
        best_line = (
            f"Best: [bold]{best.identity}[/bold] "
            f"[{color}]{quality.value} ({best.signal_strength:.0f}%)[/{color}]"
        )

    console.print(
        Panel(
            f"Observer: {observer.latitude:.4f}°, {observer.longitude:.4f}°, {observer.altitude:.0f} m\n"
            f"Time: {when:%Y-%m-%d %H:%M:%S} UTC\n"
            f"Tracked: {len(registry)}  Visible: {registry.visible_count()}\n"
            f"{best_line}",
            title="SkyTrack",
            box=box.ROUNDED,
        )
    )


if __name__ == "__main__":
    main()
