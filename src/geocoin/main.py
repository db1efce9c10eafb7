"""CLI startup entrypoint for Geocoin."""

from __future__ import annotations

import asyncio

import typer
from pydantic import ValidationError
from rich import print

from geocoin.adapters import TrackFilePositionSource
from geocoin.cli import CliGameHandler, describe_cache, describe_status
from geocoin.config import settings
from geocoin.grid import parse_cell
from geocoin.models import Direction, GeoPoint
from geocoin.position_feed import PositionFeed
from geocoin.session import GameSession
from geocoin.telemetry import configure_logging

app = typer.Typer(help="Geocoin world and coin ledger")


def _session() -> GameSession:
    configure_logging(settings.log_level)
    return GameSession(settings)


def _cell(text: str):
    try:
        return parse_cell(text)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


@app.command("config")
def show_config() -> None:
    """Show effective world configuration."""
    print(settings.model_dump())


@app.command()
def status() -> None:
    """Show player position, inventory and nearby caches."""
    with _session() as game:
        print(describe_status(game))
        print({"caches": [describe_cache(cache) for cache in game.visible_caches()]})


@app.command()
def move(
    direction: str = typer.Argument(..., help="north/south/east/west (or n/s/e/w)"),
    steps: int = typer.Option(1, min=1, help="How many steps to take"),
) -> None:
    """Move the player by whole steps."""
    try:
        heading = Direction.parse(direction)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    with _session() as game:
        result = game.move(heading, steps=steps)
        print({"cell": result.cell.key, "discovered": [cache.cell.key for cache in result.discovered]})


@app.command()
def goto(
    lat: float = typer.Option(..., help="Latitude"),
    lng: float = typer.Option(..., help="Longitude"),
) -> None:
    """Apply one raw sensor position."""
    with _session() as game:
        result = game.apply_position(GeoPoint(lat, lng))
        print({"cell": result.cell.key, "discovered": [cache.cell.key for cache in result.discovered]})


@app.command()
def collect(cell: str, coin_id: str) -> None:
    """Collect one coin from the cache at CELL (``i,j``)."""
    target = _cell(cell)
    with _session() as game:
        coin = game.collect(target, coin_id)
        if coin is None:
            print({"collected": None, "reason": "not found"})
            raise typer.Exit(code=1)
        print({"collected": {"id": coin.id, "value": coin.value}, "inventory_value": game.world.player.inventory_value})


@app.command()
def deposit(cell: str) -> None:
    """Deposit the whole inventory into the cache at CELL."""
    target = _cell(cell)
    with _session() as game:
        print({"deposited": game.deposit(target)})


@app.command()
def follow(
    track_file: str = typer.Argument(..., help="JSON list of {lat, lng} positions"),
    interval: float = typer.Option(None, help="Seconds between positions"),
) -> None:
    """Replay a recorded track as if it came from the geolocation sensor."""
    pace = settings.feed_interval_seconds if interval is None else interval
    try:
        source = TrackFilePositionSource(track_file, interval_seconds=pace)
    except (OSError, ValidationError) as exc:
        raise typer.BadParameter(f"Unreadable track file: {exc}") from exc

    with _session() as game:

        async def _run() -> int:
            feed = PositionFeed(game, source)
            await feed.start()
            try:
                await feed.wait_closed()
            finally:
                await feed.stop()
            return len(feed.applied)

        applied = asyncio.run(_run())
        print({"positions_applied": applied, **describe_status(game)})


@app.command()
def reset(yes: bool = typer.Option(False, "--yes", help="Skip the confirmation prompt")) -> None:
    """Discard all caches, inventory and movement history."""
    if not yes:
        typer.confirm("This erases the whole world and your inventory. Continue?", abort=True)
    with _session() as game:
        game.reset()
        print({"reset": True, "discovered_caches": len(game.world.registry)})


@app.command()
def play() -> None:
    """Interactive loop with in-session undo."""
    with _session() as game:
        handler = CliGameHandler(game)
        print({"play": "started", "hint": "Type 'help' for commands, 'quit' to save and exit."})
        while True:
            try:
                line = input("> ")
            except EOFError:
                break

            text = line.strip().lower()
            if text in ("quit", "exit"):
                break
            if text == "reset":
                if typer.confirm("This erases the whole world and your inventory. Continue?"):
                    game.reset()
                    print("World reset.")
                continue
            if text:
                print(handler.handle(line))
        print({"play": "saved"})


if __name__ == "__main__":
    app()
