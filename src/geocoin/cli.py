"""Line-oriented command handling shared by the interactive loop and one-shot commands."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from geocoin.game import GeocoinGame
from geocoin.grid import parse_cell
from geocoin.ledger import Cache
from geocoin.models import Direction, GeoPoint


class CommandType(str, Enum):
    MOVE = "move"
    GOTO = "goto"
    COLLECT = "collect"
    DEPOSIT = "deposit"
    UNDO = "undo"
    STATUS = "status"
    CACHES = "caches"
    HELP = "help"
    UNKNOWN = "unknown"


@dataclass(slots=True)
class GameCommand:
    type: CommandType
    arguments: tuple[str, ...] = ()


HELP_TEXT = (
    "n/s/e/w [steps] | goto LAT LNG | collect I,J COIN_ID | deposit I,J | "
    "undo | status | caches | reset | quit"
)


class GameCommandParser:
    _MOVE = re.compile(r"^(north|south|east|west|n|s|e|w)(?:\s+(\d+))?$", re.IGNORECASE)
    _GOTO = re.compile(r"^goto\s+(-?\d+(?:\.\d+)?)\s+(-?\d+(?:\.\d+)?)$", re.IGNORECASE)
    _COLLECT = re.compile(r"^(?:collect|take)\s+(\S+)\s+(\S+)$", re.IGNORECASE)
    _DEPOSIT = re.compile(r"^(?:deposit|drop)\s+(\S+)$", re.IGNORECASE)

    def parse(self, line: str) -> GameCommand:
        text = " ".join(line.strip().split())
        lowered = text.lower()
        if not text:
            return GameCommand(type=CommandType.UNKNOWN)

        if match := self._MOVE.match(text):
            return GameCommand(type=CommandType.MOVE, arguments=(match.group(1), match.group(2) or "1"))
        if match := self._GOTO.match(text):
            return GameCommand(type=CommandType.GOTO, arguments=(match.group(1), match.group(2)))
        if match := self._COLLECT.match(text):
            return GameCommand(type=CommandType.COLLECT, arguments=(match.group(1), match.group(2)))
        if match := self._DEPOSIT.match(text):
            return GameCommand(type=CommandType.DEPOSIT, arguments=(match.group(1),))

        for command_type in (CommandType.UNDO, CommandType.STATUS, CommandType.CACHES, CommandType.HELP):
            if lowered == command_type.value:
                return GameCommand(type=command_type)
        return GameCommand(type=CommandType.UNKNOWN, arguments=(text,))


def describe_cache(cache: Cache) -> dict:
    return {
        "cell": cache.cell.key,
        "coins": [{"id": coin.id, "value": coin.value} for coin in cache.coins],
        "total_value": cache.total_value,
    }


def describe_status(game: GeocoinGame) -> dict:
    world = game.world
    player = world.player
    return {
        "position": {"lat": player.position.lat, "lng": player.position.lng},
        "cell": world.player_cell.key,
        "inventory": [coin.id for coin in player.inventory],
        "inventory_value": player.inventory_value,
        "visible_caches": len(game.visible_caches()),
        "discovered_caches": len(world.registry),
        "undo_depth": game.undo_depth,
    }


class CliGameHandler:
    """Turns parsed commands into game calls and short text replies."""

    def __init__(self, game: GeocoinGame, parser: GameCommandParser | None = None) -> None:
        self._game = game
        self._parser = parser or GameCommandParser()

    def handle(self, line: str) -> str:
        command = self._parser.parse(line)
        try:
            return self._dispatch(command)
        except ValueError as exc:
            return f"Error: {exc}"

    def _dispatch(self, command: GameCommand) -> str:
        game = self._game
        if command.type == CommandType.MOVE:
            direction, steps = command.arguments
            result = game.move(Direction.parse(direction), steps=int(steps))
            found = f", discovered {len(result.discovered)} cache(s)" if result.discovered else ""
            return f"Moved to cell {result.cell}{found}."

        if command.type == CommandType.GOTO:
            lat, lng = command.arguments
            result = game.apply_position(GeoPoint(float(lat), float(lng)))
            return f"Position set; now in cell {result.cell}."

        if command.type == CommandType.COLLECT:
            cell_text, coin_id = command.arguments
            coin = game.collect(parse_cell(cell_text), coin_id)
            if coin is None:
                return f"No coin {coin_id} at {cell_text}."
            return f"Collected {coin.id} (value {coin.value}). Inventory value: {game.world.player.inventory_value}."

        if command.type == CommandType.DEPOSIT:
            cell_text = command.arguments[0]
            moved = game.deposit(parse_cell(cell_text))
            if not moved:
                return "Nothing deposited."
            return f"Deposited {moved} coin(s) at {cell_text}."

        if command.type == CommandType.UNDO:
            return "Undone." if game.undo() else "Nothing to undo."

        if command.type == CommandType.STATUS:
            status = describe_status(game)
            return (
                f"Cell {status['cell']}, {len(status['inventory'])} coin(s) worth {status['inventory_value']}, "
                f"{status['visible_caches']} cache(s) nearby."
            )

        if command.type == CommandType.CACHES:
            caches = game.visible_caches()
            if not caches:
                return "No caches nearby."
            return "\n".join(
                f"{cache.cell}: " + (", ".join(f"{coin.id}={coin.value}" for coin in cache.coins) or "empty")
                for cache in caches
            )

        if command.type == CommandType.HELP:
            return HELP_TEXT

        return f"Unknown command. {HELP_TEXT}"
