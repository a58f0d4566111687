from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional
import typer
from importlib import metadata
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from adventure.core.audit import append_audit, read_audit
from adventure.core.config import AdventureConfig, load_config
from adventure.core.loader import load_catalog, load_world
from adventure.core.models import Direction, DoorStatus, ItemCatalog, ItemResult
from adventure.core.persistence import RoomWithIndexDoesNotExist, load_game, save_game
from adventure.core.render import render_inventory, render_room
from adventure.core.world import World


app = typer.Typer(add_completion=False, help="Adventure: play a saved room-graph adventure one action at a time")
console = Console()
err_console = Console(stderr=True)

ITEM_MESSAGES = {
    ItemResult.NO_EFFECT: "Nothing happens.",
    ItemResult.ITEM_HAD_EFFECT: "It worked.",
    ItemResult.ITEMS_CANNOT_BE_COMBINED: "Those do not go together.",
    ItemResult.ITEM_HAD_NO_EFFECT: "You fiddle with them, but nothing comes of it.",
}

ConfigOption = typer.Option(None, "--config", help="Path to adventure.yaml")
SaveOption = typer.Option(None, "--save", "-s", help="Save file (defaults to the configured save location)")
WorldOption = typer.Option(None, "--world", "-w", help="World YAML supplying the item catalog")


def _get_version() -> str:
    try:
        return metadata.version("adventure")
    except metadata.PackageNotFoundError:
        return "0.0.0+local"


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(
        False,
        "--version",
        help="Show the Adventure version and exit.",
        is_eager=True,
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log diagnostics to stderr."),
):
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
    )
    if version:
        console.print(_get_version())
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit()


def _get_env(config: Optional[str], save: Optional[str], world: Optional[str]) -> tuple[AdventureConfig, Path, ItemCatalog]:
    cfg = load_config(config)
    save_path = Path(save) if save else cfg.save_path
    world_path = world or cfg.world_path
    catalog = load_catalog(world_path) if world_path else ItemCatalog()
    return cfg, save_path, catalog


def _load(save_path: Path, catalog: ItemCatalog) -> World:
    try:
        world = load_game(save_path, catalog=catalog)
    except RoomWithIndexDoesNotExist as e:
        console.print(f"❌ Save file {save_path} is corrupt: {e}")
        raise typer.Exit(code=2)
    if world is None:
        console.print(f"❌ No game could be loaded from {save_path}. Start one: adventure new WORLD.yaml")
        raise typer.Exit(code=2)
    return world


def _commit(cfg: AdventureConfig, save_path: Path, world: World, event: dict[str, Any]) -> None:
    if not save_game(world, save_path):
        console.print(f"❌ Could not save to {save_path}")
        raise typer.Exit(code=3)
    append_audit(event, cfg.audit_path)


def _finish(ok: bool, message: str, world: World) -> None:
    if ok:
        console.print(message)
        console.print(render_room(world))
    else:
        console.print(f"🧱 {message}")
        raise typer.Exit(code=1)


@app.command("new")
def new_game(
    world_file: Optional[str] = typer.Argument(None, help="World YAML to start from"),
    config: Optional[str] = ConfigOption,
    save: Optional[str] = SaveOption,
):
    cfg, save_path, _ = _get_env(config, save, None)
    source = world_file or cfg.world_path
    if not source:
        console.print("❌ No world file given and none configured.")
        raise typer.Exit(code=2)
    try:
        world = load_world(source)
    except (FileNotFoundError, ValueError, KeyError) as e:
        console.print(f"❌ Could not build world from {source}: {e}")
        raise typer.Exit(code=2)
    _commit(cfg, save_path, world, {"event": "new", "world": str(source)})
    console.print(f"✅ New game saved to [bold]{save_path}[/bold]\n")
    console.print(render_room(world))


@app.command("show")
def show(
    config: Optional[str] = ConfigOption,
    save: Optional[str] = SaveOption,
    world: Optional[str] = WorldOption,
):
    _, save_path, catalog = _get_env(config, save, world)
    console.print(render_room(_load(save_path, catalog)))


@app.command("inventory")
def inventory(
    config: Optional[str] = ConfigOption,
    save: Optional[str] = SaveOption,
    world: Optional[str] = WorldOption,
):
    _, save_path, catalog = _get_env(config, save, world)
    console.print(render_inventory(_load(save_path, catalog)))


@app.command("flags")
def flags(
    config: Optional[str] = ConfigOption,
    save: Optional[str] = SaveOption,
    world: Optional[str] = WorldOption,
):
    _, save_path, catalog = _get_env(config, save, world)
    state = _load(save_path, catalog)
    if not state.flags:
        console.print("No flags set.")
        return
    for flag in sorted(state.flags):
        console.print(f"• {flag}")


@app.command("go")
def go(
    direction: str = typer.Argument(..., help="north, south, east, west (or n/s/e/w)"),
    config: Optional[str] = ConfigOption,
    save: Optional[str] = SaveOption,
    world: Optional[str] = WorldOption,
):
    try:
        parsed = Direction.parse(direction)
    except ValueError as e:
        console.print(f"❌ {e}")
        raise typer.Exit(code=2)

    cfg, save_path, catalog = _get_env(config, save, world)
    state = _load(save_path, catalog)
    if not state.go(parsed):
        _finish(False, "You cannot go that way.", state)
    _commit(cfg, save_path, state, {"event": "go", "direction": parsed.value, "room": state.current_room_id})
    _finish(True, f"You go {parsed.value.lower()}.", state)


@app.command("take")
def take(
    item: str = typer.Argument(..., help="Name of an item in the current room"),
    config: Optional[str] = ConfigOption,
    save: Optional[str] = SaveOption,
    world: Optional[str] = WorldOption,
):
    cfg, save_path, catalog = _get_env(config, save, world)
    state = _load(save_path, catalog)
    found = state.room_item(item)
    if found is None or not state.take(found):
        _finish(False, f"There is no {item} here.", state)
    _commit(cfg, save_path, state, {"event": "take", "item": found.name})
    _finish(True, f"You pick up {found.name}.", state)


@app.command("open")
def open_door(
    door: str = typer.Argument(..., help="Name of a door in the current room"),
    config: Optional[str] = ConfigOption,
    save: Optional[str] = SaveOption,
    world: Optional[str] = WorldOption,
):
    cfg, save_path, catalog = _get_env(config, save, world)
    state = _load(save_path, catalog)
    target = state.door_named(door)
    if target is None:
        _finish(False, f"There is no {door} here.", state)

    result = state.open(target)
    if result.opened:
        _commit(cfg, save_path, state, {"event": "open", "door": target.name, "result": result.status.value})
        _finish(True, f"The {target.name} opens.", state)
        return
    if result.status is DoorStatus.MISSING_ITEM_TO_OPEN:
        _finish(False, f"The {target.name} will not open. It needs {result.item.name}.", state)
    _finish(False, f"There is no {door} here.", state)


@app.command("use")
def use(
    item: str = typer.Argument(..., help="Item in your inventory"),
    with_item: Optional[str] = typer.Argument(None, help="Second inventory item to combine with"),
    config: Optional[str] = ConfigOption,
    save: Optional[str] = SaveOption,
    world: Optional[str] = WorldOption,
):
    cfg, save_path, catalog = _get_env(config, save, world)
    state = _load(save_path, catalog)
    found = state.inventory_item(item)
    if found is None:
        _finish(False, f"You do not have {item}.", state)

    indirect = None
    if with_item is not None:
        indirect = state.inventory_item(with_item)
        if indirect is None:
            _finish(False, f"You do not have {with_item}.", state)

    result = state.use(found, indirect)
    ok = result is ItemResult.ITEM_HAD_EFFECT
    if ok:
        event = {"event": "use", "item": found.name, "result": result.value}
        if indirect is not None:
            event["with"] = indirect.name
        _commit(cfg, save_path, state, event)
    _finish(ok, ITEM_MESSAGES[result], state)


@app.command("history")
def history(
    config: Optional[str] = ConfigOption,
):
    cfg = load_config(config)
    rows = read_audit(cfg.audit_path)
    if not rows:
        console.print("No actions recorded yet.")
        return

    table = Table(title="Adventure History")
    table.add_column("#", justify="right")
    table.add_column("Event", style="bold")
    table.add_column("Details")
    table.add_column("When", justify="right")

    for i, row in enumerate(rows, start=1):
        details = ", ".join(f"{k}={v}" for k, v in row.items() if k not in ("event", "ts"))
        table.add_row(str(i), str(row.get("event", "")), details, str(row.get("ts", "")))

    console.print(table)
