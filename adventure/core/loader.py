from __future__ import annotations

from pathlib import Path
from typing import Any

from adventure.core.config import load_yaml
from adventure.core.models import Direction, Door, Effect, Item, ItemCatalog
from adventure.core.world import World


def build_catalog(items_raw: dict[str, Any]) -> ItemCatalog:
    items: list[Item] = []
    for name, raw in (items_raw or {}).items():
        raw = raw or {}
        effect = raw.get("effect")
        items.append(
            Item(
                name=str(name),
                effect=Effect(effect) if effect is not None else None,
                combine_partner_name=raw.get("combine_with"),
                replacement_name=raw.get("becomes"),
            )
        )
    return ItemCatalog(items)


def _lookup(catalog: ItemCatalog, name: str, where: str) -> Item:
    item = catalog.resolve(str(name))
    if item is None:
        raise ValueError(f"unknown item {name} in {where}")
    return item


def build_world(data: dict[str, Any]) -> World:
    catalog = build_catalog(data.get("items", {}))
    world = World(catalog=catalog)

    rooms_raw = data.get("rooms", [])
    for room in rooms_raw:
        room_id = int(room["id"])
        built = world.add_room(room_id, str(room.get("name", room_id)), str(room.get("description", "")))
        for name in room.get("items", []):
            built.add_item(_lookup(catalog, name, f"room {room_id}"))

    # exits are one-way here; list both sides for a two-way passage
    for room in rooms_raw:
        for direction, target in (room.get("exits") or {}).items():
            world.connect_room_ids(int(room["id"]), Direction.parse(direction), int(target), bidirectional=False)

    for door in data.get("doors", []):
        name = str(door.get("name", "DOOR"))
        requires = door.get("requires")
        world.add_door(
            Door.create(
                int(door["from"]),
                Direction.parse(door["facing"]),
                int(door["to"]),
                item_to_open=_lookup(catalog, requires, f"door {name}") if requires is not None else None,
                name=name,
            )
        )

    for name in data.get("inventory", []):
        world.inventory.append(_lookup(catalog, name, "inventory"))

    world.current_room_id = int(data.get("start_room", 0))
    return world


def load_world(path: str | Path) -> World:
    return build_world(load_yaml(path))


def load_catalog(path: str | Path) -> ItemCatalog:
    return build_catalog(load_yaml(path).get("items", {}))
