"""Save and restore a whole World as a JSON document.

Decoding is permissive: the only structural check is that ``currentRoomIndex``
names a room that exists. Dangling exits, doors and catalog names load as-is.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from adventure.core.config import AdventureConfig, load_config
from adventure.core.models import Direction, Door, Effect, Item, ItemCatalog, Room
from adventure.core.world import World


logger = logging.getLogger(__name__)


class SaveDecodeError(ValueError):
    pass


class RoomWithIndexDoesNotExist(SaveDecodeError):
    def __init__(self, room_id: int):
        super().__init__(f"room with index {room_id} does not exist")
        self.room_id = room_id


def item_to_dict(item: Item) -> dict[str, Any]:
    return {
        "name": item.name,
        "effect": item.effect.value if item.effect is not None else None,
        "combinePartnerName": item.combine_partner_name,
        "replacementName": item.replacement_name,
    }


def item_from_dict(data: dict[str, Any]) -> Item:
    effect = data.get("effect")
    return Item(
        name=str(data["name"]),
        effect=Effect(effect) if effect is not None else None,
        combine_partner_name=data.get("combinePartnerName"),
        replacement_name=data.get("replacementName"),
    )


def room_to_dict(room: Room) -> dict[str, Any]:
    return {
        "id": room.id,
        "name": room.name,
        "description": room.description,
        "exits": {direction.value: target for direction, target in room.exits.items()},
        "items": [item_to_dict(item) for item in room.items],
    }


def room_from_dict(data: dict[str, Any]) -> Room:
    return Room(
        id=int(data["id"]),
        name=str(data["name"]),
        description=str(data.get("description", "")),
        exits={Direction(direction): int(target) for direction, target in data.get("exits", {}).items()},
        items=[item_from_dict(item) for item in data.get("items", [])],
    )


def door_to_dict(door: Door) -> dict[str, Any]:
    return {
        "name": door.name,
        "betweenRooms": {str(room_id): direction.value for room_id, direction in door.between_rooms.items()},
        "requiresItemToOpen": item_to_dict(door.requires_item) if door.requires_item is not None else None,
    }


def door_from_dict(data: dict[str, Any]) -> Door:
    required = data.get("requiresItemToOpen")
    return Door(
        name=str(data["name"]),
        between_rooms={int(room_id): Direction(direction) for room_id, direction in data["betweenRooms"].items()},
        requires_item=item_from_dict(required) if required is not None else None,
    )


def world_to_dict(world: World) -> dict[str, Any]:
    return {
        "rooms": [room_to_dict(world.rooms[room_id]) for room_id in sorted(world.rooms)],
        "doors": [door_to_dict(door) for door in world.doors],
        "inventory": [item_to_dict(item) for item in world.inventory],
        "currentRoomIndex": world.current_room_id,
        "flags": sorted(world.flags),
    }


def world_from_dict(data: dict[str, Any], catalog: ItemCatalog | None = None) -> World:
    if not isinstance(data, dict):
        raise SaveDecodeError("save document must be a JSON object")
    try:
        rooms = [room_from_dict(room) for room in data["rooms"]]
        doors = [door_from_dict(door) for door in data["doors"]]
        inventory = [item_from_dict(item) for item in data["inventory"]]
        current_room_id = int(data["currentRoomIndex"])
        flags = {str(flag) for flag in data["flags"]}
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise SaveDecodeError(f"malformed save document: {e!r}") from e

    world = World(catalog=catalog)
    for room in rooms:
        world.rooms[room.id] = room
    world.doors = doors
    world.inventory = inventory
    world.flags = flags
    if current_room_id not in world.rooms:
        raise RoomWithIndexDoesNotExist(current_room_id)
    world.current_room_id = current_room_id
    return world


def world_to_json(world: World) -> str:
    return json.dumps(world_to_dict(world), indent=2, ensure_ascii=False)


def world_from_json(text: str, catalog: ItemCatalog | None = None) -> World:
    return world_from_dict(json.loads(text), catalog=catalog)


def default_save_path(config: AdventureConfig | None = None) -> Path:
    cfg = config if config is not None else load_config()
    return cfg.save_path


def save_game(world: World, path: str | Path | None = None) -> bool:
    target = Path(path) if path is not None else default_save_path()
    logger.info("saving world to %s", target)
    temp_path = target.with_suffix(f"{target.suffix}.tmp")
    try:
        payload = world_to_json(world)
        target.parent.mkdir(parents=True, exist_ok=True)
        temp_path.write_text(payload, encoding="utf-8")
        temp_path.replace(target)
    except (OSError, TypeError, ValueError) as e:
        logger.error("save to %s failed: %s", target, e)
        temp_path.unlink(missing_ok=True)
        return False
    return True


def load_game(path: str | Path | None = None, catalog: ItemCatalog | None = None) -> World | None:
    source = Path(path) if path is not None else default_save_path()
    logger.info("loading world from %s", source)
    try:
        text = source.read_text(encoding="utf-8")
        data = json.loads(text)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("load from %s failed: %s", source, e)
        return None
    try:
        return world_from_dict(data, catalog=catalog)
    except RoomWithIndexDoesNotExist:
        raise
    except SaveDecodeError as e:
        logger.error("load from %s failed: %s", source, e)
        return None
