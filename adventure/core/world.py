from __future__ import annotations

import logging

from adventure.core.models import (
    Direction,
    Door,
    DoorResult,
    DoorStatus,
    Effect,
    Item,
    ItemCatalog,
    ItemResult,
    Room,
)


logger = logging.getLogger(__name__)


class WorldInvariantError(RuntimeError):
    """The world reached a state no action can recover from."""


class World:
    """Owner of all mutable game state and the resolver for every player action.

    Gameplay outcomes (blocked exits, missing items, locked doors) come back as
    booleans or result values. Only a broken invariant raises.
    """

    def __init__(self, catalog: ItemCatalog | None = None):
        self.catalog = catalog if catalog is not None else ItemCatalog()
        self.rooms: dict[int, Room] = {}
        self.doors: list[Door] = []
        self.current_room_id = 0
        self.inventory: list[Item] = []
        self.flags: set[str] = set()

    @property
    def current_room(self) -> Room:
        room = self.rooms.get(self.current_room_id)
        if room is None:
            logger.critical("current room id %s has no room", self.current_room_id)
            raise WorldInvariantError(f"current room id {self.current_room_id} has no room")
        return room

    # building

    def add_room(self, room_id: int, name: str, description: str) -> Room:
        room = Room(id=room_id, name=name, description=description)
        self.rooms[room_id] = room
        return room

    def connect_rooms(self, room: Room, direction: Direction, room2: Room, bidirectional: bool = True) -> None:
        room.add_exit(direction, room2.id)
        self.rooms[room.id] = room
        if bidirectional:
            room2.add_exit(direction.opposite(), room.id)
            self.rooms[room2.id] = room2

    def connect_room_ids(
        self,
        room_id: int,
        direction: Direction,
        room2_id: int,
        bidirectional: bool = True,
    ) -> bool:
        room = self.rooms.get(room_id)
        room2 = self.rooms.get(room2_id)
        if room is None or room2 is None:
            logger.warning("cannot connect rooms %s and %s: at least one room does not exist", room_id, room2_id)
            return False
        self.connect_rooms(room, direction, room2, bidirectional=bidirectional)
        return True

    def add_door(self, door: Door) -> None:
        self.doors.append(door)

    # actions

    def go(self, direction: Direction) -> bool:
        target = self.current_room.exits.get(direction)
        if target is None:
            return False
        # exit targets are trusted; a dangling one surfaces on the next current_room read
        self.current_room_id = target
        return True

    def take(self, item: Item) -> bool:
        taken = self.current_room.remove_item(item)
        if taken is None:
            return False
        self.inventory.append(taken)
        return True

    def open(self, door: Door) -> DoorResult:
        if door not in self.doors_in_room(self.current_room):
            return DoorResult(DoorStatus.DOOR_DOES_NOT_EXIST)
        if not door.can_open(self.inventory):
            return DoorResult(DoorStatus.MISSING_ITEM_TO_OPEN, item=door.requires_item)

        room_id, room2_id = door.between_rooms
        self.connect_room_ids(room_id, door.direction_from(room_id), room2_id, bidirectional=True)
        if door.requires_item is not None:
            self.inventory.remove(door.requires_item)
        self.doors.remove(door)
        return DoorResult(DoorStatus.DOOR_DID_OPEN)

    def use(self, item: Item, indirect_item: Item | None = None) -> ItemResult:
        if indirect_item is not None:
            return self.combine(item, indirect_item)
        if item.effect is None:
            return ItemResult.NO_EFFECT
        if item.effect is Effect.LIGHT:
            self.flags.add("light")
        return ItemResult.ITEM_HAD_EFFECT

    def combine(self, item: Item, indirect_item: Item) -> ItemResult:
        if item.combine_partner_name != indirect_item.name:
            return ItemResult.ITEMS_CANNOT_BE_COMBINED
        if indirect_item.combine_partner_name != item.name:
            return ItemResult.ITEMS_CANNOT_BE_COMBINED
        if item.replacement_name is None:
            return ItemResult.ITEMS_CANNOT_BE_COMBINED

        replacement = self.catalog.resolve(item.replacement_name)
        if replacement is None:
            return ItemResult.ITEM_HAD_NO_EFFECT

        for used in (item, indirect_item):
            if used in self.inventory:
                self.inventory.remove(used)
        self.inventory.append(replacement)
        return ItemResult.ITEM_HAD_EFFECT

    # queries

    def doors_in_room(self, room: Room) -> list[Door]:
        return [door for door in self.doors if door.connects(room.id)]

    def door_named(self, name: str) -> Door | None:
        wanted = name.strip().lower()
        for door in self.doors_in_room(self.current_room):
            if door.name.lower() == wanted:
                return door
        return None

    def inventory_item(self, name: str) -> Item | None:
        return _find_item(self.inventory, name)

    def room_item(self, name: str) -> Item | None:
        return _find_item(self.current_room.items, name)


def _find_item(items: list[Item], name: str) -> Item | None:
    wanted = name.strip().lower()
    for item in items:
        if item.name.lower() == wanted:
            return item
    return None
