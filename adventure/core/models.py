from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType


class Direction(str, Enum):
    NORTH = "NORTH"
    SOUTH = "SOUTH"
    EAST = "EAST"
    WEST = "WEST"

    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    @classmethod
    def parse(cls, text: str) -> Direction:
        value = text.strip().upper()
        for direction in cls:
            if value in (direction.value, direction.value[0]):
                return direction
        raise ValueError(f"unknown direction {text!r}")


_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}


class Effect(str, Enum):
    LIGHT = "light"


@dataclass(frozen=True)
class Item:
    """Takeable object. Two items are the same item when their names match."""

    name: str
    effect: Effect | None = field(default=None, compare=False)
    combine_partner_name: str | None = field(default=None, compare=False)
    replacement_name: str | None = field(default=None, compare=False)


class ItemCatalog(Mapping[str, Item]):
    """Read-only registry of canonical items, keyed by name."""

    def __init__(self, items: Iterable[Item] = ()):
        self._items = MappingProxyType({item.name: item for item in items})

    def __getitem__(self, name: str) -> Item:
        return self._items[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def resolve(self, name: str) -> Item | None:
        return self._items.get(name)


class ItemResult(str, Enum):
    NO_EFFECT = "noEffect"
    ITEM_HAD_EFFECT = "itemHadEffect"
    ITEMS_CANNOT_BE_COMBINED = "itemsCannotBeCombined"
    ITEM_HAD_NO_EFFECT = "itemHadNoEffect"


class DoorStatus(str, Enum):
    DOOR_DOES_NOT_EXIST = "doorDoesNotExist"
    DOOR_DID_OPEN = "doorDidOpen"
    MISSING_ITEM_TO_OPEN = "missingItemToOpen"


@dataclass(frozen=True)
class DoorResult:
    status: DoorStatus
    item: Item | None = None  # set for MISSING_ITEM_TO_OPEN

    @property
    def opened(self) -> bool:
        return self.status is DoorStatus.DOOR_DID_OPEN


@dataclass
class Room:
    id: int
    name: str
    description: str
    exits: dict[Direction, int] = field(default_factory=dict)
    items: list[Item] = field(default_factory=list)

    def add_exit(self, direction: Direction, target_room_id: int) -> None:
        self.exits[direction] = target_room_id

    def add_item(self, item: Item) -> None:
        self.items.append(item)

    def remove_item(self, item: Item) -> Item | None:
        for index, held in enumerate(self.items):
            if held == item:
                return self.items.pop(index)
        return None


@dataclass(frozen=True)
class Door:
    """Gate between two rooms.

    ``between_rooms`` maps each endpoint to the direction the passage leaves
    that room in. Doors built with ``create`` are checked; doors restored from
    a save are taken as written.
    """

    name: str
    between_rooms: dict[int, Direction]
    requires_item: Item | None = None

    def __hash__(self) -> int:
        return hash((self.name, frozenset(self.between_rooms.items()), self.requires_item))

    def validate(self) -> None:
        if len(self.between_rooms) != 2:
            raise ValueError(f"door {self.name!r} must join exactly two rooms")
        first, second = self.between_rooms.values()
        if first.opposite() is not second:
            raise ValueError(f"door {self.name!r} directions {first.value}/{second.value} are not opposites")

    @classmethod
    def create(
        cls,
        room1_id: int,
        facing: Direction,
        room2_id: int,
        item_to_open: Item | None = None,
        name: str = "DOOR",
    ) -> Door:
        if room1_id == room2_id:
            raise ValueError(f"door {name!r} cannot join room {room1_id} to itself")
        door = cls(
            name=name,
            between_rooms={room1_id: facing, room2_id: facing.opposite()},
            requires_item=item_to_open,
        )
        door.validate()
        return door

    def can_open(self, inventory: Iterable[Item]) -> bool:
        if self.requires_item is None:
            return True
        return self.requires_item in inventory

    def connects(self, room_id: int) -> bool:
        return room_id in self.between_rooms

    def direction_from(self, room_id: int) -> Direction:
        if room_id not in self.between_rooms:
            raise KeyError(f"door {self.name!r} is not in room {room_id}")
        return self.between_rooms[room_id]
