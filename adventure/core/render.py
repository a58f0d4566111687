from __future__ import annotations

from adventure.core.world import World


def render_room(world: World) -> str:
    room = world.current_room
    lines: list[str] = []
    lines.append(f"== {room.name} ==")
    lines.append("")
    lines.append(room.description)
    lines.append("")

    if room.exits:
        lines.append("Exits: " + ", ".join(sorted(direction.value for direction in room.exits)))
    else:
        lines.append("Exits: none")

    if room.items:
        lines.append("You see: " + ", ".join(item.name for item in room.items))

    for door in world.doors_in_room(room):
        facing = door.direction_from(room.id).value
        if door.requires_item is None:
            status = "closed"
        elif door.can_open(world.inventory):
            status = "locked, you have the key"
        else:
            status = "locked"
        lines.append(f"Door: {door.name} to the {facing} ({status})")

    return "\n".join(lines)


def render_inventory(world: World) -> str:
    if not world.inventory:
        return "Inventory: (empty)"
    return "Inventory: " + ", ".join(item.name for item in world.inventory)
