import unittest

from adventure.core.models import Direction, Door, Effect, Item, ItemCatalog, Room


class DirectionTests(unittest.TestCase):
    def test_opposite_is_an_involution(self):
        for direction in Direction:
            self.assertIs(direction.opposite().opposite(), direction)
            self.assertIsNot(direction.opposite(), direction)

    def test_opposite_pairs(self):
        self.assertIs(Direction.NORTH.opposite(), Direction.SOUTH)
        self.assertIs(Direction.EAST.opposite(), Direction.WEST)

    def test_parse(self):
        self.assertIs(Direction.parse("north"), Direction.NORTH)
        self.assertIs(Direction.parse(" W "), Direction.WEST)
        self.assertIs(Direction.parse("s"), Direction.SOUTH)
        with self.assertRaises(ValueError):
            Direction.parse("up")


class ItemTests(unittest.TestCase):
    def test_equality_is_by_name(self):
        plain = Item("lamp")
        lit = Item("lamp", effect=Effect.LIGHT, combine_partner_name="oil")
        self.assertEqual(plain, lit)
        self.assertEqual(hash(plain), hash(lit))
        self.assertNotEqual(Item("lamp"), Item("key"))

    def test_catalog_is_read_only(self):
        catalog = ItemCatalog([Item("torch", effect=Effect.LIGHT)])
        self.assertEqual(len(catalog), 1)
        self.assertIs(catalog.resolve("torch").effect, Effect.LIGHT)
        self.assertIsNone(catalog.resolve("sword"))
        self.assertIn("torch", catalog)
        with self.assertRaises(TypeError):
            catalog["sword"] = Item("sword")  # type: ignore[index]


class RoomTests(unittest.TestCase):
    def test_add_exit_last_write_wins(self):
        room = Room(id=0, name="Hall", description="")
        room.add_exit(Direction.NORTH, 1)
        room.add_exit(Direction.NORTH, 2)
        self.assertEqual(room.exits, {Direction.NORTH: 2})

    def test_remove_item_takes_first_match_only(self):
        gold = Item("coin", replacement_name="gold")
        room = Room(id=0, name="Hall", description="", items=[gold, Item("key"), Item("coin")])
        removed = room.remove_item(Item("coin"))
        self.assertIs(removed, gold)
        self.assertEqual(removed.replacement_name, "gold")
        self.assertEqual(room.items, [Item("key"), Item("coin")])

    def test_remove_missing_item_is_a_noop(self):
        room = Room(id=0, name="Hall", description="", items=[Item("key")])
        self.assertIsNone(room.remove_item(Item("lamp")))
        self.assertEqual(room.items, [Item("key")])


class DoorTests(unittest.TestCase):
    def test_create_records_opposite_directions(self):
        door = Door.create(0, Direction.SOUTH, 1, item_to_open=Item("key"))
        self.assertEqual(door.name, "DOOR")
        self.assertEqual(door.between_rooms, {0: Direction.SOUTH, 1: Direction.NORTH})
        self.assertIs(door.direction_from(1), Direction.NORTH)
        self.assertTrue(door.connects(0))
        self.assertFalse(door.connects(2))

    def test_direction_from_foreign_room_raises(self):
        door = Door.create(0, Direction.EAST, 1)
        with self.assertRaises(KeyError):
            door.direction_from(5)

    def test_can_open(self):
        self.assertTrue(Door.create(0, Direction.EAST, 1).can_open([]))
        locked = Door.create(0, Direction.EAST, 1, item_to_open=Item("key"))
        self.assertFalse(locked.can_open([Item("lamp")]))
        self.assertTrue(locked.can_open([Item("lamp"), Item("key")]))

    def test_invalid_doors_are_rejected(self):
        with self.assertRaises(ValueError):
            Door.create(3, Direction.NORTH, 3)
        with self.assertRaises(ValueError):
            Door(name="D", between_rooms={0: Direction.NORTH, 1: Direction.NORTH}).validate()
        with self.assertRaises(ValueError):
            Door(name="D", between_rooms={0: Direction.NORTH}).validate()

    def test_plain_construction_is_unchecked(self):
        door = Door(name="D", between_rooms={0: Direction.SOUTH, 1: Direction.SOUTH})
        self.assertIs(door.direction_from(1), Direction.SOUTH)

    def test_doors_are_hashable(self):
        first = Door.create(0, Direction.EAST, 1, item_to_open=Item("key"), name="GATE")
        same = Door.create(1, Direction.WEST, 0, item_to_open=Item("key"), name="GATE")
        other = Door.create(0, Direction.EAST, 1, name="GATE")
        self.assertEqual(first, same)
        self.assertEqual(hash(first), hash(same))
        self.assertEqual(len({first, same, other}), 2)


if __name__ == "__main__":
    unittest.main()
