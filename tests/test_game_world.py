"""
Unit tests for the authoritative game world.
"""

import random
import unittest

from server.entities import Collectible, EntityFactory
from server.game_world import GameWorld, WorldConfig


def make_world() -> GameWorld:
    return GameWorld(factory=EntityFactory(position_rng=random.Random(1234)))


def park_away_from_coin(world: GameWorld, player_id: str):
    """Put a player on the far side of the area from the collectible."""
    player = world.players[player_id]
    player.x = 570 if world.collectible.x < 300 else 0
    player.y = 0


class TestMembership(unittest.TestCase):
    """Joins and leaves only land on tick."""

    def setUp(self):
        self.world = make_world()

    def test_join_applied_on_next_tick(self):
        self.world.enqueue_join("a")
        self.assertEqual(self.world.player_count, 0)
        self.world.tick()
        self.assertEqual(self.world.player_count, 1)
        player = self.world.get_player("a")
        self.assertEqual(player.score, 0)
        self.assertTrue(self.world.bounds.contains(player.rect(30, 30)))

    def test_pending_buffer_reset_each_tick(self):
        self.world.enqueue_join("a")
        self.world.tick()
        self.assertEqual(self.world.pending.joins, [])
        self.assertEqual(self.world.pending.leaves, [])

    def test_leave_applied_on_next_tick(self):
        self.world.enqueue_join("a")
        self.world.tick()
        self.world.enqueue_leave("a")
        self.assertIsNotNone(self.world.get_player("a"))
        self.world.tick()
        self.assertIsNone(self.world.get_player("a"))

    def test_leave_drops_input_set_in_same_window(self):
        self.world.enqueue_join("x")
        self.world.tick()
        self.world.enqueue_leave("x")
        self.world.set_input("x", 1, 0)
        self.world.tick()
        self.assertNotIn("x", self.world.players)
        self.assertNotIn("x", self.world.inputs)

    def test_join_and_leave_in_same_window_nets_to_nothing(self):
        self.world.enqueue_join("a")
        self.world.set_input("a", 1, 0)
        self.world.enqueue_leave("a")
        self.world.tick()
        self.assertEqual(self.world.player_count, 0)
        self.assertEqual(self.world.inputs, {})

    def test_duplicate_join_ignored(self):
        self.world.enqueue_join("a")
        self.world.tick()
        before = self.world.get_player("a")
        self.world.enqueue_join("a")
        self.world.tick()
        self.assertEqual(self.world.player_count, 1)
        self.assertIs(self.world.get_player("a"), before)

    def test_leave_for_unknown_player_is_harmless(self):
        self.world.enqueue_leave("ghost")
        self.world.tick()
        self.assertEqual(self.world.player_count, 0)

    def test_join_order_kept_net_of_removals(self):
        for pid in ("a", "b", "c"):
            self.world.enqueue_join(pid)
        self.world.tick()
        self.world.enqueue_leave("b")
        self.world.enqueue_join("d")
        self.world.tick()
        self.assertEqual(list(self.world.players), ["a", "c", "d"])


class TestInput(unittest.TestCase):

    def setUp(self):
        self.world = make_world()
        self.world.enqueue_join("a")
        self.world.tick()

    def test_unknown_player_ignored(self):
        self.world.set_input("nobody", 1, 0)
        self.assertNotIn("nobody", self.world.inputs)

    def test_pending_join_accepts_input(self):
        self.world.enqueue_join("b")
        self.world.set_input("b", 0, 1)
        self.assertEqual(self.world.inputs["b"], (0, 1))

    def test_input_is_normalized(self):
        self.world.set_input("a", 5, 5)
        dx, dy = self.world.inputs["a"]
        self.assertAlmostEqual(dx * dx + dy * dy, 1.0)

    def test_latest_input_wins(self):
        self.world.set_input("a", 1, 0)
        self.world.set_input("a", -1, 0)
        self.assertEqual(self.world.inputs["a"], (-1, 0))


class TestMovement(unittest.TestCase):

    def setUp(self):
        self.world = make_world()
        self.world.enqueue_join("a")
        self.world.tick()
        self.player = self.world.get_player("a")

    def test_no_input_no_movement(self):
        x, y = self.player.x, self.player.y
        for _ in range(10):
            self.world.tick()
        self.assertEqual((self.player.x, self.player.y), (x, y))

    def test_moves_speed_per_tick(self):
        self.player.x, self.player.y = 100, 100
        self.world.set_input("a", 1, 0)
        for _ in range(12):
            self.world.tick()
        self.assertEqual(self.player.x, 100 + 5 * 12)
        self.assertEqual(self.player.y, 100)

    def test_input_applies_every_tick_until_changed(self):
        self.player.x, self.player.y = 200, 200
        self.world.set_input("a", 0, -1)
        self.world.tick()
        self.world.tick()
        self.world.set_input("a", 0, 0)
        self.world.tick()
        self.assertEqual(self.player.y, 190)

    def test_clamped_at_edges(self):
        self.player.x, self.player.y = 2, 368
        self.world.set_input("a", -1, 0)
        self.world.tick()
        self.assertEqual(self.player.x, 0)
        self.world.set_input("a", 0, 1)
        self.world.tick()
        self.assertEqual(self.player.y, 370)

    def test_custom_speed(self):
        world = GameWorld(config=WorldConfig(player_speed=2),
                          factory=EntityFactory(position_rng=random.Random(5)))
        world.enqueue_join("a")
        world.tick()
        player = world.get_player("a")
        player.x, player.y = 50, 50
        world.set_input("a", 1, 0)
        world.tick()
        self.assertEqual(player.x, 52)

    def test_everything_stays_in_bounds(self):
        rng = random.Random(99)
        for pid in ("a", "b", "c"):
            self.world.enqueue_join(pid)
        for _ in range(300):
            for pid in ("a", "b", "c"):
                self.world.set_input(pid, rng.uniform(-50, 50), rng.uniform(-50, 50))
            self.world.tick()
            for player in self.world.players.values():
                self.assertTrue(self.world.bounds.contains(player.rect(30, 30)))
            self.assertTrue(self.world.bounds.contains(self.world.collectible.rect(15, 15)))


class TestPickup(unittest.TestCase):

    def setUp(self):
        self.world = make_world()
        for pid in ("first", "second"):
            self.world.enqueue_join(pid)
        self.world.tick()
        for pid in ("first", "second"):
            park_away_from_coin(self.world, pid)

    def test_collectible_exists_from_start(self):
        self.assertEqual(make_world().collectible.id, "1")

    def test_no_pickup_keeps_collectible(self):
        coin = self.world.collectible
        for _ in range(5):
            self.assertIsNone(self.world.tick())
        self.assertIs(self.world.collectible, coin)

    def test_pickup_awards_value_and_respawns(self):
        coin = self.world.collectible
        player = self.world.get_player("second")
        player.x, player.y = coin.x, coin.y

        pickup = self.world.tick()

        self.assertIsNotNone(pickup)
        self.assertEqual(pickup.player_id, "second")
        self.assertEqual(pickup.collectible_id, coin.id)
        self.assertEqual(player.score, coin.value)
        self.assertEqual(pickup.new_score, coin.value)
        self.assertGreater(int(self.world.collectible.id), int(coin.id))

    def test_first_in_join_order_wins_tie(self):
        self.world.collectible = Collectible(id="50", x=200, y=200, value=3)
        for pid in ("second", "first"):
            p = self.world.get_player(pid)
            p.x, p.y = 190, 190

        pickup = self.world.tick()

        self.assertEqual(pickup.player_id, "first")
        self.assertEqual(self.world.get_player("first").score, 3)
        self.assertEqual(self.world.get_player("second").score, 0)
        self.assertNotEqual(self.world.collectible.id, "50")

    def test_one_pickup_per_tick(self):
        coin = self.world.collectible
        first = self.world.get_player("first")
        first.x, first.y = coin.x, coin.y
        self.world.tick()
        # The respawned coin may land anywhere, but only one id was consumed
        self.assertEqual(int(self.world.collectible.id), int(coin.id) + 1)

    def test_scores_accumulate(self):
        player = self.world.get_player("first")
        total = 0
        for _ in range(5):
            coin = self.world.collectible
            total += coin.value
            player.x, player.y = coin.x, coin.y
            self.world.tick()
        self.assertEqual(player.score, total)

    def test_collectible_id_only_increases_on_pickup(self):
        ids = []
        base = int(self.world.collectible.id)
        player = self.world.get_player("first")
        for i in range(10):
            if i % 3 == 0:
                coin = self.world.collectible
                player.x, player.y = coin.x, coin.y
            else:
                park_away_from_coin(self.world, "first")
            park_away_from_coin(self.world, "second")
            self.world.tick()
            ids.append(int(self.world.collectible.id) - base)
        self.assertEqual(ids, [1, 1, 1, 2, 2, 2, 3, 3, 3, 4])


class TestSnapshot(unittest.TestCase):

    def test_snapshot_shape(self):
        world = make_world()
        world.enqueue_join("a")
        world.enqueue_join("b")
        world.tick()
        data = world.snapshot().to_dict()
        self.assertEqual([p["id"] for p in data["players"]], ["a", "b"])
        self.assertEqual(set(data["players"][0]), {"id", "x", "y", "score"})
        self.assertEqual(set(data["collectible"]), {"x", "y", "value", "id"})

    def test_snapshot_does_not_mutate(self):
        world = make_world()
        world.enqueue_join("a")
        world.tick()
        world.enqueue_join("b")
        first = world.snapshot().to_dict()
        second = world.snapshot().to_dict()
        self.assertEqual(first, second)
        self.assertEqual(len(first["players"]), 1)
        self.assertEqual(world.pending.joins, ["b"])


if __name__ == "__main__":
    unittest.main()
