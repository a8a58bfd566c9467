import random
import unittest
from collections import Counter

from recruitbot.errors import InvalidBoost
from recruitbot.gacha import PriorityPool
from recruitbot.models import Character, Language, LocalizedName, Rarity


def make_character(identifier: str, rarity: Rarity) -> Character:
    names = LocalizedName({Language.ENGLISH: identifier.title()})
    return Character(identifier=identifier, names=names, rarity=rarity, asset_key=identifier.title())


class PriorityPoolTests(unittest.TestCase):
    def setUp(self) -> None:
        self.a = make_character("a", Rarity.THREE)
        self.b = make_character("b", Rarity.THREE)
        self.c = make_character("c", Rarity.ONE)
        self.pool = [self.a, self.b, self.c]

    def test_fraction_outside_unit_interval_is_rejected(self) -> None:
        for fraction in (-0.1, 1.5, float("nan")):
            with self.subTest(fraction=fraction):
                with self.assertRaises(InvalidBoost):
                    PriorityPool(self.pool, [self.b], fraction)

    def test_boosted_character_outside_pool_is_rejected(self) -> None:
        stranger = make_character("stranger", Rarity.THREE)
        with self.assertRaises(InvalidBoost):
            PriorityPool(self.pool, [stranger], 0.7)

    def test_members_groups_pool_by_rarity(self) -> None:
        pool = PriorityPool(self.pool, [self.b], 0.7)
        self.assertEqual(pool.members(Rarity.THREE), (self.a, self.b))
        self.assertEqual(pool.members(Rarity.ONE), (self.c,))
        self.assertEqual(pool.members(Rarity.TWO), ())

    def test_boosted_share_matches_fraction(self) -> None:
        pool = PriorityPool(self.pool, [self.b], 0.7)
        rng = random.Random(42)
        trials = 1_000_000
        counts = Counter(pool.sample_member(Rarity.THREE, rng).identifier for _ in range(trials))
        self.assertAlmostEqual(counts["b"] / trials, 0.70, delta=0.02)
        self.assertAlmostEqual(counts["a"] / trials, 0.30, delta=0.02)

    def test_boost_is_split_evenly_between_boosted_members(self) -> None:
        d = make_character("d", Rarity.THREE)
        pool = PriorityPool(self.pool + [d], [self.b, d], 0.5)
        rng = random.Random(3)
        trials = 200_000
        counts = Counter(pool.sample_member(Rarity.THREE, rng).identifier for _ in range(trials))
        self.assertAlmostEqual(counts["b"] / trials, 0.25, delta=0.01)
        self.assertAlmostEqual(counts["d"] / trials, 0.25, delta=0.01)
        self.assertAlmostEqual(counts["a"] / trials, 0.50, delta=0.01)

    def test_tier_without_boosted_members_draws_plain(self) -> None:
        pool = PriorityPool(self.pool, [self.b], 1.0)
        rng = random.Random(5)
        self.assertEqual({pool.sample_member(Rarity.ONE, rng) for _ in range(100)}, {self.c})

    def test_all_boosted_tier_falls_back_to_full_tier(self) -> None:
        pool = PriorityPool(self.pool, [self.a, self.b], 0.0)
        rng = random.Random(9)
        drawn = {pool.sample_member(Rarity.THREE, rng) for _ in range(1000)}
        self.assertEqual(drawn, {self.a, self.b})

    def test_boosted_keeps_pool_order(self) -> None:
        pool = PriorityPool(self.pool, [self.b, self.a], 0.7)
        self.assertEqual(pool.boosted, (self.a, self.b))

    def test_member_shares(self) -> None:
        pool = PriorityPool(self.pool, [self.b], 0.7)
        shares = pool.member_shares(Rarity.THREE)
        self.assertAlmostEqual(shares[self.b], 0.7)
        self.assertAlmostEqual(shares[self.a], 0.3)
        self.assertEqual(pool.member_shares(Rarity.ONE), {self.c: 1.0})
        self.assertEqual(pool.member_shares(Rarity.TWO), {})


if __name__ == "__main__":
    unittest.main()
