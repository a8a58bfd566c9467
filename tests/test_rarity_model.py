import random
import unittest
from collections import Counter

from recruitbot.errors import InvalidWeights
from recruitbot.gacha import RarityModel
from recruitbot.models import Rarity


class FixedRandom:
    def __init__(self, *values: float) -> None:
        self._values = list(values)

    def random(self) -> float:
        return self._values.pop(0)


STANDARD = {Rarity.ONE: 79.0, Rarity.TWO: 18.5, Rarity.THREE: 2.5}


class RarityModelTests(unittest.TestCase):
    def test_weights_must_sum_to_one_hundred(self) -> None:
        with self.assertRaises(InvalidWeights):
            RarityModel({Rarity.ONE: 79.0, Rarity.TWO: 18.5, Rarity.THREE: 1.5})
        with self.assertRaises(InvalidWeights):
            RarityModel({Rarity.ONE: 80.0, Rarity.TWO: 18.5, Rarity.THREE: 2.5})

    def test_rounding_within_tolerance_is_accepted(self) -> None:
        model = RarityModel({Rarity.ONE: 79.0000001, Rarity.TWO: 18.5, Rarity.THREE: 2.5})
        self.assertAlmostEqual(model.probability(Rarity.ONE), 0.79, places=6)

    def test_negative_weight_is_rejected(self) -> None:
        with self.assertRaises(InvalidWeights):
            RarityModel({Rarity.ONE: 105.0, Rarity.TWO: -5.0})

    def test_unknown_rarity_key_is_rejected(self) -> None:
        with self.assertRaises(InvalidWeights):
            RarityModel({Rarity.ONE: 50.0, "four": 50.0})

    def test_plain_integer_keys_are_accepted(self) -> None:
        model = RarityModel({1: 79, 2: 18.5, 3: 2.5})
        self.assertEqual(model.weight(Rarity.TWO), 18.5)
        self.assertEqual(model.active_tiers(), (Rarity.ONE, Rarity.TWO, Rarity.THREE))

    def test_intervals_are_half_open(self) -> None:
        model = RarityModel(STANDARD)
        self.assertIs(model.sample_tier(FixedRandom(0.0)), Rarity.ONE)
        self.assertIs(model.sample_tier(FixedRandom(0.789999)), Rarity.ONE)
        self.assertIs(model.sample_tier(FixedRandom(0.79)), Rarity.TWO)
        self.assertIs(model.sample_tier(FixedRandom(0.9749)), Rarity.TWO)
        self.assertIs(model.sample_tier(FixedRandom(0.9751)), Rarity.THREE)
        self.assertIs(model.sample_tier(FixedRandom(0.9999999999)), Rarity.THREE)

    def test_tier_frequencies_match_weights(self) -> None:
        model = RarityModel(STANDARD)
        rng = random.Random(20210204)
        trials = 1_000_000
        counts = Counter(model.sample_tier(rng) for _ in range(trials))
        for rarity, weight in STANDARD.items():
            observed = 100.0 * counts[rarity] / trials
            self.assertAlmostEqual(observed, weight, delta=0.5, msg=f"rarity {int(rarity)}")

    def test_zero_weight_tier_is_never_sampled(self) -> None:
        model = RarityModel({Rarity.ONE: 0.0, Rarity.TWO: 90.0, Rarity.THREE: 10.0})
        rng = random.Random(7)
        counts = Counter(model.sample_tier(rng) for _ in range(100_000))
        self.assertEqual(counts[Rarity.ONE], 0)
        self.assertGreater(counts[Rarity.THREE], 0)

    def test_trailing_zero_weight_tier_is_never_sampled(self) -> None:
        model = RarityModel({Rarity.ONE: 100.0})
        self.assertEqual(model.active_tiers(), (Rarity.ONE,))
        self.assertIs(model.sample_tier(FixedRandom(0.9999999999999999)), Rarity.ONE)
        rng = random.Random(11)
        self.assertEqual({model.sample_tier(rng) for _ in range(100_000)}, {Rarity.ONE})


if __name__ == "__main__":
    unittest.main()
