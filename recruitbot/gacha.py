"""Weighted recruitment engine: rarity model, rate-up pool and sampling."""

from __future__ import annotations

import logging
import math
import random
from bisect import bisect_right
from typing import Dict, Iterable, List, Mapping, Sequence, Tuple

from .errors import DuplicateCharacter, EmptyTierPool, InvalidBoost, InvalidWeights
from .models import Character, Rarity

logger = logging.getLogger("recruitbot.gacha")

WEIGHT_TOTAL = 100.0
WEIGHT_TOLERANCE = 1e-6


class RarityModel:
    """Per-rarity draw probabilities, expressed in percent."""

    def __init__(self, weights: Mapping[Rarity, float]) -> None:
        resolved: Dict[Rarity, float] = {}
        for rarity in Rarity:
            value = float(weights.get(rarity, 0.0))
            if math.isnan(value) or value < 0:
                raise InvalidWeights(f"Weight for rarity {int(rarity)} must be non-negative, got {value}")
            resolved[rarity] = value
        unknown = [key for key in weights if key not in resolved]
        if unknown:
            raise InvalidWeights(f"Unknown rarities in weight table: {unknown}")

        total = sum(resolved.values())
        if abs(total - WEIGHT_TOTAL) > WEIGHT_TOLERANCE:
            raise InvalidWeights(f"Rarity weights must sum to 100%, got {total}%")

        self._weights = resolved
        self._tiers: Tuple[Rarity, ...] = tuple(Rarity)

        # Upper bounds of half-open intervals over [0, 1).
        bounds: List[float] = []
        running = 0.0
        for rarity in self._tiers:
            running += resolved[rarity] / WEIGHT_TOTAL
            bounds.append(running)
        last_nonzero = max(i for i, rarity in enumerate(self._tiers) if resolved[rarity] > 0)
        for i in range(last_nonzero, len(bounds)):
            bounds[i] = 1.0
        self._bounds = tuple(bounds)

    def weight(self, rarity: Rarity) -> float:
        return self._weights[rarity]

    def probability(self, rarity: Rarity) -> float:
        return self._weights[rarity] / WEIGHT_TOTAL

    def active_tiers(self) -> Tuple[Rarity, ...]:
        return tuple(rarity for rarity in self._tiers if self._weights[rarity] > 0)

    def sample_tier(self, rng: random.Random) -> Rarity:
        u = rng.random()
        return self._tiers[bisect_right(self._bounds, u)]

    def __repr__(self) -> str:
        table = ", ".join(f"{int(r)}*={w}" for r, w in self._weights.items())
        return f"RarityModel({table})"


class PriorityPool:
    """Splits each rarity between rate-up characters and everyone else."""

    def __init__(
        self,
        pool: Sequence[Character],
        boosted: Iterable[Character] = (),
        fraction: float = 0.0,
    ) -> None:
        fraction = float(fraction)
        if math.isnan(fraction) or not 0.0 <= fraction <= 1.0:
            raise InvalidBoost(f"Rate-up fraction must be within [0, 1], got {fraction}")

        pool_ids = {character.identifier for character in pool}
        boosted_ids = set()
        for character in boosted:
            if character.identifier not in pool_ids:
                raise InvalidBoost(f"Rate-up character '{character.identifier}' is not in the pool")
            boosted_ids.add(character.identifier)

        self._fraction = fraction
        self._boosted = tuple(c for c in pool if c.identifier in boosted_ids)
        self._members: Dict[Rarity, Tuple[Character, ...]] = {}
        self._boosted_by_tier: Dict[Rarity, Tuple[Character, ...]] = {}
        self._plain_by_tier: Dict[Rarity, Tuple[Character, ...]] = {}
        for rarity in Rarity:
            members = tuple(c for c in pool if c.rarity == rarity)
            self._members[rarity] = members
            self._boosted_by_tier[rarity] = tuple(c for c in members if c.identifier in boosted_ids)
            self._plain_by_tier[rarity] = tuple(c for c in members if c.identifier not in boosted_ids)

    @property
    def fraction(self) -> float:
        return self._fraction

    @property
    def boosted(self) -> Tuple[Character, ...]:
        return self._boosted

    def members(self, rarity: Rarity) -> Tuple[Character, ...]:
        return self._members[rarity]

    def sample_member(self, rarity: Rarity, rng: random.Random) -> Character:
        boosted = self._boosted_by_tier[rarity]
        if boosted and rng.random() < self._fraction:
            return rng.choice(boosted)
        plain = self._plain_by_tier[rarity]
        return rng.choice(plain or self._members[rarity])

    def member_shares(self, rarity: Rarity) -> Dict[Character, float]:
        """Probability of each member given that ``rarity`` was drawn."""
        boosted = self._boosted_by_tier[rarity]
        plain = self._plain_by_tier[rarity]
        shares: Dict[Character, float] = {}
        if not boosted:
            for character in plain:
                shares[character] = 1.0 / len(plain)
            return shares
        if not plain:
            for character in boosted:
                shares[character] = 1.0 / len(boosted)
            return shares
        for character in boosted:
            shares[character] = self._fraction / len(boosted)
        for character in plain:
            shares[character] = (1.0 - self._fraction) / len(plain)
        return shares


class RecruitmentEngine:
    """Draws characters from a pool according to rarity weights and rate-ups."""

    def __init__(
        self,
        pool: Sequence[Character],
        weights: Mapping[Rarity, float],
        boosted: Iterable[Character] = (),
        boost_fraction: float = 0.0,
    ) -> None:
        pool = tuple(pool)
        seen = set()
        for character in pool:
            if character.identifier in seen:
                raise DuplicateCharacter(f"Character '{character.identifier}' appears twice in the pool")
            seen.add(character.identifier)

        rarity_model = RarityModel(weights)
        priority_pool = PriorityPool(pool, boosted, boost_fraction)
        for rarity in rarity_model.active_tiers():
            if not priority_pool.members(rarity):
                raise EmptyTierPool(
                    f"Rarity {int(rarity)} has weight {rarity_model.weight(rarity)}% but no characters"
                )

        self._pool = pool
        self._rarity_model = rarity_model
        self._priority_pool = priority_pool
        logger.debug(
            "Built recruitment engine: %d characters, %r, %d rate-up at %.0f%%",
            len(pool),
            rarity_model,
            len(self._priority_pool.boosted),
            self._priority_pool.fraction * 100,
        )

    @property
    def pool(self) -> Tuple[Character, ...]:
        return self._pool

    @property
    def rarity_model(self) -> RarityModel:
        return self._rarity_model

    @property
    def priority_pool(self) -> PriorityPool:
        return self._priority_pool

    def sample_one(self, rng: random.Random) -> Character:
        rarity = self._rarity_model.sample_tier(rng)
        return self._priority_pool.sample_member(rarity, rng)

    def sample_many(self, n: int, rng: random.Random) -> Tuple[Character, ...]:
        if n < 0:
            raise ValueError("Number of draws must be non-negative")
        return tuple(self.sample_one(rng) for _ in range(n))

    def rate_table(self) -> Dict[Character, float]:
        """Exact per-character draw probability, in percent."""
        rates: Dict[Character, float] = {}
        for rarity in self._rarity_model.active_tiers():
            weight = self._rarity_model.weight(rarity)
            for character, share in self._priority_pool.member_shares(rarity).items():
                rates[character] = weight * share
        return rates


__all__ = [
    "PriorityPool",
    "RarityModel",
    "RecruitmentEngine",
    "WEIGHT_TOLERANCE",
    "WEIGHT_TOTAL",
]
