"""Named, display-ready recruitment banners."""

from __future__ import annotations

import logging
import random
from typing import TYPE_CHECKING, Iterable, Optional, Sequence, Tuple

from .errors import InvalidBoost
from .gacha import RecruitmentEngine
from .models import Character, LocalizedName

if TYPE_CHECKING:
    from .settings import BannerConfig

logger = logging.getLogger("recruitbot.banner")

TEN_ROLL = 10


class Banner:
    """Wraps one recruitment engine with a localized name and its rate-up list."""

    def __init__(
        self,
        name: LocalizedName,
        engine: RecruitmentEngine,
        boosted: Optional[Iterable[Character]] = None,
    ) -> None:
        engine_boosted = engine.priority_pool.boosted
        if boosted is None:
            boosted = engine_boosted
        boosted = tuple(boosted)
        boosted_ids = {character.identifier for character in engine_boosted}
        for character in boosted:
            if character.identifier not in boosted_ids:
                raise InvalidBoost(
                    f"Banner lists '{character.identifier}' as rate-up but the engine does not boost it"
                )
        self._names = name
        self._engine = engine
        self._boosted = boosted

    @property
    def name(self) -> str:
        return str(self._names)

    @property
    def names(self) -> LocalizedName:
        return self._names

    @property
    def engine(self) -> RecruitmentEngine:
        return self._engine

    def localized_name(self, language: object) -> str:
        return self._names.get(language)

    def draw(self, rng: random.Random) -> Character:
        return self._engine.sample_one(rng)

    def draw_ten(self, rng: random.Random) -> Tuple[Character, ...]:
        return self._engine.sample_many(TEN_ROLL, rng)

    def boosted_characters(self) -> Tuple[Character, ...]:
        return self._boosted

    def __repr__(self) -> str:
        return f"<Banner name={self.name!r} pool={len(self._engine.pool)} rate_up={len(self._boosted)}>"


def build_banner(config: "BannerConfig", catalog: Sequence[Character]) -> Banner:
    """Apply a banner configuration to the loaded catalog."""
    excluded = set(config.excluded)
    pool = [character for character in catalog if character.identifier.lower() not in excluded]
    by_id = {character.identifier.lower(): character for character in pool}

    boosted = []
    for identifier in config.boosted:
        character = by_id.get(identifier)
        if character is None:
            raise InvalidBoost(f"Rate-up character '{identifier}' is missing from the pool")
        boosted.append(character)

    engine = RecruitmentEngine(
        pool,
        config.weights,
        boosted=boosted,
        boost_fraction=config.boost_fraction,
    )
    banner = Banner(config.names, engine, boosted=boosted)
    logger.info(
        "Banner %s ready: %d characters (%d excluded), rate-up: %s",
        banner.name,
        len(pool),
        len(catalog) - len(pool),
        ", ".join(character.name for character in boosted) or "none",
    )
    return banner


__all__ = ["Banner", "TEN_ROLL", "build_banner"]
