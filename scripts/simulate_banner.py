"""Run many draws against a banner and compare observed rates to configured ones."""

import argparse
import random
from collections import Counter
from pathlib import Path
from typing import List, Optional, Sequence

from recruitbot.banner import Banner, build_banner
from recruitbot.catalog import load_catalog
from recruitbot.errors import RecruitmentError
from recruitbot.models import Rarity
from recruitbot.settings import load_banner_config


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--catalog", type=Path, default=Path("data/students.json"))
    parser.add_argument("--banner", type=Path, default=None, help="JSON or YAML banner config")
    parser.add_argument("-n", "--draws", type=int, default=100_000)
    parser.add_argument("--seed", type=int, default=None)
    return parser.parse_args(argv)


def summarize(banner: Banner, draws: int, rng: random.Random) -> List[str]:
    rarity_counts: Counter = Counter()
    character_counts: Counter = Counter()
    for character in banner.engine.sample_many(draws, rng):
        rarity_counts[character.rarity] += 1
        character_counts[character.identifier] += 1

    model = banner.engine.rarity_model
    lines = [f"{banner.name}: {draws} draws"]
    for rarity in Rarity:
        observed = 100.0 * rarity_counts[rarity] / draws if draws else 0.0
        lines.append(f"  {int(rarity)}*  expected {model.weight(rarity):6.3f}%  observed {observed:6.3f}%")

    rates = banner.engine.rate_table()
    for character in banner.boosted_characters():
        observed = 100.0 * character_counts[character.identifier] / draws if draws else 0.0
        lines.append(
            f"  rate-up {character.identifier:<10} expected {rates[character]:6.3f}%  observed {observed:6.3f}%"
        )
    return lines


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    if args.draws < 0:
        raise SystemExit("--draws must be non-negative.")
    try:
        banner = build_banner(load_banner_config(args.banner), load_catalog(args.catalog))
    except RecruitmentError as exc:
        raise SystemExit(str(exc))

    for line in summarize(banner, args.draws, random.Random(args.seed)):
        print(line)


if __name__ == "__main__":
    main()
