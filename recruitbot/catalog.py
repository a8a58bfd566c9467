"""Character catalog loading."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Mapping, Sequence, Tuple

from .errors import CatalogError
from .models import Character, Language, LocalizedName, Rarity

logger = logging.getLogger("recruitbot.catalog")


def _parse_names(raw: object, position: int) -> LocalizedName:
    if not isinstance(raw, Mapping):
        raise CatalogError(f"Catalog entry {position}: 'names' must be an object")
    entries: Dict[Language, str] = {}
    for code, text in raw.items():
        try:
            language = Language.parse(code)
        except ValueError:
            logger.debug("Catalog entry %s: ignoring unsupported language %s", position, code)
            continue
        if isinstance(text, str) and text.strip():
            entries[language] = text.strip()
    if not entries:
        raise CatalogError(f"Catalog entry {position}: no usable names")
    return LocalizedName(entries)


def parse_character(entry: object, position: int = 0) -> Character:
    if not isinstance(entry, Mapping):
        raise CatalogError(f"Catalog entry {position} must be an object")

    identifier = entry.get("id")
    if not isinstance(identifier, str) or not identifier.strip():
        raise CatalogError(f"Catalog entry {position} is missing an 'id'")
    identifier = identifier.strip().lower()

    names = _parse_names(entry.get("names"), position)

    try:
        rarity = Rarity.parse(entry.get("rarity"))
    except (KeyError, ValueError) as exc:
        raise CatalogError(f"Catalog entry {position} ({identifier}): invalid rarity {entry.get('rarity')!r}") from exc

    asset_key = entry.get("asset")
    if not isinstance(asset_key, str) or not asset_key.strip():
        # CDN art is keyed by the English name unless overridden.
        asset_key = names.get(Language.ENGLISH) if Language.ENGLISH in names else str(names)
    return Character(identifier=identifier, names=names, rarity=rarity, asset_key=asset_key.strip())


def parse_catalog(payload: object) -> Tuple[Character, ...]:
    if not isinstance(payload, list):
        raise CatalogError("Character catalog must be a JSON array")
    characters: List[Character] = []
    seen = set()
    for position, entry in enumerate(payload):
        character = parse_character(entry, position)
        if character.identifier in seen:
            raise CatalogError(f"Catalog lists '{character.identifier}' more than once")
        seen.add(character.identifier)
        characters.append(character)
    return tuple(characters)


def load_catalog(path: Path) -> Tuple[Character, ...]:
    """Read the character catalog. Any failure here is fatal at startup."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise CatalogError(f"Unable to read character catalog {path}: {exc}") from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CatalogError(f"Failed to parse character catalog {path}: {exc}") from exc
    characters = parse_catalog(payload)
    counts = count_by_rarity(characters)
    logger.info(
        "Loaded %d characters from %s (%s)",
        len(characters),
        path,
        ", ".join(f"{int(rarity)}*: {count}" for rarity, count in counts.items()),
    )
    return characters


def count_by_rarity(characters: Sequence[Character]) -> Dict[Rarity, int]:
    counts = {rarity: 0 for rarity in Rarity}
    for character in characters:
        counts[character.rarity] += 1
    return counts


__all__ = ["count_by_rarity", "load_catalog", "parse_catalog", "parse_character"]
