"""Discord embed builders for recruitment results."""

from __future__ import annotations

import logging
from typing import Dict, Optional, Sequence

import discord

from .banner import Banner
from .errors import MissingTranslation
from .models import Character, Language, Rarity
from .utils import utc_now

logger = logging.getLogger("recruitbot.embeds")

BLUE_ARCHIVE_BLUE = discord.Colour.from_rgb(18, 138, 250)
ARCHIVE_URL = "https://www.thearchive.gg/characters"
IMAGE_SOURCE_TEXT = "Image Source: https://thearchive.gg"

RARITY_COLOURS: Dict[Rarity, discord.Colour] = {
    Rarity.ONE: discord.Colour.from_rgb(227, 234, 240),
    Rarity.TWO: discord.Colour.from_rgb(255, 248, 124),
    Rarity.THREE: discord.Colour.from_rgb(253, 198, 229),
}


def rarity_colour(rarity: Rarity) -> discord.Colour:
    return RARITY_COLOURS[rarity]


def english_or_primary(names, label: str) -> str:
    try:
        return names.get(Language.ENGLISH)
    except MissingTranslation:
        logger.warning("%s has no English name; showing %s instead.", label, names)
        return str(names)


def _brand_icon(cdn_url: str) -> str:
    return f"{cdn_url}/Icons/icon-brand.png"


def build_roll_embed(character: Character, cdn_url: str) -> discord.Embed:
    """Single roll: the character art with its rarity stars."""
    english = english_or_primary(character.names, character.identifier)
    embed = discord.Embed(
        title=character.name,
        description=f"{english}\t{character.rarity.stars}",
        url=f"{ARCHIVE_URL}/{character.asset_key}",
        colour=rarity_colour(character.rarity),
        timestamp=utc_now(),
    )
    embed.set_image(url=f"{cdn_url}/Characters/{character.asset_key}.png")
    embed.set_footer(text=IMAGE_SOURCE_TEXT, icon_url=_brand_icon(cdn_url))
    return embed


def build_ten_roll_embed(
    banner: Banner,
    characters: Sequence[Character],
    *,
    cdn_url: str,
    filename: str,
) -> discord.Embed:
    best = max((character.rarity for character in characters), default=Rarity.ONE)
    embed = discord.Embed(
        title=f"{banner.name} 10-roll",
        description=english_or_primary(banner.names, f"Banner {banner.name}"),
        colour=rarity_colour(best),
        timestamp=utc_now(),
    )
    embed.set_image(url=f"attachment://{filename}")
    embed.set_footer(text=IMAGE_SOURCE_TEXT, icon_url=_brand_icon(cdn_url))
    return embed


def build_banner_embed(banner: Banner, *, image_url: Optional[str] = None) -> discord.Embed:
    embed = discord.Embed(
        title=banner.name,
        description=english_or_primary(banner.names, f"Banner {banner.name}"),
        colour=BLUE_ARCHIVE_BLUE,
    )
    if image_url:
        embed.set_image(url=image_url)

    model = banner.engine.rarity_model
    embed.add_field(
        name="Rates",
        value="\n".join(f"{rarity.stars} {model.weight(rarity):g}%" for rarity in Rarity),
        inline=True,
    )
    boosted = banner.boosted_characters()
    if boosted:
        rates = banner.engine.rate_table()
        lines = [
            f"{character.name} ({english_or_primary(character.names, character.identifier)}) "
            f"{rates.get(character, 0.0):.3g}%"
            for character in boosted
        ]
        embed.add_field(name="Rate-Up", value="\n".join(lines), inline=True)
    return embed


__all__ = [
    "BLUE_ARCHIVE_BLUE",
    "RARITY_COLOURS",
    "build_banner_embed",
    "build_roll_embed",
    "build_ten_roll_embed",
    "english_or_primary",
    "rarity_colour",
]
