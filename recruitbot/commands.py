"""Recruitment command handlers."""

from __future__ import annotations

import io
import logging
import random
import time
from typing import Iterable, Optional, Tuple

import discord
from discord.ext import commands

from .banner import Banner
from .collage import CollageCompositor
from .embeds import build_banner_embed, build_roll_embed, build_ten_roll_embed
from .errors import CompositeEncodingFailure
from .models import Character
from .thumbnails import ThumbnailFetcher

logger = logging.getLogger("recruitbot.commands")

TEN_ROLL_FAILURE_MESSAGE = "アロナ failed to perform your 10-roll. Please try again"


def _author_label(author: discord.abc.User) -> str:
    discriminator = getattr(author, "discriminator", "0")
    if discriminator and discriminator != "0":
        return f"{author.name}#{discriminator}"
    return author.name


class RecruitmentManager:
    """Owns the banner, random source and collage pipeline for the bot."""

    def __init__(
        self,
        *,
        bot: commands.Bot,
        banner: Banner,
        fetcher: ThumbnailFetcher,
        compositor: CollageCompositor,
        banner_image_url: Optional[str] = None,
        channel_ids: Iterable[int] = (),
        rng: Optional[random.Random] = None,
    ) -> None:
        self.bot = bot
        self.banner = banner
        self.fetcher = fetcher
        self.compositor = compositor
        self.banner_image_url = banner_image_url
        self.channel_ids = frozenset(channel_ids)
        # Only touched from the event loop thread.
        self._rng = rng or random.Random()

    @property
    def result_filename(self) -> str:
        return f"result.{self.compositor.extension}"

    def _is_allowed_channel(self, ctx: commands.Context) -> bool:
        if not self.channel_ids:
            return True
        return getattr(ctx.channel, "id", None) in self.channel_ids

    def roll(self) -> Character:
        return self.banner.draw(self._rng)

    def roll_ten(self) -> Tuple[Character, ...]:
        return self.banner.draw_ten(self._rng)

    async def build_collage(self, characters: Tuple[Character, ...]) -> bytes:
        """Fetch thumbnails in draw order and encode the collage.

        Raises ``CompositeEncodingFailure``; the draw itself is unaffected.
        """
        start = time.perf_counter()
        images = await self.fetcher.fetch_many(
            characters,
            self.compositor.thumb_width,
            self.compositor.thumb_height,
        )
        logger.info("10-roll, DL, and resize took %dms", (time.perf_counter() - start) * 1000)

        start = time.perf_counter()
        payload = self.compositor.encode(images)
        logger.info("Collage Build took %dms", (time.perf_counter() - start) * 1000)
        return payload

    def _register_command(self, command: commands.Command) -> None:
        existing = self.bot.get_command(command.name)
        if existing:
            self.bot.remove_command(existing.name)
        self.bot.add_command(command)

    def register_commands(self) -> None:
        @commands.command(name="roll")
        async def recruit_roll(ctx: commands.Context) -> None:
            await self.command_roll(ctx)

        @commands.command(name="roll10")
        async def recruit_roll10(ctx: commands.Context) -> None:
            await self.command_roll_ten(ctx)

        @commands.command(name="banner")
        async def recruit_banner(ctx: commands.Context) -> None:
            await self.command_banner(ctx)

        self._register_command(recruit_roll)
        self._register_command(recruit_roll10)
        self._register_command(recruit_banner)

    async def command_roll(self, ctx: commands.Context) -> None:
        if not self._is_allowed_channel(ctx):
            return
        logger.info("%s requested a single roll", _author_label(ctx.author))
        character = self.roll()
        logger.debug("Single roll result: %s (%d*)", character.identifier, int(character.rarity))
        await ctx.send(embed=build_roll_embed(character, self.fetcher.cdn_url))

    async def command_roll_ten(self, ctx: commands.Context) -> None:
        if not self._is_allowed_channel(ctx):
            return
        logger.info("%s requested a ten roll", _author_label(ctx.author))
        characters = self.roll_ten()
        logger.debug("Ten roll result: %s", ", ".join(c.identifier for c in characters))

        async with ctx.typing():
            try:
                payload = await self.build_collage(characters)
            except CompositeEncodingFailure as exc:
                logger.error("Failed to encode collage: %s", exc)
                await ctx.reply(TEN_ROLL_FAILURE_MESSAGE, mention_author=False)
                return

        filename = self.result_filename
        embed = build_ten_roll_embed(
            self.banner,
            characters,
            cdn_url=self.fetcher.cdn_url,
            filename=filename,
        )
        await ctx.send(embed=embed, file=discord.File(io.BytesIO(payload), filename=filename))

    async def command_banner(self, ctx: commands.Context) -> None:
        if not self._is_allowed_channel(ctx):
            return
        logger.info("%s requested banner information", _author_label(ctx.author))
        await ctx.send(embed=build_banner_embed(self.banner, image_url=self.banner_image_url))


def setup_recruitment(
    bot: commands.Bot,
    *,
    banner: Banner,
    cdn_url: str,
    thumb_width: int,
    thumb_height: int,
    collage_format: str = "JPEG",
    banner_image_url: Optional[str] = None,
    channel_ids: Iterable[int] = (),
) -> RecruitmentManager:
    """Factory used by bot.py to wire the recruitment commands."""
    manager = RecruitmentManager(
        bot=bot,
        banner=banner,
        fetcher=ThumbnailFetcher(cdn_url),
        compositor=CollageCompositor(thumb_width, thumb_height, image_format=collage_format),
        banner_image_url=banner_image_url,
        channel_ids=channel_ids,
    )
    manager.register_commands()
    return manager


__all__ = ["RecruitmentManager", "TEN_ROLL_FAILURE_MESSAGE", "setup_recruitment"]
