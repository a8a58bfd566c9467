from __future__ import annotations

import logging
import os
from typing import Optional, Tuple

import discord
from discord.ext import commands
from dotenv import load_dotenv

from recruitbot.banner import Banner, build_banner
from recruitbot.catalog import load_catalog
from recruitbot.commands import RecruitmentManager, setup_recruitment
from recruitbot.errors import RecruitmentError
from recruitbot.settings import BannerConfig, RecruitmentSettings, load_banner_config, load_settings

logger = logging.getLogger("recruitbot")


class RecruitBot(commands.Bot):
    def __init__(self, settings: RecruitmentSettings, **kwargs) -> None:
        super().__init__(command_prefix=settings.command_prefix, **kwargs)
        self.settings = settings
        self.recruitment: Optional[RecruitmentManager] = None

    async def on_ready(self) -> None:
        logger.info("Logged in as %s (id=%s)", self.user, self.user.id if self.user else "unknown")
        if self.recruitment is not None:
            logger.info("Serving banner %s", self.recruitment.banner.name)
        if self.settings.channel_ids:
            logger.info("Recruitment channels: %s", ", ".join(str(cid) for cid in sorted(self.settings.channel_ids)))
        else:
            logger.info("Recruitment commands enabled in every channel.")


def create_banner(settings: RecruitmentSettings) -> Tuple[Banner, BannerConfig]:
    """Build the one banner this process serves. Failures are fatal."""
    catalog = load_catalog(settings.catalog_path)
    config = load_banner_config(settings.banner_config_path)
    return build_banner(config, catalog), config


def create_bot(settings: RecruitmentSettings, banner: Banner, *, banner_image_url: Optional[str] = None) -> RecruitBot:
    intents = discord.Intents.default()
    intents.message_content = True

    bot = RecruitBot(settings, intents=intents)
    bot.recruitment = setup_recruitment(
        bot,
        banner=banner,
        cdn_url=settings.cdn_url,
        thumb_width=settings.thumb_width,
        thumb_height=settings.thumb_height,
        collage_format=settings.collage_format,
        banner_image_url=banner_image_url,
        channel_ids=settings.channel_ids,
    )
    return bot


def main():
    load_dotenv()
    logging.basicConfig(
        level=os.getenv("RECRUIT_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    logging.getLogger("PIL").setLevel(logging.ERROR)

    startup_logger = logging.getLogger("recruitbot.startup")
    try:
        settings = load_settings()
        banner, config = create_banner(settings)
    except RecruitmentError as exc:
        startup_logger.critical("Unable to start: %s", exc)
        raise SystemExit(str(exc)) from exc

    bot = create_bot(settings, banner, banner_image_url=config.image_url)
    bot.run(settings.token, log_handler=None)


if __name__ == "__main__":
    main()
