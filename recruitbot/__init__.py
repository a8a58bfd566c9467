"""Recruitment bot package: banner engine, collage building and Discord commands."""

from . import banner, catalog, collage, commands, embeds, errors, gacha, models, settings, thumbnails, utils  # noqa: F401

__all__ = [
    "banner",
    "catalog",
    "collage",
    "commands",
    "embeds",
    "errors",
    "gacha",
    "models",
    "settings",
    "thumbnails",
    "utils",
]
