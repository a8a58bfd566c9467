"""Runtime settings and banner configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Mapping, Optional, Tuple

import yaml

from .errors import ConfigError
from .models import Language, LocalizedName, Rarity
from .utils import int_from_env, parse_channel_ids, parse_identifiers, path_from_env, str_from_env

logger = logging.getLogger("recruitbot.settings")

PACKAGE_DIR = Path(__file__).resolve().parent
BASE_DIR = PACKAGE_DIR.parent

DEFAULT_WEIGHTS: Dict[Rarity, float] = {Rarity.ONE: 79.0, Rarity.TWO: 18.5, Rarity.THREE: 2.5}
DEFAULT_EXCLUDED: Tuple[str, ...] = ("nozomi",)
DEFAULT_BOOSTED: Tuple[str, ...] = ("hoshino", "shiroko")
DEFAULT_BOOST_FRACTION = 0.7
DEFAULT_BANNER_NAME = "ピックアップ募集"
DEFAULT_BANNER_TRANSLATIONS: Dict[Language, str] = {Language.ENGLISH: "Rate-Up Recruitment"}
DEFAULT_BANNER_IMAGE_URL = (
    "https://static.wikia.nocookie.net/blue-archive/images/e/e0/Gacha_Banner_01.png/revision/latest/"
)
DEFAULT_CDN_URL = "https://rerollcdn.com/BlueArchive"


def _default_names() -> LocalizedName:
    entries = {Language.JAPANESE: DEFAULT_BANNER_NAME}
    entries.update(DEFAULT_BANNER_TRANSLATIONS)
    return LocalizedName(entries, primary=Language.JAPANESE)


@dataclass(frozen=True)
class BannerConfig:
    names: LocalizedName = field(default_factory=_default_names)
    weights: Mapping[Rarity, float] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))
    excluded: Tuple[str, ...] = DEFAULT_EXCLUDED
    boosted: Tuple[str, ...] = DEFAULT_BOOSTED
    boost_fraction: float = DEFAULT_BOOST_FRACTION
    image_url: str = DEFAULT_BANNER_IMAGE_URL


@dataclass(frozen=True)
class RecruitmentSettings:
    token: str
    command_prefix: str
    catalog_path: Path
    banner_config_path: Optional[Path]
    cdn_url: str
    thumb_width: int
    thumb_height: int
    collage_format: str
    channel_ids: FrozenSet[int]


def _resolve(path: Path) -> Path:
    return path if path.is_absolute() else (BASE_DIR / path).resolve()


def load_settings() -> RecruitmentSettings:
    """Read settings from the environment (after ``load_dotenv``)."""
    token = str_from_env("DISCORD_TOKEN", "")
    if not token:
        raise ConfigError("DISCORD_TOKEN is required.")

    catalog_path = path_from_env("RECRUIT_CATALOG_PATH") or Path("data/students.json")
    banner_path = path_from_env("RECRUIT_BANNER_CONFIG")

    thumb_width = int_from_env("RECRUIT_THUMB_WIDTH", 202)
    thumb_height = int_from_env("RECRUIT_THUMB_HEIGHT", 228)
    if thumb_width <= 0 or thumb_height <= 0:
        raise ConfigError("Thumbnail dimensions must be positive.")

    return RecruitmentSettings(
        token=token,
        command_prefix=str_from_env("RECRUIT_COMMAND_PREFIX", "!"),
        catalog_path=_resolve(catalog_path),
        banner_config_path=_resolve(banner_path) if banner_path else None,
        cdn_url=str_from_env("RECRUIT_CDN_URL", DEFAULT_CDN_URL).rstrip("/"),
        thumb_width=thumb_width,
        thumb_height=thumb_height,
        collage_format=str_from_env("RECRUIT_COLLAGE_FORMAT", "JPEG").upper(),
        channel_ids=frozenset(parse_channel_ids(str_from_env("RECRUIT_CHANNEL_IDS", ""))),
    )


def _parse_weights(raw: object) -> Dict[Rarity, float]:
    if isinstance(raw, (list, tuple)):
        if len(raw) != len(Rarity):
            raise ConfigError(f"'weights' list needs {len(Rarity)} entries, got {len(raw)}")
        raw = {rarity: value for rarity, value in zip(Rarity, raw)}
    if not isinstance(raw, Mapping):
        raise ConfigError("'weights' must be a list or an object keyed by rarity")
    weights: Dict[Rarity, float] = {}
    for key, value in raw.items():
        try:
            rarity = Rarity.parse(key)
            weights[rarity] = float(value)
        except (KeyError, TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid weight entry {key!r}: {value!r}") from exc
    return weights


def _parse_names(raw: Mapping[str, object]) -> LocalizedName:
    name = raw.get("name", DEFAULT_BANNER_NAME)
    if not isinstance(name, str) or not name.strip():
        raise ConfigError("'name' must be a non-empty string")
    try:
        primary = Language.parse(raw.get("language", Language.JAPANESE.value))
    except ValueError as exc:
        raise ConfigError(str(exc)) from exc

    entries: Dict[Language, str] = {primary: name}
    translations = raw.get("translations", {lang.value: text for lang, text in DEFAULT_BANNER_TRANSLATIONS.items()})
    if not isinstance(translations, Mapping):
        raise ConfigError("'translations' must be an object keyed by language")
    for code, text in translations.items():
        try:
            language = Language.parse(code)
        except ValueError:
            logger.warning("Banner config: ignoring translation for unsupported language %s", code)
            continue
        if language == primary:
            continue
        if not isinstance(text, str) or not text.strip():
            raise ConfigError(f"Translation for {code} must be a non-empty string")
        entries[language] = text
    return LocalizedName(entries, primary=primary)


def parse_banner_config(raw: object) -> BannerConfig:
    if raw is None:
        return BannerConfig()
    if not isinstance(raw, Mapping):
        raise ConfigError("Banner config must be an object")

    names = _parse_names(raw)
    weights = _parse_weights(raw["weights"]) if "weights" in raw else dict(DEFAULT_WEIGHTS)
    try:
        excluded = parse_identifiers(raw.get("excluded", DEFAULT_EXCLUDED))
        boosted = parse_identifiers(raw.get("boosted", DEFAULT_BOOSTED))
    except TypeError as exc:
        raise ConfigError(str(exc)) from exc
    try:
        boost_fraction = float(raw.get("boost_fraction", DEFAULT_BOOST_FRACTION))
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid boost_fraction {raw.get('boost_fraction')!r}") from exc
    image_url = raw.get("image_url", DEFAULT_BANNER_IMAGE_URL)
    if not isinstance(image_url, str):
        raise ConfigError("'image_url' must be a string")

    return BannerConfig(
        names=names,
        weights=weights,
        excluded=excluded,
        boosted=boosted,
        boost_fraction=boost_fraction,
        image_url=image_url,
    )


def load_banner_config(path: Optional[Path]) -> BannerConfig:
    """Load a banner config from JSON or YAML; no path means the defaults."""
    if path is None:
        logger.info("No banner config supplied; using the default rate-up banner.")
        return BannerConfig()
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Unable to read banner config {path}: {exc}") from exc

    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            payload = yaml.safe_load(text)
        else:
            payload = json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Failed to parse banner config {path}: {exc}") from exc

    config = parse_banner_config(payload)
    logger.info("Banner config loaded from %s", path)
    return config


__all__ = [
    "BannerConfig",
    "DEFAULT_CDN_URL",
    "RecruitmentSettings",
    "load_banner_config",
    "load_settings",
    "parse_banner_config",
]
