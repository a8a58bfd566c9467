"""Dataclasses and shared type definitions for the recruitment bot."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Dict, Mapping, Optional, Tuple

from .errors import MissingTranslation


class Rarity(IntEnum):
    ONE = 1
    TWO = 2
    THREE = 3

    @property
    def stars(self) -> str:
        return ":star:" * int(self)

    @classmethod
    def parse(cls, value: object) -> "Rarity":
        """Accept ``3``, ``"3"`` or ``"three"``."""
        if isinstance(value, Rarity):
            return value
        if isinstance(value, str):
            text = value.strip()
            if text.isdigit():
                return cls(int(text))
            return cls[text.upper()]
        if isinstance(value, int) and not isinstance(value, bool):
            return cls(value)
        raise ValueError(f"Unknown rarity {value!r}")


class Language(Enum):
    JAPANESE = "ja"
    ENGLISH = "en"

    @classmethod
    def parse(cls, value: object) -> "Language":
        if isinstance(value, Language):
            return value
        text = str(value).strip().lower()
        for language in cls:
            if text in (language.value, language.name.lower()):
                return language
        raise ValueError(f"Unknown language {value!r}")


class LocalizedName:
    """A display name with one entry per language and a primary language."""

    __slots__ = ("_entries", "_primary")

    def __init__(
        self,
        entries: Mapping[Language, str],
        primary: Optional[Language] = None,
    ) -> None:
        cleaned: Dict[Language, str] = {}
        for language, text in entries.items():
            if isinstance(text, str) and text.strip():
                cleaned[Language.parse(language)] = text.strip()
        if not cleaned:
            raise ValueError("A localized name needs at least one non-empty entry.")
        if primary is None:
            primary = Language.JAPANESE if Language.JAPANESE in cleaned else next(iter(cleaned))
        elif primary not in cleaned:
            raise MissingTranslation(primary, cleaned)
        self._entries = cleaned
        self._primary = primary

    @property
    def primary(self) -> Language:
        return self._primary

    def languages(self) -> Tuple[Language, ...]:
        return tuple(self._entries)

    def get(self, language: object) -> str:
        """Look up by ``Language`` or language code (``"en"``)."""
        try:
            return self._entries[Language.parse(language)]
        except (KeyError, ValueError):
            raise MissingTranslation(language, self._entries) from None

    def __contains__(self, language: object) -> bool:
        try:
            return Language.parse(language) in self._entries
        except ValueError:
            return False

    def __str__(self) -> str:
        return self._entries[self._primary]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, LocalizedName):
            return self._primary == other._primary and self._entries == other._entries
        return NotImplemented

    def __hash__(self) -> int:
        return hash((self._primary, tuple(sorted((k.value, v) for k, v in self._entries.items()))))

    def __repr__(self) -> str:
        return f"LocalizedName({str(self)!r})"


@dataclass(frozen=True)
class Character:
    identifier: str
    names: LocalizedName = field(compare=False)
    rarity: Rarity
    asset_key: str

    @property
    def name(self) -> str:
        return str(self.names)

    def display_name(self, language: Language) -> str:
        return self.names.get(language)


__all__ = [
    "Character",
    "Language",
    "LocalizedName",
    "Rarity",
]
