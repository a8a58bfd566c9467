"""Exceptions raised by the recruitment engine and its collaborators."""

from __future__ import annotations


class RecruitmentError(Exception):
    """Base class for every recruitment failure."""


class InvalidWeights(RecruitmentError):
    """Raised when rarity weights are negative or do not sum to 100%."""


class InvalidBoost(RecruitmentError):
    """Raised when the rate-up fraction or rate-up characters are invalid."""


class EmptyTierPool(RecruitmentError):
    """Raised when a rarity with a nonzero weight has no characters."""


class DuplicateCharacter(RecruitmentError):
    """Raised when a pool lists the same character identifier twice."""


class MissingTranslation(RecruitmentError):
    """Raised when a display name has no entry for the requested language."""

    def __init__(self, language, available=()):
        self.language = language
        self.available = tuple(available)
        names = ", ".join(getattr(item, "value", str(item)) for item in self.available) or "none"
        super().__init__(
            f"No translation for '{getattr(language, 'value', language)}' (available: {names})"
        )


class CompositeEncodingFailure(RecruitmentError):
    """Raised when a ten-roll collage cannot be built or encoded."""


class CatalogError(RecruitmentError):
    """Raised when the character catalog cannot be loaded."""


class ConfigError(RecruitmentError):
    """Raised when the banner configuration is malformed."""


__all__ = [
    "CatalogError",
    "CompositeEncodingFailure",
    "ConfigError",
    "DuplicateCharacter",
    "EmptyTierPool",
    "InvalidBoost",
    "InvalidWeights",
    "MissingTranslation",
    "RecruitmentError",
]
