"""Moderation policy: toggles, presets and YAML loading.

A policy is a flat set of boolean toggles, a list of profanity languages and
a descriptive level label. The three built-in presets are fixed bundles;
any other combination can still be built field by field.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any

import yaml

from chatguard.filters.profanity import add_custom_profanity


class ConfigError(ValueError):
    """Raised for unknown presets, unknown keys or malformed config files."""


def _string_tuple(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, Iterable):
        raise ConfigError(f"Expected a list of strings, got {value!r}")
    return tuple(str(v) for v in value)


class ModerationLevel(Enum):
    """Descriptive label set by presets; not enforced elsewhere."""

    STRICT = "strict"
    MODERATE = "moderate"
    LENIENT = "lenient"


@dataclass(frozen=True)
class ModerationConfig:
    """Immutable moderation policy snapshot."""

    block_numbers: bool = True
    block_emails: bool = True
    block_links: bool = True
    block_social_media: bool = True
    block_physical_addresses: bool = False
    enable_profanity_filter: bool = True
    censor_profanity: bool = True
    profanity_languages: tuple[str, ...] = ("en", "hi")
    moderation_level: ModerationLevel = ModerationLevel.MODERATE

    def __post_init__(self) -> None:
        for name in _BOOL_FIELDS:
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ConfigError(f"'{name}' must be true or false, got {value!r}")

        # Accept any iterable of languages and a plain string level from callers
        object.__setattr__(
            self, "profanity_languages", _string_tuple(self.profanity_languages)
        )
        if not isinstance(self.moderation_level, ModerationLevel):
            object.__setattr__(
                self, "moderation_level", parse_level(self.moderation_level)
            )

    def merged(self, changes: Mapping[str, Any]) -> ModerationConfig:
        """Return a copy with *changes* applied; other fields keep their value."""
        unknown = set(changes) - CONFIG_FIELDS
        if unknown:
            raise ConfigError(f"Unknown moderation config key(s): {', '.join(sorted(unknown))}")
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> dict:
        return {
            "block_numbers": self.block_numbers,
            "block_emails": self.block_emails,
            "block_links": self.block_links,
            "block_social_media": self.block_social_media,
            "block_physical_addresses": self.block_physical_addresses,
            "enable_profanity_filter": self.enable_profanity_filter,
            "censor_profanity": self.censor_profanity,
            "profanity_languages": list(self.profanity_languages),
            "moderation_level": self.moderation_level.value,
        }


CONFIG_FIELDS = frozenset(f.name for f in dataclasses.fields(ModerationConfig))

_BOOL_FIELDS = frozenset(
    f.name for f in dataclasses.fields(ModerationConfig) if f.type in ("bool", bool)
)

ALL_LANGUAGES = ("en", "hi", "ta", "te", "kn", "mr", "bn", "gu", "pa", "ml")

MODERATION_PRESETS: dict[ModerationLevel, ModerationConfig] = {
    ModerationLevel.STRICT: ModerationConfig(
        block_numbers=True,
        block_emails=True,
        block_links=True,
        block_social_media=True,
        block_physical_addresses=True,
        enable_profanity_filter=True,
        censor_profanity=True,
        profanity_languages=ALL_LANGUAGES,
        moderation_level=ModerationLevel.STRICT,
    ),
    ModerationLevel.MODERATE: ModerationConfig(
        block_numbers=True,
        block_emails=True,
        block_links=True,
        block_social_media=True,
        block_physical_addresses=False,
        enable_profanity_filter=True,
        censor_profanity=True,
        profanity_languages=("en", "hi"),
        moderation_level=ModerationLevel.MODERATE,
    ),
    ModerationLevel.LENIENT: ModerationConfig(
        block_numbers=True,
        block_emails=False,
        block_links=False,
        block_social_media=False,
        block_physical_addresses=False,
        enable_profanity_filter=False,
        censor_profanity=False,
        profanity_languages=(),
        moderation_level=ModerationLevel.LENIENT,
    ),
}

DEFAULT_MODERATION_CONFIG = MODERATION_PRESETS[ModerationLevel.MODERATE]


def parse_level(value: str | ModerationLevel) -> ModerationLevel:
    """Resolve a preset name such as ``"strict"`` to a ModerationLevel."""
    if isinstance(value, ModerationLevel):
        return value
    try:
        return ModerationLevel(str(value).strip().lower())
    except ValueError:
        names = ", ".join(level.value for level in ModerationLevel)
        raise ConfigError(f"Unknown moderation preset {value!r} (expected one of: {names})") from None


def get_preset_config(level: str | ModerationLevel) -> ModerationConfig:
    return MODERATION_PRESETS[parse_level(level)]


def available_presets() -> list[str]:
    return [level.value for level in MODERATION_PRESETS]


def config_from_dict(data: Mapping[str, Any] | None) -> ModerationConfig:
    """Build a config from a plain mapping.

    ``preset`` selects the base bundle (default config otherwise); every other
    key overrides a single field. ``custom_profanity`` maps languages to
    extra words, which are added to the shared lexicon.
    """
    data = dict(data or {})

    preset = data.pop("preset", None)
    base = get_preset_config(preset) if preset else DEFAULT_MODERATION_CONFIG

    custom = data.pop("custom_profanity", None) or {}
    if not isinstance(custom, Mapping):
        raise ConfigError("'custom_profanity' must map language codes to word lists")

    config = base.merged(data)

    if custom:
        for language, words in custom.items():
            add_custom_profanity(str(language), _string_tuple(words))

    return config


def load_config(path: str | Path) -> ModerationConfig:
    """Load a moderation config from a YAML file."""
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read moderation config {path}: {e}") from e

    if data is not None and not isinstance(data, Mapping):
        raise ConfigError(f"Moderation config {path} must be a mapping")

    return config_from_dict(data)
