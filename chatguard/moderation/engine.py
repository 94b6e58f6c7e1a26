"""Message moderation engine.

Runs the number, contact, link and profanity filters over a single message
in a fixed order, collects one violation per category and builds the
redacted ``clean_content``. Each stage censors the running buffer in turn,
so later stages see earlier placeholder tokens as plain text.

The engine keeps no per-message state. Its only state is the policy, held
as an immutable :class:`ModerationConfig` snapshot that ``update_config``
and ``set_preset`` swap under a lock; ``moderate`` reads the snapshot once
per call.
"""

from __future__ import annotations

import dataclasses
import logging
import threading
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, Optional

from chatguard.filters.contacts import censor_contacts, detect_contact_violations
from chatguard.filters.links import censor_links, detect_link_violations
from chatguard.filters.numbers import censor_numbers, detect_number_violations
from chatguard.filters.profanity import (
    censor_profanity,
    detect_profanity,
    get_profanity_severity,
)
from chatguard.moderation.config import (
    DEFAULT_MODERATION_CONFIG,
    ModerationConfig,
    ModerationLevel,
    get_preset_config,
)
from chatguard.moderation.models import (
    MatchType,
    ModerationResult,
    ProfanitySeverity,
    Severity,
    Violation,
    ViolationCategory,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Stages
# ---------------------------------------------------------------------------

StageOutcome = tuple[Optional[Violation], str]


@dataclass(frozen=True)
class Stage:
    """One step of the moderation pipeline.

    ``run`` receives the original text (for detection), the running clean
    buffer (for censoring) and the active config, and returns the category's
    violation (or None) together with the updated buffer.
    """

    category: ViolationCategory
    enabled: Callable[[ModerationConfig], bool]
    run: Callable[[str, str, ModerationConfig], StageOutcome]


# Which toggle admits each contact subtype into the violation
_CONTACT_TOGGLES: dict[MatchType, Callable[[ModerationConfig], bool]] = {
    MatchType.EMAIL: lambda c: c.block_emails,
    MatchType.SOCIAL_MEDIA: lambda c: c.block_social_media,
    MatchType.PHYSICAL_ADDRESS: lambda c: c.block_physical_addresses,
}


def _run_numbers(text: str, buffer: str, config: ModerationConfig) -> StageOutcome:
    matches = detect_number_violations(text)
    if not matches:
        return None, buffer
    violation = Violation(
        category=ViolationCategory.NUMBER,
        matches=[m.pattern for m in matches],
        severity=Severity.BLOCK,
        description="Message contains sensitive number information (phone, credit card, etc.)",
    )
    return violation, censor_numbers(buffer)


def _run_contacts(text: str, buffer: str, config: ModerationConfig) -> StageOutcome:
    matches = detect_contact_violations(text)
    reported = [m for m in matches if _CONTACT_TOGGLES[m.subtype](config)]
    if not reported:
        return None, buffer
    violation = Violation(
        category=ViolationCategory.CONTACT,
        matches=[m.pattern for m in reported],
        severity=Severity.BLOCK,
        description="Message contains contact information",
    )
    # Censoring covers every contact subtype, not only the reported ones
    return violation, censor_contacts(buffer)


def _run_links(text: str, buffer: str, config: ModerationConfig) -> StageOutcome:
    matches = detect_link_violations(text)
    if not matches:
        return None, buffer
    violation = Violation(
        category=ViolationCategory.LINK,
        matches=[m.pattern for m in matches],
        severity=Severity.BLOCK,
        description="Message contains external links or URLs",
    )
    return violation, censor_links(buffer)


def _run_profanity(text: str, buffer: str, config: ModerationConfig) -> StageOutcome:
    words = detect_profanity(text, config.profanity_languages)
    if not words:
        return None, buffer

    level = get_profanity_severity(len(words))
    violation = Violation(
        category=ViolationCategory.PROFANITY,
        matches=words,
        severity=Severity.BLOCK if level == ProfanitySeverity.HIGH else Severity.WARNING,
        description=f"Message contains {level.value} level profanity",
    )
    if config.censor_profanity:
        buffer = censor_profanity(buffer, config.profanity_languages)
    return violation, buffer


STAGES: tuple[Stage, ...] = (
    Stage(ViolationCategory.NUMBER, lambda c: c.block_numbers, _run_numbers),
    Stage(
        ViolationCategory.CONTACT,
        lambda c: c.block_emails or c.block_social_media or c.block_physical_addresses,
        _run_contacts,
    ),
    Stage(ViolationCategory.LINK, lambda c: c.block_links, _run_links),
    Stage(ViolationCategory.PROFANITY, lambda c: c.enable_profanity_filter, _run_profanity),
)

# is_type_blocked() name -> config toggle
_TYPE_TOGGLES = {
    "numbers": "block_numbers",
    "emails": "block_emails",
    "links": "block_links",
    "profanity": "enable_profanity_filter",
}


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class ModerationEngine:
    """Moderates messages against a swappable policy."""

    def __init__(
        self,
        config: ModerationConfig | Mapping[str, Any] | None = None,
        **overrides: Any,
    ) -> None:
        if isinstance(config, ModerationConfig):
            base = config
        else:
            base = DEFAULT_MODERATION_CONFIG.merged(config or {})
        self._lock = threading.RLock()
        self._config = base.merged(overrides)

    # -- configuration -------------------------------------------------------

    def update_config(
        self, changes: Mapping[str, Any] | None = None, **overrides: Any
    ) -> None:
        """Patch the current config; fields not given keep their value."""
        patch = {**(changes or {}), **overrides}
        with self._lock:
            self._config = self._config.merged(patch)
        logger.debug("Moderation config updated: %s", sorted(patch))

    def set_preset(self, level: str | ModerationLevel) -> None:
        """Replace the whole config with a built-in preset."""
        preset = get_preset_config(level)
        with self._lock:
            self._config = preset
        logger.debug("Moderation preset set to %s", preset.moderation_level.value)

    def get_config(self) -> ModerationConfig:
        """Return a copy of the current config."""
        return dataclasses.replace(self._config)

    def is_type_blocked(self, category: str) -> bool:
        toggle = _TYPE_TOGGLES.get(category)
        if toggle is None:
            return False
        return bool(getattr(self._config, toggle))

    # -- moderation ----------------------------------------------------------

    def moderate(self, text: str | None) -> ModerationResult:
        """Moderate a single message."""
        text = text or ""
        config = self._config
        violations: list[Violation] = []
        clean_content = text

        for stage in STAGES:
            if not stage.enabled(config):
                continue
            violation, clean_content = stage.run(text, clean_content, config)
            if violation is not None:
                violations.append(violation)
                logger.debug(
                    "%s stage: %d match(es), severity=%s",
                    stage.category.value,
                    len(violation.matches),
                    violation.severity.value,
                )

        return ModerationResult(
            is_allowed=not any(v.severity == Severity.BLOCK for v in violations),
            violations=violations,
            clean_content=clean_content,
            flagged_indices=[0] if violations else [],
        )


def create_moderation_engine(
    config: ModerationConfig | Mapping[str, Any] | None = None, **overrides: Any
) -> ModerationEngine:
    return ModerationEngine(config, **overrides)


def moderate_content(text: str) -> ModerationResult:
    """Moderate *text* with the default config."""
    return ModerationEngine().moderate(text)
