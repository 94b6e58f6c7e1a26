"""chatguard: pattern based content moderation for chat messages."""

__version__ = "0.1.0"

from chatguard.moderation.config import (  # noqa: E402
    DEFAULT_MODERATION_CONFIG,
    MODERATION_PRESETS,
    ConfigError,
    ModerationConfig,
    ModerationLevel,
    load_config,
)
from chatguard.moderation.engine import (  # noqa: E402
    ModerationEngine,
    create_moderation_engine,
    moderate_content,
)
from chatguard.moderation.models import (  # noqa: E402
    ModerationResult,
    Severity,
    Violation,
    ViolationCategory,
)

__all__ = [
    "DEFAULT_MODERATION_CONFIG",
    "MODERATION_PRESETS",
    "ConfigError",
    "ModerationConfig",
    "ModerationEngine",
    "ModerationLevel",
    "ModerationResult",
    "Severity",
    "Violation",
    "ViolationCategory",
    "create_moderation_engine",
    "load_config",
    "moderate_content",
]
