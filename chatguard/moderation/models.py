"""Data models for the message moderation engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class MatchType(Enum):
    """Subtype of a single detected occurrence."""

    # Numbers
    PHONE = "phone"
    CREDIT_CARD = "creditCard"
    SSN = "ssn"
    BANK_ACCOUNT = "bankAccount"
    # Contact details
    EMAIL = "email"
    SOCIAL_MEDIA = "socialMedia"
    PHYSICAL_ADDRESS = "physicalAddress"
    # Links
    URL = "url"
    DOMAIN = "domain"
    SHORTENED_URL = "shortenedUrl"


class ViolationCategory(Enum):
    NUMBER = "number"
    CONTACT = "contact"
    LINK = "link"
    PROFANITY = "profanity"


class Severity(Enum):
    WARNING = "warning"  # Reported, never blocks
    BLOCK = "block"  # Forces is_allowed=False


class ProfanitySeverity(Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class Match:
    """A single detected occurrence."""

    pattern: str  # Exact substring as it appears in the message
    subtype: MatchType


@dataclass
class Violation:
    """One category's aggregated finding for a message."""

    category: ViolationCategory
    matches: list[str] = field(default_factory=list)
    severity: Severity = Severity.BLOCK
    description: str = ""

    def to_dict(self) -> dict:
        return {
            "category": self.category.value,
            "matches": list(self.matches),
            "severity": self.severity.value,
            "description": self.description,
        }


@dataclass
class ModerationResult:
    """Outcome of moderating a single message."""

    is_allowed: bool
    violations: list[Violation] = field(default_factory=list)
    clean_content: str = ""
    flagged_indices: list[int] = field(default_factory=list)

    @property
    def blocked(self) -> bool:
        return not self.is_allowed

    @property
    def has_violations(self) -> bool:
        return bool(self.violations)

    @property
    def categories(self) -> list[ViolationCategory]:
        return [v.category for v in self.violations]

    def summary(self) -> str:
        status = "ALLOWED" if self.is_allowed else "BLOCKED"
        if not self.violations:
            return f"[{status}] no violations"
        names = ", ".join(c.value for c in self.categories)
        return f"[{status}] {len(self.violations)} violation(s): {names}"

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dictionary."""
        return {
            "is_allowed": self.is_allowed,
            "violations": [v.to_dict() for v in self.violations],
            "clean_content": self.clean_content,
            "flagged_indices": list(self.flagged_indices),
        }
