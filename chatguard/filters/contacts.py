"""Contact filter: emails, social handles, profile URLs and addresses."""

from __future__ import annotations

import re

from chatguard.moderation.models import Match, MatchType

# Local part starts at the beginning of its run, keeping the scan linear
EMAIL = re.compile(r"(?<![A-Za-z0-9._%+-])[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")

# @mentions and #hashtags at the start of the text or after whitespace
HANDLE = re.compile(r"(?:^|\s)[@#][A-Za-z0-9_]+")


def _profile(path: str) -> re.Pattern[str]:
    return re.compile(rf"(?:https?://)?(?:www\.)?\b{path}", re.IGNORECASE)


# Platform profile URLs, most specific first
PROFILE_PATTERNS: list[tuple[str, re.Pattern[str], str]] = [
    ("instagram", _profile(r"instagram\.com/[A-Za-z0-9_.]+"), "[REDACTED_INSTA]"),
    ("facebook", _profile(r"facebook\.com/[A-Za-z0-9_.]+"), "[REDACTED_FB]"),
    ("twitter", _profile(r"(?:twitter|x)\.com/[A-Za-z0-9_]+"), "[REDACTED_X]"),
    ("linkedin", _profile(r"linkedin\.com/(?:in|company)/[A-Za-z0-9-]+"), "[REDACTED_LINKEDIN]"),
    ("tiktok", _profile(r"tiktok\.com/@[A-Za-z0-9_.]+"), "[REDACTED_TIKTOK]"),
    ("telegram", _profile(r"(?:t\.me|telegram\.org)/[A-Za-z0-9_]+"), "[REDACTED_TELEGRAM]"),
]

STREET_TYPES = (
    "street", "st", "avenue", "ave", "road", "rd", "boulevard", "blvd",
    "lane", "ln", "drive", "dr", "court", "ct", "circle", "cir", "park",
    "way", "terrace", "terr", "mount", "mnt",
)

# House number, up to three capitalised name words, then a street type
PHYSICAL_ADDRESS = re.compile(
    r"\b\d{1,5}\s+(?:(?-i:[A-Z][A-Za-z]*)\s+){0,3}(?:" + "|".join(STREET_TYPES) + r")\b",
    re.IGNORECASE,
)

# US zip codes (optionally ZIP+4)
ZIP_CODE = re.compile(r"\b\d{5}(?:-\d{4})?\b")

# Lat/long pair with at least four decimal places on each side
COORDINATES = re.compile(r"[-+]?\d{1,3}\.\d{4,},\s*[-+]?\d{1,3}\.\d{4,}")

# Loose decimal-pair shape used when censoring
LOOSE_COORDINATES = re.compile(r"[-+]?[0-9]*\.?[0-9]+[-+]?[0-9]*\.?[0-9]+")


def detect_emails(text: str) -> list[str]:
    return EMAIL.findall(text)


def detect_social_media_handles(text: str) -> list[str]:
    return [m.strip() for m in HANDLE.findall(text)]


def detect_social_media_profiles(text: str) -> list[str]:
    """Detect profile URLs across all known platforms, deduplicated."""
    profiles: list[str] = []
    for _, pattern, _ in PROFILE_PATTERNS:
        profiles.extend(pattern.findall(text))
    return list(dict.fromkeys(profiles))


def detect_physical_addresses(text: str) -> list[str]:
    return PHYSICAL_ADDRESS.findall(text)


def detect_zip_codes(text: str) -> list[str]:
    return ZIP_CODE.findall(text)


def detect_coordinates(text: str) -> list[str]:
    return COORDINATES.findall(text)


def detect_contact_violations(text: str) -> list[Match]:
    """Detect contact details in *text*, tagged by subtype."""
    matches: list[Match] = []
    matches.extend(Match(p, MatchType.EMAIL) for p in detect_emails(text))
    matches.extend(Match(p, MatchType.SOCIAL_MEDIA) for p in detect_social_media_handles(text))
    matches.extend(Match(p, MatchType.SOCIAL_MEDIA) for p in detect_social_media_profiles(text))

    for detector in (detect_physical_addresses, detect_zip_codes, detect_coordinates):
        matches.extend(Match(p, MatchType.PHYSICAL_ADDRESS) for p in detector(text))

    return matches


def censor_contacts(text: str) -> str:
    """Replace contact details with their placeholder tokens.

    Profile URLs are censored before the generic handle rule so that a
    TikTok ``/@user`` path is not additionally rewritten as a handle.
    """
    censored = EMAIL.sub("[REDACTED_EMAIL]", text)

    for _, pattern, token in PROFILE_PATTERNS:
        censored = pattern.sub(token, censored)

    censored = HANDLE.sub(" [REDACTED_HANDLE]", censored)
    censored = PHYSICAL_ADDRESS.sub("[REDACTED_ADDRESS]", censored)
    censored = ZIP_CODE.sub("[REDACTED_ZIP]", censored)
    censored = LOOSE_COORDINATES.sub("[REDACTED_COORDS]", censored)
    return censored
