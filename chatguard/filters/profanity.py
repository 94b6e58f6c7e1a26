"""Profanity filter backed by a process-wide, per-language lexicon.

The lexicon is shared by every engine in the process. Custom words added
with :func:`add_custom_profanity` are visible to all subsequent calls and
are never removed; there is no teardown.
"""

from __future__ import annotations

import functools
import logging
import re
import threading
from collections.abc import Iterable

from chatguard.moderation.models import ProfanitySeverity

logger = logging.getLogger(__name__)

# Built-in word lists keyed by ISO-639-1 code
_BUILTIN_WORDS: dict[str, list[str]] = {
    "en": [
        "fuck", "fucking", "shit", "bullshit", "asshole", "bitch", "bastard",
        "damn", "crap", "dick", "piss", "wanker", "bollocks", "motherfucker",
    ],
    "hi": ["गाली", "कसम", "बकवास"],
    "ta": ["கேவலம்", "தேவையற்ற"],
    "te": ["చెత్త", "అసభ్యత"],
    "kn": ["ಕೆಸ", "ಮೂರ್ಖ"],
    "mr": ["बदतर"],
    "bn": ["খারাপ"],
    "gu": ["બુરો"],
    "pa": ["ਮੂਰਖ"],
    "ml": ["കെട്ടവൻ"],
}

# Indic vowel signs and viramas are combining marks, which \w does not
# cover, so the Indic blocks count as word characters explicitly.
_WORD_CHAR = r"[\w\u0900-\u0DFF]"


class ProfanityLexicon:
    """Thread-safe, append-only table of profane words per language."""

    def __init__(self, initial: dict[str, list[str]] | None = None) -> None:
        self._lock = threading.RLock()
        self._words: dict[str, list[str]] = {}
        for language, words in (initial or {}).items():
            self.add(language, words)

    def add(self, language: str, words: Iterable[str]) -> None:
        """Append *words* to *language*, creating the language if needed."""
        if isinstance(words, str):
            words = [words]
        key = language.lower()
        with self._lock:
            entries = self._words.setdefault(key, [])
            for word in words:
                word = word.strip()
                if word and word not in entries:
                    entries.append(word)

    def words(self, language: str) -> tuple[str, ...]:
        """Snapshot of the words for *language*; empty if unsupported."""
        with self._lock:
            return tuple(self._words.get(language.lower(), ()))

    def languages(self) -> list[str]:
        with self._lock:
            return list(self._words)

    def __contains__(self, language: str) -> bool:
        with self._lock:
            return language.lower() in self._words


LEXICON = ProfanityLexicon(_BUILTIN_WORDS)


@functools.lru_cache(maxsize=1024)
def _word_pattern(word: str) -> re.Pattern[str]:
    return re.compile(
        rf"(?<!{_WORD_CHAR}){re.escape(word)}(?!{_WORD_CHAR})", re.IGNORECASE
    )


def detect_profanity(text: str, languages: Iterable[str] = ("en",)) -> list[str]:
    """Return the unique profane surface forms found in *text*.

    Forms are lower-cased and listed in first-seen order. Languages with no
    lexicon entry are skipped.
    """
    lowered = text.lower()
    found: dict[str, None] = {}

    for language in languages:
        for word in LEXICON.words(language):
            for match in _word_pattern(word).findall(lowered):
                found.setdefault(match, None)

    return list(found)


def contains_profanity(text: str, languages: Iterable[str] = ("en",)) -> bool:
    return bool(detect_profanity(text, languages))


def censor_profanity(
    text: str, languages: Iterable[str] = ("en",), censor_char: str = "*"
) -> str:
    """Mask every profane word in *text* with *censor_char* of equal length."""
    censored = text
    for word in detect_profanity(text, languages):
        censored = _word_pattern(word).sub(
            lambda m: censor_char * len(m.group(0)), censored
        )
    return censored


def get_profanity_severity(count: int) -> ProfanitySeverity:
    """Map a number of distinct profane words to a severity level."""
    if count <= 1:
        return ProfanitySeverity.LOW
    if count <= 3:
        return ProfanitySeverity.MEDIUM
    return ProfanitySeverity.HIGH


def add_custom_profanity(language: str, words: Iterable[str]) -> None:
    """Add words to the shared lexicon for *language*."""
    words = [words] if isinstance(words, str) else list(words)
    LEXICON.add(language, words)
    logger.debug("Added %d custom profanity word(s) for %r", len(words), language)


def get_supported_languages() -> list[str]:
    return LEXICON.languages()
