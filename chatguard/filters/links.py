"""Link filter: URLs, shortener links, bare domains and file downloads.

Bare domains are always reported but only censored when the message also
carries URL evidence (a protocol URL, a shortener link or a file URL), so
prose such as "our site is acme.com" is left readable.
"""

from __future__ import annotations

import re

from chatguard.moderation.models import Match, MatchType

URL = re.compile(r"(?:https?|ftp)://\S+", re.IGNORECASE)

SHORTENER_DOMAINS = (
    "bit.ly", "tinyurl.com", "short.link", "ow.ly", "goo.gl", "t.co",
    "youtu.be", "rebrand.ly", "href.li", "snip.li", "buff.ly", "adf.ly",
    "clck.ru", "is.gd", "cutt.ly",
)

SHORTENED_URL = re.compile(
    r"(?:(?:https?|ftp)://)?(?:www\.)?\b(?:"
    + "|".join(re.escape(d) for d in SHORTENER_DOMAINS)
    + r")/[\w/-]+",
    re.IGNORECASE,
)

_LABEL = r"[a-zA-Z0-9](?:[a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
# Starts only at the beginning of a dotted run so the scan stays linear
DOMAIN = re.compile(rf"(?<![A-Za-z0-9.-])(?:www\.)?{_LABEL}(?:\.{_LABEL})*\.[a-zA-Z]{{2,}}")

# Protocol URL whose last path segment carries a file extension
FILE_PATH = re.compile(
    r"(?:https?|ftp)://\S*/[^\s/]+\.[A-Za-z0-9]{1,5}(?=\s|$)", re.IGNORECASE
)

IP_ADDRESS = re.compile(r"\b(?:\d{1,3}\.){3}\d{1,3}\b")


def _is_plausible_domain(candidate: str) -> bool:
    # Rejects "a.b"-style fragments
    return "." in candidate and all(len(part) > 1 for part in candidate.split("."))


def detect_urls(text: str) -> list[str]:
    return URL.findall(text)


def detect_shortened_urls(text: str) -> list[str]:
    return SHORTENED_URL.findall(text)


def detect_domains(text: str) -> list[str]:
    return [d for d in DOMAIN.findall(text) if _is_plausible_domain(d)]


def detect_file_paths(text: str) -> list[str]:
    return FILE_PATH.findall(text)


def detect_ip_addresses(text: str) -> list[str]:
    return IP_ADDRESS.findall(text)


def contains_suspicious_links(text: str) -> bool:
    """Return True if *text* carries URL evidence beyond a bare domain."""
    return bool(
        URL.search(text)
        or SHORTENED_URL.search(text)
        or FILE_PATH.search(text)
    )


def detect_link_violations(text: str) -> list[Match]:
    """Detect links in *text*, tagged by subtype."""
    matches: list[Match] = []
    matches.extend(Match(p, MatchType.URL) for p in detect_urls(text))
    matches.extend(Match(p, MatchType.SHORTENED_URL) for p in detect_shortened_urls(text))
    matches.extend(Match(p, MatchType.DOMAIN) for p in detect_domains(text))
    matches.extend(Match(p, MatchType.URL) for p in detect_file_paths(text))
    return matches


def _censor_domain(match: re.Match[str]) -> str:
    value = match.group(0)
    return "[REDACTED_DOMAIN]" if _is_plausible_domain(value) else value


def censor_links(text: str) -> str:
    """Replace links with placeholder tokens.

    File URLs and shortener links are replaced before the generic URL rule,
    which would otherwise swallow them as plain ``[REDACTED_LINK]``.
    """
    suspicious = contains_suspicious_links(text)

    censored = FILE_PATH.sub("[REDACTED_FILE]", text)
    censored = SHORTENED_URL.sub("[REDACTED_SHORT_LINK]", censored)
    censored = URL.sub("[REDACTED_LINK]", censored)

    if suspicious:
        censored = DOMAIN.sub(_censor_domain, censored)

    return censored
