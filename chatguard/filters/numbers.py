"""Number filter: phone numbers, card numbers, SSNs and bank accounts.

Detection is purely shape based. There is no Luhn or checksum validation,
so arbitrary digit runs of six or more digits are reported as bank account
numbers and frequently match more than one subtype at once.
"""

from __future__ import annotations

import re

from chatguard.moderation.models import Match, MatchType

# Indian mobile numbers: 10 digits starting 6-9, optional +91 / 91 prefix
INDIAN_PHONE = re.compile(r"(?:\+?91[-.\s]?)?[6-9]\d{9}")

# Loose international shape: country code, optional area code, digit groups
INTERNATIONAL_PHONE = re.compile(
    r"\+?[1-9]\d{0,3}[-.\s]?\(?\d{1,4}\)?[-.\s]?\d{1,4}[-.\s]?\d{1,9}"
)

# 13-19 digits, optionally separated by spaces or dashes
CREDIT_CARD = re.compile(r"\b(?:\d[ -]*?){13,19}\b")

# US Social Security Number: NNN-NN-NNNN
SSN = re.compile(r"\b\d{3}-\d{2}-\d{4}\b")

# Bare digit runs, 6-17 long
BANK_ACCOUNT = re.compile(r"\b\d{6,17}\b")

# Applied in this order; each replacement removes the digits later
# patterns would otherwise match.
CENSOR_RULES: list[tuple[re.Pattern[str], str]] = [
    (INDIAN_PHONE, "[REDACTED_PHONE]"),
    (INTERNATIONAL_PHONE, "[REDACTED_PHONE]"),
    (CREDIT_CARD, "[REDACTED_CC]"),
    (SSN, "[REDACTED_SSN]"),
    (BANK_ACCOUNT, "[REDACTED_ACCOUNT]"),
]


def detect_phone_numbers(text: str) -> list[str]:
    """Detect Indian and international phone numbers, deduplicated."""
    found = INDIAN_PHONE.findall(text) + INTERNATIONAL_PHONE.findall(text)
    return list(dict.fromkeys(found))


def detect_credit_cards(text: str) -> list[str]:
    return [
        m for m in CREDIT_CARD.findall(text)
        if len(re.sub(r"\D", "", m)) >= 13
    ]


def detect_ssn(text: str) -> list[str]:
    return SSN.findall(text)


def detect_bank_accounts(text: str) -> list[str]:
    return BANK_ACCOUNT.findall(text)


def detect_number_violations(text: str) -> list[Match]:
    """Detect every number-shaped violation in *text*.

    Subtypes are reported independently, so one digit run may appear as a
    phone, a card and a bank account at the same time.
    """
    matches: list[Match] = []
    matches.extend(Match(p, MatchType.PHONE) for p in detect_phone_numbers(text))
    matches.extend(Match(p, MatchType.CREDIT_CARD) for p in detect_credit_cards(text))
    matches.extend(Match(p, MatchType.SSN) for p in detect_ssn(text))
    matches.extend(Match(p, MatchType.BANK_ACCOUNT) for p in detect_bank_accounts(text))
    return matches


def censor_numbers(text: str) -> str:
    """Replace number patterns with their placeholder tokens."""
    censored = text
    for pattern, token in CENSOR_RULES:
        censored = pattern.sub(token, censored)
    return censored
