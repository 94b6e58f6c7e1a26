"""Tests for the moderation engine (pipeline, decisions, config handling)."""

import threading
import time

import pytest

from chatguard.filters.profanity import add_custom_profanity
from chatguard.moderation.config import (
    MODERATION_PRESETS,
    ConfigError,
    ModerationLevel,
)
from chatguard.moderation.engine import (
    STAGES,
    ModerationEngine,
    create_moderation_engine,
    moderate_content,
)
from chatguard.moderation.models import Severity, ViolationCategory

PROFANITY_ONLY = dict(
    block_numbers=False,
    block_emails=False,
    block_links=False,
    block_social_media=False,
)


# --- Scenarios ---


def test_phone_number_blocked():
    result = ModerationEngine().moderate("Call me at 9876543210")
    assert not result.is_allowed
    assert result.categories == [ViolationCategory.NUMBER]
    assert "[REDACTED_PHONE]" in result.clean_content
    assert "9876543210" not in result.clean_content
    assert result.flagged_indices == [0]


def test_email_blocked():
    result = ModerationEngine().moderate("reach me at test@example.com")
    assert not result.is_allowed
    # The bare domain inside the address is reported as a link but not censored
    assert result.categories == [ViolationCategory.CONTACT, ViolationCategory.LINK]
    assert result.clean_content == "reach me at [REDACTED_EMAIL]"


def test_shortened_link_blocked():
    result = ModerationEngine().moderate("check https://bit.ly/xyz123")
    assert not result.is_allowed
    assert result.categories == [ViolationCategory.LINK]
    assert "[REDACTED_SHORT_LINK]" in result.clean_content


def test_lenient_allows_address():
    engine = ModerationEngine()
    engine.set_preset("lenient")
    text = "123 Main Street, Springfield"
    result = engine.moderate(text)
    assert result.is_allowed
    assert result.violations == []
    assert result.clean_content == text


def test_lenient_still_blocks_numbers():
    engine = ModerationEngine()
    engine.set_preset("lenient")
    result = engine.moderate("9876543210")
    assert not result.is_allowed
    assert "[REDACTED_PHONE]" in result.clean_content


# --- Invariants ---


def test_empty_message():
    result = ModerationEngine().moderate("")
    assert result.is_allowed
    assert result.violations == []
    assert result.clean_content == ""
    assert result.flagged_indices == []


def test_none_is_treated_as_empty():
    result = ModerationEngine().moderate(None)
    assert result.is_allowed
    assert result.clean_content == ""


def test_clean_message_is_identity():
    text = "Hello there, see you tomorrow!"
    for level in ModerationLevel:
        engine = ModerationEngine(MODERATION_PRESETS[level])
        result = engine.moderate(text)
        assert result.is_allowed
        assert result.violations == []
        assert result.clean_content == text


def test_disabled_email_toggle_ignores_email():
    engine = ModerationEngine(block_emails=False, block_social_media=True, block_links=False)
    text = "mail test@example.com"
    result = engine.moderate(text)
    assert result.violations == []
    assert result.clean_content == text


def test_contact_censoring_covers_filtered_subtypes():
    # Moderate preset does not report addresses, but the contact pass
    # triggered by the handle still censors them
    result = ModerationEngine().moderate("@bob lives at 42 Baker Street")
    contact = result.violations[0]
    assert contact.category == ViolationCategory.CONTACT
    assert contact.matches == ["@bob"]
    assert result.clean_content == " [REDACTED_HANDLE] lives at [REDACTED_ADDRESS]"


def test_block_iff_blocking_violation():
    engine = ModerationEngine(MODERATION_PRESETS[ModerationLevel.STRICT])
    samples = [
        "",
        "hello",
        "well shit",
        "fuck shit damn crap",
        "Call me at 9876543210",
        "our site is acme.com",
        "#weekend plans",
    ]
    for text in samples:
        result = engine.moderate(text)
        has_block = any(v.severity == Severity.BLOCK for v in result.violations)
        assert result.is_allowed == (not has_block), text


def test_moderation_is_deterministic():
    engine = ModerationEngine(MODERATION_PRESETS[ModerationLevel.STRICT])
    text = "ping @bob at https://acme.com/x or 9876543210, shit"
    first = engine.moderate(text)
    second = engine.moderate(text)
    assert first.clean_content == second.clean_content
    assert first.categories == second.categories
    assert first.to_dict() == second.to_dict()


def test_long_dotted_run_is_scanned_quickly():
    text = "a." * 10000
    start = time.perf_counter()
    result = ModerationEngine().moderate(text)
    assert time.perf_counter() - start < 1.0
    assert result.violations == []
    assert result.clean_content == text


def test_stage_order():
    assert [s.category for s in STAGES] == [
        ViolationCategory.NUMBER,
        ViolationCategory.CONTACT,
        ViolationCategory.LINK,
        ViolationCategory.PROFANITY,
    ]


# --- Profanity severity ---


def test_single_profanity_is_warning():
    result = ModerationEngine(**PROFANITY_ONLY).moderate("well shit")
    assert result.is_allowed
    [violation] = result.violations
    assert violation.severity == Severity.WARNING
    assert violation.description == "Message contains low level profanity"
    assert result.clean_content == "well ****"


def test_three_profanities_is_medium_warning():
    result = ModerationEngine(**PROFANITY_ONLY).moderate("shit damn crap")
    assert result.is_allowed
    assert result.violations[0].severity == Severity.WARNING
    assert "medium" in result.violations[0].description


def test_four_profanities_block():
    result = ModerationEngine(**PROFANITY_ONLY).moderate("fuck shit damn crap")
    assert not result.is_allowed
    assert result.violations[0].severity == Severity.BLOCK
    assert "high" in result.violations[0].description
    assert result.clean_content == "**** **** **** ****"


def test_profanity_reported_without_censoring():
    engine = ModerationEngine(censor_profanity=False, **PROFANITY_ONLY)
    result = engine.moderate("well shit")
    assert result.violations[0].matches == ["shit"]
    assert result.clean_content == "well shit"


def test_custom_profanity_shared_across_engines():
    first = ModerationEngine(**PROFANITY_ONLY)
    second = ModerationEngine(**PROFANITY_ONLY)
    add_custom_profanity("en", ["zorblax"])
    assert first.moderate("zorblax").violations[0].matches == ["zorblax"]
    assert second.moderate("ZORBLAX").clean_content == "*******"


# --- Configuration ---


def test_default_config_is_moderate_preset():
    assert ModerationEngine().get_config() == MODERATION_PRESETS[ModerationLevel.MODERATE]


def test_constructor_overrides():
    engine = ModerationEngine({"block_links": False}, block_numbers=False)
    config = engine.get_config()
    assert config.block_links is False
    assert config.block_numbers is False
    assert config.block_emails is True


def test_update_config_is_partial():
    engine = ModerationEngine()
    engine.update_config(block_links=False)
    engine.update_config({"profanity_languages": ["en"]})
    config = engine.get_config()
    assert config.block_links is False
    assert config.block_numbers is True
    assert config.profanity_languages == ("en",)


def test_update_config_rejects_unknown_keys():
    with pytest.raises(ConfigError):
        ModerationEngine().update_config(block_everything=True)


def test_update_config_rejects_non_boolean_toggle():
    engine = ModerationEngine()
    engine.update_config(block_links=False)
    with pytest.raises(ConfigError):
        engine.update_config(block_links="no")
    assert engine.get_config().block_links is False
    assert not engine.is_type_blocked("links")

    with pytest.raises(ConfigError):
        ModerationEngine(block_numbers="yes")


def test_set_preset_lenient():
    engine = ModerationEngine()
    engine.set_preset("lenient")
    assert engine.get_config() == MODERATION_PRESETS[ModerationLevel.LENIENT]
    assert engine.get_config().to_dict() == {
        "block_numbers": True,
        "block_emails": False,
        "block_links": False,
        "block_social_media": False,
        "block_physical_addresses": False,
        "enable_profanity_filter": False,
        "censor_profanity": False,
        "profanity_languages": [],
        "moderation_level": "lenient",
    }


def test_set_preset_rejects_unknown_name():
    with pytest.raises(ConfigError):
        ModerationEngine().set_preset("paranoid")


def test_get_config_returns_copy():
    engine = ModerationEngine()
    assert engine.get_config() is not engine.get_config()


def test_is_type_blocked():
    engine = ModerationEngine()
    assert engine.is_type_blocked("numbers")
    assert engine.is_type_blocked("emails")
    assert engine.is_type_blocked("links")
    assert engine.is_type_blocked("profanity")
    assert not engine.is_type_blocked("addresses")

    engine.set_preset(ModerationLevel.LENIENT)
    assert engine.is_type_blocked("numbers")
    assert not engine.is_type_blocked("emails")
    assert not engine.is_type_blocked("profanity")


def test_preset_swaps_during_moderation():
    engine = ModerationEngine()
    text = "Call me at 9876543210"
    errors = []

    def swap():
        for i in range(200):
            engine.set_preset("strict" if i % 2 else "lenient")

    def moderate():
        for _ in range(200):
            try:
                result = engine.moderate(text)
                assert result.clean_content == "Call me at [REDACTED_PHONE]"
            except AssertionError as e:
                errors.append(e)

    threads = [threading.Thread(target=swap)] + [
        threading.Thread(target=moderate) for _ in range(4)
    ]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []


# --- Convenience ---


def test_moderate_content_uses_defaults():
    assert moderate_content("Call me at 9876543210").is_allowed is False


def test_create_moderation_engine():
    engine = create_moderation_engine(block_numbers=False)
    assert engine.moderate("9876543210").is_allowed


def test_result_to_dict():
    data = ModerationEngine().moderate("Call me at 9876543210").to_dict()
    assert data["is_allowed"] is False
    assert data["violations"][0]["category"] == "number"
    assert data["violations"][0]["severity"] == "block"
    assert data["flagged_indices"] == [0]
