"""Tests for configuration settings."""
import os

import pytest

from lingodeck.config import DATA_DIR, DEFAULT_WORDS_FILE, Settings, settings


def test_data_directories_exist() -> None:
    """Test that all required directories exist."""
    from lingodeck.config import AUDIO_DIR, STORAGE_DIR

    assert DATA_DIR.exists()
    assert STORAGE_DIR.exists()
    assert AUDIO_DIR.exists()
    assert DEFAULT_WORDS_FILE.exists()


def test_settings_defaults() -> None:
    """Test default settings values."""
    assert settings.storage.recent_limit == 20
    assert settings.storage.backend in ("auto", "relational", "keyvalue")
    assert settings.flashcards.number_of_cards == 10
    assert settings.flashcards.repetitions == 1
    assert settings.flashcards.source_language == "Thai"
    assert settings.flashcards.target_language == "English"
    assert settings.vendor.translate_url.startswith("https://translation.googleapis.com/")
    assert settings.vendor.speech_url.endswith("speech:recognize")


def test_settings_from_env(monkeypatch) -> None:
    """Test that settings can be overridden by environment variables."""
    monkeypatch.setenv("GOOGLE_CLOUD_API_KEY", "test_key_123")
    monkeypatch.setenv("RECENT_SESSIONS_LIMIT", "50")

    # Reload the module so class defaults pick up the environment
    import importlib
    import lingodeck.config as config_module

    reloaded = importlib.reload(config_module)
    try:
        test_settings = reloaded.Settings()
        assert test_settings.vendor.api_key == "test_key_123"
        assert test_settings.storage.recent_limit == 50
    finally:
        monkeypatch.undo()
        importlib.reload(config_module)


@pytest.mark.parametrize(
    "section,attribute,value",
    [
        ("storage", "backend", "cloud"),
        ("storage", "recent_limit", -1),
        ("flashcards", "number_of_cards", 0),
        ("flashcards", "repetitions", 0),
        ("flashcards", "translate_delay", -0.5),
        ("vendor", "timeout", 0),
    ],
)
def test_validate_rejects_invalid_values(section: str, attribute: str, value) -> None:
    """Test that invalid settings are rejected."""
    test_settings = Settings()
    setattr(getattr(test_settings, section), attribute, value)

    with pytest.raises(ValueError):
        test_settings.validate()


def test_validate_accepts_defaults() -> None:
    """Test that the default settings validate."""
    Settings().validate()
    assert os.getenv("ENV") == "test"
