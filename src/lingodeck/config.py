"""Configuration settings for LingoDeck."""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Define base directory
BASE_DIR = Path(__file__).parent.parent.parent
PACKAGE_DIR = Path(__file__).parent

# Load environment variables from .env file
env_file = ".env.test" if os.getenv("ENV") == "test" else ".env"
load_dotenv(env_file)


# Define data directories from environment variables
DATA_DIR = Path(os.getenv("DATA_DIR", "./data"))
STORAGE_DIR = DATA_DIR / "storage"
AUDIO_DIR = DATA_DIR / "audio"
DEFAULT_WORDS_FILE = PACKAGE_DIR / "data" / "words.json"

STORAGE_BACKENDS = ("auto", "relational", "keyvalue")

GOOGLE_TRANSLATE_URL = "https://translation.googleapis.com/language/translate/v2"
GOOGLE_TTS_URL = "https://texttospeech.googleapis.com/v1/text:synthesize"
GOOGLE_SPEECH_URL = "https://speech.googleapis.com/v1/speech:recognize"


def ensure_directories() -> None:
    """Ensure all required directories exist."""
    directories = [
        DATA_DIR,
        STORAGE_DIR,
        AUDIO_DIR,
    ]

    for directory in directories:
        directory.mkdir(parents=True, exist_ok=True)


@dataclass
class PathSettings:
    """Path configuration settings."""
    base_dir: Path = BASE_DIR
    data_dir: Path = DATA_DIR
    audio_dir: Path = AUDIO_DIR
    words_file: Path = Path(os.getenv("WORDS_FILE", str(DEFAULT_WORDS_FILE)))


@dataclass
class DatabaseSettings:
    """Database configuration settings."""
    url: str = os.getenv("DATABASE_URL", f"sqlite:///{DATA_DIR / 'learning_progress.db'}")
    echo: bool = os.getenv("DATABASE_ECHO", "false").lower() == "true"


@dataclass
class StorageSettings:
    """Progress store settings."""
    backend: str = os.getenv("STORAGE_BACKEND", "auto").lower()
    kv_dir: Path = Path(os.getenv("KV_STORAGE_DIR", str(STORAGE_DIR)))
    recent_limit: int = int(os.getenv("RECENT_SESSIONS_LIMIT", "20"))


@dataclass
class VendorSettings:
    """Google Cloud API settings."""
    api_key: str = os.getenv("GOOGLE_CLOUD_API_KEY", "")
    translate_url: str = os.getenv("GOOGLE_TRANSLATE_URL", GOOGLE_TRANSLATE_URL)
    tts_url: str = os.getenv("GOOGLE_TTS_URL", GOOGLE_TTS_URL)
    speech_url: str = os.getenv("GOOGLE_SPEECH_URL", GOOGLE_SPEECH_URL)
    timeout: float = float(os.getenv("VENDOR_TIMEOUT", "30"))


@dataclass
class LoggingSettings:
    """Logging configuration settings."""
    level: str = os.getenv("LOG_LEVEL", "INFO")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    dir: Optional[str] = os.getenv("LOG_DIR", None)
    rotation: str = os.getenv("LOG_ROTATION", "midnight")
    interval: int = int(os.getenv("LOG_INTERVAL", "1"))
    backup_count: int = int(os.getenv("LOG_BACKUP_COUNT", "7"))


@dataclass
class FlashcardSettings:
    """Flashcard practice settings."""
    number_of_cards: int = int(os.getenv("FLASHCARD_COUNT", "10"))
    repetitions: int = int(os.getenv("FLASHCARD_REPETITIONS", "1"))
    source_language: str = os.getenv("SOURCE_LANGUAGE", "Thai")
    target_language: str = os.getenv("TARGET_LANGUAGE", "English")
    translate_delay: float = float(os.getenv("TRANSLATE_DELAY", "0.1"))  # seconds between word list requests


@dataclass
class MonitoringSettings:
    """Prometheus metrics settings."""
    enabled: bool = os.getenv("METRICS_ENABLED", "false").lower() == "true"
    port: int = int(os.getenv("METRICS_PORT", "9090"))


def get_path_settings() -> PathSettings:
    """Get path settings."""
    return PathSettings()


def get_database_settings() -> DatabaseSettings:
    """Get database settings."""
    return DatabaseSettings()


def get_storage_settings() -> StorageSettings:
    """Get storage settings."""
    return StorageSettings()


def get_vendor_settings() -> VendorSettings:
    """Get vendor API settings."""
    return VendorSettings()


def get_logging_settings() -> LoggingSettings:
    """Get logging settings."""
    return LoggingSettings()


def get_flashcard_settings() -> FlashcardSettings:
    """Get flashcard settings."""
    return FlashcardSettings()


def get_monitoring_settings() -> MonitoringSettings:
    """Get monitoring settings."""
    return MonitoringSettings()


@dataclass
class Settings:
    """Main settings class that combines all configuration settings."""
    paths: PathSettings = field(default_factory=get_path_settings)
    database: DatabaseSettings = field(default_factory=get_database_settings)
    storage: StorageSettings = field(default_factory=get_storage_settings)
    vendor: VendorSettings = field(default_factory=get_vendor_settings)
    logging: LoggingSettings = field(default_factory=get_logging_settings)
    flashcards: FlashcardSettings = field(default_factory=get_flashcard_settings)
    monitoring: MonitoringSettings = field(default_factory=get_monitoring_settings)

    def validate(self) -> None:
        """Validate settings and raise ValueError if invalid."""
        if self.storage.backend not in STORAGE_BACKENDS:
            raise ValueError(
                f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}"
            )

        if self.storage.recent_limit < 0:
            raise ValueError("RECENT_SESSIONS_LIMIT cannot be negative")

        if self.flashcards.number_of_cards < 1:
            raise ValueError("FLASHCARD_COUNT must be positive")

        if self.flashcards.repetitions < 1:
            raise ValueError("FLASHCARD_REPETITIONS must be positive")

        if self.flashcards.translate_delay < 0:
            raise ValueError("TRANSLATE_DELAY cannot be negative")

        if self.vendor.timeout <= 0:
            raise ValueError("VENDOR_TIMEOUT must be positive")


# Create global settings instance
settings = Settings()
settings.validate()
