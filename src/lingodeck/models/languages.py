"""Supported languages and their Google Cloud codes."""
from dataclasses import dataclass
from typing import List, Optional

DEFAULT_LANGUAGE_CODE = "en"
DEFAULT_LOCALE = "en-US"
DEFAULT_VOICE = "en-US-Standard-A"


@dataclass(frozen=True)
class Language:
    """A language the translator and speech services understand."""
    name: str
    code: str
    locale: str

    @property
    def voice(self) -> str:
        return f"{self.locale}-Standard-A"


LANGUAGES: List[Language] = [
    Language("English", "en", "en-US"),
    Language("Spanish", "es", "es-ES"),
    Language("French", "fr", "fr-FR"),
    Language("German", "de", "de-DE"),
    Language("Italian", "it", "it-IT"),
    Language("Portuguese", "pt", "pt-BR"),
    Language("Chinese", "zh", "zh-CN"),
    Language("Japanese", "ja", "ja-JP"),
    Language("Korean", "ko", "ko-KR"),
    Language("Hindi", "hi", "hi-IN"),
    Language("Arabic", "ar", "ar-XA"),
    Language("Russian", "ru", "ru-RU"),
    Language("Thai", "th", "th-TH"),
]


def find_language(name_or_code: Optional[str]) -> Optional[Language]:
    """Look a language up by display name or ISO code, case-insensitively."""
    if not name_or_code:
        return None
    key = name_or_code.strip().lower()
    for language in LANGUAGES:
        if key in (language.name.lower(), language.code, language.locale.lower()):
            return language
    return None


def get_language_code(name_or_code: Optional[str]) -> str:
    """Short code for the translation API, English when unknown."""
    language = find_language(name_or_code)
    return language.code if language else DEFAULT_LANGUAGE_CODE


def get_locale(name_or_code: Optional[str]) -> str:
    """Full locale for the speech APIs, en-US when unknown."""
    language = find_language(name_or_code)
    return language.locale if language else DEFAULT_LOCALE


def get_voice_name(name_or_code: Optional[str]) -> str:
    """Standard voice for text-to-speech, the US English voice when unknown."""
    language = find_language(name_or_code)
    return language.voice if language else DEFAULT_VOICE
