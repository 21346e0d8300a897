"""Service for the static word list and its API-verified translations."""
import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from lingodeck.exceptions import CredentialMissingError, VendorError
from lingodeck.models.flashcard_models import FlashCard
from lingodeck.services.translation_client import GoogleCloudClient

logger = logging.getLogger(__name__)

# word -> [primary translation, api-verified translation]
WordList = Dict[str, List[str]]


@dataclass
class TranslationSummary:
    """Outcome of one translate-missing run."""
    total_words: int = 0
    needing_translation: int = 0
    processed: int = 0
    successful: int = 0
    failed: int = 0
    perfect_matches: int = 0

    @property
    def remaining(self) -> int:
        return self.needing_translation - self.processed

    @property
    def success_rate(self) -> float:
        if not self.processed:
            return 0.0
        return round(self.successful / self.processed * 100, 1)


class WordListService:
    """Loads, translates and saves the word list file."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> WordList:
        """Read the word list, normalizing every entry to two strings."""
        with open(self.path, encoding="utf-8") as f:
            raw = json.load(f)
        if not isinstance(raw, dict):
            raise ValueError(f"Word list {self.path} must be a JSON object")

        words: WordList = {}
        for word, translations in raw.items():
            if isinstance(translations, str):
                translations = [translations]
            if not isinstance(translations, list):
                logger.warning(f"Skipping malformed word list entry: {word}")
                continue
            primary = str(translations[0]) if len(translations) > 0 else ""
            verified = str(translations[1]) if len(translations) > 1 else ""
            words[word] = [primary, verified]
        logger.debug(f"Loaded {len(words)} words from {self.path}")
        return words

    def save(self, words: WordList) -> None:
        """Write the word list back to disk."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(words, f, ensure_ascii=False, indent=2)
        logger.info(f"Successfully updated {self.path}")

    @staticmethod
    def build_flashcards(words: WordList) -> List[FlashCard]:
        """Cards for every word that has a non-empty primary translation."""
        return [
            FlashCard(word=word, translation=translations[0])
            for word, translations in words.items()
            if translations and translations[0].strip()
        ]

    @staticmethod
    def words_needing_translation(words: WordList) -> List[Tuple[str, str]]:
        """(word, primary translation) pairs with no API translation yet."""
        return [
            (word, translations[0])
            for word, translations in words.items()
            if not translations[1]
        ]

    async def translate_missing(
        self,
        client: GoogleCloudClient,
        count: Optional[int] = None,
        from_lang: str = "th",
        to_lang: str = "en",
        delay: float = 0.1,
    ) -> TranslationSummary:
        """Fill in missing API translations and save the word list.

        Args:
            client: Vendor client used for each translation request.
            count: Translate at most this many words; all when None.
            from_lang: Source language name or code.
            to_lang: Target language name or code.
            delay: Seconds to wait between requests.

        Raises:
            CredentialMissingError: If no API key is configured.
        """
        if not client.api_key:
            raise CredentialMissingError()
        if count is not None and count <= 0:
            raise ValueError("Count must be a positive number")

        words = self.load()
        pending = self.words_needing_translation(words)
        summary = TranslationSummary(total_words=len(words), needing_translation=len(pending))
        if not pending:
            logger.info("All words already have API translations")
            return summary

        to_process = pending[:count] if count else pending
        logger.info(
            f"Words in file: {summary.total_words}, needing translation: {len(pending)}, "
            f"processing this run: {len(to_process)}"
        )

        for i, (word, primary) in enumerate(to_process, start=1):
            logger.info(f"[{i}/{len(to_process)}] Translating: {word}")
            try:
                api_translation = await client.translate_text(word, from_lang, to_lang)
            except VendorError as e:
                logger.error(f"Translation error for {word}: {e}")
                api_translation = ""

            summary.processed += 1
            if api_translation:
                words[word][1] = api_translation
                summary.successful += 1
                if primary.lower() == api_translation.lower():
                    summary.perfect_matches += 1
                    logger.info(f"Perfect match: {primary}")
                else:
                    logger.info(f"Different translation: {primary} vs {api_translation}")
            else:
                summary.failed += 1

            if i < len(to_process) and delay > 0:
                await asyncio.sleep(delay)

        self.save(words)
        logger.info(
            f"Translation summary: successful {summary.successful}, failed {summary.failed}, "
            f"success rate {summary.success_rate}%, remaining {summary.remaining}"
        )
        return summary
