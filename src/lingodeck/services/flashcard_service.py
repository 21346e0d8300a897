"""Service for flashcard practice: answer checking and progress recording."""
import logging
import random
from typing import List, Optional

from lingodeck.exceptions import CredentialMissingError, VendorError
from lingodeck.models.flashcard_models import AnswerResult, FlashCard, FlashcardSession
from lingodeck.services.progress_store import ProgressStore
from lingodeck.services.translation_client import GoogleCloudClient

logger = logging.getLogger(__name__)

CORRECT_FEEDBACK = "Correct!"
NOT_UNDERSTOOD_FEEDBACK = "Could not understand pronunciation. Please try again."
NOT_TRANSLATED_FEEDBACK = "Could not translate pronunciation. Please try again."


def answers_match(given: str, expected: str) -> bool:
    """Lenient, case-insensitive comparison of an answer with the expected text.

    Matches when both are equal, when the expected text contains the answer,
    or when the answer contains the first of several slash-separated
    alternatives ("Cold / Evening" accepts "cold").
    """
    given = (given or "").strip().lower()
    expected = (expected or "").strip().lower()
    if not given or not expected:
        return False
    first_alternative = expected.split("/")[0].strip()
    return (
        given == expected
        or given in expected
        or bool(first_alternative and first_alternative in given)
    )


class FlashcardService:
    """Runs flashcard sessions and records every checked answer."""

    def __init__(
        self,
        store: ProgressStore,
        client: GoogleCloudClient,
        source_language: str = "Thai",
        target_language: str = "English",
        rng: Optional[random.Random] = None,
    ):
        self.store = store
        self.client = client
        self.source_language = source_language
        self.target_language = target_language
        self.rng = rng or random.Random()

    def start_session(
        self, cards: List[FlashCard], number_of_cards: int = 10, repetitions: int = 1
    ) -> FlashcardSession:
        """Shuffle the deck and take the first `number_of_cards` cards."""
        if not cards:
            raise ValueError("No flashcards available")
        if number_of_cards < 1 or repetitions < 1:
            raise ValueError("Number of cards and repetitions must be positive")

        deck = list(cards)
        self.rng.shuffle(deck)
        session = FlashcardSession(cards=deck[:number_of_cards], repetitions=repetitions)
        logger.info(
            f"Started flashcard session with {len(session.cards)} cards, {repetitions} repetition(s)"
        )
        return session

    async def check_translation(self, session: FlashcardSession, answer: str) -> AnswerResult:
        """Check a typed translation of the current card."""
        card = self._require_card(session)
        correct = answers_match(answer, card.translation)
        feedback = CORRECT_FEEDBACK if correct else f"Incorrect! The answer is: {card.translation}"
        result = AnswerResult(correct=correct, expected=card.translation, feedback=feedback)
        await self._record(session, card, result)
        return result

    async def check_pronunciation(self, session: FlashcardSession, audio: bytes) -> AnswerResult:
        """Transcribe spoken audio, translate it and compare with the current card."""
        card = self._require_card(session)

        try:
            spoken = await self.client.recognize(audio, self.source_language)
        except (CredentialMissingError, VendorError) as e:
            logger.error(f"Pronunciation check error: {e}")
            spoken = ""
        if not spoken:
            return AnswerResult(correct=False, expected=card.translation, feedback=NOT_UNDERSTOOD_FEEDBACK)

        try:
            translated = await self.client.translate_text(spoken, self.source_language, self.target_language)
        except (CredentialMissingError, VendorError) as e:
            logger.error(f"Pronunciation translation error: {e}")
            translated = ""
        if not translated:
            return AnswerResult(
                correct=False,
                expected=card.translation,
                feedback=NOT_TRANSLATED_FEEDBACK,
                heard=spoken,
            )

        correct = answers_match(translated, card.translation)
        if correct:
            feedback = CORRECT_FEEDBACK
        else:
            feedback = f'Incorrect! You said: "{spoken}" ({translated}). Try again.'
        result = AnswerResult(
            correct=correct,
            expected=card.translation,
            feedback=feedback,
            heard=spoken,
            heard_translation=translated,
        )
        await self._record(session, card, result)
        return result

    async def _record(self, session: FlashcardSession, card: FlashCard, result: AnswerResult) -> None:
        session.stats.add(result.correct)
        await self.store.record_attempt(card.word, card.translation, result.correct)
        result.recorded = True

    @staticmethod
    def _require_card(session: FlashcardSession) -> FlashCard:
        card = session.current_card
        if card is None:
            raise ValueError("Flashcard session has no current card")
        return card

    @staticmethod
    def summary(session: FlashcardSession) -> str:
        """Human-readable results for a finished session."""
        stats = session.stats
        return (
            f"Results:\n"
            f"  Correct: {stats.correct}\n"
            f"  Incorrect: {stats.incorrect}\n"
            f"  Accuracy: {stats.accuracy}%"
        )
