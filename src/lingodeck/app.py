"""Main application object wiring the store, vendor client and services."""
import logging
from typing import List, Optional

from lingodeck.config import Settings, settings as default_settings
from lingodeck.models.progress_models import LearningSession
from lingodeck.monitoring import start_monitoring
from lingodeck.services.flashcard_service import FlashcardService
from lingodeck.services.progress_store import (
    Clock,
    ProgressStore,
    StoreConfig,
    create_progress_store,
)
from lingodeck.services.translation_client import GoogleCloudClient
from lingodeck.services.word_list_service import WordListService

SAMPLE_SESSIONS = [
    ("สวัสดี", "Hello", True),
    ("ขอบคุณ", "Thank you", True),
    ("สวัสดี", "Hello", False),
    ("ลาก่อน", "Goodbye", True),
    ("ขอบคุณ", "Thank you", True),
]


class LingoDeck:
    """Owns the progress store and vendor client for one process."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        store_config: Optional[StoreConfig] = None,
        client: Optional[GoogleCloudClient] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize the application."""
        self.settings = settings or default_settings
        self.store_config = store_config or StoreConfig.from_settings(self.settings)
        self.clock = clock
        self.store: Optional[ProgressStore] = None
        self.client = client
        self._owns_client = client is None
        self.word_list = WordListService(self.settings.paths.words_file)
        self.flashcards: Optional[FlashcardService] = None
        self.running = False
        self.logger = logging.getLogger(__name__)

    async def start(self) -> None:
        """Open the store and create the services."""
        if self.running:
            return

        try:
            self.store = create_progress_store(self.store_config, clock=self.clock)
            await self.store.open()
            await self.store.ensure_schema()
            self.logger.info(f"Progress store ready ({self.store_config.backend})")

            if self.client is None:
                self.client = GoogleCloudClient.from_settings(self.settings)
            if not self.settings.vendor.api_key:
                self.logger.warning("GOOGLE_CLOUD_API_KEY is not set; vendor calls will fail")

            self.flashcards = FlashcardService(
                self.store,
                self.client,
                source_language=self.settings.flashcards.source_language,
                target_language=self.settings.flashcards.target_language,
            )

            if self.settings.monitoring.enabled:
                start_monitoring(self.settings.monitoring.port)
                self.logger.info(f"Metrics server started on port {self.settings.monitoring.port}")

            self.running = True

        except Exception as e:
            self.logger.error("Failed to start application: %s", str(e))
            await self.stop()
            raise

    async def stop(self) -> None:
        """Release the store and the HTTP client."""
        try:
            if self.store:
                await self.store.close()
                self.store = None
            if self.client and self._owns_client:
                await self.client.close()
                self.client = None
        finally:
            self.flashcards = None
            self.running = False

    async def add_sample_data(self) -> List[LearningSession]:
        """Record a handful of sample attempts."""
        sessions = []
        for word, translation, correct in SAMPLE_SESSIONS:
            sessions.append(await self.store.record_attempt(word, translation, correct))
        self.logger.info(f"Added {len(sessions)} sample sessions")
        return sessions

    async def __aenter__(self) -> "LingoDeck":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.stop()
