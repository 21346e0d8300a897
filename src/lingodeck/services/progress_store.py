"""Progress store interface and backend selection."""
import importlib.util
import logging
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import Any, Callable, List, Optional

from lingodeck.config import Settings
from lingodeck.exceptions import StorageError, StoreNotOpenError
from lingodeck.models.progress_models import LearningSession, StoreOperation, WordStat
from lingodeck import monitoring

logger = logging.getLogger(__name__)

RELATIONAL = "relational"
KEYVALUE = "keyvalue"

# Platforms without a usable native SQLite
KEYVALUE_PLATFORMS = ("emscripten", "wasi")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(UTC)


@dataclass
class StoreConfig:
    """Progress store configuration, built once at process start."""
    backend: str
    database_url: str
    kv_dir: Path
    recent_limit: int = 20
    echo: bool = False

    @classmethod
    def from_settings(cls, settings: Settings, platform: Optional[str] = None) -> "StoreConfig":
        """Build a store configuration, resolving the backend for this platform."""
        backend = settings.storage.backend
        if backend == "auto":
            backend = select_backend(platform)
        return cls(
            backend=backend,
            database_url=settings.database.url,
            kv_dir=settings.storage.kv_dir,
            recent_limit=settings.storage.recent_limit,
            echo=settings.database.echo,
        )


def select_backend(platform: Optional[str] = None) -> str:
    """Pick the storage backend supported by the runtime platform."""
    platform = platform or sys.platform
    if platform in KEYVALUE_PLATFORMS:
        return KEYVALUE
    if importlib.util.find_spec("sqlite3") is None:
        return KEYVALUE
    return RELATIONAL


class ProgressStore(ABC):
    """Records practice attempts and answers progress queries.

    Public operations wrap the backend hooks with the failure policy shared
    by every backend: read failures are logged and degrade to an empty
    result, write failures are logged and re-raised as StorageError.
    """

    backend_name: str = ""

    def __init__(self, recent_limit: int = 20, clock: Optional[Clock] = None):
        self.recent_limit = recent_limit
        self.clock = clock or utc_now
        self._opened = False

    @property
    def is_open(self) -> bool:
        return self._opened

    async def open(self) -> "ProgressStore":
        """Acquire the underlying store. Safe to call more than once."""
        if not self._opened:
            try:
                await self._open()
            except Exception as e:
                self._record_error("open", e)
                raise StorageError(f"Failed to open {self.backend_name} store: {e}") from e
            self._opened = True
            logger.info(f"Opened {self.backend_name} progress store")
        return self

    async def ensure_schema(self) -> None:
        """Declare the expected shape without touching existing data."""
        self._check_open()
        try:
            await self._ensure_schema()
        except Exception as e:
            self._record_error("ensure_schema", e)
            raise StorageError(f"Failed to prepare {self.backend_name} store: {e}") from e

    async def list_recent(self, limit: Optional[int] = None) -> List[LearningSession]:
        """Most recent sessions first, at most `limit` of them."""
        self._check_open()
        if limit is None:
            limit = self.recent_limit
        if limit <= 0:
            return []
        monitoring.store_operations.labels(self.backend_name, StoreOperation.LIST_RECENT.value).inc()
        try:
            return await self._list_recent(limit)
        except Exception as e:
            self._record_error(StoreOperation.LIST_RECENT.value, e)
            return []

    async def list_word_stats(self) -> List[WordStat]:
        """One aggregate per distinct word, most recently practiced first."""
        self._check_open()
        monitoring.store_operations.labels(self.backend_name, StoreOperation.LIST_WORD_STATS.value).inc()
        try:
            return await self._list_word_stats()
        except Exception as e:
            self._record_error(StoreOperation.LIST_WORD_STATS.value, e)
            return []

    async def record_attempt(self, word: str, translation: str, correct: bool) -> LearningSession:
        """Append a new session stamped with the current time.

        Word and translation are stored with surrounding whitespace removed.
        """
        self._check_open()
        word = (word or "").strip()
        translation = (translation or "").strip()
        if not word:
            raise ValueError("Word cannot be empty")
        monitoring.store_operations.labels(self.backend_name, StoreOperation.INSERT.value).inc()
        try:
            session = await self._record_attempt(word, translation, bool(correct))
        except Exception as e:
            self._record_error(StoreOperation.INSERT.value, e)
            raise StorageError(f"Failed to save learning session: {e}") from e
        monitoring.attempts_recorded.labels(str(session.correct).lower()).inc()
        logger.debug(f"Recorded attempt for word: {word}, correct: {session.correct}")
        return session

    async def clear_all(self) -> None:
        """Delete every recorded session."""
        self._check_open()
        monitoring.store_operations.labels(self.backend_name, StoreOperation.DELETE_ALL.value).inc()
        try:
            await self._clear_all()
        except Exception as e:
            self._record_error(StoreOperation.DELETE_ALL.value, e)
            raise StorageError(f"Failed to clear learning sessions: {e}") from e
        logger.info(f"Cleared all sessions from {self.backend_name} store")

    async def execute(self, operation: StoreOperation, **params: Any) -> Any:
        """Run an operation selected by its enumerated type."""
        handlers = {
            StoreOperation.LIST_RECENT: self.list_recent,
            StoreOperation.LIST_WORD_STATS: self.list_word_stats,
            StoreOperation.INSERT: self.record_attempt,
            StoreOperation.DELETE_ALL: self.clear_all,
        }
        return await handlers[operation](**params)

    async def close(self) -> None:
        """Release the underlying resources."""
        if self._opened:
            await self._close()
            self._opened = False
            logger.info(f"Closed {self.backend_name} progress store")

    def _now(self) -> datetime:
        # Stored timestamps are always UTC, whatever zone the clock reports
        return self.clock().astimezone(UTC)

    def _check_open(self) -> None:
        if not self._opened:
            raise StoreNotOpenError(f"{self.backend_name} store is not open")

    def _record_error(self, operation: str, error: Exception) -> None:
        monitoring.store_errors.labels(self.backend_name, operation).inc()
        logger.error(f"Error in {self.backend_name} store during {operation}: {error}")

    @abstractmethod
    async def _open(self) -> None:
        """Acquire or create the underlying store."""

    @abstractmethod
    async def _ensure_schema(self) -> None:
        """Create tables or keys if needed."""

    @abstractmethod
    async def _list_recent(self, limit: int) -> List[LearningSession]:
        pass

    @abstractmethod
    async def _list_word_stats(self) -> List[WordStat]:
        pass

    @abstractmethod
    async def _record_attempt(self, word: str, translation: str, correct: bool) -> LearningSession:
        pass

    @abstractmethod
    async def _clear_all(self) -> None:
        pass

    async def _close(self) -> None:
        pass


def create_progress_store(config: StoreConfig, clock: Optional[Clock] = None) -> ProgressStore:
    """Instantiate the backend named by the store configuration."""
    if config.backend == RELATIONAL:
        from lingodeck.services.relational_store import RelationalProgressStore

        return RelationalProgressStore(
            config.database_url,
            echo=config.echo,
            recent_limit=config.recent_limit,
            clock=clock,
        )
    if config.backend == KEYVALUE:
        from lingodeck.services.keyvalue_store import FileKeyValueStorage, KeyValueProgressStore

        return KeyValueProgressStore(
            FileKeyValueStorage(config.kv_dir),
            recent_limit=config.recent_limit,
            clock=clock,
        )
    raise ValueError(f"Unknown storage backend: {config.backend}")
