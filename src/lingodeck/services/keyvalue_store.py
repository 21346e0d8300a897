"""Key-value progress store: the whole session list lives in one JSON blob."""
import asyncio
import json
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional

from lingodeck.models.progress_models import LearningSession, WordStat, compute_accuracy
from lingodeck.services.progress_store import KEYVALUE, Clock, ProgressStore

logger = logging.getLogger(__name__)

SESSIONS_KEY = "learning_sessions"


class FileKeyValueStorage:
    """String values stored one file per key inside a directory."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{re.sub(r'[^A-Za-z0-9_.-]', '_', key)}.json"

    async def open(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    async def get_item(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    async def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(value, encoding="utf-8")
        tmp_path.replace(path)

    async def remove_item(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)


class KeyValueProgressStore(ProgressStore):
    """Every operation reads, and writes back, the entire session collection.

    Cost is linear in the number of stored sessions, which is fine for a
    single learner. Writes are serialized through a per-store lock so two
    concurrent record_attempt calls cannot drop each other's session.
    """

    backend_name = KEYVALUE

    def __init__(
        self,
        storage: FileKeyValueStorage,
        recent_limit: int = 20,
        clock: Optional[Clock] = None,
    ):
        super().__init__(recent_limit=recent_limit, clock=clock)
        self.storage = storage
        self._write_lock = asyncio.Lock()

    async def _open(self) -> None:
        await self.storage.open()

    async def _ensure_schema(self) -> None:
        # Nothing to declare for a key-value store
        pass

    async def _load(self) -> List[LearningSession]:
        data = await self.storage.get_item(SESSIONS_KEY)
        if not data:
            return []
        records = json.loads(data)
        if not isinstance(records, list):
            raise ValueError(f"Expected a list under {SESSIONS_KEY}, got {type(records).__name__}")
        return [LearningSession.from_dict(record) for record in records]

    async def _save(self, sessions: List[LearningSession]) -> None:
        blob = json.dumps([session.to_dict() for session in sessions], ensure_ascii=False)
        await self.storage.set_item(SESSIONS_KEY, blob)

    @staticmethod
    def _newest_first(sessions: List[LearningSession]) -> List[LearningSession]:
        # Reversing first keeps later insertions ahead on equal timestamps
        return sorted(reversed(sessions), key=lambda s: s.timestamp, reverse=True)

    async def _list_recent(self, limit: int) -> List[LearningSession]:
        sessions = await self._load()
        return self._newest_first(sessions)[:limit]

    async def _list_word_stats(self) -> List[WordStat]:
        sessions = await self._load()
        totals: Dict[str, dict] = {}
        for session in sessions:
            entry = totals.get(session.word)
            if entry is None:
                entry = {
                    "total_attempts": 0,
                    "correct_attempts": 0,
                    "last_practiced": session.timestamp,
                }
                totals[session.word] = entry
            entry["total_attempts"] += 1
            if session.correct:
                entry["correct_attempts"] += 1
            if session.timestamp > entry["last_practiced"]:
                entry["last_practiced"] = session.timestamp

        # Insertion position breaks ties between equal last_practiced values
        positions = {session.word: index for index, session in enumerate(sessions)}
        stats = [
            WordStat(
                word=word,
                total_attempts=entry["total_attempts"],
                correct_attempts=entry["correct_attempts"],
                accuracy=compute_accuracy(entry["correct_attempts"], entry["total_attempts"]),
                last_practiced=entry["last_practiced"],
            )
            for word, entry in totals.items()
        ]
        stats.sort(key=lambda stat: (stat.last_practiced, positions[stat.word]), reverse=True)
        return stats

    async def _record_attempt(self, word: str, translation: str, correct: bool) -> LearningSession:
        async with self._write_lock:
            sessions = await self._load()
            timestamp = self._now()
            session_id = int(timestamp.timestamp() * 1000)
            if sessions:
                # Millisecond ids collide under rapid writes
                session_id = max(session_id, max(s.id for s in sessions) + 1)
            session = LearningSession(
                id=session_id,
                word=word,
                translation=translation,
                correct=correct,
                timestamp=timestamp,
            )
            sessions.append(session)
            await self._save(sessions)
            return session

    async def _clear_all(self) -> None:
        async with self._write_lock:
            await self.storage.remove_item(SESSIONS_KEY)
