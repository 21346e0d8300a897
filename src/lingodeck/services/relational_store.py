"""Relational progress store backed by SQLAlchemy."""
import logging
from typing import List, Optional

from sqlalchemy import case, func
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from lingodeck.models.base import create_db_engine, create_session_factory, init_db
from lingodeck.models.models import LearningSessionRecord
from lingodeck.models.progress_models import (
    LearningSession,
    WordStat,
    compute_accuracy,
    parse_timestamp,
)
from lingodeck.services.progress_store import RELATIONAL, Clock, ProgressStore

logger = logging.getLogger(__name__)


class RelationalProgressStore(ProgressStore):
    """Stores sessions in one append-only table and aggregates in SQL."""

    backend_name = RELATIONAL

    def __init__(
        self,
        database_url: str,
        echo: bool = False,
        recent_limit: int = 20,
        clock: Optional[Clock] = None,
    ):
        super().__init__(recent_limit=recent_limit, clock=clock)
        self.database_url = database_url
        self.echo = echo
        self.engine: Optional[Engine] = None
        self.session_factory: Optional[sessionmaker] = None

    async def _open(self) -> None:
        self.engine = create_db_engine(self.database_url, echo=self.echo)
        self.session_factory = create_session_factory(self.engine)

    async def _ensure_schema(self) -> None:
        init_db(self.engine)
        logger.info("Database initialized successfully")

    async def _list_recent(self, limit: int) -> List[LearningSession]:
        with self.session_factory() as db:
            records = (
                db.query(LearningSessionRecord)
                .order_by(LearningSessionRecord.timestamp.desc(), LearningSessionRecord.id.desc())
                .limit(limit)
                .all()
            )
            return [self._to_session(record) for record in records]

    async def _list_word_stats(self) -> List[WordStat]:
        correct_count = func.sum(case((LearningSessionRecord.correct == True, 1), else_=0))
        last_practiced = func.max(LearningSessionRecord.timestamp)
        with self.session_factory() as db:
            rows = (
                db.query(
                    LearningSessionRecord.word,
                    func.count(LearningSessionRecord.id).label("total_attempts"),
                    correct_count.label("correct_attempts"),
                    last_practiced.label("last_practiced"),
                )
                .group_by(LearningSessionRecord.word)
                .order_by(last_practiced.desc(), func.max(LearningSessionRecord.id).desc())
                .all()
            )
        stats = []
        for row in rows:
            total = int(row.total_attempts)
            correct = int(row.correct_attempts or 0)
            stats.append(
                WordStat(
                    word=row.word,
                    total_attempts=total,
                    correct_attempts=correct,
                    accuracy=compute_accuracy(correct, total),
                    last_practiced=parse_timestamp(row.last_practiced),
                )
            )
        return stats

    async def _record_attempt(self, word: str, translation: str, correct: bool) -> LearningSession:
        with self.session_factory() as db:
            record = LearningSessionRecord(
                word=word,
                translation=translation,
                correct=correct,
                timestamp=self._now(),
            )
            db.add(record)
            try:
                db.commit()
            except Exception:
                db.rollback()
                raise
            db.refresh(record)
            return self._to_session(record)

    async def _clear_all(self) -> None:
        with self.session_factory() as db:
            try:
                db.query(LearningSessionRecord).delete()
                db.commit()
            except Exception:
                db.rollback()
                raise

    async def _close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.session_factory = None

    @staticmethod
    def _to_session(record: LearningSessionRecord) -> LearningSession:
        return LearningSession(
            id=record.id,
            word=record.word,
            translation=record.translation,
            correct=bool(record.correct),
            timestamp=parse_timestamp(record.timestamp),
        )
