"""Models for progress-tracking data structures."""
import math
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Dict, List


class StoreOperation(Enum):
    """Operations a progress store can execute."""
    LIST_RECENT = "list_recent"
    LIST_WORD_STATS = "list_word_stats"
    INSERT = "insert"
    DELETE_ALL = "delete_all"


def compute_accuracy(correct_attempts: int, total_attempts: int) -> float:
    """Percentage of correct attempts with one decimal place, rounded half up."""
    if total_attempts <= 0:
        return 0.0
    return math.floor(correct_attempts * 1000 / total_attempts + 0.5) / 10


def parse_timestamp(value: Any) -> datetime:
    """Parse a stored timestamp into a timezone-aware datetime."""
    if isinstance(value, datetime):
        timestamp = value
    else:
        timestamp = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=UTC)
    return timestamp


@dataclass(frozen=True)
class LearningSession:
    """One recorded practice attempt."""
    id: int
    word: str
    translation: str
    correct: bool
    timestamp: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the key-value blob record layout."""
        return {
            "id": self.id,
            "word": self.word,
            "translation": self.translation,
            "correct": self.correct,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LearningSession":
        """Deserialize a key-value blob record."""
        return cls(
            id=int(data["id"]),
            word=str(data["word"]),
            translation=str(data["translation"]),
            correct=bool(data["correct"]),
            timestamp=parse_timestamp(data["timestamp"]),
        )


@dataclass(frozen=True)
class WordStat:
    """Aggregate practice statistics for one word."""
    word: str
    total_attempts: int
    correct_attempts: int
    accuracy: float
    last_practiced: datetime


@dataclass(frozen=True)
class ProgressSummary:
    """Overall figures shown above the per-word statistics."""
    total_sessions: int
    words_practiced: int
    average_accuracy: int


def summarize_progress(stats: List[WordStat]) -> ProgressSummary:
    """Totals across words; average accuracy is the rounded mean of word accuracies."""
    if not stats:
        return ProgressSummary(total_sessions=0, words_practiced=0, average_accuracy=0)
    mean = sum(stat.accuracy for stat in stats) / len(stats)
    return ProgressSummary(
        total_sessions=sum(stat.total_attempts for stat in stats),
        words_practiced=len(stats),
        average_accuracy=math.floor(mean + 0.5),
    )
