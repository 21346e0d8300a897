"""Models for flashcard practice sessions."""
import math
from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class FlashCard:
    """A word to practice and its expected translation."""
    word: str
    translation: str


@dataclass
class SessionStats:
    """Running totals for one practice session."""
    correct: int = 0
    incorrect: int = 0

    @property
    def total(self) -> int:
        return self.correct + self.incorrect

    @property
    def accuracy(self) -> int:
        """Whole-number percentage of correct answers, rounded half up."""
        if not self.total:
            return 0
        return math.floor(self.correct * 100 / self.total + 0.5)

    def add(self, correct: bool) -> None:
        if correct:
            self.correct += 1
        else:
            self.incorrect += 1


@dataclass
class AnswerResult:
    """Outcome of checking one answer."""
    correct: bool
    expected: str
    feedback: str
    heard: Optional[str] = None
    heard_translation: Optional[str] = None
    recorded: bool = False


@dataclass
class FlashcardSession:
    """Position and progress through a deck, repeated `repetitions` times."""
    cards: List[FlashCard]
    repetitions: int = 1
    current_index: int = 0
    current_repetition: int = 1
    completed: bool = False
    stats: SessionStats = field(default_factory=SessionStats)

    @property
    def current_card(self) -> Optional[FlashCard]:
        if self.completed or not self.cards:
            return None
        return self.cards[self.current_index]

    def next_card(self) -> bool:
        """Advance to the next card. Returns False once the session is over."""
        if self.completed:
            return False
        if self.current_index < len(self.cards) - 1:
            self.current_index += 1
        elif self.current_repetition < self.repetitions:
            self.current_repetition += 1
            self.current_index = 0
        else:
            self.completed = True
            return False
        return True

    def previous_card(self) -> bool:
        """Step back within the current repetition."""
        if self.completed or self.current_index == 0:
            return False
        self.current_index -= 1
        return True
