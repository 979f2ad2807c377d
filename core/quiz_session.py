"""
Quiz (test) mode for Cardwise.
Students answer every question, can move back and forth, and are graded
once at the end. In-progress answers can be saved and resumed.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

from config import Config
from core.answer_grader import AnswerGrader, GradeResult
from core.dto import QuestionRecord, now_ms

logger = logging.getLogger(__name__)


@dataclass
class QuizProgress:
    """Saved answers of an unfinished quiz."""
    current_index: int
    selected_answers: List[List[str]]
    timestamp: int = field(default_factory=now_ms)

    @property
    def answered_count(self) -> int:
        return sum(1 for answer in self.selected_answers if answer)

    def is_resumable(self, total_questions: int, now: Optional[int] = None,
                     ttl_hours: Optional[int] = None) -> bool:
        """Whether this progress still fits the set and is recent enough.

        Args:
            total_questions: Number of questions in the quiz
            now: Current time in epoch ms (defaults to now)
            ttl_hours: Maximum age (Config.QUIZ_PROGRESS_TTL_HOURS if not provided)
        """
        now = now if now is not None else now_ms()
        ttl_hours = ttl_hours if ttl_hours is not None else Config.QUIZ_PROGRESS_TTL_HOURS
        fits = len(self.selected_answers) == total_questions
        recent = now - self.timestamp < ttl_hours * 60 * 60 * 1000
        return fits and recent

    def to_dict(self) -> Dict[str, Any]:
        return {
            "currentIndex": self.current_index,
            "selectedAnswers": [list(a) for a in self.selected_answers],
            "timestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuizProgress":
        return cls(
            current_index=int(data["currentIndex"]),
            selected_answers=[list(a) for a in data["selectedAnswers"]],
            timestamp=int(data["timestamp"]),
        )


@dataclass
class QuizReport:
    """Final quiz results."""
    results: List[GradeResult]

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def score(self) -> int:
        return sum(1 for r in self.results if r.is_correct)

    @property
    def percentage(self) -> int:
        if not self.results:
            return 0
        return round(self.score / self.total * 100)


class QuizSession:
    """Deferred-grading quiz over an ordered question list."""

    def __init__(self, questions: Sequence[QuestionRecord], grader: Optional[AnswerGrader] = None):
        self.questions: List[QuestionRecord] = list(questions)
        self.grader = grader or AnswerGrader()
        self.current_index = 0
        self.selected_answers: List[List[str]] = [[] for _ in self.questions]
        self.report: Optional[QuizReport] = None

    @property
    def current_question(self) -> QuestionRecord:
        return self.questions[self.current_index]

    @property
    def is_submitted(self) -> bool:
        return self.report is not None

    @property
    def answered_count(self) -> int:
        return sum(1 for answer in self.selected_answers if answer)

    def toggle(self, letter: str) -> List[str]:
        """Select or deselect a letter for the current question.

        Multi-answer questions toggle the letter; single-answer questions
        replace the selection.

        Returns:
            Current selection for the question
        """
        letter = letter.strip().upper()
        selection = self.selected_answers[self.current_index]

        if self.grader.is_multi_answer(self.current_question.correct_answer):
            if letter in selection:
                selection.remove(letter)
            else:
                selection.append(letter)
        else:
            selection[:] = [letter]

        return list(selection)

    def select(self, letters: Sequence[str]) -> List[str]:
        """Replace the current selection with ``letters`` (typed input)."""
        self.selected_answers[self.current_index] = []
        for letter in letters:
            if letter.strip().upper() not in self.selected_answers[self.current_index]:
                self.toggle(letter)
        return list(self.selected_answers[self.current_index])

    def next(self) -> bool:
        """Go to the next question. Returns False on the last one."""
        if self.current_index < len(self.questions) - 1:
            self.current_index += 1
            return True
        return False

    def previous(self) -> bool:
        """Go to the previous question. Returns False on the first one."""
        if self.current_index > 0:
            self.current_index -= 1
            return True
        return False

    def submit(self) -> QuizReport:
        """Grade every question. Unanswered questions count as wrong."""
        self.report = QuizReport(results=[
            self.grader.grade_question(question, selection)
            for question, selection in zip(self.questions, self.selected_answers)
        ])
        logger.info(f"Quiz submitted: {self.report.score}/{self.report.total}")
        return self.report

    def retake(self) -> None:
        """Clear all answers and start over."""
        self.current_index = 0
        self.selected_answers = [[] for _ in self.questions]
        self.report = None

    def progress(self) -> QuizProgress:
        """Snapshot for saving an unfinished quiz."""
        return QuizProgress(
            current_index=self.current_index,
            selected_answers=[list(a) for a in self.selected_answers],
        )

    def resume(self, progress: QuizProgress) -> bool:
        """Restore saved answers if they still fit this quiz.

        Returns:
            True if restored
        """
        if not progress.is_resumable(len(self.questions)):
            return False

        self.current_index = min(max(progress.current_index, 0), len(self.questions) - 1)
        self.selected_answers = [list(a) for a in progress.selected_answers]
        self.report = None
        return True
