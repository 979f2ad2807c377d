"""Answer grading for lettered multiple-choice questions.

A question's ``correctAnswer`` holds one letter ("B") or several
comma-separated letters ("A, C"). Grading is exact set equality between the
letters a student selected and the correct letters:

- no partial credit: a missing or an extra letter makes the answer wrong
- order-independent and case-insensitive
- an empty selection is wrong, never an error
"""

from dataclasses import dataclass
from typing import Iterable, Set, Tuple

from core.dto import QuestionRecord


@dataclass(frozen=True)
class GradeResult:
    """Outcome of grading one question.

    Attributes:
        question_id: Graded question's id
        selected: Letters the student picked, sorted
        correct: Correct letters, sorted
        is_correct: Whether ``selected`` matches ``correct`` exactly
    """
    question_id: str
    selected: Tuple[str, ...]
    correct: Tuple[str, ...]
    is_correct: bool


def _normalize(letters: Iterable[str]) -> Set[str]:
    return {letter.strip().upper() for letter in letters if letter and letter.strip()}


def format_letters(letters: Iterable[str]) -> str:
    """Render letters as "A, C" for result screens."""
    return ", ".join(sorted(_normalize(letters)))


class AnswerGrader:
    """Stateless multiple-choice grader.

    Usage:
        grader = AnswerGrader()
        grader.grade({"A", "C"}, "C, A")  # True
    """

    @staticmethod
    def is_multi_answer(correct_answer: str) -> bool:
        """Whether the question expects several letters (needs a submit step)."""
        return "," in correct_answer

    @staticmethod
    def correct_letters(correct_answer: str) -> Set[str]:
        """Split a correctAnswer string into its set of uppercase letters."""
        return _normalize(correct_answer.split(","))

    def grade(self, selected: Iterable[str], correct_answer: str) -> bool:
        """Exact-match grading of a selection against ``correct_answer``.

        Args:
            selected: Letters the student selected
            correct_answer: The question's correctAnswer string

        Returns:
            True iff the selection is non-empty and equals the correct set
        """
        chosen = _normalize(selected)
        if not chosen:
            return False
        return chosen == self.correct_letters(correct_answer)

    def grade_question(self, question: QuestionRecord, selected: Iterable[str]) -> GradeResult:
        """Grade a selection for a whole question record."""
        chosen = _normalize(selected)
        correct = self.correct_letters(question.correct_answer)
        return GradeResult(
            question_id=question.id,
            selected=tuple(sorted(chosen)),
            correct=tuple(sorted(correct)),
            is_correct=bool(chosen) and chosen == correct,
        )


_default_grader = AnswerGrader()

is_multi_answer = AnswerGrader.is_multi_answer
correct_letters = AnswerGrader.correct_letters


def grade(selected: Iterable[str], correct_answer: str) -> bool:
    """Grade with the shared grader."""
    return _default_grader.grade(selected, correct_answer)
