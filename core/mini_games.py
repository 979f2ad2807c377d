"""
Mini-games for Cardwise.

- TrueFalseRound: each card shows one answer; the student says whether it is
  the right one. Tracks score, streak and best streak.
- SpeedRound: questions in random order; picking any one of the correct
  letters scores a point.
"""

import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

from core.answer_grader import AnswerGrader
from core.choice_parser import parse_choices
from core.dto import QuestionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrueFalseCard:
    """A question shown with one candidate answer.

    Attributes:
        question: Source question
        shown_answer: Answer displayed to the student ("B. DNS" or raw text)
        is_correct: Whether ``shown_answer`` is the question's correct answer
    """
    question: QuestionRecord
    shown_answer: str
    is_correct: bool


class TrueFalseRound:
    """True/false game over a shuffled deck."""

    def __init__(
        self,
        questions: Sequence[QuestionRecord],
        rng: Optional[random.Random] = None,
        grader: Optional[AnswerGrader] = None,
    ):
        """Deal a new deck.

        Args:
            questions: Source questions
            rng: Random source for answer choice and shuffling
            grader: Used to read correct letters (a default one if not provided)
        """
        self._rng = rng or random.Random()
        self.grader = grader or AnswerGrader()

        questions = list(questions)
        cards = [self._make_card(question, questions) for question in questions]
        self._rng.shuffle(cards)

        self.cards: List[TrueFalseCard] = cards
        self.current_index = 0
        self.score = 0
        self.streak = 0
        self.best_streak = 0

    def _make_card(self, question: QuestionRecord, pool: List[QuestionRecord]) -> TrueFalseCard:
        """Show the correct answer or a wrong one, with even odds.

        A wrong answer comes from the question's other choices; free-response
        questions borrow another question's answer. With no wrong answer
        available the correct one is shown.
        """
        show_correct = self._rng.random() > 0.5
        parsed = parse_choices(question.question_text)
        correct = self.grader.correct_letters(question.correct_answer)

        if parsed.choices:
            right = [c for c in parsed.choices if c.letter in correct]
            wrong = [f"{c.letter}. {c.text}" for c in parsed.choices if c.letter not in correct]
            right_text = f"{right[0].letter}. {right[0].text}" if right else question.correct_answer
        else:
            wrong = sorted({
                other.correct_answer for other in pool
                if other.correct_answer.strip().upper() != question.correct_answer.strip().upper()
            })
            right_text = question.correct_answer

        if show_correct or not wrong:
            return TrueFalseCard(question=question, shown_answer=right_text, is_correct=True)
        return TrueFalseCard(question=question, shown_answer=self._rng.choice(wrong), is_correct=False)

    @property
    def total(self) -> int:
        return len(self.cards)

    @property
    def is_complete(self) -> bool:
        return self.current_index >= len(self.cards)

    @property
    def current_card(self) -> Optional[TrueFalseCard]:
        return None if self.is_complete else self.cards[self.current_index]

    @property
    def percentage(self) -> int:
        if not self.cards:
            return 0
        return round(self.score / self.total * 100)

    def answer(self, answered_true: bool) -> bool:
        """Judge the current card and move to the next one.

        Returns:
            True if the student judged the card correctly
        """
        card = self.current_card
        if card is None:
            logger.warning("answer() ignored: round is complete")
            return False

        is_right = answered_true == card.is_correct
        if is_right:
            self.score += 1
            self.streak += 1
            self.best_streak = max(self.best_streak, self.streak)
        else:
            self.streak = 0

        self.current_index += 1
        return is_right


class SpeedRound:
    """Rapid-fire round over shuffled questions.

    One letter per question; it scores when it is any of the correct letters.
    """

    def __init__(
        self,
        questions: Sequence[QuestionRecord],
        rng: Optional[random.Random] = None,
        grader: Optional[AnswerGrader] = None,
    ):
        self._rng = rng or random.Random()
        self.grader = grader or AnswerGrader()
        self.questions: List[QuestionRecord] = list(questions)
        self._rng.shuffle(self.questions)
        self.current_index = 0
        self.score = 0

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def is_complete(self) -> bool:
        return self.current_index >= len(self.questions)

    @property
    def current_question(self) -> Optional[QuestionRecord]:
        return None if self.is_complete else self.questions[self.current_index]

    def is_hit(self, question: QuestionRecord, letter: str) -> bool:
        return letter.strip().upper() in self.grader.correct_letters(question.correct_answer)

    def answer(self, letter: str) -> bool:
        """Score one letter for the current question and move on."""
        question = self.current_question
        if question is None:
            logger.warning("answer() ignored: round is complete")
            return False

        hit = self.is_hit(question, letter)
        if hit:
            self.score += 1
        self.current_index += 1
        return hit
