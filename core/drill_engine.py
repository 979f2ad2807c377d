"""Learn-mode drill engine.

A drill walks the question list once (primary pass), queueing every question
answered wrong. It then cycles through that queue (review pass) until each
queued question has been answered correctly, and only then completes:

    PRIMARY --last question, misses queued--> REVIEW --queue empty--> COMPLETE
    PRIMARY --last question, no misses-------------------------------> COMPLETE

Each question therefore contributes exactly one mastery event per session.
The UI calls ``record_answer`` (or ``submit``) when the student answers and
``advance`` when they move on.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from core.answer_grader import AnswerGrader, GradeResult
from core.dto import QuestionRecord

logger = logging.getLogger(__name__)


class DrillPhase(Enum):
    """Phase of a learn session."""
    PRIMARY = "primary"    # First pass over every question
    REVIEW = "review"      # Cycling through missed questions
    COMPLETE = "complete"  # Every question answered correctly once


@dataclass
class DrillState:
    """Mutable state of one learn session.

    Attributes:
        cursor: Index into the question list during the primary pass
        missed_queue: Indices answered wrong in the primary pass, in order met
        phase: Current phase
        review_cursor: Index into ``missed_queue`` during review
        mastered_count: Correct answers across both phases
        last_answer: Outcome recorded for the question on screen, consumed
            by ``advance``
    """
    cursor: int = 0
    missed_queue: List[int] = field(default_factory=list)
    phase: DrillPhase = DrillPhase.PRIMARY
    review_cursor: int = 0
    mastered_count: int = 0
    last_answer: Optional[bool] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "cursor": self.cursor,
            "missedQueue": list(self.missed_queue),
            "phase": self.phase.value,
            "reviewCursor": self.review_cursor,
            "masteredCount": self.mastered_count,
            "lastAnswer": self.last_answer,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DrillState":
        return cls(
            cursor=int(data.get("cursor", 0)),
            missed_queue=[int(i) for i in data.get("missedQueue", [])],
            phase=DrillPhase(data.get("phase", DrillPhase.PRIMARY.value)),
            review_cursor=int(data.get("reviewCursor", 0)),
            mastered_count=int(data.get("masteredCount", 0)),
            last_answer=data.get("lastAnswer"),
        )


class DrillEngine:
    """Adaptive learn-mode state machine over an ordered question list."""

    def __init__(self, questions: Sequence[QuestionRecord], grader: Optional[AnswerGrader] = None):
        """Initialize a session at the start of the primary pass.

        Args:
            questions: Questions to drill (a whole set or a sub-range)
            grader: Grader used by ``submit`` (a default one if not provided)
        """
        self.questions: List[QuestionRecord] = list(questions)
        self.grader = grader or AnswerGrader()
        self.state = self._initial_state()

    @classmethod
    def restore(cls, questions: Sequence[QuestionRecord], snapshot: Dict[str, Any]) -> "DrillEngine":
        """Rebuild a session from a ``DrillState.to_dict()`` snapshot.

        Snapshots that do not fit ``questions`` start a fresh session.
        """
        engine = cls(questions)
        state = DrillState.from_dict(snapshot)

        total = len(engine.questions)
        fits = (
            0 <= state.cursor < max(total, 1)
            and all(0 <= i < total for i in state.missed_queue)
            and len(set(state.missed_queue)) == len(state.missed_queue)
            and (state.phase != DrillPhase.REVIEW or 0 <= state.review_cursor < len(state.missed_queue))
        )
        if fits:
            engine.state = state
        else:
            logger.warning("Saved learn progress does not match the question list; starting over")
        return engine

    def _initial_state(self) -> DrillState:
        if not self.questions:
            return DrillState(phase=DrillPhase.COMPLETE)
        return DrillState()

    # ==================== QUERIES ====================

    @property
    def phase(self) -> DrillPhase:
        return self.state.phase

    @property
    def is_complete(self) -> bool:
        return self.state.phase == DrillPhase.COMPLETE

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def awaiting_advance(self) -> bool:
        """True once the question on screen has been answered."""
        return self.state.last_answer is not None

    @property
    def current_index(self) -> Optional[int]:
        """Index of the question on screen, None when complete."""
        if self.state.phase == DrillPhase.PRIMARY:
            return self.state.cursor
        if self.state.phase == DrillPhase.REVIEW:
            return self.state.missed_queue[self.state.review_cursor]
        return None

    @property
    def current_question(self) -> Optional[QuestionRecord]:
        index = self.current_index
        return None if index is None else self.questions[index]

    @property
    def remaining(self) -> int:
        """Questions not yet mastered in this session."""
        return self.total - self.state.mastered_count

    def progress_label(self) -> str:
        """Counter shown above the question."""
        if self.state.phase == DrillPhase.REVIEW:
            return f"Review: {len(self.state.missed_queue)} remaining"
        if self.state.phase == DrillPhase.COMPLETE:
            return f"Mastered {self.state.mastered_count} / {self.total}"
        return f"{self.state.cursor + 1} / {self.total}"

    # ==================== TRANSITIONS ====================

    def submit(self, selected: Iterable[str]) -> Optional[GradeResult]:
        """Grade a selection for the current question and record it.

        Returns:
            GradeResult, or None if no answer can be recorded right now
        """
        question = self.current_question
        if question is None or self.awaiting_advance:
            logger.warning("submit() ignored: no question is waiting for an answer")
            return None

        result = self.grader.grade_question(question, selected)
        self.record_answer(result.is_correct)
        return result

    def record_answer(self, was_correct: bool) -> bool:
        """Record the outcome for the question on screen.

        Args:
            was_correct: Whether the student answered correctly

        Returns:
            True if recorded; False when complete or already answered
        """
        state = self.state
        if state.phase == DrillPhase.COMPLETE:
            logger.warning("record_answer() ignored: session is complete")
            return False
        if state.last_answer is not None:
            logger.warning("record_answer() ignored: answer already recorded, call advance()")
            return False

        state.last_answer = bool(was_correct)
        if was_correct:
            state.mastered_count += 1
        elif state.phase == DrillPhase.PRIMARY and state.cursor not in state.missed_queue:
            state.missed_queue.append(state.cursor)

        return True

    def advance(self) -> DrillPhase:
        """Move to the next question using the recorded outcome.

        Returns:
            Phase after the move (unchanged if nothing was recorded)
        """
        state = self.state
        if state.phase == DrillPhase.COMPLETE:
            logger.warning("advance() ignored: session is complete")
            return state.phase
        if state.last_answer is None:
            logger.warning("advance() ignored: no answer recorded for the current question")
            return state.phase

        was_correct = state.last_answer
        state.last_answer = None

        if state.phase == DrillPhase.PRIMARY:
            self._advance_primary()
        else:
            self._advance_review(was_correct)

        return state.phase

    def restart(self) -> None:
        """Reset to the start of the primary pass."""
        self.state = self._initial_state()

    def _advance_primary(self) -> None:
        state = self.state
        if state.cursor < len(self.questions) - 1:
            state.cursor += 1
            return

        if state.missed_queue:
            logger.info(f"Primary pass done; reviewing {len(state.missed_queue)} missed questions")
            state.phase = DrillPhase.REVIEW
            state.review_cursor = 0
        else:
            state.phase = DrillPhase.COMPLETE

    def _advance_review(self, was_correct: bool) -> None:
        state = self.state
        if was_correct:
            del state.missed_queue[state.review_cursor]
            if not state.missed_queue:
                state.phase = DrillPhase.COMPLETE
                state.review_cursor = 0
            elif state.review_cursor >= len(state.missed_queue):
                state.review_cursor = 0
        else:
            state.review_cursor = (state.review_cursor + 1) % max(1, len(state.missed_queue))
