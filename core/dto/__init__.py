"""Data Transfer Objects shared by the study core and its hosts.

The JSON shape produced by ``to_dict`` is the contract used by the
``/sets`` REST routes: camelCase keys, epoch-millisecond timestamps.
"""

import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence


def now_ms() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class QuestionRecord:
    """One question of a study set.

    Attributes:
        id: Identifier, unique within its set
        question_text: Raw stem, optionally with embedded lettered choices
        correct_answer: One or more letters, comma-separated ("B", "A,C")
    """
    id: str
    question_text: str
    correct_answer: str

    def to_dict(self) -> Dict[str, str]:
        return {
            "id": self.id,
            "questionText": self.question_text,
            "correctAnswer": self.correct_answer,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "QuestionRecord":
        return cls(
            id=str(data.get("id", "")),
            question_text=data["questionText"],
            correct_answer=data["correctAnswer"],
        )


@dataclass
class StudySet:
    """A titled, ordered list of questions."""
    id: str
    title: str
    questions: List[QuestionRecord] = field(default_factory=list)
    created_at: int = field(default_factory=now_ms)
    updated_at: int = field(default_factory=now_ms)

    @classmethod
    def from_records(
        cls,
        title: str,
        records: Sequence[QuestionRecord],
        timestamp: Optional[int] = None,
    ) -> "StudySet":
        """Build a new set, assigning fresh set and question ids.

        Args:
            title: Set title (surrounding whitespace is removed)
            records: Question records, e.g. from the bulk extractor
            timestamp: Creation time in epoch ms (defaults to now)

        Returns:
            New StudySet whose questions keep the order of ``records``
        """
        stamp = timestamp if timestamp is not None else now_ms()
        questions = [
            QuestionRecord(
                id=f"q-{stamp}-{index}",
                question_text=record.question_text,
                correct_answer=record.correct_answer,
            )
            for index, record in enumerate(records)
        ]
        return cls(
            id=f"set-{stamp}",
            title=title.strip(),
            questions=questions,
            created_at=stamp,
            updated_at=stamp,
        )

    def subset(self, start: int, end: int) -> "StudySet":
        """Copy of this set restricted to questions ``start``..``end``.

        Range is 1-based and inclusive. The set id is kept so progress
        stays attached to the original set.
        """
        if start < 1 or end < start or end > len(self.questions):
            raise ValueError(
                f"Invalid range {start}-{end} for a set of {len(self.questions)} questions"
            )
        return replace(self, questions=list(self.questions[start - 1:end]))

    def revise(
        self,
        title: str,
        drafts: Sequence[QuestionRecord],
        timestamp: Optional[int] = None,
    ) -> "StudySet":
        """Copy of this set with its title and questions replaced wholesale.

        Drafts missing question text or answer are dropped and the rest are
        trimmed. Drafts with no id (or a repeated one) get a fresh id.

        Args:
            title: New title
            drafts: Edited questions in their new order
            timestamp: Edit time in epoch ms (defaults to now)

        Raises:
            ValueError: Blank title, or no question with both text and answer
        """
        if not title.strip():
            raise ValueError("Please enter a title for your set")

        stamp = timestamp if timestamp is not None else now_ms()
        questions: List[QuestionRecord] = []
        used_ids = set()
        for index, draft in enumerate(drafts):
            text = draft.question_text.strip()
            answer = draft.correct_answer.strip()
            if not text or not answer:
                continue

            question_id = draft.id
            if not question_id or question_id in used_ids:
                question_id = f"q-{stamp}-{index}"
            used_ids.add(question_id)
            questions.append(QuestionRecord(id=question_id, question_text=text, correct_answer=answer))

        if not questions:
            raise ValueError("Please add at least one question with an answer")

        return replace(self, title=title.strip(), questions=questions, updated_at=stamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "questions": [q.to_dict() for q in self.questions],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StudySet":
        stamp = now_ms()
        return cls(
            id=str(data["id"]),
            title=data["title"],
            questions=[QuestionRecord.from_dict(q) for q in data.get("questions", [])],
            created_at=int(data.get("createdAt", stamp)),
            updated_at=int(data.get("updatedAt", stamp)),
        )


__all__ = [
    "QuestionRecord",
    "StudySet",
    "now_ms",
]
