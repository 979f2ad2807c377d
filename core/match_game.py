"""
Match game for Cardwise.
Question cards and answer cards are shuffled on one board; the student
pairs each question with its answer.
"""

import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Set

from config import Config
from core.choice_parser import question_stem
from core.dto import QuestionRecord

# Question cards show at most this many characters of the stem
CARD_TEXT_LENGTH = 80


class CardType(Enum):
    QUESTION = "question"
    ANSWER = "answer"


class PickOutcome(Enum):
    """Result of picking a card."""
    SELECTED = "selected"      # First card of a pair picked
    DESELECTED = "deselected"  # Same card picked twice
    MATCHED = "matched"        # Correct pair
    MISMATCHED = "mismatched"  # Wrong pair; selection is cleared
    IGNORED = "ignored"        # Unknown or already matched card


@dataclass(frozen=True)
class MatchCard:
    id: str
    content: str
    card_type: CardType
    pair_id: int


class MatchBoard:
    """Board state of one match game."""

    def __init__(
        self,
        questions: Sequence[QuestionRecord],
        pairs: Optional[int] = None,
        rng: Optional[random.Random] = None,
    ):
        """Deal a new board.

        Args:
            questions: Source questions; the first ``pairs`` are used
            pairs: Number of question/answer pairs (Config.MATCH_GAME_PAIRS if not provided)
            rng: Random source for shuffling
        """
        pairs = pairs if pairs is not None else Config.MATCH_GAME_PAIRS
        self._rng = rng or random.Random()

        cards: List[MatchCard] = []
        for index, question in enumerate(list(questions)[:pairs]):
            cards.append(MatchCard(
                id=f"q-{index}",
                content=question_stem(question.question_text, max_length=CARD_TEXT_LENGTH),
                card_type=CardType.QUESTION,
                pair_id=index,
            ))
            cards.append(MatchCard(
                id=f"a-{index}",
                content=question.correct_answer,
                card_type=CardType.ANSWER,
                pair_id=index,
            ))

        self._rng.shuffle(cards)
        self.cards = cards
        self.selected: Optional[str] = None
        self.matched: Set[str] = set()
        self.mistakes = 0

    @property
    def pair_count(self) -> int:
        return len(self.cards) // 2

    @property
    def matched_pairs(self) -> int:
        return len(self.matched) // 2

    @property
    def is_complete(self) -> bool:
        return bool(self.cards) and len(self.matched) == len(self.cards)

    def card(self, card_id: str) -> Optional[MatchCard]:
        for card in self.cards:
            if card.id == card_id:
                return card
        return None

    def pick(self, card_id: str) -> PickOutcome:
        """Pick a card.

        Two cards match when they share a pair id and differ in type.
        """
        picked = self.card(card_id)
        if picked is None or card_id in self.matched:
            return PickOutcome.IGNORED

        if self.selected is None:
            self.selected = card_id
            return PickOutcome.SELECTED

        if self.selected == card_id:
            self.selected = None
            return PickOutcome.DESELECTED

        first = self.card(self.selected)
        self.selected = None
        if first.pair_id == picked.pair_id and first.card_type != picked.card_type:
            self.matched.update({first.id, picked.id})
            return PickOutcome.MATCHED

        self.mistakes += 1
        return PickOutcome.MISMATCHED
