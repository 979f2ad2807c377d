"""
Tests for the true/false and speed round games.
"""

import random

from core.dto import QuestionRecord
from core.mini_games import SpeedRound, TrueFalseRound


class FixedRandom(random.Random):
    """Random source whose coin flips always land the same way."""

    def __init__(self, flip):
        super().__init__(3)
        self.flip = flip

    def random(self):
        return self.flip


class TestTrueFalseDeck:
    def test_correct_card_shows_correct_choice(self, sample_questions):
        game = TrueFalseRound(sample_questions[:1], rng=FixedRandom(0.9))

        card = game.current_card
        assert card.is_correct
        assert card.shown_answer == "B. DNS"

    def test_multi_answer_shows_first_correct_choice(self, sample_questions):
        game = TrueFalseRound(sample_questions[1:2], rng=FixedRandom(0.9))

        assert game.current_card.shown_answer == "A. 10/8"

    def test_wrong_card_shows_other_choice(self, sample_questions):
        game = TrueFalseRound(sample_questions[:1], rng=FixedRandom(0.1))

        card = game.current_card
        assert not card.is_correct
        assert card.shown_answer in ("A. HTTP", "C. FTP")

    def test_no_wrong_choice_falls_back_to_correct(self):
        question = QuestionRecord(id="q-1", question_text="Only one? A. yes", correct_answer="A")
        game = TrueFalseRound([question], rng=FixedRandom(0.1))

        assert game.current_card.is_correct
        assert game.current_card.shown_answer == "A. yes"

    def test_free_response_borrows_other_answer(self):
        questions = [
            QuestionRecord(id="q-1", question_text="Capital of France?", correct_answer="Paris"),
            QuestionRecord(id="q-2", question_text="Capital of Italy?", correct_answer="Rome"),
        ]
        game = TrueFalseRound(questions, rng=FixedRandom(0.1))

        for card in game.cards:
            assert not card.is_correct
            assert card.shown_answer != card.question.correct_answer

    def test_every_question_dealt_once(self, sample_questions):
        game = TrueFalseRound(sample_questions, rng=random.Random(11))

        assert sorted(card.question.id for card in game.cards) == ["q-1", "q-2", "q-3"]


class TestTrueFalseScoring:
    def test_streaks(self, sample_questions):
        game = TrueFalseRound(sample_questions, rng=FixedRandom(0.9))

        assert game.answer(True)
        assert game.answer(True)
        assert game.streak == 2
        assert not game.answer(False)

        assert game.is_complete
        assert game.score == 2
        assert game.streak == 0
        assert game.best_streak == 2
        assert game.percentage == 67

    def test_answer_after_complete_ignored(self, sample_questions):
        game = TrueFalseRound(sample_questions[:1], rng=FixedRandom(0.9))
        game.answer(True)

        assert not game.answer(True)
        assert game.score == 1


class TestSpeedRound:
    def test_any_correct_letter_scores(self, sample_questions):
        game = SpeedRound(sample_questions[1:2])

        assert game.answer("c")
        assert game.score == 1
        assert game.is_complete

    def test_wrong_letter(self, sample_questions):
        game = SpeedRound(sample_questions[:1])

        assert not game.answer("A")
        assert not game.answer("B")
        assert game.score == 0

    def test_shuffled_copy(self, sample_questions):
        game = SpeedRound(sample_questions, rng=random.Random(5))

        assert sorted(q.id for q in game.questions) == ["q-1", "q-2", "q-3"]
        assert [q.id for q in sample_questions] == ["q-1", "q-2", "q-3"]
