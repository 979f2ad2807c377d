"""
Tests for the learn-mode drill engine.
"""

import random

import pytest

from core.drill_engine import DrillEngine, DrillPhase, DrillState
from core.dto import QuestionRecord


def make_questions(count):
    return [
        QuestionRecord(id=f"q-{i}", question_text=f"Question {i}? A. yes B. no", correct_answer="A")
        for i in range(count)
    ]


def answer(engine, was_correct):
    assert engine.record_answer(was_correct)
    return engine.advance()


class TestPrimaryPass:
    def test_all_correct_completes(self):
        engine = DrillEngine(make_questions(3))

        for _ in range(3):
            answer(engine, True)

        assert engine.is_complete
        assert engine.state.mastered_count == 3
        assert engine.state.missed_queue == []
        assert engine.current_question is None

    def test_miss_goes_to_review(self):
        engine = DrillEngine(make_questions(3))

        answer(engine, False)
        answer(engine, True)
        phase = answer(engine, True)

        assert phase == DrillPhase.REVIEW
        assert engine.state.missed_queue == [0]
        assert engine.current_index == 0

        answer(engine, True)
        assert engine.is_complete
        assert engine.state.mastered_count == 3

    def test_progress_labels(self):
        engine = DrillEngine(make_questions(3))
        assert engine.progress_label() == "1 / 3"

        answer(engine, False)
        answer(engine, True)
        answer(engine, True)
        assert engine.progress_label() == "Review: 1 remaining"
        assert engine.remaining == 1

        answer(engine, True)
        assert engine.progress_label() == "Mastered 3 / 3"


class TestReviewPass:
    def test_wrong_answer_moves_on(self):
        engine = DrillEngine(make_questions(3))
        answer(engine, False)
        answer(engine, True)
        answer(engine, False)
        assert engine.state.missed_queue == [0, 2]

        answer(engine, False)
        assert engine.current_index == 2
        assert engine.state.missed_queue == [0, 2]

        answer(engine, True)
        assert engine.state.missed_queue == [0]
        assert engine.current_index == 0

        answer(engine, True)
        assert engine.is_complete
        assert engine.state.mastered_count == 3

    def test_wrong_answer_on_single_entry_repeats(self):
        engine = DrillEngine(make_questions(1))
        answer(engine, False)

        answer(engine, False)
        assert engine.phase == DrillPhase.REVIEW
        assert engine.current_index == 0

    @pytest.mark.parametrize("seed", range(25))
    def test_random_sessions_master_every_question(self, seed):
        """Every session ends with each question mastered exactly once."""
        rng = random.Random(seed)
        total = rng.randint(1, 8)
        engine = DrillEngine(make_questions(total))
        queue_size = None

        for _ in range(1000):
            if engine.is_complete:
                break
            answer(engine, rng.random() < 0.5)
            if engine.phase == DrillPhase.REVIEW:
                size = len(engine.state.missed_queue)
                if queue_size is not None:
                    assert size <= queue_size
                queue_size = size

        assert engine.is_complete
        assert engine.state.mastered_count == total


class TestContract:
    def test_empty_list_is_complete(self):
        engine = DrillEngine([])

        assert engine.is_complete
        assert not engine.record_answer(True)
        assert engine.advance() == DrillPhase.COMPLETE

    def test_double_record_ignored(self):
        engine = DrillEngine(make_questions(2))

        assert engine.record_answer(False)
        assert not engine.record_answer(True)
        assert engine.state.mastered_count == 0
        assert engine.state.missed_queue == [0]

    def test_advance_without_answer_is_noop(self):
        engine = DrillEngine(make_questions(2))

        assert engine.advance() == DrillPhase.PRIMARY
        assert engine.state.cursor == 0

    def test_calls_after_complete_ignored(self):
        engine = DrillEngine(make_questions(1))
        answer(engine, True)

        assert not engine.record_answer(False)
        assert engine.advance() == DrillPhase.COMPLETE
        assert engine.state.mastered_count == 1

    def test_submit_grades_current_question(self):
        engine = DrillEngine(make_questions(2))

        result = engine.submit(["b"])
        assert result.question_id == "q-0"
        assert not result.is_correct
        assert engine.awaiting_advance
        assert engine.submit(["a"]) is None

    def test_restart(self):
        engine = DrillEngine(make_questions(2))
        answer(engine, False)
        answer(engine, True)

        engine.restart()
        assert engine.state == DrillState()
        assert engine.current_index == 0


class TestSnapshots:
    def test_restore_round_trip(self):
        questions = make_questions(4)
        engine = DrillEngine(questions)
        answer(engine, False)
        answer(engine, True)
        engine.record_answer(False)

        restored = DrillEngine.restore(questions, engine.state.to_dict())

        assert restored.state == engine.state
        assert restored.awaiting_advance

    def test_snapshot_keys(self):
        data = DrillState().to_dict()
        assert set(data) == {"cursor", "missedQueue", "phase", "reviewCursor", "masteredCount", "lastAnswer"}

    def test_restore_rejects_mismatched_snapshot(self):
        snapshot = DrillState(cursor=9, missed_queue=[7]).to_dict()

        engine = DrillEngine.restore(make_questions(3), snapshot)
        assert engine.state == DrillState()
