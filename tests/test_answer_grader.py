"""
Tests for multiple-choice grading.
"""

from core.answer_grader import AnswerGrader, correct_letters, format_letters, grade, is_multi_answer
from core.dto import QuestionRecord


class TestGrade:
    def test_exact_set_match(self):
        assert grade({"A", "C"}, "C,A")
        assert grade(["c", "a"], " A , C ")

    def test_duplicate_letters_in_key(self):
        assert grade({"A", "C"}, "A,C,A")

    def test_missing_letter_is_wrong(self):
        assert not grade({"A"}, "A,B")

    def test_extra_letter_is_wrong(self):
        assert not grade({"A", "B", "C"}, "A,B")

    def test_empty_selection_is_wrong(self):
        assert not grade([], "A")
        assert not grade(["", " "], "A")

    def test_single_answer(self):
        assert grade(["b"], "B")
        assert not grade(["A"], "B")


class TestHelpers:
    def test_is_multi_answer(self):
        assert is_multi_answer("A,C")
        assert not is_multi_answer("B")

    def test_correct_letters(self):
        assert correct_letters(" a , c ,") == {"A", "C"}

    def test_format_letters(self):
        assert format_letters(["c", "a"]) == "A, C"
        assert format_letters([]) == ""

    def test_grade_question(self):
        question = QuestionRecord(id="q-1", question_text="Q? A. x B. y C. z", correct_answer="C,A")
        result = AnswerGrader().grade_question(question, ["c", "a"])

        assert result.question_id == "q-1"
        assert result.selected == ("A", "C")
        assert result.correct == ("A", "C")
        assert result.is_correct

    def test_grade_question_empty(self):
        question = QuestionRecord(id="q-1", question_text="Q? A. x", correct_answer="A")
        result = AnswerGrader().grade_question(question, [])

        assert result.selected == ()
        assert not result.is_correct
