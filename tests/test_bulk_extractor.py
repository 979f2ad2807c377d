"""
Tests for bulk question extraction.
"""

from core.bulk_extractor import (
    EXPLANATION_LABEL,
    NO_QUESTIONS_MESSAGE,
    QUESTION_LABEL,
    BulkExtractor,
    extract_questions,
    normalize_answer_run,
    strip_sections,
)
from core.choice_parser import parse_choices


class TestExtract:
    def test_sample_document(self, sample_document):
        """Labels, explanations and references are removed from every record."""
        result = BulkExtractor().extract(sample_document)

        assert result.found
        assert result.message is None
        assert [q.correct_answer for q in result.questions] == ["B", "A,C", "B"]

        first = result.questions[0]
        assert first.question_text.startswith("Which protocol resolves host names")
        assert "Question:" not in first.question_text
        assert "Explanation" not in result.questions[1].question_text
        assert "RFC 1918" not in result.questions[2].question_text

    def test_blank_line_separated_document(self):
        """Unlabelled questions separated by blank lines, multi-answer last."""
        document = (
            "What is 2 + 2?\n"
            "A. 3\n"
            "B. 4\n"
            "C. 5\n"
            "D. 6\n"
            "Answer: B\n"
            "\n"
            "Which are primary colors?\n"
            "A. Red\n"
            "B. Green\n"
            "C. Blue\n"
            "D. Yellow\n"
            "Answer: A, C\n"
        )
        result = BulkExtractor().extract(document)

        assert [q.correct_answer for q in result.questions] == ["B", "A,C"]
        assert result.questions[0].question_text == "What is 2 + 2?\nA. 3\nB. 4\nC. 5\nD. 6"
        assert result.questions[1].question_text == "Which are primary colors?\nA. Red\nB. Green\nC. Blue\nD. Yellow"
        assert parse_choices(result.questions[1].question_text).stem == "Which are primary colors?"

    def test_records_parse_into_choices(self, sample_document):
        result = BulkExtractor().extract(sample_document)
        parsed = parse_choices(result.questions[1].question_text)

        assert parsed.stem == "Which of the following are private address ranges? (Choose two.)"
        assert parsed.letters == ["A", "B", "C", "D"]

    def test_ids_unique(self, sample_document):
        result = BulkExtractor().extract(sample_document)
        ids = [q.id for q in result.questions]

        assert len(set(ids)) == len(ids)
        assert ids[0].startswith("q-0001-")

    def test_inline_two_questions(self):
        document = (
            "What color is the sky? A. Blue B. Green C. Red D. Yellow Answer: A "
            "What is 2+2? A. 3 B. 4 C. 5 D. 6 Answer: B"
        )
        result = extract_questions(document)

        assert len(result.questions) == 2
        assert result.questions[0].question_text == "What color is the sky? A. Blue B. Green C. Red D. Yellow"
        assert result.questions[1].question_text == "What is 2+2? A. 3 B. 4 C. 5 D. 6"
        assert [q.correct_answer for q in result.questions] == ["A", "B"]

    def test_explanation_only_document(self):
        result = BulkExtractor().extract("Explanation: nothing but notes about the answer: here.")

        assert not result.found
        assert result.questions == []
        assert result.message == NO_QUESTIONS_MESSAGE

    def test_empty_document(self):
        result = BulkExtractor().extract("")

        assert not result.found
        assert result.message == NO_QUESTIONS_MESSAGE

    def test_explanation_hides_answer_marker(self):
        document = (
            "First question text here? A. one B. two\n"
            "Answer: B\n"
            "Explanation: the answer: B is right.\n"
            "Question: 2 Second question text here? A. x B. y\n"
            "Answer: A"
        )
        result = BulkExtractor().extract(document)

        assert [q.question_text for q in result.questions] == [
            "First question text here? A. one B. two",
            "Second question text here? A. x B. y",
        ]
        assert result.skipped == 0

    def test_trailing_reference_removed(self):
        result = BulkExtractor().extract(
            "Long enough question? A. x B. y Answer: A Reference: chapter 4 of the book"
        )

        assert len(result.questions) == 1
        assert result.questions[0].correct_answer == "A"

    def test_malformed_answer_skipped(self):
        result = BulkExtractor().extract("Long enough question text? Answer: 42")

        assert not result.found
        assert result.skipped == 1

    def test_short_question_skipped(self):
        result = BulkExtractor().extract("Hi? Answer: A")

        assert not result.found
        assert result.skipped == 1

    def test_min_length_configurable(self):
        result = BulkExtractor(min_question_length=0).extract("Hi? Answer: A")

        assert result.questions[0].question_text == "Hi?"


class TestAnswerKeys:
    def test_and_separator(self):
        result = BulkExtractor().extract("Which two are colors? A. red B. dog C. blue D. cat Answer: A and C")
        assert result.questions[0].correct_answer == "A,C"

    def test_plural_marker_and_ampersand(self):
        result = BulkExtractor().extract("Which two are even? A. 1 B. 2 C. 3 D. 4 Answers: b & d")
        assert result.questions[0].correct_answer == "B,D"

    def test_glued_letters_split(self):
        result = BulkExtractor().extract("Which two are vowels? A. a B. b C. e Answer: AC")
        assert result.questions[0].correct_answer == "A,C"

    def test_normalize_keeps_first_seen_order(self):
        assert normalize_answer_run("C, a") == "C,A"
        assert normalize_answer_run("a and C, A") == "A,C"


class TestStripSections:
    def test_span_replaced_with_newline(self):
        text = "keep Explanation: drop this Question: next"

        assert strip_sections(text, EXPLANATION_LABEL, QUESTION_LABEL) == "keep \nQuestion: next"

    def test_span_runs_to_end(self):
        assert strip_sections("keep Explanation: drop", EXPLANATION_LABEL, QUESTION_LABEL) == "keep \n"

    def test_no_label(self):
        assert strip_sections("nothing here", EXPLANATION_LABEL, QUESTION_LABEL) == "nothing here"
