"""
Bulk question extraction for Cardwise.
Splits pasted or PDF-extracted exam text into question records by locating
"Answer: X" markers and rebuilding the question block before each one.
"""

import re
import hashlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple

from config import Config
from core.dto import QuestionRecord

logger = logging.getLogger(__name__)


NO_QUESTIONS_MESSAGE = (
    "Could not parse any questions. Make sure your format includes questions "
    'with A, B, C, D choices followed by "Answer: X"'
)

# Section labels (case-insensitive)
EXPLANATION_LABEL = re.compile(r'explanation:', re.IGNORECASE)
REFERENCE_LABEL = re.compile(r'reference:', re.IGNORECASE)
QUESTION_LABEL = re.compile(r'question:', re.IGNORECASE)
QUESTION_OR_ANSWER_LABEL = re.compile(r'question:|answers?:', re.IGNORECASE)

# "Answer:" / "Answers:" plus the whitespace after it
ANSWER_SPLIT = re.compile(r'answers?:\s*', re.IGNORECASE)

# Leading "Question: 12" label
QUESTION_PREFIX = re.compile(r'^question:\s*\d*\s*', re.IGNORECASE)

# A whole word made only of letters A-J ("B", "AC", "de")
_LETTER_TOKEN = r'(?<![A-Za-z])[A-Ja-j]+(?![A-Za-z])'
LETTER_TOKEN = re.compile(_LETTER_TOKEN)

# Letter tokens joined by ",", "&", "and" or spaces/tabs. Newlines end the run.
ANSWER_RUN = re.compile(
    rf'{_LETTER_TOKEN}(?:(?:[ \t]*(?:,|&|\band\b)[ \t]*|[ \t]+){_LETTER_TOKEN})*'
)


@dataclass
class ExtractionResult:
    """Outcome of one bulk extraction.

    Attributes:
        questions: Extracted records, in document order
        skipped: Candidates dropped (malformed answer key or too short)
        message: Explanation for the user when nothing was found
    """
    questions: List[QuestionRecord] = field(default_factory=list)
    skipped: int = 0
    message: Optional[str] = None

    @property
    def found(self) -> bool:
        return bool(self.questions)


def strip_sections(text: str, start_label: re.Pattern, stop_label: re.Pattern) -> str:
    """Remove every span from ``start_label`` up to the next ``stop_label``.

    The stop label itself is kept; a span with no stop label runs to the end
    of the text. Each removed span is replaced with a newline.

    Args:
        text: Document text
        start_label: Pattern opening a span to remove
        stop_label: Pattern closing the span

    Returns:
        Text without the spans
    """
    pieces: List[str] = []
    pos = 0

    while True:
        start = start_label.search(text, pos)
        if start is None:
            break

        pieces.append(text[pos:start.start()])
        pieces.append("\n")

        stop = stop_label.search(text, start.end())
        if stop is None:
            pos = len(text)
            break
        pos = stop.start()

    pieces.append(text[pos:])
    return "".join(pieces)


def normalize_answer_run(run: str) -> str:
    """Turn an answer-key run like "a and C, A" into "A,C".

    Letters keep the order the author gave them; duplicates are dropped.
    "AC" counts as two letters.
    """
    letters: List[str] = []
    for token in LETTER_TOKEN.findall(run):
        for letter in token.upper():
            if letter not in letters:
                letters.append(letter)
    return ",".join(letters)


def _generate_question_id(document_digest: str, counter: int) -> str:
    """Generate a question ID unique within one extraction.

    Args:
        document_digest: Hash of the source document
        counter: 1-based position of the question in the output

    Returns:
        ID like "q-0003-1a2b3c4d5e6f"
    """
    components = f"{document_digest}_{counter}"
    short_hash = hashlib.md5(components.encode()).hexdigest()[:12]
    return f"q-{counter:04d}-{short_hash}"


class BulkExtractor:
    """Answer-marker based question extractor."""

    def __init__(self, min_question_length: Optional[int] = None):
        """Initialize bulk extractor.

        Args:
            min_question_length: Question blocks must be longer than this
                many characters. Uses Config.MIN_QUESTION_LENGTH if not provided.
        """
        if min_question_length is None:
            min_question_length = Config.MIN_QUESTION_LENGTH
        self.min_question_length = min_question_length

    def strip_noise(self, document: str) -> str:
        """Remove Explanation and Reference sections.

        Explanations run to the next "Question:" label, references to the next
        "Question:" or "Answer:" label. Either runs to the end of the document
        when no label follows.
        """
        cleaned = strip_sections(document, EXPLANATION_LABEL, QUESTION_LABEL)
        return strip_sections(cleaned, REFERENCE_LABEL, QUESTION_OR_ANSWER_LABEL)

    def extract(self, document: str) -> ExtractionResult:
        """Split a document into question records.

        Args:
            document: Pasted text or text extracted from a PDF

        Returns:
            ExtractionResult; when nothing is found ``message`` says why
        """
        cleaned = self.strip_noise(document)
        fragments = ANSWER_SPLIT.split(cleaned)

        digest = hashlib.md5(document.encode()).hexdigest()
        questions: List[QuestionRecord] = []
        skipped = 0

        for i in range(len(fragments) - 1):
            question_block = fragments[i]
            answer_fragment = fragments[i + 1]

            answer_match = ANSWER_RUN.match(answer_fragment)
            if not answer_match:
                logger.debug(f"Skipping candidate {i + 1}: no answer letters after marker")
                skipped += 1
                continue

            correct_answer = normalize_answer_run(answer_match.group(0))
            question_text = self._clean_question_block(question_block, strip_answer_key=i > 0)

            if len(question_text) <= self.min_question_length:
                logger.debug(f"Skipping candidate {i + 1}: question block too short")
                skipped += 1
                continue

            questions.append(QuestionRecord(
                id=_generate_question_id(digest, len(questions) + 1),
                question_text=question_text,
                correct_answer=correct_answer,
            ))

        if not questions:
            logger.info(f"No questions found ({skipped} candidates skipped)")
            return ExtractionResult(skipped=skipped, message=NO_QUESTIONS_MESSAGE)

        logger.info(f"Extracted {len(questions)} questions ({skipped} candidates skipped)")
        return ExtractionResult(questions=questions, skipped=skipped)

    def extract_pdf(self, pdf_path: Path) -> Tuple[str, ExtractionResult]:
        """Extract questions from a PDF file.

        Args:
            pdf_path: Path to the PDF

        Returns:
            Tuple of (extracted text, result). The text lets the caller fall
            back to manual editing when no questions are found.
        """
        from core.pdf_processor import PDFProcessor

        text = PDFProcessor().extract_text(pdf_path)
        return text, self.extract(text)

    def _clean_question_block(self, block: str, strip_answer_key: bool) -> str:
        """Clean one question block.

        Args:
            block: Raw fragment preceding an answer marker
            strip_answer_key: Drop the previous question's answer letters,
                which open every fragment after the first

        Returns:
            Question text, trimmed
        """
        if strip_answer_key:
            # Heuristic: a question opening with e.g. "A." loses its letter too
            leftover = ANSWER_RUN.match(block)
            if leftover:
                block = block[leftover.end():]

        block = QUESTION_PREFIX.sub('', block.strip())
        return block.strip()


_default_extractor: Optional[BulkExtractor] = None


def extract_questions(document: str) -> ExtractionResult:
    """Extract questions with a default-configured extractor."""
    global _default_extractor
    if _default_extractor is None:
        _default_extractor = BulkExtractor()
    return _default_extractor.extract(document)
