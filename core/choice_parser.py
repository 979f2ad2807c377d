"""
Choice-block parsing for Cardwise.
Recovers a question stem and its lettered choices (A-J) from raw text,
whether the choices sit one per line or run inline (PDF extraction).
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

# Letter A-J, then "." or ")", then whitespace. The letter must open the text
# or follow whitespace, so "e.g." or "2B." never start a choice.
CHOICE_MARKER = re.compile(r'(?<!\S)([A-J])[.)](?=\s)')

_WHITESPACE = re.compile(r'\s+')


def collapse_whitespace(text: str) -> str:
    """Collapse whitespace runs to single spaces and trim."""
    return _WHITESPACE.sub(' ', text).strip()


@dataclass(frozen=True)
class ParsedChoice:
    """One lettered answer choice."""
    letter: str
    text: str


@dataclass(frozen=True)
class ParsedQuestion:
    """A question stem plus its choices, sorted by letter."""
    stem: str
    choices: Tuple[ParsedChoice, ...] = ()

    @property
    def is_free_response(self) -> bool:
        """True when no choices were found (show the answer verbatim)."""
        return not self.choices

    @property
    def letters(self) -> List[str]:
        return [choice.letter for choice in self.choices]

    def choice(self, letter: str) -> Optional[ParsedChoice]:
        """Look up a choice by letter (case-insensitive)."""
        wanted = letter.strip().upper()
        for choice in self.choices:
            if choice.letter == wanted:
                return choice
        return None


@dataclass(frozen=True)
class ChoiceMarker:
    """A choice marker located in the source text."""
    letter: str
    start: int       # Offset of the letter
    body_start: int  # Offset just past the delimiter


class ChoiceParser:
    """Single-pass choice scanner.

    Marker positions are located first; bodies are then the slices between
    successive markers. The stem ends at the earliest kept marker.
    """

    def find_markers(self, text: str) -> List[ChoiceMarker]:
        """Locate every choice marker, in text order.

        Args:
            text: Raw question text

        Returns:
            Non-overlapping markers sorted by offset
        """
        return [
            ChoiceMarker(letter=match.group(1), start=match.start(), body_start=match.end())
            for match in CHOICE_MARKER.finditer(text)
        ]

    def parse(self, text: str) -> ParsedQuestion:
        """Split raw text into a stem and its lettered choices.

        Args:
            text: A question record's questionText

        Returns:
            ParsedQuestion; choices are empty for free-response questions
        """
        markers = self.find_markers(text)

        choices: List[ParsedChoice] = []
        seen_letters = set()
        stem_end: Optional[int] = None

        for i, marker in enumerate(markers):
            end = markers[i + 1].start if i + 1 < len(markers) else len(text)
            body = collapse_whitespace(text[marker.body_start:end])

            # Empty bodies and repeated letters are dropped; first one wins
            if not body or marker.letter in seen_letters:
                continue

            seen_letters.add(marker.letter)
            choices.append(ParsedChoice(letter=marker.letter, text=body))
            if stem_end is None:
                stem_end = marker.start

        if stem_end is None:
            return ParsedQuestion(stem=collapse_whitespace(text))

        # Sorted by letter, not by position
        choices.sort(key=lambda c: c.letter)
        return ParsedQuestion(
            stem=collapse_whitespace(text[:stem_end]),
            choices=tuple(choices),
        )

    def stem(self, text: str, max_length: Optional[int] = None) -> str:
        """Return only the stem, optionally truncated for display.

        Args:
            text: Raw question text
            max_length: Truncate to this many characters and append "..."

        Returns:
            Stem text
        """
        stem = self.parse(text).stem
        if max_length is not None and len(stem) > max_length:
            return stem[:max_length] + "..."
        return stem


_default_parser = ChoiceParser()


def parse_choices(text: str) -> ParsedQuestion:
    """Parse ``text`` with the shared parser."""
    return _default_parser.parse(text)


def question_stem(text: str, max_length: Optional[int] = None) -> str:
    """Stem of ``text`` with the shared parser."""
    return _default_parser.stem(text, max_length=max_length)
