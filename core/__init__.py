"""
Cardwise Core - exam text parsing, grading and study sessions.

Main components:
- ChoiceParser: Question stem and lettered choices from raw text
- AnswerGrader: Exact-match grading of selected answer letters
- BulkExtractor: Question records from pasted or PDF-extracted documents
- DrillEngine: Learn-mode primary/review state machine
- TrueFalseRound, SpeedRound: Mini-games scored per answer
"""

from core.answer_grader import AnswerGrader, GradeResult
from core.bulk_extractor import BulkExtractor, ExtractionResult, NO_QUESTIONS_MESSAGE
from core.choice_parser import ChoiceParser, ParsedChoice, ParsedQuestion
from core.drill_engine import DrillEngine, DrillPhase, DrillState
from core.dto import QuestionRecord, StudySet
from core.match_game import MatchBoard, PickOutcome
from core.mini_games import SpeedRound, TrueFalseCard, TrueFalseRound
from core.quiz_session import QuizProgress, QuizReport, QuizSession
from core.study_config import StudySettings, generate_presets, select_range

__all__ = [
    "ChoiceParser",
    "ParsedChoice",
    "ParsedQuestion",
    "AnswerGrader",
    "GradeResult",
    "BulkExtractor",
    "ExtractionResult",
    "NO_QUESTIONS_MESSAGE",
    "DrillEngine",
    "DrillPhase",
    "DrillState",
    "QuestionRecord",
    "StudySet",
    # Study modes
    "QuizSession",
    "QuizProgress",
    "QuizReport",
    "MatchBoard",
    "PickOutcome",
    "TrueFalseRound",
    "TrueFalseCard",
    "SpeedRound",
    # Session setup
    "StudySettings",
    "generate_presets",
    "select_range",
]
