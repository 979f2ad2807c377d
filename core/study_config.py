"""
Study session configuration for Cardwise.
Settings, question-range presets and sub-range selection used before a
study mode starts.
"""

import logging
from dataclasses import asdict, dataclass, fields
from typing import Any, Dict, List, Optional, Tuple

from config import Config
from core.dto import StudySet

logger = logging.getLogger(__name__)

# Only the first chunk size smaller than the set is offered
PRESET_CHUNK_SIZES = [10, 20, 25, 50]
MAX_CHUNK_PRESETS = 10


@dataclass
class StudySettings:
    """User study preferences."""
    default_questions_per_session: int = Config.DEFAULT_QUESTIONS_PER_SESSION
    remember_last_range: bool = True
    auto_advance_on_correct: bool = True
    show_config_before_study: bool = True

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "StudySettings":
        """Merge stored values over the defaults, ignoring unknown keys."""
        settings = cls()
        for key, value in (data or {}).items():
            if key in cls.field_names():
                setattr(settings, key, value)
        return settings

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def field_names(cls) -> List[str]:
        return [f.name for f in fields(cls)]

    def update(self, key: str, raw_value: str) -> None:
        """Set one setting from its string form (CLI input).

        Args:
            key: Setting name, e.g. "remember_last_range"
            raw_value: Value as typed, e.g. "false" or "25"

        Raises:
            ValueError: Unknown key or unparseable value
        """
        if key not in self.field_names():
            raise ValueError(
                f"Unknown setting '{key}'. Known settings: {', '.join(self.field_names())}"
            )

        current = getattr(self, key)
        if isinstance(current, bool):
            lowered = raw_value.strip().lower()
            if lowered in ("true", "yes", "on", "1"):
                value: Any = True
            elif lowered in ("false", "no", "off", "0"):
                value = False
            else:
                raise ValueError(f"Setting '{key}' expects true/false, got '{raw_value}'")
        else:
            value = int(raw_value)
            if value < 1:
                raise ValueError(f"Setting '{key}' must be at least 1")

        setattr(self, key, value)


@dataclass(frozen=True)
class RangePreset:
    """A one-click question range (1-based, inclusive)."""
    label: str
    start: int
    end: int

    @property
    def count(self) -> int:
        return self.end - self.start + 1


def generate_presets(total: int) -> List[RangePreset]:
    """Build range presets for a set of ``total`` questions.

    Always offers "All"; then splits the set into chunks of the first size in
    PRESET_CHUNK_SIZES smaller than the set. Chunks under half the chunk size
    are left out.
    """
    if total < 1:
        return []

    presets = [RangePreset(label=f"All ({total})", start=1, end=total)]

    for size in PRESET_CHUNK_SIZES:
        if total <= size:
            continue

        current = 1
        chunk_count = 0
        while current <= total and chunk_count < MAX_CHUNK_PRESETS:
            end = min(current + size - 1, total)
            if end - current + 1 >= size / 2:
                presets.append(RangePreset(
                    label=f"{current}-{end} ({end - current + 1})",
                    start=current,
                    end=end,
                ))
            current += size
            chunk_count += 1
        break

    return presets


def clamp_range(start: int, end: int, total: int) -> Tuple[int, int]:
    """Clamp a typed range into ``1..total`` with ``start <= end``."""
    start = max(1, min(start, total))
    end = max(start, min(end, total))
    return start, end


def default_range(
    total: int,
    settings: StudySettings,
    last_range: Optional[Tuple[int, int]] = None,
) -> Tuple[int, int]:
    """Initial range offered for a set.

    Args:
        total: Number of questions in the set
        settings: User settings
        last_range: Range used last time for this set, if stored

    Returns:
        (start, end), 1-based inclusive
    """
    if settings.remember_last_range and last_range:
        return clamp_range(last_range[0], last_range[1], total)
    return 1, max(1, min(settings.default_questions_per_session, total))


def select_range(study_set: StudySet, start: int, end: int) -> StudySet:
    """Restrict ``study_set`` to a clamped question range.

    Raises:
        ValueError: The set has no questions
    """
    total = len(study_set.questions)
    if total == 0:
        raise ValueError(f"Set '{study_set.title}' has no questions")

    start, end = clamp_range(start, end, total)
    logger.debug(f"Studying questions {start}-{end} of {total} in {study_set.id}")
    return study_set.subset(start, end)
