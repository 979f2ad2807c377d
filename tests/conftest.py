"""
Shared fixtures for Cardwise tests.
"""

import sys
from pathlib import Path

import pytest

# Add cardwise to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import Config
from core.dto import QuestionRecord, StudySet
from storage.database import Database


SAMPLE_DOCUMENT = """Question: 1
Which protocol resolves host names to addresses?
A. HTTP
B. DNS
C. FTP
D. SMTP
Answer: B
Explanation: DNS maps names to addresses. The answer: B is right.
Question: 2
Which of the following are private address ranges? (Choose two.)
A. 10.0.0.0/8
B. 8.8.8.0/24
C. 192.168.0.0/16
D. 1.1.1.0/24
Answer: A, C
Reference: RFC 1918
Question: 3
Which port does HTTPS use by default?
A. 80
B. 443
C. 22
D. 25
Answer: B
"""


@pytest.fixture
def sample_document():
    return SAMPLE_DOCUMENT


@pytest.fixture
def sample_questions():
    """Three choice questions, the second one multi-answer."""
    return [
        QuestionRecord(id="q-1", question_text="Which protocol resolves names? A. HTTP B. DNS C. FTP",
                       correct_answer="B"),
        QuestionRecord(id="q-2", question_text="Pick the private ranges. A. 10/8 B. 8/8 C. 192.168/16",
                       correct_answer="A,C"),
        QuestionRecord(id="q-3", question_text="HTTPS default port? A. 80 B. 443",
                       correct_answer="B"),
    ]


@pytest.fixture
def sample_set(sample_questions):
    return StudySet.from_records("Networking", sample_questions, timestamp=1_700_000_000_000)


@pytest.fixture
def db(tmp_path):
    """Open database in a temporary directory."""
    with Database(tmp_path / "cardwise.db") as database:
        yield database


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point Config paths at a temporary data directory."""
    data_dir = tmp_path / "data"
    monkeypatch.setattr(Config, "DATA_DIR", data_dir)
    monkeypatch.setattr(Config, "DB_PATH", data_dir / "cardwise.db")
    return data_dir
