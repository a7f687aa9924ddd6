"""Shared test fixtures for MedPrep journal tests."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

# ---------------------------------------------------------------------------
# Test hermeticity
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _force_hermetic_test_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("ENCRYPTION_KEY", "")
    monkeypatch.setenv("DB_PATH", str(tmp_path / "journal.db"))
    monkeypatch.setenv("PATIENT_LABEL", "Demo User")
    monkeypatch.setenv("DEFAULT_REPORT_TIMEFRAME", "1month")

# Allow running tests without `pip install -e .` by making `src/` importable.
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
_SRC_DIR = _PROJECT_ROOT / "src"
if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))


# ---------------------------------------------------------------------------
# In-memory storage fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def journal_db():
    """Create an in-memory JournalDatabase for testing."""
    from medprep.core.storage.database import JournalDatabase

    db = JournalDatabase(":memory:")
    db.initialize()
    yield db
    db.close()


@pytest.fixture
def field_encryptor():
    """Create a FieldEncryptor with a test key."""
    from cryptography.fernet import Fernet

    from medprep.core.storage.encryption import FieldEncryptor

    return FieldEncryptor(Fernet.generate_key().decode())


@pytest.fixture
def journal_repository(journal_db, field_encryptor):
    """Create a JournalRepository backed by in-memory SQLite."""
    from medprep.core.storage.repository import JournalRepository

    return JournalRepository(journal_db, field_encryptor)


@pytest.fixture
def audit_logger(journal_db):
    """Create an AuditLogger backed by in-memory SQLite."""
    from medprep.core.audit.logger import AuditLogger

    return AuditLogger(journal_db)
