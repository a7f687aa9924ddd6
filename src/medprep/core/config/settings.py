"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """MedPrep journal server configuration."""

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Server
    # Loopback by default; the journal holds personal health data and has no auth layer.
    medprep_host: str = "127.0.0.1"
    medprep_port: int = 8001
    medprep_log_level: str = "info"
    # Binding to a non-loopback host refuses to start unless this is true.
    medprep_allow_insecure_bind: bool = False

    # Storage (journal data bank)
    db_path: str = "~/.medprep/journal.db"

    # Encryption
    encryption_key: str = ""

    # Reports
    patient_label: str = "Demo User"
    default_report_timeframe: str = "1month"


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
