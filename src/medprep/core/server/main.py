"""Command-line launcher for the journal server (``medprep-journal``)."""

from __future__ import annotations

import logging
from ipaddress import ip_address

from medprep.core.config.settings import Settings, get_settings
from medprep.core.server.app import create_app

logger = logging.getLogger(__name__)

_LOCAL_NAMES = frozenset({"localhost", "localhost.localdomain"})


class UnsafeBindError(RuntimeError):
    """Raised when the journal would be exposed beyond this machine."""


def _is_loopback_host(host: str) -> bool:
    if host.lower() in _LOCAL_NAMES:
        return True
    try:
        return ip_address(host).is_loopback
    except ValueError:
        return False


def check_bind_address(settings: Settings) -> None:
    """Only loopback hosts are allowed unless the operator opted out."""
    if settings.medprep_allow_insecure_bind or _is_loopback_host(settings.medprep_host):
        return
    raise UnsafeBindError(
        f"MEDPREP_HOST={settings.medprep_host!r} would expose the symptom journal "
        "to the network, and the server has no authentication. Use 127.0.0.1, or "
        "set MEDPREP_ALLOW_INSECURE_BIND=true if a proxy handles access control."
    )


def run() -> None:
    settings = get_settings()
    level = getattr(logging, settings.medprep_log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    check_bind_address(settings)
    if not settings.encryption_key:
        logger.warning(
            "ENCRYPTION_KEY is not set: journal tools are disabled, only health_check is served"
        )
    else:
        logger.info("Journal data bank: %s", settings.db_path)

    logger.info(
        "Serving MedPrep Journal at http://%s:%d (streamable-http)",
        settings.medprep_host,
        settings.medprep_port,
    )
    create_app().run(
        transport="streamable-http",
        host=settings.medprep_host,
        port=settings.medprep_port,
    )


if __name__ == "__main__":
    run()
