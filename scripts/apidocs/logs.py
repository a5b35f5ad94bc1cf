"""Logging setup shared by every phase of the updater."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger("apidocs")


class PhaseLogger(logging.LoggerAdapter):
    """Tag records with the pipeline phase and prefix messages with it."""

    def process(self, msg, kwargs):
        phase = self.extra["phase"]
        extra = dict(kwargs.get("extra") or {})
        extra.setdefault("phase", phase)
        kwargs["extra"] = extra
        return f"[{phase}] {msg}", kwargs


def phase_logger(phase: str, base: logging.Logger | None = None) -> PhaseLogger:
    """Return a logger adapter for ``phase``, wrapping ``base`` when given."""
    return PhaseLogger(base or logger, {"phase": phase})


def configure_logging(level: str | int = logging.INFO) -> None:
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
