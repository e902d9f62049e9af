"""Structured logging for the kube-tagger operator."""

from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from typing import Any

from .constants import CONTROLLER_NAME
from .utils.errors import sanitize_exception


def setup_structured_logging(debug: bool = False) -> None:
    """Configure structured JSON logging on stdout."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    # Keep the AWS SDK quiet unless something goes wrong
    for noisy in ("botocore", "boto3", "urllib3"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def log_event(
    logger: logging.Logger,
    level: int,
    message: str,
    **fields: Any,
) -> None:
    """Log one structured message as a JSON object."""
    if not logger.isEnabledFor(level):
        return
    log_data = {
        "controller": CONTROLLER_NAME,
        "level": logging.getLevelName(level).lower(),
        "message": message,
    }
    log_data.update(fields)
    logger.log(level, json.dumps(log_data, default=str))


@dataclass(frozen=True)
class LogContext:
    """Correlation fields carried through the handling of one claim.

    A context is immutable; ``bind`` returns a copy with extra fields so a
    caller never sees fields added further down the call chain.
    """

    logger: logging.Logger
    fields: dict[str, Any] = field(default_factory=dict)

    def bind(self, **fields: Any) -> LogContext:
        """Return a new context with the given fields added."""
        return LogContext(self.logger, {**self.fields, **fields})

    def debug(self, message: str, **kwargs: Any) -> None:
        log_event(self.logger, logging.DEBUG, message, **{**self.fields, **kwargs})

    def info(self, message: str, **kwargs: Any) -> None:
        log_event(self.logger, logging.INFO, message, **{**self.fields, **kwargs})

    def warning(self, message: str, **kwargs: Any) -> None:
        log_event(self.logger, logging.WARNING, message, **{**self.fields, **kwargs})

    def error(self, message: str, error: Exception | None = None, **kwargs: Any) -> None:
        """Log an error, adding the sanitized exception text and type when given."""
        if error is not None:
            kwargs["error"] = sanitize_exception(error)
            kwargs["error_type"] = type(error).__name__
        log_event(self.logger, logging.ERROR, message, **{**self.fields, **kwargs})
