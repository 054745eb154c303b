"""
Logging setup for the X login service.

Every handler installed here carries SecretRedactionFilter, so OAuth secrets
(client secret, tokens, authorization codes) never reach the log output even
when they appear in a URL that a library logs. On Cloud Run records go through
google-cloud-logging; anywhere else they are written to stdout as JSON.
"""

import json
import logging
import os
import re
from datetime import UTC, datetime
from typing import Any, Optional, Union

SECRET_PARAMS = ("access_token", "refresh_token", "client_secret", "code")
REDACTED = "[REDACTED]"

# Loggers that print full request URLs at INFO
NOISY_LOGGERS = ("httpx", "httpcore")

_SECRET_PATTERN = re.compile(
    r"(?<![\w-])(" + "|".join(SECRET_PARAMS) + r")=([^&\s\"']+)"
)


def redact(text: str) -> str:
    """Mask the value of every secret ``name=value`` pair in ``text``."""
    return _SECRET_PATTERN.sub(rf"\1={REDACTED}", text)


def _redact_value(key: Any, value: Any) -> Any:
    if key in SECRET_PARAMS and value:
        return REDACTED
    if isinstance(value, str):
        return redact(value)
    if isinstance(value, dict):
        return {k: _redact_value(k, v) for k, v in value.items()}
    return value


class SecretRedactionFilter(logging.Filter):
    """
    Strip OAuth secrets from a record before any handler formats it.

    The message is rendered once and its args dropped, so secrets passed as
    ``%s`` arguments are masked too. ``extra_fields`` is masked by key and by
    ``name=value`` content, nested dicts included.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        record.msg = redact(message)
        record.args = None

        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            record.extra_fields = _redact_value(None, extra_fields)
        return True


class JsonFormatter(logging.Formatter):
    """
    Render a record as one JSON object per line.

    Context passed as ``extra={"extra_fields": {...}}`` is merged into the top
    level, after the fixed keys, so it cannot hide the severity or message.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_object = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "severity": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }

        extra_fields = getattr(record, "extra_fields", None)
        if isinstance(extra_fields, dict):
            for key, value in extra_fields.items():
                log_object.setdefault(key, value)

        if record.exc_info:
            log_object["exception"] = redact(self.formatException(record.exc_info))

        return json.dumps(log_object, default=str)


def resolve_log_level(level: Optional[Union[int, str]] = None) -> int:
    """
    Pick the root log level.

    An explicit ``level`` wins, then the ``LOG_LEVEL`` env variable, then INFO.
    Unknown names fall back to INFO.
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "INFO")
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_global_logging(level: Optional[Union[int, str]] = None) -> None:
    """
    Configure the root logger for the current environment.

    When running in Cloud Run (K_SERVICE env var is set) google-cloud-logging
    owns the handlers; otherwise a single stdout handler with JsonFormatter
    replaces whatever the root logger had. In both cases the redaction filter
    is attached to every root handler.
    """
    log_level = resolve_log_level(level)
    root_logger = logging.getLogger()

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    if os.getenv("K_SERVICE") is not None:
        try:
            import google.cloud.logging

            google.cloud.logging.Client().setup_logging(log_level=log_level)
        except Exception as e:
            logging.basicConfig(
                level=log_level,
                format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            )
            _attach_redaction(root_logger)
            logging.warning(f"Cloud Logging setup failed, using basic config: {e}")
            return

        _attach_redaction(root_logger)
        logging.info("Cloud Logging initialized for Cloud Run.")
        return

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())

    for existing in list(root_logger.handlers):
        root_logger.removeHandler(existing)
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)
    _attach_redaction(root_logger)


def _attach_redaction(logger: logging.Logger) -> None:
    for handler in logger.handlers:
        if not any(isinstance(f, SecretRedactionFilter) for f in handler.filters):
            handler.addFilter(SecretRedactionFilter())
