# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2026 Inbox Policy Contributors

"""Logging setup driven by ``Settings.log_level`` and ``Settings.log_format``."""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime

from inbox_policy.config import Settings, get_settings

_TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    """Render each record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        return json.dumps(data, default=str)


def configure_logging(settings: Settings | None = None) -> logging.Handler:
    """Install a stream handler on the ``inbox_policy`` logger.

    Calling this again replaces the previously installed handler.
    """
    settings = settings or get_settings()
    handler = logging.StreamHandler(sys.stderr)
    if settings.log_format == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(_TEXT_FORMAT))

    root = logging.getLogger("inbox_policy")
    for existing in list(root.handlers):
        if getattr(existing, "_inbox_policy", False):
            root.removeHandler(existing)
    handler._inbox_policy = True  # type: ignore[attr-defined]
    root.addHandler(handler)
    root.setLevel(settings.log_level.upper())
    return handler
