"""CloudWatch Logger Adapter - Outputs structured JSON log lines."""
import json
import sys
from datetime import datetime, timezone
from typing import Any, TextIO


class CloudWatchLogger:
    """
    Implementation of LoggerPort that writes one JSON object per line.

    Selected with ``--log-format json``. When the CLI runs inside Lambda or
    a container shipping stdout to CloudWatch, the fields can be queried
    with CloudWatch Logs Insights (for example ``filter web_acl_id = ...``).
    """

    LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}

    def __init__(
        self,
        level: str = "INFO",
        context: dict | None = None,
        stream: TextIO | None = None,
    ):
        """
        Initialize the CloudWatch logger.

        Args:
            level: Minimum log level to output
            context: Additional context to include in all log entries
            stream: Output stream (default: stdout)
        """
        self._level = self.LEVELS.get(level.upper(), 20)
        self._context = context or {}
        self._stream = stream

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log a debug message."""
        self._log("DEBUG", message, **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log an info message."""
        self._log("INFO", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log a warning message."""
        self._log("WARNING", message, **kwargs)

    def error(self, message: str, exception: Exception | None = None, **kwargs: Any) -> None:
        """Log an error message, optionally with exception details."""
        if exception:
            kwargs["error"] = str(exception)
            kwargs["error_type"] = type(exception).__name__
        self._log("ERROR", message, **kwargs)

    def set_level(self, level: str) -> None:
        """Set the logging level."""
        self._level = self.LEVELS.get(level.upper(), 20)

    def set_context(self, **kwargs: Any) -> None:
        """
        Set additional context to include in all log entries.

        The CLI binds scope and command here.
        """
        self._context.update(kwargs)

    def _log(self, level: str, message: str, **kwargs: Any) -> None:
        level_value = self.LEVELS.get(level, 20)
        if level_value < self._level:
            return

        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "message": message,
            **self._context,
            **kwargs,
        }

        print(json.dumps(log_entry, default=str), file=self._stream or sys.stdout)
