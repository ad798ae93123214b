"""Logging configuration and the provisioning audit trail."""

import json
import logging
from datetime import datetime, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any, Union

from .config import LoggingConfig, get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Chatty at INFO; only raised to the app level when debugging
NOISY_LOGGERS = ("urllib3", "requests")


def setup_logging(config: Union[LoggingConfig, None] = None) -> None:
    """Configure root logging from the ``logging`` settings section."""
    config = config or get_settings().logging
    level = getattr(logging, config.level.upper())

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(level if level == logging.DEBUG else logging.WARNING)


class AuditLogger:
    """Writes one JSON line per terminal provisioning outcome.

    Entries go only to the audit file, not to the application log.
    """

    def __init__(self, config: Union[LoggingConfig, None] = None, name: str = "cephprov.audit") -> None:
        config = config or get_settings().logging
        self.enabled = config.audit_enabled
        self.path = Path(config.audit_file)
        self.logger = logging.getLogger(name)
        self.logger.propagate = False

        if self.enabled:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            target = str(self.path.resolve())
            if not any(getattr(h, "baseFilename", None) == target for h in self.logger.handlers):
                handler = logging.FileHandler(target)
                handler.setFormatter(logging.Formatter("%(message)s"))
                self.logger.addHandler(handler)
            self.logger.setLevel(logging.INFO)

    def record(
        self,
        operation: str,
        resource: str,
        status: str,
        task_id: Union[str, None] = None,
        **details: Any,
    ) -> None:
        """Append an audit entry.

        Args:
            operation: Operation type (CREATE)
            resource: Resource operated on (e.g., storage:pool1)
            status: Outcome (SUCCESS, FAILED)
            task_id: Task that carried out the operation
            **details: Extra fields stored under ``details``
        """
        if not self.enabled:
            return

        entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "operation": operation,
            "resource": resource,
            "status": status,
            "task_id": task_id,
            "details": details,
        }
        self.logger.info(json.dumps(entry, default=str))


@lru_cache
def get_audit_logger() -> AuditLogger:
    """Audit logger built from the current settings on first use."""
    return AuditLogger()
