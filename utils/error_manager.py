import json
import os
import datetime
from typing import Dict, Any, List

from utils.logger import get_logger
logger = get_logger("error_manager")


class ErrorManager:
    """
    Centralized ledger for generation failures.

    Every failed batch item, storyboard scene, advisory parse fallback and
    credential problem is appended here so a run can be inspected afterwards.
    """

    LOG_FILE = "outputs/api_errors.log"
    MAX_ENTRIES = 100

    @classmethod
    def log_error(
        cls,
        service: str,
        error_message: str,
        details: Any = None,
        severity: str = "error"
    ):
        """
        Append an entry to the error ledger.

        Args:
            service: Component name (e.g., "BatchOrchestrator", "VeoAPI")
            error_message: Brief error description
            details: Additional context (job id, scene id, raw text)
            severity: "warning", "error" or "critical"
        """
        entry = {
            "timestamp": datetime.datetime.now().isoformat(),
            "service": service,
            "message": error_message,
            "details": str(details) if details else None,
            "severity": severity,
        }

        log_method = logger.warning if severity == "warning" else logger.error
        log_method(f"[{service}] {error_message}")

        directory = os.path.dirname(cls.LOG_FILE)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            logs = cls._read_entries()
            logs.append(entry)
            logs = logs[-cls.MAX_ENTRIES:]
            with open(cls.LOG_FILE, "w", encoding="utf-8") as f:
                json.dump(logs, f, indent=2, ensure_ascii=False)
        except Exception as e:
            # never raise into the caller's failure path
            logger.critical(f"[ErrorManager] Failed to write error ledger: {e}")
            logger.critical(f"[ErrorManager] Original error: [{service}] {error_message}")

    @classmethod
    def _read_entries(cls) -> List[Dict]:
        if not os.path.exists(cls.LOG_FILE):
            return []
        try:
            with open(cls.LOG_FILE, "r", encoding="utf-8") as f:
                content = f.read()
        except UnicodeDecodeError:
            return []  # not a text ledger, start over
        if not content.strip():
            return []
        try:
            logs = json.loads(content)
        except json.JSONDecodeError:
            return []  # corrupted ledger, start over
        if not isinstance(logs, list):
            return []
        return [e for e in logs if isinstance(e, dict)]

    @classmethod
    def get_recent_errors(cls, limit: int = 20) -> List[Dict]:
        """Most recent entries first."""
        try:
            logs = cls._read_entries()
        except OSError:
            return []
        return sorted(logs, key=lambda x: str(x.get("timestamp", "")), reverse=True)[:limit]

    @classmethod
    def clear_logs(cls):
        """Remove the ledger file."""
        if os.path.exists(cls.LOG_FILE):
            os.remove(cls.LOG_FILE)
