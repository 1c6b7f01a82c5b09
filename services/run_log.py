"""
Run Log

Session-scoped logging for one device sync run. Opening a RunLog:
1. Opens a timestamped run log holding the sync's own lines
2. Opens a timestamped transcript capturing every record from every logger
3. Purges log artifacts older than the retention period (best effort),
   recording each deletion or failure in both files

Both files are closed when the context exits, whether or not the run
failed.
"""

import logging
import time
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from services.exceptions import RunLogError

RUN_LOGGER_NAME = "device_sync.run"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class RunLog:
    """
    Context object owning the run log and transcript for one sync run.

    Usage:
        with RunLog("logs") as run_log:
            run_log.info("Starting")
    """

    def __init__(
        self,
        log_dir: Union[str, Path],
        retention_days: int = 7,
        prefix: str = "DeviceSync",
    ):
        self.log_dir = Path(log_dir)
        self.retention_days = retention_days
        self.prefix = prefix
        self.log_path: Optional[Path] = None
        self.transcript_path: Optional[Path] = None
        self._logger = logging.getLogger(RUN_LOGGER_NAME)
        self._log_handler: Optional[logging.FileHandler] = None
        self._transcript_handler: Optional[logging.FileHandler] = None
        self._previous_root_level: Optional[int] = None

    def __enter__(self) -> "RunLog":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is not None:
            self._logger.error(f"Run terminated unexpectedly: {exc_val}")
        self.close()

    def open(self) -> None:
        """
        Create the log directory, attach both file handlers and purge old artifacts.

        Raises:
            RunLogError: If the log directory or files cannot be created
        """
        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise RunLogError(f"Cannot create log directory {self.log_dir}: {e}")

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_path = self.log_dir / f"{self.prefix}_{timestamp}.log"
        self.transcript_path = self.log_dir / f"{self.prefix}_Transcript_{timestamp}.log"
        formatter = logging.Formatter(LOG_FORMAT)

        try:
            self._log_handler = logging.FileHandler(self.log_path, encoding="utf-8")
            self._transcript_handler = logging.FileHandler(
                self.transcript_path, encoding="utf-8"
            )
        except OSError as e:
            self.close()
            raise RunLogError(f"Cannot open run log in {self.log_dir}: {e}")

        self._log_handler.setLevel(logging.INFO)
        self._log_handler.setFormatter(formatter)
        self._logger.addHandler(self._log_handler)
        self._logger.setLevel(logging.DEBUG)

        # Transcript sees everything that reaches the root logger
        root = logging.getLogger()
        self._previous_root_level = root.level
        root.setLevel(logging.DEBUG)
        self._transcript_handler.setLevel(logging.DEBUG)
        self._transcript_handler.setFormatter(formatter)
        root.addHandler(self._transcript_handler)

        self.info(f"Run log opened: {self.log_path}")
        self.info(f"Transcript opened: {self.transcript_path}")

        # Purge after the handlers are attached so cleanup lines land in this run's files
        self.purge_old_logs()

    def close(self) -> None:
        """Detach and close both file handlers. Safe to call more than once."""
        if self._log_handler:
            self.info("Run log closed")
            self._logger.removeHandler(self._log_handler)
            self._log_handler.close()
            self._log_handler = None

        if self._transcript_handler:
            root = logging.getLogger()
            root.removeHandler(self._transcript_handler)
            self._transcript_handler.close()
            self._transcript_handler = None
            if self._previous_root_level is not None:
                root.setLevel(self._previous_root_level)
                self._previous_root_level = None

    def purge_old_logs(self) -> int:
        """
        Delete this sync's log artifacts older than the retention period.

        Failures are logged and skipped.

        Returns:
            Number of files deleted
        """
        cutoff = time.time() - self.retention_days * 86400
        deleted = 0
        current = {self.log_path, self.transcript_path}
        for path in self.log_dir.glob(f"{self.prefix}_*.log"):
            if path in current:
                continue
            try:
                if path.stat().st_mtime < cutoff:
                    path.unlink()
                    deleted += 1
                    self.info(f"Deleted old log file: {path.name}")
            except OSError as e:
                self.warning(f"Could not delete old log file {path}: {e}")
        return deleted

    # Line writers

    def debug(self, message: str) -> None:
        self._logger.debug(message)

    def info(self, message: str) -> None:
        self._logger.info(message)

    def warning(self, message: str) -> None:
        self._logger.warning(message)

    def error(self, message: str) -> None:
        self._logger.error(message)
