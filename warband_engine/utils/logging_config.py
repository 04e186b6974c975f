# ABOUTME: Debug logging configuration for dual console/file output
# ABOUTME: Manages log file rotation, timestamps, and Rich console integration

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional, TextIO
from rich.console import Console


LOG_PREFIX = "warband_"


class TeeFile:
    """
    File-like object that writes to both stdout and a log file.

    This allows Rich console output to be simultaneously displayed
    in the terminal and captured to a log file.
    """

    def __init__(self, file: TextIO, stdout: TextIO):
        """
        Initialize TeeFile.

        Args:
            file: Log file to write to
            stdout: Standard output stream
        """
        self.file = file
        self.stdout = stdout

    def write(self, text: str) -> int:
        self.stdout.write(text)
        self.file.write(text)
        return len(text)

    def flush(self) -> None:
        """Flush both streams."""
        self.stdout.flush()
        self.file.flush()

    def isatty(self) -> bool:
        """Return whether stdout is a TTY."""
        return self.stdout.isatty()


class LoggingConfig:
    """
    Manages debug logging configuration for the warband builder.

    Responsibilities:
    - Create log directory
    - Generate timestamped log files
    - Rotate old log files (keep last 10)
    - Set up Python logging
    - Create dual-output Rich console
    - Structured log lines for dice rolls, creation steps and roster changes
    """

    def __init__(self, debug_enabled: bool = False, log_dir: Optional[Path] = None):
        """
        Initialize logging configuration.

        Args:
            debug_enabled: Whether debug mode is enabled
            log_dir: Directory for log files (defaults to ./logs)
        """
        self.debug_enabled = debug_enabled
        self.log_dir = Path(log_dir) if log_dir is not None else Path("logs")
        self.log_file_path: Optional[Path] = None
        self.log_file: Optional[TextIO] = None
        self.tee_console: Optional[Console] = None
        self.file_handler: Optional[logging.Handler] = None
        self._step_counter = 0

        if debug_enabled:
            self._setup_logging()

    def _setup_logging(self) -> None:
        """Set up logging infrastructure."""
        self.log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.log_file_path = self.log_dir / f"{LOG_PREFIX}{timestamp}.log"

        self._rotate_logs(self.log_dir)

        self.log_file = open(self.log_file_path, 'w', encoding='utf-8', buffering=1)

        self._setup_python_logging()

    def _rotate_logs(self, log_dir: Path, keep_count: int = 10) -> None:
        """
        Rotate log files, keeping only the most recent ones.

        Args:
            log_dir: Directory containing log files
            keep_count: Number of log files to keep
        """
        log_files = sorted(
            log_dir.glob(f"{LOG_PREFIX}*.log"),
            key=lambda p: p.stat().st_mtime,
            reverse=True
        )

        # Keep keep_count-1 since we're about to create a new one
        for old_log in log_files[keep_count - 1:]:
            try:
                old_log.unlink()
            except OSError as e:
                logging.error(f"Failed to delete old log file {old_log}: {e}")

    def _setup_python_logging(self) -> None:
        """Set up Python logging with file handler."""
        logger = logging.getLogger()
        logger.setLevel(logging.DEBUG if self.debug_enabled else logging.INFO)

        if self.log_file_path:
            file_handler = logging.FileHandler(
                self.log_file_path,
                encoding='utf-8'
            )
            file_handler.setLevel(logging.DEBUG)

            formatter = logging.Formatter(
                '[%(asctime)s] [%(levelname)s] %(name)s: %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(formatter)

            logger.addHandler(file_handler)
            self.file_handler = file_handler

    def create_console(self) -> Console:
        """
        Create a Rich console that optionally writes to log file.

        Returns:
            Rich Console instance
        """
        if self.debug_enabled and self.log_file:
            tee_file = TeeFile(self.log_file, sys.stdout)

            self.tee_console = Console(
                file=tee_file,
                force_terminal=True,
                legacy_windows=False
            )

            return self.tee_console
        else:
            return Console()

    def log_dice_roll(self, notation: str, rolls: list, modifier: int, total: int) -> None:
        """
        Log a dice roll with full details.

        Args:
            notation: Dice notation (e.g., "1d20")
            rolls: Individual die results
            modifier: Modifier applied
            total: Final total
        """
        if not self.debug_enabled:
            return

        logger = logging.getLogger("warband_engine.dice")
        logger.info(f"[DICE] {notation} -> {rolls} + {modifier} = {total}")

    def log_creation_step(self, action: str, character_type: str, step: str, **details) -> None:
        """
        Log a character creation transition.

        Args:
            action: What happened (START, ADVANCE, BACK, ROLL, SKILL, COMPLETE)
            character_type: "hero" or "follower"
            step: Wizard step after the transition
            **details: Extra key/value pairs (roll, result, ...)
        """
        if not self.debug_enabled:
            return

        self._step_counter += 1
        logger = logging.getLogger("warband_engine.creation")

        msg = f"[CREATE #{self._step_counter:03d}] {character_type} {action} @ {step}"
        if details:
            detail_str = ", ".join(f"{k}={v}" for k, v in details.items())
            msg += f" {{{detail_str}}}"

        logger.info(msg)

    def log_roster_change(self, warband: str, action: str, details: str = "") -> None:
        """
        Log a change to a stored warband.

        Args:
            warband: Warband name
            action: Change made (e.g. "created", "added hero")
            details: Optional details
        """
        if not self.debug_enabled:
            return

        logger = logging.getLogger("warband_engine.roster")

        msg = f"[ROSTER] {warband}: {action}"
        if details:
            msg += f" ({details})"

        logger.info(msg)

    def get_log_file_path(self) -> Optional[Path]:
        """
        Get the path to the current log file.

        Returns:
            Path to log file, or None if debug mode not enabled
        """
        return self.log_file_path

    def close(self) -> None:
        """Close log file and detach the file handler."""
        if self.file_handler:
            logging.getLogger().removeHandler(self.file_handler)
            self.file_handler.close()
            self.file_handler = None
        if self.log_file:
            self.log_file.close()
            self.log_file = None


# Global logging config instance
_logging_config: Optional[LoggingConfig] = None


def init_logging(debug_enabled: bool = False, log_dir: Optional[Path] = None) -> LoggingConfig:
    """
    Initialize global logging configuration.

    Args:
        debug_enabled: Whether debug mode is enabled
        log_dir: Directory for log files (defaults to ./logs)

    Returns:
        LoggingConfig instance
    """
    global _logging_config
    _logging_config = LoggingConfig(debug_enabled, log_dir=log_dir)
    return _logging_config


def get_logging_config() -> Optional[LoggingConfig]:
    """
    Get the global logging configuration.

    Returns:
        LoggingConfig instance or None if not initialized
    """
    return _logging_config


def reset_logging() -> None:
    """Close and forget the global logging configuration."""
    global _logging_config
    if _logging_config:
        _logging_config.close()
    _logging_config = None
