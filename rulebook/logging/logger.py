"""
Logging infrastructure for the rulebook.

Provides loguru-based logging with:
- Component binding (versioning, history, cli)
- Optional rotating file logs
- A dedicated history log for snapshot writes and recovery warnings
"""

import sys
from pathlib import Path
from typing import Any, Optional

from loguru import logger

from rulebook.config import LogConfig


class RulebookLogger:
    """
    Logger setup for the rulebook.

    Features:
    - Console logging to stderr
    - Per-component file logs with rotation and retention
    - Error-only log file
    """

    def __init__(
        self,
        log_dir: Optional[Path] = None,
        rotation: str = "10 MB",
        retention: str = "1 month",
        level: str = "INFO",
        format_string: Optional[str] = None,
        enable_file_logging: bool = False,
        enable_console_logging: bool = True,
    ):
        """
        Initialize the rulebook logger.

        Args:
            log_dir: Directory for log files
            rotation: When to rotate log files
            retention: How long to keep old logs
            level: Default log level
            format_string: Custom format string
            enable_file_logging: Whether to log to files
            enable_console_logging: Whether to log to console
        """
        self.log_dir = log_dir or Path("logs")
        self.rotation = rotation
        self.retention = retention
        self.level = level
        self.format_string = format_string or LogConfig().format

        # Remove default handler
        logger.remove()
        logger.configure(extra={"component": "system"})

        if enable_console_logging:
            logger.add(
                sys.stderr,
                format=self.format_string,
                level=level,
                colorize=True,
            )

        if enable_file_logging:
            self.log_dir.mkdir(parents=True, exist_ok=True)
            self._add_file_handlers()

        self.logger = logger.bind(component="system")

    def _add_file_handlers(self) -> None:
        """Add file handlers for the main, history and error logs."""
        logger.add(
            self.log_dir / "rulebook.log",
            format=self.format_string,
            level=self.level,
            rotation=self.rotation,
            retention=self.retention,
        )

        logger.add(
            self.log_dir / "history.log",
            format=self.format_string,
            level="DEBUG",
            rotation=self.rotation,
            retention=self.retention,
            filter=lambda record: record["extra"].get("component") == "history",
        )

        logger.add(
            self.log_dir / "errors.log",
            format=self.format_string,
            level="ERROR",
            rotation=self.rotation,
            retention=self.retention,
        )

    def get_logger(self, component: str) -> Any:
        """Get a logger bound to a specific component."""
        return logger.bind(component=component)


def get_rulebook_logger(component: str = "system") -> Any:
    """
    Get a component-specific logger.

    Args:
        component: Component name

    Returns:
        Logger instance

    Example:
        >>> log = get_rulebook_logger("versioning")
        >>> log.info("Created version", rule_id="r1", version="1.0.1")
    """
    return logger.bind(component=component)


# Global logger instance
_rulebook_logger: Optional[RulebookLogger] = None


def initialize_logging(
    log_config: Optional[LogConfig] = None, level: Optional[str] = None
) -> RulebookLogger:
    """
    Initialize the rulebook logging system.

    This should be called once at application startup.

    Args:
        log_config: Logging section of the configuration (defaults apply if omitted)
        level: Overrides the configured level

    Returns:
        Configured RulebookLogger instance
    """
    global _rulebook_logger
    log_config = log_config or LogConfig()
    _rulebook_logger = RulebookLogger(
        log_dir=Path(log_config.log_dir),
        rotation=log_config.rotation,
        retention=log_config.retention,
        level=(level or log_config.level).upper(),
        format_string=log_config.format,
        enable_file_logging=log_config.enable_file_logging,
        enable_console_logging=log_config.enable_console_logging,
    )
    return _rulebook_logger


def get_logger_instance() -> Optional[RulebookLogger]:
    """Get the global logger instance."""
    return _rulebook_logger
