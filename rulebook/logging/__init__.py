"""
Logging infrastructure for the rulebook.
"""

from .logger import (
    RulebookLogger,
    get_rulebook_logger,
    initialize_logging,
    get_logger_instance,
)

__all__ = [
    "RulebookLogger",
    "get_rulebook_logger",
    "initialize_logging",
    "get_logger_instance",
]
