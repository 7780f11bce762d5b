"""
Centralized error handling and logging for village generation.

This module provides:
- Centralized error logging to files
- User-friendly error messages
- Custom exception types for the generation failure categories
"""
import logging
import traceback
from pathlib import Path
from typing import List, Optional
from datetime import datetime

# Setup logging directory
LOG_DIR = Path(__file__).resolve().parent.parent / "logs"
LOG_DIR.mkdir(exist_ok=True)

# Configure logger
logger = logging.getLogger("villagegen")
logger.setLevel(logging.DEBUG)

# Prevent duplicate handlers
if not logger.handlers:
    # File handler for detailed logs
    log_file = LOG_DIR / f"villagegen_{datetime.now().strftime('%Y%m%d')}.log"
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(
        logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    )

    # Console handler for warnings/errors
    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(
        logging.Formatter('%(levelname)s: %(message)s')
    )

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)


class GenerationError(Exception):
    """Base exception for village generation errors."""
    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.user_message = user_message or message


class ConfigurationError(GenerationError):
    """Missing or invalid settings. Raised before any grid is created."""
    pass


class PlacementExhausted(GenerationError):
    """A single building instance could not be placed within its attempt cap."""
    def __init__(self, tile_name: str, attempts: int):
        super().__init__(
            f"Failed to place {tile_name} after {attempts} attempts",
            user_message=f"Could not find room for a {tile_name}.",
        )
        self.tile_name = tile_name
        self.attempts = attempts


class ValidationFailure(GenerationError):
    """The finished grid failed structural validation."""
    def __init__(self, violations: List[str]):
        summary = "; ".join(violations[:3])
        if len(violations) > 3:
            summary += f" (+{len(violations) - 3} more)"
        super().__init__(f"Map validation failed: {summary}")
        self.violations = list(violations)


class RuleAuthoringAmbiguity(GenerationError):
    """A rule family matched nothing and has no usable default tile."""
    pass


def log_error(
    error: Exception,
    context: str = "",
    user_message: Optional[str] = None,
) -> None:
    """
    Log an error with context information.

    Args:
        error: The exception that occurred
        context: Where the error occurred (e.g., "generate_village", "load_settings")
        user_message: Optional friendlier message to log alongside
    """
    error_type = type(error).__name__
    error_msg = str(error)
    trace = traceback.format_exc()

    logger.error(
        f"Error in {context}: {error_type}: {error_msg}\n{trace}",
        exc_info=error if error.__traceback__ is not None else None,
    )

    if user_message:
        logger.info(f"{context}: {user_message}")
