"""
Collection Errors
=================

Exception types raised by the collector. Only NoFilesCollectedError is meant
to reach the user; everything else is logged and skipped by the traversal.
"""

import time
import traceback
from typing import Any, Dict, List, Optional


class CollectionError(Exception):
    """Base class for collector errors"""

    def __init__(self, message: str, cause: Optional[Exception] = None,
                 details: Optional[Dict[str, Any]] = None):
        """
        Initialize a collection error.

        Args:
            message: Error description
            cause: Original exception that caused this error
            details: Additional error context
        """
        super().__init__(message)
        self.cause = cause
        self.details = details or {}
        self.timestamp = time.time()
        self.traceback = traceback.format_exc() if cause else None

    def __str__(self) -> str:
        base_msg = super().__str__()
        if self.cause:
            return f"{base_msg} (caused by {type(self.cause).__name__}: {self.cause})"
        return base_msg

    def __repr__(self) -> str:
        return (f"{type(self).__name__}(message={super().__str__()!r}, "
                f"cause={self.cause!r}, details={self.details!r})")

    def log_context(self) -> Dict[str, Any]:
        """Get error context for structured logging"""
        return {
            'error_type': type(self).__name__,
            'message': str(self),
            'timestamp': self.timestamp,
            'details': self.details,
            'cause': str(self.cause) if self.cause else None
        }


class NoFilesCollectedError(CollectionError):
    """Raised when a non-empty seed produced zero collected files"""

    def __init__(self, seeds: List[str], mode: str = "imports"):
        super().__init__(
            f"No text files found to process ({len(seeds)} seed(s), mode: {mode})",
            details={'seeds': list(seeds), 'mode': mode}
        )
        self.seeds = list(seeds)
        self.mode = mode


class BatchExpansionError(CollectionError):
    """The out-of-process batch import walker failed or timed out"""


class ConfigError(CollectionError):
    """Invalid configuration file or values"""
