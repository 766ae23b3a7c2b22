"""
Error handling policies for docmirror.

Copy and delete failures during reconciliation are handed to an
ErrorPolicy, which decides whether the pass carries on (the default) or
stops. Listing failures never reach a policy: they always abort the
traversal.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List


logger = logging.getLogger(__name__)


class ErrorPolicy(ABC):
    """
    Base class for per-item error handling policies.

    Subclasses implement different strategies for failures that affect a
    single file during reconciliation.
    """

    @abstractmethod
    def handle(self, error: Exception, operation: str, target: Any) -> None:
        """
        Handle an error for a single item.

        Args:
            error: The exception that was raised
            operation: What was being done ('copy' or 'delete')
            target: The reference or local path being processed

        Raises:
            Exception: To stop the reconciliation pass
        """
        pass

    @staticmethod
    def _record(error: Exception, operation: str, target: Any) -> Dict[str, Any]:
        return {
            'target': str(target),
            'operation': operation,
            'error': error,
            'error_type': type(error).__name__,
            'error_message': str(error),
        }


class FailFastPolicy(ErrorPolicy):
    """
    Policy that immediately re-raises any error, stopping the pass.

    Useful when a partially refreshed cache is worse than none.
    """

    def handle(self, error: Exception, operation: str, target: Any) -> None:
        """Re-raise the error immediately."""
        raise error


class ContinueOnErrorsPolicy(ErrorPolicy):
    """
    Policy that logs errors and lets the pass continue.

    This is the default for reconciliation: a failed copy is simply
    missing from the result and a failed delete is left for the next pass.
    """

    def __init__(self, verbose: bool = True):
        """
        Initialize the policy.

        Args:
            verbose: If True, log a warning for every error
        """
        self.errors: List[Dict[str, Any]] = []
        self.verbose = verbose

    def handle(self, error: Exception, operation: str, target: Any) -> None:
        """Record the error, optionally log it, and carry on."""
        self.errors.append(self._record(error, operation, target))
        if self.verbose:
            logger.warning("Skipping %s of '%s': %s", operation, target, error)

    def get_statistics(self) -> dict:
        """
        Get statistics about errors encountered.

        Returns:
            Dictionary with error counts and details
        """
        return {
            'total_errors': len(self.errors),
            'copy_errors': sum(1 for e in self.errors if e['operation'] == 'copy'),
            'delete_errors': sum(1 for e in self.errors if e['operation'] == 'delete'),
            'errors': self.errors,
        }


class CollectErrorsPolicy(ContinueOnErrorsPolicy):
    """
    Policy that collects all errors without logging.

    Useful for presenting every failure at the end of a batch.
    """

    def __init__(self):
        super().__init__(verbose=False)


class ThresholdPolicy(ErrorPolicy):
    """
    Policy that tolerates errors up to a threshold, then fails.

    Many failing copies usually mean the source went away or the local
    disk is full, in which case carrying on is pointless.
    """

    def __init__(self, max_errors: int = 10, verbose: bool = True):
        """
        Initialize threshold policy.

        Args:
            max_errors: Maximum errors to tolerate before failing
            verbose: If True, log a warning for each tolerated error
        """
        self.max_errors = max_errors
        self.error_count = 0
        self.verbose = verbose
        self.errors: List[Exception] = []

    def handle(self, error: Exception, operation: str, target: Any) -> None:
        """Tolerate the error if under threshold, otherwise raise."""
        self.error_count += 1
        self.errors.append(error)

        if self.error_count > self.max_errors:
            raise RuntimeError(f"Error threshold exceeded ({self.max_errors} errors)") from error

        if self.verbose:
            logger.warning("[%d/%d] %s failed for '%s': %s",
                           self.error_count, self.max_errors, operation, target, error)
