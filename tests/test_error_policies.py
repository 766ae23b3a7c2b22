"""
Tests for per-file error handling policies.
"""

import logging
from pathlib import Path

import pytest

from docmirror import (
    CollectErrorsPolicy,
    ContinueOnErrorsPolicy,
    FailFastPolicy,
    ThresholdPolicy,
)


class TestErrorPolicies:
    """Test individual error policy behaviors."""

    def test_fail_fast_policy(self):
        """FailFastPolicy should re-raise any error."""
        policy = FailFastPolicy()

        with pytest.raises(PermissionError):
            policy.handle(PermissionError("Access denied"), "copy", "content://a/document/x")

    def test_continue_on_errors_policy(self, caplog):
        """ContinueOnErrorsPolicy should log, record and carry on."""
        policy = ContinueOnErrorsPolicy()

        with caplog.at_level(logging.WARNING, logger="docmirror.error_policies"):
            policy.handle(PermissionError("Access denied"), "copy", "content://a/document/x")
            policy.handle(OSError("Busy"), "delete", Path("/cache/old.txt"))

        stats = policy.get_statistics()
        assert stats['total_errors'] == 2
        assert stats['copy_errors'] == 1
        assert stats['delete_errors'] == 1
        assert stats['errors'][0]['error_type'] == "PermissionError"
        assert "Skipping copy" in caplog.text

    def test_collect_errors_policy_is_quiet(self, caplog):
        """CollectErrorsPolicy records without logging."""
        policy = CollectErrorsPolicy()

        with caplog.at_level(logging.WARNING, logger="docmirror.error_policies"):
            policy.handle(OSError("Busy"), "copy", "x")

        assert len(policy.errors) == 1
        assert policy.errors[0]['error_message'] == "Busy"
        assert caplog.text == ""

    def test_threshold_policy(self):
        """ThresholdPolicy tolerates up to max_errors."""
        policy = ThresholdPolicy(max_errors=2, verbose=False)

        policy.handle(OSError("1"), "copy", "a")
        policy.handle(OSError("2"), "copy", "b")

        with pytest.raises(RuntimeError, match="threshold exceeded") as exc_info:
            policy.handle(OSError("3"), "copy", "c")

        assert isinstance(exc_info.value.__cause__, OSError)
        assert policy.error_count == 3
