"""
Tests for the fixed-delay retry decorator.

Tests follow AAA (Arrange, Act, Assert) pattern.
"""

from unittest.mock import patch

import pytest

from ftp_user_svc.core.retry import retry_with_fixed_delay


class Flaky:
    """Callable that fails a set number of times before succeeding."""

    __name__ = "flaky"

    def __init__(self, failures: int, error: Exception = ConnectionError("refused")):
        self.failures = failures
        self.error = error
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error
        return "connected"


class TestRetryWithFixedDelay:
    """Tests for retry_with_fixed_delay."""

    def test_success_without_retry(self):
        """Test a first-time success returns immediately."""
        func = Flaky(failures=0)

        with patch("ftp_user_svc.core.retry.time.sleep") as sleep:
            result = retry_with_fixed_delay(max_attempts=10, delay=5.0)(func)()

        assert result == "connected"
        assert func.calls == 1
        sleep.assert_not_called()

    def test_success_after_failures(self):
        """
        Test the delay is the same between every attempt.

        Arrange: Function failing three times
        Act: Call through the decorator
        Assert: Four calls, three sleeps of exactly 5 seconds
        """
        # Arrange
        func = Flaky(failures=3)

        # Act
        with patch("ftp_user_svc.core.retry.time.sleep") as sleep:
            result = retry_with_fixed_delay(max_attempts=10, delay=5.0)(func)()

        # Assert
        assert result == "connected"
        assert func.calls == 4
        assert [c.args[0] for c in sleep.call_args_list] == [5.0, 5.0, 5.0]

    def test_gives_up_without_trailing_sleep(self):
        """
        Test the last error is re-raised and no sleep follows the last attempt.
        """
        # Arrange
        func = Flaky(failures=100)

        # Act
        with patch("ftp_user_svc.core.retry.time.sleep") as sleep:
            with pytest.raises(ConnectionError):
                retry_with_fixed_delay(max_attempts=10, delay=5.0)(func)()

        # Assert
        assert func.calls == 10
        assert sleep.call_count == 9

    def test_unlisted_exception_propagates(self):
        """Test exceptions outside the retry list are not retried."""
        func = Flaky(failures=5, error=KeyError("boom"))

        with patch("ftp_user_svc.core.retry.time.sleep") as sleep:
            with pytest.raises(KeyError):
                retry_with_fixed_delay(
                    max_attempts=10, delay=5.0, exceptions=(ConnectionError,)
                )(func)()

        assert func.calls == 1
        sleep.assert_not_called()

    def test_failures_are_logged(self, caplog):
        func = Flaky(failures=1)

        with patch("ftp_user_svc.core.retry.time.sleep"):
            with caplog.at_level("WARNING", logger="ftp_user_svc.core.retry"):
                retry_with_fixed_delay(max_attempts=3, delay=5.0)(func)()

        assert "flaky attempt 1/3 failed" in caplog.text

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            retry_with_fixed_delay(max_attempts=0, delay=1.0)
