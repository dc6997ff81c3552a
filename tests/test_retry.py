"""
Tests du retry avec backoff exponentiel
"""

import pytest

from app.services.retry import retry_operation


class FlakyOperation:
    """Échoue `failures` fois puis retourne `result`"""

    def __init__(self, failures, result="ok", error=ConnectionError):
        self.failures = failures
        self.result = result
        self.error = error
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error(f"échec {self.calls}")
        return self.result


class TestRetryOperation:
    def test_success_first_try(self):
        sleeps = []
        operation = FlakyOperation(0)
        assert retry_operation(operation, sleep=sleeps.append) == "ok"
        assert operation.calls == 1
        assert sleeps == []

    def test_fail_then_succeed(self):
        sleeps = []
        operation = FlakyOperation(2)
        assert retry_operation(operation, attempts=3, base_delay=1.0, sleep=sleeps.append) == "ok"
        assert operation.calls == 3
        assert sleeps == [1.0, 2.0]

    def test_exhausted_reraises_last_error(self):
        operation = FlakyOperation(10)
        with pytest.raises(ConnectionError, match="échec 3"):
            retry_operation(operation, attempts=3, base_delay=0.5, sleep=lambda _: None)
        assert operation.calls == 3

    def test_no_retry_on_listed_errors(self):
        operation = FlakyOperation(10, error=PermissionError)
        with pytest.raises(PermissionError):
            retry_operation(
                operation,
                attempts=3,
                no_retry_on=(PermissionError,),
                sleep=lambda _: None,
            )
        assert operation.calls == 1

    def test_single_attempt(self):
        operation = FlakyOperation(1)
        with pytest.raises(ConnectionError):
            retry_operation(operation, attempts=1, sleep=lambda _: None)
        assert operation.calls == 1
