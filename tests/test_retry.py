import pytest

from jobtracker.errors import ProviderError, is_permanent, is_rate_limited
from jobtracker.retry import retry_with_backoff


class Flaky:
    def __init__(self, failures: list[Exception], result: str = "ok") -> None:
        self.failures = list(failures)
        self.result = result
        self.calls = 0

    def __call__(self) -> str:
        self.calls += 1
        if self.failures:
            raise self.failures.pop(0)
        return self.result


def test_succeeds_after_rate_limit():
    sleeps: list[float] = []
    fn = Flaky([ProviderError("p", "slow down", status=429)])
    assert retry_with_backoff(fn, retries=1, base_delay=0.5, should_retry=is_rate_limited, sleep=sleeps.append) == "ok"
    assert fn.calls == 2
    assert sleeps == [0.5]


def test_exhausts_retries_with_doubling_delay():
    sleeps: list[float] = []
    fn = Flaky([ProviderError("p", "quota exceeded")] * 5)
    with pytest.raises(ProviderError):
        retry_with_backoff(fn, retries=3, base_delay=0.5, should_retry=is_rate_limited, sleep=sleeps.append)
    assert fn.calls == 4
    assert sleeps == [0.5, 1.0, 2.0]
    assert sleeps == sorted(sleeps)


def test_non_retryable_propagates_immediately():
    sleeps: list[float] = []
    fn = Flaky([ProviderError("p", "bad request", status=400)])
    with pytest.raises(ProviderError):
        retry_with_backoff(fn, retries=3, should_retry=is_rate_limited, sleep=sleeps.append)
    assert fn.calls == 1
    assert sleeps == []


def test_zero_retries():
    fn = Flaky([ProviderError("p", "x", status=429)])
    with pytest.raises(ProviderError):
        retry_with_backoff(fn, retries=0, should_retry=is_rate_limited, sleep=lambda s: None)
    assert fn.calls == 1


def test_delay_capped():
    sleeps: list[float] = []
    fn = Flaky([ProviderError("p", "x", status=429)] * 3)
    retry_with_backoff(fn, retries=3, base_delay=20, max_delay=30, should_retry=is_rate_limited, sleep=sleeps.append)
    assert sleeps == [20, 30, 30]


class StatusCodeError(Exception):
    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


@pytest.mark.parametrize(
    "exc, rate, permanent",
    [
        (ProviderError("p", "Too many requests", status=429), True, False),
        (ProviderError("p", "You exceeded your current QUOTA"), True, False),
        (ProviderError("p", "Rate limit reached"), True, False),
        (ProviderError("p", "Forbidden", status=403), False, True),
        (ProviderError("p", "No Credits remaining"), False, True),
        (StatusCodeError("denied", 403), False, True),
        (StatusCodeError("busy", 429), True, False),
        (ProviderError("p", "Internal server error", status=500), False, False),
        (ValueError("boom"), False, False),
    ],
)
def test_failure_classification(exc, rate, permanent):
    assert is_rate_limited(exc) is rate
    assert is_permanent(exc) is permanent


def test_negative_retries_still_calls_once():
    fn = Flaky([])
    assert retry_with_backoff(fn, retries=-1, sleep=lambda s: None) == "ok"
    assert fn.calls == 1
