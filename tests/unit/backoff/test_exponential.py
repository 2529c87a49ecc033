r"""Unit tests for JitteredExponentialBackoff strategy."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from pendingresult.backoff import BaseBackoffStrategy, JitteredExponentialBackoff


def test_jittered_exponential_backoff_calculate() -> None:
    backoff = JitteredExponentialBackoff()
    assert backoff.calculate(0) == 0.5  # 0.5 * 1.5^0
    assert backoff.calculate(1) == 0.75  # 0.5 * 1.5^1
    assert backoff.calculate(2) == 1.125  # 0.5 * 1.5^2
    assert backoff.calculate(3) == 1.6875  # 0.5 * 1.5^3


def test_jittered_exponential_backoff_default_values() -> None:
    backoff = JitteredExponentialBackoff()
    assert backoff.base_delay == 0.5
    assert backoff.multiplier == 1.5
    assert backoff.jitter


def test_jittered_exponential_backoff_is_strategy() -> None:
    assert isinstance(JitteredExponentialBackoff(), BaseBackoffStrategy)


def test_jittered_exponential_backoff_repr() -> None:
    assert repr(JitteredExponentialBackoff(jitter=False)) == (
        "JitteredExponentialBackoff(base_delay=0.5, multiplier=1.5, jitter=False)"
    )


def test_delay_for_retry_without_jitter() -> None:
    backoff = JitteredExponentialBackoff(jitter=False)
    assert backoff.delay_for_retry(1) == 0.5
    assert backoff.delay_for_retry(2) == 0.75
    assert backoff.delay_for_retry(3) == 1.125


@pytest.mark.parametrize(("random_value", "expected"), [(0.0, 0.25), (0.5, 0.5), (0.75, 0.625)])
def test_delay_for_retry_jitter_factor(random_value: float, expected: float) -> None:
    backoff = JitteredExponentialBackoff()
    with patch("pendingresult.backoff.exponential.random.random", return_value=random_value):
        assert backoff.delay_for_retry(1) == expected


def test_delay_for_retry_jitter_range() -> None:
    backoff = JitteredExponentialBackoff()
    for retry_number in range(1, 8):
        base = 0.5 * 1.5 ** (retry_number - 1)
        for _ in range(50):
            assert 0.5 * base <= backoff.delay_for_retry(retry_number) < 1.5 * base


def test_delay_for_retry_invalid_retry_number() -> None:
    with pytest.raises(ValueError, match=r"retry_number must be >= 1"):
        JitteredExponentialBackoff().delay_for_retry(0)


def test_jittered_exponential_backoff_invalid_base_delay() -> None:
    with pytest.raises(ValueError, match=r"base_delay must be non-negative"):
        JitteredExponentialBackoff(base_delay=-1.0)


def test_jittered_exponential_backoff_invalid_multiplier() -> None:
    with pytest.raises(ValueError, match=r"multiplier must be >= 1"):
        JitteredExponentialBackoff(multiplier=0.5)
