"""Tests for the outbound request rate limiter."""

import asyncio
import time

import pytest

from utils.rate_limiter import RateLimiter


class TestRateLimiter:
    @pytest.mark.asyncio
    async def test_first_call_is_immediate(self) -> None:
        limiter = RateLimiter(min_interval_seconds=1.0)

        start = time.monotonic()
        await limiter.wait_if_needed()
        elapsed = time.monotonic() - start

        assert elapsed < 0.05

    @pytest.mark.asyncio
    async def test_consecutive_calls_are_spaced_by_interval(self) -> None:
        delay = 0.2
        limiter = RateLimiter(min_interval_seconds=delay)

        start = time.monotonic()
        await limiter.wait_if_needed()
        await limiter.wait_if_needed()
        elapsed = time.monotonic() - start

        assert elapsed >= delay * 0.95

    @pytest.mark.asyncio
    async def test_call_after_interval_is_immediate(self) -> None:
        delay = 0.1
        limiter = RateLimiter(min_interval_seconds=delay)

        await limiter.wait_if_needed()
        await asyncio.sleep(delay * 1.5)

        start = time.monotonic()
        await limiter.wait_if_needed()
        elapsed = time.monotonic() - start

        assert elapsed < 0.05

    @pytest.mark.asyncio
    async def test_concurrent_callers_are_paced_one_after_another(self) -> None:
        delay = 0.1
        limiter = RateLimiter(min_interval_seconds=delay)
        finished = []

        async def call() -> None:
            await limiter.wait_if_needed()
            finished.append(time.monotonic())

        await asyncio.gather(call(), call(), call())

        finished.sort()
        gaps = [b - a for a, b in zip(finished, finished[1:])]
        assert all(gap >= delay * 0.9 for gap in gaps)

    @pytest.mark.asyncio
    async def test_zero_interval_never_waits(self) -> None:
        limiter = RateLimiter(min_interval_seconds=0)

        start = time.monotonic()
        for _ in range(5):
            await limiter.wait_if_needed()

        assert time.monotonic() - start < 0.05
