"""
Tests for fixed-interval polling.

Tests cover:
- PollConfig defaults
- Pending attempts retried until a result
- Exhaustion after max attempts
- Non-pending errors end polling immediately
- Fixed delay between attempts, none after the last
"""

from unittest.mock import AsyncMock

import pytest

from chainmethod.utils.polling import PollConfig, PollExhaustedError, ResultPending, poll_async


class TestPollConfig:
    """Tests for PollConfig dataclass."""

    def test_default_values(self) -> None:
        config = PollConfig()

        assert config.max_attempts == 20
        assert config.interval_seconds == 3.0

    def test_custom_values(self) -> None:
        config = PollConfig(max_attempts=5, interval_seconds=0.5)

        assert config.max_attempts == 5
        assert config.interval_seconds == 0.5


class TestPollAsync:
    """Tests for poll_async function."""

    @pytest.mark.asyncio
    async def test_success_on_first_attempt(self) -> None:
        call_count = 0

        async def ready():
            nonlocal call_count
            call_count += 1
            return "receipt"

        assert await poll_async(ready, PollConfig(interval_seconds=0)) == "receipt"
        assert call_count == 1

    @pytest.mark.asyncio
    async def test_pending_then_ready(self) -> None:
        call_count = 0

        async def pending_twice():
            nonlocal call_count
            call_count += 1
            if call_count < 3:
                raise ResultPending()
            return "receipt"

        assert await poll_async(pending_twice, PollConfig(interval_seconds=0)) == "receipt"
        assert call_count == 3

    @pytest.mark.asyncio
    async def test_exhausted(self) -> None:
        call_count = 0

        async def never_ready():
            nonlocal call_count
            call_count += 1
            raise ResultPending()

        with pytest.raises(PollExhaustedError) as exc_info:
            await poll_async(never_ready, PollConfig(max_attempts=4, interval_seconds=0))

        assert exc_info.value.attempts == 4
        assert call_count == 4

    @pytest.mark.asyncio
    async def test_other_errors_not_retried(self) -> None:
        call_count = 0

        async def broken():
            nonlocal call_count
            call_count += 1
            raise ValueError("bad receipt")

        with pytest.raises(ValueError, match="bad receipt"):
            await poll_async(broken, PollConfig(interval_seconds=0))
        assert call_count == 1

    @pytest.mark.asyncio
    async def test_fixed_delay_between_attempts(self, monkeypatch) -> None:
        sleep = AsyncMock()
        monkeypatch.setattr("chainmethod.utils.polling.asyncio.sleep", sleep)

        async def never_ready():
            raise ResultPending()

        with pytest.raises(PollExhaustedError):
            await poll_async(never_ready, PollConfig(max_attempts=3, interval_seconds=3.0))

        # No delay after the last attempt
        assert [call.args for call in sleep.await_args_list] == [(3.0,), (3.0,)]
