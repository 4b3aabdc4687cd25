"""Tests for flowcheck/utils/polling.py."""

import pytest

from flowcheck.exceptions import ExternalToolError, PollTimeoutError
from flowcheck.utils.polling import poll_until


def scripted(*states):
    """Fetch function returning ``states`` in order, counting calls."""
    remaining = list(states)

    def fetch():
        fetch.calls += 1
        return remaining.pop(0)

    fetch.calls = 0
    return fetch


class TestPollUntil:
    """Tests for poll_until."""

    @pytest.mark.asyncio
    async def test_returns_first_satisfying_state(self, fake_clock):
        """The first state passing the predicate is returned, after one sleep."""
        fetch = scripted("completed")

        result = await poll_until(
            fetch,
            lambda state: state == "completed",
            timeout=60,
            interval=5,
            operation="run",
            sleep=fake_clock.sleep,
            clock=fake_clock,
        )

        assert result == "completed"
        assert fetch.calls == 1
        assert fake_clock.sleeps == [5]

    @pytest.mark.asyncio
    async def test_keeps_polling_until_satisfied(self, fake_clock):
        fetch = scripted("pending", "pending", "completed")

        result = await poll_until(
            fetch,
            lambda state: state == "completed",
            timeout=300,
            interval=10,
            operation="run",
            sleep=fake_clock.sleep,
            clock=fake_clock,
        )

        assert result == "completed"
        assert fetch.calls == 3
        assert fake_clock.now == 30

    @pytest.mark.asyncio
    async def test_timeout(self, fake_clock):
        """A predicate that never holds ends in PollTimeoutError at the deadline."""
        fetch = scripted(*["pending"] * 20)

        with pytest.raises(PollTimeoutError) as exc_info:
            await poll_until(
                fetch,
                lambda state: state == "completed",
                timeout=60,
                interval=5,
                operation="run 7 to complete",
                sleep=fake_clock.sleep,
                clock=fake_clock,
            )

        assert exc_info.value.operation == "run 7 to complete"
        assert exc_info.value.timeout_seconds == 60
        assert "run 7 to complete" in str(exc_info.value)
        assert fetch.calls == 12
        assert fake_clock.now == 60

    @pytest.mark.asyncio
    async def test_never_returns_unsatisfying_state(self, fake_clock):
        fetch = scripted(None, None, None)

        with pytest.raises(PollTimeoutError):
            await poll_until(
                fetch,
                lambda state: state is not None,
                timeout=15,
                interval=5,
                operation="run",
                sleep=fake_clock.sleep,
                clock=fake_clock,
            )

    @pytest.mark.asyncio
    async def test_fetch_error_propagates(self, fake_clock):
        """Errors from fetch are not retried or wrapped."""
        error = ExternalToolError("gh command failed", returncode=1)

        def fetch():
            raise error

        with pytest.raises(ExternalToolError) as exc_info:
            await poll_until(
                fetch,
                lambda state: True,
                timeout=60,
                interval=5,
                operation="run",
                sleep=fake_clock.sleep,
                clock=fake_clock,
            )

        assert exc_info.value is error
        assert len(fake_clock.sleeps) == 1

    @pytest.mark.asyncio
    async def test_awaitable_fetch(self, fake_clock):
        async def fetch():
            return 42

        result = await poll_until(
            fetch,
            lambda state: state == 42,
            timeout=10,
            interval=1,
            operation="value",
            sleep=fake_clock.sleep,
            clock=fake_clock,
        )

        assert result == 42

    @pytest.mark.asyncio
    async def test_real_sleep_with_small_interval(self):
        """Defaults use asyncio.sleep and the monotonic clock."""
        fetch = scripted(False, True)

        result = await poll_until(fetch, bool, timeout=5, interval=0.01, operation="flag")

        assert result is True
        assert fetch.calls == 2
