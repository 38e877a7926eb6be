"""Tests for the screen wake lock."""

import asyncio

import pytest

from guided_lift.session.wake_lock import ScreenWakeLock, UnsupportedWakeLockProvider


class FakeSentinel:
    def __init__(self):
        self.released = False
        self._listeners = []

    def add_release_listener(self, callback):
        self._listeners.append(callback)

    async def release(self):
        self.released = True

    def lose(self):
        """Simulate the system dropping the lock."""
        self.released = True
        for callback in self._listeners:
            callback()


class FakeProvider:
    is_supported = True

    def __init__(self, fail=False, delay=0.0):
        self.fail = fail
        self.delay = delay
        self.sentinels = []

    async def request(self):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.fail:
            raise PermissionError("denied")
        sentinel = FakeSentinel()
        self.sentinels.append(sentinel)
        return sentinel


class TestScreenWakeLock:
    """Tests for ScreenWakeLock."""

    @pytest.mark.asyncio
    async def test_request_and_release(self):
        """Test acquiring then releasing a lock."""
        provider = FakeProvider()
        lock = ScreenWakeLock(provider)

        await lock.request()
        assert lock.is_active
        assert lock.is_supported

        await lock.release()
        assert not lock.is_active
        assert provider.sentinels[0].released

    @pytest.mark.asyncio
    async def test_request_is_idempotent(self):
        """Test a second request keeps the held lock."""
        provider = FakeProvider()
        lock = ScreenWakeLock(provider)

        await lock.request()
        await lock.request()

        assert len(provider.sentinels) == 1

    @pytest.mark.asyncio
    async def test_release_without_lock(self):
        """Test releasing when nothing is held is a no-op."""
        lock = ScreenWakeLock(FakeProvider())
        await lock.release()

        assert not lock.is_active

    @pytest.mark.asyncio
    async def test_unsupported_provider(self):
        """Test unsupported platforms stay inactive without raising."""
        lock = ScreenWakeLock(UnsupportedWakeLockProvider())
        await lock.request()

        assert not lock.is_supported
        assert not lock.is_active

    @pytest.mark.asyncio
    async def test_request_failure_is_swallowed(self, caplog):
        """Test a refused request leaves the lock inactive and is logged."""
        lock = ScreenWakeLock(FakeProvider(fail=True))
        await lock.request()

        assert not lock.is_active
        assert "Could not acquire wake lock" in caplog.text

    @pytest.mark.asyncio
    async def test_system_release_then_reacquire_on_visible(self):
        """Test a lock lost in the background comes back when visible."""
        provider = FakeProvider()
        lock = ScreenWakeLock(provider)
        await lock.request()

        provider.sentinels[0].lose()
        assert not lock.is_active

        await lock.handle_visibility_change(True)
        assert lock.is_active
        assert len(provider.sentinels) == 2

    @pytest.mark.asyncio
    async def test_no_reacquire_after_release(self):
        """Test visibility does not reacquire a deliberately released lock."""
        provider = FakeProvider()
        lock = ScreenWakeLock(provider)
        await lock.request()
        await lock.release()

        await lock.handle_visibility_change(True)
        assert not lock.is_active
        assert len(provider.sentinels) == 1

    @pytest.mark.asyncio
    async def test_release_during_request(self):
        """Test a lock granted after release is handed straight back."""
        provider = FakeProvider(delay=0.01)
        lock = ScreenWakeLock(provider)

        request = asyncio.create_task(lock.request())
        await asyncio.sleep(0)
        await lock.release()
        await request

        assert not lock.is_active
        assert provider.sentinels[0].released

    @pytest.mark.asyncio
    async def test_context_manager_releases(self):
        """Test leaving the context releases the lock."""
        provider = FakeProvider()
        async with ScreenWakeLock(provider) as lock:
            await lock.request()
            assert lock.is_active

        assert provider.sentinels[0].released
