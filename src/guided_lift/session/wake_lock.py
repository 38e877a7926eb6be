"""Keeps the screen awake while a guided session is running."""

import asyncio
import logging
import shutil
import sys
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class WakeLockSentinel(Protocol):
    """Handle to an acquired wake lock."""

    @property
    def released(self) -> bool:
        ...

    async def release(self) -> None:
        ...

    def add_release_listener(self, callback: Callable[[], None]) -> None:
        ...


class WakeLockProvider(Protocol):
    """Platform facility that hands out wake locks."""

    @property
    def is_supported(self) -> bool:
        ...

    async def request(self) -> WakeLockSentinel:
        ...


class UnsupportedWakeLockProvider:
    """Provider for platforms with no wake lock facility."""

    is_supported = False

    async def request(self) -> WakeLockSentinel:
        raise RuntimeError("Wake lock not supported on this platform")


class InhibitorProcessLock:
    """A wake lock held for as long as an inhibitor process runs.

    The process exiting on its own (killed, session logout, ...) counts
    as the lock being released by the system.
    """

    def __init__(self, process: asyncio.subprocess.Process):
        self._process = process
        self._listeners: list[Callable[[], None]] = []
        self._released = False
        self._watcher = asyncio.get_running_loop().create_task(self._watch())

    @property
    def released(self) -> bool:
        return self._released

    def add_release_listener(self, callback: Callable[[], None]) -> None:
        self._listeners.append(callback)

    async def release(self) -> None:
        if self._released:
            return
        self._released = True
        self._watcher.cancel()
        if self._process.returncode is None:
            self._process.terminate()
            await self._process.wait()

    async def _watch(self) -> None:
        await self._process.wait()
        if self._released:
            return
        self._released = True
        logger.info("Wake lock inhibitor exited (code %s)", self._process.returncode)
        for callback in self._listeners:
            callback()


class InhibitorWakeLockProvider:
    """Acquires wake locks through an idle-inhibitor command.

    Uses ``caffeinate`` on macOS and ``systemd-inhibit`` elsewhere.
    """

    def __init__(self, command: list[str] | None = None):
        if command is None:
            command = self._detect_command()
        self.command = command

    @staticmethod
    def _detect_command() -> list[str] | None:
        if sys.platform == "darwin" and shutil.which("caffeinate"):
            return ["caffeinate", "-d", "-i"]
        if shutil.which("systemd-inhibit"):
            return [
                "systemd-inhibit",
                "--what=idle:sleep",
                "--who=guided-lift",
                "--why=Guided workout in progress",
                "sleep",
                "infinity",
            ]
        return None

    @property
    def is_supported(self) -> bool:
        return self.command is not None

    async def request(self) -> WakeLockSentinel:
        if self.command is None:
            raise RuntimeError("Wake lock not supported on this platform")
        process = await asyncio.create_subprocess_exec(
            *self.command,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.DEVNULL,
        )
        return InhibitorProcessLock(process)


class ScreenWakeLock:
    """Owns at most one wake lock and re-acquires it when it is lost.

    Use it as an async context manager (or call ``close()``) so the lock
    is released however the owner exits.
    """

    def __init__(self, provider: WakeLockProvider | None = None):
        self._provider = provider or UnsupportedWakeLockProvider()
        self._sentinel: WakeLockSentinel | None = None
        self._wanted = False
        self._request_lock = asyncio.Lock()
        self.is_active = False

    @property
    def is_supported(self) -> bool:
        return bool(self._provider.is_supported)

    async def request(self) -> None:
        """Acquire a wake lock if supported and not already held."""
        self._wanted = True
        if not self.is_supported:
            return

        async with self._request_lock:
            if self._sentinel is not None:
                return
            try:
                sentinel = await self._provider.request()
            except Exception as e:
                logger.warning("Could not acquire wake lock: %s", e)
                return

            if not self._wanted:
                # Released while the request was in flight
                await sentinel.release()
                return

            self._sentinel = sentinel
            self.is_active = True
            sentinel.add_release_listener(lambda: self._on_released(sentinel))
            logger.debug("Wake lock acquired")

    async def release(self) -> None:
        """Release the held lock, if any."""
        self._wanted = False
        sentinel, self._sentinel = self._sentinel, None
        self.is_active = False
        if sentinel is None:
            return
        try:
            await sentinel.release()
        except Exception as e:
            logger.warning("Could not release wake lock: %s", e)
        logger.debug("Wake lock released")

    async def handle_visibility_change(self, visible: bool) -> None:
        """Re-acquire a lost lock when the app comes back to the foreground."""
        if visible and self._wanted and self._sentinel is None:
            await self.request()

    async def close(self) -> None:
        await self.release()

    async def __aenter__(self) -> "ScreenWakeLock":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _on_released(self, sentinel: WakeLockSentinel) -> None:
        if self._sentinel is not sentinel:
            return
        self._sentinel = None
        self.is_active = False
        logger.info("Wake lock released by the system")
