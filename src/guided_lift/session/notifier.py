"""Sound, vibration and voice cues for a guided session.

Every trigger is fire-and-forget: it does nothing when the matching
toggle is off or the platform cannot do it, and never raises.
"""

import logging
import random
import shutil
import subprocess
from typing import Protocol, runtime_checkable

import click

from ..models.session import SessionSettings

logger = logging.getLogger(__name__)


# (frequency Hz, duration seconds) sequences
BEEP = ((880, 0.15),)
SET_COMPLETE = ((660, 0.1), (880, 0.15))
EXERCISE_COMPLETE = ((660, 0.12), (880, 0.12), (1100, 0.2))
WORKOUT_COMPLETE = ((523, 0.15), (659, 0.15), (784, 0.15), (1047, 0.4))
PR_FANFARE = ((784, 0.12), (1047, 0.12), (784, 0.12), (1319, 0.4))
COUNTDOWN = ((1000, 0.08),)

# Vibration patterns in milliseconds (on, off, on, ...)
VIBRATE_SHORT = (50,)
VIBRATE_DOUBLE = (100, 50, 100)
VIBRATE_CELEBRATION = (100, 50, 100, 50, 200)
VIBRATE_TIMER_COMPLETE = (200, 100, 200)

MOTIVATION_PHRASES = (
    "Great set, keep it up!",
    "Strong work!",
    "One rep at a time.",
    "You're getting stronger.",
    "Focus and breathe.",
    "Almost there, stay with it!",
)


@runtime_checkable
class SoundBackend(Protocol):
    """Plays tone sequences."""

    @property
    def is_supported(self) -> bool:
        ...

    def play(self, tones: tuple[tuple[int, float], ...], volume: float) -> None:
        ...


@runtime_checkable
class VibrationBackend(Protocol):
    """Runs vibration patterns."""

    @property
    def is_supported(self) -> bool:
        ...

    def vibrate(self, pattern: tuple[int, ...]) -> None:
        ...


@runtime_checkable
class SpeechBackend(Protocol):
    """Speaks text aloud."""

    @property
    def is_supported(self) -> bool:
        ...

    def speak(self, text: str) -> None:
        ...


class NullSound:
    """Sound backend for platforms without audio."""

    is_supported = False

    def play(self, tones: tuple[tuple[int, float], ...], volume: float) -> None:
        pass


class NullVibration:
    """Vibration backend for platforms without haptics."""

    is_supported = False

    def vibrate(self, pattern: tuple[int, ...]) -> None:
        pass


class NullSpeech:
    """Speech backend for platforms without speech synthesis."""

    is_supported = False

    def speak(self, text: str) -> None:
        pass


class TerminalBellSound:
    """Rings the terminal bell once per tone.

    The bell has no pitch or level, so frequencies are ignored and any
    non-zero volume rings it.
    """

    is_supported = True

    def play(self, tones: tuple[tuple[int, float], ...], volume: float) -> None:
        click.echo("\a" * len(tones), nl=False, err=True)


class CommandSpeech:
    """Speaks through a system text-to-speech command (say, espeak)."""

    CANDIDATES = ("say", "espeak-ng", "espeak")

    def __init__(self, command: str | None = None):
        if command is None:
            command = next(
                (found for name in self.CANDIDATES if (found := shutil.which(name))),
                None,
            )
        self.command = command

    @property
    def is_supported(self) -> bool:
        return self.command is not None

    def speak(self, text: str) -> None:
        if self.command is None:
            return
        # Not waited on; speech overlaps with whatever comes next
        subprocess.Popen(
            [self.command, text],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )


class Notifier:
    """Dispatches session cues, gated by the live session settings.

    Support for each capability is probed once, at construction.
    """

    def __init__(
        self,
        settings: SessionSettings | None = None,
        sound: SoundBackend | None = None,
        vibration: VibrationBackend | None = None,
        speech: SpeechBackend | None = None,
    ):
        self.settings = settings or SessionSettings()
        self._sound = sound or NullSound()
        self._vibration = vibration or NullVibration()
        self._speech = speech or NullSpeech()
        self.is_sound_supported = bool(self._sound.is_supported)
        self.is_vibration_supported = bool(self._vibration.is_supported)
        self.is_speech_supported = bool(self._speech.is_supported)

    @classmethod
    def for_terminal(cls, settings: SessionSettings | None = None) -> "Notifier":
        """Notifier wired to what a terminal session can do."""
        return cls(settings, sound=TerminalBellSound(), speech=CommandSpeech())

    # Sound

    def play_beep(self) -> None:
        self._play(BEEP)

    def play_set_complete(self) -> None:
        self._play(SET_COMPLETE)

    def play_exercise_complete(self) -> None:
        self._play(EXERCISE_COMPLETE)

    def play_workout_complete(self) -> None:
        self._play(WORKOUT_COMPLETE)

    def play_pr(self) -> None:
        self._play(PR_FANFARE)

    def play_countdown(self) -> None:
        self._play(COUNTDOWN)

    # Haptics

    def vibrate_short(self) -> None:
        self._vibrate(VIBRATE_SHORT)

    def vibrate_double(self) -> None:
        self._vibrate(VIBRATE_DOUBLE)

    def vibrate_celebration(self) -> None:
        self._vibrate(VIBRATE_CELEBRATION)

    def vibrate_timer_complete(self) -> None:
        self._vibrate(VIBRATE_TIMER_COMPLETE)

    # Voice

    def speak_text(self, text: str) -> None:
        if not (self.settings.voice_enabled and self.is_speech_supported):
            return
        try:
            self._speech.speak(text)
        except Exception as e:
            logger.debug("Speech failed: %s", e)

    def speak_motivation(self) -> None:
        self.speak_text(random.choice(MOTIVATION_PHRASES))

    def _play(self, tones: tuple[tuple[int, float], ...]) -> None:
        if not (self.settings.sound_enabled and self.is_sound_supported):
            return
        if self.settings.volume <= 0:
            return
        try:
            self._sound.play(tones, self.settings.volume)
        except Exception as e:
            logger.debug("Sound playback failed: %s", e)

    def _vibrate(self, pattern: tuple[int, ...]) -> None:
        if not (self.settings.vibration_enabled and self.is_vibration_supported):
            return
        try:
            self._vibration.vibrate(pattern)
        except Exception as e:
            logger.debug("Vibration failed: %s", e)
