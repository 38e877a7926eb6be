"""Tests for session cues."""

import pytest

from guided_lift.models.session import SessionSettings
from guided_lift.session.notifier import (
    BEEP,
    MOTIVATION_PHRASES,
    PR_FANFARE,
    VIBRATE_CELEBRATION,
    VIBRATE_TIMER_COMPLETE,
    CommandSpeech,
    Notifier,
)


class BrokenSound:
    is_supported = True

    def play(self, tones, volume):
        raise OSError("no audio device")


class TestNotifier:
    """Tests for Notifier gating and dispatch."""

    def test_plays_with_volume(self, sound):
        """Test tones reach the backend with the configured volume."""
        notifier = Notifier(SessionSettings(volume=0.4), sound=sound)
        notifier.play_beep()
        notifier.play_pr()

        assert sound.played == [(BEEP, 0.4), (PR_FANFARE, 0.4)]

    def test_sound_disabled(self, sound):
        """Test no tones play with sound off."""
        notifier = Notifier(SessionSettings(sound_enabled=False), sound=sound)
        notifier.play_set_complete()

        assert sound.played == []

    def test_zero_volume_is_silent(self, sound):
        """Test volume 0 mutes sound."""
        notifier = Notifier(SessionSettings(volume=0.0), sound=sound)
        notifier.play_workout_complete()

        assert sound.played == []

    def test_vibration_patterns(self, vibration):
        """Test vibration triggers send their patterns."""
        notifier = Notifier(vibration=vibration)
        notifier.vibrate_celebration()
        notifier.vibrate_timer_complete()

        assert vibration.patterns == [VIBRATE_CELEBRATION, VIBRATE_TIMER_COMPLETE]

    def test_vibration_disabled(self, vibration):
        """Test vibration respects its toggle."""
        notifier = Notifier(SessionSettings(vibration_enabled=False), vibration=vibration)
        notifier.vibrate_short()

        assert vibration.patterns == []

    def test_voice_off_by_default(self, speech):
        """Test speech needs voice enabled."""
        notifier = Notifier(speech=speech)
        notifier.speak_text("Squat")

        assert speech.spoken == []

    def test_speak_and_motivation(self, speech):
        """Test speech and motivational phrases with voice on."""
        notifier = Notifier(SessionSettings(voice_enabled=True), speech=speech)
        notifier.speak_text("Squat")
        notifier.speak_motivation()

        assert speech.spoken[0] == "Squat"
        assert speech.spoken[1] in MOTIVATION_PHRASES

    def test_live_settings_change(self, sound):
        """Test replacing settings takes effect on the next cue."""
        notifier = Notifier(sound=sound)
        notifier.settings = notifier.settings.merged(sound_enabled=False)
        notifier.play_beep()

        assert sound.played == []

    def test_unsupported_platform_is_silent(self):
        """Test the default backends do nothing and report unsupported."""
        notifier = Notifier(SessionSettings(voice_enabled=True))
        notifier.play_beep()
        notifier.vibrate_double()
        notifier.speak_text("hello")

        assert not notifier.is_sound_supported
        assert not notifier.is_vibration_supported
        assert not notifier.is_speech_supported

    def test_backend_failure_never_raises(self):
        """Test a failing backend is swallowed."""
        notifier = Notifier(sound=BrokenSound())
        notifier.play_beep()

        assert notifier.is_sound_supported


class TestCommandSpeech:
    """Tests for CommandSpeech detection."""

    def test_no_command_found(self, monkeypatch):
        """Test speech is unsupported when no TTS command exists."""
        monkeypatch.setattr("guided_lift.session.notifier.shutil.which", lambda name: None)

        assert not CommandSpeech().is_supported

    def test_explicit_command(self):
        """Test an explicit command is used as-is."""
        speech = CommandSpeech("espeak")

        assert speech.is_supported
        assert speech.command == "espeak"

    @pytest.mark.parametrize("found", ["say", "espeak-ng"])
    def test_first_available_command(self, monkeypatch, found):
        """Test the first installed candidate wins."""
        monkeypatch.setattr(
            "guided_lift.session.notifier.shutil.which",
            lambda name: f"/usr/bin/{name}" if name == found else None,
        )

        assert CommandSpeech().command == f"/usr/bin/{found}"
