"""
Tests for core/tone_generator.py - voices, envelope and auto-release.
"""
import numpy as np
import pytest

from core.tone_generator import ToneGenerator


class TestLifecycle:
    def test_stream_opens_on_first_start(self, tone_generator):
        assert not tone_generator.available
        tone_generator.start(69)
        assert tone_generator.available
        assert tone_generator.stream.started

    def test_close_releases_everything(self, tone_generator, manual_timers):
        tone_generator.start(60)
        tone_generator.start(64)
        stream = tone_generator.stream
        tone_generator.close()
        assert tone_generator.sounding_notes == []
        assert stream.closed
        assert all(timer.cancelled for timer in manual_timers)

    def test_disabled_generator_stays_silent(self):
        generator = ToneGenerator(enabled=False)
        generator.start(60)
        assert generator.sounding_notes == []
        assert not generator.available

    def test_audio_failure_is_not_fatal(self):
        calls = []

        def failing_stream(sample_rate, callback):
            calls.append(sample_rate)
            raise OSError("PortAudio library not found")

        generator = ToneGenerator(stream_factory=failing_stream)
        generator.start(60)
        generator.start(62)
        generator.stop(60)
        assert generator.sounding_notes == []
        # Only the first attempt touches the audio backend.
        assert calls == [generator.sample_rate]


class TestVoices:
    def test_start_and_stop(self, tone_generator, manual_timers):
        tone_generator.start(60)
        assert tone_generator.sounding_notes == [60]
        tone_generator.stop(60)
        assert tone_generator.sounding_notes == []
        assert manual_timers[0].cancelled

    def test_frequency_follows_equal_temperament(self, tone_generator):
        tone_generator.start(69)
        tone_generator.start(81)
        assert tone_generator.voices[69].frequency == pytest.approx(440.0)
        assert tone_generator.voices[81].frequency == pytest.approx(880.0)

    def test_stop_unknown_note_is_a_noop(self, tone_generator):
        tone_generator.stop(42)
        assert tone_generator.sounding_notes == []

    def test_auto_release_after_duration(self, tone_generator, manual_timers):
        tone_generator.start(60)
        timer = manual_timers[0]
        assert timer.interval == pytest.approx(0.5)
        assert timer.daemon
        timer.fire()
        assert tone_generator.sounding_notes == []

    def test_stop_cancels_pending_auto_release(self, tone_generator, manual_timers):
        tone_generator.start(60)
        tone_generator.stop(60)
        manual_timers[0].fire()
        assert tone_generator.sounding_notes == []
        assert manual_timers[0].cancelled

    def test_restart_overwrites_and_old_timer_cannot_release_new_voice(self, tone_generator, manual_timers):
        tone_generator.start(60)
        first_voice = tone_generator.voices[60]
        tone_generator.start(60)
        assert tone_generator.voices[60] is not first_voice
        assert manual_timers[0].cancelled
        # A late callback from the first timer leaves the new voice alone.
        tone_generator._auto_release(60, first_voice)
        assert tone_generator.sounding_notes == [60]


class TestRender:
    def test_silence_without_voices(self, tone_generator):
        out = tone_generator.render(128)
        assert out.dtype == np.float32
        assert np.all(out == 0)

    def test_voice_is_audible_and_bounded(self, tone_generator):
        tone_generator.start(69)
        out = tone_generator.render(400)
        assert np.max(np.abs(out)) > 0.1
        assert np.max(np.abs(out)) <= tone_generator.initial_gain

    def test_mix_is_clipped(self, tone_generator):
        for note in range(60, 72):
            tone_generator.start(note)
        out = tone_generator.render(800)
        assert np.all(out <= 1.0)
        assert np.all(out >= -1.0)

    def test_envelope_decays_to_final_gain(self, tone_generator):
        env = tone_generator.envelope(np.array([0.0, 0.25, 0.5]))
        assert env[0] == pytest.approx(0.5)
        assert env[1] == pytest.approx(np.sqrt(0.5 * 0.01))
        assert env[2] == pytest.approx(0.01)

    def test_voice_goes_quiet_after_its_duration(self, tone_generator):
        tone_generator.start(69)
        total = tone_generator.voices[69].total_frames
        tone_generator.render(total)
        assert tone_generator.voices[69].finished
        assert np.all(tone_generator.render(64) == 0)

    def test_stream_callback_fills_first_channel(self, tone_generator):
        tone_generator.start(69)
        outdata = np.zeros((32, 1), dtype=np.float32)
        tone_generator._stream_callback(outdata, 32, None, None)
        assert np.any(outdata[:, 0] != 0)
