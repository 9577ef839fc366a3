"""Tests for sound synthesis and the SoundManager playback API."""

from __future__ import annotations

import io
import wave

import pytest

from pomodoro.audio.sounds import (
    LOOP_SOUNDS,
    ONE_SHOT_SOUNDS,
    SOUND_NAMES,
    SoundManager,
    _generate_bell,
    _generate_birds,
    _generate_clock,
    _generate_loud_bell,
    _generate_timer,
)
from pomodoro.settings import TICKING_SOUNDS
from pomodoro.timer.effects import BELL, BIRDS, LOUD_BELL


GENERATORS = [
    _generate_bell,
    _generate_loud_bell,
    _generate_clock,
    _generate_timer,
    _generate_birds,
]


# ═══════════════════════════════════════════════════════════════════════
#  SOUND SYNTHESIS
# ═══════════════════════════════════════════════════════════════════════


class TestSoundGeneration:

    @pytest.mark.parametrize("gen_fn", GENERATORS)
    def test_generator_produces_wav(self, gen_fn):
        data = gen_fn()
        assert isinstance(data, bytes)
        assert data[:4] == b"RIFF"
        assert len(data) > 100

    @pytest.mark.parametrize("gen_fn", GENERATORS)
    def test_wav_is_parseable(self, gen_fn):
        with wave.open(io.BytesIO(gen_fn()), "rb") as wf:
            assert wf.getnchannels() == 1
            assert wf.getsampwidth() == 2
            assert wf.getframerate() == 44100
            assert wf.getnframes() > 0

    @pytest.mark.parametrize("gen_fn", [_generate_clock, _generate_timer])
    def test_ticking_loops_are_one_second(self, gen_fn):
        with wave.open(io.BytesIO(gen_fn()), "rb") as wf:
            assert wf.getnframes() == 44100

    def test_birds_deterministic(self):
        assert _generate_birds() == _generate_birds()


class TestCatalogue:

    def test_effect_names_are_known(self):
        assert {BELL, LOUD_BELL} <= set(ONE_SHOT_SOUNDS)
        assert BIRDS in LOOP_SOUNDS

    def test_ticking_choices_are_loops(self):
        assert set(TICKING_SOUNDS) - {"none"} <= set(LOOP_SOUNDS)

    def test_names_disjoint(self):
        assert not set(ONE_SHOT_SOUNDS) & set(LOOP_SOUNDS)
        assert len(SOUND_NAMES) == 5


# ═══════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════


@pytest.mark.usefixtures("qapp")
class TestSoundManager:

    def test_wav_files_generated(self, tmp_path):
        SoundManager(parent=None, sounds_dir=tmp_path)
        for name in SOUND_NAMES:
            path = tmp_path / f"{name}.wav"
            assert path.exists(), f"Missing WAV: {name}"
            assert path.stat().st_size > 100

    def test_cached_files_not_regenerated(self, tmp_path):
        tmp_path.joinpath("bell.wav").write_bytes(b"cached")
        SoundManager(parent=None, sounds_dir=tmp_path)
        assert tmp_path.joinpath("bell.wav").read_bytes() == b"cached"

    def test_all_sounds_loaded(self, tmp_path):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        assert set(mgr.available) == set(SOUND_NAMES)

    def test_play_loop_tracks_current(self, tmp_path):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        assert mgr.current_loop is None
        mgr.play_loop("clock")
        assert mgr.current_loop == "clock"
        mgr.play_loop("birds")
        assert mgr.current_loop == "birds"

    def test_one_shot_keeps_loop(self, tmp_path):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        mgr.play_loop("birds")
        mgr.play("bell")
        assert mgr.current_loop == "birds"

    def test_stop_loop_clears_loop(self, tmp_path):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        mgr.play_loop("clock")
        mgr.play("bell")
        mgr.stop_loop()
        assert mgr.current_loop is None

    def test_stop_clears_loop(self, tmp_path):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        mgr.play_loop("timer")
        mgr.stop()
        assert mgr.current_loop is None

    def test_play_invalid_name_no_crash(self, tmp_path, caplog):
        mgr = SoundManager(parent=None, sounds_dir=tmp_path)
        mgr.play("nonexistent_sound")
        mgr.play_loop("nonexistent_sound")
        assert mgr.current_loop is None
        assert "Unknown sound" in caplog.text
