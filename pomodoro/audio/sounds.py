"""Sound synthesis and playback using numpy + QSoundEffect.

All sounds are generated programmatically as WAV files using sine-wave
synthesis with ADSR envelopes.  Files are cached to disk so subsequent
app launches are instant.

Sound names
-----------
- ``bell``       one-shot, a work session just ended
- ``loud-bell``  one-shot, a break just ended (brighter, longer)
- ``clock``      loop, slow tick-tock while working
- ``timer``      loop, fast mechanical kitchen-timer ticking
- ``birds``      loop, chirps during breaks

Loops and one-shots play on separate voices so the end-of-session bell
is not cut off when an auto-started break begins its loop.
"""

from __future__ import annotations

import io
import logging
import wave
from pathlib import Path

import numpy as np

from PyQt6.QtCore import QObject, QUrl
from PyQt6.QtMultimedia import QSoundEffect

from ..settings import APP_DATA_DIR


logger = logging.getLogger("pomodoro.audio")

# ── paths ────────────────────────────────────────────────────────────────

SOUNDS_DIR = APP_DATA_DIR / "sounds"

ONE_SHOT_SOUNDS = ("bell", "loud-bell")
LOOP_SOUNDS = ("clock", "timer", "birds")
SOUND_NAMES = ONE_SHOT_SOUNDS + LOOP_SOUNDS

SAMPLE_RATE = 44100


# ═══════════════════════════════════════════════════════════════════════════
#  WAV SYNTHESIS HELPERS
# ═══════════════════════════════════════════════════════════════════════════


def _make_envelope(
    length: int,
    attack: int = 200,
    decay: int = 400,
    sustain_level: float = 0.7,
    release: int = 800,
) -> np.ndarray:
    """ADSR envelope (all durations in samples)."""
    env = np.ones(length, dtype=np.float64)
    # Attack
    a = min(attack, length)
    if a > 0:
        env[:a] = np.linspace(0.0, 1.0, a)
    # Decay
    d_end = min(a + decay, length)
    if decay > 0 and d_end > a:
        env[a:d_end] = np.linspace(1.0, sustain_level, d_end - a)
    # Sustain
    s_end = max(length - release, d_end)
    if s_end > d_end:
        env[d_end:s_end] = sustain_level
    # Release
    if release > 0 and s_end < length:
        env[s_end:] = np.linspace(sustain_level, 0.0, length - s_end)
    return env


def _sine(freq: float, duration_s: float) -> np.ndarray:
    """Pure sine wave at *freq* Hz for *duration_s* seconds."""
    t = np.linspace(0, duration_s, int(SAMPLE_RATE * duration_s), endpoint=False)
    return np.sin(2 * np.pi * freq * t)


def _silence(duration_s: float) -> np.ndarray:
    return np.zeros(int(SAMPLE_RATE * duration_s))


def _to_wav_bytes(samples: np.ndarray) -> bytes:
    """Convert a float64 numpy array (-1..1) to 16-bit PCM WAV bytes."""
    samples = np.clip(samples, -1.0, 1.0)
    int_samples = (samples * 32767).astype(np.int16)

    buf = io.BytesIO()
    with wave.open(buf, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(2)
        wf.setframerate(SAMPLE_RATE)
        wf.writeframes(int_samples.tobytes())
    return buf.getvalue()


def _click(freq: float, duration_s: float, level: float) -> np.ndarray:
    """Short percussive click used by the ticking loops."""
    tone = _sine(freq, duration_s) * level
    n = len(tone)
    env = _make_envelope(n, attack=20, decay=n // 3, sustain_level=0.2, release=n // 2)
    return tone * env


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND GENERATORS
# ═══════════════════════════════════════════════════════════════════════════


def _generate_bell() -> bytes:
    """Work done: soft bell (A5) with an octave overtone and a long tail."""
    duration = 1.4
    base = _sine(880.0, duration) * 0.4
    overtone = _sine(1760.0, duration) * 0.1
    combined = base + overtone
    env = _make_envelope(
        len(combined),
        attack=int(SAMPLE_RATE * 0.01),
        decay=int(SAMPLE_RATE * 0.3),
        sustain_level=0.3,
        release=int(SAMPLE_RATE * 0.9),
    )
    return _to_wav_bytes(combined * env)


def _generate_loud_bell() -> bytes:
    """Break done: two bright strikes (E5 then A5) so it cuts through."""
    parts: list[np.ndarray] = []
    for freq in (659.25, 880.0):
        strike = (
            _sine(freq, 0.9) * 0.6
            + _sine(freq * 2, 0.9) * 0.2
            + _sine(freq * 3, 0.9) * 0.08
        )
        env = _make_envelope(
            len(strike),
            attack=int(SAMPLE_RATE * 0.005),
            decay=int(SAMPLE_RATE * 0.2),
            sustain_level=0.45,
            release=int(SAMPLE_RATE * 0.5),
        )
        parts.append(strike * env)
        parts.append(_silence(0.08))
    return _to_wav_bytes(np.concatenate(parts))


def _generate_clock() -> bytes:
    """One second of tick-tock (two clicks, the second lower)."""
    tick = _click(2000.0, 0.03, 0.35)
    tock = _click(1500.0, 0.03, 0.3)
    half = int(SAMPLE_RATE * 0.5)
    out = np.zeros(SAMPLE_RATE)
    out[: len(tick)] += tick
    out[half: half + len(tock)] += tock
    return _to_wav_bytes(out)


def _generate_timer() -> bytes:
    """One second of fast mechanical ticking (8 clicks)."""
    click = _click(3200.0, 0.012, 0.25)
    step = SAMPLE_RATE // 8
    out = np.zeros(SAMPLE_RATE)
    for i in range(8):
        out[i * step: i * step + len(click)] += click
    return _to_wav_bytes(out)


def _generate_birds() -> bytes:
    """Three seconds of sparse chirps: quick upward frequency sweeps."""
    rng = np.random.default_rng(7)  # deterministic so the cache is stable
    out = np.zeros(SAMPLE_RATE * 3)
    for start_s in (0.15, 0.4, 1.3, 1.45, 2.2, 2.35, 2.5):
        dur = rng.uniform(0.06, 0.12)
        n = int(SAMPLE_RATE * dur)
        f0 = rng.uniform(2500.0, 3500.0)
        sweep = np.linspace(f0, f0 * 1.5, n)
        phase = 2 * np.pi * np.cumsum(sweep) / SAMPLE_RATE
        chirp = np.sin(phase) * 0.25
        chirp *= _make_envelope(n, attack=n // 5, decay=n // 5, sustain_level=0.6, release=n // 3)
        begin = int(SAMPLE_RATE * start_s)
        out[begin: begin + n] += chirp
    return _to_wav_bytes(out)


# Map sound names to generator functions
_GENERATORS: dict[str, callable] = {
    "bell": _generate_bell,
    "loud-bell": _generate_loud_bell,
    "clock": _generate_clock,
    "timer": _generate_timer,
    "birds": _generate_birds,
}


# ═══════════════════════════════════════════════════════════════════════════
#  SOUND MANAGER
# ═══════════════════════════════════════════════════════════════════════════


class SoundManager(QObject):
    """Manages sound synthesis, caching, and playback.

    Usage::

        mgr = SoundManager(parent=self)
        mgr.play_loop("clock")
        mgr.play("bell")
        mgr.stop()
    """

    VOLUME = 0.7

    def __init__(
        self,
        parent: QObject | None = None,
        *,
        sounds_dir: Path | None = None,
    ) -> None:
        super().__init__(parent)
        self._sounds_dir = sounds_dir or SOUNDS_DIR
        self._effects: dict[str, QSoundEffect] = {}
        self._current_loop: str | None = None

        self._ensure_wav_files()
        self._load_effects()

    # ── public API ────────────────────────────────────────────────────

    def play(self, name: str) -> None:
        """Play a one-shot sound.  Unknown names are logged and ignored."""
        effect = self._effect(name)
        if effect is None:
            return
        effect.setLoopCount(1)
        effect.play()

    def play_loop(self, name: str) -> None:
        """Replace the current loop with *name*, repeating until stopped."""
        effect = self._effect(name)
        if effect is None:
            return
        self._stop_loop()
        effect.setLoopCount(QSoundEffect.Loop.Infinite.value)
        effect.play()
        self._current_loop = name

    def stop_loop(self) -> None:
        """Halt the loop, leaving any one-shot to finish."""
        self._stop_loop()

    def stop(self) -> None:
        """Halt the loop and any one-shot still ringing."""
        for effect in self._effects.values():
            effect.stop()
        self._current_loop = None

    @property
    def current_loop(self) -> str | None:
        return self._current_loop

    @property
    def available(self) -> tuple[str, ...]:
        return tuple(self._effects)

    # ── internal ──────────────────────────────────────────────────────

    def _effect(self, name: str) -> QSoundEffect | None:
        effect = self._effects.get(name)
        if effect is None:
            logger.warning("Unknown sound %r", name)
        return effect

    def _stop_loop(self) -> None:
        if self._current_loop is not None:
            self._effects[self._current_loop].stop()
            self._current_loop = None

    def _ensure_wav_files(self) -> None:
        """Generate any missing WAV files to the cache directory."""
        self._sounds_dir.mkdir(parents=True, exist_ok=True)
        for name, gen_fn in _GENERATORS.items():
            path = self._sounds_dir / f"{name}.wav"
            if not path.exists():
                path.write_bytes(gen_fn())

    def _load_effects(self) -> None:
        """Create QSoundEffect instances from cached WAV files."""
        for name in SOUND_NAMES:
            path = self._sounds_dir / f"{name}.wav"
            if path.exists():
                effect = QSoundEffect(self)
                effect.setSource(QUrl.fromLocalFile(str(path)))
                effect.setVolume(self.VOLUME)
                self._effects[name] = effect
