"""Audio package."""

from .sounds import SoundManager, SOUND_NAMES, LOOP_SOUNDS, ONE_SHOT_SOUNDS

__all__ = ["SoundManager", "SOUND_NAMES", "LOOP_SOUNDS", "ONE_SHOT_SOUNDS"]
