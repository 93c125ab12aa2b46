"""Audio output for the CHIP-8 emulator."""

from .beeper import SquareWaveBeeper
from .tone import SilentTone, ToneSink, create_tone_sink

__all__ = ["SquareWaveBeeper", "SilentTone", "ToneSink", "create_tone_sink"]
