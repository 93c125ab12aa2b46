"""Tone output contract used by the interpreter's sound timer."""

from __future__ import annotations

from typing import Protocol

from pychip8.utils import debug_enabled, debug_log


class ToneSink(Protocol):
    """Anything that can start and stop a single tone."""

    def tone_on(self, frequency: float) -> None: ...

    def tone_off(self) -> None: ...


class SilentTone:
    """Tone sink that only remembers what it was asked to play."""

    def __init__(self) -> None:
        self.playing = False
        self.frequency = 0.0

    def tone_on(self, frequency: float) -> None:
        self.playing = True
        self.frequency = frequency

    def tone_off(self) -> None:
        self.playing = False

    def shutdown(self) -> None:
        self.tone_off()


def create_tone_sink(sample_rate: int | None = None):
    """Return a pygame beeper, or a :class:`SilentTone` when no audio device is usable."""

    from .beeper import SquareWaveBeeper

    try:
        if sample_rate is None:
            return SquareWaveBeeper()
        return SquareWaveBeeper(sample_rate=sample_rate)
    except RuntimeError as exc:
        # Reported once; the emulator keeps running without sound.
        print(f"Audio unavailable, continuing without sound: {exc}")
        if debug_enabled("audio"):
            debug_log("audio", "beeper_init_failed=%s", exc)
        return SilentTone()
