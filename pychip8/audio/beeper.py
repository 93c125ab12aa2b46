"""Square-wave tone played through pygame's mixer while the sound timer runs."""

from __future__ import annotations

from array import array
from typing import Dict

from pychip8.utils import debug_enabled, debug_log

_AMPLITUDE = 8_000
_FADE_MS = 15


class SquareWaveBeeper:
    """Loop one period of a square wave on a reserved mixer channel.

    XO-Chip pitch only has 256 distinct values, so generated periods are
    cached by rounded frequency.
    """

    def __init__(self, *, sample_rate: int | None = None, volume: float = 0.25) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required for audio output") from exc

        mixer_state = pygame.mixer.get_init()
        if mixer_state is None:
            raise RuntimeError("pygame mixer must be initialised before creating SquareWaveBeeper")
        mixer_rate, _, mixer_channels = mixer_state

        self._pygame = pygame
        self._sample_rate = max(1, sample_rate or mixer_rate)
        self._output_channels = max(1, mixer_channels)
        self._volume = max(0.0, min(1.0, volume))
        self._sounds: Dict[int, object] = {}
        self._frequency = 0.0

        pygame.mixer.set_reserved(1)
        self._channel = pygame.mixer.Channel(0)

    @property
    def playing(self) -> bool:
        return self._frequency > 0.0

    def tone_on(self, frequency: float) -> None:
        if frequency <= 0.0:
            self.tone_off()
            return
        if self.playing and abs(self._frequency - frequency) < 0.5:
            return
        self._channel.play(self._sound_for(frequency), loops=-1)
        self._channel.set_volume(self._volume)
        self._frequency = frequency
        if debug_enabled("audio"):
            debug_log("audio", "tone_on freq=%.2f", frequency)

    def tone_off(self) -> None:
        if not self.playing:
            return
        self._channel.fadeout(_FADE_MS)
        self._frequency = 0.0
        if debug_enabled("audio"):
            debug_log("audio", "tone_off")

    def shutdown(self) -> None:
        """Silence the channel and drop cached sounds."""

        self._channel.stop()
        self._frequency = 0.0
        self._sounds.clear()

    def _sound_for(self, frequency: float):
        key = int(round(frequency))
        sound = self._sounds.get(key)
        if sound is None:
            period = max(2, int(round(self._sample_rate / frequency)))
            high = period // 2
            samples = array("h")
            for index in range(period):
                value = _AMPLITUDE if index < high else -_AMPLITUDE
                samples.extend([value] * self._output_channels)
            sound = self._pygame.mixer.Sound(buffer=samples.tobytes())
            self._sounds[key] = sound
        return sound


__all__ = ["SquareWaveBeeper"]
