"""Pygame frontend for the CHIP-8 emulator."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence

from pychip8.audio import create_tone_sink
from pychip8.cpu import ConfigurationError, Quirks
from pychip8.loader import load_rom_from_path
from pychip8.system import Emulator, EmulatorState, Machine, MachineConfig, create_machine
from pychip8.utils import TraceRecorder, debug_enabled, debug_log
from pychip8.video import DEFAULT_COLORS, Renderer, ScreenMode, parse_color, validate_palette
from pychip8.video.palette import Palette


@dataclass
class AppConfig:
    """Configuration for the emulator frontend."""

    rom_path: Optional[Path] = None
    scale: int = 5
    cycle_delay_ms: float = 1.0
    memory_4k: bool = False
    colors: Sequence[str] = field(default_factory=lambda: DEFAULT_COLORS)
    quirks: Quirks = field(default_factory=Quirks)
    trace: bool = False

    def validate(self) -> None:
        if not isinstance(self.scale, int) or self.scale <= 0:
            raise ConfigurationError(f"scale must be a positive integer, got {self.scale!r}")
        if self.cycle_delay_ms < 0:
            raise ConfigurationError(f"delay must be >= 0 ms, got {self.cycle_delay_ms}")
        if not isinstance(self.quirks, Quirks):
            raise ConfigurationError("quirks must be a Quirks instance")
        self.palette()

    def palette(self) -> Palette:
        try:
            return validate_palette([parse_color(color) for color in self.colors])
        except ValueError as exc:
            raise ConfigurationError(str(exc)) from exc

    def instructions_per_frame(self) -> int:
        if self.cycle_delay_ms <= 0:
            return _MAX_INSTRUCTIONS_PER_FRAME
        per_frame = round(1000.0 / _FRAME_RATE / self.cycle_delay_ms)
        return max(1, min(per_frame, _MAX_INSTRUCTIONS_PER_FRAME))


class Chip8App:
    """Owns the pygame window, routes host keys and paces the emulator."""

    def __init__(self, config: AppConfig) -> None:
        config.validate()
        self._config = config
        self._running = False
        self._machine: Machine | None = None
        self._emulator: Emulator | None = None
        self._renderer = Renderer(config.palette())
        self._overlay = config.trace or debug_enabled("overlay")
        self._overlay_font = None
        self._perf_enabled = debug_enabled("perf")
        self._perf_frame = 0
        self._tone = None

    @property
    def window_size(self) -> tuple[int, int]:
        extended = ScreenMode.EXTENDED
        return (extended.width * self._config.scale, extended.height * self._config.scale)

    def build_emulator(self, tone=None) -> Emulator:
        """Assemble the machine, load the ROM and wrap it in an :class:`Emulator`."""

        if not self._config.rom_path:
            raise RuntimeError("ROM image is required")
        rom_path = Path(self._config.rom_path)
        if not rom_path.exists():
            raise RuntimeError(f"ROM file not found: {rom_path}")

        machine = create_machine(
            MachineConfig(quirks=self._config.quirks, memory_4k=self._config.memory_4k, tone=tone)
        )
        machine.rom = load_rom_from_path(rom_path, machine.memory)
        trace = TraceRecorder() if self._config.trace else None
        self._machine = machine
        self._emulator = Emulator(machine, cycle_delay_ms=self._config.cycle_delay_ms, trace=trace)
        return self._emulator

    def run(self) -> None:
        try:
            import pygame  # type: ignore
        except Exception as exc:  # pragma: no cover - optional dependency
            raise RuntimeError("pygame is required to run the UI") from exc

        pygame.mixer.pre_init(44_100, -16, 1, 512)
        pygame.init()
        pygame.display.set_caption("CHIP-8 Emulator")

        if pygame.mixer.get_init() is None:
            try:
                pygame.mixer.init(44_100, -16, 1)
            except pygame.error as exc:  # pragma: no cover - best-effort path
                if debug_enabled("audio"):
                    debug_log("audio", "mixer_init_failed=%s", exc)
        mixer_state = pygame.mixer.get_init()
        self._tone = create_tone_sink(mixer_state[0] if mixer_state else None)

        emulator = self.build_emulator(self._tone)
        machine = emulator.machine
        window = pygame.display.set_mode(self.window_size)
        clock = pygame.time.Clock()
        per_frame = self._config.instructions_per_frame()
        self._running = True
        emulator.start_timers()

        try:
            while self._running:
                for event in pygame.event.get():
                    if event.type == pygame.QUIT:
                        self._running = False
                    elif event.type == pygame.KEYDOWN and event.key in _host_keys(pygame):
                        self._handle_host_key(pygame, event.key)
                    elif event.type == pygame.KEYDOWN:
                        self._handle_key_event(pygame, event.key, pressed=True)
                    elif event.type == pygame.KEYUP:
                        self._handle_key_event(pygame, event.key, pressed=False)

                frame_start = time.perf_counter()
                executed = emulator.run_frame(per_frame)
                if emulator.killed:
                    self._running = False

                frame = self._renderer.render(machine.screen, output_width=self.window_size[0])
                window.blit(frame.to_surface(), (0, 0))
                if self._overlay:
                    self._draw_overlay(pygame, window)
                pygame.display.flip()

                if self._perf_enabled:
                    self._perf_frame += 1
                    debug_log(
                        "perf",
                        "frame=%d instructions=%d frame_ms=%.3f",
                        self._perf_frame,
                        executed,
                        (time.perf_counter() - frame_start) * 1000.0,
                    )
                clock.tick(_FRAME_RATE)
        finally:
            emulator.kill()
            pygame.quit()

    def _handle_host_key(self, pygame, key_code: int) -> None:
        emulator = self._emulator
        if emulator is None:
            return
        if key_code == pygame.K_ESCAPE:
            self._running = False
        elif key_code == pygame.K_F2:
            emulator.toggle_pause()
        elif key_code == pygame.K_F3:
            emulator.single_step()
        elif key_code == pygame.K_F4:
            emulator.reset()
        elif key_code == pygame.K_F5:
            self._overlay = not self._overlay
        if debug_enabled("input"):
            debug_log("input", "host key=%s state=%s", pygame.key.name(key_code), emulator.state.value)

    def _handle_key_event(self, pygame, key_code: int, *, pressed: bool) -> None:
        if self._machine is None:
            return
        name = pygame.key.name(key_code).lower()
        keyboard = self._machine.keyboard
        mapped = keyboard.press(name) if pressed else keyboard.release(name)
        if debug_enabled("input"):
            debug_log("input", "event=%s mapped=%s pressed=%s", name, mapped, pressed)

    def _draw_overlay(self, pygame, window) -> None:
        emulator = self._emulator
        if emulator is None:
            return
        font_size = max(10, 3 * self._config.scale)
        if self._overlay_font is None or self._overlay_font[0] != font_size:
            pygame.font.init()
            font_name = pygame.font.match_font("menlo,dejavusansmono,couriernew,consolas,monospace")
            if not font_name:
                font_name = pygame.font.get_default_font()
            self._overlay_font = (font_size, pygame.font.Font(font_name, font_size))
        font_obj = self._overlay_font[1]

        cpu = emulator.machine.cpu
        lines = [cpu.status_line_1(), cpu.status_line_2(), cpu.status_line_3()]
        if emulator.state is not EmulatorState.RUNNING:
            lines.append(emulator.state.value.upper())

        line_height = font_size + 2
        width, height = self.window_size
        panel = pygame.Surface((width, line_height * len(lines) + 4))
        panel.set_alpha(_OVERLAY_ALPHA)
        panel.fill((0, 0, 0))
        y = 2
        for text in lines:
            panel.blit(font_obj.render(text, False, (255, 255, 255)), (4, y))
            y += line_height
        window.blit(panel, (0, height - panel.get_height()))


def _host_keys(pygame) -> tuple[int, ...]:
    return (pygame.K_ESCAPE, pygame.K_F2, pygame.K_F3, pygame.K_F4, pygame.K_F5)


_FRAME_RATE = 60
_MAX_INSTRUCTIONS_PER_FRAME = 1000
_OVERLAY_ALPHA = 200
