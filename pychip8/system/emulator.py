"""Execution driver tying the interpreter to wall-clock pacing."""

from __future__ import annotations

import threading
from enum import Enum

from pychip8.cpu import ConfigurationError
from pychip8.utils import TraceRecorder, debug_enabled, debug_log

from .machine import Machine
from .timer import TIMER_FREQUENCY, TimerThread

_KEY_POLL_INTERVAL = 1.0 / TIMER_FREQUENCY
_PAUSE_POLL_INTERVAL = 0.05


class EmulatorState(Enum):
    PAUSED = "paused"
    RUNNING = "running"
    KILLED = "killed"


class Emulator:
    """Drives a :class:`Machine` one instruction at a time.

    ``run()`` blocks the calling thread and paces instructions by
    ``cycle_delay_ms``; the frontend instead calls ``run_frame()`` once per
    video frame. ``kill()`` may be called from any thread.
    """

    def __init__(
        self,
        machine: Machine,
        *,
        cycle_delay_ms: float = 0.0,
        trace: TraceRecorder | None = None,
        start_paused: bool = False,
    ) -> None:
        if cycle_delay_ms < 0:
            raise ConfigurationError(f"cycle delay must be >= 0, got {cycle_delay_ms}")
        self.machine = machine
        self.cycle_delay_ms = cycle_delay_ms
        self.trace = trace
        self.timer = TimerThread(machine.cpu.decrement_timers)
        self._state = EmulatorState.PAUSED if start_paused else EmulatorState.RUNNING
        self._wake = threading.Event()
        self.instruction_count = 0

    @property
    def state(self) -> EmulatorState:
        return self._state

    @property
    def killed(self) -> bool:
        return self._state is EmulatorState.KILLED

    def step(self) -> bool:
        """Execute one instruction, or poll the keypad while awaiting a key.

        Returns ``True`` when an instruction ran or a pending key wait
        completed.
        """

        if self.killed:
            return False
        cpu = self.machine.cpu
        if cpu.awaiting_keypress:
            return cpu.decode_keypress_and_continue()

        pc = cpu.state.pc
        instruction = cpu.fetch_increment_execute()
        self.instruction_count += 1
        if self.trace is not None:
            delay, sound = cpu.timers()
            self.trace.record_step(
                cpu.state,
                cpu.operand,
                delay=delay,
                sound=sound,
                awaiting_key=cpu.awaiting_keypress,
                halted=cpu.halted,
                mnemonic=cpu.last_op_desc or instruction.mnemonic,
                pc=pc,
            )
            if debug_enabled("trace"):
                self.trace.dump("trace", limit=1)
        if cpu.halted:
            debug_log("cpu", "exit requested at %04x", pc)
            self.kill()
        return True

    def run_frame(self, max_instructions: int) -> int:
        """Run up to ``max_instructions`` while running; return how many ran.

        The frame ends early when the program is blocked on a key wait, so the
        keypad is polled once per frame.
        """

        executed = 0
        while executed < max_instructions and self._state is EmulatorState.RUNNING:
            if self.machine.cpu.awaiting_keypress:
                if not self.step():
                    break
                continue
            self.step()
            executed += 1
        return executed

    def run(self) -> None:
        """Block until killed, executing instructions at the configured pace."""

        self.timer.start()
        delay = self.cycle_delay_ms / 1000.0
        try:
            while not self.killed:
                if self._state is EmulatorState.PAUSED:
                    self._wait(_PAUSE_POLL_INTERVAL)
                    continue
                awaiting = self.machine.cpu.awaiting_keypress
                self.step()
                if awaiting:
                    self._wait(max(delay, _KEY_POLL_INTERVAL))
                elif delay > 0:
                    self._wait(delay)
        finally:
            self.kill()

    def start_timers(self) -> None:
        self.timer.start()

    def pause(self) -> None:
        if self._state is EmulatorState.RUNNING:
            self._state = EmulatorState.PAUSED
            debug_log("cpu", "paused at %04x", self.machine.cpu.state.pc)

    def resume(self) -> None:
        if self._state is EmulatorState.PAUSED:
            self._state = EmulatorState.RUNNING
            self._wake.set()
            debug_log("cpu", "resumed at %04x", self.machine.cpu.state.pc)

    def toggle_pause(self) -> None:
        if self._state is EmulatorState.RUNNING:
            self.pause()
        else:
            self.resume()

    def single_step(self) -> bool:
        """Execute exactly one instruction while paused."""

        if self._state is not EmulatorState.PAUSED:
            return False
        return self.step()

    def reset(self) -> None:
        if self.killed:
            return
        self.machine.cpu.reset()
        self.instruction_count = 0
        if self.trace is not None:
            self.trace.clear()
        debug_log("cpu", "reset")

    def kill(self) -> None:
        if self.killed:
            return
        self._state = EmulatorState.KILLED
        self._wake.set()
        self.timer.stop()
        self.machine.cpu.kill()
        debug_log("cpu", "killed after %d instructions", self.instruction_count)

    def _wait(self, seconds: float) -> None:
        self._wake.wait(seconds)
        self._wake.clear()
