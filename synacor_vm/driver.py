"""
Synacor VM - Interactive Session Driver

Glue between a Machine and a terminal. The machine only ever hands back
run states; this loop turns them into I/O:

  BufferedOutput  write the text
  InputNeeded     next replay line if any are left (echoed, so the
                  transcript reads the same as a live game), otherwise a
                  line from the user; EOF ends the session
  Halt            flush whatever output is still buffered, stop
  Error           flush, write the diagnostic, stop

Every line given to the machine, replayed or typed, is recorded in the
ReplayManager, so the log saved at the end always contains the whole
playthrough and the next session can replay all of it.
"""

import logging
import sys
from typing import Callable, Iterable, Optional

from .machine import Machine, RunState, StateKind
from .replay import ReplayManager

log = logging.getLogger(__name__)


def read_stdin_line() -> Optional[str]:
    """One line from the terminal with its newline, or None on EOF."""
    try:
        return input() + '\n'
    except EOFError:
        return None


def write_stdout(text: str):
    sys.stdout.write(text)
    sys.stdout.flush()


class Session:
    """Runs one Machine against a terminal until it halts, faults or the
    input runs out.

    Usage:
        manager = ReplayManager()
        session = Session(Machine(words), manager, manager.load_latest())
        state = session.run()
        session.save()
    """

    def __init__(self, machine: Machine,
                 replay_manager: Optional[ReplayManager] = None,
                 replay_lines: Iterable[str] = (),
                 read_line: Callable[[], Optional[str]] = read_stdin_line,
                 write: Callable[[str], None] = write_stdout):
        self.machine = machine
        self.replay_manager = replay_manager if replay_manager is not None else ReplayManager()
        self._replay = list(replay_lines)
        self._read_line = read_line
        self._write = write
        self.steps = 0

        # True when the session ended because read_line hit EOF
        self.input_exhausted = False

    @property
    def replay_remaining(self) -> int:
        return len(self._replay)

    def run(self, max_steps: Optional[int] = None) -> RunState:
        """Drive the machine. Returns the run state the session ended in.

        ``max_steps`` bounds the number of step() calls made by this call;
        when it runs out the session stops with the machine still
        resumable.
        """
        budget = 0
        while True:
            if max_steps is not None and budget >= max_steps:
                log.warning("step budget of %d exhausted at pc %d", max_steps, self.machine.pc)
                return self.machine.run_state

            state = self.machine.step()
            budget += 1
            self.steps += 1

            if state.kind is StateKind.CONTINUE:
                continue

            if state.kind is StateKind.BUFFERED_OUTPUT:
                self._write(state.text)
                continue

            if state.kind is StateKind.INPUT_NEEDED:
                line = self._next_line()
                if line is None:
                    log.info("input exhausted; ending session")
                    self.input_exhausted = True
                    self._flush()
                    return state
                self.machine.push_input(self.replay_manager.record(line))
                continue

            # Halt / Error
            self._flush()
            if state.kind is StateKind.ERROR:
                self._write(f"\n{state.message}\n")
            return state

    def save(self):
        """Persist the recorded input as the next replay log.

        Returns the path written, or None if nothing was recorded.
        """
        if not len(self.replay_manager):
            return None
        return self.replay_manager.persist(self.replay_manager.next_path())

    # ── helpers ──

    def _next_line(self) -> Optional[str]:
        if self._replay:
            line = _terminated(self._replay.pop(0))
            self._write(line)
            return line
        line = self._read_line()
        if line is None:
            return None
        return _terminated(line)

    def _flush(self):
        text = self.machine.flush_output_buffer()
        if text:
            self._write(text)


def _terminated(line: str) -> str:
    return line if line.endswith('\n') else line + '\n'
