"""
Synacor VM - Console Peripheral

The machine's terminal. Two queues, no real I/O:

  input queue    characters pushed in by the driver, one whole line at a
                 time; the `in` instruction pops them front-first
  output buffer  characters appended by consecutive `out` instructions;
                 drained by the machine when a non-`out` instruction is
                 about to run, or on an explicit flush

The architecture notes promise that once a program starts reading a line
it keeps reading until the newline, so the driver can safely hand over
complete lines.
"""

from collections import deque
from typing import Deque, List, Optional


class Console:
    """Input queue + output buffer owned by one Machine."""

    def __init__(self):
        # RX queue: characters waiting for `in`
        self._rx_queue: Deque[str] = deque()

        # TX buffer: characters written by `out` since the last drain
        self.tx_buffer: List[str] = []

    # --- Input side ---

    def push_input(self, text: str):
        """Queue text for `in`, one character per instruction."""
        self._rx_queue.extend(text)

    @property
    def input_pending(self) -> int:
        """Number of characters still waiting to be read."""
        return len(self._rx_queue)

    def read_char(self) -> Optional[str]:
        """Pop the next input character, or None if the queue is empty."""
        if not self._rx_queue:
            return None
        return self._rx_queue.popleft()

    # --- Output side ---

    def write_char(self, ch: str):
        self.tx_buffer.append(ch)

    @property
    def output_pending(self) -> bool:
        return bool(self.tx_buffer)

    @property
    def pending_output(self) -> str:
        """Buffered text, without draining it."""
        return ''.join(self.tx_buffer)

    def drain(self) -> str:
        """Return all buffered text and empty the buffer."""
        text = ''.join(self.tx_buffer)
        self.tx_buffer.clear()
        return text
