"""
Synacor VM - Interaction Recorder

Every line typed into the game during a session is kept in order and, at
the end of the session, written out as one replay log:

  replays/
    replay_1
    replay_2     <- newest, fed back automatically on the next start

A log is plain text: the input lines concatenated verbatim, each still
carrying its newline, so ``persist`` followed by ``load_latest`` gives
back exactly what was recorded.

Files are ordered by their numeric suffix, so replay_10 comes after
replay_9. Anything in the directory that is not named ``replay_<n>`` is
ignored.
"""

import logging
import re
from pathlib import Path
from typing import List, Optional, Union

log = logging.getLogger(__name__)

REPLAY_SAVE_DIR = "replays"
REPLAY_PREFIX = "replay_"

_REPLAY_NAME_RE = re.compile(rf"^{REPLAY_PREFIX}(\d+)$")


class ReplayManager:
    """In-session input log plus the on-disk replay directory."""

    def __init__(self, save_dir: Union[str, Path] = REPLAY_SAVE_DIR):
        self.save_dir = Path(save_dir)
        self.lines: List[str] = []

    # --- In-session log ---

    def record(self, line: str) -> str:
        """Append one input line to the log and hand it back."""
        self.lines.append(line)
        return line

    def __len__(self) -> int:
        return len(self.lines)

    # --- Persistence ---

    def persist(self, path: Union[str, Path]) -> Path:
        """Write every recorded line to ``path``, creating its directory."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(''.join(self.lines), encoding='utf-8', newline='')
        log.info("saved %d input lines to %s", len(self.lines), path)
        return path

    def list_persisted(self) -> List[str]:
        """Names of the replay logs in save_dir, oldest first."""
        if not self.save_dir.is_dir():
            return []
        numbered = []
        for entry in self.save_dir.iterdir():
            if not entry.is_file():
                continue
            match = _REPLAY_NAME_RE.match(entry.name)
            if match:
                numbered.append((int(match.group(1)), entry.name))
        numbered.sort()
        return [name for _, name in numbered]

    def next_path(self) -> Path:
        """Path one number above the newest replay log (replay_1 if none)."""
        names = self.list_persisted()
        number = _replay_number(names[-1]) + 1 if names else 1
        return self.save_dir / f"{REPLAY_PREFIX}{number}"

    def latest_path(self) -> Optional[Path]:
        names = self.list_persisted()
        return self.save_dir / names[-1] if names else None

    def load_latest(self) -> List[str]:
        """Lines of the newest replay log, each with its newline; [] if none."""
        path = self.latest_path()
        if path is None:
            return []
        with open(path, encoding='utf-8', newline='') as f:
            lines = f.readlines()
        log.info("loaded %d input lines from %s", len(lines), path)
        return lines


def _replay_number(name: str) -> int:
    return int(_REPLAY_NAME_RE.match(name).group(1))
