#!/usr/bin/env python3
"""
synacor — Synacor Challenge VM
==============================

One CLI for the virtual machine:
    synacor run      — Play a program interactively (replays the last session)
    synacor disasm   — Disassemble a program binary
    synacor replays  — List saved replay logs

Usage:
    python synacor.py <command> [options]
    python synacor.py --help
    python synacor.py <command> --help

Examples:
    python synacor.py run challenge.bin
    python synacor.py run challenge.bin --no-replay --max-steps 100000
    python synacor.py run -vv --log-dir logs
    python synacor.py disasm challenge.bin -o challenge.lst
    python synacor.py replays --replay-dir replays
"""

import argparse
import logging
import sys

from synacor_vm import __version__
from synacor_vm.disassembler import decompile
from synacor_vm.driver import Session
from synacor_vm.errors import SynacorError
from synacor_vm.loader import DEFAULT_PROGRAM, load_program
from synacor_vm.log_setup import setup_logging
from synacor_vm.machine import Machine, StateKind
from synacor_vm.replay import REPLAY_SAVE_DIR, ReplayManager

log = logging.getLogger("synacor_vm.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="synacor",
        description="Synacor challenge VM — run, disassemble, replay",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""commands:
  run        Run a program against the terminal
  disasm     Disassemble a program binary
  replays    List saved replay logs
""",
    )
    parser.add_argument("--version", action="version", version=f"synacor {__version__}")

    sub = parser.add_subparsers(dest="command")

    # ── run ──────────────────────────────────────────────────────────────
    p_run = sub.add_parser("run", help="Run a program interactively")
    p_run.add_argument("program", nargs="?", default=DEFAULT_PROGRAM,
                       help=f"Program binary (default: {DEFAULT_PROGRAM})")
    p_run.add_argument("--no-replay", action="store_true",
                       help="Do not feed the latest replay log on start")
    p_run.add_argument("--no-record", action="store_true",
                       help="Do not save this session as a new replay log")
    p_run.add_argument("--replay-dir", default=REPLAY_SAVE_DIR,
                       help=f"Replay log directory (default: {REPLAY_SAVE_DIR})")
    p_run.add_argument("--max-steps", type=int, default=None,
                       help="Stop after this many instructions")
    p_run.add_argument("-v", "--verbose", action="count", default=0,
                       help="Console log level: -v INFO, -vv DEBUG (per instruction)")
    p_run.add_argument("--log-dir", default=None,
                       help="Also write a full DEBUG log file into this directory")

    # ── disasm ───────────────────────────────────────────────────────────
    p_dis = sub.add_parser("disasm", help="Disassemble a program binary")
    p_dis.add_argument("program", nargs="?", default=DEFAULT_PROGRAM,
                       help=f"Program binary (default: {DEFAULT_PROGRAM})")
    p_dis.add_argument("-o", "--output", help="Output file (default: stdout)")

    # ── replays ──────────────────────────────────────────────────────────
    p_rep = sub.add_parser("replays", help="List saved replay logs")
    p_rep.add_argument("--replay-dir", default=REPLAY_SAVE_DIR,
                       help=f"Replay log directory (default: {REPLAY_SAVE_DIR})")

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    handler = COMMANDS[args.command]
    try:
        return handler(args)
    except SynacorError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


# ═════════════════════════════════════════════════════════════════════════════
# COMMAND IMPLEMENTATIONS
# ═════════════════════════════════════════════════════════════════════════════

# ── run ──────────────────────────────────────────────────────────────────
def cmd_run(args) -> int:
    setup_logging(verbose=args.verbose, log_dir=args.log_dir)

    words = load_program(args.program)
    manager = ReplayManager(args.replay_dir)
    replay_lines = [] if args.no_replay else manager.load_latest()

    session = Session(Machine(words), manager, replay_lines)
    state = session.run(max_steps=args.max_steps)

    if not args.no_record:
        path = session.save()
        if path is not None:
            log.info("session saved to %s", path)

    if state.kind is StateKind.ERROR:
        return 1
    return 0


# ── disasm ───────────────────────────────────────────────────────────────
def cmd_disasm(args) -> int:
    words = load_program(args.program)
    listing = decompile(words)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(listing)
        print(f"Disassembled {len(words)} words -> {args.output}")
    else:
        sys.stdout.write(listing)
    return 0


# ── replays ──────────────────────────────────────────────────────────────
def cmd_replays(args) -> int:
    manager = ReplayManager(args.replay_dir)
    names = manager.list_persisted()
    if not names:
        print(f"No replay logs in {manager.save_dir}")
        return 0
    for name in names:
        print(name)
    print(f"next: {manager.next_path()}")
    return 0


# ═════════════════════════════════════════════════════════════════════════════
# COMMAND DISPATCH TABLE
# ═════════════════════════════════════════════════════════════════════════════

COMMANDS = {
    "run": cmd_run,
    "disasm": cmd_disasm,
    "replays": cmd_replays,
}


if __name__ == "__main__":
    sys.exit(main())
