"""
CLI Tests for the Synacor VM (synacor.py).
"""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import io
import pytest
import synacor
from synacor_vm.loader import words_to_bytes
from synacor_vm.log_setup import reset_logging

R0, R1 = 32768, 32769

HELLO_WORLD = [
    19, 72, 19, 101, 19, 108, 19, 108, 19, 111, 21,
    19, 87, 19, 111, 19, 114, 19, 108, 19, 100,
]

ECHO_LINE = [20, R0, 19, R0, 4, R1, R0, 10, 8, R1, 0, 0]


@pytest.fixture(autouse=True)
def clean_logger():
    yield
    reset_logging()


@pytest.fixture
def program(tmp_path):
    def _write(words, name="prog.bin"):
        path = tmp_path / name
        path.write_bytes(words_to_bytes(words))
        return str(path)
    return _write


class TestRun:
    def test_hello_world(self, program, tmp_path, capsys):
        code = synacor.main(["run", program(HELLO_WORLD), "--no-replay",
                             "--replay-dir", str(tmp_path / "replays")])
        assert code == 0
        assert capsys.readouterr().out == "HelloWorld"
        assert not (tmp_path / "replays").exists()

    def test_records_then_replays(self, program, tmp_path, capsys, monkeypatch):
        replay_dir = tmp_path / "replays"
        prog = program(ECHO_LINE)

        monkeypatch.setattr(sys, "stdin", io.StringIO("hi\n"))
        assert synacor.main(["run", prog, "--replay-dir", str(replay_dir)]) == 0
        assert capsys.readouterr().out == "hi\n"
        assert (replay_dir / "replay_1").read_text(encoding="utf-8") == "hi\n"

        monkeypatch.setattr(sys, "stdin", io.StringIO(""))
        assert synacor.main(["run", prog, "--replay-dir", str(replay_dir)]) == 0
        assert capsys.readouterr().out == "hi\nhi\n"
        assert (replay_dir / "replay_2").exists()

    def test_no_record(self, program, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "stdin", io.StringIO("hi\n"))
        code = synacor.main(["run", program(ECHO_LINE), "--no-record",
                             "--replay-dir", str(tmp_path / "replays")])
        assert code == 0
        assert not (tmp_path / "replays").exists()

    def test_error_exit_code(self, program, tmp_path, capsys):
        code = synacor.main(["run", program([22]), "--no-replay",
                             "--replay-dir", str(tmp_path / "replays")])
        assert code == 1
        assert "unknown opcode 22" in capsys.readouterr().out

    def test_missing_program(self, tmp_path, capsys):
        code = synacor.main(["run", str(tmp_path / "missing.bin"),
                             "--replay-dir", str(tmp_path / "replays")])
        assert code == 1
        assert "Error:" in capsys.readouterr().err

    def test_max_steps(self, program, tmp_path):
        code = synacor.main(["run", program([6, 0]), "--no-replay", "--max-steps", "100",
                             "--replay-dir", str(tmp_path / "replays")])
        assert code == 0

    def test_log_dir_writes_file(self, program, tmp_path):
        log_dir = tmp_path / "logs"
        code = synacor.main(["run", program(HELLO_WORLD), "--no-replay",
                             "--log-dir", str(log_dir),
                             "--replay-dir", str(tmp_path / "replays")])
        assert code == 0
        reset_logging()
        (log_file,) = log_dir.glob("synacor_vm_*.log")
        text = log_file.read_text(encoding="utf-8")
        assert "Logger initialized" in text
        assert "loaded " in text
        assert "instruction: noop" in text

    def test_second_run_uses_new_log_dir(self, program, tmp_path):
        for name in ("first", "second"):
            assert synacor.main(["run", program([0]), "--no-replay",
                                 "--log-dir", str(tmp_path / name),
                                 "--replay-dir", str(tmp_path / "replays")]) == 0
        assert list((tmp_path / "second").glob("*.log"))


class TestDisasm:
    def test_stdout(self, program, capsys):
        assert synacor.main(["disasm", program([9, R0, R1, 4])]) == 0
        assert "add r0 r1 4" in capsys.readouterr().out

    def test_output_file(self, program, tmp_path, capsys):
        out = tmp_path / "prog.lst"
        assert synacor.main(["disasm", program([21, 0]), "-o", str(out)]) == 0
        assert out.read_text(encoding="utf-8").splitlines()[1].endswith("halt")
        assert "Disassembled 2 words" in capsys.readouterr().out


class TestReplays:
    def test_empty(self, tmp_path, capsys):
        assert synacor.main(["replays", "--replay-dir", str(tmp_path)]) == 0
        assert "No replay logs" in capsys.readouterr().out

    def test_listing(self, tmp_path, capsys):
        (tmp_path / "replay_1").write_text("a\n", encoding="utf-8")
        (tmp_path / "replay_3").write_text("b\n", encoding="utf-8")
        assert synacor.main(["replays", "--replay-dir", str(tmp_path)]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[:2] == ["replay_1", "replay_3"]
        assert out[2].endswith("replay_4")


class TestParser:
    def test_no_command_prints_help(self, capsys):
        assert synacor.main([]) == 0
        assert "usage" in capsys.readouterr().out
