"""
Tests for the tee writer and subprocess helpers.
"""

import io
import sys
import threading
from io import StringIO

import pytest

from hytale_launcher.errors import ProcessError
from hytale_launcher.process_runner import ProcessRunner, run_passthrough, run_tee
from hytale_launcher.tee import TeeWriter


class TestTeeWriter:
    def test_duplicates_every_write(self):
        a, b = io.BytesIO(), io.BytesIO()
        tee = TeeWriter(a, b)
        tee.write(b"hello ")
        tee.write(b"world")
        tee.flush()
        assert a.getvalue() == b.getvalue() == b"hello world"

    def test_shared_lock_keeps_chunks_whole(self):
        shared = io.BytesIO()
        lock = threading.Lock()
        t1 = TeeWriter(io.BytesIO(), shared, lock)
        t2 = TeeWriter(io.BytesIO(), shared, lock)

        def spam(tee, chunk):
            for _ in range(200):
                tee.write(chunk)

        threads = [threading.Thread(target=spam, args=(t1, b"A" * 64)),
                   threading.Thread(target=spam, args=(t2, b"B" * 64))]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        data = shared.getvalue()
        assert len(data) == 2 * 200 * 64
        for i in range(0, len(data), 64):
            assert len(set(data[i:i + 64])) == 1


class TestRunTee:
    def test_captures_both_streams(self):
        code = "import sys; print('out-line'); sys.stderr.write('err-line\\n')"
        out, err = StringIO(), StringIO()
        text = run_tee([sys.executable, "-c", code], stdout=out, stderr=err)
        assert "out-line" in text and "err-line" in text
        assert out.getvalue().strip() == "out-line"
        assert err.getvalue().strip() == "err-line"

    def test_large_output_on_both_pipes_does_not_stall(self):
        code = (
            "import sys\n"
            "for i in range(2000):\n"
            "    sys.stderr.write('e' * 100 + '\\n')\n"
            "    sys.stdout.write('o' * 100 + '\\n')\n"
        )
        text = run_tee([sys.executable, "-c", code], stdout=StringIO(), stderr=StringIO())
        assert text.count("o" * 100) == 2000
        assert text.count("e" * 100) == 2000

    def test_nonzero_exit_raises_with_output(self):
        code = "import sys; print('partial'); sys.exit(4)"
        with pytest.raises(ProcessError) as ei:
            run_tee([sys.executable, "-c", code], stdout=StringIO(), stderr=StringIO())
        assert ei.value.returncode == 4
        assert "partial" in ei.value.output

    def test_missing_binary(self, tmp_path):
        with pytest.raises(ProcessError) as ei:
            run_tee([str(tmp_path / "does-not-exist")], stdout=StringIO(), stderr=StringIO())
        assert ei.value.returncode == -1


class TestRunPassthrough:
    def test_ok(self, tmp_path):
        assert run_passthrough([sys.executable, "-c", "pass"], cwd=tmp_path) == 0

    def test_failure(self):
        with pytest.raises(ProcessError) as ei:
            run_passthrough([sys.executable, "-c", "import sys; sys.exit(7)"])
        assert ei.value.returncode == 7


class TestProcessRunner:
    def test_start_and_status(self, tmp_path):
        runner = ProcessRunner()
        h = runner.start("quick", [sys.executable, "-c", "pass"], cwd=tmp_path)
        assert h.proc.wait() == 0
        assert runner.status()["quick"]["returncode"] == 0

    def test_stop_all_terminates(self):
        runner = ProcessRunner()
        h = runner.start("sleeper", [sys.executable, "-c", "import time; time.sleep(60)"])
        runner.stop_all(timeout=5)
        assert h.proc.poll() is not None
