"""Tests for the command runner."""

from __future__ import annotations

import io
import sys

import pytest

from buddy_run.exceptions import CommandFailedError
from buddy_run.runner import execute, run_command

PY = sys.executable


def _script(code: str) -> list[str]:
    return ["-c", code]


def test_run_command_returns_trimmed_stdout():
    out, err = io.StringIO(), io.StringIO()
    result = run_command(PY, _script("print('  hello  ')"), stdout=out, stderr=err)
    assert result == "hello"
    assert out.getvalue() == "  hello  \n"


def test_execute_captures_streams_separately():
    code = "import sys; print('out'); print('err', file=sys.stderr)"
    out, err = io.StringIO(), io.StringIO()
    result = execute(PY, _script(code), stdout=out, stderr=err)
    assert result.exit_code == 0
    assert result.stdout == "out\n"
    assert result.stderr == "err\n"
    assert out.getvalue() == "out\n"
    assert err.getvalue() == "err\n"


def test_nonzero_exit_raises_with_stderr():
    code = "import sys; sys.stderr.write('unauthorized'); sys.exit(1)"
    with pytest.raises(CommandFailedError) as exc_info:
        run_command(PY, _script(code), stdout=io.StringIO(), stderr=io.StringIO())
    assert exc_info.value.exit_code == 1
    assert str(exc_info.value) == "unauthorized"


def test_nonzero_exit_without_stderr_uses_fallback():
    with pytest.raises(CommandFailedError, match="Command failed with exit code 3") as exc_info:
        run_command(PY, _script("raise SystemExit(3)"), stdout=io.StringIO(), stderr=io.StringIO())
    assert exc_info.value.exit_code == 3
    assert PY in str(exc_info.value)


def test_missing_executable():
    with pytest.raises(CommandFailedError) as exc_info:
        run_command("definitely-not-a-real-bdy-binary", ["version"])
    assert exc_info.value.exit_code == 127


def test_mask_applies_to_forwarded_and_captured_output():
    out = io.StringIO()
    result = run_command(
        PY,
        _script("print('token=s3cret')"),
        stdout=out,
        stderr=io.StringIO(),
        mask=lambda text: text.replace("s3cret", "***"),
    )
    assert result == "token=***"
    assert "s3cret" not in out.getvalue()


URL_AFTER_EMOJI = (
    "print('\\u2705 started'); print('https://app.buddy.works/w/p/pipelines/1')"
)


def test_unencodable_output_is_replaced_and_still_captured():
    sink = io.TextIOWrapper(io.BytesIO(), encoding="cp1252")
    result = run_command(
        PY,
        _script(URL_AFTER_EMOJI),
        env={"PYTHONIOENCODING": "utf-8"},
        stdout=sink,
        stderr=io.StringIO(),
    )
    assert result == "✅ started\nhttps://app.buddy.works/w/p/pipelines/1"
    sink.flush()
    forwarded = sink.buffer.getvalue().decode("cp1252")
    assert "? started" in forwarded
    assert "https://app.buddy.works/w/p/pipelines/1" in forwarded


class BrokenSink(io.StringIO):
    def write(self, text: str) -> int:
        raise BrokenPipeError("log closed")


def test_broken_sink_does_not_stop_capture():
    code = "[print('line', i) for i in range(20000)]; print('done')"
    result = execute(PY, _script(code), stdout=BrokenSink(), stderr=io.StringIO())
    assert result.exit_code == 0
    assert result.stdout.splitlines()[-1] == "done"
    assert len(result.stdout.splitlines()) == 20001


def test_env_is_merged():
    code = "import os; print(os.environ['BUDDY_TEST_VALUE'])"
    result = run_command(
        PY, _script(code), env={"BUDDY_TEST_VALUE": "42"}, stdout=io.StringIO()
    )
    assert result == "42"
