"""Run an external command while mirroring its output to the CI log."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
import threading
from collections.abc import Callable, Mapping, Sequence
from typing import IO, TextIO

from .exceptions import CommandFailedError
from .models.results import CommandResult

logger = logging.getLogger(__name__)

Masker = Callable[[str], str]
Runner = Callable[..., str]


def _no_mask(text: str) -> str:
    return text


def _forward(sink: TextIO, text: str) -> None:
    try:
        sink.write(text)
    except UnicodeEncodeError:
        encoding = getattr(sink, "encoding", None) or "utf-8"
        sink.write(text.encode(encoding, "replace").decode(encoding))
    sink.flush()


def _pump(source: IO[str], sink: TextIO, chunks: list[str], mask: Masker) -> None:
    # Capture always wins over forwarding; the pipe must keep draining.
    forwarding = True
    for line in source:
        chunks.append(line)
        if not forwarding:
            continue
        try:
            _forward(sink, mask(line))
        except OSError as e:
            logger.debug("Stopped forwarding command output: %s", e)
            forwarding = False
    source.close()


def execute(
    command: str,
    args: Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
    mask: Masker | None = None,
) -> CommandResult:
    """Run *command* to completion and return its exit code and output.

    Both streams are read concurrently so neither pipe can fill up and stall
    the child. Never raises on a non-zero exit status.
    """
    mask = mask or _no_mask
    argv = [command, *args]
    logger.debug("Executing: %s", " ".join(argv))

    merged_env = None
    if env is not None:
        merged_env = os.environ.copy()
        merged_env.update(env)

    try:
        proc = subprocess.Popen(
            argv,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=merged_env,
            text=True,
            encoding="utf-8",
            errors="replace",
            shell=False,
        )
    except OSError as e:
        raise CommandFailedError(127, f"Failed to start {command}: {e}", argv) from e

    out_chunks: list[str] = []
    err_chunks: list[str] = []
    readers = [
        threading.Thread(
            target=_pump,
            args=(proc.stdout, stdout or sys.stdout, out_chunks, mask),
            daemon=True,
        ),
        threading.Thread(
            target=_pump,
            args=(proc.stderr, stderr or sys.stderr, err_chunks, mask),
            daemon=True,
        ),
    ]
    for reader in readers:
        reader.start()
    exit_code = proc.wait()
    for reader in readers:
        reader.join()

    return CommandResult(
        exit_code=exit_code,
        stdout=mask("".join(out_chunks)),
        stderr=mask("".join(err_chunks)),
    )


def run_command(
    command: str,
    args: Sequence[str],
    *,
    env: Mapping[str, str] | None = None,
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
    mask: Masker | None = None,
) -> str:
    """Run *command* and return its trimmed stdout.

    Raises :class:`CommandFailedError` with the captured stderr (or a
    synthesized message when stderr is empty) on a non-zero exit.
    """
    result = execute(command, args, env=env, stdout=stdout, stderr=stderr, mask=mask)
    if result.exit_code != 0:
        raise CommandFailedError(result.exit_code, result.stderr.strip(), [command, *args])
    return result.stdout.strip()
