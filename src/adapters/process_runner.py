"""Wrapper around `subprocess`.

Why a wrapper:
- Standardizes output limits, timeouts, environment merging and error
  normalization for every external command (act, docker).
- Makes testing easy: the Core only sees `ProcessResult` and can be handed a
  scripted fake instead of `ActCli`.

Both pipes are drained by reader threads that keep at most
`max_output_bytes` per stream; a process that writes past the limit is killed
instead of being buffered in full.
"""

from __future__ import annotations

import logging
import os
import shutil
import subprocess
import threading
import time
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import IO

from core.config import DEFAULT_MAX_OUTPUT_BYTES, AppSettings
from core.domain.models import ProcessResult


logger = logging.getLogger(__name__)

_CHUNK_SIZE = 64 * 1024
_POLL_SECONDS = 0.05


def _decode(data: bytes | None) -> str:
    if not data:
        return ""
    return data.decode("utf-8", errors="replace")


class _BoundedReader(threading.Thread):
    """Drains one pipe, keeping at most `limit` bytes."""

    def __init__(self, name: str, stream: IO[bytes], limit: int, overflow: threading.Event) -> None:
        super().__init__(name=f"read-{name}", daemon=True)
        self.stream_name = name
        self.stream = stream
        self.limit = limit
        self.overflow = overflow
        self.exceeded = False
        self._chunks: list[bytes] = []
        self._size = 0

    def run(self) -> None:
        while True:
            chunk = self.stream.read1(_CHUNK_SIZE)
            if not chunk:
                return
            if self._size + len(chunk) > self.limit:
                self.exceeded = True
                self.overflow.set()
                return
            self._chunks.append(chunk)
            self._size += len(chunk)

    @property
    def data(self) -> bytes:
        return b"".join(self._chunks)


def _wait_for_readers(
    readers: Sequence[_BoundedReader], overflow: threading.Event, deadline: float | None
) -> bool:
    """Wait until both pipes hit EOF or one overflows. False on timeout."""

    while any(r.is_alive() for r in readers):
        if overflow.is_set():
            return True
        if deadline is not None and time.monotonic() >= deadline:
            return False
        overflow.wait(_POLL_SECONDS)
    return True


def _kill(proc: subprocess.Popen[bytes]) -> None:
    proc.kill()
    proc.wait()


def run_process(
    args: Sequence[str],
    *,
    cwd: Path | None = None,
    env_overrides: Mapping[str, str] | None = None,
    max_output_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
    timeout: float | None = None,
) -> ProcessResult:
    """Run a command and return a normalized `ProcessResult`.

    Never raises for a failed invocation. A non-zero exit, a missing
    executable, a timeout and an output larger than `max_output_bytes` all
    come back as `success=False` with a non-empty `stderr`.
    """

    argv = [str(a) for a in args]
    if not argv:
        raise ValueError("run_process requires at least the executable name")

    env = None
    if env_overrides:
        env = {**os.environ, **{k: str(v) for k, v in env_overrides.items()}}

    logger.debug("running %s (cwd=%s)", argv, cwd)
    deadline = time.monotonic() + timeout if timeout is not None else None
    try:
        proc = subprocess.Popen(
            argv,
            cwd=str(cwd) if cwd is not None else None,
            env=env,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
        )
    except FileNotFoundError:
        return ProcessResult(success=False, stderr=f"command not found: {argv[0]}")
    except OSError as exc:
        return ProcessResult(success=False, stderr=f"cannot execute {argv[0]}: {exc}")

    with proc:
        overflow = threading.Event()
        readers = [
            _BoundedReader("stdout", proc.stdout, max_output_bytes, overflow),
            _BoundedReader("stderr", proc.stderr, max_output_bytes, overflow),
        ]
        for reader in readers:
            reader.start()

        finished = _wait_for_readers(readers, overflow, deadline)
        if finished and not overflow.is_set():
            remaining = None if deadline is None else max(deadline - time.monotonic(), 0)
            try:
                proc.wait(timeout=remaining)
            except subprocess.TimeoutExpired:
                finished = False
        if not finished or overflow.is_set():
            _kill(proc)
        for reader in readers:
            reader.join()

    stdout_reader, stderr_reader = readers
    if not finished:
        return ProcessResult(
            success=False,
            stdout=_decode(stdout_reader.data),
            stderr=f"process timed out after {timeout} seconds",
        )

    for reader in readers:
        if reader.exceeded:
            logger.warning("%s of %s exceeded %d bytes", reader.stream_name, argv[0], max_output_bytes)
            return ProcessResult(
                success=False,
                stderr=f"{reader.stream_name} exceeded the {max_output_bytes} byte output limit",
            )

    stdout = _decode(stdout_reader.data)
    stderr = _decode(stderr_reader.data)
    if proc.returncode != 0:
        return ProcessResult(
            success=False,
            stdout=stdout,
            stderr=stderr.strip() or f"process exited with code {proc.returncode}",
            exit_code=proc.returncode,
        )
    return ProcessResult(success=True, stdout=stdout, stderr=stderr, exit_code=0)


class ActCli:
    """`ActCommandRunner` backed by the real act binary."""

    def __init__(self, settings: AppSettings | None = None) -> None:
        self.settings = settings or AppSettings()
        self.binary = self.settings.act_binary

    @property
    def project_root(self) -> Path:
        return self.settings.project_root

    def is_available(self) -> bool:
        return shutil.which(self.binary) is not None

    def run(
        self,
        args: Sequence[str],
        *,
        cwd: Path | None = None,
        env_overrides: Mapping[str, str] | None = None,
    ) -> ProcessResult:
        return run_process(
            [self.binary, *args],
            cwd=cwd or self.project_root,
            env_overrides=env_overrides,
            max_output_bytes=self.settings.max_output_bytes,
            timeout=self.settings.command_timeout_seconds,
        )
