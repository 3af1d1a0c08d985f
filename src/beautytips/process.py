# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import os
import shutil
import signal

# Bandit: subprocess usage is intentional; commands are passed as argument
# lists and never through ``shell=True``.
import subprocess  # nosec B404
import tempfile
import threading
from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Final

from .errors import SpawnError

TERMINATE_GRACE_SECONDS: Final[float] = 3.0
_KILL_SIGNAL: Final[int] = getattr(signal, "SIGKILL", signal.SIGTERM)


def normalize_args(args: Sequence[str], *, env: Mapping[str, str] | None = None) -> list[str]:
    """Resolve the executable of ``args`` against ``PATH``.

    Args:
        args: Raw command arguments supplied by the caller.
        env: Environment whose ``PATH`` is searched; defaults to the current one.

    Returns:
        list[str]: Argument list whose first element is an executable path.

    Raises:
        SpawnError: If no arguments are given or the executable cannot be found.
    """

    if not args:
        raise SpawnError(args, "command requires at least one argument")
    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute() or os.sep in head:
        return [head, *rest]
    search_path = (env or os.environ).get("PATH")
    resolved = shutil.which(head, path=search_path)
    if resolved is None:
        raise SpawnError(args, f"executable '{head}' was not found on PATH")
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    cwd: Path,
    env: Mapping[str, str] | None = None,
) -> subprocess.CompletedProcess[str]:
    """Run a short helper command to completion and capture its text output.

    Args:
        args: Command and argument sequence to execute.
        cwd: Working directory for the command.
        env: Optional complete environment for the child.

    Returns:
        CompletedProcess: Execution metadata; the return code is not checked.

    Raises:
        SpawnError: If the executable is missing or cannot be launched.
    """

    normalized = normalize_args(args, env=env)
    try:
        return subprocess.run(  # nosec B603 - argument list, no shell
            normalized,
            cwd=str(cwd),
            env=dict(env) if env is not None else None,
            check=False,
            capture_output=True,
            text=True,
            stdin=subprocess.DEVNULL,
        )
    except (OSError, ValueError) as exc:
        raise SpawnError(args, getattr(exc, "strerror", None) or str(exc)) from exc


@dataclass(frozen=True, slots=True)
class CapturedProcess:
    """Exit status plus whatever output the caller asked to keep."""

    returncode: int
    stdout: str = ""
    stderr: str = ""
    terminated: bool = False


class ProcessRegistry:
    """Track running children so an interrupted run can terminate them."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._processes: set[subprocess.Popen[bytes]] = set()
        self._terminated: set[int] = set()
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        """Return ``True`` once :meth:`terminate_all` has been called."""

        return self._cancelled

    def add(self, process: subprocess.Popen[bytes]) -> None:
        """Track ``process``, signalling it at once if the run is already cancelled."""

        with self._lock:
            if not self._cancelled:
                self._processes.add(process)
                return
        self._mark(process, _signal_process(process, signal.SIGTERM))

    def discard(self, process: subprocess.Popen[bytes]) -> None:
        """Stop tracking ``process`` once it has exited."""

        with self._lock:
            self._processes.discard(process)

    def terminated(self, process: subprocess.Popen[bytes]) -> bool:
        """Return ``True`` when ``process`` was still running when it was signalled.

        Args:
            process: Child previously passed to :meth:`add`.

        Returns:
            bool: Whether cancellation, rather than a normal exit, ended it.
        """

        with self._lock:
            return process.pid in self._terminated

    def _mark(self, process: subprocess.Popen[bytes], signalled: bool) -> None:
        if signalled:
            with self._lock:
                self._terminated.add(process.pid)

    def terminate_all(self, *, grace: float = TERMINATE_GRACE_SECONDS) -> None:
        """Signal every tracked child to terminate, killing stragglers.

        Args:
            grace: Seconds to wait after ``SIGTERM`` before sending ``SIGKILL``.
        """

        with self._lock:
            self._cancelled = True
            processes = list(self._processes)
        for process in processes:
            self._mark(process, _signal_process(process, signal.SIGTERM))
        for process in processes:
            try:
                process.wait(timeout=grace)
            except subprocess.TimeoutExpired:
                _signal_process(process, _KILL_SIGNAL)


def _signal_process(process: subprocess.Popen[bytes], signum: int) -> bool:
    """Send ``signum`` to ``process`` and its group, returning whether it was delivered."""

    if process.poll() is not None:
        return False
    try:
        if os.name == "posix":
            os.killpg(process.pid, signum)
        elif signum == signal.SIGTERM:
            process.terminate()
        else:
            process.kill()
    except ProcessLookupError:
        return False
    return True


def spawn_and_capture(
    argv: Sequence[str],
    *,
    cwd: Path,
    env: Mapping[str, str],
    capture: bool,
    max_output_bytes: int,
    registry: ProcessRegistry | None = None,
    retain: Callable[[int], bool] | None = None,
) -> CapturedProcess:
    """Run ``argv`` to completion, spooling output to temporary files.

    Output is only read back into memory when it is to be kept, and then only
    the trailing ``max_output_bytes`` of each stream.

    Args:
        argv: Command line to execute.
        cwd: Working directory for the child.
        env: Complete environment for the child.
        capture: ``False`` sends output straight to ``/dev/null``.
        max_output_bytes: Upper bound on retained bytes per stream.
        registry: Optional registry used for cancellation.
        retain: Called with the exit status to decide whether the spooled
            output is read back; ``None`` always keeps it.

    Returns:
        CapturedProcess: Exit status, retained output and whether cancellation
        terminated the process.

    Raises:
        SpawnError: If the process cannot be launched.
    """

    normalized = normalize_args(argv, env=env)
    with _spool(capture) as stdout_spool, _spool(capture) as stderr_spool:
        try:
            process = subprocess.Popen(  # nosec B603 - argument list, no shell
                normalized,
                cwd=str(cwd),
                env=dict(env),
                stdin=subprocess.DEVNULL,
                stdout=stdout_spool if stdout_spool is not None else subprocess.DEVNULL,
                stderr=stderr_spool if stderr_spool is not None else subprocess.DEVNULL,
                start_new_session=os.name == "posix",
            )
        except (OSError, ValueError) as exc:
            raise SpawnError(argv, getattr(exc, "strerror", None) or str(exc)) from exc
        if registry is not None:
            registry.add(process)
        try:
            returncode = process.wait()
        except BaseException:
            _signal_process(process, signal.SIGTERM)
            raise
        finally:
            if registry is not None:
                registry.discard(process)
        terminated = registry is not None and registry.terminated(process)
        if not capture or (retain is not None and not retain(returncode)):
            return CapturedProcess(returncode=returncode, terminated=terminated)
        return CapturedProcess(
            returncode=returncode,
            terminated=terminated,
            stdout=_read_tail(stdout_spool, max_output_bytes),
            stderr=_read_tail(stderr_spool, max_output_bytes),
        )


@contextmanager
def _spool(enabled: bool) -> Iterator[IO[bytes] | None]:
    """Yield an anonymous temporary file, or ``None`` when output is discarded."""

    if not enabled:
        yield None
        return
    with tempfile.TemporaryFile() as handle:
        yield handle


def _read_tail(handle: IO[bytes] | None, limit: int) -> str:
    """Return the last ``limit`` bytes of ``handle`` decoded as text."""

    if handle is None:
        return ""
    size = handle.seek(0, os.SEEK_END)
    handle.seek(max(0, size - limit))
    return handle.read().decode(errors="replace")


__all__ = [
    "CapturedProcess",
    "ProcessRegistry",
    "normalize_args",
    "run_command",
    "spawn_and_capture",
]
