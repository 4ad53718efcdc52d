"""Dependency installation for a freshly materialized project."""

from __future__ import annotations

import shutil
import subprocess
import threading
from collections import deque
from pathlib import Path
from typing import Callable

from loguru import logger

from plugforge.scaffold.errors import InstallError

OUTPUT_TAIL_LINES = 40


def run_install(
    project_dir: Path,
    command: list[str],
    timeout: float | None = 300,
    on_output: Callable[[str], None] | None = None,
) -> str:
    """Run command inside project_dir, streaming each output line to on_output.

    stderr is merged into stdout. The process is killed once timeout seconds
    have elapsed. Returns the tail of the output on success and raises
    ``InstallError`` on a missing executable, a timeout or a non-zero exit.
    """
    if not command:
        raise ValueError("Install command must not be empty")

    executable = shutil.which(command[0])
    if not executable:
        raise InstallError(f"{command[0]} not found. Please install it and retry.")

    logger.info(f"Running {' '.join(command)} in {project_dir}")
    tail: deque[str] = deque(maxlen=OUTPUT_TAIL_LINES)
    timed_out = threading.Event()

    process = subprocess.Popen(
        [executable, *command[1:]],
        cwd=str(project_dir),
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        encoding="utf-8",
        errors="replace",
    )

    def _kill() -> None:
        if process.poll() is None:
            timed_out.set()
            process.kill()

    timer = threading.Timer(timeout, _kill) if timeout else None
    if timer is not None:
        timer.daemon = True
        timer.start()

    try:
        assert process.stdout is not None
        for line in process.stdout:
            tail.append(line.rstrip("\n"))
            if on_output is not None:
                on_output(line)
        returncode = process.wait()
    finally:
        if timer is not None:
            timer.cancel()
        if process.poll() is None:
            process.kill()
            process.wait()

    output = "\n".join(tail)
    if returncode != 0:
        if timed_out.is_set():
            raise InstallError(f"{command[0]} timed out after {timeout:g}s", returncode, output)
        raise InstallError(f"{command[0]} exited with status {returncode}", returncode, output)

    logger.info(f"{command[0]} finished successfully")
    return output
