from __future__ import annotations
from collections.abc import Callable
from dataclasses import dataclass
from functools import wraps
import logging
from pathlib import Path
import shlex
import subprocess
import sys
from typing import Any

log = logging.getLogger(__name__)


def runcmd(*args: str | Path, **kwargs: Any) -> subprocess.CompletedProcess:
    log.debug("Running: %s", shlex.join(map(str, args)))
    kwargs.setdefault("check", True)
    return subprocess.run(args, **kwargs)


def readcmd(*args: str | Path, **kwargs: Any) -> str:
    kwargs["stdout"] = subprocess.PIPE
    kwargs["text"] = True
    r = runcmd(*args, **kwargs)
    assert isinstance(r.stdout, str)
    return r.stdout.strip()


@dataclass
class ProcessRunner:
    """
    Runs external commands in a fixed directory without raising on failure.
    The exit status and combined stdout & stderr are returned so that callers
    can decide for themselves whether a command succeeded.
    """

    cwd: Path

    def run(self, *args: str | Path) -> subprocess.CompletedProcess:
        try:
            r = runcmd(
                *args,
                cwd=self.cwd,
                check=False,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
            )
        except OSError as e:
            # Command not found or not executable; report it the way a shell
            # would
            log.debug("Could not run %s: %s", args[0], e)
            return subprocess.CompletedProcess(args, 127, stdout=f"{e}\n")
        if r.returncode != 0:
            log.debug("Command exited with status %d", r.returncode)
        return r


def cpe_no_tb(func: Callable) -> Callable:
    @wraps(func)
    def wrapped(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except subprocess.CalledProcessError as e:
            sys.exit(e.returncode)

    return wrapped
