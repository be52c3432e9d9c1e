from __future__ import annotations
from collections.abc import Iterable
from dataclasses import dataclass
import logging
from pathlib import Path
import subprocess
from typing import Any
from . import util
from .errors import RemoteConflict

log = logging.getLogger(__name__)

#: Name of the remote whose presence means a GitHub repository has already
#: been set up for the project
GUARDED_REMOTE = "github"


@dataclass
class Git:
    dirpath: Path

    def run(self, *args: str | Path, **kwargs: Any) -> subprocess.CompletedProcess:
        return util.runcmd("git", *args, cwd=self.dirpath, **kwargs)

    def read(self, *args: str | Path) -> str:
        return util.readcmd("git", *args, cwd=self.dirpath)

    def readlines(self, *args: str | Path) -> list[str]:
        return self.read(*args).splitlines()

    def get_remotes(self) -> list[str]:
        return self.readlines("remote")

    def add_remote(self, remote: str, url: str) -> None:
        self.run("remote", "add", remote, url)

    def push(self, remote: str, branch: str = "master") -> None:
        self.run("push", remote, branch)


def check_remotes(remotes: Iterable[str], guarded: str = GUARDED_REMOTE) -> None:
    """
    Raise `RemoteConflict` if ``guarded`` is among the names of the local
    repository's existing remotes
    """
    if guarded in set(remotes):
        raise RemoteConflict(f"Remote {guarded!r} already exists")
    log.debug("No %r remote found", guarded)
