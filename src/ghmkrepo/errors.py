from __future__ import annotations
from enum import Enum


class Stage(Enum):
    """The step of a run at which a failure occurred"""

    CONFIG = "config"
    REMOTE_CHECK = "remote-check"
    METADATA = "metadata"
    LOGIN_PAGE = "login-page"
    LOGIN = "login"
    CREATION_FORM = "creation-form"
    DEBUG = "debug"
    CREATE = "create"
    EXTRACT = "extract"
    PUSH = "push"

    def __str__(self) -> str:
        return self.value


class GHMkRepoError(Exception):
    """Base class for errors that abort a run"""

    stage: Stage

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class ConfigNotFound(GHMkRepoError):
    stage = Stage.CONFIG


class ConfigError(GHMkRepoError):
    stage = Stage.CONFIG


class RemoteConflict(GHMkRepoError):
    stage = Stage.REMOTE_CHECK


class MetadataMissing(GHMkRepoError):
    stage = Stage.METADATA


class LoginPageUnrecognized(GHMkRepoError):
    stage = Stage.LOGIN_PAGE


class LoginFailed(GHMkRepoError):
    stage = Stage.LOGIN


class CreationFormUnrecognized(GHMkRepoError):
    stage = Stage.CREATION_FORM


class DebugAbort(GHMkRepoError):
    stage = Stage.DEBUG


class RepoCreationFailed(GHMkRepoError):
    stage = Stage.CREATE


class RemoteUrlMissing(GHMkRepoError):
    stage = Stage.EXTRACT


class PushFailed(GHMkRepoError):
    stage = Stage.PUSH


class BrowserError(Exception):
    """Raised when an element to interact with is not on the current page"""


class FormNotFound(BrowserError):
    pass


class LinkNotFound(BrowserError):
    pass
