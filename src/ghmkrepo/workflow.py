from __future__ import annotations
from collections.abc import Callable
from dataclasses import dataclass
import logging
import re
import shlex
import subprocess
import time
from typing import Optional, Union
import requests
from . import git
from .browser import Browser
from .config import Config
from .errors import (
    BrowserError,
    CreationFormUnrecognized,
    DebugAbort,
    GHMkRepoError,
    LoginFailed,
    LoginPageUnrecognized,
    PushFailed,
    RemoteUrlMissing,
    RepoCreationFailed,
    Stage,
)
from .metadata import MetadataResolver, ProjectMetadata

log = logging.getLogger(__name__)

LOGIN_MARKER = "Log in"
LOGIN_BUTTON = "Log in"
LOGGED_IN_MARKER = "create a new one"
CREATE_LINK_TEXT = "create a new one"
CREATION_FORM_MARKER = "Create a New Repository"
CREATE_BUTTON = "Create repository"

CLONE_URL_RGX = re.compile(r"git remote add origin ([^\s<>\"']+)")

#: Seconds to wait between creating the repository and pushing to it, giving
#: GitHub time to finish setting the repository up
PUSH_DELAY = 5

PUSH_BRANCH = "master"


@dataclass(frozen=True)
class RemoteReference:
    alias: str
    clone_url: str


@dataclass(frozen=True)
class Success:
    remote: RemoteReference


@dataclass(frozen=True)
class Failure:
    stage: Stage
    reason: str
    error: Optional[GHMkRepoError] = None

    @classmethod
    def from_error(cls, e: GHMkRepoError) -> Failure:
        return cls(stage=e.stage, reason=e.reason, error=e)

    def __str__(self) -> str:
        return f"{self.stage}: {self.reason}"


WorkflowOutcome = Union[Success, Failure]


def extract_clone_url(content: str) -> str:
    """
    Extract the URL from the ``git remote add origin <url>`` instructions on
    the page shown after creating a repository
    """
    if m := CLONE_URL_RGX.search(content):
        return m[1]
    raise RemoteUrlMissing("Could not find clone URL on repository page")


@dataclass
class RepoCreationWorkflow:
    config: Config
    repo: git.Git
    browser: Browser
    resolver: MetadataResolver
    sleep: Callable[[float], None] = time.sleep

    def run(
        self, name: Optional[str] = None, description: Optional[str] = None
    ) -> WorkflowOutcome:
        """
        Create the repository on GitHub and push the local repository to it.
        The first failure ends the run; nothing done before it is undone.
        """
        try:
            git.check_remotes(self.repo.get_remotes())
            meta = self.resolver.resolve(name, description)
            log.info("Project name: %s", meta.name)
            log.info("Description: %s", meta.description)
            log.info("Homepage: %s", meta.homepage)
            self.login()
            self.open_creation_form()
            if self.config.debug:
                raise DebugAbort("Debug mode enabled; not creating repository")
            content = self.create_repository(meta)
            remote = RemoteReference(
                alias=self.config.remote_name,
                clone_url=extract_clone_url(content),
            )
            log.info("Repository created; clone URL: %s", remote.clone_url)
            self.push(remote)
        except GHMkRepoError as e:
            return Failure.from_error(e)
        else:
            return Success(remote=remote)

    def login(self) -> None:
        log.info("Loading login page %s ...", self.config.login_page)
        try:
            content = self.browser.navigate(self.config.login_page)
        except (BrowserError, requests.RequestException) as e:
            raise LoginPageUnrecognized(f"Could not load login page: {e}")
        if LOGIN_MARKER not in content:
            raise LoginPageUnrecognized(
                f"{self.config.login_page} does not look like a login page"
            )
        log.info("Logging in as %s ...", self.config.account)
        try:
            content = self.browser.submit_form(
                1,
                {"login": self.config.account, "password": self.config.password},
                button=LOGIN_BUTTON,
            )
        except (BrowserError, requests.RequestException) as e:
            raise LoginFailed(f"Could not submit login form: {e}")
        if LOGGED_IN_MARKER not in content:
            raise LoginFailed(f"Could not log in as {self.config.account!r}")

    def open_creation_form(self) -> None:
        log.info("Opening repository creation form ...")
        try:
            content = self.browser.follow_link(CREATE_LINK_TEXT)
        except (BrowserError, requests.RequestException) as e:
            raise CreationFormUnrecognized(f"Could not open creation form: {e}")
        if CREATION_FORM_MARKER not in content:
            raise CreationFormUnrecognized("Repository creation form not found")

    def create_repository(self, meta: ProjectMetadata) -> str:
        log.info("Creating repository %r ...", meta.name)
        try:
            return self.browser.submit_form(
                2,
                {
                    "repository[name]": meta.name,
                    "repository[description]": meta.description,
                    "repository[homepage]": meta.homepage,
                    "repository[public]": "true",
                },
                button=CREATE_BUTTON,
            )
        except (BrowserError, requests.RequestException) as e:
            raise RepoCreationFailed(f"Could not submit creation form: {e}")

    def push(self, remote: RemoteReference) -> None:
        log.info("Waiting %d seconds for the repository to be ready ...", PUSH_DELAY)
        self.sleep(PUSH_DELAY)
        log.info("Adding remote %r ...", remote.alias)
        try:
            self.repo.add_remote(remote.alias, remote.clone_url)
            log.info("Pushing %s to %s ...", PUSH_BRANCH, remote.alias)
            self.repo.push(remote.alias, PUSH_BRANCH)
        except subprocess.CalledProcessError as e:
            cmd = shlex.join(map(str, e.cmd))
            raise PushFailed(f"{cmd} exited with status {e.returncode}")
