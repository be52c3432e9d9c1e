from __future__ import annotations
import logging
import os
from pathlib import Path
import sys
from typing import NoReturn, Optional
import click
from click_loglevel import LogLevel
import colorlog
from . import __version__
from .browser import HTMLSession
from .config import find_config, resolve_config
from .errors import GHMkRepoError
from .git import Git
from .metadata import MetadataResolver
from .util import ProcessRunner, cpe_no_tb
from .workflow import Failure, RepoCreationWorkflow

log = logging.getLogger(__name__)

PROGNAME = "ghmkrepo"


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "-c",
    "--config",
    type=click.Path(dir_okay=False, path_type=Path),
    help=(
        "Use the specified configuration file"
        f"  [default: ./.{PROGNAME}.ini or ~/.{PROGNAME}.ini]"
    ),
)
@click.option(
    "-C",
    "--chdir",
    type=click.Path(exists=True, file_okay=False, dir_okay=True, path_type=Path),
    help="Change directory before running",
    metavar="DIR",
)
@click.option(
    "-l",
    "--log-level",
    type=LogLevel(),
    default=logging.INFO,
    help="Set logging level  [default: INFO]",
)
@click.option("-n", "--name", metavar="NAME", help="Name of the repository")
@click.option("-d", "--desc", metavar="TEXT", help="Description of the repository")
@click.option("--account", metavar="USER", help="GitHub account to log in as")
@click.option("--login-page", metavar="URL", help="URL of the GitHub login page")
@click.option(
    "--remote-name",
    metavar="NAME",
    help="Name of the remote to add for the new repository",
)
@click.option(
    "--debug/--no-debug",
    default=None,
    help="Stop before actually creating the repository",
)
@click.version_option(
    __version__,
    "-V",
    "--version",
    message="ghmkrepo %(version)s",
)
@cpe_no_tb
def main(
    config: Optional[Path],
    chdir: Optional[Path],
    log_level: int,
    name: Optional[str],
    desc: Optional[str],
    account: Optional[str],
    login_page: Optional[str],
    remote_name: Optional[str],
    debug: Optional[bool],
) -> None:
    """Create a GitHub repository for the local project and push to it"""
    if chdir is not None:
        os.chdir(chdir)
    colorlog.basicConfig(
        format="%(log_color)s[%(levelname)-8s] %(message)s",
        log_colors={
            "DEBUG": "cyan",
            "INFO": "bold",
            "WARNING": "yellow",
            "ERROR": "red",
            "CRITICAL": "bold_red",
        },
        level=log_level,
        stream=sys.stderr,
    )
    try:
        if config is None:
            config = find_config(PROGNAME)
        cfg = resolve_config(
            config,
            overrides={
                "account": account,
                "login_page": login_page,
                "remote_name": remote_name,
                "debug": debug,
            },
        )
    except GHMkRepoError as e:
        fail(Failure.from_error(e))
    log.debug("Configuration: %r", cfg)
    directory = Path()
    with HTMLSession() as browser:
        outcome = RepoCreationWorkflow(
            config=cfg,
            repo=Git(dirpath=directory),
            browser=browser,
            resolver=MetadataResolver(directory, ProcessRunner(cwd=directory)),
        ).run(name=name, description=desc)
    if isinstance(outcome, Failure):
        fail(outcome)
    log.info("Pushed to %s (%s)", outcome.remote.alias, outcome.remote.clone_url)


def fail(failure: Failure) -> NoReturn:
    log.error("%s", failure)
    sys.exit(1)


if __name__ == "__main__":
    main()
