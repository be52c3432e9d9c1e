from __future__ import annotations
from collections.abc import Mapping
import configparser
from configparser import ConfigParser
from dataclasses import dataclass, field, fields
import logging
import os
from pathlib import Path
from typing import Any, Optional
from .errors import ConfigError, ConfigNotFound

log = logging.getLogger(__name__)

SECTION = "github"

#: Name for configparser's default section that no real file uses
NO_DEFAULT_SECTION = "\x00"

DEFAULT_LOGIN_PAGE = "https://github.com/login"

#: Environment variables consulted for settings missing from the config file
ENV_FALLBACKS = {
    "account": "GITHUB_USER",
    "password": "GITHUB_PASS",
}

BOOLEAN_STATES = ConfigParser.BOOLEAN_STATES


@dataclass(frozen=True)
class Config:
    login_page: str = DEFAULT_LOGIN_PAGE
    account: str = ""
    password: str = field(default="", repr=False)
    remote_name: str = "origin"
    debug: bool = False
    #: The file the settings were read from
    source: Optional[Path] = None


def config_filenames(
    progname: str, cwd: Optional[Path] = None, home: Optional[Path] = None
) -> list[Path]:
    if cwd is None:
        cwd = Path()
    if home is None:
        home = Path.home()
    basename = f".{progname}.ini"
    return [cwd / basename, home / basename]


def find_config(
    progname: str, cwd: Optional[Path] = None, home: Optional[Path] = None
) -> Path:
    """
    Return the first of :file:`./.{progname}.ini` and
    :file:`~/.{progname}.ini` that exists.  If neither exists, `ConfigNotFound`
    is raised; settings may still come from the environment, but a
    configuration file is required all the same.
    """
    candidates = config_filenames(progname, cwd=cwd, home=home)
    for p in candidates:
        if p.is_file():
            log.debug("Using configuration file %s", p)
            return p
    raise ConfigNotFound(
        "No configuration file found; looked for "
        + " and ".join(str(p) for p in candidates)
    )


def read_config_file(path: Path) -> dict[str, str]:
    # A [DEFAULT] section is read as an ordinary section so that its keys do
    # not leak into [github]
    parser = ConfigParser(interpolation=None, default_section=NO_DEFAULT_SECTION)
    try:
        with path.open(encoding="utf-8") as fp:
            parser.read_file(fp)
    except FileNotFoundError:
        raise ConfigNotFound(f"Configuration file {path} does not exist")
    except (configparser.Error, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not parse {path}: {e}")
    if not parser.has_section(SECTION):
        log.debug("%s has no [%s] section", path, SECTION)
        return {}
    return dict(parser.items(SECTION))


def parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    try:
        return BOOLEAN_STATES[str(value).strip().lower()]
    except KeyError:
        raise ConfigError(f"Invalid boolean value for {key!r}: {value!r}")


def resolve_config(
    path: Path,
    overrides: Optional[Mapping[str, Any]] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Config:
    """
    Build a `Config` from the ``[github]`` section of the INI file at
    ``path``.  Each setting is taken from the first of the following that
    provides a value:

    - ``overrides`` (entries whose value is `None` are ignored)
    - the configuration file
    - the environment variable named in `ENV_FALLBACKS`, if any
    - the `Config` default
    """
    if overrides is None:
        overrides = {}
    if environ is None:
        environ = os.environ
    filecfg = read_config_file(path)
    known = {f.name for f in fields(Config)} - {"source"}
    for key in filecfg.keys() - known:
        log.debug("Ignoring unknown configuration key %r in %s", key, path)
    values: dict[str, Any] = {}
    for key in sorted(known):
        if overrides.get(key) is not None:
            value = overrides[key]
        elif key in filecfg:
            value = filecfg[key]
        elif key in ENV_FALLBACKS and ENV_FALLBACKS[key] in environ:
            value = environ[ENV_FALLBACKS[key]]
        else:
            continue
        if key == "debug":
            value = parse_bool(key, value)
        values[key] = value
    return Config(source=path, **values)
