from __future__ import annotations
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Any, Optional
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError
from .errors import MetadataMissing
from .util import ProcessRunner

log = logging.getLogger(__name__)

METAFILE = "META.yml"

HOMEPAGE_TEMPLATE = "http://search.cpan.org/dist/{name}"

#: Prepended to the project's abstract to form the repository description
DESCRIPTION_PREFIX = "Perl: "


@dataclass(frozen=True)
class ProjectMetadata:
    name: str
    description: str

    @property
    def homepage(self) -> str:
        return HOMEPAGE_TEMPLATE.format(name=self.name)


@dataclass(frozen=True)
class BuildStrategy:
    """
    How to generate :file:`META.yml` for a project with a given build
    descriptor: run ``configure`` if ``driver`` does not exist, then run
    ``generate`` if ``driver`` exists
    """

    descriptor: str
    driver: str
    configure: tuple[str, ...]
    generate: tuple[str, ...]


STRATEGIES = [
    BuildStrategy(
        descriptor="Makefile.PL",
        driver="Makefile",
        configure=("perl", "Makefile.PL"),
        generate=("make", "metafile"),
    ),
    BuildStrategy(
        descriptor="Build.PL",
        driver="Build",
        configure=("perl", "Build.PL"),
        generate=("./Build", "distmeta"),
    ),
]


@dataclass
class MetadataResolver:
    directory: Path
    runner: ProcessRunner

    @property
    def metafile(self) -> Path:
        return self.directory / METAFILE

    def resolve(
        self, name: Optional[str] = None, description: Optional[str] = None
    ) -> ProjectMetadata:
        if name is not None and description is not None:
            log.debug("Name & description given; not consulting %s", METAFILE)
            return self._build(name, description)
        if not self.metafile.exists():
            log.info("%s not found; attempting to generate it", METAFILE)
            self.generate()
        if not self.metafile.exists():
            raise MetadataMissing(
                f"{METAFILE} does not exist and could not be generated"
            )
        meta = self.load()
        if name is None:
            name = meta.get("name")
            if not isinstance(name, str):
                name = None
        if description is None:
            abstract = meta.get("abstract")
            if abstract is None:
                description = ""
            else:
                description = DESCRIPTION_PREFIX + str(abstract)
        return self._build(name, description)

    def load(self) -> dict[str, Any]:
        try:
            with self.metafile.open(encoding="utf-8") as fp:
                meta = YAML(typ="safe").load(fp)
        except YAMLError as e:
            raise MetadataMissing(f"Could not parse {METAFILE}: {e}")
        if not isinstance(meta, dict):
            raise MetadataMissing(f"{METAFILE} does not contain a mapping")
        return meta

    def generate(self) -> None:
        """
        Run the configure & metafile-generation commands for the first build
        descriptor present in the project directory.  A command that fails is
        logged and ends the attempt.
        """
        for strat in STRATEGIES:
            if (self.directory / strat.descriptor).exists():
                break
        else:
            log.warning(
                "Neither %s found; cannot generate %s",
                " nor ".join(s.descriptor for s in STRATEGIES),
                METAFILE,
            )
            return
        driver = self.directory / strat.driver
        if not driver.exists():
            log.info("Running %s ...", " ".join(strat.configure))
            if not self._run(strat.configure):
                return
        if driver.exists():
            log.info("Running %s ...", " ".join(strat.generate))
            self._run(strat.generate)
        else:
            log.warning("%s was not created by %s", strat.driver, strat.descriptor)

    def _run(self, args: tuple[str, ...]) -> bool:
        r = self.runner.run(*args)
        if r.returncode != 0:
            log.warning(
                "%s failed with exit status %d:\n%s",
                " ".join(args),
                r.returncode,
                r.stdout or "",
            )
            return False
        return True

    @staticmethod
    def _build(name: Optional[str], description: str) -> ProjectMetadata:
        if not name:
            raise MetadataMissing("Could not determine project name")
        return ProjectMetadata(name=name, description=description)
